"""Admin registration for bookings."""

from __future__ import annotations

from django.contrib import admin

from .models import Booking


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = (
        "confirmation_code",
        "booking_type",
        "item_id",
        "user",
        "status",
        "payment_status",
        "start_date",
        "end_date",
        "total_price",
        "created_at",
    )
    list_filter = ("status", "payment_status", "booking_type", "start_date")
    search_fields = ("confirmation_code", "user__email", "contact_email", "transaction_id")
    readonly_fields = (
        "confirmation_code",
        "unit_price",
        "total_price",
        "cancelled_at",
        "created_at",
        "updated_at",
    )
    date_hierarchy = "created_at"
