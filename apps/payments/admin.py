"""Admin registration for payments."""

from __future__ import annotations

from django.contrib import admin

from .models import PaymentDetail


@admin.register(PaymentDetail)
class PaymentDetailAdmin(admin.ModelAdmin):
    list_display = ("booking", "card_number", "amount", "currency", "status", "payment_processor", "created_at")
    list_filter = ("status", "payment_processor", "currency")
    search_fields = ("booking__confirmation_code", "transaction_id", "booking__user__email")
    readonly_fields = ("card_number", "card_name", "card_expiry", "created_at", "updated_at")
