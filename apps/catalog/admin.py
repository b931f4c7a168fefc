"""Admin registrations for the catalog domain."""

from __future__ import annotations

from django.contrib import admin

from .models import (
    Cab,
    Cruise,
    CruiseCabinType,
    Destination,
    Driver,
    Event,
    Hotel,
    HotelRoomImage,
    HotelRoomType,
    TourPackage,
)


@admin.register(Destination)
class DestinationAdmin(admin.ModelAdmin):
    list_display = ("name", "country", "featured", "created_at")
    list_filter = ("featured", "country")
    search_fields = ("name", "country")


@admin.register(TourPackage)
class TourPackageAdmin(admin.ModelAdmin):
    list_display = ("name", "destination", "duration", "price", "rating", "review_count", "trending", "featured")
    list_filter = ("featured", "trending", "type_of_tour", "destination")
    search_fields = ("name", "destination__name")
    readonly_fields = ("rating", "review_count", "created_at", "updated_at")


class HotelRoomTypeInline(admin.TabularInline):
    model = HotelRoomType
    extra = 0
    fields = ("name", "price", "capacity", "featured", "active")


@admin.register(Hotel)
class HotelAdmin(admin.ModelAdmin):
    list_display = ("name", "destination", "hotel_type", "rating", "price", "user_rating", "review_count", "featured")
    list_filter = ("hotel_type", "featured", "free_cancellation", "rating")
    search_fields = ("name", "address", "destination__name")
    readonly_fields = ("user_rating", "review_count", "created_at", "updated_at")
    inlines = [HotelRoomTypeInline]


class HotelRoomImageInline(admin.TabularInline):
    model = HotelRoomImage
    extra = 0
    fields = ("image_url", "display_order", "caption", "featured")


@admin.register(HotelRoomType)
class HotelRoomTypeAdmin(admin.ModelAdmin):
    list_display = ("name", "hotel", "price", "capacity", "active")
    list_filter = ("active", "featured")
    search_fields = ("name", "hotel__name")
    inlines = [HotelRoomImageInline]


@admin.register(Driver)
class DriverAdmin(admin.ModelAdmin):
    list_display = ("name", "destination", "car_model", "daily_rate", "rating", "available")
    list_filter = ("available", "destination")
    search_fields = ("name", "car_model")
    readonly_fields = ("rating", "review_count", "created_at", "updated_at")


@admin.register(Cab)
class CabAdmin(admin.ModelAdmin):
    list_display = ("name", "destination", "vehicle_type", "price_per_day", "seats", "available")
    list_filter = ("available", "vehicle_type", "destination")
    search_fields = ("name", "vehicle_type")
    readonly_fields = ("rating", "review_count", "created_at", "updated_at")


class CruiseCabinTypeInline(admin.TabularInline):
    model = CruiseCabinType
    extra = 0
    fields = ("name", "price", "capacity", "availability", "featured", "active")


@admin.register(Cruise)
class CruiseAdmin(admin.ModelAdmin):
    list_display = ("name", "company", "departure", "departure_date", "duration", "price", "rating", "featured")
    list_filter = ("featured", "family_friendly", "adult_only", "company")
    search_fields = ("name", "company", "ship_name", "departure")
    readonly_fields = ("rating", "review_count", "created_at", "updated_at")
    inlines = [CruiseCabinTypeInline]


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ("name", "destination", "event_type", "date", "price", "capacity", "available")
    list_filter = ("available", "event_type", "destination")
    search_fields = ("name", "venue_name", "location", "organizer")
    date_hierarchy = "date"
    readonly_fields = ("rating", "review_count", "created_at", "updated_at")
