"""Catalog domain models for TravelEase.

Everything a traveller can browse and book lives here: destinations and
the tour packages, hotels (with room types and room photos), drivers,
cabs, cruises (with cabin types) and events attached to them. Free-form
list data coming from the back-office forms (itineraries, amenities,
galleries) is stored in JSON columns.
"""

from __future__ import annotations

from decimal import Decimal

from django.core.validators import MaxValueValidator, MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class ItemType(models.TextChoices):
    """Kinds of catalog items that can be booked and reviewed."""

    PACKAGE = "package", _("Tour package")
    HOTEL = "hotel", _("Hotel")
    DRIVER = "driver", _("Driver")
    CAB = "cab", _("Cab")
    CRUISE = "cruise", _("Cruise")
    EVENT = "event", _("Event")


PRICE_KWARGS = {
    "max_digits": 10,
    "decimal_places": 2,
    "validators": [MinValueValidator(Decimal("0.00"))],
}
RATING_VALIDATORS = [MinValueValidator(0), MaxValueValidator(5)]


class Destination(models.Model):
    """A city or region travellers can visit."""

    name = models.CharField(max_length=255)
    country = models.CharField(max_length=100)
    description = models.TextField()
    image_url = models.URLField(max_length=500)
    featured = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Destination")
        verbose_name_plural = _("Destinations")
        ordering = ["name"]
        indexes = [models.Index(fields=["featured"])]

    def __str__(self) -> str:
        return f"{self.name}, {self.country}"


class TourPackage(models.Model):
    """A multi-day tour sold per traveller."""

    name = models.CharField(max_length=255)
    destination = models.ForeignKey(Destination, on_delete=models.CASCADE, related_name="packages")
    description = models.TextField()
    duration = models.PositiveSmallIntegerField(help_text=_("Length of the tour in days."))
    price = models.DecimalField(**PRICE_KWARGS, help_text=_("Price per traveller."))
    image_url = models.URLField(max_length=500)
    image_gallery = models.JSONField(default=list, blank=True)
    included = models.JSONField(default=list, blank=True)
    excluded = models.JSONField(default=list, blank=True)
    itinerary = models.JSONField(default=list, blank=True)
    hotels = models.JSONField(default=list, blank=True)
    highlights = models.JSONField(default=list, blank=True)
    cities_covered = models.JSONField(default=list, blank=True)
    starting_dates = models.JSONField(default=list, blank=True)
    flight_included = models.BooleanField(default=False)
    visa_required = models.BooleanField(default=False)
    visa_assistance = models.BooleanField(default=False)
    type_of_tour = models.CharField(max_length=50, blank=True, help_text=_("Group, Private, Family..."))
    meals = models.JSONField(default=dict, blank=True)
    travel_mode = models.CharField(max_length=50, blank=True)
    min_travelers = models.PositiveSmallIntegerField(default=1)
    customizable = models.BooleanField(default=False)
    rating = models.DecimalField(
        max_digits=3, decimal_places=2, default=Decimal("0.00"), validators=RATING_VALIDATORS
    )
    review_count = models.PositiveIntegerField(default=0)
    trending = models.BooleanField(default=False)
    featured = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Tour package")
        verbose_name_plural = _("Tour packages")
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["destination", "featured"]),
            models.Index(fields=["trending"]),
        ]

    def __str__(self) -> str:
        return self.name


class Hotel(models.Model):
    """Accommodation priced per night, optionally split into room types."""

    class HotelType(models.TextChoices):
        HOTEL = "hotel", _("Hotel")
        RESORT = "resort", _("Resort")
        VILLA = "villa", _("Villa")
        INDEPENDENT_HOUSE = "independent_house", _("Independent house")

    name = models.CharField(max_length=255)
    destination = models.ForeignKey(Destination, on_delete=models.CASCADE, related_name="hotels")
    description = models.TextField()
    address = models.CharField(max_length=255)
    image_url = models.URLField(max_length=500)
    image_gallery = models.JSONField(default=list, blank=True)
    rating = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(1), MaxValueValidator(5)],
        help_text=_("Star category, 1 to 5."),
    )
    price = models.DecimalField(**PRICE_KWARGS, help_text=_("Base price per night."))
    amenities = models.JSONField(default=list, blank=True)
    user_rating = models.DecimalField(
        max_digits=3,
        decimal_places=1,
        default=Decimal("0.0"),
        validators=[MinValueValidator(0), MaxValueValidator(10)],
        help_text=_("Guest score out of 10, computed from reviews."),
    )
    review_count = models.PositiveIntegerField(default=0)
    check_in_time = models.CharField(max_length=20, blank=True, default="14:00")
    check_out_time = models.CharField(max_length=20, blank=True, default="12:00")
    policies = models.JSONField(default=list, blank=True)
    languages_spoken = models.JSONField(default=list, blank=True)
    nearby_attractions = models.JSONField(default=list, blank=True)
    featured = models.BooleanField(default=False)
    free_cancellation = models.BooleanField(default=False)
    hotel_type = models.CharField(max_length=20, choices=HotelType.choices, default=HotelType.HOTEL)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Hotel")
        verbose_name_plural = _("Hotels")
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["destination", "featured"]),
            models.Index(fields=["hotel_type"]),
        ]

    def __str__(self) -> str:
        return self.name


class HotelRoomType(models.Model):
    hotel = models.ForeignKey(Hotel, on_delete=models.CASCADE, related_name="room_types")
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    price = models.DecimalField(**PRICE_KWARGS, help_text=_("Price per night."))
    capacity = models.PositiveSmallIntegerField(default=2)
    amenities = models.JSONField(default=list, blank=True)
    cancellation_policy = models.TextField(blank=True)
    featured = models.BooleanField(default=False)
    active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Room type")
        verbose_name_plural = _("Room types")
        ordering = ["hotel", "price"]

    def __str__(self) -> str:
        return f"{self.hotel.name}: {self.name}"


class HotelRoomImage(models.Model):
    room_type = models.ForeignKey(HotelRoomType, on_delete=models.CASCADE, related_name="images")
    image_url = models.URLField(max_length=500)
    display_order = models.PositiveSmallIntegerField(default=0)
    caption = models.CharField(max_length=255, blank=True)
    featured = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Room image")
        verbose_name_plural = _("Room images")
        ordering = ["display_order", "id"]

    def __str__(self) -> str:
        return f"Image {self.display_order} of room type {self.room_type_id}"


class Driver(models.Model):
    """Private driver hired per day."""

    name = models.CharField(max_length=255)
    destination = models.ForeignKey(Destination, on_delete=models.CASCADE, related_name="drivers")
    description = models.TextField(blank=True)
    image_url = models.URLField(max_length=500)
    profile_image_url = models.URLField(max_length=500, blank=True)
    car_model = models.CharField(max_length=255)
    languages = models.JSONField(default=list, blank=True)
    daily_rate = models.DecimalField(**PRICE_KWARGS)
    rating = models.DecimalField(
        max_digits=3, decimal_places=2, default=Decimal("0.00"), validators=RATING_VALIDATORS
    )
    review_count = models.PositiveIntegerField(default=0)
    available = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Driver")
        verbose_name_plural = _("Drivers")
        ordering = ["name"]

    def __str__(self) -> str:
        return f"{self.name} ({self.car_model})"


class Cab(models.Model):
    """Self-contained cab offer (vehicle class + driver) hired per day."""

    name = models.CharField(max_length=255)
    destination = models.ForeignKey(Destination, on_delete=models.CASCADE, related_name="cabs")
    description = models.TextField(blank=True)
    image_url = models.URLField(max_length=500)
    image_gallery = models.JSONField(default=list, blank=True)
    vehicle_type = models.CharField(max_length=50, help_text=_("Sedan, SUV, Van..."))
    price_per_day = models.DecimalField(**PRICE_KWARGS)
    seats = models.PositiveSmallIntegerField(default=4)
    bags = models.PositiveSmallIntegerField(default=2)
    features = models.JSONField(default=list, blank=True)
    addons = models.JSONField(default=list, blank=True)
    fare_breakdown = models.JSONField(default=dict, blank=True)
    ac_available = models.BooleanField(default=True)
    free_cancellation = models.BooleanField(default=False)
    cancellation_timeframe = models.CharField(max_length=100, blank=True)
    driver_verified = models.BooleanField(default=False)
    tolls_included = models.BooleanField(default=False)
    multiple_stops = models.BooleanField(default=False)
    rating = models.DecimalField(
        max_digits=3, decimal_places=2, default=Decimal("0.00"), validators=RATING_VALIDATORS
    )
    review_count = models.PositiveIntegerField(default=0)
    available = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Cab")
        verbose_name_plural = _("Cabs")
        ordering = ["price_per_day"]

    def __str__(self) -> str:
        return f"{self.name} ({self.vehicle_type})"


class Cruise(models.Model):
    """Cruise sailing priced per passenger, optionally by cabin type."""

    name = models.CharField(max_length=255)
    company = models.CharField(max_length=255)
    ship_name = models.CharField(max_length=255, blank=True)
    description = models.TextField()
    image_url = models.URLField(max_length=500)
    image_gallery = models.JSONField(default=list, blank=True)
    duration = models.PositiveSmallIntegerField(help_text=_("Length of the sailing in days."))
    price = models.DecimalField(**PRICE_KWARGS, help_text=_("Base price per passenger."))
    departure = models.CharField(max_length=255, help_text=_("Departure port."))
    return_port = models.CharField(max_length=255, blank=True)
    departure_date = models.DateTimeField(null=True, blank=True)
    boarding_time = models.CharField(max_length=20, blank=True)
    itinerary = models.JSONField(default=list, blank=True)
    ports_of_call = models.JSONField(default=list, blank=True)
    days_at_sea = models.PositiveSmallIntegerField(default=0)
    amenities = models.JSONField(default=list, blank=True)
    dining = models.JSONField(default=list, blank=True)
    entertainment = models.JSONField(default=list, blank=True)
    ship_details = models.JSONField(default=dict, blank=True)
    included_services = models.JSONField(default=list, blank=True)
    excluded_services = models.JSONField(default=list, blank=True)
    rating = models.DecimalField(
        max_digits=3, decimal_places=2, default=Decimal("0.00"), validators=RATING_VALIDATORS
    )
    review_count = models.PositiveIntegerField(default=0)
    featured = models.BooleanField(default=False)
    family_friendly = models.BooleanField(default=True)
    adult_only = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Cruise")
        verbose_name_plural = _("Cruises")
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"{self.name} ({self.company})"


class CruiseCabinType(models.Model):
    cruise = models.ForeignKey(Cruise, on_delete=models.CASCADE, related_name="cabin_types")
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    price = models.DecimalField(**PRICE_KWARGS, help_text=_("Price per passenger."))
    image_url = models.URLField(max_length=500, blank=True)
    features = models.JSONField(default=list, blank=True)
    availability = models.PositiveIntegerField(
        default=10, help_text=_("Cabins of this type on sale for the sailing.")
    )
    capacity = models.PositiveSmallIntegerField(default=2, help_text=_("Passengers per cabin."))
    featured = models.BooleanField(default=False)
    active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Cabin type")
        verbose_name_plural = _("Cabin types")
        ordering = ["cruise", "price"]

    def __str__(self) -> str:
        return f"{self.cruise.name}: {self.name}"


class Event(models.Model):
    """Ticketed event with a finite capacity."""

    name = models.CharField(max_length=255)
    destination = models.ForeignKey(Destination, on_delete=models.CASCADE, related_name="events")
    description = models.TextField()
    date = models.DateTimeField()
    end_date = models.DateTimeField(null=True, blank=True)
    start_time = models.CharField(max_length=20, blank=True)
    end_time = models.CharField(max_length=20, blank=True)
    location = models.CharField(max_length=255)
    venue_name = models.CharField(max_length=255, blank=True)
    address = models.CharField(max_length=255, blank=True)
    image_url = models.URLField(max_length=500)
    image_gallery = models.JSONField(default=list, blank=True)
    price = models.DecimalField(**PRICE_KWARGS, help_text=_("Base ticket price."))
    ticket_types = models.JSONField(default=list, blank=True)
    event_type = models.CharField(max_length=50, help_text=_("Festival, Concert, Sports..."))
    categories = models.JSONField(default=list, blank=True)
    performers = models.JSONField(default=list, blank=True)
    schedule = models.JSONField(default=list, blank=True)
    amenities = models.JSONField(default=list, blank=True)
    restrictions = models.JSONField(default=list, blank=True)
    organizer = models.CharField(max_length=255, blank=True)
    capacity = models.PositiveIntegerField(null=True, blank=True, help_text=_("Empty means unlimited."))
    seated_event = models.BooleanField(default=False)
    virtual_event = models.BooleanField(default=False)
    rating = models.DecimalField(
        max_digits=3, decimal_places=2, default=Decimal("0.00"), validators=RATING_VALIDATORS
    )
    review_count = models.PositiveIntegerField(default=0)
    available = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Event")
        verbose_name_plural = _("Events")
        ordering = ["date"]
        indexes = [models.Index(fields=["destination", "date"])]

    def __str__(self) -> str:
        return self.name
