"""Serializers for the catalog domain.

Rating and review counters are maintained by the reviews app and are
read-only here. JSON list columns accept plain JSON arrays from the
admin forms.
"""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

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

LIST_FIELDS_BY_MODEL: dict[type, tuple[str, ...]] = {
    TourPackage: ("image_gallery", "included", "excluded", "itinerary", "hotels", "highlights",
                  "cities_covered", "starting_dates"),
    Hotel: ("image_gallery", "amenities", "policies", "languages_spoken", "nearby_attractions"),
    HotelRoomType: ("amenities",),
    Driver: ("languages",),
    Cab: ("image_gallery", "features", "addons"),
    Cruise: ("image_gallery", "itinerary", "ports_of_call", "amenities", "dining", "entertainment",
             "included_services", "excluded_services"),
    CruiseCabinType: ("features",),
    Event: ("image_gallery", "ticket_types", "categories", "performers", "schedule", "amenities",
            "restrictions"),
}

COUNTER_FIELDS = ("rating", "review_count", "created_at", "updated_at")


class CatalogModelSerializer(serializers.ModelSerializer):
    """Rejects non-list payloads for the JSON columns that hold lists."""

    def validate(self, attrs):  # type: ignore
        attrs = super().validate(attrs)
        errors = {}
        for field in LIST_FIELDS_BY_MODEL.get(self.Meta.model, ()):
            if field in attrs and not isinstance(attrs[field], list):
                errors[field] = ["Expected a list."]
        if errors:
            raise serializers.ValidationError(errors)
        return attrs


class DestinationSerializer(CatalogModelSerializer):
    class Meta:
        model = Destination
        fields = ["id", "name", "country", "description", "image_url", "featured", "created_at", "updated_at"]
        read_only_fields = ["id", "created_at", "updated_at"]


class DestinationSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = Destination
        fields = ["id", "name", "country"]
        read_only_fields = fields


class TourPackageSerializer(CatalogModelSerializer):
    destination_detail = DestinationSummarySerializer(source="destination", read_only=True)

    class Meta:
        model = TourPackage
        fields = "__all__"
        read_only_fields = COUNTER_FIELDS


class HotelRoomImageSerializer(CatalogModelSerializer):
    class Meta:
        model = HotelRoomImage
        fields = ["id", "room_type", "image_url", "display_order", "caption", "featured", "created_at"]
        read_only_fields = ["id", "created_at"]


class HotelRoomTypeSerializer(CatalogModelSerializer):
    images = HotelRoomImageSerializer(many=True, read_only=True)

    class Meta:
        model = HotelRoomType
        fields = [
            "id",
            "hotel",
            "name",
            "description",
            "price",
            "capacity",
            "amenities",
            "cancellation_policy",
            "featured",
            "active",
            "images",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]


class HotelSerializer(CatalogModelSerializer):
    destination_detail = DestinationSummarySerializer(source="destination", read_only=True)

    class Meta:
        model = Hotel
        fields = "__all__"
        # Star category is editorial; the guest score is computed from reviews
        read_only_fields = ("user_rating", "review_count", "created_at", "updated_at")


class DriverSerializer(CatalogModelSerializer):
    destination_detail = DestinationSummarySerializer(source="destination", read_only=True)

    class Meta:
        model = Driver
        fields = "__all__"
        read_only_fields = COUNTER_FIELDS


class CabSerializer(CatalogModelSerializer):
    destination_detail = DestinationSummarySerializer(source="destination", read_only=True)

    class Meta:
        model = Cab
        fields = "__all__"
        read_only_fields = COUNTER_FIELDS


class CruiseCabinTypeSerializer(CatalogModelSerializer):
    class Meta:
        model = CruiseCabinType
        fields = [
            "id",
            "cruise",
            "name",
            "description",
            "price",
            "image_url",
            "features",
            "availability",
            "capacity",
            "featured",
            "active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]


class CruiseSerializer(CatalogModelSerializer):
    class Meta:
        model = Cruise
        fields = "__all__"
        read_only_fields = COUNTER_FIELDS


class EventSerializer(CatalogModelSerializer):
    destination_detail = DestinationSummarySerializer(source="destination", read_only=True)

    class Meta:
        model = Event
        fields = "__all__"
        read_only_fields = COUNTER_FIELDS

    def validate(self, attrs):  # type: ignore
        attrs = super().validate(attrs)
        start = attrs.get("date", getattr(self.instance, "date", None))
        end = attrs.get("end_date", getattr(self.instance, "end_date", None))
        if start and end and end < start:
            raise serializers.ValidationError({"end_date": ["End date must not be before the start date."]})
        return attrs


class ImageUploadSerializer(serializers.Serializer):
    image = serializers.ImageField()
    folder = serializers.ChoiceField(
        choices=["uploads", "destinations", "packages", "hotels", "rooms", "drivers", "cabs", "cruises", "events"],
        default="uploads",
    )
