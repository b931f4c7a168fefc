"""Serializers for the booking domain."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import Booking
from .services import BookingUnavailableError, create_booking

CONTACT_FIELDS = [
    "contact_phone",
    "contact_email",
    "address",
    "city",
    "state",
    "zip_code",
    "country",
]


class BookingCreateSerializer(serializers.ModelSerializer):
    """Booking request from a signed-in traveller; prices are computed server-side."""

    item_id = serializers.IntegerField(min_value=1)
    guest_count = serializers.IntegerField(min_value=1, max_value=50, default=1)
    room_type_id = serializers.IntegerField(required=False, allow_null=True, write_only=True)
    cabin_type_id = serializers.IntegerField(required=False, allow_null=True, write_only=True)
    additional_services = serializers.ListField(
        child=serializers.CharField(max_length=255), required=False
    )

    class Meta:
        model = Booking
        fields = [
            "booking_type",
            "item_id",
            "start_date",
            "end_date",
            "guest_count",
            "adult_count",
            "child_count",
            "infant_count",
            "room_type_id",
            "cabin_type_id",
            "package_type",
            "ticket_type",
            "vehicle_type",
            "special_requests",
            "additional_services",
            "payment_method",
            *CONTACT_FIELDS,
        ]

    def validate(self, attrs):  # type: ignore
        if attrs["end_date"] < attrs["start_date"]:
            raise serializers.ValidationError(
                {"end_date": ["End date must not be before the start date."]}
            )
        guest_count = attrs.get("guest_count", 1)
        adults = attrs.get("adult_count", 1)
        children = attrs.get("child_count", 0)
        if adults + children > guest_count:
            raise serializers.ValidationError(
                {"non_field_errors": ["Adults and children exceed the number of guests."]}
            )
        return attrs

    def create(self, validated_data):  # type: ignore
        user = self.context["request"].user
        try:
            return create_booking(user, **validated_data)
        except BookingUnavailableError as exc:
            raise serializers.ValidationError({"non_field_errors": [str(exc)]})


class BookingSerializer(serializers.ModelSerializer):
    """Read representation of a booking."""

    user_id = serializers.ReadOnlyField(source="user.id")
    item_name = serializers.ReadOnlyField()
    total_amount = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = Booking
        fields = [
            "id",
            "confirmation_code",
            "user_id",
            "booking_type",
            "item_id",
            "item_name",
            "start_date",
            "end_date",
            "guest_count",
            "adult_count",
            "child_count",
            "infant_count",
            "room_type",
            "cabin_type",
            "package_type",
            "ticket_type",
            "vehicle_type",
            "unit_price",
            "total_price",
            "total_amount",
            "currency",
            "status",
            "payment_status",
            "payment_method",
            "transaction_id",
            "special_requests",
            "additional_services",
            *CONTACT_FIELDS,
            "cancellable",
            "cancellation_policy",
            "cancelled_at",
            "cancellation_reason",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class BookingAdminUpdateSerializer(serializers.ModelSerializer):
    """Back-office edits; any valid status value is accepted."""

    class Meta:
        model = Booking
        fields = [
            "status",
            "payment_status",
            "special_requests",
            "cancellable",
            "cancellation_policy",
            "cancellation_reason",
            "transaction_id",
            *CONTACT_FIELDS,
        ]


class BookingCancelSerializer(serializers.Serializer):
    reason = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
