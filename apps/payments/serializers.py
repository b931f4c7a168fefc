"""Serializers for checkout payment details."""

from __future__ import annotations

import re

from django.utils import timezone  # type: ignore
from rest_framework import serializers  # type: ignore

from apps.bookings.models import Booking

from .models import PaymentDetail

EXPIRY_RE = re.compile(r"^(0[1-9]|1[0-2])/(\d{2})$")
CVC_RE = re.compile(r"^\d{3,4}$")


def luhn_is_valid(number: str) -> bool:
    total = 0
    for index, char in enumerate(reversed(number)):
        digit = int(char)
        if index % 2 == 1:
            digit *= 2
            if digit > 9:
                digit -= 9
        total += digit
    return total % 10 == 0


class PaymentDetailSerializer(serializers.ModelSerializer):
    """Read representation; the card number is already masked."""

    booking_id = serializers.ReadOnlyField(source="booking.id")

    class Meta:
        model = PaymentDetail
        fields = [
            "id",
            "booking_id",
            "card_name",
            "card_number",
            "card_expiry",
            "address",
            "city",
            "state",
            "zip_code",
            "country",
            "payment_processor",
            "transaction_id",
            "status",
            "error_message",
            "amount",
            "currency",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class PaymentDetailCreateSerializer(serializers.Serializer):
    """Checkout form. The CVC is validated and then dropped."""

    booking = serializers.PrimaryKeyRelatedField(queryset=Booking.objects.all())
    card_name = serializers.CharField(max_length=255)
    card_number = serializers.CharField(max_length=23)
    card_expiry = serializers.CharField(max_length=5, help_text="MM/YY")
    card_cvc = serializers.CharField(max_length=4, write_only=True)
    address = serializers.CharField(max_length=255, required=False, allow_blank=True)
    city = serializers.CharField(max_length=100, required=False, allow_blank=True)
    state = serializers.CharField(max_length=100, required=False, allow_blank=True)
    zip_code = serializers.CharField(max_length=20, required=False, allow_blank=True)
    country = serializers.CharField(max_length=100, required=False, default="USA")
    transaction_id = serializers.CharField(max_length=64, required=False, allow_blank=True)

    def validate_card_number(self, value: str) -> str:
        digits = re.sub(r"[\s-]", "", value)
        if not digits.isdigit() or not 13 <= len(digits) <= 19:
            raise serializers.ValidationError("Card number must contain 13 to 19 digits.")
        if not luhn_is_valid(digits):
            raise serializers.ValidationError("Card number is invalid.")
        return digits

    def validate_card_expiry(self, value: str) -> str:
        match = EXPIRY_RE.match(value.strip())
        if not match:
            raise serializers.ValidationError("Expiry must use the MM/YY format.")
        month, year = int(match.group(1)), 2000 + int(match.group(2))
        today = timezone.localdate()
        if (year, month) < (today.year, today.month):
            raise serializers.ValidationError("Card has expired.")
        return value.strip()

    def validate_card_cvc(self, value: str) -> str:
        if not CVC_RE.match(value):
            raise serializers.ValidationError("CVC must be 3 or 4 digits.")
        return value


class PaymentStatusUpdateSerializer(serializers.ModelSerializer):
    class Meta:
        model = PaymentDetail
        fields = ["status", "error_message", "transaction_id"]
