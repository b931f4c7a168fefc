"""Payment domain models for TravelEase."""

from __future__ import annotations

from decimal import Decimal

from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from shared.infrastructure.fields import EncryptedCharField


class PaymentDetail(models.Model):
    """Card and billing details submitted at checkout for one booking.

    Only the last four digits of the card number are kept. The expiry and
    cardholder name are encrypted at rest; the CVC is never stored.
    """

    class Status(models.TextChoices):
        PENDING = "pending", _("Pending")
        SUCCESS = "success", _("Success")
        FAILED = "failed", _("Failed")

    booking = models.OneToOneField(
        "bookings.Booking",
        on_delete=models.CASCADE,
        related_name="payment_detail",
    )
    card_name = EncryptedCharField(max_length=255)
    card_number = models.CharField(max_length=19, help_text=_("Masked card number"))
    card_expiry = EncryptedCharField(max_length=5)
    address = models.CharField(max_length=255, blank=True)
    city = models.CharField(max_length=100, blank=True)
    state = models.CharField(max_length=100, blank=True)
    zip_code = models.CharField(max_length=20, blank=True)
    country = models.CharField(max_length=100, default="USA")

    payment_processor = models.CharField(max_length=50, blank=True)
    transaction_id = models.CharField(max_length=64, blank=True)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)
    error_message = models.TextField(blank=True)
    amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    currency = models.CharField(max_length=3, default="USD")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Payment detail")
        verbose_name_plural = _("Payment details")
        ordering = ["-created_at"]
        indexes = [models.Index(fields=["status"])]

    def __str__(self) -> str:
        return f"Payment for booking {self.booking_id} ({self.status})"

    @staticmethod
    def mask_card_number(number: str) -> str:
        digits = "".join(ch for ch in number if ch.isdigit())
        return f"**** **** **** {digits[-4:]}"

    @property
    def last4(self) -> str:
        return self.card_number[-4:]

    def mark_success(self, transaction_id: str = "") -> None:
        self.status = self.Status.SUCCESS
        self.error_message = ""
        if transaction_id:
            self.transaction_id = transaction_id
        self.save(
            update_fields=[
                "status", "error_message", "transaction_id", "payment_processor", "amount", "currency", "updated_at",
            ]
        )

    def mark_failed(self, reason: str) -> None:
        self.status = self.Status.FAILED
        self.error_message = reason
        self.save(update_fields=["status", "error_message", "payment_processor", "amount", "currency", "updated_at"])
