"""Booking domain models for TravelEase."""

from __future__ import annotations

import secrets
from decimal import Decimal

from django.conf import settings  # type: ignore
from django.core.validators import MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from apps.catalog.models import ItemType


class Booking(models.Model):
    """A reservation of one catalog item by a registered user."""

    class Status(models.TextChoices):
        PENDING = "pending", _("Pending")
        CONFIRMED = "confirmed", _("Confirmed")
        CANCELLED = "cancelled", _("Cancelled")
        COMPLETED = "completed", _("Completed")

    class PaymentStatus(models.TextChoices):
        UNPAID = "unpaid", _("Unpaid")
        PENDING = "pending", _("Pending")
        PAID = "paid", _("Paid")
        REFUNDED = "refunded", _("Refunded")

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="bookings",
    )
    booking_type = models.CharField(max_length=20, choices=ItemType.choices)
    item_id = models.PositiveIntegerField()
    confirmation_code = models.CharField(max_length=16, unique=True, editable=False)

    start_date = models.DateField()
    end_date = models.DateField()
    guest_count = models.PositiveSmallIntegerField(default=1, validators=[MinValueValidator(1)])
    adult_count = models.PositiveSmallIntegerField(default=1)
    child_count = models.PositiveSmallIntegerField(default=0)
    infant_count = models.PositiveSmallIntegerField(default=0)

    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)
    payment_status = models.CharField(
        max_length=20,
        choices=PaymentStatus.choices,
        default=PaymentStatus.UNPAID,
    )
    unit_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text=_("Price per unit (night, day, person or ticket) at booking time."),
    )
    total_price = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    currency = models.CharField(max_length=3, default="USD")

    # Options picked on the item page, stored as display names
    room_type = models.CharField(max_length=255, blank=True)
    cabin_type = models.CharField(max_length=255, blank=True)
    package_type = models.CharField(max_length=255, blank=True)
    ticket_type = models.CharField(max_length=255, blank=True)
    vehicle_type = models.CharField(max_length=255, blank=True)
    special_requests = models.TextField(blank=True)
    additional_services = models.JSONField(default=list, blank=True)

    contact_phone = models.CharField(max_length=32, blank=True)
    contact_email = models.EmailField(blank=True)
    address = models.CharField(max_length=255, blank=True)
    city = models.CharField(max_length=100, blank=True)
    state = models.CharField(max_length=100, blank=True)
    zip_code = models.CharField(max_length=20, blank=True)
    country = models.CharField(max_length=100, default="USA")

    payment_method = models.CharField(max_length=50, blank=True)
    transaction_id = models.CharField(max_length=64, blank=True)

    cancellable = models.BooleanField(default=True)
    cancellation_policy = models.TextField(blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)
    cancellation_reason = models.CharField(max_length=255, blank=True)
    reminder_sent_at = models.DateTimeField(null=True, blank=True, editable=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Booking")
        verbose_name_plural = _("Bookings")
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                check=models.Q(end_date__gte=models.F("start_date")),
                name="booking_end_not_before_start",
            ),
        ]
        indexes = [
            models.Index(fields=["booking_type", "item_id"]),
            models.Index(fields=["status", "payment_status"]),
            models.Index(fields=["start_date"]),
        ]

    def __str__(self) -> str:
        return f"Booking {self.confirmation_code} ({self.booking_type} #{self.item_id})"

    def save(self, *args, **kwargs):  # type: ignore
        if self._state.adding and not self.confirmation_code:
            self.confirmation_code = self.generate_confirmation_code()
        super().save(*args, **kwargs)

    @staticmethod
    def generate_confirmation_code() -> str:
        return f"BK-{secrets.token_hex(4).upper()}"

    @property
    def total_amount(self) -> Decimal:
        return self.total_price

    @property
    def item_name(self) -> str:
        from apps.catalog.registry import item_display_name

        return item_display_name(self.booking_type, self.item_id)

    @property
    def is_active(self) -> bool:
        return self.status in (self.Status.PENDING, self.Status.CONFIRMED)

    def can_be_cancelled(self) -> bool:
        return self.cancellable and self.is_active

    def mark_paid(self, *, transaction_id: str = "", payment_method: str = "") -> None:
        self.payment_status = self.PaymentStatus.PAID
        self.status = self.Status.CONFIRMED
        fields = ["payment_status", "status", "updated_at"]
        if transaction_id:
            self.transaction_id = transaction_id
            fields.append("transaction_id")
        if payment_method:
            self.payment_method = payment_method
            fields.append("payment_method")
        self.save(update_fields=fields)

    def mark_cancelled(self, reason: str = "") -> None:
        self.status = self.Status.CANCELLED
        if self.payment_status == self.PaymentStatus.PAID:
            self.payment_status = self.PaymentStatus.REFUNDED
        self.cancellation_reason = reason[:255]
        self.cancelled_at = timezone.now()
        self.save(
            update_fields=[
                "status",
                "payment_status",
                "cancellation_reason",
                "cancelled_at",
                "updated_at",
            ]
        )

    def mark_completed(self) -> None:
        self.status = self.Status.COMPLETED
        self.save(update_fields=["status", "updated_at"])
