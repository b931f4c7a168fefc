"""Checkout payment services."""

from __future__ import annotations

import logging
import secrets

from django.db import transaction  # type: ignore

from apps.bookings.models import Booking
from apps.bookings.services import InvalidBookingTransition, confirm_payment

from .gateways import get_gateway
from .models import PaymentDetail

logger = logging.getLogger(__name__)


class PaymentDeclined(Exception):
    """Raised when the gateway refuses a charge."""


def generate_transaction_id(booking: Booking) -> str:
    return f"TR-{booking.pk}-{secrets.randbelow(10**6):06d}"


@transaction.atomic
def save_payment_details(
    booking: Booking,
    *,
    card_number: str,
    transaction_id: str = "",
    **fields,
) -> PaymentDetail:
    """Store (or replace) the checkout details and mark the booking payment pending."""

    if booking.payment_status == Booking.PaymentStatus.PAID:
        raise InvalidBookingTransition("Booking is already paid.")
    if not booking.is_active:
        raise InvalidBookingTransition(f"A {booking.get_status_display().lower()} booking cannot be paid.")

    transaction_id = transaction_id or generate_transaction_id(booking)
    detail, created = PaymentDetail.objects.update_or_create(
        booking=booking,
        defaults={
            **fields,
            "card_number": PaymentDetail.mask_card_number(card_number),
            "amount": booking.total_price,
            "currency": booking.currency,
            "transaction_id": transaction_id,
            "status": PaymentDetail.Status.PENDING,
            "error_message": "",
        },
    )

    booking.payment_status = Booking.PaymentStatus.PENDING
    booking.transaction_id = transaction_id
    booking.payment_method = booking.payment_method or "card"
    booking.save(update_fields=["payment_status", "transaction_id", "payment_method", "updated_at"])

    logger.info(
        f"Payment details {'saved' if created else 'replaced'} for booking "
        f"{booking.confirmation_code}, card *{detail.last4}"
    )
    return detail


def process_payment(booking: Booking) -> PaymentDetail:
    """Charge the stored card through the configured gateway.

    On success the booking becomes confirmed and paid. On decline the
    details are marked failed, the booking stays pending and
    ``PaymentDeclined`` is raised.
    """

    detail = PaymentDetail.objects.select_related("booking").get(booking=booking)
    if booking.payment_status == Booking.PaymentStatus.PAID:
        raise InvalidBookingTransition("Booking is already paid.")
    if not booking.is_active:
        raise InvalidBookingTransition(f"A {booking.get_status_display().lower()} booking cannot be paid.")

    # The charge always follows the booking total, never a stored or client value.
    detail.amount = booking.total_price
    detail.currency = booking.currency
    gateway = get_gateway()
    detail.payment_processor = gateway.name
    result = gateway.charge(
        amount=detail.amount,
        currency=detail.currency,
        reference=booking.confirmation_code,
        card_last4=detail.last4,
    )

    if not result.success:
        detail.mark_failed(result.error_message)
        logger.warning(f"Payment declined for booking {booking.confirmation_code}: {result.error_message}")
        raise PaymentDeclined(result.error_message)

    with transaction.atomic():
        detail.mark_success(result.transaction_id)
        confirm_payment(booking, transaction_id=result.transaction_id, payment_method="card")
    logger.info(f"Payment succeeded for booking {booking.confirmation_code}: {result.transaction_id}")
    return detail


@transaction.atomic
def apply_admin_status(detail: PaymentDetail) -> None:
    """Mirror an admin-set payment status onto the booking."""

    booking = detail.booking
    if detail.status == PaymentDetail.Status.SUCCESS:
        booking.payment_status = Booking.PaymentStatus.PAID
        if booking.status == Booking.Status.PENDING:
            booking.status = Booking.Status.CONFIRMED
    elif detail.status == PaymentDetail.Status.FAILED:
        booking.payment_status = Booking.PaymentStatus.UNPAID
    else:
        booking.payment_status = Booking.PaymentStatus.PENDING
    if detail.transaction_id:
        booking.transaction_id = detail.transaction_id
    booking.save(update_fields=["payment_status", "status", "transaction_id", "updated_at"])
    logger.info(
        f"Admin set payment {detail.pk} to {detail.status}; booking {booking.confirmation_code} "
        f"is {booking.status}/{booking.payment_status}"
    )
