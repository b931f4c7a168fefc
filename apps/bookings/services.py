"""Domain services for booking workflows.

Pricing is always computed here from the catalog row, never taken from
the client. Capacity checks for events, cabs and cruise cabins run inside
the same transaction that creates the booking, with the catalog row
locked where the database supports it.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING

from django.db import transaction  # type: ignore
from django.db.models import Sum  # type: ignore
from django.db.utils import NotSupportedError  # type: ignore
from django.utils import timezone  # type: ignore

from apps.catalog.models import CruiseCabinType, HotelRoomType, ItemType
from apps.catalog.registry import UnknownItemError, get_item_model, resolve_item
from shared.domain.value_objects import DateRange, Money

from .models import Booking

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from apps.users.models import CustomUser

logger = logging.getLogger(__name__)

# Hotels without an explicit room type are sold as double rooms
DEFAULT_ROOM_CAPACITY = 2


class BookingUnavailableError(Exception):
    """Raised when the requested item cannot be booked as asked."""


class InvalidBookingTransition(Exception):
    """Raised when a status change makes no sense for the booking."""


@dataclass(frozen=True)
class BookingQuote:
    unit_price: Money
    total: Money
    option_name: str = ""
    cancellation_policy: str = ""


def _lock_queryset_if_possible(queryset):
    """Apply select_for_update when inside transaction.atomic()."""

    if not transaction.get_connection().in_atomic_block:
        return queryset

    try:
        return queryset.select_for_update()
    except NotSupportedError:
        return queryset


def _travel_period(booking_type: str, start_date: date, end_date: date) -> DateRange:
    try:
        period = DateRange(start_date, end_date)
    except ValueError:
        raise BookingUnavailableError("End date must not be before the start date.")
    if booking_type == ItemType.HOTEL and period.nights < 1:
        raise BookingUnavailableError("Hotel stays must be at least one night.")
    if start_date < timezone.localdate():
        raise BookingUnavailableError("Bookings cannot start in the past.")
    return period


def _booked_guests(booking_type: str, item_id: int) -> int:
    total = (
        Booking.objects.filter(booking_type=booking_type, item_id=item_id)
        .exclude(status=Booking.Status.CANCELLED)
        .aggregate(total=Sum("guest_count"))["total"]
    )
    return total or 0


def _booked_cabins(cabin_type: CruiseCabinType) -> int:
    """Cabins of this type held by live bookings on the cruise."""

    guest_counts = (
        Booking.objects.filter(
            booking_type=ItemType.CRUISE,
            item_id=cabin_type.cruise_id,
            cabin_type=cabin_type.name,
        )
        .exclude(status=Booking.Status.CANCELLED)
        .values_list("guest_count", flat=True)
    )
    per_cabin = max(cabin_type.capacity, 1)
    return sum(math.ceil(count / per_cabin) for count in guest_counts)


def ensure_item_is_bookable(
    booking_type: str,
    item,
    *,
    guest_count: int,
    room_type: HotelRoomType | None = None,
    cabin_type: CruiseCabinType | None = None,
) -> None:
    """Check availability flags and capacity limits for the item."""

    if getattr(item, "available", True) is False:
        raise BookingUnavailableError(f"{item} is not available for booking.")

    if booking_type == ItemType.HOTEL and room_type is not None:
        if room_type.hotel_id != item.pk or not room_type.active:
            raise BookingUnavailableError("Selected room type is not offered by this hotel.")

    if booking_type == ItemType.CAB and guest_count > item.seats:
        raise BookingUnavailableError(f"{item} seats at most {item.seats} passengers.")

    if booking_type == ItemType.CRUISE and cabin_type is not None:
        if cabin_type.cruise_id != item.pk or not cabin_type.active:
            raise BookingUnavailableError("Selected cabin type is not offered on this cruise.")
        cabins_needed = math.ceil(guest_count / max(cabin_type.capacity, 1))
        remaining = cabin_type.availability - _booked_cabins(cabin_type)
        if cabins_needed > remaining:
            raise BookingUnavailableError(
                f"Only {max(remaining, 0)} {cabin_type.name} cabin(s) left."
            )

    if booking_type == ItemType.EVENT and item.capacity is not None:
        remaining = item.capacity - _booked_guests(booking_type, item.pk)
        if guest_count > remaining:
            raise BookingUnavailableError(f"Only {max(remaining, 0)} ticket(s) left for {item}.")


def quote_booking(
    booking_type: str,
    item,
    period: DateRange,
    *,
    guest_count: int,
    room_type: HotelRoomType | None = None,
    cabin_type: CruiseCabinType | None = None,
) -> BookingQuote:
    """Price a booking from the current catalog data."""

    if booking_type == ItemType.PACKAGE:
        unit = Money(item.price)
        return BookingQuote(unit, unit * guest_count)

    if booking_type == ItemType.HOTEL:
        if room_type is not None:
            unit = Money(room_type.price)
            capacity = room_type.capacity
        else:
            unit = Money(item.price)
            capacity = DEFAULT_ROOM_CAPACITY
        rooms = math.ceil(guest_count / max(capacity, 1))
        return BookingQuote(
            unit,
            unit * (period.nights * rooms),
            option_name=room_type.name if room_type else "",
            cancellation_policy=room_type.cancellation_policy if room_type else "",
        )

    if booking_type == ItemType.DRIVER:
        unit = Money(item.daily_rate)
        return BookingQuote(unit, unit * period.billable_days)

    if booking_type == ItemType.CAB:
        unit = Money(item.price_per_day)
        return BookingQuote(
            unit,
            unit * period.billable_days,
            option_name=item.vehicle_type,
            cancellation_policy=item.cancellation_timeframe if item.free_cancellation else "",
        )

    if booking_type == ItemType.CRUISE:
        unit = Money(cabin_type.price if cabin_type is not None else item.price)
        return BookingQuote(
            unit,
            unit * guest_count,
            option_name=cabin_type.name if cabin_type else "",
        )

    if booking_type == ItemType.EVENT:
        unit = Money(item.price)
        return BookingQuote(unit, unit * guest_count)

    raise BookingUnavailableError(f"Unsupported booking type: {booking_type}")


@transaction.atomic
def create_booking(
    user: "CustomUser",
    *,
    booking_type: str,
    item_id: int,
    start_date: date,
    end_date: date,
    guest_count: int = 1,
    room_type_id: int | None = None,
    cabin_type_id: int | None = None,
    **details,
) -> Booking:
    """Validate, price and persist a new pending booking."""

    period = _travel_period(booking_type, start_date, end_date)

    try:
        model = get_item_model(booking_type)
        item = resolve_item(
            booking_type,
            item_id,
            queryset=_lock_queryset_if_possible(model.objects.all()),
        )
    except UnknownItemError as exc:
        raise BookingUnavailableError(str(exc))

    room_type = None
    cabin_type = None
    if booking_type == ItemType.HOTEL and room_type_id:
        room_type = HotelRoomType.objects.filter(pk=room_type_id).first()
        if room_type is None:
            raise BookingUnavailableError("Selected room type does not exist.")
    if booking_type == ItemType.CRUISE and cabin_type_id:
        cabin_qs = _lock_queryset_if_possible(CruiseCabinType.objects.filter(pk=cabin_type_id))
        cabin_type = cabin_qs.first()
        if cabin_type is None:
            raise BookingUnavailableError("Selected cabin type does not exist.")

    ensure_item_is_bookable(
        booking_type,
        item,
        guest_count=guest_count,
        room_type=room_type,
        cabin_type=cabin_type,
    )
    quote = quote_booking(
        booking_type,
        item,
        period,
        guest_count=guest_count,
        room_type=room_type,
        cabin_type=cabin_type,
    )

    if room_type is not None:
        details["room_type"] = room_type.name
    if cabin_type is not None:
        details["cabin_type"] = cabin_type.name
    if booking_type == ItemType.CAB and not details.get("vehicle_type"):
        details["vehicle_type"] = quote.option_name
    if quote.cancellation_policy and not details.get("cancellation_policy"):
        details["cancellation_policy"] = quote.cancellation_policy

    total = quote.total.quantize()
    booking = Booking.objects.create(
        user=user,
        booking_type=booking_type,
        item_id=item.pk,
        start_date=period.start_date,
        end_date=period.end_date,
        guest_count=guest_count,
        unit_price=quote.unit_price.quantize().amount,
        total_price=total.amount,
        currency=total.currency,
        **details,
    )
    logger.info(
        f"Booking {booking.confirmation_code} created by user {user.pk}: "
        f"{booking_type} #{item.pk}, {guest_count} guest(s), total {total}"
    )
    return booking


def _dispatch_notification(task_name: str, booking: Booking) -> None:
    """Queue a notification task once the surrounding transaction commits.

    Failures to queue are logged only. A rolled back transaction queues nothing.
    """

    from . import tasks

    booking_id = booking.pk
    code = booking.confirmation_code

    def _queue() -> None:
        try:
            getattr(tasks, task_name).delay(booking_id)
        except Exception as exc:
            logger.warning(f"Could not queue {task_name} for booking {code}: {exc}")

    transaction.on_commit(_queue)


@transaction.atomic
def cancel_booking(booking: Booking, *, reason: str = "") -> Booking:
    """Cancel an active booking; paid bookings are marked refunded."""

    booking = _lock_queryset_if_possible(Booking.objects.filter(pk=booking.pk)).get()
    if not booking.is_active:
        raise InvalidBookingTransition(f"A {booking.get_status_display().lower()} booking cannot be cancelled.")
    if not booking.cancellable:
        raise InvalidBookingTransition("This booking is non-refundable and cannot be cancelled.")

    booking.mark_cancelled(reason)
    logger.info(
        f"Booking {booking.confirmation_code} cancelled (payment {booking.payment_status}). "
        f"Reason: {reason or '-'}"
    )
    _dispatch_notification("notify_booking_cancelled", booking)
    return booking


@transaction.atomic
def confirm_payment(
    booking: Booking,
    *,
    transaction_id: str = "",
    payment_method: str = "",
) -> Booking:
    """Mark the booking paid and confirmed."""

    booking = _lock_queryset_if_possible(Booking.objects.filter(pk=booking.pk)).get()
    if booking.payment_status == Booking.PaymentStatus.PAID:
        raise InvalidBookingTransition("Booking is already paid.")
    if not booking.is_active:
        raise InvalidBookingTransition(f"A {booking.get_status_display().lower()} booking cannot be paid.")

    booking.mark_paid(transaction_id=transaction_id, payment_method=payment_method)
    logger.info(f"Booking {booking.confirmation_code} paid: {booking.total_price} {booking.currency}")
    _dispatch_notification("notify_booking_confirmed", booking)
    return booking
