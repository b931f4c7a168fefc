"""Rating aggregation for reviewed catalog items."""

from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal

from django.db.models import Avg, Count  # type: ignore

from apps.catalog.models import ItemType
from apps.catalog.registry import UnknownItemError, get_item_model

from .models import Review

logger = logging.getLogger(__name__)


def _quantize(value: Decimal, places: str) -> Decimal:
    return value.quantize(Decimal(places), rounding=ROUND_HALF_UP)


def recompute_item_rating(item_type: str, item_id: int) -> None:
    """Refresh the item's rating and review_count from approved reviews.

    Hotels keep their editorial star ``rating``; the guest score is stored
    in ``user_rating`` on a 10-point scale instead.
    """
    try:
        model = get_item_model(item_type)
    except UnknownItemError:
        logger.warning(f"Skipping rating refresh for unknown item type {item_type!r}")
        return

    stats = Review.objects.filter(
        item_type=item_type, item_id=item_id, status=Review.Status.APPROVED
    ).aggregate(avg=Avg('rating'), count=Count('id'))
    average = Decimal(str(stats['avg'] or 0))
    count = stats['count']

    if item_type == ItemType.HOTEL:
        updates = {'user_rating': _quantize(average * 2, '0.1'), 'review_count': count}
    else:
        updates = {'rating': _quantize(average, '0.01'), 'review_count': count}

    updated = model.objects.filter(pk=item_id).update(**updates)
    if updated:
        logger.info(f"Rating refreshed for {item_type} #{item_id}: {updates}")


def has_completed_trip(user, item_type: str, item_id: int) -> bool:
    from apps.bookings.models import Booking

    return Booking.objects.filter(
        user=user,
        booking_type=item_type,
        item_id=item_id,
        status__in=[Booking.Status.CONFIRMED, Booking.Status.COMPLETED],
    ).exists()
