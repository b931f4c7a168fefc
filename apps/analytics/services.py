"""Aggregations behind the admin dashboard."""

from __future__ import annotations

from collections import Counter
from decimal import Decimal

from django.contrib.auth import get_user_model  # type: ignore
from django.db.models import Count, Sum  # type: ignore
from django.db.models.functions import TruncDate  # type: ignore

from apps.bookings.models import Booking
from apps.catalog.models import Cruise, Destination, Driver, Event, Hotel, TourPackage
from apps.catalog.registry import ITEM_MODELS


def booking_counts_by_type() -> dict[str, int]:
    rows = Booking.objects.values("booking_type").annotate(count=Count("id")).order_by("booking_type")
    return {row["booking_type"]: row["count"] for row in rows}


def revenue_by_day() -> list[dict]:
    """Sum of paid booking totals per creation day, oldest first."""
    rows = (
        Booking.objects.filter(payment_status=Booking.PaymentStatus.PAID)
        .annotate(day=TruncDate("created_at"))
        .values("day")
        .annotate(revenue=Sum("total_price"))
        .order_by("day")
    )
    return [{"date": row["day"].isoformat(), "revenue": row["revenue"] or Decimal("0")} for row in rows]


def recent_bookings(limit: int = 5):
    return Booking.objects.select_related("user").order_by("-created_at")[:limit]


def platform_counts() -> dict[str, int]:
    return {
        "users": get_user_model().objects.count(),
        "destinations": Destination.objects.count(),
        "packages": TourPackage.objects.count(),
        "hotels": Hotel.objects.count(),
        "drivers": Driver.objects.count(),
        "cruises": Cruise.objects.count(),
        "events": Event.objects.count(),
        "bookings": Booking.objects.count(),
    }


def popular_destinations(limit: int = 10) -> list[dict]:
    """Destinations ranked by non-cancelled bookings of the items they host.

    Cruises have no destination and are not counted.
    """
    per_item = (
        Booking.objects.exclude(status=Booking.Status.CANCELLED)
        .values("booking_type", "item_id")
        .annotate(count=Count("id"))
    )
    wanted: dict[str, set[int]] = {}
    for row in per_item:
        wanted.setdefault(row["booking_type"], set()).add(row["item_id"])

    item_destination: dict[tuple[str, int], int] = {}
    for item_type, ids in wanted.items():
        model = ITEM_MODELS.get(item_type)
        if model is None or not any(f.name == "destination" for f in model._meta.fields):
            continue
        for pk, destination_id in model.objects.filter(pk__in=ids).values_list("pk", "destination_id"):
            item_destination[(item_type, pk)] = destination_id

    totals: Counter[int] = Counter()
    for row in per_item:
        destination_id = item_destination.get((row["booking_type"], row["item_id"]))
        if destination_id is not None:
            totals[destination_id] += row["count"]

    ranked = totals.most_common(limit)
    destinations = Destination.objects.in_bulk([pk for pk, _ in ranked])
    return [
        {
            "id": pk,
            "name": destinations[pk].name,
            "country": destinations[pk].country,
            "bookings": count,
        }
        for pk, count in ranked
        if pk in destinations
    ]
