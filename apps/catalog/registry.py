"""Resolve generic ``(item_type, item_id)`` references to catalog rows.

Bookings and reviews point at catalog items without a foreign key, the
same way the public URLs do (``/hotels/3``). This module is the one place
that knows which model backs which item type.
"""

from __future__ import annotations

from django.db import models  # type: ignore

from .models import Cab, Cruise, Driver, Event, Hotel, ItemType, TourPackage

ITEM_MODELS: dict[str, type[models.Model]] = {
    ItemType.PACKAGE: TourPackage,
    ItemType.HOTEL: Hotel,
    ItemType.DRIVER: Driver,
    ItemType.CAB: Cab,
    ItemType.CRUISE: Cruise,
    ItemType.EVENT: Event,
}


class UnknownItemError(LookupError):
    """Raised when an item type is not registered or the row does not exist."""


def get_item_model(item_type: str) -> type[models.Model]:
    try:
        return ITEM_MODELS[item_type]
    except KeyError:
        raise UnknownItemError(f"Unknown item type: {item_type!r}")


def resolve_item(item_type: str, item_id: int, *, queryset=None):
    """Return the catalog object or raise UnknownItemError."""
    model = get_item_model(item_type)
    qs = queryset if queryset is not None else model.objects.all()
    try:
        return qs.get(pk=item_id)
    except model.DoesNotExist:
        raise UnknownItemError(f"{model._meta.verbose_name} #{item_id} not found")


def item_exists(item_type: str, item_id: int) -> bool:
    try:
        return get_item_model(item_type).objects.filter(pk=item_id).exists()
    except UnknownItemError:
        return False


def item_display_name(item_type: str, item_id: int) -> str:
    """Human readable label used in e-mails, vouchers and admin tables."""
    try:
        return str(resolve_item(item_type, item_id))
    except UnknownItemError:
        return f"{item_type} #{item_id}"
