"""Unit tests for booking quotes."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from apps.bookings.services import quote_booking
from apps.catalog.tests.factories import make_cruise, make_destination, make_hotel, make_package
from shared.domain.value_objects import DateRange, Money


@pytest.mark.django_db
def test_hotel_without_room_type_uses_double_rooms():
    hotel = make_hotel(make_destination(), price=Decimal("99.99"))
    period = DateRange(date(2030, 5, 1), date(2030, 5, 3))

    quote = quote_booking("hotel", hotel, period, guest_count=3)

    assert quote.unit_price == Money(Decimal("99.99"))
    assert quote.total.quantize() == Money(Decimal("399.96"))


@pytest.mark.django_db
def test_cruise_without_cabin_uses_base_fare():
    cruise = make_cruise(price=Decimal("750.00"))
    period = DateRange(date(2030, 6, 1), date(2030, 6, 8))

    quote = quote_booking("cruise", cruise, period, guest_count=2)

    assert quote.total == Money(Decimal("1500.00"))
    assert quote.option_name == ""


@pytest.mark.django_db
def test_package_ignores_dates():
    package = make_package(make_destination(), price=Decimal("250.00"))
    period = DateRange(date(2030, 1, 1), date(2030, 1, 1))

    assert quote_booking("package", package, period, guest_count=3).total == Money(Decimal("750.00"))
