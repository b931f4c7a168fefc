"""Tests for the seed_travel_data management command."""

from __future__ import annotations

import pytest
from django.core.management import call_command

from apps.catalog.models import Cruise, CruiseCabinType, Destination, Hotel, TourPackage
from apps.users.models import User


@pytest.mark.django_db
def test_seed_creates_inventory_and_admin():
    call_command("seed_travel_data", "--admin-password", "SeedPass123")

    admin = User.objects.get(email="admin@travelease.local")
    assert admin.is_admin()
    assert admin.check_password("SeedPass123")
    assert Destination.objects.count() == 4
    assert Hotel.objects.count() == 4
    assert TourPackage.objects.filter(trending=True).count() == 4
    assert Cruise.objects.count() == 1
    assert CruiseCabinType.objects.count() == 3


@pytest.mark.django_db
def test_seed_is_idempotent():
    call_command("seed_travel_data")
    call_command("seed_travel_data")

    assert Destination.objects.count() == 4
    assert Hotel.objects.count() == 4
    assert User.objects.filter(email="admin@travelease.local").count() == 1
