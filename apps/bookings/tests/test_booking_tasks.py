"""Tests for the periodic booking jobs."""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

import pytest
from django.core import mail
from django.utils import timezone

from apps.bookings.models import Booking
from apps.bookings.tasks import (
    cancel_stale_unpaid_bookings,
    complete_finished_bookings,
    send_upcoming_booking_reminders,
)
from apps.catalog.tests.factories import make_destination, make_package
from apps.notifications.models import Notification
from apps.users.models import User


@pytest.fixture
def traveller(db):
    return User.objects.create_user(email="t@example.com", username="t", password="Pass12345!")


@pytest.fixture
def package(db):
    return make_package(make_destination())


def _booking(user, package, *, start, end=None, **fields) -> Booking:
    return Booking.objects.create(
        user=user,
        booking_type="package",
        item_id=package.id,
        start_date=start,
        end_date=end or start,
        total_price=Decimal("500.00"),
        **fields,
    )


def test_stale_unpaid_bookings_are_cancelled(traveller, package, settings):
    settings.BOOKING_UNPAID_TTL_HOURS = 24
    today = timezone.localdate()
    stale = _booking(traveller, package, start=today + timedelta(days=5))
    fresh = _booking(traveller, package, start=today + timedelta(days=5))
    paid = _booking(
        traveller,
        package,
        start=today + timedelta(days=5),
        status=Booking.Status.CONFIRMED,
        payment_status=Booking.PaymentStatus.PAID,
    )
    Booking.objects.filter(pk__in=[stale.pk, paid.pk]).update(
        created_at=timezone.now() - timedelta(hours=30)
    )

    assert cancel_stale_unpaid_bookings() == {"cancelled": 1}

    stale.refresh_from_db()
    fresh.refresh_from_db()
    paid.refresh_from_db()
    assert stale.status == Booking.Status.CANCELLED
    assert stale.cancellation_reason == "Payment not received in time"
    assert fresh.status == Booking.Status.PENDING
    assert paid.status == Booking.Status.CONFIRMED


def test_finished_bookings_are_completed(traveller, package):
    today = timezone.localdate()
    past = _booking(
        traveller, package, start=today - timedelta(days=5), end=today - timedelta(days=1),
        status=Booking.Status.CONFIRMED,
    )
    ongoing = _booking(
        traveller, package, start=today - timedelta(days=1), end=today + timedelta(days=2),
        status=Booking.Status.CONFIRMED,
    )
    pending = _booking(traveller, package, start=today - timedelta(days=5), end=today - timedelta(days=1))

    assert complete_finished_bookings() == {"completed": 1}

    past.refresh_from_db()
    ongoing.refresh_from_db()
    pending.refresh_from_db()
    assert past.status == Booking.Status.COMPLETED
    assert ongoing.status == Booking.Status.CONFIRMED
    assert pending.status == Booking.Status.PENDING


def test_reminders_sent_once(traveller, package):
    tomorrow = timezone.localdate() + timedelta(days=1)
    _booking(traveller, package, start=tomorrow, status=Booking.Status.CONFIRMED)
    _booking(traveller, package, start=tomorrow + timedelta(days=1), status=Booking.Status.CONFIRMED)

    assert send_upcoming_booking_reminders() == {"sent": 1}
    assert send_upcoming_booking_reminders() == {"sent": 0}

    assert len(mail.outbox) == 1
    assert "starts tomorrow" in mail.outbox[0].subject
    assert Notification.objects.filter(user=traveller, title="Your trip starts tomorrow").count() == 1
