"""Tests for the admin dashboard analytics endpoints."""

from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.bookings.models import Booking
from apps.catalog.tests.factories import (
    make_cruise,
    make_destination,
    make_event,
    make_hotel,
    make_package,
)
from apps.users.models import User


class AnalyticsAPITests(APITestCase):
    def setUp(self) -> None:
        self.traveller = User.objects.create_user(
            email="traveller@example.com", username="traveller", password="TravelPass123"
        )
        self.admin = User.objects.create_user(
            email="admin@example.com", username="admin", password="AdminPass123", role=User.Role.ADMIN
        )
        self.lisbon = make_destination()
        self.porto = make_destination(name="Porto")
        self.package = make_package(self.lisbon)
        self.hotel = make_hotel(self.porto)
        self.event = make_event(self.porto)
        self.cruise = make_cruise()

        self._booking("package", self.package.id, "1000.00", paid=True)
        self._booking("hotel", self.hotel.id, "360.00", paid=True)
        self._booking("event", self.event.id, "80.00")
        self._booking("event", self.event.id, "40.00", cancelled=True)
        self._booking("cruise", self.cruise.id, "900.00")

        self.client.force_authenticate(self.admin)

    def _booking(self, booking_type: str, item_id: int, total: str, *, paid=False, cancelled=False) -> Booking:
        start = date.today() + timedelta(days=20)
        booking = Booking.objects.create(
            user=self.traveller,
            booking_type=booking_type,
            item_id=item_id,
            start_date=start,
            end_date=start + timedelta(days=2),
            total_price=Decimal(total),
        )
        if paid:
            booking.mark_paid(transaction_id="TX")
        if cancelled:
            booking.mark_cancelled("changed plans")
        return booking

    def test_overview(self) -> None:
        response = self.client.get(reverse("analytics-overview"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["booking_counts"], {"cruise": 1, "event": 2, "hotel": 1, "package": 1})
        self.assertEqual(len(response.data["recent_bookings"]), 5)
        self.assertEqual(response.data["counts"]["bookings"], 5)
        self.assertEqual(response.data["counts"]["users"], 2)
        self.assertEqual(response.data["counts"]["destinations"], 2)
        self.assertEqual(response.data["counts"]["cruises"], 1)

    def test_sales_data_sums_paid_bookings_per_day(self) -> None:
        response = self.client.get(reverse("analytics-sales-data"))

        self.assertEqual(len(response.data), 1)
        self.assertEqual(Decimal(str(response.data[0]["revenue"])), Decimal("1360.00"))

    def test_booking_stats(self) -> None:
        response = self.client.get(reverse("analytics-booking-stats"))

        self.assertEqual(response.data["event"], 2)

    def test_popular_destinations_use_real_counts(self) -> None:
        response = self.client.get(reverse("analytics-popular-destinations"))

        self.assertEqual(
            [(row["name"], row["bookings"]) for row in response.data],
            [("Porto", 2), ("Lisbon", 1)],
        )

    def test_regular_user_forbidden(self) -> None:
        self.client.force_authenticate(self.traveller)

        self.assertEqual(self.client.get(reverse("analytics-overview")).status_code, status.HTTP_403_FORBIDDEN)

    def test_anonymous_unauthorized(self) -> None:
        self.client.force_authenticate(None)

        response = self.client.get(reverse("analytics-sales-data"))

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
