"""Integration tests for the checkout payment API."""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal
from unittest import mock

from django.db import connection
from django.test import override_settings
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.bookings.models import Booking
from apps.catalog.tests.factories import make_destination, make_package
from apps.payments.gateways import ChargeResult, MockGateway
from apps.payments.models import PaymentDetail
from apps.users.models import User

VALID_CARD = "4242 4242 4242 4242"


class PaymentAPITests(APITestCase):
    def setUp(self) -> None:
        self.traveller = User.objects.create_user(
            email="traveller@example.com", username="traveller", password="TravelPass123"
        )
        self.stranger = User.objects.create_user(
            email="stranger@example.com", username="stranger", password="StrangerPass123"
        )
        self.admin = User.objects.create_user(
            email="admin@example.com", username="admin", password="AdminPass123", role=User.Role.ADMIN
        )
        package = make_package(make_destination())
        start = timezone.localdate() + timedelta(days=14)
        self.booking = Booking.objects.create(
            user=self.traveller,
            booking_type="package",
            item_id=package.id,
            start_date=start,
            end_date=start + timedelta(days=4),
            guest_count=2,
            total_price=Decimal("1000.00"),
        )
        self.client.force_authenticate(self.traveller)

    def _expiry(self, years: int = 2) -> str:
        today = timezone.localdate()
        return f"{today.month:02d}/{(today.year + years) % 100:02d}"

    def _payload(self, **overrides) -> dict:
        payload = {
            "booking": self.booking.id,
            "card_name": "Ana Silva",
            "card_number": VALID_CARD,
            "card_expiry": self._expiry(),
            "card_cvc": "123",
            "address": "1 Main St",
            "city": "Springfield",
            "zip_code": "12345",
        }
        payload.update(overrides)
        return payload

    def _submit(self, **overrides):
        return self.client.post(reverse("payment-list"), self._payload(**overrides), format="json")

    def test_submit_masks_card_and_marks_booking_pending(self) -> None:
        response = self._submit()

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["card_number"], "**** **** **** 4242")
        self.assertEqual(response.data["amount"], "1000.00")
        self.assertNotIn("card_cvc", response.data)
        self.booking.refresh_from_db()
        self.assertEqual(self.booking.payment_status, Booking.PaymentStatus.PENDING)
        self.assertRegex(self.booking.transaction_id, rf"^TR-{self.booking.id}-\d{{6}}$")

    def test_sensitive_fields_are_encrypted_at_rest(self) -> None:
        self._submit()
        detail = PaymentDetail.objects.get()
        self.assertEqual(detail.card_name, "Ana Silva")

        with connection.cursor() as cursor:
            cursor.execute(
                f"SELECT card_name, card_expiry FROM {PaymentDetail._meta.db_table} WHERE id = %s",
                [detail.id],
            )
            raw_name, raw_expiry = cursor.fetchone()
        self.assertNotIn("Ana", raw_name)
        self.assertNotEqual(raw_expiry, self._expiry())

    def test_resubmit_replaces_details(self) -> None:
        self._submit()
        response = self._submit(card_number="5555555555554444")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(PaymentDetail.objects.count(), 1)
        self.assertEqual(PaymentDetail.objects.get().card_number, "**** **** **** 4444")

    def test_card_validation(self) -> None:
        response = self._submit(card_number="4242424242424241", card_expiry="13/30", card_cvc="12")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("card_number", response.data)
        self.assertIn("card_expiry", response.data)
        self.assertIn("card_cvc", response.data)

    def test_expired_card(self) -> None:
        response = self._submit(card_expiry=self._expiry(years=-1))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("card_expiry", response.data)

    def test_cannot_pay_for_someone_elses_booking(self) -> None:
        self.client.force_authenticate(self.stranger)
        response = self._submit()
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        response = self.client.get(reverse("payment-by-booking", args=[self.booking.id]))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_get_by_booking(self) -> None:
        response = self.client.get(reverse("payment-by-booking", args=[self.booking.id]))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

        self._submit()
        response = self.client.get(reverse("payment-by-booking", args=[self.booking.id]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["booking_id"], self.booking.id)

    def test_default_gateway_declines(self) -> None:
        self._submit()

        response = self.client.post(reverse("payment-process", args=[self.booking.id]), format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(response.data["success"])
        self.assertIn("declined", response.data["error"])
        detail = PaymentDetail.objects.get()
        self.assertEqual(detail.status, PaymentDetail.Status.FAILED)
        self.booking.refresh_from_db()
        self.assertEqual(self.booking.status, Booking.Status.PENDING)

    @override_settings(PAYMENT_GATEWAY_MODE="approve")
    def test_approving_gateway_confirms_booking(self) -> None:
        self._submit()

        response = self.client.post(reverse("payment-process", args=[self.booking.id]), format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertTrue(response.data["success"])
        detail = PaymentDetail.objects.get()
        self.assertEqual(detail.status, PaymentDetail.Status.SUCCESS)
        self.assertTrue(detail.transaction_id.startswith("MOCK-"))
        self.booking.refresh_from_db()
        self.assertEqual(self.booking.status, Booking.Status.CONFIRMED)
        self.assertEqual(self.booking.payment_status, Booking.PaymentStatus.PAID)

    def test_process_without_details(self) -> None:
        response = self.client.post(reverse("payment-process", args=[self.booking.id]), format="json")
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_list_scoped_to_owner(self) -> None:
        self._submit()
        self.client.force_authenticate(self.stranger)
        self.assertEqual(self.client.get(reverse("payment-list")).data["count"], 0)
        self.client.force_authenticate(self.admin)
        self.assertEqual(self.client.get(reverse("payment-list")).data["count"], 1)

    def test_admin_status_override(self) -> None:
        detail_id = self._submit().data["id"]
        url = reverse("payment-detail", args=[detail_id])

        response = self.client.patch(url, {"status": "success"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(self.admin)
        response = self.client.patch(url, {"status": "success"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.booking.refresh_from_db()
        self.assertEqual(self.booking.payment_status, Booking.PaymentStatus.PAID)
        self.assertEqual(self.booking.status, Booking.Status.CONFIRMED)

        self.client.patch(url, {"status": "failed", "error_message": "Chargeback"}, format="json")
        self.booking.refresh_from_db()
        self.assertEqual(self.booking.payment_status, Booking.PaymentStatus.UNPAID)

    def test_client_amount_is_ignored(self) -> None:
        response = self._submit(amount="0.01")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["amount"], "1000.00")
        self.assertEqual(PaymentDetail.objects.get().amount, Decimal("1000.00"))

        approved = ChargeResult(success=True, transaction_id="MOCK-TOTAL")
        with mock.patch.object(MockGateway, "charge", autospec=True, return_value=approved) as charge:
            response = self.client.post(reverse("payment-process", args=[self.booking.id]), format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(charge.call_args.kwargs["amount"], Decimal("1000.00"))
        self.assertEqual(PaymentDetail.objects.get().amount, Decimal("1000.00"))
