"""Integration tests for review endpoints and rating aggregation."""

from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal

from django.test import override_settings
from django.urls import reverse
from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.test import APIRequestFactory, APITestCase

from apps.bookings.models import Booking
from apps.catalog.tests.factories import make_destination, make_hotel, make_package
from apps.reviews.models import Review
from apps.reviews.serializers import ReviewCreateSerializer
from apps.users.models import User


class ReviewAPITestBase(APITestCase):
    def setUp(self) -> None:
        self.author = User.objects.create_user(
            email="author@example.com", username="author", password="AuthorPass123"
        )
        self.second = User.objects.create_user(
            email="second@example.com", username="second", password="SecondPass123"
        )
        self.admin = User.objects.create_user(
            email="admin@example.com", username="admin", password="AdminPass123", role=User.Role.ADMIN
        )
        destination = make_destination()
        self.package = make_package(destination)
        self.hotel = make_hotel(destination)
        self.list_url = reverse("review-list")

    def _review(self, user, item_type: str, item_id: int, rating: int = 5, **extra):
        self.client.force_authenticate(user)
        payload = {
            "item_type": item_type,
            "item_id": item_id,
            "rating": rating,
            "title": "Great trip",
            "comment": "Everything went smoothly.",
        }
        payload.update(extra)
        return self.client.post(self.list_url, payload, format="json")


class ReviewCreateTests(ReviewAPITestBase):
    def test_create_review_updates_package_rating(self) -> None:
        self._review(self.author, "package", self.package.id, rating=5)
        response = self._review(self.second, "package", self.package.id, rating=4)

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["status"], "approved")
        self.assertEqual(response.data["user"]["username"], "second")
        self.package.refresh_from_db()
        self.assertEqual(self.package.rating, Decimal("4.50"))
        self.assertEqual(self.package.review_count, 2)

    def test_hotel_reviews_feed_guest_score_not_stars(self) -> None:
        self._review(self.author, "hotel", self.hotel.id, rating=4)
        self._review(self.second, "hotel", self.hotel.id, rating=5)

        self.hotel.refresh_from_db()
        self.assertEqual(self.hotel.rating, 4)
        self.assertEqual(self.hotel.user_rating, Decimal("9.0"))
        self.assertEqual(self.hotel.review_count, 2)

    def test_duplicate_review_rejected(self) -> None:
        self._review(self.author, "package", self.package.id)

        response = self._review(self.author, "package", self.package.id, rating=1)

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("non_field_errors", response.data)
        self.assertEqual(Review.objects.count(), 1)

    def test_duplicate_that_slips_past_validation_is_rejected(self) -> None:
        request = APIRequestFactory().post(self.list_url)
        request.user = self.author
        payload = {
            "item_type": "package", "item_id": self.package.id, "rating": 4, "title": "Twice", "comment": "Again.",
        }
        serializer = ReviewCreateSerializer(data=payload, context={"request": request})
        self.assertTrue(serializer.is_valid(), serializer.errors)

        # A second request wins the race between validation and insert
        Review.objects.create(user=self.author, item_type="package", item_id=self.package.id, rating=5)

        with self.assertRaises(ValidationError) as ctx:
            serializer.create(dict(serializer.validated_data))
        self.assertIn("non_field_errors", ctx.exception.detail)
        self.assertEqual(Review.objects.filter(user=self.author).count(), 1)

    def test_unknown_item_rejected(self) -> None:
        response = self._review(self.author, "package", 9999)

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("item_id", response.data)

    def test_rating_out_of_range_rejected(self) -> None:
        response = self._review(self.author, "package", self.package.id, rating=6)

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("rating", response.data)

    def test_verified_when_traveller_has_confirmed_booking(self) -> None:
        start = date.today() - timedelta(days=10)
        Booking.objects.create(
            user=self.author,
            booking_type="package",
            item_id=self.package.id,
            start_date=start,
            end_date=start + timedelta(days=3),
            status=Booking.Status.COMPLETED,
            payment_status=Booking.PaymentStatus.PAID,
            total_price=Decimal("500.00"),
        )

        verified = self._review(self.author, "package", self.package.id)
        unverified = self._review(self.second, "package", self.package.id)

        self.assertTrue(verified.data["verified"])
        self.assertFalse(unverified.data["verified"])

    def test_anonymous_cannot_review(self) -> None:
        response = self.client.post(
            self.list_url,
            {"item_type": "package", "item_id": self.package.id, "rating": 5, "title": "x", "comment": "y"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class ReviewModerationTests(ReviewAPITestBase):
    @override_settings(REVIEWS_REQUIRE_MODERATION=True)
    def test_pending_reviews_hidden_until_approved(self) -> None:
        created = self._review(self.author, "package", self.package.id, rating=2)
        self.assertEqual(created.data["status"], "pending")
        self.package.refresh_from_db()
        self.assertEqual(self.package.review_count, 0)

        self.client.force_authenticate(None)
        public = self.client.get(self.list_url, {"item_type": "package", "item_id": self.package.id})
        self.assertEqual(public.data["count"], 0)

        self.client.force_authenticate(self.author)
        own = self.client.get(self.list_url)
        self.assertEqual(own.data["count"], 1)

        self.client.force_authenticate(self.admin)
        approve = self.client.patch(
            reverse("review-detail", args=[created.data["id"]]), {"status": "approved"}, format="json"
        )
        self.assertEqual(approve.status_code, status.HTTP_200_OK)
        self.package.refresh_from_db()
        self.assertEqual(self.package.rating, Decimal("2.00"))
        self.assertEqual(self.package.review_count, 1)

    def test_admin_response_sets_response_date(self) -> None:
        created = self._review(self.author, "package", self.package.id)
        self.client.force_authenticate(self.admin)

        response = self.client.patch(
            reverse("review-detail", args=[created.data["id"]]),
            {"response": "Thanks for travelling with us!"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["response"], "Thanks for travelling with us!")
        self.assertIsNotNone(response.data["response_date"])

    def test_author_cannot_edit_or_delete(self) -> None:
        created = self._review(self.author, "package", self.package.id)
        detail_url = reverse("review-detail", args=[created.data["id"]])

        self.assertEqual(
            self.client.patch(detail_url, {"rating": 1}, format="json").status_code,
            status.HTTP_403_FORBIDDEN,
        )
        self.assertEqual(self.client.delete(detail_url).status_code, status.HTTP_403_FORBIDDEN)

    def test_admin_delete_recomputes_rating(self) -> None:
        first = self._review(self.author, "package", self.package.id, rating=5)
        self._review(self.second, "package", self.package.id, rating=3)
        self.client.force_authenticate(self.admin)

        response = self.client.delete(reverse("review-detail", args=[first.data["id"]]))

        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.package.refresh_from_db()
        self.assertEqual(self.package.rating, Decimal("3.00"))
        self.assertEqual(self.package.review_count, 1)

    def test_admin_filters_by_status(self) -> None:
        self._review(self.author, "package", self.package.id)
        Review.objects.update(status=Review.Status.REJECTED)
        self._review(self.second, "package", self.package.id)
        self.client.force_authenticate(self.admin)

        response = self.client.get(self.list_url, {"status": "rejected"})

        self.assertEqual(response.data["count"], 1)
        self.assertEqual(response.data["results"][0]["user"]["username"], "author")


class ReviewHelpfulTests(ReviewAPITestBase):
    def test_helpful_vote_increments(self) -> None:
        created = self._review(self.author, "package", self.package.id)
        url = reverse("review-helpful", args=[created.data["id"]])

        self.client.force_authenticate(self.second)
        self.client.post(url)
        response = self.client.post(url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["helpful_votes"], 2)

    def test_helpful_requires_login(self) -> None:
        created = self._review(self.author, "package", self.package.id)
        self.client.force_authenticate(None)

        response = self.client.post(reverse("review-helpful", args=[created.data["id"]]))

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
