"""API tests for profile and admin user listing."""

from __future__ import annotations

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.users.models import User


class UserAPITests(APITestCase):
    def setUp(self) -> None:
        self.user = User.objects.create_user(
            email="user@example.com",
            username="user",
            password="StrongPass123",
            first_name="Una",
            last_name="Reyes",
        )
        self.admin = User.objects.create_user(
            email="admin@example.com",
            username="admin",
            password="StrongPass123",
            role=User.Role.ADMIN,
        )

    def test_me_returns_profile(self) -> None:
        self.client.force_authenticate(self.user)
        response = self.client.get(reverse("user-me"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["full_name"], "Una Reyes")

    def test_me_patch_cannot_change_role(self) -> None:
        self.client.force_authenticate(self.user)
        response = self.client.patch(
            reverse("user-me"),
            {"phone_number": "+15551234567", "role": "admin"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.user.refresh_from_db()
        self.assertEqual(self.user.phone_number, "+15551234567")
        self.assertEqual(self.user.role, User.Role.USER)

    def test_user_list_requires_admin(self) -> None:
        self.client.force_authenticate(self.user)
        response = self.client.get(reverse("user-list"))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(self.admin)
        response = self.client.get(reverse("user-list"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["count"], 2)

    def test_anonymous_me_is_unauthorized(self) -> None:
        response = self.client.get(reverse("user-me"))
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
