"""Tests for the admin image upload endpoint."""

from __future__ import annotations

import shutil
import tempfile
from io import BytesIO
from unittest import mock

from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import override_settings
from django.urls import reverse
from PIL import Image
from rest_framework import status
from rest_framework.test import APITestCase

from apps.catalog.services import InvalidImageError, store_uploaded_image
from apps.users.models import User

MEDIA_ROOT = tempfile.mkdtemp()


def _png_upload(size=(64, 48), name="photo.png") -> SimpleUploadedFile:
    buffer = BytesIO()
    Image.new("RGB", size, (200, 120, 40)).save(buffer, format="PNG")
    return SimpleUploadedFile(name, buffer.getvalue(), content_type="image/png")


@override_settings(MEDIA_ROOT=MEDIA_ROOT, UPLOAD_MAX_IMAGE_DIMENSION=32)
class ImageUploadAPITests(APITestCase):
    @classmethod
    def tearDownClass(cls) -> None:
        shutil.rmtree(MEDIA_ROOT, ignore_errors=True)
        super().tearDownClass()

    def setUp(self) -> None:
        self.admin = User.objects.create_user(
            email="admin@example.com", username="admin", password="StrongPass123", role=User.Role.ADMIN
        )

    def test_admin_uploads_image(self) -> None:
        self.client.force_authenticate(self.admin)
        response = self.client.post(
            reverse("image-upload"),
            {"image": _png_upload(), "folder": "hotels"},
            format="multipart",
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertIn("/media/hotels/", response.data["url"])
        self.assertTrue(response.data["url"].endswith(".jpg"))
        self.assertTrue(response.data["thumbnail_url"].endswith("_thumb.jpg"))
        # Downscaled to the configured maximum dimension
        self.assertEqual((response.data["width"], response.data["height"]), (32, 24))

    def test_rejects_non_image(self) -> None:
        self.client.force_authenticate(self.admin)
        bogus = SimpleUploadedFile("notes.png", b"not an image", content_type="image/png")
        response = self.client.post(reverse("image-upload"), {"image": bogus}, format="multipart")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_requires_admin(self) -> None:
        user = User.objects.create_user(email="u@example.com", username="u", password="StrongPass123")
        self.client.force_authenticate(user)
        response = self.client.post(reverse("image-upload"), {"image": _png_upload()}, format="multipart")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_rejects_decompression_bomb(self) -> None:
        # Anything above twice the pixel limit is refused by Pillow outright
        with mock.patch.object(Image, "MAX_IMAGE_PIXELS", 100):
            with self.assertRaises(InvalidImageError):
                store_uploaded_image(_png_upload(), folder="hotels")

            self.client.force_authenticate(self.admin)
            response = self.client.post(reverse("image-upload"), {"image": _png_upload()}, format="multipart")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
