"""Tests for notification delivery and the notifications API."""

from __future__ import annotations

from smtplib import SMTPException
from unittest import mock

from django.core import mail
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.notifications.models import Notification
from apps.notifications.services import notify_user, send_email_notification
from apps.users.models import User


class NotificationServiceTests(APITestCase):
    def setUp(self) -> None:
        self.user = User.objects.create_user(
            email="traveller@example.com", username="traveller", password="TravelPass123"
        )

    def test_notify_user_with_email(self) -> None:
        result = notify_user(self.user, "Trip updated", "Your pickup time changed.", email=True)

        self.assertEqual(result, {"email": True, "in_app": True})
        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].subject, "Trip updated")
        self.assertEqual(mail.outbox[0].body, "Your pickup time changed.")
        self.assertEqual(Notification.objects.get().title, "Trip updated")

    def test_notify_user_in_app_only_by_default(self) -> None:
        result = notify_user(self.user, "Hello", "Welcome aboard")

        self.assertEqual(result, {"email": False, "in_app": True})
        self.assertEqual(len(mail.outbox), 0)

    def test_html_message_gets_plain_text_alternative(self) -> None:
        sent = send_email_notification(
            "guest@example.com", "Hi", None, {}, html_message="<p>Hello <b>there</b></p>"
        )

        self.assertTrue(sent)
        self.assertEqual(mail.outbox[0].body, "Hello there")
        self.assertEqual(mail.outbox[0].alternatives[0][1], "text/html")

    def test_mail_failure_is_reported_not_raised(self) -> None:
        with mock.patch("apps.notifications.services.send_mail", side_effect=SMTPException("down")):
            sent = send_email_notification("guest@example.com", "Hi", None, {"message": "x"})

        self.assertFalse(sent)


class NotificationAPITests(APITestCase):
    def setUp(self) -> None:
        self.user = User.objects.create_user(
            email="traveller@example.com", username="traveller", password="TravelPass123"
        )
        self.other = User.objects.create_user(
            email="other@example.com", username="other", password="OtherPass123"
        )
        self.first = Notification.objects.create(user=self.user, title="One", message="First")
        Notification.objects.create(user=self.user, title="Two", message="Second")
        self.foreign = Notification.objects.create(user=self.other, title="Theirs", message="Hidden")
        self.list_url = reverse("notification-list")
        self.client.force_authenticate(self.user)

    def test_list_only_own(self) -> None:
        response = self.client.get(self.list_url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual({n["title"] for n in response.data["results"]}, {"One", "Two"})

    def test_mark_read_and_filter(self) -> None:
        response = self.client.post(reverse("notification-mark-read", args=[self.first.id]))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.first.refresh_from_db()
        self.assertTrue(self.first.is_read)
        unread = self.client.get(self.list_url, {"is_read": "false"})
        self.assertEqual([n["title"] for n in unread.data["results"]], ["Two"])

    def test_cannot_mark_someone_elses_notification(self) -> None:
        response = self.client.post(reverse("notification-mark-read", args=[self.foreign.id]))

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_mark_all_read(self) -> None:
        response = self.client.post(reverse("notification-mark-all-read"))

        self.assertEqual(response.data, {"updated": 2})
        self.assertFalse(Notification.objects.filter(user=self.user, is_read=False).exists())
        self.assertFalse(Notification.objects.get(pk=self.foreign.pk).is_read)

    def test_requires_login(self) -> None:
        self.client.force_authenticate(None)

        self.assertEqual(self.client.get(self.list_url).status_code, status.HTTP_401_UNAUTHORIZED)
