"""Integration tests for the support chat endpoints."""

from __future__ import annotations

from django.test import override_settings
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient, APITestCase

from apps.chat.models import Conversation, GuestUser, Message
from apps.chat.services import compose_auto_reply, send_auto_reply
from apps.notifications.models import Notification
from apps.users.models import User


class ChatAPITestBase(APITestCase):
    def setUp(self) -> None:
        self.traveller = User.objects.create_user(
            email="traveller@example.com",
            username="traveller",
            password="TravelPass123",
            first_name="Ana",
            last_name="Silva",
        )
        self.other = User.objects.create_user(
            email="other@example.com", username="other", password="OtherPass123"
        )
        self.admin = User.objects.create_user(
            email="admin@example.com", username="admin", password="AdminPass123", role=User.Role.ADMIN
        )
        self.list_url = reverse("conversation-list")

    def _messages_url(self, conversation_id: int) -> str:
        return reverse("conversation-messages", args=[conversation_id])

    def _open_as_user(self, user, **extra):
        self.client.force_authenticate(user)
        payload = {"subject": "Visa question", "message": "Do I need a visa?"}
        payload.update(extra)
        return self.client.post(self.list_url, payload, format="json")


class GuestChatTests(ChatAPITestBase):
    def test_guest_user_is_reused_within_session(self) -> None:
        url = reverse("chat-guest-user")
        payload = {"first_name": "Jo", "last_name": "Doe", "email": "jo@example.com"}

        first = self.client.post(url, payload, format="json")
        second = self.client.post(url, {**payload, "first_name": "Joanna"}, format="json")

        self.assertEqual(first.status_code, status.HTTP_201_CREATED)
        self.assertEqual(second.status_code, status.HTTP_200_OK)
        self.assertEqual(first.data["id"], second.data["id"])
        self.assertEqual(GuestUser.objects.count(), 1)

    def test_guest_livechat_gets_welcome_message(self) -> None:
        response = self.client.post(
            self.list_url,
            {
                "guest_name": "Jo Van Doe",
                "guest_email": "jo@example.com",
                "item_type": "livechat",
                "message": "Hello!",
            },
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        guest = GuestUser.objects.get()
        self.assertEqual(guest.first_name, "Jo")
        self.assertEqual(guest.last_name, "Van Doe")
        self.assertEqual(response.data["guest_user"]["email"], "jo@example.com")
        self.assertFalse(response.data["read_by_admin"])

        messages = self.client.get(self._messages_url(response.data["id"]))
        self.assertEqual(messages.status_code, status.HTTP_200_OK)
        self.assertEqual([m["sender_type"] for m in messages.data], ["guest", "system"])
        self.assertEqual(messages.data[0]["sender_id"], guest.id)

    def test_guest_without_details_rejected(self) -> None:
        response = self.client.post(self.list_url, {"subject": "Hi"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(Conversation.objects.count(), 0)

    def test_guest_sees_only_own_session_conversations(self) -> None:
        created = self.client.post(
            self.list_url, {"guest_name": "Jo", "guest_email": "jo@example.com"}, format="json"
        )
        stranger = APIClient()

        own = self.client.get(self.list_url)
        foreign = stranger.get(reverse("conversation-detail", args=[created.data["id"]]))

        self.assertEqual(own.data["count"], 1)
        self.assertEqual(foreign.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(stranger.get(self.list_url).data["count"], 0)

    def test_guest_cannot_close(self) -> None:
        created = self.client.post(
            self.list_url, {"guest_name": "Jo", "guest_email": "jo@example.com"}, format="json"
        )

        response = self.client.post(reverse("conversation-close", args=[created.data["id"]]))

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class UserChatTests(ChatAPITestBase):
    def test_user_conversation_and_admin_reply(self) -> None:
        created = self._open_as_user(self.traveller)
        self.assertEqual(created.status_code, status.HTTP_201_CREATED, created.data)
        conversation_id = created.data["id"]
        self.assertIsNone(created.data["guest_user"])
        self.assertEqual(created.data["participant_name"], "Ana Silva")

        self.client.force_authenticate(self.admin)
        listed = self.client.get(self.list_url)
        self.assertEqual(listed.data["count"], 1)
        self.assertEqual(self.client.get(reverse("chat-stats")).data["unread_conversations"], 1)

        self.client.get(self._messages_url(conversation_id))
        reply = self.client.post(
            self._messages_url(conversation_id), {"content": "No visa needed."}, format="json"
        )
        self.assertEqual(reply.status_code, status.HTTP_201_CREATED)
        self.assertEqual(reply.data["sender_type"], "admin")
        self.assertEqual(self.client.get(reverse("chat-stats")).data["unread_conversations"], 0)

        conversation = Conversation.objects.get(pk=conversation_id)
        self.assertTrue(conversation.read_by_admin)
        self.assertFalse(conversation.read_by_user)
        notification = Notification.objects.get(user=self.traveller)
        self.assertEqual(notification.title, "New reply: Visa question")

        self.client.force_authenticate(self.traveller)
        self.client.get(self._messages_url(conversation_id))
        conversation.refresh_from_db()
        self.assertTrue(conversation.read_by_user)

    def test_other_user_cannot_read_conversation(self) -> None:
        created = self._open_as_user(self.traveller)
        self.client.force_authenticate(self.other)

        response = self.client.get(self._messages_url(created.data["id"]))

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_pending_conversation_reopens_on_message(self) -> None:
        created = self._open_as_user(self.traveller)
        Conversation.objects.filter(pk=created.data["id"]).update(status=Conversation.Status.PENDING)

        self.client.post(self._messages_url(created.data["id"]), {"content": "Any news?"}, format="json")

        self.assertEqual(Conversation.objects.get(pk=created.data["id"]).status, "open")

    def test_closed_conversation_rejects_messages(self) -> None:
        created = self._open_as_user(self.traveller)
        close = self.client.put(reverse("conversation-close", args=[created.data["id"]]))
        self.assertEqual(close.status_code, status.HTTP_200_OK)
        self.assertEqual(close.data["status"], "closed")

        response = self.client.post(
            self._messages_url(created.data["id"]), {"content": "One more thing"}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(Message.objects.filter(conversation_id=created.data["id"]).count(), 1)

    def test_admin_lists_closed_with_status_filter(self) -> None:
        created = self._open_as_user(self.traveller)
        Conversation.objects.filter(pk=created.data["id"]).update(status=Conversation.Status.CLOSED)
        self.client.force_authenticate(self.admin)

        self.assertEqual(self.client.get(self.list_url).data["count"], 0)
        self.assertEqual(self.client.get(self.list_url, {"status": "closed"}).data["count"], 1)

    def test_attachment_requires_file_url(self) -> None:
        created = self._open_as_user(self.traveller)

        response = self.client.post(
            self._messages_url(created.data["id"]),
            {"content": "passport scan", "message_type": "image"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("file_url", response.data)

    def test_stats_admin_only(self) -> None:
        self.client.force_authenticate(self.traveller)

        response = self.client.get(reverse("chat-stats"))

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    @override_settings(CHAT_SUPPORT_WHATSAPP_URL="https://wa.me/15550100")
    def test_welcome_message_includes_support_link(self) -> None:
        self.client.force_authenticate(None)
        created = self.client.post(
            self.list_url,
            {"guest_name": "Jo", "guest_email": "jo@example.com", "item_type": "livechat"},
            format="json",
        )

        welcome = Message.objects.get(conversation_id=created.data["id"])

        self.assertEqual(welcome.sender_type, "system")
        self.assertIn("https://wa.me/15550100", welcome.content)


class AutoReplyTests(ChatAPITestBase):
    def test_user_message_gets_holding_reply(self) -> None:
        created = self._open_as_user(self.traveller)
        conversation_id = created.data["id"]
        self.client.force_authenticate(self.admin)
        self.client.get(self._messages_url(conversation_id))

        self.client.force_authenticate(self.traveller)
        with self.captureOnCommitCallbacks(execute=True):
            response = self.client.post(
                self._messages_url(conversation_id), {"content": "Any update?"}, format="json"
            )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        messages = list(Message.objects.filter(conversation_id=conversation_id).order_by("id"))
        self.assertEqual([m.sender_type for m in messages], ["user", "user", "system"])
        self.assertIn("Please hold while we connect you", messages[-1].content)
        conversation = Conversation.objects.get(pk=conversation_id)
        self.assertEqual(conversation.status, "open")
        self.assertFalse(conversation.read_by_admin)

    @override_settings(CHAT_SUPPORT_WHATSAPP_URL="https://wa.me/15550100")
    def test_later_messages_routed_by_keyword(self) -> None:
        created = self.client.post(
            self.list_url,
            {"guest_name": "Jo", "guest_email": "jo@example.com", "item_type": "livechat", "message": "Hi"},
            format="json",
        )

        with self.captureOnCommitCallbacks(execute=True):
            self.client.post(
                self._messages_url(created.data["id"]), {"content": "Can I get a REFUND?"}, format="json"
            )

        reply = Message.objects.filter(conversation_id=created.data["id"]).latest("id")
        self.assertEqual(reply.sender_type, "system")
        self.assertIn("cancellations or refunds", reply.content)
        self.assertIn("https://wa.me/15550100", reply.content)

    def test_admin_messages_get_no_reply(self) -> None:
        created = self._open_as_user(self.traveller)
        self.client.force_authenticate(self.admin)

        with self.captureOnCommitCallbacks(execute=True) as callbacks:
            self.client.post(self._messages_url(created.data["id"]), {"content": "Hello!"}, format="json")

        self.assertEqual(callbacks, [])
        self.assertEqual(Message.objects.filter(conversation_id=created.data["id"]).count(), 2)

    @override_settings(CHAT_AUTO_REPLY_ENABLED=False)
    def test_auto_reply_can_be_switched_off(self) -> None:
        created = self._open_as_user(self.traveller)

        with self.captureOnCommitCallbacks(execute=True):
            self.client.post(self._messages_url(created.data["id"]), {"content": "Hello?"}, format="json")

        self.assertEqual(Message.objects.filter(conversation_id=created.data["id"]).count(), 2)

    def test_closed_conversation_gets_no_reply(self) -> None:
        created = self._open_as_user(self.traveller)
        message = Message.objects.get(conversation_id=created.data["id"])
        Conversation.objects.filter(pk=created.data["id"]).update(status=Conversation.Status.CLOSED)

        self.assertIsNone(send_auto_reply(message))
        self.assertEqual(Message.objects.filter(conversation_id=created.data["id"]).count(), 1)

    def test_compose_auto_reply(self) -> None:
        self.assertIn("Please hold", compose_auto_reply("cruise cabins?", message_count=1))
        self.assertIn("cruise specialists", compose_auto_reply("cruise cabins?", message_count=3))
        self.assertIn("pricing", compose_auto_reply("Any discount for kids?", message_count=5))
        self.assertIn("reviewing your inquiry", compose_auto_reply("Hello again", message_count=5))
