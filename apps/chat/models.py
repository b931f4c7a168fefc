"""Chat domain models for TravelEase.

Provides support messaging between travellers and the TravelEase team.
A conversation belongs either to a registered user or to an anonymous
``GuestUser`` identified by the browser session, and may point at the
catalog item it is about.
"""

from __future__ import annotations

from django.conf import settings
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class GuestUser(models.Model):
    """Anonymous chat visitor tied to a Django session."""

    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100, blank=True)
    email = models.EmailField()
    phone_number = models.CharField(max_length=32, blank=True)
    session_key = models.CharField(max_length=40, unique=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"{self.full_name} <{self.email}>"

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class Conversation(models.Model):
    """A support thread opened by a user or a guest visitor."""

    class Status(models.TextChoices):
        OPEN = "open", _("Open")
        PENDING = "pending", _("Pending")
        CLOSED = "closed", _("Closed")

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="conversations",
    )
    guest_user = models.ForeignKey(
        GuestUser,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="conversations",
    )

    # Optional context: a catalog item, or "inquiry" / "livechat"
    item_type = models.CharField(max_length=30, default="inquiry")
    item_id = models.PositiveIntegerField(default=0)
    subject = models.CharField(max_length=255, default="General Inquiry")

    status = models.CharField(max_length=20, choices=Status.choices, default=Status.OPEN)
    last_message_at = models.DateTimeField(null=True, blank=True)
    read_by_user = models.BooleanField(default=True)
    read_by_admin = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-updated_at"]
        constraints = [
            models.CheckConstraint(
                check=models.Q(user__isnull=False) | models.Q(guest_user__isnull=False),
                name="conversation_has_participant",
            ),
        ]
        indexes = [
            models.Index(fields=["status", "-updated_at"]),
            models.Index(fields=["read_by_admin"]),
        ]

    def __str__(self) -> str:
        return f"Conversation #{self.pk}: {self.subject}"

    @property
    def participant_name(self) -> str:
        if self.user_id:
            return self.user.full_name
        if self.guest_user_id:
            return self.guest_user.full_name
        return ""

    @property
    def is_closed(self) -> bool:
        return self.status == self.Status.CLOSED

    def close(self) -> None:
        self.status = self.Status.CLOSED
        self.save(update_fields=["status", "updated_at"])


class Message(models.Model):
    """A single chat message within a conversation."""

    class SenderType(models.TextChoices):
        USER = "user", _("User")
        GUEST = "guest", _("Guest")
        ADMIN = "admin", _("Admin")
        SYSTEM = "system", _("System")

    class MessageType(models.TextChoices):
        TEXT = "text", _("Text")
        IMAGE = "image", _("Image")
        FILE = "file", _("File")

    conversation = models.ForeignKey(
        Conversation, on_delete=models.CASCADE, related_name="messages"
    )
    # Id of the user or guest who wrote the message; 0 for system messages
    sender_id = models.PositiveIntegerField(default=0)
    sender_type = models.CharField(max_length=10, choices=SenderType.choices)
    content = models.TextField()
    message_type = models.CharField(
        max_length=10, choices=MessageType.choices, default=MessageType.TEXT
    )
    file_url = models.URLField(max_length=500, blank=True)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["created_at", "id"]
        indexes = [models.Index(fields=["conversation", "created_at"])]

    def __str__(self) -> str:
        return f"{self.sender_type} #{self.sender_id} in {self.conversation_id}: {self.content[:30]}"
