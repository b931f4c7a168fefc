"""Chat services: guest identification, posting messages, read tracking."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from django.conf import settings  # type: ignore
from django.db import transaction  # type: ignore

from apps.notifications.services import create_in_app_notification
from apps.users.permissions import is_platform_admin

from .models import Conversation, GuestUser, Message

if TYPE_CHECKING:
    from rest_framework.request import Request

logger = logging.getLogger(__name__)


class ConversationClosedError(Exception):
    """Raised when posting to a conversation that has been closed."""


# =============================================================================
# GUEST VISITORS
# =============================================================================


def get_session_key(request: "Request", *, create: bool = False) -> str | None:
    session = request.session
    if session.session_key is None and create:
        session.save()
    return session.session_key


def get_session_guest(request: "Request") -> GuestUser | None:
    session_key = get_session_key(request)
    if not session_key:
        return None
    return GuestUser.objects.filter(session_key=session_key).first()


def get_or_create_session_guest(
    request: "Request",
    *,
    first_name: str,
    last_name: str = "",
    email: str,
    phone_number: str = "",
) -> tuple[GuestUser, bool]:
    """Return the session's guest, creating it from the given details once."""
    session_key = get_session_key(request, create=True)
    guest, created = GuestUser.objects.get_or_create(
        session_key=session_key,
        defaults={
            "first_name": first_name,
            "last_name": last_name,
            "email": email,
            "phone_number": phone_number,
        },
    )
    request.session["chat_guest_id"] = guest.pk
    if created:
        logger.info(f"Guest user {guest.pk} created for chat session")
    return guest, created


def split_guest_name(name: str) -> tuple[str, str]:
    first, _, last = name.strip().partition(" ")
    return first or name, last.strip()


# =============================================================================
# ACCESS
# =============================================================================


def can_access(request: "Request", conversation: Conversation) -> bool:
    user = request.user
    if is_platform_admin(user):
        return True
    if user.is_authenticated:
        return conversation.user_id == user.id
    guest = get_session_guest(request)
    return guest is not None and conversation.guest_user_id == guest.id


def conversations_for(request: "Request"):
    """Conversations visible to the requester."""
    user = request.user
    qs = Conversation.objects.select_related("user", "guest_user")
    if is_platform_admin(user):
        return qs
    if user.is_authenticated:
        return qs.filter(user=user)
    guest = get_session_guest(request)
    if guest is None:
        return qs.none()
    return qs.filter(guest_user=guest)


def sender_for(request: "Request", conversation: Conversation) -> tuple[int, str]:
    user = request.user
    if user.is_authenticated:
        sender_type = Message.SenderType.ADMIN if is_platform_admin(user) else Message.SenderType.USER
        return user.id, sender_type
    return conversation.guest_user_id or 0, Message.SenderType.GUEST


# =============================================================================
# MESSAGES
# =============================================================================


@transaction.atomic
def post_message(
    conversation: Conversation,
    *,
    sender_id: int,
    sender_type: str,
    content: str,
    message_type: str = Message.MessageType.TEXT,
    file_url: str = "",
) -> Message:
    """Append a message and update the conversation's read flags.

    A pending conversation is reopened; a closed one rejects the message.
    Replies from the team are surfaced to registered users as in-app
    notifications.
    """
    conversation = Conversation.objects.select_for_update().get(pk=conversation.pk)
    if conversation.is_closed:
        raise ConversationClosedError("This conversation has been closed.")

    message = Message.objects.create(
        conversation=conversation,
        sender_id=sender_id,
        sender_type=sender_type,
        content=content,
        message_type=message_type,
        file_url=file_url,
    )

    conversation.last_message_at = message.created_at
    if sender_type in (Message.SenderType.ADMIN, Message.SenderType.SYSTEM):
        conversation.read_by_user = False
    if sender_type == Message.SenderType.ADMIN:
        conversation.read_by_admin = True
    elif sender_type != Message.SenderType.SYSTEM:
        conversation.read_by_admin = False
    if conversation.status == Conversation.Status.PENDING:
        conversation.status = Conversation.Status.OPEN
    conversation.save(
        update_fields=["last_message_at", "read_by_user", "read_by_admin", "status", "updated_at"]
    )

    if sender_type == Message.SenderType.ADMIN and conversation.user_id:
        create_in_app_notification(
            conversation.user,
            f"New reply: {conversation.subject}",
            content[:200],
        )

    logger.info(f"Message {message.pk} ({sender_type}) posted to conversation {conversation.pk}")
    return message


def send_welcome_message(conversation: Conversation) -> Message:
    content = settings.CHAT_WELCOME_MESSAGE
    if settings.CHAT_SUPPORT_WHATSAPP_URL:
        content = f"{content}\n\nFor immediate assistance: {settings.CHAT_SUPPORT_WHATSAPP_URL}"
    return post_message(
        conversation, sender_id=0, sender_type=Message.SenderType.SYSTEM, content=content
    )


# =============================================================================
# AUTO-REPLY
# =============================================================================

AUTO_REPLY_GREETING = (
    "Thank you for contacting TravelEase! Please hold while we connect you with a travel "
    "specialist. One of our agents will be with you shortly.",
    "For immediate assistance",
)

# Checked in order; the first rule with a keyword found in the message wins.
AUTO_REPLY_RULES = (
    (
        ("book", "reservation"),
        "Thanks for your interest in booking with us! Our agents are currently assisting other "
        "customers. Please hold and an agent will help you complete your reservation shortly.",
        "For immediate booking assistance",
    ),
    (
        ("cancel", "refund"),
        "I understand you have a question about cancellations or refunds. Our customer service "
        "team will be with you shortly to address your concerns.",
        "For immediate assistance with your booking",
    ),
    (
        ("price", "cost", "discount"),
        "Thank you for your inquiry about pricing. Our travel specialists will be with you shortly "
        "to provide detailed pricing information and any available discounts.",
        "For immediate pricing questions",
    ),
    (
        ("package", "tour"),
        "Thank you for your interest in our travel packages! Our team will be with you shortly to "
        "help you find the perfect tour package for your needs.",
        "For immediate assistance with packages",
    ),
    (
        ("hotel", "accommodation", "room"),
        "Thank you for your interest in our hotel accommodations! Our hotel specialists will be "
        "with you shortly to help you find the perfect stay.",
        "For immediate assistance with accommodations",
    ),
    (
        ("cruise", "ship", "cabin"),
        "Thank you for your interest in our cruise offerings! Our cruise specialists will be with "
        "you shortly to help you find the perfect voyage.",
        "For immediate assistance with cruise bookings",
    ),
    (
        ("payment", "pay", "card"),
        "Thank you for your inquiry about payment options. Our payment specialists will be with "
        "you shortly to assist with your transaction.",
        "For immediate assistance with payments",
    ),
    (
        ("itinerary", "schedule", "plan"),
        "Thank you for your inquiry about travel itineraries. Our travel planners will be with you "
        "shortly to help you plan your perfect trip.",
        "For immediate itinerary assistance",
    ),
)

AUTO_REPLY_FALLBACK = (
    "Thank you for your message. Our team is reviewing your inquiry and will respond shortly. "
    "We appreciate your patience.",
    "For immediate assistance",
)


def compose_auto_reply(text: str, *, message_count: int) -> str:
    """Pick the holding reply for a visitor message.

    Fresh conversations (the first message plus at most one reply) get the
    greeting; later messages are routed by keyword.
    """
    if message_count <= 2:
        body, lead = AUTO_REPLY_GREETING
    else:
        lowered = text.lower()
        body, lead = AUTO_REPLY_FALLBACK
        for keywords, rule_body, rule_lead in AUTO_REPLY_RULES:
            if any(keyword in lowered for keyword in keywords):
                body, lead = rule_body, rule_lead
                break
    if settings.CHAT_SUPPORT_WHATSAPP_URL:
        return f"{body}\n\n{lead}, reach us on WhatsApp: {settings.CHAT_SUPPORT_WHATSAPP_URL}"
    return body


def needs_auto_reply(sender_type: str) -> bool:
    return settings.CHAT_AUTO_REPLY_ENABLED and sender_type in (
        Message.SenderType.USER,
        Message.SenderType.GUEST,
    )


def schedule_auto_reply(message: Message) -> None:
    """Queue the holding reply once the visitor's message is committed."""
    from . import tasks

    message_id = message.pk

    def _queue() -> None:
        try:
            tasks.send_auto_reply.apply_async(
                args=[message_id], countdown=settings.CHAT_AUTO_REPLY_DELAY_SECONDS
            )
        except Exception as exc:
            logger.warning(f"Could not queue auto-reply for message {message_id}: {exc}")

    transaction.on_commit(_queue)


def send_auto_reply(message: Message) -> Message | None:
    """Post the holding reply for a visitor message.

    Returns None when the conversation was closed in the meantime. The
    conversation stays flagged for the team until an agent reads it.
    """
    conversation = message.conversation
    message_count = conversation.messages.count()
    content = compose_auto_reply(message.content, message_count=message_count)
    try:
        reply = post_message(
            conversation, sender_id=0, sender_type=Message.SenderType.SYSTEM, content=content
        )
    except ConversationClosedError:
        logger.info(f"Skipped auto-reply for closed conversation {conversation.pk}")
        return None
    Conversation.objects.filter(pk=conversation.pk).update(
        status=Conversation.Status.OPEN, read_by_admin=False
    )
    return reply


def mark_read(conversation: Conversation, *, by_admin: bool) -> None:
    field = "read_by_admin" if by_admin else "read_by_user"
    Conversation.objects.filter(pk=conversation.pk).update(**{field: True})
    setattr(conversation, field, True)


def close_conversation(conversation: Conversation) -> Conversation:
    if not conversation.is_closed:
        conversation.close()
        logger.info(f"Conversation {conversation.pk} closed")
    return conversation


def unread_for_admin_count() -> int:
    return Conversation.objects.filter(read_by_admin=False).count()

