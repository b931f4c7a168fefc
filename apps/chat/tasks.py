"""Celery tasks for support chat."""

from __future__ import annotations

import logging

from celery import shared_task  # type: ignore

from .models import Message

logger = logging.getLogger(__name__)


@shared_task(name="chat.send_auto_reply")
def send_auto_reply(message_id: int) -> bool:
    """Answer a visitor message with a holding reply until an agent joins."""
    try:
        message = Message.objects.select_related("conversation").get(id=message_id)
    except Message.DoesNotExist:
        logger.error(f"Message {message_id} not found for auto-reply")
        return False

    from .services import send_auto_reply as post_auto_reply

    reply = post_auto_reply(message)
    if reply is None:
        return False
    logger.info(f"[CHAT] Auto-reply {reply.pk} sent to conversation {message.conversation_id}")
    return True
