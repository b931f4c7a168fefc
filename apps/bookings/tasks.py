"""Celery tasks for the booking domain."""

from __future__ import annotations

import logging
from datetime import timedelta

from celery import shared_task  # type: ignore
from django.conf import settings  # type: ignore
from django.db import transaction  # type: ignore
from django.utils import timezone  # type: ignore

from .models import Booking

logger = logging.getLogger(__name__)


# ============================================================================
# PERIODIC TASKS (scheduled by Celery Beat, see config/celery.py)
# ============================================================================

@shared_task(name="bookings.cancel_stale_unpaid_bookings")
def cancel_stale_unpaid_bookings() -> dict[str, int]:
    """
    Cancel pending bookings that stayed unpaid for too long.

    Bookings older than ``BOOKING_UNPAID_TTL_HOURS`` whose payment never
    went through are cancelled with a system reason.

    Returns:
        dict: {"cancelled": number of cancelled bookings}
    """
    cutoff = timezone.now() - timedelta(hours=settings.BOOKING_UNPAID_TTL_HOURS)
    cancelled_count = 0

    stale_bookings = Booking.objects.filter(
        status=Booking.Status.PENDING,
        payment_status=Booking.PaymentStatus.UNPAID,
        created_at__lte=cutoff,
    ).select_related("user")

    for booking in stale_bookings:
        try:
            with transaction.atomic():
                booking.mark_cancelled("Payment not received in time")
            notify_booking_cancelled.delay(booking.id)
            cancelled_count += 1
            logger.info(f"Booking {booking.confirmation_code} cancelled automatically (unpaid)")
        except Exception as e:
            logger.error(f"Error cancelling stale booking {booking.id}: {e}", exc_info=True)

    if cancelled_count > 0:
        logger.info(f"Cancelled {cancelled_count} stale unpaid bookings")

    return {"cancelled": cancelled_count}


@shared_task(name="bookings.complete_finished_bookings")
def complete_finished_bookings() -> dict[str, int]:
    """
    Mark confirmed bookings as completed once their end date has passed.

    Returns:
        dict: {"completed": number of completed bookings}
    """
    today = timezone.localdate()
    completed_count = 0

    finished = Booking.objects.filter(
        status=Booking.Status.CONFIRMED,
        end_date__lt=today,
    )

    for booking in finished:
        try:
            booking.mark_completed()
            completed_count += 1
            logger.info(f"Booking {booking.confirmation_code} completed")
        except Exception as e:
            logger.error(f"Error completing booking {booking.id}: {e}", exc_info=True)

    if completed_count > 0:
        logger.info(f"Completed {completed_count} bookings")

    return {"completed": completed_count}


@shared_task(name="bookings.send_upcoming_booking_reminders")
def send_upcoming_booking_reminders() -> dict[str, int]:
    """
    Remind travellers about confirmed bookings that start tomorrow.

    Runs every 6 hours; a booking is reminded once, tracked through the
    ``reminder_sent_at`` timestamp.

    Returns:
        dict: {"sent": number of reminders queued}
    """
    tomorrow = timezone.localdate() + timedelta(days=1)
    sent_count = 0

    upcoming = Booking.objects.filter(
        status=Booking.Status.CONFIRMED,
        start_date=tomorrow,
        reminder_sent_at__isnull=True,
    )

    for booking in upcoming:
        try:
            notify_booking_reminder.delay(booking.id)
            booking.reminder_sent_at = timezone.now()
            booking.save(update_fields=["reminder_sent_at"])
            sent_count += 1
        except Exception as e:
            logger.error(f"Error sending reminder for booking {booking.id}: {e}", exc_info=True)

    if sent_count > 0:
        logger.info(f"Sent {sent_count} booking reminders")

    return {"sent": sent_count}


# ============================================================================
# NOTIFICATION TASKS
# ============================================================================

@shared_task(name="bookings.notify_booking_confirmed")
def notify_booking_confirmed(booking_id: int) -> bool:
    """E-mail and in-app notice after a successful payment."""
    try:
        booking = Booking.objects.select_related("user").get(id=booking_id)
    except Booking.DoesNotExist:
        logger.error(f"Booking {booking_id} not found for confirmation notification")
        return False

    from apps.notifications.services import create_in_app_notification, send_booking_confirmation_email

    send_booking_confirmation_email(booking)
    create_in_app_notification(
        user=booking.user,
        title=f"Booking {booking.confirmation_code} confirmed",
        message=f"Your booking for {booking.item_name} on {booking.start_date:%d %b %Y} is confirmed.",
    )
    logger.info(f"[NOTIFICATION] Booking confirmed notifications sent: {booking.confirmation_code}")
    return True


@shared_task(name="bookings.notify_booking_cancelled")
def notify_booking_cancelled(booking_id: int) -> bool:
    try:
        booking = Booking.objects.select_related("user").get(id=booking_id)
    except Booking.DoesNotExist:
        logger.error(f"Booking {booking_id} not found for cancellation notification")
        return False

    from apps.notifications.services import create_in_app_notification, send_booking_cancellation_email

    send_booking_cancellation_email(booking)
    create_in_app_notification(
        user=booking.user,
        title=f"Booking {booking.confirmation_code} cancelled",
        message=f"Your booking for {booking.item_name} has been cancelled.",
    )
    logger.info(f"[NOTIFICATION] Booking cancelled: {booking.confirmation_code}")
    return True


@shared_task(name="bookings.notify_booking_reminder")
def notify_booking_reminder(booking_id: int) -> bool:
    try:
        booking = Booking.objects.select_related("user").get(id=booking_id)
    except Booking.DoesNotExist:
        logger.error(f"Booking {booking_id} not found for reminder notification")
        return False

    from apps.notifications.services import create_in_app_notification, send_booking_reminder_email

    send_booking_reminder_email(booking)
    create_in_app_notification(
        user=booking.user,
        title="Your trip starts tomorrow",
        message=f"{booking.item_name} starts on {booking.start_date:%d %b %Y}. Have a great trip!",
    )
    logger.info(f"[NOTIFICATION] Reminder sent for booking {booking.confirmation_code}")
    return True
