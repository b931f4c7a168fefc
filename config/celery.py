import os

from celery import Celery
from celery.schedules import crontab  # type: ignore

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings.dev")

app = Celery("travelease")

app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()


# ============================================================================
# CELERY BEAT SCHEDULE (Periodic Tasks)
# ============================================================================

app.conf.beat_schedule = {
    # Cancel bookings left unpaid past the hold window - every 15 minutes
    "cancel-stale-unpaid-bookings": {
        "task": "bookings.cancel_stale_unpaid_bookings",
        "schedule": crontab(minute="*/15"),
        "options": {"expires": 600},
    },
    # Mark confirmed bookings as completed once their end date passes - hourly
    "complete-finished-bookings": {
        "task": "bookings.complete_finished_bookings",
        "schedule": crontab(minute=5),
    },
    # Remind travellers the day before departure - every 6 hours
    "send-upcoming-booking-reminders": {
        "task": "bookings.send_upcoming_booking_reminders",
        "schedule": crontab(minute=0, hour="*/6"),
    },
}
