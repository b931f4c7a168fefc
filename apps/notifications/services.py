"""Notification services for e-mail and in-app delivery.

Every helper returns ``True``/``False`` instead of raising: a failed
e-mail is logged and must never break the booking or chat request that
triggered it.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from django.conf import settings  # type: ignore
from django.core.mail import send_mail  # type: ignore
from django.template.loader import render_to_string  # type: ignore
from django.utils.html import escape, strip_tags  # type: ignore

if TYPE_CHECKING:  # pragma: no cover
    from apps.bookings.models import Booking
    from apps.users.models import CustomUser

logger = logging.getLogger(__name__)

SIGNATURE = "Happy travels,<br>The TravelEase team"


# ============================================================================
# EMAIL NOTIFICATIONS
# ============================================================================

def send_email_notification(
    recipient_email: str,
    subject: str,
    template_name: str | None,
    context: dict,
    *,
    html_message: str | None = None,
) -> bool:
    """
    Send a single e-mail.

    The body comes from ``html_message`` when given, otherwise from the
    Django template ``template_name`` rendered with ``context``, otherwise
    from ``context["message"]`` as plain text.

    Returns:
        bool: True when the message was handed to the mail backend
    """
    try:
        if html_message:
            text_message = strip_tags(html_message)
        elif template_name:
            html_message = render_to_string(template_name, context)
            text_message = strip_tags(html_message)
        else:
            text_message = context.get("message", "")
            html_message = None

        send_mail(
            subject=subject,
            message=text_message,
            from_email=settings.DEFAULT_FROM_EMAIL,
            recipient_list=[recipient_email],
            html_message=html_message,
            fail_silently=False,
        )

        logger.info(f"Email sent successfully to {recipient_email}: {subject}")
        return True

    except Exception as e:
        logger.error(f"Failed to send email to {recipient_email}: {e}", exc_info=True)
        return False


def _booking_recipient(booking: "Booking") -> str:
    return booking.contact_email or booking.user.email


def _booking_summary(booking: "Booking") -> str:
    return f"""
        <ul>
            <li><strong>Confirmation code:</strong> {booking.confirmation_code}</li>
            <li><strong>Booking:</strong> {escape(booking.get_booking_type_display())} - {escape(booking.item_name)}</li>
            <li><strong>Dates:</strong> {booking.start_date:%d %b %Y} - {booking.end_date:%d %b %Y}</li>
            <li><strong>Guests:</strong> {booking.guest_count}</li>
            <li><strong>Total:</strong> {booking.total_price} {booking.currency}</li>
        </ul>
    """


def send_booking_confirmation_email(booking: "Booking") -> bool:
    """Payment received, booking confirmed."""
    guest_name = escape(booking.user.full_name)
    html_message = f"""
    <html>
    <body>
        <h2>Hello {guest_name},</h2>
        <p>Your booking is confirmed and paid.</p>
        {_booking_summary(booking)}
        <p>You can download your voucher from the My Bookings page.</p>
        <p>{SIGNATURE}</p>
    </body>
    </html>
    """
    return send_email_notification(
        recipient_email=_booking_recipient(booking),
        subject=f"Booking {booking.confirmation_code} confirmed",
        template_name=None,
        context={"booking": booking},
        html_message=html_message,
    )


def send_booking_cancellation_email(booking: "Booking") -> bool:
    guest_name = escape(booking.user.full_name)
    refund_line = ""
    if booking.payment_status == booking.PaymentStatus.REFUNDED:
        refund_line = "<p>A refund of the amount paid has been issued to your original payment method.</p>"
    reason = escape(booking.cancellation_reason) if booking.cancellation_reason else "Not specified"
    html_message = f"""
    <html>
    <body>
        <h2>Hello {guest_name},</h2>
        <p>Your booking has been cancelled.</p>
        {_booking_summary(booking)}
        <p><strong>Reason:</strong> {reason}</p>
        {refund_line}
        <p>{SIGNATURE}</p>
    </body>
    </html>
    """
    return send_email_notification(
        recipient_email=_booking_recipient(booking),
        subject=f"Booking {booking.confirmation_code} cancelled",
        template_name=None,
        context={"booking": booking},
        html_message=html_message,
    )


def send_booking_reminder_email(booking: "Booking") -> bool:
    """Reminder sent the day before the trip starts."""
    guest_name = escape(booking.user.full_name)
    html_message = f"""
    <html>
    <body>
        <h2>Hello {guest_name},</h2>
        <p>Your trip starts tomorrow. Here is a summary of your booking:</p>
        {_booking_summary(booking)}
        <p>Keep your confirmation code at hand; you may be asked for it on arrival.</p>
        <p>{SIGNATURE}</p>
    </body>
    </html>
    """
    return send_email_notification(
        recipient_email=_booking_recipient(booking),
        subject=f"Reminder: {booking.item_name} starts tomorrow",
        template_name=None,
        context={"booking": booking},
        html_message=html_message,
    )


# ============================================================================
# IN-APP NOTIFICATIONS
# ============================================================================

def create_in_app_notification(user: "CustomUser", title: str, message: str) -> bool:
    try:
        from .models import Notification

        Notification.objects.create(user=user, title=title, message=message)

        logger.info(f"In-app notification created for {user.email}: {title}")
        return True

    except Exception as e:
        logger.error(f"Failed to create in-app notification for {user.email}: {e}", exc_info=True)
        return False


def notify_user(
    user: "CustomUser",
    title: str,
    message: str,
    *,
    email: bool = False,
    email_html: str | None = None,
) -> dict[str, bool]:
    """
    Notify a user in-app and, when asked, by e-mail.

    Returns:
        dict: delivery result per channel
    """
    results = {"email": False, "in_app": False}

    if email and user.email:
        results["email"] = send_email_notification(
            recipient_email=user.email,
            subject=title,
            template_name=None,
            context={"message": message},
            html_message=email_html,
        )

    results["in_app"] = create_in_app_notification(user, title, message)
    return results
