"""PDF vouchers for confirmed bookings."""

from __future__ import annotations

from io import BytesIO
from xml.sax.saxutils import escape

from reportlab.lib import colors  # type: ignore
from reportlab.lib.pagesizes import A4  # type: ignore
from reportlab.lib.styles import getSampleStyleSheet  # type: ignore
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle  # type: ignore

from .models import Booking

TABLE_STYLE = TableStyle(
    [
        ("BACKGROUND", (0, 0), (0, -1), colors.lightgrey),
        ("FONTNAME", (0, 0), (0, -1), "Helvetica-Bold"),
        ("VALIGN", (0, 0), (-1, -1), "TOP"),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 6),
        ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
    ]
)


def _detail_rows(booking: Booking) -> list[list[str]]:
    rows = [
        ["Confirmation code", booking.confirmation_code],
        ["Booking", f"{booking.get_booking_type_display()}: {booking.item_name}"],
        ["Dates", f"{booking.start_date:%d %b %Y} - {booking.end_date:%d %b %Y}"],
        [
            "Travellers",
            f"{booking.guest_count} ({booking.adult_count} adults, "
            f"{booking.child_count} children, {booking.infant_count} infants)",
        ],
    ]
    for label, value in (
        ("Room", booking.room_type),
        ("Cabin", booking.cabin_type),
        ("Package", booking.package_type),
        ("Ticket", booking.ticket_type),
        ("Vehicle", booking.vehicle_type),
    ):
        if value:
            rows.append([label, value])
    rows += [
        ["Lead traveller", booking.user.full_name],
        ["Contact", booking.contact_email or booking.user.email],
        ["Total paid", f"{booking.total_price:,.2f} {booking.currency}"],
        ["Status", f"{booking.get_status_display()} / {booking.get_payment_status_display()}"],
    ]
    if booking.transaction_id:
        rows.append(["Transaction", booking.transaction_id])
    return rows


def render_booking_voucher(booking: Booking) -> bytes:
    """Build a one-page voucher and return the PDF bytes."""
    buffer = BytesIO()
    doc = SimpleDocTemplate(buffer, pagesize=A4, title=f"Voucher {booking.confirmation_code}")
    styles = getSampleStyleSheet()
    story = [
        Paragraph("<b>TravelEase booking voucher</b>", styles["Title"]),
        Spacer(1, 20),
    ]

    table = Table(
        [[label, Paragraph(escape(str(value)), styles["BodyText"])] for label, value in _detail_rows(booking)],
        colWidths=[140, 330],
    )
    table.setStyle(TABLE_STYLE)
    story.append(table)

    if booking.special_requests:
        story += [
            Spacer(1, 16),
            Paragraph("<b>Special requests</b>", styles["Heading3"]),
            Paragraph(escape(booking.special_requests), styles["BodyText"]),
        ]
    if booking.cancellation_policy:
        story += [
            Spacer(1, 16),
            Paragraph("<b>Cancellation policy</b>", styles["Heading3"]),
            Paragraph(escape(booking.cancellation_policy), styles["BodyText"]),
        ]

    story += [
        Spacer(1, 24),
        Paragraph("Please present this voucher (printed or on your phone) on arrival.", styles["Italic"]),
    ]

    doc.build(story)
    pdf = buffer.getvalue()
    buffer.close()
    return pdf
