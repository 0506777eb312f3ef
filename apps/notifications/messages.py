"""Customer-facing notification texts.

Pure functions: they only build strings. Delivery lives in ``services``.
"""

from __future__ import annotations

from html import escape
from typing import TYPE_CHECKING

from shared.formatting import format_currency, format_date

if TYPE_CHECKING:  # pragma: no cover
    from apps.bookings.conf import HallDetails
    from apps.bookings.domain.entities import Booking


def build_confirmation_message(booking: "Booking", hall_name: str) -> str:
    return (
        f"Dear {booking.customer_name}, your booking at {hall_name} on "
        f"{format_date(booking.event_date)} from {booking.time_slot} has been confirmed. "
        f"Total amount: {format_currency(booking.total_amount)}. Thank you!"
    )


def build_payment_reminder_message(booking: "Booking") -> str | None:
    """Balance reminder, or ``None`` when nothing is left to pay."""
    if booking.balance <= 0:
        return None
    return (
        f"Reminder: You have a pending balance of {format_currency(booking.balance)} "
        f"for your booking on {format_date(booking.event_date)}. "
        f"Please complete the payment before the event date."
    )


def build_booking_details_message(booking: "Booking", hall_name: str) -> str:
    lines = [
        f"Dear {booking.customer_name},",
        "",
        "Here are your booking details:",
        f"Event: {booking.event_type}",
        f"Date: {format_date(booking.event_date)}",
        f"Time: {booking.time_slot}",
        f"Total Amount: {format_currency(booking.total_amount)}",
        f"Paid: {format_currency(booking.advance_amount)}",
        f"Balance: {format_currency(booking.balance)}",
        "",
        f"Thank you for choosing {hall_name}!",
    ]
    return "\n".join(lines)


def build_confirmation_email_html(booking: "Booking", hall: "HallDetails", invoice_number: str) -> str:
    """HTML confirmation email with the booking details box."""
    hall_name = escape(hall.name)
    details = [
        ('Date', format_date(booking.event_date)),
        ('Time Slot', booking.time_slot),
        ('Total Amount', format_currency(booking.total_amount)),
        ('Advance Paid', format_currency(booking.advance_amount)),
        ('Balance', format_currency(booking.balance)),
        ('Invoice No', invoice_number),
    ]
    rows = "\n".join(
        f"          <p><strong>{label}:</strong> {escape(str(value))}</p>"
        for label, value in details
    )

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8" />
  <title>Booking Confirmation</title>
</head>
<body style="margin:0; background:#f6f7f9; font-family:Arial, sans-serif;">
  <div style="max-width:600px; margin:40px auto; background:white; border-radius:12px;">
    <div style="background:#4f46e5; color:white; padding:30px; text-align:center;">
      <h1 style="margin:0;">{hall_name}</h1>
      <p>Booking Confirmation</p>
    </div>
    <div style="padding:30px; color:#333; line-height:1.6;">
      <p>Dear <strong>{escape(booking.customer_name)}</strong>,</p>
      <p>Your booking has been successfully confirmed. Below are the details:</p>
      <div style="background:#f3f4f6; padding:18px; border-radius:10px;">
{rows}
      </div>
      <p>Thank you for choosing <strong>{hall_name}</strong>. We look forward to serving you!</p>
    </div>
    <div style="text-align:center; padding:20px; font-size:13px; color:#777;">
      {hall_name} &middot; {escape(hall.address)} &middot; {escape(hall.phone)}
    </div>
  </div>
</body>
</html>
"""
