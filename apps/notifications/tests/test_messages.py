"""Tests for notification texts."""

from datetime import date
from decimal import Decimal

from apps.bookings.conf import HallDetails
from apps.bookings.domain.entities import Booking
from apps.notifications.messages import (
    build_booking_details_message,
    build_confirmation_email_html,
    build_confirmation_message,
    build_payment_reminder_message,
)

HALL = HallDetails(
    name="Royal Grand Banquet Hall",
    address="No. 120, High Level Road, Maharagama",
    phone="+94 11 345 6789",
    email="info@royalgrandhall.lk",
)


def _booking(**overrides):
    fields = dict(
        id="book-001",
        customer_name="Kasun Perera",
        customer_email="kasun.perera@example.com",
        customer_phone="+94 71 123 4567",
        event_date=date(2026, 3, 3),
        time_slot="09:00 - 13:00",
        event_type="Wedding Reception",
        guest_count=200,
        total_amount=Decimal("450000"),
        advance_amount=Decimal("150000"),
    )
    fields.update(overrides)
    return Booking(**fields)


def test_confirmation_message():
    assert build_confirmation_message(_booking(), HALL.name) == (
        "Dear Kasun Perera, your booking at Royal Grand Banquet Hall on Mar 03, 2026 "
        "from 09:00 - 13:00 has been confirmed. Total amount: LKR 450,000. Thank you!"
    )


def test_reminder_mentions_balance():
    assert build_payment_reminder_message(_booking()) == (
        "Reminder: You have a pending balance of LKR 300,000 for your booking on Mar 03, 2026. "
        "Please complete the payment before the event date."
    )


def test_no_reminder_when_fully_paid():
    assert build_payment_reminder_message(_booking(advance_amount=Decimal("450000"))) is None


def test_details_message_lists_amounts():
    text = build_booking_details_message(_booking(), HALL.name)

    assert "Event: Wedding Reception" in text
    assert "Paid: LKR 150,000" in text
    assert "Balance: LKR 300,000" in text
    assert text.endswith("Thank you for choosing Royal Grand Banquet Hall!")


def test_confirmation_email_escapes_customer_input():
    html = build_confirmation_email_html(_booking(customer_name="<b>Kasun</b> & Co"), HALL, "INV-202603-0042")

    assert "&lt;b&gt;Kasun&lt;/b&gt; &amp; Co" in html
    assert "<b>Kasun</b>" not in html
    assert "<strong>Invoice No:</strong> INV-202603-0042" in html
    assert "<strong>Balance:</strong> LKR 300,000" in html
