"""Field-level validation of booking input.

Errors are collected per field so the caller can report all of them at
once; any error blocks the booking entirely.
"""

from __future__ import annotations

import re
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Sequence

from apps.bookings.domain.entities import PaymentMethod
from apps.bookings.domain.slots import TimeSlot, find_slot
from shared.domain.value_objects import to_decimal

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_RE = re.compile(r"^[\d\s\-\+\(\)]+$")
MIN_PHONE_DIGITS = 10


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_RE.match(email))


def is_valid_phone(phone: str) -> bool:
    digits = re.sub(r"\D", "", phone)
    return bool(PHONE_RE.match(phone)) and len(digits) >= MIN_PHONE_DIGITS


def _amount(value) -> Decimal | None:
    try:
        return to_decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        return None


def validate_contact(name: str, email: str, phone: str) -> dict[str, str]:
    errors: dict[str, str] = {}
    if not (name or "").strip():
        errors["customer_name"] = "Name is required"

    email = (email or "").strip()
    if not email:
        errors["customer_email"] = "Email is required"
    elif not is_valid_email(email):
        errors["customer_email"] = "Invalid email format"

    phone = (phone or "").strip()
    if not phone:
        errors["customer_phone"] = "Phone is required"
    elif not is_valid_phone(phone):
        errors["customer_phone"] = "Invalid phone number"
    return errors


def validate_booking_input(
    *,
    customer_name: str,
    customer_email: str,
    customer_phone: str,
    event_date: date | None,
    time_slot: str,
    event_type: str,
    guest_count: int | None,
    advance_amount=0,
    total_amount=None,
    payment_method: str = PaymentMethod.CASH.value,
    slots: Sequence[TimeSlot] = (),
) -> dict[str, str]:
    """
    Validate the booking form.

    ``total_amount`` may be None when the total is quoted from the slot;
    the advance is then only checked for sign here and against the quote
    by the caller.
    """
    errors = validate_contact(customer_name, customer_email, customer_phone)

    if not event_date:
        errors["event_date"] = "Date is required"
    elif not isinstance(event_date, date):
        errors["event_date"] = "Invalid date"

    if not time_slot:
        errors["time_slot"] = "Time slot is required"
    elif slots and find_slot(slots, time_slot) is None:
        errors["time_slot"] = "Unknown time slot"

    if not (event_type or "").strip():
        errors["event_type"] = "Event type is required"

    if guest_count is None or int(guest_count) < 1:
        errors["guest_count"] = "Guest count must be at least 1"

    total = None
    if total_amount is not None:
        total = _amount(total_amount)
        if total is None or total < 0:
            errors["total_amount"] = "Total amount must be a non-negative number"
            total = None

    advance = _amount(advance_amount if advance_amount is not None else 0)
    if advance is None or advance < 0:
        errors["advance_amount"] = "Advance must be a non-negative number"
    elif total is not None and advance > total:
        errors["advance_amount"] = "Advance cannot exceed total amount"

    method_value = getattr(payment_method, "value", payment_method)
    if method_value not in {method.value for method in PaymentMethod}:
        errors["payment_method"] = "Unknown payment method"

    return errors
