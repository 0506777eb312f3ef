"""Display formatting shared by invoices, notifications and the API.

The system renders a single currency and a single date format.
"""

from __future__ import annotations

from datetime import date, datetime

from shared.domain.value_objects import DEFAULT_CURRENCY, Money, to_decimal

DISPLAY_DATE_FORMAT = "%b %d, %Y"


def format_currency(amount, currency: str = DEFAULT_CURRENCY) -> str:
    """Format an amount as ``LKR 450,000`` (no minor units)."""
    value = to_decimal(amount)
    if value < 0:
        return f"-{Money(-value, currency)}"
    return str(Money(value, currency))


def format_date(value: date | datetime | str) -> str:
    """Format a date as ``Mar 05, 2026``. ISO strings are accepted."""
    if isinstance(value, str):
        value = date.fromisoformat(value[:10])
    return value.strftime(DISPLAY_DATE_FORMAT)


def format_time(value: str) -> str:
    """Convert ``13:00`` into ``1:00 PM``."""
    hours, minutes = value.split(":")
    hour = int(hours)
    suffix = "PM" if hour >= 12 and hour != 24 else "AM"
    display_hour = hour - 12 if hour > 12 else 12 if hour == 0 else hour
    return f"{display_hour}:{minutes} {suffix}"


def format_label(value: str) -> str:
    """Humanize an enum value: ``bank_transfer`` -> ``Bank Transfer``."""
    return value.replace("_", " ").title()
