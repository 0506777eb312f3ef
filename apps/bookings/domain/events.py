"""
Booking Domain Events

Events that represent things that have happened in the booking domain.
These are published after the unit of work commits.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from shared.domain.base import DomainEvent


@dataclass(kw_only=True)
class BookingCreated(DomainEvent):
    """
    Event: A new booking was registered

    Triggers:
    - Send confirmation email and SMS to the customer
    """
    booking_id: str
    customer_email: str
    event_date: date
    time_slot: str
    total_amount: Decimal


@dataclass(kw_only=True)
class BookingConfirmed(DomainEvent):
    """Event: Booking moved PENDING -> CONFIRMED"""
    booking_id: str


@dataclass(kw_only=True)
class BookingCancelled(DomainEvent):
    """
    Event: Booking was cancelled

    The date/slot is free again from this moment.
    """
    booking_id: str
    reason: str
    old_status: str


@dataclass(kw_only=True)
class PaymentRecorded(DomainEvent):
    """Event: A payment was added to the ledger of a booking"""
    booking_id: str
    payment_id: str
    amount: Decimal
    paid_total: Decimal
    payment_status: str
