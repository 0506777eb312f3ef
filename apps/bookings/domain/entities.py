"""
Booking Domain Entities

Core business entities for the hall booking domain:
- Booking: Main aggregate representing a reservation of the hall
- Customer: The person a booking is made for, keyed by email
- Payment: One entry of the payment ledger of a booking
- BookingStatus / PaymentStatus: lifecycle and derived payment states
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum

from apps.bookings.domain.exceptions import InvalidStatusTransition
from shared.domain.base import Aggregate, Entity
from shared.domain.value_objects import to_decimal


class BookingStatus(Enum):
    """
    Booking lifecycle

    State transitions:
    - PENDING -> CONFIRMED (advance received or confirmed by staff)
    - PENDING -> CANCELLED
    - CONFIRMED -> CANCELLED
    A cancelled booking stays cancelled.
    """
    PENDING = 'pending'
    CONFIRMED = 'confirmed'
    CANCELLED = 'cancelled'


class PaymentStatus(Enum):
    """How much of the booking total has been paid (always derived)"""
    PENDING = 'pending'     # Nothing paid yet
    ADVANCE = 'advance'     # Partially paid
    FULL = 'full'           # Paid in full


class PaymentType(Enum):
    ADVANCE = 'advance'
    FULL = 'full'
    BALANCE = 'balance'


class PaymentMethod(Enum):
    CASH = 'cash'
    CARD = 'card'
    BANK_TRANSFER = 'bank_transfer'


class TransactionStatus(Enum):
    """Outcome of a recorded payment. Only SUCCESS counts toward the paid total."""
    SUCCESS = 'success'
    PENDING = 'pending'
    FAILED = 'failed'


ALLOWED_TRANSITIONS = {
    BookingStatus.PENDING: {BookingStatus.CONFIRMED, BookingStatus.CANCELLED},
    BookingStatus.CONFIRMED: {BookingStatus.CANCELLED},
    BookingStatus.CANCELLED: set(),
}


def derive_payment_status(total, paid) -> PaymentStatus:
    """Payment status is a pure function of (paid, total)."""
    paid = to_decimal(paid)
    if paid == 0:
        return PaymentStatus.PENDING
    if paid >= to_decimal(total):
        return PaymentStatus.FULL
    return PaymentStatus.ADVANCE


def initial_booking_status(advance) -> BookingStatus:
    """A booking created with an advance is confirmed straight away."""
    return BookingStatus.CONFIRMED if to_decimal(advance) > 0 else BookingStatus.PENDING


def can_transition(current: BookingStatus, target: BookingStatus) -> bool:
    return current == target or target in ALLOWED_TRANSITIONS[current]


@dataclass(kw_only=True, eq=False)
class Booking(Aggregate):
    """
    Booking Aggregate Root

    Represents a customer's reservation of the hall for one date and slot.

    Key invariants:
    - 0 <= advance_amount <= total_amount
    - payment_status == derive_payment_status(total_amount, advance_amount)
    - lifecycle only moves pending -> confirmed and any -> cancelled
    """

    # Customer contact (copied from the form; customer_email links to Customer)
    customer_name: str
    customer_email: str
    customer_phone: str

    # Event
    event_date: date
    time_slot: str
    event_type: str
    guest_count: int

    # Money
    total_amount: Decimal
    advance_amount: Decimal = Decimal('0')
    payment_method: PaymentMethod = PaymentMethod.CASH
    payment_status: PaymentStatus = PaymentStatus.PENDING

    status: BookingStatus = BookingStatus.PENDING
    notes: str = ''

    def __post_init__(self):
        self.total_amount = to_decimal(self.total_amount)
        self.advance_amount = to_decimal(self.advance_amount)
        self.payment_method = PaymentMethod(self.payment_method)
        self.status = BookingStatus(self.status)

        if self.guest_count < 1:
            raise ValueError("Guest count must be at least 1")
        if self.total_amount < 0:
            raise ValueError("Total amount cannot be negative")
        self._check_paid(self.advance_amount)

        self.payment_status = derive_payment_status(self.total_amount, self.advance_amount)

    @classmethod
    def create(cls, **fields) -> 'Booking':
        """New booking: lifecycle status follows from the advance."""
        fields['status'] = initial_booking_status(fields.get('advance_amount', 0))
        return cls(**fields)

    def _check_paid(self, paid: Decimal):
        if paid < 0:
            raise ValueError("Paid amount cannot be negative")
        if paid > self.total_amount:
            raise ValueError(
                f"Paid amount {paid} exceeds booking total {self.total_amount}"
            )

    def apply_paid_amount(self, paid):
        """Store a recomputed paid total and re-derive the payment status."""
        paid = to_decimal(paid)
        self._check_paid(paid)
        self.advance_amount = paid
        self.payment_status = derive_payment_status(self.total_amount, paid)

    def transition_to(self, target: BookingStatus):
        target = BookingStatus(target)
        if not can_transition(self.status, target):
            raise InvalidStatusTransition(
                f"Cannot change booking {self.id} from {self.status.value} to {target.value}"
            )
        self.status = target

    def confirm(self):
        """
        Confirm booking (PENDING -> CONFIRMED)

        Events: BookingConfirmed
        """
        from apps.bookings.domain.events import BookingConfirmed

        if self.status == BookingStatus.CONFIRMED:
            return
        self.transition_to(BookingStatus.CONFIRMED)
        self.add_event(BookingConfirmed(aggregate_id=self.id, booking_id=self.id))

    def cancel(self, reason: str = ''):
        """
        Cancel booking (PENDING/CONFIRMED -> CANCELLED)

        The slot becomes available again immediately.
        Events: BookingCancelled
        """
        from apps.bookings.domain.events import BookingCancelled

        if self.status == BookingStatus.CANCELLED:
            return
        old_status = self.status
        self.transition_to(BookingStatus.CANCELLED)
        self.add_event(BookingCancelled(
            aggregate_id=self.id,
            booking_id=self.id,
            reason=reason,
            old_status=old_status.value,
        ))

    @property
    def balance(self) -> Decimal:
        return self.total_amount - self.advance_amount

    @property
    def blocks_slot(self) -> bool:
        return self.status != BookingStatus.CANCELLED

    def __str__(self):
        return f"Booking {self.id} ({self.status.value})"

    def __repr__(self):
        return (
            f"Booking(id={self.id}, event_date={self.event_date}, "
            f"time_slot={self.time_slot!r}, status={self.status.value})"
        )


@dataclass(kw_only=True, eq=False)
class Customer(Entity):
    """
    Customer

    The email is the business key. Bookings and total spend are computed
    by the registry from the bookings themselves.
    """
    name: str
    email: str
    phone: str
    address: str = ''

    @property
    def email_key(self) -> str:
        return normalize_email(self.email)


@dataclass(kw_only=True, eq=False)
class Payment(Entity):
    """A payment recorded against a booking."""
    booking_id: str
    amount: Decimal
    payment_type: PaymentType = PaymentType.ADVANCE
    method: PaymentMethod = PaymentMethod.CASH
    status: TransactionStatus = TransactionStatus.SUCCESS
    transaction_id: str | None = None
    paid_at: datetime = field(default_factory=datetime.now)

    def __post_init__(self):
        self.amount = to_decimal(self.amount)
        self.payment_type = PaymentType(self.payment_type)
        self.method = PaymentMethod(self.method)
        self.status = TransactionStatus(self.status)
        if self.amount <= 0:
            raise ValueError("Payment amount must be positive")

    @property
    def is_successful(self) -> bool:
        return self.status == TransactionStatus.SUCCESS


def normalize_email(email: str) -> str:
    return email.strip().lower()
