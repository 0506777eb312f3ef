"""
Booking Registry

In-memory store of bookings, customers and payments. It is the only owner
of these collections: records go in as copies and come out as copies, so
callers can never mutate stored state behind the registry's back.

The registry keeps the payment invariants:
- a booking's paid amount is the sum of its successful payments
- its payment status is re-derived whenever that sum changes
- the paid amount never exceeds the booking total

Usage:
    registry = BookingRegistry()
    registry.add_booking(booking)
    registry.add_payment(Payment(booking_id=booking.id, amount=Decimal('300000')))
    registry.get_booking(booking.id).payment_status  # PaymentStatus.FULL
"""

from __future__ import annotations

import copy
import dataclasses
import logging
from collections import defaultdict
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Iterable

from apps.bookings.domain.availability import AvailabilityChecker
from apps.bookings.domain.entities import (
    Booking,
    BookingStatus,
    Customer,
    Payment,
    PaymentStatus,
    PaymentType,
    can_transition,
    normalize_email,
)
from apps.bookings.domain.exceptions import (
    BookingConflictError,
    BookingNotFoundError,
    CustomerConflictError,
    InvalidStatusTransition,
    OverpaymentError,
)
from shared.domain.base import new_id

logger = logging.getLogger(__name__)

READ_ONLY_BOOKING_FIELDS = frozenset({'id', 'created_at', 'updated_at', 'advance_amount', 'payment_status'})
READ_ONLY_CUSTOMER_FIELDS = frozenset({'id', 'created_at'})


def _detached(record):
    return copy.deepcopy(record)


def _updatable_fields(entity_type, read_only: frozenset) -> frozenset:
    return frozenset(f.name for f in dataclasses.fields(entity_type) if f.init) - read_only


@dataclass(frozen=True)
class RegistrySnapshot:
    bookings: dict
    customers: dict
    payments: list


class BookingRegistry:
    """In-memory registry of bookings, customers and payments."""

    def __init__(
        self,
        bookings: Iterable[Booking] = (),
        customers: Iterable[Customer] = (),
        payments: Iterable[Payment] = (),
    ):
        self._bookings: dict[str, Booking] = {}
        self._bookings_by_date: dict[date, set[str]] = defaultdict(set)
        self._customers: dict[str, Customer] = {}
        self._payments: list[Payment] = []

        ledger: dict[str, list[Payment]] = defaultdict(list)
        for payment in payments:
            ledger[payment.booking_id].append(payment)

        for customer in customers:
            self.add_customer(customer)
        for booking in bookings:
            self.add_booking(booking, ledger.pop(booking.id, ()))
        # Payments for unknown bookings are rejected like any other
        for orphaned in ledger.values():
            for payment in orphaned:
                self.add_payment(payment)

    # ===== Bookings =====

    def add_booking(self, booking: Booking, payments: Iterable[Payment] = ()) -> Booking:
        """
        Register a new booking together with the payments behind its advance.

        The booking's paid amount must equal the successful ``payments``.
        When no payments are given, an advance is recorded as one opening
        successful payment so the ledger always explains it.
        No slot check happens here; callers check availability first.

        Raises:
            BookingConflictError: if the booking id or a payment id exists
            ValueError: if the payments belong elsewhere or do not add up
        """
        if booking.id in self._bookings:
            raise BookingConflictError(f"Booking {booking.id} already exists")

        ledger = [_detached(payment) for payment in payments]
        known_ids = {existing.id for existing in self._payments}
        for payment in ledger:
            if payment.booking_id != booking.id:
                raise ValueError(f"Payment {payment.id} belongs to booking {payment.booking_id}, not {booking.id}")
            if payment.id in known_ids:
                raise BookingConflictError(f"Payment {payment.id} already recorded")
            known_ids.add(payment.id)

        already_paid = self.paid_total(booking.id)
        if not ledger and booking.advance_amount > already_paid:
            ledger.append(Payment(
                id=new_id('pay'),
                booking_id=booking.id,
                amount=booking.advance_amount - already_paid,
                payment_type=PaymentType.FULL if booking.balance == 0 else PaymentType.ADVANCE,
                method=booking.payment_method,
                paid_at=booking.created_at,
            ))

        paid = already_paid + sum((p.amount for p in ledger if p.is_successful), Decimal('0'))
        if paid != booking.advance_amount:
            raise ValueError(
                f"Paid amount {booking.advance_amount} of booking {booking.id} "
                f"does not match its payments ({paid})"
            )

        stored = _detached(booking)
        stored.clear_events()
        self._bookings[stored.id] = stored
        self._bookings_by_date[stored.event_date].add(stored.id)
        self._payments.extend(ledger)
        logger.info(
            f"Booking {stored.id} added for {stored.event_date} {stored.time_slot} "
            f"with {len(ledger)} payment(s)"
        )
        return _detached(stored)

    def update_booking(self, booking_id: str, **changes) -> Booking | None:
        """
        Merge ``changes`` into a booking and stamp ``updated_at``.

        Returns the updated booking, or None when the id is unknown.
        The paid amount and payment status follow the ledger, never ``changes``.

        Raises:
            ValueError: for read-only or unknown fields, or broken amounts
            InvalidStatusTransition: for a forbidden lifecycle change
        """
        stored = self._bookings.get(booking_id)
        if stored is None:
            logger.info(f"Update skipped, booking {booking_id} not found")
            return None

        invalid = set(changes) - _updatable_fields(Booking, READ_ONLY_BOOKING_FIELDS)
        if invalid:
            raise ValueError(f"Cannot update booking fields: {', '.join(sorted(invalid))}")

        if 'status' in changes:
            target = BookingStatus(changes['status'])
            if not can_transition(stored.status, target):
                raise InvalidStatusTransition(
                    f"Cannot change booking {booking_id} from {stored.status.value} to {target.value}"
                )

        updated = dataclasses.replace(stored, **changes)
        updated.updated_at = datetime.now()

        self._bookings_by_date[stored.event_date].discard(booking_id)
        self._bookings_by_date[updated.event_date].add(booking_id)
        self._bookings[booking_id] = updated
        logger.info(f"Booking {booking_id} updated: {', '.join(sorted(changes)) or 'no fields'}")
        return _detached(updated)

    def delete_booking(self, booking_id: str) -> bool:
        """Remove a booking. Returns False when there was nothing to remove."""
        stored = self._bookings.pop(booking_id, None)
        if stored is None:
            logger.info(f"Delete skipped, booking {booking_id} not found")
            return False
        self._bookings_by_date[stored.event_date].discard(booking_id)
        logger.info(f"Booking {booking_id} deleted")
        return True

    def get_booking(self, booking_id: str) -> Booking | None:
        stored = self._bookings.get(booking_id)
        return _detached(stored) if stored else None

    def get_bookings_by_date(self, event_date: date) -> list[Booking]:
        return [
            _detached(booking)
            for booking in self._bookings.values()
            if booking.id in self._bookings_by_date.get(event_date, ())
        ]

    def list_bookings(self) -> list[Booking]:
        return [_detached(booking) for booking in self._bookings.values()]

    def is_slot_available(self, event_date: date, time_slot: str, *, exclude_booking_id: str | None = None) -> bool:
        """True when no active booking holds ``time_slot`` on ``event_date``."""
        same_day = (self._bookings[booking_id] for booking_id in self._bookings_by_date.get(event_date, ()))
        return AvailabilityChecker(same_day).is_available(
            event_date, time_slot, exclude_booking_id=exclude_booking_id
        )

    # ===== Payments =====

    def add_payment(self, payment: Payment) -> Payment:
        """
        Append a payment and resync the owning booking.

        The booking's paid amount becomes the sum of its successful
        payments and its payment status is re-derived from it.

        Raises:
            BookingNotFoundError: if the booking does not exist
            OverpaymentError: if a successful payment exceeds the balance
            BookingConflictError: if the payment id is already recorded
        """
        booking = self._bookings.get(payment.booking_id)
        if booking is None:
            raise BookingNotFoundError(
                f"Cannot record payment {payment.id}: booking {payment.booking_id} not found"
            )
        if any(existing.id == payment.id for existing in self._payments):
            raise BookingConflictError(f"Payment {payment.id} already recorded")

        if payment.is_successful:
            paid_after = self.paid_total(booking.id) + payment.amount
            if paid_after > booking.total_amount:
                raise OverpaymentError(
                    f"Payment of {payment.amount} exceeds the balance of booking {booking.id} "
                    f"({booking.total_amount - self.paid_total(booking.id)} outstanding)"
                )

        self._payments.append(_detached(payment))

        booking.apply_paid_amount(self.paid_total(booking.id))
        booking.updated_at = datetime.now()
        logger.info(
            f"Payment {payment.id} ({payment.status.value}) of {payment.amount} recorded for "
            f"booking {booking.id}; paid {booking.advance_amount}, status {booking.payment_status.value}"
        )
        return _detached(payment)

    def get_payments_by_booking(self, booking_id: str) -> list[Payment]:
        return [_detached(p) for p in self._payments if p.booking_id == booking_id]

    def list_payments(self) -> list[Payment]:
        return [_detached(p) for p in self._payments]

    def paid_total(self, booking_id: str) -> Decimal:
        """Sum of successful payments for a booking."""
        return sum(
            (p.amount for p in self._payments if p.booking_id == booking_id and p.is_successful),
            Decimal('0'),
        )

    # ===== Customers =====

    def add_customer(self, customer: Customer) -> Customer:
        """
        Register a customer. Email is the business key.

        Raises:
            CustomerConflictError: if the email or the id is taken
        """
        key = customer.email_key
        if key in self._customers:
            raise CustomerConflictError(f"Customer with email {customer.email} already exists")
        if any(existing.id == customer.id for existing in self._customers.values()):
            raise CustomerConflictError(f"Customer {customer.id} already exists")

        self._customers[key] = _detached(customer)
        logger.info(f"Customer {customer.id} added ({key})")
        return _detached(customer)

    def update_customer(self, customer_id: str, **changes) -> Customer | None:
        """Merge ``changes`` into a customer. Returns None when the id is unknown."""
        key, stored = next(
            ((k, c) for k, c in self._customers.items() if c.id == customer_id),
            (None, None),
        )
        if stored is None:
            logger.info(f"Update skipped, customer {customer_id} not found")
            return None

        invalid = set(changes) - _updatable_fields(Customer, READ_ONLY_CUSTOMER_FIELDS)
        if invalid:
            raise ValueError(f"Cannot update customer fields: {', '.join(sorted(invalid))}")

        updated = dataclasses.replace(stored, **changes)
        new_key = updated.email_key
        if new_key != key and new_key in self._customers:
            raise CustomerConflictError(f"Customer with email {updated.email} already exists")

        del self._customers[key]
        self._customers[new_key] = updated
        return _detached(updated)

    def get_customer(self, email: str) -> Customer | None:
        stored = self._customers.get(normalize_email(email))
        return _detached(stored) if stored else None

    def get_customer_by_id(self, customer_id: str) -> Customer | None:
        stored = next((c for c in self._customers.values() if c.id == customer_id), None)
        return _detached(stored) if stored else None

    def list_customers(self) -> list[Customer]:
        return [_detached(c) for c in self._customers.values()]

    def customer_bookings(self, email: str) -> list[Booking]:
        """Bookings made with this email, computed from the bookings themselves."""
        key = normalize_email(email)
        return [
            _detached(b) for b in self._bookings.values()
            if normalize_email(b.customer_email) == key
        ]

    def customer_total_spent(self, email: str) -> Decimal:
        """Sum of amounts paid on the customer's bookings that are not payment-pending."""
        return sum(
            (
                b.advance_amount for b in self.customer_bookings(email)
                if b.payment_status != PaymentStatus.PENDING
            ),
            Decimal('0'),
        )

    # ===== Unit of work support =====

    def snapshot(self) -> RegistrySnapshot:
        return RegistrySnapshot(
            bookings=copy.deepcopy(self._bookings),
            customers=copy.deepcopy(self._customers),
            payments=copy.deepcopy(self._payments),
        )

    def restore(self, snapshot: RegistrySnapshot):
        self._bookings = copy.deepcopy(snapshot.bookings)
        self._customers = copy.deepcopy(snapshot.customers)
        self._payments = copy.deepcopy(snapshot.payments)
        self._bookings_by_date = defaultdict(set)
        for booking in self._bookings.values():
            self._bookings_by_date[booking.event_date].add(booking.id)

    def __len__(self):
        return len(self._bookings)

    def __repr__(self):
        return (
            f"BookingRegistry(bookings={len(self._bookings)}, "
            f"customers={len(self._customers)}, payments={len(self._payments)})"
        )
