"""Invoice composition.

Booking totals are stored tax-inclusive, so the invoice backs the
subtotal and tax out of the total instead of summing line items up to it.
Amount paid counts successful payments only, the same rule the registry
uses for a booking's paid amount.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

from apps.bookings.domain.entities import Booking, Payment
from shared.domain.value_objects import CENT, to_decimal
from shared.formatting import format_currency, format_date, format_label

logger = logging.getLogger(__name__)

DEFAULT_TAX_RATE = Decimal('0.10')
INVOICE_SUFFIXES = 10000
MAX_NUMBER_ATTEMPTS = 100


class InvoiceNumberRegistry:
    """
    Invoice numbers per booking

    A number is generated as ``INV-<YYYY><MM>-<4 random digits>`` the
    first time a booking is invoiced and reused on every later render.
    """

    def __init__(self, rng: random.Random | None = None):
        self._numbers: dict[str, str] = {}
        self._rng = rng or random.Random()

    def number_for(self, booking_id: str, issued_on: date | None = None) -> str:
        if booking_id not in self._numbers:
            self._numbers[booking_id] = self._generate(issued_on or date.today())
            logger.info(f"Assigned invoice number {self._numbers[booking_id]} to booking {booking_id}")
        return self._numbers[booking_id]

    def _generate(self, issued_on: date) -> str:
        prefix = f"INV-{issued_on.year}{issued_on.month:02d}-"
        taken = {number for number in self._numbers.values() if number.startswith(prefix)}
        if len(taken) >= INVOICE_SUFFIXES:
            raise RuntimeError(f"No invoice numbers left for {prefix[4:-1]}")
        for _ in range(MAX_NUMBER_ATTEMPTS):
            number = f"{prefix}{self._rng.randrange(INVOICE_SUFFIXES):04d}"
            if number not in taken:
                return number
        # Dense month: take the first free suffix
        return next(
            f"{prefix}{suffix:04d}" for suffix in range(INVOICE_SUFFIXES)
            if f"{prefix}{suffix:04d}" not in taken
        )


@dataclass(frozen=True)
class InvoiceLine:
    description: str
    quantity: int = 0
    rate: Decimal | None = None
    amount: Decimal | None = None

    @property
    def is_note(self) -> bool:
        return self.amount is None


@dataclass(frozen=True)
class PaymentHistoryEntry:
    paid_on: date
    method: str
    transaction_id: str
    amount: Decimal
    status: str


@dataclass(frozen=True)
class Invoice:
    invoice_number: str
    booking_id: str
    issued_on: date
    customer_name: str
    customer_email: str
    customer_phone: str
    event_type: str
    event_date: date
    time_slot: str
    guest_count: int
    tax_rate: Decimal
    subtotal: Decimal
    tax: Decimal
    total: Decimal
    amount_paid: Decimal
    balance: Decimal
    items: tuple[InvoiceLine, ...] = ()
    payments: tuple[PaymentHistoryEntry, ...] = ()
    hall: dict = field(default_factory=dict)

    @property
    def shows_balance(self) -> bool:
        return self.balance > 0

    def as_display(self) -> dict:
        """Render-ready invoice: money in the display currency, dates in the display format."""
        return {
            'invoice_number': self.invoice_number,
            'booking_id': self.booking_id,
            'date': format_date(self.issued_on),
            'hall': dict(self.hall),
            'bill_to': {
                'name': self.customer_name,
                'email': self.customer_email,
                'phone': self.customer_phone,
            },
            'event': {
                'event_type': self.event_type,
                'event_date': format_date(self.event_date),
                'time_slot': self.time_slot,
                'guest_count': self.guest_count,
            },
            'items': [
                {'description': line.description}
                if line.is_note else
                {
                    'description': line.description,
                    'quantity': line.quantity,
                    'rate': format_currency(line.rate),
                    'amount': format_currency(line.amount),
                }
                for line in self.items
            ],
            'subtotal': format_currency(self.subtotal),
            'tax_label': f"Tax ({(self.tax_rate * 100).normalize():f}%)",
            'tax': format_currency(self.tax),
            'total': format_currency(self.total),
            'amount_paid': format_currency(self.amount_paid),
            'balance_due': format_currency(self.balance) if self.shows_balance else None,
            'payment_history': [
                {
                    'date': format_date(entry.paid_on),
                    'method': entry.method,
                    'transaction_id': entry.transaction_id,
                    'amount': format_currency(entry.amount),
                    'status': entry.status,
                }
                for entry in self.payments
            ],
        }


def split_tax_inclusive(total, tax_rate=DEFAULT_TAX_RATE) -> tuple[Decimal, Decimal]:
    """Return (subtotal, tax) for a tax-inclusive total, rounded to cents."""
    total = to_decimal(total)
    subtotal = (total / (1 + to_decimal(tax_rate))).quantize(CENT, rounding=ROUND_HALF_UP)
    return subtotal, total - subtotal


def compose_invoice(
    booking: Booking,
    payments: Iterable[Payment],
    *,
    numbers: InvoiceNumberRegistry,
    hall: dict | None = None,
    tax_rate=DEFAULT_TAX_RATE,
    issued_on: date | None = None,
) -> Invoice:
    """Build the invoice for a booking from the payments supplied, in their given order."""
    issued_on = issued_on or date.today()
    tax_rate = to_decimal(tax_rate)
    payments = list(payments)

    subtotal, tax = split_tax_inclusive(booking.total_amount, tax_rate)
    amount_paid = sum((p.amount for p in payments if p.is_successful), Decimal('0'))

    items = [InvoiceLine(
        description=f"Hall Rental - {booking.time_slot}",
        quantity=1,
        rate=subtotal,
        amount=subtotal,
    )]
    if booking.notes:
        items.append(InvoiceLine(description=f"Special Requirements: {booking.notes}"))

    history = tuple(
        PaymentHistoryEntry(
            paid_on=payment.paid_at.date(),
            method=format_label(payment.method.value),
            transaction_id=payment.transaction_id or '-',
            amount=payment.amount,
            status=payment.status.value,
        )
        for payment in payments
    )

    return Invoice(
        invoice_number=numbers.number_for(booking.id, issued_on),
        booking_id=booking.id,
        issued_on=issued_on,
        customer_name=booking.customer_name,
        customer_email=booking.customer_email,
        customer_phone=booking.customer_phone,
        event_type=booking.event_type,
        event_date=booking.event_date,
        time_slot=booking.time_slot,
        guest_count=booking.guest_count,
        tax_rate=tax_rate,
        subtotal=subtotal,
        tax=tax,
        total=booking.total_amount,
        amount_paid=amount_paid,
        balance=booking.total_amount - amount_paid,
        items=tuple(items),
        payments=history,
        hall=dict(hall or {}),
    )
