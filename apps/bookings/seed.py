"""Demo dataset the registry starts with.

Dates are relative to ``today`` so the dashboard always shows a mix of
past and upcoming events. Every booking's paid amount is backed by
successful payments in the ledger.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from decimal import Decimal

from apps.bookings.domain.entities import (
    Booking,
    BookingStatus,
    Customer,
    Payment,
    PaymentMethod,
    PaymentType,
)

EVENT_TYPES = [
    'Wedding Reception',
    'Birthday Party',
    'Anniversary',
    'Corporate Event',
    'Baby Shower',
    'Engagement Party',
    'Graduation Party',
    'Cultural Ceremony',
    'Get-Together',
    'Other',
]

# (id, name, email, phone, address, event offset days, slot, event type, guests,
#  total, paid, method, status, notes, created offset days)
_BOOKINGS = [
    ('book-001', 'Kasun Perera', 'kasun.perera@example.com', '+94 71 123 4567',
     'No. 25, Temple Road, Nugegoda, Sri Lanka', 2, '09:00 - 13:00', 'Wedding Reception', 200,
     '450000', '150000', PaymentMethod.CARD, BookingStatus.CONFIRMED,
     'Poruwa setup and traditional dancing', -5),
    ('book-002', 'Nimasha Fernando', 'nimasha.f@example.com', '+94 76 987 6543',
     'No. 88, Galle Road, Moratuwa, Sri Lanka', 7, '17:00 - 21:00', 'Birthday Party', 80,
     '120000', '120000', PaymentMethod.BANK_TRANSFER, BookingStatus.CONFIRMED,
     'Need DJ and lighting setup', -10),
    ('book-003', 'Tharaka Jayasinghe', 'tharaka.j@example.com', '+94 77 222 3344',
     '', 14, '13:00 - 17:00', 'Corporate Event', 100,
     '250000', '75000', PaymentMethod.CASH, BookingStatus.CONFIRMED,
     'Projector and PA system required', -3),
    ('book-004', 'Dilini Weerasinghe', 'dilini.w@example.com', '+94 70 555 8899',
     '', 21, '09:00 - 13:00', 'Anniversary', 60,
     '85000', '0', PaymentMethod.CASH, BookingStatus.PENDING,
     '', 0),
    ('book-005', 'Ruwan Senanayake', 'ruwan.s@example.com', '+94 71 888 2233',
     '', -7, '17:00 - 21:00', 'Wedding Reception', 250,
     '500000', '500000', PaymentMethod.CARD, BookingStatus.CONFIRMED,
     'Event completed successfully', -30),
    ('book-006', 'Lakshmi Abeywardena', 'lakshmi.a@example.com', '+94 75 456 7890',
     '', 30, '13:00 - 17:00', 'Baby Shower', 40,
     '65000', '20000', PaymentMethod.BANK_TRANSFER, BookingStatus.CONFIRMED,
     '', -1),
]


def _at(day: date) -> datetime:
    return datetime.combine(day, time(10, 0))


def build_seed_data(today: date | None = None) -> tuple[list[Booking], list[Customer], list[Payment]]:
    """Return (bookings, customers, payments) ready for ``BookingRegistry``."""
    today = today or date.today()
    bookings, customers, payments = [], [], []

    for index, row in enumerate(_BOOKINGS, start=1):
        (booking_id, name, email, phone, address, offset, slot, event_type, guests,
         total, paid, method, status, notes, created_offset) = row
        created_at = _at(today + timedelta(days=created_offset))

        customers.append(Customer(
            id=f"cust-{index:03d}",
            name=name,
            email=email,
            phone=phone,
            address=address,
            created_at=created_at - timedelta(days=30),
        ))
        bookings.append(Booking(
            id=booking_id,
            customer_name=name,
            customer_email=email,
            customer_phone=phone,
            event_date=today + timedelta(days=offset),
            time_slot=slot,
            event_type=event_type,
            guest_count=guests,
            total_amount=Decimal(total),
            advance_amount=Decimal(paid),
            payment_method=method,
            status=status,
            notes=notes,
            created_at=created_at,
            updated_at=created_at,
        ))
        if Decimal(paid) > 0:
            payments.append(Payment(
                id=f"pay-{len(payments) + 1:03d}",
                booking_id=booking_id,
                amount=Decimal(paid),
                payment_type=PaymentType.FULL if paid == total else PaymentType.ADVANCE,
                method=method,
                transaction_id=f"TRX-SL-{index:03d}" if method != PaymentMethod.CASH else None,
                paid_at=created_at,
            ))

    return bookings, customers, payments
