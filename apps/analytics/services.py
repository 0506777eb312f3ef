"""Aggregated statistics over the booking registry.

All figures are computed on demand from the registry; nothing here is stored.
"""

from __future__ import annotations

from collections import Counter, defaultdict
from datetime import date
from decimal import Decimal

from apps.bookings.domain.entities import BookingStatus, PaymentStatus
from shared.formatting import format_label

MONTHLY_REVENUE_MONTHS = 6
RECENT_BOOKINGS_LIMIT = 3
NEXT_BOOKINGS_LIMIT = 5


def _shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def dashboard_stats(registry, today: date | None = None) -> dict:
    """Headline numbers for the dashboard."""
    today = today or date.today()
    bookings = registry.list_bookings()
    payments = [p for p in registry.list_payments() if p.is_successful]

    total_revenue = sum(
        (b.advance_amount for b in bookings if b.payment_status != PaymentStatus.PENDING),
        Decimal('0'),
    )
    upcoming = [
        b for b in bookings
        if b.event_date >= today and b.status == BookingStatus.CONFIRMED
    ]
    pending_payments = [
        b for b in bookings
        if b.payment_status in (PaymentStatus.PENDING, PaymentStatus.ADVANCE)
    ]

    revenue_by_month = defaultdict(Decimal)
    for payment in payments:
        revenue_by_month[(payment.paid_at.year, payment.paid_at.month)] += payment.amount
    months = [
        _shift_month(today.year, today.month, offset)
        for offset in range(1 - MONTHLY_REVENUE_MONTHS, 1)
    ]
    monthly_revenue = [
        {
            'month': date(year, month, 1).strftime('%b %Y'),
            'revenue': revenue_by_month.get((year, month), Decimal('0')),
        }
        for year, month in months
    ]

    by_event_type = Counter(b.event_type for b in bookings)

    revenue_by_method = defaultdict(Decimal)
    for payment in payments:
        revenue_by_method[payment.method] += payment.amount

    return {
        'total_revenue': total_revenue,
        'total_bookings': len(bookings),
        'upcoming_bookings': len(upcoming),
        'pending_payments': len(pending_payments),
        'monthly_revenue': monthly_revenue,
        'bookings_by_event_type': [
            {'type': event_type, 'count': count}
            for event_type, count in by_event_type.most_common()
        ],
        'revenue_by_payment_method': [
            {'method': format_label(method.value), 'amount': amount}
            for method, amount in sorted(revenue_by_method.items(), key=lambda item: item[0].value)
        ],
    }


def next_bookings(registry, today: date | None = None, limit: int = NEXT_BOOKINGS_LIMIT) -> list:
    """Active bookings from ``today`` on, soonest first."""
    today = today or date.today()
    ahead = [
        b for b in registry.list_bookings()
        if b.event_date >= today and b.status != BookingStatus.CANCELLED
    ]
    ahead.sort(key=lambda b: (b.event_date, b.time_slot))
    return ahead[:limit]


def customer_summary(registry, email: str, today: date | None = None) -> dict:
    """Spend and booking counts for one customer, looked up by email."""
    today = today or date.today()
    bookings = registry.customer_bookings(email)
    recent = sorted(bookings, key=lambda b: b.event_date, reverse=True)[:RECENT_BOOKINGS_LIMIT]

    return {
        'total_spent': registry.customer_total_spent(email),
        'bookings_count': len(bookings),
        'upcoming_count': sum(
            1 for b in bookings
            if b.event_date >= today and b.status == BookingStatus.CONFIRMED
        ),
        'recent_bookings': recent,
    }


def month_summary(registry, year: int, month: int) -> dict:
    """Calendar figures for one month. Cancelled bookings are left out."""
    if not 1 <= month <= 12:
        raise ValueError(f"Invalid month: {month}")

    active = [
        b for b in registry.list_bookings()
        if b.event_date.year == year
        and b.event_date.month == month
        and b.status != BookingStatus.CANCELLED
    ]
    active.sort(key=lambda b: (b.event_date, b.time_slot))

    by_day = defaultdict(list)
    for booking in active:
        by_day[booking.event_date].append(booking)

    return {
        'year': year,
        'month': month,
        'total_bookings': len(active),
        'confirmed': sum(1 for b in active if b.status == BookingStatus.CONFIRMED),
        'pending': sum(1 for b in active if b.status == BookingStatus.PENDING),
        'expected_revenue': sum((b.total_amount for b in active), Decimal('0')),
        'days': dict(by_day),
    }
