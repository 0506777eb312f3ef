"""
Availability

A slot on a date is occupied when an active (not cancelled) booking holds
the same date and slot label. Cancelled bookings never block a slot, so a
slot frees up the moment its booking is cancelled.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import date
from typing import Iterable, Sequence

from apps.bookings.domain.entities import Booking
from apps.bookings.domain.slots import TimeSlot


def is_slot_available(event_date: date, time_slot: str, bookings: Iterable[Booking]) -> bool:
    """Linear check over all bookings."""
    return not any(
        booking.event_date == event_date
        and booking.time_slot == time_slot
        and booking.blocks_slot
        for booking in bookings
    )


class AvailabilityChecker:
    """
    Date-indexed availability over a fixed set of bookings

    The index is built once; each check afterwards only looks at the
    bookings of the requested date.

    Usage:
        checker = AvailabilityChecker(registry.list_bookings())
        if checker.is_available(date(2026, 3, 14), '09:00 - 13:00'):
            ...
    """

    def __init__(self, bookings: Iterable[Booking]):
        self._by_date: dict[date, list[Booking]] = defaultdict(list)
        for booking in bookings:
            self._by_date[booking.event_date].append(booking)

    def is_available(self, event_date: date, time_slot: str, *, exclude_booking_id: str | None = None) -> bool:
        return not any(
            booking.time_slot == time_slot
            and booking.blocks_slot
            and booking.id != exclude_booking_id
            for booking in self._by_date.get(event_date, ())
        )

    def available_slots(self, event_date: date, slots: Sequence[TimeSlot]) -> list[tuple[TimeSlot, bool]]:
        """Pair every catalog slot with its availability on ``event_date``."""
        return [(slot, self.is_available(event_date, slot.label)) for slot in slots]
