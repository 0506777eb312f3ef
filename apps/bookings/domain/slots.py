"""
Time-Slot Catalog

The hall is rented in fixed blocks of an operating day. Slots are not
stored anywhere: the catalog is regenerated from the schedule and rate
table, and availability is computed against existing bookings.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Sequence

from shared.domain.base import ValueObject
from shared.domain.value_objects import to_decimal
from shared.formatting import format_time


@dataclass(frozen=True)
class SlotRates(ValueObject):
    """Rate table: slots starting at ``evening_from_hour`` or later cost the evening rate."""
    standard: Decimal = Decimal('1000')
    evening: Decimal = Decimal('1500')
    evening_from_hour: int = 18

    def price_for(self, start_hour: int) -> Decimal:
        return self.evening if start_hour >= self.evening_from_hour else self.standard


@dataclass(frozen=True)
class TimeSlot(ValueObject):
    """A bookable block of the day, e.g. ``09:00 - 13:00``."""
    id: str
    start_time: str
    end_time: str
    price: Decimal

    @property
    def label(self) -> str:
        """Label stored on bookings."""
        return f"{self.start_time} - {self.end_time}"

    @property
    def display(self) -> str:
        """12-hour form shown to customers."""
        return f"{format_time(self.start_time)} - {format_time(self.end_time)}"

    @property
    def start_hour(self) -> int:
        return int(self.start_time.split(':')[0])


def generate_time_slots(
    start_hour: int = 9,
    end_hour: int = 22,
    block_hours: int = 4,
    rates: SlotRates | None = None,
) -> tuple[TimeSlot, ...]:
    """
    Build the ordered slot catalog for one operating day.

    Blocks of ``block_hours`` start at ``start_hour``; the last block is
    clipped at ``end_hour`` when the range does not divide evenly. With
    the defaults this yields 09-13, 13-17, 17-21 and 21-22.
    """
    if block_hours <= 0:
        raise ValueError("Block size must be positive")
    if not 0 <= start_hour < end_hour <= 24:
        raise ValueError(f"Invalid operating hours {start_hour}-{end_hour}")

    rates = rates or SlotRates()
    slots = []
    for hour in range(start_hour, end_hour, block_hours):
        block_end = min(hour + block_hours, end_hour)
        slots.append(TimeSlot(
            id=f"slot-{hour}",
            start_time=f"{hour:02d}:00",
            end_time=f"{block_end:02d}:00",
            price=rates.price_for(hour),
        ))
    return tuple(slots)


def find_slot(slots: Iterable[TimeSlot], label: str) -> TimeSlot | None:
    """Look a slot up by its stored label (or its 12-hour display form)."""
    return next((slot for slot in slots if label in (slot.label, slot.display)), None)


def slot_labels(slots: Sequence[TimeSlot]) -> list[str]:
    return [slot.label for slot in slots]


def quote_total(slot: TimeSlot, guest_count: int, per_guest_rate=Decimal('5')) -> Decimal:
    """Suggested booking total: slot base price plus a per-guest charge."""
    return slot.price + to_decimal(per_guest_rate) * guest_count
