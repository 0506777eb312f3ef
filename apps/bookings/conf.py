"""Hall configuration read from ``settings.HALL_BOOKING``.

Missing keys fall back to ``DEFAULTS`` so tests can override a single value.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from django.conf import settings  # type: ignore

from apps.bookings.domain.slots import SlotRates, TimeSlot, generate_time_slots

DEFAULTS = {
    'HALL': {
        'name': 'Royal Grand Banquet Hall',
        'address': 'No. 120, High Level Road, Maharagama, Sri Lanka',
        'phone': '+94 11 345 6789',
        'email': 'info@royalgrandhall.lk',
        'capacity': 350,
    },
    'SLOT_START_HOUR': 9,
    'SLOT_END_HOUR': 22,
    'SLOT_BLOCK_HOURS': 4,
    'STANDARD_RATE': '1000',
    'EVENING_RATE': '1500',
    'EVENING_FROM_HOUR': 18,
    'PER_GUEST_RATE': '5',
    'TAX_RATE': '0.10',
    'LOAD_SEED_DATA': True,
}


@dataclass(frozen=True)
class HallDetails:
    name: str
    address: str
    phone: str
    email: str
    capacity: int = 0


def hall_setting(name: str):
    return getattr(settings, 'HALL_BOOKING', {}).get(name, DEFAULTS[name])


def hall_details() -> HallDetails:
    return HallDetails(**{**DEFAULTS['HALL'], **hall_setting('HALL')})


def slot_rates() -> SlotRates:
    return SlotRates(
        standard=Decimal(str(hall_setting('STANDARD_RATE'))),
        evening=Decimal(str(hall_setting('EVENING_RATE'))),
        evening_from_hour=int(hall_setting('EVENING_FROM_HOUR')),
    )


def time_slots() -> tuple[TimeSlot, ...]:
    return generate_time_slots(
        start_hour=int(hall_setting('SLOT_START_HOUR')),
        end_hour=int(hall_setting('SLOT_END_HOUR')),
        block_hours=int(hall_setting('SLOT_BLOCK_HOURS')),
        rates=slot_rates(),
    )


def per_guest_rate() -> Decimal:
    return Decimal(str(hall_setting('PER_GUEST_RATE')))


def tax_rate() -> Decimal:
    return Decimal(str(hall_setting('TAX_RATE')))
