"""Event handlers that notify customers once a use case has committed."""

from __future__ import annotations

import logging

from apps.bookings.conf import hall_details
from apps.bookings.domain.events import BookingCreated

from .services import send_booking_confirmation

logger = logging.getLogger(__name__)


def register_event_handlers(bus, registry, invoice_numbers):
    """Subscribe the notification handlers to the bus of one registry."""

    def send_confirmation_on_booking_created(event: BookingCreated) -> dict | None:
        """Returns the per-channel delivery result, e.g. ``{"email": True, "sms": False}``."""
        booking = registry.get_booking(event.booking_id)
        if booking is None:
            logger.warning(f"Booking {event.booking_id} vanished before its confirmation was sent")
            return None
        number = invoice_numbers.number_for(booking.id)
        return send_booking_confirmation(booking, hall_details(), number)

    bus.register_event_handler(BookingCreated, send_confirmation_on_booking_created)
