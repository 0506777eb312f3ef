"""Application config and composition root of the booking backend.

The registry, message bus and invoice numbering live for the lifetime of
the process and are owned by this app config. ``reset()`` rebuilds them,
which is what startup does and what tests use to get a clean state.
"""

from __future__ import annotations

import logging
from datetime import date

from django.apps import AppConfig, apps  # type: ignore

logger = logging.getLogger(__name__)


class BookingsConfig(AppConfig):
    name = 'apps.bookings'
    label = 'bookings'
    verbose_name = 'Hall bookings'

    def ready(self):
        from apps.bookings.conf import hall_setting

        self.reset(load_seed=bool(hall_setting('LOAD_SEED_DATA')))

    def reset(self, *, load_seed: bool = False, today: date | None = None):
        """Build a fresh registry and wire the use cases and notification handlers."""
        from apps.bookings.application.command_handlers import register_command_handlers
        from apps.bookings.conf import per_guest_rate, time_slots
        from apps.bookings.domain.registry import BookingRegistry
        from apps.bookings.seed import build_seed_data
        from apps.finances.invoices import InvoiceNumberRegistry
        from apps.notifications.handlers import register_event_handlers
        from shared.application.message_bus import MessageBus

        if load_seed:
            bookings, customers, payments = build_seed_data(today)
            registry = BookingRegistry(bookings, customers, payments)
        else:
            registry = BookingRegistry()

        self.time_slots = time_slots()
        self.registry = registry
        self.message_bus = MessageBus()
        self.invoice_numbers = InvoiceNumberRegistry()

        register_command_handlers(self.message_bus, registry, self.time_slots, per_guest_rate())
        register_event_handlers(self.message_bus, registry, self.invoice_numbers)

        logger.info(f"Booking runtime ready: {registry!r}")
        return registry


def get_runtime() -> BookingsConfig:
    """The app config holding the process-wide registry and bus."""
    return apps.get_app_config('bookings')
