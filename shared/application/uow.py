"""
Unit of Work Pattern

Groups the registry mutations of one use case and ensures that domain
events are published only after the use case completed without error.
"""

from abc import ABC, abstractmethod
from typing import List
import logging

from shared.application.message_bus import MessageBus
from shared.domain.base import DomainEvent

logger = logging.getLogger(__name__)


class AbstractUnitOfWork(ABC):
    """Abstract Unit of Work pattern"""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            self.commit()
        else:
            self.rollback()

    @abstractmethod
    def commit(self):
        """Commit the changes"""

    @abstractmethod
    def rollback(self):
        """Undo the changes"""

    @abstractmethod
    def collect_events(self, aggregate):
        """Collect events from aggregate root"""


class RegistryUnitOfWork(AbstractUnitOfWork):
    """
    Unit of Work over the in-memory booking registry

    A snapshot of the registry is taken on enter. If the block raises,
    the snapshot is restored so no half-finished use case stays visible
    (e.g. a customer created for a booking that was then rejected).
    On success the collected events are published on the message bus.
    Handler failures never undo the committed state; they end up in
    ``publish_failures``, and what the handlers returned in ``handler_results``.

    Usage:
        with RegistryUnitOfWork(registry, bus) as uow:
            booking = registry.get_booking(booking_id)
            booking.cancel()
            registry.update_booking(booking.id, status=booking.status)
            uow.collect_events(booking)
        # Events are published here
    """

    def __init__(self, registry, bus: MessageBus):
        self.registry = registry
        self.bus = bus
        self.publish_failures = []
        self.handler_results = []
        self._events: List[DomainEvent] = []
        self._snapshot = None

    def __enter__(self):
        self._snapshot = self.registry.snapshot()
        return self

    def commit(self):
        """Drop the snapshot and publish the collected events."""
        logger.debug(f"Committing unit of work with {len(self._events)} events")

        events = self._events.copy()
        self._events.clear()
        self._snapshot = None

        if events:
            self._publish_events(events)

    def rollback(self):
        """Restore the registry and discard events"""
        logger.warning(f"Rolling back unit of work, discarding {len(self._events)} events")
        if self._snapshot is not None:
            self.registry.restore(self._snapshot)
            self._snapshot = None
        self._events.clear()

    def collect_events(self, aggregate):
        """
        Collect events from aggregate root

        Extracts all domain events from the aggregate and
        clears them from the aggregate.
        """
        new_events = aggregate.events
        if new_events:
            self._events.extend(new_events)
            aggregate.clear_events()
            logger.debug(
                f"Collected {len(new_events)} events from "
                f"{aggregate.__class__.__name__} (ID: {aggregate.id})"
            )

    def _publish_events(self, events: List[DomainEvent]):
        logger.info(f"Publishing {len(events)} domain events after commit")
        self.publish_failures = self.bus.publish_events(events, results=self.handler_results)
