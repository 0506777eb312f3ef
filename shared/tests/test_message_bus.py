"""Tests for the message bus and the registry unit of work."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

import pytest

from apps.bookings.domain.entities import Booking
from apps.bookings.domain.events import BookingConfirmed
from apps.bookings.domain.registry import BookingRegistry
from shared.application.message_bus import MessageBus
from shared.application.uow import RegistryUnitOfWork


@dataclass
class PingCommand:
    value: int


def _booking(**overrides):
    fields = dict(
        id="book-1",
        customer_name="Kasun Perera",
        customer_email="kasun@example.com",
        customer_phone="+94 71 123 4567",
        event_date=date(2026, 5, 1),
        time_slot="09:00 - 13:00",
        event_type="Wedding Reception",
        guest_count=100,
        total_amount=Decimal("100000"),
    )
    fields.update(overrides)
    return Booking(**fields)


def test_command_goes_to_its_single_handler():
    bus = MessageBus()
    bus.register_command_handler(PingCommand, lambda command: command.value * 2)

    assert bus.handle_command(PingCommand(21)) == 42
    with pytest.raises(ValueError):
        bus.register_command_handler(PingCommand, lambda command: None)


def test_unregistered_command_raises_lookup_error():
    with pytest.raises(LookupError):
        MessageBus().handle_command(PingCommand(1))


def test_failing_event_handler_does_not_stop_the_others():
    bus = MessageBus()
    received = []

    def broken(event):
        raise RuntimeError("smtp down")

    def recorder(event):
        received.append(event.booking_id)

    bus.register_event_handler(BookingConfirmed, broken)
    bus.register_event_handler(BookingConfirmed, recorder)

    failures = bus.publish_events([BookingConfirmed(booking_id="book-1")])

    assert received == ["book-1"]
    assert [name for name, _ in failures] == ["broken"]


def test_handler_return_values_are_collected():
    bus = MessageBus()
    bus.register_event_handler(BookingConfirmed, lambda event: {"email": True})
    bus.register_event_handler(BookingConfirmed, lambda event: None)
    results = []

    bus.publish_events([BookingConfirmed(booking_id="book-1")], results=results)

    assert [outcome for _, outcome in results] == [{"email": True}]


def test_unit_of_work_publishes_events_after_commit():
    registry = BookingRegistry([_booking()])
    bus = MessageBus()
    published = []
    bus.register_event_handler(BookingConfirmed, published.append)

    with RegistryUnitOfWork(registry, bus) as uow:
        booking = registry.get_booking("book-1")
        booking.confirm()
        registry.update_booking(booking.id, status=booking.status)
        uow.collect_events(booking)
        assert published == []

    assert [event.booking_id for event in published] == ["book-1"]


def test_unit_of_work_restores_registry_on_error():
    registry = BookingRegistry([_booking()])
    bus = MessageBus()
    published = []
    bus.register_event_handler(BookingConfirmed, published.append)

    with pytest.raises(RuntimeError):
        with RegistryUnitOfWork(registry, bus) as uow:
            booking = registry.get_booking("book-1")
            booking.confirm()
            registry.update_booking(booking.id, status=booking.status)
            registry.add_booking(_booking(id="book-2", time_slot="13:00 - 17:00"))
            uow.collect_events(booking)
            raise RuntimeError("boom")

    assert registry.get_booking("book-1").status.value == "pending"
    assert registry.get_booking("book-2") is None
    assert registry.get_bookings_by_date(date(2026, 5, 1))[0].id == "book-1"
    assert published == []
