"""Tests for the booking use cases run through the message bus."""

from datetime import date, datetime
from decimal import Decimal

import pytest

from apps.bookings.application.command_handlers import (
    CancelBookingCommand,
    ConfirmBookingCommand,
    CreateBookingCommand,
    RecordPaymentCommand,
    UpdateBookingCommand,
    register_command_handlers,
)
from apps.bookings.domain.entities import BookingStatus, PaymentStatus, PaymentType
from apps.bookings.domain.events import BookingCancelled, BookingCreated, PaymentRecorded
from apps.bookings.domain.exceptions import (
    BookingNotFoundError,
    BookingValidationError,
    InvalidStatusTransition,
    OverpaymentError,
    SlotUnavailableError,
)
from apps.bookings.domain.registry import BookingRegistry
from apps.bookings.domain.slots import generate_time_slots
from shared.application.message_bus import MessageBus

EVENT_DAY = date(2026, 10, 3)


@pytest.fixture
def registry():
    return BookingRegistry()


@pytest.fixture
def published():
    return []


@pytest.fixture
def bus(registry, published):
    bus = MessageBus()
    register_command_handlers(bus, registry, generate_time_slots())
    for event_type in (BookingCreated, BookingCancelled, PaymentRecorded):
        bus.register_event_handler(event_type, published.append)
    return bus


def _create(**overrides):
    fields = dict(
        customer_name="Kasun Perera",
        customer_email="kasun.perera@example.com",
        customer_phone="+94 71 123 4567",
        event_date=EVENT_DAY,
        time_slot="09:00 - 13:00",
        event_type="Wedding Reception",
        guest_count=200,
        advance_amount=Decimal("150000"),
        total_amount=Decimal("450000"),
        payment_method="card",
        transaction_id="TRX-1",
    )
    fields.update(overrides)
    return CreateBookingCommand(**fields)


def test_create_booking_with_advance(bus, registry, published):
    booking = bus.handle_command(_create()).booking

    assert booking.status == BookingStatus.CONFIRMED
    assert booking.payment_status == PaymentStatus.ADVANCE
    assert booking.advance_amount == Decimal("150000")

    payments = registry.get_payments_by_booking(booking.id)
    assert [(p.amount, p.payment_type, p.transaction_id) for p in payments] == [
        (Decimal("150000"), PaymentType.ADVANCE, "TRX-1"),
    ]
    assert registry.get_customer("kasun.perera@example.com") is not None
    assert [type(event) for event in published] == [BookingCreated]
    assert published[0].booking_id == booking.id


def test_create_booking_without_advance_stays_pending(bus, registry):
    booking = bus.handle_command(_create(advance_amount=Decimal("0"))).booking

    assert booking.status == BookingStatus.PENDING
    assert booking.payment_status == PaymentStatus.PENDING
    assert registry.get_payments_by_booking(booking.id) == []


def test_total_is_quoted_when_missing(bus):
    booking = bus.handle_command(_create(
        total_amount=None, advance_amount=Decimal("0"), time_slot="21:00 - 22:00", guest_count=100,
    )).booking

    assert booking.total_amount == Decimal("2000")


def test_advance_above_quote_is_rejected(bus, registry):
    with pytest.raises(BookingValidationError) as excinfo:
        bus.handle_command(_create(total_amount=None, advance_amount=Decimal("5000")))

    assert "advance_amount" in excinfo.value.errors
    assert len(registry) == 0


def test_invalid_input_stores_nothing(bus, registry, published):
    with pytest.raises(BookingValidationError) as excinfo:
        bus.handle_command(_create(customer_email="kasun", guest_count=0))

    assert set(excinfo.value.errors) == {"customer_email", "guest_count"}
    assert len(registry) == 0
    assert registry.list_customers() == []
    assert published == []


def test_double_booking_is_rejected(bus, registry):
    bus.handle_command(_create())

    with pytest.raises(SlotUnavailableError):
        bus.handle_command(_create(customer_email="other@example.com", advance_amount=Decimal("0")))
    assert len(registry) == 1


def test_slot_can_be_rebooked_after_cancel(bus, registry, published):
    first = bus.handle_command(_create()).booking
    cancelled = bus.handle_command(CancelBookingCommand(booking_id=first.id, reason="Postponed"))

    second = bus.handle_command(_create(customer_email="nimasha.f@example.com")).booking

    assert cancelled.status == BookingStatus.CANCELLED
    assert second.status == BookingStatus.CONFIRMED
    assert isinstance(published[1], BookingCancelled)


def test_existing_customer_is_reused(bus, registry):
    bus.handle_command(_create())
    bus.handle_command(_create(customer_email="KASUN.PERERA@example.com", time_slot="13:00 - 17:00"))

    assert len(registry.list_customers()) == 1
    assert len(registry.customer_bookings("kasun.perera@example.com")) == 2


def test_payment_types_are_inferred(bus, registry):
    booking = bus.handle_command(_create(advance_amount=Decimal("0"))).booking

    first = bus.handle_command(RecordPaymentCommand(booking_id=booking.id, amount=Decimal("150000")))
    second = bus.handle_command(RecordPaymentCommand(booking_id=booking.id, amount=Decimal("300000")))

    assert first.payment_type == PaymentType.ADVANCE
    assert second.payment_type == PaymentType.BALANCE
    assert registry.get_booking(booking.id).payment_status == PaymentStatus.FULL


def test_single_payment_covering_total_is_full(bus):
    booking = bus.handle_command(_create(advance_amount=Decimal("0"))).booking

    payment = bus.handle_command(RecordPaymentCommand(
        booking_id=booking.id, amount=Decimal("450000"), method="bank_transfer",
        paid_at=datetime(2026, 9, 1, 10, 0),
    ))

    assert payment.payment_type == PaymentType.FULL
    assert payment.paid_at == datetime(2026, 9, 1, 10, 0)


def test_payment_does_not_confirm_pending_booking(bus, registry, published):
    booking = bus.handle_command(_create(advance_amount=Decimal("0"))).booking

    bus.handle_command(RecordPaymentCommand(booking_id=booking.id, amount=Decimal("1000")))

    stored = registry.get_booking(booking.id)
    assert stored.status == BookingStatus.PENDING
    assert stored.payment_status == PaymentStatus.ADVANCE
    assert isinstance(published[-1], PaymentRecorded)
    assert published[-1].paid_total == Decimal("1000")


def test_payment_errors(bus):
    booking = bus.handle_command(_create()).booking

    with pytest.raises(BookingNotFoundError):
        bus.handle_command(RecordPaymentCommand(booking_id="book-404", amount=Decimal("10")))
    with pytest.raises(BookingValidationError) as excinfo:
        bus.handle_command(RecordPaymentCommand(booking_id=booking.id, amount=Decimal("-1"), method="cheque"))
    assert set(excinfo.value.errors) == {"amount", "method"}
    with pytest.raises(OverpaymentError):
        bus.handle_command(RecordPaymentCommand(booking_id=booking.id, amount=Decimal("300001")))


def test_update_moves_booking_when_target_is_free(bus, registry):
    booking = bus.handle_command(_create()).booking
    bus.handle_command(_create(customer_email="other@example.com", time_slot="13:00 - 17:00"))

    with pytest.raises(SlotUnavailableError):
        bus.handle_command(UpdateBookingCommand(booking.id, {"time_slot": "13:00 - 17:00"}))

    updated = bus.handle_command(UpdateBookingCommand(booking.id, {"time_slot": "5:00 PM - 9:00 PM"}))
    assert updated.time_slot == "17:00 - 21:00"


def test_update_keeping_own_slot_is_allowed(bus):
    booking = bus.handle_command(_create()).booking

    updated = bus.handle_command(UpdateBookingCommand(booking.id, {"guest_count": 210, "notes": "Extra chairs"}))

    assert updated.guest_count == 210
    assert updated.notes == "Extra chairs"


def test_update_validation(bus):
    booking = bus.handle_command(_create()).booking

    with pytest.raises(BookingValidationError) as excinfo:
        bus.handle_command(UpdateBookingCommand(booking.id, {
            "total_amount": Decimal("100000"),
            "customer_phone": "12",
            "advance_amount": Decimal("1"),
        }))

    assert set(excinfo.value.errors) == {"total_amount", "customer_phone", "advance_amount"}
    with pytest.raises(BookingNotFoundError):
        bus.handle_command(UpdateBookingCommand("book-404", {"notes": "x"}))


def test_confirm_pending_booking(bus):
    booking = bus.handle_command(_create(advance_amount=Decimal("0"))).booking

    confirmed = bus.handle_command(ConfirmBookingCommand(booking.id))

    assert confirmed.status == BookingStatus.CONFIRMED


def test_cancelled_booking_cannot_be_confirmed(bus, registry):
    booking = bus.handle_command(_create()).booking
    bus.handle_command(CancelBookingCommand(booking.id))

    with pytest.raises(InvalidStatusTransition):
        bus.handle_command(ConfirmBookingCommand(booking.id))
    assert registry.get_booking(booking.id).status == BookingStatus.CANCELLED


def test_failing_notification_does_not_undo_booking(registry):
    bus = MessageBus()
    register_command_handlers(bus, registry, generate_time_slots())

    def send_confirmation(event):
        raise ConnectionError("mail server unreachable")

    bus.register_event_handler(BookingCreated, send_confirmation)

    booking = bus.handle_command(_create()).booking

    assert registry.get_booking(booking.id) is not None


def test_notification_outcome_is_returned_with_booking(registry):
    bus = MessageBus()
    register_command_handlers(bus, registry, generate_time_slots())
    bus.register_event_handler(BookingCreated, lambda event: {"email": False, "sms": True})

    creation = bus.handle_command(_create())

    assert creation.notifications == {"email": False, "sms": True}
    assert registry.get_booking(creation.booking.id).payment_status == PaymentStatus.ADVANCE


def test_email_change_links_booking_to_new_customer(bus, registry):
    booking = bus.handle_command(_create()).booking

    updated = bus.handle_command(UpdateBookingCommand(booking.id, {"customer_email": " sanduni@example.com "}))

    assert updated.customer_email == "sanduni@example.com"
    customer = registry.get_customer("sanduni@example.com")
    assert customer.name == "Kasun Perera"
    assert [b.id for b in registry.customer_bookings("sanduni@example.com")] == [booking.id]
    assert registry.customer_bookings("kasun.perera@example.com") == []
    assert registry.customer_total_spent("sanduni@example.com") == Decimal("150000")


def test_email_change_to_known_customer_reuses_record(bus, registry):
    bus.handle_command(_create(customer_email="nimasha.f@example.com", time_slot="13:00 - 17:00"))
    booking = bus.handle_command(_create()).booking

    bus.handle_command(UpdateBookingCommand(booking.id, {"customer_email": "Nimasha.F@example.com"}))

    assert len(registry.list_customers()) == 2
    assert len(registry.customer_bookings("nimasha.f@example.com")) == 2
