"""Tests for the in-memory booking registry."""

import dataclasses
from datetime import date
from decimal import Decimal

import pytest

from apps.bookings.domain.entities import (
    Booking,
    BookingStatus,
    Customer,
    Payment,
    PaymentStatus,
    PaymentType,
    TransactionStatus,
)
from apps.bookings.domain.exceptions import (
    BookingConflictError,
    BookingNotFoundError,
    CustomerConflictError,
    InvalidStatusTransition,
    OverpaymentError,
)
from apps.bookings.domain.registry import BookingRegistry
from apps.bookings.seed import build_seed_data

EVENT_DAY = date(2026, 9, 12)


def _booking(booking_id="book-1", **overrides):
    fields = dict(
        id=booking_id,
        customer_name="Kasun Perera",
        customer_email="kasun.perera@example.com",
        customer_phone="+94 71 123 4567",
        event_date=EVENT_DAY,
        time_slot="09:00 - 13:00",
        event_type="Wedding Reception",
        guest_count=200,
        total_amount=Decimal("450000"),
    )
    fields.update(overrides)
    return Booking(**fields)


def _payment(amount, booking_id="book-1", status=TransactionStatus.SUCCESS, **overrides):
    return Payment(booking_id=booking_id, amount=Decimal(amount), status=status, **overrides)


@pytest.fixture
def registry():
    return BookingRegistry([_booking()])


def test_added_booking_round_trips():
    original = _booking(advance_amount=Decimal("150000"), notes="Poruwa setup")
    registry = BookingRegistry([original])

    stored = registry.get_booking("book-1")

    compared = [f.name for f in dataclasses.fields(Booking) if f.name not in ("updated_at", "_events")]
    assert {name: getattr(stored, name) for name in compared} == {
        name: getattr(original, name) for name in compared
    }
    assert stored is not original
    assert len(registry) == 1


def test_returned_records_are_detached(registry):
    copy = registry.get_booking("book-1")
    copy.notes = "changed outside"

    assert registry.get_booking("book-1").notes == ""


def test_duplicate_booking_id_is_rejected(registry):
    with pytest.raises(BookingConflictError):
        registry.add_booking(_booking(time_slot="13:00 - 17:00"))


def test_update_merges_fields_and_stamps_time(registry):
    before = registry.get_booking("book-1").updated_at

    updated = registry.update_booking("book-1", guest_count=220, notes="Poruwa setup")

    assert updated.guest_count == 220
    assert updated.notes == "Poruwa setup"
    assert updated.customer_name == "Kasun Perera"
    assert updated.updated_at >= before


def test_update_is_idempotent(registry):
    first = registry.update_booking("book-1", guest_count=180)
    second = registry.update_booking("book-1", guest_count=180)

    assert first.guest_count == second.guest_count == 180
    assert second.payment_status == first.payment_status


def test_update_of_unknown_booking_returns_none(registry):
    assert registry.update_booking("book-404", notes="x") is None


def test_update_rejects_read_only_fields(registry):
    with pytest.raises(ValueError):
        registry.update_booking("book-1", payment_status=PaymentStatus.FULL)
    with pytest.raises(ValueError):
        registry.update_booking("book-1", advance_amount=Decimal("1"))
    with pytest.raises(ValueError):
        registry.update_booking("book-1", id="book-2")


def test_cancelled_booking_never_leaves_cancelled(registry):
    registry.update_booking("book-1", status=BookingStatus.CANCELLED)

    with pytest.raises(InvalidStatusTransition):
        registry.update_booking("book-1", status=BookingStatus.CONFIRMED)


def test_moving_a_booking_updates_the_date_index(registry):
    registry.update_booking("book-1", event_date=date(2026, 9, 13))

    assert registry.get_bookings_by_date(EVENT_DAY) == []
    assert [b.id for b in registry.get_bookings_by_date(date(2026, 9, 13))] == ["book-1"]


def test_delete_removes_booking(registry):
    assert registry.delete_booking("book-1") is True
    assert registry.get_booking("book-1") is None
    assert registry.delete_booking("book-1") is False


def test_slot_is_free_again_after_cancel(registry):
    assert not registry.is_slot_available(EVENT_DAY, "09:00 - 13:00")

    registry.update_booking("book-1", status=BookingStatus.CANCELLED)

    assert registry.is_slot_available(EVENT_DAY, "09:00 - 13:00")


def test_only_successful_payments_count(registry):
    registry.add_payment(_payment("30000"))
    registry.add_payment(_payment("20000"))
    registry.add_payment(_payment("50000", status=TransactionStatus.FAILED))

    booking = registry.get_booking("book-1")
    assert booking.advance_amount == Decimal("50000")
    assert booking.payment_status == PaymentStatus.ADVANCE
    assert len(registry.get_payments_by_booking("book-1")) == 3


def test_advance_then_balance_settles_booking(registry):
    registry.add_payment(_payment("150000", payment_type=PaymentType.ADVANCE))
    booking = registry.get_booking("book-1")
    assert booking.payment_status == PaymentStatus.ADVANCE
    assert booking.balance == Decimal("300000")

    registry.add_payment(_payment("300000", payment_type=PaymentType.BALANCE))
    booking = registry.get_booking("book-1")
    assert booking.advance_amount == Decimal("450000")
    assert booking.payment_status == PaymentStatus.FULL
    assert booking.balance == Decimal("0")


def test_payment_for_unknown_booking_is_rejected(registry):
    with pytest.raises(BookingNotFoundError):
        registry.add_payment(_payment("1000", booking_id="book-404"))


def test_overpayment_is_rejected(registry):
    registry.add_payment(_payment("400000"))

    with pytest.raises(OverpaymentError):
        registry.add_payment(_payment("60000"))
    assert registry.paid_total("book-1") == Decimal("400000")


def test_failed_payment_may_exceed_balance(registry):
    registry.add_payment(_payment("500000", status=TransactionStatus.FAILED))

    assert registry.get_booking("book-1").payment_status == PaymentStatus.PENDING


def test_customers_are_keyed_by_email():
    registry = BookingRegistry(customers=[Customer(
        id="cust-1", name="Kasun Perera", email="Kasun.Perera@example.com", phone="+94 71 123 4567",
    )])

    assert registry.get_customer("kasun.perera@EXAMPLE.com").id == "cust-1"
    with pytest.raises(CustomerConflictError):
        registry.add_customer(Customer(
            id="cust-2", name="K. Perera", email="kasun.perera@example.com", phone="+94 71 000 0000",
        ))


def test_customer_update_rekeys_on_email_change():
    registry = BookingRegistry(customers=[
        Customer(id="cust-1", name="Kasun", email="kasun@example.com", phone="+94 71 123 4567"),
    ])

    registry.update_customer("cust-1", email="kasun.p@example.com")

    assert registry.get_customer("kasun@example.com") is None
    assert registry.get_customer("kasun.p@example.com").id == "cust-1"
    assert registry.update_customer("cust-404", name="x") is None


def test_customer_bookings_and_spend_are_computed(registry):
    registry.add_booking(_booking("book-2", time_slot="13:00 - 17:00", total_amount=Decimal("85000")))
    registry.add_payment(_payment("150000"))

    assert {b.id for b in registry.customer_bookings("KASUN.PERERA@example.com")} == {"book-1", "book-2"}
    assert registry.customer_total_spent("kasun.perera@example.com") == Decimal("150000")


def test_seed_data_is_consistent():
    today = date(2026, 3, 1)
    bookings, customers, payments = build_seed_data(today)
    registry = BookingRegistry(bookings, customers, payments)

    assert len(registry) == 6
    assert len(registry.list_customers()) == 6
    for booking in registry.list_bookings():
        assert booking.advance_amount == registry.paid_total(booking.id)
        assert booking.advance_amount <= booking.total_amount

    kasun = registry.get_booking("book-001")
    assert kasun.event_date == date(2026, 3, 3)
    assert kasun.payment_status == PaymentStatus.ADVANCE
    assert registry.get_booking("book-004").payment_status == PaymentStatus.PENDING
    assert registry.get_booking("book-005").payment_status == PaymentStatus.FULL


def test_paid_amount_cannot_be_edited_past_the_ledger(registry):
    registry.add_payment(_payment("100000"))

    with pytest.raises(ValueError):
        registry.update_booking("book-1", advance_amount=Decimal("0"))

    booking = registry.get_booking("book-1")
    assert booking.advance_amount == registry.paid_total("book-1") == Decimal("100000")
    assert booking.payment_status == PaymentStatus.ADVANCE


def test_advance_on_added_booking_is_recorded_in_ledger():
    registry = BookingRegistry([_booking(advance_amount=Decimal("150000"))])

    payments = registry.get_payments_by_booking("book-1")
    assert [(p.amount, p.payment_type, p.status) for p in payments] == [
        (Decimal("150000"), PaymentType.ADVANCE, TransactionStatus.SUCCESS),
    ]

    registry.add_payment(_payment("300000", payment_type=PaymentType.BALANCE))

    booking = registry.get_booking("book-1")
    assert booking.advance_amount == Decimal("450000")
    assert booking.payment_status == PaymentStatus.FULL
    assert booking.balance == Decimal("0")


def test_advance_counts_toward_overpayment():
    registry = BookingRegistry([_booking(advance_amount=Decimal("150000"))])

    with pytest.raises(OverpaymentError):
        registry.add_payment(_payment("300001"))
    assert registry.get_booking("book-1").advance_amount == Decimal("150000")


def test_booking_payments_must_match_its_advance():
    registry = BookingRegistry()

    with pytest.raises(ValueError):
        registry.add_booking(_booking(advance_amount=Decimal("150000")), [_payment("100000")])
    with pytest.raises(ValueError):
        registry.add_booking(_booking(), [_payment("1000", booking_id="book-2")])
    assert len(registry) == 0

    registry.add_booking(
        _booking(advance_amount=Decimal("150000")),
        [_payment("100000"), _payment("50000"), _payment("9000", status=TransactionStatus.FAILED)],
    )
    assert len(registry.get_payments_by_booking("book-1")) == 3
    assert registry.get_booking("book-1").payment_status == PaymentStatus.ADVANCE
