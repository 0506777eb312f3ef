"""
Booking Command Handlers

These are the use cases for the booking domain.
They orchestrate domain operations within a unit of work and publish the
resulting events once the registry holds the new state.

Commands:
- CreateBookingCommand: Create a new booking (and its customer/advance payment)
- RecordPaymentCommand: Record a payment against a booking
- UpdateBookingCommand: Edit booking details
- ConfirmBookingCommand: Confirm a pending booking
- CancelBookingCommand: Cancel a booking, freeing its slot
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Sequence
import logging

from shared.application.message_bus import MessageBus
from shared.application.uow import RegistryUnitOfWork
from shared.domain.base import new_id
from shared.domain.value_objects import to_decimal
from apps.bookings.domain.entities import (
    Booking,
    Customer,
    Payment,
    PaymentMethod,
    PaymentType,
    TransactionStatus,
)
from apps.bookings.domain.events import BookingCreated, PaymentRecorded
from apps.bookings.domain.exceptions import (
    BookingNotFoundError,
    BookingValidationError,
    SlotUnavailableError,
)
from apps.bookings.domain.registry import BookingRegistry
from apps.bookings.domain.slots import TimeSlot, find_slot, quote_total
from apps.bookings.domain.validators import validate_booking_input, validate_contact

logger = logging.getLogger(__name__)


# ===== Commands =====

@dataclass
class CreateBookingCommand:
    """
    Command to create a new booking

    ``total_amount`` is quoted from the slot and guest count when omitted.
    """
    customer_name: str
    customer_email: str
    customer_phone: str
    event_date: date | None
    time_slot: str
    event_type: str
    guest_count: int | None
    advance_amount: Decimal = Decimal('0')
    total_amount: Decimal | None = None
    payment_method: str = PaymentMethod.CASH.value
    notes: str = ''
    transaction_id: str | None = None


@dataclass
class RecordPaymentCommand:
    """Command to record a payment against a booking"""
    booking_id: str
    amount: Decimal
    method: str = PaymentMethod.CASH.value
    status: str = TransactionStatus.SUCCESS.value
    payment_type: str | None = None
    transaction_id: str | None = None
    paid_at: datetime | None = None


@dataclass
class UpdateBookingCommand:
    """Command to edit booking details"""
    booking_id: str
    changes: dict = field(default_factory=dict)


@dataclass
class ConfirmBookingCommand:
    """Command to confirm a pending booking"""
    booking_id: str


@dataclass
class CancelBookingCommand:
    """Command to cancel a booking"""
    booking_id: str
    reason: str = ''


@dataclass
class BookingCreation:
    """
    Result of CreateBookingCommand

    ``notifications`` holds what the confirmation handlers reported per
    channel, e.g. ``{"email": False, "sms": True}``. A failed delivery
    never undoes the booking.
    """
    booking: Booking
    notifications: dict = field(default_factory=dict)


# ===== Command Handlers =====

def ensure_customer(registry: BookingRegistry, name: str, email: str, phone: str) -> Customer:
    """Customer record for ``email``, created on first use."""
    customer = registry.get_customer(email)
    if customer is None:
        customer = registry.add_customer(Customer(
            id=new_id('cust'),
            name=name.strip(),
            email=email.strip(),
            phone=phone.strip(),
        ))
    return customer


class CreateBookingHandler:
    """
    Handler for CreateBooking command

    Steps:
    1. Validate the form field by field (nothing is stored on error)
    2. Resolve the slot and quote the total if none was given
    3. Check the slot is free on the date
    4. Create the customer on first booking (email is the key)
    5. Create and register the Booking aggregate
    6. Record the advance as a successful payment
    7. Publish BookingCreated after the unit of work commits
    """

    def __init__(self, registry: BookingRegistry, bus: MessageBus, slots: Sequence[TimeSlot],
                 per_guest_rate=Decimal('5')):
        self.registry = registry
        self.bus = bus
        self.slots = slots
        self.per_guest_rate = to_decimal(per_guest_rate)

    def handle(self, command: CreateBookingCommand) -> BookingCreation:
        """
        Handle booking creation

        Returns: BookingCreation with the stored booking and the
        notification outcome

        Raises:
            BookingValidationError: field errors in the input
            SlotUnavailableError: the date/slot is taken
        """
        errors = validate_booking_input(
            customer_name=command.customer_name,
            customer_email=command.customer_email,
            customer_phone=command.customer_phone,
            event_date=command.event_date,
            time_slot=command.time_slot,
            event_type=command.event_type,
            guest_count=command.guest_count,
            advance_amount=command.advance_amount,
            total_amount=command.total_amount,
            payment_method=command.payment_method,
            slots=self.slots,
        )
        if errors:
            raise BookingValidationError(errors)

        slot = find_slot(self.slots, command.time_slot)
        advance = to_decimal(command.advance_amount or 0)
        if command.total_amount is None:
            total = quote_total(slot, command.guest_count, self.per_guest_rate)
            if advance > total:
                raise BookingValidationError({'advance_amount': 'Advance cannot exceed total amount'})
        else:
            total = to_decimal(command.total_amount)

        logger.info(
            f"Creating booking for {command.customer_email} on "
            f"{command.event_date} {slot.label}"
        )

        if not self.registry.is_slot_available(command.event_date, slot.label):
            raise SlotUnavailableError(
                f"Time slot {slot.label} on {command.event_date} is already booked"
            )

        with RegistryUnitOfWork(self.registry, self.bus) as uow:
            ensure_customer(
                self.registry, command.customer_name, command.customer_email, command.customer_phone
            )

            booking = Booking.create(
                id=new_id('book'),
                customer_name=command.customer_name.strip(),
                customer_email=command.customer_email.strip(),
                customer_phone=command.customer_phone.strip(),
                event_date=command.event_date,
                time_slot=slot.label,
                event_type=command.event_type.strip(),
                guest_count=int(command.guest_count),
                total_amount=total,
                advance_amount=advance,
                payment_method=command.payment_method,
                notes=command.notes or '',
            )
            # The advance goes to the ledger together with the booking
            opening = []
            if advance > 0:
                opening.append(Payment(
                    id=new_id('pay'),
                    booking_id=booking.id,
                    amount=advance,
                    payment_type=PaymentType.FULL if advance >= total else PaymentType.ADVANCE,
                    method=command.payment_method,
                    status=TransactionStatus.SUCCESS,
                    transaction_id=command.transaction_id,
                ))
            self.registry.add_booking(booking, opening)

            booking.add_event(BookingCreated(
                aggregate_id=booking.id,
                booking_id=booking.id,
                customer_email=booking.customer_email,
                event_date=booking.event_date,
                time_slot=booking.time_slot,
                total_amount=booking.total_amount,
            ))
            uow.collect_events(booking)

        created = self.registry.get_booking(booking.id)
        logger.info(
            f"Booking created successfully: {created.id} "
            f"(status {created.status.value}, payment {created.payment_status.value})"
        )

        notifications = {}
        for _, outcome in uow.handler_results:
            if isinstance(outcome, dict):
                notifications.update(outcome)
        if any(value is False for value in notifications.values()):
            logger.warning(f"Confirmation for booking {created.id} not fully delivered: {notifications}")
        return BookingCreation(booking=created, notifications=notifications)


class RecordPaymentHandler:
    """
    Handler for recording a payment

    The payment type is inferred when not given: the first payment that
    covers the whole total is ``full``, a later one that settles the rest
    is ``balance``, anything smaller is ``advance``.
    """

    def __init__(self, registry: BookingRegistry, bus: MessageBus):
        self.registry = registry
        self.bus = bus

    def handle(self, command: RecordPaymentCommand) -> Payment:
        """
        Record the payment and resync the booking

        Raises:
            BookingValidationError: bad amount, method, status or type
            BookingNotFoundError: unknown booking
            OverpaymentError: the payment exceeds the outstanding balance
        """
        errors = _validate_payment(command)
        if errors:
            raise BookingValidationError(errors)

        booking = self.registry.get_booking(command.booking_id)
        if booking is None:
            raise BookingNotFoundError(f"Booking {command.booking_id} not found")

        amount = to_decimal(command.amount)
        payment_type = command.payment_type or self._infer_type(booking, amount).value

        logger.info(f"Recording {command.status} payment of {amount} for booking {booking.id}")

        with RegistryUnitOfWork(self.registry, self.bus) as uow:
            payment = self.registry.add_payment(Payment(
                id=new_id('pay'),
                booking_id=booking.id,
                amount=amount,
                payment_type=payment_type,
                method=command.method,
                status=command.status,
                transaction_id=command.transaction_id or None,
                paid_at=command.paid_at or datetime.now(),
            ))

            updated = self.registry.get_booking(booking.id)
            updated.add_event(PaymentRecorded(
                aggregate_id=updated.id,
                booking_id=updated.id,
                payment_id=payment.id,
                amount=payment.amount,
                paid_total=updated.advance_amount,
                payment_status=updated.payment_status.value,
            ))
            uow.collect_events(updated)

        return payment

    def _infer_type(self, booking: Booking, amount: Decimal) -> PaymentType:
        paid_before = self.registry.paid_total(booking.id)
        if amount >= booking.total_amount - paid_before:
            return PaymentType.FULL if paid_before == 0 else PaymentType.BALANCE
        return PaymentType.ADVANCE


def _validate_payment(command: RecordPaymentCommand) -> dict[str, str]:
    errors: dict[str, str] = {}
    try:
        if to_decimal(command.amount) <= 0:
            errors['amount'] = 'Amount must be positive'
    except (ArithmeticError, TypeError, ValueError):
        errors['amount'] = 'Amount must be a number'

    choices = {
        'method': PaymentMethod,
        'status': TransactionStatus,
        'payment_type': PaymentType,
    }
    for field_name, enum_type in choices.items():
        value = getattr(command, field_name)
        if value is None and field_name == 'payment_type':
            continue
        if getattr(value, 'value', value) not in {member.value for member in enum_type}:
            errors[field_name] = f"Unknown {field_name.replace('_', ' ')}"
    return errors


class UpdateBookingHandler:
    """
    Handler for editing a booking

    Moving a booking to another date or slot re-checks availability,
    ignoring the booking itself. The paid amount is not editable: it
    always follows the payment ledger. Changing the email links the
    booking to the customer with that email, who is created if needed.
    """

    EDITABLE_FIELDS = frozenset({
        'customer_name', 'customer_email', 'customer_phone', 'event_date', 'time_slot',
        'event_type', 'guest_count', 'total_amount', 'payment_method', 'notes', 'status',
    })

    def __init__(self, registry: BookingRegistry, bus: MessageBus, slots: Sequence[TimeSlot]):
        self.registry = registry
        self.bus = bus
        self.slots = slots

    def handle(self, command: UpdateBookingCommand) -> Booking:
        booking = self.registry.get_booking(command.booking_id)
        if booking is None:
            raise BookingNotFoundError(f"Booking {command.booking_id} not found")

        changes = dict(command.changes)
        errors = self._validate(booking, changes)
        if errors:
            raise BookingValidationError(errors)

        event_date = changes.get('event_date', booking.event_date)
        time_slot = changes.get('time_slot', booking.time_slot)
        moved = event_date != booking.event_date or time_slot != booking.time_slot
        if moved and not self.registry.is_slot_available(
            event_date, time_slot, exclude_booking_id=booking.id
        ):
            raise SlotUnavailableError(f"Time slot {time_slot} on {event_date} is already booked")

        logger.info(f"Updating booking {booking.id}: {', '.join(sorted(changes))}")
        with RegistryUnitOfWork(self.registry, self.bus):
            if 'customer_email' in changes:
                changes['customer_email'] = changes['customer_email'].strip()
                ensure_customer(
                    self.registry,
                    changes.get('customer_name', booking.customer_name),
                    changes['customer_email'],
                    changes.get('customer_phone', booking.customer_phone),
                )
            updated = self.registry.update_booking(booking.id, **changes)
        return updated

    def _validate(self, booking: Booking, changes: dict) -> dict[str, str]:
        errors: dict[str, str] = {}
        unknown = set(changes) - self.EDITABLE_FIELDS
        for name in sorted(unknown):
            errors[name] = 'This field cannot be changed'

        contact = validate_contact(
            changes.get('customer_name', booking.customer_name),
            changes.get('customer_email', booking.customer_email),
            changes.get('customer_phone', booking.customer_phone),
        )
        errors.update({name: message for name, message in contact.items() if name in changes})

        if 'time_slot' in changes:
            slot = find_slot(self.slots, changes['time_slot'])
            if slot is None:
                errors['time_slot'] = 'Unknown time slot'
            else:
                changes['time_slot'] = slot.label
        if 'event_type' in changes and not str(changes['event_type']).strip():
            errors['event_type'] = 'Event type is required'
        if 'guest_count' in changes and (changes['guest_count'] is None or int(changes['guest_count']) < 1):
            errors['guest_count'] = 'Guest count must be at least 1'
        if 'total_amount' in changes:
            total = to_decimal(changes['total_amount'])
            if total < booking.advance_amount:
                errors['total_amount'] = 'Total amount cannot be less than the amount already paid'
        if 'payment_method' in changes and getattr(
            changes['payment_method'], 'value', changes['payment_method']
        ) not in {method.value for method in PaymentMethod}:
            errors['payment_method'] = 'Unknown payment method'
        return errors


class ConfirmBookingHandler:
    """Handler for confirming a pending booking"""

    def __init__(self, registry: BookingRegistry, bus: MessageBus):
        self.registry = registry
        self.bus = bus

    def handle(self, command: ConfirmBookingCommand) -> Booking:
        """Confirm booking (PENDING -> CONFIRMED)"""
        logger.info(f"Confirming booking {command.booking_id}")

        with RegistryUnitOfWork(self.registry, self.bus) as uow:
            booking = self.registry.get_booking(command.booking_id)
            if booking is None:
                raise BookingNotFoundError(f"Booking {command.booking_id} not found")

            booking.confirm()
            self.registry.update_booking(booking.id, status=booking.status)
            uow.collect_events(booking)

        return self.registry.get_booking(command.booking_id)


class CancelBookingHandler:
    """Handler for cancelling a booking; its slot is free again right after"""

    def __init__(self, registry: BookingRegistry, bus: MessageBus):
        self.registry = registry
        self.bus = bus

    def handle(self, command: CancelBookingCommand) -> Booking:
        """Cancel booking"""
        logger.info(f"Cancelling booking {command.booking_id}, reason: {command.reason or '-'}")

        with RegistryUnitOfWork(self.registry, self.bus) as uow:
            booking = self.registry.get_booking(command.booking_id)
            if booking is None:
                raise BookingNotFoundError(f"Booking {command.booking_id} not found")

            booking.cancel(command.reason)
            self.registry.update_booking(booking.id, status=booking.status)
            uow.collect_events(booking)

        logger.info(f"Booking {command.booking_id} cancelled")
        return self.registry.get_booking(command.booking_id)


def register_command_handlers(bus: MessageBus, registry: BookingRegistry, slots: Sequence[TimeSlot],
                              per_guest_rate=Decimal('5')):
    """Wire every booking use case onto the bus."""
    bus.register_command_handler(
        CreateBookingCommand, CreateBookingHandler(registry, bus, slots, per_guest_rate).handle
    )
    bus.register_command_handler(RecordPaymentCommand, RecordPaymentHandler(registry, bus).handle)
    bus.register_command_handler(UpdateBookingCommand, UpdateBookingHandler(registry, bus, slots).handle)
    bus.register_command_handler(ConfirmBookingCommand, ConfirmBookingHandler(registry, bus).handle)
    bus.register_command_handler(CancelBookingCommand, CancelBookingHandler(registry, bus).handle)
