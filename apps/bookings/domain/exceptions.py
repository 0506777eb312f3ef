"""Errors raised by the booking domain."""

from __future__ import annotations


class BookingError(Exception):
    """Base class for booking domain errors."""


class BookingValidationError(BookingError):
    """Booking input was rejected; ``errors`` maps field name to message."""

    def __init__(self, errors: dict[str, str]):
        self.errors = dict(errors)
        super().__init__("; ".join(f"{field}: {message}" for field, message in self.errors.items()))


class BookingConflictError(BookingError):
    """A booking with the same id is already registered."""


class SlotUnavailableError(BookingError):
    """The requested date and time slot are taken by an active booking."""


class BookingNotFoundError(BookingError, LookupError):
    """No booking with the given id exists."""


class CustomerConflictError(BookingError):
    """A customer with the same email (or id) is already registered."""


class OverpaymentError(BookingError):
    """A payment would push the paid amount above the booking total."""


class InvalidStatusTransition(BookingError, ValueError):
    """The lifecycle status change is not allowed."""
