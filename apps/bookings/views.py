"""API views for the booking domain.

Views translate HTTP into commands on the message bus and read models from
the registry held by the bookings app config.
"""

from __future__ import annotations

import logging
from datetime import date

from rest_framework import permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.analytics.services import customer_summary
from apps.bookings.application.command_handlers import (
    CancelBookingCommand,
    ConfirmBookingCommand,
    CreateBookingCommand,
    RecordPaymentCommand,
    UpdateBookingCommand,
)
from apps.bookings.apps import get_runtime
from apps.bookings.domain.availability import AvailabilityChecker
from apps.bookings.domain.exceptions import (
    BookingConflictError,
    BookingError,
    BookingNotFoundError,
    BookingValidationError,
    CustomerConflictError,
    SlotUnavailableError,
)
from .serializers import (
    BookingCreateSerializer,
    BookingSerializer,
    BookingUpdateSerializer,
    CancelBookingSerializer,
    CustomerSerializer,
    PaymentCreateSerializer,
    PaymentSerializer,
    TimeSlotSerializer,
)

logger = logging.getLogger(__name__)


def domain_error_response(exc: BookingError) -> Response:
    """Map a booking domain error onto an API response."""
    if isinstance(exc, BookingValidationError):
        return Response(exc.errors, status=status.HTTP_400_BAD_REQUEST)
    if isinstance(exc, BookingNotFoundError):
        return Response({"detail": str(exc)}, status=status.HTTP_404_NOT_FOUND)
    if isinstance(exc, (BookingConflictError, SlotUnavailableError, CustomerConflictError)):
        return Response({"detail": str(exc)}, status=status.HTTP_409_CONFLICT)
    # Overpayment and forbidden status changes
    return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)


def parse_date_param(value: str | None) -> date | None:
    if not value:
        return None
    return date.fromisoformat(value)


class BookingViewSet(viewsets.ViewSet):
    """Create, list, edit and cancel hall bookings."""

    permission_classes = [permissions.AllowAny]

    @property
    def runtime(self):
        return get_runtime()

    def _dispatch(self, command):
        try:
            return self.runtime.message_bus.handle_command(command)
        except BookingError as exc:
            logger.info(f"{type(command).__name__} rejected: {exc}")
            raise

    def _not_found(self, pk):
        return Response({"detail": f"Booking {pk} not found"}, status=status.HTTP_404_NOT_FOUND)

    def list(self, request):  # type: ignore
        registry = self.runtime.registry
        try:
            event_date = parse_date_param(request.query_params.get("date"))
        except ValueError:
            return Response({"date": "Use the YYYY-MM-DD format"}, status=status.HTTP_400_BAD_REQUEST)

        if event_date:
            bookings = registry.get_bookings_by_date(event_date)
        else:
            bookings = registry.list_bookings()

        status_filter = request.query_params.get("status")
        if status_filter:
            bookings = [b for b in bookings if b.status.value == status_filter]

        bookings.sort(key=lambda b: (b.event_date, b.time_slot))
        return Response(BookingSerializer(bookings, many=True).data)

    def create(self, request):  # type: ignore
        serializer = BookingCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            creation = self._dispatch(CreateBookingCommand(**serializer.validated_data))
        except BookingError as exc:
            return domain_error_response(exc)
        data = dict(BookingSerializer(creation.booking).data)
        data["notifications"] = creation.notifications
        return Response(data, status=status.HTTP_201_CREATED)

    def retrieve(self, request, pk=None):  # type: ignore
        booking = self.runtime.registry.get_booking(pk)
        if booking is None:
            return self._not_found(pk)
        return Response(BookingSerializer(booking).data)

    def partial_update(self, request, pk=None):  # type: ignore
        serializer = BookingUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        try:
            booking = self._dispatch(UpdateBookingCommand(booking_id=pk, changes=dict(serializer.validated_data)))
        except BookingError as exc:
            return domain_error_response(exc)
        return Response(BookingSerializer(booking).data)

    def destroy(self, request, pk=None):  # type: ignore
        if not self.runtime.registry.delete_booking(pk):
            return self._not_found(pk)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=["post"], url_path="confirm")
    def confirm(self, request, pk=None):  # type: ignore
        try:
            booking = self._dispatch(ConfirmBookingCommand(booking_id=pk))
        except BookingError as exc:
            return domain_error_response(exc)
        return Response(BookingSerializer(booking).data)

    @action(detail=True, methods=["post"], url_path="cancel")
    def cancel(self, request, pk=None):  # type: ignore
        serializer = CancelBookingSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            booking = self._dispatch(CancelBookingCommand(booking_id=pk, **serializer.validated_data))
        except BookingError as exc:
            return domain_error_response(exc)
        return Response(BookingSerializer(booking).data)

    @action(detail=True, methods=["get", "post"], url_path="payments")
    def payments(self, request, pk=None):  # type: ignore
        registry = self.runtime.registry
        if request.method == "GET":
            if registry.get_booking(pk) is None:
                return self._not_found(pk)
            return Response(PaymentSerializer(registry.get_payments_by_booking(pk), many=True).data)

        serializer = PaymentCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            payment = self._dispatch(RecordPaymentCommand(booking_id=pk, **serializer.validated_data))
        except BookingError as exc:
            return domain_error_response(exc)
        return Response(
            {
                "payment": PaymentSerializer(payment).data,
                "booking": BookingSerializer(registry.get_booking(pk)).data,
            },
            status=status.HTTP_201_CREATED,
        )

    @action(detail=False, methods=["get"], url_path="slots")
    def slots(self, request):  # type: ignore
        """Slot catalog; with ``?date=`` each slot also says whether it is free."""
        runtime = self.runtime
        try:
            event_date = parse_date_param(request.query_params.get("date"))
        except ValueError:
            return Response({"date": "Use the YYYY-MM-DD format"}, status=status.HTTP_400_BAD_REQUEST)

        if event_date is None:
            return Response(TimeSlotSerializer(runtime.time_slots, many=True).data)

        checker = AvailabilityChecker(runtime.registry.get_bookings_by_date(event_date))
        data = []
        for slot, available in checker.available_slots(event_date, runtime.time_slots):
            item = TimeSlotSerializer(slot).data
            item["available"] = available
            data.append(item)
        return Response(data)


class CustomerViewSet(viewsets.ViewSet):
    """Customers with their bookings and spend computed from the registry."""

    permission_classes = [permissions.AllowAny]

    def list(self, request):  # type: ignore
        registry = get_runtime().registry
        customers = registry.list_customers()
        search = request.query_params.get("search", "").strip().lower()
        if search:
            customers = [
                c for c in customers
                if search in c.name.lower() or search in c.email.lower() or search in c.phone
            ]
        customers.sort(key=lambda c: c.name)
        return Response(CustomerSerializer(customers, many=True, context={"registry": registry}).data)

    def retrieve(self, request, pk=None):  # type: ignore
        registry = get_runtime().registry
        customer = registry.get_customer_by_id(pk)
        if customer is None:
            return Response({"detail": f"Customer {pk} not found"}, status=status.HTTP_404_NOT_FOUND)

        summary = customer_summary(registry, customer.email)
        data = dict(CustomerSerializer(customer, context={"registry": registry}).data)
        data["upcoming_count"] = summary["upcoming_count"]
        data["recent_bookings"] = BookingSerializer(summary["recent_bookings"], many=True).data
        return Response(data)
