"""API views for invoices and the payment ledger."""

from __future__ import annotations

import logging

from rest_framework import permissions, status, viewsets  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from apps.bookings.apps import get_runtime
from apps.bookings.conf import hall_details, tax_rate
from apps.bookings.serializers import PaymentSerializer

from .invoices import compose_invoice

logger = logging.getLogger(__name__)


class InvoiceView(APIView):
    """Invoice of a booking, rendered for display."""

    permission_classes = [permissions.AllowAny]

    def get(self, request, booking_id, format=None):  # type: ignore
        runtime = get_runtime()
        booking = runtime.registry.get_booking(booking_id)
        if booking is None:
            return Response({"detail": f"Booking {booking_id} not found"}, status=status.HTTP_404_NOT_FOUND)

        hall = hall_details()
        invoice = compose_invoice(
            booking,
            runtime.registry.get_payments_by_booking(booking_id),
            numbers=runtime.invoice_numbers,
            hall={
                "name": hall.name,
                "address": hall.address,
                "phone": hall.phone,
                "email": hall.email,
            },
            tax_rate=tax_rate(),
        )
        logger.info(f"Invoice {invoice.invoice_number} rendered for booking {booking_id}")
        return Response(invoice.as_display())


class PaymentViewSet(viewsets.ViewSet):
    """Read-only view of the payment ledger across all bookings."""

    permission_classes = [permissions.AllowAny]

    def list(self, request):  # type: ignore
        payments = get_runtime().registry.list_payments()
        status_filter = request.query_params.get("status")
        if status_filter:
            payments = [p for p in payments if p.status.value == status_filter]
        payments.sort(key=lambda p: p.paid_at, reverse=True)
        return Response(PaymentSerializer(payments, many=True).data)
