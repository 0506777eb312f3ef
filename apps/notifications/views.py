"""API views for notifications."""

from __future__ import annotations

from rest_framework import permissions, status  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from apps.bookings.apps import get_runtime
from apps.bookings.conf import hall_details

from .serializers import SendEmailSerializer
from .services import (
    send_booking_confirmation,
    send_booking_details,
    send_email_notification,
    send_payment_reminder,
)


class SendEmailView(APIView):
    """Send an arbitrary HTML email."""

    permission_classes = [permissions.AllowAny]

    def post(self, request, format=None):  # type: ignore
        serializer = SendEmailSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        sent = send_email_notification(data['email'], data['subject'], '', html_message=data['body'])
        if not sent:
            return Response({'success': False}, status=status.HTTP_502_BAD_GATEWAY)
        return Response({'success': True})


class BookingNotificationView(APIView):
    """Base for notifications about one booking."""

    permission_classes = [permissions.AllowAny]

    def post(self, request, booking_id, format=None):  # type: ignore
        runtime = get_runtime()
        booking = runtime.registry.get_booking(booking_id)
        if booking is None:
            return Response({'detail': f"Booking {booking_id} not found"}, status=status.HTTP_404_NOT_FOUND)
        return self.notify(runtime, booking)

    def notify(self, runtime, booking):  # type: ignore
        raise NotImplementedError


class BookingConfirmationView(BookingNotificationView):
    def notify(self, runtime, booking):  # type: ignore
        number = runtime.invoice_numbers.number_for(booking.id)
        return Response(send_booking_confirmation(booking, hall_details(), number))


class BookingDetailsView(BookingNotificationView):
    def notify(self, runtime, booking):  # type: ignore
        return Response({'email': send_booking_details(booking, hall_details())})


class PaymentReminderView(BookingNotificationView):
    def notify(self, runtime, booking):  # type: ignore
        results = send_payment_reminder(booking)
        if results is None:
            return Response(
                {'detail': 'Booking has no outstanding balance'},
                status=status.HTTP_400_BAD_REQUEST,
            )
        return Response(results)
