"""Notification transport: email through Django's mail framework, SMS through an HTTP gateway."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import requests
from django.conf import settings  # type: ignore
from django.core.mail import send_mail  # type: ignore
from django.utils.html import strip_tags  # type: ignore

from .messages import (
    build_booking_details_message,
    build_confirmation_email_html,
    build_confirmation_message,
    build_payment_reminder_message,
)

if TYPE_CHECKING:  # pragma: no cover
    from apps.bookings.conf import HallDetails
    from apps.bookings.domain.entities import Booking

logger = logging.getLogger(__name__)


# ============================================================================
# EMAIL
# ============================================================================

def send_email_notification(
    recipient_email: str,
    subject: str,
    message: str,
    *,
    html_message: str | None = None,
) -> bool:
    """
    Send a single email.

    When only ``html_message`` content matters, the plain-text part is
    derived from it. Returns True if the backend accepted the message.
    """
    if html_message and not message:
        message = strip_tags(html_message)

    try:
        send_mail(
            subject=subject,
            message=message,
            from_email=settings.DEFAULT_FROM_EMAIL,
            recipient_list=[recipient_email],
            html_message=html_message,
            fail_silently=False,
        )
    except Exception as e:
        logger.error(f"Failed to send email to {recipient_email}: {e}", exc_info=True)
        return False

    logger.info(f"Email sent successfully to {recipient_email}: {subject}")
    return True


# ============================================================================
# SMS
# ============================================================================

def send_sms_notification(phone: str, message: str) -> bool:
    """POST the message to ``SMS_GATEWAY_URL``. Without a gateway nothing is sent."""
    gateway_url = getattr(settings, 'SMS_GATEWAY_URL', '')
    if not gateway_url:
        logger.warning(f"SMS gateway not configured, message to {phone} not sent")
        return False

    headers = {}
    token = getattr(settings, 'SMS_GATEWAY_TOKEN', '')
    if token:
        headers['Authorization'] = f"Bearer {token}"

    payload = {
        'to': phone,
        'from': getattr(settings, 'SMS_SENDER_ID', ''),
        'message': message,
    }

    try:
        response = requests.post(
            gateway_url,
            json=payload,
            headers=headers,
            timeout=getattr(settings, 'SMS_TIMEOUT_SECONDS', 5),
        )
        response.raise_for_status()
    except requests.RequestException as e:
        logger.error(f"Failed to send SMS to {phone}: {e}", exc_info=True)
        return False

    logger.info(f"SMS sent to {phone}: {message[:50]}...")
    return True


# ============================================================================
# BOOKING NOTIFICATIONS
# ============================================================================

def send_booking_confirmation(booking: "Booking", hall: "HallDetails", invoice_number: str) -> dict:
    """Confirmation email (HTML with the details box) and SMS for a booking."""
    text = build_confirmation_message(booking, hall.name)
    results = {
        'email': send_email_notification(
            booking.customer_email,
            'Booking Confirmation',
            text,
            html_message=build_confirmation_email_html(booking, hall, invoice_number),
        ),
        'sms': send_sms_notification(booking.customer_phone, text),
    }
    logger.info(f"Confirmation for booking {booking.id} sent: {results}")
    return results


def send_booking_details(booking: "Booking", hall: "HallDetails") -> bool:
    return send_email_notification(
        booking.customer_email,
        'Booking Details',
        build_booking_details_message(booking, hall.name),
    )


def send_payment_reminder(booking: "Booking") -> dict | None:
    """SMS reminder for an outstanding balance. ``None`` when fully paid."""
    text = build_payment_reminder_message(booking)
    if text is None:
        logger.info(f"Booking {booking.id} has no balance, reminder skipped")
        return None
    return {'sms': send_sms_notification(booking.customer_phone, text)}
