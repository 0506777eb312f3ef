"""Serializers for the booking API.

Bookings, customers and payments are plain domain objects held by the
registry, so every serializer here is a ``Serializer`` rather than a
``ModelSerializer``. Input serializers only parse types; business rules are
checked by the use cases and reported with the same field names.
"""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from apps.bookings.domain.entities import PaymentMethod, PaymentType, TransactionStatus

MONEY = {'max_digits': 14, 'decimal_places': 2}


def _choices(enum_type):
    return [member.value for member in enum_type]


class BookingCreateSerializer(serializers.Serializer):
    """Booking form submitted by staff."""

    customer_name = serializers.CharField(allow_blank=True)
    customer_email = serializers.CharField(allow_blank=True)
    customer_phone = serializers.CharField(allow_blank=True)
    event_date = serializers.DateField(allow_null=True)
    time_slot = serializers.CharField(allow_blank=True)
    event_type = serializers.CharField(allow_blank=True)
    guest_count = serializers.IntegerField(allow_null=True)
    advance_amount = serializers.DecimalField(required=False, default=0, **MONEY)
    total_amount = serializers.DecimalField(required=False, allow_null=True, default=None, **MONEY)
    payment_method = serializers.CharField(required=False, default=PaymentMethod.CASH.value)
    notes = serializers.CharField(required=False, allow_blank=True, default='')
    transaction_id = serializers.CharField(required=False, allow_null=True, default=None)


class BookingUpdateSerializer(serializers.Serializer):
    """Partial edit of a booking. Only the submitted fields are changed."""

    customer_name = serializers.CharField(required=False, allow_blank=True)
    customer_email = serializers.CharField(required=False, allow_blank=True)
    customer_phone = serializers.CharField(required=False, allow_blank=True)
    event_date = serializers.DateField(required=False)
    time_slot = serializers.CharField(required=False, allow_blank=True)
    event_type = serializers.CharField(required=False, allow_blank=True)
    guest_count = serializers.IntegerField(required=False, allow_null=True)
    total_amount = serializers.DecimalField(required=False, **MONEY)
    payment_method = serializers.CharField(required=False)
    notes = serializers.CharField(required=False, allow_blank=True)


class BookingSerializer(serializers.Serializer):
    id = serializers.CharField(read_only=True)
    customer_name = serializers.CharField(read_only=True)
    customer_email = serializers.CharField(read_only=True)
    customer_phone = serializers.CharField(read_only=True)
    event_date = serializers.DateField(read_only=True)
    time_slot = serializers.CharField(read_only=True)
    event_type = serializers.CharField(read_only=True)
    guest_count = serializers.IntegerField(read_only=True)
    total_amount = serializers.DecimalField(read_only=True, **MONEY)
    advance_amount = serializers.DecimalField(read_only=True, **MONEY)
    balance = serializers.DecimalField(read_only=True, **MONEY)
    payment_status = serializers.CharField(source='payment_status.value', read_only=True)
    payment_method = serializers.CharField(source='payment_method.value', read_only=True)
    status = serializers.CharField(source='status.value', read_only=True)
    notes = serializers.CharField(read_only=True)
    created_at = serializers.DateTimeField(read_only=True)
    updated_at = serializers.DateTimeField(read_only=True)


class CancelBookingSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, default='')


class PaymentCreateSerializer(serializers.Serializer):
    amount = serializers.DecimalField(**MONEY)
    method = serializers.ChoiceField(choices=_choices(PaymentMethod), default=PaymentMethod.CASH.value)
    status = serializers.ChoiceField(choices=_choices(TransactionStatus), default=TransactionStatus.SUCCESS.value)
    payment_type = serializers.ChoiceField(choices=_choices(PaymentType), required=False, allow_null=True, default=None)
    transaction_id = serializers.CharField(required=False, allow_null=True, allow_blank=True, default=None)
    paid_at = serializers.DateTimeField(required=False, allow_null=True, default=None)


class PaymentSerializer(serializers.Serializer):
    id = serializers.CharField(read_only=True)
    booking_id = serializers.CharField(read_only=True)
    amount = serializers.DecimalField(read_only=True, **MONEY)
    payment_type = serializers.CharField(source='payment_type.value', read_only=True)
    method = serializers.CharField(source='method.value', read_only=True)
    status = serializers.CharField(source='status.value', read_only=True)
    transaction_id = serializers.CharField(read_only=True, allow_null=True)
    paid_at = serializers.DateTimeField(read_only=True)


class TimeSlotSerializer(serializers.Serializer):
    id = serializers.CharField(read_only=True)
    label = serializers.CharField(read_only=True)
    display = serializers.CharField(read_only=True)
    start_time = serializers.CharField(read_only=True)
    end_time = serializers.CharField(read_only=True)
    price = serializers.DecimalField(read_only=True, **MONEY)


class CustomerSerializer(serializers.Serializer):
    id = serializers.CharField(read_only=True)
    name = serializers.CharField(read_only=True)
    email = serializers.CharField(read_only=True)
    phone = serializers.CharField(read_only=True)
    address = serializers.CharField(read_only=True, allow_blank=True)
    created_at = serializers.DateTimeField(read_only=True)
    total_spent = serializers.SerializerMethodField()
    bookings_count = serializers.SerializerMethodField()

    def get_total_spent(self, customer):  # type: ignore
        registry = self.context['registry']
        return str(registry.customer_total_spent(customer.email))

    def get_bookings_count(self, customer):  # type: ignore
        return len(self.context['registry'].customer_bookings(customer.email))
