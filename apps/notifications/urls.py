"""URL routing for notifications."""

from django.urls import path  # type: ignore

from .views import BookingConfirmationView, BookingDetailsView, PaymentReminderView, SendEmailView

urlpatterns = [
    path('send-email/', SendEmailView.as_view(), name='send-email'),
    path('bookings/<str:booking_id>/confirmation/', BookingConfirmationView.as_view(),
         name='booking-confirmation'),
    path('bookings/<str:booking_id>/details/', BookingDetailsView.as_view(), name='booking-details'),
    path('bookings/<str:booking_id>/reminder/', PaymentReminderView.as_view(), name='payment-reminder'),
]
