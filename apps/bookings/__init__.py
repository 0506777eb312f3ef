"""Bookings app package.

This app encapsulates the hall booking domain: the time-slot catalog,
the booking/customer/payment model, the in-memory registry that keeps
payment status in sync with recorded payments, and the availability
rules. The registry is built at startup and lives in process memory.
"""
