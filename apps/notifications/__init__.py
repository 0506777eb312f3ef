"""Notifications app package.

Builds customer messages (confirmation, balance reminder, booking details)
and delivers them by email and SMS. Booking confirmations are sent by an
event handler after the booking is stored.
"""
