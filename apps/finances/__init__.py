"""Finances app package.

Invoices composed from a booking and its payment ledger, and a read-only
view of the ledger itself. Payments are recorded through the bookings app.
"""
