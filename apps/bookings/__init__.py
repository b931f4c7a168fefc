"""Bookings app package.

Reservations of any catalog item (package, hotel, driver, cab, cruise or
event) by registered travellers: server-side pricing, capacity checks,
the pending/confirmed/cancelled/completed lifecycle, PDF vouchers and the
periodic jobs that complete or expire bookings.
"""
