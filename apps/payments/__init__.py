"""Payments app package.

Stores checkout card details for bookings (masked or encrypted at rest)
and charges them through a pluggable payment gateway.
"""
