"""Catalog app package.

Holds the browsable inventory of the platform (destinations, tour
packages, hotels, drivers, cabs, cruises and events), its public read
API and the admin write API, plus a registry that resolves the generic
``(item_type, item_id)`` references used by bookings and reviews.
"""
