"""Reviews app package.

Traveller reviews for any catalog item, with optional moderation and
rating aggregation back onto the reviewed item.
"""
