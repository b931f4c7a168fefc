"""Notifications app package.

Delivers booking and support notifications to travellers by e-mail and
as in-app notifications shown in the account area.
"""
