"""Clubs app package.

A club is the tenant of the platform: facilities, bookings, members and
teams all belong to exactly one club. Every club-scoped endpoint takes the
club id from its URL instead of relying on ambient state.
"""
