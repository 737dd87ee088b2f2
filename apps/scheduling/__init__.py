"""Scheduling app package.

Turns club bookings, events and member birthdays into calendar items,
lays them out on the day grid and computes drag and resize reschedules.
"""
