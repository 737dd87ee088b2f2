"""Bookings app package.

Facility bookings and calendar events share one model. The app holds the
availability checker, booking CRUD, recurring series and the status
notification task.
"""
