"""
Shared Kernel

This module contains base classes and utilities shared across all domain
apps (clubs, facilities, bookings, scheduling).
"""
