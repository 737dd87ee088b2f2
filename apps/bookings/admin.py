"""Admin registration for bookings."""

from __future__ import annotations

from django.contrib import admin

from .models import Booking


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = (
        "title",
        "club",
        "facility",
        "type",
        "status",
        "start_time",
        "end_time",
        "created_at",
    )
    list_filter = ("status", "type", "club", "facility", "recurring")
    search_fields = ("title", "contact_person", "contact_email", "facility__name")
    list_select_related = ("club", "facility")
    readonly_fields = ("created_at", "updated_at")
