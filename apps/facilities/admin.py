"""Admin registration for facilities."""

from __future__ import annotations

from django.contrib import admin

from .models import Facility


@admin.register(Facility)
class FacilityAdmin(admin.ModelAdmin):
    list_display = ("name", "club", "type", "max_concurrent_bookings", "status")
    list_filter = ("club", "type", "status")
    search_fields = ("name", "location")
