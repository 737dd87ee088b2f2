"""Admin registration for clubs."""

from __future__ import annotations

from django.contrib import admin

from .models import Club, Member, Team


@admin.register(Club)
class ClubAdmin(admin.ModelAdmin):
    list_display = ("name", "short_name", "timezone", "created_at")
    search_fields = ("name", "short_name")


@admin.register(Member)
class MemberAdmin(admin.ModelAdmin):
    list_display = ("last_name", "first_name", "club", "status", "birth_date")
    list_filter = ("club", "status")
    search_fields = ("first_name", "last_name", "email", "membership_number")


@admin.register(Team)
class TeamAdmin(admin.ModelAdmin):
    list_display = ("name", "club", "category", "age_group", "status")
    list_filter = ("club", "status")
    search_fields = ("name",)
