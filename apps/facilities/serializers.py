"""Serializers for the facility registry."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import Facility


class FacilitySerializer(serializers.ModelSerializer):
    max_concurrent_bookings = serializers.IntegerField(min_value=1, default=1)

    class Meta:
        model = Facility
        fields = [
            "id",
            "club",
            "name",
            "type",
            "description",
            "capacity",
            "location",
            "equipment",
            "rules",
            "maintenance_notes",
            "max_concurrent_bookings",
            "status",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "club", "created_at", "updated_at"]

    def validate_equipment(self, value):  # type: ignore
        if not isinstance(value, list):
            raise serializers.ValidationError("Equipment must be a list.")
        return value
