"""Serializers for the booking domain."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from apps.clubs.models import Member, Team
from apps.facilities.models import Facility

from .models import Booking
from .services import SETTABLE_STATUSES

BOOKING_FIELDS = [
    "id",
    "club",
    "facility",
    "facility_name",
    "team",
    "member",
    "title",
    "description",
    "start_time",
    "end_time",
    "type",
    "status",
    "location",
    "is_public",
    "recurring",
    "recurring_pattern",
    "recurring_until",
    "contact_person",
    "contact_email",
    "contact_phone",
    "participants",
    "cost",
    "notes",
    "created_by",
    "created_at",
    "updated_at",
]

READ_ONLY_FIELDS = ["id", "club", "facility_name", "created_by", "created_at", "updated_at"]


class ClubScopedRelatedField(serializers.PrimaryKeyRelatedField):
    """Primary key field that only resolves objects of the club in context."""

    def get_queryset(self):  # type: ignore
        queryset = super().get_queryset()
        club = self.context.get("club")
        if club is None:
            return queryset.none()
        return queryset.filter(club=club)


class BookingSerializer(serializers.ModelSerializer):
    """Bookings and events; facility is optional."""

    facility = ClubScopedRelatedField(queryset=Facility.objects.all(), required=False, allow_null=True)
    team = ClubScopedRelatedField(queryset=Team.objects.all(), required=False, allow_null=True)
    member = ClubScopedRelatedField(queryset=Member.objects.all(), required=False, allow_null=True)
    facility_name = serializers.SerializerMethodField()

    class Meta:
        model = Booking
        fields = BOOKING_FIELDS
        read_only_fields = READ_ONLY_FIELDS

    def get_facility_name(self, obj: Booking) -> str | None:
        return obj.facility.name if obj.facility_id else None

    def _current(self, attrs, name):  # type: ignore
        if name in attrs:
            return attrs[name]
        return getattr(self.instance, name, None)

    def validate(self, attrs):  # type: ignore
        start_time = self._current(attrs, "start_time")
        end_time = self._current(attrs, "end_time")
        if start_time and end_time and end_time <= start_time:
            raise serializers.ValidationError({"end_time": "End time must be after start time."})

        if self.instance is None and attrs.get("recurring"):
            pattern = attrs.get("recurring_pattern")
            until = attrs.get("recurring_until")
            if not pattern:
                raise serializers.ValidationError(
                    {"recurring_pattern": "A recurring booking needs a pattern."}
                )
            if until is None:
                raise serializers.ValidationError(
                    {"recurring_until": "A recurring booking needs an end date."}
                )
            club = self.context.get("club")
            first_day = start_time.astimezone(club.tzinfo).date() if club is not None else start_time.date()
            if until < first_day:
                raise serializers.ValidationError(
                    {"recurring_until": "Series end must not be before the first booking."}
                )
        return attrs


class EventSerializer(BookingSerializer):
    """Calendar events: bookings without a facility."""

    facility = None
    facility_name = None
    type = serializers.ChoiceField(choices=Booking.Type.choices, default=Booking.Type.EVENT)

    class Meta(BookingSerializer.Meta):
        fields = [name for name in BOOKING_FIELDS if name not in ("facility", "facility_name")]
        read_only_fields = [name for name in READ_ONLY_FIELDS if name != "facility_name"]


class AvailabilityCheckSerializer(serializers.Serializer):
    facility_id = serializers.IntegerField()
    start_time = serializers.DateTimeField()
    end_time = serializers.DateTimeField()
    exclude_booking_id = serializers.IntegerField(required=False, allow_null=True)

    def validate(self, attrs):  # type: ignore
        if attrs["end_time"] <= attrs["start_time"]:
            raise serializers.ValidationError({"end_time": "End time must be after start time."})
        return attrs


class AvailabilityResultSerializer(serializers.Serializer):
    available = serializers.BooleanField()
    current_bookings = serializers.IntegerField()
    max_concurrent = serializers.IntegerField()
    conflicting_booking_ids = serializers.ListField(child=serializers.IntegerField())


class BookingStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[(value, value) for value in SETTABLE_STATUSES])


class TimeRangeSerializer(serializers.Serializer):
    start_time = serializers.DateTimeField(source="start")
    end_time = serializers.DateTimeField(source="end")
