"""Serializers for the calendar API."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .domain.periods import VIEWS, calendar_days, navigate

MAX_RANGE_DAYS = 62


class CalendarQuerySerializer(serializers.Serializer):
    """
    Either an explicit ``start``/``end`` date pair or a ``view`` around ``date``.

    ``direction`` pages the view window forwards (positive) or backwards.
    """

    start = serializers.DateField(required=False)
    end = serializers.DateField(required=False)
    view = serializers.ChoiceField(choices=VIEWS, required=False)
    date = serializers.DateField(required=False)
    direction = serializers.IntegerField(required=False, min_value=-120, max_value=120)

    def validate(self, attrs):  # type: ignore
        if "view" in attrs or "date" in attrs:
            if "view" not in attrs or "date" not in attrs:
                raise serializers.ValidationError("Both view and date are required.")
            if "direction" in attrs:
                attrs["date"] = navigate(attrs["view"], attrs["date"], attrs["direction"])
            days = calendar_days(attrs["view"], attrs["date"])
            attrs["start"], attrs["end"] = days[0], days[-1]
        elif "direction" in attrs:
            raise serializers.ValidationError({"direction": "Paging needs a view and a date."})
        elif "start" not in attrs or "end" not in attrs:
            raise serializers.ValidationError("Pass start and end, or view and date.")

        if attrs["end"] < attrs["start"]:
            raise serializers.ValidationError({"end": "End date must not be before start date."})
        if (attrs["end"] - attrs["start"]).days >= MAX_RANGE_DAYS:
            raise serializers.ValidationError(f"At most {MAX_RANGE_DAYS} days per request.")
        return attrs


class LayoutQuerySerializer(serializers.Serializer):
    date = serializers.DateField()


class CalendarItemSerializer(serializers.Serializer):
    id = serializers.CharField(source="key")
    source = serializers.CharField()
    title = serializers.CharField()
    date = serializers.DateField()
    all_day = serializers.BooleanField()
    start_time = serializers.DateTimeField(allow_null=True)
    end_time = serializers.DateTimeField(allow_null=True)
    booking_id = serializers.SerializerMethodField()
    member_id = serializers.SerializerMethodField()
    facility_id = serializers.SerializerMethodField()
    facility_name = serializers.SerializerMethodField()
    type = serializers.SerializerMethodField()
    status = serializers.SerializerMethodField()

    def get_booking_id(self, obj) -> int | None:  # type: ignore
        return obj.booking.pk if obj.booking else None

    def get_member_id(self, obj) -> int | None:  # type: ignore
        return obj.member.pk if obj.member else None

    def get_facility_id(self, obj) -> int | None:  # type: ignore
        return obj.booking.facility_id if obj.booking else None

    def get_facility_name(self, obj) -> str | None:  # type: ignore
        if obj.booking and obj.booking.facility_id:
            return obj.booking.facility.name
        return None

    def get_type(self, obj) -> str | None:  # type: ignore
        return obj.booking.type if obj.booking else None

    def get_status(self, obj) -> str | None:  # type: ignore
        return obj.booking.status if obj.booking else None


class PlacedItemSerializer(serializers.Serializer):
    item = CalendarItemSerializer()
    start_hour = serializers.FloatField(source="position.start_hour")
    end_hour = serializers.FloatField(source="position.end_hour")
    top = serializers.FloatField(source="position.top")
    height = serializers.FloatField(source="position.height")
    column = serializers.IntegerField()
    total_columns = serializers.IntegerField()
    width = serializers.FloatField()
    left = serializers.FloatField()


class RescheduleSerializer(serializers.Serializer):
    """Drop target: a day, optionally an hour or a pixel offset within the day grid."""

    booking_id = serializers.IntegerField()
    target_date = serializers.DateField()
    target_hour = serializers.FloatField(required=False, allow_null=True, min_value=0, max_value=24)
    offset_px = serializers.FloatField(required=False, min_value=0)
    grid_height_px = serializers.FloatField(required=False, min_value=1)

    def validate(self, attrs):  # type: ignore
        if ("offset_px" in attrs) != ("grid_height_px" in attrs):
            raise serializers.ValidationError("offset_px and grid_height_px go together.")
        if "offset_px" in attrs and attrs.get("target_hour") is not None:
            raise serializers.ValidationError("Pass either target_hour or a pixel offset.")
        return attrs


class ResizeSerializer(serializers.Serializer):
    booking_id = serializers.IntegerField()
    delta_px = serializers.FloatField()
