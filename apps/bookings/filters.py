"""FilterSet definitions for booking lists."""

from __future__ import annotations

import django_filters  # type: ignore

from .models import Booking


class BookingFilterSet(django_filters.FilterSet):
    """Filters for the club booking list.

    ``start``/``end`` select bookings overlapping the given window, so a
    calendar view can ask for exactly what it renders.
    """

    facility = django_filters.NumberFilter(field_name="facility_id", lookup_expr="exact")
    team = django_filters.NumberFilter(field_name="team_id", lookup_expr="exact")
    member = django_filters.NumberFilter(field_name="member_id", lookup_expr="exact")
    status = django_filters.ChoiceFilter(choices=Booking.Status.choices)
    type = django_filters.ChoiceFilter(choices=Booking.Type.choices)
    start = django_filters.IsoDateTimeFilter(field_name="end_time", lookup_expr="gt")
    end = django_filters.IsoDateTimeFilter(field_name="start_time", lookup_expr="lt")

    class Meta:
        model = Booking
        fields = ["facility", "team", "member", "status", "type"]
