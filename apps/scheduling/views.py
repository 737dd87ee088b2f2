"""API views for the club calendar."""

from __future__ import annotations

from drf_spectacular.utils import OpenApiResponse, extend_schema  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from apps.bookings.serializers import BookingSerializer
from apps.bookings.services import BookingError
from apps.bookings.views import translate_booking_error
from apps.clubs.views import ClubScopedMixin

from .domain.reschedule import hour_from_offset
from .serializers import (
    CalendarItemSerializer,
    CalendarQuerySerializer,
    LayoutQuerySerializer,
    PlacedItemSerializer,
    RescheduleSerializer,
    ResizeSerializer,
)
from .services import calendar_items, day_layout, reschedule_booking, resize_booking


class CalendarAPIView(ClubScopedMixin, APIView):
    def get_serializer_context(self):  # type: ignore
        return {"request": self.request, "view": self, "club": self.get_club()}

    def booking_response(self, booking) -> Response:
        return Response(BookingSerializer(booking, context=self.get_serializer_context()).data)


class CalendarItemsView(CalendarAPIView):
    """Bookings, events and birthdays between two dates."""

    @extend_schema(parameters=[CalendarQuerySerializer], responses=CalendarItemSerializer(many=True))
    def get(self, request, *args, **kwargs):  # type: ignore
        query = CalendarQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        items = calendar_items(self.get_club(), query.validated_data["start"], query.validated_data["end"])
        return Response(CalendarItemSerializer(items, many=True).data)


class CalendarLayoutView(CalendarAPIView):
    """Grid layout of one day."""

    @extend_schema(
        parameters=[LayoutQuerySerializer],
        responses=OpenApiResponse(description="Timed items with grid coordinates and all-day birthdays"),
    )
    def get(self, request, *args, **kwargs):  # type: ignore
        query = LayoutQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        day = query.validated_data["date"]
        placed, birthdays = day_layout(self.get_club(), day)
        return Response(
            {
                "date": day.isoformat(),
                "items": PlacedItemSerializer(placed, many=True).data,
                "all_day": CalendarItemSerializer(birthdays, many=True).data,
            }
        )


class CalendarRescheduleView(CalendarAPIView):
    """Move a booking or event to another day and optionally another hour."""

    @extend_schema(request=RescheduleSerializer, responses=BookingSerializer)
    def post(self, request, *args, **kwargs):  # type: ignore
        serializer = RescheduleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        target_hour = data.get("target_hour")
        if "offset_px" in data:
            target_hour = hour_from_offset(data["offset_px"], data["grid_height_px"])
        try:
            booking = reschedule_booking(self.get_club(), data["booking_id"], data["target_date"], target_hour)
        except BookingError as exc:
            raise translate_booking_error(exc) from exc
        return self.booking_response(booking)


class CalendarResizeView(CalendarAPIView):
    """Drag the end edge of a booking or event."""

    @extend_schema(request=ResizeSerializer, responses=BookingSerializer)
    def post(self, request, *args, **kwargs):  # type: ignore
        serializer = ResizeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            booking = resize_booking(
                self.get_club(), serializer.validated_data["booking_id"], serializer.validated_data["delta_px"]
            )
        except BookingError as exc:
            raise translate_booking_error(exc) from exc
        return self.booking_response(booking)
