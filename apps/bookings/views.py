"""API views for the booking domain."""

from __future__ import annotations

from drf_spectacular.utils import extend_schema  # type: ignore
from rest_framework import status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.exceptions import APIException, NotFound, ValidationError  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.clubs.views import ClubScopedMixin

from .filters import BookingFilterSet
from .models import Booking
from .serializers import (
    AvailabilityCheckSerializer,
    AvailabilityResultSerializer,
    BookingSerializer,
    BookingStatusSerializer,
    EventSerializer,
    TimeRangeSerializer,
)
from .services import (
    BookingError,
    BookingNotFoundError,
    FacilityCapacityError,
    FacilityNotFoundError,
    check_booking_availability,
    create_booking,
    create_recurring_bookings,
    delete_booking,
    set_booking_status,
    update_booking,
)


class FacilityConflict(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Facility is not available for the selected time."
    default_code = "facility_unavailable"

    def __init__(self, error: FacilityCapacityError):
        # Kept as plain data so availability numbers are not coerced to strings
        self.detail = {"detail": str(error), "availability": error.availability.to_dict()}


def translate_booking_error(exc: BookingError) -> APIException:
    """Map a domain error onto the DRF exception the API responds with."""

    if isinstance(exc, (FacilityNotFoundError, BookingNotFoundError)):
        return NotFound(str(exc))
    if isinstance(exc, FacilityCapacityError):
        return FacilityConflict(exc)
    return ValidationError({"non_field_errors": [str(exc)]})


class BookingWriteMixin:
    """Routes writes through the booking services and reports availability."""

    def _write_response(self, booking: Booking, availability, status_code: int) -> Response:
        data = dict(self.get_serializer(booking).data)
        data["availability"] = availability.to_dict() if availability is not None else None
        return Response(data, status=status_code)

    def create(self, request, *args, **kwargs):  # type: ignore
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = self.prepare_create_data(dict(serializer.validated_data))
        created_by = request.user if request.user.is_authenticated else None

        try:
            if data.get("recurring"):
                series = create_recurring_bookings(self.get_club(), data, created_by=created_by)
            else:
                booking, availability = create_booking(self.get_club(), data, created_by=created_by)
        except BookingError as exc:
            raise translate_booking_error(exc) from exc

        if data.get("recurring"):
            payload = {
                "count": len(series.bookings),
                "bookings": self.get_serializer(series.bookings, many=True).data,
                "skipped": TimeRangeSerializer(series.skipped, many=True).data,
            }
            return Response(payload, status=status.HTTP_201_CREATED)
        return self._write_response(booking, availability, status.HTTP_201_CREATED)

    def prepare_create_data(self, data: dict) -> dict:
        return data

    def update(self, request, *args, **kwargs):  # type: ignore
        partial = kwargs.pop("partial", False)
        instance = self.get_object()
        serializer = self.get_serializer(instance, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        try:
            booking, availability = update_booking(instance, dict(serializer.validated_data))
        except BookingError as exc:
            raise translate_booking_error(exc) from exc
        return self._write_response(booking, availability, status.HTTP_200_OK)

    def perform_destroy(self, instance):  # type: ignore
        delete_booking(instance)


class BookingViewSet(ClubScopedMixin, BookingWriteMixin, viewsets.ModelViewSet):
    """Bookings of one club, with availability check and status toggle."""

    serializer_class = BookingSerializer
    filterset_class = BookingFilterSet

    def get_queryset(self):  # type: ignore
        return (
            Booking.objects.filter(club=self.get_club())
            .select_related("facility", "team", "member")
            .order_by("start_time", "id")
        )

    @extend_schema(request=AvailabilityCheckSerializer, responses=AvailabilityResultSerializer)
    @action(detail=False, methods=["post"], url_path="check-availability")
    def check_availability(self, request, *args, **kwargs):  # type: ignore
        serializer = AvailabilityCheckSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        params = serializer.validated_data
        try:
            result = check_booking_availability(
                params["facility_id"],
                params["start_time"],
                params["end_time"],
                exclude_booking_id=params.get("exclude_booking_id"),
                club=self.get_club(),
            )
        except BookingError as exc:
            raise translate_booking_error(exc) from exc
        return Response(AvailabilityResultSerializer(result).data)

    @extend_schema(request=BookingStatusSerializer, responses=BookingSerializer)
    @action(detail=True, methods=["post"], url_path="status")
    def set_status(self, request, *args, **kwargs):  # type: ignore
        booking: Booking = self.get_object()
        serializer = BookingStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            booking = set_booking_status(booking, serializer.validated_data["status"])
        except BookingError as exc:
            raise translate_booking_error(exc) from exc
        return Response(self.get_serializer(booking).data)


class EventViewSet(ClubScopedMixin, BookingWriteMixin, viewsets.ModelViewSet):
    """Calendar events of one club (bookings without a facility)."""

    serializer_class = EventSerializer
    filterset_class = BookingFilterSet

    def get_queryset(self):  # type: ignore
        return (
            Booking.objects.filter(club=self.get_club())
            .events()
            .select_related("team", "member")
            .order_by("start_time", "id")
        )

    def prepare_create_data(self, data: dict) -> dict:
        data["facility"] = None
        return data
