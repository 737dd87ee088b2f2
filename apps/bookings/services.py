"""Domain services for booking workflows.

Availability checks are advisory by default: they report whether a
facility still has room for a time range but do not reserve anything.
Setting ``CLUBFLOW_ENFORCE_FACILITY_CAPACITY`` turns the check into a
reserve-then-commit step that locks the facility row and rejects writes
exceeding its capacity.
"""

from __future__ import annotations

import calendar
import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Any, TYPE_CHECKING

from django.conf import settings  # type: ignore
from django.db import transaction  # type: ignore
from django.db.utils import NotSupportedError  # type: ignore

from apps.facilities.models import Facility
from shared.domain.value_objects import TimeRange

from .models import Booking

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from apps.clubs.models import Club

logger = logging.getLogger(__name__)

MAX_RECURRING_OCCURRENCES = 366

TIME_FIELDS = {"start_time", "end_time", "facility"}


class BookingError(Exception):
    """Base class for booking domain errors."""


class FacilityNotFoundError(BookingError):
    """Raised when a booking references an unknown facility."""


class BookingNotFoundError(BookingError):
    """Raised when a referenced booking does not exist in the club."""


class InvalidTimeRangeError(BookingError):
    """Raised when end time is not after start time."""


class InvalidStatusError(BookingError):
    """Raised when a status change targets a status that cannot be set directly."""


class RecurrenceLimitError(BookingError):
    """Raised when a recurring series would exceed MAX_RECURRING_OCCURRENCES."""


class FacilityCapacityError(BookingError):
    """Raised when capacity is enforced and the facility is fully booked."""

    def __init__(self, availability: "AvailabilityResult"):
        self.availability = availability
        super().__init__(
            f"Facility is not available for the selected time. "
            f"At most {availability.max_concurrent} booking(s) allowed, "
            f"{availability.current_bookings} already present."
        )


@dataclass(frozen=True)
class AvailabilityResult:
    available: bool
    current_bookings: int
    max_concurrent: int
    conflicting_booking_ids: list[int] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "available": self.available,
            "current_bookings": self.current_bookings,
            "max_concurrent": self.max_concurrent,
            "conflicting_booking_ids": list(self.conflicting_booking_ids),
        }


@dataclass
class SeriesResult:
    bookings: list[Booking]
    skipped: list[TimeRange]


def capacity_is_enforced() -> bool:
    return bool(getattr(settings, "CLUBFLOW_ENFORCE_FACILITY_CAPACITY", False))


def _lock_queryset_if_possible(queryset):
    """Apply select_for_update when inside transaction.atomic()."""

    if not transaction.get_connection().in_atomic_block:
        return queryset

    try:
        return queryset.select_for_update()
    except NotSupportedError:
        return queryset


def validate_time_range(start_time: datetime | None, end_time: datetime | None) -> TimeRange:
    if start_time is None or end_time is None:
        raise InvalidTimeRangeError("Start time and end time are required.")
    try:
        return TimeRange(start_time, end_time)
    except ValueError as exc:
        if end_time <= start_time:
            raise InvalidTimeRangeError("End time must be after start time.") from exc
        raise InvalidTimeRangeError(str(exc)) from exc


def check_booking_availability(
    facility_id: int,
    start_time: datetime,
    end_time: datetime,
    *,
    exclude_booking_id: int | None = None,
    club: "Club | None" = None,
    lock: bool = False,
) -> AvailabilityResult:
    """
    Count non-cancelled bookings of the facility overlapping [start, end).

    With ``lock`` the facility row is locked for the rest of the surrounding
    transaction, serializing concurrent writers for the same facility.
    """

    time_range = validate_time_range(start_time, end_time)

    facilities = Facility.objects.all()
    if club is not None:
        facilities = facilities.filter(club=club)
    if lock:
        facilities = _lock_queryset_if_possible(facilities)
    try:
        facility = facilities.get(pk=facility_id)
    except Facility.DoesNotExist as exc:
        raise FacilityNotFoundError(f"Facility {facility_id} not found.") from exc

    overlapping = (
        Booking.objects.filter(facility=facility)
        .active()
        .overlapping(time_range.start, time_range.end)
    )
    if exclude_booking_id is not None:
        overlapping = overlapping.exclude(pk=exclude_booking_id)

    conflicting_ids = list(overlapping.order_by("start_time", "id").values_list("pk", flat=True))
    max_concurrent = facility.max_concurrent_bookings
    result = AvailabilityResult(
        available=len(conflicting_ids) < max_concurrent,
        current_bookings=len(conflicting_ids),
        max_concurrent=max_concurrent,
        conflicting_booking_ids=conflicting_ids,
    )
    logger.debug(
        f"Availability check facility={facility.id} range={time_range} "
        f"exclude={exclude_booking_id} current={result.current_bookings} max={max_concurrent}"
    )
    return result


def _facility_availability(
    facility: Facility | None,
    time_range: TimeRange,
    *,
    exclude_booking_id: int | None = None,
    enforce: bool,
) -> AvailabilityResult | None:
    if facility is None:
        return None
    availability = check_booking_availability(
        facility.pk,
        time_range.start,
        time_range.end,
        exclude_booking_id=exclude_booking_id,
        club=facility.club,
        lock=enforce,
    )
    if enforce and not availability.available:
        raise FacilityCapacityError(availability)
    if not availability.available:
        logger.warning(
            f"Facility {facility.pk} over capacity for {time_range}: "
            f"{availability.current_bookings}/{availability.max_concurrent}"
        )
    return availability


def create_booking(
    club: "Club",
    data: dict[str, Any],
    *,
    created_by=None,
) -> tuple[Booking, AvailabilityResult | None]:
    """Create one booking; returns it with the advisory availability computed beforehand."""

    time_range = validate_time_range(data.get("start_time"), data.get("end_time"))
    facility = data.get("facility")
    if facility is not None and facility.club_id != club.pk:
        raise FacilityNotFoundError(f"Facility {facility.pk} not found.")

    with transaction.atomic():
        availability = _facility_availability(facility, time_range, enforce=capacity_is_enforced())
        booking = Booking.objects.create(club=club, created_by=created_by, **data)

    logger.info(f"Booking {booking.id} created for club {club.pk} ({time_range})")
    return booking, availability


def _add_months(value: datetime, months: int) -> datetime:
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def expand_recurrence(
    first: TimeRange,
    pattern: str,
    until: date,
    tz,
) -> list[TimeRange]:
    """
    Occurrences of a recurring booking, first one included.

    Steps are taken on the club's wall clock so a weekly 18:00 training
    stays at 18:00 across DST changes. Each occurrence keeps the exact
    duration of the first one. ``until`` is inclusive. A series longer
    than MAX_RECURRING_OCCURRENCES is rejected rather than cut short.
    """

    local_start = first.start.astimezone(tz)
    occurrences: list[TimeRange] = []
    step = 0
    while True:
        if pattern == Booking.RecurringPattern.DAILY:
            candidate = local_start + timedelta(days=step)
        elif pattern == Booking.RecurringPattern.WEEKLY:
            candidate = local_start + timedelta(weeks=step)
        elif pattern == Booking.RecurringPattern.MONTHLY:
            candidate = _add_months(local_start, step)
        else:
            raise BookingError(f"Unknown recurring pattern: {pattern}")
        if candidate.date() > until:
            break
        if len(occurrences) == MAX_RECURRING_OCCURRENCES:
            raise RecurrenceLimitError(
                f"A recurring series may have at most {MAX_RECURRING_OCCURRENCES} occurrences."
            )
        occurrences.append(first.shift_to(candidate))
        step += 1
    return occurrences


def create_recurring_bookings(
    club: "Club",
    data: dict[str, Any],
    *,
    created_by=None,
) -> SeriesResult:
    """
    Create every occurrence of a recurring booking.

    Only the first occurrence keeps the recurring flags. When capacity is
    enforced, occurrences without room are skipped and reported instead
    of failing the whole series.
    """

    first = validate_time_range(data.get("start_time"), data.get("end_time"))
    pattern = data.get("recurring_pattern")
    until = data.get("recurring_until")
    if not pattern or until is None:
        raise BookingError("Recurring bookings need a pattern and an end date.")

    facility = data.get("facility")
    if facility is not None and facility.club_id != club.pk:
        raise FacilityNotFoundError(f"Facility {facility.pk} not found.")

    enforce = capacity_is_enforced()
    created: list[Booking] = []
    skipped: list[TimeRange] = []
    with transaction.atomic():
        for occurrence in expand_recurrence(first, pattern, until, club.tzinfo):
            try:
                _facility_availability(facility, occurrence, enforce=enforce)
            except FacilityCapacityError:
                logger.warning(f"Skipping recurring occurrence {occurrence}: facility fully booked")
                skipped.append(occurrence)
                continue
            values = dict(data, start_time=occurrence.start, end_time=occurrence.end)
            if created:
                values.update(recurring=False, recurring_pattern="", recurring_until=None)
            created.append(Booking.objects.create(club=club, created_by=created_by, **values))

    logger.info(
        f"Recurring series for club {club.pk}: {len(created)} booking(s) created, {len(skipped)} skipped"
    )
    return SeriesResult(bookings=created, skipped=skipped)


def update_booking(
    booking: Booking,
    changes: dict[str, Any],
    *,
    check_capacity: bool = True,
) -> tuple[Booking, AvailabilityResult | None]:
    """
    Apply a partial update.

    Time ordering is re-validated when start, end or facility change.
    With ``check_capacity`` the advisory availability (excluding the
    booking itself) is computed, and enforced when configured.
    """

    availability = None
    with transaction.atomic():
        if TIME_FIELDS & changes.keys():
            time_range = validate_time_range(
                changes.get("start_time", booking.start_time),
                changes.get("end_time", booking.end_time),
            )
            facility = changes.get("facility", booking.facility)
            if facility is not None and facility.club_id != booking.club_id:
                raise FacilityNotFoundError(f"Facility {facility.pk} not found.")
            if check_capacity:
                availability = _facility_availability(
                    facility,
                    time_range,
                    exclude_booking_id=booking.pk,
                    enforce=capacity_is_enforced(),
                )

        for name, value in changes.items():
            setattr(booking, name, value)
        booking.save()

    logger.info(f"Booking {booking.id} updated: {', '.join(sorted(changes))}")
    return booking, availability


def delete_booking(booking: Booking) -> None:
    booking_id = booking.pk
    booking.delete()
    logger.info(f"Booking {booking_id} deleted")


SETTABLE_STATUSES = (Booking.Status.CONFIRMED, Booking.Status.CANCELLED)


def set_booking_status(booking: Booking, new_status: str) -> Booking:
    """
    Toggle a booking between confirmed and cancelled.

    Capacity is not re-checked here; confirming a booking again after a
    cancellation is a manual decision of the caller.
    """

    if new_status not in SETTABLE_STATUSES:
        raise InvalidStatusError(f"Status '{new_status}' cannot be set directly.")
    if booking.status == new_status:
        return booking

    previous = booking.status
    booking.status = new_status
    booking.save(update_fields=["status", "updated_at"])
    logger.info(f"Booking {booking.id} status {previous} -> {new_status}")

    from .tasks import notify_booking_status_change  # local import to avoid circular

    booking_id = booking.pk
    transaction.on_commit(lambda: notify_booking_status_change.delay(booking_id))
    return booking


def bookings_in_range(club: "Club", start: datetime, end: datetime):
    """Non-cancelled bookings and events of a club overlapping [start, end)."""

    return (
        Booking.objects.filter(club=club)
        .active()
        .overlapping(start, end)
        .select_related("facility", "team", "member")
        .order_by("start_time", "id")
    )
