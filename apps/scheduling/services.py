"""Calendar services: merge bookings, events and birthdays; persist drags."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Iterable, Optional

from apps.bookings.models import Booking
from apps.bookings.services import BookingNotFoundError, bookings_in_range, update_booking
from apps.clubs.models import Club, Member
from shared.domain.value_objects import TimeRange

from .domain.layout import PlacedItem, layout_day
from .domain.reschedule import reschedule, resize_end

logger = logging.getLogger(__name__)

SOURCE_BOOKING = "booking"
SOURCE_EVENT = "event"
SOURCE_BIRTHDAY = "birthday"


@dataclass(frozen=True)
class CalendarItem:
    """One entry on the calendar; birthdays are all-day and have no times."""

    key: str
    source: str
    title: str
    date: date
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    booking: Optional[Booking] = None
    member: Optional[Member] = None

    @property
    def all_day(self) -> bool:
        return self.start_time is None

    @property
    def time_range(self) -> TimeRange:
        return TimeRange(self.start_time, self.end_time)


def _local_day_bounds(day: date, club: Club) -> tuple[datetime, datetime]:
    tz = club.tzinfo
    start = datetime.combine(day, time.min).replace(tzinfo=tz)
    end = datetime.combine(day + timedelta(days=1), time.min).replace(tzinfo=tz)
    return start, end


def _days(first: date, last: date) -> Iterable[date]:
    current = first
    while current <= last:
        yield current
        current += timedelta(days=1)


def booking_item(booking: Booking, club: Club) -> CalendarItem:
    source = SOURCE_EVENT if booking.is_event else SOURCE_BOOKING
    return CalendarItem(
        key=f"{source}-{booking.pk}",
        source=source,
        title=booking.title,
        date=booking.start_time.astimezone(club.tzinfo).date(),
        start_time=booking.start_time,
        end_time=booking.end_time,
        booking=booking,
    )


def birthdays_on(club: Club, day: date) -> list[CalendarItem]:
    """Members of the club whose birthday (month and day) falls on ``day``."""

    members = Member.objects.filter(
        club=club, birth_date__month=day.month, birth_date__day=day.day
    ).order_by("last_name", "first_name")
    return [
        CalendarItem(
            key=f"{SOURCE_BIRTHDAY}-{member.pk}-{day.isoformat()}",
            source=SOURCE_BIRTHDAY,
            title=member.full_name,
            date=day,
            member=member,
        )
        for member in members
    ]


def calendar_items(club: Club, first_day: date, last_day: date) -> list[CalendarItem]:
    """
    Everything the calendar shows between two local dates (both inclusive).

    Cancelled bookings are left out. Timed items come first in start
    order, followed by the birthdays per day.
    """

    window_start, _ = _local_day_bounds(first_day, club)
    _, window_end = _local_day_bounds(last_day, club)
    items = [booking_item(booking, club) for booking in bookings_in_range(club, window_start, window_end)]
    for day in _days(first_day, last_day):
        items.extend(birthdays_on(club, day))
    return items


def day_layout(club: Club, day: date) -> tuple[list[PlacedItem], list[CalendarItem]]:
    """Grid layout of the timed items of one local day plus its birthdays."""

    start, end = _local_day_bounds(day, club)
    timed = [booking_item(booking, club) for booking in bookings_in_range(club, start, end)]
    return layout_day(timed, day, club.tzinfo), birthdays_on(club, day)


def _club_booking(club: Club, booking_id: int) -> Booking:
    try:
        return Booking.objects.select_related("facility").get(pk=booking_id, club=club)
    except Booking.DoesNotExist as exc:
        raise BookingNotFoundError(f"Booking {booking_id} not found.") from exc


def reschedule_booking(
    club: Club,
    booking_id: int,
    target_date: date,
    target_hour: Optional[float] = None,
) -> Booking:
    """Persist a drag/drop move. Capacity is not re-checked on drop."""

    booking = _club_booking(club, booking_id)
    new_range = reschedule(booking.start_time, booking.end_time, target_date, club.tzinfo, target_hour)
    booking, _ = update_booking(
        booking,
        {"start_time": new_range.start, "end_time": new_range.end},
        check_capacity=False,
    )
    logger.info(f"Booking {booking.id} moved to {new_range}")
    return booking


def resize_booking(club: Club, booking_id: int, delta_px: float) -> Booking:
    """Persist a drag on the bottom edge of a booking."""

    booking = _club_booking(club, booking_id)
    new_range = resize_end(booking.start_time, booking.end_time, delta_px)
    booking, _ = update_booking(booking, {"end_time": new_range.end}, check_capacity=False)
    logger.info(f"Booking {booking.id} resized to {new_range}")
    return booking
