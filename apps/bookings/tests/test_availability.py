from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

import pytest
from django.test import override_settings

from apps.bookings import services
from apps.bookings.models import Booking
from apps.clubs.models import Club
from apps.facilities.models import Facility
from shared.domain.value_objects import TimeRange

BERLIN = ZoneInfo("Europe/Berlin")


def at(hour, minute=0, day=date(2025, 6, 2)):
    return datetime(day.year, day.month, day.day, hour, minute, tzinfo=BERLIN)


@pytest.fixture
def club():
    return Club.objects.create(name="TSV Test", timezone="Europe/Berlin")


@pytest.fixture
def make_facility(club):
    def _make(max_concurrent=1, **kwargs):
        return Facility.objects.create(
            club=club, name=kwargs.pop("name", "Platz 1"), max_concurrent_bookings=max_concurrent, **kwargs
        )

    return _make


@pytest.fixture
def make_booking(club):
    def _make(facility, start, end, status=Booking.Status.CONFIRMED):
        return Booking.objects.create(
            club=club, facility=facility, title="Training", start_time=start, end_time=end, status=status
        )

    return _make


@pytest.mark.django_db
def test_single_capacity_overlap_is_unavailable(make_facility, make_booking):
    facility = make_facility(max_concurrent=1)
    make_booking(facility, at(9), at(10))

    result = services.check_booking_availability(facility.id, at(9, 30), at(11))

    assert result.available is False
    assert result.current_bookings == 1
    assert result.max_concurrent == 1


@pytest.mark.django_db
def test_back_to_back_bookings_do_not_conflict(make_facility, make_booking):
    facility = make_facility(max_concurrent=1)
    make_booking(facility, at(9), at(10))

    after = services.check_booking_availability(facility.id, at(10), at(11))
    before = services.check_booking_availability(facility.id, at(8), at(9))

    assert after.available and after.current_bookings == 0
    assert before.available and before.current_bookings == 0


@pytest.mark.django_db
@pytest.mark.parametrize("existing,expected", [(0, True), (2, True), (3, False), (4, False)])
def test_capacity_threshold(make_facility, make_booking, existing, expected):
    facility = make_facility(max_concurrent=3)
    for _ in range(existing):
        make_booking(facility, at(17), at(19))

    result = services.check_booking_availability(facility.id, at(18), at(18, 30))

    assert result.available is expected
    assert result.current_bookings == existing


@pytest.mark.django_db
def test_cancelled_bookings_never_count(make_facility, make_booking):
    facility = make_facility(max_concurrent=1)
    make_booking(facility, at(9), at(10), status=Booking.Status.CANCELLED)
    make_booking(facility, at(9), at(10), status=Booking.Status.PENDING)

    result = services.check_booking_availability(facility.id, at(9), at(10))

    assert result.current_bookings == 1


@pytest.mark.django_db
def test_exclusion_reduces_count_by_exactly_one(make_facility, make_booking):
    facility = make_facility(max_concurrent=2)
    edited = make_booking(facility, at(9), at(10))
    make_booking(facility, at(9, 30), at(10, 30))

    plain = services.check_booking_availability(facility.id, at(9), at(10))
    excluded = services.check_booking_availability(
        facility.id, at(9), at(10), exclude_booking_id=edited.id
    )

    assert plain.current_bookings == 2
    assert excluded.current_bookings == 1
    assert edited.id not in excluded.conflicting_booking_ids


@pytest.mark.django_db
def test_other_facilities_are_ignored(make_facility, make_booking):
    field = make_facility(name="Rasen")
    hall = make_facility(name="Halle")
    make_booking(hall, at(9), at(10))

    assert services.check_booking_availability(field.id, at(9), at(10)).current_bookings == 0


@pytest.mark.django_db
def test_unknown_facility_raises(club):
    with pytest.raises(services.FacilityNotFoundError):
        services.check_booking_availability(4711, at(9), at(10))


@pytest.mark.django_db
def test_facility_of_other_club_is_not_found(make_facility):
    facility = make_facility()
    other = Club.objects.create(name="Fremdverein")

    with pytest.raises(services.FacilityNotFoundError):
        services.check_booking_availability(facility.id, at(9), at(10), club=other)


@pytest.mark.django_db
@pytest.mark.parametrize("start,end", [(at(10), at(10)), (at(11), at(10))])
def test_invalid_range_raises(make_facility, start, end):
    facility = make_facility()

    with pytest.raises(services.InvalidTimeRangeError):
        services.check_booking_availability(facility.id, start, end)


@pytest.mark.django_db
def test_update_booking_validates_changed_times(make_facility, make_booking):
    booking = make_booking(make_facility(), at(9), at(10))

    with pytest.raises(services.InvalidTimeRangeError):
        services.update_booking(booking, {"end_time": at(8)})


@pytest.mark.django_db
@override_settings(CLUBFLOW_ENFORCE_FACILITY_CAPACITY=True)
def test_enforced_update_ignores_the_booking_itself(make_facility, make_booking):
    facility = make_facility(max_concurrent=1)
    booking = make_booking(facility, at(9), at(10))

    updated, availability = services.update_booking(booking, {"end_time": at(10, 30)})

    assert availability.available is True
    assert updated.end_time == at(10, 30)


@pytest.mark.django_db
def test_update_without_capacity_check(make_facility, make_booking):
    facility = make_facility(max_concurrent=1)
    make_booking(facility, at(12), at(13))
    booking = make_booking(facility, at(9), at(10))

    with override_settings(CLUBFLOW_ENFORCE_FACILITY_CAPACITY=True):
        _, availability = services.update_booking(
            booking, {"start_time": at(12), "end_time": at(13)}, check_capacity=False
        )

    assert availability is None
    booking.refresh_from_db()
    assert booking.start_time == at(12)


@pytest.mark.django_db
def test_set_status_rejects_pending(make_facility, make_booking):
    booking = make_booking(make_facility(), at(9), at(10))

    with pytest.raises(services.InvalidStatusError):
        services.set_booking_status(booking, Booking.Status.PENDING)


def test_monthly_recurrence_clamps_to_month_end():
    first = TimeRange(at(18, day=date(2025, 1, 31)), at(20, day=date(2025, 1, 31)))

    occurrences = services.expand_recurrence(
        first, Booking.RecurringPattern.MONTHLY, date(2025, 4, 30), BERLIN
    )

    assert [o.start.astimezone(BERLIN).date() for o in occurrences] == [
        date(2025, 1, 31),
        date(2025, 2, 28),
        date(2025, 3, 31),
        date(2025, 4, 30),
    ]
    assert all(o.duration == timedelta(hours=2) for o in occurrences)
    # Wall-clock time survives the switch to summer time
    assert {o.start.astimezone(BERLIN).hour for o in occurrences} == {18}


def test_daily_recurrence_until_is_inclusive():
    first = TimeRange(at(7), at(8))

    occurrences = services.expand_recurrence(
        first, Booking.RecurringPattern.DAILY, date(2025, 6, 4), BERLIN
    )

    assert len(occurrences) == 3


def test_recurrence_at_the_limit_is_accepted():
    first = TimeRange(at(7), at(8))
    last_day = date(2025, 6, 2) + timedelta(days=services.MAX_RECURRING_OCCURRENCES - 1)

    occurrences = services.expand_recurrence(first, Booking.RecurringPattern.DAILY, last_day, BERLIN)

    assert len(occurrences) == services.MAX_RECURRING_OCCURRENCES


def test_recurrence_over_the_limit_is_rejected():
    first = TimeRange(at(7), at(8))
    last_day = date(2025, 6, 2) + timedelta(days=services.MAX_RECURRING_OCCURRENCES)

    with pytest.raises(services.RecurrenceLimitError):
        services.expand_recurrence(first, Booking.RecurringPattern.DAILY, last_day, BERLIN)
