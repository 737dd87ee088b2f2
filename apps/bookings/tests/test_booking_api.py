"""Integration tests for booking API endpoints."""

from __future__ import annotations

from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

from django.contrib.auth import get_user_model
from django.core import mail
from django.test import override_settings
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.bookings.models import Booking
from apps.clubs.models import Club
from apps.facilities.models import Facility

BERLIN = ZoneInfo("Europe/Berlin")


def at(hour: int, minute: int = 0, day: date = date(2025, 3, 10)) -> datetime:
    return datetime(day.year, day.month, day.day, hour, minute, tzinfo=BERLIN)


class BookingAPITests(APITestCase):
    """Covers creation, validation, updates, listing and status changes."""

    def setUp(self) -> None:
        self.user = get_user_model().objects.create_user(username="trainer", password="TrainerPass123")
        self.club = Club.objects.create(name="SV Grünwald", timezone="Europe/Berlin")
        self.facility = Facility.objects.create(
            club=self.club,
            name="Kunstrasenplatz",
            type=Facility.FacilityType.FIELD,
            max_concurrent_bookings=2,
        )
        self.client.force_authenticate(self.user)
        self.list_url = reverse("booking-list", kwargs={"club_id": self.club.id})
        self.check_url = reverse("booking-check-availability", kwargs={"club_id": self.club.id})

    def _payload(self, start: datetime, end: datetime, **extra) -> dict:
        payload = {
            "title": "Training U17",
            "facility": self.facility.id,
            "type": Booking.Type.TRAINING,
            "status": Booking.Status.CONFIRMED,
            "start_time": start.isoformat(),
            "end_time": end.isoformat(),
        }
        payload.update(extra)
        return payload

    def _detail_url(self, booking_id: int) -> str:
        return reverse("booking-detail", kwargs={"club_id": self.club.id, "pk": booking_id})

    def _check(self, start: datetime, end: datetime, **extra):
        payload = {
            "facility_id": self.facility.id,
            "start_time": start.isoformat(),
            "end_time": end.isoformat(),
        }
        payload.update(extra)
        return self.client.post(self.check_url, payload, format="json")

    def test_end_to_end_capacity_scenario(self) -> None:
        first = self.client.post(self.list_url, self._payload(at(10), at(11)), format="json")
        self.assertEqual(first.status_code, status.HTTP_201_CREATED, first.data)

        check = self._check(at(10, 30), at(11, 30))
        self.assertEqual(check.status_code, status.HTTP_200_OK, check.data)
        self.assertEqual(check.data["available"], True)
        self.assertEqual(check.data["current_bookings"], 1)
        self.assertEqual(check.data["max_concurrent"], 2)

        second = self.client.post(self.list_url, self._payload(at(10, 30), at(11, 30)), format="json")
        self.assertEqual(second.status_code, status.HTTP_201_CREATED, second.data)

        check = self._check(at(10, 45), at(11, 15))
        self.assertEqual(check.data["available"], False)
        self.assertEqual(check.data["current_bookings"], 2)
        self.assertEqual(check.data["max_concurrent"], 2)
        self.assertEqual(
            check.data["conflicting_booking_ids"], [first.data["id"], second.data["id"]]
        )

    def test_create_reports_advisory_availability(self) -> None:
        self.facility.max_concurrent_bookings = 1
        self.facility.save()
        self.client.post(self.list_url, self._payload(at(9), at(10)), format="json")

        response = self.client.post(self.list_url, self._payload(at(9, 30), at(10, 30)), format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["availability"]["available"], False)
        self.assertEqual(response.data["availability"]["current_bookings"], 1)
        self.assertEqual(Booking.objects.count(), 2)

    @override_settings(CLUBFLOW_ENFORCE_FACILITY_CAPACITY=True)
    def test_enforced_capacity_rejects_overbooking(self) -> None:
        self.facility.max_concurrent_bookings = 1
        self.facility.save()
        self.client.post(self.list_url, self._payload(at(9), at(10)), format="json")

        response = self.client.post(self.list_url, self._payload(at(9, 30), at(10, 30)), format="json")

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT, response.data)
        self.assertEqual(response.data["availability"]["current_bookings"], 1)
        self.assertEqual(Booking.objects.count(), 1)

    def test_end_before_start_is_rejected(self) -> None:
        response = self.client.post(self.list_url, self._payload(at(11), at(10)), format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
        self.assertIn("end_time", response.data)
        self.assertEqual(Booking.objects.count(), 0)

    def test_check_availability_validates_input(self) -> None:
        response = self._check(at(11), at(11))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)

        unknown = self.client.post(
            self.check_url,
            {"facility_id": 99999, "start_time": at(9).isoformat(), "end_time": at(10).isoformat()},
            format="json",
        )
        self.assertEqual(unknown.status_code, status.HTTP_404_NOT_FOUND, unknown.data)

    def test_check_availability_excludes_the_edited_booking(self) -> None:
        created = self.client.post(self.list_url, self._payload(at(10), at(11)), format="json")

        without = self._check(at(10), at(11))
        with_exclusion = self._check(at(10), at(11), exclude_booking_id=created.data["id"])

        self.assertEqual(without.data["current_bookings"], 1)
        self.assertEqual(with_exclusion.data["current_bookings"], 0)

    def test_facility_of_another_club_is_not_accepted(self) -> None:
        other_club = Club.objects.create(name="FC Nachbar")
        foreign = Facility.objects.create(club=other_club, name="Halle")

        response = self.client.post(
            self.list_url, self._payload(at(9), at(10), facility=foreign.id), format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)

        check = self.client.post(
            self.check_url,
            {"facility_id": foreign.id, "start_time": at(9).isoformat(), "end_time": at(10).isoformat()},
            format="json",
        )
        self.assertEqual(check.status_code, status.HTTP_404_NOT_FOUND, check.data)

    def test_update_revalidates_time_ordering(self) -> None:
        created = self.client.post(self.list_url, self._payload(at(10), at(11)), format="json")
        url = self._detail_url(created.data["id"])

        invalid = self.client.patch(url, {"start_time": at(12).isoformat()}, format="json")
        self.assertEqual(invalid.status_code, status.HTTP_400_BAD_REQUEST, invalid.data)

        valid = self.client.patch(
            url,
            {"start_time": at(12).isoformat(), "end_time": at(13, 30).isoformat()},
            format="json",
        )
        self.assertEqual(valid.status_code, status.HTTP_200_OK, valid.data)
        booking = Booking.objects.get(id=created.data["id"])
        self.assertEqual(booking.start_time, at(12))
        self.assertEqual(booking.end_time, at(13, 30))
        self.assertEqual(valid.data["availability"]["current_bookings"], 0)

    def test_update_of_other_fields_skips_availability(self) -> None:
        created = self.client.post(self.list_url, self._payload(at(10), at(11)), format="json")

        response = self.client.patch(
            self._detail_url(created.data["id"]), {"notes": "Bälle mitbringen"}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertIsNone(response.data["availability"])
        self.assertEqual(Booking.objects.get(id=created.data["id"]).notes, "Bälle mitbringen")

    def test_delete_removes_booking(self) -> None:
        created = self.client.post(self.list_url, self._payload(at(10), at(11)), format="json")

        response = self.client.delete(self._detail_url(created.data["id"]))

        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Booking.objects.filter(id=created.data["id"]).exists())

    def test_list_filters_by_facility_and_window(self) -> None:
        hall = Facility.objects.create(club=self.club, name="Sporthalle", type=Facility.FacilityType.HALL)
        self.client.post(self.list_url, self._payload(at(9), at(10)), format="json")
        self.client.post(self.list_url, self._payload(at(14), at(15)), format="json")
        self.client.post(self.list_url, self._payload(at(9), at(10), facility=hall.id), format="json")

        by_facility = self.client.get(self.list_url, {"facility": hall.id})
        self.assertEqual(by_facility.status_code, status.HTTP_200_OK)
        self.assertEqual(len(by_facility.data), 1)

        window = self.client.get(
            self.list_url,
            {"facility": self.facility.id, "start": at(13).isoformat(), "end": at(16).isoformat()},
        )
        self.assertEqual(len(window.data), 1)

    def test_list_is_scoped_to_the_club(self) -> None:
        other_club = Club.objects.create(name="FC Nachbar")
        Booking.objects.create(club=other_club, title="Fremd", start_time=at(9), end_time=at(10))
        self.client.post(self.list_url, self._payload(at(9), at(10)), format="json")

        response = self.client.get(self.list_url)

        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]["title"], "Training U17")

    def test_status_toggle_sends_notification(self) -> None:
        created = self.client.post(
            self.list_url,
            self._payload(at(10), at(11), contact_email="coach@example.com", contact_person="Anna"),
            format="json",
        )
        url = reverse("booking-set-status", kwargs={"club_id": self.club.id, "pk": created.data["id"]})

        with self.captureOnCommitCallbacks(execute=True):
            response = self.client.post(url, {"status": Booking.Status.CANCELLED}, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["status"], Booking.Status.CANCELLED)
        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].to, ["coach@example.com"])
        self.assertIn("cancelled", mail.outbox[0].subject)

        # Cancelled bookings no longer count
        check = self._check(at(10), at(11))
        self.assertEqual(check.data["current_bookings"], 0)

    def test_status_toggle_rejects_pending(self) -> None:
        created = self.client.post(self.list_url, self._payload(at(10), at(11)), format="json")
        url = reverse("booking-set-status", kwargs={"club_id": self.club.id, "pk": created.data["id"]})

        response = self.client.post(url, {"status": Booking.Status.PENDING}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)

    def test_recurring_weekly_series(self) -> None:
        response = self.client.post(
            self.list_url,
            self._payload(
                at(18),
                at(19, 30),
                recurring=True,
                recurring_pattern=Booking.RecurringPattern.WEEKLY,
                recurring_until="2025-03-31",
            ),
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["count"], 4)
        self.assertEqual(response.data["skipped"], [])
        bookings = list(Booking.objects.order_by("start_time"))
        # 10th, 17th, 24th and 31st of March; the last one is after the DST switch
        self.assertEqual(
            [b.start_time.astimezone(BERLIN).hour for b in bookings], [18, 18, 18, 18]
        )
        self.assertTrue(all(b.end_time - b.start_time == timedelta(minutes=90) for b in bookings))
        self.assertTrue(bookings[0].recurring)
        self.assertFalse(any(b.recurring for b in bookings[1:]))

    @override_settings(CLUBFLOW_ENFORCE_FACILITY_CAPACITY=True)
    def test_recurring_series_skips_full_slots_when_enforced(self) -> None:
        self.facility.max_concurrent_bookings = 1
        self.facility.save()
        Booking.objects.create(
            club=self.club,
            facility=self.facility,
            title="Punktspiel",
            type=Booking.Type.MATCH,
            start_time=at(18, day=date(2025, 3, 17)),
            end_time=at(20, day=date(2025, 3, 17)),
        )

        response = self.client.post(
            self.list_url,
            self._payload(
                at(18),
                at(19),
                recurring=True,
                recurring_pattern=Booking.RecurringPattern.WEEKLY,
                recurring_until="2025-03-24",
            ),
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["count"], 2)
        self.assertEqual(len(response.data["skipped"]), 1)

    def test_recurring_requires_pattern(self) -> None:
        response = self.client.post(
            self.list_url,
            self._payload(at(18), at(19), recurring=True, recurring_until="2025-03-31"),
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
        self.assertIn("recurring_pattern", response.data)

    def test_recurring_until_uses_the_club_time_zone(self) -> None:
        new_york = ZoneInfo("America/New_York")
        club = Club.objects.create(name="Brooklyn Strikers", timezone="America/New_York")
        facility = Facility.objects.create(club=club, name="Pier 5")
        # 21:00 in New York is already the next day in Berlin
        start = datetime(2025, 6, 2, 21, 0, tzinfo=new_york)

        response = self.client.post(
            reverse("booking-list", kwargs={"club_id": club.id}),
            self._payload(
                start,
                start + timedelta(minutes=90),
                facility=facility.id,
                recurring=True,
                recurring_pattern=Booking.RecurringPattern.DAILY,
                recurring_until="2025-06-02",
            ),
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["count"], 1)

    def test_recurring_series_over_the_limit_is_rejected(self) -> None:
        response = self.client.post(
            self.list_url,
            self._payload(
                at(18),
                at(19),
                recurring=True,
                recurring_pattern=Booking.RecurringPattern.DAILY,
                recurring_until="2026-03-31",
            ),
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
        self.assertEqual(Booking.objects.count(), 0)

    def test_unknown_club_returns_404(self) -> None:
        url = reverse("booking-list", kwargs={"club_id": 424242})

        response = self.client.get(url)

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_requires_authentication(self) -> None:
        self.client.force_authenticate(None)

        response = self.client.get(self.list_url)

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class EventAPITests(APITestCase):
    def setUp(self) -> None:
        self.user = get_user_model().objects.create_user(username="vorstand", password="VorstandPass123")
        self.club = Club.objects.create(name="SV Grünwald", timezone="Europe/Berlin")
        self.facility = Facility.objects.create(club=self.club, name="Kunstrasenplatz")
        self.client.force_authenticate(self.user)
        self.list_url = reverse("event-list", kwargs={"club_id": self.club.id})

    def test_create_event_defaults(self) -> None:
        response = self.client.post(
            self.list_url,
            {
                "title": "Mitgliederversammlung",
                "location": "Vereinsheim",
                "start_time": at(19).isoformat(),
                "end_time": at(21).isoformat(),
            },
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["type"], Booking.Type.EVENT)
        self.assertEqual(response.data["status"], Booking.Status.CONFIRMED)
        self.assertIsNone(response.data["availability"])
        event = Booking.objects.get(id=response.data["id"])
        self.assertIsNone(event.facility)
        self.assertTrue(event.is_event)

    def test_event_list_excludes_facility_bookings(self) -> None:
        Booking.objects.create(
            club=self.club, facility=self.facility, title="Training", start_time=at(9), end_time=at(10)
        )
        Booking.objects.create(
            club=self.club, title="Sommerfest", type=Booking.Type.EVENT, start_time=at(15), end_time=at(22)
        )

        response = self.client.get(self.list_url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([item["title"] for item in response.data], ["Sommerfest"])
        self.assertNotIn("facility", response.data[0])

    def test_events_never_count_towards_availability(self) -> None:
        Booking.objects.create(
            club=self.club, title="Sommerfest", type=Booking.Type.EVENT, start_time=at(9), end_time=at(12)
        )
        check_url = reverse("booking-check-availability", kwargs={"club_id": self.club.id})

        response = self.client.post(
            check_url,
            {"facility_id": self.facility.id, "start_time": at(10).isoformat(), "end_time": at(11).isoformat()},
            format="json",
        )

        self.assertEqual(response.data["current_bookings"], 0)
        self.assertTrue(response.data["available"])
