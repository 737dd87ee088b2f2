"""Booking domain models for ClubFlow.

One table holds both facility bookings and calendar events; an event is
simply a booking without a facility.
"""

from __future__ import annotations

from django.conf import settings  # type: ignore
from django.core.exceptions import ValidationError  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from shared.domain.value_objects import TimeRange


class BookingQuerySet(models.QuerySet):
    def active(self) -> "BookingQuerySet":
        return self.exclude(status=Booking.Status.CANCELLED)

    def overlapping(self, start, end) -> "BookingQuerySet":
        """Half-open overlap: existing.start < end AND existing.end > start."""
        return self.filter(start_time__lt=end, end_time__gt=start)

    def events(self) -> "BookingQuerySet":
        return self.filter(facility__isnull=True)


class Booking(models.Model):
    """Scheduled use of a facility, or a calendar event when no facility is set."""

    class Type(models.TextChoices):
        TRAINING = "training", _("Training")
        MATCH = "match", _("Match")
        EVENT = "event", _("Event")
        MAINTENANCE = "maintenance", _("Maintenance")
        MEETING = "meeting", _("Meeting")
        OTHER = "other", _("Other")

    class Status(models.TextChoices):
        PENDING = "pending", _("Pending")
        CONFIRMED = "confirmed", _("Confirmed")
        CANCELLED = "cancelled", _("Cancelled")

    class RecurringPattern(models.TextChoices):
        DAILY = "daily", _("Daily")
        WEEKLY = "weekly", _("Weekly")
        MONTHLY = "monthly", _("Monthly")

    club = models.ForeignKey(
        "clubs.Club",
        on_delete=models.CASCADE,
        related_name="bookings",
    )
    facility = models.ForeignKey(
        "facilities.Facility",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="bookings",
    )
    team = models.ForeignKey(
        "clubs.Team",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="bookings",
    )
    member = models.ForeignKey(
        "clubs.Member",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="bookings",
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="created_bookings",
    )
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    start_time = models.DateTimeField()
    end_time = models.DateTimeField()
    type = models.CharField(max_length=50, choices=Type.choices, default=Type.TRAINING)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.CONFIRMED)
    location = models.CharField(
        max_length=255,
        blank=True,
        help_text=_("Free-text place for events without a facility."),
    )
    is_public = models.BooleanField(default=True)
    recurring = models.BooleanField(default=False)
    recurring_pattern = models.CharField(max_length=20, choices=RecurringPattern.choices, blank=True)
    recurring_until = models.DateField(null=True, blank=True)
    contact_person = models.CharField(max_length=255, blank=True)
    contact_email = models.EmailField(blank=True)
    contact_phone = models.CharField(max_length=50, blank=True)
    participants = models.PositiveIntegerField(null=True, blank=True)
    cost = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = BookingQuerySet.as_manager()

    class Meta:
        verbose_name = _("Booking")
        verbose_name_plural = _("Bookings")
        ordering = ["start_time", "id"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(end_time__gt=models.F("start_time")),
                name="booking_end_after_start",
            ),
        ]
        indexes = [
            models.Index(fields=["facility", "start_time", "end_time"]),
            models.Index(fields=["club", "start_time"]),
            models.Index(fields=["status"]),
        ]

    def __str__(self) -> str:
        return f"{self.title} ({self.start_time:%Y-%m-%d %H:%M})"

    def clean(self) -> None:
        if self.start_time and self.end_time and self.end_time <= self.start_time:
            raise ValidationError(_("End time must be after start time."))
        if self.facility_id and self.facility.club_id != self.club_id:
            raise ValidationError(_("Facility belongs to another club."))

    @property
    def is_event(self) -> bool:
        return self.facility_id is None

    @property
    def is_cancelled(self) -> bool:
        return self.status == self.Status.CANCELLED

    @property
    def time_range(self) -> TimeRange:
        return TimeRange(self.start_time, self.end_time)
