"""Facility registry models for ClubFlow."""

from __future__ import annotations

from django.core.validators import MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class Facility(models.Model):
    """A bookable resource of a club with a concurrency capacity."""

    class FacilityType(models.TextChoices):
        FIELD = "field", _("Field")
        COURT = "court", _("Court")
        GYM = "gym", _("Gym")
        HALL = "hall", _("Hall")
        POOL = "pool", _("Pool")
        OTHER = "other", _("Other")

    class Status(models.TextChoices):
        AVAILABLE = "available", _("Available")
        UNAVAILABLE = "unavailable", _("Unavailable")

    club = models.ForeignKey(
        "clubs.Club",
        on_delete=models.CASCADE,
        related_name="facilities",
    )
    name = models.CharField(max_length=255)
    type = models.CharField(max_length=100, choices=FacilityType.choices, default=FacilityType.FIELD)
    description = models.TextField(blank=True)
    capacity = models.PositiveIntegerField(
        null=True,
        blank=True,
        help_text=_("Number of people the facility holds."),
    )
    location = models.CharField(max_length=255, blank=True)
    equipment = models.JSONField(default=list, blank=True)
    rules = models.TextField(blank=True)
    maintenance_notes = models.TextField(blank=True)
    max_concurrent_bookings = models.PositiveIntegerField(
        default=1,
        validators=[MinValueValidator(1)],
        help_text=_("How many bookings may overlap at the same time."),
    )
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.AVAILABLE)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Facility")
        verbose_name_plural = _("Facilities")
        ordering = ["name"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(max_concurrent_bookings__gte=1),
                name="facility_max_concurrent_at_least_one",
            ),
        ]

    def __str__(self) -> str:
        return self.name
