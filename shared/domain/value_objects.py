"""
Common Value Objects

Value objects used across multiple domains:
- TimeRange: a half-open interval between two timezone-aware instants
  (booking periods, availability candidates, calendar items)
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from shared.domain.base import ValueObject


@dataclass(frozen=True)
class TimeRange(ValueObject):
    """
    Time range value object

    Represents a range from start (inclusive) to end (exclusive).
    Both ends must be timezone-aware so comparisons never mix local
    wall-clock times with UTC instants.
    """
    start: datetime
    end: datetime

    def __post_init__(self):
        if self.start.tzinfo is None or self.end.tzinfo is None:
            raise ValueError("TimeRange requires timezone-aware datetimes")
        if self.start >= self.end:
            raise ValueError(f"Start ({self.start.isoformat()}) must be before end ({self.end.isoformat()})")

    def overlaps_with(self, other: 'TimeRange') -> bool:
        """
        Check if this range overlaps with another

        end is exclusive, so a range ending at T does not overlap
        a range starting at T.

        Examples:
            - 10:00-11:00 overlaps with 10:30-11:30 -> True
            - 10:00-11:00 overlaps with 11:00-12:00 -> False (adjacent)
        """
        if not isinstance(other, TimeRange):
            raise TypeError("Can only check overlap with another TimeRange")

        # Overlap formula: start1 < end2 AND end1 > start2
        return (self.start < other.end and
                self.end > other.start)

    @property
    def duration(self) -> timedelta:
        # Same-zone subtraction would ignore a DST offset change
        return self.end.astimezone(timezone.utc) - self.start.astimezone(timezone.utc)

    def shift_to(self, new_start: datetime) -> 'TimeRange':
        """
        Move the range to a new start, keeping its exact duration

        Arithmetic happens in UTC so a DST change between start and end
        does not stretch or shrink the range.
        """
        start = new_start.astimezone(timezone.utc)
        return TimeRange(start, start + self.duration)

    def __str__(self):
        return f"{self.start.isoformat()} - {self.end.isoformat()}"

    def __repr__(self):
        return f"TimeRange({self.start.isoformat()}, {self.end.isoformat()})"
