"""
Drag and resize time computations

All inputs and outputs are timezone-aware instants. Dropping an item
keeps its exact duration; hour targets snap to half hours inside the
day grid.
"""

import math
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Optional

from shared.domain.value_objects import TimeRange

from .layout import DAY_END_HOUR, DAY_START_HOUR, MIN_DURATION_HOURS, PIXELS_PER_HOUR

DEFAULT_DURATION = timedelta(hours=2)
SNAP_HOURS = 0.5
LATEST_START_HOUR = DAY_END_HOUR - SNAP_HOURS
GRID_HOURS = DAY_END_HOUR - DAY_START_HOUR


def _round_half_up(value: float) -> float:
    """Nearest half hour, .25 rounds up (Python's round() would go to even)."""
    return math.floor(value / SNAP_HOURS + 0.5) * SNAP_HOURS


def snap_hour(raw_hour: float) -> float:
    """
    Snap a fractional hour to the 30-minute grid within the day

    Examples:
        - 7.24 -> 7.0
        - 7.25 -> 7.5
        - 3.0 -> 6.0 (before the grid)
        - 23.9 -> 23.5 (a start must stay on the same day)
    """
    return min(max(_round_half_up(raw_hour), DAY_START_HOUR), LATEST_START_HOUR)


def hour_from_offset(offset_px: float, grid_height_px: float) -> float:
    """Raw hour under a drop point ``offset_px`` from the top of the grid."""
    if grid_height_px <= 0:
        raise ValueError("Grid height must be positive")
    return DAY_START_HOUR + offset_px / grid_height_px * GRID_HOURS


def _duration(start: datetime, end: Optional[datetime]) -> timedelta:
    if end is None or end <= start:
        return DEFAULT_DURATION
    return end.astimezone(timezone.utc) - start.astimezone(timezone.utc)


def reschedule(
    start: datetime,
    end: Optional[datetime],
    target_day: date,
    tz: tzinfo,
    target_hour: Optional[float] = None,
) -> TimeRange:
    """
    New time range for an item dropped on ``target_day``

    With ``target_hour`` the start moves to that hour snapped to the
    half-hour grid; without it (month view) the local time of day is
    kept. The duration is preserved, or two hours when ``end`` is
    missing or not after ``start``.
    """
    duration = _duration(start, end)

    if target_hour is None:
        wall_clock = start.astimezone(tz).time().replace(tzinfo=None)
    else:
        snapped = snap_hour(target_hour)
        wall_clock = time(int(snapped), int(round((snapped % 1) * 60)))

    new_start = datetime.combine(target_day, wall_clock).replace(tzinfo=tz)
    new_start = new_start.astimezone(timezone.utc)
    return TimeRange(new_start, new_start + duration)


def resize_end(start: datetime, end: datetime, delta_px: float) -> TimeRange:
    """
    Move the end edge by ``delta_px`` pixels, snapped to half hours

    An end that would land at or before the start becomes start + 30
    minutes.
    """
    delta_hours = _round_half_up(delta_px / PIXELS_PER_HOUR)
    start_utc = start.astimezone(timezone.utc)
    new_end = end.astimezone(timezone.utc) + timedelta(hours=delta_hours)
    if new_end <= start_utc:
        new_end = start_utc + timedelta(hours=MIN_DURATION_HOURS)
    return TimeRange(start_utc, new_end)
