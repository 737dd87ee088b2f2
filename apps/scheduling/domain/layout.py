"""
Day grid layout

A day is rendered from 06:00 to 24:00 at 50 px per hour. Items get a
vertical position from their local start/end hours; items whose pixel
ranges overlap share a group and split the width evenly.
"""

from dataclasses import dataclass
from datetime import date, datetime, tzinfo
from operator import attrgetter
from typing import Any, Callable, Iterable, List

from shared.domain.value_objects import TimeRange

DAY_START_HOUR = 6
DAY_END_HOUR = 24
PIXELS_PER_HOUR = 50
MIN_HEIGHT_PX = 25
MIN_DURATION_HOURS = 0.5


@dataclass(frozen=True)
class GridPosition:
    start_hour: float
    end_hour: float
    top: float
    height: float

    @property
    def bottom(self) -> float:
        return self.top + self.height

    def overlaps(self, other: "GridPosition") -> bool:
        """Open-interval test on pixel ranges; touching edges do not overlap."""
        return not (self.bottom <= other.top or self.top >= other.bottom)


@dataclass(frozen=True)
class PlacedItem:
    item: Any
    position: GridPosition
    column: int
    total_columns: int
    width: float
    left: float


def _local_hour(instant: datetime, day: date, tz: tzinfo) -> float:
    local = instant.astimezone(tz)
    if local.date() < day:
        return 0.0
    if local.date() > day:
        return 24.0
    return local.hour + local.minute / 60


def grid_position(item_range: TimeRange, day: date, tz: tzinfo) -> GridPosition:
    """
    Position of a time range on the grid of ``day`` in zone ``tz``

    Hours are wall-clock hours of the rendered day; parts before or
    after that day are cut off. Start is clamped to [6, 24], end to
    [start + 0.5, 24], and the height never drops below 25 px.

    Examples:
        - 09:00-10:30 -> top 150, height 75
        - 04:00-05:00 -> start and end pinned to 6:00/6:30, top 0, height 25
    """
    raw_start = _local_hour(item_range.start, day, tz)
    raw_end = _local_hour(item_range.end, day, tz)

    start_hour = max(DAY_START_HOUR, min(DAY_END_HOUR, raw_start))
    end_hour = max(start_hour + MIN_DURATION_HOURS, min(DAY_END_HOUR, raw_end))

    top = (start_hour - DAY_START_HOUR) * PIXELS_PER_HOUR
    height = max((end_hour - start_hour) * PIXELS_PER_HOUR, MIN_HEIGHT_PX)
    return GridPosition(start_hour=start_hour, end_hour=end_hour, top=top, height=height)


def layout_day(
    items: Iterable[Any],
    day: date,
    tz: tzinfo,
    time_range: Callable[[Any], TimeRange] = attrgetter("time_range"),
) -> List[PlacedItem]:
    """
    Side-by-side columns for concurrent items of one day

    Items are sorted by top and greedily put into the first group with
    any member they overlap. A group of N items gives each one 100/N
    percent width in insertion order. Chains (A overlaps B, B overlaps
    C) end up in one group even when A and C do not overlap.
    """
    positioned = [(item, grid_position(time_range(item), day, tz)) for item in items]
    positioned.sort(key=lambda pair: pair[1].top)

    groups: List[List[tuple]] = []
    for item, position in positioned:
        for group in groups:
            if any(position.overlaps(member_position) for _, member_position in group):
                group.append((item, position))
                break
        else:
            groups.append([(item, position)])

    placed: List[PlacedItem] = []
    for group in groups:
        width = 100 / len(group)
        for column, (item, position) in enumerate(group):
            placed.append(
                PlacedItem(
                    item=item,
                    position=position,
                    column=column,
                    total_columns=len(group),
                    width=width,
                    left=column * width,
                )
            )
    return placed
