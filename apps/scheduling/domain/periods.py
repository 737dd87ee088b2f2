"""
Calendar view periods

Views: day, 3day, week (Monday to Sunday) and month (every day of the
month).
"""

import calendar
from datetime import date, timedelta
from typing import List

DAY = "day"
THREE_DAYS = "3day"
WEEK = "week"
MONTH = "month"
VIEWS = (DAY, THREE_DAYS, WEEK, MONTH)


def _check_view(view: str) -> None:
    if view not in VIEWS:
        raise ValueError(f"Unknown calendar view: {view}")


def _shift_month(current: date, months: int) -> date:
    index = current.month - 1 + months
    year, month = current.year + index // 12, index % 12 + 1
    return current.replace(year=year, month=month, day=min(current.day, calendar.monthrange(year, month)[1]))


def calendar_days(view: str, current: date) -> List[date]:
    """Days shown by ``view`` around ``current``."""
    _check_view(view)
    if view == DAY:
        return [current]
    if view == THREE_DAYS:
        return [current + timedelta(days=offset) for offset in range(3)]
    if view == WEEK:
        monday = current - timedelta(days=current.weekday())
        return [monday + timedelta(days=offset) for offset in range(7)]
    days_in_month = calendar.monthrange(current.year, current.month)[1]
    return [current.replace(day=day) for day in range(1, days_in_month + 1)]


def navigate(view: str, current: date, direction: int) -> date:
    """
    Reference date after paging ``direction`` steps (negative goes back)

    Day pages by one day, 3day by three, week by seven and month by
    calendar month.
    """
    _check_view(view)
    if view == MONTH:
        return _shift_month(current, direction)
    step = {DAY: 1, THREE_DAYS: 3, WEEK: 7}[view]
    return current + timedelta(days=step * direction)
