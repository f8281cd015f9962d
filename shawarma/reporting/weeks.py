"""Calendar helpers for the Monday-to-Sunday reporting week."""
from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Optional

from ..data.models import DateWindow

WEEKDAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]


def _as_date(day: date | datetime) -> date:
    return day.date() if isinstance(day, datetime) else day


def week_start(day: date | datetime) -> date:
    """Monday of the week containing ``day``."""
    day = _as_date(day)
    return day - timedelta(days=day.weekday())


def week_end(day: date | datetime) -> date:
    """Sunday of the week containing ``day``."""
    return week_start(day) + timedelta(days=6)


def week_window(anchor: Optional[date | datetime] = None) -> DateWindow:
    """The week containing ``anchor``; the current week when no anchor is given."""
    anchor = _as_date(anchor) if anchor is not None else date.today()
    return DateWindow(start=week_start(anchor), end=week_end(anchor))


def previous_week(window: DateWindow) -> DateWindow:
    return DateWindow(start=window.start - timedelta(days=7), end=window.end - timedelta(days=7))


def shift_week(anchor: date, weeks: int) -> date:
    return _as_date(anchor) + timedelta(weeks=weeks)


def day_window(day: date | datetime) -> DateWindow:
    day = _as_date(day)
    return DateWindow(start=day, end=day)
