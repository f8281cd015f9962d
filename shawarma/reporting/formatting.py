from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Union

from ..config import get_config

INVALID_DATE = "Invalid Date"


def format_currency(amount: int, symbol: Optional[str] = None) -> str:
    """Minor units to a display string: 1250 -> 'RM12.50'."""
    symbol = symbol if symbol is not None else get_config().currency_symbol
    major = amount / 100
    sign = "-" if major < 0 else ""
    return f"{sign}{symbol}{abs(major):,.2f}"


def format_percentage(value: float) -> str:
    return f"{value:.1f}%"


def _parse(value: Union[date, datetime, str, None]) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.strip())
        except ValueError:
            return None
    return None


def format_date(value: Union[date, datetime, str, None]) -> str:
    parsed = _parse(value)
    return parsed.strftime("%b %d, %Y") if parsed else INVALID_DATE


def format_datetime(value: Union[date, datetime, str, None]) -> str:
    parsed = _parse(value)
    return parsed.strftime("%b %d, %Y %H:%M") if parsed else INVALID_DATE


def relative_date_label(day: Union[date, datetime], today: Optional[date] = None) -> str:
    today = today or date.today()
    if isinstance(day, datetime):
        day = day.date()
    diff = (today - day).days

    if diff == 0:
        return "Today"
    if diff == 1:
        return "Yesterday"
    if diff < 7:
        return f"{diff} days ago"
    if diff < 30:
        return f"{diff // 7} weeks ago"
    if diff < 365:
        return f"{diff // 30} months ago"
    return f"{diff // 365} years ago"
