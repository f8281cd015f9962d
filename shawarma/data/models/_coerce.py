from __future__ import annotations

import datetime as dt
import math
from typing import Annotated, Any, Optional

from pydantic import BeforeValidator


def coerce_optional_date(value: Any) -> Optional[dt.date]:
    """Best-effort conversion of stored date values; anything unreadable becomes None."""
    if value is None:
        return None
    if isinstance(value, float) and math.isnan(value):
        return None
    if isinstance(value, dt.datetime):
        # pandas.NaT is a datetime subclass whose fields are unusable
        if value != value:
            return None
        return value.date()
    if isinstance(value, dt.date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return dt.date.fromisoformat(text[:10])
        except ValueError:
            return None
    return None


def coerce_text(value: Any) -> str:
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return ""
    return str(value)


LooseDate = Annotated[Optional[dt.date], BeforeValidator(coerce_optional_date)]
Text = Annotated[str, BeforeValidator(coerce_text)]
