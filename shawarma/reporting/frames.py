"""Flatten order and expense records into DataFrames for aggregation.

Records may be model instances or plain mappings (raw rows). Missing or
unreadable fields never raise: dates become NaT and numbers become 0, so
the record simply contributes nothing to date-filtered or summed results.
"""
from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any, Iterable, Optional

import pandas as pd

from ..data.models import DateWindow, coerce_optional_date

ORDER_FRAME_COLUMNS = ["id", "date", "order_total", "status"]
LINE_FRAME_COLUMNS = ["order_id", "date", "item", "quantity", "total"]
EXPENSE_FRAME_COLUMNS = ["id", "date", "category", "amount", "description", "breakdown"]


def field_value(record: Any, name: str, default: Any = None) -> Any:
    if isinstance(record, Mapping):
        return record.get(name, default)
    return getattr(record, name, default)


def as_minor_units(value: Any) -> int:
    """Integer minor units; anything unreadable, NaN or infinite counts as 0."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(number):
        return 0
    return int(round(number))


def _mapping(value: Any) -> dict:
    return dict(value) if isinstance(value, Mapping) else {}


def _days(values: pd.Series) -> pd.Series:
    return pd.to_datetime(values.map(coerce_optional_date), errors="coerce")


def orders_frame(orders: Iterable[Any]) -> pd.DataFrame:
    rows = [
        {
            "id": field_value(o, "id"),
            "date": field_value(o, "date"),
            "order_total": as_minor_units(field_value(o, "order_total")),
            "status": field_value(o, "status"),
        }
        for o in orders
    ]
    df = pd.DataFrame(rows, columns=ORDER_FRAME_COLUMNS)
    df["date"] = _days(df["date"])
    df["order_total"] = df["order_total"].astype("int64")
    return df


def order_lines_frame(orders: Iterable[Any]) -> pd.DataFrame:
    rows = []
    for o in orders:
        for line in field_value(o, "items") or []:
            name = field_value(line, "item")
            if not name:
                continue
            rows.append({
                "order_id": field_value(o, "id"),
                "date": field_value(o, "date"),
                "item": str(name),
                "quantity": as_minor_units(field_value(line, "quantity")),
                "total": as_minor_units(field_value(line, "total")),
            })
    df = pd.DataFrame(rows, columns=LINE_FRAME_COLUMNS)
    df["date"] = _days(df["date"])
    df["quantity"] = df["quantity"].astype("int64")
    df["total"] = df["total"].astype("int64")
    return df


def expenses_frame(expenses: Iterable[Any]) -> pd.DataFrame:
    rows = []
    for e in expenses:
        # Expenses without an explicit date count on the day they were recorded.
        day = coerce_optional_date(field_value(e, "date")) or coerce_optional_date(field_value(e, "created_at"))
        rows.append({
            "id": field_value(e, "id"),
            "date": day,
            "category": field_value(e, "category"),
            "amount": as_minor_units(field_value(e, "amount")),
            "description": field_value(e, "description") or "",
            "breakdown": _mapping(field_value(e, "breakdown")),
        })
    df = pd.DataFrame(rows, columns=EXPENSE_FRAME_COLUMNS)
    df["date"] = _days(df["date"])
    df["amount"] = df["amount"].astype("int64")
    return df


def within(df: pd.DataFrame, window: Optional[DateWindow]) -> pd.DataFrame:
    """Rows whose date lies in the inclusive window; rows without a date never match."""
    if window is None:
        return df
    mask = (df["date"] >= pd.Timestamp(window.start)) & (df["date"] <= pd.Timestamp(window.end))
    return df.loc[mask]


def on_weekdays(df: pd.DataFrame, weekdays: Iterable[int]) -> pd.DataFrame:
    return df.loc[df["date"].dt.weekday.isin(list(weekdays))]
