"""Per-category expense totals.

A ``weekly_expense`` entry covers several categories at once. New entries
carry a structured ``breakdown``; older ones only have a description such as
``"Wraps: RM10, Marketing: RM5"``, which is decoded here. Labels that do not
name a known category are dropped.
"""
from __future__ import annotations

import re
from collections.abc import Mapping
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Dict, Iterable, List, Optional

from ..data.models import ChartPoint, DateWindow, EXPENSE_CATEGORY_LABELS, WEEKLY_EXPENSE, category_label
from .frames import as_minor_units, expenses_frame, field_value, within

_SEGMENT = re.compile(r"([^:,]+):\s*RM\s*(\d+(?:\.\d+)?)", re.IGNORECASE)
_LABEL_TO_CATEGORY = {label.lower(): key for key, label in EXPENSE_CATEGORY_LABELS.items()}


def to_minor_units(major: str) -> int:
    """'12.5' -> 1250. Unreadable input counts as 0."""
    try:
        value = Decimal(major)
    except (InvalidOperation, TypeError):
        return 0
    if not value.is_finite():
        return 0
    return int((value * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def parse_weekly_expense_description(description: Optional[str]) -> Dict[str, int]:
    """Decode ``"<Label>: RM<amount>"`` segments into category -> minor units."""
    totals: Dict[str, int] = {}
    for label, amount in _SEGMENT.findall(description or ""):
        category = _LABEL_TO_CATEGORY.get(label.strip().lower())
        if category is None:
            continue
        totals[category] = totals.get(category, 0) + to_minor_units(amount)
    return totals


def format_weekly_expense_description(breakdown: Dict[str, int]) -> str:
    """Human-readable summary of a breakdown, e.g. ``"Wraps: RM10.00, Marketing: RM5.00"``."""
    return ", ".join(
        f"{category_label(category)}: RM{amount / 100:.2f}"
        for category, amount in breakdown.items()
        if amount
    )


def weekly_expense_parts(expense: Any) -> Dict[str, int]:
    """Category amounts of a single weekly entry: the breakdown, else the decoded description."""
    breakdown = field_value(expense, "breakdown")
    description = field_value(expense, "description")
    if isinstance(breakdown, Mapping) and breakdown:
        parts = {str(k): as_minor_units(v) for k, v in breakdown.items()}
        return {k: v for k, v in parts.items() if v}
    return parse_weekly_expense_description(description)


def expense_category_totals(expenses: Iterable[Any], window: Optional[DateWindow] = None) -> Dict[str, int]:
    """Sum amounts per category, splitting weekly entries into their categories.

    Keys appear in the order they are first met.
    """
    df = within(expenses_frame(expenses), window)
    totals: Dict[str, int] = {}
    for row in df.itertuples(index=False):
        if not row.category:
            continue
        if row.category == WEEKLY_EXPENSE:
            parts = weekly_expense_parts({"breakdown": row.breakdown, "description": row.description})
        else:
            parts = {row.category: row.amount}
        for category, amount in parts.items():
            totals[category] = totals.get(category, 0) + int(amount)
    return totals


def expense_breakdown(expenses: Iterable[Any], window: Optional[DateWindow] = None) -> List[ChartPoint]:
    """Category totals as chart points, largest first, empty categories left out."""
    totals = expense_category_totals(expenses, window)
    ranked = sorted(
        ((category, amount) for category, amount in totals.items() if amount > 0),
        key=lambda pair: pair[1],
        reverse=True,
    )
    return [ChartPoint(name=category_label(category), value=amount) for category, amount in ranked]
