from __future__ import annotations

from datetime import date, timedelta
from typing import Any, Iterable, List, Optional, Sequence, Tuple

from ..config import get_config
from ..data.models import (
    coerce_optional_date,
    DaySales,
    OperatingDaySales,
    WeeklyExpensesSummary,
    WeeklySalesSummary,
)
from .expense_breakdown import expense_category_totals
from .frames import (
    field_value,
    expenses_frame,
    on_weekdays,
    order_lines_frame,
    orders_frame,
    within,
)
from .weeks import WEEKDAY_NAMES, previous_week, week_window


def resolve_operating_days(operating_days: Optional[Sequence[int]] = None) -> Tuple[int, ...]:
    """Configured trading weekdays (Monday=0), sorted and de-duplicated."""
    if operating_days is None:
        operating_days = get_config().operating_days
    return tuple(sorted({int(d) for d in operating_days if 0 <= int(d) <= 6}))


def filter_operating_days(records: Iterable[Any], operating_days: Optional[Sequence[int]] = None) -> List[Any]:
    """Keep the records dated on an operating day; undated records are dropped."""
    days = resolve_operating_days(operating_days)
    kept = []
    for record in records:
        day = coerce_optional_date(field_value(record, "date"))
        if day is not None and day.weekday() in days:
            kept.append(record)
    return kept


def percentage_change(current: int, previous: int) -> float:
    """Change from ``previous`` to ``current`` in percent; 0 when there is no baseline."""
    if previous <= 0:
        return 0.0
    return (current - previous) / previous * 100


def weekly_sales_summary(
    orders: Iterable[Any],
    anchor: Optional[date] = None,
    operating_days: Optional[Sequence[int]] = None,
) -> WeeklySalesSummary:
    """Sales on operating days of the week containing ``anchor`` vs the week before."""
    days = resolve_operating_days(operating_days)
    window = week_window(anchor)
    prev = previous_week(window)

    df = on_weekdays(orders_frame(orders), days)
    this_week = within(df, window)
    last_week = within(df, prev)

    this_by_day = this_week.groupby(this_week["date"].dt.weekday)["order_total"].sum()
    last_by_day = last_week.groupby(last_week["date"].dt.weekday)["order_total"].sum()

    rows = [
        DaySales(
            day=WEEKDAY_NAMES[weekday],
            weekday=weekday,
            this_week=int(this_by_day.get(weekday, 0)),
            last_week=int(last_by_day.get(weekday, 0)),
        )
        for weekday in days
    ]
    this_total = sum(r.this_week for r in rows)
    last_total = sum(r.last_week for r in rows)

    return WeeklySalesSummary(
        window=window,
        previous_window=prev,
        days=rows,
        this_week_total=this_total,
        last_week_total=last_total,
        percentage_change=percentage_change(this_total, last_total),
        orders_this_week=int(len(this_week)),
    )


def sales_by_operating_day(
    orders: Iterable[Any],
    anchor: Optional[date] = None,
    operating_days: Optional[Sequence[int]] = None,
) -> List[OperatingDaySales]:
    """Total, order count and item quantities for each operating day of one week."""
    orders = list(orders)
    days = resolve_operating_days(operating_days)
    window = week_window(anchor)

    order_df = within(orders_frame(orders), window)
    line_df = within(order_lines_frame(orders), window)

    result = []
    for weekday in days:
        day_orders = order_df.loc[order_df["date"].dt.weekday == weekday]
        day_lines = line_df.loc[line_df["date"].dt.weekday == weekday]
        quantities = day_lines.groupby("item", sort=False)["quantity"].sum()
        result.append(OperatingDaySales(
            day=WEEKDAY_NAMES[weekday],
            weekday=weekday,
            date=window.start + timedelta(days=weekday),
            total=int(day_orders["order_total"].sum()),
            orders=int(len(day_orders)),
            items={name: int(qty) for name, qty in quantities.items()},
        ))
    return result


def weekly_expenses_summary(
    expenses: Iterable[Any],
    anchor: Optional[date] = None,
    budget: Optional[int] = None,
) -> WeeklyExpensesSummary:
    """Expenses of the week containing ``anchor`` vs the week before, with budget usage."""
    expenses = list(expenses)
    budget = budget if budget is not None else get_config().weekly_expense_budget
    window = week_window(anchor)
    prev = previous_week(window)

    df = expenses_frame(expenses)
    this_total = int(within(df, window)["amount"].sum())
    last_total = int(within(df, prev)["amount"].sum())

    return WeeklyExpensesSummary(
        window=window,
        previous_window=prev,
        this_week_total=this_total,
        last_week_total=last_total,
        budget=budget,
        budget_progress=this_total / budget * 100 if budget > 0 else 0.0,
        category_totals=expense_category_totals(expenses, window),
    )
