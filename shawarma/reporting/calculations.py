from __future__ import annotations

from datetime import date, timedelta
from typing import Any, Iterable, List, Optional

from ..config import get_config
from ..data.models import ChartPoint, DashboardMetrics, DateWindow, Trend
from .frames import expenses_frame, order_lines_frame, orders_frame, within
from .weeks import day_window


def total_sales(orders: Iterable[Any], window: Optional[DateWindow] = None) -> int:
    """Sum of order totals, optionally restricted to orders dated inside ``window``."""
    df = within(orders_frame(orders), window)
    return int(df["order_total"].sum())


def total_expenses(expenses: Iterable[Any], window: Optional[DateWindow] = None) -> int:
    """Sum of expense amounts, optionally restricted to ``window``."""
    df = within(expenses_frame(expenses), window)
    return int(df["amount"].sum())


def items_sold(orders: Iterable[Any], window: Optional[DateWindow] = None) -> int:
    df = within(order_lines_frame(orders), window)
    return int(df["quantity"].sum())


def order_count(orders: Iterable[Any], window: Optional[DateWindow] = None) -> int:
    return int(len(within(orders_frame(orders), window)))


def net_profit(orders: Iterable[Any], expenses: Iterable[Any], window: Optional[DateWindow] = None) -> int:
    return total_sales(orders, window) - total_expenses(expenses, window)


def profit_margin(orders: Iterable[Any], expenses: Iterable[Any], window: Optional[DateWindow] = None) -> float:
    """Net profit as a percentage of sales; 0 when there were no sales."""
    orders, expenses = list(orders), list(expenses)
    sales = total_sales(orders, window)
    if sales == 0:
        return 0.0
    return (sales - total_expenses(expenses, window)) / sales * 100


def average_daily_sales(orders: Iterable[Any], days: Optional[int] = None, today: Optional[date] = None) -> float:
    """Average sales per day over the ``days`` days ending today (inclusive)."""
    days = days if days is not None else get_config().average_daily_sales_days
    if days <= 0:
        return 0.0
    today = today or date.today()
    window = DateWindow(start=today - timedelta(days=days - 1), end=today)
    return total_sales(orders, window) / days


def _trend(current: int, previous: int) -> Trend:
    if current > previous:
        return "up"
    if current < previous:
        return "down"
    return "stable"


def sales_trend(orders: Iterable[Any], today: Optional[date] = None) -> Trend:
    """Compare today's sales with yesterday's; any difference counts."""
    orders = list(orders)
    today = today or date.today()
    return _trend(
        total_sales(orders, day_window(today)),
        total_sales(orders, day_window(today - timedelta(days=1))),
    )


def expenses_trend(expenses: Iterable[Any], today: Optional[date] = None) -> Trend:
    """Compare today's expenses with yesterday's; any difference counts."""
    expenses = list(expenses)
    today = today or date.today()
    return _trend(
        total_expenses(expenses, day_window(today)),
        total_expenses(expenses, day_window(today - timedelta(days=1))),
    )


def dashboard_metrics(orders: Iterable[Any], expenses: Iterable[Any], today: Optional[date] = None) -> DashboardMetrics:
    orders, expenses = list(orders), list(expenses)
    sales = total_sales(orders)
    spent = total_expenses(expenses)
    return DashboardMetrics(
        total_sales=sales,
        total_expenses=spent,
        net_profit=sales - spent,
        items_sold=items_sold(orders),
        profit_margin=profit_margin(orders, expenses),
        average_daily_sales=average_daily_sales(orders, today=today),
        sales_trend=sales_trend(orders, today),
        expenses_trend=expenses_trend(expenses, today),
    )


def popular_items(orders: Iterable[Any], limit: int = 5, window: Optional[DateWindow] = None) -> List[ChartPoint]:
    """Top ``limit`` items by quantity sold.

    Ties keep the order in which the items first appear in ``orders``.
    """
    if limit <= 0:
        return []
    lines = within(order_lines_frame(orders), window)
    if lines.empty:
        return []
    counts = (
        lines.groupby("item", sort=False)["quantity"]
             .sum()
             .sort_values(ascending=False, kind="stable")
             .head(int(limit))
    )
    return [ChartPoint(name=name, value=int(qty)) for name, qty in counts.items()]


def average_order_value(orders: Iterable[Any], window: Optional[DateWindow] = None) -> float:
    df = within(orders_frame(orders), window)
    if df.empty:
        return 0.0
    return float(df["order_total"].mean())
