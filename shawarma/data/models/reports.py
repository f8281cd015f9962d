from __future__ import annotations

import datetime as dt
from typing import Dict, List, Literal

from pydantic import BaseModel, Field

Trend = Literal["up", "down", "stable"]


class DateWindow(BaseModel):
    """Inclusive calendar-date window [start, end]."""
    start: dt.date = Field(description="First day of the window")
    end: dt.date = Field(description="Last day of the window")

    def contains(self, day: dt.date | None) -> bool:
        return day is not None and self.start <= day <= self.end

    @property
    def days(self) -> int:
        return max((self.end - self.start).days + 1, 0)


class ChartPoint(BaseModel):
    """Generic name/value pair fed to charts."""
    name: str
    value: float


class DashboardMetrics(BaseModel):
    """Headline numbers shown on the metric cards (minor units unless noted)."""
    total_sales: int
    total_expenses: int
    net_profit: int
    items_sold: int
    profit_margin: float = Field(description="Net profit as a percentage of sales")
    average_daily_sales: float
    sales_trend: Trend
    expenses_trend: Trend


class DaySales(BaseModel):
    """One operating day compared across the selected and the previous week."""
    day: str
    weekday: int
    this_week: int
    last_week: int


class WeeklySalesSummary(BaseModel):
    """Sales of the selected week, restricted to operating days, against the previous week."""
    window: DateWindow
    previous_window: DateWindow
    days: List[DaySales]
    this_week_total: int
    last_week_total: int
    percentage_change: float
    orders_this_week: int


class OperatingDaySales(BaseModel):
    """Totals for a single operating day of one week."""
    day: str
    weekday: int
    date: dt.date
    total: int
    orders: int
    items: Dict[str, int]


class WeeklyExpensesSummary(BaseModel):
    """Expenses of the selected week against the previous week and the weekly budget."""
    window: DateWindow
    previous_window: DateWindow
    this_week_total: int
    last_week_total: int
    budget: int
    budget_progress: float = Field(description="This week's total as a percentage of the budget")
    category_totals: Dict[str, int]
