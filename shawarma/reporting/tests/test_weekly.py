from datetime import date, datetime

import pytest

from shawarma.config import set_config_for_test
from shawarma.data.models import Expense, Order, OrderItem
from shawarma.reporting.weekly import (
    filter_operating_days,
    percentage_change,
    resolve_operating_days,
    sales_by_operating_day,
    weekly_expenses_summary,
    weekly_sales_summary,
)

ANCHOR = date(2026, 10, 14)  # Wednesday of the week 2026-10-12 .. 2026-10-18


def make_order(id, day, total, item="Chicken Shawarma"):
    return Order(
        id=id,
        date=day,
        items=[OrderItem(item=item, quantity=total // 500, price=500)],
        order_total=total,
        created_at=datetime(2026, 10, 1),
    )


@pytest.fixture
def orders():
    return [
        make_order(1, date(2026, 10, 16), 1000),              # Friday
        make_order(2, date(2026, 10, 17), 2000, item="Fries"),  # Saturday
        make_order(3, date(2026, 10, 14), 5000),              # Wednesday
        make_order(4, date(2026, 10, 9), 500),                # previous Friday
        make_order(5, date(2026, 10, 18), 1500),              # Sunday
    ]


def test_weekly_sales_summary(orders):
    summary = weekly_sales_summary(orders, ANCHOR, [4, 5])
    assert [(d.day, d.this_week, d.last_week) for d in summary.days] == [
        ("Friday", 1000, 500),
        ("Saturday", 2000, 0),
    ]
    assert summary.this_week_total == 3000
    assert summary.last_week_total == 500
    assert summary.percentage_change == pytest.approx(500.0)
    assert summary.orders_this_week == 2
    assert summary.window.start == date(2026, 10, 12)
    assert summary.previous_window.start == date(2026, 10, 5)


def test_off_day_orders_excluded(orders):
    wednesday_only = [o for o in orders if o.id == 3]
    summary = weekly_sales_summary(wednesday_only, ANCHOR, [4, 5])
    assert summary.this_week_total == 0
    assert summary.orders_this_week == 0


def test_operating_days_are_configurable(orders):
    summary = weekly_sales_summary(orders, ANCHOR, [2])
    assert summary.this_week_total == 5000

    set_config_for_test(operating_days=[6])
    assert weekly_sales_summary(orders, ANCHOR).this_week_total == 1500


def test_resolve_operating_days():
    assert resolve_operating_days() == (4, 5)
    assert resolve_operating_days([5, 4, 4, 9]) == (4, 5)


def test_filter_operating_days(orders):
    raw = [{"date": "2026-10-16"}, {"date": None}, {"date": "2026-10-14"}]
    assert filter_operating_days(raw) == [{"date": "2026-10-16"}]
    assert [o.id for o in filter_operating_days(orders, [4])] == [1, 4]


def test_percentage_change():
    assert percentage_change(150, 100) == pytest.approx(50.0)
    assert percentage_change(50, 100) == pytest.approx(-50.0)
    assert percentage_change(100, 0) == 0.0


def test_sales_by_operating_day(orders):
    days = sales_by_operating_day(orders, ANCHOR, [4, 5])
    friday, saturday = days
    assert friday.date == date(2026, 10, 16)
    assert friday.total == 1000
    assert friday.orders == 1
    assert friday.items == {"Chicken Shawarma": 2}
    assert saturday.items == {"Fries": 4}


def test_weekly_expenses_summary():
    expenses = [
        Expense(id=1, category="weekly_expense", amount=20000, date=date(2026, 10, 15),
                breakdown={"seri_ternak": 15000, "wraps": 5000}, created_at=datetime(2026, 10, 15)),
        Expense(id=2, category="marketing", amount=1000, created_at=datetime(2026, 10, 13, 8, 0)),
        Expense(id=3, category="other", amount=3000, date=date(2026, 10, 8), created_at=datetime(2026, 10, 8)),
    ]
    summary = weekly_expenses_summary(expenses, ANCHOR)
    assert summary.this_week_total == 21000
    assert summary.last_week_total == 3000
    assert summary.budget == 40000
    assert summary.budget_progress == pytest.approx(52.5)
    assert summary.category_totals == {"seri_ternak": 15000, "wraps": 5000, "marketing": 1000}

    assert weekly_expenses_summary(expenses, ANCHOR, budget=0).budget_progress == 0.0
