#!/usr/bin/env python3
"""
seed_data.py

Generates a few weeks of realistic stall activity into the CSV store
(default: the configured data_dir, usually sample_data).

Orders land on the configured operating days with a few stray orders on other
days; expenses are a mix of single-category entries and weekly entries with a
structured breakdown.

Run:
  python -m shawarma.seed_data --weeks 6
"""

from __future__ import annotations

import argparse
import random
import sys
from datetime import date, timedelta
from pathlib import Path
from typing import List, Optional

from shawarma.config import get_config
from shawarma.data.backends.csv_backend import CsvDataAccess
from shawarma.data.menu import active_menu_items
from shawarma.data.models import EXPENSE_CATEGORY_LABELS, ExpenseCreate, OrderCreate, OrderItem
from shawarma.logging import get_logger
from shawarma.reporting.expense_breakdown import format_weekly_expense_description
from shawarma.reporting.weeks import week_start

logger = get_logger(__name__)

CUSTOMER_NOTES = [
    "", "", "", "Regular, extra garlic", "Takeaway", "Office lunch order",
    "Student", "Family of four", "Pre-order via WhatsApp", "No onions",
]

# Typical weekly spend per category, minor units (low, high).
WEEKLY_SPEND = {
    "seri_ternak": (12000, 20000),
    "balaji": (5000, 9000),
    "wraps": (3000, 6000),
    "marketing": (0, 3000),
    "other": (0, 2500),
}


# -----------------------------
# Generators
# -----------------------------

def gen_order(day: date) -> OrderCreate:
    menu = active_menu_items()
    # Wraps sell more than sides and drinks
    weights = [4 if item.category == "Shawarma" else 1 for item in menu]
    lines: List[OrderItem] = []
    for item in random.choices(menu, weights=weights, k=random.randint(1, 3)):
        existing = next((line for line in lines if line.item == item.name), None)
        quantity = random.choices([1, 2, 3], weights=[0.7, 0.2, 0.1])[0]
        if existing:
            existing.quantity += quantity
            existing.total = existing.quantity * existing.price
        else:
            lines.append(OrderItem(item=item.name, quantity=quantity, price=item.default_price))
    return OrderCreate(date=day, customer_description=random.choice(CUSTOMER_NOTES), items=lines)


def gen_weekly_expense(monday: date) -> ExpenseCreate:
    breakdown = {}
    for category, (low, high) in WEEKLY_SPEND.items():
        amount = random.randrange(low, high + 1, 100) if high > low else low
        if amount:
            breakdown[category] = amount
    return ExpenseCreate(
        category="weekly_expense",
        description=format_weekly_expense_description(breakdown),
        breakdown=breakdown,
        date=monday + timedelta(days=3),
    )


def gen_single_expense(monday: date) -> ExpenseCreate:
    category = random.choice(list(EXPENSE_CATEGORY_LABELS))
    return ExpenseCreate(
        category=category,
        description=random.choice(["Top-up", "Restock", "Flyers", "Gas refill", "Napkins"]),
        amount=random.randrange(1000, 8000, 50),
        date=monday + timedelta(days=random.randint(0, 6)),
    )


# -----------------------------
# Main
# -----------------------------

def main(argv: Optional[List[str]] = None) -> int:
    config = get_config()

    parser = argparse.ArgumentParser(description="Generate sample stall orders and expenses into the CSV store.")
    parser.add_argument("--weeks", type=int, default=config.default_seed_weeks, help="Number of weeks of history.")
    parser.add_argument("--end-date", type=str, default=None, help="YYYY-MM-DD of the last week (defaults to today)")
    parser.add_argument("--output-dir", type=str, default=config.data_dir)
    parser.add_argument("--seed", type=int, default=config.default_seed_value)
    parser.add_argument("--no-overwrite", action="store_true", help="Fail if CSVs already exist.")
    args = parser.parse_args(argv)

    random.seed(args.seed)

    store = CsvDataAccess(data_dir=Path(args.output_dir))
    files = [store.orders_path, store.expenses_path]
    if args.no_overwrite:
        for p in files:
            if p.exists():
                print(f"Refusing to overwrite existing file: {p}", file=sys.stderr)
                return 2
    for p in files:
        if p.exists():
            p.unlink()

    end_d = date.fromisoformat(args.end_date) if args.end_date else date.today()
    first_monday = week_start(end_d) - timedelta(weeks=args.weeks - 1)

    orders = expenses = failures = 0
    for week in range(args.weeks):
        monday = first_monday + timedelta(weeks=week)
        for offset in range(7):
            day = monday + timedelta(days=offset)
            if day > end_d:
                break
            busy = day.weekday() in config.operating_days
            count = random.randint(12, 30) if busy else random.choice([0, 0, 0, 1])
            for _ in range(count):
                result = store.create_order(gen_order(day))
                if result.ok and random.random() < 0.9:
                    store.complete_order(result.data.id)
                orders += result.ok
                failures += not result.ok

        for payload in [gen_weekly_expense(monday)] + [gen_single_expense(monday) for _ in range(random.randint(0, 2))]:
            result = store.create_expense(payload)
            expenses += result.ok
            failures += not result.ok

    # simple summary
    print(f"Generated data in {store.data_dir}")
    print(f" weeks: {args.weeks} | orders: {orders} | expenses: {expenses}")
    if failures:
        logger.error(f"{failures} records could not be written")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
