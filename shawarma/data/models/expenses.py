from __future__ import annotations

import datetime as dt
from typing import Dict, Literal, Optional

from pydantic import BaseModel, Field, NonNegativeInt, model_validator

from ._coerce import LooseDate, Text

ExpenseCategory = Literal["seri_ternak", "balaji", "wraps", "marketing", "other", "weekly_expense"]
BreakdownCategory = Literal["seri_ternak", "balaji", "wraps", "marketing", "other"]

WEEKLY_EXPENSE = "weekly_expense"

# Display labels, in the order categories are listed in forms and charts.
EXPENSE_CATEGORY_LABELS: Dict[str, str] = {
    "seri_ternak": "Seri Ternak",
    "balaji": "Balaji",
    "wraps": "Wraps",
    "marketing": "Marketing",
    "other": "Other",
}

EXPENSE_CATEGORY_COLORS: Dict[str, str] = {
    "seri_ternak": "#8b5cf6",
    "balaji": "#14b8a6",
    "wraps": "#f97316",
    "marketing": "#3b82f6",
    "other": "#6b7280",
}


def category_label(category: str) -> str:
    if category == WEEKLY_EXPENSE:
        return "Weekly Expense"
    return EXPENSE_CATEGORY_LABELS.get(category, category)


class Expense(BaseModel):
    """An expense as stored in the expenses table.

    A ``weekly_expense`` entry records several categories at once; its
    per-category amounts live in ``breakdown``. Older entries only carry them
    inside ``description`` as ``"Label: RM<amount>"`` segments.
    """
    id: int = Field(description="Unique expense identifier")
    category: ExpenseCategory = Field(description="Expense category")
    description: Text = Field(default="", description="Free-text description")
    amount: NonNegativeInt = Field(description="Amount in minor units")
    date: LooseDate = Field(default=None, description="Day the expense applies to")
    breakdown: Dict[BreakdownCategory, NonNegativeInt] = Field(
        default_factory=dict, description="Per-category amounts of a weekly expense (minor units)"
    )
    created_at: dt.datetime = Field(description="Creation timestamp")

    @model_validator(mode="after")
    def _breakdown_is_weekly(self) -> Expense:
        _check_breakdown(self.category, self.breakdown)
        return self

    @property
    def effective_date(self) -> Optional[dt.date]:
        return self.date or self.created_at.date()

    @property
    def is_weekly(self) -> bool:
        return self.category == WEEKLY_EXPENSE


def _check_breakdown(category: Optional[str], breakdown: Optional[Dict[str, int]]) -> None:
    if breakdown and category is not None and category != WEEKLY_EXPENSE:
        raise ValueError("breakdown only applies to weekly_expense entries")


class ExpenseCreate(BaseModel):
    """Payload for a new expense. Weekly entries default their amount to the breakdown sum."""
    category: ExpenseCategory = Field(description="Expense category")
    description: str = Field(default="", description="Free-text description")
    amount: Optional[NonNegativeInt] = Field(default=None, description="Amount in minor units")
    date: Optional[dt.date] = Field(default=None, description="Day the expense applies to")
    breakdown: Dict[BreakdownCategory, NonNegativeInt] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _fill_amount(self) -> ExpenseCreate:
        _check_breakdown(self.category, self.breakdown)
        if self.amount is None:
            self.amount = sum(self.breakdown.values())
        return self


class ExpenseUpdate(BaseModel):
    """Partial expense update; only fields that are set are written."""
    category: Optional[ExpenseCategory] = None
    description: Optional[str] = None
    amount: Optional[NonNegativeInt] = None
    date: Optional[dt.date] = None
    breakdown: Optional[Dict[BreakdownCategory, NonNegativeInt]] = None

    def changes(self) -> Dict[str, object]:
        """Set fields only. A new breakdown without an amount re-derives the amount."""
        changes = {
            name: getattr(self, name)
            for name in self.model_fields_set
            if getattr(self, name) is not None
        }
        if "breakdown" in changes and "amount" not in changes:
            changes["amount"] = sum(changes["breakdown"].values())
        return changes
