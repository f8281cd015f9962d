from __future__ import annotations

import datetime as dt
from typing import Optional

from pydantic import BaseModel, Field


class OrderFilters(BaseModel):
    """Filters for the order data."""
    start_date: Optional[dt.date] = Field(default=None, description="First order date (inclusive)")
    end_date: Optional[dt.date] = Field(default=None, description="Last order date (inclusive)")
    status: Optional[str | list[str]] = Field(default=None, description="Status filter (single status or list of statuses)")
    customer_search: Optional[str] = Field(default=None, description="Case-insensitive substring of the customer note")


class ExpenseFilters(BaseModel):
    """Filters for the expense data."""
    start_date: Optional[dt.date] = Field(default=None, description="First expense date (inclusive)")
    end_date: Optional[dt.date] = Field(default=None, description="Last expense date (inclusive)")
    category: Optional[str | list[str]] = Field(default=None, description="Category filter (single category or list of categories)")
