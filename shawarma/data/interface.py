from __future__ import annotations

from datetime import date
from typing import List, Optional, Protocol

from .models import (
    # Filter classes
    OrderFilters,
    ExpenseFilters,
    # Records
    Order,
    OrderCreate,
    OrderUpdate,
    OrderStatus,
    Expense,
    ExpenseCreate,
    ExpenseUpdate,
    # Result wrapper
    DataResult,
)


# ---- Data access protocol ----

class DataAccess(Protocol):
    """
    Backend-agnostic contract for the dashboard.

    - Every method returns a DataResult. A failed request carries ``error``
      and no data; it is never raised to the caller and never retried.
    - Listings are ordered newest ``created_at`` first.
    - Implementations do not cache; each call reads the store again.
    """

    # Orders

    def create_order(self, order: OrderCreate) -> DataResult[Order]:
        """Insert a new order and return it with its id and timestamps."""
        ...

    def list_orders(self, filters: Optional[OrderFilters] = None) -> DataResult[List[Order]]:
        """List orders matching the filters."""
        ...

    def list_pending_orders(self) -> DataResult[List[Order]]:
        """List orders that are still pending."""
        ...

    def list_completed_orders(self) -> DataResult[List[Order]]:
        """List completed orders."""
        ...

    def get_order(self, order_id: int) -> DataResult[Order]:
        """Fetch a single order."""
        ...

    def get_orders_by_date_range(self, start_date: date, end_date: date) -> DataResult[List[Order]]:
        """List orders dated within [start_date, end_date]."""
        ...

    def get_orders_by_customer(self, customer_description: str) -> DataResult[List[Order]]:
        """List orders whose customer note contains the text (case-insensitive)."""
        ...

    def update_order(self, order_id: int, update: OrderUpdate) -> DataResult[bool]:
        """Apply a partial update to an order."""
        ...

    def update_order_status(self, order_id: int, status: OrderStatus) -> DataResult[bool]:
        """Change an order's status."""
        ...

    def complete_order(self, order_id: int) -> DataResult[bool]:
        """Mark an order as completed."""
        ...

    def delete_order(self, order_id: int) -> DataResult[bool]:
        """Delete an order."""
        ...

    def get_total_sales(self, filters: Optional[OrderFilters] = None) -> DataResult[int]:
        """Sum of order totals matching the filters, in minor units."""
        ...

    # Expenses

    def create_expense(self, expense: ExpenseCreate) -> DataResult[Expense]:
        """Insert a new expense and return it with its id and timestamp."""
        ...

    def list_expenses(self, filters: Optional[ExpenseFilters] = None) -> DataResult[List[Expense]]:
        """List expenses matching the filters."""
        ...

    def get_expense(self, expense_id: int) -> DataResult[Expense]:
        """Fetch a single expense."""
        ...

    def get_expenses_by_date_range(self, start_date: date, end_date: date) -> DataResult[List[Expense]]:
        """List expenses whose effective date is within [start_date, end_date]."""
        ...

    def get_expenses_by_category(self, category: str) -> DataResult[List[Expense]]:
        """List expenses of one category."""
        ...

    def update_expense(self, expense_id: int, update: ExpenseUpdate) -> DataResult[bool]:
        """Apply a partial update to an expense."""
        ...

    def delete_expense(self, expense_id: int) -> DataResult[bool]:
        """Delete an expense."""
        ...

    def get_total_expenses(self, filters: Optional[ExpenseFilters] = None) -> DataResult[int]:
        """Sum of expense amounts matching the filters, in minor units."""
        ...
