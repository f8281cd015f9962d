"""UI-local state for the dashboard page.

Streamlit re-runs the page script on every interaction, so everything that
must survive a rerun lives in these objects, kept in ``st.session_state``.
The record caches mirror the store: they reload on demand and patch
themselves after each successful mutation. Aggregates are never cached here;
the page recomputes them from ``orders`` / ``expenses`` on every run.
"""
from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Dict, List, Optional, Set

from ..data.interface import DataAccess
from ..data.menu import find_menu_item
from ..data.models import (
    WEEKLY_EXPENSE,
    DateWindow,
    Expense,
    ExpenseCreate,
    ExpenseUpdate,
    Order,
    OrderCreate,
    OrderItem,
    OrderStatus,
    OrderUpdate,
)
from ..logging import get_logger
from ..reporting.expense_breakdown import format_weekly_expense_description, to_minor_units
from ..reporting.weeks import shift_week, week_window

logger = get_logger(__name__)


# ---------- form input coercion ----------

def parse_quantity(value: Any) -> int:
    """Quantity from a form field; anything unreadable or below 1 becomes 1."""
    try:
        quantity = int(Decimal(str(value).strip()))
    except (InvalidOperation, ValueError, OverflowError):
        return 1
    return max(quantity, 1)


def parse_amount_to_cents(value: Any) -> int:
    """Major-unit amount from a form field ('12.50') to minor units; unreadable -> 0."""
    if value is None:
        return 0
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        value = repr(value)
    cents = to_minor_units(str(value).strip().replace(",", ""))
    return max(cents, 0)


# ---------- cached records ----------

@dataclass
class OrdersState:
    """Locally cached orders plus the last error message."""
    data_access: DataAccess
    orders: List[Order] = field(default_factory=list)
    loading: bool = False
    error: Optional[str] = None

    def _fail(self, message: str, detail: Optional[str]) -> None:
        logger.warning(f"{message}: {detail}")
        self.error = message

    def load(self) -> bool:
        self.loading = True
        self.error = None
        result = self.data_access.list_orders()
        self.loading = False
        if not result.ok:
            self._fail("Failed to load orders", result.error)
            return False
        self.orders = result.data or []
        return True

    def create(self, payload: OrderCreate) -> Optional[Order]:
        self.error = None
        result = self.data_access.create_order(payload)
        if not result.ok or result.data is None:
            self._fail("Failed to create order", result.error)
            return None
        self.orders = [result.data] + self.orders
        return result.data

    def update_status(self, order_id: int, status: OrderStatus) -> bool:
        self.error = None
        result = self.data_access.update_order_status(order_id, status)
        if not result.ok:
            self._fail("Failed to update order status", result.error)
            return False
        self.orders = [
            o.model_copy(update={"status": status}) if o.id == order_id else o
            for o in self.orders
        ]
        return True

    def complete(self, order_id: int) -> bool:
        return self.update_status(order_id, "COMPLETED")

    def update(self, order_id: int, update: OrderUpdate) -> bool:
        self.error = None
        result = self.data_access.update_order(order_id, update)
        if not result.ok:
            self._fail("Failed to update order", result.error)
            return False
        self.orders = [o.apply_update(update) if o.id == order_id else o for o in self.orders]
        return True

    def delete(self, order_id: int) -> bool:
        self.error = None
        result = self.data_access.delete_order(order_id)
        if not result.ok:
            self._fail("Failed to delete order", result.error)
            return False
        self.orders = [o for o in self.orders if o.id != order_id]
        return True

    @property
    def pending(self) -> List[Order]:
        return [o for o in self.orders if o.status == "PENDING"]

    @property
    def completed(self) -> List[Order]:
        return [o for o in self.orders if o.status == "COMPLETED"]


@dataclass
class ExpensesState:
    """Locally cached expenses plus the last error message."""
    data_access: DataAccess
    expenses: List[Expense] = field(default_factory=list)
    loading: bool = False
    error: Optional[str] = None

    def _fail(self, message: str, detail: Optional[str]) -> None:
        logger.warning(f"{message}: {detail}")
        self.error = message

    def load(self) -> bool:
        self.loading = True
        self.error = None
        result = self.data_access.list_expenses()
        self.loading = False
        if not result.ok:
            self._fail("Failed to load expenses", result.error)
            return False
        self.expenses = result.data or []
        return True

    def create(self, payload: ExpenseCreate) -> Optional[Expense]:
        self.error = None
        result = self.data_access.create_expense(payload)
        if not result.ok or result.data is None:
            self._fail("Failed to add expense", result.error)
            return None
        self.expenses = [result.data] + self.expenses
        return result.data

    def update(self, expense_id: int, update: ExpenseUpdate) -> bool:
        self.error = None
        result = self.data_access.update_expense(expense_id, update)
        if not result.ok:
            self._fail("Failed to update expense", result.error)
            return False
        self.expenses = [
            Expense.model_validate(e.model_dump() | update.changes()) if e.id == expense_id else e
            for e in self.expenses
        ]
        return True

    def delete(self, expense_id: int) -> bool:
        self.error = None
        result = self.data_access.delete_expense(expense_id)
        if not result.ok:
            self._fail("Failed to delete expense", result.error)
            return False
        self.expenses = [e for e in self.expenses if e.id != expense_id]
        return True


# ---------- week selection ----------

@dataclass
class WeekSelector:
    """Anchor date of the week shown in the weekly charts."""
    anchor: dt.date = field(default_factory=dt.date.today)

    @property
    def window(self) -> DateWindow:
        return week_window(self.anchor)

    def previous(self) -> DateWindow:
        self.anchor = shift_week(self.anchor, -1)
        return self.window

    def next(self) -> DateWindow:
        self.anchor = shift_week(self.anchor, 1)
        return self.window

    def current(self, today: Optional[dt.date] = None) -> DateWindow:
        self.anchor = today or dt.date.today()
        return self.window

    def is_current(self, today: Optional[dt.date] = None) -> bool:
        return self.window == week_window(today or dt.date.today())


# ---------- order entry ----------

@dataclass
class OrderDraft:
    """Order being assembled in the add-sale form."""
    order_date: dt.date = field(default_factory=dt.date.today)
    customer_description: str = ""
    items: List[OrderItem] = field(default_factory=list)

    def add_item(self, name: str, quantity: Any = 1) -> Optional[OrderItem]:
        """Append a line priced at the menu default. Unknown items are ignored."""
        menu_item = find_menu_item(name) if name else None
        if menu_item is None:
            return None
        line = OrderItem(item=menu_item.name, quantity=parse_quantity(quantity), price=menu_item.default_price)
        self.items.append(line)
        return line

    def remove_item(self, index: int) -> None:
        if 0 <= index < len(self.items):
            del self.items[index]

    @property
    def total(self) -> int:
        return sum(line.total for line in self.items)

    @property
    def is_empty(self) -> bool:
        return not self.items

    def to_create(self) -> Optional[OrderCreate]:
        if self.is_empty:
            return None
        return OrderCreate(
            date=self.order_date,
            customer_description=self.customer_description.strip(),
            items=list(self.items),
        )

    def reset(self, today: Optional[dt.date] = None) -> None:
        self.order_date = today or dt.date.today()
        self.customer_description = ""
        self.items = []


# ---------- quick expense form ----------

class FormState(str, Enum):
    IDLE = "idle"
    EDITING = "editing"


@dataclass
class QuickExpenseForm:
    """Add-expense form: idle -> editing -> (submit | cancel) -> idle.

    A failed submit keeps the form open with its values.
    """
    state: FormState = FormState.IDLE
    category: Optional[str] = None
    description: str = ""
    amount: int = 0
    expense_date: Optional[dt.date] = None
    breakdown: Dict[str, int] = field(default_factory=dict)
    # Bumped on every open so widget keys built from it start empty.
    revision: int = 0

    @property
    def is_open(self) -> bool:
        return self.state == FormState.EDITING

    @property
    def is_weekly(self) -> bool:
        return self.category == WEEKLY_EXPENSE

    def open(self, category: Optional[str] = None) -> None:
        self._clear()
        self.revision += 1
        self.category = category
        self.state = FormState.EDITING

    def set_amount(self, raw: Any) -> int:
        self.amount = parse_amount_to_cents(raw)
        return self.amount

    def set_breakdown_amount(self, category: str, raw: Any) -> int:
        cents = parse_amount_to_cents(raw)
        if cents:
            self.breakdown[category] = cents
        else:
            self.breakdown.pop(category, None)
        return cents

    def to_create(self) -> Optional[ExpenseCreate]:
        if not self.category:
            return None
        if self.is_weekly:
            parts = {k: v for k, v in self.breakdown.items() if v > 0}
            if not parts:
                return None
            return ExpenseCreate(
                category=WEEKLY_EXPENSE,
                description=self.description.strip() or format_weekly_expense_description(parts),
                breakdown=parts,
                date=self.expense_date,
            )
        return ExpenseCreate(
            category=self.category,
            description=self.description.strip(),
            amount=self.amount,
            date=self.expense_date,
        )

    def submit(self, expenses: ExpensesState) -> Optional[Expense]:
        if not self.is_open:
            return None
        payload = self.to_create()
        if payload is None:
            return None
        created = expenses.create(payload)
        if created is not None:
            self._clear()
            self.state = FormState.IDLE
        return created

    def widget_key(self, name: str) -> str:
        """Streamlit key for one of this form's inputs, unique per opening."""
        return f"expense_{name}_{self.revision}"

    def cancel(self) -> None:
        self._clear()
        self.state = FormState.IDLE

    def _clear(self) -> None:
        self.category = None
        self.description = ""
        self.amount = 0
        self.expense_date = None
        self.breakdown = {}


# ---------- page state ----------

@dataclass
class DashboardState:
    orders: OrdersState
    expenses: ExpensesState
    week: WeekSelector = field(default_factory=WeekSelector)
    order_draft: OrderDraft = field(default_factory=OrderDraft)
    expense_form: QuickExpenseForm = field(default_factory=QuickExpenseForm)
    expanded_orders: Set[int] = field(default_factory=set)
    show_order_form: bool = False

    @classmethod
    def start(cls, data_access: DataAccess) -> DashboardState:
        """Build the state and load both tables."""
        state = cls(orders=OrdersState(data_access), expenses=ExpensesState(data_access))
        state.reload()
        return state

    def reload(self) -> None:
        self.orders.load()
        self.expenses.load()

    def toggle_order(self, order_id: int) -> bool:
        """Expand or collapse an order row; returns whether it is now expanded."""
        if order_id in self.expanded_orders:
            self.expanded_orders.discard(order_id)
            return False
        self.expanded_orders.add(order_id)
        return True

    def submit_order_draft(self) -> Optional[Order]:
        payload = self.order_draft.to_create()
        if payload is None:
            return None
        created = self.orders.create(payload)
        if created is not None:
            self.order_draft.reset()
            self.show_order_form = False
        return created
