from .data_filters import (
    OrderFilters,
    ExpenseFilters,
)

from .order_items import OrderItem
from .orders import (
    Order,
    OrderCreate,
    OrderUpdate,
    OrderStatus,
    OrderLifecycleError,
)
from .expenses import (
    Expense,
    ExpenseCreate,
    ExpenseUpdate,
    ExpenseCategory,
    BreakdownCategory,
    EXPENSE_CATEGORY_LABELS,
    EXPENSE_CATEGORY_COLORS,
    WEEKLY_EXPENSE,
    category_label,
)
from .menu_items import MenuItem
from ._coerce import coerce_optional_date
from .results import DataResult
from .reports import (
    Trend,
    DateWindow,
    ChartPoint,
    DashboardMetrics,
    DaySales,
    WeeklySalesSummary,
    OperatingDaySales,
    WeeklyExpensesSummary,
)

__all__ = [
    # Filter classes
    "OrderFilters",
    "ExpenseFilters",
    # Records
    "OrderItem",
    "Order",
    "OrderCreate",
    "OrderUpdate",
    "OrderStatus",
    "OrderLifecycleError",
    "Expense",
    "ExpenseCreate",
    "ExpenseUpdate",
    "ExpenseCategory",
    "BreakdownCategory",
    "EXPENSE_CATEGORY_LABELS",
    "EXPENSE_CATEGORY_COLORS",
    "WEEKLY_EXPENSE",
    "category_label",
    "MenuItem",
    "coerce_optional_date",
    # Result wrapper
    "DataResult",
    # Reporting models
    "Trend",
    "DateWindow",
    "ChartPoint",
    "DashboardMetrics",
    "DaySales",
    "WeeklySalesSummary",
    "OperatingDaySales",
    "WeeklyExpensesSummary",
]
