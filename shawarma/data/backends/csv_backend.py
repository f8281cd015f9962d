from __future__ import annotations

from datetime import date, datetime
from pathlib import Path
from typing import Callable, Dict, List, Optional

import pandas as pd
from pydantic import TypeAdapter

from ..interface import DataAccess
from ..models import (
    OrderFilters, ExpenseFilters, Order, OrderCreate, OrderUpdate, OrderStatus, OrderItem,
    OrderLifecycleError, Expense, ExpenseCreate, ExpenseUpdate, DataResult,
)
from ...config import get_config
from ...logging import get_logger

logger = get_logger(__name__)

ORDER_COLUMNS = [
    "id", "date", "customer_description", "items", "order_total",
    "status", "created_at", "updated_at",
]
EXPENSE_COLUMNS = ["id", "category", "description", "amount", "date", "breakdown", "created_at"]

# Nested fields are stored as JSON text inside a single CSV cell.
_ITEMS = TypeAdapter(List[OrderItem])
_BREAKDOWN = TypeAdapter(Dict[str, int])

# Anything the store can throw at us while reading or writing a table:
# I/O problems, unparseable CSV/JSON and rows that fail model validation.
STORE_ERRORS = (OSError, ValueError, KeyError)


class CsvDataAccess(DataAccess):
    """
    CSV-backed table store.
    - One file per table (`orders.csv`, `expenses.csv`) under `data_dir`.
    - Every call re-reads the file, so concurrent sessions see each other's
      writes on their next call; the last write wins.
    - Failures are logged and returned as DataResult errors.
    """

    def __init__(self, data_dir: str | Path = None, clock: Callable[[], datetime] = datetime.now) -> None:
        if data_dir is None:
            config = get_config()
            data_dir = config.data_dir

        self.data_dir = Path(data_dir)
        self._clock = clock

        # If the path is relative, make it relative to the repository root
        if not self.data_dir.is_absolute():
            current = Path.cwd()
            repo_root = None

            # Look up the directory tree for pyproject.toml
            for parent in [current] + list(current.parents):
                if (parent / "pyproject.toml").exists():
                    repo_root = parent
                    break

            self.data_dir = (repo_root or current) / self.data_dir

        self.orders_path = self.data_dir / "orders.csv"
        self.expenses_path = self.data_dir / "expenses.csv"

    # ---------- table I/O ----------

    @staticmethod
    def _read_table(path: Path, columns: List[str]) -> pd.DataFrame:
        if not path.exists():
            return pd.DataFrame(columns=columns)
        df = pd.read_csv(path, dtype=str, keep_default_na=False)
        missing = [c for c in columns if c not in df.columns]
        if missing:
            raise ValueError(f"{path.name} is missing columns: {', '.join(missing)}")
        return df[columns]

    def _write_table(self, path: Path, rows: List[dict], columns: List[str]) -> None:
        self.data_dir.mkdir(parents=True, exist_ok=True)
        pd.DataFrame(rows, columns=columns).to_csv(path, index=False)

    @staticmethod
    def _newest_first(df: pd.DataFrame) -> pd.DataFrame:
        # Records sharing a timestamp fall back to the higher id first.
        keys = pd.DataFrame({
            "created": pd.to_datetime(df["created_at"], errors="coerce", format="ISO8601"),
            "id": pd.to_numeric(df["id"], errors="coerce"),
        }, index=df.index)
        order = keys.sort_values(["created", "id"], ascending=False, na_position="last").index
        return df.loc[order]

    @staticmethod
    def _next_id(df: pd.DataFrame) -> int:
        ids = pd.to_numeric(df["id"], errors="coerce").dropna()
        return int(ids.max()) + 1 if not ids.empty else 1

    # ---------- row <-> record ----------

    @staticmethod
    def _order_from_row(row: dict) -> Order:
        return Order(
            id=int(row["id"]),
            date=row["date"],
            customer_description=row["customer_description"],
            items=_ITEMS.validate_json(row["items"] or "[]"),
            order_total=int(float(row["order_total"] or 0)),
            status=row["status"] or "PENDING",
            created_at=row["created_at"],
            updated_at=row["updated_at"] or None,
        )

    @staticmethod
    def _order_to_row(order: Order) -> dict:
        return {
            "id": order.id,
            "date": order.date.isoformat() if order.date else "",
            "customer_description": order.customer_description,
            "items": _ITEMS.dump_json(order.items).decode(),
            "order_total": order.order_total,
            "status": order.status,
            "created_at": order.created_at.isoformat(),
            "updated_at": order.updated_at.isoformat() if order.updated_at else "",
        }

    @staticmethod
    def _expense_from_row(row: dict) -> Expense:
        return Expense(
            id=int(row["id"]),
            category=row["category"],
            description=row["description"],
            amount=int(float(row["amount"] or 0)),
            date=row["date"],
            breakdown=_BREAKDOWN.validate_json(row["breakdown"] or "{}"),
            created_at=row["created_at"],
        )

    @staticmethod
    def _expense_to_row(expense: Expense) -> dict:
        return {
            "id": expense.id,
            "category": expense.category,
            "description": expense.description,
            "amount": expense.amount,
            "date": expense.date.isoformat() if expense.date else "",
            "breakdown": _BREAKDOWN.dump_json(dict(expense.breakdown)).decode() if expense.breakdown else "",
            "created_at": expense.created_at.isoformat(),
        }

    def _load_orders(self) -> pd.DataFrame:
        return self._read_table(self.orders_path, ORDER_COLUMNS)

    def _load_expenses(self) -> pd.DataFrame:
        return self._read_table(self.expenses_path, EXPENSE_COLUMNS)

    def _save_orders(self, orders: List[Order]) -> None:
        self._write_table(self.orders_path, [self._order_to_row(o) for o in orders], ORDER_COLUMNS)

    def _save_expenses(self, expenses: List[Expense]) -> None:
        self._write_table(self.expenses_path, [self._expense_to_row(e) for e in expenses], EXPENSE_COLUMNS)

    # ---------- filtering ----------

    def _filtered_orders(self, filters: Optional[OrderFilters]) -> List[Order]:
        df = self._load_orders()

        if filters is not None:
            order_day = pd.to_datetime(df["date"], errors="coerce", format="ISO8601")
            mask = pd.Series(True, index=df.index)
            if filters.start_date:
                mask &= order_day >= pd.Timestamp(filters.start_date)
            if filters.end_date:
                mask &= order_day <= pd.Timestamp(filters.end_date)
            if filters.status:
                if isinstance(filters.status, str):
                    mask &= df["status"] == filters.status
                else:
                    mask &= df["status"].isin(filters.status)
            if filters.customer_search and filters.customer_search.strip():
                s = filters.customer_search.strip().lower()
                mask &= df["customer_description"].str.lower().str.contains(s, regex=False, na=False)
            df = df.loc[mask]

        df = self._newest_first(df)
        return [self._order_from_row(r) for r in df.to_dict("records")]

    def _filtered_expenses(self, filters: Optional[ExpenseFilters]) -> List[Expense]:
        df = self._load_expenses()

        if filters is not None:
            # Expenses without an explicit date count on the day they were recorded.
            effective = df["date"].where(df["date"] != "", df["created_at"].str[:10])
            expense_day = pd.to_datetime(effective, errors="coerce", format="ISO8601")
            mask = pd.Series(True, index=df.index)
            if filters.start_date:
                mask &= expense_day >= pd.Timestamp(filters.start_date)
            if filters.end_date:
                mask &= expense_day <= pd.Timestamp(filters.end_date)
            if filters.category:
                if isinstance(filters.category, str):
                    mask &= df["category"] == filters.category
                else:
                    mask &= df["category"].isin(filters.category)
            df = df.loc[mask]

        df = self._newest_first(df)
        return [self._expense_from_row(r) for r in df.to_dict("records")]

    @staticmethod
    def _failure(action: str, exc: Exception) -> DataResult:
        logger.error(f"Error {action}: {exc}")
        return DataResult.failure(f"Error {action}: {exc}")

    # ---------- orders ----------

    def create_order(self, order: OrderCreate) -> DataResult[Order]:
        try:
            df = self._load_orders()
            now = self._clock()
            created = Order(
                id=self._next_id(df),
                date=order.date,
                customer_description=order.customer_description,
                items=order.items,
                order_total=order.order_total,
                status=order.status,
                created_at=now,
                updated_at=now,
            )
            existing = [self._order_from_row(r) for r in df.to_dict("records")]
            self._save_orders(existing + [created])
        except STORE_ERRORS as e:
            return self._failure("inserting order", e)
        logger.info(f"Inserted order {created.id} ({created.order_total} total, {len(created.items)} items)")
        return DataResult.success(created)

    def list_orders(self, filters: Optional[OrderFilters] = None) -> DataResult[List[Order]]:
        try:
            orders = self._filtered_orders(filters)
        except STORE_ERRORS as e:
            return self._failure("fetching orders", e)
        logger.debug(f"Fetched {len(orders)} orders")
        return DataResult.success(orders)

    def list_pending_orders(self) -> DataResult[List[Order]]:
        return self.list_orders(OrderFilters(status="PENDING"))

    def list_completed_orders(self) -> DataResult[List[Order]]:
        return self.list_orders(OrderFilters(status="COMPLETED"))

    def get_order(self, order_id: int) -> DataResult[Order]:
        try:
            matches = [o for o in self._filtered_orders(None) if o.id == order_id]
        except STORE_ERRORS as e:
            return self._failure("fetching order by ID", e)
        if not matches:
            logger.warning(f"Order {order_id} not found")
            return DataResult.failure(f"Order {order_id} not found")
        return DataResult.success(matches[0])

    def get_orders_by_date_range(self, start_date: date, end_date: date) -> DataResult[List[Order]]:
        return self.list_orders(OrderFilters(start_date=start_date, end_date=end_date))

    def get_orders_by_customer(self, customer_description: str) -> DataResult[List[Order]]:
        return self.list_orders(OrderFilters(customer_search=customer_description))

    def _replace_order(self, order_id: int, change: Callable[[Order], Order], action: str) -> DataResult[bool]:
        try:
            df = self._load_orders()
            orders = [self._order_from_row(r) for r in df.to_dict("records")]
            index = next((i for i, o in enumerate(orders) if o.id == order_id), None)
            if index is None:
                logger.warning(f"Order {order_id} not found")
                return DataResult.failure(f"Order {order_id} not found")
            orders[index] = change(orders[index])
            self._save_orders(orders)
        except OrderLifecycleError as e:
            logger.warning(str(e))
            return DataResult.failure(str(e))
        except STORE_ERRORS as e:
            return self._failure(action, e)
        logger.info(f"Updated order {order_id}")
        return DataResult.success(True)

    def update_order(self, order_id: int, update: OrderUpdate) -> DataResult[bool]:
        return self._replace_order(
            order_id, lambda o: o.apply_update(update, self._clock()), "updating order"
        )

    def update_order_status(self, order_id: int, status: OrderStatus) -> DataResult[bool]:
        return self._replace_order(
            order_id, lambda o: o.with_status(status, self._clock()), "updating order status"
        )

    def complete_order(self, order_id: int) -> DataResult[bool]:
        return self.update_order_status(order_id, "COMPLETED")

    def delete_order(self, order_id: int) -> DataResult[bool]:
        try:
            df = self._load_orders()
            orders = [self._order_from_row(r) for r in df.to_dict("records")]
            remaining = [o for o in orders if o.id != order_id]
            if len(remaining) == len(orders):
                logger.warning(f"Order {order_id} not found")
                return DataResult.failure(f"Order {order_id} not found")
            self._save_orders(remaining)
        except STORE_ERRORS as e:
            return self._failure("deleting order", e)
        logger.info(f"Deleted order {order_id}")
        return DataResult.success(True)

    def get_total_sales(self, filters: Optional[OrderFilters] = None) -> DataResult[int]:
        try:
            orders = self._filtered_orders(filters)
        except STORE_ERRORS as e:
            return self._failure("fetching total sales", e)
        return DataResult.success(sum(o.order_total for o in orders))

    # ---------- expenses ----------

    def create_expense(self, expense: ExpenseCreate) -> DataResult[Expense]:
        try:
            df = self._load_expenses()
            created = Expense(
                id=self._next_id(df),
                category=expense.category,
                description=expense.description,
                amount=expense.amount,
                date=expense.date,
                breakdown=expense.breakdown,
                created_at=self._clock(),
            )
            existing = [self._expense_from_row(r) for r in df.to_dict("records")]
            self._save_expenses(existing + [created])
        except STORE_ERRORS as e:
            return self._failure("inserting expense", e)
        logger.info(f"Inserted expense {created.id} ({created.category}, {created.amount})")
        return DataResult.success(created)

    def list_expenses(self, filters: Optional[ExpenseFilters] = None) -> DataResult[List[Expense]]:
        try:
            expenses = self._filtered_expenses(filters)
        except STORE_ERRORS as e:
            return self._failure("fetching expenses", e)
        logger.debug(f"Fetched {len(expenses)} expenses")
        return DataResult.success(expenses)

    def get_expense(self, expense_id: int) -> DataResult[Expense]:
        try:
            matches = [e for e in self._filtered_expenses(None) if e.id == expense_id]
        except STORE_ERRORS as e:
            return self._failure("fetching expense by ID", e)
        if not matches:
            logger.warning(f"Expense {expense_id} not found")
            return DataResult.failure(f"Expense {expense_id} not found")
        return DataResult.success(matches[0])

    def get_expenses_by_date_range(self, start_date: date, end_date: date) -> DataResult[List[Expense]]:
        return self.list_expenses(ExpenseFilters(start_date=start_date, end_date=end_date))

    def get_expenses_by_category(self, category: str) -> DataResult[List[Expense]]:
        return self.list_expenses(ExpenseFilters(category=category))

    def update_expense(self, expense_id: int, update: ExpenseUpdate) -> DataResult[bool]:
        try:
            df = self._load_expenses()
            expenses = [self._expense_from_row(r) for r in df.to_dict("records")]
            index = next((i for i, e in enumerate(expenses) if e.id == expense_id), None)
            if index is None:
                logger.warning(f"Expense {expense_id} not found")
                return DataResult.failure(f"Expense {expense_id} not found")
            # Re-validate so the amount and breakdown rules hold for the merged record.
            merged = expenses[index].model_dump() | update.changes()
            expenses[index] = Expense.model_validate(merged)
            self._save_expenses(expenses)
        except STORE_ERRORS as e:
            return self._failure("updating expense", e)
        logger.info(f"Updated expense {expense_id}")
        return DataResult.success(True)

    def delete_expense(self, expense_id: int) -> DataResult[bool]:
        try:
            df = self._load_expenses()
            expenses = [self._expense_from_row(r) for r in df.to_dict("records")]
            remaining = [e for e in expenses if e.id != expense_id]
            if len(remaining) == len(expenses):
                logger.warning(f"Expense {expense_id} not found")
                return DataResult.failure(f"Expense {expense_id} not found")
            self._save_expenses(remaining)
        except STORE_ERRORS as e:
            return self._failure("deleting expense", e)
        logger.info(f"Deleted expense {expense_id}")
        return DataResult.success(True)

    def get_total_expenses(self, filters: Optional[ExpenseFilters] = None) -> DataResult[int]:
        try:
            expenses = self._filtered_expenses(filters)
        except STORE_ERRORS as e:
            return self._failure("fetching total expenses", e)
        return DataResult.success(sum(e.amount for e in expenses))
