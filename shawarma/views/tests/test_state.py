from datetime import date, datetime, timedelta

import pytest

from shawarma.data.backends.csv_backend import CsvDataAccess
from shawarma.data.models import DataResult, ExpenseCreate, ExpenseUpdate, OrderCreate, OrderItem, OrderUpdate
from shawarma.views.state import (
    DashboardState,
    ExpensesState,
    FormState,
    OrderDraft,
    OrdersState,
    QuickExpenseForm,
    WeekSelector,
    parse_amount_to_cents,
    parse_quantity,
)


class FailingDataAccess:
    """Store that rejects every request."""

    def __getattr__(self, name):
        def fail(*args, **kwargs):
            return DataResult.failure(f"{name} unavailable")
        return fail


def ticking_clock(start=datetime(2026, 10, 16, 12, 0)):
    current = [start]

    def tick():
        current[0] += timedelta(minutes=1)
        return current[0]
    return tick


@pytest.fixture
def store(tmp_path):
    return CsvDataAccess(data_dir=tmp_path, clock=ticking_clock())


def fries(quantity=1):
    return OrderCreate(date=date(2026, 10, 16), items=[OrderItem(item="Fries", quantity=quantity, price=500)])


def test_parse_quantity():
    assert parse_quantity("2") == 2
    assert parse_quantity(3) == 3
    assert parse_quantity("abc") == 1
    assert parse_quantity("0") == 1
    assert parse_quantity(None) == 1


def test_parse_amount_to_cents():
    assert parse_amount_to_cents("12.50") == 1250
    assert parse_amount_to_cents("1,200") == 120000
    assert parse_amount_to_cents(7.5) == 750
    assert parse_amount_to_cents("abc") == 0
    assert parse_amount_to_cents("-5") == 0
    assert parse_amount_to_cents(None) == 0


def test_orders_state_patches_cache(store):
    state = OrdersState(store)
    assert state.load()
    assert state.orders == []

    first = state.create(fries())
    second = state.create(fries(2))
    assert [o.id for o in state.orders] == [second.id, first.id]

    assert state.complete(first.id)
    assert [o.id for o in state.completed] == [first.id]
    assert [o.id for o in state.pending] == [second.id]
    completed = next(o for o in state.orders if o.id == first.id)
    assert completed.items == first.items
    assert completed.order_total == first.order_total

    assert state.update(second.id, OrderUpdate(customer_description="Takeaway"))
    assert state.orders[0].customer_description == "Takeaway"

    assert state.delete(second.id)
    assert [o.id for o in state.orders] == [first.id]

    # the cache matches a fresh load
    cached = state.orders
    assert state.load()
    assert [(o.id, o.status, o.customer_description) for o in state.orders] == \
        [(o.id, o.status, o.customer_description) for o in cached]


def test_orders_state_rejected_status_change(store):
    state = OrdersState(store)
    created = state.create(fries())
    state.complete(created.id)
    assert not state.update_status(created.id, "PENDING")
    assert state.error == "Failed to update order status"
    assert state.orders[0].status == "COMPLETED"


def test_orders_state_failures_keep_cache():
    state = OrdersState(FailingDataAccess())
    assert not state.load()
    assert state.error == "Failed to load orders"
    assert state.orders == []
    assert not state.loading
    assert state.create(fries()) is None
    assert state.error == "Failed to create order"
    assert not state.delete(1)
    assert state.error == "Failed to delete order"


def test_expenses_state(store):
    state = ExpensesState(store)
    form = QuickExpenseForm()
    form.open("wraps")
    form.set_amount("12.50")
    created = form.submit(state)
    assert created.amount == 1250
    assert state.expenses == [created]
    assert state.delete(created.id)
    assert state.expenses == []

    failing = ExpensesState(FailingDataAccess())
    assert not failing.load()
    assert failing.error == "Failed to load expenses"


def test_quick_expense_form_lifecycle(store):
    expenses = ExpensesState(store)
    form = QuickExpenseForm()
    assert form.state == FormState.IDLE
    assert form.submit(expenses) is None

    form.open("marketing")
    assert form.is_open
    form.cancel()
    assert form.state == FormState.IDLE
    assert form.category is None

    form.open("marketing")
    form.set_amount("5")
    form.description = "Flyers"
    created = form.submit(expenses)
    assert created.category == "marketing"
    assert created.description == "Flyers"
    assert form.state == FormState.IDLE
    assert form.amount == 0


def test_weekly_expense_form_builds_breakdown(store):
    expenses = ExpensesState(store)
    form = QuickExpenseForm()
    form.open("weekly_expense")
    form.set_breakdown_amount("wraps", "10")
    form.set_breakdown_amount("marketing", "5")
    form.set_breakdown_amount("balaji", "")
    created = form.submit(expenses)
    assert created.amount == 1500
    assert created.breakdown == {"wraps": 1000, "marketing": 500}
    assert created.description == "Wraps: RM10.00, Marketing: RM5.00"


def test_failed_submit_stays_open():
    expenses = ExpensesState(FailingDataAccess())
    form = QuickExpenseForm()
    form.open("other")
    form.set_amount("3")
    assert form.submit(expenses) is None
    assert form.is_open
    assert form.amount == 300
    assert expenses.error == "Failed to add expense"


def test_order_draft():
    draft = OrderDraft(order_date=date(2026, 10, 16))
    assert draft.to_create() is None

    line = draft.add_item("Chicken Shawarma", "2")
    assert line.price == 1000
    assert line.total == 2000
    assert draft.add_item("Pizza") is None
    draft.add_item("Soft Drink", "abc")
    assert draft.total == 2300

    draft.remove_item(5)
    assert len(draft.items) == 2
    draft.remove_item(1)
    payload = draft.to_create()
    assert payload.order_total == 2000
    assert payload.date == date(2026, 10, 16)

    draft.reset(today=date(2026, 10, 17))
    assert draft.is_empty
    assert draft.order_date == date(2026, 10, 17)


def test_week_selector():
    week = WeekSelector(anchor=date(2026, 10, 16))
    assert week.previous().start == date(2026, 10, 5)
    assert week.next().start == date(2026, 10, 12)
    assert week.next().start == date(2026, 10, 19)
    assert not week.is_current(today=date(2026, 10, 16))
    assert week.current(today=date(2026, 10, 16)).start == date(2026, 10, 12)
    assert week.is_current(today=date(2026, 10, 18))


def test_dashboard_state(store):
    store.create_order(fries())
    state = DashboardState.start(store)
    assert len(state.orders.orders) == 1
    assert state.expenses.expenses == []

    assert state.toggle_order(1) is True
    assert 1 in state.expanded_orders
    assert state.toggle_order(1) is False
    assert state.expanded_orders == set()

    state.show_order_form = True
    assert state.submit_order_draft() is None
    state.order_draft.add_item("Fries", 2)
    created = state.submit_order_draft()
    assert created.order_total == 1000
    assert state.orders.orders[0].id == created.id
    assert state.order_draft.is_empty
    assert not state.show_order_form


def test_expenses_state_breakdown_update_keeps_amount_in_step(store):
    state = ExpensesState(store)
    created = state.create(ExpenseCreate(category="weekly_expense", breakdown={"wraps": 1000}))
    assert state.update(created.id, ExpenseUpdate(breakdown={"wraps": 3000}))
    assert state.expenses[0].amount == 3000
    assert store.get_expense(created.id).data.amount == 3000


def test_reopened_form_gets_fresh_widget_keys(store):
    expenses = ExpensesState(store)
    form = QuickExpenseForm()
    form.open("weekly_expense")
    first_key = form.widget_key("weekly_wraps")
    assert form.widget_key("weekly_wraps") == first_key
    form.set_breakdown_amount("wraps", "10")
    assert form.submit(expenses) is not None

    form.open("weekly_expense")
    assert form.widget_key("weekly_wraps") != first_key
    assert form.breakdown == {}


def test_failed_submit_keeps_widget_keys():
    form = QuickExpenseForm()
    form.open("other")
    key = form.widget_key("amount")
    form.set_amount("3")
    form.submit(ExpensesState(FailingDataAccess()))
    assert form.widget_key("amount") == key
