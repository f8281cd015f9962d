import datetime as dt

import pytest
from pydantic import ValidationError

from shawarma.data.models import (
    DataResult,
    Expense,
    ExpenseCreate,
    ExpenseUpdate,
    Order,
    OrderCreate,
    OrderItem,
    OrderLifecycleError,
    OrderUpdate,
)

NOW = dt.datetime(2026, 10, 16, 12, 0)


def make_order(**overrides):
    values = dict(
        id=1,
        date=dt.date(2026, 10, 16),
        items=[OrderItem(item="Chicken Shawarma", quantity=2, price=500),
               OrderItem(item="Soft Drink", quantity=1, price=300)],
        order_total=1300,
        created_at=NOW,
    )
    values.update(overrides)
    return Order(**values)


def test_line_total_is_quantity_times_price():
    line = OrderItem(item="Fries", quantity=3, price=500, total=1)
    assert line.total == 1500


def test_legacy_price_field_name():
    line = OrderItem.model_validate({"item": "Fries", "quantity": 2, "pricePerItem": 500})
    assert line.price == 500
    assert line.total == 1000


def test_order_create_derives_total():
    """2 x 500 + 1 x 300 = 1300."""
    payload = OrderCreate(items=[
        OrderItem(item="Chicken Shawarma", quantity=2, price=500),
        OrderItem(item="Soft Drink", quantity=1, price=300),
    ])
    assert payload.order_total == 1300
    assert payload.status == "PENDING"


def test_order_create_keeps_explicit_total():
    payload = OrderCreate(items=[OrderItem(item="Fries", quantity=1, price=500)], order_total=450)
    assert payload.order_total == 450


def test_order_create_requires_items():
    with pytest.raises(ValidationError):
        OrderCreate(items=[])


def test_quantity_must_be_positive():
    with pytest.raises(ValidationError):
        OrderItem(item="Fries", quantity=0, price=500)


def test_completing_keeps_items_and_total():
    order = make_order()
    done = order.with_status("COMPLETED", NOW)
    assert done.status == "COMPLETED"
    assert done.items == order.items
    assert done.order_total == order.order_total
    assert done.updated_at == NOW


def test_completed_order_cannot_go_back():
    done = make_order(status="COMPLETED")
    with pytest.raises(OrderLifecycleError):
        done.with_status("PENDING")
    assert done.with_status("COMPLETED").status == "COMPLETED"


def test_apply_update_recomputes_total_for_new_items():
    order = make_order()
    updated = order.apply_update(OrderUpdate(items=[OrderItem(item="Fries", quantity=2, price=500)]), NOW)
    assert updated.order_total == 1000
    assert updated.has_consistent_total


def test_apply_update_leaves_unset_fields():
    order = make_order(customer_description="Regular")
    updated = order.apply_update(OrderUpdate(date=dt.date(2026, 10, 17)), NOW)
    assert updated.date == dt.date(2026, 10, 17)
    assert updated.customer_description == "Regular"
    assert updated.items == order.items


def test_completed_items_and_total_are_frozen():
    done = make_order(status="COMPLETED")
    with pytest.raises(OrderLifecycleError):
        done.apply_update(OrderUpdate(items=[OrderItem(item="Fries", quantity=1, price=500)]))
    with pytest.raises(OrderLifecycleError):
        done.apply_update(OrderUpdate(order_total=1))
    # other fields can still be corrected
    assert done.apply_update(OrderUpdate(customer_description="Takeaway")).customer_description == "Takeaway"


def test_inconsistent_stored_total_is_visible():
    order = make_order(order_total=999)
    assert order.items_total == 1300
    assert not order.has_consistent_total
    assert order.item_count == 3


def test_loose_dates():
    assert make_order(date="not-a-date").date is None
    assert make_order(date="2026-10-16T10:00:00").date == dt.date(2026, 10, 16)
    assert make_order(date="").date is None


def test_weekly_expense_amount_from_breakdown():
    payload = ExpenseCreate(category="weekly_expense", breakdown={"wraps": 1000, "marketing": 500})
    assert payload.amount == 1500


def test_breakdown_only_for_weekly():
    with pytest.raises(ValidationError):
        ExpenseCreate(category="wraps", amount=100, breakdown={"wraps": 100})


def test_negative_amount_rejected():
    with pytest.raises(ValidationError):
        ExpenseCreate(category="other", amount=-1)


def test_expense_effective_date_falls_back_to_created_at():
    expense = Expense(id=1, category="other", amount=100, created_at=NOW)
    assert expense.effective_date == dt.date(2026, 10, 16)
    dated = Expense(id=2, category="other", amount=100, date=dt.date(2026, 10, 1), created_at=NOW)
    assert dated.effective_date == dt.date(2026, 10, 1)


def test_data_result():
    assert DataResult.success([]).ok
    assert DataResult.success([]).data == []
    failed = DataResult.failure("boom")
    assert not failed.ok
    assert failed.data is None


def test_expense_update_rederives_amount_from_breakdown():
    assert ExpenseUpdate(breakdown={"wraps": 3000}).changes() == {"breakdown": {"wraps": 3000}, "amount": 3000}
    explicit = ExpenseUpdate(breakdown={"wraps": 3000}, amount=2500).changes()
    assert explicit["amount"] == 2500
    assert ExpenseUpdate(description="Restock").changes() == {"description": "Restock"}
