from datetime import date

import pandas as pd
import plotly.express as px
import streamlit as st

from shawarma.config import get_config
from shawarma.data.menu import active_menu_items
from shawarma.data.models import EXPENSE_CATEGORY_COLORS, EXPENSE_CATEGORY_LABELS, WEEKLY_EXPENSE, category_label
from shawarma.data.util import get_data_access
from shawarma.reporting.calculations import dashboard_metrics, order_count, popular_items, total_sales
from shawarma.reporting.expense_breakdown import expense_breakdown
from shawarma.reporting.formatting import format_currency, format_date, format_datetime, format_percentage
from shawarma.reporting.weekly import sales_by_operating_day, weekly_expenses_summary, weekly_sales_summary
from shawarma.views.state import DashboardState

st.set_page_config(page_title="Shawarma Stall Dashboard", layout="wide")

config = get_config()

# -----------------------------------------------------------------------------
# Session state (loaded once per browser session, refreshed after mutations)
# -----------------------------------------------------------------------------
if "dashboard" not in st.session_state:
    st.session_state["dashboard"] = DashboardState.start(get_data_access())
state: DashboardState = st.session_state["dashboard"]

orders = state.orders.orders
expenses = state.expenses.expenses
operating_days = config.operating_days

# -----------------------------------------------------------------------------
# Sidebar: week navigation
# -----------------------------------------------------------------------------
st.sidebar.header("Week")

prev_col, now_col, next_col = st.sidebar.columns(3)
if prev_col.button("◀ Prev"):
    state.week.previous()
if now_col.button("This week"):
    state.week.current()
if next_col.button("Next ▶"):
    state.week.next()

picked = st.sidebar.date_input("Any day in the week", state.week.anchor)
if isinstance(picked, date) and picked != state.week.anchor:
    state.week.anchor = picked

window = state.week.window
st.sidebar.caption(f"{format_date(window.start)} – {format_date(window.end)}")

top_n = st.sidebar.slider(
    "Top N items",
    min_value=config.min_top_n,
    max_value=config.max_top_n,
    value=config.default_top_n,
    step=1,
)

if st.sidebar.button("Reload data"):
    state.reload()

for message in (state.orders.error, state.expenses.error):
    if message:
        st.error(message)

# -----------------------------------------------------------------------------
# KPIs (recomputed from the cached lists on every run)
# -----------------------------------------------------------------------------
metrics = dashboard_metrics(orders, expenses)
trend_arrow = {"up": "▲", "down": "▼", "stable": "▬"}

c1, c2, c3, c4, c5 = st.columns(5)
c1.metric("Total sales", format_currency(metrics.total_sales), f"{trend_arrow[metrics.sales_trend]} vs yesterday", delta_color="off")
c2.metric("Total expenses", format_currency(metrics.total_expenses), f"{trend_arrow[metrics.expenses_trend]} vs yesterday", delta_color="off")
c3.metric("Net profit", format_currency(metrics.net_profit), format_percentage(metrics.profit_margin))
c4.metric("Items sold", f"{metrics.items_sold:,}")
c5.metric("Avg daily sales", format_currency(round(metrics.average_daily_sales)))

sales_tab, expenses_tab, analytics_tab = st.tabs(["Sales", "Expenses", "Analytics"])

# -----------------------------------------------------------------------------
# Sales: add order form + order list
# -----------------------------------------------------------------------------
with sales_tab:
    st.markdown("### Orders")
    if st.button("Add sale"):
        state.show_order_form = True

    if state.show_order_form:
        draft = state.order_draft
        with st.container(border=True):
            draft.order_date = st.date_input("Date", draft.order_date, key="order_date")
            draft.customer_description = st.text_input(
                "Customer description", draft.customer_description, key="order_customer"
            )
            menu_names = [item.name for item in active_menu_items()]
            item_col, qty_col, add_col = st.columns([3, 1, 1])
            selected = item_col.selectbox("Item", menu_names, key="order_item")
            quantity = qty_col.number_input("Qty", min_value=1, value=1, step=1, key="order_qty")
            if add_col.button("Add item"):
                draft.add_item(selected, quantity)

            for index, line in enumerate(draft.items):
                line_col, remove_col = st.columns([5, 1])
                line_col.write(f"{line.quantity} × {line.item} @ {format_currency(line.price)} = {format_currency(line.total)}")
                if remove_col.button("Remove", key=f"remove_line_{index}"):
                    draft.remove_item(index)
                    st.rerun()

            st.write(f"**Order total: {format_currency(draft.total)}**")
            save_col, cancel_col = st.columns(2)
            if save_col.button("Save order", disabled=draft.is_empty):
                if state.submit_order_draft() is not None:
                    st.rerun()
            if cancel_col.button("Cancel", key="cancel_order"):
                draft.reset()
                state.show_order_form = False
                st.rerun()

    if not orders:
        st.info("No orders recorded yet.")

    for order in orders:
        label = (
            f"#{order.id} · {format_date(order.date)} · {order.customer_description or 'Walk-in'} · "
            f"{format_currency(order.order_total)} · {order.status}"
        )
        with st.container(border=True):
            head_col, toggle_col = st.columns([5, 1])
            head_col.write(label)
            expanded = order.id in state.expanded_orders
            if toggle_col.button("Hide" if expanded else "Details", key=f"toggle_{order.id}"):
                state.toggle_order(order.id)
                st.rerun()
            if not expanded:
                continue
            st.dataframe(
                pd.DataFrame(
                    [line.model_dump() for line in order.items],
                    columns=["item", "quantity", "price", "total"],
                ),
                use_container_width=True,
                hide_index=True,
            )
            st.caption(f"Created {format_datetime(order.created_at)}")
            if not order.has_consistent_total:
                st.warning(f"Line items add up to {format_currency(order.items_total)}")
            action_col, delete_col = st.columns(2)
            if order.status == "PENDING" and action_col.button("Mark completed", key=f"complete_{order.id}"):
                state.orders.complete(order.id)
                st.rerun()
            if delete_col.button("Delete", key=f"delete_order_{order.id}"):
                state.orders.delete(order.id)
                st.rerun()

# -----------------------------------------------------------------------------
# Expenses: quick add form + expense table + category pie
# -----------------------------------------------------------------------------
with expenses_tab:
    st.markdown("### Expenses")
    form = state.expense_form
    category_options = list(EXPENSE_CATEGORY_LABELS) + [WEEKLY_EXPENSE]

    if not form.is_open and st.button("Add expense"):
        form.open()
        st.rerun()

    if form.is_open:
        with st.container(border=True):
            form.category = st.selectbox(
                "Category",
                category_options,
                index=category_options.index(form.category) if form.category in category_options else 0,
                format_func=category_label,
                key=form.widget_key("category"),
            )
            form.expense_date = st.date_input("Date", form.expense_date or date.today(), key=form.widget_key("date"))
            if form.is_weekly:
                cols = st.columns(len(EXPENSE_CATEGORY_LABELS))
                for col, (key, label) in zip(cols, EXPENSE_CATEGORY_LABELS.items()):
                    raw = col.text_input(f"{label} (RM)", key=form.widget_key(f"weekly_{key}"))
                    form.set_breakdown_amount(key, raw)
            else:
                form.set_amount(st.text_input("Amount (RM)", key=form.widget_key("amount")))
            form.description = st.text_input("Description", form.description, key=form.widget_key("description"))

            submit_col, cancel_col = st.columns(2)
            if submit_col.button("Save expense"):
                if form.submit(state.expenses) is not None:
                    st.rerun()
            if cancel_col.button("Cancel", key="cancel_expense"):
                form.cancel()
                st.rerun()

    if expenses:
        expense_rows = pd.DataFrame(
            [
                {
                    "id": e.id,
                    "date": format_date(e.effective_date),
                    "category": category_label(e.category),
                    "description": e.description,
                    "amount": format_currency(e.amount),
                }
                for e in expenses
            ]
        )
        st.dataframe(expense_rows, use_container_width=True, hide_index=True)
        delete_id = st.selectbox("Delete expense", [None] + [e.id for e in expenses], key="delete_expense")
        if delete_id is not None and st.button("Delete selected expense"):
            state.expenses.delete(delete_id)
            st.rerun()
    else:
        st.info("No expenses recorded yet.")

    st.markdown("### Expense breakdown (selected week)")
    breakdown = expense_breakdown(expenses, window)
    if breakdown:
        pie = pd.DataFrame([{"category": p.name, "amount": p.value / 100} for p in breakdown])
        label_colors = {label: EXPENSE_CATEGORY_COLORS[key] for key, label in EXPENSE_CATEGORY_LABELS.items()}
        fig = px.pie(pie, values="amount", names="category", hole=0.4,
                     color="category", color_discrete_map=label_colors)
        fig.update_traces(textinfo="label+percent")
        st.plotly_chart(fig, use_container_width=True)
    else:
        st.caption("No expenses in this week.")

# -----------------------------------------------------------------------------
# Analytics: weekly revenue / expenses comparisons and operating-day breakdown
# -----------------------------------------------------------------------------
with analytics_tab:
    st.markdown("### All time")
    a1, a2, a3 = st.columns(3)
    a1.metric("All time sales", format_currency(total_sales(orders)))
    a2.metric("Orders", f"{order_count(orders):,}")
    a3.metric("Items", f"{metrics.items_sold:,}")

    sales_summary = weekly_sales_summary(orders, state.week.anchor, operating_days)
    st.markdown("### Weekly revenue (operating days)")
    w1, w2, w3 = st.columns(3)
    w1.metric("This week", format_currency(sales_summary.this_week_total))
    w2.metric("Last week", format_currency(sales_summary.last_week_total))
    w3.metric("Change", format_percentage(sales_summary.percentage_change))
    revenue = pd.DataFrame(
        [{"day": d.day, "This Week": d.this_week / 100, "Last Week": d.last_week / 100} for d in sales_summary.days]
    )
    if not revenue.empty:
        st.line_chart(revenue, x="day", y=["This Week", "Last Week"], use_container_width=True)

    st.markdown("### Sales by operating day")
    for day in sales_by_operating_day(orders, state.week.anchor, operating_days):
        with st.container(border=True):
            st.write(f"**{day.day}** {format_date(day.date)}: {format_currency(day.total)} from {day.orders} orders")
            if day.items:
                st.bar_chart(pd.Series(day.items, name="quantity"))

    expense_summary = weekly_expenses_summary(expenses, state.week.anchor)
    st.markdown("### Weekly expenses")
    e1, e2, e3 = st.columns(3)
    e1.metric("This week", format_currency(expense_summary.this_week_total))
    e2.metric("Last week", format_currency(expense_summary.last_week_total))
    e3.metric("Budget used", format_percentage(expense_summary.budget_progress))
    st.progress(min(expense_summary.budget_progress, 100.0) / 100,
                text=f"From {format_currency(expense_summary.budget)} budget")
    st.bar_chart(
        pd.DataFrame(
            {"week": ["This Week", "Last Week"],
             "expenses": [expense_summary.this_week_total / 100, expense_summary.last_week_total / 100]}
        ),
        x="week",
        y="expenses",
        use_container_width=True,
    )

    st.markdown("### Popular items")
    top_items = popular_items(orders, limit=int(top_n))
    if top_items:
        st.bar_chart(pd.DataFrame([p.model_dump() for p in top_items]), x="name", y="value", use_container_width=True)
    else:
        st.caption("No items sold yet.")
