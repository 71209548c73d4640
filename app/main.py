import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pandas as pd
import plotly.express as px
import streamlit as st

from tracker import config
from tracker.budgets import budget_level
from tracker.domain import ALL, CATEGORIES, EXPENSE, TRANSACTION_TYPES, Transaction
from tracker.goals import goal_progress
from tracker.logger import get_logger
from tracker.services import ExpenseTracker
from tracker.settings import CURRENCIES
from tracker.storage import JsonFileStore

logger = get_logger(__name__)

COLORS = ["#3b82f6", "#10b981", "#f59e0b", "#ef4444", "#8b5cf6", "#ec4899"]
LEVEL_ICONS = {"over": "🔴", "warning": "🟠", "ok": "🟢"}
DARK_CSS = """
<style>
.stApp { background-color: #111827; color: #f3f4f6; }
[data-testid="stSidebar"] { background-color: #1f2937; }
</style>
"""


def get_tracker() -> ExpenseTracker:
    if "tracker" not in st.session_state:
        st.session_state.tracker = ExpenseTracker(JsonFileStore(config.STORE_PATH))
    return st.session_state.tracker


def format_date(value: str) -> str:
    ts = pd.to_datetime(value, errors="coerce")
    if pd.isna(ts):
        return "Invalid Date"
    return f"{ts:%b} {ts.day}, {ts.year}"


def bump(key: str) -> None:
    st.session_state[key] = st.session_state.get(key, 0) + 1


def render_sidebar(tracker: ExpenseTracker, panel) -> None:
    prefs = tracker.preferences
    panel.title("💰 Expense Tracker")

    symbols = list(CURRENCIES)
    currency = panel.selectbox(
        "Currency",
        symbols,
        index=symbols.index(prefs.currency),
        format_func=lambda s: f"{s} {CURRENCIES[s].code}",
        key="currency_select",
    )
    if currency != prefs.currency:
        tracker.set_currency(currency)

    dark = panel.toggle("🌙 Dark mode", value=prefs.dark_mode, key="dark_mode_toggle")
    if dark != prefs.dark_mode:
        tracker.set_dark_mode(dark)

    panel.download_button(
        "⬇ Export CSV",
        tracker.export_csv(),
        file_name=config.EXPORT_FILENAME,
        mime="text/csv",
        disabled=len(tracker.transactions) == 0,
    )


def render_summary(tracker: ExpenseTracker, snapshot: dict) -> None:
    t = snapshot["totals"]
    fmt = tracker.preferences.format
    k1, k2, k3 = st.columns(3)
    with k1:
        st.metric("💳 Total Balance", fmt(t.balance))
    with k2:
        st.metric("📈 Total Income", fmt(t.income))
    with k3:
        st.metric("📉 Total Expenses", fmt(t.expense))


def render_charts(snapshot: dict, template: str) -> None:
    pie_col, bar_col = st.columns(2)

    with pie_col:
        st.subheader("Expenses by Category")
        grouped = snapshot["by_category"]
        if grouped:
            df_cat = pd.DataFrame({"Category": list(grouped), "Amount": list(grouped.values())})
            fig_cat = px.pie(
                df_cat,
                values="Amount",
                names="Category",
                hole=0.5,
                color_discrete_sequence=COLORS,
                template=template,
            )
            fig_cat.update_layout(height=300, margin=dict(t=10, b=10, l=10, r=10))
            st.plotly_chart(fig_cat, use_container_width=True)
        else:
            st.info("No expenses recorded yet.")

    with bar_col:
        st.subheader("Income vs Expense")
        series = snapshot["income_vs_expense"]
        df_ie = pd.DataFrame({"Type": list(series), "Amount": list(series.values())})
        fig_ie = px.bar(
            df_ie,
            x="Type",
            y="Amount",
            color="Type",
            color_discrete_map={"Income": "#10b981", "Expense": "#ef4444"},
            template=template,
        )
        fig_ie.update_layout(height=300, showlegend=False, margin=dict(t=10, b=10, l=10, r=10))
        st.plotly_chart(fig_ie, use_container_width=True)


def render_transaction_row(tracker: ExpenseTracker, t: Transaction) -> None:
    info, amount, edit, delete = st.columns([6, 3, 1, 1])
    badges = [f"`{t.category.upper()}`", format_date(t.date)]
    if t.recurring:
        badges.append(":blue[Recurring]")
    info.markdown(f"**{t.description}**  \n" + " • ".join(badges))

    sign, color = ("+", "green") if t.is_income() else ("-", "red")
    amount.markdown(f":{color}[**{sign}{tracker.preferences.format(abs(t.amount))}**]")

    if edit.button("✏️", key=f"edit_{t.id}", help="Edit transaction"):
        st.session_state.editing_id = t.id
        st.rerun()
    if delete.button("🗑️", key=f"delete_{t.id}", help="Delete transaction"):
        tracker.delete_transaction(t.id)
        if st.session_state.get("editing_id") == t.id:
            st.session_state.editing_id = None
        st.rerun()


def render_transactions(tracker: ExpenseTracker) -> None:
    st.subheader("🧾 Recent Transactions")
    if len(tracker.transactions) == 0:
        st.info("No transactions yet. Add a transaction to get started.")
        return

    search_col, filter_col = st.columns([2, 1])
    search = search_col.text_input("Search", placeholder="Search...", key="search_query")
    category = filter_col.selectbox("Category", (ALL,) + CATEGORIES, key="filter_category")

    # paging restarts whenever the filters change
    filters = (search, category)
    if st.session_state.get("list_filters") != filters:
        st.session_state.list_filters = filters
        st.session_state.visible_count = config.PAGE_SIZE

    rows = tracker.filter_transactions(category, search)
    if not rows:
        st.caption("No transactions found")
        return

    visible = rows[: st.session_state.visible_count]
    for t in visible:
        render_transaction_row(tracker, t)

    if len(visible) < len(rows):
        if st.button("Load More", key="load_more", use_container_width=True):
            st.session_state.visible_count += config.PAGE_SIZE
            st.rerun()


def render_transaction_form(tracker: ExpenseTracker) -> None:
    editing = None
    editing_id = st.session_state.get("editing_id")
    if editing_id:
        editing = tracker.transactions.find(editing_id).get_or_else(None)
        if editing is None:
            st.session_state.editing_id = None

    st.subheader("✏️ Edit Transaction" if editing else "➕ Add Transaction")
    form_key = f"{editing.id if editing else 'new'}_{st.session_state.get('tx_form_nonce', 0)}"

    with st.form(f"transaction_form_{form_key}"):
        description = st.text_input(
            "Description",
            value=editing.description if editing else "",
            placeholder="e.g. Grocery Shopping",
            key=f"tx_description_{form_key}",
        )
        amount_col, type_col = st.columns(2)
        amount = amount_col.number_input(
            "Amount",
            min_value=0.0,
            step=0.01,
            format="%.2f",
            value=float(editing.amount) if editing else None,
            placeholder="0.00",
            key=f"tx_amount_{form_key}",
        )
        tx_type = type_col.selectbox(
            "Type",
            TRANSACTION_TYPES,
            index=TRANSACTION_TYPES.index(editing.type if editing else EXPENSE),
            format_func=str.capitalize,
            key=f"tx_type_{form_key}",
        )
        category = st.selectbox(
            "Category",
            CATEGORIES,
            index=CATEGORIES.index(editing.category) if editing else 0,
            key=f"tx_category_{form_key}",
        )
        recurring = st.checkbox(
            "Recurring Transaction (Monthly)",
            value=editing.recurring if editing else False,
            key=f"tx_recurring_{form_key}",
        )
        submitted = st.form_submit_button(
            "Update" if editing else "Add Transaction", type="primary", use_container_width=True
        )

    if editing and st.button("Cancel", key="cancel_edit", use_container_width=True):
        st.session_state.editing_id = None
        st.rerun()

    if submitted:
        result = tracker.submit_transaction(
            description,
            amount,
            tx_type,
            category,
            recurring,
            editing_id=editing.id if editing else None,
        )
        if result.is_left():
            st.error(result.get_error()["message"])
            return
        st.session_state.editing_id = None
        bump("tx_form_nonce")
        st.rerun()


def render_goals(tracker: ExpenseTracker) -> None:
    st.subheader("🎯 Savings Goals")
    fmt = tracker.preferences.format

    with st.expander("➕ New goal"):
        nonce = st.session_state.get("goal_form_nonce", 0)
        with st.form(f"goal_form_{nonce}"):
            name = st.text_input("Goal Name", placeholder="e.g. New Laptop", key=f"goal_name_{nonce}")
            target_col, saved_col = st.columns(2)
            target = target_col.number_input(
                "Target Amount", min_value=0.0, value=None, placeholder="0.00", key=f"goal_target_{nonce}"
            )
            saved = saved_col.number_input(
                "Current Saved", min_value=0.0, value=0.0, key=f"goal_saved_{nonce}"
            )
            submitted = st.form_submit_button("Save Goal", use_container_width=True)
        if submitted:
            result = tracker.submit_goal(name, target, saved)
            if result.is_left():
                st.error(result.get_error()["message"])
            else:
                bump("goal_form_nonce")
                st.rerun()

    if len(tracker.goals) == 0:
        st.caption("No savings goals yet.")
        return

    for goal in tracker.goals:
        progress = goal_progress(goal)
        name_col, amount_col, delete_col = st.columns([3, 3, 1])
        name_col.markdown(f"**{goal.name}**")
        amount_col.caption(f"{fmt(goal.current_amount)} / {fmt(goal.target)}")
        if delete_col.button("🗑️", key=f"delete_goal_{goal.id}", help="Delete goal"):
            tracker.delete_goal(goal.id)
            st.rerun()
        st.progress(progress / 100, text="✅ Goal reached" if progress >= 100 else f"{progress:.0f}%")

        funds_key = f"funds_{goal.id}"
        input_col, button_col = st.columns([2, 1])
        delta = input_col.text_input(
            "Add to savings", placeholder="0", key=funds_key, label_visibility="collapsed"
        )
        if button_col.button("+ Add funds", key=f"add_funds_{goal.id}"):
            result = tracker.add_funds(goal.id, delta)
            if result.is_left():
                st.error(result.get_error()["message"])
            else:
                del st.session_state[funds_key]
                st.rerun()


def _on_budget_change(tracker: ExpenseTracker, category: str) -> None:
    tracker.set_budget(category, st.session_state[f"budget_{category}"])


def render_budgets(tracker: ExpenseTracker, snapshot: dict) -> None:
    st.subheader("📋 Monthly Budgets")
    fmt = tracker.preferences.format

    for status in snapshot["budget_status"]:
        label_col, input_col = st.columns([1, 1])
        label_col.markdown(f"**{status.category}**")
        input_col.number_input(
            f"{status.category} budget",
            min_value=0.0,
            step=10.0,
            value=float(status.limit) if status.limit else None,
            placeholder="Set Budget",
            key=f"budget_{status.category}",
            label_visibility="collapsed",
            on_change=_on_budget_change,
            args=(tracker, status.category),
        )
        color = "red" if status.over_budget else "gray"
        level = LEVEL_ICONS[budget_level(status.percentage)]
        st.markdown(f"{level} :{color}[{fmt(status.spent, 0)} / {fmt(status.limit, 0)}]")
        st.progress(min(status.percentage, 100) / 100)


def render_recommendations(snapshot: dict) -> None:
    advisories = snapshot["recommendations"]
    if not advisories:
        return
    st.subheader("💡 Smart Insights")
    styles = {
        "positive": st.success,
        "overspending": st.error,
        "boost_savings": st.info,
        "concentration": st.warning,
    }
    for adv in advisories:
        styles.get(adv.kind, st.info)(f"**{adv.title}**  \n{adv.message}")


def render_dashboard(tracker: ExpenseTracker) -> None:
    if tracker.preferences.dark_mode:
        st.markdown(DARK_CSS, unsafe_allow_html=True)
    template = "plotly_dark" if tracker.preferences.dark_mode else "plotly_white"

    snapshot = tracker.dashboard()

    st.title("Expense Tracker")
    render_summary(tracker, snapshot)

    main_col, side_col = st.columns([2, 1], gap="large")
    with main_col:
        render_charts(snapshot, template)
        render_transactions(tracker)
    with side_col:
        render_transaction_form(tracker)
        render_goals(tracker)
        render_budgets(tracker, snapshot)
        render_recommendations(snapshot)


def render_recovery_screen(error: Exception) -> None:
    st.title("⚠️ Something went wrong")
    st.write("The application encountered an unexpected error.")
    st.code(f"{type(error).__name__}: {error}")
    if st.button("Clear Data & Reload", type="primary", use_container_width=True):
        tracker = st.session_state.get("tracker")
        if tracker is not None:
            tracker.reset()
        else:
            JsonFileStore(config.STORE_PATH).clear()
        st.session_state.clear()
        st.rerun()


def main() -> None:
    st.set_page_config(page_title="Expense Tracker", page_icon="💰", layout="wide")
    side = st.sidebar.empty()
    root = st.empty()
    try:
        tracker = get_tracker()
        render_sidebar(tracker, side.container())
        with root.container():
            render_dashboard(tracker)
    except Exception as e:
        logger.exception("Uncaught error while rendering the dashboard")
        # the recovery screen replaces the whole page, sidebar included
        side.empty()
        root.empty()
        render_recovery_screen(e)


if __name__ == "__main__":
    main()
