import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import json
from dataclasses import replace
from datetime import date, datetime

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
import streamlit as st

from tracker.config import settings
from tracker.domain import EXPENSE, INCOME, KINDS, PERIODS as BUDGET_PERIODS, OVER, WARNING
from tracker.frames import (
    categories_frame,
    daily_frame,
    monthly_frame,
    progress_frame,
    transactions_frame,
)
from tracker.log import setup_logging
from tracker.queries import (
    DASHBOARD_RECENT,
    DASHBOARD_TOP_CATEGORIES,
    PERIODS,
    category_suggestions,
    daily_totals,
    filter_transactions,
    recent_transactions,
    split_categories,
    top_categories,
    totals,
    transaction_categories,
)
from tracker.reports import period_report
from tracker.seed import new_store, populate_sample_data
from tracker.validation import (
    validate_budget_input,
    validate_category_input,
    validate_transaction_input,
)

st.set_page_config(page_title=settings.app_name, layout="wide")

if "store" not in st.session_state:
    setup_logging(settings.log_level, settings.log_json)
    st.session_state.store = new_store()
    if settings.load_sample_data:
        populate_sample_data(st.session_state.store)

store = st.session_state.store
STATUS_ICONS = {"under": "✅", WARNING: "⚠️", OVER: "🚨"}


def money(value) -> str:
    return f"{float(value):,.2f} {settings.currency}"


def describe(tx) -> str:
    return f"{tx.date:%d/%m/%Y} · {tx.category} · {money(tx.amount)} · {tx.description or '-'}"


def show_errors(result) -> bool:
    if result.is_left():
        st.error(f"❌ {result.get_error()['message']}")
        return True
    return False


menu = st.sidebar.radio(
    "Menu",
    ["🏠 Dashboard", "🧾 Transactions", "💰 Budgets", "🗂 Categories", "📑 Reports"]
)

unread = [n for n in store.notifications if not n.is_read]
if unread:
    st.sidebar.markdown(f"### 🔔 {len(unread)} alert(s)")
    for n in unread[-5:]:
        st.sidebar.warning(f"**{n.title}**\n\n{n.message}")
    if st.sidebar.button("Mark as read"):
        store.mark_notifications_read()
        st.rerun()

if not store.transactions and st.sidebar.button("Load sample data"):
    populate_sample_data(store)
    st.rerun()

if menu == "🏠 Dashboard":
    st.title("🏠 Dashboard")
    st.caption(f"Overview for {datetime.now():%B %Y}")
    summary = store.summary

    k1, k2, k3, k4 = st.columns(4)
    k1.metric("Balance", money(summary.current_balance))
    k2.metric("Income this month", money(summary.monthly_income))
    k3.metric("Expenses this month", money(summary.monthly_expenses))
    k4.metric("Savings this month", money(summary.monthly_savings))

    col_pie, col_bar = st.columns(2)
    with col_pie:
        df_cat = categories_frame(top_categories(store.transactions, DASHBOARD_TOP_CATEGORIES))
        if not df_cat.empty:
            fig = px.pie(df_cat, values="total", names="category", title="Expenses by category")
            st.plotly_chart(fig, use_container_width=True)
        else:
            st.info("No expenses yet.")
    with col_bar:
        df_days = daily_frame(daily_totals(store.transactions))
        fig = go.Figure()
        fig.add_trace(go.Bar(x=df_days["day"], y=df_days["income"], name="Income"))
        fig.add_trace(go.Bar(x=df_days["day"], y=df_days["expenses"], name="Expenses"))
        fig.update_layout(title="Last 7 days", barmode="group", margin=dict(t=40, b=10, l=10, r=10))
        st.plotly_chart(fig, use_container_width=True)

    st.subheader("Budgets")
    if summary.budget_progress:
        for p in summary.budget_progress:
            st.write(f"{STATUS_ICONS[p.status]} **{p.category_name}**: "
                     f"{money(p.spent)} / {money(p.budget)} ({p.percentage:.1f}%)")
            st.progress(min(p.percentage, 100.0) / 100)
    else:
        st.info("No budgets defined")

    st.subheader("Recent transactions")
    recent = transactions_frame(recent_transactions(store.transactions, DASHBOARD_RECENT))
    if not recent.empty:
        recent["date"] = recent["date"].dt.strftime("%d/%m/%Y")
        st.table(recent[["date", "kind", "category", "amount", "description"]])
    else:
        st.info("No transactions to display.")

elif menu == "🧾 Transactions":
    st.title("🧾 Transactions")

    with st.expander("➕ Add transaction"):
        kind = st.radio("Type", KINDS, horizontal=True, index=1)
        suggestions = category_suggestions(store.transactions, kind)
        if suggestions:
            st.caption("Recent: " + ", ".join(suggestions))
        with st.form("add_transaction", clear_on_submit=True):
            col1, col2 = st.columns(2)
            with col1:
                amount = st.number_input("Amount", min_value=0.0, step=10.0, format="%.2f")
                occurred = st.date_input("Date", value=date.today())
            with col2:
                category = st.selectbox("Category", [""] + [c.name for c in store.categories if c.kind == kind])
                method = st.selectbox("Payment method", [""] + [p.name for p in store.payment_methods])
            description = st.text_input("Description (optional)")
            if st.form_submit_button("Add"):
                result = validate_transaction_input({
                    "kind": kind, "amount": amount, "category": category,
                    "payment_method": method, "date": occurred, "description": description,
                })
                if not show_errors(result):
                    store.add_transaction(**result.get_or_else(None))
                    st.success("✅ Transaction added!")
                    st.rerun()

    col1, col2, col3, col4 = st.columns(4)
    with col1:
        search = st.text_input("Search")
    with col2:
        kind_filter = st.selectbox("Type", ["all", INCOME, EXPENSE])
    with col3:
        category_filter = st.selectbox("Category", [""] + transaction_categories(store.transactions))
    with col4:
        use_date = st.checkbox("Filter by date")
        date_filter = st.date_input("Day", value=date.today()) if use_date else None

    listed = filter_transactions(store.transactions, search, kind_filter, category_filter, date_filter)
    t = totals(listed)
    m1, m2, m3 = st.columns(3)
    m1.metric("Transactions", len(listed))
    m2.metric("Income", money(t.income))
    m3.metric("Expenses", money(t.expenses))

    for tx in listed:
        c1, c2, c3, c4 = st.columns([2, 3, 2, 1])
        c1.write(tx.date.strftime("%d/%m/%Y"))
        c2.write(f"**{tx.category}** · {tx.description or '-'} · {tx.payment_method}")
        sign = "+" if tx.kind == INCOME else "-"
        c3.write(f"{sign}{money(tx.amount)}")
        if c4.button("🗑", key=f"del_{tx.id}"):
            store.delete_transaction(tx.id)
            st.rerun()

    if listed:
        with st.expander("✏️ Edit transaction"):
            by_id = {tx.id: tx for tx in listed}
            current = by_id[st.selectbox(
                "Transaction", list(by_id),
                format_func=lambda i: describe(by_id[i]),
            )]
            with st.form("edit_transaction"):
                col1, col2 = st.columns(2)
                with col1:
                    amount = st.number_input("Amount", value=float(current.amount), min_value=0.0, step=10.0, format="%.2f")
                    occurred = st.date_input("Date", value=current.date)
                with col2:
                    names = [c.name for c in store.categories if c.kind == current.kind]
                    category = st.selectbox("Category", names, index=names.index(current.category) if current.category in names else 0)
                    methods = [p.name for p in store.payment_methods]
                    method = st.selectbox("Payment method", methods, index=methods.index(current.payment_method) if current.payment_method in methods else 0)
                description = st.text_input("Description", value=current.description)
                if st.form_submit_button("Save"):
                    result = validate_transaction_input({
                        "kind": current.kind, "amount": amount, "category": category,
                        "payment_method": method, "date": occurred, "description": description,
                    })
                    if not show_errors(result):
                        store.update_transaction(replace(current, **result.get_or_else(None)))
                        st.success("✅ Transaction updated!")
                        st.rerun()

    if listed:
        csv = transactions_frame(listed).to_csv(index=False)
        st.download_button("⬇ Download CSV", csv, file_name=f"transactions-{date.today()}.csv")
        snapshot = store.export_snapshot(listed)
        st.download_button("⬇ Download JSON", json.dumps(snapshot.as_dict(), indent=2, ensure_ascii=False),
                           file_name=f"backup-{date.today()}.json")

elif menu == "💰 Budgets":
    st.title("💰 Budgets")
    with_budget, without_budget = split_categories(store.categories, store.budgets)

    with st.form("set_budget"):
        options = {c.name: c.id for c in with_budget + without_budget}
        name = st.selectbox("Category", [""] + list(options))
        limit = st.number_input("Limit", min_value=0.0, step=50.0, format="%.2f")
        period = st.selectbox("Period", BUDGET_PERIODS)
        if st.form_submit_button("Save budget"):
            result = validate_budget_input(
                {"category_id": options.get(name), "limit": limit, "period": period}, store.categories
            )
            if not show_errors(result):
                store.set_budget(**result.get_or_else(None))
                st.success("Budget saved")
                st.rerun()

    df_progress = progress_frame(store.summary.budget_progress)
    if not df_progress.empty:
        fig = px.bar(df_progress, x="category", y=["spent", "remaining"], title="Budget usage this month")
        st.plotly_chart(fig, use_container_width=True)
        for c in with_budget:
            p = store.summary.progress_for(c.id)
            col_a, col_b = st.columns([5, 1])
            col_a.write(f"{c.icon} **{c.name}** {STATUS_ICONS[p.status]} "
                        f"{money(p.spent)} / {money(p.budget)}, {money(p.remaining)} left")
            col_a.progress(min(p.percentage, 100.0) / 100)
            if col_b.button("Remove", key=f"rm_budget_{c.id}"):
                store.delete_budget(c.id)
                st.rerun()
    if without_budget:
        st.caption("Without budget: " + ", ".join(c.name for c in without_budget))

elif menu == "🗂 Categories":
    st.title("🗂 Categories")
    with st.form("add_category", clear_on_submit=True):
        col1, col2, col3, col4 = st.columns(4)
        name = col1.text_input("Name")
        kind = col2.selectbox("Type", KINDS, index=1)
        color = col3.color_picker("Color", "#6b7280")
        icon = col4.text_input("Icon", "📁")
        if st.form_submit_button("Add category"):
            result = validate_category_input({"name": name, "kind": kind, "color": color, "icon": icon})
            if not show_errors(result):
                store.add_category(**result.get_or_else(None))
                st.rerun()

    if store.categories:
        with st.expander("✏️ Edit category"):
            by_label = {f"{c.icon} {c.name}": c for c in store.categories}
            current = by_label[st.selectbox("Category", list(by_label))]
            with st.form("edit_category"):
                col1, col2, col3 = st.columns(3)
                name = col1.text_input("Name", value=current.name)
                color = col2.color_picker("Color", current.color)
                icon = col3.text_input("Icon", current.icon)
                if st.form_submit_button("Save category"):
                    result = validate_category_input({"name": name, "kind": current.kind, "color": color, "icon": icon})
                    if not show_errors(result):
                        store.update_category(replace(current, **result.get_or_else(None)))
                        st.rerun()

    for kind in (EXPENSE, INCOME):
        st.subheader("Expenses" if kind == EXPENSE else "Income")
        for c in (c for c in store.categories if c.kind == kind):
            col_a, col_b = st.columns([5, 1])
            col_a.markdown(f"{c.icon} <span style='color:{c.color}'>**{c.name}**</span>", unsafe_allow_html=True)
            if col_b.button("🗑", key=f"del_cat_{c.id}"):
                store.delete_category(c.id)
                st.rerun()

elif menu == "📑 Reports":
    st.title("📑 Reports")
    period = st.selectbox("Period", list(PERIODS), format_func=lambda p: f"Last {PERIODS[p]} days")
    report = period_report(store.transactions, period)

    k1, k2, k3, k4 = st.columns(4)
    k1.metric("Income", money(report.total_income))
    k2.metric("Expenses", money(report.total_expenses))
    k3.metric("Balance", money(report.balance))
    k4.metric("Average expense", money(report.average_expense))

    chart = st.radio("Chart", ["Categories", "Monthly"], horizontal=True)
    if chart == "Categories":
        df_cat = categories_frame(report.top_categories)
        if not df_cat.empty:
            st.plotly_chart(px.pie(df_cat, values="total", names="category"), use_container_width=True)
        else:
            st.info("No expenses in this period")
    else:
        df_month = monthly_frame(report.monthly)
        fig = px.bar(df_month, x="month", y=["income", "expenses"], barmode="group")
        fig.add_trace(go.Scatter(x=df_month["month"], y=df_month["balance"], mode="lines+markers", name="balance"))
        st.plotly_chart(fig, use_container_width=True)

    st.subheader("Latest transactions")
    df_recent = transactions_frame(report.recent)
    if not df_recent.empty:
        df_recent["date"] = pd.to_datetime(df_recent["date"]).dt.strftime("%d/%m/%Y")
        st.table(df_recent[["date", "kind", "category", "amount"]])
        st.download_button("⬇ Download CSV", transactions_frame(report.transactions).to_csv(index=False),
                           file_name=f"report-{period}-{date.today()}.csv")
