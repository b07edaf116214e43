"""
Streamlit Frontend for the Finance Tracker

A thin presentation layer over MonthlyStore:
- Month navigation (previous / next / jump to any recorded month)
- Summary card with totals and net amount
- One tab each for income, bills and transactions, with add, edit and delete

Forms are checked with EntryValidator before anything is saved. After every
change the page re-fetches the month from the store; nothing is cached
between reruns except the store object itself.
"""

from datetime import date

import streamlit as st

from finance_tracker.config import get_settings, validate_all_settings
from finance_tracker.formatting import format_count, format_currency, format_date
from finance_tracker.models import MonthlyData, TransactionType
from finance_tracker.months import (
    month_label,
    navigation_months,
    next_month,
    previous_month,
)
from finance_tracker.reports import (
    bill_status,
    due_label,
    savings_rate,
    top_categories,
    transaction_type_counts,
)
from finance_tracker.store import MonthlyStore, create_store
from finance_tracker.validation import EntryValidator


# Page configuration
st.set_page_config(
    page_title="Finance Tracker",
    page_icon="💰",
    layout="wide",
    initial_sidebar_state="expanded",
)


@st.cache_resource
def get_store() -> MonthlyStore:
    """Get or create the store (cached)."""
    return create_store()


def currency(amount) -> str:
    return format_currency(amount, get_settings().app.currency_code)


def show_validation_errors(validator: EntryValidator, result) -> bool:
    """Show issues; returns True when the form may be saved."""
    if result.issues:
        message = validator.get_user_friendly_summary(result)
        if result.has_errors:
            st.error(message)
        else:
            st.warning(message)
    return result.is_valid


def main():
    """Main application entry point."""
    store = get_store()
    validator = EntryValidator()

    if "month" not in st.session_state:
        st.session_state.month = store.current_month()

    # Sidebar navigation
    st.sidebar.title("💰 Finance Tracker")
    st.sidebar.markdown("---")
    render_month_navigation(store)
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navigate to:",
        ["📊 Overview", "⚙️ Settings"],
        index=0,
    )

    if page == "📊 Overview":
        render_overview_page(store, validator)
    elif page == "⚙️ Settings":
        render_settings_page()


def render_month_navigation(store: MonthlyStore):
    """Previous/next buttons and a picker over every recorded month."""
    month = st.session_state.month

    col1, col2 = st.sidebar.columns(2)
    with col1:
        if st.button("◀ Previous"):
            st.session_state.month = previous_month(month)
            st.rerun()
    with col2:
        if st.button("Next ▶"):
            st.session_state.month = next_month(month)
            st.rerun()

    options = navigation_months(store.get_available_months(), month)
    picked = st.sidebar.selectbox(
        "Month",
        options=options,
        index=options.index(month),
        format_func=month_label,
    )
    if picked != month:
        st.session_state.month = picked
        st.rerun()

    if month != store.current_month():
        if st.sidebar.button("Go to current month"):
            st.session_state.month = store.current_month()
            st.rerun()


def render_summary(monthly: MonthlyData):
    summary = monthly.summary

    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Total Income", currency(summary.total_income), format_count(len(monthly.income)))
    col2.metric("Total Bills", currency(summary.total_bills), format_count(len(monthly.bills)))
    col3.metric(
        "Total Transactions",
        currency(summary.total_transactions),
        format_count(len(monthly.transactions)),
    )
    rate = savings_rate(summary)
    col4.metric(
        "Net Amount",
        currency(summary.net_amount),
        f"{rate}% of income" if rate is not None else None,
    )


def render_overview_page(store: MonthlyStore, validator: EntryValidator):
    month = st.session_state.month
    monthly = store.get_monthly_data(month)

    st.title(f"📊 {month_label(month)}")
    render_summary(monthly)
    st.markdown("---")

    income_tab, bills_tab, transactions_tab = st.tabs(
        ["💰 Income", "📄 Bills", "💳 Transactions"]
    )
    with income_tab:
        render_income_tab(store, validator, monthly)
    with bills_tab:
        render_bills_tab(store, validator, monthly)
    with transactions_tab:
        render_transactions_tab(store, validator, monthly)


def render_income_tab(store: MonthlyStore, validator: EntryValidator, monthly: MonthlyData):
    month = monthly.month

    with st.expander("➕ Add income"):
        with st.form("add_income", clear_on_submit=True):
            source = st.text_input("Source *", placeholder="Salary")
            amount = st.number_input("Amount *", min_value=0.0, step=0.01, format="%.2f")
            entry_date = st.date_input("Date *", value=date.today())
            description = st.text_input("Description *")
            if st.form_submit_button("Save", type="primary"):
                payload = {
                    "source": source,
                    "amount": str(amount),
                    "date": entry_date,
                    "description": description,
                }
                if show_validation_errors(validator, validator.validate_income(payload, month)):
                    store.add_income(month, payload)
                    st.rerun()

    if not monthly.income:
        st.info("No income recorded yet. Add your first income to get started!")
        return

    for entry in monthly.income:
        col1, col2, col3, col4, col5 = st.columns([3, 2, 2, 1, 1])
        col1.markdown(f"**{entry.source}**  \n{entry.description}")
        col2.markdown(f"**{currency(entry.amount)}**")
        col3.markdown(format_date(entry.entry_date))
        with col4.popover("✏️"):
            render_income_edit(store, validator, month, entry)
        if col5.button("🗑️", key=f"delete_income_{entry.id}"):
            store.delete_income(month, entry.id)
            st.rerun()


def render_bills_tab(store: MonthlyStore, validator: EntryValidator, monthly: MonthlyData):
    month = monthly.month
    today = date.today()
    status = bill_status(monthly, today, get_settings().app.due_soon_days)

    if status.total_count:
        st.markdown(
            f"**{status.paid_count}** paid, **{status.unpaid_count}** unpaid "
            f"({currency(status.unpaid_total)} outstanding)"
        )
    for bill in status.upcoming:
        st.warning(f"{bill.name}: {currency(bill.amount)} - {due_label(bill, today)}")

    with st.expander("➕ Add bill"):
        with st.form("add_bill", clear_on_submit=True):
            name = st.text_input("Bill name *", placeholder="Rent")
            amount = st.number_input("Amount *", min_value=0.0, step=0.01, format="%.2f")
            col1, col2 = st.columns(2)
            with col1:
                entry_date = st.date_input("Date *", value=today)
            with col2:
                due_date = st.date_input("Due date *", value=today)
            description = st.text_input("Description *")
            if st.form_submit_button("Save", type="primary"):
                payload = {
                    "name": name,
                    "amount": str(amount),
                    "date": entry_date,
                    "dueDate": due_date,
                    "description": description,
                }
                if show_validation_errors(validator, validator.validate_bill(payload, month)):
                    store.add_bill(month, payload)
                    st.rerun()

    if not monthly.bills:
        st.info("No bills recorded yet. Add your first bill to get started!")
        return

    for bill in monthly.bills:
        col1, col2, col3, col4, col5, col6 = st.columns([3, 2, 2, 2, 1, 1])
        col1.markdown(f"**{bill.name}**  \n{bill.description}")
        col2.markdown(f"**{currency(bill.amount)}**")
        col3.markdown(f"Due {format_date(bill.due_date)}")
        if bill.is_paid:
            paid_on = f" {format_date(bill.paid_date)}" if bill.paid_date else ""
            col4.markdown(f"✅ Paid{paid_on}")
            if col4.button("Mark unpaid", key=f"unpay_bill_{bill.id}"):
                store.update_bill(month, bill.id, {"isPaid": False, "paidDate": None})
                st.rerun()
        else:
            col4.markdown(due_label(bill, today))
            if col4.button("Mark paid", key=f"pay_bill_{bill.id}"):
                store.update_bill(month, bill.id, {"isPaid": True, "paidDate": today})
                st.rerun()
        with col5.popover("✏️"):
            render_bill_edit(store, validator, month, bill)
        if col6.button("🗑️", key=f"delete_bill_{bill.id}"):
            store.delete_bill(month, bill.id)
            st.rerun()


def render_transactions_tab(store: MonthlyStore, validator: EntryValidator, monthly: MonthlyData):
    month = monthly.month

    insights = top_categories(monthly)
    if insights:
        st.markdown("#### Top Categories")
        for insight in insights:
            st.markdown(f"- {insight.category}: **{currency(insight.total)}** ({format_count(insight.count)})")
        counts = transaction_type_counts(monthly)
        st.caption(f"{counts['expense']} expenses, {counts['other']} other")

    with st.expander("➕ Add transaction"):
        with st.form("add_transaction", clear_on_submit=True):
            kind = st.radio(
                "Type",
                options=list(TransactionType),
                format_func=lambda x: x.value.title(),
                horizontal=True,
            )
            category = st.selectbox("Category *", options=store.get_default_categories())
            amount = st.number_input("Amount *", min_value=0.0, step=0.01, format="%.2f")
            entry_date = st.date_input("Date *", value=date.today())
            description = st.text_input("Description *")
            if st.form_submit_button("Save", type="primary"):
                payload = {
                    "type": kind,
                    "category": category,
                    "amount": str(amount),
                    "date": entry_date,
                    "description": description,
                }
                if show_validation_errors(validator, validator.validate_transaction(payload, month)):
                    store.add_transaction(month, payload)
                    st.rerun()

    if not monthly.transactions:
        st.info("No transactions recorded yet. Add your first transaction to get started!")
        return

    for entry in monthly.transactions:
        col1, col2, col3, col4, col5 = st.columns([3, 2, 2, 1, 1])
        col1.markdown(f"**{entry.category}** ({entry.type.value})  \n{entry.description}")
        col2.markdown(f"**{currency(entry.amount)}**")
        col3.markdown(format_date(entry.entry_date))
        with col4.popover("✏️"):
            render_transaction_edit(store, validator, month, entry)
        if col5.button("🗑️", key=f"delete_transaction_{entry.id}"):
            store.delete_transaction(month, entry.id)
            st.rerun()


def render_income_edit(store: MonthlyStore, validator: EntryValidator, month: str, entry):
    with st.form(f"edit_income_{entry.id}"):
        source = st.text_input("Source *", value=entry.source)
        amount = st.number_input(
            "Amount *", value=float(entry.amount), min_value=0.0, step=0.01, format="%.2f"
        )
        entry_date = st.date_input("Date *", value=entry.entry_date)
        description = st.text_input("Description *", value=entry.description)
        if st.form_submit_button("Update", type="primary"):
            payload = {
                "source": source,
                "amount": str(amount),
                "date": entry_date,
                "description": description,
            }
            if show_validation_errors(validator, validator.validate_income(payload, month)):
                store.update_income(month, entry.id, payload)
                st.rerun()


def render_bill_edit(store: MonthlyStore, validator: EntryValidator, month: str, bill):
    with st.form(f"edit_bill_{bill.id}"):
        name = st.text_input("Bill name *", value=bill.name)
        amount = st.number_input(
            "Amount *", value=float(bill.amount), min_value=0.0, step=0.01, format="%.2f"
        )
        entry_date = st.date_input("Date *", value=bill.entry_date)
        due_date = st.date_input("Due date *", value=bill.due_date)
        description = st.text_input("Description *", value=bill.description)
        if st.form_submit_button("Update", type="primary"):
            payload = {
                "name": name,
                "amount": str(amount),
                "date": entry_date,
                "dueDate": due_date,
                "description": description,
                "isPaid": bill.is_paid,
                "paidDate": bill.paid_date,
            }
            if show_validation_errors(validator, validator.validate_bill(payload, month)):
                store.update_bill(month, bill.id, payload)
                st.rerun()


def render_transaction_edit(store: MonthlyStore, validator: EntryValidator, month: str, entry):
    categories = store.get_default_categories()
    if entry.category not in categories:
        categories = [entry.category] + categories
    with st.form(f"edit_transaction_{entry.id}"):
        kind = st.radio(
            "Type",
            options=list(TransactionType),
            index=list(TransactionType).index(entry.type),
            format_func=lambda x: x.value.title(),
            horizontal=True,
        )
        category = st.selectbox("Category *", options=categories, index=categories.index(entry.category))
        amount = st.number_input(
            "Amount *", value=float(entry.amount), min_value=0.0, step=0.01, format="%.2f"
        )
        entry_date = st.date_input("Date *", value=entry.entry_date)
        description = st.text_input("Description *", value=entry.description)
        if st.form_submit_button("Update", type="primary"):
            payload = {
                "type": kind,
                "category": category,
                "amount": str(amount),
                "date": entry_date,
                "description": description,
            }
            if show_validation_errors(validator, validator.validate_transaction(payload, month)):
                store.update_transaction(month, entry.id, payload)
                st.rerun()


def render_settings_page():
    """Render the settings page."""
    st.title("⚙️ Settings")

    st.markdown("### Configuration Status")

    status = validate_all_settings()

    sections = [
        ("Storage", "storage"),
        ("Google Sheets", "google_sheets"),
        ("Application", "app"),
    ]

    for name, key in sections:
        if key not in status:
            continue
        if status[key]:
            st.success(f"✅ {name} - OK")
        else:
            error = status.get(f"{key}_error", "Not configured")
            st.error(f"❌ {name} - {error}")

    storage = get_settings().storage
    st.markdown("---")
    st.markdown(f"**Backend:** `{storage.backend}`  \n**Document key:** `{storage.document_key}`")
    st.markdown(
        "To configure the application, create a `.env` file. "
        "See `.env.example` for the available variables."
    )


if __name__ == "__main__":
    main()
