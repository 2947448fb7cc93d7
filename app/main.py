"""
Streamlit Frontend for Wealth Dashboard

The household finance dashboard: accounts, categories, transactions,
budgets, investments and reports.

DESIGN PRINCIPLES:
1. Writes go through mutation actions only
2. Every action result is shown (success or the error message)
3. Cached reads are dropped by invalidation signals, not by hand
4. One RequestCache per script run

Each Streamlit rerun is one request. Cached loaders are registered in the
TagRegistry under the partitions they read, so a successful action clears
exactly the loaders that depend on the mutated entity.
"""

import asyncio
from datetime import date
from decimal import Decimal

import streamlit as st

from wealth_dashboard.actions import (
    advance_recurring_series_action,
    create_account_action,
    create_budget_action,
    create_category_action,
    create_investment_action,
    create_recurring_series_action,
    create_transaction_action,
    delete_account_action,
    delete_budget_action,
    delete_category_action,
    delete_investment_action,
    delete_recurring_series_action,
    delete_transaction_action,
    update_account_action,
    update_category_action,
)
from wealth_dashboard.config import get_settings, validate_all_settings
from wealth_dashboard.models import (
    AccountType,
    BudgetPeriod,
    MutationResult,
    RecurrenceFrequency,
    TransactionType,
)
from wealth_dashboard.orchestrator import DashboardComponents, create_app_components
from wealth_dashboard.services.storage import RequestCache
from wealth_dashboard.state import ALL_MEMBERS
from wealth_dashboard.validation import is_valid_color
from wealth_dashboard.views import calculate_forecast


# Page configuration
st.set_page_config(
    page_title="Wealth Dashboard",
    page_icon="💶",
    layout="wide",
    initial_sidebar_state="expanded",
)

# Custom CSS for better UX
st.markdown("""
<style>
    .stButton>button {
        width: 100%;
        margin-top: 10px;
    }
    .success-box {
        padding: 20px;
        background-color: #d4edda;
        border-radius: 10px;
        border-left: 5px solid #28a745;
        margin: 10px 0;
    }
    .error-box {
        padding: 20px;
        background-color: #f8d7da;
        border-radius: 10px;
        border-left: 5px solid #dc3545;
        margin: 10px 0;
    }
    .big-number {
        font-size: 2.5em;
        font-weight: bold;
        color: #2c3e50;
    }
</style>
""", unsafe_allow_html=True)


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


@st.cache_resource
def get_components() -> DashboardComponents:
    """Get or create application components (cached)."""
    return create_app_components()


def money(amount) -> str:
    currency = get_settings().app.currency
    return f"{Decimal(amount):,.2f} {currency}"


# =============================================================================
# CACHED LOADERS
# =============================================================================
# Leading underscores keep Streamlit from hashing the components and the
# request cache; the cache key is the user id (and filter) alone.

@st.cache_data(show_spinner=False)
def load_accounts_page(_components, _cache, user_id, selected_user_id):
    return run_async(_components.pages.accounts_page(user_id, _cache, selected_user_id))


@st.cache_data(show_spinner=False)
def load_categories(_components, _cache, user_id):
    return run_async(_components.pages.categories_page(user_id, _cache))


@st.cache_data(show_spinner=False)
def load_transactions(_components, _cache, user_id):
    return run_async(_components.pages.transactions_page(user_id, _cache))


@st.cache_data(show_spinner=False)
def load_budgets(_components, _cache, user_id):
    return run_async(_components.pages.budgets_page(user_id, _cache))


@st.cache_data(show_spinner=False)
def load_recurring(_components, _cache, user_id, today):
    return run_async(_components.pages.recurring_page(user_id, _cache, today))


@st.cache_data(show_spinner=False)
def load_investments(_components, _cache, user_id):
    return run_async(_components.pages.investments_page(user_id, _cache))


@st.cache_data(show_spinner=False)
def load_reports(_components, _cache, user_id):
    return run_async(_components.pages.reports_page(user_id, _cache))


def register_cached_loaders(components: DashboardComponents) -> None:
    """Subscribe each loader's clear() to the partitions it reads."""
    registry = components.tag_registry
    registry.register(("accounts", "transactions", "dashboard"), load_accounts_page.clear)
    registry.register("categories", load_categories.clear)
    registry.register("transactions", load_transactions.clear)
    registry.register(("budgets", "transactions"), load_budgets.clear)
    registry.register("investments", load_investments.clear)
    registry.register(("recurring", "accounts"), load_recurring.clear)
    registry.register(("reports", "dashboard"), load_reports.clear)


def show_result(result: MutationResult, success_message: str) -> None:
    """Render an action result. On success, rerun so invalidated views reload."""
    if result.success:
        st.session_state.flash = success_message
        st.rerun()
    st.markdown(f"""
    <div class="error-box">
        <h4>❌ Could not save</h4>
        <p>{result.error}</p>
    </div>
    """, unsafe_allow_html=True)


def main():
    """Main application entry point."""
    try:
        components = get_components()
    except Exception as e:
        st.error(f"Failed to initialize: {e}")
        st.stop()

    register_cached_loaders(components)
    user_id = components.default_user_id
    cache = RequestCache()

    # Sidebar navigation
    st.sidebar.title("💶 Wealth Dashboard")
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navigate to:",
        [
            "🏠 Dashboard",
            "🏦 Accounts",
            "🏷️ Categories",
            "💸 Transactions",
            "🎯 Budgets",
            "🔁 Recurring",
            "📈 Investments",
            "📊 Reports",
            "⚙️ Settings",
        ],
        index=0,
    )

    st.sidebar.markdown("---")
    render_member_filter(components, cache, user_id)

    flash = st.session_state.pop("flash", None)
    if flash:
        st.success(flash)

    # Route to appropriate page
    if page == "🏠 Dashboard":
        render_dashboard_page(components, cache, user_id)
    elif page == "🏦 Accounts":
        render_accounts_page(components, cache, user_id)
    elif page == "🏷️ Categories":
        render_categories_page(components, cache, user_id)
    elif page == "💸 Transactions":
        render_transactions_page(components, cache, user_id)
    elif page == "🎯 Budgets":
        render_budgets_page(components, cache, user_id)
    elif page == "🔁 Recurring":
        render_recurring_page(components, cache, user_id)
    elif page == "📈 Investments":
        render_investments_page(components, cache, user_id)
    elif page == "📊 Reports":
        render_reports_page(components, cache, user_id)
    elif page == "⚙️ Settings":
        render_settings_page(components)


def render_member_filter(components: DashboardComponents, cache: RequestCache, user_id: str):
    """Sidebar member filter, persisted across sessions."""
    store = components.filter_store
    view = load_accounts_page(components, cache, user_id, None)
    members = sorted({account.user_id for account in view.sorted_accounts})
    options = [ALL_MEMBERS] + members

    current = store.state.selected_group_filter
    if current not in options:
        options.append(current)

    selected = st.sidebar.selectbox(
        "Show",
        options=options,
        index=options.index(current),
        format_func=lambda x: "All members" if x == ALL_MEMBERS else x,
    )
    if selected != current:
        store.set_filter(selected)
        st.rerun()


def render_dashboard_page(components: DashboardComponents, cache: RequestCache, user_id: str):
    """Render the overview page."""
    st.title("🏠 Dashboard")

    selected = components.filter_store.state.selected_user_id
    view = load_accounts_page(components, cache, user_id, selected)
    reports = load_reports(components, cache, user_id)

    col1, col2, col3 = st.columns(3)
    with col1:
        st.markdown("**Total balance**")
        st.markdown(f'<div class="big-number">{money(view.total_balance)}</div>', unsafe_allow_html=True)
    with col2:
        st.metric("Earned", money(reports.overview.total_earned))
    with col3:
        st.metric("Spent", money(reports.overview.total_spent))

    st.markdown("---")
    st.subheader("Accounts")
    st.caption(
        f"{view.total_accounts} accounts · {view.positive_accounts} positive · "
        f"{view.negative_accounts} negative"
    )
    if not view.sorted_accounts:
        st.info("No accounts yet. Add your first one on the Accounts page.")
    for account in view.sorted_accounts:
        st.markdown(f"- **{account.name}** ({account.type.value})")


def render_accounts_page(components: DashboardComponents, cache: RequestCache, user_id: str):
    """Render the accounts page."""
    st.title("🏦 Accounts")

    with st.expander("➕ Add account"):
        with st.form("create_account"):
            name = st.text_input("Name *")
            account_type = st.selectbox(
                "Type *",
                options=list(AccountType),
                format_func=lambda x: x.value.title(),
            )
            balance = st.number_input("Opening balance", value=0.0, step=0.01, format="%.2f")
            if st.form_submit_button("Save", type="primary"):
                result = run_async(create_account_action(
                    components.action_context(user_id),
                    {"name": name, "type": account_type.value, "balance": Decimal(str(balance))},
                ))
                show_result(result, f"Account '{name}' created")

    selected = components.filter_store.state.selected_user_id
    view = load_accounts_page(components, cache, user_id, selected)

    for account in view.sorted_accounts:
        with st.expander(f"{account.name} · {account.type.value.title()}"):
            new_name = st.text_input("Name", value=account.name, key=f"name_{account.id}")
            col1, col2 = st.columns(2)
            with col1:
                if st.button("💾 Rename", key=f"rename_{account.id}"):
                    result = run_async(update_account_action(
                        components.action_context(user_id), account.id, {"name": new_name},
                    ))
                    show_result(result, "Account updated")
            with col2:
                if st.button("🗑️ Delete", key=f"delete_{account.id}"):
                    result = run_async(delete_account_action(
                        components.action_context(user_id), account.id,
                    ))
                    show_result(result, "Account deleted")


def render_categories_page(components: DashboardComponents, cache: RequestCache, user_id: str):
    """Render the categories page."""
    st.title("🏷️ Categories")

    with st.expander("➕ Add category"):
        with st.form("create_category"):
            label = st.text_input("Label *")
            key = st.text_input("Key *", help="Short identifier, e.g. groceries")
            icon = st.text_input("Icon *", value="🏷️")
            color = st.color_picker("Color", value="#3B82F6")
            if st.form_submit_button("Save", type="primary"):
                result = run_async(create_category_action(
                    components.action_context(user_id),
                    {"label": label, "key": key, "icon": icon, "color": color},
                ))
                show_result(result, f"Category '{label}' created")

    categories = load_categories(components, cache, user_id)
    if not categories:
        st.info("No categories yet.")

    for category in categories:
        with st.expander(f"{category.icon} {category.label}"):
            new_color = st.text_input("Color", value=category.color, key=f"color_{category.id}")
            if not is_valid_color(new_color):
                st.warning("Use a hex color such as #3B82F6")
            col1, col2 = st.columns(2)
            with col1:
                if st.button("💾 Save", key=f"save_{category.id}"):
                    result = run_async(update_category_action(
                        components.action_context(user_id), category.id, {"color": new_color},
                    ))
                    show_result(result, "Category updated")
            with col2:
                if st.button("🗑️ Delete", key=f"delete_{category.id}"):
                    result = run_async(delete_category_action(
                        components.action_context(user_id), category.id,
                    ))
                    show_result(result, "Category deleted")


def render_transactions_page(components: DashboardComponents, cache: RequestCache, user_id: str):
    """Render the transactions page."""
    st.title("💸 Transactions")

    accounts = load_accounts_page(components, cache, user_id, None).sorted_accounts
    categories = load_categories(components, cache, user_id)

    if not accounts:
        st.info("Add an account before recording transactions.")
        return

    account_names = {account.id: account.name for account in accounts}

    with st.expander("➕ Add transaction"):
        with st.form("create_transaction"):
            description = st.text_input("Description *")
            col1, col2 = st.columns(2)
            with col1:
                amount = st.number_input("Amount *", min_value=0.0, step=0.01, format="%.2f")
                tx_type = st.selectbox(
                    "Type *",
                    options=list(TransactionType),
                    format_func=lambda x: x.value.title(),
                )
                occurred_on = st.date_input("Date *", value=date.today())
            with col2:
                account_id = st.selectbox(
                    "Account *", options=list(account_names), format_func=account_names.get,
                )
                to_account_id = st.selectbox(
                    "To account (transfers)",
                    options=[None] + list(account_names),
                    format_func=lambda x: "-" if x is None else account_names[x],
                )
                category = st.selectbox(
                    "Category *",
                    options=[c.key for c in categories] or ["other"],
                )
            if st.form_submit_button("Save", type="primary"):
                result = run_async(create_transaction_action(
                    components.action_context(user_id),
                    {
                        "description": description,
                        "amount": Decimal(str(amount)),
                        "type": tx_type.value,
                        "category": category,
                        "occurred_on": occurred_on,
                        "account_id": account_id,
                        "to_account_id": to_account_id,
                    },
                ))
                show_result(result, "Transaction recorded")

    for transaction in load_transactions(components, cache, user_id):
        col1, col2, col3, col4 = st.columns([2, 4, 2, 1])
        col1.write(transaction.occurred_on.strftime("%d %b %Y"))
        col2.write(f"{transaction.description} · {transaction.category}")
        col3.write(money(transaction.amount))
        if col4.button("🗑️", key=f"delete_{transaction.id}"):
            result = run_async(delete_transaction_action(
                components.action_context(user_id), transaction.id,
            ))
            show_result(result, "Transaction deleted")


def render_budgets_page(components: DashboardComponents, cache: RequestCache, user_id: str):
    """Render the budgets page."""
    st.title("🎯 Budgets")

    categories = load_categories(components, cache, user_id)

    with st.expander("➕ Add budget"):
        with st.form("create_budget"):
            description = st.text_input("Description")
            amount = st.number_input("Amount *", min_value=0.0, step=1.0, format="%.2f")
            period = st.selectbox(
                "Period", options=list(BudgetPeriod), format_func=lambda x: x.value.title(),
            )
            keys = st.multiselect("Categories *", options=[c.key for c in categories])
            if st.form_submit_button("Save", type="primary"):
                result = run_async(create_budget_action(
                    components.action_context(user_id),
                    {
                        "description": description or None,
                        "amount": Decimal(str(amount)),
                        "period": period.value,
                        "categories": keys,
                    },
                ))
                show_result(result, "Budget created")

    page = load_budgets(components, cache, user_id)
    for budget in page.budgets:
        spent = page.spent_by_budget.get(str(budget.id), Decimal("0"))
        progress = float(min(spent / budget.amount, 1)) if budget.amount else 0.0
        st.markdown(f"**{budget.description or ', '.join(budget.categories)}** ({budget.period.value})")
        st.progress(progress, text=f"{money(spent)} of {money(budget.amount)}")
        if st.button("🗑️ Delete", key=f"delete_{budget.id}"):
            result = run_async(delete_budget_action(components.action_context(user_id), budget.id))
            show_result(result, "Budget deleted")


def render_recurring_page(components: DashboardComponents, cache: RequestCache, user_id: str):
    """Render recurring series with what is due now."""
    st.title("🔁 Recurring")

    accounts = load_accounts_page(components, cache, user_id, None).sorted_accounts
    categories = load_categories(components, cache, user_id)
    if not accounts:
        st.info("Add an account before creating recurring series.")
        return
    account_names = {account.id: account.name for account in accounts}

    with st.expander("➕ Add recurring series"):
        with st.form("create_recurring_series"):
            description = st.text_input("Description *")
            col1, col2 = st.columns(2)
            with col1:
                amount = st.number_input("Amount *", min_value=0.0, step=0.01, format="%.2f")
                tx_type = st.selectbox(
                    "Type *",
                    options=[TransactionType.EXPENSE, TransactionType.INCOME],
                    format_func=lambda x: x.value.title(),
                )
                frequency = st.selectbox(
                    "Frequency", options=list(RecurrenceFrequency),
                    index=list(RecurrenceFrequency).index(RecurrenceFrequency.MONTHLY),
                    format_func=lambda x: x.value.title(),
                )
            with col2:
                account_id = st.selectbox(
                    "Account *", options=list(account_names), format_func=account_names.get,
                )
                category = st.selectbox(
                    "Category *", options=[c.key for c in categories] or ["other"],
                )
                start_date = st.date_input("First due date *", value=date.today())
            if st.form_submit_button("Save", type="primary"):
                result = run_async(create_recurring_series_action(
                    components.action_context(user_id),
                    {
                        "description": description,
                        "amount": Decimal(str(amount)),
                        "type": tx_type.value,
                        "category": category,
                        "frequency": frequency.value,
                        "account_id": account_id,
                        "start_date": start_date,
                    },
                ))
                show_result(result, "Recurring series created")

    page = load_recurring(components, cache, user_id, date.today())
    col1, col2, col3 = st.columns(3)
    col1.metric("Active series", page.summary.active_count)
    col2.metric("Monthly income", money(page.summary.monthly_income))
    col3.metric("Monthly expenses", money(page.summary.monthly_expense))

    if page.summary.due:
        st.subheader("Due now")
        for series in page.summary.due:
            col1, col2 = st.columns([5, 1])
            col1.write(f"{series.description} · {money(series.amount)} · due {series.due_date:%d %b %Y}")
            if col2.button("✅ Booked", key=f"advance_{series.id}"):
                result = run_async(advance_recurring_series_action(
                    components.action_context(user_id), series.id,
                ))
                show_result(result, "Series moved to its next due date")

    st.subheader("All series")
    for series in page.series:
        col1, col2, col3, col4 = st.columns([4, 2, 2, 1])
        status = "" if series.is_active else " (ended)"
        col1.write(f"{series.description}{status} · {series.frequency.value}")
        col2.write(money(series.amount))
        col3.write(f"next {series.due_date:%d %b %Y}")
        if col4.button("🗑️", key=f"delete_{series.id}"):
            result = run_async(delete_recurring_series_action(
                components.action_context(user_id), series.id,
            ))
            show_result(result, "Recurring series deleted")


def render_investments_page(components: DashboardComponents, cache: RequestCache, user_id: str):
    """Render the investments page and the forecast sandbox."""
    st.title("📈 Investments")

    with st.expander("➕ Add investment"):
        with st.form("create_investment"):
            name = st.text_input("Name *")
            symbol = st.text_input("Symbol *", help="Exchange ticker, e.g. VWCE")
            amount = st.number_input("Amount invested *", min_value=0.0, step=1.0, format="%.2f")
            shares = st.number_input("Shares acquired *", min_value=0.0, step=0.0001, format="%.4f")
            if st.form_submit_button("Save", type="primary"):
                result = run_async(create_investment_action(
                    components.action_context(user_id),
                    {
                        "name": name,
                        "symbol": symbol,
                        "amount": Decimal(str(amount)),
                        "shares_acquired": Decimal(str(shares)),
                    },
                ))
                show_result(result, f"Investment '{name}' added")

    summary = load_investments(components, cache, user_id)
    col1, col2, col3 = st.columns(3)
    col1.metric("Invested", money(summary.total_invested))
    col2.metric("Current value", money(summary.total_current_value))
    col3.metric("Return", f"{summary.total_return_percent:.2f}%")

    for position in summary.positions:
        investment = position.investment
        col1, col2 = st.columns([5, 1])
        col1.write(f"**{investment.symbol}** · {investment.name} · {money(investment.amount)}")
        if col2.button("🗑️", key=f"delete_{investment.id}"):
            result = run_async(delete_investment_action(
                components.action_context(user_id), investment.id,
            ))
            show_result(result, "Investment deleted")

    st.markdown("---")
    st.subheader("🧮 Compound interest sandbox")
    app_settings = get_settings().app
    amount = st.number_input("Starting amount", min_value=0.0, value=10000.0, step=500.0)
    rate = st.slider("Yearly growth", 0.0, 0.15, app_settings.forecast_rate, step=0.005)
    years = st.slider("Years", 1, 50, app_settings.forecast_years)
    points = calculate_forecast(amount, years=years, rate=rate)
    st.line_chart({"amount": [p.amount for p in points]})
    st.caption(f"{points[-1].year}: {money(points[-1].amount)}")


def render_reports_page(components: DashboardComponents, cache: RequestCache, user_id: str):
    """Render the reports page."""
    st.title("📊 Reports")

    reports = load_reports(components, cache, user_id)
    overview = reports.overview

    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Earned", money(overview.total_earned))
    col2.metric("Spent", money(overview.total_spent))
    col3.metric("Transferred", money(overview.total_transferred))
    col4.metric("Net", money(overview.total_balance))

    st.markdown("---")
    st.subheader("Spending by category")
    if not reports.breakdown:
        st.info("No transactions yet.")
    for item in reports.breakdown:
        st.markdown(f"- **{item.category}**: {money(item.net)} ({item.percentage:.1f}%)")


def render_settings_page(components: DashboardComponents):
    """Render the settings page."""
    st.title("⚙️ Settings")

    st.markdown("### Configuration Status")

    status = validate_all_settings()

    sections = [
        ("Database", "database"),
        ("Local state", "storage"),
        ("Application", "app"),
    ]

    for name, key in sections:
        if status.get(key, False):
            st.success(f"✅ {name} - OK")
        else:
            error = status.get(f"{key}_error", "Not configured")
            st.error(f"❌ {name} - {error}")

    st.markdown("---")
    st.markdown("### Member filter")
    state = components.filter_store.state
    st.write(f"Currently showing: **{state.selected_group_filter}**")
    if st.button("Reset filter"):
        components.filter_store.reset()
        st.rerun()

    st.markdown("---")
    st.markdown("### Recent activity")
    events = run_async(components.audit_logger.recent_events(limit=20))
    if not events:
        st.info("No recorded activity yet.")
    for event in events:
        icon = "❌" if event.error_message else "•"
        st.write(f"{icon} {event.timestamp:%d %b %H:%M} · {event.description}")

    st.markdown("---")
    st.markdown("### Configuration")
    st.markdown(
        "To configure the application, create a `.env` file. "
        "See `.env.example` for the available variables."
    )


if __name__ == "__main__":
    main()
