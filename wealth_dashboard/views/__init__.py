"""View models: pure functions from repository reads to dashboard figures."""

from wealth_dashboard.views.accounts import (
    AccountsViewModel,
    calculate_account_balances,
    create_accounts_view_model,
)
from wealth_dashboard.views.investments import (
    ForecastPoint,
    InvestmentPosition,
    PortfolioSummary,
    calculate_forecast,
    summarize_portfolio,
)
from wealth_dashboard.views.recurring import (
    RecurringSummary,
    add_months,
    due_series,
    next_due_date,
    summarize_recurring,
)
from wealth_dashboard.views.reports import (
    CategoryBreakdownItem,
    OverviewMetrics,
    calculate_overview_metrics,
    category_breakdown,
)

__all__ = [
    "AccountsViewModel",
    "CategoryBreakdownItem",
    "ForecastPoint",
    "InvestmentPosition",
    "OverviewMetrics",
    "PortfolioSummary",
    "RecurringSummary",
    "add_months",
    "calculate_account_balances",
    "calculate_forecast",
    "calculate_overview_metrics",
    "category_breakdown",
    "create_accounts_view_model",
    "due_series",
    "next_due_date",
    "summarize_portfolio",
    "summarize_recurring",
]
