"""
Main Orchestrator for Wealth Dashboard

This module ties together all the components and defines the two flows
the UI uses:
1. Mutations (payload → action → repository → invalidation signals)
2. Page reads (repositories → request cache → view models)

DESIGN DECISION: The orchestrator enforces the boundaries:
- The UI never talks to repositories for writes, only to actions
- Every read inside one page render shares one RequestCache
- Every mutation is audited

This is the "glue" that keeps the UI free of persistence details.
"""

from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Mapping, Optional, Union

from pydantic import BaseModel

from wealth_dashboard.actions import ActionContext, TagRegistry
from wealth_dashboard.audit import AuditLogger, configure_logging
from wealth_dashboard.config import get_settings
from wealth_dashboard.models.finance import (
    Budget,
    Category,
    RecurringSeries,
    Transaction,
    TransactionType,
)
from wealth_dashboard.services.storage import (
    DatabaseClient,
    RepositorySet,
    RequestCache,
    SQLAuditStorage,
)
from wealth_dashboard.state import FilterStore, LocalStorage
from wealth_dashboard.views import (
    AccountsViewModel,
    CategoryBreakdownItem,
    OverviewMetrics,
    PortfolioSummary,
    RecurringSummary,
    calculate_account_balances,
    calculate_overview_metrics,
    category_breakdown,
    create_accounts_view_model,
    summarize_portfolio,
    summarize_recurring,
)


class ReportsPage(BaseModel):
    overview: OverviewMetrics
    breakdown: list[CategoryBreakdownItem]


class BudgetsPage(BaseModel):
    budgets: list[Budget]
    spent_by_budget: dict[str, Decimal]


class RecurringPage(BaseModel):
    series: list[RecurringSeries]
    summary: RecurringSummary


class PageDataLoader:
    """
    Read-side flow.

    Each method takes the request's RequestCache so that pages reading the
    same entity twice (accounts for the list and for balances) hit the
    database once.
    """

    def __init__(self, repositories: RepositorySet):
        self._repos = repositories

    async def accounts_page(
        self,
        user_id: str,
        cache: RequestCache,
        selected_user_id: Optional[str] = None,
    ) -> AccountsViewModel:
        accounts = await self._repos.accounts.get_by_user(user_id, cache)
        transactions = await self._repos.transactions.get_by_user(user_id, cache)
        balances = calculate_account_balances(accounts, transactions)
        return create_accounts_view_model(accounts, balances, selected_user_id)

    async def categories_page(self, user_id: str, cache: RequestCache) -> list[Category]:
        return await self._repos.categories.get_by_user(user_id, cache)

    async def transactions_page(self, user_id: str, cache: RequestCache) -> list[Transaction]:
        return await self._repos.transactions.get_by_user(user_id, cache)

    async def investments_page(
        self,
        user_id: str,
        cache: RequestCache,
        prices: Optional[Mapping[str, Decimal]] = None,
    ) -> PortfolioSummary:
        investments = await self._repos.investments.get_by_user(user_id, cache)
        return summarize_portfolio(investments, prices or {})

    async def reports_page(self, user_id: str, cache: RequestCache) -> ReportsPage:
        accounts = await self._repos.accounts.get_by_user(user_id, cache)
        transactions = await self._repos.transactions.get_by_user(user_id, cache)
        return ReportsPage(
            overview=calculate_overview_metrics(
                transactions,
                [account.id for account in accounts],
                user_id=user_id,
            ),
            breakdown=category_breakdown(transactions),
        )

    async def budgets_page(self, user_id: str, cache: RequestCache) -> BudgetsPage:
        """Budgets with the expenses booked against their categories."""
        budgets = await self._repos.budgets.get_by_user(user_id, cache)
        transactions = await self._repos.transactions.get_by_user(user_id, cache)
        spent = {}
        for budget in budgets:
            keys = set(budget.categories)
            spent[str(budget.id)] = sum(
                (
                    t.amount for t in transactions
                    if t.type == TransactionType.EXPENSE and t.category in keys
                ),
                Decimal("0"),
            )
        return BudgetsPage(budgets=budgets, spent_by_budget=spent)

    async def recurring_page(
        self,
        user_id: str,
        cache: RequestCache,
        today: Optional[date] = None,
    ) -> RecurringPage:
        series = await self._repos.recurring_series.get_by_user(user_id, cache)
        return RecurringPage(series=series, summary=summarize_recurring(series, today))


class DashboardComponents:
    """Everything the UI needs, built once per process."""

    def __init__(
        self,
        database: DatabaseClient,
        repositories: RepositorySet,
        audit_logger: AuditLogger,
        tag_registry: TagRegistry,
        filter_store: FilterStore,
        default_user_id: str,
    ):
        self.database = database
        self.repositories = repositories
        self.audit_logger = audit_logger
        self.tag_registry = tag_registry
        self.filter_store = filter_store
        self.default_user_id = default_user_id
        self.pages = PageDataLoader(repositories)

    def action_context(self, user_id: Optional[str] = None) -> ActionContext:
        """Fresh context for one mutation, bound to the signed-in user."""
        return ActionContext(
            user_id=user_id or self.default_user_id,
            repositories=self.repositories,
            invalidator=self.tag_registry,
            audit_logger=self.audit_logger,
        )


def create_app_components(
    database_url: Optional[str] = None,
    state_path: Optional[Union[str, Path]] = None,
    use_audit_storage: bool = True,
) -> DashboardComponents:
    """
    Factory function to create all application components.

    Args:
        database_url: Overrides DATABASE_URL (tests pass "sqlite://")
        state_path: Overrides the local storage file location
        use_audit_storage: Whether audit events are persisted to the
                           audit_log table. Set to False for local-only logging.

    Raises:
        PersistenceError: If the database cannot be reached
    """
    settings = get_settings()
    configure_logging(settings.app.log_level)

    database = DatabaseClient(url=database_url)
    database.connect()
    database.create_schema()

    audit_storage = SQLAuditStorage(database) if use_audit_storage else None

    return DashboardComponents(
        database=database,
        repositories=RepositorySet(database),
        audit_logger=AuditLogger(audit_storage),
        tag_registry=TagRegistry(),
        filter_store=FilterStore(LocalStorage(state_path or settings.storage.path)),
        default_user_id=settings.app.dashboard_user_id,
    )
