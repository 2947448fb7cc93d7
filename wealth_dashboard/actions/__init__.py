"""
Mutation actions.

Each action validates its payload, makes one repository call and returns
a MutationResult. Successful actions emit the invalidation signals listed
in INVALIDATION_TABLE for their entity.
"""

from wealth_dashboard.actions.accounts import (
    create_account_action,
    delete_account_action,
    update_account_action,
)
from wealth_dashboard.actions.budgets import (
    create_budget_action,
    delete_budget_action,
    update_budget_action,
)
from wealth_dashboard.actions.categories import (
    create_category_action,
    delete_category_action,
    update_category_action,
)
from wealth_dashboard.actions.gateway import (
    ActionContext,
    error_message,
    run_mutation,
)
from wealth_dashboard.actions.invalidation import (
    ALL_TAGS,
    INVALIDATION_TABLE,
    Invalidator,
    RecordingInvalidator,
    TagRegistry,
    emit_signals,
    tags_for,
)
from wealth_dashboard.actions.investments import (
    create_investment_action,
    delete_investment_action,
    update_investment_action,
)
from wealth_dashboard.actions.recurring import (
    advance_recurring_series_action,
    create_recurring_series_action,
    delete_recurring_series_action,
    update_recurring_series_action,
)
from wealth_dashboard.actions.transactions import (
    create_transaction_action,
    delete_transaction_action,
    update_transaction_action,
)

__all__ = [
    # Gateway
    "ActionContext",
    "error_message",
    "run_mutation",
    # Invalidation
    "ALL_TAGS",
    "INVALIDATION_TABLE",
    "Invalidator",
    "RecordingInvalidator",
    "TagRegistry",
    "emit_signals",
    "tags_for",
    # Actions
    "advance_recurring_series_action",
    "create_account_action",
    "create_budget_action",
    "create_category_action",
    "create_investment_action",
    "create_recurring_series_action",
    "create_transaction_action",
    "delete_account_action",
    "delete_budget_action",
    "delete_category_action",
    "delete_investment_action",
    "delete_recurring_series_action",
    "delete_transaction_action",
    "update_account_action",
    "update_budget_action",
    "update_category_action",
    "update_investment_action",
    "update_recurring_series_action",
    "update_transaction_action",
]
