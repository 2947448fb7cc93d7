"""Validation helpers: pure predicates and per-entity payload rules."""

from wealth_dashboard.validation.rules import (
    is_non_empty,
    is_valid_color,
    is_valid_currency,
    is_valid_email,
    is_valid_symbol,
)
from wealth_dashboard.validation.validator import (
    PayloadValidator,
    raise_for_issues,
    schedule_issues,
    transfer_issues,
    validate_payload,
    validate_recurring_state,
    validate_transaction_state,
)

__all__ = [
    "PayloadValidator",
    "is_non_empty",
    "is_valid_color",
    "is_valid_currency",
    "is_valid_email",
    "is_valid_symbol",
    "raise_for_issues",
    "schedule_issues",
    "transfer_issues",
    "validate_payload",
    "validate_recurring_state",
    "validate_transaction_state",
]
