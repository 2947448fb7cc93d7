"""
Data Models Package

This package contains all Pydantic models used in the Wealth Dashboard.
All data flowing through the system must conform to these schemas.
"""

from wealth_dashboard.models.finance import (
    Account,
    AccountCreate,
    AccountType,
    AccountUpdate,
    Budget,
    BudgetCreate,
    BudgetPeriod,
    BudgetUpdate,
    Category,
    CategoryCreate,
    CategoryUpdate,
    EntityKind,
    EntityRecord,
    Investment,
    InvestmentCreate,
    InvestmentUpdate,
    MutationInput,
    RecurrenceFrequency,
    RecurringSeries,
    RecurringSeriesCreate,
    RecurringSeriesUpdate,
    Transaction,
    TransactionCreate,
    TransactionType,
    TransactionUpdate,
)
from wealth_dashboard.models.results import (
    MutationResult,
    ValidationIssue,
    ValidationResult,
)
from wealth_dashboard.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Finance models
    "Account",
    "AccountCreate",
    "AccountType",
    "AccountUpdate",
    "Budget",
    "BudgetCreate",
    "BudgetPeriod",
    "BudgetUpdate",
    "Category",
    "CategoryCreate",
    "CategoryUpdate",
    "EntityKind",
    "EntityRecord",
    "Investment",
    "InvestmentCreate",
    "InvestmentUpdate",
    "MutationInput",
    "RecurrenceFrequency",
    "RecurringSeries",
    "RecurringSeriesCreate",
    "RecurringSeriesUpdate",
    "Transaction",
    "TransactionCreate",
    "TransactionType",
    "TransactionUpdate",
    # Results
    "MutationResult",
    "ValidationIssue",
    "ValidationResult",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
