"""
Storage Services Package

Provides the abstract repository interface and its SQLAlchemy
implementation. PostgreSQL in production, SQLite locally and in tests.
"""

from wealth_dashboard.services.storage.interface import (
    AuditStorageInterface,
    Repository,
)
from wealth_dashboard.services.storage.request_cache import RequestCache
from wealth_dashboard.services.storage.sqlalchemy_store import (
    AccountRepository,
    BudgetRepository,
    CategoryRepository,
    DatabaseClient,
    InvestmentRepository,
    RecurringSeriesRepository,
    RepositorySet,
    SQLAuditStorage,
    SQLRepository,
    TransactionRepository,
)

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "Repository",
    # Request-scoped cache
    "RequestCache",
    # SQLAlchemy implementation
    "AccountRepository",
    "BudgetRepository",
    "CategoryRepository",
    "DatabaseClient",
    "InvestmentRepository",
    "RecurringSeriesRepository",
    "RepositorySet",
    "SQLAuditStorage",
    "SQLRepository",
    "TransactionRepository",
]
