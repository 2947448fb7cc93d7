"""Services package."""

from wealth_dashboard.services.storage import (
    AuditStorageInterface,
    DatabaseClient,
    Repository,
    RepositorySet,
    RequestCache,
    SQLAuditStorage,
)

__all__ = [
    "AuditStorageInterface",
    "DatabaseClient",
    "Repository",
    "RepositorySet",
    "RequestCache",
    "SQLAuditStorage",
]
