"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Swap PostgreSQL for SQLite (local runs, tests) without touching actions
2. Use in-memory fakes for testing
3. Keep business logic decoupled from the ORM

The interface is a CRUD vocabulary per entity, not a query language.
"""

from abc import ABC, abstractmethod
from typing import Any, Generic, Mapping, Optional, TypeVar
from uuid import UUID

from wealth_dashboard.errors import NotFoundError, PersistenceError
from wealth_dashboard.models.audit import AuditEvent
from wealth_dashboard.models.finance import EntityKind, EntityRecord
from wealth_dashboard.services.storage.request_cache import RequestCache

RecordT = TypeVar("RecordT", bound=EntityRecord)


class Repository(ABC, Generic[RecordT]):
    """
    Abstract interface for one entity's storage operations.

    Any storage implementation must implement these methods. Each
    operation is one round trip to the backing store, except cached
    per-user reads, which may be zero.
    """

    entity: EntityKind

    @abstractmethod
    async def create(self, data: Mapping[str, Any]) -> RecordT:
        """
        Insert a new record.

        Args:
            data: Field values, including the owning user_id

        Returns:
            The stored record with generated id and timestamps

        Raises:
            PersistenceError: If the store rejects the write
        """

    @abstractmethod
    async def update(self, record_id: UUID, data: Mapping[str, Any], user_id: str) -> RecordT:
        """
        Merge partial data into an existing record owned by user_id.

        Raises:
            NotFoundError: If user_id owns no record with this id
            ValidationError: If the merged record breaks an entity rule
            PersistenceError: If the store rejects the write
        """

    @abstractmethod
    async def delete(self, record_id: UUID, user_id: str) -> UUID:
        """
        Remove a record owned by user_id.

        Deleting an id that does not exist is an error, not a no-op.

        Raises:
            NotFoundError: If user_id owns no record with this id
            PersistenceError: If the store rejects the delete
        """

    @abstractmethod
    async def get_by_id(self, record_id: UUID) -> Optional[RecordT]:
        """Retrieve a record by id, or None if it does not exist."""

    @abstractmethod
    async def get_by_user(
        self,
        user_id: str,
        cache: Optional[RequestCache] = None,
    ) -> list[RecordT]:
        """
        List every record owned by a user.

        Args:
            user_id: Opaque owner id from the identity provider
            cache: Per-request cache; repeated reads for the same user
                   within one request are served from it
        """


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    async def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """

    @abstractmethod
    async def get_events_by_entity(
        self,
        entity_type: str,
        entity_id: str,
    ) -> list[AuditEvent]:
        """Get all events for a specific entity, oldest first."""

    @abstractmethod
    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """Get the most recent audit events, newest first."""


__all__ = [
    "AuditStorageInterface",
    "NotFoundError",
    "PersistenceError",
    "RecordT",
    "Repository",
]
