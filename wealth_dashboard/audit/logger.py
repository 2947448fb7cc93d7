"""
Audit Logger

DESIGN DECISION: Every mutation attempt, successful or not, produces an audit
event. Events go to the JSON log first and to the audit_log table second;
a failed table write is logged and reported as False, never raised.

Events written for the same ActionContext share one correlation id.
"""

import logging
import sys
from typing import Optional
from uuid import UUID, uuid4

import structlog

from wealth_dashboard.models.audit import AuditEvent, AuditEventBuilder
from wealth_dashboard.services.storage import AuditStorageInterface


structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """
    Route stdlib logging (and therefore structlog) to stderr.

    structlog renders the JSON line; stdlib only prints the message.
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level.upper(), logging.INFO),
    )


class AuditLogger:
    """
    Writes audit events to the structured log and, when a storage backend
    is configured, to the audit_log table that the Settings page reads.
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        self._storage = storage
        self._logger = structlog.get_logger(__name__)

    async def log(self, event: AuditEvent) -> bool:
        """
        Emit one event.

        Returns False only when the storage write raised; the error is logged
        as audit_storage_failed.
        """
        log_dict = event.to_log_dict()

        if event.severity.value in ("error", "critical"):
            self._logger.error("audit_event", **log_dict)
        elif event.severity.value == "warning":
            self._logger.warning("audit_event", **log_dict)
        elif event.severity.value == "debug":
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return await self._storage.append_event(event)
            except Exception as e:
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    async def log_entity_created(
        self,
        entity_type: str,
        entity_id: UUID,
        user_id: Optional[str],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        event = AuditEventBuilder.entity_created(
            entity_type=entity_type,
            entity_id=str(entity_id),
            user_id=user_id,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_entity_updated(
        self,
        entity_type: str,
        entity_id: UUID,
        user_id: Optional[str],
        fields: list[str],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        event = AuditEventBuilder.entity_updated(
            entity_type=entity_type,
            entity_id=str(entity_id),
            user_id=user_id,
            fields=fields,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_entity_deleted(
        self,
        entity_type: str,
        entity_id: UUID,
        user_id: Optional[str],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        event = AuditEventBuilder.entity_deleted(
            entity_type=entity_type,
            entity_id=str(entity_id),
            user_id=user_id,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_mutation_failed(
        self,
        action_name: str,
        entity_type: str,
        error_message: str,
        user_id: Optional[str],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a mutation that returned a failed result."""
        event = AuditEventBuilder.mutation_failed(
            action_name=action_name,
            entity_type=entity_type,
            error_message=error_message,
            user_id=user_id,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_cache_invalidated(
        self,
        entity_type: str,
        tags: list[str],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        event = AuditEventBuilder.cache_invalidated(
            entity_type=entity_type,
            tags=tags,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an error."""
        event = AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def recent_events(self, limit: int = 50) -> list[AuditEvent]:
        """Most recent persisted events, or nothing when only logging locally."""
        if self._storage is None:
            return []
        return await self._storage.get_recent_events(limit=limit)


def create_correlation_id() -> UUID:
    """
    New id for the events of one action. ActionContext creates one
    unless the caller passes its own.
    """
    return uuid4()
