"""Tests for the audit logger and SQL audit storage."""

import asyncio
from uuid import uuid4

from wealth_dashboard.audit import AuditLogger, create_correlation_id
from wealth_dashboard.models import AuditEventBuilder, AuditEventType


class FailingStorage:
    async def append_event(self, event):
        raise RuntimeError("storage down")

    async def get_recent_events(self, limit=100):
        return []


class TestAuditLogger:
    """Local logging plus optional persistence."""

    def test_without_storage_logs_locally(self):
        logger = AuditLogger()
        event = AuditEventBuilder.entity_created("account", "abc", "user-1")
        assert asyncio.run(logger.log(event)) is True
        assert asyncio.run(logger.recent_events()) == []

    def test_storage_failure_is_swallowed(self):
        logger = AuditLogger(FailingStorage())
        event = AuditEventBuilder.system_error("Boom", "something broke")
        assert asyncio.run(logger.log(event)) is False

    def test_persists_events(self, audit_storage):
        logger = AuditLogger(audit_storage)
        correlation_id = create_correlation_id()
        entity_id = uuid4()

        asyncio.run(logger.log_entity_created("budget", entity_id, "user-1", correlation_id))
        asyncio.run(logger.log_entity_updated("budget", entity_id, "user-1", ["amount"], correlation_id))
        asyncio.run(logger.log_entity_deleted("budget", entity_id, "user-1", correlation_id))

        events = asyncio.run(audit_storage.get_events_by_entity("budget", str(entity_id)))
        assert [e.event_type for e in events] == [
            AuditEventType.ENTITY_CREATED,
            AuditEventType.ENTITY_UPDATED,
            AuditEventType.ENTITY_DELETED,
        ]
        assert all(e.correlation_id == correlation_id for e in events)
        assert events[1].details == {"fields": ["amount"]}

    def test_recent_events_newest_first_and_limited(self, audit_storage):
        logger = AuditLogger(audit_storage)
        for name in ("First", "Second", "Third"):
            asyncio.run(logger.log_mutation_failed(name, "category", "nope", "user-1"))

        recent = asyncio.run(logger.recent_events(limit=2))

        assert [e.description for e in recent] == ["Third failed", "Second failed"]
        assert recent[0].error_message == "nope"

    def test_correlation_ids_are_unique(self):
        assert create_correlation_id() != create_correlation_id()
