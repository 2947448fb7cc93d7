"""
Mutation Gateway

Every write from the UI goes through here. A mutation action:
1. parses and validates the payload (no persistence call on failure)
2. makes exactly one repository call
3. on success emits the entity's invalidation signals, then audits
4. on any failure logs, audits and returns a failed result

DESIGN DECISION: Actions never raise. The caller always receives a
MutationResult, so UI code has exactly one shape to handle.

An invalidation failure after a successful write is reported as a failed
result. The write is not rolled back.
"""

from typing import Any, Awaitable, Callable, Mapping, Optional, Union
from uuid import UUID

import pydantic
import structlog

from wealth_dashboard.actions.invalidation import Invalidator, emit_signals
from wealth_dashboard.audit import AuditLogger, create_correlation_id
from wealth_dashboard.errors import UnknownError, ValidationError
from wealth_dashboard.models.finance import EntityKind, MutationInput
from wealth_dashboard.models.results import MutationResult
from wealth_dashboard.services.storage import RepositorySet
from wealth_dashboard.validation import validate_payload

logger = structlog.get_logger(__name__)

Payload = Union[Mapping[str, Any], MutationInput]
AuditHook = Callable[[Any], Awaitable[None]]


class ActionContext:
    """
    Everything an action needs for one invocation.

    Built per request by the orchestrator; tests build it by hand.
    """

    def __init__(
        self,
        user_id: str,
        repositories: RepositorySet,
        invalidator: Invalidator,
        audit_logger: Optional[AuditLogger] = None,
        correlation_id: Optional[UUID] = None,
    ):
        self.user_id = user_id
        self.repositories = repositories
        self.invalidator = invalidator
        self.audit_logger = audit_logger
        self.correlation_id = correlation_id or create_correlation_id()


def error_message(exc: BaseException) -> str:
    """
    Extract a human-readable message from any caught failure.

    pydantic errors contribute their first error only; anything without a
    message falls back to the generic unknown-error text.
    """
    if isinstance(exc, pydantic.ValidationError):
        errors = exc.errors()
        if errors:
            first = errors[0]
            location = ".".join(str(part) for part in first.get("loc", ()))
            message = first.get("msg", "")
            return f"{location}: {message}" if location else message
    message = str(exc).strip()
    return message or UnknownError.default_message


def parse_payload(model: type[MutationInput], payload: Payload) -> MutationInput:
    if isinstance(payload, model):
        return payload
    if isinstance(payload, MutationInput):
        payload = payload.model_dump(exclude_unset=True)
    return model.model_validate(payload)


def parse_id(value: Union[UUID, str]) -> UUID:
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except ValueError:
        raise ValidationError(f"Invalid id: {value!r}")


def require_user(ctx: ActionContext) -> str:
    if not ctx.user_id or not ctx.user_id.strip():
        raise ValidationError("User ID is required")
    return ctx.user_id


async def run_mutation(
    ctx: ActionContext,
    entity: EntityKind,
    action_name: str,
    operation: Callable[[], Awaitable[Any]],
    audit: Optional[AuditHook] = None,
) -> MutationResult:
    """
    The failure boundary shared by every mutation action.

    Args:
        ctx: Per-request context
        entity: Entity being mutated (selects the invalidation signals)
        action_name: Name used as the log prefix, e.g. "UpdateCategory"
        operation: Validates input then makes one repository call
        audit: Records the successful mutation in the audit trail

    Returns:
        MutationResult.ok(data) or MutationResult.failure(message)
    """
    try:
        data = await operation()
        tags = emit_signals(ctx.invalidator, entity)
    except Exception as exc:
        message = error_message(exc)
        logger.error(
            f"[{action_name}] {message}",
            action=action_name,
            entity=entity.value,
            user_id=ctx.user_id,
            error_type=type(exc).__name__,
            correlation_id=str(ctx.correlation_id),
        )
        if ctx.audit_logger:
            await ctx.audit_logger.log_mutation_failed(
                action_name=action_name,
                entity_type=entity.value,
                error_message=message,
                user_id=ctx.user_id,
                correlation_id=ctx.correlation_id,
            )
        return MutationResult.failure(message)

    if ctx.audit_logger:
        if audit is not None:
            await audit(data)
        await ctx.audit_logger.log_cache_invalidated(
            entity_type=entity.value,
            tags=tags,
            correlation_id=ctx.correlation_id,
        )

    return MutationResult.ok(data)


# =============================================================================
# GENERIC CRUD ACTIONS
# =============================================================================

async def create_entity(
    ctx: ActionContext,
    entity: EntityKind,
    action_name: str,
    model: type[MutationInput],
    payload: Payload,
) -> MutationResult:
    """Validate a create payload and insert it for the current user."""
    repository = ctx.repositories.for_entity(entity)

    async def operation():
        user_id = require_user(ctx)
        data = parse_payload(model, payload)
        validate_payload(data)
        return await repository.create({**data.model_dump(), "user_id": user_id})

    async def audit(record):
        await ctx.audit_logger.log_entity_created(
            entity_type=entity.value,
            entity_id=record.id,
            user_id=ctx.user_id,
            correlation_id=ctx.correlation_id,
        )

    return await run_mutation(ctx, entity, action_name, operation, audit)


async def update_entity(
    ctx: ActionContext,
    entity: EntityKind,
    action_name: str,
    model: type[MutationInput],
    record_id: Union[UUID, str],
    payload: Payload,
) -> MutationResult:
    """Validate a partial payload and merge it into a record the user owns."""
    repository = ctx.repositories.for_entity(entity)
    fields: list[str] = []

    async def operation():
        user_id = require_user(ctx)
        target = parse_id(record_id)
        data = parse_payload(model, payload)
        changes = data.model_dump(exclude_unset=True)
        if not changes:
            raise ValidationError("At least one field must be provided for update")
        validate_payload(data)
        fields.extend(sorted(changes))
        return await repository.update(target, changes, user_id)

    async def audit(record):
        await ctx.audit_logger.log_entity_updated(
            entity_type=entity.value,
            entity_id=record.id,
            user_id=ctx.user_id,
            fields=fields,
            correlation_id=ctx.correlation_id,
        )

    return await run_mutation(ctx, entity, action_name, operation, audit)


async def delete_entity(
    ctx: ActionContext,
    entity: EntityKind,
    action_name: str,
    record_id: Union[UUID, str],
) -> MutationResult:
    """Delete a record the user owns; data is {"id": <deleted id>}."""
    repository = ctx.repositories.for_entity(entity)

    async def operation():
        user_id = require_user(ctx)
        deleted = await repository.delete(parse_id(record_id), user_id)
        return {"id": deleted}

    async def audit(data):
        await ctx.audit_logger.log_entity_deleted(
            entity_type=entity.value,
            entity_id=data["id"],
            user_id=ctx.user_id,
            correlation_id=ctx.correlation_id,
        )

    return await run_mutation(ctx, entity, action_name, operation, audit)
