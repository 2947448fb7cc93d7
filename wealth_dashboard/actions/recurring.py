"""
Recurring series mutation actions.

Besides the usual create/update/delete, a series can be advanced: the
user confirms one occurrence has been booked and the series moves on to
its next due date.
"""

from typing import Union
from uuid import UUID

from wealth_dashboard.actions.gateway import (
    ActionContext,
    Payload,
    create_entity,
    delete_entity,
    parse_id,
    require_user,
    run_mutation,
    update_entity,
)
from wealth_dashboard.models.finance import (
    EntityKind,
    RecurringSeriesCreate,
    RecurringSeriesUpdate,
)
from wealth_dashboard.models.results import MutationResult


async def create_recurring_series_action(ctx: ActionContext, payload: Payload) -> MutationResult:
    return await create_entity(
        ctx, EntityKind.RECURRING_SERIES, "CreateRecurringSeries", RecurringSeriesCreate, payload,
    )


async def update_recurring_series_action(
    ctx: ActionContext,
    series_id: Union[UUID, str],
    payload: Payload,
) -> MutationResult:
    return await update_entity(
        ctx, EntityKind.RECURRING_SERIES, "UpdateRecurringSeries", RecurringSeriesUpdate, series_id, payload,
    )


async def delete_recurring_series_action(ctx: ActionContext, series_id: Union[UUID, str]) -> MutationResult:
    return await delete_entity(ctx, EntityKind.RECURRING_SERIES, "DeleteRecurringSeries", series_id)


async def advance_recurring_series_action(
    ctx: ActionContext,
    series_id: Union[UUID, str],
) -> MutationResult:
    """Count one execution and move the series to its next due date."""
    repository = ctx.repositories.recurring_series

    async def operation():
        user_id = require_user(ctx)
        return await repository.advance(parse_id(series_id), user_id)

    async def audit(record):
        await ctx.audit_logger.log_entity_updated(
            entity_type=EntityKind.RECURRING_SERIES.value,
            entity_id=record.id,
            user_id=ctx.user_id,
            fields=["due_date", "is_active", "total_executions"],
            correlation_id=ctx.correlation_id,
        )

    return await run_mutation(
        ctx, EntityKind.RECURRING_SERIES, "AdvanceRecurringSeries", operation, audit,
    )
