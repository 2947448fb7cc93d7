"""Budget mutation actions."""

from typing import Union
from uuid import UUID

from wealth_dashboard.actions.gateway import (
    ActionContext,
    Payload,
    create_entity,
    delete_entity,
    update_entity,
)
from wealth_dashboard.models.finance import BudgetCreate, BudgetUpdate, EntityKind
from wealth_dashboard.models.results import MutationResult


async def create_budget_action(ctx: ActionContext, payload: Payload) -> MutationResult:
    return await create_entity(ctx, EntityKind.BUDGET, "CreateBudget", BudgetCreate, payload)


async def update_budget_action(
    ctx: ActionContext,
    budget_id: Union[UUID, str],
    payload: Payload,
) -> MutationResult:
    return await update_entity(ctx, EntityKind.BUDGET, "UpdateBudget", BudgetUpdate, budget_id, payload)


async def delete_budget_action(ctx: ActionContext, budget_id: Union[UUID, str]) -> MutationResult:
    return await delete_entity(ctx, EntityKind.BUDGET, "DeleteBudget", budget_id)
