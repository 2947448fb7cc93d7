"""Investment mutation actions."""

from typing import Union
from uuid import UUID

from wealth_dashboard.actions.gateway import (
    ActionContext,
    Payload,
    create_entity,
    delete_entity,
    update_entity,
)
from wealth_dashboard.models.finance import EntityKind, InvestmentCreate, InvestmentUpdate
from wealth_dashboard.models.results import MutationResult


async def create_investment_action(ctx: ActionContext, payload: Payload) -> MutationResult:
    return await create_entity(ctx, EntityKind.INVESTMENT, "CreateInvestment", InvestmentCreate, payload)


async def update_investment_action(
    ctx: ActionContext,
    investment_id: Union[UUID, str],
    payload: Payload,
) -> MutationResult:
    return await update_entity(
        ctx, EntityKind.INVESTMENT, "UpdateInvestment", InvestmentUpdate, investment_id, payload,
    )


async def delete_investment_action(ctx: ActionContext, investment_id: Union[UUID, str]) -> MutationResult:
    return await delete_entity(ctx, EntityKind.INVESTMENT, "DeleteInvestment", investment_id)
