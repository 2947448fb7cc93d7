"""Account mutation actions."""

from typing import Union
from uuid import UUID

from wealth_dashboard.actions.gateway import (
    ActionContext,
    Payload,
    create_entity,
    delete_entity,
    update_entity,
)
from wealth_dashboard.models.finance import AccountCreate, AccountUpdate, EntityKind
from wealth_dashboard.models.results import MutationResult


async def create_account_action(ctx: ActionContext, payload: Payload) -> MutationResult:
    return await create_entity(ctx, EntityKind.ACCOUNT, "CreateAccount", AccountCreate, payload)


async def update_account_action(
    ctx: ActionContext,
    account_id: Union[UUID, str],
    payload: Payload,
) -> MutationResult:
    return await update_entity(ctx, EntityKind.ACCOUNT, "UpdateAccount", AccountUpdate, account_id, payload)


async def delete_account_action(ctx: ActionContext, account_id: Union[UUID, str]) -> MutationResult:
    """Transactions and recurring series on the account are removed by the database."""
    return await delete_entity(ctx, EntityKind.ACCOUNT, "DeleteAccount", account_id)
