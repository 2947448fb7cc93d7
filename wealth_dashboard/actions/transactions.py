"""
Transaction mutation actions.

Transfers move money from account_id to to_account_id and need both.
Account balances shown on the dashboard are computed on read from the
opening balance plus transactions, so no balance is rewritten here.
"""

from typing import Union
from uuid import UUID

from wealth_dashboard.actions.gateway import (
    ActionContext,
    Payload,
    create_entity,
    delete_entity,
    update_entity,
)
from wealth_dashboard.models.finance import EntityKind, TransactionCreate, TransactionUpdate
from wealth_dashboard.models.results import MutationResult


async def create_transaction_action(ctx: ActionContext, payload: Payload) -> MutationResult:
    return await create_entity(ctx, EntityKind.TRANSACTION, "CreateTransaction", TransactionCreate, payload)


async def update_transaction_action(
    ctx: ActionContext,
    transaction_id: Union[UUID, str],
    payload: Payload,
) -> MutationResult:
    return await update_entity(
        ctx, EntityKind.TRANSACTION, "UpdateTransaction", TransactionUpdate, transaction_id, payload,
    )


async def delete_transaction_action(ctx: ActionContext, transaction_id: Union[UUID, str]) -> MutationResult:
    return await delete_entity(ctx, EntityKind.TRANSACTION, "DeleteTransaction", transaction_id)
