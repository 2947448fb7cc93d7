"""
Category mutation actions.

Keys are stored lowercase and colors uppercase, so "Food" and "food"
collide on the per-user unique key.
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
from wealth_dashboard.models.finance import CategoryCreate, CategoryUpdate, EntityKind
from wealth_dashboard.models.results import MutationResult


async def create_category_action(ctx: ActionContext, payload: Payload) -> MutationResult:
    return await create_entity(ctx, EntityKind.CATEGORY, "CreateCategory", CategoryCreate, payload)


async def update_category_action(
    ctx: ActionContext,
    category_id: Union[UUID, str],
    payload: Payload,
) -> MutationResult:
    return await update_entity(
        ctx, EntityKind.CATEGORY, "UpdateCategory", CategoryUpdate, category_id, payload,
    )


async def delete_category_action(ctx: ActionContext, category_id: Union[UUID, str]) -> MutationResult:
    return await delete_entity(ctx, EntityKind.CATEGORY, "DeleteCategory", category_id)
