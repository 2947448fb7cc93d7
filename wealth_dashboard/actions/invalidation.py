"""
Invalidation signals.

A signal is a plain string naming a cached view partition. After a
successful mutation the action emits every partition that depends on the
mutated entity; readers of those partitions recompute on their next read.

DESIGN DECISION: The entity → partitions dependency table is declared
once, here. Actions never list tags themselves.
"""

from abc import ABC, abstractmethod
from collections import defaultdict
from typing import Callable, Iterable, Union

import structlog

from wealth_dashboard.models.finance import EntityKind

logger = structlog.get_logger(__name__)


# =============================================================================
# PARTITIONS
# =============================================================================

CATEGORIES = "categories"
ACCOUNTS = "accounts"
INVESTMENTS = "investments"
TRANSACTIONS = "transactions"
BUDGETS = "budgets"
DASHBOARD = "dashboard"
REPORTS = "reports"
RECURRING = "recurring"

ALL_TAGS = (CATEGORIES, ACCOUNTS, INVESTMENTS, TRANSACTIONS, BUDGETS, DASHBOARD, REPORTS, RECURRING)

INVALIDATION_TABLE: dict[EntityKind, tuple[str, ...]] = {
    EntityKind.CATEGORY: (CATEGORIES, TRANSACTIONS, BUDGETS, DASHBOARD),
    EntityKind.ACCOUNT: (ACCOUNTS, TRANSACTIONS, RECURRING, DASHBOARD, REPORTS),
    EntityKind.INVESTMENT: (INVESTMENTS, DASHBOARD, REPORTS),
    EntityKind.TRANSACTION: (TRANSACTIONS, ACCOUNTS, BUDGETS, DASHBOARD, REPORTS),
    EntityKind.BUDGET: (BUDGETS, DASHBOARD),
    EntityKind.RECURRING_SERIES: (RECURRING, DASHBOARD),
}


def tags_for(entity: Union[EntityKind, str]) -> tuple[str, ...]:
    """Partitions invalidated by a mutation of this entity."""
    return INVALIDATION_TABLE[EntityKind(entity)]


# =============================================================================
# INVALIDATORS
# =============================================================================

class Invalidator(ABC):
    """Receives invalidation signals."""

    @abstractmethod
    def revalidate_tag(self, tag: str) -> None:
        """Mark one partition stale."""


def emit_signals(invalidator: Invalidator, entity: Union[EntityKind, str]) -> list[str]:
    """Emit each partition for the entity exactly once, in table order."""
    emitted = []
    for tag in tags_for(entity):
        invalidator.revalidate_tag(tag)
        emitted.append(tag)
    return emitted


class RecordingInvalidator(Invalidator):
    """Collects emitted signals in order. Useful in tests and scripts."""

    def __init__(self):
        self.signals: list[str] = []

    def revalidate_tag(self, tag: str) -> None:
        self.signals.append(tag)

    def clear(self) -> None:
        self.signals.clear()


class TagRegistry(Invalidator):
    """
    Maps a partition to the callbacks that drop its cached data.

    The dashboard registers the `.clear` of each cached loader under the
    partitions it reads; revalidating a tag runs those callbacks.
    """

    def __init__(self):
        self._callbacks: dict[str, list[Callable[[], None]]] = defaultdict(list)
        self.revalidated: list[str] = []

    def register(self, tags: Union[str, Iterable[str]], callback: Callable[[], None]) -> None:
        if isinstance(tags, str):
            tags = (tags,)
        for tag in tags:
            if tag not in ALL_TAGS:
                raise ValueError(f"Unknown cache partition: {tag}")
            if callback not in self._callbacks[tag]:
                self._callbacks[tag].append(callback)

    def callbacks_for(self, tag: str) -> list[Callable[[], None]]:
        return list(self._callbacks.get(tag, ()))

    def revalidate_tag(self, tag: str) -> None:
        self.revalidated.append(tag)
        callbacks = self._callbacks.get(tag, ())
        for callback in callbacks:
            callback()
        logger.debug("cache_partition_revalidated", tag=tag, callbacks=len(callbacks))
