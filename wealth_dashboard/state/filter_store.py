"""
Filter State Store

Holds which group member the dashboard is filtered to. The state is two
fields and two transitions:

- set_filter("all")   → show everyone, selected_user_id cleared
- set_filter(<other>) → show one member, selected_user_id = <other>
- reset_filter()      → back to defaults

DESIGN DECISION: The transitions are pure functions over an immutable
FilterState. FilterStore is the only stateful piece; it rehydrates from
durable storage when built and writes through after every transition.
Storage is injected, so tests never touch the real state file.
"""

import json
from typing import Optional

import structlog
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as SchemaError

from wealth_dashboard.state.local_storage import LocalStorage

logger = structlog.get_logger(__name__)

STORAGE_KEY = "wealth-dashboard-user-filter"
STORAGE_VERSION = 1
ALL_MEMBERS = "all"


class FilterState(BaseModel):
    """Currently selected member filter."""
    model_config = ConfigDict(frozen=True, extra="ignore")

    selected_group_filter: str = Field(
        default=ALL_MEMBERS,
        description="'all' or the id of the member being shown"
    )
    selected_user_id: Optional[str] = Field(
        default=None,
        description="Member id when filtered to one member, else None"
    )

    @property
    def is_filtered(self) -> bool:
        return self.selected_group_filter != ALL_MEMBERS


def set_filter(state: FilterState, value: str) -> FilterState:
    """Select a member (or 'all'). The previous state never matters."""
    if value == ALL_MEMBERS:
        return FilterState(selected_group_filter=ALL_MEMBERS, selected_user_id=None)
    return FilterState(selected_group_filter=value, selected_user_id=value)


def reset_filter() -> FilterState:
    return FilterState()


class FilterStore:
    """
    Persisted filter state.

    Usage:
        store = FilterStore(LocalStorage(path))
        store.set_filter("member-7")
        store.state.selected_user_id  # "member-7", also on the next run
    """

    def __init__(self, storage: LocalStorage, key: str = STORAGE_KEY):
        self._storage = storage
        self._key = key
        self._state = self._rehydrate()

    @property
    def state(self) -> FilterState:
        return self._state

    def _rehydrate(self) -> FilterState:
        raw = self._storage.get_item(self._key)
        if raw is None:
            return FilterState()
        try:
            envelope = json.loads(raw)
            return FilterState.model_validate(envelope["state"])
        except (json.JSONDecodeError, KeyError, TypeError, SchemaError) as e:
            logger.warning("filter_state_rehydrate_failed", key=self._key, error=str(e))
            return FilterState()

    def _persist(self) -> None:
        envelope = {"state": self._state.model_dump(), "version": STORAGE_VERSION}
        self._storage.set_item(self._key, json.dumps(envelope))

    def set_filter(self, value: str) -> FilterState:
        self._state = set_filter(self._state, value)
        self._persist()
        return self._state

    def reset(self) -> FilterState:
        self._state = reset_filter()
        self._persist()
        return self._state
