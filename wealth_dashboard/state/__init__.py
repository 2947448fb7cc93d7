"""Client-side UI state: the persisted member filter."""

from wealth_dashboard.state.filter_store import (
    ALL_MEMBERS,
    STORAGE_KEY,
    FilterState,
    FilterStore,
    reset_filter,
    set_filter,
)
from wealth_dashboard.state.local_storage import LocalStorage

__all__ = [
    "ALL_MEMBERS",
    "STORAGE_KEY",
    "FilterState",
    "FilterStore",
    "LocalStorage",
    "reset_filter",
    "set_filter",
]
