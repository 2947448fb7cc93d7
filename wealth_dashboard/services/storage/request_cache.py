"""
Request-scoped read cache.

A RequestCache lives for one logical request (one Streamlit script run,
one test). The caller creates it, passes it down to repository reads,
and drops it when the request ends. Nothing is shared across requests
and nothing is invalidated mid-request.
"""

from typing import Any, Awaitable, Callable, Hashable


class RequestCache:
    """Memoizes awaited loader results by key."""

    def __init__(self):
        self._values: dict[Hashable, Any] = {}
        self.hits = 0
        self.misses = 0

    async def get_or_load(
        self,
        key: Hashable,
        loader: Callable[[], Awaitable[Any]],
    ) -> Any:
        if key in self._values:
            self.hits += 1
            return self._values[key]
        self.misses += 1
        value = await loader()
        self._values[key] = value
        return value

    def __contains__(self, key: Hashable) -> bool:
        return key in self._values

    def __len__(self) -> int:
        return len(self._values)

    def clear(self) -> None:
        self._values.clear()
