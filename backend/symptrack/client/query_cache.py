"""Cached reads shared by the dashboard, history and insights views.

Views read through :meth:`QueryCache.fetch`; writers call
:meth:`QueryCache.invalidate` so the next read goes back to the source.
"""
import logging
from collections.abc import Awaitable, Callable
from typing import Any

logger = logging.getLogger(__name__)

SYMPTOMS_QUERY = "/api/symptoms"


class QueryCache:
    def __init__(self) -> None:
        self._entries: dict[str, Any] = {}

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    async def fetch(self, key: str, loader: Callable[[], Awaitable[Any]]) -> Any:
        if key in self._entries:
            return self._entries[key]
        value = await loader()
        self._entries[key] = value
        return value

    def invalidate(self, key: str) -> None:
        if self._entries.pop(key, None) is not None:
            logger.debug("Invalidated cached query %s", key)
