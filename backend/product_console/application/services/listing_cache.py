"""In-memory cache of listing responses, keyed by entity type."""

import logging
import time
from collections.abc import Awaitable, Callable
from typing import Any

logger = logging.getLogger(__name__)


class ListingCache:
    """Caches lists fetched from the remote API (categories, suppliers, products...).

    Entries older than ``ttl_seconds`` are dropped on read, so lookups
    created elsewhere show up in later sessions. ``None`` keeps entries
    until they are invalidated. A successful product save invalidates the
    ``products`` entry so the list screen refetches instead of showing
    stale rows.
    """

    def __init__(
        self,
        ttl_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl = ttl_seconds
        self._clock = clock
        self._entries: dict[str, tuple[float, Any]] = {}

    def get(self, entity_type: str) -> Any | None:
        entry = self._live_entry(entity_type)
        return entry[1] if entry else None

    def set(self, entity_type: str, value: Any) -> None:
        self._entries[entity_type] = (self._clock(), value)

    async def get_or_load(self, entity_type: str, loader: Callable[[], Awaitable[Any]]) -> Any:
        """Return the cached entry or load, store and return it."""
        entry = self._live_entry(entity_type)
        if entry is not None:
            return entry[1]
        value = await loader()
        self.set(entity_type, value)
        return value

    def invalidate(self, entity_type: str) -> bool:
        removed = self._entries.pop(entity_type, None) is not None
        logger.debug("Invalidated '%s' listing (was cached: %s)", entity_type, removed)
        return removed

    def clear(self) -> None:
        self._entries.clear()

    def _live_entry(self, entity_type: str) -> tuple[float, Any] | None:
        entry = self._entries.get(entity_type)
        if entry is None:
            return None
        if self._ttl is not None and self._clock() - entry[0] >= self._ttl:
            del self._entries[entity_type]
            logger.debug("Listing '%s' expired", entity_type)
            return None
        return entry

    def __contains__(self, entity_type: str) -> bool:
        return self._live_entry(entity_type) is not None
