"""
Time-to-live cache for computed task reads.

Entries expire at an absolute deadline computed when they are stored and
are evicted lazily: an expired entry is removed the next time it is read.
There is no background sweep and no capacity bound.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 60.0


class TTLCache:
    """
    Keyed store whose entries expire after a time-to-live.

    Args:
        default_ttl: Lifetime in seconds applied when ``set`` is called
            without an explicit ``ttl``.
        clock: Zero-argument callable returning the current time in
            seconds.  Defaults to :func:`time.monotonic`.
    """

    def __init__(
        self,
        default_ttl: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.default_ttl = default_ttl
        self._clock = clock
        self._entries: dict[str, tuple[Any, float]] = {}

    def set(self, key: str, value: Any, ttl: float | None = None) -> None:
        """Store *value* under *key* until ``now + ttl``."""
        logger.debug("Caching data with key: %s", key)
        lifetime = self.default_ttl if ttl is None else ttl
        self._entries[key] = (value, self._clock() + lifetime)

    def get(self, key: str) -> Any | None:
        """
        Return the live value for *key*, or ``None`` on a miss.

        An entry whose expiry has passed is removed as a side effect.
        """
        logger.debug("Checking cache for key: %s", key)
        entry = self._entries.get(key)
        if entry is None:
            logger.debug("Cache miss for key: %s", key)
            return None

        value, expires_at = entry
        if self._clock() > expires_at:
            logger.debug("Cache expired for key: %s", key)
            del self._entries[key]
            return None

        logger.debug("Cache hit for key: %s", key)
        return value

    def invalidate(self, key: str) -> None:
        logger.debug("Invalidating cache for key: %s", key)
        self._entries.pop(key, None)

    def clear(self) -> None:
        logger.info("Clearing all cache")
        self._entries.clear()

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)
