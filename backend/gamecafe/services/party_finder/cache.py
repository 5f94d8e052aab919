"""
In-process TTL cache for directory lookups (candidate pool, availability/preference joins,
inactivity threshold).

One instance per process, created in the app lifespan and passed to whoever needs it.
No locking: single-key dict operations are atomic under the GIL, and a read racing an
invalidation costs at most one extra recomputation. Not shared across processes.
"""
import logging
import time
from collections.abc import Callable
from typing import Any, TypeVar

from gamecafe.core.constants import DIRECTORY_CACHE_SCOPES

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_TTL_SECONDS = 10 * 60


class TTLCache:
    """key -> (payload, absolute expiry). Expired entries are dropped on read and on every write."""

    def __init__(
        self,
        default_ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._entries: dict[str, tuple[Any, float]] = {}
        self._default_ttl = default_ttl_seconds
        self._clock = clock

    def set(self, key: str, value: Any, ttl_seconds: float | None = None) -> None:
        ttl = self._default_ttl if ttl_seconds is None else ttl_seconds
        now = self._clock()
        self.purge_expired(now)
        self._entries[key] = (value, now + ttl)

    def get(self, key: str) -> Any | None:
        item = self._entries.get(key)
        if item is None:
            return None
        value, expires = item
        if self._clock() > expires:
            self._entries.pop(key, None)
            return None
        return value

    def get_or_set(self, key: str, ttl_seconds: float, factory: Callable[[], T]) -> T:
        """
        Read-through: return the cached payload, or compute, store and return it.
        Cache failures count as misses; factory errors propagate.
        """
        try:
            cached = self.get(key)
        except Exception as e:
            logger.warning("Cache read failed for %s (treating as miss): %s", key, e)
            cached = None
        if cached is not None:
            return cached
        value = factory()
        try:
            self.set(key, value, ttl_seconds)
        except Exception as e:
            logger.warning("Cache write failed for %s: %s", key, e)
        return value

    def purge_expired(self, now: float | None = None) -> int:
        """Drop every expired entry. Returns how many were removed."""
        now = self._clock() if now is None else now
        expired = [key for key, (_, expires) in list(self._entries.items()) if now > expires]
        for key in expired:
            self._entries.pop(key, None)
        return len(expired)

    def invalidate(self, pattern: str) -> int:
        """Delete every key containing pattern. Returns how many were removed."""
        removed = 0
        for key in list(self._entries):
            if pattern in key:
                if self._entries.pop(key, None) is not None:
                    removed += 1
        return removed

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None


def invalidate_directory_caches(cache: TTLCache) -> int:
    """Drop every directory entry. Call after anything that changes eligibility or preferences."""
    removed = sum(cache.invalidate(scope) for scope in DIRECTORY_CACHE_SCOPES)
    logger.debug("Invalidated %s directory cache entries", removed)
    return removed
