import asyncio
import time
import threading
import logging
from collections import OrderedDict
from typing import Any, Awaitable, Callable, Optional

from src.infrastructure.cache.redis_client import RedisClient

logger = logging.getLogger(__name__)


class CacheService:
    """
    Bounded TTL cache for raw upstream feed responses.

    An in-memory layer is always present; a Redis client can be injected as a
    shared secondary layer. Expiry uses a monotonic clock, and the oldest
    entry is evicted once `max_entries` is reached.

    TTL presets:
    - LIVE_SCORES: 30 seconds
    - FIXTURE_INFO: 5 minutes
    """

    # TTL Presets (in seconds)
    TTL_LIVE_SCORES = 30
    TTL_FIXTURE_INFO = 300

    def __init__(
        self,
        max_entries: int = 512,
        redis: Optional[RedisClient] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize the cache service.

        Args:
            max_entries: Upper bound on in-memory entries
            redis: Optional Redis layer shared across processes
            clock: Monotonic time source in seconds
        """
        if max_entries < 1:
            raise ValueError(f"max_entries must be positive, got {max_entries}")
        self.max_entries = max_entries
        self.redis = redis
        self._clock = clock
        self._memory_cache: "OrderedDict[str, tuple[float, Any]]" = OrderedDict()
        self._lock = threading.RLock()
        self._key_locks: dict[str, asyncio.Lock] = {}
        self._key_waiters: dict[str, int] = {}
        self._hits = 0
        self._misses = 0
        self._fetches = 0

    def get(self, key: str) -> Optional[Any]:
        """Get a live value from cache (memory first, then Redis)."""
        value = self._lookup(key)
        with self._lock:
            if value is None:
                self._misses += 1
            else:
                self._hits += 1
        return value

    def _lookup(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._memory_cache.get(key)
            if entry is not None:
                expires_at, value = entry
                if self._clock() < expires_at:
                    return value
                del self._memory_cache[key]

        if self.redis is not None and self.redis.is_connected:
            return self.redis.get(key)
        return None

    def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        """Set a value in memory (and Redis when configured)."""
        if self.redis is not None and self.redis.is_connected:
            self.redis.set(key, value, ttl_seconds)

        with self._lock:
            if key in self._memory_cache:
                del self._memory_cache[key]
            elif len(self._memory_cache) >= self.max_entries:
                evicted, _ = self._memory_cache.popitem(last=False)
                logger.debug(f"Cache full, evicted {evicted}")
            self._memory_cache[key] = (self._clock() + ttl_seconds, value)

    async def get_or_fetch(
        self,
        key: str,
        fetcher: Callable[[], Awaitable[Any]],
        ttl_seconds: int,
    ) -> Any:
        """
        Return the cached value or fetch it exactly once per miss.

        Concurrent callers for the same key wait on a per-key lock, so a miss
        triggers a single upstream call. Failed fetches propagate and leave
        nothing cached. A key's lock is dropped once its last waiter is done.
        """
        value = self.get(key)
        if value is not None:
            logger.debug(f"Cache hit: {key}")
            return value

        logger.debug(f"Cache miss: {key}")
        lock = self._key_locks.setdefault(key, asyncio.Lock())
        self._key_waiters[key] = self._key_waiters.get(key, 0) + 1
        try:
            async with lock:
                # Filled by a concurrent caller while this one waited; already counted as a miss
                value = self._lookup(key)
                if value is not None:
                    return value

                self._fetches += 1
                value = await fetcher()
                self.set(key, value, ttl_seconds)
                return value
        finally:
            self._key_waiters[key] -= 1
            if not self._key_waiters[key]:
                del self._key_waiters[key]
                self._key_locks.pop(key, None)

    def invalidate(self, key: str) -> bool:
        """Invalidate a specific cache entry."""
        redis_ok = False
        if self.redis is not None and self.redis.is_connected:
            redis_ok = self.redis.delete(key)

        with self._lock:
            in_mem = self._memory_cache.pop(key, None) is not None
            return redis_ok or in_mem

    def clear(self) -> None:
        """Clear all cache entries."""
        with self._lock:
            self._memory_cache.clear()
            logger.info("Cache cleared")

    def stats(self) -> dict:
        with self._lock:
            return {
                "entries": len(self._memory_cache),
                "max_entries": self.max_entries,
                "hits": self._hits,
                "misses": self._misses,
                "fetches": self._fetches,
                "redis_connected": bool(self.redis is not None and self.redis.is_connected),
            }

    # --- Helper methods for specific cache types ---

    @staticmethod
    def live_scores_key() -> str:
        return "live_scores"

    @staticmethod
    def fixture_info_key(fixture_id: int) -> str:
        return f"fixture_info:{fixture_id}"
