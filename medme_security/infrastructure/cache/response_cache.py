"""ResponseCache implementations: bounded in-process LRU with TTL, and Redis."""

import logging
import time
from collections import OrderedDict
from typing import Callable, Optional, Tuple

from redis.exceptions import RedisError

from medme_security.infrastructure.cache.redis_client import RedisClient


class InMemoryResponseCache:
    """
    Per-process cache. At most max_entries keys; the least recently used key is
    evicted first. Expired entries are dropped lazily on access.
    """

    def __init__(
        self,
        max_entries: int = 100,
        default_ttl_seconds: int = 300,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self._max_entries = max_entries
        self._default_ttl = default_ttl_seconds
        self._clock = clock
        self._entries: "OrderedDict[str, Tuple[float, str]]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    async def get(self, key: str) -> Optional[str]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            return None
        self._entries.move_to_end(key)
        return value

    async def set(self, key: str, value: str, ttl_seconds: Optional[int] = None) -> None:
        ttl = self._default_ttl if ttl_seconds is None else ttl_seconds
        self._entries[key] = (self._clock() + ttl, value)
        self._entries.move_to_end(key)
        while len(self._entries) > self._max_entries:
            self._entries.popitem(last=False)

    async def invalidate_prefix(self, prefix: str) -> int:
        doomed = [key for key in self._entries if key.startswith(prefix)]
        for key in doomed:
            del self._entries[key]
        return len(doomed)


class RedisResponseCache:
    """Shared cache across workers. Redis failures degrade to a cache miss."""

    def __init__(
        self,
        redis_client: RedisClient,
        logger: logging.Logger,
        default_ttl_seconds: int = 300,
    ) -> None:
        self._redis = redis_client
        self._logger = logger
        self._default_ttl = default_ttl_seconds

    async def get(self, key: str) -> Optional[str]:
        try:
            return await self._redis.get_cache(key)
        except (RedisError, OSError) as e:
            self._logger.warning("cache_get_failed", extra={"cache_key": key, "error": str(e)})
            return None

    async def set(self, key: str, value: str, ttl_seconds: Optional[int] = None) -> None:
        ttl = self._default_ttl if ttl_seconds is None else ttl_seconds
        try:
            await self._redis.set_cache(key, value, ttl=ttl)
        except (RedisError, OSError) as e:
            self._logger.warning("cache_set_failed", extra={"cache_key": key, "error": str(e)})

    async def invalidate_prefix(self, prefix: str) -> int:
        try:
            return await self._redis.delete_prefix(prefix)
        except (RedisError, OSError) as e:
            self._logger.warning("cache_invalidate_failed", extra={"prefix": prefix, "error": str(e)})
            return 0
