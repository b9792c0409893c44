# medme_security/infrastructure/cache/redis_client.py

from typing import Optional

import redis.asyncio as redis

from medme_security.config.settings import get_settings


class RedisClient:
    def __init__(self, url: Optional[str] = None):
        self.client = redis.from_url(
            url or get_settings().redis_url,
            decode_responses=True,
        )

    async def set_cache(self, key: str, value: str, ttl: int = 300):
        await self.client.set(key, value, ex=ttl)

    async def get_cache(self, key: str) -> str | None:
        return await self.client.get(key)

    async def delete_prefix(self, prefix: str) -> int:
        """Delete every key starting with prefix (SCAN, not KEYS). Returns the number deleted."""
        deleted = 0
        async for key in self.client.scan_iter(match=f"{prefix}*", count=100):
            deleted += await self.client.delete(key)
        return deleted

    async def ping(self) -> bool:
        return bool(await self.client.ping())

    async def close(self) -> None:
        await self.client.aclose()
