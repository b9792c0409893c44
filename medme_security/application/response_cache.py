"""Response cache protocol. Values are serialized strings; implementations never raise on get/set."""

from typing import Optional, Protocol


class ResponseCache(Protocol):
    async def get(self, key: str) -> Optional[str]:
        """Cached value, or None when missing, expired or the backend is unreachable."""
        ...

    async def set(self, key: str, value: str, ttl_seconds: Optional[int] = None) -> None:
        ...

    async def invalidate_prefix(self, prefix: str) -> int:
        """Drop every key starting with prefix. Returns how many were dropped."""
        ...
