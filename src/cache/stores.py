"""
Cache Stores

Key/value stores with per-entry TTL behind one async interface:

    get(key) -> value or None
    put(key, value, ttl)
    delete(key)

MemoryCache keeps entries in-process; RedisCache persists them in Redis so
tokens and API responses survive between runs. Callers never branch on
which one they hold.
"""

import json
import logging
import time
from typing import Any, Callable, Dict, Optional, Tuple

from redis import asyncio as aioredis
from redis.exceptions import RedisError

logger = logging.getLogger(__name__)


class CacheStore:
    """Interface shared by all cache backends."""

    async def get(self, key: str) -> Optional[Any]:
        raise NotImplementedError

    async def put(self, key: str, value: Any, ttl: int) -> None:
        raise NotImplementedError

    async def delete(self, key: str) -> None:
        raise NotImplementedError

    async def close(self) -> None:
        """Release backend resources (no-op by default)."""


class MemoryCache(CacheStore):
    """
    In-process TTL cache.

    Expired entries are dropped on read. ``clock`` returns seconds and
    defaults to ``time.monotonic``; tests pass a fake one.

    Usage:
        store = MemoryCache()
        await store.put("key", {"items": []}, ttl=300)
        await store.get("key")
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._entries: Dict[str, Tuple[float, Any]] = {}

    def __len__(self) -> int:
        return len(self._entries)

    async def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None

        expires_at, value = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            logger.debug("Cache EXPIRED: %s", key)
            return None
        return value

    async def put(self, key: str, value: Any, ttl: int) -> None:
        self._entries[key] = (self._clock() + ttl, value)

    async def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()


class RedisCache(CacheStore):
    """
    Redis-backed TTL cache.

    Values are JSON encoded and written with SETEX. Redis failures are
    logged and reported as misses so a cache outage never fails an export.

    Usage:
        store = RedisCache("redis://localhost:6379/0")
        await store.put("key", "value", ttl=900)
        await store.close()
    """

    def __init__(self, url: str = "redis://localhost:6379/0", client: Optional[aioredis.Redis] = None):
        """
        Args:
            url: Redis connection URL
            client: Pre-built ``redis.asyncio.Redis`` client (overrides url)
        """
        self.url = url
        self._client = client or aioredis.from_url(url, encoding="utf-8", decode_responses=True)

    async def get(self, key: str) -> Optional[Any]:
        try:
            raw = await self._client.get(key)
        except RedisError as e:
            logger.error("Redis GET error for key '%s': %s", key, e)
            return None

        if raw is None:
            return None
        try:
            return json.loads(raw)
        except (TypeError, ValueError) as e:
            logger.warning("Discarding undecodable cache entry '%s': %s", key, e)
            return None

    async def put(self, key: str, value: Any, ttl: int) -> None:
        try:
            await self._client.setex(key, ttl, json.dumps(value))
        except (TypeError, ValueError) as e:
            logger.error("JSON serialization error for key '%s': %s", key, e)
        except RedisError as e:
            logger.error("Redis SET error for key '%s': %s", key, e)

    async def delete(self, key: str) -> None:
        try:
            await self._client.delete(key)
        except RedisError as e:
            logger.error("Redis DELETE error for key '%s': %s", key, e)

    async def close(self) -> None:
        await self._client.aclose()
