"""
Commerce Cache

Caches Commerce API results in any CacheStore, keyed by
(operation, parameters, token scope).
"""

import hashlib
import json
import logging
from typing import Any, Dict, Optional

from .stores import CacheStore

logger = logging.getLogger(__name__)

ADMIN_TOKEN_OPERATION = "admin_token"
MIN_TOKEN_LENGTH = 10


def _short_hash(text: str) -> str:
    return hashlib.md5(text.encode("utf-8")).hexdigest()[:8]


def make_cache_key(operation: str, params: Dict[str, Any], scope: Optional[str] = None) -> str:
    """
    Build a cache key.

    Parameters are serialized with sorted keys so that equal parameter
    sets always produce the same key.

    Args:
        operation: Operation name (e.g. "products", "admin_token")
        params: Request parameters identifying the entry
        scope: Token or credential scope; None for unscoped entries

    Returns:
        Key like ``commerce_products_1a2b3c4d_5e6f7a8b``
    """
    params_hash = _short_hash(json.dumps(params, sort_keys=True, default=str))
    scope_hash = _short_hash(scope if scope is not None else "null")
    return f"commerce_{operation}_{params_hash}_{scope_hash}"


def is_valid_entry(operation: str, value: Any) -> bool:
    """Return False for values that must never be served from cache."""
    if value is None:
        return False
    if operation == ADMIN_TOKEN_OPERATION:
        return isinstance(value, str) and len(value) > MIN_TOKEN_LENGTH
    if isinstance(value, dict) and "items" in value:
        return isinstance(value["items"], list)
    return True


class CommerceCache:
    """
    Operation-aware cache over a CacheStore.

    Malformed entries are deleted and reported as misses. When disabled
    (cache bypass) every get misses and puts are dropped.

    Usage:
        cache = CommerceCache(MemoryCache(), default_ttl=300)
        await cache.put("products", {"pageSize": 100, "currentPage": 1}, "admin", page)
        page = await cache.get("products", {"pageSize": 100, "currentPage": 1}, "admin")
    """

    def __init__(self, store: CacheStore, enabled: bool = True, default_ttl: int = 300):
        self.store = store
        self.enabled = enabled
        self.default_ttl = default_ttl

    async def get(self, operation: str, params: Dict[str, Any], scope: Optional[str] = None) -> Optional[Any]:
        if not self.enabled:
            return None

        key = make_cache_key(operation, params, scope)
        value = await self.store.get(key)
        if value is None:
            logger.debug("Cache MISS: %s", operation)
            return None

        if not is_valid_entry(operation, value):
            logger.warning("Discarding malformed %s cache entry", operation)
            await self.store.delete(key)
            return None

        logger.debug("Cache HIT: %s", operation)
        return value

    async def put(
        self,
        operation: str,
        params: Dict[str, Any],
        scope: Optional[str],
        value: Any,
        ttl: Optional[int] = None,
    ) -> None:
        if not self.enabled or not is_valid_entry(operation, value):
            return
        ttl = ttl if ttl is not None else self.default_ttl
        await self.store.put(make_cache_key(operation, params, scope), value, ttl)

    async def delete(self, operation: str, params: Dict[str, Any], scope: Optional[str] = None) -> None:
        if not self.enabled:
            return
        await self.store.delete(make_cache_key(operation, params, scope))

    async def close(self) -> None:
        await self.store.close()
