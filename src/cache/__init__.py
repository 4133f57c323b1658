"""
Caching for Commerce API results.

Modules:
    stores - CacheStore interface, MemoryCache and RedisCache backends
    commerce_cache - Operation/parameter/scope keyed cache with entry validation
"""

from .commerce_cache import CommerceCache, is_valid_entry, make_cache_key
from .stores import CacheStore, MemoryCache, RedisCache


def create_cache(backend: str = "memory", bypass: bool = False, default_ttl: int = 300,
                 redis_url: str = "redis://localhost:6379/0") -> CommerceCache:
    """
    Build a CommerceCache for the configured backend.

    Args:
        backend: "memory" or "redis"
        bypass: Disable caching entirely (every get misses)
        default_ttl: TTL in seconds for API responses
        redis_url: Connection URL for the redis backend

    Returns:
        CommerceCache wrapping the selected store
    """
    if backend == "redis":
        store: CacheStore = RedisCache(redis_url)
    elif backend == "memory":
        store = MemoryCache()
    else:
        raise ValueError(f"Unsupported cache backend: {backend}")
    return CommerceCache(store, enabled=not bypass, default_ttl=default_ttl)


__all__ = [
    'CacheStore',
    'MemoryCache',
    'RedisCache',
    'CommerceCache',
    'create_cache',
    'is_valid_entry',
    'make_cache_key',
]
