"""Cache layer for brewcache.

Provides the cache side of the cache-aside pattern:
- CacheStore backends (Redis, in-process) with per-key expiration
- KeyIndex keeps secondary lookups consistent with cached data
- A single key schema shared by every writer
"""

from brewcache.cache.base import CacheStore
from brewcache.cache.index import KeyIndex
from brewcache.cache.keys import CacheKeys
from brewcache.cache.memory import MemoryCacheStore
from brewcache.cache.redis import RedisCacheStore, close_redis, get_redis

__all__ = [
    "CacheKeys",
    "CacheStore",
    "KeyIndex",
    "MemoryCacheStore",
    "RedisCacheStore",
    "close_redis",
    "get_redis",
]
