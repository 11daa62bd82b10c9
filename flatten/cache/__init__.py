"""Page caching layer.

This package provides:
- Cache store contract and adapters (CacheStore, RedisStore, MemoryStore)
- Per-page cache operations (CacheHandler)
- Graceful fail-open behavior when Redis is unavailable
"""

from flatten.cache.handler import CacheHandler
from flatten.cache.store import CacheStore, MemoryStore, RedisStore

__all__ = [
    # Stores
    "CacheStore",
    "MemoryStore",
    "RedisStore",
    # Handler
    "CacheHandler",
]
