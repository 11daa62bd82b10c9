"""Cache store adapters.

This module defines the narrow key-value contract the cache handler relies
on, a Redis-backed implementation with connection pooling and fail-open
error handling, and a process-local implementation for development and
tests.
"""

import os
import time
from typing import Dict, Optional, Protocol, Tuple

import redis
from redis.connection import ConnectionPool

from flatten.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_REDIS_URL = "redis://localhost:6379/0"


class CacheStore(Protocol):
    """Minimal key-value store with per-entry expiry."""

    def has(self, key: str) -> bool:
        ...

    def get(self, key: str) -> Optional[str]:
        ...

    def put(self, key: str, content: str, ttl: int) -> bool:
        ...


class RedisStore:
    """
    Redis cache store with connection pooling.

    All operations fail open: if the pool could not be created or a Redis
    call raises, the error is logged and reported as a miss (has/get) or a
    failed write (put). A broken cache never breaks a request.

    Attributes:
        pool: Redis connection pool (None when a client was injected)
        client: Redis client instance (None when unavailable)
    """

    def __init__(
        self,
        url: Optional[str] = None,
        client: Optional[redis.Redis] = None,
    ) -> None:
        """
        Initialize the store.

        Args:
            url: Redis URL. Defaults to FLATTEN_REDIS_URL, then REDIS_URL,
                then a local server.
            client: Ready-made Redis client to use instead of a new pool
        """
        self.pool: Optional[ConnectionPool] = None
        self.client: Optional[redis.Redis] = client

        if client is None:
            self._initialize_pool(url)

    def _initialize_pool(self, url: Optional[str]) -> None:
        """
        Initialize Redis connection pool.

        Args:
            url: Redis URL, or None to read it from the environment
        """
        redis_url = (
            url
            or os.getenv("FLATTEN_REDIS_URL")
            or os.getenv("REDIS_URL", DEFAULT_REDIS_URL)
        )

        try:
            self.pool = ConnectionPool.from_url(
                redis_url,
                max_connections=20,
                decode_responses=True,  # Pages are stored as text
                socket_timeout=5,
                socket_connect_timeout=5,
                retry_on_timeout=True,
            )

            self.client = redis.Redis(connection_pool=self.pool)

            logger.info(
                "redis_pool_initialized",
                max_connections=20,
                redis_url=redis_url.split("@")[-1],  # Don't log credentials
            )

        except Exception as e:
            logger.error(
                "redis_pool_initialization_failed",
                error=str(e),
                error_type=type(e).__name__,
            )
            self.client = None
            self.pool = None

    def has(self, key: str) -> bool:
        """
        Check whether a key is stored.

        Args:
            key: Cache key

        Returns:
            True if the key exists, False otherwise or on error
        """
        if not self.client:
            logger.debug("cache_has_skipped", reason="redis_not_available", key=key)
            return False

        try:
            return bool(self.client.exists(key))

        except Exception as e:
            logger.error(
                "cache_has_error",
                key=key,
                error=str(e),
                error_type=type(e).__name__,
            )
            return False

    def get(self, key: str) -> Optional[str]:
        """
        Retrieve a stored page.

        Args:
            key: Cache key

        Returns:
            Stored content, or None if not found or on error

        Example:
            >>> store = RedisStore()
            >>> body = store.get("GET-/blog/")
        """
        if not self.client:
            logger.debug("cache_get_skipped", reason="redis_not_available", key=key)
            return None

        try:
            value = self.client.get(key)

            if value is None:
                logger.debug("cache_miss", key=key)
            else:
                logger.debug("cache_hit", key=key)

            return value

        except Exception as e:
            logger.error(
                "cache_get_error",
                key=key,
                error=str(e),
                error_type=type(e).__name__,
            )
            return None

    def put(self, key: str, content: str, ttl: int) -> bool:
        """
        Store a page with an expiry.

        A non-positive TTL caches for no time at all: nothing is written
        and False is returned.

        Args:
            key: Cache key
            content: Page body
            ttl: Time to live in seconds

        Returns:
            True if stored, False otherwise
        """
        if not self.client:
            logger.debug("cache_put_skipped", reason="redis_not_available", key=key)
            return False

        if ttl <= 0:
            logger.debug("cache_put_skipped", reason="non_positive_ttl", key=key, ttl=ttl)
            return False

        try:
            self.client.setex(key, ttl, content)

            logger.debug(
                "cache_put",
                key=key,
                ttl=ttl,
                data_size=len(content),
            )

            return True

        except Exception as e:
            logger.error(
                "cache_put_error",
                key=key,
                error=str(e),
                error_type=type(e).__name__,
            )
            return False

    def ping(self) -> bool:
        """
        Check Redis connection health.

        Returns:
            True if Redis is healthy, False otherwise
        """
        if not self.client:
            logger.warning("redis_ping_failed", reason="client_not_initialized")
            return False

        try:
            return bool(self.client.ping())

        except Exception as e:
            logger.error(
                "redis_ping_failed",
                error=str(e),
                error_type=type(e).__name__,
            )
            return False

    def close(self) -> None:
        """Close the client and disconnect the pool."""
        try:
            if self.client:
                self.client.close()
                logger.info("redis_client_closed")

            if self.pool:
                self.pool.disconnect()
                logger.info("redis_pool_disconnected")

        except Exception as e:
            logger.error(
                "redis_close_error",
                error=str(e),
                error_type=type(e).__name__,
            )

    def is_available(self) -> bool:
        """
        Check if a Redis client is available.

        Note:
            This only checks if the client exists, not if Redis is reachable.
            Use ping() for a real health check.
        """
        return self.client is not None


class MemoryStore:
    """In-process store with monotonic-clock expiry."""

    def __init__(self) -> None:
        self._entries: Dict[str, Tuple[str, float]] = {}

    def _live(self, key: str) -> Optional[str]:
        entry = self._entries.get(key)
        if entry is None:
            return None

        content, expires_at = entry
        if time.monotonic() >= expires_at:
            del self._entries[key]
            return None
        return content

    def has(self, key: str) -> bool:
        return self._live(key) is not None

    def get(self, key: str) -> Optional[str]:
        return self._live(key)

    def put(self, key: str, content: str, ttl: int) -> bool:
        if ttl <= 0:
            return False

        self._entries[key] = (content, time.monotonic() + ttl)
        return True
