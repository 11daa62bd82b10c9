"""Cache handler for a single page.

A CacheHandler is bound to one cache key for its whole lifetime and is
the only component that talks to the cache store.
"""

from typing import Any, Optional, Union

from flatten.cache.store import CacheStore
from flatten.config import FlattenConfig


class CacheHandler:
    """
    Read and write the cached copy of one page.

    Attributes:
        store: Backing cache store
        config: Cache configuration (provides the lifetime)
        logger: Optional logger notified when a page is cached
    """

    def __init__(
        self,
        store: CacheStore,
        config: FlattenConfig,
        hash: str,
        logger: Optional[Any] = None,
    ) -> None:
        """
        Build a handler for one page.

        Args:
            store: Backing cache store
            config: Cache configuration
            hash: Cache key of the page
            logger: Optional logger; receives one ``info(message)`` call
                per stored page
        """
        self.store = store
        self.config = config
        self.logger = logger
        self._hash = hash

    @property
    def hash(self) -> str:
        """Cache key of the page."""
        return self._hash

    def get_hash(self) -> str:
        """Return the cache key this handler was built with."""
        return self._hash

    def has_cache(self) -> bool:
        """Whether the store holds a copy of the page."""
        return self.store.has(self._hash)

    def get_cache(self) -> Optional[str]:
        """Return the cached page, or None."""
        return self.store.get(self._hash)

    def store_cache(self, content: Optional[Union[str, bytes]]) -> bool:
        """
        Store the page body.

        Empty bodies are never cached.

        Args:
            content: Rendered page body

        Returns:
            The store's success flag, False for empty content
        """
        if not content:
            return False

        if self.logger is not None:
            self.logger.info(f"Caching page {self._hash}")

        return self.store.put(self._hash, content, self.get_lifetime())

    def get_lifetime(self) -> int:
        """Configured cache lifetime in seconds."""
        return int(self.config.lifetime)
