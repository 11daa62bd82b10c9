"""
Flatten: full-page response cache gate.

Decides per request whether a page is served from the cache or rendered
and stored, and computes the deterministic cache key of each page.

Example:
    >>> from flatten import Flatten, FlattenConfig, RequestContext, RedisStore
    >>> flatten = Flatten(
    ...     FlattenConfig.from_env(),
    ...     RequestContext(path="/blog/post-1", method="GET"),
    ...     RedisStore(),
    ... )
"""

from flatten.cache import CacheHandler, CacheStore, MemoryStore, RedisStore
from flatten.config import FlattenConfig
from flatten.engine import Flatten
from flatten.events import FlattenEvents
from flatten.exceptions import ConfigurationError, FlattenError
from flatten.models import Halt, PageResponse, RequestContext

__version__ = "1.0.0"

__all__ = [
    # Engine
    "Flatten",
    "FlattenEvents",
    # Configuration
    "FlattenConfig",
    # Cache
    "CacheHandler",
    "CacheStore",
    "MemoryStore",
    "RedisStore",
    # Models
    "Halt",
    "PageResponse",
    "RequestContext",
    # Exceptions
    "FlattenError",
    "ConfigurationError",
]
