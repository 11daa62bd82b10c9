"""
Page cache decision engine.

Decides whether the current request takes part in caching, computes the
cache key of the page and drives the start/end lifecycle around request
handling:

    start()  -> on_application_boot()      serve the cached page, if any
    (the application renders the page on a miss)
    end()    -> on_application_done(resp)  store the rendered page

Eligibility is re-evaluated by both start() and end().
"""

from typing import Any, Callable, Optional, Sequence

from flatten.cache.handler import CacheHandler
from flatten.cache.store import CacheStore
from flatten.config import FlattenConfig
from flatten.events import FlattenEvents, LifecycleHooks
from flatten.exceptions import FlattenError
from flatten.models.responses import Halt, PageResponse, RequestContext
from flatten.patterns import matches as match_patterns
from flatten.utils.logger import request_logger

Emitter = Callable[[PageResponse], Any]


class Flatten:
    """
    Gate a single request through the page cache.

    One instance is built per request. It reads the request attributes
    and configuration but never mutates the store directly; all store
    access goes through ``cache``.

    Attributes:
        config: Cache configuration
        request: Attributes of the current request
        store: Backing cache store
        emit: Callable sending a response to the client
        events: Lifecycle hooks (boot/done)
        logger: Optional logger handed to the cache handler

    Example:
        >>> flatten = Flatten(config, request, store, send)
        >>> result = flatten.start()
        >>> if isinstance(result, Halt):
        ...     return  # cached page already sent
        >>> response = render_page()
        >>> flatten.end(response)
    """

    def __init__(
        self,
        config: FlattenConfig,
        request: RequestContext,
        store: CacheStore,
        emit: Emitter,
        events: Optional[LifecycleHooks] = None,
        logger: Optional[Any] = None,
    ) -> None:
        if not callable(emit):
            raise FlattenError("A response emitter is required")

        self.config = config
        self.request = request
        self.store = store
        self.emit = emit
        self.logger = logger
        self.log = request_logger(__name__, request)
        self.events = events if events is not None else FlattenEvents(self)
        self._cache: Optional[CacheHandler] = None

    @property
    def cache(self) -> CacheHandler:
        """Cache handler keyed by the current page's hash."""
        if self._cache is None:
            self._cache = CacheHandler(
                self.store, self.config, self.compute_hash(), self.logger
            )
        return self._cache

    # Caching process

    def start(self) -> Any:
        """
        Start the caching system.

        Returns:
            Result of the boot hook, or None if caching does not apply
        """
        if self.should_run():
            return self.events.on_application_boot()
        return None

    def end(self, response: Any = None) -> Any:
        """
        Stop the caching system.

        Args:
            response: The rendered response to store

        Returns:
            Result of the done hook, or None if caching does not apply
        """
        if self.should_run():
            return self.events.on_application_done(response)
        return None

    # Checks

    def should_run(self) -> bool:
        """Whether caching applies to the current request."""
        if not self.is_in_allowed_environment():
            self.log.debug("cache_skipped", reason="environment")
            return False

        return self.should_cache_page()

    def should_cache_page(self) -> bool:
        """
        Whether the current page may be cached.

        With neither list configured every page is cacheable. Otherwise a
        page is cacheable if it matches the only-list or does not match
        the ignore-list; either condition is sufficient.
        """
        only = self.config.only
        ignored = self.config.ignore
        cache = False

        if not ignored and not only:
            cache = True
        else:
            if only and self.matches(only):
                cache = True
            if ignored and not self.matches(ignored):
                cache = True

        return cache

    def is_in_allowed_environment(self) -> bool:
        """
        Whether the current environment permits caching.

        Caching is off from the console and in every environment listed in
        ``config.environments``. An unknown environment permits caching.
        """
        if self.request.environment is None:
            return True

        return (
            not self.request.running_in_console
            and self.request.environment not in self.config.environments
        )

    def matches(self, patterns: Sequence[str]) -> bool:
        """
        Whether the current page matches any of the given patterns.

        Args:
            patterns: Raw regex fragments, joined into one alternation

        Returns:
            True if the normalized path matches
        """
        return match_patterns(patterns, self.current_url())

    # Rendering

    def get_response(self, content: Optional[str] = None) -> PageResponse:
        """
        Create a response to send from content.

        Args:
            content: Page body. Read from the cache when empty.

        Returns:
            A 200 response carrying the content, or an empty response
        """
        if not content:
            content = self.cache.get_cache()

        if content:
            return PageResponse(content=content, status_code=200)

        return PageResponse()

    def render(self, content: Optional[str] = None) -> Halt:
        """
        Send a response and signal that processing must stop.

        The response is emitted exactly once. The caller must return the
        Halt up its stack without running further handlers.

        Args:
            content: Page body. Read from the cache when empty.

        Returns:
            Halt wrapping the emitted response
        """
        response = self.get_response(content)

        self.emit(response)

        self.log.debug(
            "page_rendered",
            status_code=response.status_code,
            size=len(response.content),
        )

        return Halt(response=response)

    # Helpers

    def current_url(self) -> str:
        """Current request path, ending with exactly one slash."""
        return self.request.path.rstrip("/") + "/"

    def compute_hash(self, page: Optional[str] = None) -> str:
        """
        Compute the cache key of a page.

        The salts are appended to the page, then the key is built from
        the salts, the HTTP method and the salted page, joined by hyphens.

        Args:
            page: Page path. Defaults to the current normalized path.

        Returns:
            Cache key

        Example:
            >>> # path /blog/post-1, method GET, saltshaker ["v2"]
            >>> flatten.compute_hash()
            'v2-GET-/blog/post-1/v2'
        """
        if not page:
            page = self.current_url()

        salts = list(self.config.saltshaker)
        page += "".join(salts)

        return "-".join(salts + [self.request.method, page])
