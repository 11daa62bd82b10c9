"""Default lifecycle hooks for the page cache.

On boot a cached page is served and processing halts. On completion the
rendered page is stored under the same key.
"""

from typing import TYPE_CHECKING, Any, Optional, Protocol, Union

from flatten.models.responses import Halt, PageResponse
from flatten.utils.logger import get_logger

if TYPE_CHECKING:
    from flatten.engine import Flatten

logger = get_logger(__name__)


class LifecycleHooks(Protocol):
    """Hooks run by Flatten.start() and Flatten.end()."""

    def on_application_boot(self) -> Any:
        ...

    def on_application_done(self, response: Any = None) -> Any:
        ...


def response_body(response: Any) -> Optional[Union[str, bytes]]:
    """
    Extract the page body from a rendered response.

    Args:
        response: A PageResponse, or the body itself as str/bytes

    Returns:
        The body, or None for anything else (None, Halt, foreign objects)
    """
    if isinstance(response, PageResponse):
        return response.content
    if isinstance(response, (str, bytes)):
        return response
    return None


class FlattenEvents:
    """Boot/done hooks driving the cache-or-render cycle of one request."""

    def __init__(self, flatten: "Flatten") -> None:
        self.flatten = flatten

    def on_application_boot(self) -> Optional[Halt]:
        """
        Serve the cached page if there is one.

        Returns:
            Halt if a cached page was sent, None on a miss
        """
        cache = self.flatten.cache

        if cache.has_cache():
            logger.debug("page_served_from_cache", hash=cache.hash)
            return self.flatten.render()

        logger.debug("page_not_cached", hash=cache.hash)
        return None

    def on_application_done(self, response: Any = None) -> bool:
        """
        Store the rendered page.

        Args:
            response: A PageResponse, or the page body as str/bytes

        Returns:
            Whether the page was stored
        """
        content = response_body(response)

        if content is None and response is not None:
            logger.warning(
                "unsupported_response_type",
                response_type=type(response).__name__,
            )
            return False

        return self.flatten.cache.store_cache(content)
