"""
Pydantic models exchanged between the cache gate and its host framework.

Defines the request attributes the gate reads, the page response it
builds, and the short-circuit signal returned when a cached page has
been sent.
"""
from typing import Optional

from pydantic import BaseModel, Field


class RequestContext(BaseModel):
    """
    Attributes of the current request relevant to caching.

    Built by the host framework once per request.
    """

    path: str = Field(
        "/",
        description="Request path info, e.g. /blog/post-1",
    )
    method: str = Field(
        "GET",
        description="HTTP method of the request",
    )
    environment: Optional[str] = Field(
        None,
        description="Name of the running environment (None if unknown)",
    )
    running_in_console: bool = Field(
        False,
        description="Whether the application runs from the command line",
    )

    model_config = {
        "json_schema_extra": {
            "example": {
                "path": "/blog/post-1",
                "method": "GET",
                "environment": "production",
                "running_in_console": False,
            }
        }
    }


class PageResponse(BaseModel):
    """
    Full page response served from or stored into the cache.

    A default instance (empty body) is returned when there is nothing
    to serve.
    """

    content: str = Field(
        "",
        description="Rendered page body",
    )
    status_code: int = Field(
        200,
        ge=100,
        le=599,
        description="HTTP status code",
    )


class Halt(BaseModel):
    """
    Signal that a response has been emitted and processing must stop.

    Returned up the call stack by ``Flatten.render()``. The host framework
    stops running handlers when it receives one, so its own cleanup still
    runs.

    Example:
        >>> result = flatten.start()
        >>> if isinstance(result, Halt):
        ...     return result.response
    """

    response: PageResponse = Field(
        ...,
        description="The response that was sent",
    )
