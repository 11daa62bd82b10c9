"""
Structured logging configuration using structlog.

Every event carries ``component="flatten"`` so page cache decisions can be
filtered out of the host application's log stream. Level and output format
are read from ``FLATTEN_LOG_LEVEL`` and ``FLATTEN_LOG_FORMAT``.
"""
import logging
import os
import sys
from typing import Any, MutableMapping, Optional

import structlog

from flatten.models.responses import RequestContext

COMPONENT = "flatten"


def add_component(
    logger: Any, method_name: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """Tag an event with the package name unless already tagged."""
    event_dict.setdefault("component", COMPONENT)
    return event_dict


def setup_logging(level: Optional[str] = None, log_format: Optional[str] = None) -> None:
    """
    Configure structured logging for the page cache.

    Args:
        level: Log level string (DEBUG, INFO, ...). Defaults to
            FLATTEN_LOG_LEVEL, then INFO.
        log_format: "console" for colored human-readable output, anything
            else for JSON. Defaults to FLATTEN_LOG_FORMAT, then JSON.
    """
    level = level or os.getenv("FLATTEN_LOG_LEVEL", "INFO")
    log_format = log_format or os.getenv("FLATTEN_LOG_FORMAT", "json")
    log_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
    )

    processors = [
        structlog.contextvars.merge_contextvars,
        add_component,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]

    if log_format.lower() == "console":
        processors.append(structlog.dev.ConsoleRenderer())
    else:
        processors.append(structlog.processors.JSONRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str = __name__) -> structlog.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (typically __name__ of calling module)
    """
    return structlog.get_logger(name)


def request_logger(name: str, request: RequestContext) -> structlog.BoundLogger:
    """
    Get a logger bound to one request.

    Args:
        name: Logger name
        request: Request whose path and method tag every event

    Example:
        >>> log = request_logger(__name__, RequestContext(path="/blog/"))
        >>> log.debug("cache_skipped", reason="environment")
    """
    return get_logger(name).bind(path=request.path, method=request.method)
