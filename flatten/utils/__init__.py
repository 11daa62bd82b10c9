"""Logging helpers shared across the package."""

from flatten.utils.logger import get_logger, request_logger, setup_logging

__all__ = ["get_logger", "request_logger", "setup_logging"]
