"""
Custom exceptions for the page cache gate.

Only configuration problems are raised as exceptions. Missing settings,
empty page bodies and cache store failures are reported through return
values (False / None) and never interrupt a request.
"""

from typing import Optional


class FlattenError(Exception):
    """
    Base exception for all page cache errors.

    Use this for catching any error raised by this package.
    """

    def __init__(self, message: str) -> None:
        """
        Initialize FlattenError.

        Args:
            message: Error description
        """
        self.message = message
        super().__init__(self.message)


class ConfigurationError(FlattenError):
    """
    Raised when the cache configuration cannot be used.

    This occurs when:
    - An only/ignore path pattern is not a valid regular expression
    - A list setting cannot be decoded from the environment

    Example:
        >>> raise ConfigurationError("unbalanced parenthesis", field="only")
    """

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        """
        Initialize ConfigurationError.

        Args:
            message: Error description
            field: Optional name of the offending setting
        """
        self.field = field

        if field:
            message = f"{field}: {message}"

        super().__init__(message)
