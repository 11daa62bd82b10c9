"""Path pattern matching for the only/ignore lists.

Each list is a sequence of raw regular expression fragments. The fragments
are joined into a single alternation and searched (not anchored) against
the normalized request path.
"""

import re
from functools import lru_cache
from typing import Pattern, Sequence, Tuple

from flatten.exceptions import ConfigurationError


@lru_cache(maxsize=128)
def _compile(patterns: Tuple[str, ...]) -> Pattern[str]:
    return re.compile("|".join(patterns))


def compile_patterns(patterns: Sequence[str]) -> Pattern[str]:
    """
    Compile a list of path patterns into one alternation regex.

    Compiled expressions are memoized per distinct pattern list, so a
    configuration validated at load time is never recompiled per request.

    Args:
        patterns: Raw regex fragments, e.g. ["^/admin", "\\.json/$"]

    Returns:
        Compiled pattern matching any of the fragments

    Raises:
        ConfigurationError: If the joined expression is not valid
    """
    try:
        return _compile(tuple(patterns))
    except re.error as e:
        raise ConfigurationError(f"Invalid path pattern: {e}") from e


def matches(patterns: Sequence[str], path: str) -> bool:
    """Whether ``path`` matches any of ``patterns``."""
    return compile_patterns(patterns).search(path) is not None
