"""
Page cache configuration.

Settings are held in a pydantic model so that every value is coerced once,
when the configuration is loaded. Path patterns are compiled at that point
as well, which surfaces a malformed only/ignore entry before any request is
served.
"""

import json
import os
from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator

from flatten.exceptions import ConfigurationError
from flatten.patterns import compile_patterns
from flatten.utils.logger import get_logger

logger = get_logger(__name__)

ENV_PREFIX = "FLATTEN_"


class FlattenConfig(BaseModel):
    """
    Configuration for the page cache gate.

    An empty list means the setting is not configured: no only/ignore
    patterns caches every page, no salts produces a key from path and
    method alone.

    Attributes:
        lifetime: Cache lifetime in seconds (non-positive caches nothing)
        environments: Environment names in which caching is turned off
        only: Path patterns that make a page cacheable
        ignore: Path patterns that keep a page out of the cache
        saltshaker: Ordered extra factors mixed into every cache key
    """

    lifetime: int = Field(
        0,
        description="Cache lifetime in seconds",
    )
    environments: List[str] = Field(
        default_factory=list,
        description="Environments in which pages are not cached",
    )
    only: List[str] = Field(
        default_factory=list,
        description="Regex fragments of pages to cache",
    )
    ignore: List[str] = Field(
        default_factory=list,
        description="Regex fragments of pages never to cache",
    )
    saltshaker: List[str] = Field(
        default_factory=list,
        description="Salts appended to every cache key",
    )

    model_config = {
        "json_schema_extra": {
            "example": {
                "lifetime": 300,
                "environments": ["local"],
                "only": [],
                "ignore": ["^/admin", "^/account"],
                "saltshaker": ["en"],
            }
        }
    }

    @field_validator("lifetime", mode="before")
    @classmethod
    def default_lifetime(cls, v: Any) -> Any:
        """Treat a missing lifetime as zero."""
        if v is None or v == "":
            return 0
        return v

    @field_validator("environments", "only", "ignore", "saltshaker", mode="before")
    @classmethod
    def default_list(cls, v: Any) -> Any:
        """Treat a missing list setting as an empty list."""
        if v is None:
            return []
        if isinstance(v, str):
            return [v]
        return v

    @field_validator("only", "ignore")
    @classmethod
    def compile_path_patterns(cls, v: List[str]) -> List[str]:
        """
        Compile path patterns once at load time.

        Raises:
            ValueError: If the patterns do not form a valid regex
        """
        if v:
            try:
                compile_patterns(v)
            except ConfigurationError as e:
                raise ValueError(e.message) from e
        return v

    @classmethod
    def from_env(cls, prefix: str = ENV_PREFIX) -> "FlattenConfig":
        """
        Load configuration from environment variables.

        Reads ``<prefix>LIFETIME``, ``<prefix>ENVIRONMENTS``,
        ``<prefix>ONLY``, ``<prefix>IGNORE`` and ``<prefix>SALTSHAKER``.
        List values are either JSON arrays or comma-separated strings;
        use the JSON form for patterns containing commas.

        Returns:
            Loaded configuration

        Raises:
            ConfigurationError: If a JSON list value cannot be decoded
            pydantic.ValidationError: If a value has the wrong type or
                a path pattern is invalid

        Example:
            >>> os.environ["FLATTEN_IGNORE"] = '["^/admin"]'
            >>> FlattenConfig.from_env().ignore
            ['^/admin']
        """
        config = cls(
            lifetime=os.getenv(f"{prefix}LIFETIME"),
            environments=_env_list(f"{prefix}ENVIRONMENTS"),
            only=_env_list(f"{prefix}ONLY"),
            ignore=_env_list(f"{prefix}IGNORE"),
            saltshaker=_env_list(f"{prefix}SALTSHAKER"),
        )

        logger.debug(
            "config_loaded",
            lifetime=config.lifetime,
            environments=config.environments,
            only=len(config.only),
            ignore=len(config.ignore),
            salts=len(config.saltshaker),
        )

        return config


def _env_list(name: str) -> Optional[List[str]]:
    value = os.getenv(name)
    if not value or not value.strip():
        return None

    if value.lstrip().startswith("["):
        try:
            decoded = json.loads(value)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON list: {e}", field=name) from e
        if not isinstance(decoded, list):
            raise ConfigurationError("Expected a JSON list", field=name)
        return [str(item) for item in decoded]

    return [item.strip() for item in value.split(",") if item.strip()]
