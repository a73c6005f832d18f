"""Runtime configuration model for Lineport.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os

from core.constants import (
    DEFAULT_CHUNK_SIZE,
    DEFAULT_LOG_LEVEL,
    DEFAULT_SERVER_SELECTION_TIMEOUT_MS,
    ENV_CHUNK_SIZE,
    ENV_COLLECTION,
    ENV_DB,
    ENV_HOST,
    ENV_LOG_LEVEL,
    ENV_SERVER_SELECTION_TIMEOUT_MS,
    SUPPORTED_LOG_LEVELS,
)
from core.errors import LineportConfigError


@dataclass(frozen=True)
class LineportConfig:
    """Validated runtime configuration.

    Attributes:
        host: MongoDB host in ``hostname[:port]`` form.
        db: Target database name.
        collection: Target collection name.
        chunk_size: Number of bytes requested per source read.
        server_selection_timeout_ms: Connection timeout for the store client.
        log_level: Minimum structured log level.
    """

    host: str | None
    db: str | None
    collection: str | None
    chunk_size: int = DEFAULT_CHUNK_SIZE
    server_selection_timeout_ms: int = DEFAULT_SERVER_SELECTION_TIMEOUT_MS
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls) -> "LineportConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            LineportConfigError: If environment values are invalid.
        """
        chunk_size = _parse_positive_int(
            ENV_CHUNK_SIZE, os.getenv(ENV_CHUNK_SIZE, str(DEFAULT_CHUNK_SIZE))
        )
        timeout_ms = _parse_positive_int(
            ENV_SERVER_SELECTION_TIMEOUT_MS,
            os.getenv(ENV_SERVER_SELECTION_TIMEOUT_MS, str(DEFAULT_SERVER_SELECTION_TIMEOUT_MS)),
        )
        return cls(
            host=os.getenv(ENV_HOST) or None,
            db=os.getenv(ENV_DB) or None,
            collection=os.getenv(ENV_COLLECTION) or None,
            chunk_size=chunk_size,
            server_selection_timeout_ms=timeout_ms,
            log_level=parse_log_level(os.getenv(ENV_LOG_LEVEL, DEFAULT_LOG_LEVEL)),
        )

    @property
    def mongo_uri(self) -> str:
        """Connection string built from host and database."""
        return f"mongodb://{self.host}/{self.db}"

    def require_store_target(self) -> None:
        """Validate that host, database, and collection are all set.

        Raises:
            LineportConfigError: If any store selector is missing.
        """
        if not self.host:
            raise LineportConfigError(
                "MongoDB host must be specified with '--host hostname[:port]' "
                f"or the {ENV_HOST} environment variable."
            )
        if not self.db:
            raise LineportConfigError(
                "MongoDB database name must be specified with '--db name' "
                f"or the {ENV_DB} environment variable."
            )
        if not self.collection:
            raise LineportConfigError(
                "MongoDB collection name must be specified with '--collection name' "
                f"or the {ENV_COLLECTION} environment variable."
            )


def parse_log_level(raw_value: str) -> str:
    """Normalize and validate a log level name.

    Args:
        raw_value: Level name from environment or CLI.

    Returns:
        Lowercase supported level name.

    Raises:
        LineportConfigError: If level is not supported.
    """
    level = raw_value.strip().lower()
    if level not in SUPPORTED_LOG_LEVELS:
        raise LineportConfigError(
            f"Invalid log level '{raw_value}'. "
            f"Use one of: {', '.join(SUPPORTED_LOG_LEVELS)}."
        )
    return level


def _parse_positive_int(name: str, raw_value: str) -> int:
    """Parse a strictly positive integer setting.

    Args:
        name: Setting name for error messages.
        raw_value: Raw string value.

    Returns:
        Parsed integer.

    Raises:
        LineportConfigError: If value is not a positive integer.
    """
    try:
        value = int(raw_value)
    except ValueError as error:
        raise LineportConfigError(
            f"Invalid {name} value: expected integer, got '{raw_value}'. "
            f"Set {name} to a positive number."
        ) from error
    if value <= 0:
        raise LineportConfigError(
            f"Invalid {name} value: expected a positive integer, got {value}."
        )
    return value
