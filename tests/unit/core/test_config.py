"""Unit tests for core config parsing."""

from __future__ import annotations

import os

import pytest

from core.config import LineportConfig, parse_log_level
from core.constants import DEFAULT_CHUNK_SIZE
from core.errors import LineportConfigError


def test_from_env_reads_store_target(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should resolve host, database, and collection from environment."""
    monkeypatch.setenv("LINEPORT_HOST", "localhost:27017")
    monkeypatch.setenv("LINEPORT_DB", "logs")
    monkeypatch.setenv("LINEPORT_COLLECTION", "lines")

    config = LineportConfig.from_env()

    assert config.mongo_uri == "mongodb://localhost:27017/logs"


def test_from_env_uses_default_chunk_size(monkeypatch: pytest.MonkeyPatch) -> None:
    """Chunk size should default when the variable is unset."""
    monkeypatch.delenv("LINEPORT_CHUNK_SIZE", raising=False)

    config = LineportConfig.from_env()

    assert config.chunk_size == DEFAULT_CHUNK_SIZE


def test_from_env_raises_for_invalid_chunk_size(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should fail for non-numeric chunk sizes."""
    monkeypatch.setenv("LINEPORT_CHUNK_SIZE", "lots")

    with pytest.raises(LineportConfigError):
        LineportConfig.from_env()

    assert os.getenv("LINEPORT_CHUNK_SIZE") == "lots"


def test_from_env_raises_for_non_positive_timeout(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should reject zero connection timeouts."""
    monkeypatch.setenv("LINEPORT_SERVER_SELECTION_TIMEOUT_MS", "0")

    with pytest.raises(LineportConfigError):
        LineportConfig.from_env()

    assert True


@pytest.mark.parametrize(
    ("host", "db", "collection", "missing"),
    [
        (None, "d", "c", "--host"),
        ("h", None, "c", "--db"),
        ("h", "d", None, "--collection"),
    ],
)
def test_require_store_target_names_missing_option(
    host: str | None,
    db: str | None,
    collection: str | None,
    missing: str,
) -> None:
    """Missing store selectors should be reported by option name."""
    config = LineportConfig(host=host, db=db, collection=collection)

    with pytest.raises(LineportConfigError) as error_info:
        config.require_store_target()

    assert missing in str(error_info.value)


def test_parse_log_level_normalizes_case() -> None:
    """Log level names should be case-insensitive."""
    assert parse_log_level(" WARNING ") == "warning"


def test_parse_log_level_rejects_unknown_level() -> None:
    """Unknown log levels should raise config errors."""
    with pytest.raises(LineportConfigError):
        parse_log_level("verbose")

    assert True
