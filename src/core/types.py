"""Shared typed models.

This module defines immutable data models used by ingest, transform,
store, and CLI layers to keep interfaces explicit and stable.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Mapping, Union


@dataclass(frozen=True)
class RecordContext:
    """Structured view of one logical line before transformation.

    Attributes:
        text: Line content with the delimiter stripped.
        filename: Source name (file path, id prefix, or generated token).
        line_number: One-based line position within the source.
        record_id: Stable identifier built from source name and line number.
    """

    text: str
    filename: str
    line_number: int
    record_id: str

    def as_payload(self) -> dict[str, Any]:
        """Return the record in its hook-boundary dictionary shape."""
        return {
            "text": self.text,
            "filename": self.filename,
            "lineNumber": self.line_number,
            "recordId": self.record_id,
        }


@dataclass(frozen=True)
class Accepted:
    """Transform result carrying a document to persist."""

    document: Mapping[str, Any]


@dataclass(frozen=True)
class Skipped:
    """Transform result meaning the line is consumed without a write."""


SKIPPED = Skipped()

TransformResult = Union[Accepted, Skipped]
LineTransform = Callable[[RecordContext], TransformResult]


@dataclass(frozen=True)
class SourceSpec:
    """One source to ingest.

    Attributes:
        name: Name used to build record ids.
        path: File path, or None for standard input.
    """

    name: str
    path: str | None = None

    @property
    def is_stdin(self) -> bool:
        """Whether this source reads standard input."""
        return self.path is None


@dataclass(frozen=True)
class ImportOptions:
    """User-facing import request options.

    Attributes:
        sources: Raw source arguments, file paths or ``-`` with an optional prefix.
        transform_ref: Optional transform reference resolved by the loader.
    """

    sources: tuple[str, ...]
    transform_ref: str | None = None


@dataclass(frozen=True)
class ImportResult:
    """Counters reported once every dispatched write has resolved.

    Attributes:
        sources_read: Number of sources fully drained.
        lines_read: Number of logical lines emitted across all sources.
        documents_dispatched: Number of writes handed to the store.
        lines_skipped: Number of lines the transform skipped.
        writes_failed: Number of dispatched writes that resolved with an error.
    """

    sources_read: int
    lines_read: int
    documents_dispatched: int
    lines_skipped: int
    writes_failed: int
