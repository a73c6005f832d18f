"""Public SDK surface for Lineport.

This module provides a stable import path for scripts that supply
their own line transform. It re-exports the transform result types.
"""

from __future__ import annotations

from typing import BinaryIO, Callable, Sequence

from cli.main import main
from core.config import LineportConfig
from core.types import (
    SKIPPED,
    Accepted,
    ImportOptions,
    ImportResult,
    LineTransform,
    RecordContext,
    Skipped,
)
from ingest.pipeline import run_import


def process(
    argv: Sequence[str],
    transform: LineTransform,
    stdin: BinaryIO | None = None,
    on_complete: Callable[[], None] | None = None,
) -> int:
    """Run an import with command-line style arguments and a Python transform.

    Args:
        argv: Arguments without the program name, e.g.
            ``["--host", "localhost", "--db", "d", "--collection", "c", "data.txt"]``.
        transform: Callable turning each record into Accepted or SKIPPED.
        stdin: Binary stream for ``-`` sources; defaults to process stdin.
        on_complete: Callback fired once every dispatched write resolved.

    Returns:
        Process exit code.
    """
    return main(argv, stdin=stdin, transform=transform, on_complete=on_complete)


__all__ = [
    "Accepted",
    "ImportOptions",
    "ImportResult",
    "LineTransform",
    "LineportConfig",
    "RecordContext",
    "SKIPPED",
    "Skipped",
    "process",
    "run_import",
]
