"""Lineport CLI entry points.
This module parses import arguments and runs one import to completion.
It maps argparse options onto runtime config and pipeline calls.
"""

from __future__ import annotations

import argparse
import asyncio
from dataclasses import replace
import sys
from typing import BinaryIO, Callable, Sequence

from core.config import LineportConfig, parse_log_level
from core.constants import BUILTIN_TRANSFORM_NAMES, STDIN_SOURCE_MARKER, SUPPORTED_LOG_LEVELS
from core.errors import LineportConfigError, LineportError
from core.logging_config import configure_logging
from core.types import ImportOptions, ImportResult, LineTransform
from ingest.pipeline import run_import

_USAGE_EPILOG = """\
To import one or more files:
  lineport [options] file1 [file2 [file3 [...]]]
To import from stdin:
  lineport [options] - [id_prefix]
The document ids are the filename plus the zero-padded line number.
When importing from stdin, the id_prefix replaces the filename; without it
a random 10-character token is used.
"""


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(
        prog="lineport",
        description="Import line-delimited text into MongoDB, one document per line.",
        epilog=_USAGE_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "sources",
        nargs="+",
        help="Files to import, or '-' followed by an optional id prefix for stdin",
    )
    parser.add_argument("--host", help="MongoDB host (hostname[:port])")
    parser.add_argument("--db", help="MongoDB database name")
    parser.add_argument("--collection", help="MongoDB collection name")
    parser.add_argument(
        "--transform",
        help=(
            f"Line transform: one of {', '.join(BUILTIN_TRANSFORM_NAMES)}, "
            "'module:function', or 'file.py:function' (default: text)"
        ),
    )
    parser.add_argument("--chunk-size", type=int, help="Bytes requested per source read")
    parser.add_argument(
        "--log-level",
        choices=SUPPORTED_LOG_LEVELS,
        help="Minimum structured log level",
    )
    return parser


def main(
    argv: Sequence[str] | None = None,
    stdin: BinaryIO | None = None,
    transform: LineTransform | None = None,
    on_complete: Callable[[], None] | None = None,
) -> int:
    """Run the Lineport CLI.

    Args:
        argv: Optional argument vector.
        stdin: Binary stream for ``-`` sources; defaults to process stdin.
        transform: Python transform overriding ``--transform``.
        on_complete: Callback fired once all writes resolved.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        config = _build_config(args)
    except LineportConfigError as error:
        parser.error(str(error))
    configure_logging(config.log_level)
    options = ImportOptions(sources=tuple(args.sources), transform_ref=args.transform)
    input_stream = stdin if stdin is not None else _process_stdin(options)
    try:
        result = asyncio.run(run_import(options, config, transform, input_stream, on_complete))
    except LineportConfigError as error:
        parser.error(str(error))
    except LineportError as error:
        print(f"lineport: error: {error}", file=sys.stderr)
        return 1
    _print_summary(result)
    return 0


def _build_config(args: argparse.Namespace) -> LineportConfig:
    """Build runtime config with CLI overrides applied.

    Args:
        args: Parsed CLI args.

    Returns:
        Validated config.

    Raises:
        LineportConfigError: If a required store option is missing.
    """
    config = LineportConfig.from_env()
    if args.host:
        config = replace(config, host=args.host)
    if args.db:
        config = replace(config, db=args.db)
    if args.collection:
        config = replace(config, collection=args.collection)
    if args.chunk_size is not None:
        if args.chunk_size <= 0:
            raise LineportConfigError(
                f"Invalid --chunk-size value: expected a positive integer, got {args.chunk_size}."
            )
        config = replace(config, chunk_size=args.chunk_size)
    if args.log_level:
        config = replace(config, log_level=parse_log_level(args.log_level))
    config.require_store_target()
    return config


def _print_summary(result: ImportResult) -> None:
    """Print one tab-separated summary line for scripting."""
    print(
        f"{result.lines_read}\t"
        f"{result.documents_dispatched}\t"
        f"{result.lines_skipped}\t"
        f"{result.writes_failed}"
    )


def _process_stdin(options: ImportOptions) -> BinaryIO | None:
    """Return process stdin only when the import reads from it."""
    if options.sources[:1] == (STDIN_SOURCE_MARKER,):
        return sys.stdin.buffer
    return None
