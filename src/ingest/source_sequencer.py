"""Source resolution and sequential reading.

This module resolves command arguments into sources and drains them
strictly one at a time. Standard input and file modes never mix.
"""

from __future__ import annotations

from pathlib import Path
from typing import Awaitable, BinaryIO, Callable, Sequence

from core.constants import STDIN_SOURCE_MARKER
from core.errors import LineportConfigError, LineportIngestError
from core.logging_config import get_logger
from core.types import SourceSpec
from ingest.record_builder import generate_source_token

_LOGGER = get_logger(__name__)

SourceOpener = Callable[[SourceSpec], BinaryIO]
SourceHandler = Callable[[SourceSpec, BinaryIO], Awaitable[int]]


def resolve_sources(
    arguments: Sequence[str],
    token_factory: Callable[[], str] = generate_source_token,
) -> list[SourceSpec]:
    """Resolve raw source arguments into source specs.

    Args:
        arguments: File paths, or ``-`` followed by an optional id prefix.
        token_factory: Generator for the stdin name when no prefix is given.

    Returns:
        Ordered source specs.

    Raises:
        LineportConfigError: If arguments are empty or mix modes.
    """
    if not arguments:
        raise LineportConfigError(
            "The file(s) to import must be specified (use '-' to read from standard input)."
        )
    if arguments[0] == STDIN_SOURCE_MARKER:
        return [_resolve_stdin_source(arguments[1:], token_factory)]
    if STDIN_SOURCE_MARKER in arguments:
        raise LineportConfigError(
            "Standard input ('-') cannot be combined with file sources. "
            "Pass '-' as the first and only source, optionally followed by an id prefix."
        )
    return [SourceSpec(name=argument, path=argument) for argument in arguments]


def _resolve_stdin_source(
    remaining: Sequence[str],
    token_factory: Callable[[], str],
) -> SourceSpec:
    if len(remaining) > 1:
        raise LineportConfigError(
            "Standard input accepts at most one id prefix after '-', "
            f"got {len(remaining)} arguments."
        )
    if remaining:
        return SourceSpec(name=remaining[0])
    return SourceSpec(name=token_factory())


def open_file_source(source: SourceSpec) -> BinaryIO:
    """Open a file source for binary reading.

    Raises:
        LineportIngestError: If the file cannot be opened.
    """
    path = Path(str(source.path)).expanduser()
    try:
        return path.open("rb")
    except OSError as error:
        raise LineportIngestError(
            f"Failed to open source {source.name}: {error.strerror or error}. "
            "Provide an existing readable file."
        ) from error


class SourceSequencer:
    """Drains sources one after another.

    A file is opened only after the previous source was read to its end
    and every line from it was handed on, and is closed once drained.
    """

    def __init__(
        self,
        sources: Sequence[SourceSpec],
        stdin: BinaryIO | None = None,
        opener: SourceOpener = open_file_source,
    ) -> None:
        self._sources = tuple(sources)
        self._stdin = stdin
        self._opener = opener

    async def run(self, handle_source: SourceHandler) -> int:
        """Read every source in order.

        Args:
            handle_source: Coroutine reading one open stream to its end.

        Returns:
            Number of sources drained.
        """
        for source in self._sources:
            if source.is_stdin:
                await self._read_stdin(source, handle_source)
            else:
                await self._read_file(source, handle_source)
        return len(self._sources)

    async def _read_stdin(self, source: SourceSpec, handle_source: SourceHandler) -> None:
        if self._stdin is None:
            raise LineportIngestError(
                f"Source {source.name} reads standard input, but no input stream was provided."
            )
        _LOGGER.info("source_opened", source=source.name, stdin=True)
        line_count = await handle_source(source, self._stdin)
        _LOGGER.info("source_finished", source=source.name, line_count=line_count)

    async def _read_file(self, source: SourceSpec, handle_source: SourceHandler) -> None:
        stream = self._opener(source)
        _LOGGER.info("source_opened", source=source.name, stdin=False)
        try:
            line_count = await handle_source(source, stream)
        finally:
            stream.close()
        _LOGGER.info("source_finished", source=source.name, line_count=line_count)
