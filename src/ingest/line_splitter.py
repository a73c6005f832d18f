"""Streaming line splitter.

This module rebuilds logical lines from arbitrarily sized byte chunks.
Partial lines are carried between chunks until a delimiter arrives.
"""

from __future__ import annotations

from core.constants import LINE_DELIMITER
from core.errors import LineportIngestError


class LineSplitter:
    """Carry-over buffer that emits complete lines for one source.

    ``feed`` is called once per chunk in arrival order and ``finish``
    exactly once after the last chunk. The emitted sequence depends only
    on the concatenated bytes, never on how they were chunked.
    """

    def __init__(self, source_name: str) -> None:
        self._source_name = source_name
        self._buffer = bytearray()
        self._finished = False

    @property
    def pending_bytes(self) -> int:
        """Number of buffered bytes not yet emitted as a line."""
        return len(self._buffer)

    def feed(self, chunk: bytes) -> list[bytes]:
        """Consume one chunk and return the lines it completes.

        Args:
            chunk: Next bytes of the source.

        Returns:
            Complete lines in discovery order, delimiters stripped.

        Raises:
            LineportIngestError: If called after ``finish``.
        """
        self._ensure_open("feed")
        lines: list[bytes] = []
        start = 0
        index = chunk.find(LINE_DELIMITER)
        while index >= 0:
            if self._buffer:
                self._buffer.extend(chunk[start:index])
                lines.append(bytes(self._buffer))
                self._buffer.clear()
            else:
                lines.append(bytes(chunk[start:index]))
            start = index + 1
            index = chunk.find(LINE_DELIMITER, start)
        self._buffer.extend(chunk[start:])
        return lines

    def finish(self) -> bytes | None:
        """Close the splitter and return the unterminated final line.

        Returns:
            Remaining buffered bytes, or None when nothing is buffered.

        Raises:
            LineportIngestError: If called more than once.
        """
        self._ensure_open("finish")
        self._finished = True
        if not self._buffer:
            return None
        remainder = bytes(self._buffer)
        self._buffer.clear()
        return remainder

    def _ensure_open(self, operation: str) -> None:
        if self._finished:
            raise LineportIngestError(
                f"Cannot {operation} line splitter for {self._source_name}: "
                "the source was already finished."
            )
