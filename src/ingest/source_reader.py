"""Chunked source reading.

This module reads binary streams chunk by chunk without blocking the
event loop, feeding each chunk through a line splitter in order.
"""

from __future__ import annotations

import asyncio
from typing import AsyncIterator, BinaryIO, Callable

from core.errors import LineportIngestError
from core.types import RecordContext
from ingest.line_splitter import LineSplitter
from ingest.record_builder import build_record

LineHandler = Callable[[RecordContext], None]


async def iter_chunks(
    stream: BinaryIO,
    chunk_size: int,
    source_name: str = "<stream>",
) -> AsyncIterator[bytes]:
    """Yield chunks from a blocking binary stream as they arrive.

    Reads run in a worker thread so pending writes keep resolving
    while the next chunk is awaited. Buffered streams are read with
    ``read1`` so a chunk is yielded without waiting for ``chunk_size``.

    Raises:
        LineportIngestError: If reading the stream fails.
    """
    read = getattr(stream, "read1", stream.read)
    while True:
        try:
            chunk = await asyncio.to_thread(read, chunk_size)
        except OSError as error:
            raise LineportIngestError(
                f"Failed to read source {source_name}: {error.strerror or error}."
            ) from error
        if not chunk:
            return
        yield chunk


async def read_source(
    stream: BinaryIO,
    source_name: str,
    chunk_size: int,
    handle_line: LineHandler,
) -> int:
    """Read one source to its end and hand every line to ``handle_line``.

    Args:
        stream: Open binary stream for the source.
        source_name: Resolved source name used in record ids.
        chunk_size: Bytes requested per read.
        handle_line: Synchronous callback invoked once per line, in order.

    Returns:
        Number of lines emitted.
    """
    splitter = LineSplitter(source_name)
    line_number = 0
    async for chunk in iter_chunks(stream, chunk_size, source_name):
        for raw_line in splitter.feed(chunk):
            line_number += 1
            handle_line(build_record(source_name, line_number, raw_line))
    remainder = splitter.finish()
    if remainder is not None:
        line_number += 1
        handle_line(build_record(source_name, line_number, remainder))
    return line_number
