"""Import orchestration for line pipelines.

This module coordinates source sequencing, line splitting, record
transforms, and write dispatch for one import run. Completion is
signalled once every dispatched write has resolved.
"""

from __future__ import annotations

from functools import partial
from typing import BinaryIO, Callable, Sequence

from core.config import LineportConfig
from core.errors import LineportIngestError
from core.logging_config import get_logger
from core.types import ImportOptions, ImportResult, LineTransform, RecordContext, SourceSpec
from ingest.record_builder import generate_source_token
from ingest.source_reader import read_source
from ingest.source_sequencer import (
    SourceOpener,
    SourceSequencer,
    open_file_source,
    resolve_sources,
)
from ingest.write_dispatcher import WriteDispatcher
from ingest.write_tracker import CompletionBarrier, InsertionTracker
from store.document_store import DocumentSink, MongoDocumentStore, open_document_store
from transforms.line_transforms import apply_transform, load_line_transform

_LOGGER = get_logger(__name__)


class ImportPipelineRunner:
    """Single-use runner for one import over resolved sources.

    The runner owns its insertion tracker, so concurrent runs in one
    process never observe each other's in-flight writes.
    """

    def __init__(
        self,
        sources: Sequence[SourceSpec],
        sink: DocumentSink,
        transform: LineTransform,
        chunk_size: int,
        stdin: BinaryIO | None = None,
        on_complete: Callable[[], None] | None = None,
        opener: SourceOpener = open_file_source,
    ) -> None:
        self._sources = tuple(sources)
        self._sink = sink
        self._transform = transform
        self._chunk_size = chunk_size
        self._stdin = stdin
        self._on_complete = on_complete
        self._opener = opener
        self._started = False
        self._lines_read = 0
        self._lines_skipped = 0

    async def run(self) -> ImportResult:
        """Read every source, dispatch writes, and wait for them to resolve."""
        if self._started:
            raise LineportIngestError("Import runner instances can only be run once.")
        self._started = True
        tracker = InsertionTracker()
        dispatcher = WriteDispatcher(self._sink, tracker)
        barrier = CompletionBarrier(tracker, self._on_complete)
        sequencer = SourceSequencer(self._sources, self._stdin, self._opener)
        sources_read = await sequencer.run(partial(self._read_one_source, dispatcher))
        await barrier.arm()
        result = ImportResult(
            sources_read=sources_read,
            lines_read=self._lines_read,
            documents_dispatched=tracker.dispatched,
            lines_skipped=self._lines_skipped,
            writes_failed=tracker.failed,
        )
        _log_import_completion(result)
        return result

    async def _read_one_source(
        self,
        dispatcher: WriteDispatcher,
        source: SourceSpec,
        stream: BinaryIO,
    ) -> int:
        handle_line = partial(self._handle_line, dispatcher)
        return await read_source(stream, source.name, self._chunk_size, handle_line)

    def _handle_line(self, dispatcher: WriteDispatcher, record: RecordContext) -> None:
        self._lines_read += 1
        result = apply_transform(self._transform, record)
        if not dispatcher.dispatch(result, record):
            self._lines_skipped += 1


async def run_import(
    options: ImportOptions,
    config: LineportConfig,
    transform: LineTransform | None = None,
    stdin: BinaryIO | None = None,
    on_complete: Callable[[], None] | None = None,
    sink: DocumentSink | None = None,
    token_factory: Callable[[], str] = generate_source_token,
) -> ImportResult:
    """Run one import from sources into the document store.

    Args:
        options: Import request options.
        config: Runtime configuration.
        transform: Line transform; loaded from ``options.transform_ref`` when omitted.
        stdin: Binary stream used for ``-`` sources.
        on_complete: Callback fired once when all writes resolved.
        sink: Document sink; a MongoDB store is opened from config when omitted.
        token_factory: Generator for unnamed stdin source names.

    Returns:
        Import counters.

    Raises:
        LineportConfigError: If sources or store settings are invalid.
        LineportStoreError: If the store connection fails.
        LineportIngestError: If a source cannot be read.
        LineportTransformError: If the transform fails for a line.
    """
    sources = resolve_sources(options.sources, token_factory)
    line_transform = transform or load_line_transform(options.transform_ref)
    store: MongoDocumentStore | None = None
    if sink is None:
        store = await open_document_store(config)
        sink = store
    runner = ImportPipelineRunner(
        sources, sink, line_transform, config.chunk_size, stdin, on_complete
    )
    try:
        return await runner.run()
    finally:
        if store is not None:
            await store.close()


def _log_import_completion(result: ImportResult) -> None:
    """Log import completion with run counters."""
    _LOGGER.info(
        "import_completed",
        sources_read=result.sources_read,
        lines_read=result.lines_read,
        documents_dispatched=result.documents_dispatched,
        lines_skipped=result.lines_skipped,
        writes_failed=result.writes_failed,
    )
