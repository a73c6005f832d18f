"""Write dispatch for transformed documents.

This module hands accepted documents to the store without blocking
the read loop. Every write is counted by the run's insertion tracker.
"""

from __future__ import annotations

from core.errors import LineportTransformError
from core.types import Accepted, RecordContext, Skipped, TransformResult
from ingest.write_tracker import InsertionTracker
from store.document_store import DocumentSink


class WriteDispatcher:
    """Fire-and-track writer bound to one sink and one tracker."""

    def __init__(self, sink: DocumentSink, tracker: InsertionTracker) -> None:
        self._sink = sink
        self._tracker = tracker

    def dispatch(self, result: TransformResult, record: RecordContext) -> bool:
        """Dispatch the write for an accepted result.

        Args:
            result: Transform outcome for the record.
            record: Source record, kept for failure logging.

        Returns:
            True when a write was dispatched, False for skipped lines.

        Raises:
            LineportTransformError: If result is neither accepted nor skipped.
        """
        if isinstance(result, Skipped):
            return False
        if not isinstance(result, Accepted):
            raise LineportTransformError(
                f"Invalid transform result for {record.record_id}: "
                f"expected Accepted or Skipped, got {type(result).__name__}."
            )
        self._tracker.track(self._sink.insert_document(result.document), record)
        return True
