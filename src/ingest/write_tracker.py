"""In-flight write tracking and completion detection.

This module owns the per-run wait-group for dispatched store writes.
The completion barrier resolves once no further write can be dispatched
and every dispatched write has resolved.
"""

from __future__ import annotations

import asyncio
from functools import partial
from typing import Any, Awaitable, Callable

from core.errors import LineportIngestError
from core.logging_config import get_logger
from core.types import RecordContext

_LOGGER = get_logger(__name__)


class InsertionTracker:
    """Wait-group counting writes dispatched but not yet resolved.

    The count is incremented synchronously in ``track`` and decremented
    by the write task's done-callback, on success or failure alike.
    """

    def __init__(self) -> None:
        self._in_flight = 0
        self._dispatched = 0
        self._failed = 0
        self._sealed = False
        self._tasks: set[asyncio.Future[Any]] = set()
        self._drained = asyncio.Event()

    @property
    def in_flight(self) -> int:
        """Number of writes dispatched but not yet resolved."""
        return self._in_flight

    @property
    def dispatched(self) -> int:
        """Total number of writes dispatched in this run."""
        return self._dispatched

    @property
    def failed(self) -> int:
        """Number of writes that resolved with an error."""
        return self._failed

    def track(self, write: Awaitable[Any], record: RecordContext) -> asyncio.Future[Any]:
        """Schedule one write and count it as in flight.

        Args:
            write: Awaitable store write, started as its own task.
            record: Record the write belongs to, used for failure logs.

        Returns:
            The scheduled write task.

        Raises:
            LineportIngestError: If the tracker was already sealed.
        """
        if self._sealed:
            raise LineportIngestError(
                f"Cannot dispatch write for {record.record_id}: "
                "the import already reached its completion barrier."
            )
        task = asyncio.ensure_future(write)
        self._in_flight += 1
        self._dispatched += 1
        self._tasks.add(task)
        task.add_done_callback(partial(self._on_resolved, record))
        return task

    def seal(self) -> None:
        """Mark that no further writes will be dispatched."""
        self._sealed = True
        self._notify_if_drained()

    async def wait_drained(self) -> None:
        """Seal the tracker and wait until every write has resolved."""
        self.seal()
        await self._drained.wait()

    def _on_resolved(self, record: RecordContext, task: asyncio.Future[Any]) -> None:
        self._tasks.discard(task)
        self._in_flight -= 1
        if task.cancelled():
            self._failed += 1
            _log_write_failure(record, "cancelled")
        else:
            error = task.exception()
            if error is not None:
                self._failed += 1
                _log_write_failure(record, repr(error))
        self._notify_if_drained()

    def _notify_if_drained(self) -> None:
        if self._sealed and self._in_flight == 0:
            self._drained.set()


class CompletionBarrier:
    """One-shot barrier signalling that all dispatched writes resolved.

    ``arm`` must only be awaited after every source was read and every
    write dispatched; arming seals the tracker against later dispatches.
    """

    def __init__(
        self,
        tracker: InsertionTracker,
        on_complete: Callable[[], None] | None = None,
    ) -> None:
        self._tracker = tracker
        self._on_complete = on_complete
        self._armed = False
        self._fired = False

    @property
    def fired(self) -> bool:
        """Whether completion was signalled."""
        return self._fired

    async def arm(self) -> None:
        """Wait for the tracker to drain, then signal completion once.

        Raises:
            LineportIngestError: If the barrier was already armed.
        """
        if self._armed:
            raise LineportIngestError("Completion barrier can only be armed once per import run.")
        self._armed = True
        await self._tracker.wait_drained()
        self._fired = True
        if self._on_complete is not None:
            self._on_complete()


def _log_write_failure(record: RecordContext, error: str) -> None:
    """Log a failed write with the line it came from."""
    _LOGGER.error(
        "write_failed",
        filename=record.filename,
        line_number=record.line_number,
        record_id=record.record_id,
        text=record.text,
        error=error,
    )
