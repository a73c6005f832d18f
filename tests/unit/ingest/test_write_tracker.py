"""Unit tests for write tracking and the completion barrier."""

from __future__ import annotations

import asyncio

import pytest
from structlog.testing import capture_logs

from core.errors import LineportIngestError
from core.types import RecordContext
from ingest.write_tracker import CompletionBarrier, InsertionTracker


def _record(line_number: int) -> RecordContext:
    return RecordContext(
        text=f"line {line_number}",
        filename="data.txt",
        line_number=line_number,
        record_id=f"data.txt-{line_number:012d}",
    )


async def _succeed() -> None:
    await asyncio.sleep(0)


async def _fail() -> None:
    await asyncio.sleep(0)
    raise RuntimeError("write rejected")


def test_track_increments_synchronously() -> None:
    """Dispatch should count the write before it starts running."""

    async def scenario() -> tuple[int, int]:
        tracker = InsertionTracker()
        tracker.track(_succeed(), _record(1))
        tracker.track(_succeed(), _record(2))
        in_flight_at_dispatch = tracker.in_flight
        await tracker.wait_drained()
        return in_flight_at_dispatch, tracker.in_flight

    in_flight_at_dispatch, in_flight_after = asyncio.run(scenario())

    assert in_flight_at_dispatch == 2 and in_flight_after == 0


def test_failed_write_is_counted_and_resolved() -> None:
    """A failed write should decrement the tracker and increment failures."""

    async def scenario() -> InsertionTracker:
        tracker = InsertionTracker()
        tracker.track(_fail(), _record(1))
        tracker.track(_succeed(), _record(2))
        await tracker.wait_drained()
        return tracker

    tracker = asyncio.run(scenario())

    assert (tracker.in_flight, tracker.dispatched, tracker.failed) == (0, 2, 1)


def test_track_after_seal_raises() -> None:
    """No write may be dispatched once the tracker is sealed."""

    async def scenario() -> None:
        tracker = InsertionTracker()
        tracker.seal()
        write = _succeed()
        try:
            tracker.track(write, _record(1))
        finally:
            write.close()

    with pytest.raises(LineportIngestError):
        asyncio.run(scenario())

    assert True


def test_barrier_waits_for_pending_writes() -> None:
    """Completion should not fire while a write is still pending."""

    async def scenario() -> tuple[bool, bool, list[str]]:
        release = asyncio.Event()
        calls: list[str] = []

        async def slow_write() -> None:
            await release.wait()

        tracker = InsertionTracker()
        tracker.track(slow_write(), _record(1))
        barrier = CompletionBarrier(tracker, lambda: calls.append("done"))
        arm_task = asyncio.ensure_future(barrier.arm())
        await asyncio.sleep(0.01)
        fired_while_pending = barrier.fired
        release.set()
        await arm_task
        return fired_while_pending, barrier.fired, calls

    fired_while_pending, fired_after, calls = asyncio.run(scenario())

    assert not fired_while_pending and fired_after and calls == ["done"]


def test_barrier_fires_without_any_writes() -> None:
    """A run where every line was skipped should still complete."""
    calls: list[str] = []

    async def scenario() -> None:
        barrier = CompletionBarrier(InsertionTracker(), lambda: calls.append("done"))
        await barrier.arm()

    asyncio.run(scenario())

    assert calls == ["done"]


def test_barrier_can_only_be_armed_once() -> None:
    """Arming twice should fail instead of signalling completion again."""
    calls: list[str] = []

    async def scenario() -> None:
        barrier = CompletionBarrier(InsertionTracker(), lambda: calls.append("done"))
        await barrier.arm()
        await barrier.arm()

    with pytest.raises(LineportIngestError):
        asyncio.run(scenario())

    assert calls == ["done"]


def test_trackers_are_independent() -> None:
    """Separate trackers should not observe each other's writes."""

    async def scenario() -> tuple[int, int]:
        release = asyncio.Event()

        async def slow_write() -> None:
            await release.wait()

        busy = InsertionTracker()
        idle = InsertionTracker()
        busy.track(slow_write(), _record(1))
        await idle.wait_drained()
        busy_in_flight = busy.in_flight
        release.set()
        await busy.wait_drained()
        return busy_in_flight, idle.in_flight

    busy_in_flight, idle_in_flight = asyncio.run(scenario())

    assert busy_in_flight == 1 and idle_in_flight == 0


def test_failed_write_logs_source_location() -> None:
    """Failure logs should name the source, line number, and raw text."""

    async def scenario() -> None:
        tracker = InsertionTracker()
        tracker.track(_fail(), _record(4))
        await tracker.wait_drained()

    with capture_logs() as logs:
        asyncio.run(scenario())

    failures = [entry for entry in logs if entry["event"] == "write_failed"]
    assert failures[0]["filename"] == "data.txt" and failures[0]["line_number"] == 4
    assert failures[0]["text"] == "line 4" and "write rejected" in failures[0]["error"]
