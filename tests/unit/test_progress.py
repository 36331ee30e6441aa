"""Tests for progress tracking."""

import asyncio
import io

from rich.console import Console

from batch_judge.progress import ProgressDisplay, ProgressSnapshot, ProgressTracker
from batch_judge.testing.factories import (
    CompletedFactory,
    ExecutionFailureFactory,
    TimedOutFactory,
)


class TestProgressTracker:
    """Tests for ProgressTracker."""

    async def test_counts_failures(self) -> None:
        """Only correct completions are not failures."""
        tracker = ProgressTracker(total=4)

        await tracker.record(CompletedFactory.build(correct=True))
        await tracker.record(CompletedFactory.build(correct=False))
        await tracker.record(TimedOutFactory.build())
        snapshot = await tracker.record(ExecutionFailureFactory.build())

        assert snapshot == ProgressSnapshot(total=4, finished=4, failed=3)
        assert tracker.snapshot() == snapshot

    async def test_concurrent_records_are_not_lost(self) -> None:
        """Concurrent updates each count exactly once."""
        tracker = ProgressTracker(total=50)

        await asyncio.gather(
            *(tracker.record(TimedOutFactory.build()) for _ in range(50))
        )

        assert tracker.finished == 50
        assert tracker.failed == 50

    async def test_notifies_listeners(self) -> None:
        """Every listener sees every update."""
        first: list[ProgressSnapshot] = []
        second: list[ProgressSnapshot] = []
        tracker = ProgressTracker(total=2, listeners=[first.append, second.append])

        await tracker.record(CompletedFactory.build(correct=True))
        await tracker.record(CompletedFactory.build(correct=False))

        assert first == second
        assert [(s.finished, s.failed) for s in first] == [(1, 0), (2, 1)]


def test_display_follows_snapshots() -> None:
    """The progress bar advances to the reported count."""
    console = Console(file=io.StringIO(), force_terminal=False)

    with ProgressDisplay(console, total=3) as display:
        display(ProgressSnapshot(total=3, finished=2, failed=1))

        assert display.completed == 2
