"""Progress tracking shared by all running tests."""

import asyncio
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from types import TracebackType
from typing import Self, TypeAlias

from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
    TimeRemainingColumn,
)

from batch_judge.models.result import CaseResult, is_pass


@dataclass(frozen=True, kw_only=True)
class ProgressSnapshot:
    """Counts at the moment a test finished."""

    total: int
    finished: int
    failed: int


ProgressListener: TypeAlias = Callable[[ProgressSnapshot], None]


class ProgressTracker:
    """Counter of finished and failed tests, updated once per finished test.

    A single instance is handed to every task of a run; updates are
    serialized by one lock.
    """

    def __init__(self, total: int, listeners: Sequence[ProgressListener] = ()) -> None:
        self.total = total
        self._finished = 0
        self._failed = 0
        self._lock = asyncio.Lock()
        self._listeners = list(listeners)

    @property
    def finished(self) -> int:
        return self._finished

    @property
    def failed(self) -> int:
        return self._failed

    def snapshot(self) -> ProgressSnapshot:
        return ProgressSnapshot(
            total=self.total, finished=self._finished, failed=self._failed
        )

    async def record(self, result: CaseResult) -> ProgressSnapshot:
        """Count a finished test and notify listeners.

        Anything but a correct ``Completed`` counts as failed.
        """
        async with self._lock:
            self._finished += 1
            if not is_pass(result):
                self._failed += 1
            snapshot = self.snapshot()
            for listener in self._listeners:
                listener(snapshot)
        return snapshot


class ProgressDisplay:
    """Live progress bar for a run, driven by ``ProgressTracker`` updates."""

    def __init__(self, console: Console, total: int) -> None:
        self._progress = Progress(
            TimeElapsedColumn(),
            BarColumn(),
            MofNCompleteColumn(),
            TaskProgressColumn(),
            TextColumn("({task.fields[failed]} failed)"),
            TextColumn("ETA:"),
            TimeRemainingColumn(),
            console=console,
        )
        self._task_id = self._progress.add_task("tests", total=total, failed=0)

    @property
    def completed(self) -> float:
        return self._progress.tasks[0].completed

    def __call__(self, snapshot: ProgressSnapshot) -> None:
        self._progress.update(
            self._task_id, completed=snapshot.finished, failed=snapshot.failed
        )

    def __enter__(self) -> Self:
        self._progress.start()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self._progress.stop()
