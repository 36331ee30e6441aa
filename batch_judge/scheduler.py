"""Scheduler running test cases with a bounded number of live children."""

import asyncio
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Protocol, TypeAlias

from batch_judge.errors import ExecutionError
from batch_judge.models.case import TestCase
from batch_judge.models.result import CaseResult, ExecutionFailure, Outcome
from batch_judge.progress import ProgressTracker

log = logging.getLogger(__name__)


class CaseExecutor(Protocol):
    """Anything that runs a single test case to an outcome."""

    async def run(self, case: TestCase) -> Outcome:
        """Run one case, raising ``ExecutionError`` if it cannot be judged."""


ResultHook: TypeAlias = Callable[[CaseResult], None]


@dataclass(frozen=True, kw_only=True)
class TestScheduler:
    """Runs every test case, at most ``parallel`` of them at a time."""

    __test__ = False

    executor: CaseExecutor
    parallel: int
    tracker: ProgressTracker | None = None
    on_result: ResultHook | None = None

    async def run(self, cases: Sequence[TestCase]) -> Sequence[CaseResult]:
        """Run all test cases and return one result per case.

        All tasks are created at once; each waits for an admission slot
        before its child is spawned and gives it back when its result is
        final. A test that cannot be executed becomes an
        ``ExecutionFailure`` and never stops its siblings.

        Args:
            cases: Test cases to run

        Returns:
            Results in the same order as ``cases``

        """
        if self.parallel < 1:
            raise ValueError(f"parallel must be at least 1, got {self.parallel}")

        if not cases:
            log.info("No test cases provided")
            return []

        tracker = self.tracker or ProgressTracker(total=len(cases))
        semaphore = asyncio.Semaphore(self.parallel)

        log.debug("Scheduling %d test(s), %d at a time", len(cases), self.parallel)
        tasks = [self._run_case(case, semaphore, tracker) for case in cases]

        results = await asyncio.gather(*tasks)
        log.debug("Test execution completed")
        return results

    async def _run_case(
        self,
        case: TestCase,
        semaphore: asyncio.Semaphore,
        tracker: ProgressTracker,
    ) -> CaseResult:
        """Run one case once an admission slot is free."""
        result: CaseResult
        async with semaphore:
            try:
                result = await self.executor.run(case)
            except ExecutionError as e:
                log.error("✖ Test %s - ERROR\n%s", case.name, e, exc_info=e)
                result = ExecutionFailure(name=case.name, error=e)
            except Exception as e:
                log.error("✖ Test %s - ERROR (unexpected)", case.name, exc_info=e)
                result = ExecutionFailure(name=case.name, error=e)

        await tracker.record(result)
        if self.on_result is not None:
            self.on_result(result)
        return result
