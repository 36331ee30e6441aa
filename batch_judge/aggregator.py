"""Fold per-test results into the final report."""

from collections.abc import Iterable
from dataclasses import dataclass, field

from batch_judge.models.result import CaseResult, Completed, ExecutionFailure, TimedOut


@dataclass(frozen=True, kw_only=True)
class TestReport:
    """Final counts of a run.

    ``total`` is the number of discovered tests; it exceeds the sum of the
    three judged buckets when some tests could not be executed.
    """

    __test__ = False

    total: int
    passed: frozenset[str] = field(default_factory=frozenset)
    failed: frozenset[str] = field(default_factory=frozenset)
    timed_out: frozenset[str] = field(default_factory=frozenset)
    errored: frozenset[str] = field(default_factory=frozenset)

    @property
    def judged(self) -> int:
        return len(self.passed) + len(self.failed) + len(self.timed_out)

    @property
    def all_passed(self) -> bool:
        return len(self.passed) == self.total


def aggregate(total: int, results: Iterable[CaseResult]) -> TestReport:
    """Sort results into pass, fail, timeout and error buckets.

    Args:
        total: Number of discovered tests
        results: One result per executed test, in any order

    Returns:
        The final report

    Raises:
        ValueError: If the same test name occurs more than once

    """
    passed: set[str] = set()
    failed: set[str] = set()
    timed_out: set[str] = set()
    errored: set[str] = set()
    seen: set[str] = set()

    for result in results:
        if result.name in seen:
            raise ValueError(f"Duplicate result for test {result.name}")
        seen.add(result.name)

        if isinstance(result, TimedOut):
            timed_out.add(result.name)
        elif isinstance(result, Completed):
            (passed if result.correct else failed).add(result.name)
        elif isinstance(result, ExecutionFailure):
            errored.add(result.name)

    return TestReport(
        total=total,
        passed=frozenset(passed),
        failed=frozenset(failed),
        timed_out=frozenset(timed_out),
        errored=frozenset(errored),
    )
