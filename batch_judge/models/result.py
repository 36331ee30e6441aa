"""Models for test execution results."""

from dataclasses import dataclass
from typing import TypeAlias


@dataclass(frozen=True, kw_only=True)
class TimedOut:
    """The child did not terminate within the configured timeout."""

    name: str
    elapsed: float


@dataclass(frozen=True, kw_only=True)
class Completed:
    """The child terminated and its stdout was judged against the expected file.

    ``stdout``, ``stdin`` and ``expected`` hold the raw, untrimmed bytes so a
    reporter can render exactly what was compared.
    """

    name: str
    elapsed: float
    correct: bool
    stdout: bytes
    stdin: bytes
    expected: bytes
    returncode: int


@dataclass(frozen=True, kw_only=True)
class ExecutionFailure:
    """A test that could not be executed or judged.

    Neither a pass, a fail nor a timeout: it is counted in its own bucket.
    """

    name: str
    error: BaseException


Outcome: TypeAlias = TimedOut | Completed
CaseResult: TypeAlias = TimedOut | Completed | ExecutionFailure


def is_pass(result: CaseResult) -> bool:
    """Return whether a result counts as a passed test."""
    return isinstance(result, Completed) and result.correct
