"""Run one test case against the candidate program."""

import asyncio
import logging
import os
import shlex
import signal
import sys
import time
from collections.abc import AsyncGenerator, Sequence
from contextlib import asynccontextmanager, suppress
from dataclasses import dataclass
from pathlib import Path

from batch_judge.comparison import outputs_match
from batch_judge.errors import ExecutionError
from batch_judge.models.case import TestCase
from batch_judge.models.result import Completed, Outcome, TimedOut

log = logging.getLogger(__name__)

USE_PROCESS_GROUPS = sys.platform != "win32"


def resolve_command(task: str, command: str | None = None) -> Sequence[str]:
    """Return the argv to execute for a task.

    An explicit command is split shell-style; otherwise the task name itself
    is run, with ``.exe`` appended on Windows.
    """
    if command is not None:
        return shlex.split(command)
    if sys.platform == "win32":
        return [f"{task}.exe"]
    return [task]


@dataclass(frozen=True, kw_only=True)
class TestExecutor:
    """Executes a single test case and judges its output."""

    __test__ = False

    task: str
    timeout: float
    command: str | None = None

    @property
    def argv(self) -> Sequence[str]:
        """Command line used for every test of this run."""
        return resolve_command(self.task, self.command)

    async def run(self, case: TestCase) -> Outcome:
        """Run the program on one test case.

        The timeout clock starts when the child is spawned. A child that
        outlives it is killed and reported as ``TimedOut``.

        Args:
            case: Test case to execute

        Returns:
            ``TimedOut`` or ``Completed`` with the comparison verdict

        Raises:
            ExecutionError: If the child cannot be spawned or talked to, or
                the input or expected output file cannot be read

        """
        stdin = await read_test_file(case.name, case.input_path, "input")

        log.debug("Running test %s...", case.name)
        start_time = time.monotonic()
        try:
            async with asyncio.timeout(self.timeout):
                stdout, returncode = await self._communicate(case.name, stdin)
        except TimeoutError:
            elapsed = time.monotonic() - start_time
            log.debug("Test %s timed out after %.2fs", case.name, elapsed)
            return TimedOut(name=case.name, elapsed=elapsed)
        elapsed = time.monotonic() - start_time

        expected = await read_test_file(case.name, case.output_path, "expected output")

        return Completed(
            name=case.name,
            elapsed=elapsed,
            correct=outputs_match(stdout, expected),
            stdout=stdout,
            stdin=stdin,
            expected=expected,
            returncode=returncode,
        )

    async def _communicate(self, name: str, stdin: bytes) -> tuple[bytes, int]:
        """Feed stdin to a fresh child and collect its stdout and exit code."""
        async with spawn_child(name, self.argv) as process:
            try:
                stdout, _ = await process.communicate(stdin)
            except OSError as e:
                raise ExecutionError(name, f"I/O error talking to child: {e}") from e

            return stdout, await process.wait()


@asynccontextmanager
async def spawn_child(
    name: str, argv: Sequence[str]
) -> AsyncGenerator[asyncio.subprocess.Process, None]:
    """Spawn a child with piped stdin/stdout that is killed on exit if alive.

    On POSIX the child leads its own process group, and the whole group is
    killed when the block exits, so processes forked by the child cannot
    keep the pipes open or outlive the test. The child is reaped on every
    path out of the block, including timeouts and cancellation.
    """
    if not argv:
        raise ExecutionError(name, "Empty command")

    try:
        process = await asyncio.create_subprocess_exec(
            *argv,
            stdin=asyncio.subprocess.PIPE,
            stdout=asyncio.subprocess.PIPE,
            start_new_session=USE_PROCESS_GROUPS,
        )
    except OSError as e:
        raise ExecutionError(name, f"Failed to spawn {argv[0]!r}: {e}") from e

    try:
        yield process
    finally:
        if USE_PROCESS_GROUPS:
            log.debug("Killing process group %d of test %s", process.pid, name)
            with suppress(ProcessLookupError):
                os.killpg(process.pid, signal.SIGKILL)
        elif process.returncode is None:
            log.debug("Killing child %d of test %s", process.pid, name)
            with suppress(ProcessLookupError):
                process.kill()
        await process.wait()


async def read_test_file(name: str, path: Path, kind: str) -> bytes:
    """Read a whole test file without blocking the event loop."""
    try:
        return await asyncio.to_thread(path.read_bytes)
    except OSError as e:
        raise ExecutionError(name, f"Cannot read {kind} file {path}: {e}") from e
