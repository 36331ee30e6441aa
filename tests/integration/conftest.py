"""Fixtures for integration tests running real child processes."""

import itertools
import shlex
import sys
import textwrap
from pathlib import Path
from typing import Protocol

import pytest


class ProgramFn(Protocol):
    """Protocol for candidate program creation function."""

    def __call__(self, source: str) -> str:
        """Write a Python program and return the command that runs it."""


class AddTestFn(Protocol):
    """Protocol for test file creation function."""

    def __call__(
        self, test_id: str, stdin: str, expected: str | None = None
    ) -> tuple[Path, Path]:
        """Create input (and expected output) files and return both paths."""


@pytest.fixture
def task_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Create in/ and out/ directories and make them the working directory."""
    (tmp_path / "in").mkdir()
    (tmp_path / "out").mkdir()
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def add_test(task_dir: Path) -> AddTestFn:
    """Return a function to create test files for the task ``sum``."""

    def _add(
        test_id: str, stdin: str, expected: str | None = None
    ) -> tuple[Path, Path]:
        in_file = task_dir / "in" / f"sum{test_id}.in"
        out_file = task_dir / "out" / f"sum{test_id}.out"
        in_file.write_text(stdin)
        if expected is not None:
            out_file.write_text(expected)
        return in_file, out_file

    return _add


@pytest.fixture
def program(tmp_path: Path) -> ProgramFn:
    """Return a function that writes a Python program to disk."""
    counter = itertools.count()

    def _program(source: str) -> str:
        script = tmp_path / f"program{next(counter)}.py"
        script.write_text(textwrap.dedent(source))
        return shlex.join([sys.executable, str(script)])

    return _program


@pytest.fixture
def sum_command(program: ProgramFn) -> str:
    """Command for a correct solution of ``sum``."""
    return program(
        """
        import sys

        a, b = map(int, sys.stdin.read().split())
        print(a + b)
        """
    )


@pytest.fixture
def wrong_command(program: ProgramFn) -> str:
    """Command for a solution that always prints 6."""
    return program(
        """
        import sys

        sys.stdin.read()
        sys.stdout.write("6\\n")
        """
    )


@pytest.fixture
def pid_file(tmp_path: Path) -> Path:
    """File where the sleeping program records its process id."""
    return tmp_path / "child.pid"


@pytest.fixture
def sleep_command(program: ProgramFn, pid_file: Path) -> str:
    """Command for a solution that never finishes in time."""
    return program(
        f"""
        import os
        import time

        with open({str(pid_file)!r}, "w") as f:
            f.write(str(os.getpid()))
        time.sleep(60)
        """
    )
