"""Discover test cases from input/output filename patterns."""

import glob
import logging
import re
from collections.abc import Sequence
from pathlib import Path

from batch_judge.errors import ConfigError, DiscoveryError
from batch_judge.models.case import TestCase
from batch_judge.models.config import TASK_PLACEHOLDER, TEST_PLACEHOLDER

log = logging.getLogger(__name__)


def discover_tests(task: str, in_pattern: str, out_pattern: str) -> Sequence[TestCase]:
    """Find every test case of a task on disk.

    The ``{test}`` slot of ``in_pattern`` becomes a wildcard; every matching
    input file yields one test case whose id is the text matched by that slot.
    The expected output path is ``out_pattern`` with both placeholders
    substituted.

    Args:
        task: Task name substituted for ``{task}``
        in_pattern: Input filename pattern, must contain ``{test}``
        out_pattern: Expected output filename pattern

    Returns:
        Test cases sorted by input path, one per matching input file

    Raises:
        ConfigError: If ``in_pattern`` has no ``{test}`` placeholder
        DiscoveryError: If the filesystem cannot be enumerated

    """
    if TEST_PLACEHOLDER not in in_pattern:
        raise ConfigError(
            f"{TEST_PLACEHOLDER} not found in input pattern '{in_pattern}'"
        )

    literals = split_pattern(task, in_pattern)
    glob_pattern = "*".join(glob.escape(literal) for literal in literals)
    matcher = compile_matcher(literals)

    log.debug("Searching for input files matching %s", glob_pattern)
    try:
        matches = sorted(glob.glob(glob_pattern))
    except OSError as e:
        raise DiscoveryError(f"Cannot list files matching '{glob_pattern}': {e}") from e

    cases: list[TestCase] = []
    for path in matches:
        if (match := matcher.fullmatch(path)) is None:
            log.warning("Skipping %s: cannot determine its test id", path)
            continue

        name = match.group("test")
        cases.append(
            TestCase(
                name=name,
                input_path=Path(path),
                output_path=Path(substitute(out_pattern, task, name)),
            )
        )

    return cases


def split_pattern(task: str, pattern: str) -> Sequence[str]:
    """Split a pattern at its ``{test}`` slots, with ``{task}`` substituted."""
    return [
        part.replace(TASK_PLACEHOLDER, task)
        for part in pattern.split(TEST_PLACEHOLDER)
    ]


def compile_matcher(literals: Sequence[str]) -> re.Pattern[str]:
    """Build a regex that captures the test id between pattern literals.

    The first slot is a named group; any later slot must repeat the same id.
    """
    head, *rest = literals
    regex = re.escape(head)
    for index, literal in enumerate(rest):
        regex += "(?P<test>.*)" if index == 0 else "(?P=test)"
        regex += re.escape(literal)
    return re.compile(regex, re.DOTALL)


def substitute(pattern: str, task: str, test: str) -> str:
    """Fill both placeholders of a pattern."""
    return pattern.replace(TASK_PLACEHOLDER, task).replace(TEST_PLACEHOLDER, test)
