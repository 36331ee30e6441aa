"""Models for discovered test cases."""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, kw_only=True)
class TestCase:
    """One input/expected-output pair identified by its test id."""

    __test__ = False

    name: str
    input_path: Path
    output_path: Path
