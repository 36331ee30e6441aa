"""Exceptions raised while configuring, discovering and executing tests."""


class BatchJudgeError(Exception):
    """Base class for all batch-judge errors."""


class ConfigError(BatchJudgeError):
    """Raised when the run configuration or a filename pattern is invalid."""


class DiscoveryError(BatchJudgeError):
    """Raised when input files cannot be enumerated."""


class ExecutionError(BatchJudgeError):
    """Raised when a single test cannot be executed or judged.

    Covers spawn failures, broken pipes and unreadable input or expected
    output files. A timeout is never an ``ExecutionError``.
    """

    def __init__(self, name: str, message: str) -> None:
        super().__init__(f"Test {name}: {message}")
        self.name = name
