"""Run configuration shared by discovery, execution and scheduling."""

import shlex

from pydantic import Field, field_validator

from batch_judge.models.base import Model

TASK_PLACEHOLDER = "{task}"
TEST_PLACEHOLDER = "{test}"

DEFAULT_IN_PATTERN = f"in/{TASK_PLACEHOLDER}{TEST_PLACEHOLDER}.in"
DEFAULT_OUT_PATTERN = f"out/{TASK_PLACEHOLDER}{TEST_PLACEHOLDER}.out"


class RunConfig(Model):
    """Configuration for a single batch run."""

    task: str = Field(..., min_length=1, description="Name of the task to test")
    command: str | None = Field(
        default=None,
        description="Command to run (defaults to the task name, .exe on Windows)",
    )
    in_pattern: str = Field(
        default=DEFAULT_IN_PATTERN, description="Input filename pattern"
    )
    out_pattern: str = Field(
        default=DEFAULT_OUT_PATTERN, description="Expected output filename pattern"
    )
    timeout: int = Field(default=5, gt=0, description="Per-test timeout in seconds")
    parallel: int = Field(
        default=5, ge=1, description="How many tests can run in parallel"
    )

    @field_validator("command")
    @classmethod
    def _command_splits(cls, value: str | None) -> str | None:
        """Reject commands that do not split into at least one argument."""
        if value is not None and not shlex.split(value):
            raise ValueError("command must not be empty")
        return value
