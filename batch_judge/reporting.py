"""Rendering of per-test results and the final report."""

import logging
from typing import Any

from batch_judge.aggregator import TestReport
from batch_judge.comparison import trim
from batch_judge.models.result import CaseResult, Completed, TimedOut


def decode_output(data: bytes) -> str:
    """Decode trimmed program output for display."""
    return trim(data).decode("utf-8", errors="replace")


def log_case_result(log: logging.Logger, result: CaseResult) -> None:
    """Log one finished test as it completes.

    Execution errors are logged where they are caught, so only judged
    outcomes are rendered here.
    """
    if isinstance(result, TimedOut):
        log.error("✖ Test %s - TIMED OUT!", result.name)
    elif isinstance(result, Completed):
        if result.correct:
            log.info("✔ Test %s - PASS (%.2f s)", result.name, result.elapsed)
        else:
            log.error(
                "✖ Test %s - FAIL (%.2f s)\nExpected: %s\nGot: %s",
                result.name,
                result.elapsed,
                decode_output(result.expected),
                decode_output(result.stdout),
            )


def log_report(log: logging.Logger, report: TestReport) -> None:
    """Log the final summary of a run."""
    log.info("*** TEST REPORT ***")
    log.info("  TOTAL: %d", report.total)
    log.info("✔ PASS: %d", len(report.passed))
    log.info("✖ FAIL: %d", len(report.failed))
    log.info("✖ TIMEOUT: %d", len(report.timed_out))
    log.info("✖ ERROR: %d", len(report.errored))

    for label, names in (
        ("Failed", report.failed),
        ("Timed out", report.timed_out),
        ("Errored", report.errored),
    ):
        if names:
            log.info("%s: %s", label, ", ".join(sorted(names)))


def format_output(task: str, report: TestReport) -> dict[str, Any]:
    """Format the report for JSON output."""
    return {
        "task": task,
        "total": report.total,
        "passed": len(report.passed),
        "failed": len(report.failed),
        "timeouts": len(report.timed_out),
        "errors": len(report.errored),
        "results": {
            "passed": sorted(report.passed),
            "failed": sorted(report.failed),
            "timeouts": sorted(report.timed_out),
            "errors": sorted(report.errored),
        },
    }
