"""CLI entry point for the batch test runner."""

import argparse
import asyncio
import json
import logging
import sys
from collections.abc import Sequence
from contextlib import ExitStack
from functools import partial
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.logging import RichHandler

from batch_judge.aggregator import aggregate
from batch_judge.config_loader import build_run_config, load_config_file
from batch_judge.discovery import discover_tests
from batch_judge.errors import ConfigError, DiscoveryError
from batch_judge.executor import TestExecutor
from batch_judge.models.config import (
    DEFAULT_IN_PATTERN,
    DEFAULT_OUT_PATTERN,
    RunConfig,
)
from batch_judge.progress import ProgressDisplay, ProgressListener, ProgressTracker
from batch_judge.reporting import format_output, log_case_result, log_report
from batch_judge.scheduler import TestScheduler

EXIT_OK = 0
EXIT_TESTS_FAILED = 1
EXIT_FATAL = 2


async def run(
    config: RunConfig,
    console: Console,
    *,
    show_progress: bool = True,
    json_output: bool = False,
) -> int:
    """Discover and run all tests of a task and return the exit code.

    Raises:
        ConfigError: If the input pattern has no test placeholder
        DiscoveryError: If input files cannot be enumerated

    """
    log = logging.getLogger("batch_judge")

    cases = discover_tests(config.task, config.in_pattern, config.out_pattern)
    total = len(cases)

    if not cases:
        log.info(
            "No tests found for task %s (pattern %s)", config.task, config.in_pattern
        )
        if json_output:
            print(json.dumps(format_output(config.task, aggregate(0, []))))
        return EXIT_OK

    log.info(
        "Loaded %d tests for task %s. Running %d tests in parallel.",
        total,
        config.task,
        config.parallel,
    )

    executor = TestExecutor(
        task=config.task, command=config.command, timeout=config.timeout
    )

    with ExitStack() as stack:
        listeners: list[ProgressListener] = []
        if show_progress:
            listeners.append(stack.enter_context(ProgressDisplay(console, total)))

        scheduler = TestScheduler(
            executor=executor,
            parallel=config.parallel,
            tracker=ProgressTracker(total=total, listeners=listeners),
            on_result=partial(log_case_result, log),
        )
        results = await scheduler.run(cases)

    report = aggregate(total, results)
    log_report(log, report)

    if json_output:
        print(json.dumps(format_output(config.task, report), indent=2))

    return EXIT_OK if report.all_passed else EXIT_TESTS_FAILED


async def load_config(args: argparse.Namespace) -> RunConfig:
    """Build the run configuration from an optional config file and flags."""
    defaults: dict[str, Any] = {}
    if args.config is not None:
        defaults.update(await load_config_file(args.config))

    return build_run_config(
        defaults,
        {
            "task": args.task,
            "command": args.command,
            "in_pattern": args.in_pattern,
            "out_pattern": args.out_pattern,
            "timeout": args.timeout,
            "parallel": args.parallel,
        },
    )


async def main_async(args: argparse.Namespace, console: Console) -> int:
    """Load configuration, run the tests and map fatal errors to an exit code."""
    log = logging.getLogger("batch_judge")

    try:
        config = await load_config(args)
        return await run(
            config,
            console,
            show_progress=not args.no_progress,
            json_output=args.json,
        )
    except (ConfigError, DiscoveryError) as e:
        log.error("%s", e)
        return EXIT_FATAL


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        description="Run a program against paired input/output test files"
    )
    parser.add_argument("task", help="The name of the task to test")
    parser.add_argument(
        "-c",
        "--command",
        help="The command to run (defaults to the task name, with .exe on Windows)",
    )
    parser.add_argument(
        "-i",
        "--in-pattern",
        help=f"Input filename pattern (default: {DEFAULT_IN_PATTERN})",
    )
    parser.add_argument(
        "-o",
        "--out-pattern",
        help=f"Output filename pattern (default: {DEFAULT_OUT_PATTERN})",
    )
    parser.add_argument(
        "-t",
        "--timeout",
        type=int,
        help="Timeout for program execution in whole seconds (default: 5)",
    )
    parser.add_argument(
        "-p",
        "--parallel",
        type=int,
        help="How many tests can be run in parallel (default: 5)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="YAML file with defaults for any of the options above",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the final report as JSON on stdout",
    )
    parser.add_argument(
        "--no-progress",
        action="store_true",
        help="Do not display the progress bar",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser


def configure_logging(console: Console, verbose: bool = False) -> None:
    """Route all logging through rich so it stays above the progress bar."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%d-%m-%Y %H:%M:%S]",
        handlers=[RichHandler(console=console, show_path=False, markup=False)],
    )


def main(argv: Sequence[str] | None = None) -> None:
    """CLI entry point."""
    args = build_parser().parse_args(argv)

    console = Console(stderr=True)
    configure_logging(console, args.verbose)

    sys.exit(asyncio.run(main_async(args, console)))


if __name__ == "__main__":  # pragma: no cover
    main()
