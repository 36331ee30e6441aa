"""Tests for result aggregation."""

import pytest

from batch_judge.aggregator import TestReport, aggregate
from batch_judge.testing.factories import (
    CompletedFactory,
    ExecutionFailureFactory,
    TimedOutFactory,
)


def test_aggregate_empty() -> None:
    """Returns empty buckets when nothing ran."""
    report = aggregate(0, [])

    assert report == TestReport(total=0)
    assert report.all_passed


def test_aggregate_sorts_into_buckets() -> None:
    """Each result lands in exactly one bucket."""
    results = [
        CompletedFactory.build(name="01", correct=True),
        CompletedFactory.build(name="02", correct=False),
        TimedOutFactory.build(name="03"),
        ExecutionFailureFactory.build(name="04"),
        CompletedFactory.build(name="05", correct=True),
    ]

    report = aggregate(5, results)

    assert report.passed == {"01", "05"}
    assert report.failed == {"02"}
    assert report.timed_out == {"03"}
    assert report.errored == {"04"}
    assert report.judged == 4
    assert not report.all_passed


def test_aggregate_is_order_independent() -> None:
    """The fold gives the same report for any result order."""
    results = [
        CompletedFactory.build(name="a", correct=True),
        CompletedFactory.build(name="b", correct=False),
        TimedOutFactory.build(name="c"),
    ]

    assert aggregate(3, results) == aggregate(3, list(reversed(results)))


def test_execution_errors_are_not_judged() -> None:
    """Total still counts tests that could not be executed."""
    report = aggregate(1, [ExecutionFailureFactory.build(name="01")])

    assert report.total == 1
    assert report.judged == 0
    assert report.errored == {"01"}
    assert not report.all_passed


def test_all_passed_requires_every_discovered_test() -> None:
    """A run with missing results is not a full pass."""
    report = aggregate(2, [CompletedFactory.build(name="01", correct=True)])

    assert not report.all_passed


def test_aggregate_rejects_duplicate_names() -> None:
    """A test name may only be reported once."""
    results = [
        CompletedFactory.build(name="01", correct=True),
        TimedOutFactory.build(name="01"),
    ]

    with pytest.raises(ValueError, match="Duplicate result for test 01"):
        aggregate(2, results)
