"""
Tests for the time-bounded trial executor.
"""

import threading
import time

import pytest

from rules_lib.models import ConfigurationError, ResultKind
from rules_lib.search import TrialExecutor
from rules_lib.tests.helpers import make_rule


class TestTrialExecutor:

    @pytest.fixture
    def executor(self):
        return TrialExecutor(grace_period_seconds=0.05)

    def test_rules_within_budget_are_found(self, executor):
        rules = [make_rule("a", "b"), make_rule("c", "d")]
        result = executor.run(lambda cancel: rules, budget_seconds=1.0)
        assert result.kind is ResultKind.FOUND
        assert list(result.rules) == rules
        assert result.elapsed_seconds is not None and result.elapsed_seconds >= 0

    @pytest.mark.parametrize("outcome", [[], None])
    def test_empty_or_none_is_not_found(self, executor, outcome):
        result = executor.run(lambda cancel: outcome, budget_seconds=1.0)
        assert result.kind is ResultKind.NOT_FOUND
        assert result.rules == ()

    def test_exception_becomes_errored(self, executor):
        def invoke(cancel):
            raise RuntimeError("itemset explosion")

        result = executor.run(invoke, budget_seconds=1.0)
        assert result.kind is ResultKind.ERRORED
        assert result.reason == "RuntimeError: itemset explosion"

    def test_timeout_returns_without_waiting_for_slow_miner(self, executor):
        """A 500ms miner under a 30ms budget resolves at about budget + grace."""
        started = time.monotonic()
        result = executor.run(lambda cancel: time.sleep(0.5) or [make_rule("a", "b")],
                              budget_seconds=0.03)
        waited = time.monotonic() - started

        assert result.kind is ResultKind.TIMED_OUT
        assert waited < 0.3

    def test_cancellation_token_is_set_on_timeout(self, executor):
        observed = threading.Event()

        def invoke(cancel):
            if cancel.wait(2.0):
                observed.set()
            return []

        result = executor.run(invoke, budget_seconds=0.02)
        assert result.kind is ResultKind.TIMED_OUT
        assert observed.wait(1.0)

    def test_grace_cap_limits_wait_for_unresponsive_worker(self):
        executor = TrialExecutor(grace_period_seconds=0.5)
        release = threading.Event()

        def stubborn(cancel):
            release.wait(2.0)
            return []

        started = time.monotonic()
        result = executor.run(stubborn, budget_seconds=0.02, grace_seconds=0.0)
        waited = time.monotonic() - started
        release.set()

        assert result.kind is ResultKind.TIMED_OUT
        assert waited < 0.2

    def test_result_arriving_in_grace_period_is_discarded(self):
        executor = TrialExecutor(grace_period_seconds=0.3)
        late_rule = make_rule("late", "x")

        def slow(cancel):
            time.sleep(0.08)
            return [late_rule]

        first = executor.run(slow, budget_seconds=0.02, label="first")
        assert first.kind is ResultKind.TIMED_OUT
        assert first.rules == ()

        fresh_rule = make_rule("fresh", "y")
        second = executor.run(lambda cancel: [fresh_rule], budget_seconds=1.0, label="second")
        assert list(second.rules) == [fresh_rule]

    def test_abandoned_trial_does_not_leak_into_next(self, executor):
        release = threading.Event()

        def stuck(cancel):
            release.wait(2.0)
            return [make_rule("stale", "x")]

        assert executor.run(stuck, budget_seconds=0.02).kind is ResultKind.TIMED_OUT

        second = executor.run(lambda cancel: [], budget_seconds=1.0)
        release.set()
        time.sleep(0.05)
        assert second.kind is ResultKind.NOT_FOUND
        assert second.rules == ()

    @pytest.mark.parametrize("budget", [0, -1.0])
    def test_non_positive_budget_is_configuration_error(self, executor, budget):
        with pytest.raises(ConfigurationError):
            executor.run(lambda cancel: [], budget_seconds=budget)

    def test_negative_grace_period_rejected(self):
        with pytest.raises(ConfigurationError):
            TrialExecutor(grace_period_seconds=-0.1)
