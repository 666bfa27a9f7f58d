"""
Test helpers: rule/config builders and a scripted miner.
"""

import threading
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

import pandas as pd

from rules_lib.models.mining_config import MetricKind, MiningConfiguration
from rules_lib.models.rule import Rule


def make_rule(lhs: str, rhs: str, confidence: float = 0.9, lift: float = 1.5) -> Rule:
    """Rule ``lhs=B1 ==> rhs=B1`` with the given metrics."""
    return Rule(
        antecedent=frozenset({(lhs, "B1")}),
        consequent=frozenset({(rhs, "B1")}),
        support=0.2,
        confidence=confidence,
        lift=lift,
    )


def make_config(support: float, metric: float, kind: MetricKind = MetricKind.CONFIDENCE,
                max_rules: int = 10) -> MiningConfiguration:
    return MiningConfiguration(
        minimum_support=support,
        minimum_metric=metric,
        metric_kind=kind,
        max_rules=max_rules,
        counting_delta=0.05,
    )


@dataclass
class Slow:
    """Outcome that takes ``seconds`` before returning ``rules``."""
    seconds: float
    rules: Sequence[Rule] = ()
    cooperative: bool = False


class ScriptedMiner:
    """
    Miner whose outcome is looked up by minimum support.

    Outcomes: a rule sequence, None, an Exception instance (raised), or Slow.
    """

    def __init__(self, outcomes: Optional[Dict[float, Any]] = None, default: Any = ()):
        self.outcomes = outcomes or {}
        self.default = default
        self.calls: List[MiningConfiguration] = []
        self.tables: List[pd.DataFrame] = []
        self.modes: List[bool] = []
        self._lock = threading.Lock()

    def mine(self, table, configuration, class_restricted, cancel_event=None):
        with self._lock:
            self.calls.append(configuration)
            self.tables.append(table)
            self.modes.append(class_restricted)

        outcome = self.outcomes.get(configuration.minimum_support, self.default)
        if isinstance(outcome, Exception):
            raise outcome
        if isinstance(outcome, Slow):
            deadline = time.monotonic() + outcome.seconds
            while time.monotonic() < deadline:
                if outcome.cooperative and cancel_event is not None and cancel_event.is_set():
                    return list(outcome.rules)
                time.sleep(0.005)
            return list(outcome.rules)
        if outcome is None:
            return None
        return list(outcome)
