"""
Threshold Grid Search Controller.

Drives a rule miner through ordered tiers of increasingly permissive
configurations until one yields rules:

    tier 0: cfg 0.0 → cfg 0.1 → ...
    tier 1: cfg 1.0 → ...
    ...
    quick fallback
    → NOT_FOUND

Policy:
- First success wins; no comparison across configurations
- TIMED_OUT, ERRORED and NOT_FOUND trials are logged and skipped
- Exhaustion is reported as NOT_FOUND, never raised
- Only ConfigurationError escapes, and only before the first trial
- One grace period per search, shared by all timed-out trials
"""

import threading
import time
from dataclasses import replace
from typing import Iterable, List, Optional, Sequence, Tuple, Union

import pandas as pd

from rules_lib.logging_config import get_logger
from rules_lib.mining.primitive import RuleMiner
from rules_lib.models.mining_config import (
    ConfigurationError,
    ConfigurationTier,
    MiningConfiguration,
)
from rules_lib.models.result import ResultKind, RuleMiningResult
from rules_lib.search.trial_executor import TrialExecutor

logger = get_logger(__name__)

TierLike = Union[ConfigurationTier, Sequence[MiningConfiguration]]


def coerce_tiers(tiers: Iterable[TierLike]) -> List[ConfigurationTier]:
    """
    Normalise tiers, accepting plain sequences of configurations.

    Raises:
        ConfigurationError: If there are no tiers or any tier is invalid
    """
    if tiers is None:
        raise ConfigurationError("At least one configuration tier is required")

    coerced = []
    for index, tier in enumerate(tiers):
        if isinstance(tier, ConfigurationTier):
            coerced.append(tier)
        elif isinstance(tier, (list, tuple)):
            coerced.append(ConfigurationTier(configurations=tuple(tier), name=f"tier-{index}"))
        else:
            raise ConfigurationError(
                f"Tier {index} is {type(tier).__name__}, expected ConfigurationTier"
            )

    if not coerced:
        raise ConfigurationError("At least one configuration tier is required")
    return coerced


class ThresholdGridSearchController:
    """
    Sequential, time-bounded search over configuration tiers.

    Parameters
    ----------
    miner : RuleMiner
        Opaque rule miner invoked once per trial
    trial_budget_seconds : float
        Wall-clock budget for every trial, fallback included
    fallback : MiningConfiguration
        Maximally permissive configuration tried once after all tiers
    class_column : str, optional
        Class attribute required when searching class-restricted rules
    executor : TrialExecutor, optional
        Trial executor (default: TrialExecutor with the default grace period)

    Examples
    --------
    >>> controller = ThresholdGridSearchController(
    ...     miner=AprioriMiner(class_column="status"),
    ...     trial_budget_seconds=30.0,
    ...     fallback=MiningConfiguration(0.2, 0.6, max_rules=10, counting_delta=0.1),
    ...     class_column="status",
    ... )
    >>> result = controller.search(prepared, tiers, class_restricted=True)
    """

    def __init__(
        self,
        miner: RuleMiner,
        trial_budget_seconds: float,
        fallback: MiningConfiguration,
        class_column: Optional[str] = None,
        executor: Optional[TrialExecutor] = None,
    ):
        if trial_budget_seconds <= 0:
            raise ConfigurationError(
                f"trial_budget_seconds must be positive, got {trial_budget_seconds}"
            )
        if not isinstance(fallback, MiningConfiguration):
            raise ConfigurationError("fallback must be a MiningConfiguration")

        self.miner = miner
        self.trial_budget_seconds = trial_budget_seconds
        self.fallback = fallback
        self.class_column = class_column
        self.executor = executor or TrialExecutor()

    def search(
        self,
        table: pd.DataFrame,
        tiers: Iterable[TierLike],
        class_restricted: bool = False,
    ) -> RuleMiningResult:
        """
        Search tiers in order and return the first non-empty rule set.

        Args:
            table: Prepared (discretized) table, read-only for all trials
            tiers: Ordered tiers, strictest first
            class_restricted: Only accept rules concluding the class column

        Returns:
            FOUND with the winning configuration and trial count, or
            NOT_FOUND once every tier and the fallback came up empty

        Raises:
            ConfigurationError: On empty/invalid tiers, or a missing class
                column in class-restricted mode
        """
        tiers = coerce_tiers(tiers)
        self._check_class_column(table, class_restricted)

        started = time.monotonic()
        trials = 0
        grace_left = self.executor.grace_period_seconds

        logger.info(
            "search_started",
            tiers=len(tiers),
            configurations=sum(len(t) for t in tiers),
            class_restricted=class_restricted,
            rows=len(table),
            trial_budget_seconds=self.trial_budget_seconds,
        )

        for tier_index, tier in enumerate(tiers):
            for position, configuration in enumerate(tier):
                trials += 1
                label = f"{tier_index}.{position}"
                result, grace_left = self._attempt(
                    table, configuration, class_restricted, label, tier.name, grace_left
                )
                if result.is_found:
                    return self._succeed(result, configuration, trials, label)

        trials += 1
        logger.info("fallback_started", configuration=self.fallback.describe())
        result, grace_left = self._attempt(
            table, self.fallback, class_restricted, "fallback", "fallback", grace_left
        )
        if result.is_found:
            return self._succeed(result, self.fallback, trials, "fallback")

        elapsed = time.monotonic() - started
        logger.info("search_exhausted", trials=trials, elapsed_seconds=round(elapsed, 4))
        return RuleMiningResult.not_found(elapsed_seconds=elapsed, trials_attempted=trials)

    def _check_class_column(self, table: pd.DataFrame, class_restricted: bool) -> None:
        if not class_restricted:
            return
        if self.class_column is None:
            raise ConfigurationError("Class-restricted search requires a class_column")
        if self.class_column not in table.columns:
            raise ConfigurationError(
                f"Class column '{self.class_column}' not found in table"
            )

    def _attempt(
        self,
        table: pd.DataFrame,
        configuration: MiningConfiguration,
        class_restricted: bool,
        label: str,
        tier_name: str,
        grace_left: float,
    ) -> Tuple[RuleMiningResult, float]:
        """Run one trial; returns the result and the grace allowance still unspent."""
        logger.info(
            "trial_started",
            trial=label,
            tier=tier_name,
            configuration=configuration.describe(),
        )

        def invoke(cancel_event: threading.Event):
            return self.miner.mine(table, configuration, class_restricted, cancel_event)

        trial_started = time.monotonic()
        result = self.executor.run(
            invoke, self.trial_budget_seconds, label=label, grace_seconds=grace_left
        )
        if result.kind is ResultKind.TIMED_OUT:
            overrun = time.monotonic() - trial_started - self.trial_budget_seconds
            grace_left = max(0.0, grace_left - max(0.0, overrun))

        logger.info(
            "trial_finished",
            trial=label,
            outcome=result.kind.value,
            rules=len(result.rules),
            elapsed_seconds=result.elapsed_seconds,
            reason=result.reason,
        )
        return result, grace_left

    @staticmethod
    def _succeed(
        result: RuleMiningResult,
        configuration: MiningConfiguration,
        trials: int,
        label: str,
    ) -> RuleMiningResult:
        logger.info(
            "search_succeeded",
            trial=label,
            trials=trials,
            rules=len(result.rules),
            configuration=configuration.describe(),
        )
        return replace(result, configuration=configuration, trials_attempted=trials)
