"""
Association Rules Runner.

Orchestrates two independent searches over one table:

    class rules:   prepare (keep + class last + bins) → search(class_restricted=True)
    general rules: undersample → prepare (drop class + keep + bins) → search

Both go through the same ThresholdGridSearchController with their own
tiers, budget and fallback.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional
import logging

import pandas as pd

from rules_lib.config_schemas import RulesConfig, default_rules_config
from rules_lib.data_validation import validate_prepared_table
from rules_lib.mining.apriori_miner import AprioriMiner
from rules_lib.mining.primitive import RuleMiner
from rules_lib.models.result import RuleMiningResult
from rules_lib.preparation.table_prep import (
    class_counts,
    prepare_class_table,
    prepare_feature_table,
    resolve_class_column,
)
from rules_lib.sampling.stratified import undersample_if_oversized
from rules_lib.search.controller import ThresholdGridSearchController
from rules_lib.search.trial_executor import TrialExecutor

logger = logging.getLogger(__name__)

MinerFactory = Callable[[Optional[str]], RuleMiner]


@dataclass
class RulesReport:
    """
    Results of a rules run.

    Attributes
    ----------
    class_column : str
        Class attribute used for class rules (and dropped for general rules)
    class_rules : RuleMiningResult
        Class association rule search result
    general_rules : RuleMiningResult
        Feature-to-feature rule search result
    class_counts : dict
        Rows per class value in the input table
    general_rows : int
        Rows mined for general rules (after undersampling)
    """
    class_column: str
    class_rules: RuleMiningResult
    general_rules: RuleMiningResult
    class_counts: Dict[str, int] = field(default_factory=dict)
    general_rows: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "class_column": self.class_column,
            "class_counts": self.class_counts,
            "general_rows": self.general_rows,
            "class_rules": self.class_rules.to_dict(),
            "general_rules": self.general_rules.to_dict(),
        }


class RulesRunner:
    """
    Runs class-association and general rule searches over one table.

    Parameters
    ----------
    config : RulesConfig, optional
        Grids, budgets and sampling (default: default_rules_config())
    miner_factory : callable
        Builds a RuleMiner from a class column name (None for general rules)
    executor : TrialExecutor, optional
        Shared trial executor (default: one using config.grace_period_seconds)

    Examples
    --------
    >>> runner = RulesRunner()
    >>> report = runner.run(pd.read_csv("data/phishing.csv"))
    >>> report.class_rules.kind
    <ResultKind.FOUND: 'found'>
    """

    def __init__(
        self,
        config: Optional[RulesConfig] = None,
        miner_factory: MinerFactory = AprioriMiner,
        executor: Optional[TrialExecutor] = None,
    ):
        self.config = config or default_rules_config()
        self.miner_factory = miner_factory
        self.executor = executor or TrialExecutor(self.config.grace_period_seconds)

    def run(self, table: pd.DataFrame, class_column: Optional[str] = None) -> RulesReport:
        """
        Mine class rules, then general rules.

        Args:
            table: Raw feature table including the class column
            class_column: Class attribute (default: resolved from
                config.class_column_candidates, else the last column)

        Raises:
            ConfigurationError: On invalid grids or an unusable table
        """
        class_column = class_column or resolve_class_column(
            table, self.config.class_column_candidates
        )
        counts = class_counts(table, class_column)

        class_result = self.mine_class_rules(table, class_column)
        general_table = self._sample_for_general(table, class_column)
        general_result = self.mine_general_rules(general_table, class_column)

        return RulesReport(
            class_column=str(class_column),
            class_rules=class_result,
            general_rules=general_result,
            class_counts={str(k): int(v) for k, v in counts.items()},
            general_rows=len(general_table),
        )

    def mine_class_rules(self, table: pd.DataFrame, class_column: str) -> RuleMiningResult:
        """Search rules whose consequent is the class."""
        grid = self.config.class_rules
        logger.info("Mining class association rules (class=%s)", class_column)

        prepared = prepare_class_table(table, class_column, grid.keep_features, grid.bins)
        validate_prepared_table(prepared, class_column, context="class_rules")

        controller = ThresholdGridSearchController(
            miner=self.miner_factory(class_column),
            trial_budget_seconds=grid.trial_budget_seconds,
            fallback=grid.build_fallback(),
            class_column=class_column,
            executor=self.executor,
        )
        return controller.search(prepared, grid.build_tiers(), class_restricted=True)

    def mine_general_rules(
        self,
        table: pd.DataFrame,
        class_column: Optional[str],
    ) -> RuleMiningResult:
        """Search feature-to-feature rules with the class removed."""
        grid = self.config.general_rules
        logger.info("Mining general association rules (class removed)")

        prepared = prepare_feature_table(table, class_column, grid.keep_features, grid.bins)
        validate_prepared_table(prepared, context="general_rules")

        controller = ThresholdGridSearchController(
            miner=self.miner_factory(None),
            trial_budget_seconds=grid.trial_budget_seconds,
            fallback=grid.build_fallback(),
            executor=self.executor,
        )
        return controller.search(prepared, grid.build_tiers(), class_restricted=False)

    def _sample_for_general(self, table: pd.DataFrame, class_column: str) -> pd.DataFrame:
        sampling = self.config.sampling
        if not sampling.enabled:
            return table
        sampled = undersample_if_oversized(
            table,
            class_column,
            trigger_rows=sampling.trigger_rows,
            target_rows=sampling.target_rows,
            seed=sampling.seed,
        )
        if sampled is not table:
            logger.info("Sampled %d of %d instances for general rules", len(sampled), len(table))
        return sampled
