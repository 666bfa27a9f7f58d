"""
Apriori rule miner backed by mlxtend.

Support is lowered step by step from an upper bound, the way classic
Apriori tools do it: each pass mines frequent itemsets at the current
support, derives rules, and stops as soon as ``max_rules`` rules pass
the metric threshold or the configured minimum support is reached.
"""

import logging
import threading
from typing import Dict, FrozenSet, List, Optional, Tuple

import pandas as pd
from mlxtend.frequent_patterns import apriori, association_rules

from rules_lib.mining.primitive import MiningCancelled
from rules_lib.models.mining_config import ConfigurationError, MetricKind, MiningConfiguration
from rules_lib.models.rule import Item, Rule

logger = logging.getLogger(__name__)


def encode_items(table: pd.DataFrame) -> Tuple[pd.DataFrame, Dict[int, Item]]:
    """
    One-hot encode every (attribute, value) pair of a table.

    Missing values produce no item. Columns are positional item ids, so
    attribute or value text containing "=" can never collide.

    Returns:
        Tuple of (boolean item matrix, item id -> (attribute, value))
    """
    columns = {}
    items: Dict[int, Item] = {}

    for attribute in table.columns:
        values = table[attribute]
        present = values.notna().to_numpy()
        as_text = values.astype(str).to_numpy()
        for value in sorted(set(as_text[present])):
            key = len(items)
            columns[key] = present & (as_text == value)
            items[key] = (str(attribute), value)

    encoded = pd.DataFrame(columns, index=table.index, dtype=bool)
    return encoded, items


class AprioriMiner:
    """
    Iterative-support Apriori miner.

    Parameters
    ----------
    class_column : str, optional
        Class attribute used in class-restricted mode (default: last column)
    upper_bound_support : float
        Support the first pass starts just below (default 1.0)
    max_itemset_length : int, optional
        Cap on itemset size passed to mlxtend (default None = unbounded)

    Examples
    --------
    >>> miner = AprioriMiner(class_column="status")
    >>> rules = miner.mine(prepared, configuration, class_restricted=True)
    """

    def __init__(
        self,
        class_column: Optional[str] = None,
        upper_bound_support: float = 1.0,
        max_itemset_length: Optional[int] = None,
    ):
        if not 0 < upper_bound_support <= 1:
            raise ConfigurationError(
                f"upper_bound_support must be in (0, 1], got {upper_bound_support}"
            )
        self.class_column = class_column
        self.upper_bound_support = upper_bound_support
        self.max_itemset_length = max_itemset_length

    def mine(
        self,
        table: pd.DataFrame,
        configuration: MiningConfiguration,
        class_restricted: bool,
        cancel_event: Optional[threading.Event] = None,
    ) -> List[Rule]:
        """Mine up to ``configuration.max_rules`` rules from ``table``."""
        encoded, items = encode_items(table)
        if encoded.shape[1] == 0 or encoded.shape[0] == 0:
            return []

        class_keys: Optional[FrozenSet[int]] = None
        if class_restricted:
            class_column = self.class_column if self.class_column is not None else table.columns[-1]
            if class_column not in table.columns:
                raise ConfigurationError(f"Class column '{class_column}' not found in table")
            class_keys = frozenset(k for k, (a, _) in items.items() if a == str(class_column))

        lower = configuration.minimum_support
        delta = configuration.counting_delta
        support = max(round(self.upper_bound_support - delta, 10), lower)

        rules: List[Rule] = []
        passes = 0
        while True:
            if cancel_event is not None and cancel_event.is_set():
                raise MiningCancelled(
                    f"cancelled after {passes} passes at support {support:g}"
                )

            rules = self._mine_at_support(encoded, items, support, configuration, class_keys)
            passes += 1
            logger.debug(
                "Apriori pass %d: support=%.4f rules=%d", passes, support, len(rules)
            )

            if len(rules) >= configuration.max_rules or support <= lower:
                break
            support = max(round(support - delta, 10), lower)

        return rules[:configuration.max_rules]

    def _mine_at_support(
        self,
        encoded: pd.DataFrame,
        items: Dict[int, Item],
        support: float,
        configuration: MiningConfiguration,
        class_keys: Optional[FrozenSet[int]],
    ) -> List[Rule]:
        itemsets = apriori(
            encoded,
            min_support=support,
            use_colnames=True,
            max_len=self.max_itemset_length,
        )
        if itemsets.empty or itemsets["itemsets"].map(len).max() < 2:
            return []

        frame = association_rules(
            itemsets,
            num_itemsets=len(encoded),
            metric=configuration.metric_kind.value,
            min_threshold=configuration.minimum_metric,
        )
        if frame.empty:
            return []

        if class_keys is not None:
            concludes_class = frame["consequents"].map(
                lambda c: len(c) == 1 and next(iter(c)) in class_keys
            )
            class_free_lhs = frame["antecedents"].map(lambda a: not (a & class_keys))
            frame = frame[concludes_class & class_free_lhs]

        rules = [
            Rule(
                antecedent=frozenset(items[k] for k in row.antecedents),
                consequent=frozenset(items[k] for k in row.consequents),
                support=float(row.support),
                confidence=float(row.confidence),
                lift=float(row.lift),
            )
            for row in frame.itertuples(index=False)
        ]

        if configuration.metric_kind is MetricKind.LIFT:
            rules.sort(key=lambda r: (-r.lift, -r.confidence, -r.support, r.sort_key()))
        else:
            rules.sort(key=lambda r: (-r.confidence, -r.lift, -r.support, r.sort_key()))
        return rules
