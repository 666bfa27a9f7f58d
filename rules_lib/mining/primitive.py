"""
Rule miner protocol.

The search layer treats mining as opaque: any object with a matching
``mine`` method can be driven by the controller.
"""

import threading
from typing import Optional, Protocol, Sequence

import pandas as pd

from rules_lib.models.mining_config import MiningConfiguration
from rules_lib.models.rule import Rule


class MiningCancelled(RuntimeError):
    """Raised by a miner that noticed its cancellation token was set"""
    pass


class RuleMiner(Protocol):
    """
    Minimal interface for rule miners.

    Only requires one method: mine().
    """

    def mine(
        self,
        table: pd.DataFrame,
        configuration: MiningConfiguration,
        class_restricted: bool,
        cancel_event: Optional[threading.Event] = None,
    ) -> Optional[Sequence[Rule]]:
        """
        Mine rules from a prepared table.

        Parameters
        ----------
        table : pd.DataFrame
            Discretized table, class column last when present
        configuration : MiningConfiguration
            Thresholds for this trial
        class_restricted : bool
            If True, only rules concluding the class column are wanted
        cancel_event : threading.Event, optional
            Advisory cancellation token; miners should poll it between
            expensive steps and stop early once set

        Returns
        -------
        sequence of Rule or None
            Rules found (empty or None when nothing qualifies)
        """
        ...
