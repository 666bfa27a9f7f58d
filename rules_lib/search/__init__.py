"""
Adaptive threshold search.

Provides the time-bounded trial executor and the tiered grid search
controller that drives it.
"""

from .trial_executor import TrialExecutor
from .controller import ThresholdGridSearchController, coerce_tiers

__all__ = [
    "TrialExecutor",
    "ThresholdGridSearchController",
    "coerce_tiers",
]
