"""
Rule search data models.

All models are frozen dataclasses for immutability.
"""

from rules_lib.models.mining_config import (
    ConfigurationError,
    ConfigurationTier,
    MetricKind,
    MiningConfiguration,
)
from rules_lib.models.rule import Item, Rule
from rules_lib.models.result import ResultKind, RuleMiningResult

__all__ = [
    'ConfigurationError',
    'ConfigurationTier',
    'MetricKind',
    'MiningConfiguration',
    'Item',
    'Rule',
    'ResultKind',
    'RuleMiningResult',
]
