"""
Rule mining primitives.

The search layer only depends on the RuleMiner protocol; AprioriMiner is
the default implementation.
"""

from rules_lib.mining.primitive import MiningCancelled, RuleMiner
from rules_lib.mining.apriori_miner import AprioriMiner, encode_items

__all__ = [
    'MiningCancelled',
    'RuleMiner',
    'AprioriMiner',
    'encode_items',
]
