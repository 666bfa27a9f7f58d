"""
Adaptive Association-Rule Search Library

Finds a non-empty association rule set on a prepared (discretized) table
by driving a rule miner through tiers of progressively looser thresholds,
each attempt under a hard wall-clock budget.

Package Structure:
- models/: Mining configurations, tiers, rules and trial results
- mining/: RuleMiner protocol and the mlxtend Apriori adapter
- search/: Time-bounded trial executor and threshold grid search controller
- sampling/: Stratified undersampling for oversized tables
- preparation/: Column selection, class placement and discretization
- runners/: Class-association and general rule runs over one table
- cli.py: Command line entry point
"""

__version__ = '0.1.0'
