"""
Rule mining runners.

Provides table-level orchestration of the class-association and
general rule searches.
"""

from .rules_runner import RulesReport, RulesRunner

__all__ = [
    "RulesReport",
    "RulesRunner",
]
