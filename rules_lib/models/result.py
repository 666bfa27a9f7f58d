"""
Rule mining result data model.

A RuleMiningResult is exactly one of FOUND, NOT_FOUND, TIMED_OUT or
ERRORED. Results are frozen; the controller derives new ones with
``dataclasses.replace`` instead of mutating.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, Optional, Tuple

from rules_lib.models.mining_config import MiningConfiguration
from rules_lib.models.rule import Rule


class ResultKind(Enum):
    """Outcome of a trial or a whole search."""
    FOUND = "found"
    NOT_FOUND = "not_found"
    TIMED_OUT = "timed_out"
    ERRORED = "errored"


@dataclass(frozen=True)
class RuleMiningResult:
    """
    Outcome of one mining trial, or of a full grid search.

    Attributes
    ----------
    kind : ResultKind
        Which outcome this is
    rules : tuple of Rule
        Mined rules, non-empty exactly when ``kind`` is FOUND
    elapsed_seconds : float, optional
        Wall-clock time of the trial (or search); None for TIMED_OUT trials
    reason : str, optional
        Error description, required for ERRORED
    configuration : MiningConfiguration, optional
        Configuration that produced the rules (set by the controller)
    trials_attempted : int
        Trials run by the controller before resolving (0 for raw trials)
    """
    kind: ResultKind
    rules: Tuple[Rule, ...] = ()
    elapsed_seconds: Optional[float] = None
    reason: Optional[str] = None
    configuration: Optional[MiningConfiguration] = None
    trials_attempted: int = 0

    def __post_init__(self):
        object.__setattr__(self, "rules", tuple(self.rules))
        if self.kind is ResultKind.FOUND and not self.rules:
            raise ValueError("FOUND result must carry at least one rule")
        if self.kind is not ResultKind.FOUND and self.rules:
            raise ValueError(f"{self.kind.name} result cannot carry rules")
        if self.kind is ResultKind.ERRORED and not self.reason:
            raise ValueError("ERRORED result requires a reason")

    @classmethod
    def found(cls, rules: Iterable[Rule], elapsed_seconds: float) -> "RuleMiningResult":
        return cls(kind=ResultKind.FOUND, rules=tuple(rules), elapsed_seconds=elapsed_seconds)

    @classmethod
    def not_found(cls, elapsed_seconds: float, trials_attempted: int = 0) -> "RuleMiningResult":
        return cls(
            kind=ResultKind.NOT_FOUND,
            elapsed_seconds=elapsed_seconds,
            trials_attempted=trials_attempted,
        )

    @classmethod
    def timed_out(cls) -> "RuleMiningResult":
        return cls(kind=ResultKind.TIMED_OUT)

    @classmethod
    def errored(cls, reason: str, elapsed_seconds: Optional[float] = None) -> "RuleMiningResult":
        return cls(kind=ResultKind.ERRORED, reason=reason, elapsed_seconds=elapsed_seconds)

    @property
    def is_found(self) -> bool:
        return self.kind is ResultKind.FOUND

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "rules": [rule.to_dict() for rule in self.rules],
            "elapsed_seconds": self.elapsed_seconds,
            "reason": self.reason,
            "configuration": self.configuration.to_dict() if self.configuration else None,
            "trials_attempted": self.trials_attempted,
        }
