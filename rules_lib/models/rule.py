"""
Association rule data model.
"""

from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, Iterable, Tuple

# (attribute, bin value)
Item = Tuple[str, str]


def _format_items(items: Iterable[Item]) -> str:
    return " ".join(f"{attribute}={value}" for attribute, value in sorted(items))


@dataclass(frozen=True)
class Rule:
    """
    Association rule ``antecedent ==> consequent``.

    Attributes
    ----------
    antecedent : frozenset of (attribute, value)
        Left-hand side items
    consequent : frozenset of (attribute, value)
        Right-hand side items
    support : float
        Fraction of rows matching antecedent and consequent
    confidence : float
        support(antecedent ∪ consequent) / support(antecedent)
    lift : float
        Confidence over the consequent's baseline frequency
    """
    antecedent: FrozenSet[Item]
    consequent: FrozenSet[Item]
    support: float
    confidence: float
    lift: float

    def __post_init__(self):
        object.__setattr__(self, "antecedent", frozenset(self.antecedent))
        object.__setattr__(self, "consequent", frozenset(self.consequent))

    @property
    def attributes(self) -> FrozenSet[str]:
        return frozenset(a for a, _ in self.antecedent | self.consequent)

    def concludes(self, attribute: str) -> bool:
        """True if ``attribute`` appears on the right-hand side."""
        return any(a == attribute for a, _ in self.consequent)

    def sort_key(self) -> str:
        return f"{_format_items(self.antecedent)} ==> {_format_items(self.consequent)}"

    def __str__(self) -> str:
        return (
            f"{self.sort_key()} "
            f"conf:({self.confidence:.2f}) lift:({self.lift:.2f}) sup:({self.support:.3f})"
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "antecedent": [list(item) for item in sorted(self.antecedent)],
            "consequent": [list(item) for item in sorted(self.consequent)],
            "support": self.support,
            "confidence": self.confidence,
            "lift": self.lift,
        }
