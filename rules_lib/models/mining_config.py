"""
Mining configuration data models.

A MiningConfiguration is one set of thresholds handed to a rule miner.
A ConfigurationTier is an ordered run of configurations, each strictly
more permissive than the one before it.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, Optional, Sequence, Tuple


class ConfigurationError(Exception):
    """Raised when search inputs are invalid; never retried"""
    pass


class MetricKind(Enum):
    """Rule quality metric compared against ``minimum_metric``."""
    CONFIDENCE = "confidence"
    LIFT = "lift"


@dataclass(frozen=True)
class MiningConfiguration:
    """
    Thresholds for a single mining trial.

    Attributes
    ----------
    minimum_support : float
        Lowest itemset support the miner may descend to, in (0, 1]
    minimum_metric : float
        Threshold on ``metric_kind`` (confidence in [0, 1], lift >= 0)
    metric_kind : MetricKind
        Metric the threshold applies to
    max_rules : int
        Maximum number of rules to return
    counting_delta : float
        Step by which the miner lowers support between passes

    Examples
    --------
    >>> cfg = MiningConfiguration(minimum_support=0.15, minimum_metric=1.5,
    ...                           metric_kind=MetricKind.LIFT, max_rules=15,
    ...                           counting_delta=0.05)
    >>> cfg.describe()
    'support>=0.15 lift>=1.5 max_rules=15'
    """
    minimum_support: float
    minimum_metric: float
    metric_kind: MetricKind = MetricKind.CONFIDENCE
    max_rules: int = 10
    counting_delta: float = 0.05

    def __post_init__(self):
        if not isinstance(self.metric_kind, MetricKind):
            try:
                object.__setattr__(self, "metric_kind", MetricKind(self.metric_kind))
            except ValueError as e:
                raise ConfigurationError(f"Unknown metric kind: {self.metric_kind!r}") from e
        if not 0 < self.minimum_support <= 1:
            raise ConfigurationError(
                f"minimum_support must be in (0, 1], got {self.minimum_support}"
            )
        if self.minimum_metric < 0:
            raise ConfigurationError(
                f"minimum_metric cannot be negative, got {self.minimum_metric}"
            )
        if self.metric_kind is MetricKind.CONFIDENCE and self.minimum_metric > 1:
            raise ConfigurationError(
                f"confidence threshold must be <= 1, got {self.minimum_metric}"
            )
        if self.max_rules <= 0:
            raise ConfigurationError(f"max_rules must be positive, got {self.max_rules}")
        if self.counting_delta <= 0:
            raise ConfigurationError(
                f"counting_delta must be positive, got {self.counting_delta}"
            )

    def is_more_permissive_than(self, other: "MiningConfiguration") -> bool:
        """True if neither threshold is higher than ``other`` and one is lower."""
        if self.metric_kind is not other.metric_kind:
            return False
        no_stricter = (
            self.minimum_support <= other.minimum_support
            and self.minimum_metric <= other.minimum_metric
        )
        one_looser = (
            self.minimum_support < other.minimum_support
            or self.minimum_metric < other.minimum_metric
        )
        return no_stricter and one_looser

    def describe(self) -> str:
        return (
            f"support>={self.minimum_support:g} "
            f"{self.metric_kind.value}>={self.minimum_metric:g} "
            f"max_rules={self.max_rules}"
        )

    def to_dict(self) -> dict:
        return {
            "minimum_support": self.minimum_support,
            "minimum_metric": self.minimum_metric,
            "metric_kind": self.metric_kind.value,
            "max_rules": self.max_rules,
            "counting_delta": self.counting_delta,
        }


@dataclass(frozen=True)
class ConfigurationTier:
    """
    Non-empty, monotonically more permissive run of configurations.

    Raises
    ------
    ConfigurationError
        If the tier is empty, holds something other than
        MiningConfiguration, mixes metric kinds, or an entry is not
        strictly looser than its predecessor.
    """
    configurations: Tuple[MiningConfiguration, ...]
    name: str = ""

    def __post_init__(self):
        configurations = tuple(self.configurations)
        object.__setattr__(self, "configurations", configurations)

        if not configurations:
            raise ConfigurationError(f"Tier {self.name!r} has no configurations")

        for position, configuration in enumerate(configurations):
            if not isinstance(configuration, MiningConfiguration):
                raise ConfigurationError(
                    f"Tier {self.name!r} position {position} is "
                    f"{type(configuration).__name__}, expected MiningConfiguration"
                )

        for position in range(1, len(configurations)):
            previous, current = configurations[position - 1], configurations[position]
            if not current.is_more_permissive_than(previous):
                raise ConfigurationError(
                    f"Tier {self.name!r} position {position} ({current.describe()}) "
                    f"is not more permissive than ({previous.describe()})"
                )

    def __iter__(self) -> Iterator[MiningConfiguration]:
        return iter(self.configurations)

    def __len__(self) -> int:
        return len(self.configurations)

    @classmethod
    def from_pairs(
        cls,
        pairs: Iterable[Sequence[float]],
        metric_kind: MetricKind,
        max_rules: int,
        counting_delta: float,
        name: Optional[str] = None,
    ) -> "ConfigurationTier":
        """
        Build a tier from (support, metric) pairs.

        Examples
        --------
        >>> tier = ConfigurationTier.from_pairs(
        ...     [(0.15, 1.5), (0.12, 1.3)], MetricKind.LIFT,
        ...     max_rules=15, counting_delta=0.05)
        >>> len(tier)
        2
        """
        configurations = tuple(
            MiningConfiguration(
                minimum_support=support,
                minimum_metric=metric,
                metric_kind=metric_kind,
                max_rules=max_rules,
                counting_delta=counting_delta,
            )
            for support, metric in pairs
        )
        return cls(configurations=configurations, name=name or "")
