"""
Configuration schema validation using Pydantic.

Provides validated configuration models for both rule searches and
the preparation/sampling steps around them. Catches configuration
errors at load time, before any mining starts.
"""

from pathlib import Path
from typing import List, Literal, Union

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from rules_lib import constants
from rules_lib.models.mining_config import (
    ConfigurationTier,
    MetricKind,
    MiningConfiguration,
)


class ThresholdPair(BaseModel):
    """One (support, metric) point of a tier."""
    support: float = Field(..., gt=0, le=1, description="Minimum itemset support")
    metric: float = Field(..., ge=0, description="Minimum confidence or lift")


class TierSchema(BaseModel):
    """Ordered run of threshold pairs, strictest first."""
    name: str = Field("", description="Tier name used in logs")
    pairs: List[ThresholdPair] = Field(..., min_length=1)


class FallbackSchema(BaseModel):
    """Quick fallback tried once every tier is exhausted."""
    support: float = Field(constants.FALLBACK_SUPPORT, gt=0, le=1)
    metric: float = Field(constants.FALLBACK_CONFIDENCE, ge=0)
    metric_kind: Literal['confidence', 'lift'] = 'confidence'
    max_rules: int = Field(constants.FALLBACK_MAX_RULES, gt=0)
    counting_delta: float = Field(constants.FALLBACK_COUNTING_DELTA, gt=0, le=1)

    @model_validator(mode='after')
    def validate_confidence_range(self):
        """Confidence is a probability; only lift may exceed 1."""
        if self.metric_kind == 'confidence' and self.metric > 1:
            raise ValueError(f"confidence fallback metric must be <= 1, got {self.metric}")
        return self

    def build(self) -> MiningConfiguration:
        return MiningConfiguration(
            minimum_support=self.support,
            minimum_metric=self.metric,
            metric_kind=MetricKind(self.metric_kind),
            max_rules=self.max_rules,
            counting_delta=self.counting_delta,
        )


class SearchGridConfig(BaseModel):
    """Threshold grid and budget for one search path."""
    metric_kind: Literal['confidence', 'lift']
    max_rules: int = Field(..., gt=0, description="Maximum rules per trial")
    counting_delta: float = Field(..., gt=0, le=1, description="Support step between passes")
    trial_budget_seconds: float = Field(..., gt=0, description="Wall-clock budget per trial")
    bins: int = Field(..., ge=1, le=20, description="Discretization bins")
    keep_features: List[str] = Field(default_factory=list, description="Curated predictors")
    tiers: List[TierSchema] = Field(..., min_length=1)
    fallback: FallbackSchema = Field(default_factory=FallbackSchema)

    @model_validator(mode='after')
    def validate_confidence_range(self):
        if self.metric_kind == 'confidence':
            too_high = [p.metric for t in self.tiers for p in t.pairs if p.metric > 1]
            if too_high:
                raise ValueError(f"confidence thresholds must be <= 1, got {too_high}")
        return self

    def build_tiers(self) -> List[ConfigurationTier]:
        """Convert to ConfigurationTier objects (monotonicity checked there)."""
        kind = MetricKind(self.metric_kind)
        return [
            ConfigurationTier.from_pairs(
                [(p.support, p.metric) for p in tier.pairs],
                metric_kind=kind,
                max_rules=self.max_rules,
                counting_delta=self.counting_delta,
                name=tier.name or f"{self.metric_kind}-tier-{index}",
            )
            for index, tier in enumerate(self.tiers)
        ]

    def build_fallback(self) -> MiningConfiguration:
        return self.fallback.build()


class SamplingConfig(BaseModel):
    """Stratified undersampling before general rule mining."""
    enabled: bool = True
    trigger_rows: int = Field(constants.DOWNSAMPLE_TRIGGER_ROWS, ge=1)
    target_rows: int = Field(constants.DOWNSAMPLE_TARGET_ROWS, ge=1)
    seed: int = constants.SEED

    @field_validator('target_rows')
    @classmethod
    def validate_target(cls, v, info):
        """Ensure sampling actually shrinks oversized tables."""
        trigger = info.data.get('trigger_rows')
        if trigger is not None and v > trigger:
            raise ValueError(f"target_rows {v} exceeds trigger_rows {trigger}")
        return v


class RulesConfig(BaseModel):
    """Top-level configuration for a rules run."""
    class_column_candidates: List[str] = Field(
        default_factory=lambda: list(constants.CLASS_COLUMN_CANDIDATES)
    )
    grace_period_seconds: float = Field(constants.DEFAULT_GRACE_PERIOD_SECONDS, ge=0)
    class_rules: SearchGridConfig
    general_rules: SearchGridConfig
    sampling: SamplingConfig = Field(default_factory=SamplingConfig)

    @field_validator('class_rules')
    @classmethod
    def validate_class_metric(cls, v):
        """Class association rules are ranked by confidence."""
        if v.metric_kind != 'confidence':
            raise ValueError("class_rules must use the confidence metric")
        return v

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "RulesConfig":
        """
        Load config from YAML, filling omitted sections with defaults.

        Top-level keys override the defaults section by section.
        """
        with open(path) as f:
            data = yaml.safe_load(f) or {}

        merged = default_rules_config().model_dump()
        for key, value in data.items():
            if isinstance(value, dict) and isinstance(merged.get(key), dict):
                merged[key] = {**merged[key], **value}
            else:
                merged[key] = value
        return cls.model_validate(merged)


def _tiers(grid) -> List[TierSchema]:
    return [
        TierSchema(pairs=[ThresholdPair(support=s, metric=m) for s, m in tier])
        for tier in grid
    ]


def default_rules_config() -> RulesConfig:
    """Configuration built from rules_lib.constants."""
    return RulesConfig(
        class_rules=SearchGridConfig(
            metric_kind='confidence',
            max_rules=constants.MAX_RULES_CAR,
            counting_delta=constants.COUNTING_DELTA_CAR,
            trial_budget_seconds=constants.CAR_TRIAL_BUDGET_SECONDS,
            bins=constants.DISC_BINS_CAR,
            keep_features=list(constants.IMPORTANT_FEATURES),
            tiers=_tiers(constants.CAR_TIERS),
        ),
        general_rules=SearchGridConfig(
            metric_kind='lift',
            max_rules=constants.MAX_RULES_GENERAL,
            counting_delta=constants.COUNTING_DELTA_GENERAL,
            trial_budget_seconds=constants.GENERAL_TRIAL_BUDGET_SECONDS,
            bins=constants.DISC_BINS_GENERAL,
            keep_features=list(constants.GENERAL_FEATURES),
            tiers=_tiers(constants.GENERAL_TIERS),
        ),
    )
