"""
Tests for the pydantic rules configuration.
"""

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from rules_lib import constants
from rules_lib.config_schemas import (
    FallbackSchema,
    RulesConfig,
    SamplingConfig,
    default_rules_config,
)
from rules_lib.models import ConfigurationError, MetricKind


class TestDefaultConfig:

    def test_class_grid(self):
        grid = default_rules_config().class_rules
        tiers = grid.build_tiers()

        assert [len(t) for t in tiers] == [2, 2]
        first = tiers[0].configurations[0]
        assert (first.minimum_support, first.minimum_metric) == (0.10, 0.90)
        assert first.metric_kind is MetricKind.CONFIDENCE
        assert first.max_rules == constants.MAX_RULES_CAR
        assert tiers[0].name == "confidence-tier-0"

    def test_general_grid(self):
        grid = default_rules_config().general_rules
        tiers = grid.build_tiers()

        assert len(tiers) == 1
        assert [c.minimum_support for c in tiers[0]] == [0.15, 0.12, 0.10]
        assert all(c.metric_kind is MetricKind.LIFT for c in tiers[0])
        assert grid.bins == constants.DISC_BINS_GENERAL

    def test_fallback(self):
        fallback = default_rules_config().class_rules.build_fallback()
        assert fallback.minimum_support == constants.FALLBACK_SUPPORT
        assert fallback.minimum_metric == constants.FALLBACK_CONFIDENCE
        assert fallback.max_rules == constants.FALLBACK_MAX_RULES

    def test_sampling_defaults(self):
        sampling = default_rules_config().sampling
        assert sampling.trigger_rows == 5000
        assert sampling.target_rows == 3000
        assert sampling.seed == 42


class TestValidation:

    def test_class_rules_must_use_confidence(self):
        data = default_rules_config().model_dump()
        data["class_rules"]["metric_kind"] = "lift"
        with pytest.raises(ValidationError, match="confidence"):
            RulesConfig.model_validate(data)

    def test_empty_tier_list_rejected(self):
        data = default_rules_config().model_dump()
        data["general_rules"]["tiers"] = []
        with pytest.raises(ValidationError):
            RulesConfig.model_validate(data)

    def test_support_out_of_range(self):
        data = default_rules_config().model_dump()
        data["general_rules"]["tiers"][0]["pairs"][0]["support"] = 1.5
        with pytest.raises(ValidationError):
            RulesConfig.model_validate(data)

    def test_non_positive_budget(self):
        data = default_rules_config().model_dump()
        data["class_rules"]["trial_budget_seconds"] = 0
        with pytest.raises(ValidationError):
            RulesConfig.model_validate(data)

    def test_sampling_target_above_trigger(self):
        with pytest.raises(ValidationError):
            SamplingConfig(trigger_rows=100, target_rows=200)

    def test_confidence_fallback_above_one_rejected_at_load(self):
        with pytest.raises(ValidationError, match="confidence"):
            FallbackSchema(metric=1.5, metric_kind='confidence')

    def test_lift_fallback_above_one_allowed(self):
        assert FallbackSchema(metric=1.5, metric_kind='lift').build().minimum_metric == 1.5

    def test_confidence_tier_above_one_rejected_at_load(self):
        data = default_rules_config().model_dump()
        data["class_rules"]["tiers"][0]["pairs"][0]["metric"] = 1.2
        with pytest.raises(ValidationError, match="confidence"):
            RulesConfig.model_validate(data)

    def test_confidence_fallback_in_yaml_rejected(self, tmp_path):
        path = tmp_path / "bad_fallback.yaml"
        path.write_text(yaml.safe_dump({"general_rules": {"fallback": {"metric": 2.0}}}))
        with pytest.raises(ValidationError):
            RulesConfig.from_yaml(path)

    def test_non_monotone_tier_fails_when_built(self):
        data = default_rules_config().model_dump()
        data["general_rules"]["tiers"] = [
            {"pairs": [{"support": 0.10, "metric": 1.2}, {"support": 0.15, "metric": 1.5}]}
        ]
        config = RulesConfig.model_validate(data)
        with pytest.raises(ConfigurationError):
            config.general_rules.build_tiers()


class TestFromYaml:

    def test_partial_override_keeps_defaults(self, tmp_path):
        path = tmp_path / "rules.yaml"
        path.write_text(yaml.safe_dump({
            "grace_period_seconds": 0.5,
            "general_rules": {
                "trial_budget_seconds": 5,
                "tiers": [{"name": "quick", "pairs": [{"support": 0.2, "metric": 1.1}]}],
            },
            "sampling": {"enabled": False},
        }))

        config = RulesConfig.from_yaml(path)

        assert config.grace_period_seconds == 0.5
        assert config.general_rules.trial_budget_seconds == 5
        assert config.general_rules.metric_kind == "lift"
        assert config.general_rules.build_tiers()[0].name == "quick"
        assert config.sampling.enabled is False
        assert config.sampling.target_rows == constants.DOWNSAMPLE_TARGET_ROWS
        assert config.class_rules == default_rules_config().class_rules

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert RulesConfig.from_yaml(path) == default_rules_config()

    def test_invalid_yaml_value(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text(yaml.safe_dump({"class_rules": {"bins": 0}}))
        with pytest.raises(ValidationError):
            RulesConfig.from_yaml(path)

    def test_shipped_config_matches_defaults(self):
        path = Path(__file__).resolve().parents[2] / "config" / "rules.yaml"
        config = RulesConfig.from_yaml(path)
        defaults = default_rules_config()

        def grid(tiers):
            return [[(c.minimum_support, c.minimum_metric) for c in tier] for tier in tiers]

        for section in ("class_rules", "general_rules"):
            shipped, default = getattr(config, section), getattr(defaults, section)
            assert grid(shipped.build_tiers()) == grid(default.build_tiers())
            assert shipped.keep_features == default.keep_features
        assert config.sampling == defaults.sampling
