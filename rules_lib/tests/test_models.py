"""
Tests for configuration, tier, rule and result models.
"""

import dataclasses

import pytest

from rules_lib.models import (
    ConfigurationError,
    ConfigurationTier,
    MetricKind,
    MiningConfiguration,
    ResultKind,
    Rule,
    RuleMiningResult,
)
from rules_lib.tests.helpers import make_config, make_rule


class TestMiningConfiguration:

    def test_valid_configuration_is_frozen(self):
        cfg = make_config(0.15, 0.9)
        with pytest.raises(dataclasses.FrozenInstanceError):
            cfg.minimum_support = 0.1

    @pytest.mark.parametrize("support", [0.0, -0.1, 1.5])
    def test_support_out_of_range(self, support):
        with pytest.raises(ConfigurationError):
            make_config(support, 0.9)

    def test_confidence_above_one_rejected(self):
        with pytest.raises(ConfigurationError):
            make_config(0.1, 1.2, MetricKind.CONFIDENCE)

    def test_lift_above_one_allowed(self):
        assert make_config(0.1, 1.5, MetricKind.LIFT).minimum_metric == 1.5

    def test_non_positive_max_rules_and_delta(self):
        with pytest.raises(ConfigurationError):
            MiningConfiguration(0.1, 0.9, max_rules=0)
        with pytest.raises(ConfigurationError):
            MiningConfiguration(0.1, 0.9, counting_delta=0)

    def test_metric_kind_accepts_string(self):
        cfg = MiningConfiguration(0.1, 1.2, metric_kind="lift")
        assert cfg.metric_kind is MetricKind.LIFT

    def test_unknown_metric_kind(self):
        with pytest.raises(ConfigurationError):
            MiningConfiguration(0.1, 0.5, metric_kind="leverage")

    def test_permissiveness(self):
        strict = make_config(0.15, 0.9)
        assert make_config(0.10, 0.9).is_more_permissive_than(strict)
        assert make_config(0.15, 0.8).is_more_permissive_than(strict)
        assert not make_config(0.15, 0.9).is_more_permissive_than(strict)
        assert not make_config(0.10, 0.95).is_more_permissive_than(strict)
        assert not make_config(0.10, 0.5, MetricKind.LIFT).is_more_permissive_than(strict)

    def test_describe(self):
        cfg = make_config(0.15, 1.5, MetricKind.LIFT, max_rules=15)
        assert cfg.describe() == "support>=0.15 lift>=1.5 max_rules=15"


class TestConfigurationTier:

    def test_empty_tier_rejected(self):
        with pytest.raises(ConfigurationError):
            ConfigurationTier(configurations=())

    def test_non_monotone_tier_rejected(self):
        with pytest.raises(ConfigurationError):
            ConfigurationTier(configurations=(make_config(0.05, 0.9), make_config(0.10, 0.8)))

    def test_duplicate_entry_rejected(self):
        with pytest.raises(ConfigurationError):
            ConfigurationTier(configurations=(make_config(0.1, 0.9), make_config(0.1, 0.9)))

    def test_wrong_entry_type_rejected(self):
        with pytest.raises(ConfigurationError):
            ConfigurationTier(configurations=((0.1, 0.9),))

    def test_from_pairs_preserves_order(self):
        tier = ConfigurationTier.from_pairs(
            [(0.15, 1.5), (0.12, 1.3), (0.10, 1.2)],
            MetricKind.LIFT, max_rules=15, counting_delta=0.05, name="general",
        )
        assert len(tier) == 3
        assert [c.minimum_support for c in tier] == [0.15, 0.12, 0.10]
        assert all(c.metric_kind is MetricKind.LIFT for c in tier)
        assert tier.name == "general"

    def test_list_input_becomes_tuple(self):
        tier = ConfigurationTier(configurations=[make_config(0.1, 0.9)])
        assert isinstance(tier.configurations, tuple)


class TestRuleMiningResult:

    def test_found_requires_rules(self):
        with pytest.raises(ValueError):
            RuleMiningResult.found([], elapsed_seconds=0.1)

    def test_only_found_carries_rules(self):
        with pytest.raises(ValueError):
            RuleMiningResult(kind=ResultKind.NOT_FOUND, rules=(make_rule("a", "b"),))

    def test_errored_requires_reason(self):
        with pytest.raises(ValueError):
            RuleMiningResult(kind=ResultKind.ERRORED)

    def test_constructors(self):
        rules = [make_rule("a", "b")]
        assert RuleMiningResult.found(rules, 0.1).is_found
        assert RuleMiningResult.not_found(0.1).kind is ResultKind.NOT_FOUND
        assert RuleMiningResult.timed_out().elapsed_seconds is None
        errored = RuleMiningResult.errored("ValueError: bad")
        assert errored.reason == "ValueError: bad"

    def test_to_dict(self):
        result = dataclasses.replace(
            RuleMiningResult.found([make_rule("a", "b")], 0.5),
            configuration=make_config(0.1, 0.9),
            trials_attempted=2,
        )
        data = result.to_dict()
        assert data["kind"] == "found"
        assert data["trials_attempted"] == 2
        assert data["configuration"]["metric_kind"] == "confidence"
        assert data["rules"][0]["antecedent"] == [["a", "B1"]]


class TestRule:

    def test_items_become_frozensets(self):
        rule = Rule(antecedent={("a", "B1")}, consequent=[("status", "phishing")],
                    support=0.3, confidence=0.95, lift=1.9)
        assert isinstance(rule.antecedent, frozenset)
        assert rule.concludes("status")
        assert not rule.concludes("a")
        assert rule.attributes == frozenset({"a", "status"})

    def test_str(self):
        rule = make_rule("a", "b", confidence=0.9, lift=1.5)
        assert str(rule).startswith("a=B1 ==> b=B1 conf:(0.90) lift:(1.50)")
