"""
Shared fixtures: small tables and a fast rules configuration.
"""

import numpy as np
import pandas as pd
import pytest

from rules_lib.config_schemas import RulesConfig, default_rules_config


@pytest.fixture
def prepared_table():
    """Small discretized table with the class last."""
    return pd.DataFrame({
        "length_url": pd.Categorical(["B1of4", "B2of4", "B1of4", "B4of4"] * 5),
        "nb_dots": pd.Categorical(["B1of4", "B1of4", "B3of4", "B2of4"] * 5),
        "status": ["phishing", "legitimate"] * 10,
    })


@pytest.fixture
def raw_table():
    """Numeric feature table with a binary class column."""
    rng = np.random.default_rng(0)
    n = 40
    status = np.array(["phishing", "legitimate"] * (n // 2))
    return pd.DataFrame({
        "length_url": np.where(status == "phishing", 80.0, 20.0) + rng.normal(0, 1, n),
        "nb_dots": rng.integers(1, 5, n),
        "ip": (status == "phishing").astype(int),
        "status": status,
    })


@pytest.fixture
def fast_config() -> RulesConfig:
    """Default grids with short budgets and no curated keep-lists."""
    data = default_rules_config().model_dump()
    for section in ("class_rules", "general_rules"):
        data[section]["trial_budget_seconds"] = 2.0
        data[section]["keep_features"] = []
    data["grace_period_seconds"] = 0.05
    return RulesConfig.model_validate(data)
