"""
Central constants for association rule search.

Single source of truth for the default threshold grids, trial budgets,
sampling sizes and curated feature lists. The search core never reads
these directly; they only seed the configuration layer (config_schemas).
"""

# Randomness
SEED = 42

# Discretization (bins per numeric predictor)
DISC_BINS_CAR = 4      # 5-6 sharpens class signals at higher mining cost
DISC_BINS_GENERAL = 3

# Rule caps
MAX_RULES_CAR = 120
MAX_RULES_GENERAL = 15

# Support step used while lowering support towards the minimum
COUNTING_DELTA_CAR = 0.01
COUNTING_DELTA_GENERAL = 0.05

# Wall-clock budget per trial (seconds)
CAR_TRIAL_BUDGET_SECONDS = 60.0
GENERAL_TRIAL_BUDGET_SECONDS = 30.0

# Caller-side wait for a timed-out trial to acknowledge cancellation
DEFAULT_GRACE_PERIOD_SECONDS = 0.25

# Undersampling applies to general rules only
DOWNSAMPLE_TRIGGER_ROWS = 5000
DOWNSAMPLE_TARGET_ROWS = 3000

# Class association rules: (support, confidence) tiers, strictest first
CAR_TIERS = [
    [(0.10, 0.90), (0.05, 0.90)],
    [(0.05, 0.80), (0.03, 0.70)],
]

# General rules: (support, lift) pairs, strictest first
GENERAL_TIERS = [
    [(0.15, 1.5), (0.12, 1.3), (0.10, 1.2)],
]

# Quick fallback once every tier is exhausted (confidence metric)
FALLBACK_SUPPORT = 0.2
FALLBACK_CONFIDENCE = 0.6
FALLBACK_MAX_RULES = 10
FALLBACK_COUNTING_DELTA = 0.1

# Class column lookup order; the last column is used when none match
CLASS_COLUMN_CANDIDATES = ["status", "cls_label"]

# Curated predictors (the class column is appended automatically)
IMPORTANT_FEATURES = [
    "length_url", "length_hostname", "ip", "nb_dots", "nb_hyphens",
    "ratio_intHyperlinks", "ratio_extHyperlinks", "links_in_tags",
    "safe_anchor", "domain_age", "domain_registration_length",
    "dns_record", "google_index",
]

GENERAL_FEATURES = [
    "length_url", "length_hostname", "nb_dots", "nb_hyphens",
    "ratio_intHyperlinks", "ratio_extHyperlinks", "domain_age", "dns_record",
]
