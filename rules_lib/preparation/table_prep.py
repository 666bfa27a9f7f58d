"""
Table preparation for rule mining.

Turns a raw feature table into a mineable one:
- pick the class column
- keep a curated subset of predictors
- put the class last (or drop it for feature-to-feature rules)
- discretize numeric predictors into equal-width bins

Pure functions - the input table is never modified.
"""

import logging
from typing import Iterable, List, Optional, Sequence

import pandas as pd

from rules_lib.logging_config import InstrumentedLogger
from rules_lib.models.mining_config import ConfigurationError

logger = logging.getLogger(__name__)
instrumented_logger = InstrumentedLogger(__name__)


def resolve_class_column(table: pd.DataFrame, candidates: Sequence[str]) -> str:
    """
    Pick the class column: first candidate present, else the last column.

    Raises:
        ConfigurationError: If the table has no columns
    """
    for name in candidates:
        if name in table.columns:
            return name
    if len(table.columns) == 0:
        raise ConfigurationError("Cannot resolve a class column on a table without columns")
    return table.columns[-1]


def keep_columns(
    table: pd.DataFrame,
    names: Iterable[str],
    class_column: Optional[str] = None,
) -> pd.DataFrame:
    """
    Keep curated columns (in table order) plus the class column.

    Unknown names are ignored; if none of ``names`` exist the table is
    returned unchanged.
    """
    wanted = set(names)
    if not any(c in wanted for c in table.columns):
        logger.info("None of %d curated columns found, keeping all columns", len(wanted))
        return table
    keep = [c for c in table.columns if c in wanted or c == class_column]
    return table[keep].copy()


def move_class_last(table: pd.DataFrame, class_column: str) -> pd.DataFrame:
    """Reorder columns so the class column is last."""
    if class_column not in table.columns:
        raise ConfigurationError(f"Class column '{class_column}' not found in table")
    order = [c for c in table.columns if c != class_column] + [class_column]
    return table[order].copy()


def drop_class(table: pd.DataFrame, class_column: Optional[str]) -> pd.DataFrame:
    """Remove the class column if present."""
    if class_column is None or class_column not in table.columns:
        return table.copy()
    return table.drop(columns=[class_column])


def bin_labels(bins: int) -> List[str]:
    """Bin labels in the style ``B1of4``, ``B2of4``, ..."""
    return [f"B{i}of{bins}" for i in range(1, bins + 1)]


def discretize(
    table: pd.DataFrame,
    bins: int,
    exclude: Iterable[str] = (),
) -> pd.DataFrame:
    """
    Equal-width discretization of numeric columns.

    Boolean and non-numeric columns, and columns in ``exclude``, are left
    untouched. Missing values stay missing.

    Args:
        table: Input table
        bins: Number of bins per numeric column (>= 1)
        exclude: Columns never discretized (e.g. the class)

    Returns:
        New DataFrame with numeric columns replaced by ordered categoricals
    """
    if bins < 1:
        raise ConfigurationError(f"bins must be >= 1, got {bins}")

    skipped = set(exclude)
    labels = bin_labels(bins)
    out = table.copy()
    binned = []

    for name in table.columns:
        series = table[name]
        if name in skipped or pd.api.types.is_bool_dtype(series):
            continue
        if not pd.api.types.is_numeric_dtype(series):
            continue
        if series.notna().sum() == 0:
            out[name] = pd.Categorical([None] * len(series), categories=labels, ordered=True)
            binned.append(name)
            continue
        out[name] = pd.cut(series, bins=bins, labels=labels, include_lowest=True)
        binned.append(name)

    instrumented_logger.log_data_transform(
        stage="discretize",
        input_data=table,
        output_data=out,
        metadata={"bins": bins, "binned_columns": binned},
    )
    return out


def class_counts(table: pd.DataFrame, class_column: str) -> pd.Series:
    """Rows per class value (sorted by value), missing classes excluded."""
    if class_column not in table.columns:
        raise ConfigurationError(f"Class column '{class_column}' not found in table")
    counts = table[class_column].value_counts(dropna=True, sort=False).sort_index()
    logger.info(
        "Class counts: %s",
        ", ".join(f"'{value}'={count}" for value, count in counts.items()),
    )
    return counts


def prepare_class_table(
    table: pd.DataFrame,
    class_column: str,
    keep: Iterable[str],
    bins: int,
) -> pd.DataFrame:
    """Prepare a table for class-association mining (class kept, last, labelled rows only)."""
    prepared = keep_columns(table, keep, class_column=class_column)
    prepared = move_class_last(prepared, class_column)
    labelled = prepared[class_column].notna()
    if not labelled.all():
        logger.info("Dropping %d instances with a missing class", int((~labelled).sum()))
        prepared = prepared[labelled]
    prepared = discretize(prepared, bins, exclude=[class_column])
    logger.info(
        "Data prepared for class rules: %d instances, %d attributes",
        len(prepared), prepared.shape[1],
    )
    return prepared


def prepare_feature_table(
    table: pd.DataFrame,
    class_column: Optional[str],
    keep: Iterable[str],
    bins: int,
) -> pd.DataFrame:
    """Prepare a table for feature-to-feature mining (class removed)."""
    prepared = drop_class(table, class_column)
    prepared = keep_columns(prepared, keep)
    prepared = discretize(prepared, bins)
    logger.info(
        "Data prepared for general rules: %d instances, %d attributes",
        len(prepared), prepared.shape[1],
    )
    return prepared
