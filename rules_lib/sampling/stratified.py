"""
Stratified undersampling.

Shrinks a table to a row budget while keeping classes balanced:
every class gets the same quota (target // number of classes) and a
class with fewer rows than its quota contributes all it has. The
shortfall is not handed to other classes, so the result may be smaller
than the target.

Pure functions: the input table is never modified and every call owns
its own random generator.
"""

from dataclasses import dataclass
from typing import List

import numpy as np
import pandas as pd

from rules_lib.logging_config import InstrumentedLogger
from rules_lib.models.mining_config import ConfigurationError

instrumented_logger = InstrumentedLogger(__name__)


@dataclass(frozen=True)
class ClassStratum:
    """Positional row indices holding one class value."""
    value: object
    positions: np.ndarray

    @property
    def size(self) -> int:
        return int(len(self.positions))


def build_class_strata(table: pd.DataFrame, class_column: str) -> List[ClassStratum]:
    """
    Group row positions by class value.

    Class values come out in sorted order (category order for
    categorical columns). Rows with a missing class are left out.

    Raises:
        ConfigurationError: If ``class_column`` is not in the table
    """
    if class_column not in table.columns:
        raise ConfigurationError(f"Class column '{class_column}' not found in table")

    codes, uniques = pd.factorize(table[class_column], sort=True)
    return [
        ClassStratum(value=uniques[code], positions=np.flatnonzero(codes == code))
        for code in range(len(uniques))
    ]


def stratified_undersample(
    table: pd.DataFrame,
    class_column: str,
    target_row_count: int,
    seed: int,
) -> pd.DataFrame:
    """
    Undersample ``table`` to at most ``target_row_count`` rows, class-balanced.

    Each class is shuffled with one seeded generator and its first
    min(quota, available) rows are taken; the concatenated selection is
    then shuffled again with the same generator stream.

    Args:
        table: Input table (not modified)
        class_column: Column holding the class label
        target_row_count: Row budget, must be positive
        seed: Seed for the shuffle; identical (table, seed) inputs give
            identical row selection and order

    Returns:
        New DataFrame with the original columns, dtypes and index labels

    Raises:
        ConfigurationError: If the class column is missing or the target
            is not positive

    Examples:
        >>> # classes A=9000, B=1000, target=3000 -> quota 1500 each
        >>> sampled = stratified_undersample(df, "status", 3000, seed=7)
        >>> len(sampled)
        2500
    """
    if target_row_count <= 0:
        raise ConfigurationError(f"target_row_count must be positive, got {target_row_count}")

    strata = build_class_strata(table, class_column)
    if not strata:
        return table.iloc[0:0].copy()

    quota = target_row_count // len(strata)
    rng = np.random.default_rng(seed)

    selections = []
    for stratum in strata:
        shuffled = rng.permutation(stratum.positions)
        selections.append(shuffled[:min(quota, stratum.size)])

    combined = rng.permutation(np.concatenate(selections))
    sampled = table.iloc[combined].copy()

    instrumented_logger.log_data_transform(
        stage="stratified_undersample",
        input_data=table,
        output_data=sampled,
        metadata={
            "class_column": class_column,
            "target_row_count": target_row_count,
            "quota": quota,
            "seed": seed,
            "available_per_class": {str(s.value): s.size for s in strata},
            "sampled_per_class": {str(s.value): len(sel) for s, sel in zip(strata, selections)},
        },
    )
    return sampled


def undersample_if_oversized(
    table: pd.DataFrame,
    class_column: str,
    trigger_rows: int,
    target_rows: int,
    seed: int,
) -> pd.DataFrame:
    """
    Apply stratified_undersample only when the table exceeds ``trigger_rows``.

    Tables at or below the trigger are returned unchanged (same object).
    """
    if len(table) <= trigger_rows:
        return table
    return stratified_undersample(table, class_column, target_rows, seed)
