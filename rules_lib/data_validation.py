"""
Prepared-table validation using Pandera.

A table is ready to mine when every predictor is nominal (discretized
bins, strings, categories or booleans) and, for class-association
mining, the class column is present and fully populated.
"""

import pandera as pa
import pandas as pd
from typing import Optional

from rules_lib.logging_config import InstrumentedLogger
from rules_lib.models.mining_config import ConfigurationError

instrumented_logger = InstrumentedLogger(__name__)


class PreparedTableError(ConfigurationError):
    """Raised when a table is not fit for rule mining"""
    pass


def check_nominal(series: pd.Series) -> bool:
    """Check that a predictor holds bins/labels rather than raw numbers."""
    if pd.api.types.is_bool_dtype(series):
        return True
    return not pd.api.types.is_numeric_dtype(series)


def check_has_values(series: pd.Series) -> bool:
    """Check that at least one value is present."""
    return bool(series.notna().any())


def prepared_table_schema(
    table: pd.DataFrame,
    class_column: Optional[str] = None,
) -> pa.DataFrameSchema:
    """
    Build the schema for a prepared table.

    Args:
        table: Table whose columns define the schema
        class_column: Class attribute, if the table carries one

    Returns:
        DataFrameSchema checking nominal predictors and a complete class
    """
    columns = {}
    for name in table.columns:
        if name == class_column:
            columns[name] = pa.Column(
                nullable=False,
                checks=[pa.Check(check_has_values, name="class_has_values")],
                description="Class label",
            )
        else:
            columns[name] = pa.Column(
                nullable=True,
                checks=[pa.Check(check_nominal, name="nominal_predictor")],
                description="Discretized predictor",
            )

    return pa.DataFrameSchema(
        columns=columns,
        checks=[
            pa.Check(lambda df: len(df) > 0, name="has_rows"),
            pa.Check(
                lambda df: len([c for c in df.columns if c != class_column]) > 0,
                name="has_predictors",
            ),
        ],
        strict=False,
        name="PreparedTableSchema",
    )


def validate_prepared_table(
    table: pd.DataFrame,
    class_column: Optional[str] = None,
    context: str = "",
) -> pd.DataFrame:
    """
    Validate a prepared table.

    Args:
        table: Table to validate
        class_column: Class attribute that must be present, if any
        context: Context string for error messages

    Returns:
        Validated DataFrame

    Raises:
        PreparedTableError: If validation fails or the class column is missing
    """
    if class_column is not None and class_column not in table.columns:
        raise PreparedTableError(
            f"Prepared table validation failed at {context}: "
            f"class column '{class_column}' not found"
        )

    try:
        return prepared_table_schema(table, class_column).validate(table)
    except pa.errors.SchemaError as e:
        error_msg = f"Prepared table validation failed at {context}: {str(e)}"
        instrumented_logger.log_validation_error(
            stage=context or "prepared_table", error=str(e), data=table
        )
        raise PreparedTableError(error_msg) from e
