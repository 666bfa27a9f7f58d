"""
Table preparation: column selection, class placement, discretization.
"""

from rules_lib.preparation.table_prep import (
    bin_labels,
    class_counts,
    discretize,
    drop_class,
    keep_columns,
    move_class_last,
    prepare_class_table,
    prepare_feature_table,
    resolve_class_column,
)

__all__ = [
    'bin_labels',
    'class_counts',
    'discretize',
    'drop_class',
    'keep_columns',
    'move_class_last',
    'prepare_class_table',
    'prepare_feature_table',
    'resolve_class_column',
]
