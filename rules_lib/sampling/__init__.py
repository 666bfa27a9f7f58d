"""
Sampling utilities for bounding mining cost.
"""

from rules_lib.sampling.stratified import (
    ClassStratum,
    build_class_strata,
    stratified_undersample,
    undersample_if_oversized,
)

__all__ = [
    'ClassStratum',
    'build_class_strata',
    'stratified_undersample',
    'undersample_if_oversized',
]
