"""Data management module for validating, splitting and scaling datasets."""

from .preprocessing import StandardizationStats, Standardizer, standardize_split, validate_dataset
from .splitters import KFoldAssigner, Split, TargetStratifiedSplitter

__all__ = [
    'KFoldAssigner',
    'Split',
    'StandardizationStats',
    'Standardizer',
    'TargetStratifiedSplitter',
    'standardize_split',
    'validate_dataset',
]
