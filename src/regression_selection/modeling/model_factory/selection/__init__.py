"""Selection module: feature ranking, nested-model tests and round-count tuning."""

from .comparison import NestedModelComparison, compare_nested_models
from .cross_validation import CVResult, CVTuner, EarlyStopping
from .importance import rank_importance, select_features

__all__ = [
    "CVResult",
    "CVTuner",
    "EarlyStopping",
    "NestedModelComparison",
    "compare_nested_models",
    "rank_importance",
    "select_features",
]
