"""
Regression Model Selection - Modeling Module

This module contains the modeling components of the pipeline and exports
the public interfaces from the model_factory submodules.
"""

from .model_factory.data_management.preprocessing import (
    StandardizationStats,
    Standardizer,
    standardize_split,
    validate_dataset,
)
from .model_factory.data_management.splitters import (
    KFoldAssigner,
    Split,
    TargetStratifiedSplitter,
)
from .model_factory.estimation.boosting import (
    BoostingParams,
    FittedBoostedModel,
    GradientBoostedTrees,
)
from .model_factory.estimation.linear import FittedLinearModel, OLSRegressor
from .model_factory.evaluation.evaluators import EvaluationReport, RegressionEvaluator
from .model_factory.evaluation.evaluation_functions import rmse
from .model_factory.selection.comparison import NestedModelComparison, compare_nested_models
from .model_factory.selection.cross_validation import CVResult, CVTuner, EarlyStopping
from .model_factory.selection.importance import rank_importance, select_features

# Export protocols for type safety
from .model_factory.protocols import (
    DataSplitter,
    FittedRegressor,
    ModelEvaluator,
    RegressionEstimator,
)

__all__ = [
    # Data management
    "KFoldAssigner",
    "Split",
    "StandardizationStats",
    "Standardizer",
    "TargetStratifiedSplitter",
    "standardize_split",
    "validate_dataset",
    # Estimators
    "BoostingParams",
    "FittedBoostedModel",
    "FittedLinearModel",
    "GradientBoostedTrees",
    "OLSRegressor",
    # Selection
    "CVResult",
    "CVTuner",
    "EarlyStopping",
    "NestedModelComparison",
    "compare_nested_models",
    "rank_importance",
    "select_features",
    # Evaluation
    "EvaluationReport",
    "RegressionEvaluator",
    "rmse",
    # Protocols
    "DataSplitter",
    "FittedRegressor",
    "ModelEvaluator",
    "RegressionEstimator",
]
