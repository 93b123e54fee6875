"""Estimation module containing the linear and boosted-tree regressors."""

from .boosting import BoostingParams, FittedBoostedModel, GradientBoostedTrees
from .linear import FittedLinearModel, OLSRegressor

__all__ = [
    'BoostingParams',
    'FittedBoostedModel',
    'FittedLinearModel',
    'GradientBoostedTrees',
    'OLSRegressor',
]
