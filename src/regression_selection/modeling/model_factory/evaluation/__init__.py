"""Evaluation module for standardized model performance assessment."""

from .evaluation_functions import r_squared, rmse
from .evaluators import EvaluationReport, RegressionEvaluator

__all__ = [
    "EvaluationReport",
    "RegressionEvaluator",
    "r_squared",
    "rmse",
]
