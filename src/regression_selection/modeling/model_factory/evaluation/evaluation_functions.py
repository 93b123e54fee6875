"""
Helper functions for model evaluation.

Point-prediction error metrics over aligned (prediction, actual) pairs.
"""

from __future__ import annotations

import numpy as np
from sklearn.metrics import mean_absolute_error, mean_squared_error, r2_score

from regression_selection.errors import InsufficientData, LengthMismatch

# -------------------------
# Core helpers (single task)
# -------------------------


def validate_aligned(predictions, actuals) -> tuple[np.ndarray, np.ndarray]:
    """Flatten both inputs to float arrays and check they pair up one-to-one."""
    y_pred = np.asarray(predictions, dtype=float).reshape(-1)
    y_true = np.asarray(actuals, dtype=float).reshape(-1)
    if y_pred.shape[0] != y_true.shape[0]:
        raise LengthMismatch(
            f"{y_pred.shape[0]} predictions but {y_true.shape[0]} actual values",
            component="evaluator",
        )
    if y_true.shape[0] == 0:
        raise InsufficientData("cannot evaluate empty sequences", component="evaluator")
    return y_pred, y_true


def rmse(predictions, actuals) -> float:
    """Root-mean-squared error: sqrt(mean((pred_i - actual_i)^2))."""
    y_pred, y_true = validate_aligned(predictions, actuals)
    return float(np.sqrt(mean_squared_error(y_true, y_pred)))


def r_squared(predictions, actuals) -> float:
    """Coefficient of determination of the predictions."""
    y_pred, y_true = validate_aligned(predictions, actuals)
    return float(r2_score(y_true, y_pred))


def mae(predictions, actuals) -> float:
    y_pred, y_true = validate_aligned(predictions, actuals)
    return float(mean_absolute_error(y_true, y_pred))
