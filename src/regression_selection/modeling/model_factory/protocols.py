"""
Protocols for the model factory (pandas/NumPy only).

Conventions
-----------
- Datasets: pandas DataFrames of numeric columns, one of which is the target.
- Arrays: NumPy float arrays unless stated otherwise.
- Shapes:
    * Regression predictions: (n_samples,)
    * Index splits: integer (positional) index arrays
- Fitted artefacts are immutable; fitting returns a new object instead of
  mutating the estimator.

These are structural types (Protocols) to decouple components while preserving type safety.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

import numpy as np
import pandas as pd
from numpy.typing import NDArray

# ----- Common type aliases ----------------------------------------------------

Array = NDArray[np.float64]          # numeric arrays (predictions, targets)
IndexArray = NDArray[np.intp]        # index arrays for splits and folds
Frame = pd.DataFrame


# ----- Data splitting ---------------------------------------------------------

@runtime_checkable
class DataSplitter(Protocol):
    """Protocol for train/test partitioning strategies."""

    def split(self, frame: Frame, target: str) -> Any:
        """Partition the records of `frame` into train and test indices."""
        ...


# ----- Models -----------------------------------------------------------------

@runtime_checkable
class FittedRegressor(Protocol):
    """A fitted model able to produce point predictions for a frame."""

    def predict(self, frame: Frame) -> Array:
        ...


@runtime_checkable
class RegressionEstimator(Protocol):
    """An unfitted estimator; `fit` returns an immutable fitted model."""

    target: str

    def fit(self, frame: Frame) -> FittedRegressor:
        ...


# ----- Evaluation -------------------------------------------------------------

@runtime_checkable
class ModelEvaluator(Protocol):
    """Standardized evaluation interface."""

    def evaluate(self, model_name: str, predictions: Array, actuals: Array, **kwargs: Any) -> Any:
        ...

    def get_metric_names(self) -> list[str]:
        ...


__all__ = [
    # aliases
    "Array", "IndexArray", "Frame",
    # splitting
    "DataSplitter",
    # models
    "FittedRegressor", "RegressionEstimator",
    # evaluation
    "ModelEvaluator",
]
