"""
Gradient-boosted regression trees with squared-error loss.

The ensemble starts from the target mean; every round fits a depth-limited
scikit-learn regression tree to the current residuals (the negative
gradient of the squared error) and adds it scaled by the learning rate:

    F_0(x) = mean(y)
    F_m(x) = F_{m-1}(x) + learning_rate * h_m(x)

Each tree is stored in scikit-learn's array-of-nodes form, so the whole
ensemble can be inspected as a flat node table.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator, Sequence

import numpy as np
import pandas as pd
from sklearn.tree import DecisionTreeRegressor

from regression_selection.errors import InsufficientData, MissingValue
from regression_selection.modeling.model_factory.data_management.preprocessing import (
    predictor_columns,
)
from regression_selection.modeling.model_factory.estimation.estimation_functions import (
    node_gains,
    tree_to_frame,
)
from regression_selection.modeling.model_factory.protocols import Array, Frame

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BoostingParams:
    """Training configuration, recorded alongside the fitted ensemble."""

    n_rounds: int = 100
    learning_rate: float = 0.3
    max_depth: int = 6
    min_samples_leaf: int = 1
    seed: int = 42

    def __post_init__(self) -> None:
        if self.n_rounds < 1:
            raise ValueError(f"n_rounds must be >= 1, got {self.n_rounds}")
        if not (0.0 < self.learning_rate <= 1.0):
            raise ValueError(f"learning_rate must be in (0, 1], got {self.learning_rate}")
        if self.max_depth < 1:
            raise ValueError(f"max_depth must be >= 1, got {self.max_depth}")
        if self.min_samples_leaf < 1:
            raise ValueError(f"min_samples_leaf must be >= 1, got {self.min_samples_leaf}")


def fit_tree(X: np.ndarray, residuals: np.ndarray, params: BoostingParams) -> DecisionTreeRegressor:
    """Fit one base learner to the current residuals."""
    tree = DecisionTreeRegressor(
        max_depth=params.max_depth,
        min_samples_leaf=params.min_samples_leaf,
        random_state=params.seed,
    )
    return tree.fit(X, residuals)


@dataclass(frozen=True)
class FittedBoostedModel:
    """An additive ensemble of regression trees and the prediction function over it."""

    target: str
    feature_names: tuple[str, ...]
    base_score: float
    trees: tuple[DecisionTreeRegressor, ...]
    params: BoostingParams

    @property
    def n_rounds(self) -> int:
        return len(self.trees)

    def _matrix(self, frame: Frame) -> np.ndarray:
        missing = [col for col in self.feature_names if col not in frame.columns]
        if missing:
            raise MissingValue(f"Missing features in input data: {missing}", component="boosted_tree")
        return frame[list(self.feature_names)].to_numpy(dtype=float)

    def predict(self, frame: Frame) -> Array:
        """
        Predict the target for every record.

        Returns base_score + learning_rate * sum of all tree outputs, with no
        clipping or post-processing.
        """
        X = self._matrix(frame)
        prediction = np.full(X.shape[0], self.base_score, dtype=float)
        for tree in self.trees:
            prediction += self.params.learning_rate * tree.predict(X)
        return prediction

    def staged_predict(self, frame: Frame) -> Iterator[Array]:
        """Yield the ensemble prediction after each round, starting with round 1."""
        X = self._matrix(frame)
        prediction = np.full(X.shape[0], self.base_score, dtype=float)
        for tree in self.trees:
            prediction = prediction + self.params.learning_rate * tree.predict(X)
            yield prediction

    def feature_importance(self) -> pd.Series:
        """Total split gain per feature, normalised to sum to 1 (0 for unused features)."""
        totals = np.zeros(len(self.feature_names))
        for tree in self.trees:
            t = tree.tree_
            split_nodes = t.children_left != -1
            np.add.at(totals, t.feature[split_nodes], node_gains(tree)[split_nodes])
        total = totals.sum()
        if total > 0:
            totals = totals / total
        importance = pd.Series(totals, index=list(self.feature_names), name="gain")
        return importance.sort_values(ascending=False, kind="stable")

    def trees_to_frame(self) -> pd.DataFrame:
        """Node table of the whole ensemble, one row per node."""
        if not self.trees:
            return pd.DataFrame(columns=["tree", "node", "feature", "split", "yes", "no", "gain", "cover", "value"])
        return pd.concat(
            [tree_to_frame(tree, i, self.feature_names) for i, tree in enumerate(self.trees)],
            ignore_index=True,
        )

    def __repr__(self) -> str:
        return (
            f"FittedBoostedModel(n_rounds={self.n_rounds}, learning_rate={self.params.learning_rate}, "
            f"max_depth={self.params.max_depth})"
        )


class GradientBoostedTrees:
    """
    Squared-error gradient boosting over regression trees.

    Args:
        target: Target column
        params: Round count and tree configuration
        predictors: Feature columns; None means every non-target column
    """

    def __init__(
        self,
        target: str,
        params: BoostingParams | None = None,
        predictors: Sequence[str] | None = None,
    ):
        self.target = target
        self.params = params or BoostingParams()
        self.predictors = list(predictors) if predictors is not None else None

    def fit(self, frame: Frame) -> FittedBoostedModel:
        """Train `params.n_rounds` trees on `frame`."""
        features = self.predictors if self.predictors is not None else predictor_columns(frame, self.target)
        if not features:
            raise InsufficientData("no predictor columns to split on", component="boosted_tree")
        if len(frame) == 0:
            raise InsufficientData("cannot boost on an empty frame", component="boosted_tree")

        X = frame[features].to_numpy(dtype=float)
        y = frame[self.target].to_numpy(dtype=float)

        base_score = float(y.mean())
        prediction = np.full(y.shape[0], base_score)
        trees = []
        for _ in range(self.params.n_rounds):
            tree = fit_tree(X, y - prediction, self.params)
            prediction = prediction + self.params.learning_rate * tree.predict(X)
            trees.append(tree)

        train_rmse = float(np.sqrt(np.mean((y - prediction) ** 2)))
        logger.info(
            f"Boosted {len(trees)} trees (learning_rate={self.params.learning_rate}, "
            f"max_depth={self.params.max_depth}); train RMSE={train_rmse:.4f}"
        )
        return FittedBoostedModel(
            target=self.target,
            feature_names=tuple(features),
            base_score=base_score,
            trees=tuple(trees),
            params=self.params,
        )
