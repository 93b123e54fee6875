"""
Helper functions for the estimators.

This module provides the numerical building blocks shared by the linear
and boosted-tree estimators: design-matrix construction, a rank-checked
QR least-squares solve, and flattening of fitted trees into a table.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np
import pandas as pd
from sklearn.tree import DecisionTreeRegressor

from regression_selection.errors import MissingValue, SingularDesignMatrix

INTERCEPT = "(Intercept)"


def design_matrix(frame: pd.DataFrame, predictors: Sequence[str]) -> np.ndarray:
    """
    Build the (n, k + 1) design matrix: an intercept column followed by predictors.

    Args:
        frame: Dataset
        predictors: Predictor columns, in order

    Returns:
        Float design matrix
    """
    missing = [col for col in predictors if col not in frame.columns]
    if missing:
        raise MissingValue(f"predictor columns not found: {missing}", component="linear_model")
    X = frame[list(predictors)].to_numpy(dtype=float)
    return np.column_stack([np.ones(len(frame)), X]) if len(predictors) else np.ones((len(frame), 1))


def qr_least_squares(X: np.ndarray, y: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """
    Solve min ||X b - y|| through a reduced QR decomposition.

    Args:
        X: Design matrix (n, p)
        y: Response (n,)

    Returns:
        (coefficients, (X'X)^-1) where the second term is used for standard errors

    Raises:
        SingularDesignMatrix: If X does not have full column rank
    """
    n, p = X.shape
    rank = np.linalg.matrix_rank(X)
    if rank < p:
        raise SingularDesignMatrix(
            f"design matrix has rank {rank} but {p} columns (collinear predictors)",
            component="linear_model",
        )
    Q, R = np.linalg.qr(X, mode="reduced")
    coef = np.linalg.solve(R, Q.T @ y)
    R_inv = np.linalg.solve(R, np.eye(p))
    xtx_inv = R_inv @ R_inv.T
    return coef, xtx_inv


def tree_to_frame(tree: DecisionTreeRegressor, tree_index: int, feature_names: Sequence[str]) -> pd.DataFrame:
    """
    Flatten one fitted tree into a node table.

    Nodes are addressed by integer index; leaves have no feature/split and
    Yes/No set to -1.

    Args:
        tree: Fitted scikit-learn regression tree
        tree_index: Position of the tree in its ensemble
        feature_names: Names matching the columns the tree was fitted on

    Returns:
        DataFrame with one row per node
    """
    t = tree.tree_
    is_leaf = t.children_left == -1
    features = np.where(is_leaf, None, np.asarray(feature_names, dtype=object)[np.maximum(t.feature, 0)])
    return pd.DataFrame(
        {
            "tree": tree_index,
            "node": np.arange(t.node_count),
            "feature": features,
            "split": np.where(is_leaf, np.nan, t.threshold),
            "yes": t.children_left,
            "no": t.children_right,
            "gain": node_gains(tree),
            "cover": t.n_node_samples,
            "value": t.value[:, 0, 0],
        }
    )


def node_gains(tree: DecisionTreeRegressor) -> np.ndarray:
    """Weighted squared-error reduction of every split node (0 for leaves)."""
    t = tree.tree_
    gains = np.zeros(t.node_count)
    for node in range(t.node_count):
        left, right = t.children_left[node], t.children_right[node]
        if left == -1:
            continue
        gains[node] = (
            t.weighted_n_node_samples[node] * t.impurity[node]
            - t.weighted_n_node_samples[left] * t.impurity[left]
            - t.weighted_n_node_samples[right] * t.impurity[right]
        )
    return gains
