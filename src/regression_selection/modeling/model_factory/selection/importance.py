"""
Variable importance from a fitted linear model.

Importance of a predictor is the absolute t statistic of its coefficient.
Ranking is deterministic: descending score, ties broken by feature name.
"""

from __future__ import annotations

import math

from regression_selection.modeling.model_factory.estimation.linear import FittedLinearModel


def rank_importance(model: FittedLinearModel) -> list[tuple[str, float]]:
    """
    Rank the predictors of `model` by |t|.

    The intercept is not ranked. An undefined t statistic (0/0 on a
    perfect fit) scores 0.

    Returns:
        List of (feature, score) pairs, most important first
    """
    scores = []
    for feature, t in model.t_values.items():
        score = abs(float(t))
        if math.isnan(score):
            score = 0.0
        scores.append((str(feature), score))
    return sorted(scores, key=lambda pair: (-pair[1], pair[0]))


def select_features(model: FittedLinearModel, threshold: float = 1.0) -> list[str]:
    """Predictors whose importance is strictly above `threshold`, in ranked order."""
    return [feature for feature, score in rank_importance(model) if score > threshold]
