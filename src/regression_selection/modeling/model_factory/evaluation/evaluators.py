"""
Model evaluator implementations for standardized performance assessment.

This module contains the evaluator that turns held-out predictions into an
immutable EvaluationReport, one per model per dataset split.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Any

from regression_selection.modeling.model_factory.evaluation.evaluation_functions import (
    mae,
    r_squared,
    rmse,
    validate_aligned,
)
from regression_selection.modeling.model_factory.protocols import Array

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EvaluationReport:
    """Out-of-sample error of one model on one set of records."""

    model_name: str
    rmse: float
    n_samples: int
    r_squared: float | None = None
    mae: float | None = None
    selected_round_count: int | None = None

    def as_dict(self) -> dict[str, Any]:
        """Report as a plain dict, omitting fields that do not apply to the model."""
        return {k: v for k, v in asdict(self).items() if v is not None}


# -------------------------
# Evaluator
# -------------------------


class RegressionEvaluator:
    """
    Evaluator for point regression predictions.

    Always reports RMSE; R² and MAE are optional extras.
    """

    def __init__(self, include_r_squared: bool = True, include_mae: bool = False):
        self.include_r_squared = include_r_squared
        self.include_mae = include_mae

    def evaluate(
        self,
        model_name: str,
        predictions: Array,
        actuals: Array,
        selected_round_count: int | None = None,
        **kwargs: Any,
    ) -> EvaluationReport:
        """
        Evaluate aligned predictions against ground truth.

        Args:
            model_name: Label for the report
            predictions: Model predictions
            actuals: Ground-truth values, in the same record order
            selected_round_count: Tree count, for boosted models

        Returns:
            EvaluationReport

        Raises:
            LengthMismatch: If the two sequences differ in length
        """
        y_pred, y_true = validate_aligned(predictions, actuals)
        report = EvaluationReport(
            model_name=model_name,
            rmse=rmse(y_pred, y_true),
            n_samples=int(y_true.shape[0]),
            r_squared=r_squared(y_pred, y_true) if self.include_r_squared and y_true.shape[0] > 1 else None,
            mae=mae(y_pred, y_true) if self.include_mae else None,
            selected_round_count=selected_round_count,
        )
        logger.info(f"{model_name}: RMSE={report.rmse:.4f} on {report.n_samples} records")
        return report

    def get_metric_names(self) -> list[str]:
        names = ["rmse", "n_samples"]
        if self.include_r_squared:
            names.append("r_squared")
        if self.include_mae:
            names.append("mae")
        return names
