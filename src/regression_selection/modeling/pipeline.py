"""
End-to-end model-selection run.

Splitter -> Standardizer -> {linear branch, boosted branch} -> reports.
The two branches share only the prepared (read-only) data, so they can
run on separate threads.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import pandas as pd
from joblib import Parallel, delayed

from regression_selection.modeling.config import ConfigManager
from regression_selection.modeling.modeling_steps import (
    BoostedBranchResult,
    LinearBranchResult,
    PreparedData,
    prepare_splits,
    run_boosted_branch,
    run_linear_branch,
)
from regression_selection.modeling.model_factory.evaluation.evaluators import EvaluationReport

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PipelineResult:
    """Everything a run produced, with one report per model."""

    data: PreparedData
    linear: LinearBranchResult
    boosted: BoostedBranchResult

    @property
    def reports(self) -> list[EvaluationReport]:
        return [*self.linear.reports, self.boosted.report]

    def summary(self) -> pd.DataFrame:
        """Report table indexed by model name."""
        return pd.DataFrame([r.as_dict() for r in self.reports]).set_index("model_name")

    def best_model(self) -> str:
        """Name of the model with the lowest test RMSE (first one on ties)."""
        return min(self.reports, key=lambda r: r.rmse).model_name


def run_pipeline(
    frame: pd.DataFrame,
    config_manager: ConfigManager | None = None,
    parallel: bool = False,
) -> PipelineResult:
    """
    Run the full model-selection pipeline on an in-memory dataset.

    Args:
        frame: Dataset with numeric predictors and the configured target
        config_manager: Run configuration (defaults when None)
        parallel: Run the linear and boosted branches on two threads

    Returns:
        PipelineResult

    Raises:
        ModelSelectionError: Any validation or fitting failure, from either branch
    """
    cfg = config_manager or ConfigManager()
    logger.info(f"Starting model-selection run: {cfg}")

    data = prepare_splits(frame, cfg.data)
    branches = [
        delayed(run_linear_branch)(data, cfg.selection),
        delayed(run_boosted_branch)(data, cfg.model, cfg.data.seed),
    ]
    if parallel:
        linear, boosted = Parallel(n_jobs=2, prefer="threads")(branches)
    else:
        linear, boosted = (func(*args, **kwargs) for func, args, kwargs in branches)

    result = PipelineResult(data=data, linear=linear, boosted=boosted)
    logger.info(f"Run complete; lowest test RMSE: {result.best_model()}")
    return result
