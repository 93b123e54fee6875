"""
Pipeline step functions.

Each function performs one stage of a model-selection run and returns new
objects; none of them keeps state between calls. The two modeling
branches (linear and boosted trees) only share the prepared data, so
either one can be run, retried or parallelised on its own.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import pandas as pd

from regression_selection.errors import MissingValue
from regression_selection.modeling.config import DataConfig, ModelConfig, SelectionConfig
from regression_selection.modeling.model_factory.data_management.preprocessing import (
    StandardizationStats,
    Standardizer,
    standardize_split,
    validate_dataset,
)
from regression_selection.modeling.model_factory.data_management.splitters import (
    Split,
    TargetStratifiedSplitter,
)
from regression_selection.modeling.model_factory.estimation.boosting import (
    FittedBoostedModel,
    GradientBoostedTrees,
)
from regression_selection.modeling.model_factory.estimation.linear import (
    FittedLinearModel,
    OLSRegressor,
)
from regression_selection.modeling.model_factory.evaluation.evaluators import (
    EvaluationReport,
    RegressionEvaluator,
)
from regression_selection.modeling.model_factory.selection.comparison import (
    NestedModelComparison,
    compare_nested_models,
)
from regression_selection.modeling.model_factory.selection.cross_validation import (
    CVResult,
    CVTuner,
)
from regression_selection.modeling.model_factory.selection.importance import (
    rank_importance,
    select_features,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PreparedData:
    """Standardized train/test frames and how they were produced."""

    train: pd.DataFrame
    test: pd.DataFrame
    split: Split
    stats: StandardizationStats
    target: str


@dataclass(frozen=True)
class LinearBranchResult:
    """Full and reduced linear fits, the ranking that links them, and their test reports."""

    full_model: FittedLinearModel
    reduced_model: FittedLinearModel
    ranking: list[tuple[str, float]]
    selected: list[str]
    comparison: Optional[NestedModelComparison]
    reports: list[EvaluationReport] = field(default_factory=list)

    @property
    def pruned(self) -> bool:
        return len(self.selected) < self.full_model.n_predictors


@dataclass(frozen=True)
class BoostedBranchResult:
    """Cross-validation outcome, the refitted ensemble and its test report."""

    cv_result: CVResult
    model: FittedBoostedModel
    report: EvaluationReport


def load_dataset(path: str | Path, target: str) -> pd.DataFrame:
    """
    Load a CSV dataset and check it is complete and numeric.

    Args:
        path: CSV file with a header row
        target: Name of the target column

    Returns:
        Validated DataFrame

    Raises:
        FileNotFoundError: If the file does not exist
        MissingValue: If the target is absent or a value is missing or non-numeric
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Dataset file not found: {path}")

    df = pd.read_csv(path)
    logger.info(f"Loaded {len(df)} records with {df.shape[1]} columns from {path}")
    return validate_dataset(df, target)


def select_columns(frame: pd.DataFrame, data_config: DataConfig) -> pd.DataFrame:
    """Restrict the frame to the configured features plus the target, if features are set."""
    missing = data_config.validate_dataframe(frame)
    if missing:
        raise MissingValue(f"Missing required columns: {missing}", component="dataset")
    if data_config.features is None:
        return frame
    return frame[data_config.get_all_required_columns()]


def prepare_splits(frame: pd.DataFrame, data_config: DataConfig) -> PreparedData:
    """
    Validate, split and standardize the dataset.

    Args:
        frame: Raw dataset
        data_config: Target, split and standardisation settings

    Returns:
        PreparedData with standardized train and test frames
    """
    target = data_config.target
    frame = validate_dataset(select_columns(frame, data_config), target)

    splitter = TargetStratifiedSplitter(
        fraction=data_config.split_fraction,
        seed=data_config.seed,
        n_bins=data_config.stratify_bins,
    )
    split = splitter.split(frame, target)
    train, test = split.subsets(frame)

    standardizer = Standardizer(target, on_zero_variance=data_config.on_zero_variance)
    train_std, test_std, stats = standardize_split(
        train, test, standardizer, mode=data_config.standardization_mode
    )
    return PreparedData(train=train_std, test=test_std, split=split, stats=stats, target=target)


def run_linear_branch(
    data: PreparedData,
    selection_config: SelectionConfig | None = None,
    evaluator: RegressionEvaluator | None = None,
) -> LinearBranchResult:
    """
    Fit the full linear model, prune it by importance and compare the two fits.

    The reduced model keeps predictors whose |t| is above the importance
    threshold. When nothing is pruned the reduced model is the full model,
    no F-test is run and only the full model is reported.
    """
    selection_config = selection_config or SelectionConfig()
    evaluator = evaluator or RegressionEvaluator()
    target = data.target

    full_model = OLSRegressor(target).fit(data.train)
    ranking = rank_importance(full_model)
    selected = select_features(full_model, selection_config.importance_threshold)
    logger.info(f"Importance ranking: {ranking}; keeping {selected}")

    y_test = data.test[target].to_numpy(dtype=float)
    reports = [evaluator.evaluate("linear_full", full_model.predict(data.test), y_test)]

    if len(selected) == full_model.n_predictors:
        logger.info("No predictor fell below the importance threshold; skipping the reduced model")
        return LinearBranchResult(
            full_model=full_model,
            reduced_model=full_model,
            ranking=ranking,
            selected=selected,
            comparison=None,
            reports=reports,
        )

    # Keep the original column order in the reduced fit
    kept = [p for p in full_model.predictors if p in set(selected)]
    reduced_model = OLSRegressor(target, predictors=kept).fit(data.train)
    comparison = compare_nested_models(reduced_model, full_model)
    if comparison.prefers_full(selection_config.significance_level):
        logger.info(
            f"Dropped predictors {list(comparison.added_predictors)} are jointly significant "
            f"(p={comparison.p_value:.4g})"
        )

    reports.append(evaluator.evaluate("linear_reduced", reduced_model.predict(data.test), y_test))
    return LinearBranchResult(
        full_model=full_model,
        reduced_model=reduced_model,
        ranking=ranking,
        selected=selected,
        comparison=comparison,
        reports=reports,
    )


def run_boosted_branch(
    data: PreparedData,
    model_config: ModelConfig | None = None,
    seed: int = 42,
    evaluator: RegressionEvaluator | None = None,
) -> BoostedBranchResult:
    """
    Pick the round count by cross-validation, refit on all training data and evaluate.
    """
    model_config = model_config or ModelConfig()
    evaluator = evaluator or RegressionEvaluator(include_r_squared=False)
    boosting = model_config.boosting
    cv = model_config.cross_validation

    tuner = CVTuner(
        target=data.target,
        n_folds=cv.cv_folds,
        max_rounds=cv.max_rounds,
        learning_rate=boosting.learning_rate,
        max_depth=boosting.max_depth,
        min_samples_leaf=boosting.min_samples_leaf,
        patience=cv.early_stopping_patience,
        seed=seed,
        n_jobs=cv.n_jobs,
    )
    cv_result = tuner.tune(data.train)

    model = GradientBoostedTrees(data.target, params=cv_result.selected_params()).fit(data.train)
    report = evaluator.evaluate(
        "boosted_tree",
        model.predict(data.test),
        data.test[data.target].to_numpy(dtype=float),
        selected_round_count=model.n_rounds,
    )
    return BoostedBranchResult(cv_result=cv_result, model=model, report=report)
