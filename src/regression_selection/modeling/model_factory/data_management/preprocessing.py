"""
Dataset validation and per-column standardisation.

`validate_dataset` enforces the complete-numeric-data contract the pipeline
relies on; `Standardizer` z-scores every non-target column with statistics
computed from a reference frame (normally the training subset).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal

import numpy as np
import pandas as pd

from regression_selection.errors import MissingValue, ZeroVariance
from regression_selection.modeling.model_factory.protocols import Frame

logger = logging.getLogger(__name__)


def validate_dataset(frame: Frame, target: str) -> Frame:
    """
    Check that `frame` is a complete, numeric dataset with a target column.

    Args:
        frame: Candidate dataset
        target: Name of the target column

    Returns:
        The same frame, unchanged

    Raises:
        MissingValue: If the target is absent, a column is non-numeric,
            or any cell is NaN / infinite
    """
    if target not in frame.columns:
        raise MissingValue(f"target column '{target}' not found", component="dataset")
    if len(frame) == 0:
        raise MissingValue("dataset has no records", component="dataset")

    non_numeric = [
        col for col in frame.columns
        if not pd.api.types.is_numeric_dtype(frame[col]) or pd.api.types.is_bool_dtype(frame[col])
    ]
    if non_numeric:
        raise MissingValue(f"non-numeric columns: {non_numeric}", component="dataset")

    values = frame.to_numpy(dtype=float)
    bad = ~np.isfinite(values)
    if bad.any():
        rows, cols = np.nonzero(bad)
        first = (frame.index[rows[0]], frame.columns[cols[0]])
        raise MissingValue(
            f"{int(bad.sum())} missing or non-finite values (first at row {first[0]!r}, "
            f"column {first[1]!r})",
            component="dataset",
        )
    return frame


def predictor_columns(frame: Frame, target: str) -> list[str]:
    """All non-target columns, in frame order."""
    return [col for col in frame.columns if col != target]


@dataclass(frozen=True)
class StandardizationStats:
    """Per-column mean and standard deviation used to z-score a frame."""

    mean: pd.Series
    std: pd.Series

    @property
    def columns(self) -> list[str]:
        return list(self.mean.index)


class Standardizer:
    """
    Z-score transform of every non-target column.

    Parameters
    ----------
    target : str
        Target column, left untouched.
    on_zero_variance : {"raise", "unit"}, default="raise"
        "raise" fails with ZeroVariance on a constant column; "unit" scales
        it with a standard deviation of 1 (so it is only centred) and logs
        a warning. Columns are never dropped.
    """

    def __init__(self, target: str, on_zero_variance: Literal["raise", "unit"] = "raise"):
        if on_zero_variance not in ("raise", "unit"):
            raise ValueError(f"Unknown zero-variance policy: {on_zero_variance}")
        self.target = target
        self.on_zero_variance = on_zero_variance

    def fit(self, frame: Frame) -> StandardizationStats:
        """Compute mean and sample standard deviation (ddof=1) of each predictor."""
        columns = predictor_columns(frame, self.target)
        data = frame[columns].astype(float)
        mean = data.mean(axis=0)
        std = data.std(axis=0, ddof=1)

        # Spread within rounding error of the column magnitude counts as none;
        # a single record has no spread either
        tol = len(data) * np.finfo(float).eps * data.abs().max(axis=0)
        degenerate = std.isna() | (std <= tol)
        if degenerate.any():
            cols = std.index[degenerate.to_numpy()].tolist()
            if self.on_zero_variance == "raise":
                raise ZeroVariance(f"zero standard deviation in columns {cols}", component="standardizer")
            logger.warning(f"Zero variance in {cols}; substituting unit standard deviation")
            std = std.where(~degenerate, 1.0)

        return StandardizationStats(mean=mean, std=std)

    def transform(self, frame: Frame, stats: StandardizationStats | None = None) -> pd.DataFrame:
        """
        Return a new frame with predictors replaced by (x - mean) / std.

        Args:
            frame: Frame to transform (not modified)
            stats: Reference statistics; when None they are fitted on `frame` itself

        Returns:
            Standardized copy of `frame`
        """
        if stats is None:
            stats = self.fit(frame)
        missing = set(stats.columns) - set(frame.columns)
        if missing:
            raise MissingValue(f"columns missing from frame: {sorted(missing)}", component="standardizer")

        cols = stats.columns
        out = frame.astype({col: float for col in cols})
        out[cols] = (frame[cols].astype(float) - stats.mean) / stats.std
        return out

    def fit_transform(self, frame: Frame) -> tuple[pd.DataFrame, StandardizationStats]:
        stats = self.fit(frame)
        return self.transform(frame, stats), stats

    def inverse_transform(self, frame: Frame, stats: StandardizationStats) -> pd.DataFrame:
        """Undo `transform`: x * std + mean."""
        cols = stats.columns
        out = frame.astype({col: float for col in cols})
        out[cols] = frame[cols] * stats.std + stats.mean
        return out


def standardize_split(
    train: Frame,
    test: Frame,
    standardizer: Standardizer,
    mode: Literal["train", "per_subset"] = "train",
) -> tuple[pd.DataFrame, pd.DataFrame, StandardizationStats]:
    """
    Standardize the train and test subsets.

    Args:
        train: Training subset
        test: Test subset
        standardizer: Configured Standardizer
        mode: "train" fits once on train and applies the statistics to both
            subsets; "per_subset" re-fits on each subset independently

    Returns:
        (train_std, test_std, train_stats)
    """
    train_std, stats = standardizer.fit_transform(train)
    if mode == "train":
        test_std = standardizer.transform(test, stats)
    elif mode == "per_subset":
        logger.warning(
            "Standardizing the test subset with its own statistics; "
            "test scaling will not match the training scale"
        )
        test_std = standardizer.transform(test)
    else:
        raise ValueError(f"Unknown standardization mode: {mode}")
    return train_std, test_std, stats
