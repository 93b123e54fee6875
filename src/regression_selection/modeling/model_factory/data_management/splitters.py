"""
Data splitting classes for model training and validation.

This module provides the train/test partition used by the pipeline and the
k-fold assignment used during cross-validation. Both work on positional
indices so the underlying dataset is never copied or mutated.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np
import pandas as pd

from regression_selection.modeling.model_factory.data_management.splitting_functions import (
    _check_fraction,
    _fold_assignments,
    _quantile_buckets,
    _stratified_train_indices,
)
from regression_selection.modeling.model_factory.protocols import Frame, IndexArray

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Split:
    """Immutable partition of record positions into disjoint train and test sets."""

    train: IndexArray
    test: IndexArray
    fraction: float
    seed: int

    def __post_init__(self) -> None:
        # Freeze the index arrays along with the dataclass
        for arr in (self.train, self.test):
            arr.setflags(write=False)

    @property
    def n_records(self) -> int:
        return int(self.train.shape[0] + self.test.shape[0])

    def subsets(self, frame: Frame) -> tuple[pd.DataFrame, pd.DataFrame]:
        """Return (train_frame, test_frame) for the frame this split was made from."""
        if len(frame) != self.n_records:
            raise ValueError(
                f"Split covers {self.n_records} records but frame has {len(frame)}"
            )
        return frame.iloc[self.train].copy(), frame.iloc[self.test].copy()


class TargetStratifiedSplitter:
    """
    Train/test splitter that preserves the target distribution.

    Target values are bucketed into quantile bins and the train quota
    round(fraction * n) is spread over the bins in proportion to their
    size, so every region of the target range is represented in both
    subsets.
    """

    def __init__(self, fraction: float = 0.7, seed: int = 42, n_bins: int = 5):
        """
        Initialize the splitter.

        Args:
            fraction: Share of records assigned to the training set, in (0, 1)
            seed: Random seed; the same seed always yields the same split
            n_bins: Number of target quantile buckets used for stratification
        """
        self.fraction = _check_fraction(fraction)
        self.seed = seed
        self.n_bins = n_bins

    def split(self, frame: Frame, target: str) -> Split:
        """
        Partition the records of `frame`.

        Args:
            frame: Dataset with a numeric target column
            target: Name of the target column

        Returns:
            Split with sorted positional train/test indices
        """
        if target not in frame.columns:
            raise ValueError(f"Target column '{target}' not found in data")

        n = len(frame)
        buckets = _quantile_buckets(frame[target].to_numpy(), self.n_bins)
        rng = np.random.default_rng(self.seed)
        train_idx = _stratified_train_indices(buckets, self.fraction, rng)

        test_mask = np.ones(n, dtype=bool)
        test_mask[train_idx] = False
        test_idx = np.flatnonzero(test_mask).astype(np.intp)

        logger.info(
            f"Split {n} records into {train_idx.size} train / {test_idx.size} test "
            f"(fraction={self.fraction}, buckets={np.unique(buckets).size})"
        )
        return Split(train=train_idx, test=test_idx, fraction=self.fraction, seed=self.seed)


@dataclass(frozen=True)
class KFoldAssigner:
    """Seeded assignment of training records to K near-equal folds."""

    n_folds: int = 10
    seed: int = 42

    def folds(self, n_records: int) -> list[tuple[IndexArray, IndexArray]]:
        """
        Build (train_idx, held_out_idx) pairs, one per fold.

        Args:
            n_records: Number of training records

        Returns:
            List of K pairs of positional index arrays
        """
        held_out = _fold_assignments(n_records, self.n_folds, self.seed)
        all_idx = np.arange(n_records)
        pairs = []
        for fold in held_out:
            mask = np.ones(n_records, dtype=bool)
            mask[fold] = False
            pairs.append((all_idx[mask].astype(np.intp), fold))
        return pairs
