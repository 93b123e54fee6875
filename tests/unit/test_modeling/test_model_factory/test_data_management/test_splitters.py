"""Unit tests for the train/test splitter and the fold assigner."""

import numpy as np
import pandas as pd
import pytest

from regression_selection.errors import InsufficientData, InvalidFraction
from regression_selection.modeling.model_factory.data_management.splitters import (
    KFoldAssigner,
    TargetStratifiedSplitter,
)
from regression_selection.modeling.model_factory.data_management.splitting_functions import (
    _allocate_quota,
    _quantile_buckets,
)
from regression_selection.modeling.model_factory.protocols import DataSplitter


@pytest.fixture
def frame():
    rng = np.random.default_rng(1)
    return pd.DataFrame({"x": rng.normal(size=50), "target": rng.normal(size=50)})


class TestTargetStratifiedSplitter:
    """Test suite for TargetStratifiedSplitter."""

    def test_union_and_disjointness(self, frame):
        """Train and test are disjoint and together cover every record."""
        split = TargetStratifiedSplitter(fraction=0.7, seed=3).split(frame, "target")

        assert np.intersect1d(split.train, split.test).size == 0
        np.testing.assert_array_equal(
            np.sort(np.concatenate([split.train, split.test])), np.arange(len(frame))
        )

    def test_train_size_is_rounded_fraction(self, frame):
        """Train holds round(p * n) records."""
        split = TargetStratifiedSplitter(fraction=0.7).split(frame, "target")

        assert split.train.size == 35
        assert split.test.size == 15
        assert split.n_records == 50

    def test_same_seed_same_split(self, frame):
        """The same seed always yields the same partition."""
        a = TargetStratifiedSplitter(seed=11).split(frame, "target")
        b = TargetStratifiedSplitter(seed=11).split(frame, "target")

        np.testing.assert_array_equal(a.train, b.train)
        np.testing.assert_array_equal(a.test, b.test)

    def test_indices_are_sorted(self, frame):
        """Index arrays come back in ascending order."""
        split = TargetStratifiedSplitter().split(frame, "target")

        assert np.all(np.diff(split.train) > 0)
        assert np.all(np.diff(split.test) > 0)

    def test_every_quantile_bucket_is_represented(self):
        """Each target quintile contributes its proportional share to train."""
        frame = pd.DataFrame({"x": np.zeros(100), "target": np.arange(100, dtype=float)})
        split = TargetStratifiedSplitter(fraction=0.7, n_bins=5).split(frame, "target")

        buckets = split.train // 20
        np.testing.assert_array_equal(np.bincount(buckets, minlength=5), [14, 14, 14, 14, 14])

    @pytest.mark.parametrize("fraction", [0.0, 1.0, -0.1, 1.5, float("nan")])
    def test_invalid_fraction(self, fraction):
        """Fractions outside (0, 1) are rejected."""
        with pytest.raises(InvalidFraction, match="open interval"):
            TargetStratifiedSplitter(fraction=fraction)

    @pytest.mark.parametrize("fraction", [0.04, 0.96])
    def test_fraction_leaving_empty_subset(self, fraction):
        """A fraction that rounds to 0 or n records is rejected at split time."""
        frame = pd.DataFrame({"x": np.arange(10.0), "target": np.arange(10.0)})

        with pytest.raises(InsufficientData, match="empty train or test subset") as exc_info:
            TargetStratifiedSplitter(fraction=fraction).split(frame, "target")

        assert exc_info.value.component == "splitter"

    def test_missing_target(self, frame):
        """Splitting on an unknown column fails."""
        with pytest.raises(ValueError, match="not found"):
            TargetStratifiedSplitter().split(frame, "nope")

    def test_split_is_read_only(self, frame):
        """The index arrays cannot be modified after the split is made."""
        split = TargetStratifiedSplitter().split(frame, "target")

        with pytest.raises(ValueError):
            split.train[0] = 99

    def test_subsets(self, frame):
        """subsets returns copies selected by position."""
        split = TargetStratifiedSplitter().split(frame, "target")
        train, test = split.subsets(frame)

        assert len(train) == split.train.size
        pd.testing.assert_frame_equal(test, frame.iloc[split.test])

        with pytest.raises(ValueError, match="Split covers"):
            split.subsets(frame.iloc[:10])

    def test_satisfies_protocol(self):
        assert isinstance(TargetStratifiedSplitter(), DataSplitter)


class TestSplittingFunctions:
    """Test suite for the splitting helpers."""

    def test_allocate_quota_largest_remainder(self):
        """Leftover slots go to the largest fractional shares."""
        quota = _allocate_quota(np.array([3, 3, 4]), 7)
        np.testing.assert_array_equal(quota, [2, 2, 3])

    def test_allocate_quota_ties_favour_earlier_buckets(self):
        quota = _allocate_quota(np.array([2, 2, 2, 2, 2]), 7)
        np.testing.assert_array_equal(quota, [2, 2, 1, 1, 1])

    def test_quantile_buckets_with_ties(self):
        """Heavily tied targets collapse into fewer buckets instead of failing."""
        buckets = _quantile_buckets(np.array([1.0, 1.0, 1.0, 1.0, 2.0]), 5)

        assert buckets.shape == (5,)
        assert np.unique(buckets).size < 5


class TestKFoldAssigner:
    """Test suite for KFoldAssigner."""

    def test_folds_partition_records(self):
        """Held-out folds are disjoint, cover every record and differ in size by at most one."""
        pairs = KFoldAssigner(n_folds=3, seed=0).folds(10)
        held = [fold for _, fold in pairs]

        np.testing.assert_array_equal(np.sort(np.concatenate(held)), np.arange(10))
        sizes = [fold.size for fold in held]
        assert max(sizes) - min(sizes) <= 1

    def test_train_is_complement(self):
        for train_idx, held_idx in KFoldAssigner(n_folds=4).folds(9):
            assert np.intersect1d(train_idx, held_idx).size == 0
            assert train_idx.size + held_idx.size == 9

    def test_deterministic(self):
        a = KFoldAssigner(n_folds=5, seed=7).folds(23)
        b = KFoldAssigner(n_folds=5, seed=7).folds(23)
        for (ta, ha), (tb, hb) in zip(a, b):
            np.testing.assert_array_equal(ta, tb)
            np.testing.assert_array_equal(ha, hb)

    def test_more_folds_than_records(self):
        with pytest.raises(InsufficientData, match="folds requested"):
            KFoldAssigner(n_folds=11).folds(10)

    def test_single_fold(self):
        with pytest.raises(InsufficientData, match="at least 2 folds"):
            KFoldAssigner(n_folds=1).folds(10)
