from __future__ import annotations

import numpy as np
import pandas as pd

from regression_selection.errors import InsufficientData, InvalidFraction


def _check_fraction(fraction: float) -> float:
    fraction = float(fraction)
    if not np.isfinite(fraction) or not (0.0 < fraction < 1.0):
        raise InvalidFraction(
            f"split fraction must be in the open interval (0, 1), got {fraction}",
            component="splitter",
        )
    return fraction


def _quantile_buckets(y: pd.Series | np.ndarray, n_bins: int) -> np.ndarray:
    """
    Assign every record to a target quantile bucket (0..B-1).

    Duplicate bucket edges (heavily tied targets) are merged, so fewer than
    `n_bins` buckets may come back.
    """
    y = np.asarray(y, dtype=float)
    n_bins = max(1, min(int(n_bins), y.shape[0]))
    if n_bins == 1:
        return np.zeros(y.shape[0], dtype=np.intp)
    codes = pd.qcut(y, q=n_bins, labels=False, duplicates="drop")
    codes = np.asarray(codes, dtype=float)
    # qcut leaves NaN only for NaN targets, which validation rules out
    codes = np.nan_to_num(codes, nan=0.0)
    return codes.astype(np.intp)


def _allocate_quota(bucket_sizes: np.ndarray, total: int) -> np.ndarray:
    """
    Largest-remainder allocation of `total` train slots across buckets.

    Each bucket first receives floor(share); the leftover slots go to the
    buckets with the largest fractional parts, earlier buckets winning ties.
    """
    bucket_sizes = np.asarray(bucket_sizes, dtype=np.intp)
    n = int(bucket_sizes.sum())
    exact = bucket_sizes * (total / n)
    quota = np.floor(exact).astype(np.intp)
    leftover = int(total - quota.sum())
    if leftover > 0:
        remainders = exact - quota
        # stable sort keeps bucket order for equal remainders
        order = np.argsort(-remainders, kind="stable")
        for i in order:
            if leftover == 0:
                break
            if quota[i] < bucket_sizes[i]:
                quota[i] += 1
                leftover -= 1
    return quota


def _stratified_train_indices(
    buckets: np.ndarray, fraction: float, rng: np.random.Generator
) -> np.ndarray:
    n = buckets.shape[0]
    n_train = int(round(fraction * n))
    if n_train == 0 or n_train == n:
        raise InsufficientData(
            f"fraction {fraction} of {n} records leaves an empty train or test subset",
            component="splitter",
        )
    labels, sizes = np.unique(buckets, return_counts=True)
    quota = _allocate_quota(sizes, n_train)

    chosen: list[np.ndarray] = []
    for label, k in zip(labels, quota):
        members = np.flatnonzero(buckets == label)
        if k > 0:
            chosen.append(rng.choice(members, size=int(k), replace=False))
    if not chosen:
        return np.empty(0, dtype=np.intp)
    return np.sort(np.concatenate(chosen)).astype(np.intp)


def _fold_assignments(n_records: int, n_folds: int, seed: int) -> list[np.ndarray]:
    """
    Seeded permutation of 0..n-1 cut into `n_folds` near-equal folds.

    Fold sizes differ by at most one record.
    """
    if n_folds < 2:
        raise InsufficientData(
            f"at least 2 folds are required, got {n_folds}", component="cv_tuner"
        )
    if n_folds > n_records:
        raise InsufficientData(
            f"{n_folds} folds requested but only {n_records} training records available",
            component="cv_tuner",
        )
    rng = np.random.default_rng(seed)
    permutation = rng.permutation(n_records)
    return [np.sort(fold).astype(np.intp) for fold in np.array_split(permutation, n_folds)]
