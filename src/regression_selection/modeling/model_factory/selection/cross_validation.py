"""
K-fold cross-validation of the boosting round count.

Every fold keeps its own growing ensemble. Each round adds one tree per
fold (trained on the other K-1 folds), scores train and held-out RMSE per
fold, and averages the scores across folds. An EarlyStopping state machine
watches the mean held-out RMSE and halts the search once it has not
improved for `patience` consecutive rounds.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from typing import Sequence

import numpy as np
import pandas as pd
from joblib import Parallel, delayed

from regression_selection.errors import InsufficientData
from regression_selection.modeling.model_factory.data_management.preprocessing import (
    predictor_columns,
)
from regression_selection.modeling.model_factory.data_management.splitters import KFoldAssigner
from regression_selection.modeling.model_factory.estimation.boosting import BoostingParams, fit_tree
from regression_selection.modeling.model_factory.protocols import Frame, IndexArray

logger = logging.getLogger(__name__)

LOG_COLUMNS = ["round", "train_rmse_mean", "train_rmse_std", "test_rmse_mean", "test_rmse_std"]


class EarlyStopping:
    """
    Counter-based early-stopping state machine.

    State is (best_score, best_round, rounds_since_improvement). Only a
    strictly lower score counts as an improvement, so the first round that
    reaches the minimum is the one remembered.
    """

    def __init__(self, patience: int, max_rounds: int):
        if patience < 1:
            raise ValueError(f"patience must be >= 1, got {patience}")
        if max_rounds < 1:
            raise ValueError(f"max_rounds must be >= 1, got {max_rounds}")
        self.patience = patience
        self.max_rounds = max_rounds
        self.best_score = math.inf
        self.best_round = 0
        self.rounds_since_improvement = 0
        self.rounds_seen = 0
        self.stopped_early = False

    def update(self, score: float) -> bool:
        """
        Record the next round's score.

        Returns:
            True when the search must stop after this round
        """
        self.rounds_seen += 1
        if score < self.best_score:
            self.best_score = score
            self.best_round = self.rounds_seen
            self.rounds_since_improvement = 0
        else:
            self.rounds_since_improvement += 1

        if self.rounds_since_improvement >= self.patience:
            self.stopped_early = True
            return True
        return self.rounds_seen >= self.max_rounds

    def __repr__(self) -> str:
        return (
            f"EarlyStopping(best_score={self.best_score:.4f}, best_round={self.best_round}, "
            f"rounds_since_improvement={self.rounds_since_improvement})"
        )


@dataclass(frozen=True)
class CVResult:
    """Per-round cross-validated train/held-out RMSE and the selected round count."""

    evaluation_log: pd.DataFrame
    best_round: int
    best_score: float
    stopped_early: bool
    n_folds: int
    params: BoostingParams

    @property
    def rounds_run(self) -> int:
        return len(self.evaluation_log)

    @property
    def test_rmse(self) -> pd.Series:
        return self.evaluation_log.set_index("round")["test_rmse_mean"]

    @property
    def train_rmse(self) -> pd.Series:
        return self.evaluation_log.set_index("round")["train_rmse_mean"]

    def selected_params(self) -> BoostingParams:
        """Boosting configuration with the selected round count."""
        return replace(self.params, n_rounds=self.best_round)


@dataclass(frozen=True)
class _FoldState:
    train_idx: IndexArray
    held_idx: IndexArray
    train_pred: np.ndarray
    held_pred: np.ndarray


def _init_fold(y: np.ndarray, train_idx: IndexArray, held_idx: IndexArray) -> _FoldState:
    base = float(y[train_idx].mean())
    return _FoldState(
        train_idx=train_idx,
        held_idx=held_idx,
        train_pred=np.full(train_idx.shape[0], base),
        held_pred=np.full(held_idx.shape[0], base),
    )


def _advance_fold(
    X: np.ndarray, y: np.ndarray, state: _FoldState, params: BoostingParams
) -> tuple[_FoldState, float, float]:
    """Grow one more tree for a fold and score it; returns a new state."""
    X_train, y_train = X[state.train_idx], y[state.train_idx]
    tree = fit_tree(X_train, y_train - state.train_pred, params)

    train_pred = state.train_pred + params.learning_rate * tree.predict(X_train)
    held_pred = state.held_pred + params.learning_rate * tree.predict(X[state.held_idx])

    train_rmse = float(np.sqrt(np.mean((y_train - train_pred) ** 2)))
    held_rmse = float(np.sqrt(np.mean((y[state.held_idx] - held_pred) ** 2)))
    return replace(state, train_pred=train_pred, held_pred=held_pred), train_rmse, held_rmse


class CVTuner:
    """
    Select the boosting round count by k-fold cross-validation with early stopping.

    Parameters
    ----------
    target : str
        Target column.
    n_folds : int, default=10
        Number of folds (K).
    max_rounds : int, default=100
        Upper bound on boosting rounds (R_max).
    learning_rate, max_depth, min_samples_leaf :
        Tree configuration shared by every fold.
    patience : int, default=10
        Rounds without held-out improvement before stopping.
    seed : int, default=42
        Seed for the fold assignment and the trees.
    n_jobs : int, default=1
        Worker threads used to train the folds of a round in parallel.
    predictors : sequence of str, optional
        Feature columns; None means every non-target column.
    """

    def __init__(
        self,
        target: str,
        n_folds: int = 10,
        max_rounds: int = 100,
        learning_rate: float = 0.3,
        max_depth: int = 6,
        min_samples_leaf: int = 1,
        patience: int = 10,
        seed: int = 42,
        n_jobs: int = 1,
        predictors: Sequence[str] | None = None,
    ):
        self.target = target
        self.n_folds = n_folds
        self.max_rounds = max_rounds
        self.patience = patience
        self.n_jobs = n_jobs
        self.predictors = list(predictors) if predictors is not None else None
        self.params = BoostingParams(
            n_rounds=max_rounds,
            learning_rate=learning_rate,
            max_depth=max_depth,
            min_samples_leaf=min_samples_leaf,
            seed=seed,
        )

    def tune(self, frame: Frame) -> CVResult:
        """
        Run cross-validation on the training frame.

        Raises:
            InsufficientData: If n_folds exceeds the number of records
        """
        features = self.predictors if self.predictors is not None else predictor_columns(frame, self.target)
        if not features:
            raise InsufficientData("no predictor columns to split on", component="cv_tuner")

        X = frame[features].to_numpy(dtype=float)
        y = frame[self.target].to_numpy(dtype=float)
        folds = KFoldAssigner(n_folds=self.n_folds, seed=self.params.seed).folds(len(frame))
        states = [_init_fold(y, train_idx, held_idx) for train_idx, held_idx in folds]

        logger.info(
            f"Cross-validating up to {self.max_rounds} rounds over {self.n_folds} folds "
            f"({len(frame)} records, patience={self.patience})"
        )

        stopper = EarlyStopping(patience=self.patience, max_rounds=self.max_rounds)
        rows = []
        with Parallel(n_jobs=self.n_jobs, prefer="threads") as parallel:
            while True:
                results = parallel(
                    delayed(_advance_fold)(X, y, state, self.params) for state in states
                )
                states = [state for state, _, _ in results]
                train_scores = np.array([r[1] for r in results])
                held_scores = np.array([r[2] for r in results])

                round_index = stopper.rounds_seen + 1
                rows.append(
                    (
                        round_index,
                        float(train_scores.mean()),
                        float(train_scores.std()),
                        float(held_scores.mean()),
                        float(held_scores.std()),
                    )
                )
                if stopper.update(float(held_scores.mean())):
                    break

        log = pd.DataFrame(rows, columns=LOG_COLUMNS)
        if stopper.stopped_early:
            logger.info(
                f"Early stopping at round {stopper.rounds_seen}; best round {stopper.best_round} "
                f"(test RMSE {stopper.best_score:.4f})"
            )
        else:
            logger.info(
                f"Ran all {stopper.rounds_seen} rounds; best round {stopper.best_round} "
                f"(test RMSE {stopper.best_score:.4f})"
            )

        return CVResult(
            evaluation_log=log,
            best_round=stopper.best_round,
            best_score=stopper.best_score,
            stopped_early=stopper.stopped_early,
            n_folds=self.n_folds,
            params=self.params,
        )
