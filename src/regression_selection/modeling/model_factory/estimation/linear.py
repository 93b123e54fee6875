"""
Ordinary least squares regression.

`OLSRegressor` fits the target on an explicit (or default: all non-target)
set of predictors with an intercept and returns an immutable
`FittedLinearModel` carrying the usual summary statistics: coefficient
table with standard errors, t values and p values, residual standard
error, R², adjusted R² and the overall F-test.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

import numpy as np
import pandas as pd
from scipy import stats

from regression_selection.errors import InsufficientData, ZeroVariance
from regression_selection.modeling.model_factory.data_management.preprocessing import (
    predictor_columns,
)
from regression_selection.modeling.model_factory.estimation.estimation_functions import (
    INTERCEPT,
    design_matrix,
    qr_least_squares,
)
from regression_selection.modeling.model_factory.protocols import Array, Frame

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FittedLinearModel:
    """Immutable result of an OLS fit."""

    target: str
    predictors: tuple[str, ...]
    coefficients: pd.DataFrame  # index: terms; columns: estimate, std_error, t_value, p_value
    residual_std_error: float
    r_squared: float
    adj_r_squared: float
    rss: float
    n_obs: int
    df_residual: int
    f_statistic: float
    f_p_value: float

    @property
    def n_predictors(self) -> int:
        return len(self.predictors)

    @property
    def intercept(self) -> float:
        return float(self.coefficients.loc[INTERCEPT, "estimate"])

    @property
    def t_values(self) -> pd.Series:
        """t statistics of the predictors (intercept excluded)."""
        return self.coefficients.loc[list(self.predictors), "t_value"]

    def predict(self, frame: Frame) -> Array:
        """Linear predictor for every record of `frame`."""
        X = design_matrix(frame, self.predictors)
        return X @ self.coefficients["estimate"].to_numpy()

    def summary(self) -> dict[str, float]:
        return {
            "n_obs": float(self.n_obs),
            "n_predictors": float(self.n_predictors),
            "residual_std_error": self.residual_std_error,
            "r_squared": self.r_squared,
            "adj_r_squared": self.adj_r_squared,
            "f_statistic": self.f_statistic,
            "f_p_value": self.f_p_value,
        }


class OLSRegressor:
    """
    Least-squares linear regression with an intercept.

    Args:
        target: Target column
        predictors: Predictor columns; None means every non-target column
    """

    def __init__(self, target: str, predictors: Sequence[str] | None = None):
        self.target = target
        self.predictors = list(predictors) if predictors is not None else None

    def fit(self, frame: Frame) -> FittedLinearModel:
        """
        Fit the model on `frame`.

        Raises:
            SingularDesignMatrix: If the predictors are perfectly collinear
            InsufficientData: If there are no residual degrees of freedom
            ZeroVariance: If the target is constant
        """
        predictors = self.predictors if self.predictors is not None else predictor_columns(frame, self.target)
        if self.target in predictors:
            raise ValueError(f"Target column '{self.target}' cannot also be a predictor")

        n, k = len(frame), len(predictors)
        df_residual = n - k - 1
        if df_residual < 1:
            raise InsufficientData(
                f"{n} records cannot support {k} predictors plus an intercept",
                component="linear_model",
            )

        y = frame[self.target].to_numpy(dtype=float)
        tss = float(np.sum((y - y.mean()) ** 2))
        # Relative to the target magnitude so small-scale targets still fit
        if tss <= (n * np.finfo(float).eps) ** 2 * float(y @ y):
            raise ZeroVariance(f"target '{self.target}' is constant", component="linear_model")

        X = design_matrix(frame, predictors)
        coef, xtx_inv = qr_least_squares(X, y)

        residuals = y - X @ coef
        rss = float(residuals @ residuals)
        sigma2 = rss / df_residual
        std_error = np.sqrt(np.clip(np.diag(xtx_inv) * sigma2, 0.0, None))
        with np.errstate(divide="ignore", invalid="ignore"):
            t_value = coef / std_error
        p_value = 2.0 * stats.t.sf(np.abs(t_value), df_residual)

        r_squared = 1.0 - rss / tss
        adj_r_squared = 1.0 - (1.0 - r_squared) * (n - 1) / df_residual

        if k > 0:
            with np.errstate(divide="ignore"):
                f_statistic = float(((tss - rss) / k) / sigma2)
            f_p_value = float(stats.f.sf(f_statistic, k, df_residual))
        else:
            f_statistic, f_p_value = float("nan"), float("nan")

        table = pd.DataFrame(
            {"estimate": coef, "std_error": std_error, "t_value": t_value, "p_value": p_value},
            index=pd.Index([INTERCEPT, *predictors], name="term"),
        )

        logger.info(
            f"Fitted OLS on {n} records with {k} predictors: "
            f"R2={r_squared:.4f}, adj R2={adj_r_squared:.4f}"
        )
        return FittedLinearModel(
            target=self.target,
            predictors=tuple(predictors),
            coefficients=table,
            residual_std_error=float(np.sqrt(sigma2)),
            r_squared=float(r_squared),
            adj_r_squared=float(adj_r_squared),
            rss=rss,
            n_obs=n,
            df_residual=df_residual,
            f_statistic=f_statistic,
            f_p_value=f_p_value,
        )
