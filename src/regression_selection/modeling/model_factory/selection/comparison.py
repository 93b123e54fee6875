"""
Nested linear-model comparison (partial F-test).

Given a full model and a reduced model whose predictors are a strict
subset of the full model's, tests whether the extra predictors jointly
reduce the residual sum of squares by more than chance would:

    F = ((RSS_reduced - RSS_full) / (df_reduced - df_full)) / (RSS_full / df_full)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np
import pandas as pd
from scipy import stats

from regression_selection.errors import NonNestedModels
from regression_selection.modeling.model_factory.estimation.linear import FittedLinearModel

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NestedModelComparison:
    """Outcome of comparing a reduced model against the full model it is nested in."""

    f_statistic: float
    p_value: float
    df: tuple[int, int]  # (numerator, denominator)
    rss_reduced: float
    rss_full: float
    reduced_predictors: tuple[str, ...]
    full_predictors: tuple[str, ...]

    @property
    def added_predictors(self) -> tuple[str, ...]:
        reduced = set(self.reduced_predictors)
        return tuple(p for p in self.full_predictors if p not in reduced)

    def prefers_full(self, significance_level: float = 0.05) -> bool:
        """True when the extra predictors are jointly significant."""
        return bool(self.p_value < significance_level)

    def to_frame(self) -> pd.DataFrame:
        """ANOVA-style table with one row per model."""
        df_num, df_den = self.df
        return pd.DataFrame(
            {
                "res_df": [df_den + df_num, df_den],
                "rss": [self.rss_reduced, self.rss_full],
                "df": [np.nan, df_num],
                "sum_of_sq": [np.nan, self.rss_reduced - self.rss_full],
                "F": [np.nan, self.f_statistic],
                "p_value": [np.nan, self.p_value],
            },
            index=pd.Index(["reduced", "full"], name="model"),
        )


def compare_nested_models(
    model_a: FittedLinearModel, model_b: FittedLinearModel
) -> NestedModelComparison:
    """
    F-test between two nested linear models, in either argument order.

    Raises:
        NonNestedModels: If neither predictor set strictly contains the
            other, or the models were fit on different targets or record counts
    """
    set_a, set_b = set(model_a.predictors), set(model_b.predictors)
    if set_a < set_b:
        reduced, full = model_a, model_b
    elif set_b < set_a:
        reduced, full = model_b, model_a
    else:
        raise NonNestedModels(
            f"predictor sets {sorted(set_a)} and {sorted(set_b)} are not strictly nested",
            component="model_comparator",
        )

    if reduced.target != full.target or reduced.n_obs != full.n_obs:
        raise NonNestedModels(
            f"models were fit on different data ({reduced.target!r}, n={reduced.n_obs} vs "
            f"{full.target!r}, n={full.n_obs})",
            component="model_comparator",
        )

    df_num = reduced.df_residual - full.df_residual
    df_den = full.df_residual
    with np.errstate(divide="ignore", invalid="ignore"):
        f_statistic = float(((reduced.rss - full.rss) / df_num) / (full.rss / df_den))
    p_value = float(stats.f.sf(f_statistic, df_num, df_den))

    logger.info(
        f"Nested F-test ({len(reduced.predictors)} vs {len(full.predictors)} predictors): "
        f"F={f_statistic:.4f}, p={p_value:.4g}, df=({df_num}, {df_den})"
    )
    return NestedModelComparison(
        f_statistic=f_statistic,
        p_value=p_value,
        df=(df_num, df_den),
        rss_reduced=reduced.rss,
        rss_full=full.rss,
        reduced_predictors=reduced.predictors,
        full_predictors=full.predictors,
    )
