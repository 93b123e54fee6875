"""Unit tests for gradient-boosted regression trees."""

import numpy as np
import pandas as pd
import pytest

from regression_selection.errors import InsufficientData, MissingValue
from regression_selection.modeling.model_factory.estimation.boosting import (
    BoostingParams,
    GradientBoostedTrees,
)


@pytest.fixture
def one_signal_frame():
    """y depends on `signal` only; `noise` is unrelated."""
    rng = np.random.default_rng(2)
    signal = rng.uniform(-3, 3, 80)
    return pd.DataFrame(
        {"signal": signal, "noise": rng.normal(size=80), "y": np.sin(signal) + 0.01 * rng.normal(size=80)}
    )


class TestBoostingParams:
    """Test suite for BoostingParams validation."""

    def test_defaults(self):
        params = BoostingParams()

        assert params.n_rounds == 100
        assert params.learning_rate == 0.3
        assert params.max_depth == 6

    @pytest.mark.parametrize(
        "kwargs, message",
        [
            ({"n_rounds": 0}, "n_rounds"),
            ({"learning_rate": 0.0}, "learning_rate"),
            ({"learning_rate": 1.5}, "learning_rate"),
            ({"max_depth": 0}, "max_depth"),
            ({"min_samples_leaf": 0}, "min_samples_leaf"),
        ],
    )
    def test_invalid_values(self, kwargs, message):
        with pytest.raises(ValueError, match=message):
            BoostingParams(**kwargs)


class TestGradientBoostedTrees:
    """Test suite for GradientBoostedTrees and FittedBoostedModel."""

    def test_prediction_is_base_plus_scaled_tree_sum(self, one_signal_frame):
        params = BoostingParams(n_rounds=5, learning_rate=0.2, max_depth=2)
        model = GradientBoostedTrees("y", params=params).fit(one_signal_frame)

        X = one_signal_frame[["signal", "noise"]].to_numpy()
        expected = model.base_score + 0.2 * sum(tree.predict(X) for tree in model.trees)
        np.testing.assert_allclose(model.predict(one_signal_frame), expected)

    def test_base_score_is_target_mean(self, one_signal_frame):
        model = GradientBoostedTrees("y", params=BoostingParams(n_rounds=1)).fit(one_signal_frame)

        np.testing.assert_allclose(model.base_score, one_signal_frame["y"].mean())
        assert model.n_rounds == 1

    def test_training_error_never_increases(self, one_signal_frame):
        params = BoostingParams(n_rounds=20, max_depth=3)
        model = GradientBoostedTrees("y", params=params).fit(one_signal_frame)
        y = one_signal_frame["y"].to_numpy()

        errors = [np.sqrt(np.mean((y - p) ** 2)) for p in model.staged_predict(one_signal_frame)]

        assert len(errors) == 20
        assert all(b <= a + 1e-12 for a, b in zip(errors, errors[1:]))

    def test_staged_predict_ends_at_predict(self, one_signal_frame):
        model = GradientBoostedTrees("y", params=BoostingParams(n_rounds=4)).fit(one_signal_frame)
        *_, last = model.staged_predict(one_signal_frame)

        np.testing.assert_allclose(last, model.predict(one_signal_frame))

    def test_same_seed_same_model(self, one_signal_frame):
        params = BoostingParams(n_rounds=5, seed=9)
        a = GradientBoostedTrees("y", params=params).fit(one_signal_frame)
        b = GradientBoostedTrees("y", params=params).fit(one_signal_frame)

        np.testing.assert_array_equal(a.predict(one_signal_frame), b.predict(one_signal_frame))

    def test_feature_importance(self, one_signal_frame):
        model = GradientBoostedTrees("y", params=BoostingParams(n_rounds=10, max_depth=3)).fit(
            one_signal_frame
        )
        importance = model.feature_importance()

        np.testing.assert_allclose(importance.sum(), 1.0)
        assert importance.index[0] == "signal"
        assert importance["signal"] > importance["noise"]

    def test_trees_to_frame(self, one_signal_frame):
        model = GradientBoostedTrees("y", params=BoostingParams(n_rounds=3, max_depth=2)).fit(
            one_signal_frame
        )
        nodes = model.trees_to_frame()

        assert list(nodes.columns) == ["tree", "node", "feature", "split", "yes", "no", "gain", "cover", "value"]
        assert sorted(nodes["tree"].unique()) == [0, 1, 2]

        leaves = nodes[nodes["yes"] == -1]
        assert leaves["feature"].isna().all()
        assert leaves["split"].isna().all()
        assert (leaves["gain"] == 0).all()

        roots = nodes[nodes["node"] == 0]
        assert (roots["cover"] == len(one_signal_frame)).all()

    def test_predict_missing_feature(self, one_signal_frame):
        model = GradientBoostedTrees("y", params=BoostingParams(n_rounds=2)).fit(one_signal_frame)

        with pytest.raises(MissingValue, match="noise"):
            model.predict(one_signal_frame.drop(columns="noise"))

    def test_no_predictors(self):
        with pytest.raises(InsufficientData, match="no predictor columns"):
            GradientBoostedTrees("y").fit(pd.DataFrame({"y": [1.0, 2.0]}))

    def test_explicit_predictors(self, one_signal_frame):
        model = GradientBoostedTrees("y", params=BoostingParams(n_rounds=2), predictors=["signal"]).fit(
            one_signal_frame
        )

        assert model.feature_names == ("signal",)
