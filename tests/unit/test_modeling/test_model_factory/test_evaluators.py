"""Unit tests for model evaluators."""

import numpy as np
import pytest

from regression_selection.errors import InsufficientData, LengthMismatch, ModelSelectionError
from regression_selection.modeling.model_factory.evaluation.evaluation_functions import (
    mae,
    r_squared,
    rmse,
)
from regression_selection.modeling.model_factory.evaluation.evaluators import (
    EvaluationReport,
    RegressionEvaluator,
)
from regression_selection.modeling.model_factory.protocols import ModelEvaluator


class TestEvaluationFunctions:
    """Test suite for the metric helpers."""

    def test_rmse_perfect_predictions(self):
        y = np.array([1.0, -2.0, 3.5])
        assert rmse(y, y) == 0.0

    def test_rmse_known_value(self):
        np.testing.assert_allclose(rmse([1.0, 2.0, 3.0], [1.0, 2.0, 5.0]), np.sqrt(4.0 / 3.0))

    def test_rmse_is_symmetric(self):
        p, a = np.array([1.0, 4.0, 2.0]), np.array([0.5, 3.0, 2.5])
        assert rmse(p, a) == pytest.approx(rmse(a, p))

    def test_rmse_invariant_to_pair_order(self):
        p, a = np.array([1.0, 4.0, 2.0, 7.0]), np.array([0.5, 3.0, 2.5, 9.0])
        order = np.array([2, 0, 3, 1])
        assert rmse(p[order], a[order]) == pytest.approx(rmse(p, a))

    def test_rmse_sign_invariance(self):
        p, a = np.array([1.0, 4.0, 2.0]), np.array([0.5, 3.0, 2.5])
        assert rmse(-p, -a) == pytest.approx(rmse(p, a))

    def test_length_mismatch(self):
        with pytest.raises(LengthMismatch, match="5 predictions but 4 actual values"):
            rmse([1.0, 2.0, 3.0, 4.0, 5.0], [1.0, 2.0, 3.0, 4.0])

    def test_empty_input(self):
        with pytest.raises(InsufficientData, match="empty"):
            rmse([], [])

    def test_error_names_component(self):
        with pytest.raises(ModelSelectionError) as exc_info:
            rmse([1.0], [1.0, 2.0])

        assert exc_info.value.component == "evaluator"
        assert str(exc_info.value).startswith("[evaluator]")

    def test_r_squared_and_mae(self):
        actual = np.array([1.0, 2.0, 3.0, 4.0])
        assert r_squared(actual, actual) == 1.0
        assert mae(actual + 0.5, actual) == pytest.approx(0.5)


class TestRegressionEvaluator:
    """Test suite for RegressionEvaluator."""

    def test_evaluate_report(self):
        evaluator = RegressionEvaluator()
        report = evaluator.evaluate("linear_full", [1.0, 2.0, 3.0], [1.0, 2.0, 5.0])

        assert isinstance(report, EvaluationReport)
        assert report.model_name == "linear_full"
        assert report.n_samples == 3
        np.testing.assert_allclose(report.rmse, np.sqrt(4.0 / 3.0))
        assert report.r_squared is not None
        assert report.selected_round_count is None

    def test_selected_round_count(self):
        report = RegressionEvaluator().evaluate("boosted_tree", [1.0, 2.0], [1.5, 2.5], selected_round_count=7)

        assert report.selected_round_count == 7
        assert report.as_dict()["selected_round_count"] == 7

    def test_as_dict_omits_missing_fields(self):
        report = RegressionEvaluator(include_r_squared=False).evaluate("m", [1.0, 2.0], [1.0, 2.0])

        assert report.as_dict() == {"model_name": "m", "rmse": 0.0, "n_samples": 2}

    def test_single_record_has_no_r_squared(self):
        report = RegressionEvaluator().evaluate("m", [1.0], [2.0])

        assert report.r_squared is None
        assert report.rmse == 1.0

    def test_optional_mae(self):
        evaluator = RegressionEvaluator(include_mae=True)
        report = evaluator.evaluate("m", [1.0, 3.0], [2.0, 2.0])

        assert report.mae == 1.0
        assert evaluator.get_metric_names() == ["rmse", "n_samples", "r_squared", "mae"]

    def test_length_mismatch(self):
        with pytest.raises(LengthMismatch):
            RegressionEvaluator().evaluate("m", np.ones(5), np.ones(4))

    def test_satisfies_protocol(self):
        """The evaluator matches ModelEvaluator structurally, without inheriting it."""
        assert ModelEvaluator not in type(RegressionEvaluator()).__mro__
        assert isinstance(RegressionEvaluator(), ModelEvaluator)

    def test_protocol_requires_metric_names(self):
        class RmseOnly:
            def evaluate(self, model_name, predictions, actual):
                return rmse(predictions, actual)

        assert not isinstance(RmseOnly(), ModelEvaluator)
