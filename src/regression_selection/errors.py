"""
Error kinds raised by the model-selection pipeline.

Every error carries the name of the component that raised it so that a
failed run points at the offending step. All kinds derive from ValueError,
since each one signals invalid input rather than an environmental fault.
"""

from __future__ import annotations


class ModelSelectionError(ValueError):
    """Base class for all pipeline errors."""

    def __init__(self, message: str, component: str | None = None):
        super().__init__(message)
        self.message = message
        self.component = component

    def __str__(self) -> str:
        if self.component:
            return f"[{self.component}] {self.message}"
        return self.message


class InvalidFraction(ModelSelectionError):
    """Split fraction outside the open interval (0, 1)."""


class ZeroVariance(ModelSelectionError):
    """A column (or the target) has zero standard deviation."""


class SingularDesignMatrix(ModelSelectionError):
    """Predictors are perfectly collinear."""


class NonNestedModels(ModelSelectionError):
    """Neither model's predictor set is a strict subset of the other's."""


class InsufficientData(ModelSelectionError):
    """Not enough records for the requested computation."""


class LengthMismatch(ModelSelectionError):
    """Predictions and ground truth have different lengths."""


class MissingValue(ModelSelectionError):
    """A record holds an absent or non-numeric value."""


__all__ = [
    "ModelSelectionError",
    "InvalidFraction",
    "ZeroVariance",
    "SingularDesignMatrix",
    "NonNestedModels",
    "InsufficientData",
    "LengthMismatch",
    "MissingValue",
]
