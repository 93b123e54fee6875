"""
Feature-selection configuration.
"""

from pydantic import BaseModel, Field


class SelectionConfig(BaseModel):
    """Configuration for importance-driven predictor pruning."""

    importance_threshold: float = Field(
        default=1.0,
        ge=0,
        description="Keep predictors whose |t| is strictly above this value",
    )
    significance_level: float = Field(
        default=0.05,
        gt=0,
        lt=1,
        description="p-value below which the full model is preferred over the reduced one",
    )
