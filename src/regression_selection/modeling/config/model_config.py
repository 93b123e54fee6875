"""
Model configuration classes.

This module defines configuration classes for the gradient-boosted tree
learner and for the cross-validation search over its round count.
"""

from typing import Any, Dict

from pydantic import BaseModel, Field


class BoostingConfig(BaseModel):
    """Configuration for the gradient-boosted tree regressor."""

    learning_rate: float = Field(default=0.3, gt=0, le=1, description="Shrinkage applied to every tree")
    max_depth: int = Field(default=6, ge=1, description="Maximum depth of each tree")
    min_samples_leaf: int = Field(default=1, ge=1, description="Minimum records per leaf")


class CrossValidationConfig(BaseModel):
    """Configuration for k-fold selection of the boosting round count."""

    cv_folds: int = Field(default=10, ge=2, description="Number of folds (K)")
    max_rounds: int = Field(default=100, ge=1, description="Maximum boosting rounds (R_max)")
    early_stopping_patience: int = Field(
        default=10, ge=1, description="Rounds without held-out improvement before stopping"
    )
    n_jobs: int = Field(default=1, description="Parallel workers for per-round fold training")


class ModelConfig(BaseModel):
    """Complete model configuration."""

    boosting: BoostingConfig = Field(default_factory=BoostingConfig)
    cross_validation: CrossValidationConfig = Field(default_factory=CrossValidationConfig)

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> "ModelConfig":
        """Create config from dictionary."""
        return cls(**config_dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return self.model_dump()
