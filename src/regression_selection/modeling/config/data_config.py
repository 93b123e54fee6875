"""
Data configuration classes.

This module defines configuration classes for the target column, the
train/test split and the standardisation step.
"""

from typing import List, Literal, Optional

from pydantic import BaseModel, Field


class DataConfig(BaseModel):
    """Configuration for data validation, splitting and standardisation."""

    target: str = Field(default="target", description="Target column name")

    features: Optional[List[str]] = Field(
        default=None,
        description="Predictor columns to use (None means every non-target column)",
    )

    # Validated by the splitter, which raises InvalidFraction
    split_fraction: float = Field(default=0.7, description="Share of records assigned to train")
    seed: int = Field(default=42, description="Seed for splitting, folds and trees")
    stratify_bins: int = Field(default=5, ge=1, description="Target quantile buckets for stratification")

    standardization_mode: Literal["train", "per_subset"] = Field(
        default="train",
        description="Fit scaling statistics on train only, or re-fit on every subset",
    )
    on_zero_variance: Literal["raise", "unit"] = Field(
        default="raise",
        description="Fail on constant columns, or scale them with a unit standard deviation",
    )

    def get_all_required_columns(self) -> List[str]:
        """Get all columns that are required for modeling."""
        return list(self.features or []) + [self.target]

    def validate_dataframe(self, df) -> List[str]:
        """Return the required columns missing from the DataFrame."""
        return [col for col in self.get_all_required_columns() if col not in df.columns]
