"""
Centralized application configuration.

This module provides type-safe configuration using Pydantic for the
command-line entry point: where the dataset lives, which column is the
target, how verbose logging is, and where an optional YAML file with
modeling settings can be found.
"""

import os
from typing import Any

from pydantic import BaseModel, Field, field_validator


class AppConfig(BaseModel):
    """Main application configuration."""

    dataset_path: str | None = Field(
        default=None, description="Path to the CSV dataset (local path)"
    )
    target_column: str | None = Field(
        default=None, description="Name of the continuous target column"
    )
    modeling_config_path: str | None = Field(
        default=None, description="Optional YAML file with modeling settings"
    )
    log_level: str = Field(default="INFO", description="Root logging level")

    @field_validator("dataset_path", mode="before")
    @classmethod
    def validate_dataset_path(cls, v: Any) -> str | None:
        """Load dataset path from environment if not provided."""
        if v is None or v == "":
            env_val = os.environ.get("DATASET_PATH")
            return env_val if env_val else None
        return str(v)

    @field_validator("target_column", mode="before")
    @classmethod
    def validate_target_column(cls, v: Any) -> str | None:
        """Load target column from environment if not provided."""
        if v is None or v == "":
            env_val = os.environ.get("TARGET_COLUMN")
            return env_val if env_val else None
        return str(v)

    @field_validator("modeling_config_path", mode="before")
    @classmethod
    def validate_modeling_config_path(cls, v: Any) -> str | None:
        """Load modeling config path from environment if not provided."""
        if v is None or v == "":
            env_val = os.environ.get("MODELING_CONFIG_PATH")
            return env_val if env_val else None
        return str(v)

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: Any) -> str:
        """Normalise the log level, preferring LOG_LEVEL from the environment."""
        if v is None or v == "":
            v = os.environ.get("LOG_LEVEL", "INFO")
        return str(v).upper()


def load_config() -> AppConfig:
    """Build an AppConfig from the current environment."""
    return AppConfig(
        dataset_path=os.environ.get("DATASET_PATH"),
        target_column=os.environ.get("TARGET_COLUMN"),
        modeling_config_path=os.environ.get("MODELING_CONFIG_PATH"),
        log_level=os.environ.get("LOG_LEVEL", "INFO"),
    )


# Global configuration instance
config = load_config()
