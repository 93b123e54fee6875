"""
Configuration manager for the modeling pipeline.

This module provides utilities for loading, validating, and managing
configurations across the modeling components.
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from .data_config import DataConfig
from .model_config import ModelConfig
from .selection_config import SelectionConfig


class ConfigManager:
    """
    Centralized configuration management for the modeling pipeline.

    This class handles loading configurations from various sources,
    validation, and providing unified access to all configuration settings.
    """

    def __init__(
        self,
        model_config: Optional[ModelConfig] = None,
        data_config: Optional[DataConfig] = None,
        selection_config: Optional[SelectionConfig] = None,
    ):
        """
        Initialize configuration manager.

        Args:
            model_config: Model configuration (uses defaults if None)
            data_config: Data configuration (uses defaults if None)
            selection_config: Feature-selection configuration (uses defaults if None)
        """
        self.model = model_config or ModelConfig()
        self.data = data_config or DataConfig()
        self.selection = selection_config or SelectionConfig()

    @classmethod
    def from_yaml(cls, yaml_path: Union[str, Path]) -> "ConfigManager":
        """
        Load configuration from YAML file.

        Args:
            yaml_path: Path to YAML configuration file

        Returns:
            ConfigManager instance with loaded configuration
        """
        yaml_path = Path(yaml_path)

        if not yaml_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {yaml_path}")

        with open(yaml_path, "r") as f:
            config_dict = yaml.safe_load(f) or {}

        return cls.from_dict(config_dict)

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> "ConfigManager":
        """
        Create configuration from dictionary.

        Args:
            config_dict: Configuration dictionary with optional "model",
                "data" and "selection" sections

        Returns:
            ConfigManager instance
        """
        model_config = None
        if "model" in config_dict:
            model_config = ModelConfig.from_dict(config_dict["model"])

        data_config = None
        if "data" in config_dict:
            data_config = DataConfig(**config_dict["data"])

        selection_config = None
        if "selection" in config_dict:
            selection_config = SelectionConfig(**config_dict["selection"])

        return cls(model_config, data_config, selection_config)

    @classmethod
    def from_environment(cls, env_prefix: str = "MODELING_") -> "ConfigManager":
        """
        Load configuration from environment variables.

        MODELING_DATA_SPLIT_FRACTION=0.8 becomes data.split_fraction, and
        MODELING_BOOSTING_MAX_DEPTH=4 becomes model.boosting.max_depth.

        Args:
            env_prefix: Prefix for environment variables

        Returns:
            ConfigManager instance with environment-based configuration
        """
        config_dict: Dict[str, Any] = {}
        model_sections = {"boosting", "cross_validation"}

        for key, value in os.environ.items():
            if not key.startswith(env_prefix):
                continue

            config_key = key[len(env_prefix):].lower()
            section = next(
                (s for s in ("data", "selection", *model_sections) if config_key.startswith(s + "_")),
                None,
            )
            if section is None:
                continue
            param = config_key[len(section) + 1:]

            if section in model_sections:
                target = config_dict.setdefault("model", {}).setdefault(section, {})
            else:
                target = config_dict.setdefault(section, {})
            target[param] = _coerce(value)

        return cls.from_dict(config_dict) if config_dict else cls()

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            "model": self.model.to_dict(),
            "data": self.data.model_dump(),
            "selection": self.selection.model_dump(),
        }

    def to_yaml(self, yaml_path: Union[str, Path]) -> None:
        """
        Save configuration to YAML file.

        Args:
            yaml_path: Path where to save the configuration
        """
        yaml_path = Path(yaml_path)
        yaml_path.parent.mkdir(parents=True, exist_ok=True)

        with open(yaml_path, "w") as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, indent=2)

    def get_settings(self) -> Dict[str, Any]:
        """
        Flat view of the run settings.

        Returns:
            Dictionary keyed by the pipeline's public configuration names
        """
        return {
            "split_fraction": self.data.split_fraction,
            "seed": self.data.seed,
            "cv_folds": self.model.cross_validation.cv_folds,
            "max_rounds": self.model.cross_validation.max_rounds,
            "learning_rate": self.model.boosting.learning_rate,
            "max_depth": self.model.boosting.max_depth,
            "early_stopping_patience": self.model.cross_validation.early_stopping_patience,
            "importance_threshold": self.selection.importance_threshold,
        }

    def __repr__(self) -> str:
        """String representation of the configuration."""
        return (
            f"ConfigManager(target={self.data.target!r}, "
            f"cv_folds={self.model.cross_validation.cv_folds}, "
            f"max_rounds={self.model.cross_validation.max_rounds})"
        )


def _coerce(value: str) -> Any:
    """Convert an environment string to bool, int or float where possible."""
    if value.lower() in ("true", "false"):
        return value.lower() == "true"
    try:
        return float(value) if "." in value else int(value)
    except ValueError:
        return value
