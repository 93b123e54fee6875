"""
Configuration management for the modeling pipeline.

This module provides organized configuration classes for data preparation,
boosted-tree training, cross-validation and feature selection.
"""

from .model_config import BoostingConfig, CrossValidationConfig, ModelConfig
from .data_config import DataConfig
from .selection_config import SelectionConfig
from .config_manager import ConfigManager

__all__ = [
    "BoostingConfig",
    "CrossValidationConfig",
    "ModelConfig",
    "DataConfig",
    "SelectionConfig",
    "ConfigManager",
]
