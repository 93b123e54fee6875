#!/usr/bin/env python3
"""
Main entry point for the regression model-selection pipeline.

Reads its settings from the environment (see `regression_selection.config`),
runs the pipeline on a CSV dataset and prints the report table.
"""

import logging
import sys

from regression_selection.config import load_config
from regression_selection.modeling.config import ConfigManager
from regression_selection.modeling.modeling_steps import load_dataset
from regression_selection.modeling.pipeline import run_pipeline

logger = logging.getLogger(__name__)


def print_usage() -> None:
    print("Regression Model Selection")
    print("=" * 50)
    print()
    print("Environment Variables:")
    print("  DATASET_PATH          - CSV file with a header row (required)")
    print("  TARGET_COLUMN         - Name of the continuous target (required)")
    print("  MODELING_CONFIG_PATH  - YAML file with modeling settings (optional)")
    print("  LOG_LEVEL             - Logging level (default: INFO)")
    print()
    print("Individual settings can also be set as MODELING_<SECTION>_<NAME>,")
    print("e.g. MODELING_CROSS_VALIDATION_CV_FOLDS=5")


def main() -> None:
    """
    Run the model-selection pipeline described by the environment.

    Exits with status 1 when the dataset or target is not configured.
    """
    app_config = load_config()
    logging.basicConfig(
        level=app_config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if not app_config.dataset_path or not app_config.target_column:
        print_usage()
        sys.exit(1)

    if app_config.modeling_config_path:
        config_manager = ConfigManager.from_yaml(app_config.modeling_config_path)
    else:
        config_manager = ConfigManager.from_environment()
    # The command line target takes precedence over the file
    config_manager.data = config_manager.data.model_copy(update={"target": app_config.target_column})

    frame = load_dataset(app_config.dataset_path, app_config.target_column)
    result = run_pipeline(frame, config_manager, parallel=True)

    print(result.summary().to_string())
    print()
    print(f"Lowest test RMSE: {result.best_model()}")


if __name__ == "__main__":
    main()
