import sys
from pathlib import Path

import numpy as np
import pandas as pd
import pytest

# Add the src directory to the Python path so imports work correctly
PROJECT_ROOT = Path(__file__).parent.parent
SRC_PATH = PROJECT_ROOT / "src"
sys.path.insert(0, str(SRC_PATH))


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture(scope="session")
def src_path():
    """Return the src directory path."""
    return SRC_PATH


@pytest.fixture
def ten_records():
    """Ten records: target 10..100 and one predictor close to target / 2."""
    target = np.arange(10, 101, 10, dtype=float)
    noise = np.array([0.3, -0.2, 0.1, -0.4, 0.2, 0.0, -0.1, 0.4, -0.3, 0.1])
    return pd.DataFrame({"x": target / 2 + noise, "target": target})


@pytest.fixture
def synthetic_regression():
    """120 records: y depends on x1 and x2; x3 and x4 are pure noise."""
    rng = np.random.default_rng(0)
    n = 120
    x1, x2, x3, x4 = (rng.normal(size=n) for _ in range(4))
    y = 3.0 * x1 - 2.0 * x2 + rng.normal(scale=0.5, size=n)
    return pd.DataFrame({"x1": x1, "x2": x2, "x3": x3, "x4": x4, "y": y})


# Configure pytest to show more detailed output for failed assertions
def pytest_configure(config):
    """Configure pytest settings."""
    config.option.verbose = True
