"""
Regression Model Selection

Train/test splitting, standardisation, linear and gradient-boosted-tree
regressors, cross-validated tree-count selection and out-of-sample error
reporting for tabular datasets with a continuous target.
"""

__version__ = "0.1.0"
