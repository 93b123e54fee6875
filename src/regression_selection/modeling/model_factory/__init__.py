"""
Model Factory - Machine Learning Components

The model factory provides plug-and-play components for regression model
selection, following protocols to keep splitting, estimation, selection and
evaluation independent of one another.
"""
