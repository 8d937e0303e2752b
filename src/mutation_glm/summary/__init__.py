"""Posterior summary transforms.

Pure functions that turn a FitResult into ordered, annotated rows:
- extract: coefficient rows from the posterior summary table
- order_and_filter: ascending sort on mean, optional feature subset
- annotate: strongly correlated coefficients from the covariance matrix
"""

from mutation_glm.summary.correlation import (
    DEFAULT_THRESHOLD,
    annotate,
    covariance_to_correlation,
)
from mutation_glm.summary.errors import (
    FeatureLookupError,
    NumericError,
    StructuralError,
    SummaryError,
)
from mutation_glm.summary.extract import PosteriorRow, check_covariance, extract
from mutation_glm.summary.ordering import order_and_filter, sort_by_mean

__all__ = [
    "DEFAULT_THRESHOLD",
    "FeatureLookupError",
    "NumericError",
    "PosteriorRow",
    "StructuralError",
    "SummaryError",
    "annotate",
    "check_covariance",
    "covariance_to_correlation",
    "extract",
    "order_and_filter",
    "sort_by_mean",
]
