"""Posterior summaries for Bayesian GLMs of clinical and mutation data.

Typical use:
    >>> from mutation_glm import load_fit_result, summarize_fit
    >>> fit = load_fit_result("fits/os_glm")
    >>> report = summarize_fit(fit, features=["TP53", "IDH1"])
    >>> report.to_frame()
"""

from mutation_glm.models import FitResult, load_fit_result, save_fit_result
from mutation_glm.reporting import Report, ReportRow, build_report, summarize_fit
from mutation_glm.summary import (
    FeatureLookupError,
    NumericError,
    PosteriorRow,
    StructuralError,
    SummaryError,
    annotate,
    extract,
    order_and_filter,
)

__version__ = "0.1.0"

__all__ = [
    "FeatureLookupError",
    "FitResult",
    "NumericError",
    "PosteriorRow",
    "Report",
    "ReportRow",
    "StructuralError",
    "SummaryError",
    "__version__",
    "annotate",
    "build_report",
    "extract",
    "load_fit_result",
    "order_and_filter",
    "save_fit_result",
    "summarize_fit",
]
