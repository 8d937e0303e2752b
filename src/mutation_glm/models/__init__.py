"""Fitted model containers and persistence."""

from mutation_glm.models.fit_result import SUMMARY_COLUMNS, FitResult
from mutation_glm.models.io import load_fit_result, save_fit_result

__all__ = [
    "FitResult",
    "SUMMARY_COLUMNS",
    "load_fit_result",
    "save_fit_result",
]
