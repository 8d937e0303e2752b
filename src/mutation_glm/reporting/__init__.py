"""Reporting module for posterior feature reports.

This module builds the annotated posterior report for a fitted GLM and
turns it into publication artifacts.

Key capabilities:
- Report: coefficients ordered by posterior mean, annotated with strongly
  correlated coefficients
- Tables: adaptive-precision feature table (CSV + LaTeX)
- Figures: effect (forest) plot of mean +/- SD (PDF + PNG)

Usage:
    >>> from mutation_glm.reporting import summarize_fit, create_feature_table
    >>> report = summarize_fit(fit, features=["TP53", "IDH1"])
    >>> create_feature_table(report)
"""

from .figures import plot_effects, save_effect_plot, set_publication_style
from .report import Report, ReportRow, build_report, summarize_fit
from .tables import create_feature_table, export_table

__all__ = [
    # Report
    "Report",
    "ReportRow",
    "build_report",
    "summarize_fit",
    # Tables
    "create_feature_table",
    "export_table",
    # Figures
    "plot_effects",
    "save_effect_plot",
    "set_publication_style",
]
