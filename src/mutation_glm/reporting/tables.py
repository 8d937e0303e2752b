"""Publication-quality feature tables for posterior reports.

This module turns a Report into a display table with adaptive precision
(decimal places matched to uncertainty magnitude) and exports it to CSV
and LaTeX for manuscript inclusion.

Key functions:
- create_feature_table: Mean, SD, SE and correlated features per parameter
- export_table: Dual-format export (CSV + LaTeX)

Usage:
    >>> from mutation_glm.reporting.tables import create_feature_table, export_table
    >>> table = create_feature_table(report)
    >>> export_table(table, "reports/feature_table", caption="Posterior effects")
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np
import pandas as pd
from uncertainties import ufloat

if TYPE_CHECKING:
    from mutation_glm.reporting.report import Report

__all__ = [
    "FEATURE_TABLE_COLUMNS",
    "create_feature_table",
    "export_table",
]

FEATURE_TABLE_COLUMNS = ["Mean", "SD", "SE", "Correlated With"]


def _precision_decimals(
    uncertainty: float,
    min_decimals: int = 2,
    max_decimals: int = 6,
) -> int:
    """Decimal places implied by an uncertainty under the PDG convention.

    The uncertainty is rounded to 2 significant figures by ``uncertainties``
    (shorthand ``1.00(50)`` form); the decimals of the nominal part are the
    decimals a value with that uncertainty should be shown with.

    Examples
    --------
    >>> _precision_decimals(0.05)
    3
    >>> _precision_decimals(0.00005)
    6
    >>> _precision_decimals(40.0)
    2
    """
    if not np.isfinite(uncertainty) or uncertainty == 0:
        return min_decimals
    try:
        shorthand = f"{ufloat(1.0, abs(uncertainty)):.2uS}"
    except (ValueError, OverflowError):
        return min_decimals

    nominal = re.split(r"[(+]", shorthand, maxsplit=1)[0].strip()
    # Exponent form for very large uncertainties
    if "e" in nominal.lower() or "." not in nominal:
        return min_decimals
    decimals = len(nominal.split(".")[1])
    return max(min_decimals, min(decimals, max_decimals))


def _format_with_precision(
    value: float,
    uncertainty: float,
    min_decimals: int = 2,
    max_decimals: int = 6,
) -> str:
    """Format a value with as many decimals as its uncertainty supports.

    Non-finite values are returned as ``str(value)``; a zero or non-finite
    uncertainty falls back to ``min_decimals``.

    Examples
    --------
    >>> _format_with_precision(1.234, 0.05)
    '1.234'
    >>> _format_with_precision(-0.5, 0.4)
    '-0.50'
    """
    if not np.isfinite(value):
        return str(value)
    decimals = _precision_decimals(uncertainty, min_decimals, max_decimals)
    return f"{value:.{decimals}f}"


def create_feature_table(
    report: Report,
    apply_precision: bool = True,
) -> pd.DataFrame:
    """Create a publication-ready feature table from a Report.

    Parameters
    ----------
    report : Report
        Ordered, annotated posterior report.
    apply_precision : bool, default True
        If True, format Mean and SD to match the posterior SD and SE to
        match itself. If False, keep raw floats.

    Returns
    -------
    pd.DataFrame
        Columns Mean, SD, SE, Correlated With; index = parameter names in
        report order.

    Examples
    --------
    >>> create_feature_table(report)
                Mean    SD    SE Correlated With
    parameter
    B          -0.50  0.40  0.020            A C
    A           1.20  0.30  0.010              B
    """
    frame = report.to_frame()
    result = frame.rename(
        columns={
            "mean": "Mean",
            "sd": "SD",
            "se": "SE",
            "correlated_with": "Correlated With",
        }
    )[FEATURE_TABLE_COLUMNS]

    if not apply_precision or result.empty:
        return result

    result = result.astype(object)
    for idx in result.index:
        mean = float(frame.loc[idx, "mean"])
        sd = float(frame.loc[idx, "sd"])
        se = float(frame.loc[idx, "se"])
        result.loc[idx, "Mean"] = _format_with_precision(mean, sd)
        result.loc[idx, "SD"] = _format_with_precision(sd, sd)
        result.loc[idx, "SE"] = _format_with_precision(se, se)
    return result


def _write_csv_table(df: pd.DataFrame, path: Path, caption: str | None, label: str | None) -> None:
    df.to_csv(path, index=True)


def _write_latex_table(df: pd.DataFrame, path: Path, caption: str | None, label: str | None) -> None:
    # escape=True turns IDH1_R132H into IDH1\_R132H
    latex = df.to_latex(
        index=True,
        escape=True,
        caption=caption,
        label=label if label is not None else f"tab:{path.stem}",
        position="htbp",
    )
    path.write_text(latex, encoding="utf-8")


# format -> (suffix, writer)
_TABLE_WRITERS = {
    "csv": (".csv", _write_csv_table),
    "tex": (".tex", _write_latex_table),
}


def export_table(
    df: pd.DataFrame,
    output_path: str | Path,
    formats: tuple[str, ...] | list[str] = ("csv", "tex"),
    caption: str | None = None,
    label: str | None = None,
) -> list[Path]:
    """Write a table once per requested format next to ``output_path``.

    Parameters
    ----------
    df : pd.DataFrame
        Table to export; the index (parameter names) is written.
    output_path : str | Path
        Path without extension, e.g. "reports/feature_table".
    formats : sequence of str, default ("csv", "tex")
        Any of "csv", "tex". Repeated formats are written once.
    caption, label : str, optional
        LaTeX caption and label; the label defaults to ``tab:<stem>``.

    Returns
    -------
    list[Path]
        Created files, in the order of ``formats``.

    Raises
    ------
    ValueError
        If an unsupported format is requested. Nothing is written.
    """
    unknown = [f for f in formats if f not in _TABLE_WRITERS]
    if unknown:
        raise ValueError(f"Unsupported table format(s): {unknown}")

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    created: list[Path] = []
    for fmt in dict.fromkeys(formats):
        suffix, writer = _TABLE_WRITERS[fmt]
        path = output_path.with_suffix(suffix)
        writer(df, path, caption, label)
        created.append(path)
    return created
