"""Posterior table extraction.

Pulls the coefficient rows out of a fit's summary table, leaving out the
intercept and the fit-level diagnostic rows. Two layouts are understood:

positional
    The fixed layout of an rstanarm ``stan_summary``: row 0 is the
    intercept and the last ``n_trailing`` rows (3 by default: aux sigma,
    mean_PPD, log-posterior) are diagnostics.
named
    Intercept and diagnostic rows are recognized by name wherever they are.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog

from mutation_glm.config.schema import RowLayout
from mutation_glm.summary.errors import StructuralError

if TYPE_CHECKING:
    from mutation_glm.models.fit_result import FitResult

__all__ = [
    "PosteriorRow",
    "check_covariance",
    "extract",
]

log = structlog.get_logger()


@dataclass(frozen=True)
class PosteriorRow:
    """Posterior mean, standard deviation and standard error of one parameter."""

    parameter_name: str
    mean: float
    sd: float
    se: float


def _coefficient_positions(names: list[str], layout: RowLayout) -> list[int]:
    n_rows = len(names)
    if layout.mode == "positional":
        min_rows = 1 + layout.n_trailing
        if n_rows < min_rows:
            raise StructuralError(
                f"Summary table has {n_rows} rows; positional layout needs at "
                f"least {min_rows} (1 intercept + {layout.n_trailing} diagnostic rows)"
            )
        return list(range(1, n_rows - layout.n_trailing))

    if layout.intercept_name not in names:
        raise StructuralError(
            f"Intercept row '{layout.intercept_name}' not found in summary table"
        )
    skip = {layout.intercept_name, *layout.diagnostic_names}
    return [i for i, name in enumerate(names) if name not in skip]


def extract(fit: FitResult, layout: RowLayout | None = None) -> list[PosteriorRow]:
    """Extract coefficient rows from a fit's posterior summary.

    Parameters
    ----------
    fit : FitResult
        Fit with a summary table carrying mean, se and sd columns.
    layout : RowLayout, optional
        Row layout to apply. Defaults to ``fit.layout``.

    Returns
    -------
    list[PosteriorRow]
        One row per coefficient, in summary table order.

    Raises
    ------
    StructuralError
        If the table is too short for the positional layout, the intercept
        is missing under the named layout, or a summary column is absent.

    Examples
    --------
    >>> rows = extract(fit)
    >>> [r.parameter_name for r in rows]
    ['TP53', 'IDH1', 'age']
    """
    if layout is None:
        layout = fit.layout

    table = fit.summary_table
    missing = [c for c in ("mean", "sd", "se") if c not in table.columns]
    if missing:
        raise StructuralError(f"Summary table is missing column(s): {missing}")

    names = [str(n) for n in table.index]
    positions = _coefficient_positions(names, layout)

    rows = [
        PosteriorRow(
            parameter_name=names[i],
            mean=float(table.iloc[i]["mean"]),
            sd=float(table.iloc[i]["sd"]),
            se=float(table.iloc[i]["se"]),
        )
        for i in positions
    ]
    log.debug("extracted_rows", n_rows=len(rows), n_summary=len(names), mode=layout.mode)
    return rows


def check_covariance(fit: FitResult, rows: list[PosteriorRow]) -> None:
    """Check the covariance matrix lines up with the extracted coefficients.

    The covariance must be square with matching row/column labels, hold the
    intercept at position 0, and list the coefficients after it in the same
    order as ``rows``.

    Raises
    ------
    StructuralError
        On any shape or label mismatch.
    """
    cov = fit.covariance
    n_rows, n_cols = cov.shape
    if n_rows != n_cols:
        raise StructuralError(
            f"Covariance matrix must be square, got shape {cov.shape}",
            stage="covariance",
        )
    if list(cov.index) != list(cov.columns):
        raise StructuralError(
            "Covariance row and column labels differ",
            stage="covariance",
        )
    expected = len(rows) + 1
    if n_rows != expected:
        raise StructuralError(
            f"Covariance matrix has {n_rows} parameters; expected {expected} "
            f"(intercept + {len(rows)} coefficients)",
            stage="covariance",
        )
    coefficient_labels = [str(n) for n in cov.index[1:]]
    row_names = [r.parameter_name for r in rows]
    if coefficient_labels != row_names:
        raise StructuralError(
            "Covariance labels do not match summary coefficients: "
            f"{coefficient_labels} != {row_names}",
            stage="covariance",
        )
