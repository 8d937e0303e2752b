"""Posterior feature report.

Joins ordered posterior rows with their correlation annotations into a
single Report, and provides summarize_fit() to run the whole chain
(extract -> order/filter -> annotate -> build) on one FitResult.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

import pandas as pd
import structlog

from mutation_glm.config.schema import SummaryConfig
from mutation_glm.summary.correlation import annotate
from mutation_glm.summary.extract import PosteriorRow, check_covariance, extract
from mutation_glm.summary.ordering import order_and_filter

if TYPE_CHECKING:
    from mutation_glm.models.fit_result import FitResult

__all__ = [
    "REPORT_COLUMNS",
    "Report",
    "ReportRow",
    "build_report",
    "summarize_fit",
]

log = structlog.get_logger()

REPORT_COLUMNS = ["mean", "sd", "se", "correlated_with"]


@dataclass(frozen=True)
class ReportRow:
    """One annotated line of the report."""

    parameter_name: str
    mean: float
    sd: float
    se: float
    correlated_with: str = ""


@dataclass(frozen=True)
class Report:
    """Ordered, annotated posterior report.

    Row order is final: ascending by posterior mean, optionally restricted
    to a feature subset.
    """

    rows: tuple[ReportRow, ...] = ()

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[ReportRow]:
        return iter(self.rows)

    def __getitem__(self, index: int) -> ReportRow:
        return self.rows[index]

    @property
    def names(self) -> list[str]:
        return [row.parameter_name for row in self.rows]

    def to_frame(self) -> pd.DataFrame:
        """Return the report as a DataFrame indexed by parameter name."""
        frame = pd.DataFrame(
            [
                [row.mean, row.sd, row.se, row.correlated_with]
                for row in self.rows
            ],
            columns=REPORT_COLUMNS,
            index=pd.Index(self.names, name="parameter"),
        )
        return frame.astype({"mean": float, "sd": float, "se": float})


def build_report(
    rows: Iterable[PosteriorRow],
    annotations: Mapping[str, Sequence[str]],
) -> Report:
    """Attach correlation annotations to already ordered rows.

    Parameters
    ----------
    rows : Iterable[PosteriorRow]
        Ordered (and possibly filtered) posterior rows.
    annotations : Mapping[str, Sequence[str]]
        Output of annotate(). Names missing from the mapping get an empty
        annotation.

    Returns
    -------
    Report
        One ReportRow per input row, same order, with ``correlated_with``
        holding the correlated names joined by single spaces.
    """
    return Report(
        rows=tuple(
            ReportRow(
                parameter_name=row.parameter_name,
                mean=row.mean,
                sd=row.sd,
                se=row.se,
                correlated_with=" ".join(annotations.get(row.parameter_name, ())),
            )
            for row in rows
        )
    )


def summarize_fit(
    fit: FitResult,
    features: Iterable[str] | None = None,
    config: SummaryConfig | None = None,
) -> Report:
    """Build the annotated posterior report for one fit.

    Parameters
    ----------
    fit : FitResult
        Fitted model output.
    features : Iterable[str], optional
        Restrict the report to these parameter names.
    config : SummaryConfig, optional
        Threshold, subset strictness and row layout. Defaults to
        SummaryConfig().

    Returns
    -------
    Report
        Rows ordered by posterior mean with correlation annotations.

    Raises
    ------
    StructuralError
        If the fit does not match the row layout or the covariance shape.
    FeatureLookupError
        If strict subsetting is on and a feature is unknown.
    NumericError
        If a variance is non-positive or a mean is not finite.

    Examples
    --------
    >>> report = summarize_fit(fit, features=["TP53", "IDH1"])
    >>> report.to_frame()
    """
    if config is None:
        config = SummaryConfig()
    if features is not None and not isinstance(features, str):
        features = list(features)

    log.info(
        "summary_start",
        n_summary_rows=len(fit.summary_table),
        n_features=None if features is None else len(features),
    )

    rows = extract(fit, layout=config.layout)
    check_covariance(fit, rows)
    ordered = order_and_filter(rows, features, strict_subset=config.strict_subset)
    annotations = annotate(fit.covariance, threshold=config.threshold)
    report = build_report(ordered, annotations)

    log.info(
        "summary_complete",
        n_rows=len(report),
        n_annotated=sum(1 for row in report if row.correlated_with),
    )
    return report
