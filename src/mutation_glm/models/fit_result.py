"""Container for the output of an external Bayesian GLM fit.

The fitting engine (rstanarm, NumPyro, PyMC, ...) is not part of this
package. A FitResult only carries what the summary layer reads:
- a posterior summary table, one row per parameter, with mean/se/sd columns
- the parameter covariance matrix, intercept first
- the row layout used to tell coefficient rows from intercept/diagnostic rows

Two constructors cover the usual sources: exported tables (e.g. an rstanarm
``stan_summary`` plus ``covmat``) and an ArviZ InferenceData.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import arviz as az
import numpy as np
import pandas as pd
import structlog
import xarray as xr

from mutation_glm.config.schema import RowLayout
from mutation_glm.summary.errors import StructuralError

__all__ = [
    "FitResult",
    "SUMMARY_COLUMNS",
]

log = structlog.get_logger()

SUMMARY_COLUMNS = ("mean", "se", "sd")

# Alternative column names written by common fitting engines.
_COLUMN_ALIASES = {
    "mcse": "se",
    "mcse_mean": "se",
    "se_mean": "se",
    "Estimate": "mean",
    "Est.Error": "sd",
}


def _normalize_summary(summary_table: pd.DataFrame) -> pd.DataFrame:
    renamed = summary_table.rename(
        columns={
            src: dst
            for src, dst in _COLUMN_ALIASES.items()
            if src in summary_table.columns and dst not in summary_table.columns
        }
    )
    missing = [c for c in SUMMARY_COLUMNS if c not in renamed.columns]
    if missing:
        raise StructuralError(
            f"Summary table is missing required column(s): {missing}",
            stage="fit_result",
        )
    table = renamed[list(SUMMARY_COLUMNS)].astype(float)
    table.index = table.index.astype(str)
    return table


def _normalize_covariance(covariance: pd.DataFrame) -> pd.DataFrame:
    if covariance.shape[0] != covariance.shape[1]:
        raise StructuralError(
            f"Covariance matrix must be square, got shape {covariance.shape}",
            stage="fit_result",
        )
    cov = covariance.astype(float)
    cov.index = cov.index.astype(str)
    cov.columns = cov.columns.astype(str)
    return cov


@dataclass(frozen=True)
class FitResult:
    """Posterior summary and covariance of one fitted model.

    Attributes:
        summary_table: Index = parameter names in engine order; columns
            mean, se, sd.
        covariance: Square parameter covariance, intercept at position 0.
        layout: Row layout used by extract() when none is passed.
    """

    summary_table: pd.DataFrame
    covariance: pd.DataFrame
    layout: RowLayout = field(default_factory=RowLayout)

    @property
    def parameter_names(self) -> list[str]:
        """All summary row names, including intercept and diagnostics."""
        return list(self.summary_table.index)

    @classmethod
    def from_tables(
        cls,
        summary_table: pd.DataFrame,
        covariance: pd.DataFrame | np.ndarray,
        layout: RowLayout | None = None,
    ) -> "FitResult":
        """Build a FitResult from exported summary and covariance tables.

        Parameters
        ----------
        summary_table : pd.DataFrame
            One row per parameter, indexed by name. ``mcse`` is accepted for
            the ``se`` column.
        covariance : pd.DataFrame or np.ndarray
            Square covariance matrix. A bare array is labelled with the
            summary row names in order.
        layout : RowLayout, optional
            Defaults to the positional layout.
        """
        summary = _normalize_summary(summary_table)
        if not isinstance(covariance, pd.DataFrame):
            arr = np.asarray(covariance, dtype=float)
            if arr.ndim != 2 or arr.shape[0] != arr.shape[1]:
                raise StructuralError(
                    f"Covariance matrix must be square, got shape {arr.shape}",
                    stage="fit_result",
                )
            if arr.shape[0] > len(summary):
                raise StructuralError(
                    f"Covariance has {arr.shape[0]} rows but summary has only {len(summary)}",
                    stage="fit_result",
                )
            names = list(summary.index[: arr.shape[0]])
            covariance = pd.DataFrame(arr, index=names, columns=names)
        return cls(
            summary_table=summary,
            covariance=_normalize_covariance(covariance),
            layout=layout if layout is not None else RowLayout(),
        )

    @classmethod
    def from_inference_data(
        cls,
        idata: az.InferenceData | xr.Dataset,
        var_names: list[str] | None = None,
        intercept_name: str = "Intercept",
    ) -> "FitResult":
        """Build a named-layout FitResult from ArviZ posterior samples.

        The summary uses ``az.summary`` (mean, sd, mcse_mean as se). The
        covariance is the sample covariance of all chains' draws stacked
        together. The intercept variable is moved to position 0 so the
        correlation step can drop it.

        Parameters
        ----------
        idata : az.InferenceData or xr.Dataset
            Inference data with a posterior group, or a bare posterior
            Dataset with (chain, draw, ...) variables.
        var_names : list[str], optional
            Variables to include. Defaults to every posterior variable.
        intercept_name : str, default "Intercept"
            Posterior variable holding the intercept.

        Raises
        ------
        ValueError
            If idata has no posterior group.
        StructuralError
            If the intercept variable is not in the posterior.
        """
        if isinstance(idata, xr.Dataset):
            idata = az.InferenceData(posterior=idata)
        if "posterior" not in idata.groups():
            raise ValueError("InferenceData must have 'posterior' group")

        posterior = idata.posterior
        if var_names is None:
            var_names = list(posterior.data_vars)
        if intercept_name not in posterior:
            raise StructuralError(
                f"Intercept variable '{intercept_name}' not found in posterior",
                stage="fit_result",
            )
        ordered = [intercept_name] + [v for v in var_names if v != intercept_name]

        summary = az.summary(
            idata,
            var_names=ordered,
            kind="all",
            round_to="none",
        )
        summary = summary.rename(columns={"mcse_mean": "se"})

        # One column per scalar parameter, rows = stacked draws
        draws = []
        for name in ordered:
            values = posterior[name].values
            n_samples = values.shape[0] * values.shape[1]
            draws.append(values.reshape(n_samples, -1))
        samples = np.concatenate(draws, axis=1)
        if samples.shape[1] != len(summary):
            raise StructuralError(
                f"Flattened posterior has {samples.shape[1]} parameters "
                f"but summary has {len(summary)}",
                stage="fit_result",
            )
        names = [str(n) for n in summary.index]
        covariance = pd.DataFrame(
            np.cov(samples, rowvar=False).reshape(len(names), len(names)),
            index=names,
            columns=names,
        )

        log.debug(
            "fit_result_from_inference_data",
            n_parameters=len(names),
            n_draws=samples.shape[0],
        )
        layout = RowLayout(mode="named", intercept_name=str(summary.index[0]), diagnostic_names=[])
        return cls.from_tables(summary, covariance, layout=layout)
