"""FitResult persistence.

Two on-disk forms are supported:
- ArviZ NetCDF (``*.nc``): posterior samples, summarized on load
- A directory with ``summary.csv`` and ``covmat.csv`` (first column holds
  parameter names), the form produced by exporting an rstanarm fit's
  ``stan_summary`` and ``covmat``. An optional ``layout.json`` records the
  row layout.
"""

from __future__ import annotations

import json
from pathlib import Path

import arviz as az
import structlog

from mutation_glm.config.schema import RowLayout
from mutation_glm.io.readers import read_csv
from mutation_glm.models.fit_result import FitResult
from mutation_glm.summary.errors import StructuralError

log = structlog.get_logger()

__all__ = [
    "COVARIANCE_FILENAME",
    "LAYOUT_FILENAME",
    "SUMMARY_FILENAME",
    "load_fit_result",
    "save_fit_result",
]

SUMMARY_FILENAME = "summary.csv"
COVARIANCE_FILENAME = "covmat.csv"
LAYOUT_FILENAME = "layout.json"


def load_fit_result(
    path: str | Path,
    layout: RowLayout | None = None,
    intercept_name: str = "Intercept",
) -> FitResult:
    """Load a FitResult from a NetCDF file or an exported table directory.

    Parameters
    ----------
    path : str | Path
        ``*.nc`` file or directory containing summary.csv and covmat.csv.
    layout : RowLayout, optional
        Overrides the stored (or default) row layout of a table directory.
        NetCDF fits always use the named layout built from their posterior
        variables, so a layout passed for them is ignored.
    intercept_name : str, default "Intercept"
        Intercept variable name, used for NetCDF inputs only.

    Raises
    ------
    FileNotFoundError
        If the path or a required table does not exist.
    StructuralError
        If the path is neither a NetCDF file nor a directory.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Fit not found: {path}")

    if path.is_file():
        if path.suffix != ".nc":
            raise StructuralError(
                f"Expected a .nc file or a table directory, got {path}",
                stage="load",
            )
        log.info("loading_fit", path=str(path), kind="netcdf")
        if layout is not None:
            log.debug("layout_ignored", path=str(path), mode=layout.mode)
        return FitResult.from_inference_data(
            az.from_netcdf(path), intercept_name=intercept_name
        )

    summary_path = path / SUMMARY_FILENAME
    covariance_path = path / COVARIANCE_FILENAME
    for required in (summary_path, covariance_path):
        if not required.exists():
            raise FileNotFoundError(f"Missing fit table: {required}")

    if layout is None:
        layout_path = path / LAYOUT_FILENAME
        if layout_path.exists():
            with open(layout_path, "r", encoding="utf-8") as f:
                layout = RowLayout(**json.load(f))

    log.info("loading_fit", path=str(path), kind="tables")
    summary = read_csv(summary_path, index_col=0)
    covariance = read_csv(covariance_path, index_col=0)
    return FitResult.from_tables(summary, covariance, layout=layout)


def save_fit_result(fit: FitResult, directory: str | Path) -> Path:
    """Write a FitResult as summary.csv, covmat.csv and layout.json.

    Returns
    -------
    Path
        The directory written to.
    """
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)

    fit.summary_table.to_csv(directory / SUMMARY_FILENAME, index=True)
    fit.covariance.to_csv(directory / COVARIANCE_FILENAME, index=True)
    with open(directory / LAYOUT_FILENAME, "w", encoding="utf-8") as f:
        json.dump(fit.layout.model_dump(), f, indent=2)

    log.debug("fit_saved", path=str(directory))
    return directory
