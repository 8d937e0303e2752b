"""Correlation-based annotation of posterior parameters.

Turns the parameter covariance matrix of a fit into a correlation matrix
and, for each coefficient, lists the other coefficients whose posterior
correlation magnitude exceeds a threshold. Strongly correlated
coefficients (e.g. co-occurring mutations) share explanatory power, so
their individual effects should be read together.

The intercept sits at position 0 of the covariance and is dropped before
normalizing.
"""

from __future__ import annotations

import numpy as np
import pandas as pd
import structlog

from mutation_glm.summary.errors import NumericError, StructuralError

__all__ = [
    "DEFAULT_THRESHOLD",
    "annotate",
    "covariance_to_correlation",
]

log = structlog.get_logger()

DEFAULT_THRESHOLD = 0.5


def covariance_to_correlation(
    covariance: pd.DataFrame,
    drop_intercept: bool = True,
) -> pd.DataFrame:
    """Normalize a covariance matrix into a correlation matrix.

    ``corr[i, j] = cov[i, j] / sqrt(cov[i, i] * cov[j, j])``, with the
    diagonal set to exactly 1 and off-diagonal values clipped to [-1, 1].

    Parameters
    ----------
    covariance : pd.DataFrame
        Square covariance matrix labelled by parameter name.
    drop_intercept : bool, default True
        Drop row/column 0 before normalizing.

    Returns
    -------
    pd.DataFrame
        Correlation matrix with the same labels (minus the intercept).

    Raises
    ------
    StructuralError
        If the matrix is not square or not symmetric.
    NumericError
        If any variance on the diagonal is zero, negative or not finite.
    """
    cov = covariance.iloc[1:, 1:] if drop_intercept else covariance
    values = cov.to_numpy(dtype=float, copy=True)
    names = [str(n) for n in cov.columns]
    if values.ndim != 2 or values.shape[0] != values.shape[1]:
        raise StructuralError(
            f"Covariance matrix must be square, got shape {values.shape}",
            stage="annotate",
        )
    if not np.allclose(values, values.T, equal_nan=True):
        raise StructuralError("Covariance matrix is not symmetric", stage="annotate")
    # Remove floating-point asymmetry so corr[i, j] == corr[j, i] exactly
    values = (values + values.T) / 2.0

    variances = np.diag(values)
    degenerate = ~np.isfinite(variances) | (variances <= 0)
    if degenerate.any():
        bad = [names[i] for i in np.flatnonzero(degenerate)]
        raise NumericError(
            f"Non-positive variance on covariance diagonal for: {', '.join(bad)}",
            parameters=bad,
        )

    scale = np.sqrt(variances)
    corr = values / np.outer(scale, scale)
    corr = np.clip(corr, -1.0, 1.0)
    np.fill_diagonal(corr, 1.0)
    return pd.DataFrame(corr, index=names, columns=names)


def annotate(
    covariance: pd.DataFrame,
    threshold: float = DEFAULT_THRESHOLD,
) -> dict[str, list[str]]:
    """Map each coefficient to the coefficients it is strongly correlated with.

    Parameters
    ----------
    covariance : pd.DataFrame
        Square covariance matrix, intercept at position 0.
    threshold : float, default 0.5
        A pair is reported when ``abs(corr) > threshold`` (strict).

    Returns
    -------
    dict[str, list[str]]
        Keys in covariance column order; each value lists correlated names
        in column order. A parameter never lists itself.

    Raises
    ------
    ValueError
        If threshold is outside [0, 1).
    NumericError
        If a variance is non-positive. No partial result is produced.

    Examples
    --------
    >>> annotate(fit.covariance)
    {'A': ['B'], 'B': ['A', 'C'], 'C': ['B']}
    """
    if not (0.0 <= threshold < 1.0):
        raise ValueError(f"threshold must be in [0, 1), got {threshold}")

    corr = covariance_to_correlation(covariance)
    names = list(corr.columns)
    magnitude = np.abs(corr.to_numpy())

    annotations: dict[str, list[str]] = {}
    for i, name in enumerate(names):
        annotations[name] = [
            names[j]
            for j in range(len(names))
            if j != i and magnitude[i, j] > threshold
        ]

    n_pairs = sum(len(v) for v in annotations.values()) // 2
    log.debug("correlation_annotated", n_parameters=len(names), n_pairs=n_pairs, threshold=threshold)
    return annotations
