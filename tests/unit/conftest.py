"""Shared fixtures: small rstanarm-style fits with known correlations."""

import numpy as np
import pandas as pd
import pytest

from mutation_glm.models.fit_result import FitResult

DIAGNOSTIC_ROWS = ["sigma", "mean_PPD", "log-posterior"]


def _summary(rows: list[tuple[str, float, float, float]]) -> pd.DataFrame:
    """Build an rstanarm-like stan_summary: columns mean, mcse, sd."""
    names = [r[0] for r in rows]
    return pd.DataFrame(
        {
            "mean": [r[1] for r in rows],
            "mcse": [r[3] for r in rows],
            "sd": [r[2] for r in rows],
            "10%": [r[1] - r[2] for r in rows],
        },
        index=names,
    )


def _covariance(names: list[str], sds: list[float], corr: np.ndarray) -> pd.DataFrame:
    sds = np.asarray(sds, dtype=float)
    return pd.DataFrame(corr * np.outer(sds, sds), index=names, columns=names)


@pytest.fixture
def make_fit():
    """Factory for positional-layout fits.

    Takes coefficient tuples (name, mean, sd, se) and a coefficient
    correlation matrix; adds the intercept and three diagnostic rows.
    """

    def _make(
        coefficients: list[tuple[str, float, float, float]],
        corr: np.ndarray | None = None,
    ) -> FitResult:
        n = len(coefficients)
        if corr is None:
            corr = np.eye(n)
        rows = (
            [("(Intercept)", 0.0, 1.0, 0.01)]
            + list(coefficients)
            + [(name, 1.0, 0.1, 0.001) for name in DIAGNOSTIC_ROWS]
        )
        full_corr = np.eye(n + 1)
        full_corr[1:, 1:] = corr
        names = ["(Intercept)"] + [c[0] for c in coefficients]
        sds = [1.0] + [c[2] for c in coefficients]
        return FitResult.from_tables(_summary(rows), _covariance(names, sds, full_corr))

    return _make


@pytest.fixture
def example_fit(make_fit):
    """A(1.2), B(-0.5), C(2.0) with corr(A,B)=0.6, corr(A,C)=0.2, corr(B,C)=0.55."""
    corr = np.array(
        [
            [1.0, 0.6, 0.2],
            [0.6, 1.0, 0.55],
            [0.2, 0.55, 1.0],
        ]
    )
    return make_fit(
        [
            ("A", 1.2, 0.3, 0.01),
            ("B", -0.5, 0.4, 0.02),
            ("C", 2.0, 0.1, 0.005),
        ],
        corr,
    )


@pytest.fixture
def unit_covariance():
    """Factory for unit-variance covariances (covariance == correlation)."""

    def _make(names: list[str], corr: np.ndarray) -> pd.DataFrame:
        full = np.eye(len(names) + 1)
        full[1:, 1:] = corr
        labels = ["(Intercept)"] + names
        return pd.DataFrame(full, index=labels, columns=labels)

    return _make
