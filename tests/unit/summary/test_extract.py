"""Tests for posterior table extraction and covariance checks."""

import numpy as np
import pandas as pd
import pytest

from mutation_glm.config.schema import RowLayout
from mutation_glm.models.fit_result import FitResult
from mutation_glm.summary.errors import StructuralError
from mutation_glm.summary.extract import PosteriorRow, check_covariance, extract


def _table(names: list[str]) -> pd.DataFrame:
    n = len(names)
    return pd.DataFrame(
        {
            "mean": np.arange(n, dtype=float),
            "se": np.full(n, 0.01),
            "sd": np.full(n, 0.5),
        },
        index=names,
    )


def _fit(names: list[str], layout: RowLayout | None = None) -> FitResult:
    return FitResult.from_tables(_table(names), np.eye(1), layout=layout)


class TestPositionalLayout:
    """Tests for the fixed rstanarm row layout."""

    def test_example_rows(self, example_fit):
        """Intercept and the three diagnostic rows are dropped."""
        rows = extract(example_fit)
        assert [r.parameter_name for r in rows] == ["A", "B", "C"]

    def test_row_values(self, example_fit):
        """mean/sd/se come from the matching columns, mcse read as se."""
        rows = extract(example_fit)
        assert rows[0] == PosteriorRow("A", mean=1.2, sd=0.3, se=0.01)

    @pytest.mark.parametrize("n_rows", [4, 5, 7, 20])
    def test_row_count_invariant(self, n_rows):
        """N summary rows give N - 4 coefficient rows."""
        names = [f"p{i}" for i in range(n_rows)]
        assert len(extract(_fit(names))) == n_rows - 4

    def test_exactly_four_rows_gives_empty(self):
        assert extract(_fit(["(Intercept)", "sigma", "mean_PPD", "log-posterior"])) == []

    @pytest.mark.parametrize("n_rows", [0, 1, 3])
    def test_too_few_rows_raises(self, n_rows):
        names = [f"p{i}" for i in range(n_rows)]
        fit = FitResult.from_tables(_table(names), np.empty((0, 0)))
        with pytest.raises(StructuralError, match="at least 4"):
            extract(fit)

    def test_custom_trailing_count(self):
        layout = RowLayout(n_trailing=2)
        rows = extract(_fit(["(Intercept)", "x1", "x2", "mean_PPD", "log-posterior"]), layout)
        assert [r.parameter_name for r in rows] == ["x1", "x2"]

    def test_preserves_table_order(self):
        """Rows are returned in summary order, not sorted."""
        table = _table(["(Intercept)", "z", "a", "m", "d1", "d2", "d3"])
        table["mean"] = [0.0, 3.0, -1.0, 2.0, 0.0, 0.0, 0.0]
        fit = FitResult.from_tables(table, np.eye(4))
        assert [r.parameter_name for r in extract(fit)] == ["z", "a", "m"]


class TestNamedLayout:
    """Tests for name-based role lookup."""

    def test_drops_roles_by_name_anywhere(self):
        layout = RowLayout(mode="named")
        names = ["sigma", "TP53", "(Intercept)", "IDH1", "log-posterior", "mean_PPD"]
        rows = extract(_fit(names), layout)
        assert [r.parameter_name for r in rows] == ["TP53", "IDH1"]

    def test_missing_intercept_raises(self):
        layout = RowLayout(mode="named")
        with pytest.raises(StructuralError, match="Intercept"):
            extract(_fit(["TP53", "IDH1"]), layout)

    def test_custom_names(self):
        layout = RowLayout(mode="named", intercept_name="b0", diagnostic_names=["lp__"])
        rows = extract(_fit(["b0", "x", "lp__"]), layout)
        assert [r.parameter_name for r in rows] == ["x"]

    def test_fit_layout_used_by_default(self):
        fit = _fit(["(Intercept)", "x"], layout=RowLayout(mode="named"))
        assert [r.parameter_name for r in extract(fit)] == ["x"]

    def test_explicit_layout_overrides_fit_layout(self):
        fit = _fit(["(Intercept)", "x", "y", "d1", "d2", "d3"], layout=RowLayout(mode="named"))
        rows = extract(fit, RowLayout(mode="positional"))
        assert [r.parameter_name for r in rows] == ["x", "y"]


class TestCheckCovariance:
    """Tests for covariance/summary consistency checks."""

    def test_example_passes(self, example_fit):
        check_covariance(example_fit, extract(example_fit))

    def test_size_mismatch_raises(self, example_fit):
        rows = extract(example_fit)[:2]
        with pytest.raises(StructuralError, match="expected 3"):
            check_covariance(example_fit, rows)

    def test_label_mismatch_raises(self, example_fit):
        cov = example_fit.covariance.copy()
        cov.index = ["(Intercept)", "A", "C", "B"]
        cov.columns = ["(Intercept)", "A", "C", "B"]
        fit = FitResult(example_fit.summary_table, cov, example_fit.layout)
        with pytest.raises(StructuralError, match="do not match"):
            check_covariance(fit, extract(fit))

    def test_row_column_labels_differ(self, example_fit):
        cov = example_fit.covariance.copy()
        cov.columns = ["(Intercept)", "A", "B", "X"]
        fit = FitResult(example_fit.summary_table, cov, example_fit.layout)
        with pytest.raises(StructuralError, match="labels differ"):
            check_covariance(fit, extract(fit))
