"""Unit tests for reporting tables module.

Tests cover:
- Adaptive precision formatting for numeric values
- create_feature_table from a Report
- export_table for CSV and LaTeX output
"""

import numpy as np
import pandas as pd
import pytest

from mutation_glm.reporting.report import Report, ReportRow
from mutation_glm.reporting.tables import (
    FEATURE_TABLE_COLUMNS,
    _format_with_precision,
    _precision_decimals,
    create_feature_table,
    export_table,
)


@pytest.fixture
def report():
    return Report(
        rows=(
            ReportRow("B", -0.5, 0.4, 0.02, "A C"),
            ReportRow("A", 1.2, 0.3, 0.01, "B"),
            ReportRow("IDH1_R132H", 2.0, 0.1, 0.005, "B"),
        )
    )


# =============================================================================
# Tests for _format_with_precision
# =============================================================================


class TestAdaptivePrecision:
    """Tests for adaptive precision formatting."""

    def test_precision_large_uncertainty(self):
        result = _format_with_precision(1.234, 0.5)
        decimals = len(result.split(".")[-1])
        assert decimals <= 3

    def test_precision_small_uncertainty(self):
        result = _format_with_precision(0.001234, 0.00005)
        decimals = len(result.split(".")[-1])
        assert decimals >= 3

    def test_precision_zero_uncertainty(self):
        assert _format_with_precision(1.234567, 0.0) == "1.23"

    def test_precision_nan_value(self):
        assert _format_with_precision(np.nan, 0.1).lower() == "nan"

    def test_precision_nan_uncertainty(self):
        assert _format_with_precision(1.234567, np.nan) == "1.23"

    def test_precision_custom_max_decimals(self):
        result = _format_with_precision(0.123456789, 0.000001, max_decimals=4)
        assert len(result.split(".")[-1]) <= 4

    @pytest.mark.parametrize(
        ("uncertainty", "decimals"),
        [(0.4, 2), (0.05, 3), (0.00005, 6), (40.0, 2), (-0.05, 3), (np.inf, 2)],
    )
    def test_decimals_follow_uncertainty(self, uncertainty, decimals):
        assert _precision_decimals(uncertainty) == decimals

    def test_value_uses_uncertainty_decimals(self):
        assert _format_with_precision(1.23456, 0.05) == "1.235"
        assert _format_with_precision(-0.5, 0.4) == "-0.50"


# =============================================================================
# Tests for create_feature_table
# =============================================================================


class TestCreateFeatureTable:
    """Tests for the publication feature table."""

    def test_columns_and_order(self, report):
        table = create_feature_table(report)
        assert list(table.columns) == FEATURE_TABLE_COLUMNS
        assert list(table.index) == ["B", "A", "IDH1_R132H"]

    def test_correlated_with_kept(self, report):
        table = create_feature_table(report)
        assert table.loc["B", "Correlated With"] == "A C"

    def test_formatted_strings(self, report):
        table = create_feature_table(report)
        assert table.loc["B", "Mean"] == "-0.50"
        assert table.loc["B", "SD"] == "0.40"

    def test_raw_values(self, report):
        table = create_feature_table(report, apply_precision=False)
        assert table.loc["A", "Mean"] == 1.2
        assert table.loc["A", "SE"] == 0.01

    def test_empty_report(self):
        table = create_feature_table(Report())
        assert table.empty
        assert list(table.columns) == FEATURE_TABLE_COLUMNS


# =============================================================================
# Tests for export_table
# =============================================================================


class TestExportTable:
    """Tests for CSV and LaTeX export."""

    def test_creates_both_formats(self, tmp_path, report):
        table = create_feature_table(report)
        paths = export_table(table, tmp_path / "feature_table")
        assert [p.suffix for p in paths] == [".csv", ".tex"]
        assert all(p.exists() for p in paths)

    def test_csv_roundtrip_keeps_order(self, tmp_path, report):
        table = create_feature_table(report, apply_precision=False)
        (csv_path,) = export_table(table, tmp_path / "t", formats=("csv",))
        loaded = pd.read_csv(csv_path, index_col=0, keep_default_na=False)
        assert list(loaded.index) == ["B", "A", "IDH1_R132H"]
        assert loaded.loc["B", "Correlated With"] == "A C"

    def test_latex_escapes_underscores(self, tmp_path, report):
        table = create_feature_table(report)
        (tex_path,) = export_table(table, tmp_path / "t", formats=("tex",), caption="Effects")
        content = tex_path.read_text(encoding="utf-8")
        assert r"IDH1\_R132H" in content
        assert "Effects" in content
        assert "tab:t" in content

    def test_creates_parent_dirs(self, tmp_path, report):
        table = create_feature_table(report)
        paths = export_table(table, tmp_path / "a" / "b" / "t", formats=("csv",))
        assert paths[0].exists()

    def test_repeated_format_written_once(self, tmp_path, report):
        paths = export_table(create_feature_table(report), tmp_path / "t", formats=("csv", "csv"))
        assert paths == [tmp_path / "t.csv"]

    def test_unknown_format(self, tmp_path, report):
        with pytest.raises(ValueError, match="Unsupported"):
            export_table(create_feature_table(report), tmp_path / "t", formats=("xlsx",))
        assert not list(tmp_path.iterdir())
