"""Tests for FitResult persistence."""

import json

import arviz as az
import numpy as np
import pandas as pd
import pytest

from mutation_glm.config.schema import RowLayout
from mutation_glm.models.io import (
    COVARIANCE_FILENAME,
    LAYOUT_FILENAME,
    SUMMARY_FILENAME,
    load_fit_result,
    save_fit_result,
)
from mutation_glm.reporting.report import summarize_fit
from mutation_glm.summary.errors import StructuralError


class TestTableDirectory:
    """Tests for the summary.csv + covmat.csv directory form."""

    def test_save_writes_three_files(self, tmp_path, example_fit):
        out = save_fit_result(example_fit, tmp_path / "fit")
        assert (out / SUMMARY_FILENAME).exists()
        assert (out / COVARIANCE_FILENAME).exists()
        assert (out / LAYOUT_FILENAME).exists()

    def test_roundtrip(self, tmp_path, example_fit):
        out = save_fit_result(example_fit, tmp_path / "fit")
        loaded = load_fit_result(out)
        pd.testing.assert_frame_equal(loaded.summary_table, example_fit.summary_table)
        pd.testing.assert_frame_equal(loaded.covariance, example_fit.covariance)
        assert loaded.layout == example_fit.layout

    def test_loaded_fit_summarizes(self, tmp_path, example_fit):
        loaded = load_fit_result(save_fit_result(example_fit, tmp_path / "fit"))
        report = summarize_fit(loaded)
        assert [row.correlated_with for row in report] == ["A C", "B", "B"]

    def test_stored_layout_used(self, tmp_path, example_fit):
        out = save_fit_result(example_fit, tmp_path / "fit")
        named = RowLayout(mode="named")
        (out / LAYOUT_FILENAME).write_text(json.dumps(named.model_dump()), encoding="utf-8")
        assert load_fit_result(out).layout.mode == "named"

    def test_layout_argument_overrides_file(self, tmp_path, example_fit):
        out = save_fit_result(example_fit, tmp_path / "fit")
        loaded = load_fit_result(out, layout=RowLayout(mode="named"))
        assert loaded.layout.mode == "named"

    def test_missing_layout_defaults_positional(self, tmp_path, example_fit):
        out = save_fit_result(example_fit, tmp_path / "fit")
        (out / LAYOUT_FILENAME).unlink()
        assert load_fit_result(out).layout.mode == "positional"

    def test_rstanarm_export(self, tmp_path):
        """A hand-exported stan_summary with mcse and extra columns loads."""
        fit_dir = tmp_path / "rstanarm"
        fit_dir.mkdir()
        (fit_dir / SUMMARY_FILENAME).write_text(
            ",mean,mcse,sd,10%,n_eff,Rhat\n"
            "(Intercept),0.1,0.01,0.2,-0.1,4000,1.0\n"
            "TP53,0.5,0.02,0.3,0.1,3900,1.0\n"
            "sigma,1.0,0.001,0.05,0.9,4100,1.0\n"
            "mean_PPD,2.0,0.001,0.05,1.9,4000,1.0\n"
            "log-posterior,-100.0,0.05,1.5,-102.0,1500,1.0\n",
            encoding="utf-8",
        )
        (fit_dir / COVARIANCE_FILENAME).write_text(
            ",(Intercept),TP53\n(Intercept),0.04,0.01\nTP53,0.01,0.09\n",
            encoding="utf-8",
        )
        fit = load_fit_result(fit_dir)
        assert fit.summary_table.loc["TP53", "se"] == 0.02
        assert summarize_fit(fit).names == ["TP53"]

    def test_missing_covariance(self, tmp_path, example_fit):
        out = save_fit_result(example_fit, tmp_path / "fit")
        (out / COVARIANCE_FILENAME).unlink()
        with pytest.raises(FileNotFoundError, match="covmat"):
            load_fit_result(out)


class TestNetCDF:
    """Tests for ArviZ NetCDF inputs."""

    @pytest.fixture
    def nc_path(self, tmp_path):
        rng = np.random.default_rng(0)
        idata = az.from_dict(
            posterior={
                "Intercept": rng.normal(size=(2, 200)),
                "beta": rng.normal(size=(2, 200, 2)) + np.array([0.5, -0.5]),
            },
            coords={"gene": ["TP53", "KRAS"]},
            dims={"beta": ["gene"]},
        )
        path = tmp_path / "fit.nc"
        idata.to_netcdf(str(path))
        return path

    def test_load_netcdf(self, nc_path):
        fit = load_fit_result(nc_path)
        assert fit.layout.mode == "named"
        assert fit.parameter_names[0] == "Intercept"
        assert len(summarize_fit(fit)) == 2

    @pytest.mark.parametrize("mode", ["named", "positional"])
    def test_table_layout_ignored(self, nc_path, mode):
        """A table layout with the rstanarm intercept name does not apply to posteriors."""
        fit = load_fit_result(nc_path, layout=RowLayout(mode=mode))
        assert fit.layout.mode == "named"
        assert fit.layout.intercept_name == "Intercept"
        assert summarize_fit(fit).names == ["beta[KRAS]", "beta[TP53]"]

    def test_custom_intercept_name(self, tmp_path):
        rng = np.random.default_rng(1)
        idata = az.from_dict(
            posterior={
                "alpha": rng.normal(size=(2, 100)),
                "b_TP53": rng.normal(size=(2, 100)),
            }
        )
        path = tmp_path / "brms.nc"
        idata.to_netcdf(str(path))
        fit = load_fit_result(path, intercept_name="alpha")
        assert fit.parameter_names == ["alpha", "b_TP53"]
        assert summarize_fit(fit).names == ["b_TP53"]

    def test_wrong_intercept_name(self, nc_path):
        with pytest.raises(StructuralError, match="alpha"):
            load_fit_result(nc_path, intercept_name="alpha")


class TestLoadErrors:
    def test_missing_path(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_fit_result(tmp_path / "nope")

    def test_bad_suffix(self, tmp_path):
        path = tmp_path / "fit.pkl"
        path.write_bytes(b"")
        with pytest.raises(StructuralError, match="load"):
            load_fit_result(path)
