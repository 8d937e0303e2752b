"""Config schema definitions."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator


class RowLayout(BaseModel):
    mode: Literal["positional", "named"] = "positional"
    intercept_name: str = "(Intercept)"
    diagnostic_names: list[str] = Field(
        default_factory=lambda: ["sigma", "mean_PPD", "log-posterior"]
    )
    n_trailing: int = Field(default=3, ge=0)


class SummaryConfig(BaseModel):
    threshold: float = 0.5
    strict_subset: bool = True
    layout: RowLayout | None = None
    # Posterior variable holding the intercept in NetCDF fits
    intercept_var: str = "Intercept"

    @field_validator("threshold")
    @classmethod
    def validate_threshold(cls, value: float) -> float:
        """Correlation magnitudes live in [0, 1]; a threshold of 1 matches nothing."""
        if not (0.0 <= value < 1.0):
            raise ValueError(f"threshold must be in [0, 1), got {value}")
        return value


class PlotConfig(BaseModel):
    title: str = "Effects of Gene Variants on Survival"
    xlabel: str = "Mean +/- SD"
    ylabel: str = "Gene Variants"
    enabled: bool = True


class CohortConfig(BaseModel):
    sample_col: str = "sample"
    clinical_id_col: str = "sampleID"
    time_col: str = "OS"
    event_col: str = "OS_IND"


class OutputsConfig(BaseModel):
    report_dir: str = "reports"
    table_name: str = "feature_table"
    plot_name: str = "effect_plot"
    table_formats: list[str] = Field(default_factory=lambda: ["csv", "tex"])

    @model_validator(mode="after")
    def validate_formats(self) -> "OutputsConfig":
        """Only CSV and LaTeX exports are supported."""
        unknown = [f for f in self.table_formats if f not in ("csv", "tex")]
        if unknown:
            raise ValueError(f"Unsupported table formats: {unknown}")
        return self


class AppConfig(BaseModel):
    summary: SummaryConfig = SummaryConfig()
    plot: PlotConfig = PlotConfig()
    cohort: CohortConfig = CohortConfig()
    outputs: OutputsConfig = OutputsConfig()
