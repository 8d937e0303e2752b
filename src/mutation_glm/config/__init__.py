"""Configuration models and YAML loading."""

from mutation_glm.config.loader import load_config
from mutation_glm.config.schema import (
    AppConfig,
    CohortConfig,
    OutputsConfig,
    PlotConfig,
    RowLayout,
    SummaryConfig,
)

__all__ = [
    "AppConfig",
    "CohortConfig",
    "OutputsConfig",
    "PlotConfig",
    "RowLayout",
    "SummaryConfig",
    "load_config",
]
