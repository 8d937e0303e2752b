"""Command-line interface for posterior feature reports.

Usage:
    mutation-glm report fits/os_glm --features TP53,IDH1
    mutation-glm report fits/os_glm.nc --layout named --no-plot
    mutation-glm report fits/brms_fit.nc --intercept b_Intercept
    mutation-glm survival mutations.csv clinical.csv TP53
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Optional

import structlog
import typer
from pandera.errors import SchemaError, SchemaErrors

from mutation_glm import __version__

log = structlog.get_logger()

app = typer.Typer(
    add_completion=False,
    help="Posterior summaries for Bayesian GLMs of clinical and mutation data.",
    invoke_without_command=True,
)

# Exit codes outside the SummaryError range
EXIT_MISSING_INPUT = 2
EXIT_INVALID_TABLE = 3


def _parse_features(features: Optional[str]) -> list[str] | None:
    if features is None:
        return None
    return [f.strip() for f in features.split(",") if f.strip()]


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit.",
    ),
) -> None:
    """Posterior summaries for Bayesian GLMs."""
    if version:
        typer.echo(f"mutation-glm version {__version__}")
        raise typer.Exit()
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


@app.command("report")
def report(
    fit_path: Path = typer.Argument(
        ...,
        help="Fit to summarize: ArviZ .nc file or directory with summary.csv and covmat.csv",
    ),
    features: Optional[str] = typer.Option(
        None,
        "--features",
        "-f",
        help="Comma-separated parameter names to include (default: all)",
    ),
    config: Optional[list[Path]] = typer.Option(
        None,
        "--config",
        "-c",
        help="YAML config file(s); later files override earlier ones",
    ),
    threshold: Annotated[Optional[float], typer.Option(
        min=0.0,
        max=0.999,
        help="Correlation magnitude above which parameters are annotated (default 0.5)",
    )] = None,
    lenient: bool = typer.Option(
        False,
        "--lenient",
        help="Ignore unknown feature names instead of failing",
    ),
    layout: Optional[str] = typer.Option(
        None,
        "--layout",
        help="Summary row layout: 'positional' (rstanarm) or 'named'",
    ),
    intercept: Optional[str] = typer.Option(
        None,
        "--intercept",
        help="Posterior intercept variable of a .nc fit (default: Intercept)",
    ),
    output_dir: Optional[Path] = typer.Option(
        None,
        "--output-dir",
        "-o",
        help="Directory for table and figure files (default from config: reports)",
    ),
    plot: bool = typer.Option(
        True,
        "--plot/--no-plot",
        help="Also save the effect plot",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable DEBUG logging",
    ),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        help="Write JSON DEBUG log to this file",
    ),
) -> None:
    """Summarize a fitted model: ordered posterior effects with correlated features.

    Prints the feature table, writes it as CSV/LaTeX, and saves the effect
    plot (mean +/- SD per parameter, ordered by mean).

    Examples:
        # All coefficients of an exported rstanarm fit
        mutation-glm report fits/os_glm

        # Selected mutations, stricter correlation cut-off
        mutation-glm report fits/os_glm -f TP53,IDH1,EGFR --threshold 0.7
    """
    from mutation_glm.config.loader import load_config
    from mutation_glm.config.schema import RowLayout
    from mutation_glm.models.io import load_fit_result
    from mutation_glm.reporting.figures import save_effect_plot
    from mutation_glm.reporting.report import summarize_fit
    from mutation_glm.reporting.tables import create_feature_table, export_table
    from mutation_glm.summary.errors import SummaryError
    from mutation_glm.utils.logging import setup_logging

    setup_logging(verbose=verbose, log_file=log_file)

    cfg = load_config(config or None)
    summary_cfg = cfg.summary
    updates: dict = {}
    if threshold is not None:
        updates["threshold"] = threshold
    if lenient:
        updates["strict_subset"] = False
    if layout is not None:
        if layout not in ("positional", "named"):
            raise typer.BadParameter("must be 'positional' or 'named'", param_hint="--layout")
        base = summary_cfg.layout or RowLayout()
        updates["layout"] = base.model_copy(update={"mode": layout})
    if intercept is not None:
        updates["intercept_var"] = intercept
    if updates:
        summary_cfg = summary_cfg.model_copy(update=updates)

    out_dir = output_dir if output_dir is not None else Path(cfg.outputs.report_dir)

    try:
        fit = load_fit_result(
            fit_path,
            layout=summary_cfg.layout,
            intercept_name=summary_cfg.intercept_var,
        )
        # The loader has already applied the layout
        result = summarize_fit(
            fit,
            _parse_features(features),
            config=summary_cfg.model_copy(update={"layout": None}),
        )
    except FileNotFoundError as e:
        log.error("fit_not_found", error=str(e))
        raise typer.Exit(code=EXIT_MISSING_INPUT)
    except SummaryError as e:
        log.error("summary_failed", error=str(e), exit_code=e.exit_code)
        raise typer.Exit(code=e.exit_code)

    table = create_feature_table(result)
    typer.echo(table.to_string())

    paths = export_table(
        table,
        out_dir / cfg.outputs.table_name,
        formats=tuple(cfg.outputs.table_formats),
        caption=cfg.plot.title,
    )
    log.info("table_saved", paths=[str(p) for p in paths])

    if plot and cfg.plot.enabled:
        if len(result) == 0:
            log.warning("effect_plot_skipped", reason="empty report")
        else:
            pdf_path, png_path = save_effect_plot(
                result,
                out_dir,
                cfg.outputs.plot_name,
                title=cfg.plot.title,
                xlabel=cfg.plot.xlabel,
                ylabel=cfg.plot.ylabel,
            )
            log.info("effect_plot_saved", pdf=str(pdf_path), png=str(png_path))


@app.command("survival")
def survival(
    mutations_csv: Path = typer.Argument(..., help="Mutation-by-sample CSV"),
    clinical_csv: Path = typer.Argument(..., help="Clinical CSV with survival columns"),
    feature: str = typer.Argument(..., help="Mutation column to inspect"),
    config: Optional[list[Path]] = typer.Option(
        None,
        "--config",
        "-c",
        help="YAML config file(s); later files override earlier ones",
    ),
    output_dir: Optional[Path] = typer.Option(
        None,
        "--output-dir",
        "-o",
        help="Directory for the status table and survival plot",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable DEBUG logging",
    ),
) -> None:
    """Compare survival of mutated, wild-type and unsequenced samples.

    Writes <feature>_status.csv and a Kaplan-Meier plot, and prints the
    log-rank p-value for mutated vs. no mutation detected.
    """
    from mutation_glm.cohort.survival import (
        mutation_status_table,
        save_survival_plot,
        status_logrank_test,
    )
    from mutation_glm.config.loader import load_config
    from mutation_glm.io.readers import read_csv
    from mutation_glm.io.writers import write_csv
    from mutation_glm.summary.errors import SummaryError
    from mutation_glm.utils.logging import setup_logging

    setup_logging(verbose=verbose)
    cfg = load_config(config or None)
    cohort = cfg.cohort
    out_dir = output_dir if output_dir is not None else Path(cfg.outputs.report_dir)

    for path in (mutations_csv, clinical_csv):
        if not path.exists():
            log.error("input_not_found", path=str(path))
            raise typer.Exit(code=EXIT_MISSING_INPUT)

    try:
        table = mutation_status_table(
            read_csv(mutations_csv),
            read_csv(clinical_csv),
            feature,
            sample_col=cohort.sample_col,
            clinical_id_col=cohort.clinical_id_col,
            time_col=cohort.time_col,
            event_col=cohort.event_col,
        )
    except SummaryError as e:
        log.error("survival_failed", error=str(e), exit_code=e.exit_code)
        raise typer.Exit(code=e.exit_code)
    except (SchemaError, SchemaErrors) as e:
        log.error("invalid_cohort_table", error=str(e))
        raise typer.Exit(code=EXIT_INVALID_TABLE)

    status_path = write_csv(table, out_dir / f"{feature}_status.csv")
    typer.echo(table["Status"].value_counts().to_string())

    p_value = status_logrank_test(table, time_col=cohort.time_col, event_col=cohort.event_col)
    if p_value is not None:
        typer.echo(f"log-rank p-value (Mutated vs No_Mutation_Detected): {p_value:.4g}")

    try:
        pdf_path, png_path = save_survival_plot(
            table,
            out_dir,
            f"{feature}_survival",
            title=feature,
            time_col=cohort.time_col,
            event_col=cohort.event_col,
        )
    except ValueError as e:
        log.warning("survival_plot_skipped", reason=str(e), table=str(status_path))
        return
    log.info("survival_saved", table=str(status_path), pdf=str(pdf_path), png=str(png_path))


def main() -> None:
    app()


if __name__ == "__main__":
    main()
