"""Publication-quality figure generation for posterior reports.

All figures use a colorblind-safe palette and export to both PDF (vector)
and PNG (300dpi raster) formats.

Key features:
- Consistent publication styling via context manager
- Colorblind-safe color palette (Wong, 2011)
- Effect (forest) plot of posterior mean +/- SD per parameter
- Dual-format export (PDF + PNG)
- Figures closed after saving

Usage:
    >>> from mutation_glm.reporting.figures import save_effect_plot
    >>> pdf, png = save_effect_plot(report, Path("figs"), "effect_plot")
"""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING

import matplotlib.pyplot as plt
import numpy as np

if TYPE_CHECKING:
    from collections.abc import Generator

    from matplotlib.axes import Axes

    from mutation_glm.reporting.report import Report

__all__ = [
    "COLORBLIND_COLORS",
    "DEFAULT_TITLE",
    "DEFAULT_XLABEL",
    "DEFAULT_YLABEL",
    "PUBLICATION_RC",
    "plot_effects",
    "save_dual_format",
    "save_effect_plot",
    "set_publication_style",
]

# Colorblind-safe palette from Wong (2011), Nature Methods
# https://www.nature.com/articles/nmeth.1618
COLORBLIND_COLORS = [
    "#0072B2",  # Blue
    "#E69F00",  # Orange
    "#009E73",  # Green
    "#CC79A7",  # Pink
    "#F0E442",  # Yellow
    "#56B4E9",  # Light blue
    "#D55E00",  # Red-orange
]

DEFAULT_TITLE = "Effects of Gene Variants on Survival"
DEFAULT_XLABEL = "Mean +/- SD"
DEFAULT_YLABEL = "Gene Variants"


# rcParams shared by every manuscript figure
PUBLICATION_RC = {
    "font.family": "serif",
    "font.serif": ["Times New Roman", "DejaVu Serif"],
    "font.size": 9,
    "axes.labelsize": 9,
    "axes.titlesize": 10,
    "xtick.labelsize": 8,
    "ytick.labelsize": 8,
    "legend.fontsize": 8,
    "figure.dpi": 100,
    "savefig.dpi": 300,
    "pdf.fonttype": 42,
    "ps.fonttype": 42,
    "lines.linewidth": 1.5,
    "axes.linewidth": 0.8,
    "axes.spines.top": False,
    "axes.spines.right": False,
    "axes.prop_cycle": plt.cycler("color", COLORBLIND_COLORS),
}


@contextmanager
def set_publication_style(**overrides) -> Generator[None, None, None]:
    """Apply PUBLICATION_RC (plus ``overrides``) for the duration of a block.

    rcParams are restored on exit. Override keys use rcParams names with
    dots replaced by double underscores, e.g. ``font__size=11``.

    Example:
        >>> with set_publication_style(savefig__dpi=600):
        ...     fig, ax = plt.subplots()
    """
    params = dict(PUBLICATION_RC)
    params.update({key.replace("__", "."): value for key, value in overrides.items()})
    with plt.rc_context(params):
        yield


def save_dual_format(
    fig: plt.Figure,
    output_dir: Path,
    filename_base: str,
    formats: tuple[str, ...] = ("pdf", "png"),
    dpi: int = 300,
) -> tuple[Path, ...]:
    """Save ``fig`` as ``<output_dir>/<filename_base>.<fmt>`` for each format.

    The output directory is created if needed. Raster formats use ``dpi``;
    the figure is not closed.

    Returns
    -------
    tuple[Path, ...]
        One path per format, in order; (pdf, png) by default.
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    paths = []
    for fmt in formats:
        path = output_dir / f"{filename_base}.{fmt}"
        fig.savefig(path, bbox_inches="tight", format=fmt, dpi=dpi)
        paths.append(path)
    return tuple(paths)


def plot_effects(
    report: Report,
    ax: Axes | None = None,
    title: str = DEFAULT_TITLE,
    xlabel: str = DEFAULT_XLABEL,
    ylabel: str = DEFAULT_YLABEL,
) -> Axes:
    """Draw posterior mean +/- SD per parameter on one axis.

    Row ``k`` of the report is drawn at y = k + 1, so the first (lowest
    mean) row sits at the bottom and the y tick labels follow report order.
    The x range spans exactly the union of the mean +/- SD intervals.

    Parameters
    ----------
    report : Report
        Ordered posterior report.
    ax : Axes, optional
        Axis to draw on. A new figure is created if None.
    title, xlabel, ylabel : str
        Axis annotations.

    Returns
    -------
    Axes
        The axis drawn on.

    Raises
    ------
    ValueError
        If the report has no rows, or a mean or sd is not finite.
    """
    if len(report) == 0:
        raise ValueError("Cannot plot an empty report")

    means = np.array([row.mean for row in report], dtype=float)
    sds = np.array([row.sd for row in report], dtype=float)
    bad = [
        name
        for name, mean, sd in zip(report.names, means, sds)
        if not (np.isfinite(mean) and np.isfinite(sd))
    ]
    if bad:
        raise ValueError(f"Cannot plot non-finite mean or sd for: {', '.join(bad)}")
    positions = np.arange(1, len(report) + 1)

    if ax is None:
        height = max(0.3 * len(report) + 1.5, 3)
        _, ax = plt.subplots(figsize=(6.5, height))

    ax.errorbar(
        means,
        positions,
        xerr=sds,
        fmt="o",
        color=COLORBLIND_COLORS[0],
        ecolor=COLORBLIND_COLORS[0],
        markersize=5,
        capsize=0,
        elinewidth=1.2,
    )

    lower = float(np.min(means - sds))
    upper = float(np.max(means + sds))
    if lower == upper:
        # Zero-width span (single row with sd == 0)
        pad = max(abs(lower) * 0.05, 0.5)
        lower, upper = lower - pad, upper + pad
    ax.set_xlim(lower, upper)
    ax.axvline(x=0, color="gray", linewidth=1, linestyle="--", alpha=0.7)

    ax.set_yticks(positions)
    ax.set_yticklabels(report.names)
    ax.set_ylim(0.5, len(report) + 0.5)

    ax.set_xlabel(xlabel)
    ax.set_ylabel(ylabel)
    ax.set_title(title)
    return ax


def save_effect_plot(
    report: Report,
    output_dir: Path,
    filename_base: str,
    title: str = DEFAULT_TITLE,
    xlabel: str = DEFAULT_XLABEL,
    ylabel: str = DEFAULT_YLABEL,
    figsize: tuple[float, float] | None = None,
) -> tuple[Path, Path]:
    """Generate and save the effect plot in PDF and PNG formats.

    Parameters
    ----------
    report : Report
        Ordered posterior report.
    output_dir : Path
        Directory to save figures.
    filename_base : str
        Base filename without extension.
    title, xlabel, ylabel : str
        Axis annotations.
    figsize : tuple[float, float], optional
        Figure size in inches. If None, auto-sizes on the number of
        rows: (6.5, max(0.3 * n_rows + 1.5, 3)).

    Returns
    -------
    tuple[Path, Path]
        Paths to (pdf_file, png_file).

    Examples
    --------
    >>> report = summarize_fit(fit)
    >>> pdf, png = save_effect_plot(report, Path("figs"), "effect_plot")
    """
    with set_publication_style():
        if figsize is None:
            figsize = (6.5, max(0.3 * len(report) + 1.5, 3))

        fig, ax = plt.subplots(figsize=figsize)
        try:
            plot_effects(report, ax=ax, title=title, xlabel=xlabel, ylabel=ylabel)
            fig.tight_layout()
            pdf_path, png_path = save_dual_format(fig, output_dir, filename_base)
        finally:
            plt.close(fig)

    return pdf_path, png_path
