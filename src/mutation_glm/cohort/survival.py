"""Survival view of one mutation across the cohort.

Splits cohort samples into three groups for a given mutation and compares
their overall survival:
- Mutated: the sample carries the mutation (non-zero entry)
- No_Mut_Data: the sample has clinical data but was not sequenced
- No_Mutation_Detected: sequenced, mutation not observed

Kaplan-Meier curves and the log-rank test come from lifelines.
"""

from __future__ import annotations

from pathlib import Path

import matplotlib.pyplot as plt
import pandas as pd
import structlog
from lifelines import KaplanMeierFitter
from lifelines.statistics import logrank_test

from mutation_glm.cohort.validation import validate_clinical_table, validate_mutation_table
from mutation_glm.reporting.figures import save_dual_format, set_publication_style
from mutation_glm.summary.errors import FeatureLookupError

__all__ = [
    "MUTATED",
    "NO_MUTATION_DETECTED",
    "NO_MUT_DATA",
    "STATUS_ORDER",
    "fit_status_survival",
    "mutation_status_table",
    "save_survival_plot",
    "status_logrank_test",
]

log = structlog.get_logger()

MUTATED = "Mutated"
NO_MUT_DATA = "No_Mut_Data"
NO_MUTATION_DETECTED = "No_Mutation_Detected"
STATUS_ORDER = (MUTATED, NO_MUTATION_DETECTED, NO_MUT_DATA)

STATUS_COL = "Status"


def mutation_status_table(
    mutations: pd.DataFrame,
    clinical: pd.DataFrame,
    feature: str,
    sample_col: str = "sample",
    clinical_id_col: str = "sampleID",
    time_col: str = "OS",
    event_col: str = "OS_IND",
) -> pd.DataFrame:
    """Label every clinical sample with its status for one mutation.

    Parameters
    ----------
    mutations : pd.DataFrame
        Mutation-by-sample matrix: a sample id column plus one column per
        mutation; non-zero means mutated. Missing entries count as not
        mutated.
    clinical : pd.DataFrame
        Clinical table with sample id, survival time and event columns.
    feature : str
        Mutation column to inspect.
    sample_col, clinical_id_col, time_col, event_col : str
        Column names.

    Returns
    -------
    pd.DataFrame
        Columns [clinical_id_col, time_col, event_col, "Status"] in clinical
        row order.

    Raises
    ------
    FeatureLookupError
        If ``feature`` is not a column of ``mutations``.
    pandera.errors.SchemaErrors
        If either table fails validation.
    """
    if feature not in mutations.columns or feature == sample_col:
        raise FeatureLookupError([feature], stage="survival")

    mutations = validate_mutation_table(mutations, sample_col=sample_col)
    clinical = validate_clinical_table(
        clinical, id_col=clinical_id_col, time_col=time_col, event_col=event_col
    )

    flags = pd.to_numeric(mutations[feature], errors="coerce").fillna(0)
    mutated_samples = set(mutations.loc[flags != 0, sample_col])
    sequenced_samples = set(mutations[sample_col])

    table = clinical[[clinical_id_col, time_col, event_col]].copy()
    ids = table[clinical_id_col]
    status = pd.Series(NO_MUTATION_DETECTED, index=table.index)
    status.loc[~ids.isin(sequenced_samples)] = NO_MUT_DATA
    status.loc[ids.isin(mutated_samples)] = MUTATED
    table[STATUS_COL] = status
    table = table.reset_index(drop=True)

    log.info(
        "mutation_status_table",
        feature=feature,
        **{s.lower(): int((table[STATUS_COL] == s).sum()) for s in STATUS_ORDER},
    )
    return table


def fit_status_survival(
    table: pd.DataFrame,
    time_col: str = "OS",
    event_col: str = "OS_IND",
) -> dict[str, KaplanMeierFitter]:
    """Fit one Kaplan-Meier curve per status group.

    Samples without survival time or event indicator are left out. Groups
    with no remaining samples are omitted.

    Returns
    -------
    dict[str, KaplanMeierFitter]
        Status -> fitted estimator, in STATUS_ORDER.
    """
    complete = table.dropna(subset=[time_col, event_col])
    fitters: dict[str, KaplanMeierFitter] = {}
    for status in STATUS_ORDER:
        group = complete[complete[STATUS_COL] == status]
        if group.empty:
            continue
        kmf = KaplanMeierFitter()
        kmf.fit(
            group[time_col],
            event_observed=group[event_col],
            label=f"{status} (n={len(group)})",
        )
        fitters[status] = kmf
    log.debug("survival_fitted", groups=list(fitters))
    return fitters


def status_logrank_test(
    table: pd.DataFrame,
    time_col: str = "OS",
    event_col: str = "OS_IND",
) -> float | None:
    """Log-rank p-value comparing Mutated vs No_Mutation_Detected samples.

    Returns None when either group has no samples with complete survival
    data.
    """
    complete = table.dropna(subset=[time_col, event_col])
    mutated = complete[complete[STATUS_COL] == MUTATED]
    wild_type = complete[complete[STATUS_COL] == NO_MUTATION_DETECTED]
    if mutated.empty or wild_type.empty:
        return None
    result = logrank_test(
        mutated[time_col],
        wild_type[time_col],
        event_observed_A=mutated[event_col],
        event_observed_B=wild_type[event_col],
    )
    return float(result.p_value)


def save_survival_plot(
    table: pd.DataFrame,
    output_dir: Path,
    filename_base: str,
    title: str = "",
    time_col: str = "OS",
    event_col: str = "OS_IND",
    figsize: tuple[float, float] = (6.5, 4),
) -> tuple[Path, Path]:
    """Plot Kaplan-Meier curves per status group and save PDF + PNG.

    Raises
    ------
    ValueError
        If no sample has complete survival data.
    """
    fitters = fit_status_survival(table, time_col=time_col, event_col=event_col)
    if not fitters:
        raise ValueError("No samples with complete survival data to plot")

    with set_publication_style():
        fig, ax = plt.subplots(figsize=figsize)
        try:
            for kmf in fitters.values():
                kmf.plot_survival_function(ax=ax, ci_show=True)
            ax.set_xlabel("Overall survival")
            ax.set_ylabel("Survival probability")
            ax.set_ylim(0, 1.05)
            if title:
                ax.set_title(title)
            ax.legend(loc="center left", bbox_to_anchor=(1.0, 0.5))
            fig.tight_layout()
            pdf_path, png_path = save_dual_format(fig, output_dir, filename_base)
        finally:
            plt.close(fig)

    return pdf_path, png_path
