"""Cohort-level views of clinical and mutation tables."""

from mutation_glm.cohort.survival import (
    MUTATED,
    NO_MUT_DATA,
    NO_MUTATION_DETECTED,
    STATUS_ORDER,
    fit_status_survival,
    mutation_status_table,
    save_survival_plot,
    status_logrank_test,
)
from mutation_glm.cohort.validation import validate_clinical_table, validate_mutation_table

__all__ = [
    "MUTATED",
    "NO_MUT_DATA",
    "NO_MUTATION_DETECTED",
    "STATUS_ORDER",
    "fit_status_survival",
    "mutation_status_table",
    "save_survival_plot",
    "status_logrank_test",
    "validate_clinical_table",
    "validate_mutation_table",
]
