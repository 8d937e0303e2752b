"""Schema validation for cohort clinical and mutation tables."""

import pandas as pd
import pandera.pandas as pa


def clinical_schema(
    id_col: str = "sampleID",
    time_col: str = "OS",
    event_col: str = "OS_IND",
) -> pa.DataFrameSchema:
    """Schema for the clinical table: one row per sample with survival columns.

    Survival time and event indicator may be missing (not every sample has
    follow-up); they are dropped later when fitting survival curves.
    """
    return pa.DataFrameSchema(
        {
            id_col: pa.Column(str, nullable=False, unique=True),
            time_col: pa.Column(float, pa.Check.ge(0), nullable=True),
            event_col: pa.Column(float, pa.Check.isin([0, 1]), nullable=True),
        },
        strict=False,  # Other clinical covariates are allowed
        coerce=True,
    )


def mutation_schema(sample_col: str = "sample") -> pa.DataFrameSchema:
    """Schema for the mutation-by-sample matrix (one row per sequenced sample)."""
    return pa.DataFrameSchema(
        {sample_col: pa.Column(str, nullable=False, unique=True)},
        strict=False,  # One numeric column per mutation
        coerce=True,
    )


def validate_clinical_table(
    df: pd.DataFrame,
    id_col: str = "sampleID",
    time_col: str = "OS",
    event_col: str = "OS_IND",
    lazy: bool = True,
) -> pd.DataFrame:
    """
    Validate a clinical table.

    Args:
        df: Clinical table
        id_col: Sample identifier column
        time_col: Overall survival time column
        event_col: Event indicator column (1 = death observed)
        lazy: If True, collect all errors before raising. If False, fail fast.

    Returns:
        Validated DataFrame (with types coerced)

    Raises:
        pa.errors.SchemaErrors: If validation fails with lazy=True
        pa.errors.SchemaError: If validation fails with lazy=False
    """
    return clinical_schema(id_col, time_col, event_col).validate(df, lazy=lazy)


def validate_mutation_table(
    df: pd.DataFrame,
    sample_col: str = "sample",
    lazy: bool = True,
) -> pd.DataFrame:
    """
    Validate a mutation-by-sample table.

    Args:
        df: Mutation table, one row per sequenced sample
        sample_col: Sample identifier column
        lazy: If True, collect all errors before raising. If False, fail fast.

    Returns:
        Validated DataFrame (with types coerced)
    """
    return mutation_schema(sample_col).validate(df, lazy=lazy)
