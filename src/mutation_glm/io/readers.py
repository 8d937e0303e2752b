"""Input readers for exported fits and cohort tables."""

from pathlib import Path

import pandas as pd

# Xena/cBioPortal exports are usually tab-separated
_TAB_SUFFIXES = {".tsv", ".txt", ".tab"}


def read_csv(path: str | Path, encoding: str = "utf-8-sig", **kwargs) -> pd.DataFrame:
    """
    Read a delimited table, choosing the separator from the file suffix.

    Args:
        path: Path to a .csv file, or a .tsv/.txt/.tab file (tab-separated)
        encoding: Encoding to use (default utf-8-sig handles BOM)
        **kwargs: Additional arguments passed to pd.read_csv; an explicit
            ``sep`` overrides the suffix rule

    Returns:
        DataFrame with data from the file
    """
    path = Path(path)
    if "sep" not in kwargs and path.suffix.lower() in _TAB_SUFFIXES:
        kwargs["sep"] = "\t"
    return pd.read_csv(path, encoding=encoding, **kwargs)
