"""Output writers."""

from pathlib import Path

import pandas as pd


def write_csv(df: pd.DataFrame, path: str | Path, index: bool = False) -> Path:
    """Write a DataFrame to CSV, creating parent directories as needed."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(path, index=index)
    return path
