from __future__ import annotations

from pathlib import Path

import pandas as pd

SUPPORTED_SUFFIXES = (".parquet", ".pq", ".csv", ".json")


def export_table(df: pd.DataFrame, out: str) -> str:
    """
    Write a table to disk, picking the format from the file suffix.

    Unknown suffixes are replaced with .parquet. JSON is written as one record
    per line.

    Returns:
        Path actually written
    """
    p = Path(out)
    if p.suffix.lower() not in SUPPORTED_SUFFIXES:
        p = p.with_suffix(".parquet")
    p.parent.mkdir(parents=True, exist_ok=True)

    suffix = p.suffix.lower()
    if suffix == ".csv":
        df.to_csv(p, index=False)
    elif suffix == ".json":
        df.to_json(p, orient="records", lines=True)
    else:
        df.to_parquet(p, index=False)
    return str(p)
