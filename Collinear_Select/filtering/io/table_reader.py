"""
Training table reader (CSV / Parquet / JSON)
"""

from pathlib import Path

import pandas as pd


def read_table(path: str | Path) -> pd.DataFrame:
    """
    Read a tabular file into a DataFrame

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the extension is not supported
    """
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"Input table not found: {path}")

    suffix = file_path.suffix.lower()
    if suffix in {".csv", ".txt"}:
        return pd.read_csv(file_path)
    if suffix == ".tsv":
        return pd.read_csv(file_path, sep="\t")
    if suffix in {".parquet", ".pq"}:
        return pd.read_parquet(file_path, engine="pyarrow")
    if suffix == ".json":
        return pd.read_json(file_path)

    raise ValueError(
        f"Unsupported table format: {suffix}. "
        f"Supported formats: .csv, .tsv, .txt, .parquet, .pq, .json"
    )
