"""
CollinearSelect (CSEL) - Pass 0: Numeric Matrix Preparation

Resolves the predictor columns of a training table and returns a clean
numeric matrix:
1. Drop omitted columns (coordinates, response)
2. Keep the explicitly selected columns, if any
3. Keep numeric columns only
4. Complete-case filtering (drop rows with any missing value)
"""

from typing import Any, Iterable, Mapping, Optional, Sequence, Union

import numpy as np
import pandas as pd

from Collinear_Select.filtering.errors import InsufficientDataError
from Collinear_Select.filtering.utils.logging import log


DEFAULT_OMIT_COLUMNS = ("x", "y", "presence")

Dataset = Union[pd.DataFrame, Sequence[Mapping[str, Any]]]


def _as_frame(dataset: Dataset) -> pd.DataFrame:
    if isinstance(dataset, pd.DataFrame):
        return dataset
    return pd.DataFrame.from_records(list(dataset))


def _is_numeric(series: pd.Series) -> bool:
    return pd.api.types.is_numeric_dtype(series) and not pd.api.types.is_bool_dtype(series)


def prepare_numeric_matrix(
    dataset: Dataset,
    omit_columns: Optional[Iterable[str]] = DEFAULT_OMIT_COLUMNS,
    select_columns: Optional[Sequence[str]] = None,
    verbose: bool = False,
) -> pd.DataFrame:
    """
    Build the numeric matrix used by both selectors

    Args:
        dataset: DataFrame or sequence of row mappings (name → value)
        omit_columns: Columns to exclude; names absent from the dataset are ignored
        select_columns: Columns to keep (None = every remaining column)
        verbose: Log the preparation summary

    Returns:
        float64 DataFrame with complete rows only and string column labels

    Raises:
        InsufficientDataError: fewer than 2 numeric columns or 2 complete rows
    """
    df = _as_frame(dataset)
    omit = set(omit_columns or ())

    if select_columns is not None:
        missing = [c for c in select_columns if c not in df.columns]
        if missing:
            log(f"  select_columns not found in dataset, ignored: {missing}", verbose)
        columns = [c for c in dict.fromkeys(select_columns) if c in df.columns and c not in omit]
    else:
        columns = [c for c in df.columns if c not in omit]

    numeric_columns = [c for c in columns if _is_numeric(df[c])]
    dropped = [c for c in columns if c not in numeric_columns]
    if dropped:
        log(f"  Non-numeric columns dropped: {dropped}", verbose)

    if len(numeric_columns) < 2:
        raise InsufficientDataError(
            f"At least 2 numeric columns are required, found {len(numeric_columns)}: "
            f"{numeric_columns}",
            columns=numeric_columns,
            n_rows=len(df),
        )

    matrix = df[numeric_columns].astype(np.float64)
    matrix.columns = [str(c) for c in numeric_columns]
    finite = np.isfinite(matrix.to_numpy()).all(axis=1)
    matrix = matrix.loc[finite]

    if len(matrix) < 2:
        raise InsufficientDataError(
            f"At least 2 complete rows are required, found {len(matrix)} "
            f"(of {len(df)}) over columns {numeric_columns}",
            columns=numeric_columns,
            n_rows=len(matrix),
        )

    log(
        f"  Numeric matrix: {len(matrix)} complete rows (of {len(df)}) "
        f"x {len(numeric_columns)} variables",
        verbose,
    )

    return matrix
