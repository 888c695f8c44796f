"""
Ranking scores from an external relevance table

The scores themselves (e.g. biserial correlation R2 against a presence /
background response) are produced elsewhere; this module only turns such a
table into a variable → score mapping.
"""

from typing import Dict, Mapping, Union

import numpy as np
import pandas as pd


def ranking_from_table(
    table: Union[pd.DataFrame, Mapping[str, float]],
    variable_col: str = "variable",
    score_col: str = "R2",
) -> Dict[str, float]:
    """
    Build a RankingScore mapping

    Args:
        table: DataFrame with variable / score columns, or a ready mapping
        variable_col: Column holding the variable names
        score_col: Column holding the scores (higher = preferred)

    Returns:
        {variable: score}; rows with missing scores are skipped, the first
        row wins for duplicated variables
    """
    if not isinstance(table, pd.DataFrame):
        return {str(k): float(v) for k, v in table.items() if v is not None and np.isfinite(v)}

    missing = [c for c in (variable_col, score_col) if c not in table.columns]
    if missing:
        raise KeyError(f"Ranking table is missing column(s) {missing}; found {list(table.columns)}")

    scores: Dict[str, float] = {}
    for name, score in zip(table[variable_col], pd.to_numeric(table[score_col], errors="coerce")):
        if pd.isna(score) or str(name) in scores:
            continue
        scores[str(name)] = float(score)
    return scores
