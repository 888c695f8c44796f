"""
Pearson correlation and correlation-distance matrices

The matrix is computed once per call over the complete-case numeric matrix;
subsets are read from it, since every column shares the same rows.
"""

from typing import List, Optional, Sequence

import numpy as np
import pandas as pd
from scipy.spatial.distance import squareform

from Collinear_Select.filtering.errors import DegenerateVarianceError


class CorrelationEngine:
    """
    Absolute Pearson correlation and 1 - |r| distance over named variables

    Usage:
        engine = CorrelationEngine(matrix)
        engine.correlation          # DataFrame, unit diagonal
        engine.max_abs_correlation(["bio1", "bio5"])
    """

    def __init__(self, matrix: pd.DataFrame):
        self.columns: List[str] = [str(c) for c in matrix.columns]
        values = matrix.to_numpy(dtype=np.float64)

        variances = values.var(axis=0, ddof=1)
        spans = np.ptp(values, axis=0)
        degenerate = {
            name: float(var)
            for name, var, span in zip(self.columns, variances, spans)
            if not np.isfinite(var) or span == 0.0
        }
        if degenerate:
            raise DegenerateVarianceError(degenerate)

        corr = np.corrcoef(values, rowvar=False)
        corr = np.clip(corr, -1.0, 1.0)
        corr = (corr + corr.T) / 2.0
        np.fill_diagonal(corr, 1.0)

        self._corr = corr
        self._index = {name: i for i, name in enumerate(self.columns)}

    @property
    def correlation(self) -> pd.DataFrame:
        return pd.DataFrame(self._corr, index=self.columns, columns=self.columns)

    @property
    def distance(self) -> pd.DataFrame:
        return pd.DataFrame(self._distance_array(), index=self.columns, columns=self.columns)

    def _indices(self, names: Optional[Sequence[str]]) -> List[int]:
        if names is None:
            return list(range(len(self.columns)))
        return [self._index[name] for name in names]

    def _distance_array(self, idx: Optional[List[int]] = None) -> np.ndarray:
        corr = self._corr if idx is None else self._corr[np.ix_(idx, idx)]
        dist = np.clip(1.0 - np.abs(corr), 0.0, 1.0)
        np.fill_diagonal(dist, 0.0)
        return dist

    def condensed_distance(self, names: Optional[Sequence[str]] = None) -> np.ndarray:
        """Condensed 1 - |r| vector (scipy linkage input)"""
        dist = self._distance_array(self._indices(names))
        return squareform(dist, checks=False)

    def max_abs_correlation(self, names: Sequence[str]) -> float:
        """
        Maximum absolute off-diagonal correlation within a subset

        Returns 0.0 when the subset has fewer than 2 variables.
        """
        idx = self._indices(list(dict.fromkeys(names)))
        if len(idx) < 2:
            return 0.0
        sub = np.abs(self._corr[np.ix_(idx, idx)])
        upper = sub[np.triu_indices(len(idx), k=1)]
        return float(upper.max())
