"""
Correlation dendrogram selection

- Exploratory mode (no ranking): complete-linkage dendrogram over 1 - |r|,
  every variable is returned; the dendrogram and the 1 - max_cor marker are
  meant for manual inspection.
- Ranked mode (ranking supplied): single-linkage dendrogram, linear search
  over cutoff heights; each flat group keeps its best-ranked variable and the
  first cutoff whose representatives satisfy max |r| <= max_cor wins.
"""

from enum import Enum
from typing import Dict, List, Mapping, Optional, Tuple

import numpy as np
import pandas as pd
from scipy.cluster.hierarchy import fcluster, linkage

from Collinear_Select.filtering.errors import ThresholdUnreachableError
from Collinear_Select.filtering.passes.correlation import CorrelationEngine
from Collinear_Select.filtering.render import build_dendrogram_description
from Collinear_Select.filtering.result import SelectionMethod, SelectionResult
from Collinear_Select.filtering.utils.logging import log


class ClusterMode(str, Enum):
    EXPLORATORY = "exploratory"
    RANKED = "ranked"


def cut_groups(linkage_matrix: np.ndarray, height: float) -> np.ndarray:
    """Flat group ids after cutting the tree at `height` (merges <= height join)"""
    return fcluster(linkage_matrix, t=height, criterion="distance")


def _renumber(groups) -> List[int]:
    """Group ids 1..k in order of first appearance"""
    mapping: Dict[int, int] = {}
    for g in groups:
        if g not in mapping:
            mapping[g] = len(mapping) + 1
    return [mapping[g] for g in groups]


class ClusterSelector:
    """
    Dendrogram-based selection bounded by a maximum Pearson correlation

    Usage:
        selector = ClusterSelector(max_cor=0.75)
        result = selector.select(matrix, ranking={"bio1": 0.42, ...})
        result.selected
    """

    def __init__(
        self,
        max_cor: float = 0.75,
        n_steps: int = 200,
        exploratory_linkage: str = "complete",
        ranked_linkage: str = "single",
        verbose: bool = True,
        log_file: Optional[str] = None,
    ):
        if not 0.0 <= max_cor <= 1.0:
            raise ValueError(f"max_cor must be in [0, 1], got {max_cor}")
        if n_steps < 1:
            raise ValueError(f"n_steps must be >= 1, got {n_steps}")
        self.max_cor = float(max_cor)
        self.n_steps = int(n_steps)
        self.exploratory_linkage = exploratory_linkage
        self.ranked_linkage = ranked_linkage
        self.verbose = verbose
        self.log_file = log_file

    def _log(self, msg: str):
        log(msg, self.verbose, self.log_file)

    def _representatives(
        self,
        columns: List[str],
        groups,
        scores: Dict[str, float],
    ) -> List[str]:
        """Best-scored variable of every group; ties go to the first column"""
        best: Dict[int, Tuple[str, float]] = {}
        for name, group in zip(columns, groups):
            score = scores.get(name, np.nan)
            if not np.isfinite(score):
                score = -np.inf
            if group not in best or score > best[group][1]:
                best[group] = (name, score)
        chosen = {name for name, _ in best.values()}
        return [c for c in columns if c in chosen]

    def select(
        self,
        matrix: pd.DataFrame,
        ranking: Optional[Mapping[str, float]] = None,
        mode: Optional[ClusterMode] = None,
        engine: Optional[CorrelationEngine] = None,
    ) -> SelectionResult:
        """
        Run the dendrogram selection

        Args:
            matrix: Numeric matrix (see prepare_numeric_matrix)
            ranking: Variable → score, higher is preferred (None = exploratory)
            mode: Force a mode; defaults to RANKED iff a ranking is given
            engine: Pre-computed CorrelationEngine for `matrix`

        Returns:
            SelectionResult with a variable/group/score/selected table

        Raises:
            DegenerateVarianceError: zero-variance column
            ThresholdUnreachableError: no cutoff met max_cor
        """
        if mode is None:
            mode = ClusterMode.RANKED if ranking is not None else ClusterMode.EXPLORATORY
        mode = ClusterMode(mode)
        if mode is ClusterMode.RANKED and ranking is None:
            raise ValueError("Ranked cluster selection requires a ranking")

        self._log("\n" + "=" * 60)
        self._log(f"Correlation Dendrogram Selection ({mode.value})")
        self._log("=" * 60)
        self._log(f"max_cor: {self.max_cor}")

        engine = engine or CorrelationEngine(matrix)
        scores = {str(k): float(v) for k, v in (ranking or {}).items()}

        if mode is ClusterMode.EXPLORATORY:
            return self._select_exploratory(engine, scores)
        return self._select_ranked(engine, scores)

    def _select_exploratory(self, engine: CorrelationEngine, scores: Dict[str, float]) -> SelectionResult:
        columns = engine.columns
        tree = linkage(engine.condensed_distance(), method=self.exploratory_linkage)

        table = pd.DataFrame({
            "variable": columns,
            "group": list(range(1, len(columns) + 1)),
            "score": [scores.get(c, np.nan) for c in columns],
            "selected": [True] * len(columns),
        })
        observed = engine.max_abs_correlation(columns)

        self._log(f"Variables: {len(columns)} (no automatic removal)")
        self._log(f"Observed max |r|: {observed:.3f}")

        render = build_dendrogram_description(
            tree,
            columns,
            threshold=1.0 - self.max_cor,
            scores=scores,
            y_label="1 - correlation",
        )

        return SelectionResult(
            method=SelectionMethod.CLUSTER,
            mode=ClusterMode.EXPLORATORY.value,
            selected=tuple(columns),
            table=table,
            max_cor=self.max_cor,
            observed_max_cor=observed,
            render=render,
        )

    def _select_ranked(self, engine: CorrelationEngine, scores: Dict[str, float]) -> SelectionResult:
        columns = engine.columns
        tree = linkage(engine.condensed_distance(), method=self.ranked_linkage)
        heights = tree[:, 2]
        lo, hi = float(heights.min()), float(heights.max())

        observed = engine.max_abs_correlation(columns)
        cutoff: Optional[float] = None
        step = 0

        if observed <= self.max_cor:
            self._log(f"All {len(columns)} variables already satisfy max |r| = {observed:.3f}")
            groups = list(range(1, len(columns) + 1))
            selected = list(columns)
        elif hi <= lo:
            self._log(f"Degenerate height range [{lo:.4f}, {hi:.4f}]: one group")
            groups = [1] * len(columns)
            selected = self._representatives(columns, groups, scores)
            cutoff, step = hi, 1
            observed = engine.max_abs_correlation(selected)
        else:
            height_step = (hi - lo) / self.n_steps
            self._log(f"Height range: [{lo:.4f}, {hi:.4f}], step = {height_step:.5f}")
            best_observed = None

            for i in range(1, self.n_steps + 1):
                height = hi if i == self.n_steps else lo + height_step * i
                groups = cut_groups(tree, height)
                selected = self._representatives(columns, groups, scores)
                observed = engine.max_abs_correlation(selected)

                if best_observed is None or observed < best_observed:
                    best_observed = observed
                if observed <= self.max_cor:
                    cutoff, step = height, i
                    break
            else:
                raise ThresholdUnreachableError(self.max_cor, best_observed, self.n_steps)

        groups = _renumber(groups)
        chosen = set(selected)
        table = pd.DataFrame({
            "variable": columns,
            "group": groups,
            "score": [scores.get(c, np.nan) for c in columns],
            "selected": [c in chosen for c in columns],
        })

        if cutoff is not None:
            self._log(f"Cutoff height: {cutoff:.4f} (step {step}/{self.n_steps})")
        self._log(f"Groups: {len(set(groups))}")
        self._log(f"Selected: {len(selected)} of {len(columns)} (max |r| = {observed:.3f})")
        dropped = [c for c in columns if c not in chosen]
        if dropped:
            self._log(f"Removed: {dropped}")

        render = build_dendrogram_description(
            tree,
            columns,
            threshold=cutoff if cutoff is not None else 1.0 - self.max_cor,
            scores=scores,
            selected=selected,
            y_label="Correlation difference",
            score_label="Biserial correlation",
        )

        return SelectionResult(
            method=SelectionMethod.CLUSTER,
            mode=ClusterMode.RANKED.value,
            selected=tuple(selected),
            table=table,
            max_cor=self.max_cor,
            cutoff_height=cutoff,
            step=step,
            observed_max_cor=observed,
            render=render,
        )


def run_cluster_selection(
    matrix: pd.DataFrame,
    ranking: Optional[Mapping[str, float]] = None,
    max_cor: float = 0.75,
    n_steps: int = 200,
    verbose: bool = True,
) -> SelectionResult:
    """
    Convenience function
    """
    selector = ClusterSelector(max_cor=max_cor, n_steps=n_steps, verbose=verbose)
    return selector.select(matrix, ranking=ranking)
