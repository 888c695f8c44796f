"""
Iterative VIF selection

VIF(v | S) = 1 / (1 - R²), R² of regressing v on the other members of S
(with intercept). Every refresh recomputes the whole table, since each VIF
depends on the full candidate set.

Policies:
1. MAX_VIF: drop the highest-VIF variable until every VIF <= threshold
2. PREFERENCE: walk a preference order, accept a variable only if the
   grown set still has every VIF <= threshold
3. HYBRID: PREFERENCE over the ordered subset, MAX_VIF over the rest,
   then PREFERENCE over the union (ordered subset first)
"""

import warnings
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

import numpy as np
import pandas as pd
from statsmodels.stats.outliers_influence import variance_inflation_factor
from statsmodels.tools.tools import add_constant

from Collinear_Select.filtering.errors import SingularCandidateError
from Collinear_Select.filtering.result import SelectionMethod, SelectionResult
from Collinear_Select.filtering.utils.logging import log


class VIFPolicy(str, Enum):
    MAX_VIF = "max_vif"
    PREFERENCE = "preference"
    HYBRID = "hybrid"


def resolve_preference_order(
    candidates: Sequence[str],
    ranking: Optional[Mapping[str, float]] = None,
    preference_order: Optional[Sequence[str]] = None,
) -> Optional[List[str]]:
    """
    Preference order restricted to the candidates

    An explicit order wins over a ranking. A ranking is sorted by descending
    score (ties keep candidate order); unscored variables are left out.
    """
    known = set(candidates)
    if preference_order is not None:
        return [v for v in dict.fromkeys(preference_order) if v in known]
    if ranking is not None:
        scored = [
            c for c in candidates
            if c in ranking and ranking[c] is not None and np.isfinite(ranking[c])
        ]
        return sorted(scored, key=lambda c: -float(ranking[c]))
    return None


class VIFSelector:
    """
    VIF-based multicollinearity reduction

    Usage:
        selector = VIFSelector(vif_threshold=5.0)
        result = selector.select(matrix)                        # MAX_VIF
        result = selector.select(matrix, ranking=scores)        # PREFERENCE
        result = selector.select(matrix, preference_order=["bio1", "bio12"])
    """

    def __init__(
        self,
        vif_threshold: float = 5.0,
        singular_vif: float = 1e10,
        verbose: bool = True,
        log_file: Optional[str] = None,
    ):
        self.vif_threshold = float(vif_threshold)
        self.singular_vif = float(singular_vif)
        self.verbose = verbose
        self.log_file = log_file

    def _log(self, msg: str):
        log(msg, self.verbose, self.log_file)

    @staticmethod
    def _standardize(matrix: pd.DataFrame) -> pd.DataFrame:
        values = matrix.to_numpy(dtype=np.float64)
        mean = values.mean(axis=0)
        std = values.std(axis=0)
        standardized = (values - mean) / (std + 1e-10)
        return pd.DataFrame(standardized, index=matrix.index, columns=[str(c) for c in matrix.columns])

    def _variable_vif(self, exog: np.ndarray, i: int, name: str, candidates: Sequence[str]) -> float:
        with warnings.catch_warnings(), np.errstate(divide="ignore", invalid="ignore"):
            warnings.simplefilter("ignore")
            vif = float(variance_inflation_factor(exog, i + 1))

        if not np.isfinite(vif) or vif < 0 or vif > self.singular_vif:
            raise SingularCandidateError(name, vif, candidates)
        return vif

    def compute_vif_table(self, data: pd.DataFrame, names: Sequence[str]) -> Dict[str, float]:
        """
        VIF of every name within `names`

        Singular variables get inf. A single variable has VIF 1.0.

        Returns:
            {variable: vif}
        """
        names = list(names)
        if len(names) < 2:
            return {name: 1.0 for name in names}

        n_samples = len(data)
        if n_samples < len(names) + 2:
            self._log(f"    Warning: Not enough samples ({n_samples}) for {len(names)} variables")

        exog = add_constant(data[names].to_numpy(), has_constant="add")

        table = {}
        for i, name in enumerate(names):
            try:
                table[name] = self._variable_vif(exog, i, name, names)
            except SingularCandidateError as e:
                self._log(f"    Singular: {name} (VIF={e.vif}) treated as above threshold")
                table[name] = np.inf
        return table

    def _within_threshold(self, table: Dict[str, float]) -> bool:
        return all(v <= self.vif_threshold for v in table.values())

    # ------------------------------------------------------------------
    # Policies
    # ------------------------------------------------------------------

    def _max_vif_removal(
        self,
        data: pd.DataFrame,
        names: Sequence[str],
        history: List[Dict[str, Any]],
    ) -> List[str]:
        current = list(names)
        iteration = 0

        while len(current) >= 2:
            iteration += 1
            table = self.compute_vif_table(data, current)

            max_desc, max_vif = None, -np.inf
            for name in current:
                if table[name] > max_vif:
                    max_desc, max_vif = name, table[name]

            if max_vif <= self.vif_threshold:
                self._log(f"  Iteration {iteration}: Max VIF = {max_vif:.2f} <= {self.vif_threshold}, done")
                break

            self._log(f"  Iteration {iteration}: Removing {max_desc} (VIF = {max_vif:.2f}), "
                      f"remaining {len(current) - 1}")
            history.append({
                "variable": max_desc,
                "vif": max_vif,
                "action": "removed",
                "policy": VIFPolicy.MAX_VIF.value,
                "iteration": iteration,
                "reason": f"highest VIF {max_vif:.4g} > {self.vif_threshold}",
            })
            current.remove(max_desc)

        return current

    def _preference_growth(
        self,
        data: pd.DataFrame,
        order: Sequence[str],
        history: List[Dict[str, Any]],
    ) -> List[str]:
        accepted: List[str] = []

        for iteration, name in enumerate(order, start=1):
            trial = accepted + [name]
            if len(trial) < 2:
                accepted = trial
                self._log(f"  Accepted {name} (first variable)")
                continue

            table = self.compute_vif_table(data, trial)
            if self._within_threshold(table):
                accepted = trial
                self._log(f"  Accepted {name} (VIF = {table[name]:.2f})")
                continue

            worst = max(trial, key=lambda v: table[v])
            self._log(f"  Rejected {name} (VIF = {table[name]:.2f}, max VIF = {table[worst]:.2f} on {worst})")
            history.append({
                "variable": name,
                "vif": table[name],
                "action": "rejected",
                "policy": VIFPolicy.PREFERENCE.value,
                "iteration": iteration,
                "reason": f"max VIF {table[worst]:.4g} ({worst}) > {self.vif_threshold}",
            })

        return accepted

    def _hybrid(
        self,
        data: pd.DataFrame,
        order: Sequence[str],
        candidates: Sequence[str],
        history: List[Dict[str, Any]],
    ) -> List[str]:
        ordered = set(order)
        rest = [c for c in candidates if c not in ordered]

        self._log(f"  Preference subset: {len(order)}, remainder: {len(rest)}")
        preferred = self._preference_growth(data, order, history)
        survivors = self._max_vif_removal(data, rest, history)

        self._log(f"  Joint pass over {len(preferred)} + {len(survivors)} variables")
        return self._preference_growth(data, preferred + survivors, history)

    # ------------------------------------------------------------------

    def resolve_policy(
        self,
        candidates: Sequence[str],
        order: Optional[Sequence[str]],
        policy: Optional[VIFPolicy] = None,
        ranked: bool = False,
    ) -> Tuple[VIFPolicy, List[str]]:
        """
        Pick the policy and the order it walks

        No order → MAX_VIF; order covering every candidate → PREFERENCE;
        partial explicit order → HYBRID. An order derived from a ranking
        (`ranked`) always walks PREFERENCE. PREFERENCE appends unordered
        candidates in input order.
        """
        order = list(order or [])
        if policy is None and ranked:
            policy = VIFPolicy.PREFERENCE
        if policy is None:
            if not order:
                return VIFPolicy.MAX_VIF, []
            if len(order) == len(candidates):
                return VIFPolicy.PREFERENCE, order
            return VIFPolicy.HYBRID, order

        policy = VIFPolicy(policy)
        if policy is VIFPolicy.PREFERENCE:
            ordered = set(order)
            return policy, order + [c for c in candidates if c not in ordered]
        if policy is VIFPolicy.HYBRID and not order:
            raise ValueError("Hybrid VIF selection requires a preference order or ranking")
        return policy, order

    def select(
        self,
        matrix: pd.DataFrame,
        ranking: Optional[Mapping[str, float]] = None,
        preference_order: Optional[Sequence[str]] = None,
        policy: Optional[VIFPolicy] = None,
    ) -> SelectionResult:
        """
        Run VIF selection

        Args:
            matrix: Numeric matrix (see prepare_numeric_matrix)
            ranking: Variable → score, higher is preferred
            preference_order: Explicit order, highest priority first (wins over ranking)
            policy: Force a policy; resolved from the inputs when None

        Returns:
            SelectionResult with a variable/vif table for the final set
        """
        data = self._standardize(matrix)
        candidates = list(data.columns)
        order = resolve_preference_order(candidates, ranking, preference_order)
        ranked = preference_order is None and ranking is not None
        policy, order = self.resolve_policy(candidates, order, policy, ranked=ranked)

        self._log("\n" + "=" * 60)
        self._log(f"Iterative VIF Selection ({policy.value})")
        self._log("=" * 60)
        self._log(f"VIF Threshold: {self.vif_threshold}")
        self._log(f"Input: {len(data)} samples x {len(candidates)} variables")

        history: List[Dict[str, Any]] = []
        if policy is VIFPolicy.MAX_VIF:
            selected = self._max_vif_removal(data, candidates, history)
        elif policy is VIFPolicy.PREFERENCE:
            selected = self._preference_growth(data, order, history)
        else:
            selected = self._hybrid(data, order, candidates, history)

        final = self.compute_vif_table(data, selected)
        table = pd.DataFrame({
            "variable": selected,
            "vif": [final[name] for name in selected],
        })

        self._log(f"Removed: {len(candidates) - len(selected)} variables")
        self._log(f"Remaining: {len(selected)} variables")

        return SelectionResult(
            method=SelectionMethod.VIF,
            mode=policy.value,
            selected=tuple(selected),
            table=table,
            vif_threshold=self.vif_threshold,
            history=tuple(history),
        )


def run_iterative_vif(
    matrix: pd.DataFrame,
    ranking: Optional[Mapping[str, float]] = None,
    preference_order: Optional[Sequence[str]] = None,
    vif_threshold: float = 5.0,
    verbose: bool = True,
) -> SelectionResult:
    """
    Convenience function
    """
    vif_filter = VIFSelector(vif_threshold=vif_threshold, verbose=verbose)
    return vif_filter.select(matrix, ranking=ranking, preference_order=preference_order)
