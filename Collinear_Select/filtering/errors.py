"""
CollinearSelect (CSEL) - Error taxonomy

- InsufficientDataError: too few numeric columns / complete rows
- DegenerateVarianceError: zero-variance column, correlation undefined
- SingularCandidateError: (near-)exact linear combination, VIF undefined
- ThresholdUnreachableError: cluster height search exhausted its steps
"""

from typing import Dict, List, Optional, Sequence


class CollinearSelectError(Exception):
    """Base class for every selection error"""


class InsufficientDataError(CollinearSelectError, ValueError):
    """Raised when fewer than 2 numeric columns or 2 complete rows remain"""

    def __init__(self, message: str, columns: Sequence[str] = (), n_rows: int = 0):
        super().__init__(message)
        self.columns: List[str] = list(columns)
        self.n_rows = n_rows


class DegenerateVarianceError(CollinearSelectError, ValueError):
    """Raised when a column has zero variance"""

    def __init__(self, variances: Dict[str, float]):
        self.variances = dict(variances)
        detail = ", ".join(f"{name} (var={value:.3g})" for name, value in self.variances.items())
        super().__init__(
            f"Correlation undefined for zero-variance column(s): {detail}"
        )


class SingularCandidateError(CollinearSelectError, ArithmeticError):
    """
    Raised when a variable is a (near-)exact linear combination of the others.

    Recovered inside the VIF selector: the variable is treated as failing
    the threshold.
    """

    def __init__(self, variable: str, vif: float, candidates: Sequence[str] = ()):
        self.variable = variable
        self.vif = vif
        self.candidates: List[str] = list(candidates)
        super().__init__(
            f"VIF of '{variable}' is numerically singular (VIF={vif}) "
            f"within {len(self.candidates)} candidates"
        )


class ThresholdUnreachableError(CollinearSelectError, RuntimeError):
    """Raised when no cutoff height brings the max correlation under max_cor"""

    def __init__(self, max_cor: float, observed_max_cor: Optional[float], steps: int):
        self.max_cor = max_cor
        self.observed_max_cor = observed_max_cor
        self.steps = steps
        observed = "n/a" if observed_max_cor is None else f"{observed_max_cor:.4f}"
        super().__init__(
            f"No cutoff height reached max_cor={max_cor} after {steps} steps "
            f"(lowest observed max |r| = {observed}). "
            f"Relax max_cor or change the ranking / candidate set."
        )
