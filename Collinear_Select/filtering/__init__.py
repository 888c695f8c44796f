"""
Filtering module for CollinearSelect (CSEL) - Lazy imports

- Pass 0: Numeric matrix preparation
- Correlation dendrogram selection (ClusterSelector)
- Iterative VIF selection (VIFSelector)
- SelectionPipeline: dendrogram pre-filter + VIF refinement
"""

from Collinear_Select.filtering.errors import (
    CollinearSelectError,
    InsufficientDataError,
    DegenerateVarianceError,
    SingularCandidateError,
    ThresholdUnreachableError,
)

__all__ = [
    "SelectionPipeline",
    "SelectionResult",
    "CollinearSelectError",
    "InsufficientDataError",
    "DegenerateVarianceError",
    "SingularCandidateError",
    "ThresholdUnreachableError",
]

def __getattr__(name):
    if name == "SelectionPipeline":
        from Collinear_Select.filtering.pipeline import SelectionPipeline
        return SelectionPipeline
    if name == "SelectionResult":
        from Collinear_Select.filtering.result import SelectionResult
        return SelectionResult
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
