"""
CollinearSelect (CSEL) - Selection Passes Module

- prepare_numeric_matrix: omit / select / numeric / complete cases
- CorrelationEngine: Pearson |r| and 1 - |r| distance
- ClusterSelector: correlation dendrogram selection
- VIFSelector: iterative VIF selection

Lazy imports to keep scipy / statsmodels off the import path until used.
"""

__all__ = [
    "prepare_numeric_matrix",
    "CorrelationEngine",
    "ClusterSelector",
    "ClusterMode",
    "VIFSelector",
    "VIFPolicy",
]

def __getattr__(name):
    if name == "prepare_numeric_matrix":
        from Collinear_Select.filtering.passes.pass0_prepare import prepare_numeric_matrix
        return prepare_numeric_matrix
    elif name == "CorrelationEngine":
        from Collinear_Select.filtering.passes.correlation import CorrelationEngine
        return CorrelationEngine
    elif name == "ClusterSelector":
        from Collinear_Select.filtering.passes.cluster_selection import ClusterSelector
        return ClusterSelector
    elif name == "ClusterMode":
        from Collinear_Select.filtering.passes.cluster_selection import ClusterMode
        return ClusterMode
    elif name == "VIFSelector":
        from Collinear_Select.filtering.passes.vif_iterative import VIFSelector
        return VIFSelector
    elif name == "VIFPolicy":
        from Collinear_Select.filtering.passes.vif_iterative import VIFPolicy
        return VIFPolicy
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
