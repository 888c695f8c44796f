"""
CollinearSelect (CSEL) - Selection result record

Assembled once at the end of a selection call and never mutated afterwards.
"""

import json
import math
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

import pandas as pd

from Collinear_Select.filtering.render import DendrogramDescription


class SelectionMethod(str, Enum):
    CLUSTER = "cluster"
    VIF = "vif"


def _json_safe(value: Any) -> Any:
    if isinstance(value, float) and not math.isfinite(value):
        return None if math.isnan(value) else ("inf" if value > 0 else "-inf")
    if isinstance(value, Enum):
        return value.value
    if hasattr(value, "item"):
        return _json_safe(value.item())
    return value


@dataclass(frozen=True, eq=False)
class SelectionResult:
    """
    Output of a selector

    Attributes:
        method: Which selector produced the result
        mode: Cluster mode or VIF policy used
        selected: Selected variable names (ordered, no duplicates)
        table: Supporting table
            - cluster: variable, group, score, selected
            - vif: variable, vif
        max_cor: Correlation threshold (cluster)
        vif_threshold: VIF threshold (vif)
        cutoff_height: Dendrogram cutoff height used (cluster, ranked mode)
        step: Index of the cutoff step that met the threshold
        observed_max_cor: Max |r| among the selected variables
        history: Removal / rejection events (vif)
        render: Dendrogram description for an external renderer (cluster)
    """
    method: SelectionMethod
    mode: str
    selected: Tuple[str, ...]
    table: pd.DataFrame
    max_cor: Optional[float] = None
    vif_threshold: Optional[float] = None
    cutoff_height: Optional[float] = None
    step: Optional[int] = None
    observed_max_cor: Optional[float] = None
    history: Tuple[Dict[str, Any], ...] = field(default_factory=tuple)
    render: Optional[DendrogramDescription] = None

    def __post_init__(self):
        object.__setattr__(self, "selected", tuple(dict.fromkeys(self.selected)))
        object.__setattr__(self, "table", self.table.copy())
        object.__setattr__(self, "history", tuple(dict(h) for h in self.history))

    def removed(self, candidates: Iterable[str]) -> List[str]:
        """Candidates that did not make it into the selection"""
        keep = set(self.selected)
        return [c for c in candidates if c not in keep]

    def to_dict(self) -> Dict[str, Any]:
        records = [
            {k: _json_safe(v) for k, v in row.items()}
            for row in self.table.to_dict(orient="records")
        ]
        return {
            "method": self.method.value,
            "mode": self.mode,
            "selected": list(self.selected),
            "n_selected": len(self.selected),
            "max_cor": self.max_cor,
            "vif_threshold": self.vif_threshold,
            "cutoff_height": self.cutoff_height,
            "step": self.step,
            "observed_max_cor": _json_safe(self.observed_max_cor),
            "table": records,
            "history": [{k: _json_safe(v) for k, v in h.items()} for h in self.history],
            "render": self.render.to_dict() if self.render is not None else None,
        }

    def save(self, path: str | Path) -> Path:
        """Write the result as JSON"""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(self.to_dict(), f, indent=2)
        return path
