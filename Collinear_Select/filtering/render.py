"""
Dendrogram description and matplotlib renderer

Selectors only build a DendrogramDescription; drawing is left to
plot_dendrogram (or any other renderer), so no global plotting state is
touched during selection.
"""

import math
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

import numpy as np
from scipy.cluster.hierarchy import dendrogram


SELECTED_MARK = "→ "


@dataclass(frozen=True)
class DendrogramDescription:
    """
    Everything needed to draw a correlation dendrogram

    Attributes:
        labels: Leaf labels in dendrogram order
        icoord: Leaf-axis coordinates of each link (scipy convention)
        dcoord: Height coordinates of each link
        scores: Ranking score per leaf (NaN if none)
        selected: Whether each leaf was selected
        threshold: Height of the threshold marker
        y_label: Height axis title
        score_label: Colour legend title
    """
    labels: Tuple[str, ...]
    icoord: Tuple[Tuple[float, ...], ...]
    dcoord: Tuple[Tuple[float, ...], ...]
    scores: Tuple[float, ...]
    selected: Tuple[bool, ...]
    threshold: float
    y_label: str = "1 - correlation"
    score_label: str = "R2"

    @property
    def display_labels(self) -> Tuple[str, ...]:
        return tuple(
            f"{SELECTED_MARK}{label}" if sel else label
            for label, sel in zip(self.labels, self.selected)
        )

    @property
    def leaf_positions(self) -> Tuple[float, ...]:
        return tuple(5.0 + 10.0 * i for i in range(len(self.labels)))

    @property
    def max_height(self) -> float:
        heights = [h for link in self.dcoord for h in link]
        return max(heights) if heights else 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "labels": list(self.labels),
            "icoord": [list(c) for c in self.icoord],
            "dcoord": [list(c) for c in self.dcoord],
            "scores": [None if math.isnan(s) else s for s in self.scores],
            "selected": list(self.selected),
            "threshold": self.threshold,
            "y_label": self.y_label,
            "score_label": self.score_label,
        }


def build_dendrogram_description(
    linkage_matrix: np.ndarray,
    labels: Sequence[str],
    threshold: float,
    scores: Optional[Mapping[str, float]] = None,
    selected: Optional[Sequence[str]] = None,
    y_label: str = "1 - correlation",
    score_label: str = "R2",
) -> DendrogramDescription:
    tree = dendrogram(linkage_matrix, labels=list(labels), no_plot=True)
    leaves = [str(label) for label in tree["ivl"]]
    scores = scores or {}
    chosen = set(selected or ())

    return DendrogramDescription(
        labels=tuple(leaves),
        icoord=tuple(tuple(float(v) for v in link) for link in tree["icoord"]),
        dcoord=tuple(tuple(float(v) for v in link) for link in tree["dcoord"]),
        scores=tuple(float(scores.get(leaf, np.nan)) for leaf in leaves),
        selected=tuple(leaf in chosen for leaf in leaves),
        threshold=float(threshold),
        y_label=y_label,
        score_label=score_label,
    )


def plot_dendrogram(description: DendrogramDescription, ax=None, text_size: float = 6):
    """
    Draw a horizontal dendrogram with score-coloured labels

    Args:
        description: Output of build_dendrogram_description
        ax: Matplotlib axes to draw on (None = new figure)
        text_size: Label font size

    Returns:
        The matplotlib Figure
    """
    from matplotlib import colormaps
    from matplotlib.cm import ScalarMappable
    from matplotlib.colors import Normalize
    from matplotlib.figure import Figure

    if ax is None:
        height = max(3.0, 0.25 * len(description.labels) + 1.5)
        fig = Figure(figsize=(8, height))
        ax = fig.add_subplot()
    else:
        fig = ax.figure

    for xs, ys in zip(description.icoord, description.dcoord):
        ax.plot(ys, xs, color="black", linewidth=0.8)

    top = max(description.max_height, description.threshold, 1e-6)

    scores = np.asarray(description.scores, dtype=float)
    has_scores = np.isfinite(scores).any()
    cmap = colormaps["viridis_r"]
    norm = None
    if has_scores:
        finite = scores[np.isfinite(scores)]
        norm = Normalize(vmin=float(finite.min()), vmax=float(finite.max()) or 1.0)

    for label, pos, score in zip(description.display_labels, description.leaf_positions, scores):
        color = cmap(norm(score)) if norm is not None and np.isfinite(score) else "black"
        ax.text(-0.01 * top, pos, label, ha="right", va="center", fontsize=text_size, color=color)

    ax.axvline(description.threshold, color="darkred", linestyle="--", linewidth=1, alpha=0.5)
    ax.set_xlim(-top / 2, top * 1.02)
    ax.set_yticks([])
    ax.set_xlabel(description.y_label)
    for side in ("left", "right", "top"):
        ax.spines[side].set_visible(False)

    if has_scores:
        mappable = ScalarMappable(norm=norm, cmap=cmap)
        fig.colorbar(mappable, ax=ax, orientation="horizontal", label=description.score_label,
                     fraction=0.05, pad=0.12)

    return fig
