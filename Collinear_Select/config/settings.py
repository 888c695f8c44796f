"""
Unified Configuration for CollinearSelect
Hierarchical SSOT design with section-based organization
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, List, Literal


# ========== Type Aliases ==========

LinkageLiteral = Literal["single", "complete", "average", "weighted"]
PolicyLiteral = Literal["max_vif", "preference", "hybrid"]

_LINKAGES = {"single", "complete", "average", "weighted"}
_POLICIES = {"max_vif", "preference", "hybrid"}
_FORMATS = {"png", "pdf", "svg"}


# ========== Helper Functions ==========

def _ensure_dir(path: str | Path) -> Path:
    """Ensure directory exists, create if not"""
    p = Path(path)
    p.mkdir(parents=True, exist_ok=True)
    return p


def canonicalize_linkage(s: str) -> LinkageLiteral:
    """
    Canonicalize linkage method name to lowercase

    Examples:
        >>> canonicalize_linkage("Single")
        'single'
    """
    s = s.strip().lower()
    if s not in _LINKAGES:
        raise ValueError(f"Unknown linkage: {s}. Must be one of: {', '.join(sorted(_LINKAGES))}")
    return s  # type: ignore


def canonicalize_policy(s: Optional[str]) -> Optional[PolicyLiteral]:
    """Canonicalize VIF policy name ('max-vif' → 'max_vif'); None means auto"""
    if s is None:
        return None
    s = s.strip().lower().replace("-", "_")
    if s in {"", "auto"}:
        return None
    if s not in _POLICIES:
        raise ValueError(f"Unknown vif_policy: {s}. Must be one of: auto, {', '.join(sorted(_POLICIES))}")
    return s  # type: ignore


# ========== Configuration Sections ==========

@dataclass
class IOConfig:
    """
    Input/output settings

    Attributes:
        input_path: Training table (CSV, Parquet or JSON)
        output_dir: Directory to write selection results
        omit_columns: Columns excluded from the analysis
        select_columns: Explicit predictor columns (None = all numeric)
        ranking_path: Table with per-variable ranking scores (e.g. biserial R2)
        ranking_variable_col: Variable name column of the ranking table
        ranking_score_col: Score column of the ranking table
        preference_order: Explicit variable preference order (highest first)
    """
    input_path: str = ""
    """Training table (CSV, Parquet or JSON)"""

    output_dir: str = "output"
    """Directory to write selection results"""

    omit_columns: List[str] = field(default_factory=lambda: ["x", "y", "presence"])
    """Columns excluded from the analysis"""

    select_columns: Optional[List[str]] = None
    """Explicit predictor columns (None = all numeric columns)"""

    ranking_path: Optional[str] = None
    """Table with per-variable ranking scores (None = no ranking)"""

    ranking_variable_col: str = "variable"
    """Variable name column of the ranking table"""

    ranking_score_col: str = "R2"
    """Score column of the ranking table (higher = preferred)"""

    preference_order: Optional[List[str]] = None
    """Explicit preference order for VIF selection (highest priority first)"""


@dataclass
class FilteringConfig:
    """
    Selection configuration

    Cluster stage: correlation-distance dendrogram + height cutoff search
    VIF stage: iterative variance inflation factor selection
    """

    # ===== Cluster stage =====
    run_cluster: bool = True
    """Run the correlation dendrogram stage"""

    max_cor: float = 0.75
    """Maximum absolute Pearson correlation among selected variables"""

    height_steps: int = 200
    """Number of cutoff heights tried between the lowest and highest merge"""

    exploratory_linkage: LinkageLiteral = "complete"
    """Linkage used when no ranking is supplied"""

    ranked_linkage: LinkageLiteral = "single"
    """Linkage used for automatic selection with a ranking"""

    # ===== VIF stage =====
    run_vif: bool = True
    """Run the VIF stage on the cluster-selected variables"""

    vif_threshold: float = 5.0
    """Maximum VIF of a selected variable"""

    singular_vif: float = 1e10
    """VIF above which a variable is treated as an exact linear combination"""

    vif_policy: Optional[PolicyLiteral] = None
    """Force a VIF policy ('max_vif', 'preference', 'hybrid'); None = auto"""

    def _normalize(self):
        """Normalize fields to canonical values"""
        self.exploratory_linkage = canonicalize_linkage(self.exploratory_linkage)
        self.ranked_linkage = canonicalize_linkage(self.ranked_linkage)
        self.vif_policy = canonicalize_policy(self.vif_policy)

    def _validate(self):
        """Validate filtering configuration"""
        if not 0.0 <= self.max_cor <= 1.0:
            raise ValueError(f"max_cor must be in [0, 1], got {self.max_cor}")

        if self.vif_threshold < 1.0:
            raise ValueError(f"vif_threshold must be >= 1 (VIF lower bound), got {self.vif_threshold}")

        if self.singular_vif <= self.vif_threshold:
            raise ValueError(
                f"singular_vif must exceed vif_threshold: "
                f"singular_vif={self.singular_vif}, vif_threshold={self.vif_threshold}"
            )

        if int(self.height_steps) < 1:
            raise ValueError(f"height_steps must be a positive integer, got {self.height_steps}")


@dataclass
class PlotConfig:
    """
    Dendrogram rendering settings

    Attributes:
        plot: Save the dendrogram figure next to the results
        text_size: Size of the dendrogram labels
        dpi: Figure resolution
        format: Figure file format
    """
    plot: bool = True
    """Save the dendrogram figure next to the results"""

    text_size: float = 6
    """Size of the dendrogram labels"""

    dpi: int = 150
    """Figure resolution"""

    format: Literal["png", "pdf", "svg"] = "png"
    """Figure file format"""

    def _validate(self):
        """Validate rendering settings"""
        self.format = str(self.format).strip().lower()  # type: ignore
        if self.format not in _FORMATS:
            raise ValueError(f"Unknown plot format: {self.format}. Must be one of: {', '.join(sorted(_FORMATS))}")
        if self.dpi <= 0 or self.text_size <= 0:
            raise ValueError(f"dpi and text_size must be positive, got dpi={self.dpi}, text_size={self.text_size}")


@dataclass
class SystemConfig:
    """
    System-wide settings

    Attributes:
        verbose: Enable verbose logging
        log_file: Append log lines to this file as well
        checkpoint: Write selection results to output_dir
    """
    verbose: bool = True
    """Enable verbose logging"""

    log_file: Optional[str] = None
    """Append log lines to this file as well (None = stdout only)"""

    checkpoint: bool = True
    """Write selection results to output_dir"""


# ========== Main Configuration (SSOT Root) ==========

@dataclass
class Config:
    """
    Unified configuration for CollinearSelect

    Sections:
        io: Input/output
        filtering: Cluster and VIF selection
        plot: Dendrogram rendering
        system: System-wide settings

    Usage:
        config = Config(
            io=IOConfig(input_path="training.csv", output_dir="results"),
            filtering=FilteringConfig(max_cor=0.6),
        )

        # From YAML with overrides
        config = load_config("settings.yaml", overrides={
            "filtering.vif_threshold": 10.0,
        })
    """

    io: IOConfig = field(default_factory=IOConfig)
    """Input/output settings"""

    filtering: FilteringConfig = field(default_factory=FilteringConfig)
    """Selection configuration"""

    plot: PlotConfig = field(default_factory=PlotConfig)
    """Dendrogram rendering settings"""

    system: SystemConfig = field(default_factory=SystemConfig)
    """System-wide settings"""

    def __post_init__(self):
        """Post-initialization: normalize fields"""
        self.filtering._normalize()

    def validate_and_finalize(self) -> "Config":
        """
        Validate and finalize configuration

        Returns:
            Self (for method chaining)

        Raises:
            ValueError: If configuration is invalid
        """
        self.filtering._normalize()
        self.filtering._validate()
        self.plot._validate()

        if self.system.checkpoint:
            _ensure_dir(self.io.output_dir)

        return self

