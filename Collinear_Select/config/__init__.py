"""
CollinearSelect (CSEL) - Configuration

Hierarchical dataclass configuration with YAML/JSON/env loading.
"""

from Collinear_Select.config.settings import (
    Config,
    IOConfig,
    FilteringConfig,
    PlotConfig,
    SystemConfig,
)
from Collinear_Select.config.loader import load_config

__all__ = [
    "Config",
    "IOConfig",
    "FilteringConfig",
    "PlotConfig",
    "SystemConfig",
    "load_config",
]
