"""CollinearSelect (CSEL) - Filtering Utilities Module"""

from Collinear_Select.filtering.utils.logging import log

__all__ = [
    "log",
]
