"""Filtering IO module"""

from Collinear_Select.filtering.io.table_reader import read_table

__all__ = [
    "read_table",
]
