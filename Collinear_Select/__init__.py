"""
CollinearSelect (CSEL)
======================

Automatic multicollinearity reduction for tabular predictor datasets.

Selection stages:
1. Correlation dendrogram (1 - |r| distance):
   - Exploratory: full dendrogram for manual inspection
   - Ranked: height cutoff search keeping the best-ranked variable per group
2. Iterative VIF:
   - Max-VIF removal, preference-ordered growth, or hybrid

Features:
- Optional external ranking (e.g. biserial correlation R2)
- YAML / JSON / env configuration
- Dendrogram rendering kept outside the selection logic
"""

__version__ = "1.0.0"
__author__ = "KAERI_UES"

from Collinear_Select.config.settings import Config

__all__ = ["Config"]
