import numpy as np
import pandas as pd
import pytest

from Collinear_Select.filtering.ranking import ranking_from_table


def test_reads_variable_and_score_columns():
    table = pd.DataFrame({"variable": ["bio1", "bio12", "bio5"], "R2": [0.4, 0.1, 0.3]})

    assert ranking_from_table(table) == {"bio1": 0.4, "bio12": 0.1, "bio5": 0.3}


def test_custom_columns_missing_scores_and_duplicates():
    table = pd.DataFrame({
        "name": ["a", "b", "a", "c"],
        "score": [0.5, np.nan, 0.9, "0.2"],
    })

    ranking = ranking_from_table(table, variable_col="name", score_col="score")

    assert ranking == {"a": 0.5, "c": 0.2}


def test_missing_column_raises_key_error():
    with pytest.raises(KeyError, match="R2"):
        ranking_from_table(pd.DataFrame({"variable": ["a"], "score": [1.0]}))


def test_mapping_input_drops_non_finite():
    assert ranking_from_table({"a": 1, "b": float("nan")}) == {"a": 1.0}
