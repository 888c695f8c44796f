import numpy as np
import pandas as pd
import pytest

from Collinear_Select.filtering.errors import InsufficientDataError
from Collinear_Select.filtering.passes.pass0_prepare import prepare_numeric_matrix


def test_default_omit_drops_coordinates_and_response(training_frame):
    matrix = prepare_numeric_matrix(training_frame)

    assert list(matrix.columns) == ["v1", "v2", "v3", "v4"]
    assert (matrix.dtypes == np.float64).all()


def test_rows_with_missing_values_are_dropped(paired_frame):
    df = paired_frame.copy()
    df.loc[0, "v1"] = np.nan
    df.loc[5, "v4"] = np.nan
    df.loc[7, "v3"] = np.inf

    matrix = prepare_numeric_matrix(df)

    assert len(matrix) == len(df) - 3
    assert 0 not in matrix.index and 5 not in matrix.index and 7 not in matrix.index


def test_non_numeric_and_boolean_columns_are_dropped(paired_frame):
    df = paired_frame.copy()
    df["label"] = "a"
    df["flag"] = True

    matrix = prepare_numeric_matrix(df)

    assert "label" not in matrix.columns
    assert "flag" not in matrix.columns


def test_select_columns_keeps_given_order_and_ignores_unknown(paired_frame):
    matrix = prepare_numeric_matrix(paired_frame, select_columns=["v3", "v1", "nope"])

    assert list(matrix.columns) == ["v3", "v1"]


def test_omit_wins_over_select(paired_frame):
    matrix = prepare_numeric_matrix(
        paired_frame, omit_columns=["v1"], select_columns=["v1", "v2", "v3"]
    )

    assert list(matrix.columns) == ["v2", "v3"]


def test_accepts_row_mappings():
    rows = [
        {"a": 1.0, "b": 2.0, "c": 0.5},
        {"a": 2.0, "b": None, "c": 0.1},
        {"a": 3.0, "b": 1.0, "c": 0.9},
        {"a": 4.0, "b": 5.0, "c": 0.3},
    ]

    matrix = prepare_numeric_matrix(rows, omit_columns=())

    assert list(matrix.columns) == ["a", "b", "c"]
    assert len(matrix) == 3


def test_column_labels_become_strings():
    df = pd.DataFrame(np.arange(12, dtype=float).reshape(4, 3) ** 2, columns=[10, 20, 30])

    matrix = prepare_numeric_matrix(df, select_columns=[30, 10])

    assert list(matrix.columns) == ["30", "10"]
    assert list(df.columns) == [10, 20, 30]


def test_input_is_not_mutated(training_frame):
    before = training_frame.copy()
    prepare_numeric_matrix(training_frame)
    pd.testing.assert_frame_equal(training_frame, before)


def test_too_few_numeric_columns():
    df = pd.DataFrame({"a": [1.0, 2.0, 3.0], "name": ["x", "y", "z"]})

    with pytest.raises(InsufficientDataError) as excinfo:
        prepare_numeric_matrix(df)

    assert excinfo.value.columns == ["a"]


def test_too_few_complete_rows():
    df = pd.DataFrame({"a": [1.0, np.nan, 3.0], "b": [np.nan, 2.0, np.nan]})

    with pytest.raises(InsufficientDataError) as excinfo:
        prepare_numeric_matrix(df)

    assert excinfo.value.n_rows == 0
    assert "complete rows" in str(excinfo.value)
