import warnings

import numpy as np
import pandas as pd
import pytest

from Collinear_Select.filtering.passes.vif_iterative import (
    VIFPolicy,
    VIFSelector,
    resolve_preference_order,
    run_iterative_vif,
)
from Collinear_Select.filtering.result import SelectionMethod


@pytest.fixture
def selector():
    return VIFSelector(vif_threshold=5.0, verbose=False)


def test_independent_variables_are_all_kept(selector, independent_frame):
    result = selector.select(independent_frame)

    assert result.method is SelectionMethod.VIF
    assert result.mode == "max_vif"
    assert result.selected == tuple(independent_frame.columns)
    assert (result.table["vif"] < 1.1).all()
    assert result.history == ()


def test_max_vif_removes_the_linear_combination(selector, collinear_frame):
    result = selector.select(collinear_frame)

    assert result.selected == ("a", "b", "d")
    assert result.history[0]["variable"] == "c"
    assert result.history[0]["action"] == "removed"
    assert (result.table["vif"] <= 5.0).all()


@pytest.mark.parametrize(
    "order, expected",
    [
        (["b", "a", "c"], ("b", "a")),
        (["a", "c", "b"], ("a", "c")),
    ],
)
def test_preference_order_decides_which_variable_is_rejected(selector, collinear_frame, order, expected):
    result = selector.select(collinear_frame[["a", "b", "c"]], preference_order=order)

    assert result.mode == "preference"
    assert result.selected == expected
    assert all(h["action"] == "rejected" for h in result.history)


def test_ranking_drives_preference_policy(selector, collinear_frame):
    ranking = {"a": 0.1, "b": 0.9, "c": 0.5, "d": 0.3}

    result = selector.select(collinear_frame, ranking=ranking)

    assert result.mode == "preference"
    assert result.selected == ("b", "c", "d")
    assert [h["variable"] for h in result.history] == ["a"]


def test_partial_ranking_stays_preference(selector, collinear_frame):
    result = selector.select(collinear_frame, ranking={"a": 0.9, "b": 0.5})

    assert result.mode == "preference"
    assert result.selected == ("a", "b", "d")
    assert [h["variable"] for h in result.history] == ["c"]


def test_partial_order_runs_hybrid(selector, collinear_frame):
    result = selector.select(collinear_frame, preference_order=["c"])

    assert result.mode == "hybrid"
    assert result.selected == ("c", "a", "d")
    assert "b" in {h["variable"] for h in result.history}


def test_exact_linear_combination_is_removed_without_error(selector, rng):
    n = 300
    a = rng.normal(size=n)
    b = rng.normal(size=n)
    df = pd.DataFrame({"a": a, "b": b, "c": a + b, "d": rng.normal(size=n)})

    result = selector.select(df)

    assert len(result.selected) == 3
    assert "d" in result.selected
    assert np.isinf(result.history[0]["vif"])
    assert result.history[0]["variable"] == "a"


def test_singular_candidates_raise_no_warnings(selector, rng):
    n = 200
    a = rng.normal(size=n)
    b = rng.normal(size=n)
    data = selector._standardize(pd.DataFrame({"a": a, "b": b, "c": a - b}))

    with warnings.catch_warnings():
        warnings.simplefilter("error")
        table = selector.compute_vif_table(data, ["a", "b", "c"])

    assert all(np.isinf(v) for v in table.values())


def test_single_variable_has_unit_vif(selector, independent_frame):
    table = selector.compute_vif_table(independent_frame, ["v1"])

    assert table == {"v1": 1.0}


def test_vif_matches_closed_form_for_two_variables(selector, collinear_frame):
    data = selector._standardize(collinear_frame)
    r = np.corrcoef(collinear_frame["a"], collinear_frame["c"])[0, 1]

    table = selector.compute_vif_table(data, ["a", "c"])

    assert table["a"] == pytest.approx(1.0 / (1.0 - r ** 2), rel=1e-6)
    assert table["c"] == pytest.approx(table["a"], rel=1e-6)


def test_reselection_is_stable(selector, collinear_frame):
    first = selector.select(collinear_frame)
    second = selector.select(collinear_frame[list(first.selected)])
    assert second.selected == first.selected

    ranking = {"a": 0.1, "b": 0.9, "c": 0.5, "d": 0.3}
    first = selector.select(collinear_frame, ranking=ranking)
    second = selector.select(collinear_frame[list(first.selected)], ranking=ranking)
    assert second.selected == first.selected


def test_hybrid_reselection_is_stable(selector, collinear_frame):
    first = selector.select(collinear_frame, preference_order=["c"])
    second = selector.select(collinear_frame[list(first.selected)], preference_order=["c"])

    assert first.mode == second.mode == "hybrid"
    assert second.selected == first.selected


def test_looser_threshold_keeps_more(collinear_frame):
    strict = VIFSelector(vif_threshold=2.0, verbose=False).select(collinear_frame)
    loose = VIFSelector(vif_threshold=1000.0, verbose=False).select(collinear_frame)

    assert len(loose.selected) >= len(strict.selected)
    assert loose.selected == ("a", "b", "c", "d")


class TestPolicyResolution:
    def test_explicit_order_wins_over_ranking(self):
        order = resolve_preference_order(["a", "b", "c"], {"a": 1.0, "b": 2.0}, ["c", "a"])
        assert order == ["c", "a"]

    def test_ranking_sorted_descending_and_unscored_dropped(self):
        order = resolve_preference_order(["a", "b", "c", "d"], {"a": 0.2, "b": 0.9, "c": 0.2})
        assert order == ["b", "a", "c"]

    def test_unknown_and_duplicate_names_are_ignored(self):
        order = resolve_preference_order(["a", "b"], preference_order=["zz", "b", "b", "a"])
        assert order == ["b", "a"]

    def test_no_order_means_max_vif(self, selector):
        assert selector.resolve_policy(["a", "b"], None) == (VIFPolicy.MAX_VIF, [])
        assert selector.resolve_policy(["a", "b"], []) == (VIFPolicy.MAX_VIF, [])

    def test_full_order_means_preference(self, selector):
        assert selector.resolve_policy(["a", "b"], ["b", "a"]) == (VIFPolicy.PREFERENCE, ["b", "a"])

    def test_partial_order_means_hybrid(self, selector):
        assert selector.resolve_policy(["a", "b", "c"], ["c"]) == (VIFPolicy.HYBRID, ["c"])

    def test_ranked_order_always_means_preference(self, selector):
        policy, order = selector.resolve_policy(["a", "b", "c"], ["c"], ranked=True)
        assert policy is VIFPolicy.PREFERENCE
        assert order == ["c", "a", "b"]

    def test_forced_preference_appends_unordered(self, selector):
        policy, order = selector.resolve_policy(["a", "b", "c"], ["c"], VIFPolicy.PREFERENCE)
        assert policy is VIFPolicy.PREFERENCE
        assert order == ["c", "a", "b"]

    def test_forced_hybrid_without_order_raises(self, selector):
        with pytest.raises(ValueError):
            selector.resolve_policy(["a", "b"], None, VIFPolicy.HYBRID)


def test_convenience_function(collinear_frame):
    result = run_iterative_vif(collinear_frame, verbose=False)

    assert result.selected == ("a", "b", "d")
