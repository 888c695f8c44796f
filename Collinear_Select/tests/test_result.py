import dataclasses
import json

import numpy as np
import pandas as pd
import pytest

from Collinear_Select.filtering.passes.cluster_selection import ClusterSelector
from Collinear_Select.filtering.result import SelectionMethod, SelectionResult


def _vif_result():
    return SelectionResult(
        method=SelectionMethod.VIF,
        mode="max_vif",
        selected=("a", "b", "a"),
        table=pd.DataFrame({"variable": ["a", "b"], "vif": [1.2, 1.3]}),
        vif_threshold=5.0,
        history=({"variable": "c", "vif": np.inf, "action": "removed"},),
    )


def test_selected_is_deduplicated_in_order():
    assert _vif_result().selected == ("a", "b")


def test_result_is_immutable():
    result = _vif_result()

    with pytest.raises(dataclasses.FrozenInstanceError):
        result.selected = ("x",)


def test_table_is_copied_on_construction():
    table = pd.DataFrame({"variable": ["a"], "vif": [1.0]})
    result = SelectionResult(method=SelectionMethod.VIF, mode="max_vif", selected=("a",), table=table)

    table.loc[0, "vif"] = 99.0

    assert result.table.loc[0, "vif"] == 1.0


def test_removed_lists_dropped_candidates_in_order():
    assert _vif_result().removed(["c", "a", "d", "b"]) == ["c", "d"]


def test_to_dict_is_json_serializable():
    payload = _vif_result().to_dict()

    text = json.dumps(payload)

    assert payload["method"] == "vif"
    assert payload["n_selected"] == 2
    assert payload["history"][0]["vif"] == "inf"
    assert json.loads(text)["table"][1] == {"variable": "b", "vif": 1.3}


def test_save_writes_json(tmp_path, paired_frame):
    result = ClusterSelector(verbose=False).select(
        paired_frame, ranking={"v1": 0.9, "v2": 0.5, "v3": 0.3}
    )

    path = result.save(tmp_path / "nested" / "cluster.json")
    loaded = json.loads(path.read_text(encoding="utf-8"))

    assert loaded["method"] == "cluster"
    assert loaded["selected"] == ["v1", "v3", "v4"]
    assert loaded["render"]["labels"]
    score_of = dict(zip(loaded["render"]["labels"], loaded["render"]["scores"]))
    assert score_of["v4"] is None
    assert {row["variable"]: row["score"] for row in loaded["table"]}["v4"] is None
