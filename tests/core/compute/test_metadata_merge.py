# tests/core/compute/test_metadata_merge.py
from topology_compiler.core.compute import merge_map


def test_primary_wins_on_conflict():
    assert merge_map({"a": "topology"}, {"a": "class", "b": "class"}) == {"a": "topology", "b": "class"}


def test_none_is_empty_and_inputs_untouched():
    primary = {"a": "1"}
    secondary = {"b": "2"}

    out = merge_map(primary, secondary)
    out["c"] = "3"

    assert primary == {"a": "1"}
    assert secondary == {"b": "2"}
    assert merge_map(None, None) == {}
    assert merge_map(None, {"x": "y"}) == {"x": "y"}
