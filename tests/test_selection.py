from __future__ import annotations

import pathlib
import sys

sys.path.insert(0, str(pathlib.Path(__file__).resolve().parents[1]))

from field_extractor.selection import (
    apply_choices,
    deselect_all,
    prune_selection,
    select_all,
    toggle_key,
)


def test_toggle_returns_a_new_frozenset() -> None:
    original = frozenset({"a"})
    added = toggle_key(original, "b")
    removed = toggle_key(added, "a")

    assert original == {"a"}
    assert added == {"a", "b"}
    assert removed == {"b"}
    assert isinstance(removed, frozenset)


def test_select_all_replaces_with_visible_keys() -> None:
    assert select_all(["x", "y"]) == {"x", "y"}


def test_deselect_all_only_touches_visible_keys() -> None:
    selection = frozenset({"a", "b", "c"})
    assert deselect_all(selection, ["a", "z"]) == {"b", "c"}
    assert selection == {"a", "b", "c"}


def test_apply_choices_toggles_the_difference_within_shown_keys() -> None:
    selection = frozenset({"driver1", "name"})
    result = apply_choices(selection, ["driver1", "driver2"], ["driver2"])
    assert result == {"driver2", "name"}


def test_prune_keeps_only_valid_keys() -> None:
    assert prune_selection({"a", "gone"}, ["a", "b"]) == {"a"}


def test_none_is_an_empty_selection() -> None:
    assert toggle_key(None, "a") == {"a"}
    assert deselect_all(None, ["a"]) == frozenset()
