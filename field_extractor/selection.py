"""Selection state helpers.

A selection is a frozenset of field names. Every action returns a new
frozenset; nothing here mutates its input.
"""
from __future__ import annotations

from typing import AbstractSet, Iterable, Optional

Selection = frozenset


def as_selection(keys: Optional[Iterable[str]]) -> Selection:
    return frozenset(keys or ())


def toggle_key(selection: AbstractSet[str], key: str) -> Selection:
    current = as_selection(selection)
    if key in current:
        return current - {key}
    return current | {key}


def select_all(visible: Iterable[str]) -> Selection:
    """Select exactly the visible keys; hidden keys drop out of the selection."""
    return as_selection(visible)


def deselect_all(selection: AbstractSet[str], visible: Iterable[str]) -> Selection:
    """Remove only the visible keys; selected keys hidden by a filter stay."""
    return as_selection(selection) - as_selection(visible)


def apply_choices(selection: AbstractSet[str], shown: Iterable[str], chosen: Iterable[str]) -> Selection:
    """Fold a checkbox-group edit over `shown` keys into the selection."""
    result = as_selection(selection)
    chosen = as_selection(chosen)
    for key in shown:
        if (key in result) != (key in chosen):
            result = toggle_key(result, key)
    return result


def prune_selection(selection: AbstractSet[str], valid_keys: Iterable[str]) -> Selection:
    return as_selection(selection) & as_selection(valid_keys)

