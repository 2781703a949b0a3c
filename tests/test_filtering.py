from __future__ import annotations

import pathlib
import sys

import pytest

sys.path.insert(0, str(pathlib.Path(__file__).resolve().parents[1]))

from field_extractor.comparison import compare_datasets
from field_extractor.filtering import ExportFilter, visible_keys
from field_extractor.stats import compute_field_stats

RECORDS = [{"Name": "a", "nickname": "", "age": 3}, {"Name": "b", "city": None}]
KEYS = ["Name", "age", "city", "nickname"]


def test_no_filters_keeps_everything_in_order() -> None:
    assert visible_keys(KEYS) == KEYS


def test_search_is_case_insensitive_substring() -> None:
    assert visible_keys(KEYS, search_term="NAME") == ["Name", "nickname"]
    assert visible_keys(KEYS, search_term="zzz") == []


def test_hide_empty_uses_field_stats() -> None:
    stats = compute_field_stats(RECORDS, KEYS)
    assert visible_keys(KEYS, hide_empty=True, field_stats=stats) == ["Name", "age"]


def test_export_filter_is_ignored_in_extract_mode() -> None:
    assert visible_keys(KEYS, export_filter=ExportFilter.COMMON) == KEYS


def test_compare_mode_filters() -> None:
    records_b = [{"Name": "a", "zip": ""}]
    comparison = compare_datasets(RECORDS, KEYS, records_b, ["Name", "zip"])

    assert visible_keys([], comparison=comparison) == ["Name", "age", "city", "nickname", "zip"]
    assert visible_keys([], export_filter=ExportFilter.COMMON, comparison=comparison) == ["Name"]
    assert visible_keys([], export_filter="differences", comparison=comparison) == [
        "age", "city", "nickname", "zip",
    ]
    assert visible_keys([], hide_empty=True, comparison=comparison) == ["Name", "age"]


def test_stages_commute() -> None:
    comparison = compare_datasets(RECORDS, KEYS, [{"age": 1, "cityzen": 1}], ["age", "cityzen"])
    combined = visible_keys(
        [], search_term="ci", hide_empty=True, export_filter=ExportFilter.DIFFERENCES, comparison=comparison
    )
    searched = set(visible_keys([], search_term="ci", comparison=comparison))
    non_empty = set(visible_keys([], hide_empty=True, comparison=comparison))
    different = set(visible_keys([], export_filter=ExportFilter.DIFFERENCES, comparison=comparison))
    assert set(combined) == searched & non_empty & different == {"cityzen"}


def test_hide_empty_in_extract_mode_needs_stats() -> None:
    with pytest.raises(ValueError, match="field_stats"):
        visible_keys(KEYS, hide_empty=True)
    assert visible_keys(KEYS, hide_empty=True, field_stats={}) == []
    assert visible_keys(KEYS, hide_empty=False) == KEYS
