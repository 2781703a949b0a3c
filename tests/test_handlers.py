from __future__ import annotations

import json
import pathlib
import sys

import pytest

sys.path.insert(0, str(pathlib.Path(__file__).resolve().parents[1]))

pytest.importorskip("gradio")
pd = pytest.importorskip("pandas")

from field_extractor.handlers import (
    field_label,
    handle_dataset_a_text,
    handle_dataset_b_text,
    handle_deselect_all,
    handle_field_choices,
    handle_file_upload,
    handle_mode_change,
    handle_select_all,
    summary_text,
)
from field_extractor.handlers_export import export_buttons_update, export_data_handler, preview_handler
from field_extractor.parsing import Dataset, parse_input
from field_extractor.views import COMPARE, EXTRACT, derive_view

TEXT_A = '[{"driver1": "x", "driver2": "y", "id": 1}, {"id": 2, "note": ""}]'
TEXT_B = '[{"id": 3, "extra": true}]'


def _dataset(text: str) -> Dataset:
    return parse_input(text).dataset


def test_extract_parse_selects_every_key() -> None:
    dataset_a, selection, status = handle_dataset_a_text(TEXT_A, EXTRACT, Dataset(), Dataset(), frozenset())

    assert dataset_a.keys == ["driver1", "driver2", "id", "note"]
    assert selection == set(dataset_a.keys)
    assert "2 records with 4 fields" in status


def test_clearing_dataset_a_resets_selection() -> None:
    dataset_a, selection, status = handle_dataset_a_text("  ", EXTRACT, _dataset(TEXT_A), Dataset(), {"id"})
    assert dataset_a.is_empty
    assert selection == frozenset()
    assert status == ""


def test_parse_failure_keeps_previous_data_and_reports() -> None:
    previous = _dataset(TEXT_A)
    dataset_a, selection, status = handle_dataset_a_text("[]", EXTRACT, previous, Dataset(), {"id"})

    assert dataset_a is previous
    assert selection == {"id"}
    assert status.startswith("Dataset A: No data found")


def test_dataset_b_errors_are_scoped_to_b() -> None:
    _, _, status = handle_dataset_b_text("[1, 2]", COMPARE, _dataset(TEXT_A), Dataset(), frozenset())
    assert status.startswith("Dataset B: No fields found")


def test_compare_parse_selects_comparison_keys() -> None:
    dataset_a = _dataset(TEXT_A)
    dataset_b, selection, _ = handle_dataset_b_text(TEXT_B, COMPARE, dataset_a, Dataset(), frozenset())
    assert selection == {"driver1", "driver2", "extra", "id", "note"}


def test_mode_switch_sets_and_prunes_selection() -> None:
    dataset_a, dataset_b = _dataset(TEXT_A), _dataset(TEXT_B)

    selection, column, radio = handle_mode_change(COMPARE, dataset_a, dataset_b, frozenset({"id"}))
    assert selection == {"driver1", "driver2", "extra", "id", "note"}
    assert column["visible"] is True and radio["visible"] is True

    selection, column, _ = handle_mode_change(EXTRACT, dataset_a, dataset_b, selection)
    assert selection == {"driver1", "driver2", "id", "note"}
    assert column["visible"] is False


def test_compare_mode_without_b_has_no_fields() -> None:
    selection, _, _ = handle_mode_change(COMPARE, _dataset(TEXT_A), Dataset(), frozenset({"id"}))
    assert selection == frozenset()
    assert summary_text(COMPARE, _dataset(TEXT_A), Dataset()) == "Paste datasets above to compare."


def test_select_and_deselect_all_respect_filters() -> None:
    dataset_a = _dataset(TEXT_A)
    selection = handle_select_all(EXTRACT, dataset_a, None, "driver", False, "all")
    assert selection == {"driver1", "driver2"}

    selection = handle_deselect_all(EXTRACT, dataset_a, None, frozenset(dataset_a.keys), "", True, "all")
    assert selection == {"note"}


def test_field_choices_fold_into_selection() -> None:
    selection = handle_field_choices(["driver1", "driver2"], frozenset({"id", "driver1"}), ["driver2"])
    assert selection == {"id", "driver2"}


def test_field_labels() -> None:
    dataset_a = _dataset('[{"v": 1}, {"v": "x"}]')
    view = derive_view(EXTRACT, dataset_a)
    assert field_label(view, "v", dataset_a.record_count) == "v (2/2) mixed types: number/string"

    view = derive_view(COMPARE, _dataset('[{"v": 1}]'), _dataset('[{"v": 2}, {"w": 1}]'))
    assert field_label(view, "v", 1) == "v [A:1 B:1] values differ"
    assert field_label(view, "w", 1) == "w [B:1] only B"


def test_file_upload_fills_the_paste_box(tmp_path) -> None:
    path = tmp_path / "dump.json"
    path.write_text('\ufeff{"a": 1}', encoding="utf-8")
    update, status = handle_file_upload(str(path), label="Dataset A")
    assert update["value"] == '{"a": 1}'
    assert status == ""

    update, status = handle_file_upload(str(tmp_path / "missing.json"), label="Dataset A")
    assert status.startswith("Dataset A: Error reading file")


def test_export_writes_file(tmp_path) -> None:
    dataset_a = _dataset(TEXT_A)
    path, status = export_data_handler("json", EXTRACT, dataset_a, None, {"id"}, export_dir=tmp_path, enabled=True)

    assert path is not None and path.endswith(".json")
    assert pathlib.Path(path).name.startswith("filtered-data-")
    assert json.loads(pathlib.Path(path).read_text(encoding="utf-8")) == [{"id": 1}, {"id": 2}]
    assert status.startswith("Export successful")


def test_compare_export_includes_both_datasets(tmp_path) -> None:
    path, _ = export_data_handler(
        "csv", COMPARE, _dataset(TEXT_A), _dataset(TEXT_B), {"id"}, export_dir=tmp_path, enabled=True
    )
    assert pathlib.Path(path).read_text(encoding="utf-8") == 'Dataset,"id"\nA,"1"\nA,"2"\nB,"3"'


def test_export_refusals_are_messages_not_exceptions(tmp_path) -> None:
    path, status = export_data_handler("csv", EXTRACT, _dataset(TEXT_A), None, frozenset(), export_dir=tmp_path)
    assert path is None
    assert status.startswith("No fields selected")

    path, status = export_data_handler("csv", EXTRACT, _dataset(TEXT_A), None, {"id"}, enabled=False)
    assert path is None
    assert "disabled" in status


def test_unencodable_text_is_an_export_error_not_a_crash(tmp_path) -> None:
    dataset = parse_input('[{"a": "\\ud800"}]').dataset
    assert dataset.records == [{"a": "\ud800"}]

    for fmt in ("json", "csv"):
        path, status = export_data_handler(
            fmt, EXTRACT, dataset, None, frozenset({"a"}), export_dir=tmp_path, enabled=True
        )
        assert path is None
        assert "UTF-8" in status
    assert list(tmp_path.iterdir()) == []


def test_deeply_nested_paste_reports_a_status() -> None:
    text = "[" * 3000 + "]" * 3000
    dataset_a, selection, status = handle_dataset_a_text(text, EXTRACT, Dataset(), Dataset(), frozenset())
    assert dataset_a.is_empty
    assert "nested too deeply" in status


def test_export_buttons_follow_selection() -> None:
    csv_btn, json_btn = export_buttons_update(frozenset(), enabled=True)
    assert csv_btn["interactive"] is False
    csv_btn, _ = export_buttons_update({"a"}, enabled=True)
    assert csv_btn["interactive"] is True
    csv_btn, _ = export_buttons_update({"a"}, enabled=False)
    assert csv_btn["interactive"] is False


def test_preview_tables() -> None:
    dataset_a = _dataset(TEXT_A)
    frame = preview_handler(EXTRACT, dataset_a, None, {"id", "note"}, 3)
    assert list(frame.columns) == ["Record", "id", "note"]
    assert frame.values.tolist() == [["#1", "1", "null"], ["#2", "2", ""]]

    frame = preview_handler(COMPARE, dataset_a, _dataset(TEXT_B), {"id"}, 3)
    assert frame.values.tolist() == [["id", "1, 2", "3"]]

    assert preview_handler(EXTRACT, dataset_a, None, frozenset(), 3) is None
