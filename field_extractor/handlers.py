from __future__ import annotations

import logging
from typing import List, Optional

import gradio as gr

from .comparison import entry_indicator, summarize_comparison
from .config import settings
from .filtering import ExportFilter
from .io_utils import read_upload
from .parsing import Dataset, parse_input
from .selection import apply_choices, as_selection, deselect_all, prune_selection, select_all, toggle_key
from .views import COMPARE, FieldView, derive_view, filter_view

logger = logging.getLogger(__name__)

STRATEGY_LABELS = {
    'json': "JSON",
    'fenced_json': "fenced JSON",
    'console': "console output",
}


def _view(mode, dataset_a, dataset_b) -> FieldView:
    return derive_view(mode, dataset_a, dataset_b, sample_limit=settings.SAMPLE_LIMIT)


def comparison_selection(dataset_a: Optional[Dataset], dataset_b: Optional[Dataset]):
    """Every comparison key, or nothing while one side is missing."""
    return as_selection(_view(COMPARE, dataset_a, dataset_b).keys)


def loaded_message(label: str, dataset: Dataset, strategy: Optional[str]) -> str:
    source = STRATEGY_LABELS.get(strategy, strategy)
    return (
        f"{label}: Successfully loaded {dataset.record_count} records "
        f"with {len(dataset.keys)} fields ({source})."
    )


def handle_dataset_a_text(text, mode, dataset_a, dataset_b, selection):
    """Parse dataset A; returns (dataset_a, selection, status)."""
    result = parse_input(text)

    if result.cleared:
        dataset_a = Dataset()
        if mode == COMPARE:
            return dataset_a, comparison_selection(dataset_a, dataset_b), ""
        return dataset_a, as_selection(None), ""

    if not result.ok:
        return dataset_a, as_selection(selection), f"Dataset A: {result.error.message}"

    dataset_a = result.dataset
    if mode == COMPARE:
        selection = comparison_selection(dataset_a, dataset_b)
    else:
        selection = as_selection(dataset_a.keys)
    return dataset_a, selection, loaded_message("Dataset A", dataset_a, result.strategy)


def handle_dataset_b_text(text, mode, dataset_a, dataset_b, selection):
    """Parse dataset B; returns (dataset_b, selection, status)."""
    result = parse_input(text)

    if result.cleared:
        dataset_b = Dataset()
    elif not result.ok:
        return dataset_b, as_selection(selection), f"Dataset B: {result.error.message}"
    else:
        dataset_b = result.dataset

    if mode == COMPARE:
        selection = comparison_selection(dataset_a, dataset_b)
    status = "" if result.cleared else loaded_message("Dataset B", dataset_b, result.strategy)
    return dataset_b, as_selection(selection), status


def handle_file_upload(file_obj, label: str):
    """Load an uploaded file into its paste box; the box's change event parses it."""
    text, error = read_upload(file_obj)
    if error:
        return gr.update(), f"{label}: {error}"
    return gr.update(value=text), ""


def handle_mode_change(mode, dataset_a, dataset_b, selection):
    """Returns (selection, dataset B column update, export filter update)."""
    compare = mode == COMPARE
    logger.debug("Switched to %s mode", mode)
    if compare:
        selection = comparison_selection(dataset_a, dataset_b)
    else:
        selection = prune_selection(selection, (dataset_a or Dataset()).keys)
    return selection, gr.update(visible=compare), gr.update(visible=compare)


def current_visible_keys(mode, dataset_a, dataset_b, search_term, hide_empty, export_filter) -> List[str]:
    view = _view(mode, dataset_a, dataset_b)
    return filter_view(view, search_term, hide_empty, ExportFilter(export_filter or ExportFilter.ALL))


def handle_select_all(mode, dataset_a, dataset_b, search_term, hide_empty, export_filter):
    return select_all(current_visible_keys(mode, dataset_a, dataset_b, search_term, hide_empty, export_filter))


def handle_deselect_all(mode, dataset_a, dataset_b, selection, search_term, hide_empty, export_filter):
    visible = current_visible_keys(mode, dataset_a, dataset_b, search_term, hide_empty, export_filter)
    return deselect_all(selection, visible)


def handle_field_choices(shown: List[str], selection, chosen):
    return apply_choices(selection, shown, chosen or [])


def handle_group_toggle(group_name: str, collapsed):
    return toggle_key(collapsed, group_name)


def field_label(view: FieldView, key: str, record_count: int) -> str:
    if view.is_compare:
        entry = view.comparison[key]
        counts = []
        if entry.in_a:
            counts.append(f"A:{entry.count_a}")
        if entry.in_b:
            counts.append(f"B:{entry.count_b}")
        label, _ = entry_indicator(entry)
        return f"{key} [{' '.join(counts)}] {label}"

    stats = view.stats.get(key)
    count = stats.count if stats else 0
    text = f"{key} ({count}/{record_count})"
    if stats and stats.has_mixed_types:
        text += f" mixed types: {'/'.join(stats.types)}"
    return text


def summary_text(mode, dataset_a, dataset_b) -> str:
    dataset_a = dataset_a or Dataset()
    dataset_b = dataset_b or Dataset()
    view = _view(mode, dataset_a, dataset_b)

    if mode != COMPARE:
        if dataset_a.is_empty:
            return "Paste your data above to get started."
        return f"**Records:** {dataset_a.record_count} | **Total Fields:** {len(view.keys)}"

    if view.comparison is None:
        return "Paste datasets above to compare."
    summary = summarize_comparison(view.comparison)
    return (
        f"**Records A/B:** {dataset_a.record_count}/{dataset_b.record_count} | "
        f"**Total Fields:** {summary['total']} | "
        f"**In both:** {summary['both']} | **Only A:** {summary['onlyA']} | **Only B:** {summary['onlyB']} | "
        f"**Values differ:** {summary['valuesDiffer']} | **Mixed types:** {summary['typeMismatch']}"
    )

