from __future__ import annotations

import logging
import os

import gradio as gr
import pandas as pd

from .config import settings
from .errors import ExportError
from .export import export_filename, export_selection
from .parsing import Dataset
from .preview import (
    COMPARE_PREVIEW_HEADERS,
    compare_preview_rows,
    extract_preview_headers,
    extract_preview_rows,
)
from .views import COMPARE, derive_view

logger = logging.getLogger(__name__)


def export_data_handler(output_format, mode, dataset_a, dataset_b, selection, export_dir=None, enabled=None):
    """Write the selected projection to a file; returns (path, status message)."""
    if enabled is None:
        enabled = settings.EXPORT_ENABLED
    if not enabled:
        logger.warning("Export requested while exports are disabled")
        return None, "Export is disabled for this session."

    dataset_a = dataset_a or Dataset()
    dataset_b = dataset_b or Dataset()
    records_b = dataset_b.records if mode == COMPARE and not dataset_b.is_empty else None

    try:
        payload = export_selection(output_format, dataset_a.records, selection, records_b)
    except ExportError as e:
        logger.warning("Export refused: %s", e)
        return None, str(e)

    path = os.path.join(str(export_dir or settings.EXPORT_DIR), export_filename(payload.extension))
    try:
        with open(path, 'wb') as f:
            f.write(payload.to_bytes())
    except OSError as e:
        logger.warning("Could not write export to %s: %s", path, e)
        return None, f"Error during export: {str(e)}"

    logger.info("Exported %d fields as %s to %s", len(selection), payload.mime_type, path)
    return path, f"Export successful! Saved to {path}"


def export_buttons_update(selection, enabled=None):
    if enabled is None:
        enabled = settings.EXPORT_ENABLED
    interactive = bool(enabled and selection)
    return gr.update(interactive=interactive), gr.update(interactive=interactive)


def preview_handler(mode, dataset_a, dataset_b, selection, preview_count=None):
    """Preview table for the current selection, or None when nothing is selected."""
    if not selection:
        return None

    limit = settings.PREVIEW_TRUNCATE
    if mode == COMPARE:
        view = derive_view(COMPARE, dataset_a, dataset_b, sample_limit=settings.SAMPLE_LIMIT)
        if view.comparison is None:
            return None
        rows = compare_preview_rows(view.comparison, selection, limit=limit)
        return pd.DataFrame(rows, columns=COMPARE_PREVIEW_HEADERS)

    dataset_a = dataset_a or Dataset()
    count = int(preview_count or settings.DEFAULT_PREVIEW_COUNT)
    rows = extract_preview_rows(dataset_a.records, selection, count=count, limit=limit)
    return pd.DataFrame(rows, columns=extract_preview_headers(selection))
