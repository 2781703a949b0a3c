from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from typing import AbstractSet, Any, Dict, List, Optional

from .errors import ExportSerializationError, NoRecordsError, NoSelectionError
from .value_types import format_scalar, normalize_numbers

logger = logging.getLogger(__name__)

CSV = "csv"
JSON = "json"
MIME_TYPES = {CSV: "text/csv", JSON: "application/json"}
FILENAME_PREFIX = "filtered-data"


@dataclass(frozen=True)
class ExportPayload:
    content: str
    mime_type: str
    extension: str

    def to_bytes(self) -> bytes:
        return encode_content(self.content, self.extension)


def encode_content(content: str, fmt: str) -> bytes:
    # Lone surrogates survive json.loads but have no UTF-8 encoding.
    try:
        return content.encode('utf-8')
    except UnicodeEncodeError as exc:
        raise ExportSerializationError(
            f"Error exporting {fmt.upper()}: text contains characters that cannot be saved as UTF-8"
        ) from exc


def project_records(records: List[Any], selection: AbstractSet[str]) -> List[Dict[str, Any]]:
    """Reduce every record to its selected keys, in sorted key order."""
    if not selection:
        return []
    keys = sorted(selection)
    rows: List[Dict[str, Any]] = []
    for record in records:
        if not isinstance(record, dict):
            rows.append({})
            continue
        rows.append({key: record[key] for key in keys if key in record})
    return rows


def _csv_cell(value: Any) -> str:
    """Quote a value, doubling inner quotes; null and missing stay a bare empty field."""
    if value is None:
        return ''
    return '"' + format_scalar(value).replace('"', '""') + '"'


def _csv_line(cells: List[str]) -> str:
    return ','.join(cells)


def to_csv(
    records_a: List[Any],
    selection: AbstractSet[str],
    records_b: Optional[List[Any]] = None,
) -> str:
    """Render the projection as CSV; passing `records_b` adds a Dataset column."""
    headers = sorted(selection)
    header_cells = [_csv_cell(h) for h in headers]
    lines: List[str] = []

    # The Dataset column name and its A/B labels are written unquoted.
    if records_b is None:
        lines.append(_csv_line(header_cells))
        for row in project_records(records_a, selection):
            lines.append(_csv_line([_csv_cell(row.get(h)) for h in headers]))
    else:
        lines.append(_csv_line(['Dataset'] + header_cells))
        for label, records in (('A', records_a), ('B', records_b)):
            for row in project_records(records, selection):
                lines.append(_csv_line([label] + [_csv_cell(row.get(h)) for h in headers]))

    return '\n'.join(lines)


def to_json(
    records_a: List[Any],
    selection: AbstractSet[str],
    records_b: Optional[List[Any]] = None,
) -> str:
    if records_b is None:
        payload: Any = project_records(records_a, selection)
    else:
        payload = {
            "datasetA": project_records(records_a, selection),
            "datasetB": project_records(records_b, selection),
        }
    return json.dumps(normalize_numbers(payload), indent=2, ensure_ascii=False)


SERIALIZERS = {CSV: to_csv, JSON: to_json}


def export_selection(
    fmt: str,
    records_a: List[Any],
    selection: AbstractSet[str],
    records_b: Optional[List[Any]] = None,
) -> ExportPayload:
    """Build the export content, refusing empty selections and empty datasets."""
    fmt = (fmt or '').lower()
    if fmt not in SERIALIZERS:
        raise ExportSerializationError(f"Unsupported export format: {fmt!r}")
    if not selection:
        raise NoSelectionError()
    if not records_a and not records_b:
        raise NoRecordsError()

    try:
        content = SERIALIZERS[fmt](records_a or [], selection, records_b)
    except (TypeError, ValueError) as exc:
        raise ExportSerializationError(f"Error exporting {fmt.upper()}: {exc}") from exc
    encode_content(content, fmt)

    logger.debug("Serialized %d fields as %s (%d chars)", len(selection), fmt, len(content))
    return ExportPayload(content=content, mime_type=MIME_TYPES[fmt], extension=fmt)


def export_filename(extension: str, now: Optional[float] = None) -> str:
    stamp = int((time.time() if now is None else now) * 1000)
    return f"{FILENAME_PREFIX}-{stamp}.{extension}"
