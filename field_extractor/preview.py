from __future__ import annotations

from typing import AbstractSet, Any, Dict, List

from .comparison import ComparisonEntry
from .export import project_records
from .value_types import format_scalar

PREVIEW_COUNTS = (3, 5, 10)
TRUNCATE_AT = 50


def truncate(text: str, limit: int = TRUNCATE_AT) -> str:
    if len(text) > limit:
        return text[:limit] + '...'
    return text


def display_value(value: Any, limit: int = TRUNCATE_AT) -> str:
    if value is None:
        return 'null'
    return truncate(format_scalar(value), limit)


def extract_preview_rows(
    records: List[Any],
    selection: AbstractSet[str],
    count: int = PREVIEW_COUNTS[0],
    limit: int = TRUNCATE_AT,
) -> List[List[str]]:
    """First `count` projected records as display rows, prefixed with `#n`."""
    headers = sorted(selection or ())
    if not headers:
        return []
    rows = []
    for idx, record in enumerate(project_records(records[:max(1, int(count))], selection), start=1):
        rows.append([f"#{idx}"] + [display_value(record.get(h), limit) for h in headers])
    return rows


def extract_preview_headers(selection: AbstractSet[str]) -> List[str]:
    return ["Record"] + sorted(selection or ())


def _samples_text(samples, present: bool, missing_label: str, limit: int) -> str:
    if not present:
        return missing_label
    joined = ', '.join(format_scalar(v) for v in samples)
    return truncate(joined, limit) if joined else 'null'


def compare_preview_rows(
    comparison: Dict[str, ComparisonEntry],
    selection: AbstractSet[str],
    limit: int = TRUNCATE_AT,
) -> List[List[str]]:
    rows = []
    for key in sorted(selection or ()):
        entry = comparison.get(key)
        if entry is None:
            continue
        rows.append([
            key,
            _samples_text(entry.samples_a, entry.in_a, '(not in A)', limit),
            _samples_text(entry.samples_b, entry.in_b, '(not in B)', limit),
        ])
    return rows


COMPARE_PREVIEW_HEADERS = ["Field", "Sample Values (A)", "Sample Values (B)"]
