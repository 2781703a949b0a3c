from __future__ import annotations

from enum import Enum
from typing import Dict, Iterable, List, Optional

from .comparison import CompareStatus, ComparisonEntry
from .stats import FieldStats


class ExportFilter(str, Enum):
    ALL = "all"
    COMMON = "common"
    DIFFERENCES = "differences"


def visible_keys(
    keys: Iterable[str],
    search_term: str = "",
    hide_empty: bool = False,
    export_filter: ExportFilter = ExportFilter.ALL,
    field_stats: Optional[Dict[str, FieldStats]] = None,
    comparison: Optional[Dict[str, ComparisonEntry]] = None,
) -> List[str]:
    """Apply search, hide-empty and (compare mode only) status filters.

    Passing `comparison` switches to compare mode; `keys` is then ignored in
    favour of the comparison's own key list.
    """
    compare_mode = comparison is not None
    result = list(comparison.keys()) if compare_mode else list(keys)

    if search_term:
        needle = search_term.lower()
        result = [k for k in result if needle in k.lower()]

    if hide_empty:
        if compare_mode:
            result = [k for k in result if comparison[k].has_values]
        else:
            if field_stats is None:
                raise ValueError("field_stats is required to hide empty fields in extract mode")
            result = [k for k in result if k in field_stats and field_stats[k].count > 0]

    if compare_mode:
        export_filter = ExportFilter(export_filter or ExportFilter.ALL)
        if export_filter is ExportFilter.COMMON:
            result = [k for k in result if comparison[k].status is CompareStatus.BOTH]
        elif export_filter is ExportFilter.DIFFERENCES:
            result = [k for k in result if comparison[k].status is not CompareStatus.BOTH]

    return result
