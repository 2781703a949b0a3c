from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .comparison import SAMPLE_LIMIT, ComparisonEntry, compare_datasets
from .filtering import ExportFilter, visible_keys
from .grouping import FieldGrouping, group_fields, visible_groups
from .parsing import Dataset
from .stats import FieldStats, compute_field_stats

EXTRACT = "extract"
COMPARE = "compare"
MODES = (EXTRACT, COMPARE)


@dataclass
class FieldView:
    """Everything derived from the datasets for one mode."""
    mode: str
    keys: List[str] = field(default_factory=list)
    stats: Dict[str, FieldStats] = field(default_factory=dict)
    comparison: Optional[Dict[str, ComparisonEntry]] = None

    @property
    def is_compare(self) -> bool:
        return self.mode == COMPARE


def derive_view(
    mode: str,
    dataset_a: Optional[Dataset],
    dataset_b: Optional[Dataset] = None,
    sample_limit: int = SAMPLE_LIMIT,
) -> FieldView:
    dataset_a = dataset_a or Dataset()
    dataset_b = dataset_b or Dataset()

    if mode != COMPARE:
        return FieldView(
            mode=EXTRACT,
            keys=list(dataset_a.keys),
            stats=compute_field_stats(dataset_a.records, dataset_a.keys),
        )

    # A comparison only exists once both sides hold data.
    if dataset_a.is_empty or dataset_b.is_empty:
        return FieldView(mode=COMPARE)

    comparison = compare_datasets(
        dataset_a.records, dataset_a.keys, dataset_b.records, dataset_b.keys, sample_limit=sample_limit
    )
    return FieldView(mode=COMPARE, keys=list(comparison.keys()), comparison=comparison)


def filter_view(
    view: FieldView,
    search_term: str = "",
    hide_empty: bool = False,
    export_filter: ExportFilter = ExportFilter.ALL,
) -> List[str]:
    if view.is_compare and view.comparison is None:
        return []
    return visible_keys(
        view.keys,
        search_term=search_term or "",
        hide_empty=bool(hide_empty),
        export_filter=export_filter or ExportFilter.ALL,
        field_stats=view.stats,
        comparison=view.comparison,
    )


def grouped_visible_fields(view: FieldView, visible: List[str]) -> FieldGrouping:
    return visible_groups(group_fields(view.keys), visible)
