from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Tuple

from .value_types import has_value, type_category


@dataclass(frozen=True)
class FieldStats:
    count: int = 0
    types: Tuple[str, ...] = ()

    @property
    def has_mixed_types(self) -> bool:
        return len(self.types) > 1


def observed_types(values: Iterable[Any]) -> Tuple[str, ...]:
    """Distinct type categories in first-seen order."""
    seen: List[str] = []
    for value in values:
        category = type_category(value)
        if category not in seen:
            seen.append(category)
    return tuple(seen)


def non_empty_values(records: List[Any], key: str) -> List[Any]:
    return [record[key] for record in records if has_value(record, key)]


def compute_field_stats(records: List[Any], keys: List[str]) -> Dict[str, FieldStats]:
    """Count non-empty occurrences and observed types per key."""
    stats: Dict[str, FieldStats] = {}
    for key in keys:
        values = non_empty_values(records, key)
        stats[key] = FieldStats(count=len(values), types=observed_types(values))
    return stats
