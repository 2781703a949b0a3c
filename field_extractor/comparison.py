"""Field-level comparison of two datasets.

Each key seen in either dataset gets a ComparisonEntry describing where it
occurs, which value types it carries on each side and whether the values
observed in A also show up in B.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Tuple

from .stats import non_empty_values, observed_types
from .value_types import canonical_value

SAMPLE_LIMIT = 3


class CompareStatus(str, Enum):
    BOTH = "both"
    ONLY_A = "onlyA"
    ONLY_B = "onlyB"


def status_for(in_a: bool, in_b: bool) -> CompareStatus:
    if in_a and in_b:
        return CompareStatus.BOTH
    if in_a:
        return CompareStatus.ONLY_A
    return CompareStatus.ONLY_B


@dataclass(frozen=True)
class ComparisonEntry:
    in_a: bool
    in_b: bool
    count_a: int = 0
    count_b: int = 0
    types_a: Tuple[str, ...] = ()
    types_b: Tuple[str, ...] = ()
    samples_a: Tuple[Any, ...] = ()
    samples_b: Tuple[Any, ...] = ()
    type_mismatch: bool = False
    values_differ: bool = False

    @property
    def status(self) -> CompareStatus:
        return status_for(self.in_a, self.in_b)

    @property
    def has_values(self) -> bool:
        return self.count_a > 0 or self.count_b > 0

    def to_dict(self) -> dict:
        return {
            "inA": self.in_a,
            "inB": self.in_b,
            "countA": self.count_a,
            "countB": self.count_b,
            "typesA": list(self.types_a),
            "typesB": list(self.types_b),
            "samplesA": list(self.samples_a),
            "samplesB": list(self.samples_b),
            "status": self.status.value,
            "typeMismatch": self.type_mismatch,
            "valuesDiffer": self.values_differ,
        }


def _side(records: List[Any], key: str, present: bool):
    if not present:
        return [], (), set()
    values = non_empty_values(records, key)
    return values, observed_types(values), {canonical_value(v) for v in values}


def has_type_mismatch(types_a: Tuple[str, ...], types_b: Tuple[str, ...]) -> bool:
    if not types_a or not types_b:
        return False
    return len(types_a) > 1 or len(types_b) > 1 or types_a[0] != types_b[0]


def compare_datasets(
    records_a: List[Any],
    keys_a: List[str],
    records_b: List[Any],
    keys_b: List[str],
    sample_limit: int = SAMPLE_LIMIT,
) -> Dict[str, ComparisonEntry]:
    set_a, set_b = set(keys_a), set(keys_b)
    analysis: Dict[str, ComparisonEntry] = {}

    for key in sorted(set_a | set_b):
        in_a, in_b = key in set_a, key in set_b
        values_a, types_a, canon_a = _side(records_a, key, in_a)
        values_b, types_b, canon_b = _side(records_b, key, in_b)

        # Only A's values are checked against B; B-only values do not count.
        values_differ = bool(in_a and in_b and canon_a and canon_b and not canon_a <= canon_b)

        analysis[key] = ComparisonEntry(
            in_a=in_a,
            in_b=in_b,
            count_a=len(values_a),
            count_b=len(values_b),
            types_a=types_a,
            types_b=types_b,
            samples_a=tuple(values_a[:sample_limit]),
            samples_b=tuple(values_b[:sample_limit]),
            type_mismatch=in_a and in_b and has_type_mismatch(types_a, types_b),
            values_differ=values_differ,
        )

    return analysis


def summarize_comparison(analysis: Dict[str, ComparisonEntry]) -> Dict[str, int]:
    summary = {
        "total": len(analysis),
        CompareStatus.BOTH.value: 0,
        CompareStatus.ONLY_A.value: 0,
        CompareStatus.ONLY_B.value: 0,
        "valuesDiffer": 0,
        "typeMismatch": 0,
    }
    for entry in analysis.values():
        summary[entry.status.value] += 1
        summary["valuesDiffer"] += int(entry.values_differ)
        summary["typeMismatch"] += int(entry.type_mismatch)
    return summary


def entry_indicator(entry: ComparisonEntry) -> Tuple[str, str]:
    """Short status label and its tooltip text for a field."""
    if entry.status is CompareStatus.BOTH:
        if entry.values_differ:
            return "values differ", "Field exists in both datasets but values differ"
        if entry.type_mismatch:
            return "mixed types", "Field exists in both datasets but has mixed types"
        return "match", "Field exists in both datasets with matching values"
    if entry.status is CompareStatus.ONLY_A:
        return "only A", "Field only exists in Dataset A"
    return "only B", "Field only exists in Dataset B"
