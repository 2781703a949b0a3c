from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

MIN_PREFIX_LENGTH = 3
MIN_GROUP_SIZE = 2

_NUMBERED_KEY = re.compile(r'(.+?)(_)?(\d+)')


@dataclass
class FieldGrouping:
    groups: Dict[str, List[str]] = field(default_factory=dict)
    ungrouped: List[str] = field(default_factory=list)


def split_numbered_key(key: str) -> Optional[Tuple[str, int]]:
    """Split `driver_12` / `driver12` into (`driver`, 12); None if not numbered."""
    match = _NUMBERED_KEY.fullmatch(key)
    if not match:
        return None
    return match.group(1), int(match.group(3))


def group_fields(keys: Iterable[str]) -> FieldGrouping:
    """Cluster keys sharing a prefix followed by a trailing number.

    A bucket survives only with at least two members carrying at least two
    distinct numbers; everything else is reported as ungrouped.
    """
    keys = list(keys)
    buckets: Dict[str, List[Tuple[str, int]]] = {}
    loose = set()

    for key in keys:
        parts = split_numbered_key(key)
        if parts is None or len(parts[0]) < MIN_PREFIX_LENGTH:
            loose.add(key)
            continue
        prefix, number = parts
        buckets.setdefault(prefix, []).append((key, number))

    groups: Dict[str, List[str]] = {}
    for prefix, members in buckets.items():
        numbers = sorted({number for _, number in members})
        if len(members) < MIN_GROUP_SIZE or len(numbers) < MIN_GROUP_SIZE:
            loose.update(key for key, _ in members)
            continue
        groups[prefix] = [key for key, _ in members]

    return FieldGrouping(groups=groups, ungrouped=[k for k in keys if k in loose])


def visible_groups(grouping: FieldGrouping, visible: Iterable[str]) -> FieldGrouping:
    """Narrow a grouping to the visible keys, dropping groups left empty."""
    shown = set(visible)
    groups = {}
    for prefix, members in grouping.groups.items():
        kept = [k for k in members if k in shown]
        if kept:
            groups[prefix] = kept
    return FieldGrouping(groups=groups, ungrouped=[k for k in grouping.ungrouped if k in shown])
