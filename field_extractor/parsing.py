"""Multi-format parser: raw pasted text to a Dataset.

Strategies are tried in order and each one reports `(records, error)` instead of
raising, so the reason the last strategy gave up is still known when all of them
fail.
"""
from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Tuple

from .console_format import has_key_value_lines, parse_console_dump
from .errors import ParseError, ParseErrorKind

logger = logging.getLogger(__name__)

_FENCE_LANG = re.compile(r'```json\n?')
_FENCE = re.compile(r'```\n?')

StrategyOutcome = Tuple[Optional[List[Any]], Optional[ParseErrorKind]]

# Downstream helpers (canonical JSON, number folding) recurse per level.
MAX_NESTING_DEPTH = 200


@dataclass(frozen=True)
class Dataset:
    records: List[Any] = field(default_factory=list)
    keys: List[str] = field(default_factory=list)

    @property
    def record_count(self) -> int:
        return len(self.records)

    @property
    def is_empty(self) -> bool:
        return not self.records


@dataclass(frozen=True)
class ParseResult:
    dataset: Dataset = field(default_factory=Dataset)
    error: Optional[ParseError] = None
    strategy: Optional[str] = None
    cleared: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None


def collect_keys(records: List[Any]) -> List[str]:
    keys = set()
    for record in records:
        if isinstance(record, dict):
            keys.update(str(k) for k in record.keys())
    return sorted(keys)


def _reject_constant(name: str):
    raise ValueError(f"Invalid JSON constant: {name}")


def _load_json(text: str) -> Any:
    return json.loads(text, parse_constant=_reject_constant)


def _as_records(parsed: Any) -> List[Any]:
    return parsed if isinstance(parsed, list) else [parsed]


def nesting_depth(value: Any) -> int:
    """Deepest list/dict nesting below `value`, walked without recursion."""
    deepest = 0
    stack = [(value, 0)]
    while stack:
        item, depth = stack.pop()
        if isinstance(item, dict):
            children = item.values()
        elif isinstance(item, list):
            children = item
        else:
            continue
        deepest = max(deepest, depth + 1)
        stack.extend((child, depth + 1) for child in children)
    return deepest


def strip_code_fences(text: str) -> str:
    return _FENCE.sub('', _FENCE_LANG.sub('', text))


def parse_json_text(text: str) -> StrategyOutcome:
    try:
        return _as_records(_load_json(text)), None
    except RecursionError:
        return None, ParseErrorKind.TOO_DEEP
    except ValueError:
        return None, ParseErrorKind.MALFORMED


def parse_fenced_json(text: str) -> StrategyOutcome:
    if '```' not in text:
        return None, ParseErrorKind.MALFORMED
    try:
        return _as_records(_load_json(strip_code_fences(text).strip())), None
    except RecursionError:
        return None, ParseErrorKind.TOO_DEEP
    except ValueError:
        return None, ParseErrorKind.INVALID_FENCED_JSON


def parse_console_text(text: str) -> StrategyOutcome:
    text = strip_code_fences(text)
    obj = parse_console_dump(text)
    if obj:
        return [obj], None
    if has_key_value_lines(text):
        return None, ParseErrorKind.NO_VALUES
    return None, ParseErrorKind.MALFORMED


STRATEGIES: List[Tuple[str, Callable[[str], StrategyOutcome]]] = [
    ('json', parse_json_text),
    ('fenced_json', parse_fenced_json),
    ('console', parse_console_text),
]


def _pick_failure(failures: List[ParseErrorKind]) -> ParseErrorKind:
    if ParseErrorKind.TOO_DEEP in failures:
        return ParseErrorKind.TOO_DEEP
    # A fenced block that still failed is the most specific hint we can give.
    if ParseErrorKind.INVALID_FENCED_JSON in failures:
        return ParseErrorKind.INVALID_FENCED_JSON
    if ParseErrorKind.NO_VALUES in failures:
        return ParseErrorKind.NO_VALUES
    return ParseErrorKind.MALFORMED


def parse_input(raw_text: Optional[str]) -> ParseResult:
    """Parse pasted text into a Dataset, trying JSON, fenced JSON, then console output."""
    if raw_text is None or not raw_text.strip():
        return ParseResult(cleared=True)

    text = raw_text.strip()
    failures: List[ParseErrorKind] = []
    records: Optional[List[Any]] = None
    strategy: Optional[str] = None

    for name, attempt in STRATEGIES:
        records, failure = attempt(text)
        if records is not None:
            strategy = name
            break
        logger.debug("Parse strategy %s failed: %s", name, failure.value)
        failures.append(failure)
        if failure is ParseErrorKind.TOO_DEEP:
            # Valid JSON that is only too deep must not be re-read as console text.
            break

    if records is None:
        kind = _pick_failure(failures)
        logger.info("Could not parse input (%d chars): %s", len(text), kind.value)
        return ParseResult(error=ParseError(kind))

    if not records:
        return ParseResult(error=ParseError(ParseErrorKind.NO_DATA), strategy=strategy)

    if nesting_depth(records) > MAX_NESTING_DEPTH:
        logger.info("Rejected input nested deeper than %d levels", MAX_NESTING_DEPTH)
        return ParseResult(error=ParseError(ParseErrorKind.TOO_DEEP), strategy=strategy)

    keys = collect_keys(records)
    if not keys:
        return ParseResult(error=ParseError(ParseErrorKind.NO_FIELDS), strategy=strategy)

    logger.info("Parsed %d records with %d fields using %s", len(records), len(keys), strategy)
    return ParseResult(dataset=Dataset(records=records, keys=keys), strategy=strategy)
