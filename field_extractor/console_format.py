from __future__ import annotations

import json
import math
import re
from typing import Any, Dict, List

from .value_types import normalize_numbers

_LEADING_MARKERS = re.compile(r'^\*+')
_EDGE_QUOTES = re.compile(r'^["\']|["\']$')
_BRACKETED = re.compile(r'\[(.+)\]')
_NUMBER = re.compile(r'^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$')
_INTEGER = re.compile(r'^[+-]?\d+$')


def clean_key(raw: str) -> str:
    """Strip `*` markers, whitespace and one pair of surrounding quotes."""
    key = _LEADING_MARKERS.sub('', raw).strip()
    return _EDGE_QUOTES.sub('', key)


def _to_number(text: str):
    if _INTEGER.match(text):
        try:
            return int(text)
        except ValueError:
            # past the interpreter's int digit limit
            pass
    number = float(text)
    if not math.isfinite(number):
        return None
    return normalize_numbers(number)


def coerce_value(raw: str) -> Any:
    """Turn the textual value of a console line into a typed value."""
    value = raw.strip()

    if value in ('""', "''"):
        return ''

    if value.startswith('(') and '[' in value:
        # e.g. "(3) [1, 2, 3]" as printed by browser consoles
        match = _BRACKETED.search(value)
        if not match:
            return value
        try:
            return json.loads('[' + match.group(1) + ']')
        except (ValueError, RecursionError):
            return match.group(1)

    if value.startswith('{') and value.endswith('}'):
        return value
    if value == 'null':
        return None
    if value == 'true':
        return True
    if value == 'false':
        return False
    if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
        return value[1:-1]

    if _NUMBER.match(value):
        number = _to_number(value)
        if number is not None:
            return number
    return value


def split_lines(text: str) -> List[str]:
    return [line.strip() for line in text.split('\n') if line.strip()]


def parse_console_dump(text: str) -> Dict[str, Any]:
    """Parse console output into one flat object.

    Handles both `key: value` on a single line and the transcript layout where
    the key, a lone `:` and the value sit on three consecutive lines.
    Returns an empty dict when nothing usable was found.
    """
    lines = split_lines(text)
    obj: Dict[str, Any] = {}

    i = 0
    while i < len(lines):
        line = lines[i]

        if i + 2 < len(lines) and lines[i + 1] == ':':
            key = clean_key(line)
            if key:
                obj[key] = coerce_value(lines[i + 2])
            i += 3
            continue

        colon = line.find(':')
        if colon != -1:
            key = clean_key(line[:colon].strip())
            if key:
                obj[key] = coerce_value(line[colon + 1:])
        i += 1

    return obj


def has_key_value_lines(text: str) -> bool:
    return any(':' in line for line in split_lines(text))
