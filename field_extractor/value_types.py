from __future__ import annotations

import json
import math
from decimal import Decimal
from enum import Enum
from typing import Any

# Integral floats below this print without an exponent in a console.
PLAIN_INTEGER_LIMIT = 1e21


class FieldType(str, Enum):
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    NULL = "null"
    ARRAY = "array"
    OBJECT = "object"


def classify_value(value: Any) -> FieldType:
    """Return the closed type tag for a parsed value.

    `bool` is checked before numbers because it is an `int` subclass.
    """
    if value is None:
        return FieldType.NULL
    if isinstance(value, bool):
        return FieldType.BOOLEAN
    if isinstance(value, (int, float)):
        return FieldType.NUMBER
    if isinstance(value, str):
        return FieldType.STRING
    if isinstance(value, (list, tuple)):
        return FieldType.ARRAY
    return FieldType.OBJECT


def type_category(value: Any) -> str:
    """Category used by statistics and type-mismatch detection.

    Arrays are reported as `object`, the same bucket as mappings.
    """
    tag = classify_value(value)
    if tag is FieldType.ARRAY:
        return FieldType.OBJECT.value
    return tag.value


def is_empty_value(value: Any) -> bool:
    return value is None or value == ""


def has_value(record: Any, key: str) -> bool:
    """True when `record` is a mapping holding a non-empty value for `key`."""
    return isinstance(record, dict) and key in record and not is_empty_value(record[key])


def normalize_numbers(value: Any) -> Any:
    """Fold integral floats into ints, recursively (1.0 and 1 are the same number).

    Large floats keep their shortest repr digits, so 1.2345678901234567e19
    becomes 12345678901234567000 rather than the exact binary value.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer() and abs(value) < PLAIN_INTEGER_LIMIT:
            return int(Decimal(repr(value)))
        return value
    if isinstance(value, dict):
        return {k: normalize_numbers(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [normalize_numbers(v) for v in value]
    return value


def compact_json(value: Any) -> str:
    return json.dumps(normalize_numbers(value), ensure_ascii=False, separators=(',', ':'))


def canonical_value(value: Any) -> str:
    """Structural serialization used to compare values by content."""
    return json.dumps(normalize_numbers(value), ensure_ascii=False, sort_keys=True, separators=(',', ':'))


def format_scalar(value: Any) -> str:
    """Render a value as text the way it reads in a console.

    Nested values become compact JSON; `None` is left to the caller.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        value = normalize_numbers(value)
        if isinstance(value, float):
            if math.isnan(value):
                return "NaN"
            if math.isinf(value):
                return "Infinity" if value > 0 else "-Infinity"
        return str(value)
    if isinstance(value, (dict, list, tuple)):
        return compact_json(value)
    return str(value)
