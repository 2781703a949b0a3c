from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ParseErrorKind(str, Enum):
    NO_DATA = "no_data"
    INVALID_FENCED_JSON = "invalid_fenced_json"
    NO_VALUES = "no_values"
    MALFORMED = "malformed"
    NO_FIELDS = "no_fields"
    TOO_DEEP = "too_deep"


PARSE_ERROR_MESSAGES = {
    ParseErrorKind.NO_DATA: "No data found. Please paste a JSON object or array.",
    ParseErrorKind.INVALID_FENCED_JSON: (
        "Found a code block, but its contents are not valid JSON. "
        "Check for trailing commas or a truncated copy."
    ),
    ParseErrorKind.NO_VALUES: "No data with values found. Make sure to paste the full object.",
    ParseErrorKind.MALFORMED: "Unable to parse the data. Try copying the object directly from your console.",
    ParseErrorKind.NO_FIELDS: "No fields found in the data. Make sure you're pasting valid data.",
    ParseErrorKind.TOO_DEEP: "The data is nested too deeply to process. Flatten it before pasting.",
}


@dataclass(frozen=True)
class ParseError:
    kind: ParseErrorKind

    @property
    def message(self) -> str:
        return PARSE_ERROR_MESSAGES[self.kind]


class ExportError(ValueError):
    """Base class for refusals and failures while building an export."""


class NoSelectionError(ExportError):
    def __init__(self):
        super().__init__("No fields selected. Select at least one field to export.")


class NoRecordsError(ExportError):
    def __init__(self):
        super().__init__("No data to export. Please paste a dataset and select some fields first.")


class ExportSerializationError(ExportError):
    pass
