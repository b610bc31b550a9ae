from __future__ import annotations

from typing import Any

"""Exception taxonomy for the import engine.

- SchemaError: programmer / usage errors, always raised
- RowFormatError: malformed row shape, always raised, aborts the import
- InvalidDatumError: per-cell value error (DataErrorHandlingPolicy.THROW only)
"""

__all__ = [
    "DataImportError",
    "SchemaError",
    "RowFormatError",
    "InvalidDatumError",
    "truncate_for_display",
]

DISPLAY_LIMIT = 40


def truncate_for_display(value: Any, limit: int = DISPLAY_LIMIT) -> str:
    if value is None:
        return "[null]"
    text = str(value)
    if len(text) > limit:
        return text[: limit - 3] + "..."
    return text


class DataImportError(Exception):
    """Base class for all import engine errors.

    ``line_number`` is the 1-based source line when the error can be tied to one.
    """

    def __init__(self, message: str, *, line_number: int | None = None) -> None:
        super().__init__(message)
        self.line_number = line_number


class SchemaError(DataImportError):
    """Raised for column / schema misuse (not data dependent)."""


class RowFormatError(DataImportError):
    """Raised when a source row cannot be split into fields."""


class InvalidDatumError(DataImportError):
    """Raised when a single value cannot be parsed for its column."""

    def __init__(
        self,
        message: str,
        datum: Any,
        *,
        column_name: str | None = None,
        width: int = 0,
        position: str | None = None,
        line_number: int | None = None,
    ) -> None:
        super().__init__(
            self._to_message(message, datum, column_name, width, position),
            line_number=line_number,
        )
        self.datum = datum
        self.column_name = column_name
        self.width = width
        self.position = position

    @staticmethod
    def _to_message(
        message: str, datum: Any, column_name: str | None, width: int, position: str | None
    ) -> str:
        escaped = truncate_for_display(datum).replace('"', '\\"')
        parts = [f'Value: "{escaped}"']
        if column_name is not None:
            parts.append(f'Column: "{column_name}"')
        if width > 0:
            parts.append(f"Fixed Width: {width}")
        if position is not None:
            parts.append(f'Position: "{position}"')
        prefix = f"{message} -- " if message else ""
        return prefix + "{ " + "; ".join(parts) + " }"
