from __future__ import annotations

from enum import Enum, Flag, auto

"""Option enums for the tabular import engine.

Enum values are lower_snake strings so that import profiles (YAML) can name
them directly, e.g. ``blank_row_policy: drop_leading_and_trailing``.
"""

__all__ = [
    "AutoTruncate",
    "BlankRowPolicy",
    "DataErrorHandlingPolicy",
    "FieldType",
    "ImportOutcome",
    "NumberStyle",
]


class AutoTruncate(Enum):
    """Per-field post-processing applied while rows are ingested.

    - NONE: pass the raw field through
    - TRIM: strip surrounding whitespace
    - ZAP: strip, then map an empty result to ``None``
    """
    NONE = "none"
    TRIM = "trim"
    ZAP = "zap"

    def apply(self, value: str | None) -> str | None:
        if value is None or self is AutoTruncate.NONE:
            return value
        trimmed = value.strip()
        if self is AutoTruncate.ZAP and trimmed == "":
            return None
        return trimmed


class BlankRowPolicy(Enum):
    """What to do with a blank row (no fields, or one whitespace-only field).

    State transitions at ingest:
    - ALLOW: keep as a null row
    - DROP: skip (counted in skipped rows)
    - DROP_LEADING / DROP_LEADING_AND_TRAILING: skip while nothing was imported yet,
      otherwise keep; trailing runs are pruned by ``finalize_import()``
    - DROP_TRAILING: keep; trailing run pruned by ``finalize_import()``
    - STOP_IMPORTING: stop reading input, keep what was imported
    - ERROR: raise immediately
    """
    ALLOW = "allow"
    DROP = "drop"
    DROP_LEADING = "drop_leading"
    DROP_TRAILING = "drop_trailing"
    DROP_LEADING_AND_TRAILING = "drop_leading_and_trailing"
    STOP_IMPORTING = "stop_importing"
    ERROR = "error"

    @property
    def drops_leading(self) -> bool:
        return self in (BlankRowPolicy.DROP_LEADING, BlankRowPolicy.DROP_LEADING_AND_TRAILING)

    @property
    def drops_trailing(self) -> bool:
        return self in (BlankRowPolicy.DROP_TRAILING, BlankRowPolicy.DROP_LEADING_AND_TRAILING)


class DataErrorHandlingPolicy(Enum):
    """How per-cell value parse failures are handled during typed export."""
    THROW = "throw"
    EMBED = "embed"
    IGNORE_AND_USE_DEFAULT_VALUE = "ignore_and_use_default_value"


class FieldType(Enum):
    """Closed set of value types a column can be converted to."""
    OBJECT = "object"
    STRING = "string"
    BOOL = "bool"
    BYTE = "byte"
    SHORT = "short"
    INT = "int"
    LONG = "long"
    DECIMAL = "decimal"
    FLOAT = "float"
    DOUBLE = "double"
    DATETIME = "datetime"
    DATE = "date"
    TIME = "time"
    ENUM = "enum"
    BYTES = "bytes"

    @property
    def is_text(self) -> bool:
        return self in (FieldType.OBJECT, FieldType.STRING)

    @property
    def is_integer(self) -> bool:
        return self in (FieldType.BYTE, FieldType.SHORT, FieldType.INT, FieldType.LONG)

    @property
    def is_real(self) -> bool:
        return self in (FieldType.DECIMAL, FieldType.FLOAT, FieldType.DOUBLE)

    @property
    def is_temporal(self) -> bool:
        return self in (FieldType.DATETIME, FieldType.DATE, FieldType.TIME)


class NumberStyle(Flag):
    """Accepted decorations when parsing numeric text (combinable)."""
    NONE = 0
    ALLOW_THOUSANDS = auto()
    ALLOW_CURRENCY_SYMBOL = auto()
    ALLOW_PARENTHESES = auto()
    HEX_NUMBER = auto()

    @classmethod
    def from_names(cls, names: list[str] | None) -> NumberStyle | None:
        """Build a combined style from profile names such as ``["allow_thousands"]``."""
        if names is None:
            return None
        style = cls.NONE
        for name in names:
            style |= cls[name.strip().upper()]
        return style


class ImportOutcome(Enum):
    """Result of ingesting one row; the orchestration loop stops on STOP_REQUESTED."""
    CONTINUE = "continue"
    STOP_REQUESTED = "stop_requested"
