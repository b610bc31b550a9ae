from __future__ import annotations

import dataclasses
import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Any

from ..engine.converters import (
    DEFAULT_FALSE_VALUES,
    DEFAULT_TRUE_VALUES,
    ConverterRegistry,
    lookup_locale,
)
from ..engine.exceptions import InvalidDatumError, SchemaError
from .data_error import DataError
from .enums import DataErrorHandlingPolicy, FieldType, NumberStyle

"""Column model: field metadata plus value parsing (import) and formatting (export).

Example fixed-width layout::

                        ┌ dob  ┐ ┌┐ kids (width=2)
    Smith, Billy Bob    20010519N00
    Weatherton, Michelle19990212N01
    └  name (width=20) ┘        │
                    married (width=1)

    columns = [
        Column.string("Name", width=20),
        Column.flat8_date("Date of Birth"),
        Column.bool_("Married", width=1),
        Column.int_("Kids", width=2),
    ]
"""

__all__ = [
    "Column",
    "currency_format",
    "date_format",
    "time_format",
]

logger = logging.getLogger(__name__)

DEFAULT_DISPLAY_NULL = "[null]"


@dataclass(frozen=True)
class Column:
    """Describes one field of a tabular source.

    Attributes:
        name: Column name, stripped, never blank
        start_position: 0-based start position (fixed-width sources, informational)
        width: Column width in characters (fixed-width sources); 0 = not sliced
        data_type: Target value type
        parser: Optional text -> value function
        formatter: Optional value -> text function
        number_style: Accepted numeric decorations (None = type default)
        date_time_style: Day-first hint for free-form dates (None = from locale)
        date_format: strptime format for dates / times
        locale: Locale tag such as "en-US" or "de-DE"
        true_values: Pipe-delimited tokens that parse as True
        false_values: Pipe-delimited tokens that parse as False
        ignore_case: Ignore letter case of bool / enum tokens
        strict: Reject numbers outside the range of the target type
        display_null_as: Text rendered for None on export
        not_mapped: Present in the layout only; values are discarded
        enum_type: Enum class for FieldType.ENUM columns
        encoding: Text encoding for FieldType.BYTES columns
    """
    name: str
    start_position: int = 0
    width: int = 0
    data_type: FieldType = FieldType.OBJECT
    parser: Callable[[str], Any] | None = dataclasses.field(default=None, compare=False, repr=False)
    formatter: Callable[[Any], str] | None = dataclasses.field(default=None, compare=False, repr=False)
    number_style: NumberStyle | None = None
    date_time_style: bool | None = None
    date_format: str | None = None
    locale: str | None = None
    true_values: str = DEFAULT_TRUE_VALUES
    false_values: str = DEFAULT_FALSE_VALUES
    ignore_case: bool = False
    strict: bool = False
    display_null_as: str | None = DEFAULT_DISPLAY_NULL
    not_mapped: bool = False
    enum_type: type[Enum] | None = None
    encoding: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name.strip():
            raise SchemaError("columns must have a name")
        name = self.name.strip()
        object.__setattr__(self, "name", name)
        if self.width < 0:
            raise SchemaError(f'column "{name}" width must not be negative: {self.width}')
        if self.start_position < 0:
            raise SchemaError(f'column "{name}" start position must not be negative: {self.start_position}')
        if self.locale is not None:
            lookup_locale(self.locale)

    @property
    def is_mapped(self) -> bool:
        return not self.not_mapped

    def parse(
        self,
        raw: str | None,
        col: int,
        src_row: int,
        error_policy: DataErrorHandlingPolicy = DataErrorHandlingPolicy.THROW,
    ) -> Any:
        """Parse a raw datum into its value according to the column metadata.

        Args:
            raw: Raw text (None passes through as None)
            col: 1-based column number
            src_row: 1-based source line number
            error_policy: How to handle a parser failure

        Raises:
            InvalidDatumError: Parser failed and the policy is THROW
            SchemaError: Typed column without a parser
        """
        if raw is None:
            return None
        if self.parser is not None:
            try:
                return self.parser(raw)
            except SchemaError:
                raise
            except Exception as e:
                if error_policy is DataErrorHandlingPolicy.EMBED:
                    logger.debug(f"embedded data error col={col} row={src_row}: {e}")
                    return DataError(str(e) or type(e).__name__, column=col, row=src_row, datum=raw)
                if error_policy is DataErrorHandlingPolicy.IGNORE_AND_USE_DEFAULT_VALUE:
                    return ConverterRegistry.default_value(self.data_type)
                raise InvalidDatumError(
                    str(e) or type(e).__name__,
                    raw,
                    column_name=self.name,
                    width=self.width,
                    position=f"col: {col}, src row: {src_row}",
                    line_number=src_row,
                ) from e
        if not self.data_type.is_text:
            raise SchemaError(
                f'column "{self.name}" does not contain a parser for {self.data_type.value}'
            )
        return raw

    def format(self, value: Any) -> str:
        """Render a value as text (None -> display_null_as)."""
        if value is None:
            return self.display_null_as or ""
        if self.formatter is None or isinstance(value, DataError):
            return str(value)
        return self.formatter(value)

    def __str__(self) -> str:
        width = f", {self.width}" if self.width else ""
        return f'{self.data_type.value}("{self.name}"{width})'

    # -- factories ---------------------------------------------------------

    @classmethod
    def by_type(
        cls,
        data_type: FieldType,
        name: str,
        width: int = 0,
        *,
        registry: ConverterRegistry | None = None,
        **options: Any,
    ) -> Column:
        """Create a column whose parser is resolved from ``registry`` for ``data_type``."""
        column = cls(name, width=width, data_type=data_type, **options)
        if data_type.is_text or column.parser is not None:
            return column
        registry = registry or ConverterRegistry.default()
        return dataclasses.replace(column, parser=registry.parser_for(column))

    @classmethod
    def object_(cls, name: str, width: int = 0) -> Column:
        return cls(name, width=width)

    @classmethod
    def string(cls, name: str, width: int = 0, **options: Any) -> Column:
        return cls(name, width=width, data_type=FieldType.STRING, **options)

    @classmethod
    def int_(cls, name: str, width: int = 0, **options: Any) -> Column:
        return cls.by_type(FieldType.INT, name, width, **options)

    @classmethod
    def decimal(cls, name: str, width: int = 0, **options: Any) -> Column:
        return cls.by_type(FieldType.DECIMAL, name, width, **options)

    @classmethod
    def currency(cls, name: str, width: int = 0, **options: Any) -> Column:
        options.setdefault("formatter", currency_format)
        options.setdefault(
            "number_style",
            NumberStyle.ALLOW_THOUSANDS | NumberStyle.ALLOW_CURRENCY_SYMBOL | NumberStyle.ALLOW_PARENTHESES,
        )
        return cls.by_type(FieldType.DECIMAL, name, width, **options)

    @classmethod
    def bool_(cls, name: str, width: int = 0, **options: Any) -> Column:
        options.setdefault("ignore_case", True)
        return cls.by_type(FieldType.BOOL, name, width, **options)

    @classmethod
    def date(cls, name: str, width: int = 0, *, display_format: str | None = None, **options: Any) -> Column:
        options.setdefault("formatter", lambda o: date_format(o, fmt=display_format))
        return cls.by_type(FieldType.DATETIME, name, width, **options)

    @classmethod
    def flat8_date(cls, name: str, *, display_format: str | None = None, **options: Any) -> Column:
        """A YYYYMMDD date column (width 8); "00000000" parses as datetime.min."""
        return cls(
            name,
            width=8,
            data_type=FieldType.DATETIME,
            parser=_parse_flat8_date,
            formatter=lambda o: date_format(o, fmt=display_format),
            **options,
        )

    @classmethod
    def time(cls, name: str, width: int = 0, *, display_format: str | None = None, **options: Any) -> Column:
        options.setdefault("formatter", lambda o: time_format(o, fmt=display_format))
        return cls.by_type(FieldType.TIME, name, width, **options)

    @classmethod
    def no_map(cls, name: str, width: int = 0) -> Column:
        return cls(name, width=width, not_mapped=True)


def _parse_flat8_date(text: str) -> datetime:
    if text == "00000000":
        return datetime.min
    if len(text) != 8 or not text.isdigit():
        raise ValueError(f"expected YYYYMMDD: {text!r}")
    return datetime(int(text[0:4]), int(text[4:6]), int(text[6:8]))


def currency_format(value: Any) -> str:
    if isinstance(value, (int, float, Decimal)):
        sign = "-" if value < 0 else ""
        return f"{sign}${abs(value):,.2f}"
    return str(value)


def _clock(value: datetime | time) -> str:
    hour = value.hour % 12 or 12
    suffix = "AM" if value.hour < 12 else "PM"
    text = f"{hour}:{value.minute:02d}"
    if value.microsecond:
        text += f":{value.second:02d}.{value.microsecond // 1000:03d}"
    elif value.second:
        text += f":{value.second:02d}"
    return f"{text} {suffix}"


def date_format(value: Any, fmt: str | None = None) -> str:
    """Format a date/time; without ``fmt`` uses the "flex" M/D/YYYY [h:mm ...] rendering."""
    if isinstance(value, (datetime, date)):
        if fmt:
            return value.strftime(fmt)
        text = f"{value.month}/{value.day}/{value.year:04d}"
        if isinstance(value, datetime) and value.time() != time.min:
            text += " " + _clock(value)
        return text
    return str(value)


def time_format(value: Any, fmt: str | None = None) -> str:
    """Format the time part of a value; without ``fmt`` uses the "flex" h:mm[:ss[.fff]] AM/PM rendering."""
    if isinstance(value, (datetime, time)):
        if fmt:
            return value.strftime(fmt)
        return _clock(value)
    return "" if value is None else str(value)
