from __future__ import annotations

import math
import re
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING, Any

import pandas as pd

from ..models.enums import FieldType, NumberStyle
from .exceptions import SchemaError

if TYPE_CHECKING:
    from ..models.column import Column

"""Text -> value converters, one per FieldType.

A ConverterRegistry is an explicit, injectable mapping owned by whoever builds
columns. ``ConverterRegistry.default()`` always returns a new instance so that
overrides registered in one place never leak into another.

Blank text converts to the type's default value (0, False, datetime.min, ...),
the same way the zap-then-convert helpers treat empty input.
"""

__all__ = [
    "Converter",
    "ConverterRegistry",
    "LocaleInfo",
    "DEFAULT_TRUE_VALUES",
    "DEFAULT_FALSE_VALUES",
    "lookup_locale",
]

Converter = Callable[[str, "Column"], Any]

DEFAULT_TRUE_VALUES = "y|yes|t|true|1"
DEFAULT_FALSE_VALUES = "n|no|f|false|0"

CURRENCY_SYMBOLS = "$€£¥"

# "[hex]FF", "FF[hex]", "[%Y-%m-%d]2000-11-28"
ANNOTATION_PATTERN = re.compile(r"^\[([^\]]+)\]|\[([^\]]+)\]$")

INTEGER_RANGES: dict[FieldType, tuple[int, int]] = {
    FieldType.BYTE: (0, 255),
    FieldType.SHORT: (-(2**15), 2**15 - 1),
    FieldType.INT: (-(2**31), 2**31 - 1),
    FieldType.LONG: (-(2**63), 2**63 - 1),
}

FLOAT32_MAX = 3.4028234663852886e38

DECIMAL_DIGITS = re.compile(r"^[+-]?[0-9]+$")
HEX_DIGITS = re.compile(r"^[+-]?[0-9a-fA-F]+$")

# words pandas resolves against the clock
RELATIVE_DATE_WORDS = frozenset({"now", "today"})


@dataclass(frozen=True)
class LocaleInfo:
    decimal_separator: str
    group_separator: str
    dayfirst: bool


_LOCALES: dict[str, LocaleInfo] = {
    "en-US": LocaleInfo(".", ",", False),
    "en-GB": LocaleInfo(".", ",", True),
    "de-DE": LocaleInfo(",", ".", True),
    "fr-FR": LocaleInfo(",", " ", True),
    "es-ES": LocaleInfo(",", ".", True),
    "it-IT": LocaleInfo(",", ".", True),
    "nl-NL": LocaleInfo(",", ".", True),
    "pt-BR": LocaleInfo(",", ".", True),
}


def lookup_locale(tag: str | None) -> LocaleInfo:
    """Return separator / day-order info for a locale tag (default en-US)."""
    if tag is None:
        return _LOCALES["en-US"]
    try:
        return _LOCALES[tag]
    except KeyError:
        raise SchemaError(
            f"unsupported locale: {tag!r} (supported: {', '.join(sorted(_LOCALES))})"
        ) from None


def _split_annotation(text: str) -> tuple[str, str | None]:
    match = ANNOTATION_PATTERN.search(text)
    if match is None:
        return text, None
    annotation = match.group(1) or match.group(2)
    if match.start() == 0:
        return text[match.end():], annotation
    return text[: match.start()], annotation


def _tokens(pipe_delimited: str | None, ignore_case: bool) -> set[str]:
    if not pipe_delimited:
        return set()
    items = (t.strip() for t in pipe_delimited.split("|"))
    return {t.lower() if ignore_case else t for t in items if t}


def _clean_number(text: str, column: Column, *, real: bool) -> tuple[str, bool]:
    """Strip the decorations allowed by the column's number style.

    Returns the cleaned text and whether it must be read as hexadecimal.
    """
    locale = lookup_locale(column.locale)
    style = column.number_style
    if style is None:
        style = NumberStyle.ALLOW_THOUSANDS if real else NumberStyle.NONE

    value, annotation = _split_annotation(text.strip())
    hex_number = NumberStyle.HEX_NUMBER in style or (annotation or "").lower() == "hex"
    value = value.strip()

    negative = False
    if NumberStyle.ALLOW_PARENTHESES in style and value.startswith("(") and value.endswith(")"):
        negative = True
        value = value[1:-1].strip()
    if NumberStyle.ALLOW_CURRENCY_SYMBOL in style:
        value = value.strip(CURRENCY_SYMBOLS + " ")
        if value[:1] in "+-" and value[1:2] in CURRENCY_SYMBOLS:
            value = value[0] + value[2:]
    if NumberStyle.ALLOW_THOUSANDS in style:
        value = value.replace(locale.group_separator, "")
        if locale.group_separator == " ":
            value = value.replace(" ", "")
    if real and locale.decimal_separator != ".":
        value = value.replace(locale.decimal_separator, ".")
    if hex_number and value.lower().startswith("0x"):
        value = value[2:]
    if negative:
        value = "-" + value
    return value, hex_number


def _convert_integer(text: str, column: Column) -> int:
    value, hex_number = _clean_number(text, column, real=False)
    value = value.strip()
    if not (HEX_DIGITS if hex_number else DECIMAL_DIGITS).match(value):
        raise ValueError(f"not an integer: {text!r}")
    result = int(value, 16) if hex_number else int(value)
    if column.strict:
        low, high = INTEGER_RANGES[column.data_type]
        if not low <= result <= high:
            raise ValueError(
                f"{result} is outside the range of {column.data_type.value} ({low} to {high})"
            )
    return result


def _convert_decimal(text: str, column: Column) -> Decimal:
    value, _ = _clean_number(text, column, real=True)
    try:
        result = Decimal(value)
    except InvalidOperation:
        raise ValueError(f"invalid decimal: {text!r}") from None
    if column.strict and not result.is_finite():
        raise ValueError(f"non-finite decimal: {text!r}")
    return result


def _convert_float(text: str, column: Column) -> float:
    value, _ = _clean_number(text, column, real=True)
    result = float(value)
    if column.strict:
        if not math.isfinite(result):
            raise ValueError(f"non-finite number: {text!r}")
        if column.data_type is FieldType.FLOAT and abs(result) > FLOAT32_MAX:
            raise ValueError(f"{result} is outside the range of float")
    return result


def _convert_bool(text: str, column: Column) -> bool:
    value = text.strip()
    probe = value.lower() if column.ignore_case else value
    if probe in _tokens(column.true_values, column.ignore_case):
        return True
    if probe in _tokens(column.false_values, column.ignore_case):
        return False
    raise ValueError(f"not a recognized bool value: {value!r}")


def _convert_datetime(text: str, column: Column) -> datetime:
    value, annotation = _split_annotation(text.strip())
    fmt = annotation or column.date_format
    if fmt:
        return datetime.strptime(value.strip(), fmt)
    if value.strip().lower() in RELATIVE_DATE_WORDS:
        raise ValueError(f"not a date/time: {text!r}")
    dayfirst = column.date_time_style
    if dayfirst is None:
        dayfirst = lookup_locale(column.locale).dayfirst
    parsed = pd.to_datetime(value.strip(), dayfirst=dayfirst)
    if pd.isna(parsed):
        raise ValueError(f"not a date/time: {text!r}")
    return parsed.to_pydatetime()


def _convert_date(text: str, column: Column) -> date:
    return _convert_datetime(text, column).date()


def _convert_time(text: str, column: Column) -> time:
    return _convert_datetime(text, column).time()


def _convert_enum(text: str, column: Column) -> Any:
    if column.enum_type is None:
        raise SchemaError(f'column "{column.name}" has data type enum but no enum_type')
    value = text.strip()
    for member in column.enum_type:
        if member.name == value or (column.ignore_case and member.name.lower() == value.lower()):
            return member
    for member in column.enum_type:
        if str(member.value) == value:
            return member
    raise ValueError(f"{value!r} is not a member of {column.enum_type.__name__}")


def _convert_bytes(text: str, column: Column) -> bytes:
    return text.encode(column.encoding or "utf-8")


def _identity(text: str, column: Column) -> str:
    return text


_BUILTIN_CONVERTERS: dict[FieldType, Converter] = {
    FieldType.OBJECT: _identity,
    FieldType.STRING: _identity,
    FieldType.BOOL: _convert_bool,
    FieldType.BYTE: _convert_integer,
    FieldType.SHORT: _convert_integer,
    FieldType.INT: _convert_integer,
    FieldType.LONG: _convert_integer,
    FieldType.DECIMAL: _convert_decimal,
    FieldType.FLOAT: _convert_float,
    FieldType.DOUBLE: _convert_float,
    FieldType.DATETIME: _convert_datetime,
    FieldType.DATE: _convert_date,
    FieldType.TIME: _convert_time,
    FieldType.ENUM: _convert_enum,
    FieldType.BYTES: _convert_bytes,
}

_DEFAULT_VALUES: dict[FieldType, Any] = {
    FieldType.OBJECT: None,
    FieldType.STRING: None,
    FieldType.BOOL: False,
    FieldType.BYTE: 0,
    FieldType.SHORT: 0,
    FieldType.INT: 0,
    FieldType.LONG: 0,
    FieldType.DECIMAL: Decimal(0),
    FieldType.FLOAT: 0.0,
    FieldType.DOUBLE: 0.0,
    FieldType.DATETIME: datetime.min,
    FieldType.DATE: date.min,
    FieldType.TIME: time.min,
    FieldType.ENUM: None,
    FieldType.BYTES: b"",
}


class ConverterRegistry:
    """Mapping of FieldType to converter function."""

    def __init__(self, converters: dict[FieldType, Converter] | None = None) -> None:
        self._converters: dict[FieldType, Converter] = dict(converters or {})

    @classmethod
    def default(cls) -> ConverterRegistry:
        return cls(_BUILTIN_CONVERTERS)

    def register(self, field_type: FieldType, converter: Converter) -> None:
        self._converters[field_type] = converter

    def converter_for(self, field_type: FieldType) -> Converter:
        try:
            return self._converters[field_type]
        except KeyError:
            raise SchemaError(f"no converter registered for {field_type.value}") from None

    def parser_for(self, column: Column) -> Callable[[str], Any]:
        """Bind the converter for ``column.data_type`` to the column's parse options."""
        converter = self.converter_for(column.data_type)
        default = self.default_value(column.data_type)
        text_type = column.data_type.is_text

        def parse(text: str) -> Any:
            if not text_type and text.strip() == "":
                return default
            return converter(text, column)

        return parse

    @staticmethod
    def default_value(field_type: FieldType) -> Any:
        return _DEFAULT_VALUES[field_type]

    def __contains__(self, field_type: object) -> bool:
        return field_type in self._converters
