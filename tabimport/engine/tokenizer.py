from __future__ import annotations

import logging
from collections.abc import Sequence

from ..models.column import Column
from .exceptions import RowFormatError, SchemaError

"""Line tokenizers: split one physical source line into field strings.

Delimited lines are scanned character by character. A double quote toggles
the quoted state (the quote itself is not copied); inside a quoted span the
delimiter is literal and a doubled quote ("") yields one literal quote.

Fixed-width lines are sliced at cumulative column widths.
"""

__all__ = [
    "QUOTE",
    "is_blank_row",
    "split_delimited",
    "split_fixed_width",
]

logger = logging.getLogger(__name__)

QUOTE = '"'


def is_blank_row(fields: Sequence[str | None]) -> bool:
    """A row is blank when it has no fields, or exactly one whitespace-only field."""
    if len(fields) == 0:
        return True
    if len(fields) == 1:
        value = fields[0]
        return value is None or value.strip() == ""
    return False


def _where(line_number: int | None) -> str:
    return f" on source line #{line_number}" if line_number is not None else ""


def split_delimited(
    line: str,
    delimiter: str,
    columns: Sequence[Column] | None = None,
    *,
    enforce_column_count: bool = False,
    line_number: int | None = None,
) -> list[str]:
    """Split a delimited line into fields.

    Args:
        line: One physical line (no line break characters)
        delimiter: Single field separator character (not a double quote)
        columns: Optional layout; fields of not-mapped columns are discarded
        enforce_column_count: Fail as soon as more fields than mapped columns arrive
        line_number: Source line number used in error messages

    Raises:
        SchemaError: Invalid delimiter
        RowFormatError: Embedded line break, unclosed quotes, or too many fields
    """
    if not delimiter or len(delimiter) != 1:
        raise SchemaError(f"delimiter must be a single character: {delimiter!r}")
    if delimiter == QUOTE:
        raise SchemaError('cannot use double quote (") as a delimiter')

    fields: list[str] = []
    if line == "":
        logger.debug(f"encountered empty row{_where(line_number)}")
        return fields

    mapped_count = sum(1 for c in columns if c.is_mapped) if columns is not None else None
    field_index = 0
    buffer: list[str] = []
    in_quotes = False

    def close_field() -> None:
        nonlocal field_index
        value = "".join(buffer)
        buffer.clear()
        column = columns[field_index] if columns is not None and field_index < len(columns) else None
        field_index += 1
        if column is not None and column.not_mapped:
            return
        if enforce_column_count and mapped_count is not None and len(fields) >= mapped_count:
            raise RowFormatError(
                f"too many fields{_where(line_number)}: the import is only tracking "
                f"{mapped_count} mapped column(s) and column count is enforced",
                line_number=line_number,
            )
        fields.append(value)
        logger.debug(f'parsed value: "{value}"')

    i = 0
    length = len(line)
    while i < length:
        c = line[i]
        if c == "\r":
            raise RowFormatError(f"illegal char found{_where(line_number)}: \\r", line_number=line_number)
        if c == "\n":
            raise RowFormatError(f"illegal char found{_where(line_number)}: \\n", line_number=line_number)
        if c == QUOTE:
            if in_quotes and i + 1 < length and line[i + 1] == QUOTE:
                buffer.append(QUOTE)
                i += 2
                continue
            in_quotes = not in_quotes
        elif c == delimiter and not in_quotes:
            close_field()
        else:
            buffer.append(c)
        i += 1

    if in_quotes:
        raise RowFormatError(f"unclosed quotation marks{_where(line_number)}", line_number=line_number)
    close_field()
    return fields


def split_fixed_width(
    line: str,
    columns: Sequence[Column],
    *,
    line_number: int | None = None,
) -> list[str]:
    """Slice a fixed-width line by column widths.

    Columns with width 0 produce no field and do not move the cursor. Not-mapped
    columns move the cursor but their slice is discarded. A line shorter than
    the layout yields short (possibly empty) trailing fields.

    Raises:
        SchemaError: No columns, no mapped column, or no column with a width
    """
    if not columns:
        raise SchemaError("cannot parse fixed-width data without 1 or more columns")
    if not any(c.is_mapped for c in columns):
        raise SchemaError("cannot parse fixed-width data: no mapped columns")
    if not any(c.width > 0 for c in columns):
        raise SchemaError("cannot parse fixed-width data: zero columns have a width")

    fields: list[str] = []
    if line == "":
        logger.debug(f"encountered empty row{_where(line_number)}")
        return fields

    pos = 0
    for column in columns:
        if column.width <= 0:
            continue
        value = line[pos:pos + column.width]
        pos += column.width
        if column.is_mapped:
            fields.append(value)
            logger.debug(f'parsed value: "{value}"')
    return fields
