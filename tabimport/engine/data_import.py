from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator, Sequence
from typing import Any

from ..models.column import Column
from ..models.data_error import DataError
from ..models.enums import (
    AutoTruncate,
    BlankRowPolicy,
    DataErrorHandlingPolicy,
    FieldType,
    ImportOutcome,
)
from ..models.imported_row import ImportedRow
from .exceptions import RowFormatError, SchemaError
from .tokenizer import is_blank_row

"""DataImport aggregate.

Holds the imported rows and column metadata, applies the auto-truncate and
blank-row policies while rows arrive, prunes what could not be decided in a
single forward pass (``finalize_import``), and exports rows as raw strings,
typed values, or re-formatted strings.

Row lifecycle:
    raw fields -> (blank? BlankRowPolicy) -> padded / truncated -> stored string row
    -> (export) parsed per column -> typed row -> (re-export) formatted string row
"""

__all__ = [
    "DataImport",
]

logger = logging.getLogger(__name__)


class DataImport:
    """An in-memory table of imported rows.

    Args:
        columns: Optional predeclared columns
        enforce_column_count: Force every row to the mapped column count (pads short
            rows, rejects long ones); required for typed export
        auto_trunc: Per-field post-processing at ingest
        blank_row_policy: What to do with blank rows
        data_error_policy: How typed export handles per-cell parse failures
    """

    def __init__(
        self,
        columns: Iterable[Column] | None = None,
        *,
        enforce_column_count: bool = False,
        auto_trunc: AutoTruncate = AutoTruncate.NONE,
        blank_row_policy: BlankRowPolicy = BlankRowPolicy.ALLOW,
        data_error_policy: DataErrorHandlingPolicy = DataErrorHandlingPolicy.THROW,
    ) -> None:
        self._columns: list[Column] = []
        self._rows: list[ImportedRow] = []
        self.enforce_column_count = enforce_column_count
        self.auto_trunc = auto_trunc
        self.blank_row_policy = blank_row_policy
        self.data_error_policy = data_error_policy
        self.skipped_rows = 0
        self.data_errors: list[DataError] = []
        for column in columns or ():
            self.add_column(column)

    # -- state ---------------------------------------------------------------

    @property
    def columns(self) -> tuple[Column, ...]:
        return tuple(self._columns)

    @property
    def mapped_columns(self) -> tuple[Column, ...]:
        return tuple(c for c in self._columns if c.is_mapped)

    @property
    def column_count(self) -> int:
        return len(self.mapped_columns)

    @property
    def rows(self) -> tuple[ImportedRow, ...]:
        return tuple(self._rows)

    @property
    def row_count(self) -> int:
        return len(self._rows)

    @property
    def next_row(self) -> int:
        """Source line number of the next line to be imported."""
        return self.row_count + self.skipped_rows + 1

    @property
    def data_error_count(self) -> int:
        return len(self.data_errors)

    def __len__(self) -> int:
        return len(self._rows)

    def __iter__(self) -> Iterator[ImportedRow]:
        return iter(self._rows)

    def __getitem__(self, index: int) -> ImportedRow:
        return self._rows[index]

    def __repr__(self) -> str:
        return (
            f"DataImport(columns={self.column_count}, rows={self.row_count}, "
            f"skipped_rows={self.skipped_rows}, enforce_column_count={self.enforce_column_count})"
        )

    # -- schema --------------------------------------------------------------

    def add_column(self, column: Column | None) -> None:
        """Append a column.

        When column count is enforced and rows already exist, every non-null row
        is rebuilt with one extra value (an empty string run through auto-truncate).
        """
        if column is None:
            raise SchemaError("column may not be None")
        self._columns.append(column)
        if self.enforce_column_count and self._rows and column.is_mapped:
            filler = self.auto_trunc.apply("")
            self._rows = [
                row if row.values is None else row.with_values(row.values + (filler,))
                for row in self._rows
            ]
            logger.debug(f'column "{column.name}" added after {self.row_count} row(s); rows rebuilt')

    def add_column_spec(
        self,
        name: str,
        data_type: FieldType = FieldType.OBJECT,
        width: int = 0,
        parser: Callable[[str], Any] | None = None,
        formatter: Callable[[Any], str] | None = None,
    ) -> Column:
        column = Column(name, width=width, data_type=data_type, parser=parser, formatter=formatter)
        self.add_column(column)
        return column

    # -- import --------------------------------------------------------------

    def skip_rows(self, count: int = 1) -> None:
        """Count source lines consumed without being imported (leading blank, header)."""
        self.skipped_rows += count

    def import_raw(self, fields: Sequence[str | None], source_line_number: int) -> ImportOutcome:
        """Ingest one tokenized row.

        Returns:
            ImportOutcome.STOP_REQUESTED when a blank row hits STOP_IMPORTING,
            otherwise ImportOutcome.CONTINUE

        Raises:
            SchemaError: Column count enforced but no mapped columns
            RowFormatError: Blank row under ERROR, or too many fields under enforcement
        """
        column_count = self.column_count
        if self.enforce_column_count and column_count == 0:
            raise SchemaError("data cannot be imported until 1 or more columns has been added")

        if is_blank_row(fields):
            return self._import_blank_row(source_line_number)

        if self.enforce_column_count and len(fields) > column_count:
            raise RowFormatError(
                f"{len(fields)} items on source line #{source_line_number} could not be imported "
                f"(the import is only tracking {column_count} columns and column count is enforced)",
                line_number=source_line_number,
            )

        values = list(fields)
        if self.enforce_column_count:
            values.extend([""] * (column_count - len(values)))
        self._rows.append(ImportedRow.of(source_line_number, (self.auto_trunc.apply(v) for v in values)))
        return ImportOutcome.CONTINUE

    def _import_blank_row(self, source_line_number: int) -> ImportOutcome:
        policy = self.blank_row_policy
        if policy is BlankRowPolicy.STOP_IMPORTING:
            logger.debug(f"blank row on source line #{source_line_number}: stop importing")
            return ImportOutcome.STOP_REQUESTED
        if policy is BlankRowPolicy.ERROR:
            raise RowFormatError(
                f"encountered blank row on source line #{source_line_number}",
                line_number=source_line_number,
            )
        if policy is BlankRowPolicy.DROP or (policy.drops_leading and not self._rows):
            logger.debug(f"blank row on source line #{source_line_number}: dropped")
            self.skipped_rows += 1
            return ImportOutcome.CONTINUE
        # ALLOW, DROP_TRAILING, or a non-leading blank under DROP_LEADING*
        self._rows.append(ImportedRow(source_line_number, None))
        return ImportOutcome.CONTINUE

    def finalize_import(self) -> None:
        """Apply the blank-row pruning that a single forward pass cannot decide.

        Calling this more than once removes nothing further.

        Raises:
            RowFormatError: BlankRowPolicy.ERROR and an empty row is present
        """
        policy = self.blank_row_policy
        before = self.row_count
        if policy is BlankRowPolicy.DROP:
            kept = [row for row in self._rows if not row.is_empty]
            self.skipped_rows += len(self._rows) - len(kept)
            self._rows = kept
        elif policy is BlankRowPolicy.ERROR:
            for row in self._rows:
                if row.is_empty:
                    raise RowFormatError(
                        f"found empty row at source line #{row.source_line_number}",
                        line_number=row.source_line_number,
                    )
        else:
            if policy.drops_leading:
                while self._rows and self._rows[0].is_empty:
                    self._rows.pop(0)
                    self.skipped_rows += 1
            if policy.drops_trailing:
                while self._rows and self._rows[-1].is_empty:
                    self._rows.pop()
                    self.skipped_rows += 1
        if self.row_count != before:
            logger.debug(f"finalize removed {before - self.row_count} empty row(s)")

    # -- export --------------------------------------------------------------

    def export_to_string_arrays(self) -> list[list[str | None] | None]:
        """Raw values of each row (blank rows as None)."""
        return [row.as_list() for row in self._rows]

    def export_to_object_arrays(self) -> list[list[Any] | None]:
        """Parse every row through its columns; embedded errors are collected in ``data_errors``.

        Raises:
            SchemaError: Column count not enforced, or no mapped columns
            InvalidDatumError: A value failed to parse under DataErrorHandlingPolicy.THROW
        """
        if not self.enforce_column_count:
            raise SchemaError(
                "cannot export typed values unless column count is enforced; "
                "unenforced rows are not table-shaped"
            )
        columns = self.mapped_columns
        if not columns:
            raise SchemaError("data cannot be exported (or imported) until 1 or more columns has been added")

        result: list[list[Any] | None] = []
        for row in self._rows:
            if row.values is None:
                result.append(None)
                continue
            result.append([
                column.parse(row.values[c], c + 1, row.source_line_number, self.data_error_policy)
                for c, column in enumerate(columns)
            ])
        self.data_errors = [
            value
            for values in result if values is not None
            for value in values if isinstance(value, DataError)
        ]
        if self.data_errors:
            logger.debug(f"{len(self.data_errors)} data error(s) embedded")
        return result

    def export_to_formatted_object_string_arrays(self) -> list[list[str] | None]:
        return self.format_object_arrays(self.mapped_columns, self.export_to_object_arrays())

    @staticmethod
    def format_object_arrays(
        columns: Sequence[Column],
        object_arrays: Iterable[Sequence[Any] | None],
    ) -> list[list[str] | None]:
        """Render typed rows back to display strings per column ``format`` rules.

        Raises:
            SchemaError: No columns, or a row whose length differs from the column count
        """
        if not columns:
            raise SchemaError("data cannot be exported unless 1 or more columns has been supplied")
        result: list[list[str] | None] = []
        for values in object_arrays:
            if values is None:
                result.append(None)
                continue
            if len(values) != len(columns):
                raise SchemaError(
                    f"number of row values does not match number of columns: {len(values)} / {len(columns)}"
                )
            result.append([column.format(value) for column, value in zip(columns, values)])
        return result
