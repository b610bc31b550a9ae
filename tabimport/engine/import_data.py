from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Iterable, Sequence
from pathlib import Path
from typing import Any

from ..models.column import Column
from ..models.enums import AutoTruncate, BlankRowPolicy, DataErrorHandlingPolicy, ImportOutcome
from .data_import import DataImport
from .exceptions import SchemaError
from .tokenizer import split_delimited, split_fixed_width

"""Import entry points: text blob or file -> populated DataImport.

Every entry point runs the same sequential algorithm:

1. Split the source into lines (blob: all at once; file: one line at a time)
2. If the very first line is blank, consume it and count it as skipped
   (only one such line; this is a convention for sources with a stray leading
   newline, not a general blank-line skip)
3. If the caller declares a header row, consume one more line as skipped
4. Tokenize every remaining line and hand it to ``DataImport.import_raw`` with
   the line's source number; stop early on ImportOutcome.STOP_REQUESTED
5. ``finalize_import()``

Malformed input aborts the whole import with an exception naming the line.
"""

__all__ = [
    "import_delimited_text",
    "import_fixed_width_text",
    "import_delimited_file",
    "import_fixed_width_file",
    "import_delimited_file_async",
    "import_fixed_width_file_async",
    "delimited_text_as_strings",
    "delimited_text_as_objects",
    "fixed_width_text_as_strings",
    "fixed_width_text_as_objects",
    "delimited_file_as_strings",
    "delimited_file_as_objects",
    "fixed_width_file_as_strings",
    "fixed_width_file_as_objects",
]

logger = logging.getLogger(__name__)

Tokenize = Callable[[str, int], list[str]]

DEFAULT_ENCODING = "utf-8"


class _ImportRun:
    """Line-at-a-time driver shared by the blob, file and async file variants."""

    def __init__(self, data_import: DataImport, tokenize: Tokenize, has_header_row: bool) -> None:
        self.data_import = data_import
        self.tokenize = tokenize
        self.lines_seen = 0
        self.header_pending = has_header_row
        self.stopped = False

    def feed(self, line: str) -> bool:
        """Process one line; returns False once no further lines should be fed."""
        if self.stopped:
            return False
        self.lines_seen += 1
        if self.lines_seen == 1 and line.strip() == "":
            logger.debug("skipping 1 leading blank line")
            self.data_import.skip_rows()
            return True
        if self.header_pending:
            logger.debug("skipping header row")
            self.header_pending = False
            self.data_import.skip_rows()
            return True

        line_number = self.data_import.next_row
        logger.debug(f"parsing row {line_number}")
        fields = self.tokenize(line, line_number)
        if self.data_import.import_raw(fields, line_number) is ImportOutcome.STOP_REQUESTED:
            logger.info(f"import stopped at blank source line #{line_number}")
            self.stopped = True
            return False
        return True

    def finish(self) -> DataImport:
        self.data_import.finalize_import()
        logger.debug(
            f"import finished rows={self.data_import.row_count} skipped={self.data_import.skipped_rows}"
        )
        return self.data_import


def _new_data_import(
    columns: Iterable[Column] | None,
    enforce_column_count: bool,
    blank_row_policy: BlankRowPolicy,
    data_error_policy: DataErrorHandlingPolicy,
    auto_trunc: AutoTruncate,
) -> DataImport:
    return DataImport(
        columns,
        enforce_column_count=enforce_column_count,
        auto_trunc=auto_trunc,
        blank_row_policy=blank_row_policy,
        data_error_policy=data_error_policy,
    )


def _delimited_tokenizer(
    delimiter: str, columns: Sequence[Column] | None, enforce_column_count: bool
) -> Tokenize:
    def tokenize(line: str, line_number: int) -> list[str]:
        return split_delimited(
            line,
            delimiter,
            columns,
            enforce_column_count=enforce_column_count,
            line_number=line_number,
        )
    return tokenize


def _fixed_width_tokenizer(columns: Sequence[Column]) -> Tokenize:
    if not columns:
        raise SchemaError("at least one column must be specified for fixed-width imports")

    def tokenize(line: str, line_number: int) -> list[str]:
        return split_fixed_width(line, columns, line_number=line_number)
    return tokenize


def _split_blob(raw: str) -> list[str]:
    return raw.replace("\r\n", "\n").rstrip("\n").split("\n")


def _run_text(raw: str | None, run: _ImportRun) -> DataImport:
    if raw is None or raw.strip() == "":
        return run.data_import
    for line in _split_blob(raw):
        if not run.feed(line):
            break
    return run.finish()


def _run_file(path: Path, encoding: str, run: _ImportRun) -> DataImport:
    with Path(path).open("r", encoding=encoding) as f:
        for line in f:
            if not run.feed(line.rstrip("\n")):
                break
    return run.finish()


async def _run_file_async(path: Path, encoding: str, run: _ImportRun) -> DataImport:
    f = await asyncio.to_thread(Path(path).open, "r", encoding=encoding)
    try:
        while True:
            line = await asyncio.to_thread(f.readline)
            if line == "":
                break
            if not run.feed(line.rstrip("\n")):
                break
    finally:
        f.close()
    return run.finish()


# -- delimited ---------------------------------------------------------------

def import_delimited_text(
    raw: str | None,
    delimiter: str = ",",
    columns: Sequence[Column] | None = None,
    *,
    enforce_column_count: bool = False,
    has_header_row: bool = False,
    blank_row_policy: BlankRowPolicy = BlankRowPolicy.ALLOW,
    data_error_policy: DataErrorHandlingPolicy = DataErrorHandlingPolicy.THROW,
    auto_trunc: AutoTruncate = AutoTruncate.NONE,
) -> DataImport:
    """Import delimited text (e.g. CSV) held in memory.

    A None or whitespace-only blob returns an empty, unfinalized DataImport.
    """
    data_import = _new_data_import(columns, enforce_column_count, blank_row_policy, data_error_policy, auto_trunc)
    tokenize = _delimited_tokenizer(delimiter, columns, enforce_column_count)
    return _run_text(raw, _ImportRun(data_import, tokenize, has_header_row))


def import_delimited_file(
    path: Path | str,
    delimiter: str = ",",
    columns: Sequence[Column] | None = None,
    *,
    encoding: str = DEFAULT_ENCODING,
    enforce_column_count: bool = False,
    has_header_row: bool = False,
    blank_row_policy: BlankRowPolicy = BlankRowPolicy.ALLOW,
    data_error_policy: DataErrorHandlingPolicy = DataErrorHandlingPolicy.THROW,
    auto_trunc: AutoTruncate = AutoTruncate.NONE,
) -> DataImport:
    """Import a delimited text file, reading it line by line."""
    data_import = _new_data_import(columns, enforce_column_count, blank_row_policy, data_error_policy, auto_trunc)
    tokenize = _delimited_tokenizer(delimiter, columns, enforce_column_count)
    return _run_file(Path(path), encoding, _ImportRun(data_import, tokenize, has_header_row))


async def import_delimited_file_async(
    path: Path | str,
    delimiter: str = ",",
    columns: Sequence[Column] | None = None,
    *,
    encoding: str = DEFAULT_ENCODING,
    enforce_column_count: bool = False,
    has_header_row: bool = False,
    blank_row_policy: BlankRowPolicy = BlankRowPolicy.ALLOW,
    data_error_policy: DataErrorHandlingPolicy = DataErrorHandlingPolicy.THROW,
    auto_trunc: AutoTruncate = AutoTruncate.NONE,
) -> DataImport:
    """Same as ``import_delimited_file`` but awaits each line read."""
    data_import = _new_data_import(columns, enforce_column_count, blank_row_policy, data_error_policy, auto_trunc)
    tokenize = _delimited_tokenizer(delimiter, columns, enforce_column_count)
    return await _run_file_async(Path(path), encoding, _ImportRun(data_import, tokenize, has_header_row))


# -- fixed width -------------------------------------------------------------

def import_fixed_width_text(
    raw: str | None,
    columns: Sequence[Column],
    *,
    has_header_row: bool = False,
    blank_row_policy: BlankRowPolicy = BlankRowPolicy.ALLOW,
    data_error_policy: DataErrorHandlingPolicy = DataErrorHandlingPolicy.THROW,
    auto_trunc: AutoTruncate = AutoTruncate.NONE,
) -> DataImport:
    """Import fixed-width text held in memory (column count is always enforced)."""
    tokenize = _fixed_width_tokenizer(columns)
    data_import = _new_data_import(columns, True, blank_row_policy, data_error_policy, auto_trunc)
    return _run_text(raw, _ImportRun(data_import, tokenize, has_header_row))


def import_fixed_width_file(
    path: Path | str,
    columns: Sequence[Column],
    *,
    encoding: str = DEFAULT_ENCODING,
    has_header_row: bool = False,
    blank_row_policy: BlankRowPolicy = BlankRowPolicy.ALLOW,
    data_error_policy: DataErrorHandlingPolicy = DataErrorHandlingPolicy.THROW,
    auto_trunc: AutoTruncate = AutoTruncate.NONE,
) -> DataImport:
    """Import a fixed-width text file, reading it line by line."""
    tokenize = _fixed_width_tokenizer(columns)
    data_import = _new_data_import(columns, True, blank_row_policy, data_error_policy, auto_trunc)
    return _run_file(Path(path), encoding, _ImportRun(data_import, tokenize, has_header_row))


async def import_fixed_width_file_async(
    path: Path | str,
    columns: Sequence[Column],
    *,
    encoding: str = DEFAULT_ENCODING,
    has_header_row: bool = False,
    blank_row_policy: BlankRowPolicy = BlankRowPolicy.ALLOW,
    data_error_policy: DataErrorHandlingPolicy = DataErrorHandlingPolicy.THROW,
    auto_trunc: AutoTruncate = AutoTruncate.NONE,
) -> DataImport:
    """Same as ``import_fixed_width_file`` but awaits each line read."""
    tokenize = _fixed_width_tokenizer(columns)
    data_import = _new_data_import(columns, True, blank_row_policy, data_error_policy, auto_trunc)
    return await _run_file_async(Path(path), encoding, _ImportRun(data_import, tokenize, has_header_row))


# -- projections -------------------------------------------------------------

def delimited_text_as_strings(raw: str | None, delimiter: str = ",", columns: Sequence[Column] | None = None, **options: Any) -> list[list[str | None] | None]:
    return import_delimited_text(raw, delimiter, columns, **options).export_to_string_arrays()


def delimited_text_as_objects(raw: str | None, delimiter: str, columns: Sequence[Column], **options: Any) -> list[list[Any] | None]:
    options["enforce_column_count"] = True
    return import_delimited_text(raw, delimiter, columns, **options).export_to_object_arrays()


def fixed_width_text_as_strings(raw: str | None, columns: Sequence[Column], **options: Any) -> list[list[str | None] | None]:
    return import_fixed_width_text(raw, columns, **options).export_to_string_arrays()


def fixed_width_text_as_objects(raw: str | None, columns: Sequence[Column], **options: Any) -> list[list[Any] | None]:
    return import_fixed_width_text(raw, columns, **options).export_to_object_arrays()


def delimited_file_as_strings(path: Path | str, delimiter: str = ",", columns: Sequence[Column] | None = None, **options: Any) -> list[list[str | None] | None]:
    return import_delimited_file(path, delimiter, columns, **options).export_to_string_arrays()


def delimited_file_as_objects(path: Path | str, delimiter: str, columns: Sequence[Column], **options: Any) -> list[list[Any] | None]:
    options["enforce_column_count"] = True
    return import_delimited_file(path, delimiter, columns, **options).export_to_object_arrays()


def fixed_width_file_as_strings(path: Path | str, columns: Sequence[Column], **options: Any) -> list[list[str | None] | None]:
    return import_fixed_width_file(path, columns, **options).export_to_string_arrays()


def fixed_width_file_as_objects(path: Path | str, columns: Sequence[Column], **options: Any) -> list[list[Any] | None]:
    return import_fixed_width_file(path, columns, **options).export_to_object_arrays()
