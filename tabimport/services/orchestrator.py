from __future__ import annotations

import logging
from datetime import UTC, datetime
from pathlib import Path

from ..config.loader import ImportProfile
from ..engine.converters import ConverterRegistry
from ..engine.data_import import DataImport
from ..engine.exceptions import DataImportError, InvalidDatumError, RowFormatError, SchemaError
from ..engine.import_data import import_delimited_file, import_fixed_width_file
from ..logging.error_log import ErrorLogBuffer
from ..models.error_record import UNKNOWN_POSITION, ErrorRecord
from ..models.processing_result import FileStat, FileStatus, ProcessingResult
from .progress import ProgressTracker

"""Batch orchestration: import every matching file of a directory.

Steps:
1. Scan ``source_directory`` for ``pattern`` (non-recursive, sorted by name)
2. Import each file with the profile's options; a failing file is recorded and
   the batch moves on
3. Collect embedded data errors and file failures into the error log
4. Flush the error log once and return aggregated metrics
"""

__all__ = [
    "ProcessingError",
    "scan_source_files",
    "import_file",
    "process_file",
    "process_all",
]

logger = logging.getLogger(__name__)


class ProcessingError(Exception):
    """Fatal batch error (the run cannot start)."""
    pass


def _error_type(error: Exception) -> str:
    if isinstance(error, SchemaError):
        return "SCHEMA_ERROR"
    if isinstance(error, RowFormatError):
        return "ROW_FORMAT_ERROR"
    if isinstance(error, InvalidDatumError):
        return "INVALID_DATUM_ERROR"
    if isinstance(error, UnicodeDecodeError):
        return "ENCODING_ERROR"
    return "FILE_READ_ERROR"


def scan_source_files(directory: Path, pattern: str = "*.txt") -> list[Path]:
    """List files in ``directory`` matching ``pattern`` (non-recursive, sorted).

    Raises:
        ProcessingError: If directory doesn't exist or can't be read
    """
    if not directory.exists():
        raise ProcessingError(f"Directory not found: {directory}")

    if not directory.is_dir():
        raise ProcessingError(f"Path is not a directory: {directory}")

    try:
        return sorted(p for p in directory.glob(pattern) if p.is_file())
    except OSError as e:
        raise ProcessingError(f"Error reading directory {directory}: {e}") from e


def import_file(
    profile: ImportProfile,
    path: Path,
    registry: ConverterRegistry | None = None,
) -> DataImport:
    """Import one file according to the profile and return the finalized DataImport.

    When column count is enforced the rows are also parsed to typed values so
    that bad data is detected (collected in ``data_errors`` under the embed policy).
    """
    columns = profile.build_columns(registry)
    if profile.is_fixed_width:
        data_import = import_fixed_width_file(
            path,
            columns,
            encoding=profile.encoding,
            has_header_row=profile.has_header_row,
            blank_row_policy=profile.blank_row_policy,
            data_error_policy=profile.data_error_policy,
            auto_trunc=profile.auto_truncate,
        )
    else:
        data_import = import_delimited_file(
            path,
            profile.delimiter,
            columns or None,
            encoding=profile.encoding,
            enforce_column_count=profile.enforce_column_count,
            has_header_row=profile.has_header_row,
            blank_row_policy=profile.blank_row_policy,
            data_error_policy=profile.data_error_policy,
            auto_trunc=profile.auto_truncate,
        )
    if data_import.enforce_column_count:
        data_import.export_to_object_arrays()
    return data_import


def process_file(
    profile: ImportProfile,
    path: Path,
    error_log: ErrorLogBuffer,
    registry: ConverterRegistry | None = None,
) -> FileStat:
    """Import a single file, recording errors in ``error_log``; never raises for bad data."""
    start = datetime.now(UTC)
    try:
        data_import = import_file(profile, path, registry)
    except (DataImportError, OSError, UnicodeDecodeError) as e:
        line = getattr(e, "line_number", None)
        error_log.append(
            ErrorRecord.create(
                file=path.name,
                row=line if line is not None else UNKNOWN_POSITION,
                error_type=_error_type(e),
                message=str(e),
            )
        )
        logger.warning(f"file={path.name} failed: {e}")
        return FileStat(
            file_name=path.name,
            status=FileStatus.FAILED,
            imported_rows=0,
            skipped_rows=0,
            data_errors=0,
            elapsed_seconds=(datetime.now(UTC) - start).total_seconds(),
            error=str(e),
        )

    error_log.extend([ErrorRecord.from_data_error(path.name, err) for err in data_import.data_errors])
    if data_import.data_error_count:
        logger.warning(f"file={path.name} data_errors={data_import.data_error_count}")
    logger.debug(f"file={path.name} rows={data_import.row_count} skipped={data_import.skipped_rows}")
    return FileStat(
        file_name=path.name,
        status=FileStatus.SUCCESS,
        imported_rows=data_import.row_count,
        skipped_rows=data_import.skipped_rows,
        data_errors=data_import.data_error_count,
        elapsed_seconds=(datetime.now(UTC) - start).total_seconds(),
    )


def process_all(
    profile: ImportProfile,
    error_log: ErrorLogBuffer | None = None,
    registry: ConverterRegistry | None = None,
) -> ProcessingResult:
    """Process all matching files of the profile's source directory.

    Raises:
        ProcessingError: Source directory missing or unreadable
    """
    start_time = datetime.now(UTC)
    error_log = error_log if error_log is not None else ErrorLogBuffer()
    registry = registry or ConverterRegistry.default()

    file_paths = scan_source_files(Path(profile.source_directory), profile.pattern)
    if not file_paths:
        logger.info(f"no files matching {profile.pattern} in {profile.source_directory}")

    file_stats: list[FileStat] = []
    success_count = 0
    failed_count = 0
    total_rows = 0
    total_skipped = 0
    total_data_errors = 0

    with ProgressTracker(len(file_paths)) as progress:
        for file_path in file_paths:
            progress.start_file(file_path)
            stat = process_file(profile, file_path, error_log, registry)
            if stat.status is FileStatus.SUCCESS:
                success_count += 1
                total_rows += stat.imported_rows
                total_skipped += stat.skipped_rows
                total_data_errors += stat.data_errors
            else:
                failed_count += 1
            progress.set_postfix(success=success_count, failed=failed_count, rows=total_rows)
            progress.finish_file()
            file_stats.append(stat)

    # Flush error log once per run
    try:
        log_path = error_log.flush()
    except OSError as e:
        logger.warning(f"could not write error log: {e}")
    else:
        if log_path is not None:
            logger.info(f"error log written: {log_path}")

    end_time = datetime.now(UTC)
    elapsed_seconds = (end_time - start_time).total_seconds()
    throughput_rps = total_rows / elapsed_seconds if elapsed_seconds > 0 else 0.0

    return ProcessingResult(
        success_files=success_count,
        failed_files=failed_count,
        total_imported_rows=total_rows,
        total_skipped_rows=total_skipped,
        total_data_errors=total_data_errors,
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=elapsed_seconds,
        throughput_rows_per_sec=throughput_rps,
        file_stats=file_stats,
    )
