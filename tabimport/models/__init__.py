"""Domain models for tabimport.

Importing this package exposes the primary dataclasses and enums. The
enums are imported first because the converters used by Column depend on them.
"""

from .enums import (
    AutoTruncate,
    BlankRowPolicy,
    DataErrorHandlingPolicy,
    FieldType,
    ImportOutcome,
    NumberStyle,
)
from .imported_row import ImportedRow
from .data_error import DataError
from .column import Column
from .error_record import ErrorRecord
from .processing_result import FileStat, FileStatus, ProcessingResult

__all__ = [
    "AutoTruncate",
    "BlankRowPolicy",
    "Column",
    "DataError",
    "DataErrorHandlingPolicy",
    "ErrorRecord",
    "FieldType",
    "FileStat",
    "FileStatus",
    "ImportOutcome",
    "ImportedRow",
    "NumberStyle",
    "ProcessingResult",
]
