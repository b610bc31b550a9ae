from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

from .data_error import DataError

"""ErrorRecord model for the JSON Lines error log.

One record per failed cell (embedded DataError) or per failed file. ``row=-1``
and ``column=-1`` mark file-level errors where no position is known.
"""

__all__ = [
    "ErrorRecord",
    "UNKNOWN_POSITION",
]

UNKNOWN_POSITION = -1


@dataclass(frozen=True)
class ErrorRecord:
    """Structured error record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        file: Source file name
        row: 1-based source line number, -1 when unknown
        column: 1-based column number, -1 when unknown
        error_type: Error classification in UPPER_SNAKE_CASE format
        message: Error description
    """
    timestamp: str
    file: str
    row: int
    column: int
    error_type: str
    message: str

    @staticmethod
    def create(
        file: str,
        row: int,
        error_type: str,
        message: str,
        column: int = UNKNOWN_POSITION,
    ) -> ErrorRecord:
        """Create a new ErrorRecord stamped with the current UTC time."""
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(
            timestamp=ts,
            file=file,
            row=row,
            column=column,
            error_type=error_type,
            message=message,
        )

    @staticmethod
    def from_data_error(file: str, error: DataError) -> ErrorRecord:
        return ErrorRecord.create(
            file=file,
            row=error.row,
            column=error.column,
            error_type="DATA_ERROR",
            message=str(error),
        )

    def to_json_line(self) -> str:
        """Serialize to one JSON line (exactly the dataclass fields, no extra keys)."""
        return json.dumps(asdict(self), ensure_ascii=False)
