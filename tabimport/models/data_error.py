from __future__ import annotations

from dataclasses import dataclass

from ..engine.exceptions import truncate_for_display

"""DataError marker embedded in typed rows (DataErrorHandlingPolicy.EMBED)."""

__all__ = [
    "DataError",
]


@dataclass(frozen=True)
class DataError:
    """A per-cell parse failure captured in place of the value.

    Attributes:
        message: Reason the value could not be parsed
        column: 1-based column number (mapped columns)
        row: 1-based source line number
        datum: The raw text that failed to parse
    """
    message: str
    column: int
    row: int
    datum: str | None = None

    def __str__(self) -> str:
        return (
            f"[error: {self.message} (col {self.column}, row {self.row}, "
            f'value "{truncate_for_display(self.datum)}")]'
        )
