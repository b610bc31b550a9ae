from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

"""ImportedRow model.

One parsed record: the source line number it came from and its raw (post
auto-truncate) field values. ``values is None`` marks a blank row that the
blank-row policy chose to keep.
"""

__all__ = [
    "ImportedRow",
]


@dataclass(frozen=True)
class ImportedRow:
    """Raw values of a single source line."""
    source_line_number: int  # 1-based, counts skipped blank/header lines
    values: tuple[str | None, ...] | None = None

    @classmethod
    def of(cls, source_line_number: int, values: Iterable[str | None] | None) -> ImportedRow:
        return cls(source_line_number, None if values is None else tuple(values))

    @property
    def is_empty(self) -> bool:
        if self.values is None:
            return True
        return all(v is None or v.strip() == "" for v in self.values)

    def with_values(self, values: Iterable[str | None] | None) -> ImportedRow:
        """Return a copy of this row carrying new values (rows are never resized in place)."""
        return ImportedRow.of(self.source_line_number, values)

    def as_list(self) -> list[str | None] | None:
        return None if self.values is None else list(self.values)
