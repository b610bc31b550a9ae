from __future__ import annotations

from typing import Any

import pandas as pd

from .data_import import DataImport

"""pandas projection of a DataImport (used for inspection output)."""

__all__ = [
    "to_dataframe",
]


def _column_names(data_import: DataImport, rows: list[list[Any] | None]) -> list[str]:
    names = [c.name for c in data_import.mapped_columns]
    width = max((len(r) for r in rows if r is not None), default=0)
    # undeclared trailing fields get positional names
    names.extend(f"col{i}" for i in range(len(names) + 1, width + 1))
    return names


def to_dataframe(
    data_import: DataImport,
    *,
    typed: bool = True,
    drop_blank_rows: bool = False,
) -> pd.DataFrame:
    """Build a DataFrame indexed by source line number.

    Args:
        data_import: Finalized import
        typed: Parse values through the columns (requires enforced column count);
            when False (or when enforcement is off) the raw strings are used
        drop_blank_rows: Omit rows that were imported as blank

    Returns:
        DataFrame whose columns are the mapped column names, or col1..colN when
        no columns were declared
    """
    if typed and data_import.enforce_column_count:
        rows: list[list[Any] | None] = data_import.export_to_object_arrays()
    else:
        rows = data_import.export_to_string_arrays()

    names = _column_names(data_import, rows)
    index: list[int] = []
    records: list[list[Any]] = []
    for imported, values in zip(data_import.rows, rows):
        if values is None:
            if drop_blank_rows:
                continue
            values = []
        index.append(imported.source_line_number)
        # ragged rows (enforcement off) are padded with None
        records.append(list(values) + [None] * (len(names) - len(values)))

    return pd.DataFrame(records, columns=names, index=pd.Index(index, name="source_line"), dtype=object)
