from __future__ import annotations

import pytest

from tabimport.engine.data_import import DataImport
from tabimport.engine.exceptions import InvalidDatumError, RowFormatError, SchemaError
from tabimport.models.column import Column
from tabimport.models.data_error import DataError
from tabimport.models.enums import (
    AutoTruncate,
    BlankRowPolicy,
    DataErrorHandlingPolicy,
    ImportOutcome,
)


def _columns(*names: str) -> list[Column]:
    return [Column.object_(n) for n in names]


class TestImportRaw:
    def test_pads_short_rows_under_enforcement(self):
        di = DataImport(_columns("A", "B", "C"), enforce_column_count=True)
        assert di.import_raw(["1"], 1) is ImportOutcome.CONTINUE
        assert di.rows[0].values == ("1", "", "")

    def test_keeps_ragged_rows_without_enforcement(self):
        di = DataImport()
        di.import_raw(["1", "2"], 1)
        di.import_raw(["3"], 2)
        assert di.export_to_string_arrays() == [["1", "2"], ["3"]]

    def test_too_many_fields_under_enforcement(self):
        di = DataImport(_columns("A", "B", "C", "D"), enforce_column_count=True)
        with pytest.raises(RowFormatError) as e:
            di.import_raw(["1", "2", "3", "4", "5"], 9)
        assert e.value.line_number == 9
        assert "#9" in str(e.value)

    def test_enforcement_without_columns(self):
        di = DataImport(enforce_column_count=True)
        with pytest.raises(SchemaError):
            di.import_raw(["1"], 1)

    @pytest.mark.parametrize(
        "mode, expected",
        [
            (AutoTruncate.NONE, (" a ", "  ")),
            (AutoTruncate.TRIM, ("a", "")),
            (AutoTruncate.ZAP, ("a", None)),
        ],
    )
    def test_auto_truncate(self, mode, expected):
        di = DataImport(auto_trunc=mode)
        di.import_raw([" a ", "  "], 1)
        assert di.rows[0].values == expected

    def test_column_count_ignores_not_mapped(self):
        di = DataImport([Column.object_("A"), Column.no_map("gap"), Column.object_("B")])
        assert di.column_count == 2
        assert [c.name for c in di.mapped_columns] == ["A", "B"]


class TestBlankRows:
    def test_allow_keeps_null_row(self):
        di = DataImport()
        di.import_raw(["   "], 1)
        assert di.row_count == 1
        assert di.rows[0].values is None
        assert di.export_to_string_arrays() == [None]

    def test_drop_counts_skipped(self):
        di = DataImport(blank_row_policy=BlankRowPolicy.DROP)
        di.import_raw(["x"], 1)
        di.import_raw([], 2)
        assert di.row_count == 1
        assert di.skipped_rows == 1
        assert di.next_row == 3

    def test_stop_importing(self):
        di = DataImport(blank_row_policy=BlankRowPolicy.STOP_IMPORTING)
        assert di.import_raw([""], 1) is ImportOutcome.STOP_REQUESTED
        assert di.row_count == 0

    def test_error_policy_raises_with_line(self):
        di = DataImport(blank_row_policy=BlankRowPolicy.ERROR)
        with pytest.raises(RowFormatError, match="#4"):
            di.import_raw([], 4)

    def test_single_blank_line_with_drop_leading_and_trailing(self):
        di = DataImport(blank_row_policy=BlankRowPolicy.DROP_LEADING_AND_TRAILING)
        di.import_raw([""], 1)
        di.finalize_import()
        assert di.row_count == 0
        assert di.skipped_rows == 1

    def test_drop_leading_keeps_interior_blanks(self):
        di = DataImport(blank_row_policy=BlankRowPolicy.DROP_LEADING)
        di.import_raw([], 1)
        di.import_raw(["a"], 2)
        di.import_raw([], 3)
        di.import_raw(["b"], 4)
        di.import_raw([], 5)
        di.finalize_import()
        assert [r.source_line_number for r in di.rows] == [2, 3, 4, 5]
        assert di.skipped_rows == 1

    def test_drop_trailing_prunes_at_finalize(self):
        di = DataImport(blank_row_policy=BlankRowPolicy.DROP_TRAILING)
        di.import_raw([], 1)
        di.import_raw(["a"], 2)
        di.import_raw([], 3)
        di.import_raw([" "], 4)
        assert di.row_count == 4
        di.finalize_import()
        assert [r.source_line_number for r in di.rows] == [1, 2]
        assert di.skipped_rows == 2

    def test_finalize_is_idempotent(self):
        di = DataImport(blank_row_policy=BlankRowPolicy.DROP_LEADING_AND_TRAILING)
        for line, fields in enumerate([["a"], [], ["b"], [], []], start=1):
            di.import_raw(fields, line)
        di.finalize_import()
        rows_after_first = di.rows
        di.finalize_import()
        assert di.rows == rows_after_first
        assert di.row_count + di.skipped_rows == 5

    def test_finalize_on_empty_import(self):
        di = DataImport(blank_row_policy=BlankRowPolicy.DROP)
        di.finalize_import()
        assert di.row_count == 0

    def test_finalize_drop_removes_zapped_rows(self):
        di = DataImport(auto_trunc=AutoTruncate.ZAP, blank_row_policy=BlankRowPolicy.DROP)
        di.import_raw([" ", " "], 1)
        di.import_raw(["a", "b"], 2)
        di.finalize_import()
        assert di.row_count == 1
        assert di.skipped_rows == 1

    def test_finalize_error_names_first_empty_row(self):
        di = DataImport(auto_trunc=AutoTruncate.ZAP, blank_row_policy=BlankRowPolicy.ERROR)
        di.import_raw(["a", "b"], 1)
        di.import_raw([" ", " "], 2)
        di.import_raw([" ", " "], 3)
        with pytest.raises(RowFormatError, match="#2") as e:
            di.finalize_import()
        assert e.value.line_number == 2


class TestAddColumn:
    def test_rebuilds_existing_rows_under_enforcement(self):
        di = DataImport(_columns("A"), enforce_column_count=True, auto_trunc=AutoTruncate.ZAP)
        di.import_raw(["1"], 1)
        di.import_raw([], 2)
        di.add_column(Column.object_("B"))
        assert di.rows[0].values == ("1", None)
        assert di.rows[1].values is None

    def test_add_column_spec(self):
        di = DataImport()
        column = di.add_column_spec("Name")
        assert di.columns == (column,)

    def test_none_rejected(self):
        with pytest.raises(SchemaError):
            DataImport().add_column(None)


class TestExport:
    def _import(self, policy: DataErrorHandlingPolicy) -> DataImport:
        di = DataImport([Column.int_("N")], enforce_column_count=True, data_error_policy=policy)
        di.import_raw(["abc"], 1)
        return di

    def test_embed_collects_errors(self):
        di = self._import(DataErrorHandlingPolicy.EMBED)
        rows = di.export_to_object_arrays()
        cell = rows[0][0]
        assert isinstance(cell, DataError)
        assert (cell.column, cell.row, cell.datum) == (1, 1, "abc")
        assert di.data_error_count == 1

    def test_ignore_uses_default(self):
        di = self._import(DataErrorHandlingPolicy.IGNORE_AND_USE_DEFAULT_VALUE)
        assert di.export_to_object_arrays() == [[0]]
        assert di.data_errors == []

    def test_throw(self):
        di = self._import(DataErrorHandlingPolicy.THROW)
        with pytest.raises(InvalidDatumError):
            di.export_to_object_arrays()

    def test_typed_export_requires_enforcement(self):
        di = DataImport(_columns("A"))
        di.import_raw(["1"], 1)
        with pytest.raises(SchemaError, match="enforced"):
            di.export_to_object_arrays()

    def test_null_rows_pass_through(self):
        di = DataImport([Column.int_("N")], enforce_column_count=True)
        di.import_raw(["5"], 1)
        di.import_raw([], 2)
        assert di.export_to_object_arrays() == [[5], None]
        assert di.export_to_formatted_object_string_arrays() == [["5"], None]

    def test_format_object_arrays_length_mismatch(self):
        with pytest.raises(SchemaError, match="does not match"):
            DataImport.format_object_arrays(_columns("A", "B"), [["only one"]])

    def test_round_trip_reproduces_text(self):
        di = DataImport(_columns("A", "B", "C"), enforce_column_count=True)
        source = [[" x", "007", "a b "], ["", "-1.50", "z"]]
        for line, fields in enumerate(source, start=1):
            di.import_raw(fields, line)
        assert di.export_to_formatted_object_string_arrays() == source


def test_container_protocol():
    di = DataImport()
    di.import_raw(["a"], 1)
    di.import_raw(["b"], 2)
    assert len(di) == 2
    assert di[1].values == ("b",)
    assert [r.source_line_number for r in di] == [1, 2]
    assert "rows=2" in repr(di)
