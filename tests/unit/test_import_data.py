from __future__ import annotations

from datetime import datetime

import pytest

from tabimport.engine.exceptions import RowFormatError, SchemaError
from tabimport.engine.import_data import (
    delimited_text_as_objects,
    delimited_text_as_strings,
    fixed_width_text_as_objects,
    fixed_width_text_as_strings,
    import_delimited_text,
    import_fixed_width_text,
)
from tabimport.models.column import Column
from tabimport.models.enums import AutoTruncate, BlankRowPolicy


def _smith_columns() -> list[Column]:
    return [
        Column.string("Name", width=20),
        Column.flat8_date("Date of Birth"),
        Column.bool_("Married", width=1),
        Column.int_("Kids", width=2),
    ]


class TestDelimitedText:
    def test_quoted_comma_with_enforcement(self):
        columns = [Column.object_(n) for n in ("A", "B", "C", "D")]
        di = import_delimited_text('a,b,"c,d",e\n1,2,3,4', ",", columns, enforce_column_count=True)
        assert di.export_to_string_arrays() == [["a", "b", "c,d", "e"], ["1", "2", "3", "4"]]

    def test_source_line_numbers_count_header(self):
        di = import_delimited_text("name,age\nbob,3\nann,4", has_header_row=True)
        assert [r.source_line_number for r in di.rows] == [2, 3]
        assert di.skipped_rows == 1

    def test_single_leading_blank_line_is_skipped(self):
        di = import_delimited_text("\nname,age\nbob,3", has_header_row=True)
        assert di.skipped_rows == 2
        assert di.rows[0].source_line_number == 3
        assert di.export_to_string_arrays() == [["bob", "3"]]

    def test_only_one_leading_blank_line_is_skipped(self):
        di = import_delimited_text("\n\nx")
        assert di.export_to_string_arrays() == [None, ["x"]]

    def test_crlf_and_trailing_newline(self):
        di = import_delimited_text("a,b\r\nc,d\r\n")
        assert di.export_to_string_arrays() == [["a", "b"], ["c", "d"]]

    @pytest.mark.parametrize("raw", [None, "", "  \n "])
    def test_blank_blob_returns_empty_import(self, raw):
        di = import_delimited_text(raw)
        assert di.row_count == 0
        assert di.skipped_rows == 0

    def test_stop_importing_keeps_rows_before_blank(self):
        lines = [f"r{i}" for i in range(1, 11)]
        lines[4] = ""
        di = import_delimited_text("\n".join(lines), blank_row_policy=BlankRowPolicy.STOP_IMPORTING)
        assert di.row_count == 4
        assert [r.values[0] for r in di.rows] == ["r1", "r2", "r3", "r4"]

    def test_too_many_fields_aborts_with_line_number(self):
        columns = [Column.object_(n) for n in ("A", "B", "C", "D")]
        with pytest.raises(RowFormatError) as e:
            import_delimited_text("1,2,3,4\n1,2,3,4,5", ",", columns, enforce_column_count=True)
        assert e.value.line_number == 2

    def test_unclosed_quote_aborts(self):
        with pytest.raises(RowFormatError, match="#1"):
            import_delimited_text('"open,1')

    def test_drop_leading_and_trailing_counts(self):
        di = import_delimited_text(
            "a\n \nb\n \n ",
            blank_row_policy=BlankRowPolicy.DROP_LEADING_AND_TRAILING,
        )
        assert [r.source_line_number for r in di.rows] == [1, 2, 3]
        assert di.row_count + di.skipped_rows == 5

    def test_as_objects_forces_enforcement(self):
        rows = delimited_text_as_objects("Bob,3", ",", [Column.string("Name"), Column.int_("Age")])
        assert rows == [["Bob", 3]]

    def test_as_strings(self):
        assert delimited_text_as_strings("a;b", ";") == [["a", "b"]]


class TestFixedWidthText:
    def test_smith_layout(self, smith_layout_text):
        rows = fixed_width_text_as_objects(smith_layout_text, _smith_columns(), auto_trunc=AutoTruncate.TRIM)
        assert rows == [
            ["Smith, Billy Bob", datetime(2001, 5, 19), False, 0],
            ["Weatherton, Michelle", datetime(1999, 2, 12), True, 1],
        ]

    def test_fields_are_untrimmed_by_default(self):
        columns = [
            Column.string("Name", width=10),
            Column.string("Dob", width=8),
            Column.string("Married", width=1),
            Column.string("Kids", width=2),
        ]
        rows = fixed_width_text_as_strings("Smith     20010519N01", columns)
        assert rows == [["Smith     ", "20010519", "N", "01"]]

    def test_enforcement_is_always_on(self, smith_layout_text):
        di = import_fixed_width_text(smith_layout_text, _smith_columns())
        assert di.enforce_column_count is True
        assert di.column_count == 4

    def test_short_line_is_padded(self):
        di = import_fixed_width_text("Smith", _smith_columns())
        assert di.export_to_string_arrays() == [["Smith", "", "", ""]]

    def test_requires_columns(self):
        with pytest.raises(SchemaError):
            import_fixed_width_text("abc", [])

    def test_formatted_export(self, smith_layout_text):
        di = import_fixed_width_text(smith_layout_text, _smith_columns(), auto_trunc=AutoTruncate.TRIM)
        assert di.export_to_formatted_object_string_arrays()[0] == ["Smith, Billy Bob", "5/19/2001", "False", "0"]

    def test_trim_is_opt_in(self):
        columns = [Column.string("Name", width=10), Column.string("Kids", width=2)]
        assert fixed_width_text_as_strings("Smith     01", columns) == [["Smith     ", "01"]]
        assert fixed_width_text_as_strings("Smith     01", columns, auto_trunc=AutoTruncate.TRIM) == [["Smith", "01"]]
