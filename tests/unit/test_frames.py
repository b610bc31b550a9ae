from __future__ import annotations

from tabimport.engine.frames import to_dataframe
from tabimport.engine.import_data import import_delimited_text
from tabimport.models.column import Column


def test_typed_frame_indexed_by_source_line():
    columns = [Column.string("Name"), Column.int_("Age")]
    di = import_delimited_text("Name,Age\nbob,3\nann,41", ",", columns, enforce_column_count=True, has_header_row=True)
    frame = to_dataframe(di)
    assert list(frame.columns) == ["Name", "Age"]
    assert list(frame.index) == [2, 3]
    assert frame.loc[3, "Age"] == 41
    assert frame.index.name == "source_line"


def test_untyped_frame_gets_positional_names():
    di = import_delimited_text("a,b\nc")
    frame = to_dataframe(di)
    assert list(frame.columns) == ["col1", "col2"]
    assert frame.loc[2, "col1"] == "c"
    assert frame.loc[2, "col2"] is None


def test_blank_rows_kept_or_dropped():
    di = import_delimited_text("a\n\nb")
    assert len(to_dataframe(di)) == 3
    assert list(to_dataframe(di, drop_blank_rows=True).index) == [1, 3]
