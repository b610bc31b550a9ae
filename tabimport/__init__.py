"""tabimport: parse delimited and fixed-width text into typed, validated rows.

Typical use::

    from tabimport import Column, import_fixed_width_text

    columns = [Column.string("Name", width=20), Column.flat8_date("Date of Birth")]
    data_import = import_fixed_width_text(raw, columns)
    rows = data_import.export_to_object_arrays()
"""

from .models import (
    AutoTruncate,
    BlankRowPolicy,
    Column,
    DataError,
    DataErrorHandlingPolicy,
    FieldType,
    ImportedRow,
    ImportOutcome,
    NumberStyle,
)
from .engine.converters import ConverterRegistry
from .engine.data_import import DataImport
from .engine.exceptions import DataImportError, InvalidDatumError, RowFormatError, SchemaError
from .engine.frames import to_dataframe
from .engine.import_data import (
    delimited_file_as_objects,
    delimited_file_as_strings,
    delimited_text_as_objects,
    delimited_text_as_strings,
    fixed_width_file_as_objects,
    fixed_width_file_as_strings,
    fixed_width_text_as_objects,
    fixed_width_text_as_strings,
    import_delimited_file,
    import_delimited_file_async,
    import_delimited_text,
    import_fixed_width_file,
    import_fixed_width_file_async,
    import_fixed_width_text,
)

__version__ = "0.1.0"

__all__ = [
    "AutoTruncate",
    "BlankRowPolicy",
    "Column",
    "ConverterRegistry",
    "DataError",
    "DataErrorHandlingPolicy",
    "DataImport",
    "DataImportError",
    "FieldType",
    "ImportOutcome",
    "ImportedRow",
    "InvalidDatumError",
    "NumberStyle",
    "RowFormatError",
    "SchemaError",
    "delimited_file_as_objects",
    "delimited_file_as_strings",
    "delimited_text_as_objects",
    "delimited_text_as_strings",
    "fixed_width_file_as_objects",
    "fixed_width_file_as_strings",
    "fixed_width_text_as_objects",
    "fixed_width_text_as_strings",
    "import_delimited_file",
    "import_delimited_file_async",
    "import_delimited_text",
    "import_fixed_width_file",
    "import_fixed_width_file_async",
    "import_fixed_width_text",
    "to_dataframe",
]
