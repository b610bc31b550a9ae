from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..engine.converters import DEFAULT_FALSE_VALUES, DEFAULT_TRUE_VALUES, ConverterRegistry
from ..engine.exceptions import SchemaError
from ..models.column import Column, date_format, time_format
from ..models.enums import (
    AutoTruncate,
    BlankRowPolicy,
    DataErrorHandlingPolicy,
    FieldType,
    NumberStyle,
)

"""Import profile loader.

Responsibilities:
- Load a YAML import profile (default ``config/import.yml``)
- Validate it against ``profile_schema.json`` (shipped inside the package)
- Apply defaults and build frozen ImportProfile / ColumnSpec objects
- Turn column specs into engine Columns on demand
"""

__all__ = [
    "ConfigError",
    "ColumnSpec",
    "ImportProfile",
    "load_config",
    "SCHEMA_PATH",
]

SCHEMA_PATH = Path(__file__).with_name("profile_schema.json")

FORMAT_DELIMITED = "delimited"
FORMAT_FIXED_WIDTH = "fixed_width"


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class ColumnSpec:
    """One column entry of a profile (text form, before converters are bound)."""
    name: str
    type: FieldType = FieldType.OBJECT
    width: int = 0
    start_position: int = 0
    not_mapped: bool = False
    date_format: str | None = None
    locale: str | None = None
    true_values: str = DEFAULT_TRUE_VALUES
    false_values: str = DEFAULT_FALSE_VALUES
    ignore_case: bool = False
    strict: bool = False
    display_null_as: str | None = "[null]"
    number_style: NumberStyle | None = None

    def to_column(self, registry: ConverterRegistry | None = None) -> Column:
        options: dict[str, Any] = {
            "start_position": self.start_position,
            "not_mapped": self.not_mapped,
            "date_format": self.date_format,
            "locale": self.locale,
            "true_values": self.true_values,
            "false_values": self.false_values,
            "ignore_case": self.ignore_case,
            "strict": self.strict,
            "display_null_as": self.display_null_as,
            "number_style": self.number_style,
        }
        if self.type in (FieldType.DATETIME, FieldType.DATE):
            options["formatter"] = date_format
        elif self.type is FieldType.TIME:
            options["formatter"] = time_format
        return Column.by_type(self.type, self.name, self.width, registry=registry, **options)


@dataclass(frozen=True)
class ImportProfile:
    source_directory: str
    format: str
    pattern: str = "*.txt"
    delimiter: str = ","
    encoding: str = "utf-8"
    has_header_row: bool = False
    enforce_column_count: bool = False
    auto_truncate: AutoTruncate = AutoTruncate.NONE
    blank_row_policy: BlankRowPolicy = BlankRowPolicy.ALLOW
    data_error_policy: DataErrorHandlingPolicy = DataErrorHandlingPolicy.THROW
    columns: tuple[ColumnSpec, ...] = field(default_factory=tuple)

    @property
    def is_fixed_width(self) -> bool:
        return self.format == FORMAT_FIXED_WIDTH

    def build_columns(self, registry: ConverterRegistry | None = None) -> list[Column]:
        """Create engine Columns for every spec, sharing one converter registry."""
        registry = registry or ConverterRegistry.default()
        return [spec.to_column(registry) for spec in self.columns]


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate profile data against the JSON schema.

    Raises:
        ConfigError: If any of the following occurs:
            - The schema file does not exist.
            - The schema file is not valid JSON.
            - The profile fails schema validation (missing required keys,
              wrong types, unknown keys, ...).
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def _column_spec(raw: dict[str, Any]) -> ColumnSpec:
    return ColumnSpec(
        name=raw["name"].strip(),
        type=FieldType(raw.get("type", FieldType.OBJECT.value)),
        width=raw.get("width", 0),
        start_position=raw.get("start_position", 0),
        not_mapped=raw.get("not_mapped", False),
        date_format=raw.get("date_format"),
        locale=raw.get("locale"),
        true_values=raw.get("true_values", DEFAULT_TRUE_VALUES),
        false_values=raw.get("false_values", DEFAULT_FALSE_VALUES),
        ignore_case=raw.get("ignore_case", False),
        strict=raw.get("strict", False),
        display_null_as=raw.get("display_null_as", "[null]"),
        number_style=NumberStyle.from_names(raw.get("number_style")),
    )


def load_config(path: Path) -> ImportProfile:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping: {path}")

    _validate_config_schema(data)

    fmt = data["format"]
    columns = tuple(_column_spec(c) for c in data.get("columns", []))
    if fmt == FORMAT_FIXED_WIDTH and not any(c.width > 0 and not c.not_mapped for c in columns):
        raise ConfigError("fixed_width profiles need at least one mapped column with a width")
    enforce = fmt == FORMAT_FIXED_WIDTH or data.get("enforce_column_count", False)
    if enforce and not columns:
        raise ConfigError("enforce_column_count requires at least one column")

    profile = ImportProfile(
        source_directory=data["source_directory"],
        format=fmt,
        pattern=data.get("pattern", "*.txt"),
        delimiter=data.get("delimiter", ","),
        encoding=data.get("encoding", "utf-8"),
        has_header_row=data.get("has_header_row", False),
        enforce_column_count=enforce,
        auto_truncate=AutoTruncate(data.get("auto_truncate", AutoTruncate.NONE.value)),
        blank_row_policy=BlankRowPolicy(data.get("blank_row_policy", BlankRowPolicy.ALLOW.value)),
        data_error_policy=DataErrorHandlingPolicy(
            data.get("data_error_policy", DataErrorHandlingPolicy.THROW.value)
        ),
        columns=columns,
    )

    # bad locales etc. surface here rather than on the first file
    try:
        profile.build_columns()
    except SchemaError as e:
        raise ConfigError(f"invalid column definition: {e}") from e
    return profile
