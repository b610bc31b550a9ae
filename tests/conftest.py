# Shared pytest fixtures
from __future__ import annotations
import tempfile
from pathlib import Path
import pytest

from tabimport.logging.init import reset_logging


@pytest.fixture(autouse=True)
def _fresh_logging():
    # the console handler binds sys.stdout at setup; rebind it per test (capsys)
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        monkeypatch.delenv("TABIMPORT_CONFIG", raising=False)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """source_directory: ./data
pattern: "*.csv"
format: delimited
delimiter: ","
has_header_row: true
enforce_column_count: true
data_error_policy: embed
columns:
  - name: Name
    type: string
  - name: Kids
    type: int
  - name: Married
    type: bool
    ignore_case: true
  - name: Balance
    type: decimal
    number_style: [allow_thousands, allow_currency_symbol, allow_parentheses]
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "import.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def sample_data_files(temp_workdir: Path) -> list[Path]:
    """Two good files and one with a malformed (unclosed quote) line."""
    files = {
        "a_people.csv": 'Name,Kids,Married,Balance\nSmith,2,Y,"$1,200.50"\nJones,0,n,(15.00)\n',
        "b_more.csv": "Name,Kids,Married,Balance\nBrown,x,yes,10\n",
        "c_broken.csv": 'Name,Kids,Married,Balance\n"Unclosed,1,Y,5\n',
    }
    paths = []
    for name, text in files.items():
        f = temp_workdir / "data" / name
        f.write_text(text, encoding="utf-8")
        paths.append(f)
    return paths


@pytest.fixture()
def smith_layout_text() -> str:
    return (
        "Smith, Billy Bob    20010519N00\n"
        "Weatherton, Michelle19990212Y01\n"
    )
