from __future__ import annotations

import os
from pathlib import Path

from tabimport.cli.__main__ import EXIT_FATAL, EXIT_PARTIAL_FAILURE, EXIT_SUCCESS_ALL, main as cli_main


def test_cli_no_files_success(write_config: Path, capsys):
    code = cli_main([])
    out = capsys.readouterr().out
    assert code == EXIT_SUCCESS_ALL
    assert "SUMMARY files=0/0 success=0 failed=0 rows=0 skipped_rows=0 data_errors=0" in out


def test_cli_partial_failure(write_config: Path, sample_data_files: list[Path], capsys):
    code = cli_main([])
    out = capsys.readouterr().out
    assert code == EXIT_PARTIAL_FAILURE
    assert "SUMMARY files=3/3 success=2 failed=1 rows=3 skipped_rows=2 data_errors=1" in out
    assert "WARN file=c_broken.csv failed:" in out


def test_cli_all_success(write_config: Path, sample_data_files: list[Path], capsys):
    sample_data_files[2].unlink()
    code = cli_main([])
    assert code == EXIT_SUCCESS_ALL
    assert "success=2 failed=0" in capsys.readouterr().out


def test_cli_directory_missing(write_config: Path, capsys):
    text = write_config.read_text(encoding="utf-8").replace("./data", "./missing_dir")
    write_config.write_text(text, encoding="utf-8")
    code = cli_main([])
    assert code == EXIT_FATAL
    assert "ERROR directory not found:" in capsys.readouterr().out


def test_cli_missing_config(temp_workdir: Path, capsys):
    code = cli_main([])
    assert code == EXIT_FATAL
    assert "ERROR config: config file not found" in capsys.readouterr().out


def test_cli_config_argument_and_env(write_config: Path, temp_workdir: Path, monkeypatch, capsys):
    moved = temp_workdir / "profile.yml"
    write_config.rename(moved)

    assert cli_main(["--config", str(moved)]) == EXIT_SUCCESS_ALL

    monkeypatch.setenv("TABIMPORT_CONFIG", str(moved))
    assert cli_main([]) == EXIT_SUCCESS_ALL


def test_cli_env_file_sets_config_path(write_config: Path, temp_workdir: Path, monkeypatch):
    moved = temp_workdir / "other.yml"
    write_config.rename(moved)
    (temp_workdir / ".env").write_text(f"TABIMPORT_CONFIG={moved}\n", encoding="utf-8")
    try:
        assert cli_main([]) == EXIT_SUCCESS_ALL
    finally:
        os.environ.pop("TABIMPORT_CONFIG", None)


def test_cli_debug_mode(write_config: Path, sample_data_files: list[Path], capsys):
    cli_main(["--debug"])
    out = capsys.readouterr().out
    assert "DEBUG debug mode enabled" in out
    assert "DEBUG parsing row 2" in out


def test_cli_inspect_data(write_config: Path, sample_data_files: list[Path], capsys):
    code = cli_main(["--inspect-data"])
    out = capsys.readouterr().out
    assert code == EXIT_SUCCESS_ALL
    assert "FILE: a_people.csv" in out
    assert "cols=['Name', 'Kids', 'Married', 'Balance']" in out
    assert "Smith" in out
    assert "FILE: c_broken.csv" in out and "read_error:" in out
    assert "SUMMARY" not in out
