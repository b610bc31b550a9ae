from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from ..config.loader import ConfigError, ImportProfile, load_config
from ..engine.exceptions import DataImportError
from ..engine.frames import to_dataframe
from ..logging.init import log_summary, setup_logging
from ..services.orchestrator import ProcessingError, import_file, process_all, scan_source_files
from ..services.summary import render_summary_line

"""CLI entrypoint.

Flow:
- Load ``.env`` (overrides existing environment variables)
- Resolve the profile path: ``--config``, else ``$TABIMPORT_CONFIG``, else config/import.yml
- Import every matching file of the source directory and print the SUMMARY line

Exit codes: 0 all files imported, 2 one or more files failed, 1 fatal.
"""

__all__ = [
    "main",
    "EXIT_SUCCESS_ALL",
    "EXIT_PARTIAL_FAILURE",
    "EXIT_FATAL",
]

EXIT_SUCCESS_ALL = 0
EXIT_PARTIAL_FAILURE = 2
EXIT_FATAL = 1

CONFIG_ENV_VAR = "TABIMPORT_CONFIG"
DEFAULT_CONFIG_PATH = Path("config/import.yml")
INSPECT_ROWS = 3


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env using python-dotenv; values in the file win over the process environment."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="tabimport", description="Delimited / fixed-width text importer")
    p.add_argument("--config", type=Path, default=None, help="Path to the YAML import profile")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--inspect-data", action="store_true", help="Print columns & first rows of each file then exit")
    return p.parse_args(argv)


def _resolve_config_path(arg: Path | None) -> Path:
    if arg is not None:
        return arg
    env = os.getenv(CONFIG_ENV_VAR)
    if env:
        return Path(env)
    return DEFAULT_CONFIG_PATH


def _inspect_data(profile: ImportProfile) -> int:
    try:
        files = scan_source_files(Path(profile.source_directory), profile.pattern)
    except ProcessingError as e:
        print(f"inspect: {e}")
        return EXIT_FATAL
    if not files:
        print(f"inspect: no files matching {profile.pattern}")
        return EXIT_SUCCESS_ALL
    for f in files:
        print(f"FILE: {f.name}")
        try:
            frame = to_dataframe(import_file(profile, f), drop_blank_rows=True)
        except (DataImportError, OSError, UnicodeDecodeError) as e:
            print(f"  read_error: {e}")
            continue
        print(f"  cols={list(frame.columns)}")
        print(frame.head(INSPECT_ROWS).to_string())
    return EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # an explicit [] must not fall back to sys.argv (pytest arguments)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    _load_env_file(Path(".env"), override=True)

    if args.debug:
        for h in logger.handlers:
            h.setLevel(logging.DEBUG)
        logger.setLevel(logging.DEBUG)
        logger.debug("debug mode enabled")

    config_path = _resolve_config_path(args.config)
    try:
        profile = load_config(config_path)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    directory = Path(profile.source_directory)
    if not directory.exists():
        logger.error(f"directory not found: {directory}")
        return EXIT_FATAL

    if args.inspect_data:
        return _inspect_data(profile)

    logger.info(f"Processing files from: {directory}")
    try:
        result = process_all(profile)
    except ProcessingError as e:
        logger.error(f"processing: {e}")
        return EXIT_FATAL

    summary_line = render_summary_line(result.total_files, result)
    # log_summary adds the "SUMMARY " label itself
    log_summary(summary_line.removeprefix("SUMMARY "))

    if result.failed_files > 0:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
