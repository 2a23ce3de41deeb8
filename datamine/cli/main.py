from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from dotenv import load_dotenv

from datamine.config.loader import DEFAULT_CONFIG_PATH, BuildConfig, ConfigError, apply_env_overrides, load_config
from datamine.logging.error_log import ErrorLogBuffer
from datamine.logging.init import log_summary, setup_logging
from datamine.models.build_error import BuildError
from datamine.services.orchestrator import run_build
from datamine.services.output import encode_document, write_document
from datamine.services.summary import render_summary_line

"""CLI entrypoint.

Flow:
- Load .env (python-dotenv), then the YAML config, then environment overrides
- Read the export directory and build the document
- On success write the document (stdout by default) and a SUMMARY line on stderr
- On any error write nothing, log the error, append it to the error log, exit 1
"""

EXIT_SUCCESS = 0
EXIT_FATAL = 1

# --inspect-data で表示するシート (ビルドが読むもの)
INSPECT_SHEETS = (
    "WorldAreas.dat",
    "UniqueMaps.dat",
    "AtlasNode.dat",
    "ItemVisualIdentity.dat",
    "AtlasRegions.dat",
)
INSPECT_ROWS = 3


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env using python-dotenv; values in .env win over the process environment."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Build the denormalized area document from a game data export")
    p.add_argument("--config", type=Path, default=None, help=f"YAML config (default: {DEFAULT_CONFIG_PATH} if present)")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--inspect-data", action="store_true", help="Print consumed sheet headers & first rows then exit")
    return p.parse_args(argv)


def _resolve_config(config_arg: Path | None) -> BuildConfig:
    if config_arg is not None:
        return load_config(config_arg)
    # 既定パスは存在しなければ組み込み既定値で動作
    if DEFAULT_CONFIG_PATH.exists():
        return load_config(DEFAULT_CONFIG_PATH)
    return load_config(None)


def _inspect_data(cfg: BuildConfig) -> int:
    from datamine.sheets.reader import normalize_sheet, read_sheet_file

    path = Path(cfg.input_directory) / cfg.export_file
    res = read_sheet_file(path)
    if not res.ok:
        print(f"inspect: {res.error.describe()}")  # type: ignore[union-attr]
        return EXIT_FATAL
    by_name = {s.filename: s for s in res.value or []}
    print(f"FILE: {path.name} sheets={len(by_name)}")
    for name in INSPECT_SHEETS:
        raw = by_name.get(name)
        if raw is None:
            print(f"  SHEET: {name} missing")
            continue
        sheet = normalize_sheet(raw)
        if not sheet.ok:
            print(f"  SHEET: {name} error={sheet.error.describe()}")  # type: ignore[union-attr]
            continue
        print(f"  SHEET: {name} rows={len(sheet.value)} cols={sheet.value.header}")  # type: ignore[union-attr, arg-type]
        sample = sheet.value.data[:INSPECT_ROWS]  # type: ignore[union-attr]
        print("    sample_rows=", json.dumps(sample, ensure_ascii=False, default=repr))
    return EXIT_SUCCESS


def _report_error(logger, error: BuildError, cfg: BuildConfig) -> None:
    logger.error(f"build: {error.describe()}")
    if error.raw is not None:
        logger.error(f"raw={json.dumps(error.raw, ensure_ascii=False, default=repr)}")
    error_log = ErrorLogBuffer(Path(cfg.error_log_directory))
    error_log.append_error(error)
    try:
        path = error_log.flush()
    except OSError as e:
        logger.warning(f"failed to write error log: {e}")
        return
    logger.info(f"error log: {path}")


def main(argv: list[str] | None = None) -> int:
    # None のときのみシステム引数を読む ([] はテストからの明示的な空引数)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    logger = setup_logging(debug=args.debug)
    if args.debug:
        logger.debug("debug mode enabled")

    _load_env_file(Path(".env"), override=True)
    try:
        cfg = apply_env_overrides(_resolve_config(args.config))
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    if args.inspect_data:
        return _inspect_data(cfg)

    result = run_build(cfg)
    if not result.ok:
        _report_error(logger, result.error, cfg)  # type: ignore[arg-type]
        return EXIT_FATAL
    outcome = result.value

    text = encode_document(outcome.document, indent=cfg.indent)  # type: ignore[union-attr]
    try:
        written = write_document(text, cfg.output_path)
    except OSError as e:
        logger.error(f"output: {e}")
        return EXIT_FATAL
    if written is not None:
        logger.info(f"wrote {written}")

    log_summary(render_summary_line(outcome.stats)[len("SUMMARY "):])  # type: ignore[union-attr]
    return EXIT_SUCCESS

