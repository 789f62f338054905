from __future__ import annotations

import argparse
import os
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import psycopg2
from dotenv import load_dotenv

from sheetshape.config.loader import ConfigError, load_config
from sheetshape.excel.reader import WorkbookReadError, extract_workbook
from sheetshape.excel.values import cell_text
from sheetshape.logging.error_log import ErrorLogBuffer
from sheetshape.logging.init import log_summary, set_debug, setup_logging
from sheetshape.models.config_models import AppConfig
from sheetshape.models.metric_block import AggregationStatus
from sheetshape.services.charts import numeric_column_summaries
from sheetshape.services.metrics import aggregate_metrics
from sheetshape.services.orchestrator import ProcessingError, process_all, scan_workbooks
from sheetshape.services.summary import render_summary_line

"""CLI entrypoint.

python -m sheetshape.cli [--config PATH] [--debug] [--inspect-data] [--charts]

Default run: extract every workbook of the configured folder, persist the
primary sheets (PostgreSQL, or mock mode without a connection) and print
the SUMMARY line. --inspect-data and --charts only print and exit.
"""

__all__ = [
    "EXIT_FATAL",
    "EXIT_PARTIAL_FAILURE",
    "EXIT_SUCCESS_ALL",
    "main",
]

EXIT_SUCCESS_ALL = 0
EXIT_PARTIAL_FAILURE = 2
EXIT_FATAL = 1

DEFAULT_CONFIG_PATH = Path("config/sheetshape.yml")
SAMPLE_ROWS = 3


def _resolve_dsn(cfg: AppConfig) -> str:
    """Connection string; environment variables (incl. .env) win over the config file."""
    db_cfg = cfg.database
    dsn = os.getenv("DATABASE_URL") or os.getenv("PGDSN") or db_cfg.dsn
    if dsn:
        return dsn
    host = os.getenv("PGHOST", db_cfg.host or "localhost")
    port = os.getenv("PGPORT", str(db_cfg.port) if db_cfg.port else "5432")
    user = os.getenv("PGUSER", db_cfg.user or "postgres")
    password = os.getenv("PGPASSWORD", db_cfg.password or "")
    database = os.getenv("PGDATABASE", db_cfg.database or "postgres")
    dsn = f"host={host} port={port} user={user} dbname={database}"
    if password:
        dsn += f" password={password}"
    return dsn


@contextmanager
def _db_connection(cfg: AppConfig) -> Iterator[Any]:  # pragma: no cover (needs a live server)
    """psycopg2 connection + cursor; the orchestrator issues BEGIN/COMMIT per file."""
    conn = psycopg2.connect(_resolve_dsn(cfg))
    conn.autocommit = False
    cur = conn.cursor()
    try:
        yield cur
        if not conn.closed:
            conn.commit()
    finally:
        cur.close()
        conn.close()


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env with python-dotenv; its values take precedence over the environment."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="sheetshape", description="Spreadsheet structure inference and import")
    p.add_argument("--config", type=Path, default=DEFAULT_CONFIG_PATH, help="YAML config path")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--inspect-data", action="store_true", help="Print detected headers, types & first rows then exit")
    p.add_argument("--charts", action="store_true", help="Print metric blocks per sheet then exit")
    return p.parse_args(argv)


def _inspect_data(cfg: AppConfig) -> int:
    try:
        files = scan_workbooks(Path(cfg.source_directory))
    except ProcessingError as e:
        print(f"inspect: {e}")
        return EXIT_FATAL
    if not files:
        print("inspect: no workbooks")
        return EXIT_SUCCESS_ALL
    for f in files:
        print(f"FILE: {f.name}")
        try:
            sheets = extract_workbook(f, include_styles=False, heuristics=cfg.heuristics)
        except WorkbookReadError as e:
            print(f"  read_error: {e}")
            continue
        for sheet in sheets:
            if sheet.is_empty:
                print(f"  SHEET: {sheet.name} (empty)")
                continue
            flags = " transposed" if sheet.transposed else ""
            print(f"  SHEET: {sheet.name} header_row={sheet.header_row} rows={len(sheet.rows)}{flags}")
            print("    columns=" + ", ".join(f"{c.name}:{c.type.value}" for c in sheet.columns))
            for row in sheet.rows[:SAMPLE_ROWS]:
                print("    " + " | ".join(cell_text(c.value) for c in row))
    return EXIT_SUCCESS_ALL


def _print_charts(cfg: AppConfig) -> int:
    try:
        files = scan_workbooks(Path(cfg.source_directory))
    except ProcessingError as e:
        print(f"charts: {e}")
        return EXIT_FATAL
    error_log = ErrorLogBuffer(cfg.logs_directory)
    for f in files:
        print(f"FILE: {f.name}")
        try:
            sheets = extract_workbook(f, include_styles=False, heuristics=cfg.heuristics)
        except WorkbookReadError as e:
            print(f"  read_error: {e}")
            error_log.add(f.name, "", -1, "READ_ERROR", str(e))
            continue
        for sheet in sheets:
            if sheet.is_empty:
                print(f"  SHEET: {sheet.name} no data")
                continue
            report = aggregate_metrics(sheet, heuristics=cfg.heuristics, keywords=cfg.keywords)
            if report.status is AggregationStatus.COLUMNS_NOT_FOUND:
                detected = ", ".join(h for h in report.headers if h) or "-"
                print(f"  SHEET: {sheet.name} metric columns not found (detected headers: {detected})")
                error_log.add(f.name, sheet.name, -1, "COLUMNS_NOT_FOUND", f"headers: {detected}")
            elif report.status is AggregationStatus.NO_VALID_ROWS:
                print(f"  SHEET: {sheet.name} no valid rows")
                error_log.add(f.name, sheet.name, -1, "NO_VALID_ROWS", "metric columns found but no data rows")
            else:
                print(f"  SHEET: {sheet.name} blocks={len(report.blocks)} source={report.source}")
                for block in report.blocks:
                    print(
                        f"    {block.label}: actual={block.actual_value:g} "
                        f"target={block.target_value:g} percent={block.percent:.1f}"
                    )
            for summary in numeric_column_summaries(sheet, heuristics=cfg.heuristics):
                stats = summary.stats()
                print(
                    f"    column {summary.header}: sum={stats['sum']:g} avg={stats['avg']:.2f} "
                    f"min={stats['min']:g} max={stats['max']:g} count={stats['count']}"
                )
    error_log.flush()
    return EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # Only an explicit None reads sys.argv (an empty list must stay empty under pytest)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    _load_env_file(Path('.env'), override=True)

    try:
        cfg = load_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    directory = Path(cfg.source_directory)
    if not directory.exists():
        logger.error(f"directory not found: {directory}")
        return EXIT_FATAL

    if args.debug:
        set_debug(logger)
        logger.debug("debug mode enabled")

    logger.info(f"Processing files from: {directory}")

    if args.inspect_data:
        return _inspect_data(cfg)
    if args.charts:
        return _print_charts(cfg)

    # DISABLE_DB_CONNECT=1 forces mock mode (tests, dry runs)
    db_mode = "mock"
    if os.getenv("DISABLE_DB_CONNECT") == "1":
        logger.debug("DB connect disabled via DISABLE_DB_CONNECT=1 -> mock mode")
        try:
            result = process_all(cfg, cursor=None)
        except ProcessingError as e:
            logger.error(f"processing(mock): {e}")
            return EXIT_FATAL
    else:
        try:
            with _db_connection(cfg) as cur:
                db_mode = "live"
                result = process_all(cfg, cursor=cur)
        except ProcessingError as e:
            logger.error(f"processing: {e}")
            return EXIT_FATAL
        except psycopg2.Error as db_e:
            logger.info(f"DB connection failed -> fallback to mock mode: {db_e}")
            db_mode = "mock"
            try:
                result = process_all(cfg, cursor=None)
            except ProcessingError as e:
                logger.error(f"processing(mock): {e}")
                return EXIT_FATAL

    logger.info(f"mode={db_mode} total_rows={result.total_rows}")

    summary_line = render_summary_line(result.total_files, result)
    # log_summary adds its own "SUMMARY " label
    log_summary(summary_line[len("SUMMARY "):])

    if result.failed_files > 0:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
