from __future__ import annotations

import hashlib
import logging
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from ..db.row_store import RowStoreError, append_rows, ensure_schema, upsert_file
from ..excel.cells import extract_style, normalize_cell
from ..excel.export import export_csv
from ..excel.extract import extract_sheet
from ..excel.reader import WORKBOOK_SUFFIXES, WorkbookReadError, read_workbook
from ..logging.error_log import ErrorLogBuffer
from ..models.config_models import AppConfig
from ..models.excel_file import ExcelFile, FileStatus
from ..models.processing_result import BatchStatsAccumulator, FileStat, ProcessingResult
from ..models.sheet_result import SheetResult
from .progress import ProgressTracker, SheetProgressIndicator

"""Folder processing.

process_all() scans the source directory and runs every workbook through
extraction, optional CSV export and persistence of its primary sheet.
Each workbook is handled in its own transaction: a failure rolls back that
workbook only, is written to the error log and processing moves on.

With ``cursor=None`` the run is in mock mode: nothing is persisted, rows are
only counted.
"""

__all__ = [
    "ProcessingError",
    "file_hash",
    "process_all",
    "process_file",
    "scan_workbooks",
]

logger = logging.getLogger(__name__)

_HASH_CHUNK = 1024 * 1024


class ProcessingError(Exception):
    """Fatal folder-level error (missing directory, schema creation failure)."""


def scan_workbooks(directory: Path) -> list[Path]:
    """List workbooks in ``directory`` (non-recursive), sorted by name.

    Dotfiles and Office lock files (``~$book.xlsx``) are ignored.

    Raises:
        ProcessingError: If the directory doesn't exist or can't be read
    """
    if not directory.exists():
        raise ProcessingError(f"Directory not found: {directory}")
    if not directory.is_dir():
        raise ProcessingError(f"Path is not a directory: {directory}")
    try:
        found = [
            p for p in directory.iterdir()
            if p.is_file()
            and p.suffix.lower() in WORKBOOK_SUFFIXES
            and not p.name.startswith((".", "~$"))
        ]
    except OSError as e:
        raise ProcessingError(f"Error reading directory {directory}: {e}") from e
    return sorted(found, key=lambda p: p.name.lower())


def file_hash(path: Path) -> str:
    """MD5 hex digest of the file bytes."""
    digest = hashlib.md5()
    with path.open("rb") as f:
        for chunk in iter(lambda: f.read(_HASH_CHUNK), b""):
            digest.update(chunk)
    return digest.hexdigest()


def process_all(config: AppConfig, cursor: Any = None) -> ProcessingResult:
    """Process all workbooks of ``config.source_directory``.

    Args:
        config: Run configuration
        cursor: Database cursor (None = mock mode)

    Returns:
        ProcessingResult with aggregated counters and per-file stats

    Raises:
        ProcessingError: For fatal errors that prevent processing
    """
    start_time = datetime.now(UTC)
    error_log = ErrorLogBuffer(config.logs_directory)

    file_paths = scan_workbooks(Path(config.source_directory))
    if cursor is not None and file_paths:
        _prepare_schema(cursor)

    file_stats: list[FileStat] = []
    success_count = 0
    failed_count = 0
    total_rows = 0
    total_sheets = 0
    empty_sheets = 0
    transposed_sheets = 0

    with ProgressTracker(len(file_paths)) as progress:
        for file_path in file_paths:
            progress.start_file(file_path)
            batch_stats = BatchStatsAccumulator()
            result = process_file(file_path, config, cursor=cursor, error_log=error_log, batch_stats=batch_stats)

            if result.status == FileStatus.SUCCESS:
                success_count += 1
                total_rows += result.total_rows
            else:
                failed_count += 1
            total_sheets += len(result.sheets)
            empty_sheets += result.empty_sheets
            transposed_sheets += result.transposed_sheets

            progress.set_postfix(success=success_count, failed=failed_count, rows=total_rows)
            progress.finish_file(success=(result.status == FileStatus.SUCCESS))

            elapsed = 0.0
            if result.start_time is not None and result.end_time is not None:
                elapsed = (result.end_time - result.start_time).total_seconds()
            batches, avg_batch, p95_batch = batch_stats.get_stats()
            file_stats.append(
                FileStat(
                    file_name=file_path.name,
                    status=result.status.value,
                    rows=result.total_rows,
                    sheets=len(result.sheets),
                    elapsed_seconds=elapsed,
                    total_batches=batches,
                    avg_batch_seconds=avg_batch,
                    p95_batch_seconds=p95_batch,
                )
            )

    # Flush error log once per run
    log_path = None
    try:
        log_path = error_log.flush()
    except OSError as e:
        logger.warning(f"error log could not be written: {e}")
    if log_path is not None:
        logger.info(f"error log: {log_path}")

    end_time = datetime.now(UTC)
    elapsed_seconds = (end_time - start_time).total_seconds()
    throughput_rps = total_rows / elapsed_seconds if elapsed_seconds > 0 else 0.0

    return ProcessingResult(
        success_files=success_count,
        failed_files=failed_count,
        total_rows=total_rows,
        total_sheets=total_sheets,
        empty_sheets=empty_sheets,
        transposed_sheets=transposed_sheets,
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=elapsed_seconds,
        throughput_rows_per_sec=throughput_rps,
        file_stats=file_stats,
        error_log_path=str(log_path) if log_path is not None else None,
    )


def _prepare_schema(cursor: Any) -> None:
    try:
        cursor.execute("BEGIN")
        ensure_schema(cursor)
        cursor.execute("COMMIT")
    except Exception as e:
        try:
            cursor.execute("ROLLBACK")
        except Exception as rollback_e:
            logger.debug(f"rollback after schema failure failed: {rollback_e}")
        raise ProcessingError(f"cannot prepare database schema: {e}") from e


def _extract_sheets(
    file_path: Path,
    config: AppConfig,
    error_log: ErrorLogBuffer,
) -> list[SheetResult]:
    """Read the workbook and extract every sheet; a failing sheet is logged and skipped."""
    worksheets = read_workbook(file_path)

    def normalize(cell: Any):
        return normalize_cell(cell, style=extract_style(cell))

    sheets: list[SheetResult] = []
    indicator = SheetProgressIndicator(file_name=file_path.name, total_sheets=len(worksheets))
    for ws in worksheets:
        indicator.start_sheet(ws.name)
        try:
            sheet = extract_sheet(ws.name, ws.entries, normalize=normalize, heuristics=config.heuristics)
        except Exception as e:
            logger.error(f"file={file_path.name} sheet={ws.name} extraction failed: {e}")
            error_log.add(file_path.name, ws.name, -1, "SHEET_EXTRACTION_ERROR", str(e))
            indicator.finish_sheet(success=False)
            continue
        if sheet.transposed:
            logger.info(f"file={file_path.name} sheet={sheet.name} transposed (attributes laid out as rows)")
        if sheet.is_empty:
            logger.info(f"file={file_path.name} sheet={sheet.name} is empty")
        indicator.finish_sheet(success=True, rows_processed=len(sheet.rows), transposed=sheet.transposed)
        sheets.append(sheet)
    return sheets


def _persist_primary(
    cursor: Any,
    file_path: Path,
    digest: str,
    sheet: SheetResult | None,
    batch_stats: BatchStatsAccumulator | None,
) -> tuple[int | None, int]:
    """Write the primary sheet's data rows; returns ``(file_id, rows)``. Caller owns the transaction."""
    rows = [[cell.value for cell in row] for row in sheet.rows] if sheet is not None else []
    columns = sheet.column_names if sheet is not None else []
    last_modified = datetime.fromtimestamp(file_path.stat().st_mtime, UTC)
    file_id = upsert_file(
        cursor,
        filename=file_path.name,
        filepath=str(file_path.resolve()),
        file_hash=digest,
        row_count=len(rows),
        last_modified=last_modified,
    )
    callback = (lambda m: batch_stats.add_batch_time(m.elapsed_seconds)) if batch_stats is not None else None
    inserted = append_rows(cursor, file_id, columns, rows, metrics_callback=callback)
    return file_id, inserted.inserted_rows


def process_file(
    file_path: Path,
    config: AppConfig,
    *,
    cursor: Any = None,
    error_log: ErrorLogBuffer | None = None,
    batch_stats: BatchStatsAccumulator | None = None,
) -> ExcelFile:
    """Extract one workbook, export it when configured and persist its primary sheet.

    A read failure or a database failure marks the file FAILED (the
    transaction is rolled back); export failures are only logged.
    """
    error_log = error_log if error_log is not None else ErrorLogBuffer(config.logs_directory)
    start_time = datetime.now(UTC)

    def failed(error: str, sheets: list[SheetResult] | None = None, digest: str | None = None) -> ExcelFile:
        return ExcelFile(
            path=file_path,
            name=file_path.name,
            sheets=sheets or [],
            file_hash=digest,
            start_time=start_time,
            end_time=datetime.now(UTC),
            status=FileStatus.FAILED,
            error=error,
        )

    try:
        digest = file_hash(file_path)
        sheets = _extract_sheets(file_path, config, error_log)
    except (OSError, WorkbookReadError) as e:
        logger.error(f"file={file_path.name} read failed: {e}")
        error_log.add(file_path.name, "", -1, "READ_ERROR", str(e))
        return failed(str(e))

    primary = sheets[0] if sheets else None

    if config.export_csv:
        try:
            export_csv(sheets, file_path)
        except (OSError, ValueError) as e:
            logger.warning(f"file={file_path.name} csv export failed: {e}")
            error_log.add(file_path.name, "", -1, "EXPORT_ERROR", str(e))

    if cursor is None:
        rows = len(primary.rows) if primary is not None else 0
        logger.debug(f"file={file_path.name} mock mode, {rows} rows counted")
        return ExcelFile(
            path=file_path,
            name=file_path.name,
            sheets=sheets,
            file_hash=digest,
            start_time=start_time,
            end_time=datetime.now(UTC),
            status=FileStatus.SUCCESS,
            total_rows=rows,
        )

    try:
        cursor.execute("BEGIN")
    except Exception as e:
        error_log.add(file_path.name, "", -1, "TRANSACTION_BEGIN_ERROR", str(e))
        return failed(f"Failed to begin transaction: {e}", sheets, digest)

    try:
        file_id, rows = _persist_primary(cursor, file_path, digest, primary, batch_stats)
    except (RowStoreError, OSError) as e:
        _rollback(cursor, file_path, error_log)
        sheet_name = primary.name if primary is not None else ""
        logger.error(f"file={file_path.name} insert failed, transaction rolled back: {e}")
        error_log.add(file_path.name, sheet_name, -1, "DATABASE_INSERT_ERROR", str(e))
        return failed(f"insert failed: {e}", sheets, digest)

    try:
        cursor.execute("COMMIT")
    except Exception as e:
        _rollback(cursor, file_path, error_log)
        error_log.add(file_path.name, "", -1, "TRANSACTION_COMMIT_ERROR", str(e))
        return failed(f"commit failed: {e}", sheets, digest)

    logger.info(f"file={file_path.name} sheets={len(sheets)} rows={rows} id={file_id}")
    return ExcelFile(
        path=file_path,
        name=file_path.name,
        sheets=sheets,
        file_hash=digest,
        start_time=start_time,
        end_time=datetime.now(UTC),
        status=FileStatus.SUCCESS,
        total_rows=rows,
        file_id=file_id,
    )


def _rollback(cursor: Any, file_path: Path, error_log: ErrorLogBuffer) -> None:
    try:
        cursor.execute("ROLLBACK")
    except Exception as e:
        error_log.add(file_path.name, "", -1, "TRANSACTION_ROLLBACK_ERROR", str(e))
