from __future__ import annotations

import math
import time
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from datetime import date, datetime, time as dtime
from decimal import Decimal
from typing import Any

from psycopg2.extras import Json, execute_values

"""Flat append-only row store (PostgreSQL).

Two tables: ``sheet_files`` (one row per imported workbook, keyed by path)
and ``sheet_rows`` (one JSONB document per data row of the primary sheet).
Re-importing a path replaces its rows; there is no versioning.

Every function takes a DB-API cursor and leaves transaction control to the
caller (the orchestrator wraps each file in BEGIN/COMMIT/ROLLBACK).
"""

__all__ = [
    "BatchMetrics",
    "InsertResult",
    "RowStoreError",
    "SCHEMA_SQL",
    "append_rows",
    "ensure_schema",
    "json_safe",
    "upsert_file",
]

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS sheet_files (
    id SERIAL PRIMARY KEY,
    filename TEXT NOT NULL,
    filepath TEXT NOT NULL UNIQUE,
    file_hash TEXT,
    row_count INTEGER NOT NULL DEFAULT 0,
    import_date TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
    last_modified TIMESTAMP,
    status TEXT NOT NULL DEFAULT 'active'
);
CREATE TABLE IF NOT EXISTS sheet_rows (
    id SERIAL PRIMARY KEY,
    file_id INTEGER NOT NULL REFERENCES sheet_files(id) ON DELETE CASCADE,
    row_index INTEGER NOT NULL,
    row_data JSONB NOT NULL
);
CREATE INDEX IF NOT EXISTS sheet_rows_file_id_idx ON sheet_rows (file_id);
"""


class RowStoreError(Exception):
    pass


@dataclass(frozen=True)
class BatchMetrics:
    """Timing of a single execute_values call."""
    batch_size: int
    elapsed_seconds: float
    start_time: float
    end_time: float


@dataclass(frozen=True)
class InsertResult:
    inserted_rows: int
    file_id: int | None = None


def json_safe(value: Any) -> Any:
    """Scalar -> JSON-serializable value (dates as ISO-8601, NaN/inf as null)."""
    if isinstance(value, (datetime, date, dtime)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    return str(value)


def ensure_schema(cursor: Any) -> None:
    try:
        cursor.execute(SCHEMA_SQL)
    except Exception as e:
        raise RowStoreError(f"schema creation failed: {e}") from e


def upsert_file(
    cursor: Any,
    *,
    filename: str,
    filepath: str,
    file_hash: str,
    row_count: int,
    last_modified: datetime | None = None,
) -> int:
    """Register ``filepath`` and return its id.

    An already known path keeps its id; its previous rows are deleted and
    hash, row count and import date are refreshed.
    """
    try:
        cursor.execute("SELECT id FROM sheet_files WHERE filepath = %s", (filepath,))
        found = cursor.fetchone()
        if found is not None:
            file_id = found[0]
            cursor.execute("DELETE FROM sheet_rows WHERE file_id = %s", (file_id,))
            cursor.execute(
                "UPDATE sheet_files SET filename = %s, file_hash = %s, row_count = %s, "
                "last_modified = %s, import_date = CURRENT_TIMESTAMP, status = 'active' WHERE id = %s",
                (filename, file_hash, row_count, last_modified, file_id),
            )
            return file_id
        cursor.execute(
            "INSERT INTO sheet_files (filename, filepath, file_hash, row_count, last_modified) "
            "VALUES (%s, %s, %s, %s, %s) RETURNING id",
            (filename, filepath, file_hash, row_count, last_modified),
        )
        return cursor.fetchone()[0]
    except RowStoreError:
        raise
    except Exception as e:
        raise RowStoreError(f"file registration failed for {filename}: {e}") from e


def append_rows(
    cursor: Any,
    file_id: int,
    columns: Sequence[str],
    rows: Iterable[Sequence[Any]],
    page_size: int = 1000,
    metrics_callback: Callable[[BatchMetrics], None] | None = None,
) -> InsertResult:
    """Insert every row as a ``{column: value}`` JSONB document.

    Rows are sent in pages of ``page_size``, one execute_values call each.
    ``metrics_callback`` receives one BatchMetrics per page, including the
    page that failed; it is not invoked when ``rows`` is empty.
    """
    values = []
    for row_index, row in enumerate(rows):
        document = {name: json_safe(row[i] if i < len(row) else None) for i, name in enumerate(columns)}
        values.append((file_id, row_index, Json(document)))

    for offset in range(0, len(values), page_size):
        page = values[offset:offset + page_size]
        start_time = time.time()
        try:
            execute_values(
                cursor,
                "INSERT INTO sheet_rows (file_id, row_index, row_data) VALUES %s",
                page,
                page_size=page_size,
            )
        except Exception as e:
            raise RowStoreError(str(e)) from e
        finally:
            end_time = time.time()
            if metrics_callback is not None:
                metrics_callback(
                    BatchMetrics(
                        batch_size=len(page),
                        elapsed_seconds=end_time - start_time,
                        start_time=start_time,
                        end_time=end_time,
                    )
                )
    return InsertResult(inserted_rows=len(values), file_id=file_id)
