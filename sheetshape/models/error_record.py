from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""ErrorRecord model for the JSON Lines error log.

``row`` is the 1-based worksheet row when known, -1 for file- or
sheet-level problems (unreadable workbook, metric columns not found,
failed transaction...).
"""

__all__ = [
    "ERROR_TYPES",
    "ErrorRecord",
]

ERROR_TYPES = (
    "READ_ERROR",
    "SHEET_EXTRACTION_ERROR",
    "COLUMNS_NOT_FOUND",
    "NO_VALID_ROWS",
    "EXPORT_ERROR",
    "DATABASE_INSERT_ERROR",
    "TRANSACTION_BEGIN_ERROR",
    "TRANSACTION_COMMIT_ERROR",
    "TRANSACTION_ROLLBACK_ERROR",
)


@dataclass(frozen=True)
class ErrorRecord:
    """Structured error record.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        file: Workbook filename
        sheet: Sheet name ("" when the whole file is concerned)
        row: 1-based row number, -1 when unknown
        error_type: One of ERROR_TYPES
        message: Human readable description
    """
    timestamp: str
    file: str
    sheet: str
    row: int
    error_type: str
    message: str

    @staticmethod
    def create(file: str, sheet: str, row: int, error_type: str, message: str) -> ErrorRecord:
        """Create a record stamped with the current UTC time."""
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(
            timestamp=ts,
            file=file,
            sheet=sheet,
            row=row,
            error_type=error_type,
            message=message,
        )

    def to_json_line(self) -> str:
        return json.dumps(asdict(self), ensure_ascii=False)
