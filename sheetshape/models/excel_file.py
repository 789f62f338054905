from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path

from .sheet_result import SheetResult

"""ExcelFile domain model and FileStatus enum.

ExcelFile is the processing context of one workbook: its extracted sheets
(primary sheet first), content hash and outcome.
"""

__all__ = [
    "ExcelFile",
    "FileStatus",
]


class FileStatus(Enum):
    """Processing lifecycle: pending -> processing -> (success | failed)."""
    PENDING = "pending"
    PROCESSING = "processing"
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True)
class ExcelFile:
    path: Path
    name: str
    sheets: list[SheetResult] = field(default_factory=list)
    file_hash: str | None = None  # MD5 of the file bytes
    start_time: datetime | None = None  # UTC
    end_time: datetime | None = None  # UTC
    status: FileStatus = FileStatus.PENDING
    total_rows: int = 0  # data rows of the primary sheet handed to the row store
    file_id: int | None = None  # sheet_files.id, None in mock mode
    error: str | None = None  # failure reason summary

    @property
    def primary_sheet(self) -> SheetResult | None:
        return self.sheets[0] if self.sheets else None

    @property
    def empty_sheets(self) -> int:
        return sum(1 for s in self.sheets if s.is_empty)

    @property
    def transposed_sheets(self) -> int:
        return sum(1 for s in self.sheets if s.transposed)
