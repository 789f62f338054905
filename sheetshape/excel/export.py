from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

import pandas as pd

from ..models.sheet_result import SheetResult

"""CSV export of extracted sheets.

The primary (first) sheet is written as ``<workbook>.csv`` next to the source
file, every other sheet as ``<workbook>-<sheet>.csv``. Empty sheets are
skipped. The column names form the CSV header, followed by the data rows of
the oriented grid (title rows above the header are left out); dates use ``YYYY-MM-DD HH:MM:SS``.
"""

__all__ = [
    "csv_path_for",
    "export_csv",
]

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def csv_path_for(source: Path, sheet_name: str, primary: bool) -> Path:
    if primary:
        return source.with_suffix(".csv")
    return source.with_name(f"{source.stem}-{sheet_name}.csv")


def export_csv(sheets: Sequence[SheetResult], source: Path) -> list[Path]:
    """Write one CSV per non-empty sheet and return the written paths."""
    written: list[Path] = []
    for position, sheet in enumerate(sheets):
        if sheet.is_empty:
            continue
        target = csv_path_for(source, sheet.name, primary=(position == 0))
        frame = pd.DataFrame([[cell.value for cell in row] for row in sheet.rows], columns=sheet.column_names)
        frame.to_csv(target, index=False, encoding="utf-8", date_format=DATE_FORMAT)
        logger.info(f"csv export: {target.name}")
        written.append(target)
    return written
