from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from zipfile import BadZipFile

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException
from openpyxl.worksheet.worksheet import Worksheet

from ..models.config_models import DEFAULT_HEURISTICS, Heuristics
from ..models.sheet_result import SheetResult
from .cells import extract_style, normalize_cell
from .extract import extract_sheet

"""Workbook reader (openpyxl).

The whole workbook is loaded into memory in one call with ``data_only=True``
(formula cells carry their cached results) and ``rich_text=True`` (rich text
arrives as CellRichText, resolved by the cell normalizer). Each worksheet is
exposed as the ``(row, col, cell)`` triples of its used range starting at A1,
empty cells included, with 0-based indices.

I/O problems and corrupt files surface as WorkbookReadError with the
original exception chained.
"""

__all__ = [
    "WORKBOOK_SUFFIXES",
    "WorkbookReadError",
    "WorksheetCells",
    "extract_workbook",
    "iter_sheet_cells",
    "read_workbook",
]

WORKBOOK_SUFFIXES = (".xlsx", ".xlsm")


class WorkbookReadError(Exception):
    """Raised when a workbook cannot be opened or parsed."""


@dataclass
class WorksheetCells:
    name: str
    entries: list[tuple[int, int, Any]]


def iter_sheet_cells(sheet: Worksheet) -> Iterator[tuple[int, int, Any]]:
    """Yield 0-based ``(row, col, cell)`` for the used range, empty cells included.

    Only the top-left cell of a merged range carries its value; openpyxl
    reads the rest of the range as empty.
    """
    for row in sheet.iter_rows():
        for cell in row:
            yield cell.row - 1, cell.column - 1, cell


def read_workbook(path: Path, target_sheets: Iterable[str] | None = None) -> list[WorksheetCells]:
    """Read every (or every targeted) worksheet of ``path`` in workbook order."""
    if not path.exists():
        raise WorkbookReadError(f"workbook not found: {path}")
    try:
        wb = load_workbook(filename=path, data_only=True, rich_text=True)
    except (OSError, BadZipFile, InvalidFileException, KeyError, ValueError) as e:
        raise WorkbookReadError(f"cannot read workbook {path.name}: {e}") from e

    wanted = set(target_sheets) if target_sheets is not None else None
    sheets: list[WorksheetCells] = []
    try:
        for ws in wb.worksheets:
            if wanted is not None and ws.title not in wanted:
                continue
            sheets.append(WorksheetCells(name=ws.title, entries=list(iter_sheet_cells(ws))))
    finally:
        wb.close()
    return sheets


def extract_workbook(
    path: Path,
    *,
    target_sheets: Iterable[str] | None = None,
    include_styles: bool = True,
    heuristics: Heuristics = DEFAULT_HEURISTICS,
) -> list[SheetResult]:
    """Read ``path`` and extract one SheetResult per worksheet.

    The first result is the primary sheet.
    """
    def normalize(cell: Any):
        return normalize_cell(cell, style=extract_style(cell) if include_styles else None)

    return [
        extract_sheet(ws.name, ws.entries, normalize=normalize, heuristics=heuristics)
        for ws in read_workbook(path, target_sheets=target_sheets)
    ]
