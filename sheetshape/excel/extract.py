from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Any

from ..models.cell import Cell, Grid
from ..models.config_models import DEFAULT_HEURISTICS, Heuristics
from ..models.sheet_result import ColumnDescriptor, ColumnType, SheetResult
from .cells import normalize_cell
from .column_types import describe_columns
from .grid import build_grid, is_placeholder
from .header import find_header_row_by_density
from .orientation import orient_grid

"""Sheet extraction: raw worksheet cells -> SheetResult.

Pipeline: grid builder -> orientation detector -> header row locator
(density variant) -> column naming and typing. Pure functions only: the
workbook is read elsewhere (sheetshape.excel.reader) and nothing here keeps
state between calls.
"""

__all__ = [
    "extract_grid",
    "extract_sheet",
]

logger = logging.getLogger(__name__)


def _empty_result(name: str, grid: Grid) -> SheetResult:
    return SheetResult(
        name=name,
        data=grid,
        columns=[ColumnDescriptor(name="A", index=0, type=ColumnType.TEXT)],
        row_count=0,
    )


def extract_grid(name: str, grid: Grid, *, heuristics: Heuristics = DEFAULT_HEURISTICS) -> SheetResult:
    """Orient, locate the header and type the columns of an already built grid."""
    if is_placeholder(grid):
        logger.debug("sheet=%s is empty", name)
        return _empty_result(name, grid)

    oriented, transposed = orient_grid(grid, heuristics=heuristics)
    header_row = find_header_row_by_density(oriented, heuristics=heuristics)
    columns = describe_columns(oriented, header_row, heuristics=heuristics)
    logger.debug(
        "sheet=%s rows=%d cols=%d header_row=%d transposed=%s",
        name,
        len(oriented),
        len(columns),
        header_row,
        transposed,
    )
    return SheetResult(
        name=name,
        data=oriented,
        columns=columns,
        row_count=len(oriented),
        header_row=header_row,
        transposed=transposed,
    )


def extract_sheet(
    name: str,
    entries: Iterable[tuple[int, int, Any]],
    *,
    normalize: Callable[[Any], Cell] = normalize_cell,
    heuristics: Heuristics = DEFAULT_HEURISTICS,
) -> SheetResult:
    """Build the grid from raw ``(row, col, cell)`` triples and extract it."""
    grid = build_grid(entries, normalize=normalize)
    return extract_grid(name, grid, heuristics=heuristics)
