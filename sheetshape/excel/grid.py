from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Any

from ..models.cell import EMPTY_CELL, Cell, Grid
from .cells import normalize_cell

"""Grid builder.

Turns the ``(row_index, col_index, raw_cell)`` triples of a worksheet's used
range into a dense rectangular Grid:

1. accumulate cells per row (through the cell normalizer)
2. pad missing rows and missing cells with empty cells so that every row has
   the width of the widest row
3. drop trailing rows that are entirely empty

A worksheet without any content yields the one-cell placeholder grid
``[[Cell("A")]]`` instead of an empty grid. ``is_placeholder`` recognizes it.
"""

__all__ = [
    "PLACEHOLDER_CELL",
    "build_grid",
    "column_letter",
    "is_empty_row",
    "is_placeholder",
    "trim_trailing_empty_rows",
    "transpose",
]

logger = logging.getLogger(__name__)

PLACEHOLDER_CELL = Cell(value="A")


def column_letter(index: int) -> str:
    """Spreadsheet column name for a 0-based index (0 -> A, 26 -> AA)."""
    if index < 0:
        raise ValueError(f"column index must be >= 0: {index}")
    letters = ""
    while index >= 0:
        index, remainder = divmod(index, 26)
        letters = chr(65 + remainder) + letters
        index -= 1
    return letters


def is_empty_row(row: list[Cell]) -> bool:
    return all(cell.is_empty for cell in row)


def trim_trailing_empty_rows(grid: Grid) -> Grid:
    """Return ``grid`` without its trailing fully-empty rows."""
    end = len(grid)
    while end > 0 and is_empty_row(grid[end - 1]):
        end -= 1
    return grid[:end]


def transpose(grid: Grid) -> Grid:
    """Row i, col j -> row j, col i. Expects a rectangular grid."""
    if not grid:
        return []
    return [list(column) for column in zip(*grid)]


def is_placeholder(grid: Grid) -> bool:
    """True for the grid returned for an empty worksheet."""
    return len(grid) == 1 and len(grid[0]) == 1 and grid[0][0] is PLACEHOLDER_CELL


def build_grid(
    entries: Iterable[tuple[int, int, Any]],
    normalize: Callable[[Any], Cell] = normalize_cell,
) -> Grid:
    """Build a rectangular, trimmed Grid from 0-based cell triples.

    Parameters
    ----------
    entries: ``(row_index, col_index, raw_cell)`` covering the used range
    normalize: raw cell -> Cell (defaults to the openpyxl cell normalizer)
    """
    rows: dict[int, dict[int, Cell]] = {}
    for row_index, col_index, raw in entries:
        rows.setdefault(row_index, {})[col_index] = normalize(raw)

    if not rows:
        return [[PLACEHOLDER_CELL]]

    height = max(rows) + 1
    width = max((max(cells) + 1 for cells in rows.values() if cells), default=0)
    grid: Grid = []
    for r in range(height):
        cells = rows.get(r, {})
        grid.append([cells.get(c, EMPTY_CELL) for c in range(width)])

    trimmed = trim_trailing_empty_rows(grid)
    if not trimmed or width == 0:
        logger.debug("worksheet has no content -> placeholder grid")
        return [[PLACEHOLDER_CELL]]
    if len(trimmed) != len(grid):
        logger.debug("trimmed %d trailing empty rows", len(grid) - len(trimmed))
    return trimmed
