from __future__ import annotations

import logging
from collections.abc import Sequence

from ..models.cell import Cell, Grid
from ..models.config_models import DEFAULT_HEURISTICS, Heuristics
from .grid import transpose
from .values import is_blank, is_numeric

"""Orientation detector (consistency scoring).

A well-formed table keeps one primitive type per column. A vector (row or
column) is *consistent* when, ignoring its first element (the label) and its
empty cells, all remaining values fall in the same category: numeric or
non-numeric. When rows are clearly more consistent than columns the sheet was
laid out attribute-per-row and gets transposed.
"""

__all__ = [
    "consistency_score",
    "is_consistent",
    "orient_grid",
    "should_transpose",
]

logger = logging.getLogger(__name__)


def is_consistent(vector: Sequence[Cell]) -> bool:
    categories = {is_numeric(cell.value) for cell in vector[1:] if not is_blank(cell.value)}
    return len(categories) <= 1


def consistency_score(vectors: Sequence[Sequence[Cell]]) -> float:
    """Fraction of vectors that are internally consistent."""
    if not vectors:
        return 0.0
    return sum(1 for v in vectors if is_consistent(v)) / len(vectors)


def should_transpose(grid: Grid, *, heuristics: Heuristics = DEFAULT_HEURISTICS) -> bool:
    """Decide whether the grid holds its attributes in rows.

    Grids with fewer than 2 rows or 2 columns are never transposed.
    """
    if len(grid) < 2 or len(grid[0]) < 2:
        return False
    col_score = consistency_score(transpose(grid))
    row_score = consistency_score(grid)
    if row_score > col_score + heuristics.transpose_margin:
        logger.debug(
            "rows more consistent than columns (row=%.2f col=%.2f) -> transpose",
            row_score,
            col_score,
        )
        return True
    return False


def orient_grid(grid: Grid, *, heuristics: Heuristics = DEFAULT_HEURISTICS) -> tuple[Grid, bool]:
    """Return the grid in column-per-attribute orientation and whether it was flipped."""
    if should_transpose(grid, heuristics=heuristics):
        return transpose(grid), True
    return grid, False
