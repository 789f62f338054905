from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .cell import Cell, Grid

"""SheetResult domain model.

A SheetResult is the unit exchanged with collaborators (persistence, CLI,
chart helpers): the oriented grid of one worksheet plus one ColumnDescriptor
per grid column.

The header row stays inside ``data`` (``header_row`` points at it), so
``row_count`` counts the header too. An empty worksheet is represented by a
one-cell placeholder grid with ``row_count == 0``.
"""

__all__ = [
    "ColumnDescriptor",
    "ColumnType",
    "SheetResult",
]


class ColumnType(str, Enum):
    """Inferred type of a column's data cells."""
    NUMBER = "number"
    DATE = "date"
    TEXT = "text"


@dataclass(frozen=True)
class ColumnDescriptor:
    name: str
    index: int  # 0-based position in the (possibly transposed) grid
    type: ColumnType = ColumnType.TEXT


@dataclass(frozen=True)
class SheetResult:
    """Normalized, header-aware, typed view of a single worksheet."""
    name: str
    data: Grid
    columns: list[ColumnDescriptor]
    row_count: int
    header_row: int = 0
    transposed: bool = False

    @property
    def is_empty(self) -> bool:
        return self.row_count == 0

    @property
    def header(self) -> list[Cell]:
        if self.is_empty or not self.data:
            return []
        return self.data[self.header_row]

    @property
    def rows(self) -> Grid:
        """Data rows following the header row."""
        if self.is_empty:
            return []
        return self.data[self.header_row + 1:]

    @property
    def column_names(self) -> list[str]:
        return [c.name for c in self.columns]

    def records(self) -> list[dict[str, object]]:
        """Data rows keyed by column name."""
        names = self.column_names
        return [
            {name: (row[i].value if i < len(row) else None) for i, name in enumerate(names)}
            for row in self.rows
        ]
