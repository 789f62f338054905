from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Any, Union

"""Cell and Grid domain types.

A Cell is the canonical ``{value, style}`` pair produced by the cell normalizer.
Its value is always a plain scalar: formula results, hyperlinks and rich text
are resolved to what the spreadsheet shows before a Cell is created.

A Grid is a rectangular list of rows of Cells. Every row has the same length.
"""

__all__ = [
    "Cell",
    "EMPTY_CELL",
    "Grid",
    "Scalar",
    "StyleInfo",
]

Scalar = Union[int, float, str, bool, date, datetime, time, None]

# Opaque style descriptor handed through from the workbook reader
# (border / font / fill / alignment / number_format). Never interpreted here.
StyleInfo = dict[str, Any]


@dataclass(frozen=True)
class Cell:
    """One normalized spreadsheet cell."""
    value: Scalar = None
    style: StyleInfo | None = None

    @property
    def is_empty(self) -> bool:
        """True for None and blank/whitespace-only strings."""
        if self.value is None:
            return True
        return isinstance(self.value, str) and not self.value.strip()


EMPTY_CELL = Cell()

Grid = list[list[Cell]]
