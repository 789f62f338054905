from __future__ import annotations

import logging
from typing import Any

from openpyxl.cell.cell import ERROR_CODES
from openpyxl.cell.rich_text import CellRichText, TextBlock
from openpyxl.worksheet.formula import ArrayFormula, DataTableFormula

from ..models.cell import Cell, StyleInfo

"""Cell normalizer: openpyxl cell -> Cell.

Workbooks are opened with ``data_only=True`` so a formula cell already holds
its cached result; error results ("#DIV/0!", "#N/A", ...) become None.
Resolution order:

1. formula error result / error cell -> None
2. formula without a cached result (workbook opened with formulas) -> None,
   formulas are never evaluated here
3. hyperlink -> display text, else link target
4. rich text -> concatenated run texts
5. date / datetime / time -> unchanged
6. anything else -> unchanged (best-effort pass-through, never raises)
"""

__all__ = [
    "STYLE_ATTRIBUTES",
    "extract_style",
    "normalize_cell",
    "resolve_value",
]

logger = logging.getLogger(__name__)

STYLE_ATTRIBUTES = ("border", "font", "fill", "alignment", "number_format")


def _is_error(value: Any, data_type: str | None) -> bool:
    if data_type == "e":
        return True
    return isinstance(value, str) and value in ERROR_CODES


def _hyperlink_text(value: Any, link: Any) -> Any:
    if isinstance(value, CellRichText):
        value = _rich_text(value)
    if value is not None and value != "":
        return value
    return getattr(link, "display", None) or getattr(link, "target", None) or getattr(link, "location", None)


def _rich_text(value: CellRichText) -> str:
    return "".join(run.text if isinstance(run, TextBlock) else str(run) for run in value)


def resolve_value(cell: Any) -> Any:
    """Resolve a workbook cell (or bare value) to the scalar it displays."""
    value = getattr(cell, "value", cell)
    data_type = getattr(cell, "data_type", None)

    if _is_error(value, data_type):
        return None
    if data_type == "f" or isinstance(value, (ArrayFormula, DataTableFormula)):
        logger.debug("formula without cached result at %s", getattr(cell, "coordinate", "?"))
        return None

    link = getattr(cell, "hyperlink", None)
    if link is not None:
        return _hyperlink_text(value, link)

    if isinstance(value, CellRichText):
        return _rich_text(value)
    # dates, numbers, strings, booleans and unknown shapes pass through
    return value


def extract_style(cell: Any) -> StyleInfo | None:
    """Collect the cell's style objects as an opaque descriptor."""
    if not getattr(cell, "has_style", False):
        return None
    return {name: getattr(cell, name, None) for name in STYLE_ATTRIBUTES}


def normalize_cell(cell: Any, style: StyleInfo | None = None) -> Cell:
    """Build the canonical Cell for one workbook cell."""
    return Cell(value=resolve_value(cell), style=style)
