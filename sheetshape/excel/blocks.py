from __future__ import annotations

import logging
import re
from collections.abc import Sequence

from ..models.cell import Cell, Grid
from ..models.config_models import FRENCH_KEYWORDS, KeywordSet
from ..models.metric_block import MetricBlock
from .values import cell_text, parse_number

"""Block extractor for report-style sheets.

Store reports often repeat a small block per store instead of one table::

    GRIM PASSION LATTES
    CA REALISE    4224   8739  ...
    OBJECTIF      5056  11712  ...

A row whose text contains an "actual" marker opens a block. The label is the
first cell of the row above; the actual value is the first number after the
label cell; the target is the first number of the following row when that row
carries a "target" marker. Taking the first number (not the largest) keeps
running totals further right out of the result.
"""

__all__ = [
    "blocks_to_table",
    "extract_blocks",
    "row_text",
]

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")


def row_text(row: Sequence[Cell]) -> str:
    """Lowercased, whitespace-collapsed concatenation of the row's cell texts."""
    joined = " ".join(cell_text(cell.value) for cell in row)
    return _WHITESPACE.sub(" ", joined).strip().lower()


def _contains_marker(text: str, markers: Sequence[str]) -> bool:
    return any(marker in text for marker in markers)


def _first_number(row: Sequence[Cell]) -> float:
    for cell in row[1:]:
        number = parse_number(cell.value)
        if number is not None:
            return number
    return 0.0


def extract_blocks(grid: Grid, *, keywords: KeywordSet = FRENCH_KEYWORDS) -> list[MetricBlock]:
    """Scan every row for label / actual / target blocks, in sheet order."""
    blocks: list[MetricBlock] = []
    for index, row in enumerate(grid):
        if not _contains_marker(row_text(row), keywords.actual_row_markers):
            continue

        label = ""
        if index > 0 and grid[index - 1]:
            label = cell_text(grid[index - 1][0].value)
        if not label:
            label = f"{keywords.placeholder_label} {len(blocks) + 1}"

        actual = _first_number(row)
        target = 0.0
        if index + 1 < len(grid):
            next_row = grid[index + 1]
            if _contains_marker(row_text(next_row), keywords.target_row_markers):
                target = _first_number(next_row)

        if actual == 0 and target == 0:
            logger.debug("block '%s' at row %d has no values, skipped", label, index)
            continue
        blocks.append(MetricBlock.from_values(label, actual, target))

    logger.debug("report blocks found: %d", len(blocks))
    return blocks


def blocks_to_table(blocks: Sequence[MetricBlock], *, keywords: KeywordSet = FRENCH_KEYWORDS) -> Grid:
    """Synthesize ``[[Name, Actual, Target], ...]`` so blocks re-enter the aggregator."""
    header = [Cell(value=text) for text in keywords.synthetic_headers]
    table: Grid = [header]
    for block in blocks:
        table.append([Cell(value=block.label), Cell(value=block.actual_value), Cell(value=block.target_value)])
    return table
