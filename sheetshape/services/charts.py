from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass, field

from ..excel.values import cell_text, parse_number
from ..models.config_models import DEFAULT_HEURISTICS, Heuristics
from ..models.metric_block import MetricBlock
from ..models.sheet_result import SheetResult

"""Chart-facing helpers: numeric column statistics, block filtering/sorting."""

__all__ = [
    "ColumnSummary",
    "SORT_KEYS",
    "filter_blocks",
    "numeric_column_summaries",
    "sort_blocks",
]

SORT_KEYS = ("name", "actual", "percent")

_LIGNE_HEADER = re.compile(r"^ligne\s*\d+", re.IGNORECASE)


@dataclass(frozen=True)
class ColumnSummary:
    index: int
    header: str
    values: list[float] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.values)

    @property
    def sum(self) -> float:
        return sum(self.values)

    @property
    def avg(self) -> float:
        return self.sum / self.count if self.values else 0.0

    @property
    def min(self) -> float:
        return min(self.values, default=0.0)

    @property
    def max(self) -> float:
        return max(self.values, default=0.0)

    def stats(self) -> dict[str, float]:
        return {"sum": self.sum, "avg": self.avg, "min": self.min, "max": self.max, "count": self.count}


def numeric_column_summaries(
    sheet: SheetResult,
    *,
    heuristics: Heuristics = DEFAULT_HEURISTICS,
) -> list[ColumnSummary]:
    """Summaries of the columns worth charting.

    A column qualifies when more than ``numeric_column_ratio`` of the data
    rows hold a number. Rows mentioning "ligne" in their first 20 cells and
    columns headed "Ligne N" are left out.
    """
    if sheet.is_empty:
        return []
    rows = [
        row for row in sheet.rows
        if not any("LIGNE" in cell_text(c.value).upper() for c in row[:20])
    ]
    header = sheet.header
    summaries: list[ColumnSummary] = []
    for column in sheet.columns:
        raw = cell_text(header[column.index].value) if column.index < len(header) else ""
        title = raw or column.name
        if _LIGNE_HEADER.match(title):
            continue
        values = [
            number
            for row in rows
            if column.index < len(row)
            for number in [parse_number(row[column.index].value)]
            if number is not None
        ]
        if values and len(values) > len(rows) * heuristics.numeric_column_ratio:
            summaries.append(ColumnSummary(index=column.index, header=title, values=values))
    return summaries


def filter_blocks(blocks: Sequence[MetricBlock], term: str) -> list[MetricBlock]:
    """Blocks whose label contains ``term`` (case-insensitive). An empty term keeps everything."""
    needle = (term or "").strip().lower()
    if not needle:
        return list(blocks)
    return [b for b in blocks if needle in b.label.lower()]


def sort_blocks(blocks: Sequence[MetricBlock], key: str = "name", descending: bool = False) -> list[MetricBlock]:
    if key == "name":
        return sorted(blocks, key=lambda b: b.label.lower(), reverse=descending)
    if key == "actual":
        return sorted(blocks, key=lambda b: b.actual_value, reverse=descending)
    if key == "percent":
        return sorted(blocks, key=lambda b: b.percent, reverse=descending)
    raise ValueError(f"unknown sort key: {key!r} (expected one of {', '.join(SORT_KEYS)})")
