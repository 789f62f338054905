from __future__ import annotations

import logging
import re
from collections.abc import Sequence

from ..excel.blocks import blocks_to_table, extract_blocks
from ..excel.grid import transpose
from ..excel.header import find_header_row_by_score
from ..excel.values import cell_text, parse_number
from ..models.cell import Cell, Grid
from ..models.config_models import DEFAULT_HEURISTICS, FRENCH_KEYWORDS, Heuristics, KeywordSet
from ..models.metric_block import AggregationStatus, MetricBlock, MetricsReport
from ..models.sheet_result import SheetResult

"""Metric aggregator.

Finds the "actual" and "target" columns of a header + rows table by keyword,
turns every data row into a MetricBlock (percent of target) and reports
``columns-not-found`` or ``no-valid-rows`` instead of guessing.

``aggregate_metrics`` is the per-sheet entry point: it tries the sheet's own
header first and falls back to report-style block extraction when the metric
columns are missing. Transposed sheets are also scanned for blocks in their
pre-orientation layout.
"""

__all__ = [
    "aggregate_metrics",
    "aggregate_table",
    "chart_series",
    "find_column",
    "is_placeholder_label",
    "locate_metric_columns",
]

logger = logging.getLogger(__name__)

_PLACEHOLDER_LABEL = re.compile(r"ligne\s*\d+", re.IGNORECASE)


def is_placeholder_label(text: str) -> bool:
    """Synthetic "Ligne N" labels produced by some exports."""
    return bool(_PLACEHOLDER_LABEL.search(text))


def find_column(
    headers: Sequence[str],
    keywords: Sequence[str],
    *,
    exclude: Sequence[str] = (),
    skip_index: int = -1,
) -> int:
    """Index of the first header containing a keyword and none of ``exclude``; -1 if none."""
    for index, header in enumerate(headers):
        if index == skip_index:
            continue
        lowered = header.lower()
        if not any(k in lowered for k in keywords):
            continue
        if any(x in lowered for x in exclude):
            continue
        return index
    return -1


def locate_metric_columns(headers: Sequence[str], *, keywords: KeywordSet = FRENCH_KEYWORDS) -> tuple[int, int]:
    """Return ``(actual_index, target_index)``, -1 for a column that is not found."""
    actual = find_column(headers, keywords.actual, exclude=keywords.target_markers)
    target = find_column(headers, keywords.target, exclude=keywords.actual_markers)
    if actual != -1 and actual == target:
        target = find_column(headers, keywords.target, exclude=keywords.actual_markers, skip_index=actual)
    return actual, target


def _is_data_label(label: str, keywords: KeywordSet) -> bool:
    if not label or is_placeholder_label(label):
        return False
    lowered = label.lower()
    return not any(marker in lowered for marker in keywords.non_data_labels)


def _value_at(row: Sequence[Cell], index: int) -> float:
    if index >= len(row):
        return 0.0
    number = parse_number(row[index].value)
    return 0.0 if number is None else number


def aggregate_table(
    header: Sequence[Cell],
    rows: Sequence[Sequence[Cell]],
    *,
    sheet_name: str = "",
    keywords: KeywordSet = FRENCH_KEYWORDS,
    source: str = "table",
) -> MetricsReport:
    """Aggregate a normalized header + data rows table.

    The label of a row is its first cell. Rows labelled as totals, averages,
    objectives or "Ligne N" placeholders are skipped.
    """
    headers = [cell_text(cell.value) for cell in header]
    actual_index, target_index = locate_metric_columns(headers, keywords=keywords)
    if actual_index == -1 or target_index == -1:
        logger.debug("sheet=%s metric columns not found in %s", sheet_name, headers)
        return MetricsReport(
            sheet_name=sheet_name,
            status=AggregationStatus.COLUMNS_NOT_FOUND,
            headers=headers,
            actual_index=actual_index,
            target_index=target_index,
            source=source,
        )

    blocks: list[MetricBlock] = []
    for row in rows:
        if not row:
            continue
        label = cell_text(row[0].value)
        if not _is_data_label(label, keywords):
            continue
        blocks.append(MetricBlock.from_values(label, _value_at(row, actual_index), _value_at(row, target_index)))

    status = AggregationStatus.OK if blocks else AggregationStatus.NO_VALID_ROWS
    return MetricsReport(
        sheet_name=sheet_name,
        status=status,
        blocks=blocks,
        headers=headers,
        actual_index=actual_index,
        target_index=target_index,
        source=source,
    )


def _aggregate_grid(
    name: str,
    grid: Grid,
    *,
    heuristics: Heuristics,
    keywords: KeywordSet,
) -> MetricsReport:
    header_row = find_header_row_by_score(grid, heuristics=heuristics, keywords=keywords)
    # drop "Ligne N" rows before they can be mistaken for data
    rows = [
        row for row in grid[header_row + 1:]
        if not any(is_placeholder_label(cell_text(c.value)) for c in row[:20])
    ]
    return aggregate_table(grid[header_row], rows, sheet_name=name, keywords=keywords)


def aggregate_metrics(
    sheet: SheetResult,
    *,
    heuristics: Heuristics = DEFAULT_HEURISTICS,
    keywords: KeywordSet = FRENCH_KEYWORDS,
) -> MetricsReport:
    """Per-sheet metric aggregation with report-block fallback."""
    if sheet.is_empty:
        return MetricsReport(sheet_name=sheet.name, status=AggregationStatus.NO_VALID_ROWS)

    report = _aggregate_grid(sheet.name, sheet.data, heuristics=heuristics, keywords=keywords)
    if sheet.transposed:
        # a report flipped by the orientation detector keeps its blocks in the original grid;
        # repeated blocks cannot come from a single flipped table
        original = extract_blocks(transpose(sheet.data), keywords=keywords)
        if len(original) > 1 or (original and not report.ok):
            logger.debug("sheet=%s using %d blocks of the pre-orientation grid", sheet.name, len(original))
            return _blocks_report(sheet.name, original, keywords=keywords)
    if report.status is not AggregationStatus.COLUMNS_NOT_FOUND:
        return report

    blocks = extract_blocks(sheet.data, keywords=keywords)
    if not blocks:
        logger.info(f"sheet={sheet.name} metric columns not found (headers: {', '.join(report.headers)})")
        return report
    return _blocks_report(sheet.name, blocks, keywords=keywords)


def _blocks_report(name: str, blocks: Sequence[MetricBlock], *, keywords: KeywordSet) -> MetricsReport:
    table = blocks_to_table(blocks, keywords=keywords)
    return aggregate_table(table[0], table[1:], sheet_name=name, keywords=keywords, source="blocks")


def chart_series(blocks: Sequence[MetricBlock]) -> dict[str, list]:
    """Parallel lists ready for a bar (actual/target) + line (percent) chart."""
    return {
        "labels": [b.label for b in blocks],
        "actual": [b.actual_value for b in blocks],
        "target": [b.target_value for b in blocks],
        "percent": [b.percent for b in blocks],
    }
