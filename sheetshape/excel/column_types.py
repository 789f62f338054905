from __future__ import annotations

import warnings
from collections.abc import Sequence
from datetime import date, datetime
from typing import Any

import pandas as pd

from ..models.cell import Cell, Grid
from ..models.config_models import DEFAULT_HEURISTICS, Heuristics
from ..models.sheet_result import ColumnDescriptor, ColumnType
from .grid import column_letter
from .values import cell_text, is_blank, strict_number

"""Column typer and column descriptors.

A column is ``number`` when every sampled value is a finite number, ``date``
when every sampled value is a date (date objects, or strings pandas can
parse), and ``text`` otherwise. No samples at all also means ``text``.
"""

__all__ = [
    "column_names",
    "describe_columns",
    "detect_column_type",
    "is_date_like",
]


def is_date_like(value: Any) -> bool:
    if isinstance(value, (datetime, date)):
        return True
    if not isinstance(value, str) or not value.strip():
        return False
    # pandas also accepts relative words such as "now" or "today"
    if not any(ch.isdigit() for ch in value):
        return False
    with warnings.catch_warnings():
        # pandas warns when it has to guess the format of a single string
        warnings.simplefilter("ignore")
        try:
            parsed = pd.to_datetime(value.strip(), errors="coerce")
        except (ValueError, TypeError, OverflowError):
            return False
    return not pd.isna(parsed)


def detect_column_type(
    rows: Sequence[Sequence[Cell]],
    index: int,
    *,
    heuristics: Heuristics = DEFAULT_HEURISTICS,
) -> ColumnType:
    samples: list[Any] = []
    for row in rows:
        if len(samples) >= heuristics.type_sample_size:
            break
        if index < len(row) and not is_blank(row[index].value):
            samples.append(row[index].value)

    if not samples:
        return ColumnType.TEXT
    if all(strict_number(v) is not None for v in samples):
        return ColumnType.NUMBER
    if all(is_date_like(v) for v in samples):
        return ColumnType.DATE
    return ColumnType.TEXT


def column_names(header: Sequence[Cell], width: int) -> list[str]:
    """Header texts, spreadsheet letters for blank positions, '.N' for duplicates."""
    names: list[str] = []
    seen: dict[str, int] = {}
    for index in range(width):
        text = cell_text(header[index].value) if index < len(header) else ""
        name = text or column_letter(index)
        if name in seen:
            seen[name] += 1
            name = f"{name}.{seen[name]}"
        else:
            seen[name] = 0
        names.append(name)
    return names


def describe_columns(
    grid: Grid,
    header_row: int,
    *,
    heuristics: Heuristics = DEFAULT_HEURISTICS,
) -> list[ColumnDescriptor]:
    """One descriptor per grid column, typed from the rows below ``header_row``."""
    if not grid:
        return []
    width = len(grid[0])
    names = column_names(grid[header_row], width)
    data_rows = grid[header_row + 1:]
    return [
        ColumnDescriptor(
            name=name,
            index=index,
            type=detect_column_type(data_rows, index, heuristics=heuristics),
        )
        for index, name in enumerate(names)
    ]
