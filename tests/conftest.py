# Shared pytest fixtures
from __future__ import annotations
import tempfile
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
from openpyxl import Workbook

from sheetshape.models.cell import Cell, Grid


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        monkeypatch.setenv("DISABLE_DB_CONNECT", "1")
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """source_directory: ./data
export_csv: false
logs_directory: ./logs
heuristics:
  density_threshold: 0.75
  transpose_margin: 0.1
database:
  host: localhost
  port: 5432
  user: appuser
  password: secret
  database: appdb
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "sheetshape.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


def save_workbook(path: Path, sheets: dict[str, list[list[Any]]]) -> Path:
    """Write ``{sheet name: rows}`` with openpyxl; sheet order is kept."""
    wb = Workbook()
    wb.remove(wb.active)
    for name, rows in sheets.items():
        ws = wb.create_sheet(title=name)
        for row in rows:
            ws.append(row)
    wb.save(path)
    return path


@pytest.fixture()
def make_workbook(temp_workdir: Path) -> Callable[..., Path]:
    def _make(name: str, sheets: dict[str, list[list[Any]]]) -> Path:
        return save_workbook(temp_workdir / "data" / name, sheets)
    return _make


def make_grid(rows: list[list[Any]]) -> Grid:
    """Rectangular Grid from plain values (short rows padded with empty cells)."""
    width = max((len(r) for r in rows), default=0)
    return [[Cell(value=v) for v in row] + [Cell()] * (width - len(row)) for row in rows]


def grid_values(grid: Grid) -> list[list[Any]]:
    return [[cell.value for cell in row] for row in grid]
