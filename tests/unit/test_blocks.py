from __future__ import annotations

import pytest

from conftest import grid_values, make_grid
from sheetshape.excel.blocks import blocks_to_table, extract_blocks, row_text
from sheetshape.models.cell import Cell
from sheetshape.models.metric_block import MetricBlock


def test_row_text_collapses_whitespace():
    row = [Cell(value="  CA   "), Cell(value="REALISE\n"), Cell(value=4224), Cell()]
    assert row_text(row) == "ca realise 4224"


def test_first_value_not_running_total():
    grid = make_grid([["STORE X"], ["CA REALISE", 4224, 8739], ["OBJECTIF", 5056, 11712]])
    blocks = extract_blocks(grid)
    assert blocks == [MetricBlock.from_values("STORE X", 4224, 5056)]
    assert blocks[0].percent == pytest.approx(4224 / 5056 * 100)


def test_several_blocks_in_sheet_order():
    grid = make_grid(
        [
            ["SUIVI OBJECTIF RÉALISATION CA PAR ATELIER", 725000],
            [],
            ["GRIM PASSION LATTES"],
            ["CA Réalisé", 4224, 8739],
            ["Objectif", 5056, 11712],
            ["% DE REALISATION", 0.72, 0.75],
            ["ATELIER DES GOURMETS"],
            ["CA REALISE", "6 100", 12040],
            ["OBJECTIF", "5 000", 10000],
        ]
    )
    blocks = extract_blocks(grid)
    assert [b.label for b in blocks] == ["GRIM PASSION LATTES", "ATELIER DES GOURMETS"]
    assert (blocks[1].actual_value, blocks[1].target_value) == (6100.0, 5000.0)
    assert blocks[1].percent == pytest.approx(122.0)


def test_missing_label_gets_placeholder():
    grid = make_grid([[None, None], ["CA REALISE", 100], ["OBJECTIF", 200]])
    assert extract_blocks(grid)[0].label == "Store 1"
    assert extract_blocks(make_grid([["CA REALISE", 100]]))[0].label == "Store 1"


def test_target_requires_marker_on_next_row():
    grid = make_grid([["Shop"], ["CA REALISE", 100], ["Budget", 200]])
    block = extract_blocks(grid)[0]
    assert block.target_value == 0
    assert block.percent == 0


def test_blocks_without_values_are_dropped():
    grid = make_grid([["Shop"], ["CA REALISE", "-"], ["OBJECTIF", None]])
    assert extract_blocks(grid) == []


def test_no_marker_no_blocks():
    assert extract_blocks(make_grid([["Name", "Age"], ["Alice", 25]])) == []


def test_blocks_to_table():
    table = blocks_to_table([MetricBlock.from_values("STORE X", 4224, 5056)])
    assert grid_values(table) == [["Name", "CA Réalisé", "Objectif"], ["STORE X", 4224, 5056]]
