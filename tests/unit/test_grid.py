from __future__ import annotations

import pytest

from conftest import grid_values, make_grid
from sheetshape.excel.grid import (
    PLACEHOLDER_CELL,
    build_grid,
    column_letter,
    is_placeholder,
    transpose,
    trim_trailing_empty_rows,
)
from sheetshape.models.cell import EMPTY_CELL, Cell


def _plain(value):
    return Cell(value=value)


@pytest.mark.parametrize(
    "index,expected",
    [(0, "A"), (25, "Z"), (26, "AA"), (27, "AB"), (701, "ZZ"), (702, "AAA")],
)
def test_column_letter(index, expected):
    assert column_letter(index) == expected


def test_column_letter_negative():
    with pytest.raises(ValueError):
        column_letter(-1)


def test_build_grid_pads_rows_and_cells():
    grid = build_grid([(0, 0, "a"), (0, 2, "c"), (2, 1, 5)], normalize=_plain)
    assert grid_values(grid) == [["a", None, "c"], [None, None, None], [None, 5, None]]
    assert grid[0][1] is EMPTY_CELL
    assert all(len(row) == 3 for row in grid)


def test_build_grid_trims_trailing_empty_rows_only():
    entries = [
        (0, 0, "id"), (0, 1, "name"),
        (1, 0, None), (1, 1, None),
        (2, 0, 1), (2, 1, "Alice"),
        (3, 0, None), (3, 1, "   "),
        (4, 0, None), (4, 1, None),
    ]
    grid = build_grid(entries, normalize=_plain)
    # interior empty row kept, trailing ones dropped
    assert grid_values(grid) == [["id", "name"], [None, None], [1, "Alice"]]


@pytest.mark.parametrize("entries", [[], [(0, 0, None)], [(0, 0, None), (3, 2, "  ")]])
def test_build_grid_empty_sheet_gives_placeholder(entries):
    grid = build_grid(entries, normalize=_plain)
    assert grid_values(grid) == [["A"]]
    assert is_placeholder(grid)


def test_is_placeholder_uses_identity():
    assert is_placeholder([[PLACEHOLDER_CELL]])
    assert not is_placeholder([[Cell(value="A")]])
    assert not is_placeholder(make_grid([["A", "B"]]))


def test_trim_is_idempotent():
    grid = make_grid([["a", 1], [None, None], ["b", 2], [None, ""], ["  ", None]])
    once = trim_trailing_empty_rows(grid)
    assert trim_trailing_empty_rows(once) == once
    assert len(once) == 3


def test_transpose_is_self_inverse():
    grid = make_grid([["Name", "Alice", "Bob"], ["Age", 25, 30]])
    flipped = transpose(grid)
    assert grid_values(flipped) == [["Name", "Age"], ["Alice", 25], ["Bob", 30]]
    assert transpose(flipped) == grid
    assert transpose([]) == []
