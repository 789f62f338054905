from __future__ import annotations

from datetime import date, datetime

from conftest import make_grid
from sheetshape.excel.column_types import column_names, describe_columns, detect_column_type, is_date_like
from sheetshape.models.cell import Cell
from sheetshape.models.sheet_result import ColumnDescriptor, ColumnType


def _column(*values):
    return [[Cell(value=v)] for v in values]


def test_zero_samples_is_text():
    assert detect_column_type([], 0) is ColumnType.TEXT
    assert detect_column_type(_column(None, "", "  "), 0) is ColumnType.TEXT


def test_all_numbers_is_number():
    assert detect_column_type(_column(1, 2.5, "3", None, -4), 0) is ColumnType.NUMBER


def test_single_text_value_forces_text():
    assert detect_column_type(_column(1, 2, "abc", 4), 0) is ColumnType.TEXT


def test_only_first_samples_are_considered():
    values = list(range(10)) + ["abc"]
    assert detect_column_type(_column(*values), 0) is ColumnType.NUMBER


def test_dates():
    assert detect_column_type(_column(date(2024, 1, 15), datetime(2024, 2, 1, 9, 0)), 0) is ColumnType.DATE
    assert detect_column_type(_column("2024-01-15", "2024-02-10"), 0) is ColumnType.DATE
    assert detect_column_type(_column("2024-01-15", "Paris"), 0) is ColumnType.TEXT


def test_booleans_are_text():
    assert detect_column_type(_column(True, False), 0) is ColumnType.TEXT


def test_is_date_like():
    assert is_date_like(date(2024, 1, 1))
    assert is_date_like("2024-03-05")
    assert not is_date_like("London")
    assert not is_date_like("")
    assert not is_date_like(12)


def test_relative_date_words_are_text():
    assert not is_date_like("now")
    assert not is_date_like("today")
    assert detect_column_type(_column("now", "today"), 0) is ColumnType.TEXT


def test_short_rows_are_tolerated():
    rows = [[Cell(value="a")], [Cell(value="b"), Cell(value=2)]]
    assert detect_column_type(rows, 1) is ColumnType.NUMBER


def test_column_names_letters_and_duplicates():
    header = [Cell(value="id"), Cell(), Cell(value="id"), Cell(value=" id ")]
    assert column_names(header, 5) == ["id", "B", "id.1", "id.2", "E"]


def test_describe_columns_uses_rows_below_header():
    grid = make_grid([["Report"], ["Nom", "Salaire", "Embauche"], ["Dupont", 3500, date(2020, 3, 15)]])
    assert describe_columns(grid, 1) == [
        ColumnDescriptor(name="Nom", index=0, type=ColumnType.TEXT),
        ColumnDescriptor(name="Salaire", index=1, type=ColumnType.NUMBER),
        ColumnDescriptor(name="Embauche", index=2, type=ColumnType.DATE),
    ]
