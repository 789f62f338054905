from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

import pytest

from conftest import make_grid
from sheetshape.excel.extract import extract_grid, extract_sheet
from sheetshape.models.excel_file import ExcelFile, FileStatus
from sheetshape.models.processing_result import BatchStatsAccumulator, FileStat, ProcessingResult


def test_total_files():
    now = datetime.now(timezone.utc)
    result = ProcessingResult(
        success_files=3,
        failed_files=1,
        total_rows=10,
        total_sheets=4,
        empty_sheets=0,
        transposed_sheets=0,
        start_time=now,
        end_time=now,
        elapsed_seconds=0.0,
        throughput_rows_per_sec=0.0,
        file_stats=[FileStat("a.xlsx", "success", 10, 1, 0.1)],
    )
    assert result.total_files == 4
    assert result.error_log_path is None
    assert result.file_stats[0].total_batches == 0


class TestBatchStatsAccumulator:
    def test_empty(self):
        assert BatchStatsAccumulator().get_stats() == (0, 0.0, 0.0)

    def test_single_batch(self):
        acc = BatchStatsAccumulator()
        acc.add_batch_time(0.4)
        assert acc.get_stats() == (1, 0.4, 0.4)

    def test_several_batches(self):
        acc = BatchStatsAccumulator()
        for t in [0.1, 0.2, 0.3, 0.4, 0.5]:
            acc.add_batch_time(t)
        total, avg, p95 = acc.get_stats()
        assert total == 5
        assert avg == pytest.approx(0.3)
        assert p95 == pytest.approx(0.48)


def test_excel_file_sheet_counters():
    transposed = extract_grid("T", make_grid([["Name", "Alice", "Bob"], ["Age", 25, 30], ["City", "Paris", "London"]]))
    empty = extract_sheet("Empty", [])
    excel = ExcelFile(path=Path("a.xlsx"), name="a.xlsx", sheets=[transposed, empty])
    assert excel.status is FileStatus.PENDING
    assert excel.primary_sheet is transposed
    assert excel.empty_sheets == 1
    assert excel.transposed_sheets == 1
    assert ExcelFile(path=Path("b.xlsx"), name="b.xlsx").primary_sheet is None
