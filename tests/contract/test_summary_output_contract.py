from __future__ import annotations

import re
from pathlib import Path

from conftest import save_workbook
from sheetshape.cli import main as cli_main
from sheetshape.logging.init import reset_logging

"""SUMMARY output contract: exactly one line, last on stdout, fixed field order."""

SUMMARY_PATTERN = re.compile(
    r"^SUMMARY\s+files=([0-9]+)/(\1)\s+success=([0-9]+)\s+failed=([0-9]+)\s+"
    r"rows=([0-9]+)\s+sheets=([0-9]+)\s+empty_sheets=([0-9]+)\s+transposed_sheets=([0-9]+)\s+"
    r"elapsed_sec=([0-9]+\.?[0-9]*)\s+throughput_rps=([0-9]+\.?[0-9]*)$"
)


def test_summary_line_is_last(temp_workdir: Path, write_config, capsys):
    reset_logging()
    save_workbook(
        temp_workdir / "data" / "book.xlsx",
        {
            "Data": [["Nom", "Age"], ["Alice", 25], ["Bob", 30]],
            "Vide": [],
            "Transposed": [["Name", "Alice", "Bob"], ["Age", 25, 30], ["City", "Paris", "London"]],
        },
    )
    assert cli_main([]) == 0
    lines = capsys.readouterr().out.strip().splitlines()

    summary = [line for line in lines if line.startswith("SUMMARY")]
    assert summary == [lines[-1]]
    match = SUMMARY_PATTERN.match(lines[-1])
    assert match
    assert match.groups()[:8] == ("1", "1", "1", "0", "2", "3", "1", "1")
