from __future__ import annotations

import json
import re
from pathlib import Path

from sheetshape.cli import main as cli_main
from sheetshape.logging.init import reset_logging
from sheetshape.models.error_record import ERROR_TYPES

"""Error log contract: one JSON object per line with a fixed key set."""

KEYS = {"timestamp", "file", "sheet", "row", "error_type", "message"}
TIMESTAMP = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d+)?Z$")


def test_error_log_lines(temp_workdir: Path, write_config, capsys) -> None:
    reset_logging()
    (temp_workdir / "data" / "broken.xlsx").write_bytes(b"not a workbook")
    (temp_workdir / "data" / "broken2.xlsm").write_bytes(b"")

    assert cli_main([]) == 2
    capsys.readouterr()

    logs = list((temp_workdir / "logs").glob("errors-*.log"))
    assert len(logs) == 1
    lines = logs[0].read_text(encoding="utf-8").splitlines()
    assert len(lines) == 2
    for raw in lines:
        record = json.loads(raw)
        assert set(record) == KEYS
        assert TIMESTAMP.match(record["timestamp"])
        assert record["error_type"] in ERROR_TYPES
        assert isinstance(record["row"], int)
