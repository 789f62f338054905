from __future__ import annotations
import json
import re
from pathlib import Path
from sheetshape.logging.error_log import ErrorRecord, ErrorLogBuffer


def test_error_log_buffer_flush(temp_workdir: Path):
    buf = ErrorLogBuffer()
    buf.append(ErrorRecord.create("f1.xlsx", "Ventes", -1, "COLUMNS_NOT_FOUND", "headers: Store, Revenue"))
    buf.add("f1.xlsx", "", -1, "READ_ERROR", "corrupt")
    path = buf.flush()
    assert path.parent == Path("logs")
    assert re.fullmatch(r"errors-\d{8}-\d{6}\.log", path.name)
    lines = path.read_text(encoding="utf-8").strip().splitlines()
    assert len(lines) == 2
    for raw in lines:
        obj = json.loads(raw)
        assert set(obj.keys()) == {"timestamp", "file", "sheet", "row", "error_type", "message"}
    assert len(buf) == 0


def test_error_log_buffer_multiple_flushes(temp_workdir: Path):
    buf = ErrorLogBuffer()
    buf.add("f.xlsx", "S", 1, "NO_VALID_ROWS", "first")
    path = buf.flush()
    size1 = path.stat().st_size
    buf.add("f.xlsx", "S", 2, "NO_VALID_ROWS", "second")
    path2 = buf.flush()
    assert path == path2
    assert path2.stat().st_size > size1


def test_empty_buffer_writes_nothing(tmp_path: Path):
    buf = ErrorLogBuffer(tmp_path / "logs")
    assert buf.flush() is None
    assert not (tmp_path / "logs").exists()


def test_custom_directory_is_created(tmp_path: Path):
    buf = ErrorLogBuffer(tmp_path / "nested" / "logs")
    record = buf.add("a.xlsx", "", -1, "EXPORT_ERROR", "disk full")
    assert buf.records == [record]
    path = buf.flush()
    assert path.parent == tmp_path / "nested" / "logs"
    assert json.loads(path.read_text(encoding="utf-8"))["message"] == "disk full"
