from __future__ import annotations

from pathlib import Path

from conftest import save_workbook
from sheetshape.cli import main as cli_main
from sheetshape.cli.__main__ import EXIT_FATAL, EXIT_PARTIAL_FAILURE, EXIT_SUCCESS_ALL
from sheetshape.logging.init import reset_logging

"""Exit code contract: 0 all files succeeded, 2 some failed, 1 fatal startup error."""

TABLE = {"Data": [["Nom", "Age"], ["Alice", 25]]}


def test_exit_code_values():
    assert (EXIT_SUCCESS_ALL, EXIT_FATAL, EXIT_PARTIAL_FAILURE) == (0, 1, 2)


def test_exit_code_fatal_startup(temp_workdir: Path, capsys):
    reset_logging()
    code = cli_main([])
    assert code == 1
    assert "ERROR config:" in capsys.readouterr().out


def test_exit_code_invalid_config(temp_workdir: Path, capsys):
    reset_logging()
    (temp_workdir / "config" / "sheetshape.yml").write_text("export_csv: true\n", encoding="utf-8")
    assert cli_main([]) == 1
    assert "config validation failed" in capsys.readouterr().out


def test_exit_code_all_success(temp_workdir: Path, write_config, capsys):
    reset_logging()
    save_workbook(temp_workdir / "data" / "a.xlsx", TABLE)
    save_workbook(temp_workdir / "data" / "b.xlsx", TABLE)
    assert cli_main([]) == 0


def test_exit_code_partial_failure(temp_workdir: Path, write_config, capsys):
    reset_logging()
    save_workbook(temp_workdir / "data" / "a.xlsx", TABLE)
    (temp_workdir / "data" / "b.xlsx").write_bytes(b"garbage")
    assert cli_main([]) == 2


def test_exit_code_all_failed_is_partial(temp_workdir: Path, write_config, capsys):
    reset_logging()
    (temp_workdir / "data" / "b.xlsx").write_bytes(b"garbage")
    assert cli_main([]) == 2
