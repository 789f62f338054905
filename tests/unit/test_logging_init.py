from __future__ import annotations

import logging
from io import StringIO

import pytest

from sheetshape.logging import init as log_init
from sheetshape.logging.init import (
    LOGGER_NAME,
    LabeledFormatter,
    get_logger,
    log_summary,
    reset_logging,
    set_debug,
    setup_logging,
)


@pytest.fixture(autouse=True)
def fresh_logger():
    reset_logging()
    yield
    reset_logging()


def test_setup_logging_creates_logger_with_labeled_formatter():
    logger = setup_logging()
    assert logger.name == LOGGER_NAME
    assert logger.level == logging.INFO
    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0].formatter, LabeledFormatter)
    assert logger.propagate is False


def test_logging_labeled_prefixes():
    captured_output = StringIO()
    logger = logging.getLogger("test_sheetshape_labels")
    logger.setLevel(logging.INFO)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
    handler = logging.StreamHandler(captured_output)
    handler.setFormatter(LabeledFormatter())
    logger.addHandler(handler)
    logger.propagate = False

    logger.info("Test info message")
    logger.warning("Test warning message")
    logger.error("Test error message")
    logger.log(25, "Test summary message")

    lines = captured_output.getvalue().strip().split("\n")
    assert lines == [
        "INFO Test info message",
        "WARN Test warning message",
        "ERROR Test error message",
        "SUMMARY Test summary message",
    ]


def test_setup_logging_idempotent():
    logger1 = setup_logging()
    logger2 = setup_logging()
    assert logger1 is logger2
    assert len(logger1.handlers) == 1
    assert get_logger() is logger1


def test_module_loggers_share_the_handler(capsys):
    setup_logging()
    logging.getLogger("sheetshape.excel.extract").info("from a child logger")
    assert "INFO from a child logger" in capsys.readouterr().out


def test_set_debug(capsys):
    logger = setup_logging()
    logger.debug("hidden")
    set_debug()
    logger.debug("visible")
    out = capsys.readouterr().out
    assert "hidden" not in out
    assert "DEBUG visible" in out
    assert all(h.level == logging.DEBUG for h in logger.handlers)


def test_log_summary(capsys):
    setup_logging()
    log_summary("files=2/2 success=2 failed=0")
    assert capsys.readouterr().out.strip() == "SUMMARY files=2/2 success=2 failed=0"
    assert log_init._logger is not None
