"""Tests for core/logging_setup.py."""

import logging

from core.logging_setup import _ConsoleNoiseFilter, setup_logging


def test_setup_logging_writes_file(tmp_path):
    root = logging.getLogger()
    saved = list(root.handlers), root.level
    try:
        log_file = setup_logging(log_dir=tmp_path / "logs", console_level=logging.WARNING)
        logging.getLogger("core.test").debug("hello from core")
        for h in logging.getLogger().handlers:
            h.flush()
        assert log_file.exists()
        assert "hello from core" in log_file.read_text(encoding="utf-8")
    finally:
        for h in list(root.handlers):
            root.removeHandler(h)
            h.close()
        for h in saved[0]:
            root.addHandler(h)
        root.setLevel(saved[1])
        logging.captureWarnings(False)


def _record(name: str, level: int) -> logging.LogRecord:
    return logging.LogRecord(name, level, __file__, 1, "msg", None, None)


def test_console_filter_keeps_own_records_and_third_party_errors():
    f = _ConsoleNoiseFilter()
    assert f.filter(_record("core.reminders", logging.DEBUG))
    assert f.filter(_record("ui", logging.INFO))
    assert not f.filter(_record("httpx", logging.WARNING))
    assert not f.filter(_record("py.warnings", logging.WARNING))
    assert f.filter(_record("py.warnings", logging.ERROR))
    assert f.filter(_record("uvicorn.error", logging.ERROR))
