# tests/test_logging_setup.py

from __future__ import annotations

import logging
from pathlib import Path

from tasklist.logging_setup import _ConsoleNoiseFilter, setup_logging


def _record(name: str, level: int) -> logging.LogRecord:
    return logging.LogRecord(name, level, __file__, 1, "msg", None, None)


def test_console_filter_levels() -> None:
    f = _ConsoleNoiseFilter()
    assert f.filter(_record("tasklist.store", logging.DEBUG))
    assert not f.filter(_record("sqlalchemy.engine.Engine", logging.INFO))
    assert f.filter(_record("sqlalchemy.engine.Engine", logging.WARNING))
    assert f.filter(_record("uvicorn.error", logging.INFO))
    assert not f.filter(_record("uvicorn.access", logging.INFO))
    assert not f.filter(_record("httpx", logging.WARNING))


def test_setup_logging_writes_file(tmp_path: Path) -> None:
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    try:
        setup_logging(log_dir=tmp_path / "logs")
        logging.getLogger("tasklist.test").debug("hello file")
        for h in root.handlers:
            h.flush()
        assert "hello file" in (tmp_path / "logs" / "tasklist.log").read_text(encoding="utf-8")
    finally:
        for h in list(root.handlers):
            root.removeHandler(h)
            h.close()
        for h in saved_handlers:
            root.addHandler(h)
        root.setLevel(saved_level)
        logging.captureWarnings(False)
