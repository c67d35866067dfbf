from __future__ import annotations

import logging
import logging.handlers
from pathlib import Path

import pytest
from rich.logging import RichHandler

from link_checker.config_models import Config
from link_checker.logging_setup import setup_logging


@pytest.fixture
def root_logger():
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    yield root
    for handler in root.handlers[:]:
        if handler not in saved_handlers:
            handler.close()
    root.handlers = saved_handlers
    root.setLevel(saved_level)


def _config(tmp_path: Path, **logging_cfg) -> Config:
    return Config(
        logging={
            "file": str(tmp_path / "logs" / "main.log"),
            "error_log_file": str(tmp_path / "logs" / "error.log"),
            **logging_cfg,
        }
    )


def test_handlers_and_levels(tmp_path: Path, root_logger: logging.Logger) -> None:
    setup_logging(_config(tmp_path, level="debug"))

    assert root_logger.level == logging.DEBUG
    assert any(isinstance(h, RichHandler) for h in root_logger.handlers)
    file_handlers = [h for h in root_logger.handlers if isinstance(h, logging.FileHandler)]
    assert len(file_handlers) == 2
    assert {h.level for h in file_handlers} == {logging.DEBUG, logging.WARNING}
    assert logging.getLogger("httpx").level == logging.WARNING


def test_warnings_go_to_error_log(tmp_path: Path, root_logger: logging.Logger) -> None:
    setup_logging(_config(tmp_path))

    logging.getLogger("link_checker.test").info("routine")
    logging.getLogger("link_checker.test").warning("broken link found")
    for handler in root_logger.handlers:
        handler.flush()

    main_log = (tmp_path / "logs" / "main.log").read_text(encoding="utf-8")
    error_log = (tmp_path / "logs" / "error.log").read_text(encoding="utf-8")
    assert "routine" in main_log and "broken link found" in main_log
    assert "routine" not in error_log
    assert "broken link found" in error_log


def test_rotation_uses_timed_handler(tmp_path: Path, root_logger: logging.Logger) -> None:
    setup_logging(_config(tmp_path, rotation_enabled=True, rotation_backup_count=3))

    rotating = [
        h
        for h in root_logger.handlers
        if isinstance(h, logging.handlers.TimedRotatingFileHandler)
    ]
    assert len(rotating) == 2
    assert all(h.backupCount == 3 for h in rotating)
