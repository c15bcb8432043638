"""Tests for logging setup and the per-button adapter."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler

import pytest

from controlio.log_config.logger import ContextualLogger, setup_logging


@pytest.fixture
def root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


class TestSetupLogging:
    def test_console_only(self, root_logger):
        setup_logging("debug", log_dir=None)
        assert root_logger.level == logging.DEBUG
        assert len(root_logger.handlers) == 1
        assert not isinstance(root_logger.handlers[0], RotatingFileHandler)

    def test_file_handler_created(self, root_logger, tmp_path):
        log_dir = tmp_path / "logs"
        setup_logging("WARNING", log_dir=str(log_dir))

        assert log_dir.is_dir()
        files = [h for h in root_logger.handlers if isinstance(h, RotatingFileHandler)]
        assert len(files) == 1
        assert files[0].baseFilename == str(log_dir / "control-io.log")
        assert files[0].level == logging.WARNING

    def test_reinit_replaces_handlers(self, root_logger, tmp_path):
        setup_logging(log_dir=None)
        setup_logging(log_dir=str(tmp_path))
        assert len(root_logger.handlers) == 2

    def test_unknown_level_falls_back_to_info(self, root_logger):
        setup_logging("chatty", log_dir=None)
        assert root_logger.level == logging.INFO


class TestContextualLogger:
    def test_debug_prefixed_with_context(self, caplog):
        log = ContextualLogger(logging.getLogger("controlio.test"), button="buttonUpper")
        with caplog.at_level(logging.DEBUG, logger="controlio.test"):
            log.debug("trigger (level=%d)", 1)
        assert caplog.messages == ["[button=buttonUpper] trigger (level=1)"]

    def test_without_context(self, caplog):
        log = ContextualLogger(logging.getLogger("controlio.test"))
        with caplog.at_level(logging.DEBUG, logger="controlio.test"):
            log.debug("plain")
        assert caplog.messages == ["plain"]
