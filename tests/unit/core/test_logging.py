"""
Unit Tests for Centralized Logging.

Tests the logging configuration, handler setup, and source handling.
"""

import logging
from logging.handlers import RotatingFileHandler
from unittest.mock import MagicMock, patch

import pytest

from studynotes.core.logging import VALID_SOURCES, get_logger, log_with_source, setup_logging


@pytest.fixture
def logging_config(tmp_path):
    """App config whose logging section writes to a temporary directory."""
    config = MagicMock()
    config.logging.level = "INFO"
    config.logging.format = "json"
    config.logging.handlers.console.enabled = True
    config.logging.handlers.file.enabled = False
    config.logging.handlers.file.path = "logs/system.jsonl"
    config.logging.handlers.file.max_bytes = 1024
    config.logging.handlers.file.backup_count = 1
    return config


@pytest.fixture(autouse=True)
def _restore_root_logger():
    root_logger = logging.getLogger()
    handlers = root_logger.handlers[:]
    level = root_logger.level
    yield
    for handler in root_logger.handlers[:]:
        if handler not in handlers:
            root_logger.removeHandler(handler)
            handler.close()
    root_logger.setLevel(level)


class TestValidSources:

    def test_valid_sources_contains_expected_values(self):
        assert VALID_SOURCES == frozenset({"web", "cli", "api", "internal", "unknown"})


class TestSetupLogging:

    def test_level_override(self, logging_config):
        with patch("studynotes.core.logging.get_app_config", return_value=logging_config):
            setup_logging(level="DEBUG")

        assert logging.getLogger().level == logging.DEBUG

    def test_level_from_config(self, logging_config):
        logging_config.logging.level = "WARNING"

        with patch("studynotes.core.logging.get_app_config", return_value=logging_config):
            setup_logging()

        assert logging.getLogger().level == logging.WARNING

    def test_console_handler(self, logging_config):
        with patch("studynotes.core.logging.get_app_config", return_value=logging_config):
            setup_logging(format_type="console")

        handler_types = [type(h) for h in logging.getLogger().handlers]
        assert handler_types == [logging.StreamHandler]

    def test_file_handler_writes_jsonl(self, tmp_path, logging_config):
        log_file = tmp_path / "logs" / "system.jsonl"

        with patch("studynotes.core.logging.get_app_config", return_value=logging_config), \
             patch("studynotes.core.logging._resolve_log_path", return_value=log_file):
            setup_logging(enable_console=False, enable_file_logging=True)

        handlers = logging.getLogger().handlers
        assert len(handlers) == 1
        assert isinstance(handlers[0], RotatingFileHandler)

        get_logger("studynotes.tests").info("Note created", note_id="n-1")
        handlers[0].flush()

        record = log_file.read_text(encoding="utf-8").strip().splitlines()[-1]
        assert '"event": "Note created"' in record
        assert '"note_id": "n-1"' in record

    def test_noisy_loggers_are_quieted(self, logging_config):
        with patch("studynotes.core.logging.get_app_config", return_value=logging_config):
            setup_logging()

        assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING
        assert logging.getLogger("uvicorn.access").level == logging.WARNING


class TestLogWithSource:

    def test_passes_source_to_level_method(self):
        logger = MagicMock()

        log_with_source(logger, "cli", "info", "Server starting", port=8000)

        logger.info.assert_called_once_with("Server starting", source="cli", port=8000)

    def test_invalid_level_raises(self):
        logger = MagicMock(spec=["info"])

        with pytest.raises(AttributeError):
            log_with_source(logger, "cli", "loud", "message")
