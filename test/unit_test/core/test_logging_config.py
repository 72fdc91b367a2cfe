"""Unit tests for the logging setup."""

import json
import logging

import pytest

from chezflora.core import logging_config
from chezflora.core.logging_config import (
    DETAILED_FORMAT,
    SIMPLE_FORMAT,
    JsonFormatter,
    build_logging_config,
    get_logger,
    setup_logging,
)


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    root.handlers = handlers
    root.setLevel(level)


class TestBuildLoggingConfig:
    @pytest.mark.parametrize("fmt,expected", [("simple", SIMPLE_FORMAT), ("detailed", DETAILED_FORMAT), ("odd", DETAILED_FORMAT)])
    def test_text_formats(self, fmt, expected):
        config = build_logging_config("INFO", fmt)
        assert config["formatters"]["default"]["format"] == expected

    def test_json_format_uses_json_formatter(self):
        config = build_logging_config("INFO", "json")
        assert config["formatters"]["default"] == {"()": JsonFormatter}

    def test_console_only_without_file(self):
        config = build_logging_config("WARNING", "simple")
        assert list(config["handlers"]) == ["console"]
        assert config["handlers"]["console"]["level"] == "WARNING"
        assert config["disable_existing_loggers"] is False

    def test_file_handler(self, tmp_path):
        config = build_logging_config("INFO", "simple", tmp_path / "app.log")
        assert config["root"]["handlers"] == ["console", "file"]
        assert config["handlers"]["file"]["filename"] == str(tmp_path / "app.log")
        assert config["handlers"]["file"]["level"] == "DEBUG"


def test_json_formatter_escapes_message():
    record = logging.LogRecord("chezflora.test", logging.INFO, "mod.py", 12, 'Order "42" placed', None, None)
    payload = json.loads(JsonFormatter().format(record))

    assert payload["message"] == 'Order "42" placed'
    assert payload["level"] == "INFO"
    assert payload["logger"] == "chezflora.test"
    assert payload["line"] == 12


def test_setup_logging_installs_single_console_handler(restore_root_logger):
    setup_logging(log_level="warning", log_format="simple", enable_file=False)
    setup_logging(log_level="warning", log_format="simple", enable_file=False)

    handlers = restore_root_logger.handlers
    assert len(handlers) == 1
    assert handlers[0].level == logging.WARNING
    assert handlers[0].formatter._fmt == SIMPLE_FORMAT


def test_setup_logging_applies_module_levels(restore_root_logger):
    setup_logging(enable_file=False)
    assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING
    assert logging.getLogger("chezflora.server.services").level == logging.DEBUG


def test_file_logging_writes_under_log_dir(restore_root_logger, tmp_path, monkeypatch):
    monkeypatch.setattr(logging_config, "ENABLE_FILE_LOGGING", True)
    monkeypatch.setattr(logging_config, "LOG_FILE_DIR", str(tmp_path / "logs"))

    setup_logging(log_level="INFO", enable_file=True)

    file_handlers = [h for h in restore_root_logger.handlers if isinstance(h, logging.FileHandler)]
    assert len(file_handlers) == 1
    assert (tmp_path / "logs" / "chezflora.log").exists()
    for handler in file_handlers:
        handler.close()


def test_get_logger_returns_named_logger():
    assert get_logger("chezflora.test").name == "chezflora.test"
