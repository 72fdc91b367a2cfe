"""
Logging Configuration Module.

Central logging setup for the ChezFlora backend, applied through
``logging.config.dictConfig``:

- one console handler at the configured level, plus an optional DEBUG file
  handler writing ``logs/chezflora.log``
- ``simple``, ``detailed`` or ``json`` line formats
- per-module levels that keep SQLAlchemy, aiosqlite and APScheduler quiet
"""

import json
import logging
import logging.config
import os
from pathlib import Path
from typing import Any, Dict, Optional


def _get_logging_config():
    """Read the logging options from the settings model.

    The settings import is deferred so that importing this module never
    triggers configuration loading in the middle of another import.
    """
    try:
        from chezflora.server.core.config import settings

        return {
            "log_level": settings.log_level.upper(),
            "log_format": settings.log_format,
            "log_file_dir": os.getenv("LOG_FILE_DIR", "logs"),
            "enable_file_logging": settings.enable_file_logging,
        }
    except Exception:
        return {
            "log_level": os.getenv("CHEZFLORA_LOG_LEVEL", "INFO").upper(),
            "log_format": os.getenv("CHEZFLORA_LOG_FORMAT", "detailed"),
            "log_file_dir": os.getenv("LOG_FILE_DIR", "logs"),
            "enable_file_logging": os.getenv("CHEZFLORA_ENABLE_FILE_LOGGING", "false").lower() in ("true", "1", "yes"),
        }


_config = _get_logging_config()
LOG_LEVEL = _config["log_level"]
LOG_FORMAT = _config["log_format"]
LOG_FILE_DIR = _config["log_file_dir"]
ENABLE_FILE_LOGGING = _config["enable_file_logging"]

LOG_FILE_NAME = "chezflora.log"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

SIMPLE_FORMAT = "%(levelname)s - %(name)s - %(message)s"
DETAILED_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(funcName)s() - %(message)s"

MODULE_LOG_LEVELS = {
    "chezflora.core": "INFO",
    "chezflora.core.database": "INFO",
    "chezflora.server": "INFO",
    "chezflora.server.api": "DEBUG",
    "chezflora.server.services": "DEBUG",
    # Third-party noise
    "sqlalchemy": "WARNING",
    "sqlalchemy.engine": "WARNING",
    "sqlalchemy.pool": "WARNING",
    "aiosqlite": "WARNING",
    "apscheduler": "WARNING",
    "httpx": "WARNING",
    "asyncio": "WARNING",
}


class JsonFormatter(logging.Formatter):
    """Render each record as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": self.formatTime(record, DATE_FORMAT),
            "level": record.levelname,
            "logger": record.name,
            "module": record.filename,
            "function": record.funcName,
            "line": record.lineno,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def _formatter_config(fmt: str) -> Dict[str, Any]:
    if fmt == "json":
        return {"()": JsonFormatter}
    pattern = SIMPLE_FORMAT if fmt == "simple" else DETAILED_FORMAT
    return {"format": pattern, "datefmt": DATE_FORMAT}


def build_logging_config(level: str, fmt: str, log_file: Optional[Path] = None) -> Dict[str, Any]:
    """
    Build the ``dictConfig`` mapping for the given options.

    Args:
        level: Console handler level
        fmt: simple, detailed or json (anything else falls back to detailed)
        log_file: Also log everything from DEBUG up to this file

    Returns:
        A configuration dictionary accepted by ``logging.config.dictConfig``
    """
    handlers: Dict[str, Dict[str, Any]] = {
        "console": {"class": "logging.StreamHandler", "level": level, "formatter": "default"},
    }
    if log_file is not None:
        handlers["file"] = {
            "class": "logging.FileHandler",
            "level": "DEBUG",
            "formatter": "default",
            "filename": str(log_file),
            "encoding": "utf-8",
        }
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"default": _formatter_config(fmt)},
        "handlers": handlers,
        "loggers": {name: {"level": module_level} for name, module_level in MODULE_LOG_LEVELS.items()},
        "root": {"level": "DEBUG", "handlers": list(handlers)},
    }


def setup_logging(
    log_level: Optional[str] = None,
    log_format: Optional[str] = None,
    enable_file: bool = True,
) -> None:
    """
    Configure logging for the application.

    Calling it again replaces the previous handlers.

    Args:
        log_level: Override the configured level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Override the configured format (simple, detailed, json)
        enable_file: Allow the file handler when file logging is enabled in settings
    """
    level = (log_level or LOG_LEVEL).upper()
    fmt = log_format or LOG_FORMAT

    log_file = None
    if enable_file and ENABLE_FILE_LOGGING:
        Path(LOG_FILE_DIR).mkdir(parents=True, exist_ok=True)
        log_file = Path(LOG_FILE_DIR) / LOG_FILE_NAME

    logging.config.dictConfig(build_logging_config(level, fmt, log_file))
    logging.getLogger(__name__).info(f"Logging configured: level={level}, format={fmt}, file={log_file or 'off'}")


def get_logger(name: str) -> logging.Logger:
    """Logger for a module, usually called with ``__name__``."""
    return logging.getLogger(name)
