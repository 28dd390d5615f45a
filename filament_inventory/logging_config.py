"""
Logging configuration for the filament inventory.

Usage:
    from filament_inventory.logging_config import get_logger

    logger = get_logger(__name__)
    logger.info("Appended filament record", extra={"color": "WHITE"})

The interactive menu owns stdout, so log output goes to stderr or, when
``log_file`` is configured, to a rotating file.
"""
from __future__ import annotations

import logging
import logging.handlers
import sys
from datetime import datetime
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .config import Settings

PACKAGE_LOGGER = "filament_inventory"

_RESERVED_ATTRS = {
    "name", "msg", "args", "created", "filename", "funcName",
    "levelname", "levelno", "lineno", "module", "msecs",
    "pathname", "process", "processName", "relativeCreated",
    "stack_info", "exc_info", "exc_text", "thread", "threadName",
    "taskName", "message",
}


class TextFormatter(logging.Formatter):
    """
    Formats log records as human-readable text.

    Output format:
    2024-01-01 12:00:00 [INFO] filament_inventory.inventory: Deleted filament record color=WHITE
    """

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).strftime("%Y-%m-%d %H:%M:%S")
        base_msg = f"{timestamp} [{record.levelname}] {record.name}: {record.getMessage()}"

        extras = []
        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                extras.append(f"{key}={value}")

        if extras:
            base_msg += " " + " ".join(extras)

        if record.exc_info:
            base_msg += "\n" + self.formatException(record.exc_info)

        return base_msg


def setup_logging(settings: Optional["Settings"] = None) -> logging.Logger:
    """
    Configure the package logger from settings.

    Call this once at application startup. Calling it again replaces the
    handlers installed by the previous call.
    """
    if settings is None:
        from .config import get_settings

        settings = get_settings()

    log_level = settings.log_level_number
    formatter = TextFormatter()

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(log_level)
    for existing in list(package_logger.handlers):
        package_logger.removeHandler(existing)
        existing.close()

    if settings.log_file:
        settings.log_file.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.handlers.RotatingFileHandler(
            settings.log_file,
            maxBytes=1024 * 1024,
            backupCount=3,
            encoding="utf-8",
        )
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)
    handler.setLevel(log_level)
    package_logger.addHandler(handler)

    return package_logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a module.

    Args:
        name: Module name (typically __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)


__all__ = ["PACKAGE_LOGGER", "TextFormatter", "get_logger", "setup_logging"]
