"""System logger for operational events.

Singleton logger for everything that is not a session event: translated
backend errors, transport failures, listener exceptions.

Logging strategy:
- Console (stderr): INFO and above
- File (optional, JSONL): WARNING and above, added via configure_system_logger_file()

Messages are dicts with an "event" key, e.g.
    get_system_logger().warning({"event": "auth_error", "code": "email-not-found"})
"""

from __future__ import annotations

__all__ = [
    "ConsoleFormatter",
    "configure_system_logger_file",
    "get_system_logger",
]

import logging
import sys
from pathlib import Path

from toolkit_auth.constants import APP_NAME
from toolkit_auth.utils.logging.logger_setup import jsonl_file_handler, reset_handlers


class ConsoleFormatter(logging.Formatter):
    """Human-readable formatter for console output.

    Uses the 'message' or 'event' field of dict messages, followed by the
    remaining fields as key=value pairs.
    """

    def format(self, record: logging.LogRecord) -> str:
        if isinstance(record.msg, dict):
            fields = dict(record.msg)
            headline = fields.pop("message", None) or fields.pop("event", "")
            extras = " ".join(f"{key}={value}" for key, value in fields.items())
            text = f"{record.levelname}: {headline}" + (f" ({extras})" if extras else "")
        else:
            text = f"{record.levelname}: {record.getMessage()}"

        if record.exc_info:
            text = f"{text}\n{self.formatException(record.exc_info)}"
        return text


# Module-level singleton, created by the first get_system_logger() call
_system_logger: logging.Logger | None = None
_file_handler_configured: bool = False


def get_system_logger() -> logging.Logger:
    """Get the singleton system logger instance.

    Created on first call with a stderr handler only.
    """
    global _system_logger

    if _system_logger is None:
        logger = logging.getLogger(f"{APP_NAME}.system")
        reset_handlers(logger)
        logger.setLevel(logging.INFO)
        logger.propagate = False

        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(ConsoleFormatter())
        logger.addHandler(console)
        _system_logger = logger

    return _system_logger


def configure_system_logger_file(log_path: Path) -> None:
    """Also write WARNING and above to log_path as JSONL.

    Only the first successful call has an effect. If the directory cannot be
    created the failure is reported on the console and the logger keeps
    working without a file.

    Args:
        log_path: Path to the system log file.
    """
    global _file_handler_configured

    if _file_handler_configured:
        return

    logger = get_system_logger()
    try:
        handler = jsonl_file_handler(log_path, logging.WARNING)
    except OSError:
        logger.warning({"event": "system_log_unavailable", "path": str(log_path)}, exc_info=True)
        return

    logger.addHandler(handler)
    _file_handler_configured = True
