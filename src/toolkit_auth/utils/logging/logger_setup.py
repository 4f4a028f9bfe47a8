"""Logger setup shared by the system logger and the session event log."""

from __future__ import annotations

__all__ = [
    "jsonl_file_handler",
    "reset_handlers",
    "setup_jsonl_logger",
]

import logging
import sys
from pathlib import Path

from toolkit_auth.utils.logging.iso_formatter import ISO8601Formatter


def reset_handlers(logger: logging.Logger) -> None:
    """Close and detach every handler so the logger can be configured again."""
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


def jsonl_file_handler(log_file: Path, level: int) -> logging.FileHandler:
    """Append-mode JSONL handler; creates the parent directory owner-only.

    Raises:
        OSError: If the directory cannot be created.
    """
    directory = log_file.parent
    if not directory.is_dir():
        directory.mkdir(parents=True, exist_ok=True)
        # Only restrict directories we created
        if sys.platform != "win32":
            directory.chmod(0o700)

    handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(ISO8601Formatter())
    return handler


def setup_jsonl_logger(
    logger_name: str,
    log_file: Path,
    log_level: int = logging.INFO,
) -> logging.Logger:
    """Set up a non-propagating logger that writes JSONL to log_file.

    Calling it again for the same name replaces the previous handlers.

    Args:
        logger_name: Name for the logger (e.g., "toolkit-auth.events").
        log_file: Path to the log file.
        log_level: Logging level (default: INFO).

    Returns:
        Configured logger instance.

    Raises:
        OSError: If the log directory cannot be created.
    """
    logger = logging.getLogger(logger_name)
    reset_handlers(logger)
    logger.setLevel(log_level)
    logger.propagate = False
    logger.addHandler(jsonl_file_handler(log_file, log_level))
    return logger
