"""JSONL log formatting with ISO 8601 timestamps."""

from __future__ import annotations

__all__ = ["ISO8601Formatter"]

import json
import logging
from datetime import datetime, timezone


class ISO8601Formatter(logging.Formatter):
    """Format records as one JSON object per line with a UTC "time" field.

    Format: YYYY-MM-DDTHH:MM:SS.sssZ
    Example: {"time": "2026-10-19T10:48:37.123Z", "event": "signed_in", ...}

    Dict messages are emitted as-is (structured logging); anything else is
    wrapped as {"message": ...}. Exception info, when present, is added as
    "exc_info".
    """

    def format(self, record: logging.LogRecord) -> str:
        timestamp = (
            datetime.fromtimestamp(record.created, tz=timezone.utc)
            .isoformat(timespec="milliseconds")
            .replace("+00:00", "Z")
        )

        if isinstance(record.msg, dict):
            log_data = dict(record.msg)
        else:
            log_data = {"message": record.getMessage()}

        log_data.setdefault("level", record.levelname)
        if record.exc_info:
            log_data["exc_info"] = self.formatException(record.exc_info)

        # Timestamp first
        return json.dumps({"time": timestamp, **log_data}, default=str)
