"""Helpers for preparing auth events before they are logged."""

from __future__ import annotations

__all__ = [
    "hash_sensitive_id",
    "serialize_event",
]

import hashlib
from typing import Any

from pydantic import BaseModel


def serialize_event(event: BaseModel) -> dict[str, Any]:
    """Serialize a Pydantic event model for logging.

    Drops the "time" field (added by ISO8601Formatter) and None values, and
    renders enums/datetimes in JSON form.

    Args:
        event: Event model instance (e.g., AuthEvent).

    Returns:
        dict ready to pass as a log message.
    """
    return event.model_dump(mode="json", exclude={"time"}, exclude_none=True)


def hash_sensitive_id(value: str | None, prefix_length: int = 8) -> str:
    """Hash a user identifier so logs can be correlated without exposing it.

    Deterministic: the same input always produces the same output.

    Args:
        value: Identifier to hash (uid, email).
        prefix_length: Number of hex characters to keep.

    Returns:
        Hashed value in format "sha256:<prefix>" (e.g., "sha256:a1b2c3d4").

    Example:
        >>> hash_sensitive_id("")
        'sha256:empty'
    """
    if not value:
        return "sha256:empty"

    digest = hashlib.sha256(value.encode("utf-8")).hexdigest()
    return f"sha256:{digest[:prefix_length]}"
