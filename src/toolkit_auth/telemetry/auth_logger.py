"""Session event logger.

Writes one JSONL entry per session transition or failed operation:
- signed_in: a sign-in or sign-up committed a new user
- signed_out: the session was cleared
- auth_failed: an operation raised an AuthException

User identifiers are hashed before writing. Tokens are never logged.
"""

from __future__ import annotations

__all__ = [
    "AuthEvent",
    "AuthLogger",
    "create_auth_logger",
]

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from pydantic import BaseModel, ConfigDict, Field

from toolkit_auth.constants import APP_NAME
from toolkit_auth.utils.logging.logger_setup import setup_jsonl_logger
from toolkit_auth.utils.logging.logging_helpers import hash_sensitive_id, serialize_event

if TYPE_CHECKING:
    from toolkit_auth.exceptions import AuthException
    from toolkit_auth.models import UserCredential


class AuthEvent(BaseModel):
    """One session event log entry.

    Note: 'time' is None when created, populated by ISO8601Formatter during logging.
    """

    time: str | None = Field(None, description="ISO 8601 timestamp, added by formatter")

    event_type: Literal["signed_in", "signed_out", "auth_failed"]
    status: Literal["Success", "Failure"]
    operation: str

    # Hashed, see hash_sensitive_id()
    uid: str | None = None
    provider_id: str | None = None
    sign_in_method: str | None = None
    is_new_user: bool | None = None

    error_code: str | None = None
    upstream_code: str | None = None

    model_config = ConfigDict(extra="forbid")


class AuthLogger:
    """Typed methods for logging session events.

    Usage:
        auth_logger = create_auth_logger(Path("~/.local/state/toolkit-auth/auth.jsonl").expanduser())
        auth = Auth(options, auth_logger=auth_logger)
    """

    def __init__(self, logger: logging.Logger) -> None:
        self._logger = logger

    def _log_event(self, event: AuthEvent) -> None:
        level = logging.INFO if event.status == "Success" else logging.WARNING
        self._logger.log(level, serialize_event(event))

    def log_signed_in(self, operation: str, result: "UserCredential") -> None:
        """Log a committed sign-in or sign-up."""
        self._log_event(
            AuthEvent(
                event_type="signed_in",
                status="Success",
                operation=operation,
                uid=hash_sensitive_id(result.user.uid),
                provider_id=result.credential.provider_id.value,
                sign_in_method=result.credential.sign_in_method.value,
                is_new_user=result.additional_user_info.is_new_user,
            )
        )

    def log_signed_out(self, uid: str | None) -> None:
        """Log a sign-out.

        Args:
            uid: Id of the user that was signed in, None if nobody was.
        """
        self._log_event(
            AuthEvent(
                event_type="signed_out",
                status="Success",
                operation="sign_out",
                uid=hash_sensitive_id(uid) if uid else None,
            )
        )

    def log_auth_failed(self, operation: str, error: "AuthException") -> None:
        """Log an operation that failed with a domain error."""
        self._log_event(
            AuthEvent(
                event_type="auth_failed",
                status="Failure",
                operation=operation,
                error_code=error.code.value,
                upstream_code=error.upstream_code,
            )
        )


def create_auth_logger(log_path: Path) -> AuthLogger:
    """Create a session event logger writing JSONL to log_path.

    Args:
        log_path: Path to the events file (directory is created).

    Returns:
        AuthLogger ready to pass to Auth.
    """
    logger = setup_jsonl_logger(f"{APP_NAME}.events", log_path, log_level=logging.INFO)
    return AuthLogger(logger)
