"""Telemetry for toolkit-auth.

- system_logger: Operational logger (stderr, optional JSONL file)
- auth_logger: Session event log (sign-in, sign-out, failures)
"""

from toolkit_auth.telemetry.auth_logger import AuthEvent, AuthLogger, create_auth_logger
from toolkit_auth.telemetry.system_logger import (
    ConsoleFormatter,
    configure_system_logger_file,
    get_system_logger,
)

__all__ = [
    "AuthEvent",
    "AuthLogger",
    "ConsoleFormatter",
    "configure_system_logger_file",
    "create_auth_logger",
    "get_system_logger",
]
