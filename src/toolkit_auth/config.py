"""Client configuration for toolkit-auth.

AuthOptions selects the backend (production Identity Toolkit or the local
emulator) and the HTTP client settings used by the gateway.

Example usage:
    # Explicit
    options = AuthOptions(api_key="...", project_id="my-project")

    # From <app dir>/options.json, honouring FIREBASE_AUTH_EMULATOR_HOST
    options = load_auth_options()
"""

from __future__ import annotations

__all__ = [
    "AuthOptions",
    "get_options_path",
    "load_auth_options",
    "parse_emulator_host",
]

import os
from pathlib import Path

from pydantic import BaseModel, Field

from toolkit_auth.constants import (
    DEFAULT_CONTINUE_URI,
    DEFAULT_EMULATOR_HOST,
    DEFAULT_EMULATOR_PORT,
    DEFAULT_HTTP_TIMEOUT_SECONDS,
    EMULATOR_HOST_ENV_VAR,
    IDENTITY_TOOLKIT_PATH,
    IDENTITY_TOOLKIT_ROOT_URL,
    MAX_HTTP_TIMEOUT_SECONDS,
    MIN_HTTP_TIMEOUT_SECONDS,
    OPTIONS_FILE_NAME,
)
from toolkit_auth.exceptions import ConfigurationError
from toolkit_auth.utils.file_helpers import get_app_dir, load_validated_json, require_file_exists


class AuthOptions(BaseModel):
    """Options used for all requests made by an Auth instance.

    Attributes:
        api_key: Web API key of the project. Use any non-empty dummy value
            with the emulator.
        project_id: Id of the GCP or Firebase project.
        host: Auth emulator host.
        port: Auth emulator port.
        use_emulator: Send all requests to the emulator instead of Google.
        continue_uri: Continue URL sent with createAuthUri and email links.
        timeout_seconds: HTTP timeout for every backend call.
    """

    api_key: str = Field(
        min_length=1,
        description="API key, or a dummy one when using the emulator",
    )
    project_id: str = Field(min_length=1)
    host: str = DEFAULT_EMULATOR_HOST
    port: int = Field(default=DEFAULT_EMULATOR_PORT, ge=1, le=65535)
    use_emulator: bool = False
    continue_uri: str = DEFAULT_CONTINUE_URI
    timeout_seconds: int = Field(
        default=DEFAULT_HTTP_TIMEOUT_SECONDS,
        ge=MIN_HTTP_TIMEOUT_SECONDS,
        le=MAX_HTTP_TIMEOUT_SECONDS,
    )

    @property
    def root_url(self) -> str:
        """Base URL of the relying party API for these options."""
        if self.use_emulator:
            return f"http://{self.host}:{self.port}/www.googleapis.com/{IDENTITY_TOOLKIT_PATH}"
        return IDENTITY_TOOLKIT_ROOT_URL

    @classmethod
    def load_from_file(cls, path: Path, *, overrides: dict | None = None) -> "AuthOptions":
        """Load and validate options from a JSON file.

        Args:
            path: Path to the options file.
            overrides: Values that take precedence over the file content.

        Returns:
            Validated AuthOptions.

        Raises:
            ConfigurationError: If the file is missing or invalid.
        """
        try:
            require_file_exists(path, file_type="options")
            return load_validated_json(path, cls, file_type="options", overrides=overrides)
        except (FileNotFoundError, ValueError) as e:
            raise ConfigurationError(str(e)) from e


def get_options_path() -> Path:
    """Default options file location inside the app directory."""
    return get_app_dir() / OPTIONS_FILE_NAME


def parse_emulator_host(value: str) -> tuple[str, int]:
    """Parse a "host:port" emulator address.

    Args:
        value: Address such as "127.0.0.1:9099".

    Returns:
        Tuple of (host, port).

    Raises:
        ConfigurationError: If the value is not host:port with a numeric port.
    """
    host, sep, port = value.strip().rpartition(":")
    if not sep or not host or not port.isdigit():
        raise ConfigurationError(f"{EMULATOR_HOST_ENV_VAR} must be in host:port form, got {value!r}")
    return host, int(port)


def load_auth_options(path: Path | None = None) -> AuthOptions:
    """Load options from file, applying the emulator environment override.

    When FIREBASE_AUTH_EMULATOR_HOST is set, its host and port replace the
    file values and use_emulator is switched on.

    Args:
        path: Options file (default: <app dir>/options.json).

    Returns:
        Validated AuthOptions.

    Raises:
        ConfigurationError: If the file or the environment override is invalid.
    """
    overrides: dict = {}
    emulator_host = os.environ.get(EMULATOR_HOST_ENV_VAR)
    if emulator_host:
        host, port = parse_emulator_host(emulator_host)
        overrides = {"host": host, "port": port, "use_emulator": True}

    return AuthOptions.load_from_file(path or get_options_path(), overrides=overrides)
