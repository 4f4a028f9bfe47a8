"""Custom exceptions for toolkit-auth.

Exceptions are organized into three categories:

Domain Errors (caller can branch on the code and recover):
    - AuthException: Upstream failure translated into an AuthErrorCode

Gateway Errors (never reach callers of Auth):
    - GatewayError: Structured error body returned by the identity backend,
      translated by Auth into an AuthException

Configuration Errors:
    - ConfigurationError: Options missing, unreadable or invalid

Transport failures (connection errors, timeouts, undecodable bodies) are not
wrapped: httpx and json exceptions propagate to the caller unchanged.

Usage:
    from toolkit_auth.exceptions import AuthErrorCode, AuthException

    try:
        auth.sign_in_with_email_and_password(email, password)
    except AuthException as e:
        if e.code is AuthErrorCode.WRONG_PASSWORD:
            ...
"""

from __future__ import annotations

__all__ = [
    "AuthErrorCode",
    "AuthException",
    "ConfigurationError",
    "GatewayError",
]

from enum import Enum
from typing import Any

# Separator between code and detail in upstream messages,
# e.g. "WEAK_PASSWORD : Password should be at least 6 characters"
_DETAIL_SEPARATOR = ":"


class AuthErrorCode(str, Enum):
    """Closed set of domain error kinds.

    Values follow the kebab-case codes used by the Firebase client SDKs so
    they can be shown or compared across platforms. UNKNOWN is the fallback
    for any upstream code not listed here.
    """

    # Account lookup
    EMAIL_NOT_FOUND = "email-not-found"
    INVALID_EMAIL = "invalid-email"
    INVALID_IDENTIFIER = "invalid-identifier"
    USER_DISABLED = "user-disabled"

    # Credentials
    WRONG_PASSWORD = "wrong-password"
    INVALID_CREDENTIAL = "invalid-credential"
    WEAK_PASSWORD = "weak-password"
    MISSING_EMAIL = "missing-email"
    MISSING_PASSWORD = "missing-password"

    # Sign-up
    EMAIL_ALREADY_IN_USE = "email-already-in-use"
    OPERATION_NOT_ALLOWED = "operation-not-allowed"

    # Out-of-band codes (email links, password reset)
    INVALID_ACTION_CODE = "invalid-action-code"
    EXPIRED_ACTION_CODE = "expired-action-code"
    MISSING_CONTINUE_URI = "missing-continue-uri"

    # Throttling
    TOO_MANY_REQUESTS = "too-many-requests"

    # Project / environment
    INVALID_API_KEY = "invalid-api-key"
    CONFIGURATION_NOT_FOUND = "configuration-not-found"
    EMULATOR_CONFIG_NOT_FOUND = "emulator-config-not-found"

    UNKNOWN = "unknown"


# Upstream code -> domain kind
_UPSTREAM_CODES: dict[str, AuthErrorCode] = {
    "EMAIL_NOT_FOUND": AuthErrorCode.EMAIL_NOT_FOUND,
    "INVALID_EMAIL": AuthErrorCode.INVALID_EMAIL,
    "INVALID_IDENTIFIER": AuthErrorCode.INVALID_IDENTIFIER,
    "MISSING_IDENTIFIER": AuthErrorCode.INVALID_IDENTIFIER,
    "USER_DISABLED": AuthErrorCode.USER_DISABLED,
    "INVALID_PASSWORD": AuthErrorCode.WRONG_PASSWORD,
    "INVALID_LOGIN_CREDENTIALS": AuthErrorCode.INVALID_CREDENTIAL,
    "WEAK_PASSWORD": AuthErrorCode.WEAK_PASSWORD,
    "MISSING_EMAIL": AuthErrorCode.MISSING_EMAIL,
    "MISSING_PASSWORD": AuthErrorCode.MISSING_PASSWORD,
    "EMAIL_EXISTS": AuthErrorCode.EMAIL_ALREADY_IN_USE,
    "OPERATION_NOT_ALLOWED": AuthErrorCode.OPERATION_NOT_ALLOWED,
    "INVALID_OOB_CODE": AuthErrorCode.INVALID_ACTION_CODE,
    "EXPIRED_OOB_CODE": AuthErrorCode.EXPIRED_ACTION_CODE,
    "MISSING_CONTINUE_URI": AuthErrorCode.MISSING_CONTINUE_URI,
    "TOO_MANY_ATTEMPTS_TRY_LATER": AuthErrorCode.TOO_MANY_REQUESTS,
    "INVALID_API_KEY": AuthErrorCode.INVALID_API_KEY,
    "CONFIGURATION_NOT_FOUND": AuthErrorCode.CONFIGURATION_NOT_FOUND,
    "NOT_FOUND": AuthErrorCode.EMULATOR_CONFIG_NOT_FOUND,
}

_DEFAULT_MESSAGES: dict[AuthErrorCode, str] = {
    AuthErrorCode.EMAIL_NOT_FOUND: "There is no user record corresponding to this email.",
    AuthErrorCode.INVALID_EMAIL: "The email address is badly formatted or does not exist.",
    AuthErrorCode.INVALID_IDENTIFIER: "The identifier is missing or not a valid email address.",
    AuthErrorCode.USER_DISABLED: "The user account has been disabled by an administrator.",
    AuthErrorCode.WRONG_PASSWORD: "The password is invalid.",
    AuthErrorCode.INVALID_CREDENTIAL: "The supplied credentials are incorrect.",
    AuthErrorCode.WEAK_PASSWORD: "The password is too weak.",
    AuthErrorCode.MISSING_EMAIL: "An email address must be provided.",
    AuthErrorCode.MISSING_PASSWORD: "A password must be provided.",
    AuthErrorCode.EMAIL_ALREADY_IN_USE: "The email address is already in use by another account.",
    AuthErrorCode.OPERATION_NOT_ALLOWED: "This sign-in method is disabled for the project.",
    AuthErrorCode.INVALID_ACTION_CODE: "The action code is invalid or has already been used.",
    AuthErrorCode.EXPIRED_ACTION_CODE: "The action code has expired.",
    AuthErrorCode.MISSING_CONTINUE_URI: "A continue URL must be provided.",
    AuthErrorCode.TOO_MANY_REQUESTS: "Too many attempts, try again later.",
    AuthErrorCode.INVALID_API_KEY: "The API key is not valid.",
    AuthErrorCode.CONFIGURATION_NOT_FOUND: "The project has no authentication configuration.",
    AuthErrorCode.EMULATOR_CONFIG_NOT_FOUND: "The auth emulator is not running for this project.",
}


class AuthException(Exception):
    """Recoverable authentication error with a typed code.

    Built only by translating an upstream error string with from_error_code().
    Raising it never changes the signed-in user.

    Attributes:
        code: Domain error kind.
        message: Human-readable description.
        upstream_code: The upstream string this error was translated from,
            kept verbatim for diagnostics.
    """

    def __init__(self, code: AuthErrorCode, message: str, upstream_code: str = "") -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.upstream_code = upstream_code

    @classmethod
    def from_error_code(cls, upstream: str | None) -> "AuthException":
        """Translate an upstream error string into an AuthException.

        Total: every input yields exactly one error. Unrecognized codes map to
        AuthErrorCode.UNKNOWN with the original string as message.

        Args:
            upstream: Upstream message, either "CODE" or "CODE : detail".

        Returns:
            AuthException for the matching domain kind.
        """
        raw = upstream if isinstance(upstream, str) else ("" if upstream is None else str(upstream))
        token, _, detail = raw.partition(_DETAIL_SEPARATOR)
        code = _UPSTREAM_CODES.get(token.strip(), AuthErrorCode.UNKNOWN)

        if code is AuthErrorCode.UNKNOWN:
            message = raw or "An unknown error occurred."
        else:
            message = detail.strip() or _DEFAULT_MESSAGES[code]

        return cls(code, message, upstream_code=raw)

    def __repr__(self) -> str:
        return f"AuthException({self.code.value!r}, {self.message!r}, upstream_code={self.upstream_code!r})"

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.message}"


class GatewayError(Exception):
    """Structured error returned by the identity backend.

    Carries the backend's machine-readable message, which is the only input
    to AuthException.from_error_code().

    Attributes:
        message: Upstream error message (e.g. "EMAIL_NOT_FOUND").
        status_code: HTTP status of the failed call.
        errors: Per-error details from the response body, if any.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        errors: list[dict[str, Any]] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.errors = errors or []


class ConfigurationError(Exception):
    """Configuration is invalid or incomplete.

    Raised when:
    - Options file does not exist
    - Options file contains invalid JSON
    - Options fail Pydantic validation (e.g. empty API key)
    - FIREBASE_AUTH_EMULATOR_HOST is not in host:port form
    """
