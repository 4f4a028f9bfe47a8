"""Contract between the session manager and the identity backend."""

from __future__ import annotations

__all__ = [
    "IdentityGateway",
    "OobRequestType",
]

from enum import Enum
from typing import Any, Protocol, runtime_checkable


class OobRequestType(str, Enum):
    """Kinds of out-of-band messages getOobConfirmationCode can send."""

    PASSWORD_RESET = "PASSWORD_RESET"
    EMAIL_SIGNIN = "EMAIL_SIGNIN"
    VERIFY_EMAIL = "VERIFY_EMAIL"


@runtime_checkable
class IdentityGateway(Protocol):
    """Network capability consumed by Auth.

    Every call returns the decoded JSON response. Structured backend failures
    raise GatewayError; any other failure (transport, decoding) is raised
    as-is. Timeouts and cancellation belong to the implementation.
    """

    def verify_password(self, email: str, password: str) -> dict[str, Any]:
        """Sign in with email and password."""
        ...

    def signup_new_user(self, email: str | None = None, password: str | None = None) -> dict[str, Any]:
        """Create an account. Without email and password the account is anonymous."""
        ...

    def create_auth_uri(self, identifier: str, continue_uri: str) -> dict[str, Any]:
        """Look up an identifier; the response lists its providers in allProviders."""
        ...

    def get_oob_confirmation_code(
        self,
        email: str,
        request_type: OobRequestType,
        continue_url: str | None = None,
    ) -> dict[str, Any]:
        """Send an out-of-band email; the response echoes the email."""
        ...

    def email_link_signin(self, email: str, oob_code: str) -> dict[str, Any]:
        """Complete an email link sign-in with the code carried by the link."""
        ...

    def get_json(self, url: str) -> dict[str, Any]:
        """Plain GET returning the decoded JSON body, whatever the status."""
        ...

    def close(self) -> None:
        """Release network resources."""
        ...
