"""httpx implementation of the identity gateway.

Talks to the relying party resource of the Identity Toolkit v3 API:

    POST {root}verifyPassword?key={api_key}
    POST {root}signupNewUser?key={api_key}
    POST {root}createAuthUri?key={api_key}
    POST {root}getOobConfirmationCode?key={api_key}
    POST {root}emailLinkSignin?key={api_key}

where root is https://www.googleapis.com/identitytoolkit/v3/relyingparty/ or,
with use_emulator, http://{host}:{port}/www.googleapis.com/identitytoolkit/v3/relyingparty/.

Error responses have the shape
    {"error": {"code": 400, "message": "EMAIL_NOT_FOUND", "errors": [...]}}
and are raised as GatewayError.
"""

from __future__ import annotations

__all__ = ["IdentityToolkitGateway"]

from typing import TYPE_CHECKING, Any

import httpx

from toolkit_auth.exceptions import GatewayError
from toolkit_auth.gateway.protocol import OobRequestType

if TYPE_CHECKING:
    from toolkit_auth.config import AuthOptions


class IdentityToolkitGateway:
    """Identity Toolkit REST client.

    Usage:
        with IdentityToolkitGateway(options) as gateway:
            payload = gateway.verify_password("a@x.com", "pw")
    """

    def __init__(
        self,
        options: "AuthOptions",
        http_client: httpx.Client | None = None,
    ) -> None:
        """Initialize gateway.

        Args:
            options: Backend selection, API key and timeout.
            http_client: Optional httpx client (for testing).
        """
        self._options = options
        self._client = http_client or httpx.Client(timeout=options.timeout_seconds)
        self._owns_client = http_client is None
        self._root_url = options.root_url

    def __enter__(self) -> "IdentityToolkitGateway":
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def close(self) -> None:
        """Close HTTP client if we own it."""
        if self._owns_client:
            self._client.close()

    def verify_password(self, email: str, password: str) -> dict[str, Any]:
        return self._post(
            "verifyPassword",
            {"email": email, "password": password, "returnSecureToken": True},
        )

    def signup_new_user(self, email: str | None = None, password: str | None = None) -> dict[str, Any]:
        return self._post("signupNewUser", {"email": email, "password": password})

    def create_auth_uri(self, identifier: str, continue_uri: str) -> dict[str, Any]:
        return self._post("createAuthUri", {"identifier": identifier, "continueUri": continue_uri})

    def get_oob_confirmation_code(
        self,
        email: str,
        request_type: OobRequestType,
        continue_url: str | None = None,
    ) -> dict[str, Any]:
        return self._post(
            "getOobConfirmationCode",
            {
                "email": email,
                "requestType": OobRequestType(request_type).value,
                "continueUrl": continue_url,
            },
        )

    def email_link_signin(self, email: str, oob_code: str) -> dict[str, Any]:
        return self._post("emailLinkSignin", {"email": email, "oobCode": oob_code})

    def get_json(self, url: str) -> dict[str, Any]:
        """GET url and decode the JSON body without checking the status.

        Raises:
            httpx.HTTPError: On transport failure.
            ValueError: If the body is not JSON.
        """
        response = self._client.get(url)
        return response.json()

    def _post(self, method: str, body: dict[str, Any]) -> dict[str, Any]:
        """POST a relying party method.

        Args:
            method: API method name (e.g., "verifyPassword").
            body: Request fields; None values are left out.

        Returns:
            Decoded JSON response.

        Raises:
            GatewayError: If the backend returned a structured error.
            httpx.HTTPStatusError: If an error response has no structured body.
            httpx.HTTPError: On transport failure.
        """
        response = self._client.post(
            f"{self._root_url}{method}",
            params={"key": self._options.api_key},
            json={key: value for key, value in body.items() if value is not None},
        )

        if response.is_success:
            return response.json()

        error = _extract_error(response)
        if error is not None:
            raise GatewayError(
                error["message"],
                status_code=response.status_code,
                errors=error.get("errors"),
            )

        response.raise_for_status()
        # 1xx/3xx are neither success nor raised by raise_for_status
        raise httpx.HTTPStatusError(
            f"Unexpected status {response.status_code} from {method}",
            request=response.request,
            response=response,
        )


def _extract_error(response: httpx.Response) -> dict[str, Any] | None:
    """Return the "error" object of an error body, or None if there isn't one."""
    try:
        payload = response.json()
    except ValueError:
        return None

    if not isinstance(payload, dict):
        return None

    error = payload.get("error")
    if isinstance(error, dict) and isinstance(error.get("message"), str):
        return error
    return None
