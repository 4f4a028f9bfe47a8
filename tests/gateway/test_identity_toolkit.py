"""Tests for the httpx Identity Toolkit gateway.

Requests are served by httpx.MockTransport so URL, query and body can be
inspected without a network.
"""

from __future__ import annotations

import json
from typing import Any, Callable
from unittest.mock import MagicMock

import httpx
import pytest

from toolkit_auth.config import AuthOptions
from toolkit_auth.exceptions import GatewayError
from toolkit_auth.gateway import IdentityGateway, IdentityToolkitGateway, OobRequestType

EMULATOR_ROOT = "http://localhost:9099/www.googleapis.com/identitytoolkit/v3/relyingparty/"


class RecordingTransport:
    """Mock transport handler that records requests and replies with a canned response."""

    def __init__(self, status_code: int = 200, body: Any = None, content: bytes | None = None) -> None:
        self.requests: list[httpx.Request] = []
        self._status_code = status_code
        self._body = {} if body is None else body
        self._content = content

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self._content is not None:
            return httpx.Response(self._status_code, content=self._content)
        return httpx.Response(self._status_code, json=self._body)

    @property
    def last_body(self) -> dict[str, Any]:
        return json.loads(self.requests[-1].content)


@pytest.fixture
def make_gateway(options: AuthOptions) -> Callable[..., tuple[IdentityToolkitGateway, RecordingTransport]]:
    """Build a gateway whose client is served by a RecordingTransport."""

    def _make(
        status_code: int = 200,
        body: Any = None,
        content: bytes | None = None,
        gateway_options: AuthOptions | None = None,
    ) -> tuple[IdentityToolkitGateway, RecordingTransport]:
        transport = RecordingTransport(status_code, body, content)
        client = httpx.Client(transport=httpx.MockTransport(transport))
        return IdentityToolkitGateway(gateway_options or options, http_client=client), transport

    return _make


class TestRequests:
    """Tests for request construction."""

    def test_satisfies_gateway_protocol(self, options: AuthOptions) -> None:
        gateway = IdentityToolkitGateway(options, http_client=MagicMock(spec=httpx.Client))
        assert isinstance(gateway, IdentityGateway)

    def test_verify_password_url_key_and_body(self, make_gateway) -> None:
        """verifyPassword is posted below the emulator root with the API key as query."""
        # Arrange
        gateway, transport = make_gateway(body={"localId": "uid-a"})

        # Act
        payload = gateway.verify_password("a@x.com", "pw")

        # Assert
        request = transport.requests[0]
        assert payload == {"localId": "uid-a"}
        assert request.method == "POST"
        assert str(request.url).split("?")[0] == f"{EMULATOR_ROOT}verifyPassword"
        assert request.url.params["key"] == "test-api-key"
        assert transport.last_body == {"email": "a@x.com", "password": "pw", "returnSecureToken": True}

    def test_production_root(self, make_gateway) -> None:
        gateway, transport = make_gateway(
            gateway_options=AuthOptions(api_key="prod-key", project_id="p"),
        )

        gateway.create_auth_uri("a@x.com", "http://localhost:8080/app")

        assert str(transport.requests[0].url).startswith(
            "https://www.googleapis.com/identitytoolkit/v3/relyingparty/createAuthUri?key=prod-key"
        )
        assert transport.last_body == {"identifier": "a@x.com", "continueUri": "http://localhost:8080/app"}

    def test_anonymous_signup_sends_empty_body(self, make_gateway) -> None:
        """None fields are left out of the request body."""
        gateway, transport = make_gateway(body={"localId": "uid-anon"})

        gateway.signup_new_user()

        assert str(transport.requests[0].url).split("?")[0].endswith("signupNewUser")
        assert transport.last_body == {}

    @pytest.mark.parametrize(
        ("request_type", "continue_url", "expected"),
        [
            (
                OobRequestType.PASSWORD_RESET,
                None,
                {"email": "a@x.com", "requestType": "PASSWORD_RESET"},
            ),
            (
                OobRequestType.EMAIL_SIGNIN,
                "http://localhost:8080/app",
                {"email": "a@x.com", "requestType": "EMAIL_SIGNIN", "continueUrl": "http://localhost:8080/app"},
            ),
        ],
        ids=["password_reset", "email_signin"],
    )
    def test_oob_confirmation_code_body(
        self, make_gateway, request_type: OobRequestType, continue_url: str | None, expected: dict[str, Any]
    ) -> None:
        gateway, transport = make_gateway(body={"email": "a@x.com"})

        gateway.get_oob_confirmation_code("a@x.com", request_type, continue_url=continue_url)

        assert transport.last_body == expected

    def test_email_link_signin_body(self, make_gateway) -> None:
        gateway, transport = make_gateway(body={"localId": "uid-a"})

        gateway.email_link_signin("a@x.com", "CODE123")

        assert transport.last_body == {"email": "a@x.com", "oobCode": "CODE123"}


class TestErrors:
    """Tests for error responses."""

    def test_structured_error_raises_gateway_error(self, make_gateway) -> None:
        """Given an error body, raises GatewayError with the backend message."""
        # Arrange
        body = {
            "error": {
                "code": 400,
                "message": "EMAIL_NOT_FOUND",
                "errors": [{"message": "EMAIL_NOT_FOUND", "domain": "global", "reason": "invalid"}],
            }
        }
        gateway, _ = make_gateway(status_code=400, body=body)

        # Act
        with pytest.raises(GatewayError) as exc_info:
            gateway.verify_password("a@x.com", "pw")

        # Assert
        assert exc_info.value.message == "EMAIL_NOT_FOUND"
        assert exc_info.value.status_code == 400
        assert exc_info.value.errors[0]["reason"] == "invalid"

    def test_message_with_detail_is_kept_verbatim(self, make_gateway) -> None:
        message = "WEAK_PASSWORD : Password should be at least 6 characters"
        gateway, _ = make_gateway(status_code=400, body={"error": {"code": 400, "message": message}})

        with pytest.raises(GatewayError) as exc_info:
            gateway.signup_new_user(email="b@x.com", password="pw")

        assert exc_info.value.message == message
        assert exc_info.value.errors == []

    @pytest.mark.parametrize(
        ("status_code", "content"),
        [
            (502, b"<html>Bad Gateway</html>"),
            (500, b'{"unexpected": true}'),
        ],
        ids=["html_body", "json_without_error"],
    )
    def test_unstructured_error_raises_http_status_error(
        self, make_gateway, status_code: int, content: bytes
    ) -> None:
        gateway, _ = make_gateway(status_code=status_code, content=content)

        with pytest.raises(httpx.HTTPStatusError):
            gateway.verify_password("a@x.com", "pw")

    def test_transport_error_propagates(self, options: AuthOptions) -> None:
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = httpx.Client(transport=httpx.MockTransport(refuse))
        gateway = IdentityToolkitGateway(options, http_client=client)

        with pytest.raises(httpx.ConnectError):
            gateway.verify_password("a@x.com", "pw")


class TestGetJson:
    """Tests for get_json()."""

    def test_returns_error_body_without_raising(self, make_gateway) -> None:
        """Error statuses are returned as data for the caller to inspect."""
        body = {"error": {"code": 404, "status": "NOT_FOUND"}}
        gateway, transport = make_gateway(status_code=404, body=body)

        result = gateway.get_json("http://localhost:9099/emulator/v1/projects/demo-project/config")

        assert result == body
        assert transport.requests[0].method == "GET"


class TestClientOwnership:
    """Tests for HTTP client lifecycle."""

    def test_injected_client_is_not_closed(self, options: AuthOptions) -> None:
        client = MagicMock(spec=httpx.Client)

        with IdentityToolkitGateway(options, http_client=client):
            pass

        client.close.assert_not_called()

    def test_owned_client_is_closed(self, options: AuthOptions) -> None:
        gateway = IdentityToolkitGateway(options)

        gateway.close()

        assert gateway._client.is_closed
