"""Shared fixtures for toolkit-auth tests."""

from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock

import pytest

from toolkit_auth.auth import Auth
from toolkit_auth.config import AuthOptions
from toolkit_auth.gateway.protocol import IdentityGateway
from toolkit_auth.models import User


class Recorder:
    """Listener that remembers every value it receives."""

    def __init__(self) -> None:
        self.events: list[User | None] = []

    def __call__(self, user: User | None) -> None:
        self.events.append(user)

    @property
    def last(self) -> User | None:
        return self.events[-1]


@pytest.fixture
def options() -> AuthOptions:
    """Options pointing at the local emulator."""
    return AuthOptions(api_key="test-api-key", project_id="demo-project", use_emulator=True)


@pytest.fixture
def sign_in_payload() -> dict[str, Any]:
    """verifyPassword response for a@x.com."""
    return {
        "kind": "identitytoolkit#VerifyPasswordResponse",
        "localId": "uid-a",
        "email": "a@x.com",
        "displayName": "",
        "idToken": "id-token-a",
        "registered": True,
        "refreshToken": "refresh-token-a",
        "expiresIn": "3600",
    }


@pytest.fixture
def sign_up_payload() -> dict[str, Any]:
    """signupNewUser response for b@x.com."""
    return {
        "kind": "identitytoolkit#SignupNewUserResponse",
        "localId": "uid-b",
        "email": "b@x.com",
        "idToken": "id-token-b",
        "refreshToken": "refresh-token-b",
        "expiresIn": "3600",
    }


@pytest.fixture
def anonymous_payload() -> dict[str, Any]:
    """signupNewUser response without credentials."""
    return {
        "kind": "identitytoolkit#SignupNewUserResponse",
        "localId": "uid-anon",
        "idToken": "id-token-anon",
        "refreshToken": "refresh-token-anon",
        "expiresIn": "3600",
    }


@pytest.fixture
def gateway() -> MagicMock:
    """Mock identity gateway with no canned responses."""
    return MagicMock(spec=IdentityGateway)


@pytest.fixture
def auth(options: AuthOptions, gateway: MagicMock) -> Auth:
    """Signed-out Auth backed by the mock gateway."""
    return Auth(options, gateway=gateway)


@pytest.fixture
def auth_state() -> Recorder:
    return Recorder()


@pytest.fixture
def id_token() -> Recorder:
    return Recorder()


@pytest.fixture
def subscribed_auth(auth: Auth, auth_state: Recorder, id_token: Recorder) -> Auth:
    """Auth with a Recorder on each stream."""
    auth.on_auth_state_changed.subscribe(auth_state)
    auth.on_id_token_changed.subscribe(id_token)
    return auth


@pytest.fixture
def make_recorder() -> type[Recorder]:
    """Factory for additional listeners."""
    return Recorder
