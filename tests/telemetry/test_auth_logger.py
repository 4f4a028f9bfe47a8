"""Tests for the session event logger."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest
from pydantic import ValidationError

from toolkit_auth.exceptions import AuthException
from toolkit_auth.models import (
    AdditionalUserInfo,
    AuthCredential,
    ProviderId,
    SignInMethod,
    User,
    UserCredential,
)
from toolkit_auth.telemetry.auth_logger import AuthEvent, create_auth_logger
from toolkit_auth.utils.logging.logging_helpers import hash_sensitive_id


def read_entries(path: Path) -> list[dict]:
    return [json.loads(line) for line in path.read_text().splitlines()]


@pytest.fixture
def log_path(tmp_path: Path) -> Path:
    return tmp_path / "logs" / "auth.jsonl"


@pytest.fixture
def user_credential() -> UserCredential:
    return UserCredential(
        user=User(uid="uid-a", email="a@x.com", id_token="secret-id-token", refresh_token="secret-refresh"),
        credential=AuthCredential(provider_id=ProviderId.PASSWORD, sign_in_method=SignInMethod.PASSWORD),
        additional_user_info=AdditionalUserInfo(is_new_user=False, provider_id=ProviderId.PASSWORD),
    )


@pytest.fixture(autouse=True)
def close_event_handlers():
    """Release the file handle after each test."""
    yield
    for handler in logging.getLogger("toolkit-auth.events").handlers:
        handler.close()


class TestAuthLogger:
    """Tests for AuthLogger JSONL output."""

    def test_signed_in_entry(self, log_path: Path, user_credential: UserCredential) -> None:
        """A sign-in writes one INFO entry with a hashed uid and no tokens."""
        # Arrange
        auth_logger = create_auth_logger(log_path)

        # Act
        auth_logger.log_signed_in("sign_in_with_email_and_password", user_credential)

        # Assert
        [entry] = read_entries(log_path)
        assert entry["event_type"] == "signed_in"
        assert entry["status"] == "Success"
        assert entry["level"] == "INFO"
        assert entry["uid"] == hash_sensitive_id("uid-a")
        assert entry["provider_id"] == "password"
        assert entry["is_new_user"] is False
        assert entry["time"].endswith("Z")
        raw = log_path.read_text()
        assert "uid-a" not in raw
        assert "secret" not in raw
        assert "a@x.com" not in raw

    def test_signed_out_entries(self, log_path: Path) -> None:
        auth_logger = create_auth_logger(log_path)

        auth_logger.log_signed_out("uid-a")
        auth_logger.log_signed_out(None)

        first, second = read_entries(log_path)
        assert first["uid"] == hash_sensitive_id("uid-a")
        assert "uid" not in second  # None values are dropped

    def test_auth_failed_entry(self, log_path: Path) -> None:
        """Failures are logged at WARNING with code and verbatim upstream code."""
        auth_logger = create_auth_logger(log_path)
        error = AuthException.from_error_code("INVALID_PASSWORD")

        auth_logger.log_auth_failed("sign_in_with_email_and_password", error)

        [entry] = read_entries(log_path)
        assert entry["level"] == "WARNING"
        assert entry["status"] == "Failure"
        assert entry["error_code"] == "wrong-password"
        assert entry["upstream_code"] == "INVALID_PASSWORD"

    def test_log_directory_is_created(self, log_path: Path) -> None:
        create_auth_logger(log_path)

        assert log_path.parent.is_dir()


class TestAuthEvent:
    """Tests for the AuthEvent model."""

    def test_rejects_unknown_fields(self) -> None:
        with pytest.raises(ValidationError):
            AuthEvent(event_type="signed_in", status="Success", operation="x", id_token="t")

    def test_rejects_unknown_event_type(self) -> None:
        with pytest.raises(ValidationError):
            AuthEvent(event_type="token_refreshed", status="Success", operation="x")


class TestHashSensitiveId:
    """Tests for hash_sensitive_id()."""

    def test_deterministic_prefix(self) -> None:
        hashed = hash_sensitive_id("uid-a")

        assert hashed == hash_sensitive_id("uid-a")
        assert hashed.startswith("sha256:")
        assert len(hashed) == len("sha256:") + 8

    @pytest.mark.parametrize("value", ["", None], ids=["empty", "none"])
    def test_empty(self, value: str | None) -> None:
        assert hash_sensitive_id(value) == "sha256:empty"
