"""Immutable value objects describing an authenticated principal.

All models are frozen: a new sign-in produces a new User that replaces the
previous one, it never mutates it.
"""

from __future__ import annotations

__all__ = [
    "AdditionalUserInfo",
    "AuthCredential",
    "ProviderId",
    "SignInMethod",
    "User",
    "UserCredential",
]

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ProviderId(str, Enum):
    """Provider that produced a session."""

    PASSWORD = "password"
    ANONYMOUS = "anonymous"


class SignInMethod(str, Enum):
    """How the user proved their identity to the provider.

    Email link sign-in belongs to the password provider but is its own method.
    """

    PASSWORD = "password"
    ANONYMOUS = "anonymous"
    EMAIL_LINK = "emailLink"


class User(BaseModel):
    """Authenticated principal.

    Attributes:
        uid: Backend user id (localId).
        email: Email address, None for anonymous users.
        display_name: Optional display name.
        photo_url: Optional profile photo URL.
        email_verified: Whether the email address was verified.
        is_anonymous: True when the user has no email.
        id_token: ID token issued with this sign-in.
        refresh_token: Refresh token issued with this sign-in.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    uid: str = Field(min_length=1)
    email: str | None = None
    display_name: str | None = None
    photo_url: str | None = None
    email_verified: bool = False
    is_anonymous: bool = False
    id_token: str | None = Field(default=None, repr=False)
    refresh_token: str | None = Field(default=None, repr=False)

    @classmethod
    def from_response(cls, data: dict[str, Any]) -> "User":
        """Build a User from an Identity Toolkit response payload.

        Args:
            data: verifyPassword / signupNewUser / emailLinkSignin response.

        Returns:
            User for the signed-in account.

        Raises:
            pydantic.ValidationError: If the payload has no localId.
        """
        # The backend echoes "" rather than omitting email for anonymous accounts
        email = data.get("email") or None
        return cls(
            uid=data.get("localId", ""),
            email=email,
            display_name=data.get("displayName") or None,
            photo_url=data.get("photoUrl") or None,
            email_verified=bool(data.get("emailVerified", False)),
            is_anonymous=email is None,
            id_token=data.get("idToken"),
            refresh_token=data.get("refreshToken"),
        )


class AuthCredential(BaseModel):
    """Which provider and method produced a session."""

    model_config = ConfigDict(frozen=True)

    provider_id: ProviderId
    sign_in_method: SignInMethod


class AdditionalUserInfo(BaseModel):
    """Extra facts about an authentication result."""

    model_config = ConfigDict(frozen=True)

    is_new_user: bool
    provider_id: ProviderId | None = None


class UserCredential(BaseModel):
    """Result of a successful authentication operation."""

    model_config = ConfigDict(frozen=True)

    user: User
    credential: AuthCredential
    additional_user_info: AdditionalUserInfo
