"""Session manager for the Identity Toolkit REST API.

Auth is the single authority for "who is signed in now" and the single place
session transitions are published.

Every state-changing operation follows the same shape:
1. Call the gateway
2. On success build User / AuthCredential / UserCredential
3. Commit: assign current_user, publish on on_auth_state_changed, then on
   on_id_token_changed (one critical section)
4. On failure translate GatewayError into AuthException and raise; the
   session is left untouched

Both streams always receive the same value: token refresh is out of scope,
so every identity change is also a token change.
"""

from __future__ import annotations

__all__ = ["Auth"]

import threading
from collections import deque
from contextlib import contextmanager
from typing import TYPE_CHECKING, Iterator
from urllib.parse import parse_qs, urlsplit

from toolkit_auth.constants import EMAIL_LINK_MODE, EMULATOR_CONFIG_PATH, OOB_CODE_PARAM
from toolkit_auth.exceptions import AuthException, GatewayError
from toolkit_auth.gateway.identity_toolkit import IdentityToolkitGateway
from toolkit_auth.gateway.protocol import OobRequestType
from toolkit_auth.models import (
    AdditionalUserInfo,
    AuthCredential,
    ProviderId,
    SignInMethod,
    User,
    UserCredential,
)
from toolkit_auth.streams import UserStream
from toolkit_auth.telemetry.system_logger import get_system_logger

if TYPE_CHECKING:
    from toolkit_auth.config import AuthOptions
    from toolkit_auth.gateway.protocol import IdentityGateway
    from toolkit_auth.telemetry.auth_logger import AuthLogger


def _link_params(link: str) -> dict[str, list[str]]:
    """Query parameters of an email action link."""
    return parse_qs(urlsplit(link).query)


class Auth:
    """Client-side authentication session.

    Usage:
        auth = Auth(AuthOptions(api_key="...", project_id="my-project"))
        auth.on_auth_state_changed.subscribe(on_user)

        credential = auth.sign_in_with_email_and_password("a@x.com", "pw")
        assert auth.current_user == credential.user

        auth.sign_out()
    """

    def __init__(
        self,
        options: "AuthOptions",
        gateway: "IdentityGateway | None" = None,
        auth_logger: "AuthLogger | None" = None,
    ) -> None:
        """Initialize a signed-out session.

        Args:
            options: Backend and client options.
            gateway: Identity backend (default: IdentityToolkitGateway for options).
            auth_logger: Optional session event log.
        """
        self.options = options
        self._gateway = gateway or IdentityToolkitGateway(options)
        self._owns_gateway = gateway is None
        self._auth_logger = auth_logger

        self._current_user: User | None = None
        # Re-entrant: a listener may call sign_out() while being notified.
        # Such nested commits are queued and published after the current one.
        self._lock = threading.RLock()
        self._pending: deque[User | None] = deque()
        self._publishing = False

        self._auth_state_changed = UserStream("auth_state_changed")
        self._id_token_changed = UserStream("id_token_changed")

    def __enter__(self) -> "Auth":
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the gateway if this instance created it."""
        if self._owns_gateway:
            self._gateway.close()

    # -------------------------------------------------------------------------
    # Session state
    # -------------------------------------------------------------------------

    @property
    def current_user(self) -> User | None:
        """The signed-in user, or None when signed out."""
        return self._current_user

    @property
    def on_auth_state_changed(self) -> UserStream:
        """Sends the user on every sign-in and None on sign-out."""
        return self._auth_state_changed

    @property
    def on_id_token_changed(self) -> UserStream:
        """Sends the user whenever its ID token changes, None on sign-out."""
        return self._id_token_changed

    def _commit(self, user: User | None) -> None:
        """Assign the session and publish it on both streams.

        A commit made by a listener during a publish is queued and handled
        by the outermost call once both streams have received the current
        value, so the slot and the last value on each stream always agree.
        """
        with self._lock:
            self._pending.append(user)
            if self._publishing:
                return

            self._publishing = True
            try:
                while self._pending:
                    value = self._pending.popleft()
                    self._current_user = value
                    self._auth_state_changed.publish(value)
                    self._id_token_changed.publish(value)
            finally:
                self._publishing = False
                self._pending.clear()

    def _sign_in(
        self,
        operation: str,
        payload: dict,
        credential: AuthCredential,
        is_new_user: bool,
    ) -> UserCredential:
        # Everything that can fail happens before the commit
        result = UserCredential(
            user=User.from_response(payload),
            credential=credential,
            additional_user_info=AdditionalUserInfo(
                is_new_user=is_new_user,
                provider_id=credential.provider_id,
            ),
        )
        self._commit(result.user)

        if self._auth_logger is not None:
            self._auth_logger.log_signed_in(operation, result)
        return result

    @contextmanager
    def _translate_errors(self, operation: str) -> Iterator[None]:
        """Translate gateway errors and record every failure before it propagates."""
        try:
            yield
        except GatewayError as e:
            error = AuthException.from_error_code(e.message)
            self._log_auth_failure(operation, error)
            raise error from e
        except AuthException as e:
            self._log_auth_failure(operation, e)
            raise
        except Exception as e:
            get_system_logger().error(
                {"event": "operation_failed", "operation": operation, "error_type": type(e).__name__},
                exc_info=True,
            )
            raise

    def _log_auth_failure(self, operation: str, error: AuthException) -> None:
        get_system_logger().warning(
            {
                "event": "auth_error",
                "operation": operation,
                "code": error.code.value,
                "upstream_code": error.upstream_code,
            }
        )
        if self._auth_logger is not None:
            self._auth_logger.log_auth_failed(operation, error)

    @staticmethod
    def _require(value: str, missing_code: str) -> None:
        # Same error the backend returns for a missing field, without the round trip
        if not value:
            raise AuthException.from_error_code(missing_code)

    # -------------------------------------------------------------------------
    # Sign-in / sign-up
    # -------------------------------------------------------------------------

    def sign_in_with_email_and_password(self, email: str, password: str) -> UserCredential:
        """Sign a user in with email and password.

        Raises:
            AuthException: e.g. email-not-found, wrong-password, user-disabled,
                missing-email, missing-password.
        """
        operation = "sign_in_with_email_and_password"
        with self._translate_errors(operation):
            self._require(email, "MISSING_EMAIL")
            self._require(password, "MISSING_PASSWORD")
            payload = self._gateway.verify_password(email, password)
            return self._sign_in(
                operation,
                payload,
                AuthCredential(provider_id=ProviderId.PASSWORD, sign_in_method=SignInMethod.PASSWORD),
                is_new_user=False,
            )

    def create_user_with_email_and_password(self, email: str, password: str) -> UserCredential:
        """Create an account with email and password and sign it in.

        Raises:
            AuthException: e.g. email-already-in-use, weak-password, invalid-email.
        """
        operation = "create_user_with_email_and_password"
        with self._translate_errors(operation):
            self._require(email, "MISSING_EMAIL")
            self._require(password, "MISSING_PASSWORD")
            payload = self._gateway.signup_new_user(email=email, password=password)
            return self._sign_in(
                operation,
                payload,
                AuthCredential(provider_id=ProviderId.PASSWORD, sign_in_method=SignInMethod.PASSWORD),
                is_new_user=True,
            )

    def sign_in_anonymously(self) -> UserCredential:
        """Create an anonymous account and sign it in.

        Raises:
            AuthException: e.g. operation-not-allowed when anonymous auth is disabled.
        """
        operation = "sign_in_anonymously"
        with self._translate_errors(operation):
            payload = self._gateway.signup_new_user()
            return self._sign_in(
                operation,
                payload,
                AuthCredential(provider_id=ProviderId.ANONYMOUS, sign_in_method=SignInMethod.ANONYMOUS),
                is_new_user=True,
            )

    def sign_in_with_email_link(self, email: str, email_link: str) -> UserCredential:
        """Complete a passwordless sign-in started with send_sign_in_link_to_email().

        Args:
            email: Address the link was sent to.
            email_link: The full link from the email (must carry an oobCode).

        Raises:
            AuthException: e.g. invalid-action-code, expired-action-code, missing-email.
        """
        operation = "sign_in_with_email_link"
        with self._translate_errors(operation):
            self._require(email, "MISSING_EMAIL")
            oob_code = _link_params(email_link).get(OOB_CODE_PARAM, [""])[0]
            self._require(oob_code, "INVALID_OOB_CODE")
            payload = self._gateway.email_link_signin(email, oob_code)
            return self._sign_in(
                operation,
                payload,
                AuthCredential(provider_id=ProviderId.PASSWORD, sign_in_method=SignInMethod.EMAIL_LINK),
                is_new_user=bool(payload.get("isNewUser", False)),
            )

    @staticmethod
    def is_sign_in_with_email_link(email_link: str) -> bool:
        """Whether a link is an email sign-in link (mode=signIn with an oobCode)."""
        params = _link_params(email_link)
        return bool(params.get(OOB_CODE_PARAM, [""])[0]) and params.get("mode", [""])[0] == EMAIL_LINK_MODE

    def sign_out(self) -> None:
        """Clear the session and publish None on both streams.

        Local only; always succeeds and may be called repeatedly.
        """
        with self._lock:
            previous = self._current_user
            self._commit(None)

        if self._auth_logger is not None:
            self._auth_logger.log_signed_out(previous.uid if previous else None)

    # -------------------------------------------------------------------------
    # Lookups and out-of-band emails (no session change)
    # -------------------------------------------------------------------------

    def fetch_sign_in_methods_for_email(self, email: str) -> list[str]:
        """List the providers previously used with an email address.

        Returns:
            Provider ids in backend order, empty if none are registered.

        Raises:
            AuthException: invalid-email (no such user) or invalid-identifier
                (not an email address).
        """
        with self._translate_errors("fetch_sign_in_methods_for_email"):
            payload = self._gateway.create_auth_uri(email, self.options.continue_uri)
            return list(payload.get("allProviders") or [])

    def send_password_reset_email(self, email: str) -> str | None:
        """Send a password reset email.

        Returns:
            The email address echoed by the backend.

        Raises:
            AuthException: email-not-found if no account uses this address.
        """
        with self._translate_errors("send_password_reset_email"):
            payload = self._gateway.get_oob_confirmation_code(email, OobRequestType.PASSWORD_RESET)
            return payload.get("email")

    def send_sign_in_link_to_email(self, email: str, continue_url: str | None = None) -> str | None:
        """Send a passwordless sign-in link.

        Args:
            email: Recipient.
            continue_url: Where the link leads back to (default: options.continue_uri).

        Returns:
            The email address echoed by the backend.

        Raises:
            AuthException: email-not-found if no account uses this address.
        """
        with self._translate_errors("send_sign_in_link_to_email"):
            payload = self._gateway.get_oob_confirmation_code(
                email,
                OobRequestType.EMAIL_SIGNIN,
                continue_url=continue_url or self.options.continue_uri,
            )
            return payload.get("email")

    # -------------------------------------------------------------------------
    # Environment
    # -------------------------------------------------------------------------

    def use_auth_emulator(self, host: str | None = None, port: int | None = None) -> None:
        """Check that an Auth emulator is serving this project.

        Reads http://{host}:{port}/emulator/v1/projects/{project_id}/config.
        Does not change the session.

        Args:
            host: Emulator host (default: options.host).
            port: Emulator port (default: options.port).

        Raises:
            AuthException: If the emulator answers with an error (e.g.
                emulator-config-not-found).
            httpx.HTTPError: If nothing is listening.
        """
        host = host or self.options.host
        port = port or self.options.port
        path = EMULATOR_CONFIG_PATH.format(project_id=self.options.project_id)

        with self._translate_errors("use_auth_emulator"):
            config = self._gateway.get_json(f"http://{host}:{port}/{path}")
            if isinstance(config, dict) and "error" in config:
                error = config["error"]
                status = error.get("status") if isinstance(error, dict) else error
                raise AuthException.from_error_code(status)
