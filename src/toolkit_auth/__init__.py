"""Client-side authentication session manager for the Identity Toolkit REST API.

Usage:
    from toolkit_auth import Auth, AuthOptions

    auth = Auth(AuthOptions(api_key="...", project_id="my-project"))
    credential = auth.sign_in_with_email_and_password("a@x.com", "pw")
"""

from toolkit_auth.auth import Auth
from toolkit_auth.config import AuthOptions, load_auth_options
from toolkit_auth.exceptions import AuthErrorCode, AuthException, ConfigurationError, GatewayError
from toolkit_auth.gateway import IdentityGateway, IdentityToolkitGateway, OobRequestType
from toolkit_auth.models import (
    AdditionalUserInfo,
    AuthCredential,
    ProviderId,
    SignInMethod,
    User,
    UserCredential,
)
from toolkit_auth.streams import UserStream

__version__ = "0.1.0"

__all__ = [
    "AdditionalUserInfo",
    "Auth",
    "AuthCredential",
    "AuthErrorCode",
    "AuthException",
    "AuthOptions",
    "ConfigurationError",
    "GatewayError",
    "IdentityGateway",
    "IdentityToolkitGateway",
    "OobRequestType",
    "ProviderId",
    "SignInMethod",
    "User",
    "UserCredential",
    "UserStream",
    "load_auth_options",
]
