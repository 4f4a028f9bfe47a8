"""Application-wide constants for toolkit-auth.

Constants that define client behavior.
For user-configurable settings per deployment, see config.py.
"""

__all__ = [
    # Application identity
    "APP_NAME",
    "OPTIONS_FILE_NAME",
    # Identity Toolkit endpoints
    "IDENTITY_TOOLKIT_PATH",
    "IDENTITY_TOOLKIT_ROOT_URL",
    "EMULATOR_CONFIG_PATH",
    # Emulator defaults
    "DEFAULT_EMULATOR_HOST",
    "DEFAULT_EMULATOR_PORT",
    "EMULATOR_HOST_ENV_VAR",
    # Out-of-band flows
    "DEFAULT_CONTINUE_URI",
    "OOB_CODE_PARAM",
    "EMAIL_LINK_MODE",
    # HTTP client
    "DEFAULT_HTTP_TIMEOUT_SECONDS",
    "MIN_HTTP_TIMEOUT_SECONDS",
    "MAX_HTTP_TIMEOUT_SECONDS",
]

# =============================================================================
# Application identity
# =============================================================================

APP_NAME = "toolkit-auth"

# Options file inside the OS-appropriate app directory
OPTIONS_FILE_NAME = "options.json"

# =============================================================================
# Identity Toolkit endpoints
# =============================================================================

# Relying party resource of the Identity Toolkit v3 API.
# The emulator serves the same path below http://{host}:{port}/www.googleapis.com/
IDENTITY_TOOLKIT_PATH = "identitytoolkit/v3/relyingparty/"
IDENTITY_TOOLKIT_ROOT_URL = f"https://www.googleapis.com/{IDENTITY_TOOLKIT_PATH}"

# Emulator project configuration, formatted with the project id.
# Returns {"error": {"status": ...}} when the emulator does not know the project.
EMULATOR_CONFIG_PATH = "emulator/v1/projects/{project_id}/config"

# =============================================================================
# Emulator defaults
# =============================================================================

DEFAULT_EMULATOR_HOST = "localhost"
DEFAULT_EMULATOR_PORT = 9099

# Same variable the Firebase SDKs honour, format "host:port"
EMULATOR_HOST_ENV_VAR = "FIREBASE_AUTH_EMULATOR_HOST"

# =============================================================================
# Out-of-band flows (password reset, email link sign-in)
# =============================================================================

# createAuthUri requires a continue URI even when only listing providers
DEFAULT_CONTINUE_URI = "http://localhost:8080/app"

# Query parameters carried by email action links
OOB_CODE_PARAM = "oobCode"
EMAIL_LINK_MODE = "signIn"

# =============================================================================
# HTTP client
# =============================================================================

DEFAULT_HTTP_TIMEOUT_SECONDS = 10
MIN_HTTP_TIMEOUT_SECONDS = 1
MAX_HTTP_TIMEOUT_SECONDS = 300
