"""Remote identity gateway.

The session manager only depends on the IdentityGateway protocol.
IdentityToolkitGateway implements it over httpx against the Identity
Toolkit REST API or the local Auth emulator.
"""

from toolkit_auth.gateway.identity_toolkit import IdentityToolkitGateway
from toolkit_auth.gateway.protocol import IdentityGateway, OobRequestType

__all__ = [
    "IdentityGateway",
    "IdentityToolkitGateway",
    "OobRequestType",
]
