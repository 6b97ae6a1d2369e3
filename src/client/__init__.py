"""
Reviewer-side client: device identity, access gateway and access guard.
"""

from .access_guard import (
    DENIED_MESSAGE,
    OTHER_SCOPE_MESSAGE,
    TOKEN_REQUIRED_MESSAGE,
    AccessGuard,
    GuardState,
)
from .device import DeviceIdentity
from .gateway import AccessGateway, AccessGatewayError, HttpAccessGateway

__all__ = [
    "AccessGuard",
    "GuardState",
    "DENIED_MESSAGE",
    "OTHER_SCOPE_MESSAGE",
    "TOKEN_REQUIRED_MESSAGE",
    "DeviceIdentity",
    "AccessGateway",
    "AccessGatewayError",
    "HttpAccessGateway",
]
