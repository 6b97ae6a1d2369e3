"""
Review Access Domain Enums

All enumeration types used across domain entities.
"""

from enum import Enum


class InvitationStatus(str, Enum):
    """Invitation status. `expired` is derived at read time and never stored."""

    pending = "pending"
    accepted = "accepted"
    revoked = "revoked"
    expired = "expired"


LIVE_STATUSES = (InvitationStatus.pending, InvitationStatus.accepted)


class ResourceType(str, Enum):
    """What an invitation grants access to"""

    project = "project"
    file = "file"


class AccessLevel(str, Enum):
    """Project access level"""

    public = "public"
    token_required = "token_required"
