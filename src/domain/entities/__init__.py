"""
Review Access Domain Entities

All domain entities organized by model.
Each entity in its own file for better maintainability.
"""

# Export all enums
from .enums import (
    LIVE_STATUSES,
    AccessLevel,
    InvitationStatus,
    ResourceType,
)

# Export all entities
from .audit_event import AuditEvent
from .invitation import Invitation, scope_covers
from .outbox_mail import OutboxMail
from .project import Project

__all__ = [
    # Enums
    "LIVE_STATUSES",
    "AccessLevel",
    "InvitationStatus",
    "ResourceType",
    # Entities
    "AuditEvent",
    "Invitation",
    "OutboxMail",
    "Project",
    "scope_covers",
]
