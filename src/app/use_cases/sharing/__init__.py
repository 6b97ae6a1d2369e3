"""
Sharing Use Cases

Creator-facing invitation management.
"""

from .create_invitations_use_case import CreateInvitationsUseCase
from .create_project_use_case import CreateProjectUseCase
from .dtos import (
    AuditEventsPage,
    AuditEventView,
    CreateInvitationsResponse,
    InvitationView,
    ProjectResponse,
    RevokeInvitationResponse,
    SentInvitation,
)
from .list_audit_events_use_case import ListAuditEventsUseCase
from .list_invitations_use_case import ListInvitationsUseCase
from .revoke_invitation_use_case import RevokeInvitationUseCase

__all__ = [
    "CreateProjectUseCase",
    "CreateInvitationsUseCase",
    "RevokeInvitationUseCase",
    "ListInvitationsUseCase",
    "ListAuditEventsUseCase",
    "ProjectResponse",
    "SentInvitation",
    "CreateInvitationsResponse",
    "RevokeInvitationResponse",
    "InvitationView",
    "AuditEventView",
    "AuditEventsPage",
]
