"""
Sharing Use Case DTOs (Data Transfer Objects)

Response classes for the creator-facing sharing flows.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from src.domain.entities import Invitation, ResourceType


# ============================================================================
# Response DTOs
# ============================================================================


class ProjectResponse(BaseModel):
    """Response for create project use case"""

    id: str
    name: str
    access_level: str


class SentInvitation(BaseModel):
    """One invitation issued by a share request"""

    token: str
    email: str
    share_url: str


class CreateInvitationsResponse(BaseModel):
    """Response for create invitations use case"""

    invited: List[SentInvitation]
    failed: List[str]


class RevokeInvitationResponse(BaseModel):
    """Response for revoke invitation use case"""

    status: str
    revoked_at: Optional[datetime]


class InvitationView(BaseModel):
    """Creator-side view of an invitation (never exposes the access code)"""

    token: str
    project_id: str
    resource_type: str
    resource_id: str
    email: str
    status: str
    allowed_devices: List[str]
    has_pending_code: bool
    created_at: datetime
    revoked_at: Optional[datetime]
    expires_at: Optional[datetime]

    @classmethod
    def from_entity(cls, invitation: Invitation) -> "InvitationView":
        return cls(
            token=invitation.token,
            project_id=invitation.project_id,
            resource_type=ResourceType(invitation.resource_type).value,
            resource_id=invitation.resource_id,
            email=invitation.email,
            status=invitation.effective_status().value,
            allowed_devices=list(invitation.allowed_devices or []),
            has_pending_code=invitation.access_code is not None,
            created_at=invitation.created_at,
            revoked_at=invitation.revoked_at,
            expires_at=invitation.expires_at,
        )


class AuditEventView(BaseModel):
    """Single audit event"""

    action: str
    actor_id: Optional[str]
    timestamp: datetime
    metadata: Dict[str, Any]


class AuditEventsPage(BaseModel):
    """Response for list audit events use case"""

    events: List[AuditEventView]
    next_cursor: Optional[str]
