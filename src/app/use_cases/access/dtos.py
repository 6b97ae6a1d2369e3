"""
Access Use Case DTOs (Data Transfer Objects)

Response classes for the reviewer-facing access flows.
"""

from datetime import datetime

from pydantic import BaseModel


# ============================================================================
# Response DTOs
# ============================================================================


class ResendAccessLinkResponse(BaseModel):
    """Response for resend access link use case"""

    success: bool
    message: str


class RequestAccessCodeResponse(BaseModel):
    """Response for request access code use case"""

    success: bool
    message: str
    expires_at: datetime


class VerifyAccessCodeResponse(BaseModel):
    """Response for verify access code use case"""

    token: str


class ResolvedInvitation(BaseModel):
    """What a token holder learns about their own invitation"""

    token: str
    project_id: str
    resource_type: str
    resource_id: str
    email: str
    status: str
    device_bound: bool


class ProjectAccessResponse(BaseModel):
    """Response for get access level use case"""

    project_id: str
    access_level: str
