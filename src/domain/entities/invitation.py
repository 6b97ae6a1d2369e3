"""
Invitation Entity

One sharing grant: a recipient email bound to a bearer token and a scope.
"""

from datetime import datetime
from typing import List, Optional

from sqlmodel import Column, DateTime, Field, Index, JSON, SQLModel

from ..base import utcnow
from .enums import LIVE_STATUSES, InvitationStatus, ResourceType


class Invitation(SQLModel, table=True):
    """
    Invitation entity - one revocable sharing grant.

    Business Rules:
    - Token is the primary key and never changes; resending creates a new row
    - Several live (pending/accepted) rows may exist per (project_id, email)
    - access_code is single-use and cleared in the same write that binds a device
    - allowed_devices is a set: binding a known device is a no-op
    - expired is derived from expires_at at read time, never written
    - revision increments on every per-invitation mutation (compare-and-set)
    """

    __tablename__ = "invitations"

    token: str = Field(primary_key=True, max_length=32)

    project_id: str = Field(max_length=64, nullable=False, index=True)
    resource_type: ResourceType = Field(default=ResourceType.project)
    resource_id: str = Field(max_length=64, nullable=False)

    email: str = Field(max_length=255, nullable=False, index=True)

    status: InvitationStatus = Field(default=InvitationStatus.pending)
    allowed_devices: List[str] = Field(default_factory=list, sa_column=Column(JSON))

    # In-flight one-time code
    access_code: Optional[str] = Field(default=None, max_length=6)
    access_code_expires_at: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime, nullable=True)
    )

    revision: int = Field(default=0, nullable=False)

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    revoked_at: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime, nullable=True)
    )
    expires_at: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime, nullable=True)
    )

    __table_args__ = (
        Index("idx_invitation_project_email", "project_id", "email"),
        Index("idx_invitation_status", "status"),
    )

    def effective_status(self, now: Optional[datetime] = None) -> InvitationStatus:
        if self.status in LIVE_STATUSES and self.expires_at is not None:
            if self.expires_at < (now or utcnow()):
                return InvitationStatus.expired
        return InvitationStatus(self.status)

    def is_live(self, now: Optional[datetime] = None) -> bool:
        return self.effective_status(now) in LIVE_STATUSES

    def covers(self, project_id: str, file_id: Optional[str] = None) -> bool:
        """Whether this grant's scope includes the requested project or file."""
        return scope_covers(
            self.project_id, self.resource_type, self.resource_id, project_id, file_id
        )


def scope_covers(
    grant_project_id: str,
    resource_type: ResourceType,
    resource_id: str,
    project_id: str,
    file_id: Optional[str] = None,
) -> bool:
    if grant_project_id != project_id:
        return False
    if ResourceType(resource_type) == ResourceType.project:
        return True
    # File grants never cover the whole project view
    return file_id is not None and resource_id == file_id
