"""
AuditEvent Entity

Immutable log of sharing and access events.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, JSON, SQLModel

from ..base import utcnow


class AuditEvent(SQLModel, table=True):
    """
    AuditEvent entity - immutable log of sharing and access events.

    Business Rules:
    - Immutable (never updated or deleted)
    - Written in the same transaction as the change it records
    - actor_id is null for anonymous reviewer actions
    - Metadata never carries full tokens or access codes
    """

    __tablename__ = "audit_events"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    project_id: Optional[str] = Field(default=None, index=True)
    actor_id: Optional[str] = Field(default=None, index=True)

    action: str = Field(max_length=100)  # e.g., "invitation_sent", "device_bound"
    event_metadata: Optional[dict] = Field(default=None, sa_column=Column(JSON))

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_audit_created_at", "created_at"),
        Index("idx_audit_project_action", "project_id", "action"),
    )
