"""
Project Entity

The reviewable resource whose access level the guard reads.
"""

from datetime import datetime
from typing import Optional

from sqlmodel import Column, DateTime, Field, SQLModel

from ..base import utcnow
from .enums import AccessLevel


class Project(SQLModel, table=True):
    """
    Project entity - owned by the creator who shares it.

    Business Rules:
    - access_level=token_required gates every view behind an invitation token
    - Switched to token_required when a private share is created, never back
    """

    __tablename__ = "projects"

    id: str = Field(primary_key=True, max_length=64)
    name: str = Field(max_length=255)
    owner_id: str = Field(max_length=64, index=True)

    access_level: AccessLevel = Field(default=AccessLevel.public)

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime, nullable=True)
    )
