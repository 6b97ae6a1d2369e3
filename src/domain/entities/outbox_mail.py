"""
OutboxMail Entity

Notification records picked up by the external mail dispatcher.
"""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel, Text

from ..base import utcnow


class OutboxMail(SQLModel, table=True):
    """
    OutboxMail entity - {to, subject, html} rows; this service only writes them.
    """

    __tablename__ = "mail"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    to: str = Field(max_length=255, nullable=False)
    subject: str = Field(max_length=255)
    html: str = Field(sa_column=Column(Text, nullable=False))

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (Index("idx_mail_created_at", "created_at"),)
