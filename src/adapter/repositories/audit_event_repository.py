from datetime import datetime
from typing import List, Optional

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.audit_event_repository import IAuditEventRepository
from src.domain.entities import AuditEvent


class AuditEventRepository(IAuditEventRepository):
    """AuditEvent repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, audit_event: AuditEvent) -> AuditEvent:
        """Append an audit event; flushed with the change it records"""
        self.session.add(audit_event)
        await self.session.flush()
        return audit_event

    async def list_by_project(
        self, project_id: str, limit: int = 50, before: Optional[datetime] = None
    ) -> List[AuditEvent]:
        stmt = select(AuditEvent).where(AuditEvent.project_id == project_id)
        if before is not None:
            stmt = stmt.where(AuditEvent.created_at < before)
        stmt = stmt.order_by(AuditEvent.created_at.desc()).limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
