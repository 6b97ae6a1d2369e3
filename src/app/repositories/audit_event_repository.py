from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from src.domain.entities import AuditEvent


class IAuditEventRepository(ABC):
    """AuditEvent repository interface - append-only project log"""

    @abstractmethod
    async def create(self, audit_event: AuditEvent) -> AuditEvent:
        """Append an audit event (immutable)"""
        pass

    @abstractmethod
    async def list_by_project(
        self, project_id: str, limit: int = 50, before: Optional[datetime] = None
    ) -> List[AuditEvent]:
        """Events of one project, newest first, strictly older than `before` if given"""
        pass
