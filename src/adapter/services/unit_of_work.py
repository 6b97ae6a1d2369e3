import logging

from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.repositories.audit_event_repository import AuditEventRepository
from src.adapter.repositories.invitation_repository import InvitationRepository
from src.adapter.repositories.outbox_repository import OutboxRepository
from src.adapter.repositories.project_repository import ProjectRepository
from src.app.services.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class SqlAlchemyUnitOfWork(UnitOfWork):
    """SQLAlchemy implementation of UnitOfWork pattern, one AsyncSession per request"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def __aenter__(self):
        self.invitations = InvitationRepository(self.session)
        self.projects = ProjectRepository(self.session)
        self.outbox = OutboxRepository(self.session)
        self.audit_events = AuditEventRepository(self.session)
        return self

    async def __aexit__(self, exc_type, exc, tb):
        if exc_type is not None:
            logger.warning(f"Discarding uncommitted changes after {exc_type.__name__}")
        # Whatever the use case did not commit is dropped
        await self.rollback()

    async def commit(self):
        await self.session.commit()

    async def rollback(self):
        await self.session.rollback()
