from abc import ABC, abstractmethod

from src.app.repositories.audit_event_repository import IAuditEventRepository
from src.app.repositories.invitation_repository import IInvitationRepository
from src.app.repositories.outbox_repository import IOutboxRepository
from src.app.repositories.project_repository import IProjectRepository


class UnitOfWork(ABC):
    """
    Transaction boundary of one use case.

    Invitation writes, their outbox mail and their audit events are committed
    together. Leaving the context without commit() discards them.
    """

    invitations: IInvitationRepository
    projects: IProjectRepository
    outbox: IOutboxRepository
    audit_events: IAuditEventRepository

    @abstractmethod
    async def __aenter__(self) -> "UnitOfWork":
        pass

    @abstractmethod
    async def __aexit__(self, exc_type, exc, tb):
        pass

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass
