from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.outbox_repository import IOutboxRepository
from src.domain.entities import OutboxMail


class OutboxRepository(IOutboxRepository):
    """Outbox mail repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, mail: OutboxMail) -> OutboxMail:
        """Enqueue a mail for the external dispatcher"""
        self.session.add(mail)
        await self.session.flush()
        return mail
