from abc import ABC, abstractmethod

from src.domain.entities import OutboxMail


class IOutboxRepository(ABC):
    """Outbox mail repository interface - application layer"""

    @abstractmethod
    async def create(self, mail: OutboxMail) -> OutboxMail:
        """Enqueue a mail for the external dispatcher"""
        pass
