from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from src.domain.entities import Invitation


class IInvitationRepository(ABC):
    """Invitation repository interface - application layer"""

    @abstractmethod
    async def get_by_token(self, token: str) -> Optional[Invitation]:
        """Get invitation by token"""
        pass

    @abstractmethod
    async def list_live_by_project_and_email(
        self, project_id: str, email: str
    ) -> List[Invitation]:
        """Get pending/accepted invitations for a recipient, newest first"""
        pass

    @abstractmethod
    async def list_by_project(self, project_id: str) -> List[Invitation]:
        """Get all invitations for a project, newest first"""
        pass

    @abstractmethod
    async def create(self, invitation: Invitation) -> Invitation:
        """Create a new invitation"""
        pass

    @abstractmethod
    async def update_if_unchanged(
        self,
        token: str,
        revision: int,
        values: Dict[str, Any],
        access_code: Optional[str] = None,
    ) -> bool:
        """
        Apply values only if the row still has this revision (and this
        access_code, when given). Bumps revision. Returns False on a lost race.
        """
        pass
