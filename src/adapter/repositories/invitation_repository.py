from typing import Any, Dict, List, Optional

from sqlalchemy import update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.invitation_repository import IInvitationRepository
from src.domain.entities import LIVE_STATUSES, Invitation


class InvitationRepository(IInvitationRepository):
    """Invitation repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_token(self, token: str) -> Optional[Invitation]:
        """Get invitation by token"""
        # populate_existing: rows may have changed under a conditional UPDATE
        stmt = (
            select(Invitation)
            .where(Invitation.token == token)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_live_by_project_and_email(
        self, project_id: str, email: str
    ) -> List[Invitation]:
        """Get pending/accepted invitations for a recipient, newest first"""
        stmt = (
            select(Invitation)
            .where(
                Invitation.project_id == project_id,
                Invitation.email == email,
                Invitation.status.in_(LIVE_STATUSES),
            )
            .order_by(Invitation.created_at.desc())
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_by_project(self, project_id: str) -> List[Invitation]:
        """Get all invitations for a project, newest first"""
        stmt = (
            select(Invitation)
            .where(Invitation.project_id == project_id)
            .order_by(Invitation.created_at.desc())
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def create(self, invitation: Invitation) -> Invitation:
        """Create a new invitation"""
        self.session.add(invitation)
        await self.session.flush()
        await self.session.refresh(invitation)
        return invitation

    async def update_if_unchanged(
        self,
        token: str,
        revision: int,
        values: Dict[str, Any],
        access_code: Optional[str] = None,
    ) -> bool:
        """Conditional UPDATE; the row count tells whether we won the race"""
        stmt = update(Invitation).where(
            Invitation.token == token, Invitation.revision == revision
        )
        if access_code is not None:
            stmt = stmt.where(Invitation.access_code == access_code)
        stmt = stmt.values(**values, revision=revision + 1).execution_options(
            synchronize_session=False
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount == 1
