"""
Resolve Invitation Use Case

Token lookup behind the access guard.
"""

import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from libs.result import Error, Result, Return
from src.app.services.device_binding import DeviceBindingAuthority
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import ResourceType

from .dtos import ResolvedInvitation

logger = logging.getLogger(__name__)


class ResolveInvitationUseCase:
    """
    Use case for resolving a bearer token.

    Business Rules:
    - Revoked, expired and unknown tokens all fail the same way
    - device_bound is computed here; the allow-list itself is never returned
      to token holders
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, token: str, device_id: Optional[str] = None
    ) -> Result[ResolvedInvitation]:
        async with self.uow:
            try:
                invitation = await self.uow.invitations.get_by_token(token) if token else None
            except SQLAlchemyError:
                logger.exception("Failed to resolve invitation token")
                return Return.err(Error("PERSISTENCE_ERROR", "Could not resolve invitation"))

            if invitation is None or not invitation.is_live():
                return Return.err(
                    Error("INVITATION_NOT_FOUND", "Invitation not found or no longer valid")
                )

            return Return.ok(
                ResolvedInvitation(
                    token=invitation.token,
                    project_id=invitation.project_id,
                    resource_type=ResourceType(invitation.resource_type).value,
                    resource_id=invitation.resource_id,
                    email=invitation.email,
                    status=invitation.effective_status().value,
                    device_bound=DeviceBindingAuthority.is_bound(invitation, device_id),
                )
            )
