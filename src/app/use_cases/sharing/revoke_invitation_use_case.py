"""
Revoke Invitation Use Case

Disables one sharing grant.
"""

import logging
from datetime import datetime
from typing import Callable

from sqlalchemy.exc import SQLAlchemyError

from config import ApplicationConfig
from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from src.domain.entities import AuditEvent, InvitationStatus

from .dtos import RevokeInvitationResponse

logger = logging.getLogger(__name__)


class RevokeInvitationUseCase:
    """
    Use case for revoking an invitation.

    Business Rules:
    - Only the owner of the invitation's project can revoke
    - Sets status=revoked and revoked_at=now
    - Idempotent: revoking twice keeps the first revoked_at
    - Other invitations for the same recipient are untouched
    """

    def __init__(
        self,
        uow: UnitOfWork,
        clock: Callable[[], datetime] = utcnow,
        max_attempts: int = ApplicationConfig.BIND_MAX_ATTEMPTS,
    ):
        self.uow = uow
        self.clock = clock
        self.max_attempts = max_attempts

    async def execute(self, owner_id: str, token: str) -> Result[RevokeInvitationResponse]:
        """
        Execute revoke invitation use case.

        Args:
            owner_id: Creator user ID from JWT
            token: Token of the invitation to revoke

        Returns:
            Result with RevokeInvitationResponse DTO, or Error
        """
        async with self.uow:
            try:
                invitation = await self.uow.invitations.get_by_token(token)
                project = (
                    await self.uow.projects.get_by_id(invitation.project_id)
                    if invitation is not None
                    else None
                )
            except SQLAlchemyError:
                logger.exception(f"Failed to load invitation {token[:8]}")
                return Return.err(Error("PERSISTENCE_ERROR", "Could not revoke invitation"))

            if invitation is None or project is None or project.owner_id != owner_id:
                return Return.err(Error("INVITATION_NOT_FOUND", "Invitation not found"))

            for _ in range(self.max_attempts):
                if invitation.status == InvitationStatus.revoked:
                    return Return.ok(
                        RevokeInvitationResponse(
                            status="revoked", revoked_at=invitation.revoked_at
                        )
                    )

                revoked_at = self.clock()
                try:
                    updated = await self.uow.invitations.update_if_unchanged(
                        token,
                        invitation.revision,
                        {"status": InvitationStatus.revoked, "revoked_at": revoked_at},
                    )
                    if updated:
                        await self.uow.audit_events.create(
                            AuditEvent(
                                project_id=invitation.project_id,
                                actor_id=owner_id,
                                action="invitation_revoked",
                                event_metadata={
                                    "token_prefix": token[:8],
                                    "email": invitation.email,
                                },
                            )
                        )
                        await self.uow.commit()
                        logger.info(f"Invitation {token[:8]} revoked")
                        return Return.ok(
                            RevokeInvitationResponse(status="revoked", revoked_at=revoked_at)
                        )

                    invitation = await self.uow.invitations.get_by_token(token)
                except SQLAlchemyError:
                    logger.exception(f"Failed to revoke invitation {token[:8]}")
                    return Return.err(
                        Error("PERSISTENCE_ERROR", "Could not revoke invitation")
                    )

            return Return.err(
                Error("CONCURRENT_UPDATE", "Invitation is being modified, please retry")
            )
