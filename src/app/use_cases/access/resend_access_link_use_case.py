"""
Resend Access Link Use Case

Issues a new link and access code to a recipient who lost theirs.
"""

import logging
from datetime import datetime, timedelta
from typing import Callable, Optional

from sqlalchemy.exc import SQLAlchemyError

from config import ApplicationConfig
from libs.result import Error, Result, Return
from src.app.services.access_codes import AccessCodeIssuer
from src.app.services.share_mail import access_link_mail, share_url
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import generate_token, utcnow
from src.domain.entities import AuditEvent, Invitation, InvitationStatus

from .dtos import ResendAccessLinkResponse

logger = logging.getLogger(__name__)


class ResendAccessLinkUseCase:
    """
    Use case for resending access to an invited recipient.

    Business Rules:
    - Requires a live (pending/accepted) invitation for (project_id, email);
      otherwise INVITATION_NOT_FOUND, reported explicitly
    - Never mutates existing invitations: clones the newest one's scope into
      a new token (pending, no devices) carrying a fresh 30-minute code
    - The mail carries both the code and the new link
    """

    def __init__(
        self,
        uow: UnitOfWork,
        issuer: Optional[AccessCodeIssuer] = None,
        clock: Callable[[], datetime] = utcnow,
        invitation_ttl_days: Optional[int] = ApplicationConfig.INVITATION_TTL_DAYS,
    ):
        self.uow = uow
        self.clock = clock
        self.issuer = issuer or AccessCodeIssuer(clock=clock)
        self.invitation_ttl_days = invitation_ttl_days

    async def execute(
        self, project_id: str, email: str, origin: Optional[str] = None
    ) -> Result[ResendAccessLinkResponse]:
        """
        Execute resend access link use case.

        Args:
            project_id: Project the recipient was invited to
            email: Recipient address
            origin: Origin used to build the new link

        Returns:
            Result with ResendAccessLinkResponse DTO, or Error
        """
        email = (email or "").strip().lower()
        if not project_id or not email:
            return Return.err(Error("MISSING_FIELDS", "Missing project ID or email"))

        async with self.uow:
            now = self.clock()
            try:
                candidates = await self.uow.invitations.list_live_by_project_and_email(
                    project_id, email
                )
            except SQLAlchemyError:
                logger.exception(f"Failed to load invitations for project {project_id}")
                return Return.err(Error("PERSISTENCE_ERROR", "Could not resend access link"))

            live = [i for i in candidates if i.is_live(now)]
            if not live:
                return Return.err(
                    Error("INVITATION_NOT_FOUND", "This email is not on the invitation list.")
                )

            source = live[0]
            access_code = self.issuer.new_code()
            expires_at = None
            if self.invitation_ttl_days:
                expires_at = now + timedelta(days=int(self.invitation_ttl_days))

            invitation = Invitation(
                token=generate_token(),
                project_id=source.project_id,
                resource_type=source.resource_type,
                resource_id=source.resource_id,
                email=source.email,
                status=InvitationStatus.pending,
                allowed_devices=[],
                access_code=access_code.code,
                access_code_expires_at=access_code.expires_at,
                created_at=now,
                expires_at=expires_at,
            )
            link = share_url(
                project_id,
                invitation.token,
                invitation.resource_type,
                invitation.resource_id,
                origin,
            )

            try:
                await self.uow.invitations.create(invitation)
                await self.uow.outbox.create(
                    access_link_mail(
                        email, link, access_code.code, invitation.resource_type, self.issuer.ttl
                    )
                )
                await self.uow.audit_events.create(
                    AuditEvent(
                        project_id=project_id,
                        action="access_link_resent",
                        event_metadata={
                            "token_prefix": invitation.token[:8],
                            "source_token_prefix": source.token[:8],
                            "email": email,
                        },
                    )
                )
                await self.uow.commit()
            except SQLAlchemyError:
                logger.exception(f"Failed to resend access link for project {project_id}")
                return Return.err(Error("PERSISTENCE_ERROR", "Could not resend access link"))

            logger.info(f"Access link resent for project {project_id} as {invitation.token[:8]}")
            return Return.ok(
                ResendAccessLinkResponse(
                    success=True,
                    message="A new access link and code have been sent to your email.",
                )
            )
