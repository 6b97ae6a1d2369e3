"""
Create Invitations Use Case

Shares a project or one of its files with a list of recipient emails.
"""

import logging
from datetime import datetime, timedelta
from typing import Callable, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from config import ApplicationConfig
from libs.result import Error, Result, Return
from src.app.services.share_mail import invitation_mail, share_url
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import generate_token, utcnow
from src.domain.entities import (
    AccessLevel,
    AuditEvent,
    Invitation,
    InvitationStatus,
    ResourceType,
)

from .dtos import CreateInvitationsResponse, SentInvitation

logger = logging.getLogger(__name__)


def normalize_emails(emails: List[str]) -> List[str]:
    seen = []
    for email in emails or []:
        cleaned = (email or "").strip().lower()
        if cleaned and cleaned not in seen:
            seen.append(cleaned)
    return seen


class CreateInvitationsUseCase:
    """
    Use case for sharing a resource with recipients.

    Business Rules:
    - Only the project owner can share
    - One invitation (fresh token, pending, no devices) and one outbox mail
      per recipient, committed together
    - Recipients are independent: a failed write for one does not roll back
      the others
    - is_private switches the project to token_required in the same commit as
      the first invitation that is written; nothing changes if none is
    - resource_id defaults to the project id for project-wide shares
    """

    def __init__(
        self,
        uow: UnitOfWork,
        clock: Callable[[], datetime] = utcnow,
        invitation_ttl_days: Optional[int] = ApplicationConfig.INVITATION_TTL_DAYS,
    ):
        self.uow = uow
        self.clock = clock
        self.invitation_ttl_days = invitation_ttl_days

    async def execute(
        self,
        owner_id: str,
        project_id: str,
        emails: List[str],
        resource_type: str = ResourceType.project.value,
        resource_id: Optional[str] = None,
        is_private: bool = False,
        origin: Optional[str] = None,
    ) -> Result[CreateInvitationsResponse]:
        """
        Execute create invitations use case.

        Args:
            owner_id: Creator user ID from JWT
            project_id: Project being shared
            emails: Recipient addresses
            resource_type: "project" or "file"
            resource_id: File ID for file shares; defaults to project_id
            is_private: Require device verification for this project
            origin: Origin used to build share links

        Returns:
            Result with CreateInvitationsResponse DTO, or Error
        """
        if not project_id:
            return Return.err(Error("MISSING_FIELDS", "Missing project ID"))

        recipients = normalize_emails(emails)
        if not recipients:
            return Return.err(Error("NO_RECIPIENTS", "At least one email is required"))

        try:
            scope = ResourceType(resource_type)
        except ValueError:
            return Return.err(
                Error(
                    "INVALID_RESOURCE_TYPE",
                    f"Invalid resource type: {resource_type}. Must be one of: project, file",
                )
            )

        if scope == ResourceType.project:
            resource_id = resource_id or project_id
        elif not resource_id:
            return Return.err(Error("MISSING_FIELDS", "Missing file ID for file share"))

        async with self.uow:
            try:
                project = await self.uow.projects.get_by_id(project_id)
            except SQLAlchemyError:
                logger.exception(f"Failed to load project {project_id}")
                return Return.err(Error("PERSISTENCE_ERROR", "Could not load project"))

            if project is None:
                return Return.err(Error("PROJECT_NOT_FOUND", "Unknown project"))

            if project.owner_id != owner_id:
                return Return.err(
                    Error("NOT_PROJECT_OWNER", "Only the project owner can share it")
                )

            expires_at = None
            if self.invitation_ttl_days:
                expires_at = self.clock() + timedelta(days=int(self.invitation_ttl_days))

            invited: List[SentInvitation] = []
            failed: List[str] = []
            # The switch to token_required lands with the first invitation that commits
            protect = is_private and project.access_level != AccessLevel.token_required

            for email in recipients:
                token = generate_token()
                link = share_url(project_id, token, scope, resource_id, origin)
                try:
                    if protect:
                        project.access_level = AccessLevel.token_required
                        project.updated_at = self.clock()
                        await self.uow.projects.update(project)
                    await self.uow.invitations.create(
                        Invitation(
                            token=token,
                            project_id=project_id,
                            resource_type=scope,
                            resource_id=resource_id,
                            email=email,
                            status=InvitationStatus.pending,
                            allowed_devices=[],
                            created_at=self.clock(),
                            expires_at=expires_at,
                        )
                    )
                    await self.uow.outbox.create(
                        invitation_mail(email, link, scope, is_private)
                    )
                    await self.uow.audit_events.create(
                        AuditEvent(
                            project_id=project_id,
                            actor_id=owner_id,
                            action="invitation_sent",
                            event_metadata={
                                "token_prefix": token[:8],
                                "email": email,
                                "resource_type": scope.value,
                                "resource_id": resource_id,
                            },
                        )
                    )
                    await self.uow.commit()
                    protect = False
                except SQLAlchemyError:
                    logger.exception(f"Failed to invite {email} to project {project_id}")
                    await self.uow.rollback()
                    failed.append(email)
                    continue

                invited.append(SentInvitation(token=token, email=email, share_url=link))

            if not invited:
                return Return.err(Error("PERSISTENCE_ERROR", "Could not send any invitation"))

            logger.info(
                f"Project {project_id}: {len(invited)} invitation(s) sent, {len(failed)} failed"
            )
            return Return.ok(CreateInvitationsResponse(invited=invited, failed=failed))
