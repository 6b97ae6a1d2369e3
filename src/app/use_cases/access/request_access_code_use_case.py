"""
Request Access Code Use Case

"Send code" action of the access guard: issues a fresh code on the
invitation behind a token and mails it to the invited address.
"""

import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from libs.result import Error, Result, Return
from src.app.services.access_codes import AccessCodeIssuer
from src.app.services.share_mail import access_code_mail
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import AuditEvent

from .dtos import RequestAccessCodeResponse

logger = logging.getLogger(__name__)


class RequestAccessCodeUseCase:
    """
    Use case for issuing an access code on an existing invitation.

    Business Rules:
    - Token must resolve to a live invitation
    - Overwrites any previous, even unexpired, code
    - The code only travels by mail, never in the response
    """

    def __init__(self, uow: UnitOfWork, issuer: Optional[AccessCodeIssuer] = None):
        self.uow = uow
        self.issuer = issuer or AccessCodeIssuer()

    async def execute(self, token: str) -> Result[RequestAccessCodeResponse]:
        if not token:
            return Return.err(Error("MISSING_FIELDS", "Missing token"))

        async with self.uow:
            try:
                invitation = await self.uow.invitations.get_by_token(token)
            except SQLAlchemyError:
                logger.exception(f"Failed to load invitation {token[:8]}")
                return Return.err(Error("PERSISTENCE_ERROR", "Could not issue access code"))

            if invitation is None or not invitation.is_live(self.issuer.clock()):
                return Return.err(
                    Error("INVITATION_NOT_FOUND", "Invitation not found or no longer valid")
                )

            try:
                result = await self.issuer.attach(self.uow, invitation)
                if result.is_err():
                    return result

                access_code = result.value
                await self.uow.outbox.create(
                    access_code_mail(invitation.email, access_code.code, self.issuer.ttl)
                )
                await self.uow.audit_events.create(
                    AuditEvent(
                        project_id=invitation.project_id,
                        action="access_code_issued",
                        event_metadata={
                            "token_prefix": token[:8],
                            "email": invitation.email,
                        },
                    )
                )
                await self.uow.commit()
            except SQLAlchemyError:
                logger.exception(f"Failed to issue access code for {token[:8]}")
                return Return.err(Error("PERSISTENCE_ERROR", "Could not issue access code"))

            logger.info(f"Access code issued for invitation {token[:8]}")
            return Return.ok(
                RequestAccessCodeResponse(
                    success=True,
                    message="A verification code has been sent to your email.",
                    expires_at=access_code.expires_at,
                )
            )
