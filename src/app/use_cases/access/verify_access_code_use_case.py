"""
Verify Access Code Use Case

Exchanges a valid access code for the invitation's token and binds the
caller's device to it.
"""

import logging
from datetime import datetime
from typing import Callable, Optional

from sqlalchemy.exc import SQLAlchemyError

from libs.result import Error, Result, Return
from src.app.services.access_codes import AccessCodeIssuer
from src.app.services.device_binding import DeviceBindingAuthority
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from src.domain.entities import AuditEvent

from .dtos import VerifyAccessCodeResponse

logger = logging.getLogger(__name__)

INVALID_CODE = Error("INVALID_ACCESS_CODE", "Invalid verification code")


class VerifyAccessCodeUseCase:
    """
    Use case for verifying an access code.

    Business Rules:
    - Looks at the recipient's live invitations, newest first, and takes the
      first whose code matches
    - Wrong code and unknown recipient look the same (INVALID_ACCESS_CODE)
    - expires_at < now fails with ACCESS_CODE_EXPIRED
    - Clearing the code and binding the device is one conditional write:
      of N concurrent verifies with one code, exactly one succeeds
    - Returns the matched invitation's token as the durable credential
    """

    def __init__(
        self,
        uow: UnitOfWork,
        issuer: Optional[AccessCodeIssuer] = None,
        authority: Optional[DeviceBindingAuthority] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.uow = uow
        self.clock = clock
        self.issuer = issuer or AccessCodeIssuer(clock=clock)
        self.authority = authority or DeviceBindingAuthority(uow)

    async def execute(
        self,
        project_id: str,
        email: str,
        code: str,
        device_id: Optional[str] = None,
    ) -> Result[VerifyAccessCodeResponse]:
        """
        Execute verify access code use case.

        Args:
            project_id: Project the recipient was invited to
            email: Recipient address
            code: 6-digit code from the mail
            device_id: Opaque client device identifier to bind

        Returns:
            Result with VerifyAccessCodeResponse DTO, or Error

        Errors:
            - MISSING_FIELDS: project_id, email or code missing
            - INVALID_ACCESS_CODE: no live invitation holds this code
            - ACCESS_CODE_EXPIRED: code found but past its expiry
        """
        email = (email or "").strip().lower()
        code = (code or "").strip()
        if not project_id or not email or not code:
            return Return.err(Error("MISSING_FIELDS", "Missing info"))

        async with self.uow:
            now = self.clock()
            try:
                candidates = await self.uow.invitations.list_live_by_project_and_email(
                    project_id, email
                )
            except SQLAlchemyError:
                logger.exception(f"Failed to load invitations for project {project_id}")
                return Return.err(Error("PERSISTENCE_ERROR", "Could not verify access code"))

            match = next(
                (
                    i
                    for i in candidates
                    if i.is_live(now) and self.issuer.matches(i, code)
                ),
                None,
            )
            if match is None:
                logger.info(f"Access code rejected for project {project_id}")
                return Return.err(INVALID_CODE)

            if self.issuer.is_expired(match, now):
                return Return.err(
                    Error(
                        "ACCESS_CODE_EXPIRED",
                        "Verification code has expired. Please request a new one.",
                    )
                )

            newly_bound = bool(device_id) and not self.authority.is_bound(match, device_id)

            try:
                result = await self.authority.bind(match, device_id, consume_code=code)
                if result.is_err():
                    if result.error.code == "CONCURRENT_UPDATE":
                        return result
                    # Consumed or revoked in the meantime
                    return Return.err(INVALID_CODE)

                await self.uow.audit_events.create(
                    AuditEvent(
                        project_id=project_id,
                        action="access_code_verified",
                        event_metadata={"token_prefix": match.token[:8], "email": email},
                    )
                )
                if newly_bound:
                    await self.uow.audit_events.create(
                        AuditEvent(
                            project_id=project_id,
                            action="device_bound",
                            event_metadata={
                                "token_prefix": match.token[:8],
                                "device_count": len(result.value.allowed_devices),
                            },
                        )
                    )
                await self.uow.commit()
            except SQLAlchemyError:
                logger.exception(f"Failed to verify access code for project {project_id}")
                return Return.err(Error("PERSISTENCE_ERROR", "Could not verify access code"))

            logger.info(f"Access code verified for invitation {match.token[:8]}")
            return Return.ok(VerifyAccessCodeResponse(token=match.token))
