"""
Access-Code Issuer

Short-lived 6-digit codes that authorize binding a new device to an
invitation. A code lives on the invitation row until it is consumed or
overwritten by a newer one; expiry is only checked at verification time.
"""

import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional

from config import ApplicationConfig
from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import generate_access_code, utcnow
from src.domain.entities import Invitation


@dataclass(frozen=True)
class AccessCode:
    code: str
    expires_at: datetime


class AccessCodeIssuer:
    def __init__(
        self,
        ttl_minutes: int = ApplicationConfig.ACCESS_CODE_TTL_MINUTES,
        clock: Callable[[], datetime] = utcnow,
        max_attempts: int = ApplicationConfig.BIND_MAX_ATTEMPTS,
    ):
        self.ttl = timedelta(minutes=ttl_minutes)
        self.clock = clock
        self.max_attempts = max_attempts

    def new_code(self) -> AccessCode:
        return AccessCode(code=generate_access_code(), expires_at=self.clock() + self.ttl)

    @staticmethod
    def matches(invitation: Invitation, code: str) -> bool:
        if not invitation.access_code or not code:
            return False
        return secrets.compare_digest(invitation.access_code, code)

    def is_expired(self, invitation: Invitation, now: Optional[datetime] = None) -> bool:
        expires_at = invitation.access_code_expires_at
        return expires_at is None or expires_at < (now or self.clock())

    async def attach(self, uow: UnitOfWork, invitation: Invitation) -> Result[AccessCode]:
        """
        Write a fresh code onto the invitation, replacing any previous one.

        Caller commits. Fails with INVITATION_NOT_FOUND if the invitation
        stops being live while we retry.
        """
        current: Optional[Invitation] = invitation
        for _ in range(self.max_attempts):
            if current is None or not current.is_live(self.clock()):
                return Return.err(
                    Error("INVITATION_NOT_FOUND", "Invitation not found or no longer valid")
                )

            access_code = self.new_code()
            updated = await uow.invitations.update_if_unchanged(
                current.token,
                current.revision,
                {
                    "access_code": access_code.code,
                    "access_code_expires_at": access_code.expires_at,
                },
            )
            if updated:
                return Return.ok(access_code)

            current = await uow.invitations.get_by_token(invitation.token)

        return Return.err(
            Error("CONCURRENT_UPDATE", "Invitation is being modified, please retry")
        )
