"""
Device Binding Authority

Owns the allowed_devices allow-list of an invitation. Device identifiers are
opaque client-generated strings; nothing here fingerprints devices.
"""

import logging
from typing import Optional

from config import ApplicationConfig
from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import Invitation, InvitationStatus

logger = logging.getLogger(__name__)


class DeviceBindingAuthority:
    def __init__(
        self, uow: UnitOfWork, max_attempts: int = ApplicationConfig.BIND_MAX_ATTEMPTS
    ):
        self.uow = uow
        self.max_attempts = max_attempts

    @staticmethod
    def is_bound(invitation: Invitation, device_id: Optional[str]) -> bool:
        return bool(device_id) and device_id in (invitation.allowed_devices or [])

    async def bind(
        self,
        invitation: Invitation,
        device_id: Optional[str],
        consume_code: Optional[str] = None,
    ) -> Result[Invitation]:
        """
        Add device_id to the allow-list, idempotently.

        With consume_code, the same conditional write also clears the access
        code, and only succeeds while that code is still on the row, so one
        code can bind at most once. Caller commits.

        Errors:
            - INVITATION_NOT_FOUND: invitation missing or no longer live
            - INVALID_ACCESS_CODE: code already consumed or replaced
            - CONCURRENT_UPDATE: lost the race max_attempts times
        """
        token = invitation.token
        current: Optional[Invitation] = invitation

        for attempt in range(self.max_attempts):
            if current is None or not current.is_live():
                return Return.err(
                    Error("INVITATION_NOT_FOUND", "Invitation not found or no longer valid")
                )

            if consume_code is not None and current.access_code != consume_code:
                return Return.err(Error("INVALID_ACCESS_CODE", "Invalid verification code"))

            devices = list(current.allowed_devices or [])
            values = {}
            if device_id and device_id not in devices:
                devices.append(device_id)
                values["allowed_devices"] = devices
            if devices and current.status == InvitationStatus.pending:
                values["status"] = InvitationStatus.accepted
            if consume_code is not None:
                values["access_code"] = None
                values["access_code_expires_at"] = None

            if not values:
                return Return.ok(current)

            updated = await self.uow.invitations.update_if_unchanged(
                token, current.revision, values, access_code=consume_code
            )
            if updated:
                return Return.ok(await self.uow.invitations.get_by_token(token))

            logger.info(f"Bind race on invitation {token[:8]}, attempt {attempt + 1}")
            current = await self.uow.invitations.get_by_token(token)

        return Return.err(
            Error("CONCURRENT_UPDATE", "Invitation is being modified, please retry")
        )
