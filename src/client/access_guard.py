"""
Access Guard

Decides, once per page load, whether this device may view a resource:

    checking -> allowed | denied | verification_needed
    verification_needed -> allowed   (after a verified code whose grant covers the resource)

Runs on a single asyncio task. Network awaits are the only suspension
points; cancelling the task (page unmount) propagates CancelledError.
Fails closed: any error while resolving access ends in `denied` with a
message that does not say which step failed.
"""

import logging
from enum import Enum
from typing import Optional

from src.domain.entities import AccessLevel, scope_covers

from .gateway import AccessGateway, AccessGatewayError

logger = logging.getLogger(__name__)

DENIED_MESSAGE = "Access denied"
TOKEN_REQUIRED_MESSAGE = "Token required"
VERIFY_FAILED_MESSAGE = "Could not verify the code, please try again"
OTHER_SCOPE_MESSAGE = "This code belongs to a different link. Request a new code for this page."


class GuardState(str, Enum):
    checking = "checking"
    allowed = "allowed"
    denied = "denied"
    verification_needed = "verification_needed"


class AccessGuard:
    def __init__(self, gateway: AccessGateway, device_id: str):
        self.gateway = gateway
        self.device_id = device_id

        self.state = GuardState.checking
        self.reason: Optional[str] = None
        self.error: Optional[str] = None
        self.invitation = None
        self.token: Optional[str] = None

        self._project_id: Optional[str] = None
        self._file_id: Optional[str] = None

    async def evaluate(
        self, project_id: str, token: Optional[str] = None, file_id: Optional[str] = None
    ) -> GuardState:
        self._project_id = project_id
        self._file_id = file_id
        self.token = token
        self.state = GuardState.checking
        self.reason = None
        self.error = None
        self.invitation = None

        try:
            access = await self.gateway.get_access_level(project_id)
            if AccessLevel(access.access_level) != AccessLevel.token_required:
                return self._transition(GuardState.allowed)

            if not token:
                return self._deny(TOKEN_REQUIRED_MESSAGE)

            invitation = await self.gateway.resolve_token(token, self.device_id)
        except Exception as exc:
            logger.warning(f"Access resolution failed for project {project_id}: {exc!r}")
            return self._deny(DENIED_MESSAGE)

        if not scope_covers(
            invitation.project_id,
            invitation.resource_type,
            invitation.resource_id,
            project_id,
            file_id,
        ):
            return self._deny(DENIED_MESSAGE)

        self.invitation = invitation
        if invitation.device_bound:
            return self._transition(GuardState.allowed)

        # Every unbound device goes through the code flow, including the first
        return self._transition(GuardState.verification_needed)

    async def retry(self) -> GuardState:
        if self._project_id is None:
            raise RuntimeError("Nothing to retry: evaluate() was never called")
        return await self.evaluate(self._project_id, self.token, self._file_id)

    async def request_code(self) -> Optional[str]:
        """Send a fresh code to the invited address; returns the user-facing message."""
        self._require_verification()
        self.error = None
        try:
            response = await self.gateway.request_access_code(self.invitation.token)
        except AccessGatewayError as exc:
            self.error = exc.message
            return None
        return response.message

    async def submit_code(self, code: str) -> GuardState:
        self._require_verification()
        self.error = None
        try:
            response = await self.gateway.verify_access_code(
                self.invitation.project_id, self.invitation.email, code, self.device_id
            )
            verified = await self.gateway.resolve_token(response.token, self.device_id)
        except AccessGatewayError as exc:
            self.error = exc.message
            return self.state
        except Exception as exc:
            logger.warning(f"Code verification failed: {exc!r}")
            self.error = VERIFY_FAILED_MESSAGE
            return self.state

        # Verify matches on (project, email, code), so the code may unlock a sibling grant
        if not scope_covers(
            verified.project_id,
            verified.resource_type,
            verified.resource_id,
            self._project_id,
            self._file_id,
        ):
            logger.info(f"Verified token {response.token[:8]} does not cover this resource")
            self.error = OTHER_SCOPE_MESSAGE
            return self.state

        # The verified invitation's token is the credential from now on
        self.token = response.token
        self.invitation = verified
        return self._transition(GuardState.allowed)

    def _require_verification(self) -> None:
        if self.state != GuardState.verification_needed:
            raise RuntimeError(f"No verification in progress (state={self.state.value})")

    def _deny(self, reason: str) -> GuardState:
        self.reason = reason
        return self._transition(GuardState.denied)

    def _transition(self, state: GuardState) -> GuardState:
        logger.debug(f"Access guard: {self.state.value} -> {state.value}")
        self.state = state
        return state
