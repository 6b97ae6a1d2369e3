"""
Access gateway: the reviewer client's view of the access API.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import httpx

from src.app.use_cases.access.dtos import (
    ProjectAccessResponse,
    RequestAccessCodeResponse,
    ResolvedInvitation,
    VerifyAccessCodeResponse,
)

logger = logging.getLogger(__name__)


class AccessGatewayError(Exception):
    def __init__(self, code: str, message: str, status_code: Optional[int] = None):
        self.code = code
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class AccessGateway(ABC):
    """Reviewer-side operations the access guard depends on"""

    @abstractmethod
    async def get_access_level(self, project_id: str) -> ProjectAccessResponse:
        pass

    @abstractmethod
    async def resolve_token(
        self, token: str, device_id: Optional[str] = None
    ) -> ResolvedInvitation:
        pass

    @abstractmethod
    async def request_access_code(self, token: str) -> RequestAccessCodeResponse:
        pass

    @abstractmethod
    async def verify_access_code(
        self, project_id: str, email: str, code: str, device_id: Optional[str] = None
    ) -> VerifyAccessCodeResponse:
        pass


class HttpAccessGateway(AccessGateway):
    """
    httpx implementation. The client carries base_url, timeouts and transport;
    transport errors are retried `retries` times before surfacing.
    """

    def __init__(self, client: httpx.AsyncClient, retries: int = 2):
        self.client = client
        self.retries = retries

    async def _call(self, method: str, url: str, **kwargs: Any) -> Dict[str, Any]:
        attempt = 0
        while True:
            try:
                response = await self.client.request(method, url, **kwargs)
                break
            except httpx.TransportError as exc:
                attempt += 1
                if attempt > self.retries:
                    raise AccessGatewayError("NETWORK_ERROR", "Network error") from exc
                logger.warning(f"{method} {url} failed ({exc!r}), retry {attempt}")

        if response.status_code >= 400:
            try:
                error = response.json().get("error") or {}
            except ValueError:
                error = {}
            raise AccessGatewayError(
                error.get("code", "HTTP_ERROR"),
                error.get("message", "Request failed"),
                response.status_code,
            )
        return response.json()

    async def get_access_level(self, project_id: str) -> ProjectAccessResponse:
        data = await self._call("GET", f"/access/projects/{project_id}")
        return ProjectAccessResponse.model_validate(data)

    async def resolve_token(
        self, token: str, device_id: Optional[str] = None
    ) -> ResolvedInvitation:
        params = {"device_id": device_id} if device_id else None
        data = await self._call("GET", f"/access/invitations/{token}", params=params)
        return ResolvedInvitation.model_validate(data)

    async def request_access_code(self, token: str) -> RequestAccessCodeResponse:
        data = await self._call("POST", "/access/request-code", json={"token": token})
        return RequestAccessCodeResponse.model_validate(data)

    async def verify_access_code(
        self, project_id: str, email: str, code: str, device_id: Optional[str] = None
    ) -> VerifyAccessCodeResponse:
        data = await self._call(
            "POST",
            "/access/verify-code",
            json={
                "project_id": project_id,
                "email": email,
                "code": code,
                "device_id": device_id,
            },
        )
        return VerifyAccessCodeResponse.model_validate(data)
