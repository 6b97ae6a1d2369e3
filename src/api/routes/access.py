from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field

from src.api.error import ClientError, ServerError
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.access import (
    GetAccessLevelUseCase,
    ProjectAccessResponse,
    RequestAccessCodeResponse,
    RequestAccessCodeUseCase,
    ResendAccessLinkResponse,
    ResendAccessLinkUseCase,
    ResolveInvitationUseCase,
    ResolvedInvitation,
    VerifyAccessCodeResponse,
    VerifyAccessCodeUseCase,
)
from src.depends import get_unit_of_work

router = APIRouter(prefix="/access", tags=["Access"])

# Reviewer endpoints are anonymous: the invitation token is the credential.


@router.get(
    "/projects/{project_id}",
    status_code=status.HTTP_200_OK,
    response_model=ProjectAccessResponse,
)
async def get_access_level(
    project_id: str,
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Project Access Level

    Raises:
        - 404 Not Found: PROJECT_NOT_FOUND
    """
    result = await GetAccessLevelUseCase(uow).execute(project_id)

    if result.is_err():
        error = result.error
        if error.code == "PROJECT_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        raise ServerError(error)

    return result.value


@router.get(
    "/invitations/{token}",
    status_code=status.HTTP_200_OK,
    response_model=ResolvedInvitation,
)
async def resolve_invitation(
    token: str,
    device_id: Optional[str] = Query(None, description="Client device identifier"),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Resolve Token

    Raises:
        - 404 Not Found: INVITATION_NOT_FOUND (unknown, revoked or expired)
    """
    result = await ResolveInvitationUseCase(uow).execute(token, device_id)

    if result.is_err():
        error = result.error
        if error.code == "INVITATION_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        raise ServerError(error)

    return result.value


class ResendAccessLinkRequest(BaseModel):
    """
    Resend access link HTTP request payload
    """

    project_id: str = Field("", description="Project ID")
    email: str = Field("", description="Invited email address")
    origin: Optional[str] = Field(None, description="Origin used in the new link")


@router.post(
    "/resend-link",
    status_code=status.HTTP_200_OK,
    response_model=ResendAccessLinkResponse,
)
async def resend_access_link(
    request: ResendAccessLinkRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Resend Access Link

    Creates a new link with a fresh access code; existing links stay valid.

    Raises:
        - 400 Bad Request: MISSING_FIELDS
        - 404 Not Found: INVITATION_NOT_FOUND
        - 500 Internal Server Error: Server error
    """
    use_case = ResendAccessLinkUseCase(uow)
    result = await use_case.execute(request.project_id, request.email, request.origin)

    if result.is_err():
        error = result.error
        if error.code == "MISSING_FIELDS":
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        elif error.code == "INVITATION_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        raise ServerError(error)

    return result.value


class RequestAccessCodeRequest(BaseModel):
    """
    Request access code HTTP request payload
    """

    token: str = Field("", description="Invitation token")


@router.post(
    "/request-code",
    status_code=status.HTTP_200_OK,
    response_model=RequestAccessCodeResponse,
)
async def request_access_code(
    request: RequestAccessCodeRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Send Access Code

    Raises:
        - 400 Bad Request: MISSING_FIELDS
        - 404 Not Found: INVITATION_NOT_FOUND
        - 500 Internal Server Error: Server error
    """
    result = await RequestAccessCodeUseCase(uow).execute(request.token)

    if result.is_err():
        error = result.error
        if error.code == "MISSING_FIELDS":
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        elif error.code == "INVITATION_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        raise ServerError(error)

    return result.value


class VerifyAccessCodeRequest(BaseModel):
    """
    Verify access code HTTP request payload
    """

    project_id: str = Field("", description="Project ID")
    email: str = Field("", description="Invited email address")
    code: str = Field("", description="6-digit access code")
    device_id: Optional[str] = Field(None, description="Device to bind")


@router.post(
    "/verify-code",
    status_code=status.HTTP_200_OK,
    response_model=VerifyAccessCodeResponse,
)
async def verify_access_code(
    request: VerifyAccessCodeRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Verify Access Code

    Raises:
        - 400 Bad Request: MISSING_FIELDS, INVALID_ACCESS_CODE
        - 412 Precondition Failed: ACCESS_CODE_EXPIRED
        - 500 Internal Server Error: Server error
    """
    use_case = VerifyAccessCodeUseCase(uow)
    result = await use_case.execute(
        request.project_id, request.email, request.code, request.device_id
    )

    if result.is_err():
        error = result.error
        if error.code in ("MISSING_FIELDS", "INVALID_ACCESS_CODE"):
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        elif error.code == "ACCESS_CODE_EXPIRED":
            raise ClientError(error, status_code=status.HTTP_412_PRECONDITION_FAILED)
        raise ServerError(error)

    return result.value
