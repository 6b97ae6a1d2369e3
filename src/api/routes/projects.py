from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, EmailStr, Field
from sse_starlette.sse import EventSourceResponse

from config import ApplicationConfig
from src.api.error import ClientError, ServerError
from src.app.services.invitation_feed import watch_invitations
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.sharing import (
    AuditEventsPage,
    CreateInvitationsResponse,
    CreateInvitationsUseCase,
    CreateProjectUseCase,
    InvitationView,
    ListAuditEventsUseCase,
    ListInvitationsUseCase,
    ProjectResponse,
)
from src.depends import get_current_user, get_unit_of_work, get_unit_of_work_scope

router = APIRouter(prefix="/projects", tags=["Projects"])


class CreateProjectRequest(BaseModel):
    """
    Create project HTTP request payload
    """

    name: str = Field(..., description="Project name")
    access_level: str = Field("public", description="public or token_required")


@router.post("", status_code=status.HTTP_201_CREATED, response_model=ProjectResponse)
async def create_project(
    request: CreateProjectRequest,
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Create Project

    Raises:
        - 400 Bad Request: MISSING_FIELDS, INVALID_ACCESS_LEVEL
        - 401 Unauthorized: Invalid or expired JWT
        - 500 Internal Server Error: Server error
    """
    use_case = CreateProjectUseCase(uow)
    result = await use_case.execute(
        current_user["user_id"], request.name, request.access_level
    )

    if result.is_err():
        error = result.error
        if error.code in ("MISSING_FIELDS", "INVALID_ACCESS_LEVEL"):
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        raise ServerError(error)

    return result.value


class CreateInvitationsRequest(BaseModel):
    """
    Share HTTP request payload

    Validates incoming request for sharing a project or file.
    """

    emails: List[EmailStr] = Field(..., description="Recipient email addresses")
    resource_type: str = Field("project", description="project or file")
    resource_id: Optional[str] = Field(
        None, description="File ID for file shares (defaults to the project ID)"
    )
    is_private: bool = Field(False, description="Require device verification")
    origin: Optional[str] = Field(None, description="Origin used in share links")


@router.post(
    "/{project_id}/invitations",
    status_code=status.HTTP_201_CREATED,
    response_model=CreateInvitationsResponse,
)
async def create_invitations(
    project_id: str,
    request: CreateInvitationsRequest,
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Create Invitations

    Issues one invitation and one notification mail per recipient.

    Raises:
        - 400 Bad Request: NO_RECIPIENTS, MISSING_FIELDS, INVALID_RESOURCE_TYPE,
                           PROJECT_NOT_FOUND
        - 401 Unauthorized: Invalid or expired JWT
        - 403 Forbidden: NOT_PROJECT_OWNER
        - 500 Internal Server Error: Server error
    """
    use_case = CreateInvitationsUseCase(uow)
    result = await use_case.execute(
        current_user["user_id"],
        project_id,
        [str(email) for email in request.emails],
        request.resource_type,
        request.resource_id,
        request.is_private,
        request.origin,
    )

    if result.is_err():
        error = result.error
        if error.code in (
            "NO_RECIPIENTS",
            "MISSING_FIELDS",
            "INVALID_RESOURCE_TYPE",
            "PROJECT_NOT_FOUND",
        ):
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        elif error.code == "NOT_PROJECT_OWNER":
            raise ClientError(error, status_code=status.HTTP_403_FORBIDDEN)
        raise ServerError(error)

    return result.value


def _raise_list_error(error):
    if error.code == "PROJECT_NOT_FOUND":
        raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
    elif error.code == "NOT_PROJECT_OWNER":
        raise ClientError(error, status_code=status.HTTP_403_FORBIDDEN)
    raise ServerError(error)


@router.get(
    "/{project_id}/invitations",
    status_code=status.HTTP_200_OK,
    response_model=List[InvitationView],
)
async def list_invitations(
    project_id: str,
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    List Invitations

    Raises:
        - 401 Unauthorized: Invalid or expired JWT
        - 403 Forbidden: NOT_PROJECT_OWNER
        - 404 Not Found: PROJECT_NOT_FOUND
    """
    result = await ListInvitationsUseCase(uow).execute(current_user["user_id"], project_id)

    if result.is_err():
        _raise_list_error(result.error)

    return result.value


@router.get("/{project_id}/invitations/stream")
async def stream_invitations(
    project_id: str,
    current_user: dict = Depends(get_current_user),
    uow_scope=Depends(get_unit_of_work_scope),
):
    """
    Live Invitations (Server-Sent Events)

    Emits a "snapshot" event with the full list whenever it changes and a
    "ping" while idle.
    """
    owner_id = current_user["user_id"]

    async def load():
        async with uow_scope() as uow:
            return await ListInvitationsUseCase(uow).execute(owner_id, project_id)

    first = await load()
    if first.is_err():
        _raise_list_error(first.error)

    return EventSourceResponse(
        watch_invitations(
            load,
            poll_seconds=ApplicationConfig.STREAM_POLL_SECONDS,
            ping_seconds=ApplicationConfig.STREAM_PING_SECONDS,
        )
    )


@router.get(
    "/{project_id}/audit-events",
    status_code=status.HTTP_200_OK,
    response_model=AuditEventsPage,
)
async def list_audit_events(
    project_id: str,
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    limit: int = Query(50, ge=1, le=100, description="Maximum number of events to return"),
    cursor: Optional[str] = Query(None, description="Pagination cursor"),
):
    """
    Project Audit Log

    Returns:
        - events: newest first
        - next_cursor: cursor for the next page (null if no more events)

    Raises:
        - 400 Bad Request: INVALID_CURSOR
        - 401 Unauthorized: Invalid or expired JWT
        - 403 Forbidden: NOT_PROJECT_OWNER
        - 404 Not Found: PROJECT_NOT_FOUND
    """
    use_case = ListAuditEventsUseCase(uow)
    result = await use_case.execute(current_user["user_id"], project_id, limit, cursor)

    if result.is_err():
        error = result.error
        if error.code == "INVALID_CURSOR":
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        _raise_list_error(error)

    return result.value
