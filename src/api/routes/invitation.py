from fastapi import APIRouter, Depends, status

from src.api.error import ClientError, ServerError
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.sharing import RevokeInvitationResponse, RevokeInvitationUseCase
from src.depends import get_current_user, get_unit_of_work

router = APIRouter(prefix="/invitations", tags=["Invitations"])


@router.delete(
    "/{token}",
    status_code=status.HTTP_200_OK,
    response_model=RevokeInvitationResponse,
)
async def revoke_invitation(
    token: str,
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Revoke Invitation

    Disables one link. Idempotent; other links for the same recipient stay valid.

    Raises:
        - 401 Unauthorized: Invalid or expired JWT
        - 404 Not Found: INVITATION_NOT_FOUND (also for other owners' invitations)
        - 500 Internal Server Error: Server error
    """
    use_case = RevokeInvitationUseCase(uow)
    result = await use_case.execute(current_user["user_id"], token)

    if result.is_err():
        error = result.error
        if error.code == "INVITATION_NOT_FOUND":
            raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
        raise ServerError(error)

    return result.value
