import asyncio
from unittest.mock import AsyncMock

import pytest

from src.app.use_cases.access.dtos import (
    ProjectAccessResponse,
    RequestAccessCodeResponse,
    ResolvedInvitation,
    VerifyAccessCodeResponse,
)
from src.client import (
    DENIED_MESSAGE,
    OTHER_SCOPE_MESSAGE,
    TOKEN_REQUIRED_MESSAGE,
    AccessGatewayError,
    AccessGuard,
    GuardState,
)
from src.client.gateway import AccessGateway
from tests.unit.factories import NOW

TOKEN = "a" * 32


def resolved(
    device_bound=False, resource_type="project", resource_id="P1", project_id="P1", token=TOKEN
):
    return ResolvedInvitation(
        token=token,
        project_id=project_id,
        resource_type=resource_type,
        resource_id=resource_id,
        email="a@x.com",
        status="accepted" if device_bound else "pending",
        device_bound=device_bound,
    )


@pytest.fixture
def gateway():
    gateway = AsyncMock(spec=AccessGateway)
    gateway.get_access_level.return_value = ProjectAccessResponse(
        project_id="P1", access_level="token_required"
    )
    gateway.resolve_token.return_value = resolved()
    return gateway


@pytest.fixture
def guard(gateway):
    return AccessGuard(gateway, device_id="dev1")


@pytest.mark.asyncio
async def test_public_project_is_allowed_without_token(guard, gateway):
    gateway.get_access_level.return_value = ProjectAccessResponse(
        project_id="P1", access_level="public"
    )

    state = await guard.evaluate("P1")

    assert state == GuardState.allowed
    gateway.resolve_token.assert_not_called()


@pytest.mark.asyncio
async def test_protected_project_without_token(guard):
    state = await guard.evaluate("P1")

    assert state == GuardState.denied
    assert guard.reason == TOKEN_REQUIRED_MESSAGE


@pytest.mark.asyncio
async def test_bound_device_is_allowed(guard, gateway):
    gateway.resolve_token.return_value = resolved(device_bound=True)

    state = await guard.evaluate("P1", TOKEN)

    assert state == GuardState.allowed
    gateway.resolve_token.assert_called_once_with(TOKEN, "dev1")


@pytest.mark.asyncio
async def test_unbound_device_needs_verification(guard):
    state = await guard.evaluate("P1", TOKEN)

    assert state == GuardState.verification_needed
    assert guard.invitation.email == "a@x.com"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "failure",
    [
        AccessGatewayError("INVITATION_NOT_FOUND", "Invitation not found", 404),
        AccessGatewayError("NETWORK_ERROR", "Network error"),
        ValueError("malformed response"),
        KeyError("access_level"),
    ],
)
async def test_any_resolution_failure_denies(guard, gateway, failure):
    gateway.resolve_token.side_effect = failure

    state = await guard.evaluate("P1", TOKEN)

    assert state == GuardState.denied
    assert guard.reason == DENIED_MESSAGE


@pytest.mark.asyncio
async def test_access_level_failure_denies(guard, gateway):
    gateway.get_access_level.side_effect = RuntimeError("boom")

    assert await guard.evaluate("P1", TOKEN) == GuardState.denied
    assert guard.reason == DENIED_MESSAGE


@pytest.mark.asyncio
async def test_cancellation_propagates(guard, gateway):
    gateway.get_access_level.side_effect = asyncio.CancelledError()

    with pytest.raises(asyncio.CancelledError):
        await guard.evaluate("P1", TOKEN)


@pytest.mark.asyncio
async def test_token_for_other_project_is_denied(guard, gateway):
    gateway.resolve_token.return_value = resolved(device_bound=True, project_id="P2")

    assert await guard.evaluate("P1", TOKEN) == GuardState.denied


@pytest.mark.asyncio
async def test_file_grant_scope(guard, gateway):
    gateway.resolve_token.return_value = resolved(
        device_bound=True, resource_type="file", resource_id="F9"
    )

    assert await guard.evaluate("P1", TOKEN, file_id="F9") == GuardState.allowed
    assert await guard.evaluate("P1", TOKEN, file_id="F8") == GuardState.denied
    assert await guard.evaluate("P1", TOKEN) == GuardState.denied


@pytest.mark.asyncio
async def test_submit_code_allows_and_adopts_token(guard, gateway):
    gateway.verify_access_code.return_value = VerifyAccessCodeResponse(token="b" * 32)
    await guard.evaluate("P1", TOKEN)

    state = await guard.submit_code("482913")

    assert state == GuardState.allowed
    assert guard.token == "b" * 32
    gateway.verify_access_code.assert_called_once_with("P1", "a@x.com", "482913", "dev1")
    gateway.resolve_token.assert_called_with("b" * 32, "dev1")


@pytest.mark.asyncio
async def test_submit_code_for_sibling_file_grant_keeps_page_token(guard, gateway):
    # Arrange: the page shows F1, the code unlocks the same recipient's F2 grant
    gateway.resolve_token.side_effect = [
        resolved(resource_type="file", resource_id="F1"),
        resolved(resource_type="file", resource_id="F2", token="z" * 32, device_bound=True),
    ]
    gateway.verify_access_code.return_value = VerifyAccessCodeResponse(token="z" * 32)
    await guard.evaluate("P1", TOKEN, file_id="F1")

    # Act
    state = await guard.submit_code("482913")

    # Assert
    assert state == GuardState.verification_needed
    assert guard.token == TOKEN
    assert guard.invitation.resource_id == "F1"
    assert guard.error == OTHER_SCOPE_MESSAGE


@pytest.mark.asyncio
async def test_submit_code_resolve_failure_stays_in_verification(guard, gateway):
    gateway.verify_access_code.return_value = VerifyAccessCodeResponse(token="b" * 32)
    gateway.resolve_token.side_effect = [
        resolved(),
        AccessGatewayError("NETWORK_ERROR", "Network error"),
    ]
    await guard.evaluate("P1", TOKEN)

    assert await guard.submit_code("482913") == GuardState.verification_needed
    assert guard.token == TOKEN
    assert guard.error == "Network error"


@pytest.mark.asyncio
async def test_wrong_code_stays_in_verification(guard, gateway):
    gateway.verify_access_code.side_effect = AccessGatewayError(
        "INVALID_ACCESS_CODE", "Invalid verification code", 400
    )
    await guard.evaluate("P1", TOKEN)

    state = await guard.submit_code("000000")

    assert state == GuardState.verification_needed
    assert guard.error == "Invalid verification code"
    assert guard.token == TOKEN


@pytest.mark.asyncio
async def test_unexpected_verify_failure_stays_in_verification(guard, gateway):
    gateway.verify_access_code.side_effect = ValueError("bad json")
    await guard.evaluate("P1", TOKEN)

    assert await guard.submit_code("482913") == GuardState.verification_needed
    assert guard.error is not None


@pytest.mark.asyncio
async def test_request_code(guard, gateway):
    gateway.request_access_code.return_value = RequestAccessCodeResponse(
        success=True,
        message="A verification code has been sent to your email.",
        expires_at=NOW,
    )
    await guard.evaluate("P1", TOKEN)

    message = await guard.request_code()

    assert message == "A verification code has been sent to your email."
    gateway.request_access_code.assert_called_once_with(TOKEN)


@pytest.mark.asyncio
async def test_request_code_failure_sets_error(guard, gateway):
    gateway.request_access_code.side_effect = AccessGatewayError(
        "INVITATION_NOT_FOUND", "Invitation not found or no longer valid", 404
    )
    await guard.evaluate("P1", TOKEN)

    assert await guard.request_code() is None
    assert guard.error == "Invitation not found or no longer valid"


@pytest.mark.asyncio
async def test_submit_code_outside_verification(guard):
    with pytest.raises(RuntimeError):
        await guard.submit_code("482913")


@pytest.mark.asyncio
async def test_retry_reevaluates(guard, gateway):
    gateway.get_access_level.side_effect = [
        RuntimeError("offline"),
        ProjectAccessResponse(project_id="P1", access_level="token_required"),
    ]
    gateway.resolve_token.return_value = resolved(device_bound=True)

    assert await guard.evaluate("P1", TOKEN) == GuardState.denied
    assert await guard.retry() == GuardState.allowed
    assert guard.reason is None


@pytest.mark.asyncio
async def test_retry_before_evaluate(guard):
    with pytest.raises(RuntimeError):
        await guard.retry()
