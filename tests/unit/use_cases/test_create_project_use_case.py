import pytest

from src.app.use_cases.sharing import CreateProjectUseCase
from src.domain.entities import AccessLevel


@pytest.mark.asyncio
async def test_create_project(mock_uow):
    result = await CreateProjectUseCase(mock_uow).execute("owner-1", "  Spring campaign ")

    assert result.is_ok()
    assert result.value.name == "Spring campaign"
    assert result.value.access_level == "public"
    assert len(result.value.id) == 32

    project = mock_uow.projects.create.call_args.args[0]
    assert project.owner_id == "owner-1"
    assert project.access_level == AccessLevel.public
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_create_project_with_explicit_id(mock_uow):
    result = await CreateProjectUseCase(mock_uow).execute(
        "owner-1", "Spring campaign", "token_required", project_id="P1"
    )

    assert result.value.id == "P1"
    assert result.value.access_level == "token_required"


@pytest.mark.asyncio
async def test_create_project_requires_name(mock_uow):
    result = await CreateProjectUseCase(mock_uow).execute("owner-1", "   ")

    assert result.is_err()
    assert result.error.code == "MISSING_FIELDS"


@pytest.mark.asyncio
async def test_create_project_rejects_unknown_access_level(mock_uow):
    result = await CreateProjectUseCase(mock_uow).execute("owner-1", "X", "secret")

    assert result.is_err()
    assert result.error.code == "INVALID_ACCESS_LEVEL"
    mock_uow.projects.create.assert_not_called()
