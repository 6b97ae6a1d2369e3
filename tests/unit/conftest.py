import pytest
from unittest.mock import AsyncMock, MagicMock

from tests.unit.factories import NOW


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def clock():
    return lambda: NOW


@pytest.fixture
def mock_uow():
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    uow.invitations = MagicMock()
    uow.invitations.get_by_token = AsyncMock()
    uow.invitations.list_live_by_project_and_email = AsyncMock(return_value=[])
    uow.invitations.list_by_project = AsyncMock(return_value=[])
    uow.invitations.create = AsyncMock(side_effect=lambda invitation: invitation)
    uow.invitations.update_if_unchanged = AsyncMock(return_value=True)

    uow.projects = MagicMock()
    uow.projects.get_by_id = AsyncMock(return_value=None)
    uow.projects.create = AsyncMock(side_effect=lambda project: project)
    uow.projects.update = AsyncMock(side_effect=lambda project: project)

    uow.outbox = MagicMock()
    uow.outbox.create = AsyncMock(side_effect=lambda mail: mail)

    uow.audit_events = MagicMock()
    uow.audit_events.create = AsyncMock()
    uow.audit_events.list_by_project = AsyncMock(return_value=[])
    return uow
