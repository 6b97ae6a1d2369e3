"""
Get Access Level Use Case

Reads whether a project is public or token-gated.
"""

import logging

from sqlalchemy.exc import SQLAlchemyError

from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import AccessLevel

from .dtos import ProjectAccessResponse

logger = logging.getLogger(__name__)


class GetAccessLevelUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, project_id: str) -> Result[ProjectAccessResponse]:
        async with self.uow:
            try:
                project = await self.uow.projects.get_by_id(project_id)
            except SQLAlchemyError:
                logger.exception(f"Failed to read access level of project {project_id}")
                return Return.err(Error("PERSISTENCE_ERROR", "Could not read project"))

            if project is None:
                return Return.err(Error("PROJECT_NOT_FOUND", "Project not found"))

            return Return.ok(
                ProjectAccessResponse(
                    project_id=project.id,
                    access_level=AccessLevel(project.access_level).value,
                )
            )
