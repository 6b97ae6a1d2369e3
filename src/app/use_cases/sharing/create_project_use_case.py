"""
Create Project Use Case

Registers a reviewable project owned by the calling creator.
"""

import logging
from typing import Optional
from uuid import uuid4

from sqlalchemy.exc import SQLAlchemyError

from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import AccessLevel, AuditEvent, Project

from .dtos import ProjectResponse

logger = logging.getLogger(__name__)


class CreateProjectUseCase:
    """
    Use case for registering a project.

    Business Rules:
    - Name is required
    - Access level defaults to public
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        owner_id: str,
        name: str,
        access_level: str = AccessLevel.public.value,
        project_id: Optional[str] = None,
    ) -> Result[ProjectResponse]:
        if not name or not name.strip():
            return Return.err(Error("MISSING_FIELDS", "Project name is required"))

        try:
            level = AccessLevel(access_level)
        except ValueError:
            return Return.err(
                Error(
                    "INVALID_ACCESS_LEVEL",
                    f"Invalid access level: {access_level}. Must be one of: public, token_required",
                )
            )

        async with self.uow:
            try:
                project = Project(
                    id=project_id or uuid4().hex,
                    name=name.strip(),
                    owner_id=owner_id,
                    access_level=level,
                )
                await self.uow.projects.create(project)
                await self.uow.audit_events.create(
                    AuditEvent(
                        project_id=project.id,
                        actor_id=owner_id,
                        action="project_created",
                        event_metadata={"access_level": level.value},
                    )
                )
                await self.uow.commit()
            except SQLAlchemyError:
                logger.exception("Failed to create project")
                return Return.err(Error("PERSISTENCE_ERROR", "Could not save project"))

            return Return.ok(
                ProjectResponse(id=project.id, name=project.name, access_level=level.value)
            )
