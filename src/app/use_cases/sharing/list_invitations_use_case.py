"""
List Invitations Use Case

Snapshot of every invitation of a project for its owner.
"""

import logging
from typing import List

from sqlalchemy.exc import SQLAlchemyError

from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork

from .dtos import InvitationView

logger = logging.getLogger(__name__)


class ListInvitationsUseCase:
    """Owner-only listing, newest first, with read-time expiry applied."""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, owner_id: str, project_id: str) -> Result[List[InvitationView]]:
        async with self.uow:
            try:
                project = await self.uow.projects.get_by_id(project_id)
                if project is None:
                    return Return.err(Error("PROJECT_NOT_FOUND", "Project not found"))

                if project.owner_id != owner_id:
                    return Return.err(
                        Error("NOT_PROJECT_OWNER", "Only the project owner can view invitations")
                    )

                invitations = await self.uow.invitations.list_by_project(project_id)
            except SQLAlchemyError:
                logger.exception(f"Failed to list invitations of project {project_id}")
                return Return.err(Error("PERSISTENCE_ERROR", "Could not load invitations"))

            return Return.ok([InvitationView.from_entity(i) for i in invitations])
