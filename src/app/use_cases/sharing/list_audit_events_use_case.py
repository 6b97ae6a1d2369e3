"""
List Audit Events Use Case

Paged read of a project's sharing and access log for its owner.
"""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork

from .dtos import AuditEventsPage, AuditEventView

logger = logging.getLogger(__name__)


class ListAuditEventsUseCase:
    """
    Use case for reading a project's audit log.

    Business Rules:
    - Only the project owner can read it
    - Newest first; the cursor is the timestamp of the last event returned
    - Metadata is returned as written (token prefixes only, never codes)
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        owner_id: str,
        project_id: str,
        limit: int = 50,
        cursor: Optional[str] = None,
    ) -> Result[AuditEventsPage]:
        before = None
        if cursor:
            try:
                before = datetime.fromisoformat(cursor)
            except ValueError:
                return Return.err(Error("INVALID_CURSOR", "Invalid pagination cursor"))

        async with self.uow:
            try:
                project = await self.uow.projects.get_by_id(project_id)
                if project is None:
                    return Return.err(Error("PROJECT_NOT_FOUND", "Project not found"))

                if project.owner_id != owner_id:
                    return Return.err(
                        Error("NOT_PROJECT_OWNER", "Only the project owner can view its audit log")
                    )

                # One extra row tells whether another page exists
                events = await self.uow.audit_events.list_by_project(
                    project_id, limit=limit + 1, before=before
                )
            except SQLAlchemyError:
                logger.exception(f"Failed to list audit events of project {project_id}")
                return Return.err(Error("PERSISTENCE_ERROR", "Could not load audit events"))

            next_cursor = None
            if len(events) > limit:
                events = events[:limit]
                next_cursor = events[-1].created_at.isoformat()

            return Return.ok(
                AuditEventsPage(
                    events=[
                        AuditEventView(
                            action=event.action,
                            actor_id=event.actor_id,
                            timestamp=event.created_at,
                            metadata=event.event_metadata or {},
                        )
                        for event in events
                    ],
                    next_cursor=next_cursor,
                )
            )
