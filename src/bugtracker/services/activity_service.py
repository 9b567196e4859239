"""Activity feed service - records project actions inside the caller's transaction."""

from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.bugtracker.core.logging import get_logger
from src.bugtracker.models import ActivityAction, ActivityEntityType, ActivityLog
from src.bugtracker.repositories import ActivityLogRepository

logger = get_logger(__name__)


class ActivityService:
    """Service for the project activity feed.

    Entries are added to the session but never committed here: they land or
    vanish together with the business write that produced them.
    """

    def __init__(self, activity_repo: ActivityLogRepository, session: AsyncSession):
        self.activity_repo = activity_repo
        self.session = session

    def record(
        self,
        project_id: UUID,
        actor_id: UUID,
        actor_name: str,
        action: ActivityAction,
        entity_type: ActivityEntityType,
        entity_id: UUID | None = None,
        entity_title: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> ActivityLog:
        """Stage an activity entry in the current unit of work."""
        entry = ActivityLog(
            project_id=project_id,
            actor_id=actor_id,
            actor_name=actor_name,
            action=action.value,
            entity_type=entity_type.value,
            entity_id=entity_id,
            entity_title=entity_title[:300] if entity_title else None,
            details=details or {},
        )
        self.activity_repo.add(entry)
        logger.debug(
            "Activity staged",
            project_id=str(project_id),
            action=action.value,
            entity_id=str(entity_id) if entity_id else None,
        )
        return entry

    async def list_project_activity(
        self,
        project_id: UUID,
        cursor: str | None = None,
        limit: int = 50,
        action: ActivityAction | None = None,
    ) -> tuple[list[ActivityLog], str | None, bool]:
        return await self.activity_repo.list_by_project(
            project_id, cursor=cursor, limit=limit, action=action.value if action else None
        )
