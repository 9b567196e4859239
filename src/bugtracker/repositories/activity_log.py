"""Repository for ActivityLog entity."""

from uuid import UUID

from sqlmodel import select

from src.bugtracker.models import ActivityLog
from src.bugtracker.repositories.base import BaseRepository


class ActivityLogRepository(BaseRepository[ActivityLog]):
    """Repository for the append-only project activity feed."""

    model = ActivityLog

    async def list_by_project(
        self,
        project_id: UUID,
        cursor: str | None = None,
        limit: int = 50,
        action: str | None = None,
    ) -> tuple[list[ActivityLog], str | None, bool]:
        """List activity for a project with cursor pagination.

        Args:
            project_id: Project to filter by
            cursor: Pagination cursor
            limit: Maximum items to return
            action: Optional action type filter

        Returns:
            Tuple of (entries, next_cursor, has_more)
        """
        query = select(ActivityLog).where(ActivityLog.project_id == project_id)
        if action:
            query = query.where(ActivityLog.action == action)
        return await self.paginate(query, cursor, limit, ActivityLog.created_at)
