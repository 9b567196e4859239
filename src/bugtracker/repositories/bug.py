"""Repository for Bug entity."""

from uuid import UUID

from sqlmodel import select

from src.bugtracker.models import Bug, BugStatus
from src.bugtracker.repositories.base import BaseRepository


class BugRepository(BaseRepository[Bug]):
    model = Bug

    async def get_by_number(self, project_id: UUID, bug_number: int) -> Bug | None:
        result = await self.session.execute(
            select(Bug).where(Bug.project_id == project_id, Bug.bug_number == bug_number)
        )
        return result.scalar_one_or_none()

    async def list_by_project(
        self,
        project_id: UUID,
        status: BugStatus | None = None,
        cursor: str | None = None,
        limit: int = 50,
    ) -> tuple[list[Bug], str | None, bool]:
        """List bugs in a project, highest number first."""
        query = select(Bug).where(Bug.project_id == project_id)
        if status is not None:
            query = query.where(Bug.status == status.value)
        return await self.paginate(query, cursor, limit, Bug.bug_number)
