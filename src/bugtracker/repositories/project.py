"""Repository for Project entity and its embedded member roster."""

from collections.abc import Callable
from typing import Any, cast
from uuid import UUID

from sqlalchemy import String
from sqlalchemy import cast as sa_cast
from sqlalchemy.engine import CursorResult
from sqlmodel import select, update

from src.bugtracker.core.config import get_settings
from src.bugtracker.core.exceptions import ProjectNotFoundError, TransientStorageError
from src.bugtracker.core.logging import get_logger
from src.bugtracker.models import Membership, Project, ProjectRole, ProjectStatus, utc_now
from src.bugtracker.repositories.base import BaseRepository

logger = get_logger(__name__)

# Returns the new roster, or None when no write is needed
MembersMutation = Callable[[list[dict[str, Any]]], list[dict[str, Any]] | None]


class ProjectRepository(BaseRepository[Project]):
    """Repository for Project entity.

    Roster writes go through a compare-and-swap on `projects.version` so two
    concurrent writers can never lose each other's member. Updates are Core
    statements: objects already loaded in the session are not refreshed.
    """

    model = Project

    async def get_by_id(self, id: UUID) -> Project | None:
        """Get a project, overwriting any stale copy held by the session."""
        result = await self.session.execute(
            select(Project)
            .where(Project.id == id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def lock(self, project_id: UUID) -> bool:
        """Take the project row's write lock for the rest of the transaction.

        A no-op update: PostgreSQL locks the row, SQLite takes the database
        write lock. Returns False if the project does not exist.
        """
        result = await self.session.execute(
            update(Project)
            .where(Project.id == project_id)  # type: ignore[arg-type]
            .values(version=Project.version)
            .execution_options(synchronize_session=False)
        )
        return cast(CursorResult[Any], result).rowcount == 1

    async def get_member(self, project_id: UUID, user_id: UUID) -> Membership | None:
        """Read one roster entry straight from the database.

        Raises:
            ProjectNotFoundError: Project does not exist.
        """
        members = (
            await self.session.execute(select(Project.members).where(Project.id == project_id))
        ).scalar_one_or_none()
        if members is None:
            raise ProjectNotFoundError()
        target = str(user_id)
        for m in members:
            if m["user_id"] == target:
                return Membership.model_validate(m)
        return None

    async def list_for_member(
        self, user_id: UUID, status: ProjectStatus | None = None
    ) -> list[Project]:
        """List projects where the user appears in the roster, most recently updated first."""
        # Text prefilter on the serialized roster, exact check in Python
        query = select(Project).where(
            sa_cast(Project.members, String).contains(str(user_id))  # type: ignore[arg-type]
        )
        if status is not None:
            query = query.where(Project.status == status.value)
        query = query.order_by(Project.updated_at.desc())  # type: ignore[attr-defined]
        query = query.execution_options(populate_existing=True)
        result = await self.session.execute(query)
        return [p for p in result.scalars().all() if p.get_member(user_id) is not None]

    async def add_member(self, project_id: UUID, membership: Membership) -> bool:
        """Append a member unless the user is already in the roster.

        Returns:
            True if the member was added, False if the user was already present.

        Raises:
            ProjectNotFoundError: Project does not exist.
            TransientStorageError: Lost the version race too many times.
        """
        user_id = str(membership.user_id)

        def mutate(members: list[dict[str, Any]]) -> list[dict[str, Any]] | None:
            if any(m["user_id"] == user_id for m in members):
                return None
            return [*members, membership.to_document()]

        return await self._update_members(project_id, mutate)

    async def remove_member(self, project_id: UUID, user_id: UUID) -> bool:
        """Remove a member. Returns False if the user was not in the roster."""
        target = str(user_id)

        def mutate(members: list[dict[str, Any]]) -> list[dict[str, Any]] | None:
            remaining = [m for m in members if m["user_id"] != target]
            if len(remaining) == len(members):
                return None
            return remaining

        return await self._update_members(project_id, mutate)

    async def update_member_role(
        self, project_id: UUID, user_id: UUID, role: ProjectRole
    ) -> bool:
        """Change a member's role. Returns False if the user is absent or already has it."""
        target = str(user_id)

        def mutate(members: list[dict[str, Any]]) -> list[dict[str, Any]] | None:
            changed = False
            updated = []
            for m in members:
                if m["user_id"] == target and m["role"] != role.value:
                    m = {**m, "role": role.value}
                    changed = True
                updated.append(m)
            return updated if changed else None

        return await self._update_members(project_id, mutate)

    async def _update_members(self, project_id: UUID, mutate: MembersMutation) -> bool:
        max_retries = get_settings().membership_update_max_retries
        for attempt in range(max_retries):
            row = (
                await self.session.execute(
                    select(Project.members, Project.version).where(Project.id == project_id)
                )
            ).one_or_none()
            if row is None:
                raise ProjectNotFoundError()

            members, version = row
            new_members = mutate(list(members or []))
            if new_members is None:
                return False

            result = await self.session.execute(
                update(Project)
                .where(Project.id == project_id)  # type: ignore[arg-type]
                .where(Project.version == version)  # type: ignore[arg-type]
                .values(members=new_members, version=version + 1, updated_at=utc_now())
                .execution_options(synchronize_session=False)
            )
            if cast(CursorResult[Any], result).rowcount == 1:
                return True

            logger.debug(
                "Roster version conflict, retrying",
                project_id=str(project_id),
                attempt=attempt + 1,
            )

        raise TransientStorageError("Project roster is busy. Please retry.")
