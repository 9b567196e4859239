"""Project service - project lifecycle. Roster writes go through MembershipService."""

from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.bugtracker.core.exceptions import BugTrackerError, ProjectNotFoundError
from src.bugtracker.core.logging import get_logger
from src.bugtracker.models import (
    ActivityAction,
    ActivityEntityType,
    Membership,
    Project,
    ProjectRole,
    ProjectStatus,
    User,
    utc_now,
)
from src.bugtracker.repositories import ProjectRepository
from src.bugtracker.services.activity_service import ActivityService

logger = get_logger(__name__)


class ProjectService:
    def __init__(
        self,
        project_repo: ProjectRepository,
        activity_service: ActivityService,
        session: AsyncSession,
    ):
        self.project_repo = project_repo
        self.activity_service = activity_service
        self.session = session

    async def create_project(
        self,
        owner: User,
        name: str,
        description: str | None = None,
        tags: list[str] | None = None,
    ) -> Project:
        """Create a project with its creator as the single owner."""
        now = utc_now()
        owner_entry = Membership(
            user_id=owner.id,
            email=owner.email,
            full_name=owner.full_name,
            role=ProjectRole.OWNER,
            joined_at=now,
            added_by=owner.id,
        )
        project = Project(
            name=name,
            description=description,
            owner_id=owner.id,
            status=ProjectStatus.ACTIVE.value,
            tags=tags or [],
            members=[owner_entry.to_document()],
            created_at=now,
            updated_at=now,
        )
        try:
            self.project_repo.add(project)
            self.activity_service.record(
                project.id,
                owner.id,
                owner.full_name,
                ActivityAction.PROJECT_CREATED,
                ActivityEntityType.PROJECT,
                entity_id=project.id,
                entity_title=name,
            )
            await self.session.commit()
            await self.session.refresh(project)
        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to create project", error=str(e))
            raise

        logger.info("Project created", project_id=str(project.id), owner_id=str(owner.id))
        return project

    async def get_project(self, project_id: UUID) -> Project:
        project = await self.project_repo.get_by_id(project_id)
        if project is None:
            raise ProjectNotFoundError()
        return project

    async def list_projects(
        self, user_id: UUID, status: ProjectStatus | None = None
    ) -> list[Project]:
        """Projects the user belongs to, in any role."""
        return await self.project_repo.list_for_member(user_id, status)

    async def update_project(
        self,
        project_id: UUID,
        actor: User,
        name: str | None = None,
        description: str | None = None,
        status: ProjectStatus | None = None,
        tags: list[str] | None = None,
    ) -> Project:
        """Update project fields. Only provided (non-None) fields change."""
        actor_id = actor.id
        actor_name = actor.full_name
        try:
            project = await self.get_project(project_id)

            changes: dict[str, Any] = {}
            if name is not None and name != project.name:
                changes["name"] = name
            if description is not None and description != project.description:
                changes["description"] = description
            if status is not None and status.value != project.status:
                changes["status"] = status.value
            if tags is not None and tags != project.tags:
                changes["tags"] = tags

            if changes:
                for key, value in changes.items():
                    setattr(project, key, value)
                project.updated_at = utc_now()
                self.project_repo.add(project)
                self.activity_service.record(
                    project_id,
                    actor_id,
                    actor_name,
                    ActivityAction.PROJECT_UPDATED,
                    ActivityEntityType.PROJECT,
                    entity_id=project_id,
                    entity_title=project.name,
                    details={"changes": changes},
                )
                await self.session.commit()
                await self.session.refresh(project)
        except BugTrackerError:
            await self.session.rollback()
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to update project", project_id=str(project_id), error=str(e))
            raise

        if changes:
            logger.info("Project updated", project_id=str(project_id), fields=sorted(changes))
        return project
