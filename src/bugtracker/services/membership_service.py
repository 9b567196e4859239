"""Membership service - owns writes to a project's member roster."""

from dataclasses import dataclass
from enum import Enum
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.bugtracker.core.exceptions import (
    BugTrackerError,
    NotFoundError,
    ProjectNotFoundError,
    ValidationError,
)
from src.bugtracker.core.logging import get_logger
from src.bugtracker.models import (
    INVITABLE_ROLES,
    ActivityAction,
    ActivityEntityType,
    Membership,
    ProjectRole,
    User,
    utc_now,
)
from src.bugtracker.repositories import ProjectRepository, UserRepository
from src.bugtracker.services.activity_service import ActivityService

logger = get_logger(__name__)


class MembershipOutcome(str, Enum):
    ADDED = "added"
    ALREADY_MEMBER = "already_member"


@dataclass(frozen=True)
class MemberIdentity:
    """Plain snapshot of the user fields a roster entry needs.

    Stays readable after a session rollback expires the ORM object it was
    taken from.
    """

    user_id: UUID
    email: str
    full_name: str

    @classmethod
    def from_user(cls, user: User) -> "MemberIdentity":
        return cls(user_id=user.id, email=user.email, full_name=user.full_name)


@dataclass(frozen=True)
class MembershipResult:
    project_id: UUID
    user_id: UUID
    role: ProjectRole
    outcome: MembershipOutcome

    @property
    def added(self) -> bool:
        return self.outcome == MembershipOutcome.ADDED


class MembershipService:
    """Service for project membership operations.

    add_user is idempotent: adding someone who is already in the roster
    reports ALREADY_MEMBER and writes nothing.
    """

    def __init__(
        self,
        project_repo: ProjectRepository,
        user_repo: UserRepository,
        activity_service: ActivityService,
        session: AsyncSession,
    ):
        self.project_repo = project_repo
        self.user_repo = user_repo
        self.activity_service = activity_service
        self.session = session

    async def add_member(
        self,
        project_id: UUID,
        user_id: UUID,
        role: ProjectRole,
        added_by: User,
    ) -> MembershipResult:
        """Add a registered user to a project directly (owner action)."""
        if role not in INVITABLE_ROLES:
            raise ValidationError("The owner role cannot be granted")

        user = await self.user_repo.get_by_id(user_id)
        if user is None or not user.is_active:
            raise NotFoundError("User not found")

        return await self.add_user(
            project_id,
            MemberIdentity.from_user(user),
            role,
            added_by=added_by.id,
            actor=MemberIdentity.from_user(added_by),
        )

    async def add_user(
        self,
        project_id: UUID,
        identity: MemberIdentity,
        role: ProjectRole,
        added_by: UUID,
        actor: MemberIdentity,
        *,
        details: dict[str, Any] | None = None,
        commit: bool = True,
    ) -> MembershipResult:
        """Insert a roster entry unless the user is already present.

        With commit=False the write joins the caller's unit of work and the
        caller is responsible for commit and rollback.

        Raises:
            ProjectNotFoundError: Project does not exist.
            TransientStorageError: Roster stayed contended past the retry limit.
        """
        membership = Membership(
            user_id=identity.user_id,
            email=identity.email,
            full_name=identity.full_name,
            role=role,
            joined_at=utc_now(),
            added_by=added_by,
        )
        try:
            added = await self.project_repo.add_member(project_id, membership)
            if added:
                self.activity_service.record(
                    project_id,
                    actor.user_id,
                    actor.full_name,
                    ActivityAction.MEMBER_ADDED,
                    ActivityEntityType.MEMBER,
                    entity_id=identity.user_id,
                    entity_title=identity.full_name,
                    details={"role": role.value, **(details or {})},
                )
                result_role = role
            else:
                existing = await self.project_repo.get_member(project_id, identity.user_id)
                result_role = existing.role if existing else role
            if commit:
                await self.session.commit()
        except Exception:
            if commit:
                await self.session.rollback()
            raise

        outcome = MembershipOutcome.ADDED if added else MembershipOutcome.ALREADY_MEMBER
        logger.info(
            "Member added" if added else "Member already present",
            project_id=str(project_id),
            user_id=str(identity.user_id),
            role=result_role.value,
        )
        return MembershipResult(
            project_id=project_id,
            user_id=identity.user_id,
            role=result_role,
            outcome=outcome,
        )

    async def list_members(self, project_id: UUID) -> list[Membership]:
        project = await self.project_repo.get_by_id(project_id)
        if project is None:
            raise ProjectNotFoundError()
        return project.member_list

    async def remove_member(self, project_id: UUID, user_id: UUID, actor: User) -> None:
        """Remove a member. The owner cannot be removed."""
        actor_identity = MemberIdentity.from_user(actor)
        try:
            member = await self.project_repo.get_member(project_id, user_id)
            if member is None:
                raise NotFoundError("Member not found")
            if member.role == ProjectRole.OWNER:
                raise ValidationError("The project owner cannot be removed")

            if not await self.project_repo.remove_member(project_id, user_id):
                raise NotFoundError("Member not found")

            self.activity_service.record(
                project_id,
                actor_identity.user_id,
                actor_identity.full_name,
                ActivityAction.MEMBER_REMOVED,
                ActivityEntityType.MEMBER,
                entity_id=user_id,
                entity_title=member.full_name,
                details={"role": member.role.value},
            )
            await self.session.commit()
        except BugTrackerError:
            await self.session.rollback()
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to remove member", project_id=str(project_id), error=str(e))
            raise

        logger.info("Member removed", project_id=str(project_id), user_id=str(user_id))

    async def change_member_role(
        self, project_id: UUID, user_id: UUID, role: ProjectRole, actor: User
    ) -> Membership:
        """Switch a member between tester and viewer.

        The owner role can be neither granted nor revoked this way.
        """
        if role == ProjectRole.OWNER:
            raise ValidationError("The owner role cannot be granted")

        actor_identity = MemberIdentity.from_user(actor)
        try:
            member = await self.project_repo.get_member(project_id, user_id)
            if member is None:
                raise NotFoundError("Member not found")
            if member.role == ProjectRole.OWNER:
                raise ValidationError("The owner's role cannot be changed")

            if await self.project_repo.update_member_role(project_id, user_id, role):
                self.activity_service.record(
                    project_id,
                    actor_identity.user_id,
                    actor_identity.full_name,
                    ActivityAction.MEMBER_ROLE_CHANGED,
                    ActivityEntityType.MEMBER,
                    entity_id=user_id,
                    entity_title=member.full_name,
                    details={"from": member.role.value, "to": role.value},
                )
            await self.session.commit()
        except BugTrackerError:
            await self.session.rollback()
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to change member role", project_id=str(project_id), error=str(e))
            raise

        logger.info(
            "Member role changed",
            project_id=str(project_id),
            user_id=str(user_id),
            role=role.value,
        )
        return member.model_copy(update={"role": role})
