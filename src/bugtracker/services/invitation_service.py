"""Project invitation service."""

from datetime import timedelta
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.bugtracker.core.config import get_settings
from src.bugtracker.core.exceptions import (
    AlreadyMemberError,
    BugTrackerError,
    DuplicateInvitationError,
    InvitationExpiredError,
    InvitationNotPendingError,
    NotFoundError,
    ProjectNotFoundError,
    TokenNotFoundError,
    ValidationError,
)
from src.bugtracker.core.logging import get_logger
from src.bugtracker.core.security import generate_invite_token, hash_token
from src.bugtracker.core.validators import validate_email
from src.bugtracker.models import (
    INVITABLE_ROLES,
    ActivityAction,
    ActivityEntityType,
    Invitation,
    InvitationStatus,
    ProjectRole,
    User,
    utc_now,
)
from src.bugtracker.repositories import InvitationRepository, ProjectRepository, UserRepository
from src.bugtracker.services.activity_service import ActivityService

logger = get_logger(__name__)


class InvitationService:
    """Service for project invitation operations.

    Invitations move pending -> accepted | declined | expired and never leave
    a terminal state. Acceptance itself lives in ReconciliationService.
    """

    def __init__(
        self,
        invitation_repo: InvitationRepository,
        project_repo: ProjectRepository,
        user_repo: UserRepository,
        activity_service: ActivityService,
        session: AsyncSession,
    ):
        self.invitation_repo = invitation_repo
        self.project_repo = project_repo
        self.user_repo = user_repo
        self.activity_service = activity_service
        self.session = session

    async def create_invitation(
        self,
        project_id: UUID,
        invited_email: str,
        invited_by: User,
        role: ProjectRole | str = ProjectRole.TESTER,
    ) -> tuple[Invitation, str]:
        """Create an invitation. Returns (invitation, plaintext_token).

        The plaintext token is only available here; the store keeps its digest.
        What happens to an earlier pending invitation for the same
        (project, email) depends on settings.invite_duplicate_policy.

        Raises:
            ValidationError: Owner role requested or malformed email.
            ProjectNotFoundError: Project does not exist.
            AlreadyMemberError: The invitee already belongs to the project.
            DuplicateInvitationError: Pending invite exists and policy is "reject".
        """
        try:
            role = ProjectRole(role)
        except ValueError as e:
            raise ValidationError(f"Unknown role: {role}") from e
        if role not in INVITABLE_ROLES:
            raise ValidationError("Invitations cannot grant the owner role")

        try:
            email = validate_email(invited_email)
        except ValueError as e:
            raise ValidationError(str(e)) from e

        settings = get_settings()
        inviter_id = invited_by.id
        inviter_name = invited_by.full_name

        try:
            policy = settings.invite_duplicate_policy
            # Serializes concurrent invites to one project so the duplicate check holds
            if policy != "allow" and not await self.project_repo.lock(project_id):
                raise ProjectNotFoundError()

            project = await self.project_repo.get_by_id(project_id)
            if project is None:
                raise ProjectNotFoundError()

            existing_user = await self.user_repo.get_by_email(email)
            if existing_user and project.get_member(existing_user.id) is not None:
                raise AlreadyMemberError()

            superseded = 0
            if policy != "allow":
                pending = await self.invitation_repo.get_pending_for_project_email(
                    project_id, email
                )
                if pending and policy == "reject":
                    raise DuplicateInvitationError()
                if pending:
                    superseded = await self.invitation_repo.expire_pending_for(project_id, email)

            token, token_hash = generate_invite_token()
            invitation = Invitation(
                project_id=project_id,
                project_name=project.name,
                invited_email=email,
                invited_by=inviter_id,
                role=role.value,
                token_hash=token_hash,
                status=InvitationStatus.PENDING.value,
                expires_at=utc_now() + timedelta(days=settings.invite_expire_days),
            )
            self.invitation_repo.add(invitation)
            self.activity_service.record(
                project_id,
                inviter_id,
                inviter_name,
                ActivityAction.MEMBER_INVITED,
                ActivityEntityType.INVITATION,
                entity_id=invitation.id,
                entity_title=email,
                details={"role": role.value},
            )
            await self.session.commit()
            await self.session.refresh(invitation)

        except BugTrackerError:
            await self.session.rollback()
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to create invitation", project_id=str(project_id), error=str(e))
            raise

        logger.info(
            "Invitation created",
            invitation_id=str(invitation.id),
            project_id=str(project_id),
            invited_by=str(inviter_id),
            role=role.value,
            superseded=superseded,
        )
        return invitation, token

    async def resolve_pending(self, token: str) -> Invitation:
        """Look up an invitation by token and check it can still be answered.

        A pending invitation found past its deadline is marked expired (and
        committed) before InvitationExpiredError is raised.

        Raises:
            TokenNotFoundError: No invitation carries this token.
            InvitationExpiredError: Expired, or past due.
            InvitationNotPendingError: Already accepted or declined.
        """
        invitation = await self.invitation_repo.get_by_token_hash(hash_token(token))
        if invitation is None:
            raise TokenNotFoundError()

        status = invitation.status_enum
        if status == InvitationStatus.EXPIRED:
            raise InvitationExpiredError()
        if status != InvitationStatus.PENDING:
            raise InvitationNotPendingError(f"Invitation has already been {status.value}")

        if invitation.is_expired():
            invitation_id = invitation.id
            if await self.invitation_repo.mark_expired(invitation_id):
                await self.session.commit()
                logger.info("Invitation expired on read", invitation_id=str(invitation_id))
            raise InvitationExpiredError()

        return invitation

    async def get_invitation_info(self, token: str) -> dict[str, Any] | None:
        """Public info about an invitation, for the accept page.

        Returns None unless the invitation is pending and unexpired.
        """
        invitation = await self.invitation_repo.get_by_token_hash(hash_token(token))
        if (
            invitation is None
            or invitation.status_enum != InvitationStatus.PENDING
            or invitation.is_expired()
        ):
            return None

        inviter = await self.user_repo.get_by_id(invitation.invited_by)
        return {
            "project_id": invitation.project_id,
            "project_name": invitation.project_name,
            "invited_email": invitation.invited_email,
            "inviter_name": inviter.full_name if inviter else "A team member",
            "role": invitation.role,
            "expires_at": invitation.expires_at,
        }

    async def decline_invitation(self, token: str, acting_user: User) -> Invitation:
        """Decline an invitation. Validation is the same as for acceptance."""
        actor_id = acting_user.id
        actor_name = acting_user.full_name
        try:
            invitation = await self.resolve_pending(token)
            invitation_id = invitation.id
            project_id = invitation.project_id

            if not await self.invitation_repo.mark_responded(
                invitation_id, InvitationStatus.DECLINED
            ):
                raise InvitationNotPendingError()

            self.activity_service.record(
                project_id,
                actor_id,
                actor_name,
                ActivityAction.INVITATION_DECLINED,
                ActivityEntityType.INVITATION,
                entity_id=invitation_id,
                entity_title=invitation.invited_email,
            )
            await self.session.commit()
            await self.session.refresh(invitation)

        except BugTrackerError:
            await self.session.rollback()
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to decline invitation", error=str(e))
            raise

        logger.info("Invitation declined", invitation_id=str(invitation_id), user_id=str(actor_id))
        return invitation

    async def revoke_invitation(
        self, project_id: UUID, invitation_id: UUID, actor: User
    ) -> Invitation:
        """Withdraw a pending invitation. It ends in the expired state."""
        actor_id = actor.id
        actor_name = actor.full_name
        try:
            invitation = await self.invitation_repo.get_by_id(invitation_id)
            if invitation is None or invitation.project_id != project_id:
                raise NotFoundError("Invitation not found")
            if invitation.status_enum != InvitationStatus.PENDING:
                raise InvitationNotPendingError(
                    f"Cannot revoke invitation with status: {invitation.status}"
                )

            if not await self.invitation_repo.mark_expired(invitation_id):
                raise InvitationNotPendingError()

            self.activity_service.record(
                project_id,
                actor_id,
                actor_name,
                ActivityAction.INVITATION_REVOKED,
                ActivityEntityType.INVITATION,
                entity_id=invitation_id,
                entity_title=invitation.invited_email,
            )
            await self.session.commit()
            await self.session.refresh(invitation)

        except BugTrackerError:
            await self.session.rollback()
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error(
                "Failed to revoke invitation", invitation_id=str(invitation_id), error=str(e)
            )
            raise

        logger.info(
            "Invitation revoked", invitation_id=str(invitation_id), project_id=str(project_id)
        )
        return invitation

    async def list_project_invitations(
        self,
        project_id: UUID,
        status: InvitationStatus | None = None,
        cursor: str | None = None,
        limit: int = 50,
    ) -> tuple[list[Invitation], str | None, bool]:
        """List a project's invitations with cursor-based pagination.

        Returns:
            Tuple of (items, next_cursor, has_more)
        """
        return await self.invitation_repo.list_by_project(project_id, status, cursor, limit)

    async def expire_overdue(self) -> int:
        """Expire every pending invitation past its deadline. Returns count."""
        try:
            count = await self.invitation_repo.expire_overdue()
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        if count:
            logger.info("Expired overdue invitations", count=count)
        return count
