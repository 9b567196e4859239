"""Reconciliation service - turns invitations into memberships.

Two entry points:
- accept_by_token: explicit, the invitee presents the token.
- reconcile_for_new_user: implicit, right after registration, for every
  pending invitation addressed to the new user's email.

Each invitation is handled in its own unit of work: the roster entry is
flushed first, then the invitation is moved to accepted with a conditional
update. If that update finds the invitation already answered, the unit
rolls back and the roster is left untouched.
"""

from dataclasses import dataclass, field
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.bugtracker.core.exceptions import BugTrackerError, InvitationNotPendingError
from src.bugtracker.core.logging import get_logger
from src.bugtracker.core.validators import normalize_email
from src.bugtracker.models import Invitation, InvitationStatus, ProjectRole, User
from src.bugtracker.repositories import InvitationRepository
from src.bugtracker.services.invitation_service import InvitationService
from src.bugtracker.services.membership_service import (
    MemberIdentity,
    MembershipResult,
    MembershipService,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class _PendingInvitation:
    """Fields needed to accept an invitation, copied out of the ORM row."""

    id: UUID
    project_id: UUID
    role: ProjectRole
    invited_by: UUID


@dataclass(frozen=True)
class ReconciliationFailure:
    invitation_id: UUID
    project_id: UUID
    error: str


@dataclass
class ReconciliationReport:
    """Outcome of reconcile_for_new_user, one entry per invitation processed."""

    user_id: UUID
    accepted: list[MembershipResult] = field(default_factory=list)
    failed: list[ReconciliationFailure] = field(default_factory=list)

    @property
    def processed(self) -> int:
        return len(self.accepted) + len(self.failed)

    @property
    def ok(self) -> bool:
        return not self.failed


class ReconciliationService:
    def __init__(
        self,
        invitation_service: InvitationService,
        invitation_repo: InvitationRepository,
        membership_service: MembershipService,
        session: AsyncSession,
    ):
        self.invitation_service = invitation_service
        self.invitation_repo = invitation_repo
        self.membership_service = membership_service
        self.session = session

    async def accept_by_token(self, token: str, acting_user: User) -> MembershipResult:
        """Accept an invitation on behalf of the authenticated user.

        The acting user joins with the invitation's role; added_by is the
        inviter. Accepting when already a member still consumes the invitation.

        Raises:
            TokenNotFoundError: Unknown token.
            InvitationExpiredError: Expired or past due.
            InvitationNotPendingError: Already answered, including by a
                concurrent accept that won the race.
            ProjectNotFoundError: The project no longer exists.
        """
        identity = MemberIdentity.from_user(acting_user)
        try:
            invitation = await self.invitation_service.resolve_pending(token)
            result = await self._accept(_snapshot(invitation), identity)
        except BugTrackerError:
            await self.session.rollback()
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to accept invitation", user_id=str(identity.user_id), error=str(e))
            raise

        logger.info(
            "Invitation accepted",
            project_id=str(result.project_id),
            user_id=str(identity.user_id),
            outcome=result.outcome.value,
        )
        return result

    async def reconcile_for_new_user(self, user: User) -> ReconciliationReport:
        """Accept every pending, unexpired invitation addressed to the user's email.

        Failures are isolated per invitation: each one is rolled back, logged
        and recorded in the report while the rest carry on. Never raises
        (cancellation still propagates).
        """
        identity = MemberIdentity.from_user(user)
        report = ReconciliationReport(user_id=identity.user_id)
        log = logger.bind(user_id=str(identity.user_id))

        try:
            rows = await self.invitation_repo.get_pending_by_email(normalize_email(identity.email))
            pending = [_snapshot(row) for row in rows]
        except Exception:
            await self.session.rollback()
            log.exception("Could not load pending invitations")
            return report

        for invitation in pending:
            try:
                result = await self._accept(invitation, identity)
            except Exception as e:
                await self.session.rollback()
                log.warning(
                    "Invitation reconciliation failed",
                    invitation_id=str(invitation.id),
                    project_id=str(invitation.project_id),
                    error=str(e),
                    error_type=type(e).__name__,
                )
                report.failed.append(
                    ReconciliationFailure(
                        invitation_id=invitation.id,
                        project_id=invitation.project_id,
                        error=str(e),
                    )
                )
                continue

            report.accepted.append(result)
            log.info(
                "Invitation reconciled",
                invitation_id=str(invitation.id),
                project_id=str(invitation.project_id),
                outcome=result.outcome.value,
            )

        if pending:
            log.info(
                "Reconciliation finished",
                accepted=len(report.accepted),
                failed=len(report.failed),
            )
        return report

    async def _accept(
        self, invitation: _PendingInvitation, identity: MemberIdentity
    ) -> MembershipResult:
        """One unit of work: roster add, then conditional mark-accepted, then commit."""
        result = await self.membership_service.add_user(
            invitation.project_id,
            identity,
            invitation.role,
            added_by=invitation.invited_by,
            actor=identity,
            details={"invitation_id": str(invitation.id)},
            commit=False,
        )
        await self.session.flush()

        if not await self.invitation_repo.mark_responded(
            invitation.id, InvitationStatus.ACCEPTED, accepted_by=identity.user_id
        ):
            raise InvitationNotPendingError()

        await self.session.commit()
        return result


def _snapshot(invitation: Invitation) -> _PendingInvitation:
    return _PendingInvitation(
        id=invitation.id,
        project_id=invitation.project_id,
        role=invitation.role_enum,
        invited_by=invitation.invited_by,
    )
