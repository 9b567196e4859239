"""Repository for Invitation entity."""

from datetime import datetime
from typing import Any, cast
from uuid import UUID

from sqlalchemy.engine import CursorResult
from sqlmodel import select, update

from src.bugtracker.models import Invitation, InvitationStatus, utc_now
from src.bugtracker.repositories.base import BaseRepository


class InvitationRepository(BaseRepository[Invitation]):
    """Repository for Invitation entity.

    Every state transition is a conditional update on `status = pending`, so
    terminal states can never be overwritten.
    """

    model = Invitation

    async def get_by_id(self, id: UUID) -> Invitation | None:
        result = await self.session.execute(
            select(Invitation)
            .where(Invitation.id == id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_by_token_hash(self, token_hash: str) -> Invitation | None:
        """Get an invitation by token digest, whatever its status."""
        result = await self.session.execute(
            select(Invitation)
            .where(Invitation.token_hash == token_hash)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_pending_by_email(self, email: str) -> list[Invitation]:
        """Pending, unexpired invitations addressed to an email, oldest first."""
        result = await self.session.execute(
            select(Invitation)
            .where(
                Invitation.invited_email == email,
                Invitation.status == InvitationStatus.PENDING.value,
                Invitation.expires_at > utc_now(),
            )
            .order_by(Invitation.created_at)  # type: ignore[arg-type]
        )
        return list(result.scalars().all())

    async def get_pending_for_project_email(
        self, project_id: UUID, email: str
    ) -> list[Invitation]:
        """Pending, unexpired invitations for one (project, email) pair."""
        result = await self.session.execute(
            select(Invitation).where(
                Invitation.project_id == project_id,
                Invitation.invited_email == email,
                Invitation.status == InvitationStatus.PENDING.value,
                Invitation.expires_at > utc_now(),
            )
        )
        return list(result.scalars().all())

    async def list_by_project(
        self,
        project_id: UUID,
        status: InvitationStatus | None = None,
        cursor: str | None = None,
        limit: int = 50,
    ) -> tuple[list[Invitation], str | None, bool]:
        """List a project's invitations with cursor pagination, newest first."""
        query = select(Invitation).where(Invitation.project_id == project_id)
        if status is not None:
            query = query.where(Invitation.status == status.value)
        return await self.paginate(query, cursor, limit, Invitation.created_at)

    async def mark_responded(
        self,
        invitation_id: UUID,
        status: InvitationStatus,
        accepted_by: UUID | None = None,
    ) -> bool:
        """Move a pending, unexpired invitation to accepted or declined.

        Returns:
            True if this call made the transition, False if the invitation was
            no longer pending (or had expired) when the update ran.
        """
        now = utc_now()
        result = await self.session.execute(
            update(Invitation)
            .where(Invitation.id == invitation_id)  # type: ignore[arg-type]
            .where(Invitation.status == InvitationStatus.PENDING.value)  # type: ignore[arg-type]
            .where(Invitation.expires_at > now)  # type: ignore[arg-type]
            .values(status=status.value, responded_at=now, accepted_by=accepted_by)
            .execution_options(synchronize_session=False)
        )
        return cast(CursorResult[Any], result).rowcount == 1

    async def mark_expired(self, invitation_id: UUID) -> bool:
        """Expire a single pending invitation (past due or revoked)."""
        result = await self.session.execute(
            update(Invitation)
            .where(Invitation.id == invitation_id)  # type: ignore[arg-type]
            .where(Invitation.status == InvitationStatus.PENDING.value)  # type: ignore[arg-type]
            .values(status=InvitationStatus.EXPIRED.value)
            .execution_options(synchronize_session=False)
        )
        return cast(CursorResult[Any], result).rowcount == 1

    async def expire_pending_for(self, project_id: UUID, email: str) -> int:
        """Expire every pending invitation for a (project, email) pair. Returns count."""
        result = await self.session.execute(
            update(Invitation)
            .where(Invitation.project_id == project_id)  # type: ignore[arg-type]
            .where(Invitation.invited_email == email)  # type: ignore[arg-type]
            .where(Invitation.status == InvitationStatus.PENDING.value)  # type: ignore[arg-type]
            .values(status=InvitationStatus.EXPIRED.value)
            .execution_options(synchronize_session=False)
        )
        return cast(CursorResult[Any], result).rowcount or 0

    async def expire_overdue(self, now: datetime | None = None) -> int:
        """Expire every pending invitation past its deadline. Returns count.

        Idempotent: a second run finds nothing left to expire.
        """
        result = await self.session.execute(
            update(Invitation)
            .where(Invitation.status == InvitationStatus.PENDING.value)  # type: ignore[arg-type]
            .where(Invitation.expires_at <= (now or utc_now()))  # type: ignore[arg-type]
            .values(status=InvitationStatus.EXPIRED.value)
            .execution_options(synchronize_session=False)
        )
        return cast(CursorResult[Any], result).rowcount or 0
