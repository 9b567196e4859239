"""Invitation maintenance activities."""

from temporalio import activity

from src.bugtracker.core.db import get_session


@activity.defn
async def expire_overdue_invitations() -> int:
    """
    Move every pending invitation past its deadline to the expired state.

    Reads already treat past-due invitations as expired; this sweep makes the
    stored status agree so owner listings and indexes stay accurate.

    Idempotent: a second run finds nothing left to expire.

    Returns:
        Number of invitations expired
    """
    activity.logger.info("Expiring overdue invitations")

    async with get_session() as session:
        from src.bugtracker.repositories import (
            ActivityLogRepository,
            InvitationRepository,
            ProjectRepository,
            UserRepository,
        )
        from src.bugtracker.services import ActivityService, InvitationService

        service = InvitationService(
            InvitationRepository(session),
            ProjectRepository(session),
            UserRepository(session),
            ActivityService(ActivityLogRepository(session), session),
            session,
        )
        count = await service.expire_overdue()

    activity.logger.info(f"Expired {count} overdue invitations")
    return count
