"""Test helper functions for common data creation patterns."""

from sqlalchemy.ext.asyncio import AsyncSession

from src.bugtracker.core.security import create_access_token
from src.bugtracker.models import Invitation, Project, User
from tests.factories import InvitationFactory


def auth_headers(user: User) -> dict[str, str]:
    """Bearer headers for a user, as issued at login."""
    token, _ = create_access_token(user.id, {"email": user.email, "name": user.full_name})
    return {"Authorization": f"Bearer {token}"}


async def create_invitation(
    session: AsyncSession,
    project: Project,
    inviter: User,
    **invite_kwargs,
) -> tuple[Invitation, str]:
    """Persist an invitation straight to the store, bypassing the service checks.

    Args:
        session: Database session
        project: Project the invitation is for
        inviter: User recorded as invited_by
        **invite_kwargs: Additional args passed to InvitationFactory.with_token

    Returns:
        Tuple of (invitation, plaintext_token)
    """
    invitation, token = InvitationFactory.with_token(
        project_id=project.id,
        project_name=project.name,
        invited_by=inviter.id,
        **invite_kwargs,
    )
    session.add(invitation)
    await session.commit()
    return invitation, token
