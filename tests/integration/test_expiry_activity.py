"""Tests for the invitation expiry activity against a real database."""

from datetime import timedelta

import pytest
from temporalio.testing import ActivityEnvironment

from src.bugtracker.models import InvitationStatus, utc_now
from src.bugtracker.temporal.activities import expire_overdue_invitations
from tests.helpers import create_invitation

pytestmark = [pytest.mark.integration, pytest.mark.asyncio]


async def test_activity_expires_only_overdue(services, db_session, project, owner):
    overdue, _ = await create_invitation(
        db_session, project, owner, expires_at=utc_now() - timedelta(minutes=1)
    )
    current, _ = await create_invitation(db_session, project, owner)

    env = ActivityEnvironment()
    expired = await env.run(expire_overdue_invitations)

    assert expired == 1
    assert (await services.invitation_repo.get_by_id(overdue.id)).status == (
        InvitationStatus.EXPIRED.value
    )
    assert (await services.invitation_repo.get_by_id(current.id)).status == (
        InvitationStatus.PENDING.value
    )


async def test_activity_is_idempotent(db_session, project, owner):
    await create_invitation(
        db_session, project, owner, expires_at=utc_now() - timedelta(minutes=1)
    )
    env = ActivityEnvironment()

    assert await env.run(expire_overdue_invitations) == 1
    assert await env.run(expire_overdue_invitations) == 0
