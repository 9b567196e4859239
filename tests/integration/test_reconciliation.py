"""Tests for turning invitations into memberships, explicitly and at sign-up."""

from datetime import timedelta
from unittest.mock import AsyncMock

import pytest

from src.bugtracker.core.exceptions import InvitationExpiredError, InvitationNotPendingError
from src.bugtracker.models import InvitationStatus, ProjectRole, utc_now
from src.bugtracker.services import MembershipOutcome
from tests.factories import DEFAULT_TEST_PASSWORD, InvitationFactory
from tests.helpers import create_invitation

pytestmark = [pytest.mark.integration, pytest.mark.asyncio]


async def _roster(services, project_id) -> dict:
    project = await services.projects.get_project(project_id)
    return {m.user_id: m for m in project.member_list}


async def _status(services, invitation_id) -> str:
    invitation = await services.invitation_repo.get_by_id(invitation_id)
    return invitation.status


class TestAcceptByToken:
    async def test_accept_adds_member_with_invited_role(self, services, project, owner, make_user):
        bob = await make_user(email="bob@x.com", full_name="Bob Builder")
        invitation, token = await services.invitations.create_invitation(
            project.id, "bob@x.com", invited_by=owner, role=ProjectRole.VIEWER
        )

        result = await services.reconciliation.accept_by_token(token, bob)

        assert result.outcome == MembershipOutcome.ADDED
        assert result.role == ProjectRole.VIEWER
        member = (await _roster(services, project.id))[bob.id]
        assert member.role == ProjectRole.VIEWER
        assert member.added_by == owner.id
        assert member.email == "bob@x.com"

        accepted = await services.invitation_repo.get_by_id(invitation.id)
        assert accepted.status == InvitationStatus.ACCEPTED.value
        assert accepted.accepted_by == bob.id
        assert accepted.responded_at is not None

    async def test_accepting_twice_fails_and_leaves_roster_alone(
        self, services, project, owner, make_user
    ):
        bob = await make_user(email="bob@x.com")
        _, token = await services.invitations.create_invitation(
            project.id, "bob@x.com", invited_by=owner
        )
        project_id = project.id
        await services.reconciliation.accept_by_token(token, bob)
        roster_before = await _roster(services, project.id)

        with pytest.raises(InvitationNotPendingError):
            await services.reconciliation.accept_by_token(token, bob)

        assert await _roster(services, project_id) == roster_before

    async def test_expired_invitation_is_rejected(
        self, services, db_session, project, owner, make_user
    ):
        bob = await make_user(email="bob@x.com")
        invitation, token = await create_invitation(
            db_session,
            project,
            owner,
            invited_email="bob@x.com",
            expires_at=utc_now() - timedelta(days=1),
        )
        bob_id, project_id, invitation_id = bob.id, project.id, invitation.id

        with pytest.raises(InvitationExpiredError):
            await services.reconciliation.accept_by_token(token, bob)

        assert bob_id not in await _roster(services, project_id)
        assert await _status(services, invitation_id) == InvitationStatus.EXPIRED.value

    async def test_existing_member_still_consumes_invitation(
        self, services, project, owner, make_user
    ):
        bob = await make_user(email="bob@x.com")
        invitation, token = await services.invitations.create_invitation(
            project.id, "bob@x.com", invited_by=owner
        )
        await services.membership.add_member(project.id, bob.id, ProjectRole.VIEWER, owner)

        result = await services.reconciliation.accept_by_token(token, bob)

        assert result.outcome == MembershipOutcome.ALREADY_MEMBER
        assert result.role == ProjectRole.VIEWER
        assert await _status(services, invitation.id) == InvitationStatus.ACCEPTED.value

    async def test_lost_race_rolls_back_membership(self, services, project, owner, make_user):
        bob = await make_user(email="bob@x.com")
        invitation, token = await services.invitations.create_invitation(
            project.id, "bob@x.com", invited_by=owner
        )
        # Another request answered the invitation between lookup and update
        services.invitation_repo.mark_responded = AsyncMock(return_value=False)
        bob_id, project_id, invitation_id = bob.id, project.id, invitation.id

        with pytest.raises(InvitationNotPendingError):
            await services.reconciliation.accept_by_token(token, bob)

        assert bob_id not in await _roster(services, project_id)
        assert await _status(services, invitation_id) == InvitationStatus.PENDING.value


class TestReconcileForNewUser:
    async def test_accepts_every_pending_invitation(self, services, project, owner, make_user):
        second = await services.projects.create_project(owner, name="Mobile App")
        await services.invitations.create_invitation(project.id, "bob@x.com", invited_by=owner)
        await services.invitations.create_invitation(
            second.id, "bob@x.com", invited_by=owner, role=ProjectRole.VIEWER
        )
        bob = await make_user(email="bob@x.com")

        report = await services.reconciliation.reconcile_for_new_user(bob)

        assert report.ok
        assert report.processed == 2
        assert (await _roster(services, project.id))[bob.id].role == ProjectRole.TESTER
        assert (await _roster(services, second.id))[bob.id].role == ProjectRole.VIEWER

    async def test_one_failing_invitation_does_not_block_the_others(
        self, services, db_session, project, owner, make_user
    ):
        project_b = await services.projects.create_project(owner, name="Mobile App")
        invite_a, _ = await services.invitations.create_invitation(
            project.id, "bob@x.com", invited_by=owner
        )
        invite_b, _ = await services.invitations.create_invitation(
            project_b.id, "bob@x.com", invited_by=owner
        )
        # Project A disappears before bob registers
        await db_session.delete(project)
        await db_session.commit()
        bob = await make_user(email="bob@x.com")
        bob_id, project_b_id = bob.id, project_b.id
        invite_a_id, invite_b_id = invite_a.id, invite_b.id

        report = await services.reconciliation.reconcile_for_new_user(bob)

        assert [f.invitation_id for f in report.failed] == [invite_a_id]
        assert [r.project_id for r in report.accepted] == [project_b_id]
        assert bob_id in await _roster(services, project_b_id)
        assert await _status(services, invite_a_id) == InvitationStatus.PENDING.value
        assert await _status(services, invite_b_id) == InvitationStatus.ACCEPTED.value

    async def test_failures_are_logged(
        self, services, db_session, project, owner, make_user, capturing_logger
    ):
        await services.invitations.create_invitation(project.id, "bob@x.com", invited_by=owner)
        await db_session.delete(project)
        await db_session.commit()
        bob = await make_user(email="bob@x.com")

        await services.reconciliation.reconcile_for_new_user(bob)

        warnings = [
            c
            for c in capturing_logger.calls
            if c.kwargs.get("event") == "Invitation reconciliation failed"
        ]
        assert len(warnings) == 1
        assert warnings[0].kwargs["error_type"] == "ProjectNotFoundError"

    async def test_ignores_answered_and_past_due_invitations(
        self, services, db_session, project, owner, make_user
    ):
        declined, _ = InvitationFactory.with_token(
            project_id=project.id,
            invited_by=owner.id,
            invited_email="bob@x.com",
            status=InvitationStatus.DECLINED.value,
        )
        late, _ = InvitationFactory.past_due(
            project_id=project.id, invited_by=owner.id, invited_email="bob@x.com"
        )
        db_session.add_all([declined, late])
        await db_session.commit()
        bob = await make_user(email="bob@x.com")

        report = await services.reconciliation.reconcile_for_new_user(bob)

        assert report.processed == 0
        assert bob.id not in await _roster(services, project.id)

    async def test_reconciling_again_is_harmless(self, services, project, owner, make_user):
        await services.invitations.create_invitation(project.id, "bob@x.com", invited_by=owner)
        bob = await make_user(email="bob@x.com")

        await services.reconciliation.reconcile_for_new_user(bob)
        report = await services.reconciliation.reconcile_for_new_user(bob)

        assert report.processed == 0
        refreshed = await services.projects.get_project(project.id)
        assert [m.user_id for m in refreshed.member_list].count(bob.id) == 1


class TestSignUpScenario:
    async def test_invited_user_joins_on_registration(self, services, project, owner):
        """bob@x.com is invited as tester, registers, and is a member; T1 is spent."""
        invitation, t1 = await services.invitations.create_invitation(
            project.id, "bob@x.com", invited_by=owner, role=ProjectRole.TESTER
        )

        auth = await services.registration.sign_up(
            "Bob", "Builder", "bob@x.com", DEFAULT_TEST_PASSWORD
        )

        bob_id = auth.user.id
        roster = await _roster(services, project.id)
        assert roster[bob_id].role == ProjectRole.TESTER

        accepted = await services.invitation_repo.get_by_id(invitation.id)
        assert accepted.status == InvitationStatus.ACCEPTED.value
        assert accepted.responded_at is not None

        bob = await services.user_repo.get_by_id(bob_id)
        with pytest.raises(InvitationNotPendingError):
            await services.reconciliation.accept_by_token(t1, bob)

    async def test_registration_email_is_normalized_before_matching(
        self, services, project, owner
    ):
        await services.invitations.create_invitation(project.id, "bob@x.com", invited_by=owner)

        auth = await services.registration.sign_up(
            "Bob", "Builder", "  BOB@X.com ", DEFAULT_TEST_PASSWORD
        )

        assert auth.user.email == "bob@x.com"
        assert auth.user.id in await _roster(services, project.id)

    async def test_registration_succeeds_when_reconciliation_fails(
        self, services, db_session, project, owner
    ):
        await services.invitations.create_invitation(project.id, "bob@x.com", invited_by=owner)
        await db_session.delete(project)
        await db_session.commit()

        auth = await services.registration.sign_up(
            "Bob", "Builder", "bob@x.com", DEFAULT_TEST_PASSWORD
        )

        assert auth.access_token
        assert await services.user_repo.get_by_email("bob@x.com") is not None
