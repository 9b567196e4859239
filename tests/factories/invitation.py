"""Invitation factory for test data generation."""

from datetime import timedelta

from polyfactory import Use

from src.bugtracker.core.security import generate_invite_token
from src.bugtracker.models import Invitation, InvitationStatus, ProjectRole
from tests.factories.base import BaseFactory, generate_uuid, utc_now


class InvitationFactory(BaseFactory):
    """Factory for generating Invitation test data.

    Invitations store only the token digest; use `with_token` when the test
    needs the plaintext token too.
    """

    __model__ = Invitation

    id = Use(generate_uuid)
    project_id = None  # Required FK - must be set explicitly
    invited_by = None  # Required FK - must be set explicitly
    project_name = "Test Project"
    invited_email = Use(lambda: f"invitee_{generate_uuid().hex[-8:]}@example.com")
    role = ProjectRole.TESTER.value
    token_hash = Use(lambda: generate_invite_token()[1])
    status = InvitationStatus.PENDING.value
    expires_at = Use(lambda: utc_now() + timedelta(days=7))
    created_at = Use(utc_now)
    responded_at = None
    accepted_by = None

    @classmethod
    def with_token(cls, **kwargs) -> tuple[Invitation, str]:
        """Build an invitation and return it with its plaintext token."""
        token, token_hash = generate_invite_token()
        return cls.build(token_hash=token_hash, **kwargs), token

    @classmethod
    def past_due(cls, **kwargs) -> tuple[Invitation, str]:
        """Still pending, but past its deadline."""
        return cls.with_token(expires_at=utc_now() - timedelta(days=1), **kwargs)
