"""Test factories for generating test data.

Re-exports all factories for convenient imports:
    from tests.factories import UserFactory, InvitationFactory, ...
"""

from tests.factories.invitation import InvitationFactory
from tests.factories.base import BaseFactory, generate_uuid, utc_now
from tests.factories.user import DEFAULT_TEST_PASSWORD, UserFactory

__all__ = [
    # Base
    "BaseFactory",
    "generate_uuid",
    "utc_now",
    # User
    "UserFactory",
    "DEFAULT_TEST_PASSWORD",
    # Invitation
    "InvitationFactory",
]
