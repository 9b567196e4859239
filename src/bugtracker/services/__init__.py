"""Service layer - business logic and transaction boundaries."""

from src.bugtracker.services.activity_service import ActivityService
from src.bugtracker.services.auth_service import AuthService
from src.bugtracker.services.bug_service import BugService
from src.bugtracker.services.comment_service import CommentService
from src.bugtracker.services.invitation_service import InvitationService
from src.bugtracker.services.membership_service import (
    MemberIdentity,
    MembershipOutcome,
    MembershipResult,
    MembershipService,
)
from src.bugtracker.services.project_service import ProjectService
from src.bugtracker.services.reconciliation_service import (
    ReconciliationFailure,
    ReconciliationReport,
    ReconciliationService,
)
from src.bugtracker.services.registration_service import RegistrationService
from src.bugtracker.services.sequence_service import SequenceService
from src.bugtracker.services.test_case_service import TestCaseService
from src.bugtracker.services.test_run_service import TestRunService

__all__ = [
    "ActivityService",
    "AuthService",
    "BugService",
    "CommentService",
    "InvitationService",
    "MemberIdentity",
    "MembershipOutcome",
    "MembershipResult",
    "MembershipService",
    "ProjectService",
    "ReconciliationFailure",
    "ReconciliationReport",
    "ReconciliationService",
    "RegistrationService",
    "SequenceService",
    "TestCaseService",
    "TestRunService",
]
