"""Models.

Re-exports all table models and enums.
"""

from src.bugtracker.models.activity_log import ActivityLog
from src.bugtracker.models.base import utc_now
from src.bugtracker.models.bug import Bug
from src.bugtracker.models.comment import Comment
from src.bugtracker.models.counter import SequenceCounter
from src.bugtracker.models.enums import (
    INVITABLE_ROLES,
    ActivityAction,
    ActivityEntityType,
    BugPriority,
    BugSeverity,
    BugStatus,
    CommentEntityType,
    InvitationStatus,
    ProjectRole,
    ProjectStatus,
    SequenceKind,
    TestCasePriority,
    TestCaseStatus,
    TestRunResult,
)
from src.bugtracker.models.invitation import Invitation
from src.bugtracker.models.project import Membership, Project
from src.bugtracker.models.test_case import TestCase
from src.bugtracker.models.test_run import TestRun
from src.bugtracker.models.user import User

__all__ = [
    # Enums
    "INVITABLE_ROLES",
    "ActivityAction",
    "ActivityEntityType",
    "BugPriority",
    "BugSeverity",
    "BugStatus",
    "CommentEntityType",
    "InvitationStatus",
    "ProjectRole",
    "ProjectStatus",
    "SequenceKind",
    "TestCasePriority",
    "TestCaseStatus",
    "TestRunResult",
    # Models
    "ActivityLog",
    "Bug",
    "Comment",
    "Invitation",
    "Membership",
    "Project",
    "SequenceCounter",
    "TestCase",
    "TestRun",
    "User",
    # Helpers
    "utc_now",
]
