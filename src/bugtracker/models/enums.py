"""Shared enums for models."""

from enum import Enum


class ProjectStatus(str, Enum):
    """Project lifecycle status. Projects are archived, never deleted."""

    ACTIVE = "active"
    ARCHIVED = "archived"
    COMPLETED = "completed"


class ProjectRole(str, Enum):
    """User role within a project."""

    OWNER = "owner"
    TESTER = "tester"
    VIEWER = "viewer"


# Owner is assigned at project creation only
INVITABLE_ROLES = frozenset({ProjectRole.TESTER, ProjectRole.VIEWER})


class InvitationStatus(str, Enum):
    """Invitation status. Everything except PENDING is terminal."""

    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"
    EXPIRED = "expired"


class SequenceKind(str, Enum):
    """Entity kinds numbered by the per-project sequence generator."""

    BUGS = "bugs"
    TESTCASES = "testcases"


class BugSeverity(str, Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class BugPriority(str, Enum):
    URGENT = "urgent"
    NORMAL = "normal"
    LOW = "low"


class BugStatus(str, Enum):
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"
    CLOSED = "closed"
    WONT_FIX = "wont_fix"
    DUPLICATE = "duplicate"


class TestCasePriority(str, Enum):
    __test__ = False

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class TestCaseStatus(str, Enum):
    __test__ = False

    DRAFT = "draft"
    ACTIVE = "active"
    DEPRECATED = "deprecated"


class TestRunResult(str, Enum):
    """Outcome of a whole test run or of one of its steps."""

    __test__ = False

    PASSED = "passed"
    FAILED = "failed"
    BLOCKED = "blocked"
    SKIPPED = "skipped"


class CommentEntityType(str, Enum):
    """What a comment is attached to."""

    BUG = "bug"
    TEST_CASE = "test_case"


class ActivityAction(str, Enum):
    """Actions recorded in the project activity feed."""

    PROJECT_CREATED = "project_created"
    PROJECT_UPDATED = "project_updated"
    MEMBER_INVITED = "member_invited"
    MEMBER_ADDED = "member_added"
    MEMBER_REMOVED = "member_removed"
    MEMBER_ROLE_CHANGED = "member_role_changed"
    INVITATION_DECLINED = "invitation_declined"
    INVITATION_REVOKED = "invitation_revoked"
    BUG_CREATED = "bug_created"
    TEST_CASE_CREATED = "test_case_created"
    TEST_RUN_RECORDED = "test_run_recorded"
    COMMENT_ADDED = "comment_added"


class ActivityEntityType(str, Enum):
    PROJECT = "project"
    MEMBER = "member"
    INVITATION = "invitation"
    BUG = "bug"
    TEST_CASE = "test_case"
    TEST_RUN = "test_run"
    COMMENT = "comment"
