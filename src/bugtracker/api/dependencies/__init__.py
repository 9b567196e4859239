"""FastAPI dependency injection definitions."""

from src.bugtracker.api.dependencies.auth import (
    CurrentUser,
    ProjectAccess,
    ProjectContributor,
    ProjectMember,
    ProjectOwner,
    get_current_user,
    require_project_role,
)
from src.bugtracker.api.dependencies.db import DBSession, get_db_session
from src.bugtracker.api.dependencies.repositories import (
    ActivityLogRepo,
    BugRepo,
    CommentRepo,
    InvitationRepo,
    ProjectRepo,
    SequenceRepo,
    TestCaseRepo,
    TestRunRepo,
    UserRepo,
)
from src.bugtracker.api.dependencies.services import (
    ActivityServiceDep,
    AuthServiceDep,
    BugServiceDep,
    CommentServiceDep,
    InvitationServiceDep,
    MembershipServiceDep,
    ProjectServiceDep,
    ReconciliationServiceDep,
    RegistrationServiceDep,
    SequenceServiceDep,
    TestCaseServiceDep,
    TestRunServiceDep,
)

__all__ = [
    # Database
    "DBSession",
    "get_db_session",
    # Auth
    "CurrentUser",
    "ProjectAccess",
    "ProjectContributor",
    "ProjectMember",
    "ProjectOwner",
    "get_current_user",
    "require_project_role",
    # Repositories
    "ActivityLogRepo",
    "BugRepo",
    "CommentRepo",
    "InvitationRepo",
    "ProjectRepo",
    "SequenceRepo",
    "TestCaseRepo",
    "TestRunRepo",
    "UserRepo",
    # Services
    "ActivityServiceDep",
    "AuthServiceDep",
    "BugServiceDep",
    "CommentServiceDep",
    "InvitationServiceDep",
    "MembershipServiceDep",
    "ProjectServiceDep",
    "ReconciliationServiceDep",
    "RegistrationServiceDep",
    "SequenceServiceDep",
    "TestCaseServiceDep",
    "TestRunServiceDep",
]
