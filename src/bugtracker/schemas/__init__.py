from src.bugtracker.schemas.activity import ActivityRead
from src.bugtracker.schemas.auth import AuthResponse, LoginRequest, SignUpRequest
from src.bugtracker.schemas.bug import BugCreate, BugRead
from src.bugtracker.schemas.comment import CommentCreate, CommentRead, CommentUpdate
from src.bugtracker.schemas.invitation import (
    InvitationCreateRequest,
    InvitationCreateResponse,
    InvitationInfoResponse,
    InvitationRead,
)
from src.bugtracker.schemas.pagination import PaginatedResponse
from src.bugtracker.schemas.project import (
    MemberAddRequest,
    MemberRead,
    MembershipResultResponse,
    MemberRoleUpdate,
    ProjectCreate,
    ProjectRead,
    ProjectUpdate,
)
from src.bugtracker.schemas.test_case import TestCaseCreate, TestCaseRead, TestStep
from src.bugtracker.schemas.test_run import TestRunCreate, TestRunRead, TestStepResult
from src.bugtracker.schemas.user import UserRead

__all__ = [
    # Auth
    "AuthResponse",
    "LoginRequest",
    "SignUpRequest",
    "UserRead",
    # Projects
    "MemberAddRequest",
    "MemberRead",
    "MemberRoleUpdate",
    "MembershipResultResponse",
    "ProjectCreate",
    "ProjectRead",
    "ProjectUpdate",
    # Invitations
    "InvitationCreateRequest",
    "InvitationCreateResponse",
    "InvitationInfoResponse",
    "InvitationRead",
    # Work items
    "ActivityRead",
    "BugCreate",
    "BugRead",
    "CommentCreate",
    "CommentRead",
    "CommentUpdate",
    "TestCaseCreate",
    "TestCaseRead",
    "TestStep",
    "TestRunCreate",
    "TestRunRead",
    "TestStepResult",
    # Pagination
    "PaginatedResponse",
]
