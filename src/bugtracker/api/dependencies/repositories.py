"""Repository factory dependencies."""

from typing import Annotated

from fastapi import Depends

from src.bugtracker.api.dependencies.db import DBSession
from src.bugtracker.repositories import (
    ActivityLogRepository,
    BugRepository,
    CommentRepository,
    InvitationRepository,
    ProjectRepository,
    SequenceRepository,
    TestCaseRepository,
    TestRunRepository,
    UserRepository,
)


def get_user_repository(session: DBSession) -> UserRepository:
    return UserRepository(session)


def get_project_repository(session: DBSession) -> ProjectRepository:
    return ProjectRepository(session)


def get_invitation_repository(session: DBSession) -> InvitationRepository:
    return InvitationRepository(session)


def get_sequence_repository(session: DBSession) -> SequenceRepository:
    return SequenceRepository(session)


def get_bug_repository(session: DBSession) -> BugRepository:
    return BugRepository(session)


def get_test_case_repository(session: DBSession) -> TestCaseRepository:
    return TestCaseRepository(session)


def get_test_run_repository(session: DBSession) -> TestRunRepository:
    return TestRunRepository(session)


def get_comment_repository(session: DBSession) -> CommentRepository:
    return CommentRepository(session)


def get_activity_log_repository(session: DBSession) -> ActivityLogRepository:
    return ActivityLogRepository(session)


UserRepo = Annotated[UserRepository, Depends(get_user_repository)]
ProjectRepo = Annotated[ProjectRepository, Depends(get_project_repository)]
InvitationRepo = Annotated[InvitationRepository, Depends(get_invitation_repository)]
SequenceRepo = Annotated[SequenceRepository, Depends(get_sequence_repository)]
BugRepo = Annotated[BugRepository, Depends(get_bug_repository)]
TestCaseRepo = Annotated[TestCaseRepository, Depends(get_test_case_repository)]
TestRunRepo = Annotated[TestRunRepository, Depends(get_test_run_repository)]
CommentRepo = Annotated[CommentRepository, Depends(get_comment_repository)]
ActivityLogRepo = Annotated[ActivityLogRepository, Depends(get_activity_log_repository)]
