"""Service factory dependencies."""

from typing import Annotated

from fastapi import Depends

from src.bugtracker.api.dependencies.db import DBSession
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
from src.bugtracker.services import (
    ActivityService,
    AuthService,
    BugService,
    CommentService,
    InvitationService,
    MembershipService,
    ProjectService,
    ReconciliationService,
    RegistrationService,
    SequenceService,
    TestCaseService,
    TestRunService,
)


def get_activity_service(activity_repo: ActivityLogRepo, session: DBSession) -> ActivityService:
    return ActivityService(activity_repo, session)


ActivityServiceDep = Annotated[ActivityService, Depends(get_activity_service)]


def get_sequence_service(sequence_repo: SequenceRepo, session: DBSession) -> SequenceService:
    return SequenceService(sequence_repo, session)


SequenceServiceDep = Annotated[SequenceService, Depends(get_sequence_service)]


def get_auth_service(user_repo: UserRepo, session: DBSession) -> AuthService:
    return AuthService(user_repo, session)


def get_project_service(
    project_repo: ProjectRepo,
    activity_service: ActivityServiceDep,
    session: DBSession,
) -> ProjectService:
    return ProjectService(project_repo, activity_service, session)


def get_membership_service(
    project_repo: ProjectRepo,
    user_repo: UserRepo,
    activity_service: ActivityServiceDep,
    session: DBSession,
) -> MembershipService:
    return MembershipService(project_repo, user_repo, activity_service, session)


def get_invitation_service(
    invitation_repo: InvitationRepo,
    project_repo: ProjectRepo,
    user_repo: UserRepo,
    activity_service: ActivityServiceDep,
    session: DBSession,
) -> InvitationService:
    return InvitationService(invitation_repo, project_repo, user_repo, activity_service, session)


MembershipServiceDep = Annotated[MembershipService, Depends(get_membership_service)]
InvitationServiceDep = Annotated[InvitationService, Depends(get_invitation_service)]


def get_reconciliation_service(
    invitation_service: InvitationServiceDep,
    invitation_repo: InvitationRepo,
    membership_service: MembershipServiceDep,
    session: DBSession,
) -> ReconciliationService:
    return ReconciliationService(invitation_service, invitation_repo, membership_service, session)


ReconciliationServiceDep = Annotated[ReconciliationService, Depends(get_reconciliation_service)]


def get_registration_service(
    user_repo: UserRepo,
    reconciliation_service: ReconciliationServiceDep,
    session: DBSession,
) -> RegistrationService:
    """Registration reconciles pending invitations, so it needs the full chain."""
    return RegistrationService(user_repo, reconciliation_service, session)


def get_bug_service(
    bug_repo: BugRepo,
    sequence_service: SequenceServiceDep,
    activity_service: ActivityServiceDep,
    session: DBSession,
) -> BugService:
    return BugService(bug_repo, sequence_service, activity_service, session)


def get_test_case_service(
    test_case_repo: TestCaseRepo,
    sequence_service: SequenceServiceDep,
    activity_service: ActivityServiceDep,
    session: DBSession,
) -> TestCaseService:
    return TestCaseService(test_case_repo, sequence_service, activity_service, session)


def get_test_run_service(
    test_run_repo: TestRunRepo,
    test_case_repo: TestCaseRepo,
    bug_repo: BugRepo,
    activity_service: ActivityServiceDep,
    session: DBSession,
) -> TestRunService:
    return TestRunService(test_run_repo, test_case_repo, bug_repo, activity_service, session)


def get_comment_service(
    comment_repo: CommentRepo,
    bug_repo: BugRepo,
    test_case_repo: TestCaseRepo,
    activity_service: ActivityServiceDep,
    session: DBSession,
) -> CommentService:
    return CommentService(comment_repo, bug_repo, test_case_repo, activity_service, session)


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
ProjectServiceDep = Annotated[ProjectService, Depends(get_project_service)]
RegistrationServiceDep = Annotated[RegistrationService, Depends(get_registration_service)]
BugServiceDep = Annotated[BugService, Depends(get_bug_service)]
TestCaseServiceDep = Annotated[TestCaseService, Depends(get_test_case_service)]
TestRunServiceDep = Annotated[TestRunService, Depends(get_test_run_service)]
CommentServiceDep = Annotated[CommentService, Depends(get_comment_service)]
