"""Bug service."""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.bugtracker.core.exceptions import BugTrackerError, NotFoundError
from src.bugtracker.core.logging import get_logger
from src.bugtracker.models import (
    ActivityAction,
    ActivityEntityType,
    Bug,
    BugStatus,
    SequenceKind,
    User,
)
from src.bugtracker.repositories import BugRepository
from src.bugtracker.schemas.bug import BugCreate
from src.bugtracker.services.activity_service import ActivityService
from src.bugtracker.services.sequence_service import SequenceService

logger = get_logger(__name__)


class BugService:
    def __init__(
        self,
        bug_repo: BugRepository,
        sequence_service: SequenceService,
        activity_service: ActivityService,
        session: AsyncSession,
    ):
        self.bug_repo = bug_repo
        self.sequence_service = sequence_service
        self.activity_service = activity_service
        self.session = session

    async def create_bug(self, project_id: UUID, reporter: User, data: BugCreate) -> Bug:
        """Create a bug numbered from the project's "bugs" sequence.

        The number is allocated in the same transaction as the insert, so a
        failed insert doesn't burn a number.
        """
        reporter_id = reporter.id
        reporter_name = reporter.full_name
        try:
            number = await self.sequence_service.allocate(
                project_id, SequenceKind.BUGS, commit=False
            )
            bug = Bug(
                project_id=project_id,
                bug_number=number,
                title=data.title,
                description=data.description,
                steps_to_reproduce=data.steps_to_reproduce,
                expected_behavior=data.expected_behavior,
                actual_behavior=data.actual_behavior,
                severity=data.severity.value,
                priority=data.priority.value,
                status=BugStatus.OPEN.value,
                environment=data.environment,
                version=data.version,
                reported_by=reporter_id,
                assigned_to=[str(u) for u in data.assigned_to],
                tags=data.tags,
            )
            self.bug_repo.add(bug)
            self.activity_service.record(
                project_id,
                reporter_id,
                reporter_name,
                ActivityAction.BUG_CREATED,
                ActivityEntityType.BUG,
                entity_id=bug.id,
                entity_title=data.title,
                details={"bug_number": number, "severity": data.severity.value},
            )
            await self.session.commit()
            await self.session.refresh(bug)
        except BugTrackerError:
            await self.session.rollback()
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to create bug", project_id=str(project_id), error=str(e))
            raise

        logger.info("Bug created", project_id=str(project_id), bug_number=number)
        return bug

    async def get_bug(self, project_id: UUID, bug_number: int) -> Bug:
        bug = await self.bug_repo.get_by_number(project_id, bug_number)
        if bug is None:
            raise NotFoundError(f"Bug BUG-{bug_number} not found")
        return bug

    async def list_bugs(
        self,
        project_id: UUID,
        status: BugStatus | None = None,
        cursor: str | None = None,
        limit: int = 50,
    ) -> tuple[list[Bug], str | None, bool]:
        return await self.bug_repo.list_by_project(project_id, status, cursor, limit)
