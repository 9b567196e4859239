"""Test run service - execution history of test cases."""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.bugtracker.core.exceptions import BugTrackerError, NotFoundError, ValidationError
from src.bugtracker.core.logging import get_logger
from src.bugtracker.models import (
    ActivityAction,
    ActivityEntityType,
    TestCase,
    TestRun,
    TestRunResult,
    User,
)
from src.bugtracker.repositories import BugRepository, TestCaseRepository, TestRunRepository
from src.bugtracker.schemas.test_run import TestRunCreate
from src.bugtracker.services.activity_service import ActivityService

logger = get_logger(__name__)


class TestRunService:
    __test__ = False

    def __init__(
        self,
        test_run_repo: TestRunRepository,
        test_case_repo: TestCaseRepository,
        bug_repo: BugRepository,
        activity_service: ActivityService,
        session: AsyncSession,
    ):
        self.test_run_repo = test_run_repo
        self.test_case_repo = test_case_repo
        self.bug_repo = bug_repo
        self.activity_service = activity_service
        self.session = session

    async def _get_test_case(self, project_id: UUID, case_number: int) -> TestCase:
        test_case = await self.test_case_repo.get_by_number(project_id, case_number)
        if test_case is None:
            raise NotFoundError(f"Test case TC-{case_number} not found")
        return test_case

    async def record_run(
        self, project_id: UUID, case_number: int, executor: User, data: TestRunCreate
    ) -> TestRun:
        """Record one execution of TC-<case_number>.

        Raises:
            NotFoundError: Unknown test case, or unknown linked bug.
            ValidationError: A step result refers to a step the case doesn't have.
        """
        executor_id = executor.id
        executor_name = executor.full_name
        try:
            test_case = await self._get_test_case(project_id, case_number)

            known_steps = {step["step_number"] for step in test_case.steps}
            unknown = sorted(
                {r.step_number for r in data.step_results if r.step_number not in known_steps}
            )
            if unknown:
                raise ValidationError(f"TC-{case_number} has no step(s) {unknown}")

            bug_id = None
            if data.bug_number is not None:
                bug = await self.bug_repo.get_by_number(project_id, data.bug_number)
                if bug is None:
                    raise NotFoundError(f"Bug BUG-{data.bug_number} not found")
                bug_id = bug.id

            run = TestRun(
                project_id=project_id,
                test_case_id=test_case.id,
                executed_by=executor_id,
                result=data.result.value,
                environment=data.environment,
                app_version=data.app_version,
                notes=data.notes,
                step_results=[r.model_dump(mode="json") for r in data.step_results],
                bug_id=bug_id,
                duration=data.duration,
            )
            self.test_run_repo.add(run)
            self.activity_service.record(
                project_id,
                executor_id,
                executor_name,
                ActivityAction.TEST_RUN_RECORDED,
                ActivityEntityType.TEST_RUN,
                entity_id=run.id,
                entity_title=f"TC-{case_number}: {test_case.title}",
                details={"case_number": case_number, "result": data.result.value},
            )
            await self.session.commit()
            await self.session.refresh(run)
        except BugTrackerError:
            await self.session.rollback()
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to record test run", project_id=str(project_id), error=str(e))
            raise

        logger.info(
            "Test run recorded",
            project_id=str(project_id),
            case_number=case_number,
            result=data.result.value,
        )
        return run

    async def list_runs_for_case(
        self,
        project_id: UUID,
        case_number: int,
        cursor: str | None = None,
        limit: int = 50,
    ) -> tuple[list[TestRun], str | None, bool]:
        test_case = await self._get_test_case(project_id, case_number)
        return await self.test_run_repo.list_by_test_case(test_case.id, cursor, limit)

    async def list_project_runs(
        self,
        project_id: UUID,
        result: TestRunResult | None = None,
        cursor: str | None = None,
        limit: int = 50,
    ) -> tuple[list[TestRun], str | None, bool]:
        return await self.test_run_repo.list_by_project(project_id, result, cursor, limit)
