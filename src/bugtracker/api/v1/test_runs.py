"""Project-wide test run history."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query

from src.bugtracker.api.dependencies import ProjectMember, TestRunServiceDep
from src.bugtracker.models import TestRunResult
from src.bugtracker.schemas.pagination import PaginatedResponse
from src.bugtracker.schemas.test_run import TestRunRead

router = APIRouter(prefix="/projects/{project_id}/test-runs", tags=["test-runs"])


@router.get(
    "",
    response_model=PaginatedResponse[TestRunRead],
    description="Every run in the project, latest first. Runs per test case live under "
    "/test-cases/{case_number}/runs.",
)
async def list_project_runs(
    project_id: UUID,
    access: ProjectMember,
    service: TestRunServiceDep,
    result: Annotated[TestRunResult | None, Query()] = None,
    cursor: Annotated[str | None, Query(description="Cursor for pagination")] = None,
    limit: Annotated[int, Query(ge=1, le=100, description="Max items to return")] = 50,
) -> PaginatedResponse[TestRunRead]:
    runs, next_cursor, has_more = await service.list_project_runs(
        project_id, result, cursor, limit
    )
    return PaginatedResponse(
        items=[TestRunRead.model_validate(r) for r in runs],
        next_cursor=next_cursor,
        has_more=has_more,
    )
