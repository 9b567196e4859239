"""Project activity feed endpoint."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query

from src.bugtracker.api.dependencies import ActivityServiceDep, ProjectMember
from src.bugtracker.models import ActivityAction
from src.bugtracker.schemas.activity import ActivityRead
from src.bugtracker.schemas.pagination import PaginatedResponse

router = APIRouter(prefix="/projects/{project_id}/activity", tags=["activity"])


@router.get("", response_model=PaginatedResponse[ActivityRead])
async def list_activity(
    project_id: UUID,
    access: ProjectMember,
    service: ActivityServiceDep,
    action: Annotated[ActivityAction | None, Query(description="Filter by action")] = None,
    cursor: Annotated[str | None, Query(description="Cursor for pagination")] = None,
    limit: Annotated[int, Query(ge=1, le=100, description="Max items to return")] = 50,
) -> PaginatedResponse[ActivityRead]:
    """Project activity, newest first."""
    entries, next_cursor, has_more = await service.list_project_activity(
        project_id, cursor=cursor, limit=limit, action=action
    )
    return PaginatedResponse(
        items=[ActivityRead.model_validate(e) for e in entries],
        next_cursor=next_cursor,
        has_more=has_more,
    )
