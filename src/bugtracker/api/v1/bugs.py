"""Bug endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, status

from src.bugtracker.api.dependencies import (
    BugServiceDep,
    CommentServiceDep,
    ProjectContributor,
    ProjectMember,
)
from src.bugtracker.models import BugStatus, CommentEntityType
from src.bugtracker.schemas.bug import BugCreate, BugRead
from src.bugtracker.schemas.comment import CommentCreate, CommentRead
from src.bugtracker.schemas.pagination import PaginatedResponse

router = APIRouter(prefix="/projects/{project_id}/bugs", tags=["bugs"])


@router.post(
    "",
    response_model=BugRead,
    status_code=status.HTTP_201_CREATED,
    description="Report a bug. It gets the project's next bug number. Owner or tester.",
)
async def create_bug(
    project_id: UUID,
    data: BugCreate,
    access: ProjectContributor,
    service: BugServiceDep,
) -> BugRead:
    bug = await service.create_bug(project_id, access.user, data)
    return BugRead.model_validate(bug)


@router.get("", response_model=PaginatedResponse[BugRead])
async def list_bugs(
    project_id: UUID,
    access: ProjectMember,
    service: BugServiceDep,
    status_filter: Annotated[BugStatus | None, Query(alias="status")] = None,
    cursor: Annotated[str | None, Query(description="Cursor for pagination")] = None,
    limit: Annotated[int, Query(ge=1, le=100, description="Max items to return")] = 50,
) -> PaginatedResponse[BugRead]:
    bugs, next_cursor, has_more = await service.list_bugs(
        project_id, status_filter, cursor, limit
    )
    return PaginatedResponse(
        items=[BugRead.model_validate(b) for b in bugs],
        next_cursor=next_cursor,
        has_more=has_more,
    )


@router.get("/{bug_number}", response_model=BugRead)
async def get_bug(
    project_id: UUID,
    bug_number: int,
    access: ProjectMember,
    service: BugServiceDep,
) -> BugRead:
    return BugRead.model_validate(await service.get_bug(project_id, bug_number))


@router.post(
    "/{bug_number}/comments",
    response_model=CommentRead,
    status_code=status.HTTP_201_CREATED,
    description="Comment on a bug, or reply to a top-level comment. Owner or tester.",
)
async def add_bug_comment(
    project_id: UUID,
    bug_number: int,
    data: CommentCreate,
    access: ProjectContributor,
    service: CommentServiceDep,
) -> CommentRead:
    comment = await service.add_comment(
        project_id, CommentEntityType.BUG, bug_number, access.user, data
    )
    return CommentRead.model_validate(comment)


@router.get("/{bug_number}/comments", response_model=list[CommentRead])
async def list_bug_comments(
    project_id: UUID,
    bug_number: int,
    access: ProjectMember,
    service: CommentServiceDep,
) -> list[CommentRead]:
    comments = await service.list_comments(project_id, CommentEntityType.BUG, bug_number)
    return [CommentRead.model_validate(c) for c in comments]
