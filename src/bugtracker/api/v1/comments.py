"""Comment editing. Comments are created and listed under their bug or test case."""

from uuid import UUID

from fastapi import APIRouter

from src.bugtracker.api.dependencies import CommentServiceDep, ProjectContributor
from src.bugtracker.schemas.comment import CommentRead, CommentUpdate

router = APIRouter(prefix="/projects/{project_id}/comments", tags=["comments"])


@router.patch("/{comment_id}", response_model=CommentRead)
async def edit_comment(
    project_id: UUID,
    comment_id: UUID,
    data: CommentUpdate,
    access: ProjectContributor,
    service: CommentServiceDep,
) -> CommentRead:
    """Edit your own comment. It is flagged as edited."""
    comment = await service.edit_comment(project_id, comment_id, access.user, data.content)
    return CommentRead.model_validate(comment)
