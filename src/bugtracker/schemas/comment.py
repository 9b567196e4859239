from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from src.bugtracker.models import CommentEntityType


class CommentCreate(BaseModel):
    content: str = Field(min_length=1, max_length=10000)
    parent_comment_id: UUID | None = Field(
        default=None, description="Reply to a top-level comment on the same item"
    )


class CommentUpdate(BaseModel):
    content: str = Field(min_length=1, max_length=10000)


class CommentRead(BaseModel):
    id: UUID
    project_id: UUID
    entity_type: CommentEntityType
    entity_id: UUID
    parent_comment_id: UUID | None
    content: str
    author_id: UUID
    is_edited: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
