"""Comment model."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import Index
from sqlmodel import Field, SQLModel

from src.bugtracker.models.base import utc_now
from src.bugtracker.models.enums import CommentEntityType


class Comment(SQLModel, table=True):
    """A comment on a bug or a test case.

    `entity_type` says which table `entity_id` points into. Replies carry
    `parent_comment_id`; threads are one level deep.
    """

    __tablename__ = "comments"
    __table_args__ = (Index("ix_comments_entity", "entity_type", "entity_id"),)

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    project_id: UUID = Field(foreign_key="projects.id", index=True)
    entity_type: str = Field(default=CommentEntityType.BUG.value, max_length=20)
    entity_id: UUID
    parent_comment_id: UUID | None = Field(default=None, foreign_key="comments.id")
    content: str = Field(max_length=10000)
    author_id: UUID = Field(foreign_key="users.id")
    is_edited: bool = Field(default=False)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
