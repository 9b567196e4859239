"""Repository for Comment entity."""

from uuid import UUID

from sqlmodel import select

from src.bugtracker.models import Comment, CommentEntityType
from src.bugtracker.repositories.base import BaseRepository


class CommentRepository(BaseRepository[Comment]):
    model = Comment

    async def list_for_entity(
        self, entity_type: CommentEntityType, entity_id: UUID
    ) -> list[Comment]:
        """All comments on a bug or test case, oldest first."""
        result = await self.session.execute(
            select(Comment)
            .where(Comment.entity_type == entity_type.value, Comment.entity_id == entity_id)
            .order_by(Comment.created_at)  # type: ignore[arg-type]
        )
        return list(result.scalars().all())
