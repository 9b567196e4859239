"""Comment service - discussion threads on bugs and test cases."""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.bugtracker.core.exceptions import (
    BugTrackerError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from src.bugtracker.core.logging import get_logger
from src.bugtracker.models import (
    ActivityAction,
    ActivityEntityType,
    Bug,
    Comment,
    CommentEntityType,
    TestCase,
    User,
    utc_now,
)
from src.bugtracker.repositories import BugRepository, CommentRepository, TestCaseRepository
from src.bugtracker.schemas.comment import CommentCreate
from src.bugtracker.services.activity_service import ActivityService

logger = get_logger(__name__)

_KEY_PREFIX = {CommentEntityType.BUG: "BUG", CommentEntityType.TEST_CASE: "TC"}


class CommentService:
    """Comments on bugs and test cases.

    Threads are one level deep: a reply must point at a top-level comment on
    the same item. Only the author can edit a comment.
    """

    def __init__(
        self,
        comment_repo: CommentRepository,
        bug_repo: BugRepository,
        test_case_repo: TestCaseRepository,
        activity_service: ActivityService,
        session: AsyncSession,
    ):
        self.comment_repo = comment_repo
        self.bug_repo = bug_repo
        self.test_case_repo = test_case_repo
        self.activity_service = activity_service
        self.session = session

    async def _resolve_target(
        self, project_id: UUID, entity_type: CommentEntityType, number: int
    ) -> UUID:
        """Map BUG-n / TC-n within a project to the row id."""
        target: Bug | TestCase | None
        if entity_type == CommentEntityType.BUG:
            target = await self.bug_repo.get_by_number(project_id, number)
        else:
            target = await self.test_case_repo.get_by_number(project_id, number)
        if target is None:
            raise NotFoundError(f"{_KEY_PREFIX[entity_type]}-{number} not found")
        return target.id

    async def add_comment(
        self,
        project_id: UUID,
        entity_type: CommentEntityType,
        number: int,
        author: User,
        data: CommentCreate,
    ) -> Comment:
        author_id = author.id
        author_name = author.full_name
        key = f"{_KEY_PREFIX[entity_type]}-{number}"
        try:
            entity_id = await self._resolve_target(project_id, entity_type, number)

            if data.parent_comment_id is not None:
                parent = await self.comment_repo.get_by_id(data.parent_comment_id)
                if (
                    parent is None
                    or parent.entity_type != entity_type.value
                    or parent.entity_id != entity_id
                ):
                    raise ValidationError(f"Parent comment is not on {key}")
                if parent.parent_comment_id is not None:
                    raise ValidationError("Replies cannot be nested")

            comment = Comment(
                project_id=project_id,
                entity_type=entity_type.value,
                entity_id=entity_id,
                parent_comment_id=data.parent_comment_id,
                content=data.content,
                author_id=author_id,
            )
            self.comment_repo.add(comment)
            self.activity_service.record(
                project_id,
                author_id,
                author_name,
                ActivityAction.COMMENT_ADDED,
                ActivityEntityType.COMMENT,
                entity_id=comment.id,
                entity_title=key,
                details={"entity_type": entity_type.value, "number": number},
            )
            await self.session.commit()
            await self.session.refresh(comment)
        except BugTrackerError:
            await self.session.rollback()
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to add comment", project_id=str(project_id), error=str(e))
            raise

        logger.info("Comment added", project_id=str(project_id), target=key)
        return comment

    async def list_comments(
        self, project_id: UUID, entity_type: CommentEntityType, number: int
    ) -> list[Comment]:
        entity_id = await self._resolve_target(project_id, entity_type, number)
        return await self.comment_repo.list_for_entity(entity_type, entity_id)

    async def edit_comment(
        self, project_id: UUID, comment_id: UUID, editor: User, content: str
    ) -> Comment:
        """Replace a comment's text. Only its author may do this."""
        editor_id = editor.id
        try:
            comment = await self.comment_repo.get_by_id(comment_id)
            if comment is None or comment.project_id != project_id:
                raise NotFoundError("Comment not found")
            if comment.author_id != editor_id:
                raise PermissionDeniedError("Only the author can edit a comment")

            comment.content = content
            comment.is_edited = True
            comment.updated_at = utc_now()
            await self.session.commit()
            await self.session.refresh(comment)
        except BugTrackerError:
            await self.session.rollback()
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to edit comment", comment_id=str(comment_id), error=str(e))
            raise

        return comment
