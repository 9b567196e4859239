"""Sequence service - human-readable per-project numbers (BUG-1, TC-1, ...)."""

from uuid import UUID

from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncSession

from src.bugtracker.core.exceptions import TransientStorageError
from src.bugtracker.core.logging import get_logger
from src.bugtracker.models import SequenceKind
from src.bugtracker.repositories import SequenceRepository

logger = get_logger(__name__)


class SequenceService:
    """Allocates the next number for a (project, kind) key.

    Concurrent callers on one key receive distinct, consecutive values: N
    allocations starting from a fresh key return exactly {1..N}.
    """

    def __init__(self, sequence_repo: SequenceRepository, session: AsyncSession):
        self.sequence_repo = sequence_repo
        self.session = session

    async def allocate(
        self, project_id: UUID, kind: SequenceKind, *, commit: bool = True
    ) -> int:
        """Return the next number for the key.

        With commit=False the increment joins the caller's transaction, so a
        failed insert downstream rolls the number back too.

        Raises:
            TransientStorageError: The store was unreachable or gave up; no
                number was allocated.
        """
        try:
            value = await self.sequence_repo.allocate(project_id, kind)
            if commit:
                await self.session.commit()
        except DBAPIError as e:
            # OperationalError (locks, lost connections) is a DBAPIError
            await self.session.rollback()
            logger.warning(
                "Sequence allocation failed",
                project_id=str(project_id),
                kind=SequenceKind(kind).value,
                error=str(e),
            )
            raise TransientStorageError() from e
        except Exception:
            await self.session.rollback()
            raise

        logger.debug(
            "Sequence allocated",
            project_id=str(project_id),
            kind=SequenceKind(kind).value,
            value=value,
        )
        return value
