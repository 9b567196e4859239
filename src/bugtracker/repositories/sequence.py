"""Repository for per-project sequence counters."""

from typing import Any, cast
from uuid import UUID

from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.engine import CursorResult
from sqlalchemy.exc import IntegrityError
from sqlmodel import select, update

from src.bugtracker.core.config import get_settings
from src.bugtracker.core.exceptions import TransientStorageError
from src.bugtracker.core.logging import get_logger
from src.bugtracker.models import SequenceCounter, SequenceKind
from src.bugtracker.repositories.base import BaseRepository

logger = get_logger(__name__)

_UPSERT_DIALECTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


class SequenceRepository(BaseRepository[SequenceCounter]):
    """Allocates strictly increasing numbers per (project, kind) key.

    The increment never commits; it joins whatever transaction the session
    is in.
    """

    model = SequenceCounter

    async def allocate(self, project_id: UUID, kind: SequenceKind | str) -> int:
        """Atomically increment the counter for (project_id, kind) and return the new value.

        A key that has never been used starts at 1.
        """
        key = SequenceCounter.make_key(project_id, SequenceKind(kind).value)
        dialect = self.session.get_bind().dialect.name
        insert_fn = _UPSERT_DIALECTS.get(dialect)
        if insert_fn is None:
            return await self._allocate_cas(key)

        stmt = (
            insert_fn(SequenceCounter)
            .values(id=key, seq=1)
            .on_conflict_do_update(
                index_elements=["id"],
                set_={"seq": SequenceCounter.seq + 1},
            )
            .returning(SequenceCounter.seq)
        )
        result = await self.session.execute(stmt)
        return int(result.scalar_one())

    async def _allocate_cas(self, key: str) -> int:
        """Read / conditional-update loop for dialects without an upsert."""
        max_retries = get_settings().sequence_max_retries
        for attempt in range(max_retries):
            current = (
                await self.session.execute(
                    select(SequenceCounter.seq).where(SequenceCounter.id == key)
                )
            ).scalar_one_or_none()

            if current is None:
                try:
                    async with self.session.begin_nested():
                        self.session.add(SequenceCounter(id=key, seq=1))
                    return 1
                except IntegrityError:
                    # Another writer created the key first
                    continue

            result = await self.session.execute(
                update(SequenceCounter)
                .where(SequenceCounter.id == key)  # type: ignore[arg-type]
                .where(SequenceCounter.seq == current)  # type: ignore[arg-type]
                .values(seq=current + 1)
                .execution_options(synchronize_session=False)
            )
            if cast(CursorResult[Any], result).rowcount == 1:
                return current + 1
            logger.debug("Sequence CAS conflict", key=key, attempt=attempt + 1)

        raise TransientStorageError(f"Could not allocate sequence number for {key}")
