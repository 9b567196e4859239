"""Tests for per-project sequence allocation."""

import asyncio
from uuid import uuid4

import pytest

from src.bugtracker.core.config import get_settings
from src.bugtracker.models import SequenceKind
from src.bugtracker.repositories import BugRepository, SequenceRepository, TestCaseRepository
import src.bugtracker.repositories.sequence as sequence_module
from src.bugtracker.schemas.bug import BugCreate, BugRead
from src.bugtracker.schemas.test_case import TestCaseCreate, TestCaseRead
from src.bugtracker.services import BugService, SequenceService, TestCaseService

pytestmark = [pytest.mark.integration, pytest.mark.asyncio]


class TestAllocate:
    async def test_fresh_key_starts_at_one(self, services):
        project_id = uuid4()

        assert await services.sequences.allocate(project_id, SequenceKind.BUGS) == 1
        assert await services.sequences.allocate(project_id, SequenceKind.BUGS) == 2

    async def test_keys_are_independent(self, services):
        project_a, project_b = uuid4(), uuid4()

        await services.sequences.allocate(project_a, SequenceKind.BUGS)
        await services.sequences.allocate(project_a, SequenceKind.BUGS)

        assert await services.sequences.allocate(project_a, SequenceKind.TESTCASES) == 1
        assert await services.sequences.allocate(project_b, SequenceKind.BUGS) == 1

    async def test_concurrent_allocations_are_distinct_and_gap_free(self, session_factory):
        """N concurrent callers on one key receive exactly {1..N}."""
        project_id = uuid4()
        n = 10

        async def allocate_once() -> int:
            session = session_factory()
            service = SequenceService(SequenceRepository(session), session)
            return await service.allocate(project_id, SequenceKind.BUGS)

        values = await asyncio.gather(*(allocate_once() for _ in range(n)))

        assert sorted(values) == list(range(1, n + 1))

    async def test_uncommitted_allocation_is_rolled_back(self, services, db_session):
        project_id = uuid4()

        await services.sequences.allocate(project_id, SequenceKind.BUGS, commit=False)
        await db_session.rollback()

        assert await services.sequences.allocate(project_id, SequenceKind.BUGS) == 1


class TestCompareAndSwapFallback:
    """Dialects without an upsert go through the read / conditional-update loop."""

    @pytest.fixture(autouse=True)
    def no_upsert(self, monkeypatch):
        monkeypatch.setattr(sequence_module, "_UPSERT_DIALECTS", {})

    async def test_sequential_allocations(self, services):
        project_id = uuid4()

        values = [
            await services.sequences.allocate(project_id, SequenceKind.BUGS) for _ in range(3)
        ]

        assert values == [1, 2, 3]

    async def test_concurrent_allocations_after_first(
        self, services, session_factory, monkeypatch, settings_override
    ):
        monkeypatch.setenv("SEQUENCE_MAX_RETRIES", "50")
        get_settings.cache_clear()
        project_id = uuid4()
        assert await services.sequences.allocate(project_id, SequenceKind.BUGS) == 1

        async def allocate_once() -> int:
            session = session_factory()
            service = SequenceService(SequenceRepository(session), session)
            return await service.allocate(project_id, SequenceKind.BUGS)

        values = await asyncio.gather(*(allocate_once() for _ in range(8)))

        assert sorted(values) == list(range(2, 10))


class TestNumberedEntities:
    async def test_bugs_are_numbered_per_project(self, services, db_session, project, owner):
        bug_service = BugService(
            BugRepository(db_session), services.sequences, services.activity, db_session
        )

        first = await bug_service.create_bug(project.id, owner, BugCreate(title="Crash on save"))
        second = await bug_service.create_bug(project.id, owner, BugCreate(title="Typo"))

        assert (first.bug_number, second.bug_number) == (1, 2)
        assert BugRead.model_validate(second).key == "BUG-2"

    async def test_test_cases_use_their_own_sequence(self, services, db_session, project, owner):
        bug_service = BugService(
            BugRepository(db_session), services.sequences, services.activity, db_session
        )
        case_service = TestCaseService(
            TestCaseRepository(db_session), services.sequences, services.activity, db_session
        )

        await bug_service.create_bug(project.id, owner, BugCreate(title="Crash on save"))
        case = await case_service.create_test_case(
            project.id, owner, TestCaseCreate(title="Login works")
        )

        assert case.case_number == 1
        assert TestCaseRead.model_validate(case).key == "TC-1"
