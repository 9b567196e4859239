"""Unit tests for SequenceService error handling."""

from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
from sqlalchemy.exc import OperationalError

from src.bugtracker.core.exceptions import TransientStorageError
from src.bugtracker.models import SequenceKind
from src.bugtracker.services import SequenceService

pytestmark = pytest.mark.unit


@pytest.fixture
def mock_session() -> AsyncMock:
    session = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    return session


@pytest.fixture
def sequence_repo() -> MagicMock:
    repo = MagicMock()
    repo.allocate = AsyncMock(return_value=7)
    return repo


async def test_commits_by_default(sequence_repo, mock_session):
    service = SequenceService(sequence_repo, mock_session)

    assert await service.allocate(uuid4(), SequenceKind.BUGS) == 7
    mock_session.commit.assert_awaited_once()


async def test_joins_caller_transaction(sequence_repo, mock_session):
    service = SequenceService(sequence_repo, mock_session)

    await service.allocate(uuid4(), SequenceKind.BUGS, commit=False)

    mock_session.commit.assert_not_awaited()


async def test_storage_failure_becomes_transient_error(sequence_repo, mock_session):
    sequence_repo.allocate.side_effect = OperationalError(
        "UPDATE counters", {}, Exception("locked")
    )
    service = SequenceService(sequence_repo, mock_session)

    with pytest.raises(TransientStorageError):
        await service.allocate(uuid4(), SequenceKind.TESTCASES)

    mock_session.rollback.assert_awaited_once()
    mock_session.commit.assert_not_awaited()


async def test_other_errors_propagate_unchanged(sequence_repo, mock_session):
    sequence_repo.allocate.side_effect = KeyError("boom")
    service = SequenceService(sequence_repo, mock_session)

    with pytest.raises(KeyError):
        await service.allocate(uuid4(), SequenceKind.BUGS)

    mock_session.rollback.assert_awaited_once()
