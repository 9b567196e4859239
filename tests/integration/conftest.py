"""Integration test fixtures for database and HTTP client operations.

Each test gets its own SQLite database file, created from the model metadata.
Uses polyfactory for type-safe test data generation.
"""

from collections.abc import AsyncGenerator, Awaitable, Callable
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine

from src.bugtracker.core.db import create_all_tables, engine_options, get_session
import src.bugtracker.core.db.engine as engine_module
from src.bugtracker.core.health import reset_health_cache
from src.bugtracker.main import create_app
from src.bugtracker.models import Project, User
from src.bugtracker.repositories import (
    ActivityLogRepository,
    InvitationRepository,
    ProjectRepository,
    SequenceRepository,
    UserRepository,
)
from src.bugtracker.services import (
    ActivityService,
    InvitationService,
    MembershipService,
    ProjectService,
    ReconciliationService,
    RegistrationService,
    SequenceService,
)
from tests.factories import UserFactory


@pytest.fixture
async def engine(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> AsyncGenerator[AsyncEngine]:
    """Fresh database per test, installed as the application engine."""
    url = f"sqlite+aiosqlite:///{tmp_path / 'bugtracker.db'}"
    test_engine = create_async_engine(url, **engine_options(url))
    await create_all_tables(test_engine)

    # get_session() with no argument (activities, health check) uses this engine
    monkeypatch.setattr(engine_module, "_engine", test_engine)
    reset_health_cache()

    yield test_engine
    await test_engine.dispose()


@pytest.fixture
async def db_session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Provide an async session for database operations.

    The session never auto-commits: services commit their own units of work,
    tests that add rows directly must call `await session.commit()`.
    """
    async with get_session(engine) as session:
        yield session


@pytest.fixture
async def session_factory(
    engine: AsyncEngine,
) -> AsyncGenerator[Callable[[], AsyncSession]]:
    """Hand out extra independent sessions (one per simulated request)."""
    sessions: list[AsyncSession] = []

    def _make() -> AsyncSession:
        session = AsyncSession(engine, expire_on_commit=False, autoflush=False)
        sessions.append(session)
        return session

    yield _make
    for session in sessions:
        await session.close()


# --- Service wiring ---


class Services:
    """Every service bound to a single session, wired as the API wires them."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.user_repo = UserRepository(session)
        self.project_repo = ProjectRepository(session)
        self.invitation_repo = InvitationRepository(session)
        self.activity = ActivityService(ActivityLogRepository(session), session)
        self.sequences = SequenceService(SequenceRepository(session), session)
        self.projects = ProjectService(self.project_repo, self.activity, session)
        self.membership = MembershipService(
            self.project_repo, self.user_repo, self.activity, session
        )
        self.invitations = InvitationService(
            self.invitation_repo, self.project_repo, self.user_repo, self.activity, session
        )
        self.reconciliation = ReconciliationService(
            self.invitations, self.invitation_repo, self.membership, session
        )
        self.registration = RegistrationService(self.user_repo, self.reconciliation, session)


@pytest.fixture
def services(db_session: AsyncSession) -> Services:
    return Services(db_session)


# --- Data fixtures ---


@pytest.fixture
def make_user(db_session: AsyncSession) -> Callable[..., Awaitable[User]]:
    """Persist a user built by UserFactory."""

    async def _make(**kwargs) -> User:
        user = UserFactory.build(**kwargs)
        db_session.add(user)
        await db_session.commit()
        await db_session.refresh(user)
        return user

    return _make


@pytest.fixture
async def owner(make_user) -> User:
    return await make_user(first_name="Olive", last_name="Owner", full_name="Olive Owner")


@pytest.fixture
async def project(services: Services, owner: User) -> Project:
    return await services.projects.create_project(owner, name="Checkout Revamp")


# --- HTTP client fixtures ---


@pytest.fixture
async def client(engine: AsyncEngine) -> AsyncGenerator[AsyncClient]:
    """HTTP client against the app; request sessions come from the test engine."""
    app = create_app()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
