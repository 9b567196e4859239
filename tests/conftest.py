"""Root test fixtures shared across all test types.

This conftest contains fixtures that can be used by both unit and integration tests.
Database-specific fixtures are in tests/integration/conftest.py.
"""

import os

# Set env before any app imports: settings are cached on first use
os.environ.setdefault("APP_ENV", "testing")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./bugtracker-test.db")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-that-is-at-least-32-characters-long")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
# Cheap password hashing in tests
os.environ.setdefault("ARGON2_TIME_COST", "1")
os.environ.setdefault("ARGON2_MEMORY_COST", "8192")

# ruff: noqa: E402 - Imports must be after env var setup
from collections.abc import Generator

import pytest
import structlog
from structlog.testing import CapturingLogger

from src.bugtracker.core.config import get_settings
from src.bugtracker.core.logging import clear_request_context

# Clear settings cache to ensure test environment variables are picked up
get_settings.cache_clear()


@pytest.fixture
def capturing_logger() -> Generator[CapturingLogger]:
    """Route structlog output into a CapturingLogger for the duration of a test."""
    cap_logger = CapturingLogger()
    old_config = structlog.get_config()

    structlog.configure(
        processors=[structlog.contextvars.merge_contextvars],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=lambda *args, **kwargs: cap_logger,
        cache_logger_on_first_use=False,
    )

    clear_request_context()
    yield cap_logger
    clear_request_context()
    structlog.configure(**old_config)


@pytest.fixture
def settings_override(monkeypatch: pytest.MonkeyPatch) -> Generator[None]:
    """Allow a test to change settings through env vars; cache is reset afterwards."""
    get_settings.cache_clear()
    yield
    monkeypatch.undo()
    get_settings.cache_clear()
