"""Tests for structured logging context."""

from uuid import uuid4

import pytest
import structlog

from src.bugtracker.core.logging import (
    bind_project_context,
    bind_request_context,
    bind_user_context,
    clear_request_context,
)

pytestmark = pytest.mark.unit


def test_bind_request_context(capturing_logger):
    """Test binding request_id to log context."""
    request_id = "test-request-123"

    bind_request_context(request_id)
    logger = structlog.get_logger()
    logger.info("test message")

    entries = capturing_logger.calls
    assert len(entries) == 1
    assert entries[0].kwargs["request_id"] == request_id


def test_bind_request_context_with_none(capturing_logger):
    """Test that None request_id is not bound."""
    bind_request_context(None)
    logger = structlog.get_logger()
    logger.info("test message")

    entries = capturing_logger.calls
    assert len(entries) == 1
    assert "request_id" not in entries[0].kwargs


def test_bind_request_context_with_route(capturing_logger):
    bind_request_context("req-7", "POST", "/api/v1/projects")
    structlog.get_logger().info("test message")

    entry = capturing_logger.calls[0]
    assert entry.kwargs["http_method"] == "POST"
    assert entry.kwargs["http_path"] == "/api/v1/projects"


def test_bind_project_context(capturing_logger):
    project_id = uuid4()

    bind_project_context(project_id, "tester")
    structlog.get_logger().info("test message")

    entry = capturing_logger.calls[0]
    assert entry.kwargs["project_id"] == str(project_id)
    assert entry.kwargs["project_role"] == "tester"


def test_bind_user_context(capturing_logger):
    """Email is only logged when log_user_emails is enabled."""
    user_id = uuid4()

    bind_user_context(user_id, "test@example.com")
    logger = structlog.get_logger()
    logger.info("test message")

    entries = capturing_logger.calls
    assert len(entries) == 1
    assert entries[0].kwargs["user_id"] == str(user_id)
    assert "user_email" not in entries[0].kwargs


def test_bind_user_context_with_email_logging_enabled(capturing_logger, monkeypatch):
    from unittest.mock import MagicMock

    from src.bugtracker.core import config

    user_id = uuid4()
    mock_settings = MagicMock()
    mock_settings.log_user_emails = True
    monkeypatch.setattr(config, "get_settings", lambda: mock_settings)

    bind_user_context(user_id, "test@example.com")
    logger = structlog.get_logger()
    logger.info("test message")

    entries = capturing_logger.calls
    assert entries[0].kwargs["user_email"] == "test@example.com"


def test_clear_request_context(capturing_logger):
    bind_request_context("test-request-123")
    bind_user_context(uuid4())

    clear_request_context()

    logger = structlog.get_logger()
    logger.info("test message")
    entries = capturing_logger.calls
    assert len(entries) == 1
    assert "request_id" not in entries[0].kwargs
    assert "user_id" not in entries[0].kwargs


def test_service_log_carries_keyword_context(capturing_logger):
    """Service loggers emit the event name plus keyword fields, merged with request context."""
    from src.bugtracker.services.invitation_service import logger as service_logger

    bind_request_context("req-42")
    service_logger.info("Invitation created", invitation_id="abc", role="tester")

    entry = capturing_logger.calls[0]
    assert entry.method_name == "info"
    assert entry.kwargs["event"] == "Invitation created"
    assert entry.kwargs["invitation_id"] == "abc"
    assert entry.kwargs["request_id"] == "req-42"
