"""structlog setup and the per-request context every log line carries.

A request accumulates context as it moves through the stack: the middleware
binds the correlation id and route, auth binds the caller, and project
dependencies bind the project and the caller's role in it. All of it is
cleared when the request ends.
"""

import logging
import sys
from uuid import UUID

import structlog
from structlog.contextvars import bind_contextvars, clear_contextvars

# Chatty third-party loggers and the level they are capped at
_LIBRARY_LEVELS = {
    "sqlalchemy.engine": logging.WARNING,
    "aiosqlite": logging.WARNING,
    "temporalio": logging.INFO,
}


def setup_logging(debug: bool = False) -> None:
    """Route stdlib logging through structlog.

    Debug mode renders colored console lines; otherwise each event is one
    JSON object on stdout, with tracebacks folded into the `exception` key.
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=logging.DEBUG if debug else logging.INFO,
    )

    processors: list[structlog.typing.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    if debug:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    else:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    for name, level in _LIBRARY_LEVELS.items():
        logging.getLogger(name).setLevel(level)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def bind_request_context(
    request_id: str | None, method: str | None = None, path: str | None = None
) -> None:
    """Tag subsequent log lines with the correlation id and the route being served."""
    if request_id:
        bind_contextvars(request_id=request_id)
    if method and path:
        bind_contextvars(http_method=method, http_path=path)


def bind_user_context(user_id: UUID, email: str | None = None) -> None:
    """Tag subsequent log lines with the authenticated caller.

    The email is only bound when settings.log_user_emails is enabled.
    """
    from src.bugtracker.core.config import get_settings

    bind_contextvars(user_id=str(user_id))
    if email and get_settings().log_user_emails:
        bind_contextvars(user_email=email)


def bind_project_context(project_id: UUID, role: str) -> None:
    """Tag subsequent log lines with the project being acted on and the caller's role."""
    bind_contextvars(project_id=str(project_id), project_role=role)


def clear_request_context() -> None:
    clear_contextvars()
