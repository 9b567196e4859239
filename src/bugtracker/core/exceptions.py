"""Domain errors and exception handlers with request_id in responses."""

from asgi_correlation_id import correlation_id
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.bugtracker.core.logging import get_logger

logger = get_logger(__name__)


class BugTrackerError(Exception):
    """Base class for errors reported to API callers as a declared condition."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    code: str = "error"

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.__class__.__doc__ or self.code
        super().__init__(self.detail)


class ValidationError(BugTrackerError, ValueError):
    """Request rejected before any write."""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "validation_error"


class ConflictError(BugTrackerError, ValueError):
    """Request conflicts with the current state."""

    status_code = status.HTTP_409_CONFLICT
    code = "conflict"


class AlreadyMemberError(ConflictError):
    """User is already a member of this project."""

    code = "already_member"


class DuplicateInvitationError(ConflictError):
    """A pending invitation already exists for this email."""

    code = "duplicate_invitation"


class DuplicateEmailError(ConflictError):
    """The email is already registered."""

    code = "duplicate_email"


class TokenNotFoundError(ConflictError):
    """Invitation token not found."""

    status_code = status.HTTP_404_NOT_FOUND
    code = "token_not_found"


class InvitationNotPendingError(ConflictError):
    """Invitation has already been responded to."""

    code = "invitation_not_pending"


class InvitationExpiredError(ConflictError):
    """Invitation has expired."""

    status_code = status.HTTP_410_GONE
    code = "invitation_expired"


class NotFoundError(BugTrackerError, LookupError):
    """Resource not found."""

    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"


class ProjectNotFoundError(NotFoundError):
    """Project not found."""

    code = "project_not_found"


class PermissionDeniedError(BugTrackerError):
    """You do not have permission to perform this action."""

    status_code = status.HTTP_403_FORBIDDEN
    code = "permission_denied"


class TransientStorageError(BugTrackerError):
    """Storage temporarily unavailable. Please retry."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    code = "storage_unavailable"


def setup_exception_handlers(app: FastAPI) -> None:
    """Configure exception handlers that include request_id in responses."""

    @app.exception_handler(BugTrackerError)
    async def domain_exception_handler(request: Request, exc: BugTrackerError) -> JSONResponse:
        if isinstance(exc, TransientStorageError):
            logger.warning("Transient storage error", path=request.url.path, error=exc.detail)
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "detail": exc.detail,
                "code": exc.code,
                "request_id": correlation_id.get(),
            },
        )

    @app.exception_handler(StarletteHTTPException)
    async def starlette_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "detail": exc.detail,
                "request_id": correlation_id.get(),
            },
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "detail": exc.detail,
                "request_id": correlation_id.get(),
            },
            headers=exc.headers,
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        request_id = correlation_id.get()
        logger.exception(
            "Unhandled exception",
            exc_info=exc,
            request_id=request_id,
            path=request.url.path,
        )
        return JSONResponse(
            status_code=500,
            content={
                "detail": "Internal server error",
                "request_id": request_id,
            },
        )
