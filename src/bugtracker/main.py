from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from asgi_correlation_id import CorrelationIdMiddleware
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from src.bugtracker.api.middlewares import logging_context_middleware
from src.bugtracker.api.v1.router import api_router
from src.bugtracker.core.config import get_settings
from src.bugtracker.core.db import create_all_tables, dispose_engine, run_migrations_async
from src.bugtracker.core.exceptions import setup_exception_handlers
from src.bugtracker.core.health import setup_health_endpoint, setup_metrics
from src.bugtracker.core.logging import get_logger, setup_logging
from src.bugtracker.core.rate_limit import limiter
from src.bugtracker.temporal.client import close_temporal_client

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Application lifespan - startup and shutdown."""
    settings = get_settings()
    setup_logging(settings.debug)
    logger.info(f"Starting {settings.app_name}", env=settings.app_env)

    if settings.run_migrations_on_startup:
        await run_migrations_async()
        logger.info("Database migrations applied")
    elif settings.auto_create_schema:
        await create_all_tables()
        logger.info("Database schema ensured")

    yield

    logger.info("Closing connections...")
    await close_temporal_client()
    await dispose_engine()
    logger.info("Shutdown complete")


OPENAPI_TAGS = [
    {"name": "auth", "description": "Sign-up, login and the current user"},
    {"name": "projects", "description": "Projects and their member roster"},
    {"name": "invitations", "description": "Project invitations and token acceptance"},
    {"name": "bugs", "description": "Bug reports numbered per project"},
    {"name": "test-cases", "description": "Test cases numbered per project"},
    {"name": "test-runs", "description": "Test execution history"},
    {"name": "comments", "description": "Comments on bugs and test cases"},
    {"name": "activity", "description": "Project activity feed"},
]


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Project, bug and test case tracking API",
        version="0.1.0",
        openapi_tags=OPENAPI_TAGS,
        lifespan=lifespan,
    )

    setup_exception_handlers(app)

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)  # type: ignore[arg-type]

    app.middleware("http")(logging_context_middleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "DELETE"],
        allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
    )

    # Added last so it is the outermost middleware and sets the id first
    app.add_middleware(CorrelationIdMiddleware)

    app.include_router(api_router)
    setup_metrics(app)
    setup_health_endpoint(app)

    return app


app = create_app()
