"""Rate limiting for unauthenticated endpoints (sign-up, login, token lookups).

In-memory storage: limits are per process.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address
from starlette.requests import Request

from src.bugtracker.core.config import get_settings
from src.bugtracker.core.logging import get_logger

logger = get_logger(__name__)


def get_rate_limit_key(request: Request) -> str:
    """Rate limit key from client IP only.

    Never include user-controlled headers here: rotating them would mint
    unlimited fresh buckets.
    """
    return get_remote_address(request) or "unknown"


def create_limiter() -> Limiter:
    """Create the rate limiter. Disabled in testing or when RATE_LIMIT_ENABLED is false."""
    settings = get_settings()
    if settings.app_env == "testing" or not settings.rate_limit_enabled:
        logger.info("Rate limiter disabled")
        return Limiter(key_func=get_rate_limit_key, enabled=False)
    return Limiter(key_func=get_rate_limit_key)


# Reads settings at import time; changing limits needs a restart
limiter = create_limiter()
