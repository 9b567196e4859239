from functools import lru_cache
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # App
    app_name: str = "BugTrackPro"
    app_env: str = "development"  # development, testing, production
    debug: bool = False
    auto_create_schema: bool = False  # create tables on startup instead of running alembic
    run_migrations_on_startup: bool = False

    # Security
    log_user_emails: bool = False  # Set to False in production for GDPR compliance

    # Database
    database_url: str
    database_pool_size: int = 5
    database_max_overflow: int = 10

    # Auth
    jwt_secret_key: str
    jwt_algorithm: str = "HS256"
    jwt_issuer: str = "BugTrackPro"
    jwt_audience: str = "BugTrackPro"
    access_token_expire_hours: int = 24
    argon2_time_cost: int = 3
    argon2_memory_cost: int = 65536
    argon2_parallelism: int = 1

    @field_validator("jwt_secret_key")
    @classmethod
    def validate_jwt_secret(cls, v: str) -> str:
        if v == "change-this-to-a-secure-random-string":
            raise ValueError(
                "JWT_SECRET_KEY must be changed from default value. "
                "Generate a secure secret with: openssl rand -hex 32"
            )
        if len(v) < 32:
            raise ValueError("JWT_SECRET_KEY must be at least 32 characters")
        return v

    @field_validator("cors_origins")
    @classmethod
    def validate_cors_origins(cls, v: list[str]) -> list[str]:
        """Validate CORS origins - reject wildcards when credentials are used."""
        for origin in v:
            if origin == "*":
                raise ValueError(
                    "CORS wildcard '*' is not allowed when allow_credentials=True. "
                    "Specify explicit origins instead."
                )
        return v

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    # Metrics
    metrics_api_key: str | None = None  # If set, /metrics requires this key

    # Invitations
    invite_expire_days: int = 7
    # What happens when a pending invite already exists for (project, email):
    # supersede - expire the old invite, reject - refuse, allow - keep both
    invite_duplicate_policy: Literal["supersede", "reject", "allow"] = "supersede"
    invite_expiry_schedule: str | None = None  # Cron syntax, e.g. "*/15 * * * *"

    # Optimistic concurrency
    membership_update_max_retries: int = 5
    sequence_max_retries: int = 10  # only used by the compare-and-swap fallback

    # Temporal
    temporal_host: str = "localhost:7233"
    temporal_namespace: str = "default"
    temporal_task_queue: str = "bugtracker-queue"

    # Rate limiting
    rate_limit_enabled: bool = True


@lru_cache
def get_settings() -> Settings:
    return Settings()
