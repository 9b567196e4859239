"""Database utilities - engine, session, migrations."""

from src.bugtracker.core.db.engine import dispose_engine, engine_options, get_engine
from src.bugtracker.core.db.migrations import run_migrations_async, run_migrations_sync
from src.bugtracker.core.db.session import create_all_tables, get_session

__all__ = [
    # Engine
    "dispose_engine",
    "engine_options",
    "get_engine",
    # Session
    "create_all_tables",
    "get_session",
    # Migrations
    "run_migrations_async",
    "run_migrations_sync",
]
