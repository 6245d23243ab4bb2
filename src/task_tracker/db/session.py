"""
task_tracker.db.session

Async SQLAlchemy engine + session factory helpers.

Responsibilities:
- Build the async engine for the configured URL.
- Turn on foreign-key enforcement and a busy timeout for SQLite connections.
- Build the per-request session factory.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from task_tracker.settings import Settings

SQLITE_PRAGMAS = ("PRAGMA foreign_keys=ON", "PRAGMA busy_timeout=5000")


def _apply_sqlite_pragmas(dbapi_connection: Any, _record: Any) -> None:
    cursor = dbapi_connection.cursor()
    try:
        for pragma in SQLITE_PRAGMAS:
            cursor.execute(pragma)
    finally:
        cursor.close()


def create_engine(settings: Settings) -> AsyncEngine:
    engine = create_async_engine(settings.database_url, pool_pre_ping=True)
    if engine.dialect.name == "sqlite":
        # SQLite ships with FK checks off; task.assignee_id relies on them.
        event.listen(engine.sync_engine, "connect", _apply_sqlite_pragmas)
    return engine


def create_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # Services hand ORM rows back to routers after commit, so rows must not expire.
    return async_sessionmaker(bind=engine, expire_on_commit=False, autoflush=False)


# --- Module Notes -----------------------------------------------------------
# One session per request (`api.deps.db_session`); the CLI opens its own.
