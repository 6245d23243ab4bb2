"""
task_tracker.db.init_db

Schema helpers for development, tests and the `init-db` command.

Production deployments run `alembic upgrade head` instead.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncEngine

from task_tracker.db import models  # noqa: F401  # register models on Base.metadata
from task_tracker.db.base import Base


async def init_db(engine: AsyncEngine, *, drop: bool = False) -> None:
    """Create the `users` and `tasks` tables; with `drop=True`, start from empty."""

    async with engine.begin() as conn:
        if drop:
            await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
