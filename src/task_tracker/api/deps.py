"""
task_tracker.api.deps

FastAPI dependency wiring for the API layer.

Responsibilities:
- Provide dependency functions for settings, DB sessions and the document store.
- Encapsulate app.state access patterns (settings/engine/sessionmaker/store).
"""

from __future__ import annotations

from collections.abc import AsyncIterator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from task_tracker.settings import Settings
from task_tracker.storage.documents import DocumentStore


def settings_dep(request: Request) -> Settings:
    # The settings instance passed to `create_app`, not a fresh env read.
    return request.app.state.settings  # type: ignore[attr-defined]


def sessionmaker_from_app(request: Request) -> async_sessionmaker[AsyncSession]:
    # The sessionmaker is created in the app lifespan (`task_tracker.api.app.create_app`).
    return request.app.state.sessionmaker  # type: ignore[attr-defined]


async def db_session(
    session_factory: async_sessionmaker[AsyncSession] = Depends(sessionmaker_from_app),
) -> AsyncIterator[AsyncSession]:
    # Request-scoped DB session. Commit/rollback is managed explicitly by the service layer.
    async with session_factory() as session:
        yield session


def document_store(request: Request) -> DocumentStore:
    return request.app.state.document_store  # type: ignore[attr-defined]


# --- Module Notes -----------------------------------------------------------
# FastAPI caches dependencies per request, so `get_principal` and the route handler
# share the same session.
