"""
task_tracker.api.routers.health

Health and readiness endpoints.

Responsibilities:
- Provide liveness probe (`/healthz`).
- Provide readiness probe (`/readyz`) with DB connectivity validation.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from task_tracker.api.deps import db_session, document_store
from task_tracker.storage.documents import DocumentStore

router = APIRouter()


@router.get("/healthz")
async def healthz() -> dict[str, str]:
    # Liveness: process is up and serving HTTP.
    return {"status": "ok"}


@router.get("/readyz")
async def readyz(
    session: AsyncSession = Depends(db_session),
    store: DocumentStore = Depends(document_store),
) -> dict[str, str]:
    # Readiness: the DB answers and the upload directory exists.
    await session.execute(text("SELECT 1"))
    return {"status": "ready", "upload_dir": "ok" if store.root.is_dir() else "missing"}


# --- Module Notes -----------------------------------------------------------
# The upload directory is created in the app lifespan, so "missing" means it was
# removed underneath a running process.
