"""
task_tracker.api.app

FastAPI app factory for the Task Tracker service.

Responsibilities:
- Build the FastAPI application and register routers/middleware/error handlers.
- Initialize and dispose shared infrastructure (DB engine/session factory,
  document store) and run the admin bootstrap.
- Provide a single composition root where cross-cutting concerns live.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from task_tracker import __version__
from task_tracker.api.errors import register_error_handlers
from task_tracker.api.routers.auth import router as auth_router
from task_tracker.api.routers.health import router as health_router
from task_tracker.api.routers.tasks import router as tasks_router
from task_tracker.api.routers.users import router as users_router
from task_tracker.db.init_db import init_db
from task_tracker.db.session import create_engine, create_sessionmaker
from task_tracker.observability.logging import configure_logging, get_logger
from task_tracker.observability.middleware import RequestContextMiddleware
from task_tracker.services.auth_service import bootstrap_admin
from task_tracker.settings import Settings
from task_tracker.storage.documents import DocumentStore

log = get_logger(__name__)


def create_app(*, settings: Settings) -> FastAPI:
    # Configure structured logging once at process startup (before app serves requests).
    configure_logging(
        service_name=settings.service_name, level=settings.log_level, json=settings.log_json
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env)
        engine = create_engine(settings)
        app.state.engine = engine
        app.state.sessionmaker = create_sessionmaker(engine)

        store = DocumentStore(settings.upload_dir)
        store.root.mkdir(parents=True, exist_ok=True)
        app.state.document_store = store

        if settings.env in ("dev", "test"):
            # Dev/test convenience: create tables automatically. Prod should use Alembic migrations.
            await init_db(engine)

        await bootstrap_admin(app.state.sessionmaker, settings)

        try:
            yield
        finally:
            # Dispose the engine to close pools/FDs gracefully.
            await engine.dispose()
            log.info("shutdown")

    app = FastAPI(
        title="Task Tracker",
        version=__version__,
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(RequestContextMiddleware)
    register_error_handlers(app)

    app.include_router(health_router, tags=["health"])
    app.include_router(auth_router)
    app.include_router(tasks_router)
    app.include_router(users_router)

    return app


# --- Module Notes -----------------------------------------------------------
# This file is intentionally small: app composition stays here; business logic stays
# in services, authorization rules in `auth.guard`.
