"""
tests.conftest

Shared fixtures: an isolated app per test (SQLite file + upload dir under tmp_path)
driven in-process through httpx's ASGI transport.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable
from pathlib import Path

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI

from task_tracker.api.app import create_app
from task_tracker.settings import Settings

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "admin-password"
DEFAULT_PASSWORD = "password123"


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        env="test",
        log_level="WARNING",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'tasks.db'}",
        upload_dir=str(tmp_path / "uploads"),
        jwt_secret="test-secret-0123456789abcdef0123456789",
        bootstrap_admin_email=ADMIN_EMAIL,
        bootstrap_admin_password=ADMIN_PASSWORD,
        max_document_bytes=1024,
    )


@pytest.fixture
def upload_dir(settings: Settings) -> Path:
    return Path(settings.upload_dir)


@pytest.fixture
def app(settings: Settings) -> FastAPI:
    return create_app(settings=settings)


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncIterator[httpx.AsyncClient]:
    # httpx's ASGITransport does not run lifespan events; drive them explicitly.
    async with app.router.lifespan_context(app):
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
            yield c


@pytest_asyncio.fixture
async def lenient_client(
    app: FastAPI, client: httpx.AsyncClient
) -> AsyncIterator[httpx.AsyncClient]:
    # Same running app as `client`, but unhandled errors come back as 500 responses.
    transport = httpx.ASGITransport(app=app, raise_app_exceptions=False)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest_asyncio.fixture
async def admin_token(client: httpx.AsyncClient) -> str:
    r = await client.post(
        "/api/auth/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD}
    )
    assert r.status_code == 200, r.text
    return r.json()["token"]


@pytest.fixture
def register(client: httpx.AsyncClient) -> Callable[..., Awaitable[str]]:
    async def _register(email: str, password: str = DEFAULT_PASSWORD) -> str:
        r = await client.post("/api/auth/register", json={"email": email, "password": password})
        assert r.status_code == 200, r.text
        return r.json()["token"]

    return _register
