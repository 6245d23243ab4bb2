"""
task_tracker.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for all layers.
- Hide secrets from repr/logging (JWT secret, bootstrap admin password).
- Offer a cached settings instance for the process entrypoint.
"""

from __future__ import annotations

from datetime import timedelta
from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    All knobs are read from `TASKS_*` environment variables.
    Defaults are safe for local development only.
    """

    model_config = SettingsConfigDict(env_prefix="TASKS_", case_sensitive=False)

    # dev/test auto-create tables on startup; prod expects Alembic migrations.
    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "task-tracker"
    log_level: str = "INFO"
    log_json: bool = True

    api_host: str = "0.0.0.0"
    api_port: int = 8080

    # Auth
    jwt_alg: str = "HS256"
    jwt_issuer: str = "task-tracker"
    jwt_audience: str = "task-tracker-api"
    jwt_secret: str = Field(default="dev-secret-change-me-at-least-32-bytes", repr=False)
    jwt_ttl_minutes: int = Field(default=60, ge=1)

    # Seeded on startup when both are set; registration never grants ADMIN.
    bootstrap_admin_email: str | None = None
    bootstrap_admin_password: str | None = Field(default=None, repr=False)

    # Persistence
    database_url: str = "sqlite+aiosqlite:///./tasks.db"

    # Document content store
    upload_dir: str = "./uploads"
    max_document_bytes: int = Field(default=10 * 1024 * 1024, ge=1)

    @property
    def jwt_ttl(self) -> timedelta:
        return timedelta(minutes=self.jwt_ttl_minutes)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars; the running app reads its copy from app.state.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# Request handlers never call `get_settings()` directly; they receive the instance
# passed to `create_app` (see `api.deps.settings_dep`), which keeps tests hermetic.
