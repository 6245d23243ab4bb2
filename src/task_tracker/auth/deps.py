"""
task_tracker.auth.deps

FastAPI dependency functions for authentication and authorization.

Responsibilities:
- Convert a bearer token into a typed `Principal`.
- Provide an ADMIN-only gate for user-management routes.
"""

from __future__ import annotations

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from task_tracker.api.deps import db_session, settings_dep
from task_tracker.auth.guard import Permission, authorize
from task_tracker.auth.jwt import JwtConfig, verify_token
from task_tracker.auth.models import Principal
from task_tracker.db.repositories.users import UserRepo
from task_tracker.errors import AuthenticationFailed
from task_tracker.settings import Settings

_bearer = HTTPBearer(auto_error=False)

INVALID_TOKEN = "Invalid or expired token"


async def get_principal(
    creds: HTTPAuthorizationCredentials | None = Depends(_bearer),
    settings: Settings = Depends(settings_dep),
    session: AsyncSession = Depends(db_session),
) -> Principal:
    # Authn: require a bearer token.
    if creds is None or not creds.credentials:
        raise AuthenticationFailed("Missing bearer token")

    # Authn: signature, expiry and claim shape. Every failure looks the same to the caller.
    claims = verify_token(cfg=JwtConfig.from_settings(settings), token=creds.credentials)
    if claims is None:
        raise AuthenticationFailed(INVALID_TOKEN)

    # The identity must still exist; the role is taken from the token as issued.
    user = await UserRepo(session).get_by_email(claims.subject)
    if user is None:
        raise AuthenticationFailed(INVALID_TOKEN)

    return Principal(user_id=user.id, subject=claims.subject, role=claims.role)


def require_admin(principal: Principal = Depends(get_principal)) -> Principal:
    authorize(principal, Permission.user_list)
    return principal


# --- Module Notes -----------------------------------------------------------
# Task ownership is not checked here: it needs the task row, so the service layer
# calls the guard after loading it.
