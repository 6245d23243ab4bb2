"""
task_tracker.api.routers.users

Administrative user endpoints (ADMIN only).

Responsibilities:
- List registered users.
- Change a user's role (`?role=ADMIN|USER`, case-insensitive).
- List the tasks assigned to a given user.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from task_tracker.api.deps import db_session
from task_tracker.api.routers.tasks import TaskResponse, to_response
from task_tracker.auth.deps import require_admin
from task_tracker.auth.models import Principal
from task_tracker.services.user_service import UserService

router = APIRouter(prefix="/api/users", tags=["users"])


class UserResponse(BaseModel):
    id: int
    email: str
    name: str | None
    role: str


class RoleUpdateResponse(BaseModel):
    message: str = "User role updated successfully"
    user_id: int
    new_role: str


@router.get("", response_model=list[UserResponse])
async def list_users(
    principal: Principal = Depends(require_admin),
    session: AsyncSession = Depends(db_session),
) -> list[UserResponse]:
    users = await UserService(session=session).list_users(principal)
    return [UserResponse(id=u.id, email=u.email, name=u.name, role=u.role.value) for u in users]


@router.put("/{user_id}/role", response_model=RoleUpdateResponse)
async def update_user_role(
    user_id: int,
    role: str = Query(min_length=1, max_length=16),
    principal: Principal = Depends(require_admin),
    session: AsyncSession = Depends(db_session),
) -> RoleUpdateResponse:
    user = await UserService(session=session).update_role(principal, user_id, role)
    return RoleUpdateResponse(user_id=user.id, new_role=user.role.value)


@router.get("/{user_id}/tasks", response_model=list[TaskResponse])
async def list_user_tasks(
    user_id: int,
    principal: Principal = Depends(require_admin),
    session: AsyncSession = Depends(db_session),
) -> list[TaskResponse]:
    tasks = await UserService(session=session).list_tasks_for(principal, user_id)
    return [to_response(t) for t in tasks]


# --- Module Notes -----------------------------------------------------------
# `require_admin` rejects early; the services re-check through the guard so they
# stay safe when called outside HTTP.
