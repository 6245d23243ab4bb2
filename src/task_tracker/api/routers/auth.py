"""
task_tracker.api.routers.auth

Public authentication endpoints plus the admin promotion shortcut.

Responsibilities:
- Register users (always role USER) and return a bearer token.
- Log users in and return a bearer token with their current role.
- Promote a user to ADMIN (`/make-admin/{user_id}`, ADMIN only).
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from task_tracker.api.deps import db_session, settings_dep
from task_tracker.auth.deps import get_principal
from task_tracker.auth.models import Principal
from task_tracker.services.auth_service import AuthService
from task_tracker.services.user_service import UserService
from task_tracker.settings import Settings

router = APIRouter(prefix="/api/auth", tags=["auth"])

_EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class RegisterRequest(BaseModel):
    email: str = Field(min_length=3, max_length=254, pattern=_EMAIL_PATTERN)
    password: str = Field(min_length=6, max_length=128)
    name: str | None = Field(default=None, max_length=120)


class RegisterResponse(BaseModel):
    message: str = "User registered successfully"
    role: str
    token: str
    token_type: str = "bearer"


class LoginRequest(BaseModel):
    email: str = Field(min_length=1, max_length=254)
    password: str = Field(min_length=1, max_length=128)


class LoginResponse(BaseModel):
    token: str
    token_type: str = "bearer"
    email: str
    role: str


class MessageResponse(BaseModel):
    message: str


@router.post("/register", response_model=RegisterResponse)
async def register(
    body: RegisterRequest,
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> RegisterResponse:
    user, token = await AuthService(session=session, settings=settings).register(
        email=body.email, password=body.password, name=body.name
    )
    return RegisterResponse(role=user.role.value, token=token)


@router.post("/login", response_model=LoginResponse)
async def login(
    body: LoginRequest,
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> LoginResponse:
    user, token = await AuthService(session=session, settings=settings).login(
        email=body.email, password=body.password
    )
    return LoginResponse(token=token, email=user.email, role=user.role.value)


@router.put("/make-admin/{user_id}", response_model=MessageResponse)
async def make_admin(
    user_id: int,
    principal: Principal = Depends(get_principal),
    session: AsyncSession = Depends(db_session),
) -> MessageResponse:
    user = await UserService(session=session).make_admin(principal, user_id)
    return MessageResponse(message=f"{user.email} is now an ADMIN")


# --- Module Notes -----------------------------------------------------------
# Register/login are the only unauthenticated task-tracker routes.
