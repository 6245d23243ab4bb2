"""
task_tracker.db.repositories.users

Repository for `User` entities (the credential store).

Responsibilities:
- Look users up by id or email.
- Create users and change roles.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from task_tracker.db.models import Role, User


class UserRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self,
        *,
        email: str,
        password_hash: str,
        role: Role = Role.user,
        name: str | None = None,
    ) -> User:
        user = User(email=email, password_hash=password_hash, role=role, name=name)
        self._session.add(user)
        await self._session.flush()
        return user

    async def get(self, user_id: int) -> User | None:
        return await self._session.get(User, user_id)

    async def get_by_email(self, email: str) -> User | None:
        stmt = select(User).where(User.email == email)
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def list_all(self) -> list[User]:
        stmt = select(User).order_by(User.id)
        return list((await self._session.execute(stmt)).scalars().all())

    async def set_role(self, user: User, role: Role) -> User:
        user.role = role
        await self._session.flush()
        return user
