"""
task_tracker.services.user_service

Administrative user management.

Responsibilities:
- List users and the tasks assigned to a user (ADMIN only).
- Change roles, with strict role-string parsing and the self-demotion guard.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from task_tracker.auth.guard import Permission, Resource, authorize
from task_tracker.auth.models import Principal
from task_tracker.db.models import Role, Task, User
from task_tracker.db.repositories.tasks import TaskRepo
from task_tracker.db.repositories.users import UserRepo
from task_tracker.errors import InvalidInput, NotFound
from task_tracker.observability.logging import get_logger

log = get_logger(__name__)


def parse_role(value: str) -> Role:
    """Case-insensitive `ADMIN`/`USER`; anything else is rejected, never defaulted."""

    try:
        return Role(value.strip().upper())
    except ValueError as e:
        allowed = ", ".join(r.value for r in reversed(Role))
        raise InvalidInput(f"Invalid role. Allowed values: {allowed}", field="role") from e


class UserService:
    def __init__(self, *, session: AsyncSession) -> None:
        self._session = session
        self._users = UserRepo(session)
        self._tasks = TaskRepo(session)

    async def list_users(self, principal: Principal) -> list[User]:
        authorize(principal, Permission.user_list)
        return await self._users.list_all()

    async def list_tasks_for(self, principal: Principal, user_id: int) -> list[Task]:
        authorize(principal, Permission.user_list)
        if await self._users.get(user_id) is None:
            raise NotFound("Target user not found")
        return await self._tasks.list_for_assignee(user_id)

    async def update_role(self, principal: Principal, user_id: int, role: str) -> User:
        # Order matters for error precedence: admin gate, target lookup, role parse,
        # then the self-demotion rule.
        authorize(principal, Permission.user_role_change)
        target = await self._users.get(user_id)
        if target is None:
            raise NotFound("Target user not found")
        new_role = parse_role(role)
        authorize(
            principal,
            Permission.user_role_change,
            Resource(target_user_id=target.id, new_role=new_role),
        )

        previous = target.role
        await self._users.set_role(target, new_role)
        await self._session.commit()
        log.info(
            "user.role_changed",
            user_id=target.id,
            previous=previous.value,
            role=new_role.value,
            by=principal.user_id,
        )
        return target

    async def make_admin(self, principal: Principal, user_id: int) -> User:
        return await self.update_role(principal, user_id, Role.admin.value)


# --- Module Notes -----------------------------------------------------------
# Role changes do not touch issued tokens; see `auth.jwt` for the staleness window.
