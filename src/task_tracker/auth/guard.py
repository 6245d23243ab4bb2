"""
task_tracker.auth.guard

Access guard: the single place where ALLOW/DENY is decided.

Responsibilities:
- Evaluate (caller, permission, resource) against role + ownership rules.
- Raise `PermissionDenied` for DENY so callers cannot forget to check.

Rules:
- ADMIN may perform every task and user operation.
- USER may touch a task only when it is the task's assignee.
- User management (listing, role changes) is ADMIN-only.
- Nobody can demote themselves to USER through the role-change path.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

from task_tracker.auth.models import Principal
from task_tracker.db.models import Role
from task_tracker.errors import PermissionDenied


class Permission(enum.StrEnum):
    task_read = "TASK_READ"
    task_update = "TASK_UPDATE"
    task_delete = "TASK_DELETE"
    task_upload = "TASK_UPLOAD"
    user_list = "USER_LIST"
    user_role_change = "USER_ROLE_CHANGE"


_TASK_PERMISSIONS = frozenset(
    {
        Permission.task_read,
        Permission.task_update,
        Permission.task_delete,
        Permission.task_upload,
    }
)


@dataclass(frozen=True, slots=True)
class Resource:
    """
    What the caller wants to act on. Only the fields relevant to the permission
    need to be set.
    """

    owner_id: int | None = None
    target_user_id: int | None = None
    new_role: Role | None = None


@dataclass(frozen=True, slots=True)
class Decision:
    allowed: bool
    reason: str = ""


ALLOW = Decision(allowed=True)


def _deny(reason: str) -> Decision:
    return Decision(allowed=False, reason=reason)


def decide(
    principal: Principal, permission: Permission, resource: Resource = Resource()
) -> Decision:
    if permission is Permission.user_role_change:
        if not principal.is_admin:
            return _deny("Access denied: Admins only")
        # Self-demotion check only applies once target and role are known.
        if resource.target_user_id == principal.user_id and resource.new_role is Role.user:
            return _deny("Admins cannot demote themselves")
        return ALLOW

    if principal.is_admin:
        return ALLOW

    if permission in _TASK_PERMISSIONS:
        # Unassigned tasks (owner_id None) are admin-only.
        if resource.owner_id is not None and resource.owner_id == principal.user_id:
            return ALLOW
        return _deny("Access denied")

    return _deny("Access denied: Admins only")


def authorize(
    principal: Principal, permission: Permission, resource: Resource = Resource()
) -> None:
    decision = decide(principal, permission, resource)
    if not decision.allowed:
        raise PermissionDenied(decision.reason)


# --- Module Notes -----------------------------------------------------------
# The guard is pure (no DB, no HTTP) so its rules can be tested exhaustively.
# Services load the resource first (404 if missing), then call `authorize` (403).
