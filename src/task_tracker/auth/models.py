"""
task_tracker.auth.models

Auth domain models.

Responsibilities:
- Define the authenticated identity type (`Principal`) injected into endpoints.
"""

from __future__ import annotations

from dataclasses import dataclass

from task_tracker.db.models import Role


@dataclass(frozen=True, slots=True)
class Principal:
    """
    Authenticated caller identity.

    `role` comes from the verified token, not from the database; `user_id` is the
    credential store id for `subject`, used for ownership checks.
    """

    user_id: int
    subject: str
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role is Role.admin


# --- Module Notes -----------------------------------------------------------
# Keep this model minimal; it is used across API, services, and the access guard.
