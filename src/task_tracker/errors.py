"""
task_tracker.errors

Domain error taxonomy.

Responsibilities:
- Define the exceptions raised by services, the access guard and the upload policy.
- Stay free of HTTP concerns; `api.errors` maps each type to a status code.
"""

from __future__ import annotations


class TaskTrackerError(Exception):
    """Base class for expected, client-facing failures."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class AuthenticationFailed(TaskTrackerError):
    # Bad credentials or an invalid/expired token. The message is deliberately uniform.
    pass


class PermissionDenied(TaskTrackerError):
    pass


class InvalidInput(TaskTrackerError):
    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class NotFound(TaskTrackerError):
    pass


class Conflict(TaskTrackerError):
    pass


# --- Module Notes -----------------------------------------------------------
# Unexpected errors (DB outages, I/O failures) are NOT wrapped in these types; they
# propagate to the generic 500 handler so nothing internal leaks into responses.
