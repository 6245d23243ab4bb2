"""
task_tracker.db.models

Persistence schema for the task tracker.

Responsibilities:
- Define ORM models:
  - User: credential store entry (email, password hash, role)
  - Task: a unit of work bound to an assignee, with up to three attached documents
- Define the enums shared by the API, the access guard and the services.
"""

from __future__ import annotations

import enum
from datetime import date, datetime

from sqlalchemy import JSON, Enum, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from task_tracker.db.base import Base


def _utcnow() -> datetime:
    # Naive UTC timestamps; SQLite has no native tz-aware type.
    return datetime.utcnow()


class Role(enum.StrEnum):
    # Member names are stored in the DB, values are embedded in tokens; both are stable.
    user = "USER"
    admin = "ADMIN"


class TaskStatus(enum.StrEnum):
    todo = "TODO"
    in_progress = "IN_PROGRESS"
    done = "DONE"


class TaskPriority(enum.StrEnum):
    low = "LOW"
    medium = "MEDIUM"
    high = "HIGH"


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(254), nullable=False, unique=True, index=True)
    name: Mapped[str | None] = mapped_column(String(120), nullable=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[Role] = mapped_column(Enum(Role), nullable=False, default=Role.user)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)

    tasks: Mapped[list[Task]] = relationship(back_populates="assignee")


class Task(Base):
    __tablename__ = "tasks"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(120), nullable=False)
    description: Mapped[str | None] = mapped_column(String(1000), nullable=True)

    status: Mapped[TaskStatus] = mapped_column(Enum(TaskStatus), nullable=False, index=True)
    priority: Mapped[TaskPriority] = mapped_column(Enum(TaskPriority), nullable=False, index=True)
    due_date: Mapped[date | None] = mapped_column(nullable=True)

    assignee_id: Mapped[int | None] = mapped_column(
        ForeignKey("users.id"), nullable=True, index=True
    )
    # Stored filenames in upload order. Always reassign a new list: in-place
    # mutation of a JSON column is not tracked by the ORM.
    documents: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow, onupdate=_utcnow)

    assignee: Mapped[User | None] = relationship(back_populates="tasks")

    __table_args__ = (Index("ix_tasks_assignee_status", "assignee_id", "status"),)


# --- Module Notes -----------------------------------------------------------
# Integer autoincrement ids appear in public paths (`/api/tasks/{id}`,
# `/api/users/{id}/role`); the documents column is reassigned, never mutated in place.
