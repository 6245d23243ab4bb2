"""
task_tracker.db.repositories.tasks

Repository for `Task` entities (the task store).

Responsibilities:
- CRUD by id.
- Filtered, paginated listing (optionally scoped to one assignee).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from task_tracker.db.models import Task, TaskPriority, TaskStatus


@dataclass(frozen=True, slots=True)
class TaskPage:
    items: list[Task]
    total: int
    page: int
    size: int


class TaskRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self,
        *,
        title: str,
        description: str | None,
        status: TaskStatus,
        priority: TaskPriority,
        due_date: date | None,
        assignee_id: int | None,
    ) -> Task:
        task = Task(
            title=title,
            description=description,
            status=status,
            priority=priority,
            due_date=due_date,
            assignee_id=assignee_id,
            documents=[],
        )
        self._session.add(task)
        await self._session.flush()
        return task

    async def get(self, task_id: int) -> Task | None:
        return await self._session.get(Task, task_id)

    async def list_page(
        self,
        *,
        assignee_id: int | None = None,
        status: TaskStatus | None = None,
        priority: TaskPriority | None = None,
        page: int = 0,
        size: int = 20,
    ) -> TaskPage:
        # `assignee_id=None` means "all tasks" (admin view), not "unassigned tasks".
        conditions = []
        if assignee_id is not None:
            conditions.append(Task.assignee_id == assignee_id)
        if status is not None:
            conditions.append(Task.status == status)
        if priority is not None:
            conditions.append(Task.priority == priority)

        count_stmt = select(func.count()).select_from(Task).where(*conditions)
        total = (await self._session.execute(count_stmt)).scalar_one()

        stmt = (
            select(Task)
            .where(*conditions)
            .order_by(Task.id)
            .offset(page * size)
            .limit(size)
        )
        items = list((await self._session.execute(stmt)).scalars().all())
        return TaskPage(items=items, total=total, page=page, size=size)

    async def list_for_assignee(self, assignee_id: int) -> list[Task]:
        stmt = select(Task).where(Task.assignee_id == assignee_id).order_by(Task.id)
        return list((await self._session.execute(stmt)).scalars().all())

    async def set_documents(self, task: Task, documents: list[str]) -> Task:
        task.documents = list(documents)
        await self._session.flush()
        return task

    async def delete(self, task: Task) -> None:
        await self._session.delete(task)
        await self._session.flush()


# --- Module Notes -----------------------------------------------------------
# Ownership is NOT checked here; callers run the access guard first.
