"""
task_tracker.services.task_service

Task lifecycle service (transaction + persistence owner).

Responsibilities:
- Create, list, read, update and delete tasks with ownership enforced by the guard.
- Attach uploaded documents under the per-task ceiling, keeping file writes and
  the document-list update as one logical operation.
- Serve stored documents by name.
"""

from __future__ import annotations

from datetime import date, timedelta
from pathlib import Path

from sqlalchemy.ext.asyncio import AsyncSession

from task_tracker.auth.guard import Permission, Resource, authorize
from task_tracker.auth.models import Principal
from task_tracker.db.models import Task, TaskPriority, TaskStatus
from task_tracker.db.repositories.tasks import TaskPage, TaskRepo
from task_tracker.db.repositories.users import UserRepo
from task_tracker.errors import NotFound
from task_tracker.observability.logging import get_logger
from task_tracker.services.upload_policy import DocumentUpload, plan_upload, stored_name
from task_tracker.settings import Settings
from task_tracker.storage.documents import DocumentStore

log = get_logger(__name__)

DEFAULT_TITLE = "Untitled Task"


def _clean_title(title: str | None) -> str | None:
    if title is None or not title.strip():
        return None
    return title.strip()


class TaskService:
    def __init__(
        self,
        *,
        session: AsyncSession,
        settings: Settings,
        store: DocumentStore,
    ) -> None:
        self._session = session
        self._settings = settings
        self._store = store

        self._tasks = TaskRepo(session)
        self._users = UserRepo(session)

    async def list_tasks(
        self,
        principal: Principal,
        *,
        status: TaskStatus | None = None,
        priority: TaskPriority | None = None,
        page: int = 0,
        size: int = 20,
    ) -> TaskPage:
        # Admins see every task; everyone else is scoped to their own assignments.
        assignee_id = None if principal.is_admin else principal.user_id
        return await self._tasks.list_page(
            assignee_id=assignee_id, status=status, priority=priority, page=page, size=size
        )

    async def create(
        self,
        principal: Principal,
        *,
        title: str | None = None,
        description: str | None = None,
        status: TaskStatus | None = None,
        priority: TaskPriority | None = None,
        due_date: date | None = None,
    ) -> Task:
        task = await self._tasks.create(
            title=_clean_title(title) or DEFAULT_TITLE,
            description=description,
            status=status or TaskStatus.todo,
            priority=priority or TaskPriority.medium,
            due_date=due_date or date.today() + timedelta(days=1),
            assignee_id=principal.user_id,
        )
        await self._session.commit()
        log.info("task.created", task_id=task.id, assignee_id=task.assignee_id)
        return task

    async def get(
        self,
        principal: Principal,
        task_id: int,
        permission: Permission = Permission.task_read,
    ) -> Task:
        task = await self._tasks.get(task_id)
        if task is None:
            raise NotFound("Task not found")
        authorize(principal, permission, Resource(owner_id=task.assignee_id))
        return task

    async def update(
        self,
        principal: Principal,
        task_id: int,
        *,
        title: str | None = None,
        description: str | None = None,
        status: TaskStatus | None = None,
        priority: TaskPriority | None = None,
        due_date: date | None = None,
        assignee_id: int | None = None,
    ) -> Task:
        # Partial update: `None` leaves a field unchanged; a blank title is ignored.
        task = await self.get(principal, task_id, Permission.task_update)

        if (clean := _clean_title(title)) is not None:
            task.title = clean
        if description is not None:
            task.description = description
        if status is not None:
            task.status = status
        if priority is not None:
            task.priority = priority
        if due_date is not None:
            task.due_date = due_date
        if assignee_id is not None:
            if await self._users.get(assignee_id) is None:
                raise NotFound("Assigned user not found")
            task.assignee_id = assignee_id

        if not task.title or not task.title.strip():
            task.title = DEFAULT_TITLE

        await self._session.commit()
        log.info("task.updated", task_id=task.id)
        return task

    async def delete(self, principal: Principal, task_id: int) -> None:
        task = await self.get(principal, task_id, Permission.task_delete)
        await self._tasks.delete(task)
        await self._session.commit()
        log.info("task.deleted", task_id=task_id)

    async def upload(
        self, principal: Principal, task_id: int, batch: list[DocumentUpload]
    ) -> Task:
        task = await self.get(principal, task_id, Permission.task_upload)
        existing = list(task.documents or [])
        plan = plan_upload(existing, batch, max_bytes=self._settings.max_document_bytes)

        written: list[str] = []
        try:
            for doc in plan.accepted:
                name = stored_name(doc.filename)
                self._store.write(name, doc.content)
                written.append(name)
            await self._tasks.set_documents(task, existing + written)
            await self._session.commit()
        except Exception:
            # No orphaned files or half-applied lists: undo both sides, then propagate.
            for name in written:
                self._store.delete(name)
            await self._session.rollback()
            raise

        log.info(
            "task.documents_attached",
            task_id=task.id,
            accepted=len(written),
            discarded=len(plan.discarded),
        )
        return task

    def document_path(self, name: str) -> Path:
        path = self._store.path_for(name)
        if path is None:
            raise NotFound("File not found")
        return path


# --- Module Notes -----------------------------------------------------------
# Concurrent uploads to the same task are not serialized: two requests can both
# read the same `existing` list and the later commit wins. Known limitation.
