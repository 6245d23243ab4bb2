"""
task_tracker.api.routers.tasks

Task endpoints (authenticated).

Responsibilities:
- CRUD over tasks, paginated and filterable listing.
- Multipart PDF upload (field `files`) and document download.
"""

from __future__ import annotations

import math
from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, File, Query, Response, UploadFile
from fastapi.responses import FileResponse
from pydantic import AfterValidator, BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_204_NO_CONTENT

from task_tracker.api.deps import db_session, document_store, settings_dep
from task_tracker.auth.deps import get_principal
from task_tracker.auth.models import Principal
from task_tracker.db.models import Task, TaskPriority, TaskStatus
from task_tracker.services.task_service import TaskService
from task_tracker.services.upload_policy import DEFAULT_FILENAME, DocumentUpload
from task_tracker.settings import Settings
from task_tracker.storage.documents import DocumentStore

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


def _not_in_past(value: date | None) -> date | None:
    if value is not None and value < date.today():
        raise ValueError("Due date cannot be in the past")
    return value


DueDate = Annotated[date | None, AfterValidator(_not_in_past)]


class TaskCreateRequest(BaseModel):
    title: str | None = Field(default=None, max_length=120)
    description: str | None = Field(default=None, max_length=1000)
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    due_date: DueDate = None


class TaskUpdateRequest(TaskCreateRequest):
    assignee_id: int | None = Field(default=None, ge=1)


class TaskResponse(BaseModel):
    id: int
    title: str
    description: str | None
    status: TaskStatus
    priority: TaskPriority
    due_date: date | None
    assignee_id: int | None
    documents: list[str]


class TaskPageResponse(BaseModel):
    items: list[TaskResponse]
    total: int
    page: int
    size: int
    total_pages: int


def to_response(task: Task) -> TaskResponse:
    return TaskResponse(
        id=task.id,
        title=task.title,
        description=task.description,
        status=task.status,
        priority=task.priority,
        due_date=task.due_date,
        assignee_id=task.assignee_id,
        documents=list(task.documents or []),
    )


def _service(
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
    store: DocumentStore = Depends(document_store),
) -> TaskService:
    return TaskService(session=session, settings=settings, store=store)


@router.get("", response_model=TaskPageResponse)
async def list_tasks(
    status: TaskStatus | None = None,
    priority: TaskPriority | None = None,
    page: int = Query(default=0, ge=0),
    size: int = Query(default=20, ge=1, le=100),
    principal: Principal = Depends(get_principal),
    svc: TaskService = Depends(_service),
) -> TaskPageResponse:
    result = await svc.list_tasks(
        principal, status=status, priority=priority, page=page, size=size
    )
    return TaskPageResponse(
        items=[to_response(t) for t in result.items],
        total=result.total,
        page=result.page,
        size=result.size,
        total_pages=math.ceil(result.total / result.size),
    )


@router.post("", response_model=TaskResponse)
async def create_task(
    body: TaskCreateRequest,
    principal: Principal = Depends(get_principal),
    svc: TaskService = Depends(_service),
) -> TaskResponse:
    task = await svc.create(principal, **body.model_dump())
    return to_response(task)


@router.get("/file/{file_name}")
async def get_file(
    file_name: str,
    _: Principal = Depends(get_principal),
    svc: TaskService = Depends(_service),
) -> FileResponse:
    # FileResponse quotes the name and switches to RFC 5987 `filename*` for non-ASCII.
    return FileResponse(
        svc.document_path(file_name),
        media_type="application/pdf",
        filename=file_name,
        content_disposition_type="inline",
    )


@router.get("/{task_id}", response_model=TaskResponse)
async def get_task(
    task_id: int,
    principal: Principal = Depends(get_principal),
    svc: TaskService = Depends(_service),
) -> TaskResponse:
    return to_response(await svc.get(principal, task_id))


@router.put("/{task_id}", response_model=TaskResponse)
async def update_task(
    task_id: int,
    body: TaskUpdateRequest,
    principal: Principal = Depends(get_principal),
    svc: TaskService = Depends(_service),
) -> TaskResponse:
    task = await svc.update(principal, task_id, **body.model_dump())
    return to_response(task)


@router.delete("/{task_id}", status_code=HTTP_204_NO_CONTENT)
async def delete_task(
    task_id: int,
    principal: Principal = Depends(get_principal),
    svc: TaskService = Depends(_service),
) -> Response:
    await svc.delete(principal, task_id)
    return Response(status_code=HTTP_204_NO_CONTENT)


@router.post("/{task_id}/upload", response_model=TaskResponse)
async def upload_files(
    task_id: int,
    files: list[UploadFile] = File(...),
    principal: Principal = Depends(get_principal),
    settings: Settings = Depends(settings_dep),
    svc: TaskService = Depends(_service),
) -> TaskResponse:
    # Read one byte past the cap so oversized parts are detected without buffering them fully.
    batch = [
        DocumentUpload(
            filename=f.filename or DEFAULT_FILENAME,
            content=await f.read(settings.max_document_bytes + 1),
        )
        for f in files
    ]
    task = await svc.upload(principal, task_id, batch)
    return to_response(task)


# --- Module Notes -----------------------------------------------------------
# Every handler delegates to TaskService; 403/404 decisions are made there.
