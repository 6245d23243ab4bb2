"""
task_tracker.services.upload_policy

Upload ceiling policy for task documents.

Responsibilities:
- Validate an incoming batch as a whole (count, suffix, emptiness, size).
- Decide which files fit under the per-task ceiling and which are dropped.
- Generate collision-resistant stored names.

Truncation rule:
- A task holds at most `MAX_DOCUMENTS_PER_TASK` documents across all uploads.
- With `remaining = MAX - len(existing)` slots free, the first `remaining` files
  of the batch (input order) are accepted and the rest are discarded WITHOUT an
  error. Only a task that is already full rejects the batch.
- Validation runs over every file before truncation: a bad file in the
  would-be-discarded tail still rejects the whole batch.
"""

from __future__ import annotations

import uuid
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import PurePosixPath

from task_tracker.errors import InvalidInput

MAX_DOCUMENTS_PER_TASK = 3
PDF_SUFFIX = ".pdf"
DEFAULT_FILENAME = "file.pdf"


@dataclass(frozen=True, slots=True)
class DocumentUpload:
    filename: str
    content: bytes = field(repr=False)


@dataclass(frozen=True, slots=True)
class UploadPlan:
    accepted: list[DocumentUpload]
    discarded: list[DocumentUpload]


def plan_upload(
    existing: Sequence[str],
    batch: Sequence[DocumentUpload],
    *,
    max_bytes: int | None = None,
) -> UploadPlan:
    if not batch:
        raise InvalidInput("At least one file must be uploaded", field="files")
    if len(batch) > MAX_DOCUMENTS_PER_TASK:
        raise InvalidInput(
            f"You can upload a maximum of {MAX_DOCUMENTS_PER_TASK} files only", field="files"
        )

    remaining = MAX_DOCUMENTS_PER_TASK - len(existing)
    if remaining <= 0:
        raise InvalidInput(
            f"This task already has {MAX_DOCUMENTS_PER_TASK} files attached", field="files"
        )

    for doc in batch:
        if not doc.filename.lower().endswith(PDF_SUFFIX):
            raise InvalidInput("Only PDF files are allowed", field="files")
        if not doc.content:
            raise InvalidInput("Empty file not allowed", field="files")
        if max_bytes is not None and len(doc.content) > max_bytes:
            raise InvalidInput(
                f"File exceeds the maximum size of {max_bytes} bytes", field="files"
            )

    return UploadPlan(accepted=list(batch[:remaining]), discarded=list(batch[remaining:]))


def stored_name(original: str, *, now: datetime | None = None) -> str:
    """
    `<epoch-millis>_<8 hex>_<basename>`; the basename strips any client-supplied
    directory components.
    """

    now = now or datetime.now(tz=UTC)
    base = PurePosixPath(original.replace("\\", "/")).name or DEFAULT_FILENAME
    return f"{int(now.timestamp() * 1000)}_{uuid.uuid4().hex[:8]}_{base}"


# --- Module Notes -----------------------------------------------------------
# Pure policy: no I/O. `TaskService.upload` applies the plan to the store and DB.
