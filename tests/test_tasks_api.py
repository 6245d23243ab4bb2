from __future__ import annotations

from datetime import date, timedelta
from pathlib import Path
from urllib.parse import quote

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from task_tracker.storage.documents import DocumentStore


def _auth(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def _pdfs(*names: str) -> list[tuple[str, tuple[str, bytes, str]]]:
    return [("files", (n, b"%PDF-1.4 " + n.encode(), "application/pdf")) for n in names]


async def _create(client: httpx.AsyncClient, token: str, **body) -> dict:
    r = await client.post("/api/tasks", json=body, headers=_auth(token))
    assert r.status_code == 200, r.text
    return r.json()


@pytest.mark.asyncio
async def test_create_fills_in_defaults(client: httpx.AsyncClient, register) -> None:
    token = await register("alice@example.com")

    task = await _create(client, token, title="   ")

    assert task["title"] == "Untitled Task"
    assert task["status"] == "TODO"
    assert task["priority"] == "MEDIUM"
    assert task["due_date"] == (date.today() + timedelta(days=1)).isoformat()
    assert task["assignee_id"] == 2
    assert task["documents"] == []


@pytest.mark.asyncio
async def test_create_rejects_due_date_in_the_past(client: httpx.AsyncClient, register) -> None:
    token = await register("alice@example.com")
    yesterday = (date.today() - timedelta(days=1)).isoformat()

    r = await client.post("/api/tasks", json={"due_date": yesterday}, headers=_auth(token))

    assert r.status_code == 400
    assert "due_date" in r.json()["fields"]


@pytest.mark.asyncio
async def test_listing_is_scoped_for_users_and_global_for_admins(
    client: httpx.AsyncClient, register, admin_token: str
) -> None:
    alice = await register("alice@example.com")
    bob = await register("bob@example.com")
    await _create(client, alice, title="a1")
    await _create(client, alice, title="a2")
    await _create(client, bob, title="b1")

    r_alice = await client.get("/api/tasks", headers=_auth(alice))
    r_admin = await client.get("/api/tasks", headers=_auth(admin_token))

    assert [t["title"] for t in r_alice.json()["items"]] == ["a1", "a2"]
    assert r_admin.json()["total"] == 3


@pytest.mark.asyncio
async def test_listing_filters_combine_and_paginate(client: httpx.AsyncClient, register) -> None:
    token = await register("alice@example.com")
    for i in range(5):
        await _create(client, token, title=f"t{i}", priority="HIGH" if i % 2 else "LOW")
    await _create(client, token, title="done", priority="HIGH", status="DONE")

    r = await client.get(
        "/api/tasks", params={"priority": "HIGH", "status": "TODO"}, headers=_auth(token)
    )
    assert [t["title"] for t in r.json()["items"]] == ["t1", "t3"]

    r = await client.get("/api/tasks", params={"page": 1, "size": 4}, headers=_auth(token))
    body = r.json()
    assert (body["total"], body["page"], body["size"], body["total_pages"]) == (6, 1, 4, 2)
    assert [t["title"] for t in body["items"]] == ["t4", "done"]


@pytest.mark.asyncio
async def test_non_owner_gets_403_and_missing_task_gets_404(
    client: httpx.AsyncClient, register
) -> None:
    alice = await register("alice@example.com")
    bob = await register("bob@example.com")
    task = await _create(client, alice, title="private")

    for method in ("GET", "DELETE"):
        r = await client.request(method, f"/api/tasks/{task['id']}", headers=_auth(bob))
        assert r.status_code == 403
        assert r.json()["error"] == "Access denied"

    r = await client.put(f"/api/tasks/{task['id']}", json={"title": "x"}, headers=_auth(bob))
    assert r.status_code == 403

    r = await client.get("/api/tasks/999", headers=_auth(bob))
    assert r.status_code == 404
    assert r.json()["error"] == "Task not found"


@pytest.mark.asyncio
async def test_admin_can_read_and_change_any_task(
    client: httpx.AsyncClient, register, admin_token: str
) -> None:
    alice = await register("alice@example.com")
    task = await _create(client, alice, title="a1")

    r = await client.get(f"/api/tasks/{task['id']}", headers=_auth(admin_token))
    assert r.status_code == 200

    r = await client.put(
        f"/api/tasks/{task['id']}", json={"status": "DONE"}, headers=_auth(admin_token)
    )
    assert r.status_code == 200
    assert r.json()["status"] == "DONE"


@pytest.mark.asyncio
async def test_update_is_partial(client: httpx.AsyncClient, register) -> None:
    token = await register("alice@example.com")
    task = await _create(client, token, title="keep", description="d", priority="HIGH")

    r = await client.put(
        f"/api/tasks/{task['id']}",
        json={"title": "  ", "status": "IN_PROGRESS"},
        headers=_auth(token),
    )

    assert r.status_code == 200
    body = r.json()
    assert body["title"] == "keep"
    assert body["description"] == "d"
    assert body["priority"] == "HIGH"
    assert body["status"] == "IN_PROGRESS"


@pytest.mark.asyncio
async def test_reassigning_moves_ownership(client: httpx.AsyncClient, register) -> None:
    alice = await register("alice@example.com")
    bob = await register("bob@example.com")
    task = await _create(client, alice, title="handoff")

    r = await client.put(
        f"/api/tasks/{task['id']}", json={"assignee_id": 3}, headers=_auth(alice)
    )
    assert r.status_code == 200
    assert r.json()["assignee_id"] == 3

    assert (await client.get(f"/api/tasks/{task['id']}", headers=_auth(alice))).status_code == 403
    assert (await client.get(f"/api/tasks/{task['id']}", headers=_auth(bob))).status_code == 200


@pytest.mark.asyncio
async def test_reassigning_to_unknown_user_is_404(client: httpx.AsyncClient, register) -> None:
    token = await register("alice@example.com")
    task = await _create(client, token)

    r = await client.put(
        f"/api/tasks/{task['id']}", json={"assignee_id": 999}, headers=_auth(token)
    )

    assert r.status_code == 404
    assert r.json()["error"] == "Assigned user not found"


@pytest.mark.asyncio
async def test_delete_returns_204_then_task_is_gone(client: httpx.AsyncClient, register) -> None:
    token = await register("alice@example.com")
    task = await _create(client, token)

    r = await client.delete(f"/api/tasks/{task['id']}", headers=_auth(token))
    assert r.status_code == 204

    r = await client.get(f"/api/tasks/{task['id']}", headers=_auth(token))
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_upload_truncates_to_remaining_capacity(
    client: httpx.AsyncClient, register, upload_dir: Path
) -> None:
    token = await register("alice@example.com")
    task = await _create(client, token)
    url = f"/api/tasks/{task['id']}/upload"

    r = await client.post(url, files=_pdfs("a.pdf", "b.pdf"), headers=_auth(token))
    assert r.status_code == 200
    first_two = r.json()["documents"]
    assert len(first_two) == 2

    r = await client.post(url, files=_pdfs("c.pdf", "d.pdf", "e.pdf"), headers=_auth(token))

    assert r.status_code == 200
    documents = r.json()["documents"]
    assert len(documents) == 3
    assert documents[:2] == first_two
    assert documents[2].endswith("_c.pdf")
    assert sorted(p.name for p in upload_dir.iterdir()) == sorted(documents)


@pytest.mark.asyncio
async def test_upload_to_full_task_changes_nothing(
    client: httpx.AsyncClient, register, upload_dir: Path
) -> None:
    token = await register("alice@example.com")
    task = await _create(client, token)
    url = f"/api/tasks/{task['id']}/upload"
    await client.post(url, files=_pdfs("a.pdf", "b.pdf", "c.pdf"), headers=_auth(token))
    before = sorted(p.name for p in upload_dir.iterdir())

    r = await client.post(url, files=_pdfs("d.pdf"), headers=_auth(token))

    assert r.status_code == 400
    assert r.json()["error"] == "This task already has 3 files attached"
    assert sorted(p.name for p in upload_dir.iterdir()) == before


@pytest.mark.asyncio
async def test_upload_with_a_non_pdf_rejects_the_whole_batch(
    client: httpx.AsyncClient, register, upload_dir: Path
) -> None:
    token = await register("alice@example.com")
    task = await _create(client, token)
    files = _pdfs("a.pdf") + [("files", ("report.txt", b"hello", "text/plain"))]

    r = await client.post(f"/api/tasks/{task['id']}/upload", files=files, headers=_auth(token))

    assert r.status_code == 400
    assert r.json()["error"] == "Only PDF files are allowed"
    assert r.json()["field"] == "files"

    r = await client.get(f"/api/tasks/{task['id']}", headers=_auth(token))
    assert r.json()["documents"] == []
    assert list(upload_dir.iterdir()) == []


@pytest.mark.asyncio
async def test_upload_over_the_size_cap_is_rejected(client: httpx.AsyncClient, register) -> None:
    token = await register("alice@example.com")
    task = await _create(client, token)
    files = [("files", ("big.pdf", b"%PDF" + b"x" * 2048, "application/pdf"))]

    r = await client.post(f"/api/tasks/{task['id']}/upload", files=files, headers=_auth(token))

    assert r.status_code == 400
    assert "maximum size" in r.json()["error"]


@pytest.mark.asyncio
async def test_upload_to_someone_elses_task_is_403(client: httpx.AsyncClient, register) -> None:
    alice = await register("alice@example.com")
    bob = await register("bob@example.com")
    task = await _create(client, alice)

    r = await client.post(
        f"/api/tasks/{task['id']}/upload", files=_pdfs("a.pdf"), headers=_auth(bob)
    )

    assert r.status_code == 403


@pytest.mark.asyncio
async def test_uploaded_document_can_be_downloaded(client: httpx.AsyncClient, register) -> None:
    token = await register("alice@example.com")
    task = await _create(client, token)
    r = await client.post(
        f"/api/tasks/{task['id']}/upload", files=_pdfs("a.pdf"), headers=_auth(token)
    )
    name = r.json()["documents"][0]

    r = await client.get(f"/api/tasks/file/{name}", headers=_auth(token))

    assert r.status_code == 200
    assert r.headers["content-type"] == "application/pdf"
    assert r.headers["content-disposition"] == f'inline; filename="{name}"'
    assert r.content == b"%PDF-1.4 a.pdf"


@pytest.mark.asyncio
async def test_download_of_missing_document_is_404(client: httpx.AsyncClient, register) -> None:
    token = await register("alice@example.com")

    r = await client.get("/api/tasks/file/nope.pdf", headers=_auth(token))
    assert r.status_code == 404
    assert r.json()["error"] == "File not found"

    r = await client.get("/api/tasks/file/nope.pdf")
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_document_with_non_ascii_name_round_trips(
    client: httpx.AsyncClient, register
) -> None:
    token = await register("alice@example.com")
    task = await _create(client, token)
    r = await client.post(
        f"/api/tasks/{task['id']}/upload", files=_pdfs("报告.pdf"), headers=_auth(token)
    )
    assert r.status_code == 200
    name = r.json()["documents"][0]
    assert name.endswith("_报告.pdf")

    r = await client.get(f"/api/tasks/file/{name}", headers=_auth(token))

    assert r.status_code == 200
    assert r.headers["content-type"] == "application/pdf"
    assert r.headers["content-disposition"] == f"inline; filename*=utf-8''{quote(name)}"
    assert r.content == "%PDF-1.4 报告.pdf".encode()


@pytest.mark.asyncio
async def test_failed_file_write_leaves_no_documents_behind(
    client: httpx.AsyncClient,
    lenient_client: httpx.AsyncClient,
    register,
    upload_dir: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    token = await register("alice@example.com")
    task = await _create(client, token)

    real_write = DocumentStore.write
    written: list[str] = []

    def write_until_disk_full(self: DocumentStore, name: str, data: bytes) -> None:
        written.append(name)
        if len(written) == 2:
            raise OSError("No space left on device")
        real_write(self, name, data)

    monkeypatch.setattr(DocumentStore, "write", write_until_disk_full)

    r = await lenient_client.post(
        f"/api/tasks/{task['id']}/upload", files=_pdfs("a.pdf", "b.pdf"), headers=_auth(token)
    )

    assert r.status_code == 500
    assert r.json()["error"] == "Internal server error"
    assert len(written) == 2
    r = await client.get(f"/api/tasks/{task['id']}", headers=_auth(token))
    assert r.json()["documents"] == []
    assert list(upload_dir.iterdir()) == []


@pytest.mark.asyncio
async def test_failed_commit_removes_written_files(
    client: httpx.AsyncClient,
    lenient_client: httpx.AsyncClient,
    register,
    upload_dir: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    token = await register("alice@example.com")
    task = await _create(client, token)
    url = f"/api/tasks/{task['id']}/upload"
    r = await client.post(url, files=_pdfs("a.pdf"), headers=_auth(token))
    before = r.json()["documents"]

    async def refuse_commit(self: AsyncSession) -> None:
        raise OSError("database is locked")

    monkeypatch.setattr(AsyncSession, "commit", refuse_commit)
    r = await lenient_client.post(url, files=_pdfs("b.pdf", "c.pdf"), headers=_auth(token))
    monkeypatch.undo()

    assert r.status_code == 500
    r = await client.get(f"/api/tasks/{task['id']}", headers=_auth(token))
    assert r.json()["documents"] == before
    assert [p.name for p in upload_dir.iterdir()] == before
