from __future__ import annotations

import io
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from pypdf import PdfWriter

from interviewai.api.app import create_app
from interviewai.config import Settings
from interviewai.core.documents import DocumentService
from interviewai.core.errors import UploadTooLargeError
from interviewai.core.resume_parser import PLACEHOLDER_SUMMARY
from interviewai.db.session import SessionLocal

RESUME_TEXT = """Jane Doe
jane.doe@example.com

Backend engineer with eight years of Python, PostgreSQL and Kubernetes experience in fintech.

Stripe - Staff Engineer
"""


def _blank_pdf() -> bytes:
    writer = PdfWriter()
    writer.add_blank_page(width=612, height=792)
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


def _upload(client: TestClient, owner: str = "alice", content: bytes | None = None):
    return client.post(
        "/api/resumes",
        data={"ownerId": owner},
        files={"file": ("resume.pdf", content or _blank_pdf(), "application/pdf")},
    )


def test_upload_blank_pdf_stores_placeholder_record() -> None:
    client = TestClient(create_app())

    resp = _upload(client)
    assert resp.status_code == 200
    body = resp.json()
    assert body["ownerId"] == "alice"
    assert body["sourceFileName"] == "resume.pdf"
    assert body["structured"]["summary"] == PLACEHOLDER_SUMMARY
    assert body["structured"]["skills"] == []
    assert Path(body["filePath"]).exists()


def test_upload_parses_extracted_text(monkeypatch) -> None:
    monkeypatch.setattr("interviewai.core.documents.extract_pdf_text", lambda data: RESUME_TEXT)
    client = TestClient(create_app())

    body = _upload(client).json()
    structured = body["structured"]

    assert structured["name"] == "Jane Doe"
    assert structured["email"] == "jane.doe@example.com"
    assert {"Python", "PostgreSQL", "Kubernetes"} <= set(structured["skills"])
    assert structured["experience"][0]["company"] == "Stripe"
    assert structured["experience"][0]["position"] == "Staff Engineer"
    assert body["extractedText"] == RESUME_TEXT


def test_upload_rejects_non_pdf() -> None:
    client = TestClient(create_app())

    resp = client.post(
        "/api/resumes",
        data={"ownerId": "alice"},
        files={"file": ("notes.txt", b"hello", "text/plain")},
    )
    assert resp.status_code == 400
    assert client.get("/api/resumes", params={"ownerId": "alice"}).json() == []


def test_upload_requires_owner() -> None:
    client = TestClient(create_app())

    resp = client.post("/api/resumes", files={"file": ("resume.pdf", _blank_pdf(), "application/pdf")})
    assert resp.status_code == 422


def test_upload_size_limit(tmp_path: Path) -> None:
    settings = Settings(max_upload_mb=0, upload_dir=tmp_path)
    with SessionLocal() as db:
        service = DocumentService(db, settings=settings)
        with pytest.raises(UploadTooLargeError):
            service.upload_resume(
                owner_id="alice",
                file_name="resume.pdf",
                content_type="application/pdf",
                data=b"%PDF-1.4",
            )
    assert list(tmp_path.iterdir()) == []


def test_resume_crud_is_scoped_to_owner() -> None:
    client = TestClient(create_app())
    resume = _upload(client).json()
    resume_id = resume["id"]

    listing = client.get("/api/resumes", params={"ownerId": "alice"})
    assert [item["id"] for item in listing.json()] == [resume_id]
    assert client.get("/api/resumes", params={"ownerId": "bob"}).json() == []
    assert client.get(f"/api/resumes/{resume_id}", params={"ownerId": "bob"}).status_code == 404

    update = client.put(
        f"/api/resumes/{resume_id}",
        params={"ownerId": "alice"},
        json={"name": "Alice Example", "skills": ["Python"], "education": []},
    )
    assert update.status_code == 200
    assert update.json()["structured"]["name"] == "Alice Example"
    assert update.json()["structured"]["skills"] == ["Python"]

    assert client.delete(f"/api/resumes/{resume_id}", params={"ownerId": "bob"}).status_code == 404
    delete = client.delete(f"/api/resumes/{resume_id}", params={"ownerId": "alice"})
    assert delete.status_code == 200
    assert delete.json() == {"success": True}
    assert client.get(f"/api/resumes/{resume_id}", params={"ownerId": "alice"}).status_code == 404
    assert not Path(resume["filePath"]).exists()


def test_upload_over_limit_returns_413(monkeypatch) -> None:
    monkeypatch.setattr("interviewai.core.documents.get_settings", lambda: Settings(max_upload_mb=0))
    client = TestClient(create_app())

    resp = _upload(client)
    assert resp.status_code == 413
    assert client.get("/api/resumes", params={"ownerId": "alice"}).json() == []


def test_failed_insert_removes_stored_file(tmp_path: Path, monkeypatch) -> None:
    def fail_create(self, **kwargs):
        raise RuntimeError("database unavailable")

    monkeypatch.setattr("interviewai.db.repositories.Repository.create_resume", fail_create)
    settings = Settings(upload_dir=tmp_path)
    with SessionLocal() as db:
        service = DocumentService(db, settings=settings)
        with pytest.raises(RuntimeError):
            service.upload_resume(
                owner_id="alice",
                file_name="resume.pdf",
                content_type="application/pdf",
                data=_blank_pdf(),
            )
    assert [path for path in tmp_path.rglob("*") if path.is_file()] == []
