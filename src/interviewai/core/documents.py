from __future__ import annotations

import logging
import re
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from sqlalchemy.orm import Session

from interviewai.config import Settings, get_settings
from interviewai.core.errors import InvalidUploadError, NotFoundError, UploadTooLargeError
from interviewai.core.job_parser import extract_job_fields
from interviewai.core.resume_parser import parse_resume_text
from interviewai.core.text_extractor import extract_pdf_text
from interviewai.db.models import JobDescription, Resume
from interviewai.db.repositories import Repository
from interviewai.types import JobDescriptionData, ResumeData

logger = logging.getLogger(__name__)

PDF_CONTENT_TYPE = "application/pdf"
_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def is_pdf_upload(file_name: str, content_type: str | None) -> bool:
    if content_type:
        return content_type.split(";")[0].strip().lower() == PDF_CONTENT_TYPE
    return file_name.lower().endswith(".pdf")


def safe_file_name(file_name: str) -> str:
    cleaned = _UNSAFE_FILENAME_CHARS.sub("_", Path(file_name).name).strip("._")
    return cleaned or "resume.pdf"


class DocumentService:
    def __init__(self, session: Session, *, settings: Settings | None = None):
        self.session = session
        self.settings = settings or get_settings()
        self.repo = Repository(session)

    def upload_resume(
        self,
        *,
        owner_id: str,
        file_name: str,
        content_type: str | None,
        data: bytes,
    ) -> Resume:
        if not is_pdf_upload(file_name, content_type):
            raise InvalidUploadError("Only PDF files are supported")
        if not data:
            raise InvalidUploadError("Uploaded file is empty")
        if len(data) > self.settings.max_upload_bytes:
            raise UploadTooLargeError(f"File exceeds the {self.settings.max_upload_mb} MB upload limit")

        path = self._store_upload(owner_id=owner_id, file_name=file_name, data=data)
        text = extract_pdf_text(data)
        structured = parse_resume_text(text)
        try:
            resume = self.repo.create_resume(
                owner_id=owner_id,
                source_file_name=file_name,
                file_path=str(path),
                extracted_text=text,
                structured=structured.model_dump(by_alias=True),
            )
        except Exception:
            self.session.rollback()
            path.unlink(missing_ok=True)
            raise
        logger.info(
            "Stored resume owner=%s file=%s chars=%s skills=%s",
            owner_id,
            path.name,
            len(text),
            len(structured.skills),
        )
        return resume

    def list_resumes(self, owner_id: str) -> list[Resume]:
        return self.repo.list_resumes(owner_id)

    def get_resume(self, resume_id: int, owner_id: str) -> Resume:
        resume = self.repo.get_resume(resume_id, owner_id)
        if resume is None:
            raise NotFoundError("Resume not found")
        return resume

    def update_resume(self, resume_id: int, owner_id: str, structured: ResumeData) -> Resume:
        resume = self.get_resume(resume_id, owner_id)
        return self.repo.update_resume(resume, structured.model_dump(by_alias=True))

    def delete_resume(self, resume_id: int, owner_id: str) -> None:
        resume = self.get_resume(resume_id, owner_id)
        file_path = resume.file_path
        self.repo.delete_resume(resume)
        if file_path:
            Path(file_path).unlink(missing_ok=True)

    def create_job_description(
        self,
        *,
        owner_id: str,
        title: str,
        company: str,
        original_text: str,
    ) -> JobDescription:
        structured = extract_job_fields(original_text)
        return self.repo.create_job_description(
            owner_id=owner_id,
            title=title,
            company=company,
            original_text=original_text,
            structured=structured.model_dump(by_alias=True),
        )

    def list_job_descriptions(self, owner_id: str) -> list[JobDescription]:
        return self.repo.list_job_descriptions(owner_id)

    def get_job_description(self, job_description_id: int, owner_id: str) -> JobDescription:
        job = self.repo.get_job_description(job_description_id, owner_id)
        if job is None:
            raise NotFoundError("Job description not found")
        return job

    def update_job_description(
        self,
        job_description_id: int,
        owner_id: str,
        structured: JobDescriptionData,
    ) -> JobDescription:
        job = self.get_job_description(job_description_id, owner_id)
        return self.repo.update_job_description(job, structured.model_dump(by_alias=True))

    def delete_job_description(self, job_description_id: int, owner_id: str) -> None:
        job = self.get_job_description(job_description_id, owner_id)
        self.repo.delete_job_description(job)

    def _store_upload(self, *, owner_id: str, file_name: str, data: bytes) -> Path:
        ts = datetime.now(UTC).strftime("%Y%m%d%H%M%S%f")
        path = self.settings.upload_dir / f"{safe_file_name(owner_id)}_{ts}_{safe_file_name(file_name)}"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        return path


def serialize_resume(resume: Resume) -> dict[str, Any]:
    return {
        "id": resume.id,
        "owner_id": resume.owner_id,
        "source_file_name": resume.source_file_name,
        "file_path": resume.file_path,
        "extracted_text": resume.extracted_text,
        "structured": ResumeData.model_validate(resume.structured_json or {}),
        "created_at": resume.created_at,
        "updated_at": resume.updated_at,
    }


def serialize_job_description(job: JobDescription) -> dict[str, Any]:
    return {
        "id": job.id,
        "owner_id": job.owner_id,
        "title": job.title,
        "company": job.company,
        "original_text": job.original_text,
        "structured": JobDescriptionData.model_validate(job.structured_json or {}),
        "created_at": job.created_at,
        "updated_at": job.updated_at,
    }
