from __future__ import annotations

import json
from pathlib import Path

import typer
import uvicorn

from interviewai.api.app import create_app
from interviewai.config import get_settings
from interviewai.core.errors import NotFoundError
from interviewai.core.interview_sessions import InterviewSessionService
from interviewai.core.job_parser import extract_job_fields
from interviewai.core.resume_parser import parse_resume_text
from interviewai.core.text_extractor import extract_pdf_text
from interviewai.db.init import init_database
from interviewai.db.session import SessionLocal
from interviewai.logging_config import configure_logging

app = typer.Typer(help="InterviewAI CLI")
sessions_app = typer.Typer(help="Inspect interview sessions")

app.add_typer(sessions_app, name="sessions")

_INITIALIZED = False


def ensure_initialized() -> None:
    global _INITIALIZED
    if _INITIALIZED:
        return
    init_database()
    _INITIALIZED = True


@app.command("init")
def init_cmd() -> None:
    """Initialize database and data directories."""
    configure_logging()
    result = init_database()
    typer.echo(json.dumps({"ok": True, **result}, indent=2))


@app.command("parse-resume")
def parse_resume_cmd(file: Path = typer.Option(..., "--file", exists=True, readable=True)) -> None:
    """Extract structured fields from a resume PDF without storing it."""
    configure_logging()
    text = extract_pdf_text(file.read_bytes())
    data = parse_resume_text(text)
    typer.echo(json.dumps(data.model_dump(by_alias=True), indent=2))


@app.command("parse-job")
def parse_job_cmd(file: Path = typer.Option(..., "--file", exists=True, readable=True)) -> None:
    """Extract structured fields from a plain-text job description."""
    configure_logging()
    data = extract_job_fields(file.read_text(encoding="utf-8"))
    typer.echo(json.dumps(data.model_dump(by_alias=True), indent=2))


@sessions_app.command("list")
def sessions_list(owner: str = typer.Option(..., "--owner")) -> None:
    configure_logging()
    ensure_initialized()
    with SessionLocal() as db:
        service = InterviewSessionService(db)
        typer.echo(
            json.dumps(
                [
                    {
                        "id": row.id,
                        "title": row.title,
                        "status": row.status,
                        "created_at": row.created_at.isoformat() if row.created_at else None,
                    }
                    for row in service.list_sessions(owner)
                ],
                indent=2,
            )
        )


@sessions_app.command("show")
def sessions_show(
    session_id: int = typer.Option(..., "--session-id"),
    owner: str = typer.Option(..., "--owner"),
) -> None:
    configure_logging()
    ensure_initialized()
    with SessionLocal() as db:
        service = InterviewSessionService(db)
        try:
            interview = service.get_session(session_id, owner)
        except NotFoundError as exc:
            raise typer.BadParameter(str(exc)) from exc
        payload = service.serialize_session(interview)
        typer.echo(json.dumps(payload, indent=2, default=_json_default))


@app.command("serve")
def serve(
    host: str | None = typer.Option(None, "--host"),
    port: int | None = typer.Option(None, "--port"),
) -> None:
    configure_logging()
    ensure_initialized()
    settings = get_settings()
    app_instance = create_app()
    uvicorn.run(app_instance, host=host or settings.app_host, port=port or settings.app_port)


def _json_default(value: object) -> object:
    if hasattr(value, "model_dump"):
        return value.model_dump(by_alias=True)
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return str(value)
