from __future__ import annotations

from collections.abc import Generator

from sqlalchemy.orm import Session

from interviewai.config import get_settings
from interviewai.db.session import get_db_session
from interviewai.llm.interview_engine import InterviewQuestionEngine
from interviewai.llm.providers import CompletionClient


def get_db() -> Generator[Session, None, None]:
    yield from get_db_session()


def get_completion_client() -> CompletionClient:
    return CompletionClient(get_settings())


def get_question_engine() -> InterviewQuestionEngine:
    return InterviewQuestionEngine(get_completion_client())
