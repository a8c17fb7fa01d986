from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any

from sqlalchemy.orm import Session

from interviewai.config import Settings, get_settings
from interviewai.core.errors import ConflictError, NotFoundError
from interviewai.db.models import InterviewQuestion, InterviewSession
from interviewai.db.repositories import Repository
from interviewai.llm.interview_engine import InterviewQuestionEngine
from interviewai.types import JobDescriptionData, ResumeData, SessionSummary

logger = logging.getLogger(__name__)

SUMMARY_STRENGTHS = ["Good communication skills"]
SUMMARY_IMPROVEMENTS = ["Provide more specific examples"]
SUMMARY_FEEDBACK = "Good performance with room for improvement."


def default_session_title(now: datetime | None = None) -> str:
    moment = now or datetime.now(UTC)
    return f"Interview Session - {moment.strftime('%Y-%m-%d')}"


def summarize_questions(questions: list[InterviewQuestion]) -> SessionSummary:
    answered = [question for question in questions if question.answer]
    if answered:
        average = round(sum(question.score or 0 for question in answered) / len(answered), 1)
    else:
        average = 0.0

    return SessionSummary(
        total_questions=len(questions),
        answered_questions=len(answered),
        average_score=average,
        strengths=list(SUMMARY_STRENGTHS),
        areas_for_improvement=list(SUMMARY_IMPROVEMENTS),
        overall_feedback=SUMMARY_FEEDBACK,
    )


class InterviewSessionService:
    def __init__(
        self,
        session: Session,
        *,
        settings: Settings | None = None,
        engine: InterviewQuestionEngine | None = None,
    ):
        self.session = session
        self.settings = settings or get_settings()
        self.repo = Repository(session)
        self.engine = engine or InterviewQuestionEngine(settings=self.settings)

    def create_session(
        self,
        *,
        owner_id: str,
        resume_id: int,
        job_description_id: int,
        title: str | None = None,
    ) -> InterviewSession:
        if self.repo.get_resume(resume_id, owner_id) is None:
            raise NotFoundError("Resume not found")
        if self.repo.get_job_description(job_description_id, owner_id) is None:
            raise NotFoundError("Job description not found")

        interview = self.repo.create_session(
            owner_id=owner_id,
            resume_id=resume_id,
            job_description_id=job_description_id,
            title=(title or "").strip() or default_session_title(),
        )
        logger.info("Created interview session id=%s owner=%s", interview.id, owner_id)
        return interview

    def get_session(self, session_id: int, owner_id: str) -> InterviewSession:
        interview = self.repo.get_session(session_id, owner_id)
        if interview is None:
            raise NotFoundError("Interview session not found")
        return interview

    def list_sessions(self, owner_id: str) -> list[InterviewSession]:
        return self.repo.list_sessions(owner_id)

    def generate_questions(
        self,
        session_id: int,
        owner_id: str,
        *,
        question_type: str = "general",
        count: int = 5,
    ) -> InterviewSession:
        interview = self._get_active(session_id, owner_id)
        resume, job, title, company = self._load_context(interview)

        questions = self.engine.generate_questions(
            resume=resume,
            job=job,
            job_title=title,
            company=company,
            question_type=question_type,
            count=count,
        )
        self.repo.append_questions(interview, questions)
        logger.info(
            "Appended questions session=%s type=%s count=%s",
            interview.id,
            question_type,
            len(questions),
        )
        return interview

    def add_answer(
        self,
        session_id: int,
        owner_id: str,
        *,
        question_id: str,
        answer: str,
        evaluate: bool = False,
    ) -> InterviewSession:
        interview = self._get_active(session_id, owner_id)
        question = self._get_question(interview, question_id)

        evaluation = None
        if evaluate:
            resume, job, _, _ = self._load_context(interview)
            evaluation = self.engine.evaluate_answer(
                question=question.question_text,
                answer=answer,
                resume=resume,
                job=job,
            )
        self.repo.save_answer(interview, question, answer, evaluation)
        logger.info(
            "Saved answer session=%s question=%s evaluated=%s",
            interview.id,
            question.id,
            evaluation is not None,
        )
        return interview

    def follow_up(self, session_id: int, owner_id: str, *, question_id: str) -> str:
        interview = self.get_session(session_id, owner_id)
        question = self._get_question(interview, question_id)
        if not question.answer:
            raise ConflictError("Question has not been answered yet")

        resume, job, _, _ = self._load_context(interview)
        return self.engine.generate_follow_up_question(
            question=question.question_text,
            answer=question.answer,
            resume=resume,
            job=job,
        )

    def complete_session(self, session_id: int, owner_id: str) -> InterviewSession:
        interview = self.get_session(session_id, owner_id)
        if interview.status == "completed":
            return interview

        summary = summarize_questions(self.repo.list_questions(interview.id))
        logger.info(
            "Completing session id=%s answered=%s/%s average=%s",
            interview.id,
            summary.answered_questions,
            summary.total_questions,
            summary.average_score,
        )
        return self.repo.complete_session(interview, summary)

    def delete_session(self, session_id: int, owner_id: str) -> bool:
        interview = self.repo.get_session(session_id, owner_id)
        if interview is None:
            return False
        self.repo.delete_session(interview)
        return True

    def serialize_session(self, interview: InterviewSession) -> dict[str, Any]:
        return {
            "id": interview.id,
            "owner_id": interview.owner_id,
            "resume_id": interview.resume_id,
            "job_description_id": interview.job_description_id,
            "title": interview.title,
            "status": interview.status,
            "current_question_index": interview.current_question_index,
            "questions": [serialize_question(row) for row in self.repo.list_questions(interview.id)],
            "summary": SessionSummary.model_validate(interview.summary_json) if interview.summary_json else None,
            "created_at": interview.created_at,
            "updated_at": interview.updated_at,
            "completed_at": interview.completed_at,
        }

    def _get_active(self, session_id: int, owner_id: str) -> InterviewSession:
        interview = self.get_session(session_id, owner_id)
        if interview.status == "completed":
            raise ConflictError("Interview session is already completed")
        return interview

    def _get_question(self, interview: InterviewSession, question_id: str) -> InterviewQuestion:
        question = self.repo.get_question(interview.id, question_id)
        if question is None:
            raise NotFoundError("Question not found")
        return question

    def _load_context(self, interview: InterviewSession) -> tuple[ResumeData, JobDescriptionData, str, str]:
        resume = self.repo.get_resume(interview.resume_id, interview.owner_id)
        job = self.repo.get_job_description(interview.job_description_id, interview.owner_id)
        if resume is None or job is None:
            raise NotFoundError("Resume or job description not found")

        return (
            ResumeData.model_validate(resume.structured_json or {}),
            JobDescriptionData.model_validate(job.structured_json or {}),
            job.title,
            job.company,
        )


def serialize_question(question: InterviewQuestion) -> dict[str, Any]:
    return {
        "id": question.question_id,
        "question_text": question.question_text,
        "type": question.question_type,
        "category": question.category,
        "difficulty": question.difficulty,
        "context": question.context,
        "answer": question.answer,
        "feedback": question.feedback,
        "score": question.score,
        "strengths": list(question.strengths_json or []),
        "areas_for_improvement": list(question.improvements_json or []),
        "answered_at": question.answered_at,
    }
