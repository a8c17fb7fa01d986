from __future__ import annotations

from typing import Any

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from interviewai.db.base import utcnow
from interviewai.db.models import (
    Chat,
    ChatMessage,
    InterviewQuestion,
    InterviewSession,
    JobDescription,
    Resume,
)
from interviewai.types import AnswerEvaluation, GeneratedQuestion, SessionSummary


class Repository:
    def __init__(self, session: Session):
        self.session = session

    def create_resume(
        self,
        *,
        owner_id: str,
        source_file_name: str,
        file_path: str,
        extracted_text: str,
        structured: dict[str, Any],
    ) -> Resume:
        resume = Resume(
            owner_id=owner_id,
            source_file_name=source_file_name,
            file_path=file_path,
            extracted_text=extracted_text,
            structured_json=structured,
        )
        self.session.add(resume)
        self.session.commit()
        self.session.refresh(resume)
        return resume

    def list_resumes(self, owner_id: str) -> list[Resume]:
        statement = (
            select(Resume)
            .where(Resume.owner_id == owner_id)
            .order_by(Resume.created_at.desc(), Resume.id.desc())
        )
        return list(self.session.scalars(statement).all())

    def get_resume(self, resume_id: int, owner_id: str) -> Resume | None:
        resume = self.session.get(Resume, resume_id)
        if resume is None or resume.owner_id != owner_id:
            return None
        return resume

    def update_resume(self, resume: Resume, structured: dict[str, Any]) -> Resume:
        resume.structured_json = structured
        self.session.commit()
        self.session.refresh(resume)
        return resume

    def delete_resume(self, resume: Resume) -> None:
        self.session.delete(resume)
        self.session.commit()

    def create_job_description(
        self,
        *,
        owner_id: str,
        title: str,
        company: str,
        original_text: str,
        structured: dict[str, Any],
    ) -> JobDescription:
        job = JobDescription(
            owner_id=owner_id,
            title=title,
            company=company,
            original_text=original_text,
            structured_json=structured,
        )
        self.session.add(job)
        self.session.commit()
        self.session.refresh(job)
        return job

    def list_job_descriptions(self, owner_id: str) -> list[JobDescription]:
        statement = (
            select(JobDescription)
            .where(JobDescription.owner_id == owner_id)
            .order_by(JobDescription.created_at.desc(), JobDescription.id.desc())
        )
        return list(self.session.scalars(statement).all())

    def get_job_description(self, job_description_id: int, owner_id: str) -> JobDescription | None:
        job = self.session.get(JobDescription, job_description_id)
        if job is None or job.owner_id != owner_id:
            return None
        return job

    def update_job_description(self, job: JobDescription, structured: dict[str, Any]) -> JobDescription:
        job.structured_json = structured
        self.session.commit()
        self.session.refresh(job)
        return job

    def delete_job_description(self, job: JobDescription) -> None:
        self.session.delete(job)
        self.session.commit()

    def create_session(
        self,
        *,
        owner_id: str,
        resume_id: int,
        job_description_id: int,
        title: str,
    ) -> InterviewSession:
        interview = InterviewSession(
            owner_id=owner_id,
            resume_id=resume_id,
            job_description_id=job_description_id,
            title=title,
            status="active",
            current_question_index=0,
        )
        self.session.add(interview)
        self.session.commit()
        self.session.refresh(interview)
        return interview

    def list_sessions(self, owner_id: str) -> list[InterviewSession]:
        statement = (
            select(InterviewSession)
            .where(InterviewSession.owner_id == owner_id)
            .order_by(InterviewSession.created_at.desc(), InterviewSession.id.desc())
        )
        return list(self.session.scalars(statement).all())

    def get_session(self, session_id: int, owner_id: str) -> InterviewSession | None:
        interview = self.session.get(InterviewSession, session_id)
        if interview is None or interview.owner_id != owner_id:
            return None
        return interview

    def delete_session(self, interview: InterviewSession) -> None:
        self.session.execute(delete(InterviewQuestion).where(InterviewQuestion.session_id == interview.id))
        self.session.delete(interview)
        self.session.commit()

    def list_questions(self, session_id: int) -> list[InterviewQuestion]:
        statement = (
            select(InterviewQuestion)
            .where(InterviewQuestion.session_id == session_id)
            .order_by(InterviewQuestion.position.asc(), InterviewQuestion.id.asc())
        )
        return list(self.session.scalars(statement).all())

    def get_question(self, session_id: int, question_id: str) -> InterviewQuestion | None:
        statement = select(InterviewQuestion).where(
            InterviewQuestion.session_id == session_id,
            InterviewQuestion.question_id == question_id,
        )
        return self.session.scalar(statement)

    def append_questions(
        self,
        interview: InterviewSession,
        questions: list[GeneratedQuestion],
    ) -> list[InterviewQuestion]:
        current = self.session.scalar(
            select(func.max(InterviewQuestion.position)).where(InterviewQuestion.session_id == interview.id)
        )
        start = -1 if current is None else current

        rows: list[InterviewQuestion] = []
        for offset, question in enumerate(questions, start=1):
            row = InterviewQuestion(
                session_id=interview.id,
                question_id=question.id,
                position=start + offset,
                question_text=question.question_text,
                question_type=question.type,
                category=question.category,
                difficulty=question.difficulty,
                context=question.context,
            )
            self.session.add(row)
            rows.append(row)

        interview.updated_at = utcnow()
        self.session.commit()
        return rows

    def save_answer(
        self,
        interview: InterviewSession,
        question: InterviewQuestion,
        answer: str,
        evaluation: AnswerEvaluation | None = None,
    ) -> InterviewQuestion:
        question.answer = answer
        question.answered_at = utcnow()
        if evaluation is None:
            # a new answer invalidates any earlier evaluation
            question.score = None
            question.feedback = None
            question.strengths_json = []
            question.improvements_json = []
        else:
            question.score = evaluation.score
            question.feedback = evaluation.feedback
            question.strengths_json = list(evaluation.strengths)
            question.improvements_json = list(evaluation.areas_for_improvement)

        interview.updated_at = utcnow()
        self.session.commit()
        self.session.refresh(question)
        return question

    def complete_session(self, interview: InterviewSession, summary: SessionSummary) -> InterviewSession:
        now = utcnow()
        interview.status = "completed"
        interview.summary_json = summary.model_dump(by_alias=True)
        interview.completed_at = now
        interview.updated_at = now
        self.session.commit()
        self.session.refresh(interview)
        return interview

    def create_chat(self, *, owner_id: str, title: str) -> Chat:
        chat = Chat(owner_id=owner_id, title=title, message_count=0)
        self.session.add(chat)
        self.session.commit()
        self.session.refresh(chat)
        return chat

    def list_chats(self, owner_id: str) -> list[Chat]:
        statement = (
            select(Chat)
            .where(Chat.owner_id == owner_id)
            .order_by(Chat.updated_at.desc(), Chat.id.desc())
        )
        return list(self.session.scalars(statement).all())

    def get_chat(self, chat_id: int, owner_id: str) -> Chat | None:
        chat = self.session.get(Chat, chat_id)
        if chat is None or chat.owner_id != owner_id:
            return None
        return chat

    def rename_chat(self, chat: Chat, title: str) -> Chat:
        chat.title = title
        self.session.commit()
        self.session.refresh(chat)
        return chat

    def delete_chat(self, chat: Chat) -> None:
        self.session.execute(delete(ChatMessage).where(ChatMessage.chat_id == chat.id))
        self.session.delete(chat)
        self.session.commit()

    def add_chat_message(
        self,
        chat: Chat,
        *,
        role: str,
        content: str,
        metadata: dict[str, Any] | None = None,
    ) -> ChatMessage:
        message = ChatMessage(chat_id=chat.id, role=role, content=content, metadata_json=metadata or {})
        self.session.add(message)
        chat.message_count = (chat.message_count or 0) + 1
        chat.updated_at = utcnow()
        self.session.commit()
        self.session.refresh(message)
        return message

    def list_chat_messages(self, chat_id: int) -> list[ChatMessage]:
        statement = (
            select(ChatMessage)
            .where(ChatMessage.chat_id == chat_id)
            .order_by(ChatMessage.created_at.asc(), ChatMessage.id.asc())
        )
        return list(self.session.scalars(statement).all())
