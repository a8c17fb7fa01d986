from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import ConfigDict, Field

from interviewai.types import (
    CamelModel,
    ChatRole,
    Difficulty,
    JobDescriptionData,
    QuestionType,
    ResumeData,
    SessionStatus,
    SessionSummary,
)


class RequestModel(CamelModel):
    model_config = ConfigDict(str_strip_whitespace=True)


class ResumeResponse(CamelModel):
    id: int
    owner_id: str
    source_file_name: str
    file_path: str
    extracted_text: str
    structured: ResumeData
    created_at: datetime
    updated_at: datetime


class JobDescriptionCreateRequest(RequestModel):
    owner_id: str = Field(min_length=1)
    title: str = Field(min_length=1)
    company: str = Field(min_length=1)
    original_text: str = Field(min_length=1)


class JobDescriptionResponse(CamelModel):
    id: int
    owner_id: str
    title: str
    company: str
    original_text: str
    structured: JobDescriptionData
    created_at: datetime
    updated_at: datetime


class InterviewSessionCreateRequest(RequestModel):
    owner_id: str = Field(min_length=1)
    resume_id: int
    job_description_id: int
    title: str | None = None


class GenerateQuestionsRequest(RequestModel):
    question_type: QuestionType = "general"
    count: int = Field(default=5, ge=1, le=20)


class AddAnswerRequest(RequestModel):
    question_id: str = Field(min_length=1)
    answer: str = Field(min_length=1)
    evaluate: bool = False


class FollowUpRequest(RequestModel):
    question_id: str = Field(min_length=1)


class InterviewQuestionResponse(CamelModel):
    id: str
    question_text: str
    type: QuestionType
    category: str
    difficulty: Difficulty
    context: str | None = None
    answer: str | None = None
    feedback: str | None = None
    score: float | None = None
    strengths: list[str] = Field(default_factory=list)
    areas_for_improvement: list[str] = Field(default_factory=list)
    answered_at: datetime | None = None


class InterviewSessionResponse(CamelModel):
    id: int
    owner_id: str
    resume_id: int
    job_description_id: int
    title: str
    status: SessionStatus
    current_question_index: int
    questions: list[InterviewQuestionResponse] = Field(default_factory=list)
    summary: SessionSummary | None = None
    created_at: datetime
    updated_at: datetime
    completed_at: datetime | None = None


class FollowUpResponse(CamelModel):
    question_id: str
    follow_up_question: str


class ChatCreateRequest(RequestModel):
    owner_id: str = Field(min_length=1)
    title: str | None = Field(default=None, max_length=100)


class ChatRenameRequest(RequestModel):
    title: str = Field(min_length=1, max_length=100)


class ChatMessageRequest(RequestModel):
    message: str = Field(min_length=1)


class ChatResponse(CamelModel):
    id: int
    owner_id: str
    title: str
    message_count: int
    created_at: datetime
    updated_at: datetime


class ChatMessageResponse(CamelModel):
    id: int
    chat_id: int
    role: ChatRole
    content: str
    timestamp: datetime
    metadata: dict[str, Any] = Field(default_factory=dict)


class ChatReplyResponse(CamelModel):
    message: str
    timestamp: datetime
    chat: ChatResponse


class DeleteResponse(CamelModel):
    success: bool
