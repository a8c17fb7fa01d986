from __future__ import annotations

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile
from sqlalchemy.orm import Session

from interviewai.api.deps import get_completion_client, get_db, get_question_engine
from interviewai.api.schemas import (
    AddAnswerRequest,
    ChatCreateRequest,
    ChatMessageRequest,
    ChatMessageResponse,
    ChatRenameRequest,
    ChatReplyResponse,
    ChatResponse,
    DeleteResponse,
    FollowUpRequest,
    FollowUpResponse,
    GenerateQuestionsRequest,
    InterviewSessionCreateRequest,
    InterviewSessionResponse,
    JobDescriptionCreateRequest,
    JobDescriptionResponse,
    ResumeResponse,
)
from interviewai.core.chat import ChatService, serialize_chat, serialize_message
from interviewai.core.documents import DocumentService, serialize_job_description, serialize_resume
from interviewai.core.errors import (
    ConflictError,
    InvalidUploadError,
    NotFoundError,
    UploadTooLargeError,
)
from interviewai.core.interview_sessions import InterviewSessionService
from interviewai.llm.interview_engine import InterviewQuestionEngine
from interviewai.llm.providers import CompletionClient, CompletionError
from interviewai.types import JobDescriptionData, ResumeData

router = APIRouter(prefix="/api", tags=["api"])

COMPLETION_ERROR_STATUS = {
    "rate_limit": 429,
    "input_too_large": 413,
    "network": 503,
    "upstream_error": 503,
    "authentication": 502,
    "unknown": 502,
}


def owner_query(owner_id: str = Query(..., alias="ownerId", min_length=1)) -> str:
    return owner_id


def domain_error(exc: ValueError) -> HTTPException:
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, ConflictError):
        return HTTPException(status_code=409, detail=str(exc))
    if isinstance(exc, UploadTooLargeError):
        return HTTPException(status_code=413, detail=str(exc))
    return HTTPException(status_code=400, detail=str(exc))


@router.post("/resumes", response_model=ResumeResponse)
def upload_resume(
    file: UploadFile = File(...),
    owner_id: str = Form(..., alias="ownerId", min_length=1),
    db: Session = Depends(get_db),
) -> ResumeResponse:
    service = DocumentService(db)
    # at most one byte past the limit
    data = file.file.read(service.settings.max_upload_bytes + 1)
    try:
        resume = service.upload_resume(
            owner_id=owner_id,
            file_name=file.filename or "resume.pdf",
            content_type=file.content_type,
            data=data,
        )
    except InvalidUploadError as exc:
        raise domain_error(exc) from exc
    return ResumeResponse.model_validate(serialize_resume(resume))


@router.get("/resumes", response_model=list[ResumeResponse])
def list_resumes(owner_id: str = Depends(owner_query), db: Session = Depends(get_db)) -> list[ResumeResponse]:
    service = DocumentService(db)
    return [ResumeResponse.model_validate(serialize_resume(row)) for row in service.list_resumes(owner_id)]


@router.get("/resumes/{resume_id}", response_model=ResumeResponse)
def get_resume(
    resume_id: int,
    owner_id: str = Depends(owner_query),
    db: Session = Depends(get_db),
) -> ResumeResponse:
    try:
        resume = DocumentService(db).get_resume(resume_id, owner_id)
    except NotFoundError as exc:
        raise domain_error(exc) from exc
    return ResumeResponse.model_validate(serialize_resume(resume))


@router.put("/resumes/{resume_id}", response_model=ResumeResponse)
def update_resume(
    resume_id: int,
    payload: ResumeData,
    owner_id: str = Depends(owner_query),
    db: Session = Depends(get_db),
) -> ResumeResponse:
    try:
        resume = DocumentService(db).update_resume(resume_id, owner_id, payload)
    except NotFoundError as exc:
        raise domain_error(exc) from exc
    return ResumeResponse.model_validate(serialize_resume(resume))


@router.delete("/resumes/{resume_id}", response_model=DeleteResponse)
def delete_resume(
    resume_id: int,
    owner_id: str = Depends(owner_query),
    db: Session = Depends(get_db),
) -> DeleteResponse:
    try:
        DocumentService(db).delete_resume(resume_id, owner_id)
    except NotFoundError as exc:
        raise domain_error(exc) from exc
    return DeleteResponse(success=True)


@router.post("/job-descriptions", response_model=JobDescriptionResponse)
def create_job_description(
    payload: JobDescriptionCreateRequest,
    db: Session = Depends(get_db),
) -> JobDescriptionResponse:
    job = DocumentService(db).create_job_description(
        owner_id=payload.owner_id,
        title=payload.title,
        company=payload.company,
        original_text=payload.original_text,
    )
    return JobDescriptionResponse.model_validate(serialize_job_description(job))


@router.get("/job-descriptions", response_model=list[JobDescriptionResponse])
def list_job_descriptions(
    owner_id: str = Depends(owner_query),
    db: Session = Depends(get_db),
) -> list[JobDescriptionResponse]:
    service = DocumentService(db)
    return [
        JobDescriptionResponse.model_validate(serialize_job_description(row))
        for row in service.list_job_descriptions(owner_id)
    ]


@router.get("/job-descriptions/{job_description_id}", response_model=JobDescriptionResponse)
def get_job_description(
    job_description_id: int,
    owner_id: str = Depends(owner_query),
    db: Session = Depends(get_db),
) -> JobDescriptionResponse:
    try:
        job = DocumentService(db).get_job_description(job_description_id, owner_id)
    except NotFoundError as exc:
        raise domain_error(exc) from exc
    return JobDescriptionResponse.model_validate(serialize_job_description(job))


@router.put("/job-descriptions/{job_description_id}", response_model=JobDescriptionResponse)
def update_job_description(
    job_description_id: int,
    payload: JobDescriptionData,
    owner_id: str = Depends(owner_query),
    db: Session = Depends(get_db),
) -> JobDescriptionResponse:
    try:
        job = DocumentService(db).update_job_description(job_description_id, owner_id, payload)
    except NotFoundError as exc:
        raise domain_error(exc) from exc
    return JobDescriptionResponse.model_validate(serialize_job_description(job))


@router.delete("/job-descriptions/{job_description_id}", response_model=DeleteResponse)
def delete_job_description(
    job_description_id: int,
    owner_id: str = Depends(owner_query),
    db: Session = Depends(get_db),
) -> DeleteResponse:
    try:
        DocumentService(db).delete_job_description(job_description_id, owner_id)
    except NotFoundError as exc:
        raise domain_error(exc) from exc
    return DeleteResponse(success=True)


@router.post("/interview-sessions", response_model=InterviewSessionResponse)
def create_interview_session(
    payload: InterviewSessionCreateRequest,
    db: Session = Depends(get_db),
    engine: InterviewQuestionEngine = Depends(get_question_engine),
) -> InterviewSessionResponse:
    service = InterviewSessionService(db, engine=engine)
    try:
        interview = service.create_session(
            owner_id=payload.owner_id,
            resume_id=payload.resume_id,
            job_description_id=payload.job_description_id,
            title=payload.title,
        )
    except NotFoundError as exc:
        raise domain_error(exc) from exc
    return InterviewSessionResponse.model_validate(service.serialize_session(interview))


@router.get("/interview-sessions", response_model=list[InterviewSessionResponse])
def list_interview_sessions(
    owner_id: str = Depends(owner_query),
    db: Session = Depends(get_db),
    engine: InterviewQuestionEngine = Depends(get_question_engine),
) -> list[InterviewSessionResponse]:
    service = InterviewSessionService(db, engine=engine)
    return [
        InterviewSessionResponse.model_validate(service.serialize_session(row))
        for row in service.list_sessions(owner_id)
    ]


@router.get("/interview-sessions/{session_id}", response_model=InterviewSessionResponse)
def get_interview_session(
    session_id: int,
    owner_id: str = Depends(owner_query),
    db: Session = Depends(get_db),
    engine: InterviewQuestionEngine = Depends(get_question_engine),
) -> InterviewSessionResponse:
    service = InterviewSessionService(db, engine=engine)
    try:
        interview = service.get_session(session_id, owner_id)
    except NotFoundError as exc:
        raise domain_error(exc) from exc
    return InterviewSessionResponse.model_validate(service.serialize_session(interview))


@router.delete("/interview-sessions/{session_id}", response_model=DeleteResponse)
def delete_interview_session(
    session_id: int,
    owner_id: str = Depends(owner_query),
    db: Session = Depends(get_db),
    engine: InterviewQuestionEngine = Depends(get_question_engine),
) -> DeleteResponse:
    if not InterviewSessionService(db, engine=engine).delete_session(session_id, owner_id):
        raise HTTPException(status_code=404, detail="Interview session not found")
    return DeleteResponse(success=True)


@router.post("/interview-sessions/{session_id}/generate-questions", response_model=InterviewSessionResponse)
def generate_interview_questions(
    session_id: int,
    payload: GenerateQuestionsRequest,
    owner_id: str = Depends(owner_query),
    db: Session = Depends(get_db),
    engine: InterviewQuestionEngine = Depends(get_question_engine),
) -> InterviewSessionResponse:
    service = InterviewSessionService(db, engine=engine)
    try:
        interview = service.generate_questions(
            session_id,
            owner_id,
            question_type=payload.question_type,
            count=payload.count,
        )
    except ValueError as exc:
        raise domain_error(exc) from exc
    return InterviewSessionResponse.model_validate(service.serialize_session(interview))


@router.post("/interview-sessions/{session_id}/add-answer", response_model=InterviewSessionResponse)
def add_interview_answer(
    session_id: int,
    payload: AddAnswerRequest,
    owner_id: str = Depends(owner_query),
    db: Session = Depends(get_db),
    engine: InterviewQuestionEngine = Depends(get_question_engine),
) -> InterviewSessionResponse:
    service = InterviewSessionService(db, engine=engine)
    try:
        interview = service.add_answer(
            session_id,
            owner_id,
            question_id=payload.question_id,
            answer=payload.answer,
            evaluate=payload.evaluate,
        )
    except ValueError as exc:
        raise domain_error(exc) from exc
    return InterviewSessionResponse.model_validate(service.serialize_session(interview))


@router.post("/interview-sessions/{session_id}/follow-up", response_model=FollowUpResponse)
def follow_up_question(
    session_id: int,
    payload: FollowUpRequest,
    owner_id: str = Depends(owner_query),
    db: Session = Depends(get_db),
    engine: InterviewQuestionEngine = Depends(get_question_engine),
) -> FollowUpResponse:
    service = InterviewSessionService(db, engine=engine)
    try:
        text = service.follow_up(session_id, owner_id, question_id=payload.question_id)
    except ValueError as exc:
        raise domain_error(exc) from exc
    return FollowUpResponse(question_id=payload.question_id, follow_up_question=text)


@router.post("/interview-sessions/{session_id}/complete", response_model=InterviewSessionResponse)
def complete_interview_session(
    session_id: int,
    owner_id: str = Depends(owner_query),
    db: Session = Depends(get_db),
    engine: InterviewQuestionEngine = Depends(get_question_engine),
) -> InterviewSessionResponse:
    service = InterviewSessionService(db, engine=engine)
    try:
        interview = service.complete_session(session_id, owner_id)
    except NotFoundError as exc:
        raise domain_error(exc) from exc
    return InterviewSessionResponse.model_validate(service.serialize_session(interview))


@router.post("/chats", response_model=ChatResponse)
def create_chat(
    payload: ChatCreateRequest,
    db: Session = Depends(get_db),
    client: CompletionClient = Depends(get_completion_client),
) -> ChatResponse:
    chat = ChatService(db, client=client).create_chat(payload.owner_id, payload.title)
    return ChatResponse.model_validate(serialize_chat(chat))


@router.get("/chats", response_model=list[ChatResponse])
def list_chats(
    owner_id: str = Depends(owner_query),
    db: Session = Depends(get_db),
    client: CompletionClient = Depends(get_completion_client),
) -> list[ChatResponse]:
    service = ChatService(db, client=client)
    return [ChatResponse.model_validate(serialize_chat(row)) for row in service.list_chats(owner_id)]


@router.get("/chats/{chat_id}", response_model=ChatResponse)
def get_chat(
    chat_id: int,
    owner_id: str = Depends(owner_query),
    db: Session = Depends(get_db),
    client: CompletionClient = Depends(get_completion_client),
) -> ChatResponse:
    try:
        chat = ChatService(db, client=client).get_chat(chat_id, owner_id)
    except NotFoundError as exc:
        raise domain_error(exc) from exc
    return ChatResponse.model_validate(serialize_chat(chat))


@router.patch("/chats/{chat_id}", response_model=ChatResponse)
def rename_chat(
    chat_id: int,
    payload: ChatRenameRequest,
    owner_id: str = Depends(owner_query),
    db: Session = Depends(get_db),
    client: CompletionClient = Depends(get_completion_client),
) -> ChatResponse:
    try:
        chat = ChatService(db, client=client).rename_chat(chat_id, owner_id, payload.title)
    except ValueError as exc:
        raise domain_error(exc) from exc
    return ChatResponse.model_validate(serialize_chat(chat))


@router.delete("/chats/{chat_id}", response_model=DeleteResponse)
def delete_chat(
    chat_id: int,
    owner_id: str = Depends(owner_query),
    db: Session = Depends(get_db),
    client: CompletionClient = Depends(get_completion_client),
) -> DeleteResponse:
    try:
        ChatService(db, client=client).delete_chat(chat_id, owner_id)
    except NotFoundError as exc:
        raise domain_error(exc) from exc
    return DeleteResponse(success=True)


@router.get("/chats/{chat_id}/messages", response_model=list[ChatMessageResponse])
def list_chat_messages(
    chat_id: int,
    owner_id: str = Depends(owner_query),
    db: Session = Depends(get_db),
    client: CompletionClient = Depends(get_completion_client),
) -> list[ChatMessageResponse]:
    try:
        messages = ChatService(db, client=client).list_messages(chat_id, owner_id)
    except NotFoundError as exc:
        raise domain_error(exc) from exc
    return [ChatMessageResponse.model_validate(serialize_message(row)) for row in messages]


@router.post("/chats/{chat_id}/messages", response_model=ChatReplyResponse)
def send_chat_message(
    chat_id: int,
    payload: ChatMessageRequest,
    owner_id: str = Depends(owner_query),
    db: Session = Depends(get_db),
    client: CompletionClient = Depends(get_completion_client),
) -> ChatReplyResponse:
    service = ChatService(db, client=client)
    try:
        reply = service.send_message(chat_id, owner_id, payload.message)
    except NotFoundError as exc:
        raise domain_error(exc) from exc
    except CompletionError as exc:
        raise HTTPException(
            status_code=COMPLETION_ERROR_STATUS.get(exc.kind, 502),
            detail={"error": exc.user_message, "kind": exc.kind, "retryable": exc.retryable},
        ) from exc

    chat = service.get_chat(chat_id, owner_id)
    return ChatReplyResponse(
        message=reply.content,
        timestamp=reply.created_at,
        chat=ChatResponse.model_validate(serialize_chat(chat)),
    )
