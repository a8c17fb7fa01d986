from __future__ import annotations

from fastapi.testclient import TestClient

from interviewai.api.app import create_app
from interviewai.api.deps import get_question_engine
from interviewai.llm.interview_engine import FALLBACK_QUESTIONS, new_question_id
from interviewai.types import AnswerEvaluation, GeneratedQuestion

JOB_TEXT = "Backend Engineer. Required skills: Python and Docker."


class FakeQuestionEngine:
    def __init__(self, scores: list[float] | None = None):
        self.scores = list(scores or [])
        self.generate_calls: list[dict] = []

    def generate_questions(self, *, resume, job, job_title, company, question_type="general", count=5):
        self.generate_calls.append({"job_title": job_title, "company": company, "question_type": question_type})
        return [
            GeneratedQuestion(
                id=new_question_id(),
                question_text=f"{question_type} question {index}",
                type=question_type,
                category="Testing",
                difficulty="medium",
            )
            for index in range(count)
        ]

    def evaluate_answer(self, *, question, answer, resume, job):
        return AnswerEvaluation(
            score=self.scores.pop(0),
            feedback="Solid answer.",
            strengths=["Specific"],
            areas_for_improvement=["Quantify impact"],
        )

    def generate_follow_up_question(self, *, question, answer, resume, job):
        return f"Follow-up on: {answer}"


def _client(engine: FakeQuestionEngine | None = None) -> TestClient:
    app = create_app()
    if engine is not None:
        app.dependency_overrides[get_question_engine] = lambda: engine
    return TestClient(app)


def _create_documents(client: TestClient, owner: str = "alice") -> tuple[int, int]:
    resume = client.post(
        "/api/resumes",
        data={"ownerId": owner},
        files={"file": ("resume.pdf", b"%PDF-1.4 not really a pdf", "application/pdf")},
    )
    job = client.post(
        "/api/job-descriptions",
        json={"ownerId": owner, "title": "Backend Engineer", "company": "Acme", "originalText": JOB_TEXT},
    )
    assert resume.status_code == 200
    assert job.status_code == 200
    return resume.json()["id"], job.json()["id"]


def _create_session(client: TestClient, owner: str = "alice", **extra) -> dict:
    resume_id, job_id = _create_documents(client, owner)
    resp = client.post(
        "/api/interview-sessions",
        json={"ownerId": owner, "resumeId": resume_id, "jobDescriptionId": job_id, **extra},
    )
    assert resp.status_code == 200
    return resp.json()


def test_create_session_defaults() -> None:
    client = _client(FakeQuestionEngine())
    session = _create_session(client)

    assert session["status"] == "active"
    assert session["currentQuestionIndex"] == 0
    assert session["questions"] == []
    assert session["summary"] is None
    assert session["title"].startswith("Interview Session - ")

    titled = _create_session(client, title="Mock round one")
    assert titled["title"] == "Mock round one"


def test_create_session_requires_owned_documents() -> None:
    client = _client(FakeQuestionEngine())
    resume_id, job_id = _create_documents(client, owner="bob")

    resp = client.post(
        "/api/interview-sessions",
        json={"ownerId": "alice", "resumeId": resume_id, "jobDescriptionId": job_id},
    )
    assert resp.status_code == 404


def test_generate_questions_appends_batches() -> None:
    engine = FakeQuestionEngine()
    client = _client(engine)
    session_id = _create_session(client)["id"]
    params = {"ownerId": "alice"}

    first = client.post(f"/api/interview-sessions/{session_id}/generate-questions", params=params, json={"count": 5})
    assert first.status_code == 200
    first_ids = [question["id"] for question in first.json()["questions"]]
    assert len(first_ids) == 5

    second = client.post(
        f"/api/interview-sessions/{session_id}/generate-questions",
        params=params,
        json={"questionType": "technical", "count": 3},
    )
    questions = second.json()["questions"]
    assert len(questions) == 8
    assert [question["id"] for question in questions[:5]] == first_ids
    assert [question["type"] for question in questions[5:]] == ["technical"] * 3
    assert engine.generate_calls[0] == {"job_title": "Backend Engineer", "company": "Acme", "question_type": "general"}


def test_generate_questions_uses_fallback_table_without_ai_key() -> None:
    client = _client()
    session_id = _create_session(client)["id"]

    resp = client.post(
        f"/api/interview-sessions/{session_id}/generate-questions",
        params={"ownerId": "alice"},
        json={"questionType": "behavioral", "count": 5},
    )
    assert resp.status_code == 200
    texts = [question["questionText"] for question in resp.json()["questions"]]
    assert texts == [row[0] for row in FALLBACK_QUESTIONS["behavioral"]]


def test_generate_questions_rejects_invalid_type() -> None:
    client = _client(FakeQuestionEngine())
    session_id = _create_session(client)["id"]

    resp = client.post(
        f"/api/interview-sessions/{session_id}/generate-questions",
        params={"ownerId": "alice"},
        json={"questionType": "trivia"},
    )
    assert resp.status_code == 422


def test_answers_evaluation_and_completion_summary() -> None:
    client = _client(FakeQuestionEngine(scores=[8, 6, 10, 8]))
    session_id = _create_session(client)["id"]
    params = {"ownerId": "alice"}
    base = f"/api/interview-sessions/{session_id}"

    questions = client.post(f"{base}/generate-questions", params=params, json={"count": 4}).json()["questions"]
    for question in questions[:3]:
        resp = client.post(
            f"{base}/add-answer",
            params=params,
            json={"questionId": question["id"], "answer": f"Answer to {question['id']}", "evaluate": True},
        )
        assert resp.status_code == 200
        body = resp.json()
        assert body["id"] == session_id
        assert body["status"] == "active"
        answered = next(row for row in body["questions"] if row["id"] == question["id"])
        assert answered["answeredAt"] is not None
        assert answered["feedback"] == "Solid answer."

    overwrite = client.post(
        f"{base}/add-answer",
        params=params,
        json={"questionId": questions[0]["id"], "answer": "A better answer"},
    )
    assert overwrite.status_code == 200
    first = overwrite.json()["questions"][0]
    assert first["answer"] == "A better answer"
    assert first["score"] is None
    assert first["feedback"] is None
    assert first["strengths"] == []
    assert first["areasForImprovement"] == []

    reevaluated = client.post(
        f"{base}/add-answer",
        params=params,
        json={"questionId": questions[0]["id"], "answer": "A better answer", "evaluate": True},
    )
    assert reevaluated.json()["questions"][0]["score"] == 8

    follow_up = client.post(f"{base}/follow-up", params=params, json={"questionId": questions[0]["id"]})
    assert follow_up.status_code == 200
    assert follow_up.json()["followUpQuestion"] == "Follow-up on: A better answer"
    assert client.post(f"{base}/follow-up", params=params, json={"questionId": questions[3]["id"]}).status_code == 409

    completed = client.post(f"{base}/complete", params=params)
    assert completed.status_code == 200
    body = completed.json()
    assert body["status"] == "completed"
    assert body["completedAt"] is not None
    assert body["summary"]["totalQuestions"] == 4
    assert body["summary"]["answeredQuestions"] == 3
    assert body["summary"]["averageScore"] == 8.0
    assert body["summary"]["overallFeedback"] == "Good performance with room for improvement."

    again = client.post(f"{base}/complete", params=params)
    assert again.status_code == 200
    assert again.json()["completedAt"] == body["completedAt"]

    late_answer = client.post(
        f"{base}/add-answer",
        params=params,
        json={"questionId": questions[3]["id"], "answer": "Too late"},
    )
    assert late_answer.status_code == 409
    assert client.post(f"{base}/generate-questions", params=params, json={}).status_code == 409


def test_unknown_question_id_is_rejected() -> None:
    client = _client(FakeQuestionEngine())
    session_id = _create_session(client)["id"]

    resp = client.post(
        f"/api/interview-sessions/{session_id}/add-answer",
        params={"ownerId": "alice"},
        json={"questionId": "missing00", "answer": "Hello"},
    )
    assert resp.status_code == 404


def test_sessions_are_isolated_by_owner() -> None:
    client = _client(FakeQuestionEngine())
    session_id = _create_session(client)["id"]
    other = {"ownerId": "mallory"}

    assert client.get(f"/api/interview-sessions/{session_id}", params=other).status_code == 404
    assert client.post(
        f"/api/interview-sessions/{session_id}/generate-questions", params=other, json={}
    ).status_code == 404
    assert client.post(f"/api/interview-sessions/{session_id}/complete", params=other).status_code == 404
    assert client.delete(f"/api/interview-sessions/{session_id}", params=other).status_code == 404
    assert client.get("/api/interview-sessions", params=other).json() == []


def test_generate_questions_after_job_description_deleted() -> None:
    client = _client(FakeQuestionEngine())
    session = _create_session(client)
    params = {"ownerId": "alice"}

    client.delete(f"/api/job-descriptions/{session['jobDescriptionId']}", params=params)
    resp = client.post(f"/api/interview-sessions/{session['id']}/generate-questions", params=params, json={})

    assert resp.status_code == 404
    assert resp.json()["detail"] == "Resume or job description not found"


def test_delete_session_keeps_documents() -> None:
    client = _client(FakeQuestionEngine())
    session = _create_session(client)
    params = {"ownerId": "alice"}

    client.post(f"/api/interview-sessions/{session['id']}/generate-questions", params=params, json={"count": 2})
    assert client.delete(f"/api/interview-sessions/{session['id']}", params=params).json() == {"success": True}

    assert client.get(f"/api/interview-sessions/{session['id']}", params=params).status_code == 404
    assert client.get(f"/api/resumes/{session['resumeId']}", params=params).status_code == 200
    assert client.get(f"/api/job-descriptions/{session['jobDescriptionId']}", params=params).status_code == 200


def test_list_sessions_newest_first() -> None:
    client = _client(FakeQuestionEngine())
    first = _create_session(client)["id"]
    second = _create_session(client)["id"]

    listing = client.get("/api/interview-sessions", params={"ownerId": "alice"}).json()
    assert [item["id"] for item in listing] == [second, first]
