from datetime import datetime

from interviewai.core.interview_sessions import (
    SUMMARY_FEEDBACK,
    default_session_title,
    summarize_questions,
)
from interviewai.db.models import InterviewQuestion


def _question(answer: str | None = None, score: float | None = None) -> InterviewQuestion:
    return InterviewQuestion(
        question_id="abc123def",
        position=0,
        question_text="Why this role?",
        question_type="general",
        category="Motivation",
        difficulty="easy",
        answer=answer,
        score=score,
    )


def test_summary_averages_scores_of_answered_questions() -> None:
    questions = [_question("a", 8), _question("b", 6), _question("c", 10), _question()]
    summary = summarize_questions(questions)

    assert summary.total_questions == 4
    assert summary.answered_questions == 3
    assert summary.average_score == 8.0
    assert summary.overall_feedback == SUMMARY_FEEDBACK


def test_summary_counts_unscored_answers_as_zero_and_rounds() -> None:
    assert summarize_questions([_question("a", 8), _question("b")]).average_score == 4.0
    assert summarize_questions([_question("a", 7), _question("b", 8), _question("c", 8)]).average_score == 7.7
    assert summarize_questions([_question("a", 8.5), _question("b", 6.5)]).average_score == 7.5


def test_summary_without_answers_scores_zero() -> None:
    summary = summarize_questions([_question(), _question()])

    assert summary.answered_questions == 0
    assert summary.average_score == 0.0


def test_default_session_title_includes_date() -> None:
    assert default_session_title(datetime(2026, 3, 9)) == "Interview Session - 2026-03-09"
