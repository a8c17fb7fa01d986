from __future__ import annotations

import json
import logging
import re
from uuid import uuid4

from interviewai.config import Settings, get_settings
from interviewai.core.formatting import truncate_text
from interviewai.llm.prompts import (
    ANSWER_EVALUATION_PROMPT,
    FOLLOW_UP_PROMPT,
    QUESTION_GENERATION_PROMPT,
)
from interviewai.llm.providers import CompletionClient, CompletionError, find_json_object
from interviewai.types import (
    DIFFICULTIES,
    QUESTION_TYPES,
    AnswerEvaluation,
    GeneratedQuestion,
    JobDescriptionData,
    ResumeData,
)

logger = logging.getLogger(__name__)

DEFAULT_FOLLOW_UP = "Can you tell me more about that experience?"

FALLBACK_QUESTIONS: dict[str, list[tuple[str, str, str]]] = {
    "technical": [
        (
            "Can you explain the difference between synchronous and asynchronous programming?",
            "Programming Concepts",
            "medium",
        ),
        ("What is the time complexity of a binary search algorithm?", "Algorithms", "easy"),
        ("How would you design a scalable database architecture?", "System Design", "hard"),
    ],
    "behavioral": [
        ("Tell me about a time when you had to work with a difficult team member.", "Team Work", "medium"),
        ("Describe a situation where you had to learn a new technology quickly.", "Adaptability", "medium"),
        ("Give me an example of a project where you took the lead.", "Leadership", "hard"),
    ],
    "situational": [
        ("What would you do if you discovered a critical bug in production?", "Problem Solving", "medium"),
        ("How would you handle a situation where your manager disagrees with your technical approach?", "Communication", "medium"),
        ("What steps would you take to improve the performance of a slow application?", "Technical Problem Solving", "hard"),
    ],
    "general": [
        ("Why are you interested in this position?", "Motivation", "easy"),
        ("Where do you see yourself in 5 years?", "Career Goals", "easy"),
        ("What are your strengths and weaknesses?", "Self Assessment", "medium"),
    ],
}

_QUESTION_SPLIT = re.compile(r"Q:")
_LABELLED_LINE = re.compile(r"^(Type|Category|Difficulty):\s*(.+)$", re.IGNORECASE)


def new_question_id() -> str:
    return uuid4().hex[:9]


class InterviewQuestionEngine:
    def __init__(self, client: CompletionClient | None = None, settings: Settings | None = None):
        self.settings = settings or (client.settings if client is not None else get_settings())
        self.client = client or CompletionClient(self.settings)

    def generate_questions(
        self,
        *,
        resume: ResumeData,
        job: JobDescriptionData,
        job_title: str,
        company: str,
        question_type: str = "general",
        count: int = 5,
    ) -> list[GeneratedQuestion]:
        prompt = QUESTION_GENERATION_PROMPT.format(
            count=count,
            question_type=question_type,
            job_title=self._bound(job_title),
            company=self._bound(company),
            resume_skills=self._bound(", ".join(resume.skills)),
            job_skills=self._bound(", ".join(job.required_skills)),
        )

        try:
            content = self.client.complete(prompt)
        except CompletionError as exc:
            logger.warning("Question generation failed kind=%s; using fallback questions", exc.kind)
            return fallback_questions(question_type, count)

        questions = parse_question_blocks(content, count=count)
        if not questions:
            logger.warning("No valid question blocks in completion; using fallback questions")
            return fallback_questions(question_type, count)
        return questions

    def evaluate_answer(
        self,
        *,
        question: str,
        answer: str,
        resume: ResumeData,
        job: JobDescriptionData,
    ) -> AnswerEvaluation:
        prompt = ANSWER_EVALUATION_PROMPT.format(
            question=self._bound(question),
            answer=self._bound(answer),
            resume_skills=self._bound(", ".join(resume.skills)),
            job_skills=self._bound(", ".join(job.required_skills)),
        )

        try:
            content = self.client.complete(prompt)
        except CompletionError as exc:
            logger.warning("Answer evaluation failed kind=%s; using fallback evaluation", exc.kind)
            return failed_evaluation()

        span = find_json_object(content)
        if span is None:
            return neutral_evaluation()

        try:
            return AnswerEvaluation.model_validate(json.loads(span))
        except Exception:
            logger.warning("Invalid answer evaluation payload; using fallback evaluation")
            return failed_evaluation()

    def generate_follow_up_question(
        self,
        *,
        question: str,
        answer: str,
        resume: ResumeData,
        job: JobDescriptionData,
    ) -> str:
        prompt = FOLLOW_UP_PROMPT.format(
            question=self._bound(question),
            answer=self._bound(answer),
            resume_skills=self._bound(", ".join(resume.skills)),
            job_skills=self._bound(", ".join(job.required_skills)),
        )

        try:
            content = self.client.complete(prompt)
        except CompletionError as exc:
            logger.warning("Follow-up generation failed kind=%s", exc.kind)
            return DEFAULT_FOLLOW_UP
        return content.strip() or DEFAULT_FOLLOW_UP

    def _bound(self, value: str) -> str:
        return truncate_text(value, self.settings.ai_max_prompt_field_length)


def parse_question_blocks(content: str, *, count: int) -> list[GeneratedQuestion]:
    questions: list[GeneratedQuestion] = []
    for block in _QUESTION_SPLIT.split(content)[1:]:
        if len(questions) >= count:
            break

        lines = [line.strip() for line in block.strip().splitlines() if line.strip()]
        if not lines:
            continue

        labels: dict[str, str] = {}
        for line in lines[1:]:
            match = _LABELLED_LINE.match(line)
            if match:
                labels.setdefault(match.group(1).lower(), match.group(2).strip())

        question_type = labels.get("type", "").lower()
        difficulty = labels.get("difficulty", "").lower()
        category = labels.get("category", "")
        if question_type not in QUESTION_TYPES or difficulty not in DIFFICULTIES or not category:
            continue

        questions.append(
            GeneratedQuestion(
                id=new_question_id(),
                question_text=lines[0],
                type=question_type,
                category=category,
                difficulty=difficulty,
            )
        )
    return questions


def fallback_questions(question_type: str, count: int) -> list[GeneratedQuestion]:
    table = FALLBACK_QUESTIONS.get(question_type, FALLBACK_QUESTIONS["general"])
    resolved_type = question_type if question_type in FALLBACK_QUESTIONS else "general"
    return [
        GeneratedQuestion(
            id=new_question_id(),
            question_text=text,
            type=resolved_type,
            category=category,
            difficulty=difficulty,
        )
        for text, category, difficulty in table[: max(count, 0)]
    ]


def neutral_evaluation() -> AnswerEvaluation:
    return AnswerEvaluation(
        score=7,
        feedback="Good answer with room for improvement. Consider providing more specific examples.",
        strengths=["Clear communication"],
        areas_for_improvement=["Add more specific examples"],
    )


def failed_evaluation() -> AnswerEvaluation:
    return AnswerEvaluation(
        score=6,
        feedback="Answer provided. Consider adding more specific examples and details.",
        strengths=["Attempted to answer"],
        areas_for_improvement=["Provide more specific examples"],
    )
