from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

QuestionType = Literal["technical", "behavioral", "situational", "general"]
Difficulty = Literal["easy", "medium", "hard"]
SessionStatus = Literal["active", "completed"]
ChatRole = Literal["user", "assistant"]

QUESTION_TYPES: tuple[str, ...] = ("technical", "behavioral", "situational", "general")
DIFFICULTIES: tuple[str, ...] = ("easy", "medium", "hard")


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class EducationEntry(CamelModel):
    institution: str
    degree: str
    field: str
    start_date: str = ""
    end_date: str = ""
    gpa: str | None = None


class ExperienceEntry(CamelModel):
    company: str
    position: str
    start_date: str = ""
    end_date: str = ""
    description: list[str] = Field(default_factory=list)
    technologies: list[str] = Field(default_factory=list)


class ProjectEntry(CamelModel):
    name: str
    description: str = ""
    technologies: list[str] = Field(default_factory=list)
    url: str | None = None


class CertificationEntry(CamelModel):
    name: str
    issuer: str = ""
    date: str = ""
    url: str | None = None


class ResumeData(CamelModel):
    name: str | None = None
    email: str | None = None
    phone: str | None = None
    summary: str | None = None
    skills: list[str] = Field(default_factory=list)
    education: list[EducationEntry] = Field(default_factory=list)
    experience: list[ExperienceEntry] = Field(default_factory=list)
    projects: list[ProjectEntry] = Field(default_factory=list)
    certifications: list[CertificationEntry] = Field(default_factory=list)


class SalaryRange(CamelModel):
    min: int | None = None
    max: int | None = None
    currency: str | None = None


class JobDescriptionData(CamelModel):
    required_skills: list[str] = Field(default_factory=list)
    preferred_skills: list[str] = Field(default_factory=list)
    responsibilities: list[str] = Field(default_factory=list)
    requirements: list[str] = Field(default_factory=list)
    benefits: list[str] = Field(default_factory=list)
    location: str | None = None
    salary: SalaryRange | None = None
    employment_type: str | None = None
    experience_level: str | None = None


class GeneratedQuestion(CamelModel):
    id: str
    question_text: str
    type: QuestionType
    category: str
    difficulty: Difficulty
    context: str | None = None


class AnswerEvaluation(CamelModel):
    score: float = Field(ge=1, le=10)
    feedback: str
    strengths: list[str] = Field(default_factory=list)
    areas_for_improvement: list[str] = Field(default_factory=list)


class SessionSummary(CamelModel):
    total_questions: int
    answered_questions: int
    average_score: float
    strengths: list[str] = Field(default_factory=list)
    areas_for_improvement: list[str] = Field(default_factory=list)
    overall_feedback: str = ""
