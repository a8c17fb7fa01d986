from __future__ import annotations

import logging
import re

from interviewai.core.vocabulary import RESUME_SKILLS, match_keywords
from interviewai.types import EducationEntry, ExperienceEntry, ResumeData

logger = logging.getLogger(__name__)

MAX_EDUCATION_ENTRIES = 3
MAX_EXPERIENCE_ENTRIES = 5
SUMMARY_MIN_LENGTH = 50
SUMMARY_MAX_LENGTH = 300

DEFAULT_FIELD_OF_STUDY = "Computer Science"
DEFAULT_EXPERIENCE_DESCRIPTION = "Experience details extracted from resume"
PLACEHOLDER_SUMMARY = "Resume content extracted successfully. Please review for complete details."
UNPARSEABLE_SUMMARY = "Unable to parse PDF content. Please review manually."

_NAME_PATTERN = re.compile(r"^([A-Z][a-z]+ [A-Z][a-z]+)", re.MULTILINE)
_EMAIL_PATTERN = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")
_PHONE_PATTERN = re.compile(r"(\+\d{1,3}[-.\s]?)?\(?\d{3}\)?[-.\s]?\d{3}[-.\s]?\d{4}")

_DEGREES = r"Bachelor|Master|PhD|B\.S\.|M\.S\.|Ph\.D\.|B\.A\.|M\.A\."
_EDUCATION_PATTERN = re.compile(
    rf"({_DEGREES}).*?(University|College|Institute|School)",
    re.IGNORECASE,
)
_EDUCATION_SEPARATOR = re.compile(r",|;|\s+at\s+|\s+from\s+|\s+[-–—|]\s+")
_INSTITUTION_NAME = re.compile(
    r"((?:[A-Z][\w&'.-]*[ \t]+){0,4}(?i:university|college|institute|school))$"
)
_INSTITUTION_SUFFIX = re.compile(r"^[ \t]+of[ \t]+(?:the[ \t]+)?[A-Z][\w&'.-]*(?:[ \t]+[A-Z][\w&'.-]*)*")
_LEADING_DEGREE = re.compile(rf"^(?:{_DEGREES})\s*", re.IGNORECASE)
_FIELD_PATTERN = re.compile(r"\bin[ \t]+([A-Z][A-Za-z&]*(?:[ \t]+[A-Z][A-Za-z&]*)*)")
_GPA_PATTERN = re.compile(r"GPA[:\s]*([0-4]\.\d{1,2})", re.IGNORECASE)

# (pattern, position_first) in priority order
_EXPERIENCE_PATTERNS: tuple[tuple[re.Pattern[str], bool], ...] = (
    (re.compile(r"([A-Z][a-zA-Z \t&]+)[ \t]*[-–—][ \t]*([A-Z][a-zA-Z \t]+)"), False),
    (re.compile(r"([A-Z][a-zA-Z \t&]+?)[ \t]+at[ \t]+([A-Z][a-zA-Z \t&]+)"), True),
    (re.compile(r"([A-Z][a-zA-Z \t&]+)[ \t]*:[ \t]*([A-Z][a-zA-Z \t]+)"), False),
)

_PARAGRAPH_SPLIT = re.compile(r"\n\s*\n")
_SUMMARY_NOISE = re.compile(r"[^\w\s.,!?-]")


def parse_resume_text(text: str, vocabulary: tuple[str, ...] | list[str] = RESUME_SKILLS) -> ResumeData:
    try:
        return extract_resume_fields(text, vocabulary=vocabulary)
    except Exception:
        logger.exception("Resume field extraction failed; storing placeholder record")
        return empty_resume_data()


def empty_resume_data() -> ResumeData:
    return ResumeData(summary=UNPARSEABLE_SUMMARY)


def extract_resume_fields(text: str, vocabulary: tuple[str, ...] | list[str] = RESUME_SKILLS) -> ResumeData:
    data = ResumeData(
        name=_first_group(_NAME_PATTERN, text),
        email=_first_match(_EMAIL_PATTERN, text),
        phone=_first_match(_PHONE_PATTERN, text),
        skills=match_keywords(text, vocabulary),
        education=extract_education(text),
        experience=extract_experience(text),
        summary=extract_summary(text),
    )
    logger.debug(
        "Resume extraction skills=%s education=%s experience=%s",
        len(data.skills),
        len(data.education),
        len(data.experience),
    )
    return data


def extract_education(text: str) -> list[EducationEntry]:
    entries: list[EducationEntry] = []
    for match in _EDUCATION_PATTERN.finditer(text):
        if len(entries) >= MAX_EDUCATION_ENTRIES:
            break
        window = match.group(0)
        line_end = text.find("\n", match.end())
        context = text[match.start() : line_end if line_end != -1 else len(text)]

        field_match = _FIELD_PATTERN.search(window)
        gpa_match = _GPA_PATTERN.search(context)
        entries.append(
            EducationEntry(
                institution=_institution_name(window, text[match.end() :]),
                degree=match.group(1),
                field=field_match.group(1).strip() if field_match else DEFAULT_FIELD_OF_STUDY,
                gpa=gpa_match.group(1) if gpa_match else None,
            )
        )
    return entries


def extract_experience(text: str) -> list[ExperienceEntry]:
    for pattern, position_first in _EXPERIENCE_PATTERNS:
        matches = list(pattern.finditer(text))
        if not matches:
            continue

        entries: list[ExperienceEntry] = []
        for match in matches[:MAX_EXPERIENCE_ENTRIES]:
            first, second = match.group(1).strip(), match.group(2).strip()
            company, position = (second, first) if position_first else (first, second)
            entries.append(
                ExperienceEntry(
                    company=company,
                    position=position,
                    description=[DEFAULT_EXPERIENCE_DESCRIPTION],
                )
            )
        return entries
    return []


def extract_summary(text: str) -> str:
    paragraphs = [part.strip() for part in _PARAGRAPH_SPLIT.split(text)]
    candidates = [part for part in paragraphs if len(part) > SUMMARY_MIN_LENGTH]
    if candidates:
        return candidates[0][:SUMMARY_MAX_LENGTH] + "..."

    cleaned = re.sub(r"\s+", " ", _SUMMARY_NOISE.sub(" ", text)).strip()
    if len(cleaned) > SUMMARY_MIN_LENGTH:
        return cleaned[:SUMMARY_MAX_LENGTH] + "..."
    return PLACEHOLDER_SUMMARY


def _institution_name(window: str, remainder: str) -> str:
    chunk = _EDUCATION_SEPARATOR.split(window)[-1].strip()
    chunk = _LEADING_DEGREE.sub("", chunk)
    match = _INSTITUTION_NAME.search(chunk)
    if not match:
        return "Unknown"

    name = match.group(1).strip()
    suffix = _INSTITUTION_SUFFIX.match(remainder)
    if suffix:
        name = f"{name}{suffix.group(0).rstrip()}"
    return " ".join(name.split()) or "Unknown"


def _first_match(pattern: re.Pattern[str], text: str) -> str | None:
    match = pattern.search(text)
    return match.group(0) if match else None


def _first_group(pattern: re.Pattern[str], text: str) -> str | None:
    match = pattern.search(text)
    return match.group(1) if match else None
