from __future__ import annotations

import logging
import re

from interviewai.core.vocabulary import JOB_SKILLS, match_keywords
from interviewai.types import JobDescriptionData, SalaryRange

logger = logging.getLogger(__name__)

MAX_LIST_ITEMS = 10
MIN_ITEM_LENGTH = 10
MAX_ITEM_LENGTH = 200


def _sweep(*anchors: str) -> tuple[re.Pattern[str], ...]:
    return tuple(re.compile(rf"{anchor}[:\s]*([^.]+)", re.IGNORECASE) for anchor in anchors)


_REQUIRED_SKILL_PATTERNS = _sweep(
    r"required.*?skills?",
    r"must have.*?skills?",
    r"essential.*?skills?",
    r"qualifications",
)
_PREFERRED_SKILL_PATTERNS = _sweep(
    r"preferred.*?skills?",
    r"nice to have.*?skills?",
    r"bonus.*?skills?",
    r"plus.*?skills?",
)
_RESPONSIBILITY_PATTERNS = _sweep(r"responsibilities?", r"duties?", r"what you'll do")
_REQUIREMENT_PATTERNS = _sweep(r"requirements?", r"qualifications?", r"what you need")
_BENEFIT_PATTERNS = _sweep(r"benefits?", r"perks?", r"what we offer")

_LIST_ITEM_SPLIT = re.compile(r"[•\-*]\s*|\d+\.\s*|\n\s*[•\-*]\s*|\n\s*\d+\.\s*")

_LOCATION_PATTERN = re.compile(
    r"\b(?:remote|hybrid|on-site|in-office)\b|\blocation[:\s]*[^.\n]+",
    re.IGNORECASE,
)
_EMPLOYMENT_TYPE_PATTERN = re.compile(
    r"\b(?:full-time|part-time|contract|internship|freelance)\b",
    re.IGNORECASE,
)
_EXPERIENCE_LEVEL_PATTERN = re.compile(
    r"\b(?:entry-level|junior|mid-level|senior|lead|principal|executive)\b",
    re.IGNORECASE,
)
_SALARY_PATTERN = re.compile(
    r"\$\s?(\d[\d,]*(?:\.\d+)?)\s*([kK])?\s*(?:-|–|—|to)\s*\$?\s?(\d[\d,]*(?:\.\d+)?)\s*([kK])?"
)


def extract_job_fields(text: str, vocabulary: tuple[str, ...] | list[str] = JOB_SKILLS) -> JobDescriptionData:
    data = JobDescriptionData(
        required_skills=_sweep_skills(text, _REQUIRED_SKILL_PATTERNS, vocabulary),
        preferred_skills=_sweep_skills(text, _PREFERRED_SKILL_PATTERNS, vocabulary),
        responsibilities=_sweep_items(text, _RESPONSIBILITY_PATTERNS),
        requirements=_sweep_items(text, _REQUIREMENT_PATTERNS),
        benefits=_sweep_items(text, _BENEFIT_PATTERNS),
        location=_first_match(_LOCATION_PATTERN, text),
        employment_type=_first_match(_EMPLOYMENT_TYPE_PATTERN, text),
        experience_level=_first_match(_EXPERIENCE_LEVEL_PATTERN, text),
        salary=extract_salary(text),
    )
    logger.debug(
        "Job extraction required=%s preferred=%s responsibilities=%s requirements=%s",
        len(data.required_skills),
        len(data.preferred_skills),
        len(data.responsibilities),
        len(data.requirements),
    )
    return data


def extract_list_items(text: str) -> list[str]:
    items: list[str] = []
    for part in _LIST_ITEM_SPLIT.split(text):
        item = part.strip()
        if MIN_ITEM_LENGTH < len(item) < MAX_ITEM_LENGTH:
            items.append(item)
    return items[:MAX_LIST_ITEMS]


def extract_salary(text: str) -> SalaryRange | None:
    match = _SALARY_PATTERN.search(text)
    if not match:
        return None

    low = _salary_amount(match.group(1), match.group(2))
    high = _salary_amount(match.group(3), match.group(4) or match.group(2))
    if low is None or high is None:
        return None
    return SalaryRange(min=min(low, high), max=max(low, high), currency="USD")


def _sweep_skills(
    text: str,
    patterns: tuple[re.Pattern[str], ...],
    vocabulary: tuple[str, ...] | list[str],
) -> list[str]:
    found: list[str] = []
    for pattern in patterns:
        spans = [match.group(1) for match in pattern.finditer(text)]
        if spans:
            found.extend(match_keywords(" ".join(spans), vocabulary))
    return list(dict.fromkeys(found))


def _sweep_items(text: str, patterns: tuple[re.Pattern[str], ...]) -> list[str]:
    found: list[str] = []
    for pattern in patterns:
        spans = [match.group(1) for match in pattern.finditer(text)]
        if spans:
            found.extend(extract_list_items(" ".join(spans)))
    return list(dict.fromkeys(found))[:MAX_LIST_ITEMS]


def _salary_amount(raw: str, suffix: str | None) -> int | None:
    try:
        value = float(raw.replace(",", ""))
    except ValueError:
        return None
    if suffix:
        value *= 1000
    return int(value)


def _first_match(pattern: re.Pattern[str], text: str) -> str | None:
    match = pattern.search(text)
    return match.group(0).strip() if match else None
