from __future__ import annotations

import logging
import re
from typing import Iterable

from careerpilot.schemas.profile import ExperienceLevel, JobProfile
from careerpilot.taxonomy import SignalTaxonomy, get_signal_taxonomy

from .signal_extractor import dedupe, extract_industry_keywords, extract_keywords

logger = logging.getLogger(__name__)

REQUIREMENTS_MARKER = "Requirements:"
RESPONSIBILITIES_MARKER = "Responsibilities:"
QUALIFICATIONS_MARKER = "Qualifications:"

_RESPONSIBILITIES_END_RE = re.compile(r"Requirements:|Qualifications:")
_QUALIFICATIONS_END_RE = re.compile(r"Benefits:|About")
_MIN_SECTION_LINE_LEN = 10
_MAX_VERBATIM_KEYWORD_WORDS = 3
_DEFAULT_LEVEL: ExperienceLevel = "Mid-Level"


def _section_lines(section: str) -> list[str]:
    return [line.strip() for line in section.split("\n") if len(line.strip()) > _MIN_SECTION_LINE_LEN]


def _section_after(description: str, marker: str, end: re.Pattern[str] | str) -> str:
    if marker not in description:
        return ""
    section = description.split(marker, 1)[1]
    if isinstance(end, str):
        return section.split(end, 1)[0]
    return end.split(section, maxsplit=1)[0]


def extract_requirement_lines(description: str) -> list[str]:
    return _section_lines(_section_after(description, REQUIREMENTS_MARKER, RESPONSIBILITIES_MARKER))


def extract_responsibilities(description: str) -> list[str]:
    return _section_lines(_section_after(description, RESPONSIBILITIES_MARKER, _RESPONSIBILITIES_END_RE))


def extract_qualifications(description: str) -> list[str]:
    return _section_lines(_section_after(description, QUALIFICATIONS_MARKER, _QUALIFICATIONS_END_RE))


def bucket_requirements(
    requirements: Iterable[str],
    taxonomy: SignalTaxonomy | None = None,
) -> tuple[list[str], list[str]]:
    """Split requirement lines into (required, preferred).

    Lines without a marker phrase count as required.
    """
    taxonomy = taxonomy or get_signal_taxonomy()
    required_markers = taxonomy.requirement_markers.get("required", ())
    preferred_markers = taxonomy.requirement_markers.get("preferred", ())

    required: list[str] = []
    preferred: list[str] = []
    for requirement in requirements:
        text = (requirement or "").strip()
        if not text:
            continue
        lowered = text.lower()
        if any(marker in lowered for marker in required_markers):
            required.append(text)
        elif any(marker in lowered for marker in preferred_markers):
            preferred.append(text)
        else:
            required.append(text)
    return dedupe(required), dedupe(preferred)


def determine_experience_level(description: str, taxonomy: SignalTaxonomy | None = None) -> ExperienceLevel:
    taxonomy = taxonomy or get_signal_taxonomy()
    lowered = (description or "").lower()
    for level, phrases in taxonomy.experience_levels.items():
        if any(phrase in lowered for phrase in phrases):
            return level  # type: ignore[return-value]
    return _DEFAULT_LEVEL


def _verbatim_requirement_keywords(requirements: Iterable[str]) -> list[str]:
    keywords: list[str] = []
    for requirement in requirements:
        text = (requirement or "").strip()
        if text and len(text.split()) <= _MAX_VERBATIM_KEYWORD_WORDS and len(text) > 2:
            keywords.append(text)
    return keywords


def analyze_job(
    title: str,
    company: str,
    description: str,
    requirements: Iterable[str] = (),
    taxonomy: SignalTaxonomy | None = None,
) -> JobProfile:
    taxonomy = taxonomy or get_signal_taxonomy()
    description = description or ""
    structured = [item for item in requirements if item and item.strip()]

    all_requirements = list(structured) + extract_requirement_lines(description)
    required_skills, preferred_skills = bucket_requirements(all_requirements, taxonomy)

    signal_text = "\n".join([description, *structured])
    keywords = extract_keywords(signal_text, taxonomy)
    keywords.extend(_verbatim_requirement_keywords(structured))

    profile = JobProfile(
        keywords=dedupe(keywords),
        required_skills=required_skills,
        preferred_skills=preferred_skills,
        qualifications=dedupe(extract_qualifications(description)),
        responsibilities=dedupe(extract_responsibilities(description)),
        company_name=company or "",
        job_title=title or "",
        experience_level=determine_experience_level(description, taxonomy),
        industry_keywords=extract_industry_keywords(description, taxonomy),
    )
    logger.info(
        "job_analyzed title=%s keywords=%s required=%s preferred=%s level=%s",
        profile.job_title,
        len(profile.keywords),
        len(profile.required_skills),
        len(profile.preferred_skills),
        profile.experience_level,
    )
    return profile
