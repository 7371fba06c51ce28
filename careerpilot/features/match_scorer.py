from __future__ import annotations

import logging
import math
import re
from typing import Any

from careerpilot.core.scoring import get_scoring_value
from careerpilot.schemas.profile import JobProfile, MatchScore
from careerpilot.taxonomy import SignalTaxonomy, get_signal_taxonomy

from .signal_extractor import contains_term

logger = logging.getLogger(__name__)

_PERCENT_RE = re.compile(r"\d+%")
_LEVEL_SCORE_KEYS = {"Senior": "senior", "Entry Level": "entry", "Mid-Level": "mid"}

FALLBACK_SUGGESTION = "Unable to calculate detailed score. Please review manually."
EXCELLENT_SUGGESTION = "Excellent ATS compatibility! Your resume is well-optimized."
SKILLS_SUGGESTION = "Highlight more required skills from the job description"
QUANTIFY_SUGGESTION = 'Add quantifiable achievements (e.g., "increased by 30%")'


def round_half_up(value: float) -> int:
    # Epsilon absorbs float error from the weighted sum (e.g. 62.49999999).
    return int(math.floor(value + 0.5 + 1e-9))


def _weights() -> dict[str, float]:
    raw: Any = get_scoring_value("match.weights", {}) or {}
    return {
        "keyword": float(raw.get("keyword", 0.4)),
        "skills": float(raw.get("skills", 0.3)),
        "experience": float(raw.get("experience", 0.2)),
        "education": float(raw.get("education", 0.1)),
    }


def weighted_overall(keyword: int, skills: int, experience: int, education: int) -> int:
    weights = _weights()
    total = (
        weights["keyword"] * keyword
        + weights["skills"] * skills
        + weights["experience"] * experience
        + weights["education"] * education
    )
    return max(0, min(100, round_half_up(total)))


def _coverage(matched: int, total: int, neutral: int) -> int:
    if total == 0:
        return neutral
    score = round_half_up(100 * matched / total)
    # Any match reports at least 1 so that 0 means "nothing matched".
    return max(1, score) if matched else 0


def experience_score(content: str, profile: JobProfile, taxonomy: SignalTaxonomy) -> int:
    baseline = int(get_scoring_value("match.experience.baseline", 80))
    evidence = taxonomy.experience_evidence.get(profile.experience_level, ())
    if any(contains_term(content, term) for term in evidence):
        key = _LEVEL_SCORE_KEYS[profile.experience_level]
        return int(get_scoring_value(f"match.experience.{key}", baseline))
    return baseline


def education_score(content: str, taxonomy: SignalTaxonomy) -> int:
    if any(contains_term(content, term) for term in taxonomy.education_terms):
        return int(get_scoring_value("match.education.present", 100))
    return int(get_scoring_value("match.education.absent", 70))


def build_suggestions(
    content: str,
    *,
    keyword_match: int,
    skills_match: int,
    overall_score: int,
    missing_keywords: list[str],
) -> list[str]:
    keyword_threshold = int(get_scoring_value("match.suggestions.keyword_threshold", 70))
    skills_threshold = int(get_scoring_value("match.suggestions.skills_threshold", 70))
    excellent_threshold = int(get_scoring_value("match.suggestions.excellent_threshold", 80))
    shown = int(get_scoring_value("match.suggestions.missing_keywords_shown", 5))

    suggestions: list[str] = []
    if keyword_match < keyword_threshold:
        suggestions.append(f"Add more job-specific keywords. Missing: {', '.join(missing_keywords[:shown])}")
    if skills_match < skills_threshold:
        suggestions.append(SKILLS_SUGGESTION)
    if "quantif" not in content.lower() and not _PERCENT_RE.search(content):
        suggestions.append(QUANTIFY_SUGGESTION)
    if overall_score >= excellent_threshold:
        suggestions.append(EXCELLENT_SUGGESTION)
    return suggestions


def fallback_score(profile: JobProfile, reason: str) -> MatchScore:
    component = int(get_scoring_value("match.fallback_component_score", 70))
    return MatchScore(
        overall_score=weighted_overall(component, component, component, component),
        keyword_match=component,
        skills_match=component,
        experience_match=component,
        education_match=component,
        matched_keywords=[],
        missing_keywords=list(profile.keywords),
        suggestions=[FALLBACK_SUGGESTION],
        degraded=True,
        degraded_reason=reason,
    )


def _score(content: str, profile: JobProfile, taxonomy: SignalTaxonomy) -> MatchScore:
    matched = [keyword for keyword in profile.keywords if contains_term(content, keyword)]
    missing = [keyword for keyword in profile.keywords if keyword not in matched]
    keyword_match = _coverage(
        len(matched),
        len(profile.keywords),
        int(get_scoring_value("match.neutral_keyword_score", 80)),
    )

    skills = [*profile.required_skills, *profile.preferred_skills]
    skills_match = _coverage(
        sum(1 for skill in skills if contains_term(content, skill)),
        len(skills),
        int(get_scoring_value("match.neutral_skills_score", 80)),
    )

    experience_match = experience_score(content, profile, taxonomy)
    education_match = education_score(content, taxonomy)
    overall = weighted_overall(keyword_match, skills_match, experience_match, education_match)

    return MatchScore(
        overall_score=overall,
        keyword_match=keyword_match,
        skills_match=skills_match,
        experience_match=experience_match,
        education_match=education_match,
        matched_keywords=matched,
        missing_keywords=missing,
        suggestions=build_suggestions(
            content,
            keyword_match=keyword_match,
            skills_match=skills_match,
            overall_score=overall,
            missing_keywords=missing,
        ),
    )


def score_match(content: str, profile: JobProfile, taxonomy: SignalTaxonomy | None = None) -> MatchScore:
    try:
        score = _score(content or "", profile, taxonomy or get_signal_taxonomy())
    except Exception as exc:  # noqa: BLE001 - scoring degrades instead of failing the request
        logger.warning("match_score_degraded: %s", exc)
        return fallback_score(profile, reason=f"{type(exc).__name__}: {exc}")
    logger.info(
        "match_scored overall=%s keyword=%s skills=%s experience=%s education=%s",
        score.overall_score,
        score.keyword_match,
        score.skills_match,
        score.experience_match,
        score.education_match,
    )
    return score
