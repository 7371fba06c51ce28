"""Keyword, skill and industry-term extraction from free text.

All functions are pure: they read the term lists from the signal taxonomy and
never mutate their input. Results keep first-seen order and contain no
duplicates.
"""
from __future__ import annotations

import re
from functools import lru_cache

from careerpilot.taxonomy import SignalTaxonomy, get_signal_taxonomy

_ACRONYM_RE = re.compile(r"\b[A-Z]{2,5}\b")
_PHRASE_PATTERNS = (
    re.compile(r"experience (?:with|in) ([a-zA-Z0-9\s,]{1,60}?)(?:\.|,|\n|\band\b|$)", re.IGNORECASE),
    re.compile(r"knowledge of ([a-zA-Z0-9\s,]{1,60}?)(?:\.|,|\n|\band\b|$)", re.IGNORECASE),
    re.compile(r"proficient (?:in|with) ([a-zA-Z0-9\s,]{1,60}?)(?:\.|,|\n|\band\b|$)", re.IGNORECASE),
)
_MIN_KEYWORD_LEN = 3


@lru_cache(maxsize=1024)
def term_pattern(term: str) -> re.Pattern[str]:
    """Case-insensitive pattern matching *term* as a standalone token.

    Lookarounds are used instead of ``\\b`` so terms ending in symbols
    (``c++``, ``node.js``) still match.
    """
    return re.compile(rf"(?<![A-Za-z0-9]){re.escape(term)}(?![A-Za-z0-9])", re.IGNORECASE)


def contains_term(text: str, term: str) -> bool:
    return bool(term_pattern(term).search(text or ""))


def dedupe(items: list[str]) -> list[str]:
    seen: set[str] = set()
    result: list[str] = []
    for item in items:
        key = item.lower()
        if not item or key in seen:
            continue
        seen.add(key)
        result.append(item)
    return result


def extract_acronyms(text: str) -> list[str]:
    return dedupe(_ACRONYM_RE.findall(text or ""))


def extract_experience_phrases(text: str) -> list[str]:
    phrases: list[str] = []
    for pattern in _PHRASE_PATTERNS:
        for match in pattern.finditer(text or ""):
            phrases.extend(item.strip() for item in match.group(1).split(","))
    return dedupe(phrases)


def extract_keywords(text: str, taxonomy: SignalTaxonomy | None = None) -> list[str]:
    taxonomy = taxonomy or get_signal_taxonomy()
    text = text or ""
    keywords: list[str] = []

    for skill in taxonomy.technical_skills:
        match = term_pattern(skill).search(text)
        if match:
            keywords.append(match.group(0))

    for skill in taxonomy.soft_skills:
        if contains_term(text, skill):
            keywords.append(skill)

    keywords.extend(extract_acronyms(text))
    keywords.extend(extract_experience_phrases(text))

    return dedupe([keyword for keyword in keywords if len(keyword) >= _MIN_KEYWORD_LEN])


def extract_skills(text: str, taxonomy: SignalTaxonomy | None = None) -> list[str]:
    taxonomy = taxonomy or get_signal_taxonomy()
    return dedupe([skill for skill in taxonomy.catalog_skills() if contains_term(text, skill)])


def extract_industry_keywords(text: str, taxonomy: SignalTaxonomy | None = None) -> list[str]:
    taxonomy = taxonomy or get_signal_taxonomy()
    found: list[str] = []
    for terms in taxonomy.industry_terms.values():
        found.extend(term for term in terms if contains_term(text, term))
    return dedupe(found)
