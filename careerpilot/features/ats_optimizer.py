"""Post-processing of generated resume text for applicant tracking systems.

Steps run in a fixed order: missing keywords go into the Skills region, section
headings are rewritten to canonical names, decorative characters are replaced
and month/year dates are reduced to the year. The output of
``optimize_for_ats`` is a fixed point: running it again changes nothing.
"""
from __future__ import annotations

import logging
import re

from careerpilot.core.scoring import get_scoring_value
from careerpilot.schemas.profile import JobProfile
from careerpilot.taxonomy import SignalTaxonomy, get_signal_taxonomy

from .signal_extractor import contains_term

logger = logging.getLogger(__name__)

SKILLS_HEADER = "TECHNICAL SKILLS"

# Label words are joined by single spaces so the label never ends in whitespace.
_HEADING_RE = re.compile(
    r"^(?P<indent>\s*)(?P<label>[A-Za-z](?:[A-Za-z&/]| (?=[A-Za-z&/]))*)\s*(?P<colon>:\s*(?P<inline>.*))?$"
)
_BULLET_RE = re.compile(r"[•●○▪◦]")
_DOUBLE_QUOTE_RE = re.compile(r"[“”]")
_SINGLE_QUOTE_RE = re.compile(r"[‘’]")
_MONTH_YEAR_RE = re.compile(r"\b(\d{1,2})/(\d{4})\b")


def _parse_heading(line: str, lookup: dict[str, str]) -> tuple[str, str, str | None] | None:
    """Return (indent, canonical header, inline content) for heading lines.

    Inline content is None when the heading has no colon.
    """
    match = _HEADING_RE.match(line)
    if not match:
        return None
    canonical = lookup.get(match.group("label").strip().lower())
    if canonical is None:
        return None
    inline = match.group("inline") if match.group("colon") else None
    return match.group("indent"), canonical, inline.strip() if inline is not None else None


def normalize_characters(text: str) -> str:
    text = _BULLET_RE.sub("-", text)
    text = _DOUBLE_QUOTE_RE.sub('"', text)
    return _SINGLE_QUOTE_RE.sub("'", text)


def simplify_dates(text: str) -> str:
    return _MONTH_YEAR_RE.sub(r"\2", text)


def normalize_section_headers(text: str, taxonomy: SignalTaxonomy | None = None) -> str:
    lookup = (taxonomy or get_signal_taxonomy()).header_lookup()
    lines = text.split("\n")
    for index, line in enumerate(lines):
        heading = _parse_heading(line, lookup)
        if heading is None:
            continue
        indent, canonical, inline = heading
        if inline is None:
            lines[index] = f"{indent}{canonical}"
        elif inline:
            lines[index] = f"{indent}{canonical}: {inline}"
        else:
            lines[index] = f"{indent}{canonical}:"
    return "\n".join(lines)


def resume_sections(text: str, taxonomy: SignalTaxonomy | None = None) -> dict[str, list[str]]:
    """Group non-empty lines under the canonical header of the section they sit in."""
    lookup = (taxonomy or get_signal_taxonomy()).header_lookup()
    sections: dict[str, list[str]] = {}
    current: str | None = None
    for line in (text or "").split("\n"):
        heading = _parse_heading(line, lookup)
        if heading is not None:
            _, current, inline = heading
            sections.setdefault(current, [])
            if inline:
                sections[current].append(inline)
            continue
        if current is not None and line.strip():
            sections[current].append(line.strip())
    return sections


def _clean(text: str, taxonomy: SignalTaxonomy) -> str:
    return simplify_dates(normalize_characters(normalize_section_headers(text, taxonomy)))


def insert_missing_keywords(
    text: str,
    keywords: list[str],
    taxonomy: SignalTaxonomy | None = None,
    limit: int | None = None,
) -> str:
    """Add job keywords absent from *text* to the Skills region.

    Only the first ``limit`` job keywords are considered. Text without a Skills
    heading is returned unchanged.
    """
    taxonomy = taxonomy or get_signal_taxonomy()
    if limit is None:
        limit = int(get_scoring_value("ats.max_inserted_keywords", 15))
    lookup = taxonomy.header_lookup()
    cleaned = _clean(text, taxonomy)

    missing: list[str] = []
    for keyword in keywords[:limit]:
        candidate = simplify_dates(normalize_characters(" ".join(keyword.split())))
        # Section names are layout, not skills.
        if not candidate or candidate.lower() in lookup:
            continue
        if contains_term(cleaned, candidate) or any(item.lower() == candidate.lower() for item in missing):
            continue
        missing.append(candidate)
    if not missing:
        return text

    lines = text.split("\n")
    skills_index = next(
        (
            index
            for index, line in enumerate(lines)
            if (heading := _parse_heading(line, lookup)) is not None and heading[1] == SKILLS_HEADER
        ),
        None,
    )
    if skills_index is None:
        logger.info("ats_keywords_skipped reason=no_skills_section missing=%s", len(missing))
        return text

    addition = ", ".join(missing)
    _, _, inline = _parse_heading(lines[skills_index], lookup)  # type: ignore[misc]
    if inline:
        lines[skills_index] = f"{lines[skills_index].rstrip()}, {addition}"
    else:
        target = None
        for index in range(skills_index + 1, len(lines)):
            if not lines[index].strip():
                continue
            if _parse_heading(lines[index], lookup) is None:
                target = index
            break
        if target is None:
            lines.insert(skills_index + 1, addition)
        else:
            lines[target] = f"{lines[target].rstrip()}, {addition}"

    logger.info("ats_keywords_inserted count=%s", len(missing))
    return "\n".join(lines)


def optimize_for_ats(content: str, profile: JobProfile, taxonomy: SignalTaxonomy | None = None) -> str:
    try:
        taxonomy = taxonomy or get_signal_taxonomy()
        optimized = insert_missing_keywords(content, profile.keywords, taxonomy)
        optimized = normalize_section_headers(optimized, taxonomy)
        optimized = normalize_characters(optimized)
        return simplify_dates(optimized)
    except Exception as exc:  # noqa: BLE001 - formatting is best effort, never fatal
        logger.warning("ats_optimize_failed: %s", exc)
        return content
