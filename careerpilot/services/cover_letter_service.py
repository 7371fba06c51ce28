from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from careerpilot.ai.completion_client import CompletionClient
from careerpilot.features.ats_optimizer import resume_sections
from careerpilot.features.signal_extractor import extract_skills
from careerpilot.schemas.documents import CompanyCulture, CoverLetterResponse, CoverLetterResult
from careerpilot.services.run_log import run_logged_completion
from careerpilot.services.usage_tracker import UsageTracker
from careerpilot.storage.document_store import DocumentStore

logger = logging.getLogger(__name__)

FEATURE = "cover_letter_generation"
DEFAULT_EXPERIENCE = "Relevant experience in software development"

_EXPERIENCE_LINES = 3
_EDUCATION_LINES = 2
_SKILLS_SHOWN = 10

_VALUE_KEYWORDS: dict[str, tuple[str, ...]] = {
    "innovation": ("innovative", "cutting-edge", "pioneering"),
    "collaboration": ("team", "collaborate", "together"),
    "diversity": ("diverse", "inclusive", "equity"),
    "growth": ("growth", "learning", "development"),
    "impact": ("impact", "mission", "meaningful"),
}


def word_count(text: str) -> int:
    return len(text.split())


def analyze_company_culture(description: str) -> CompanyCulture:
    lowered = (description or "").lower()
    if "startup" in lowered or "fast-paced" in lowered:
        size, culture = "startup", "innovative, fast-paced, dynamic"
    elif "enterprise" in lowered or "fortune" in lowered:
        size, culture = "large", "established, structured, professional"
    else:
        size, culture = "medium", "collaborative, growth-oriented"
    values = [value for value, keywords in _VALUE_KEYWORDS.items() if any(keyword in lowered for keyword in keywords)]
    return CompanyCulture(size=size, culture=culture, values=values)


def extract_candidate_info(resume_text: str | None) -> dict[str, list[str]]:
    info: dict[str, list[str]] = {"experience": [], "education": [], "skills": []}
    if resume_text:
        sections = resume_sections(resume_text)
        experience = sections.get("PROFESSIONAL EXPERIENCE", [])
        education = sections.get("EDUCATION", [])
        skills_text = "\n".join(sections.get("TECHNICAL SKILLS", []))
        info["experience"] = [line for line in experience if len(line) > 20][:_EXPERIENCE_LINES]
        info["education"] = [line for line in education if len(line) > 10][:_EDUCATION_LINES]
        info["skills"] = extract_skills(skills_text)[:_SKILLS_SHOWN] if skills_text else []
    if not info["experience"]:
        info["experience"] = [DEFAULT_EXPERIENCE]
    return info


def build_candidate_info(
    info: dict[str, list[str]],
    *,
    name: str | None = None,
    email: str | None = None,
    visa_status: str | None = None,
) -> str:
    parts: list[str] = []
    if name:
        parts.append(f"Name: {name}\n")
    if email:
        parts.append(f"Email: {email}\n")
    if info.get("experience"):
        parts.append("\nRelevant Experience:\n" + "\n".join(info["experience"]) + "\n")
    if info.get("education"):
        parts.append("\nEducation:\n" + "\n".join(info["education"]) + "\n")
    if info.get("skills"):
        parts.append(f"\nKey Skills: {', '.join(info['skills'])}\n")
    if visa_status:
        parts.append(f"\nVisa Status: {visa_status} (authorized to work)\n")
    return "".join(parts)


def _to_response(row: dict[str, Any]) -> CoverLetterResponse:
    return CoverLetterResponse.model_validate(row)


def generate_cover_letter(
    *,
    store: DocumentStore,
    usage: UsageTracker,
    client: CompletionClient,
    user_id: str,
    job_id: str,
    resume_id: str | None = None,
    tone: str = "professional",
    candidate: dict[str, str | None] | None = None,
) -> CoverLetterResult:
    logger.info("cover_letter_started user=%s job=%s tone=%s", user_id, job_id, tone)
    usage.ensure_can_use(user_id, FEATURE)

    job = store.get_job(user_id, job_id)
    resume_text = store.get_resume(user_id, resume_id)["original_text"] if resume_id else None
    candidate = {key: value for key, value in (candidate or {}).items() if value}
    info = extract_candidate_info(resume_text)
    culture = analyze_company_culture(job["description"])

    result = run_logged_completion(
        lambda: client.generate_cover_letter(
            company=job["company"],
            position=job["title"],
            description=job["description"],
            candidate_info=build_candidate_info(
                info,
                name=candidate.get("name"),
                email=candidate.get("email"),
                visa_status=candidate.get("visa_status"),
            ),
            tone=tone,
        ),
        feature=FEATURE,
        user_id=user_id,
        model=client.default_model,
    )
    words = word_count(result.content)

    saved = store.create_cover_letter(
        user_id,
        job_id=job_id,
        resume_id=resume_id,
        content=result.content,
        job_title=job["title"],
        company=job["company"],
        tone=tone,
        metadata={
            "word_count": words,
            "tokens_used": result.tokens_used.total,
            "estimated_cost": result.estimated_cost,
            "model": result.model,
            "generated_at": datetime.now(timezone.utc).isoformat(),
            "company_culture": culture.model_dump(),
            "candidate": candidate,
        },
    )
    usage.increment(user_id, FEATURE)

    logger.info("cover_letter_completed user=%s id=%s words=%s", user_id, saved["id"], words)
    return CoverLetterResult(
        cover_letter=_to_response(saved),
        word_count=words,
        tokens_used=result.tokens_used.total,
        estimated_cost=result.estimated_cost,
        company_culture=culture,
    )


def regenerate_with_tone(
    *,
    store: DocumentStore,
    usage: UsageTracker,
    client: CompletionClient,
    user_id: str,
    cover_letter_id: str,
    tone: str,
) -> CoverLetterResult:
    existing = store.get_cover_letter(user_id, cover_letter_id)
    logger.info("cover_letter_regenerate id=%s tone=%s", cover_letter_id, tone)
    return generate_cover_letter(
        store=store,
        usage=usage,
        client=client,
        user_id=user_id,
        job_id=existing["job_id"],
        resume_id=existing["resume_id"],
        tone=tone,
        candidate=existing["metadata"].get("candidate"),
    )


def get_cover_letter_history(store: DocumentStore, user_id: str, limit: int = 10) -> list[CoverLetterResponse]:
    return [_to_response(row) for row in store.list_cover_letters(user_id, limit=limit)]


def get_cover_letter(store: DocumentStore, user_id: str, cover_letter_id: str) -> CoverLetterResponse:
    return _to_response(store.get_cover_letter(user_id, cover_letter_id))


def update_cover_letter(store: DocumentStore, user_id: str, cover_letter_id: str, content: str) -> CoverLetterResponse:
    existing = store.get_cover_letter(user_id, cover_letter_id)
    metadata = dict(existing["metadata"])
    metadata["word_count"] = word_count(content)
    metadata["edited_at"] = datetime.now(timezone.utc).isoformat()
    updated = store.update_cover_letter(
        user_id,
        cover_letter_id,
        content=content,
        metadata=metadata,
        generated_by_ai=False,
    )
    logger.info("cover_letter_updated id=%s words=%s", cover_letter_id, metadata["word_count"])
    return _to_response(updated)


def delete_cover_letter(store: DocumentStore, user_id: str, cover_letter_id: str) -> None:
    store.delete_cover_letter(user_id, cover_letter_id)
    logger.info("cover_letter_deleted id=%s", cover_letter_id)
