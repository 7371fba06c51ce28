"""Resume tailoring pipeline.

quota check -> load documents -> analyze job -> generate -> optimize -> score
-> save -> increment usage. The quota gate runs before any completion call and
usage is only counted once the tailored resume is saved.
"""
from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from typing import Any

from careerpilot.ai.completion_client import CompletionClient
from careerpilot.features.ats_optimizer import optimize_for_ats
from careerpilot.features.job_analyzer import analyze_job
from careerpilot.features.match_scorer import score_match
from careerpilot.features.signal_extractor import contains_term, extract_keywords
from careerpilot.schemas.documents import MatchScoreResponse, TailoringResult
from careerpilot.schemas.profile import JobProfile
from careerpilot.services.run_log import run_logged_completion
from careerpilot.services.usage_tracker import UsageTracker
from careerpilot.storage.document_store import DocumentStore
from careerpilot.taxonomy import get_signal_taxonomy

logger = logging.getLogger(__name__)

FEATURE = "resume_tailoring"
_METRIC_RE = re.compile(r"\d+%|\d+\+")
_WHITESPACE_RE = re.compile(r"\s+")


class EmptyResumeError(ValueError):
    pass


def analyze_saved_job(job: dict[str, Any]) -> JobProfile:
    return analyze_job(job["title"], job["company"], job["description"], job.get("requirements") or [])


def tailored_file_name(original_file_name: str, company: str) -> str:
    base = (original_file_name or "resume").split(".")[0] or "resume"
    return f"{base}_tailored_{_WHITESPACE_RE.sub('_', company.strip())}.pdf"


def word_count(text: str) -> int:
    return len(text.split())


def extract_improvements(tailored_content: str, original_content: str) -> list[str]:
    improvements: list[str] = []

    original_keywords = {keyword.lower() for keyword in extract_keywords(original_content)}
    new_keywords = [keyword for keyword in extract_keywords(tailored_content) if keyword.lower() not in original_keywords]
    if new_keywords:
        improvements.append(f"Added {len(new_keywords)} relevant keywords: {', '.join(new_keywords[:5])}")

    added_metrics = len(_METRIC_RE.findall(tailored_content)) - len(_METRIC_RE.findall(original_content))
    if added_metrics > 0:
        improvements.append(f"Added {added_metrics} quantifiable metrics")

    verbs = get_signal_taxonomy().action_verbs
    added_verbs = sum(1 for verb in verbs if contains_term(tailored_content, verb)) - sum(
        1 for verb in verbs if contains_term(original_content, verb)
    )
    if added_verbs > 0:
        improvements.append(f"Enhanced with {added_verbs} strong action verbs")

    improvements.append("Reformatted bullet points for ATS optimization")
    improvements.append("Aligned experience descriptions with job requirements")
    return improvements


def score_resume_against_job(
    *,
    store: DocumentStore,
    user_id: str,
    resume_id: str,
    job_id: str,
) -> MatchScoreResponse:
    resume = store.get_resume(user_id, resume_id)
    job = store.get_job(user_id, job_id)
    profile = analyze_saved_job(job)
    return MatchScoreResponse(
        resume_id=resume_id,
        job_id=job_id,
        job_analysis=profile,
        score=score_match(resume["original_text"], profile),
    )


def tailor_resume_for_job(
    *,
    store: DocumentStore,
    usage: UsageTracker,
    client: CompletionClient,
    user_id: str,
    resume_id: str,
    job_id: str,
) -> TailoringResult:
    logger.info("tailoring_started user=%s resume=%s job=%s", user_id, resume_id, job_id)
    usage.ensure_can_use(user_id, FEATURE)

    resume = store.get_resume(user_id, resume_id)
    job = store.get_job(user_id, job_id)
    resume_text = resume["original_text"]
    if not resume_text.strip():
        raise EmptyResumeError("Could not extract text from resume")

    profile = analyze_saved_job(job)
    baseline = score_match(resume_text, profile)

    result = run_logged_completion(
        lambda: client.generate_resume_tailoring(resume_text, job["description"], profile.keywords),
        feature=FEATURE,
        user_id=user_id,
        model=client.default_model,
    )
    improvements = extract_improvements(result.content, resume_text)
    optimized = optimize_for_ats(result.content, profile)
    ats_score = score_match(optimized, profile)

    file_name = tailored_file_name(resume["file_name"], job["company"])
    saved = store.create_resume(
        user_id,
        file_name=file_name,
        original_text=optimized,
        kind="TAILORED",
        base_resume_id=resume_id,
        job_id=job_id,
        metadata={
            "word_count": word_count(optimized),
            "keywords": profile.keywords,
            "ats_score": ats_score.overall_score,
            "baseline_score": baseline.overall_score,
            "tokens_used": result.tokens_used.total,
            "estimated_cost": result.estimated_cost,
            "model": result.model,
            "generated_at": datetime.now(timezone.utc).isoformat(),
            "tailored_for": {"job_title": job["title"], "company": job["company"], "job_id": job_id},
        },
    )
    usage.increment(user_id, FEATURE)

    logger.info(
        "tailoring_completed user=%s resume=%s baseline=%s final=%s tokens=%s",
        user_id,
        saved["id"],
        baseline.overall_score,
        ats_score.overall_score,
        result.tokens_used.total,
    )
    return TailoringResult(
        resume_id=saved["id"],
        original_resume_id=resume_id,
        file_name=file_name,
        tailored_content=optimized,
        ats_score=ats_score,
        baseline_score=baseline,
        job_analysis=profile,
        improvements=improvements,
        tokens_used=result.tokens_used.total,
        estimated_cost=result.estimated_cost,
        model=result.model,
    )


def get_tailoring_history(store: DocumentStore, user_id: str, limit: int = 10) -> list[dict[str, Any]]:
    return store.list_resumes(user_id, kind="TAILORED", limit=limit)
