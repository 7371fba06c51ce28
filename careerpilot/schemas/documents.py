from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

from careerpilot.ai.prompts import CoverLetterTone
from careerpilot.schemas.profile import JobProfile, MatchScore

ResumeKind = Literal["BASE", "TAILORED"]
AccountPlan = Literal["FREE", "PREMIUM"]


class ResumeCreateRequest(BaseModel):
    file_name: str = Field(default="resume.txt", min_length=1, max_length=255)
    text: str = Field(min_length=1, max_length=100000)

    @field_validator("text")
    @classmethod
    def _validate_text(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("text must not be blank")
        return value


class ResumeUpdateRequest(BaseModel):
    text: str = Field(min_length=1, max_length=100000)
    file_name: str | None = Field(default=None, min_length=1, max_length=255)


class ResumeResponse(BaseModel):
    id: str
    file_name: str
    kind: ResumeKind
    original_text: str
    base_resume_id: str | None = None
    job_id: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime
    updated_at: datetime


class ResumeListResponse(BaseModel):
    items: list[ResumeResponse] = Field(default_factory=list)


class JobCreateRequest(BaseModel):
    title: str = Field(min_length=1, max_length=300)
    company: str = Field(min_length=1, max_length=300)
    description: str = Field(min_length=1, max_length=100000)
    requirements: list[str] = Field(default_factory=list, max_length=200)
    location: str | None = Field(default=None, max_length=300)
    url: str | None = Field(default=None, max_length=2000)


class JobResponse(BaseModel):
    id: str
    title: str
    company: str
    description: str
    requirements: list[str] = Field(default_factory=list)
    location: str | None = None
    url: str | None = None
    created_at: datetime


class JobReference(BaseModel):
    job_id: str = Field(min_length=1, max_length=64)


class MatchScoreResponse(BaseModel):
    resume_id: str
    job_id: str
    job_analysis: JobProfile
    score: MatchScore


class TailoringResult(BaseModel):
    resume_id: str
    original_resume_id: str
    file_name: str
    tailored_content: str
    ats_score: MatchScore
    baseline_score: MatchScore
    job_analysis: JobProfile
    improvements: list[str] = Field(default_factory=list)
    tokens_used: int = Field(ge=0)
    estimated_cost: float = Field(ge=0.0)
    model: str


class CoverLetterCreateRequest(BaseModel):
    job_id: str = Field(min_length=1, max_length=64)
    resume_id: str | None = Field(default=None, max_length=64)
    tone: CoverLetterTone = "professional"
    candidate_name: str | None = Field(default=None, max_length=200)
    candidate_email: str | None = Field(default=None, max_length=320)
    visa_status: str | None = Field(default=None, max_length=100)


class CoverLetterRegenerateRequest(BaseModel):
    tone: CoverLetterTone = "professional"


class CoverLetterUpdateRequest(BaseModel):
    content: str = Field(min_length=1, max_length=20000)


class CompanyCulture(BaseModel):
    size: Literal["startup", "medium", "large"]
    culture: str
    values: list[str] = Field(default_factory=list)


class CoverLetterResponse(BaseModel):
    id: str
    job_id: str
    resume_id: str | None = None
    content: str
    job_title: str
    company: str
    tone: str
    generated_by_ai: bool
    metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime
    updated_at: datetime


class CoverLetterListResponse(BaseModel):
    items: list[CoverLetterResponse] = Field(default_factory=list)


class CoverLetterResult(BaseModel):
    cover_letter: CoverLetterResponse
    word_count: int = Field(ge=0)
    tokens_used: int = Field(ge=0)
    estimated_cost: float = Field(ge=0.0)
    company_culture: CompanyCulture


class FeatureUsage(BaseModel):
    used: int = Field(ge=0)
    limit: int = Field(ge=0)
    remaining: int = Field(ge=0)
    resets_at: datetime
    can_use: bool


class UsageResponse(BaseModel):
    subscription_plan: AccountPlan
    resume_tailoring: FeatureUsage
    cover_letter_generation: FeatureUsage
