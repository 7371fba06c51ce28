from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

ExperienceLevel = Literal["Entry Level", "Mid-Level", "Senior"]


class JobProfile(BaseModel):
    keywords: list[str] = Field(default_factory=list)
    required_skills: list[str] = Field(default_factory=list)
    preferred_skills: list[str] = Field(default_factory=list)
    qualifications: list[str] = Field(default_factory=list)
    responsibilities: list[str] = Field(default_factory=list)
    company_name: str = ""
    job_title: str = ""
    experience_level: ExperienceLevel = "Mid-Level"
    industry_keywords: list[str] = Field(default_factory=list)


class MatchScore(BaseModel):
    overall_score: int = Field(ge=0, le=100)
    keyword_match: int = Field(ge=0, le=100)
    skills_match: int = Field(ge=0, le=100)
    experience_match: int = Field(ge=0, le=100)
    education_match: int = Field(ge=0, le=100)
    matched_keywords: list[str] = Field(default_factory=list)
    missing_keywords: list[str] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)
    degraded: bool = False
    degraded_reason: str | None = None
