from .ats_optimizer import optimize_for_ats
from .job_analyzer import analyze_job, determine_experience_level
from .match_scorer import score_match, weighted_overall
from .signal_extractor import extract_industry_keywords, extract_keywords, extract_skills

__all__ = [
    "analyze_job",
    "determine_experience_level",
    "extract_industry_keywords",
    "extract_keywords",
    "extract_skills",
    "optimize_for_ats",
    "score_match",
    "weighted_overall",
]
