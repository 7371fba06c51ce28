from __future__ import annotations

from typing import Literal

CoverLetterTone = Literal["professional", "enthusiastic", "conservative", "creative"]

_TONE_GUIDANCE: dict[str, str] = {
    "professional": "Balanced, confident, and polished. Use formal language but remain approachable.",
    "enthusiastic": (
        "Energetic and passionate. Show genuine excitement about the opportunity "
        "while maintaining professionalism."
    ),
    "conservative": (
        "Very formal and traditional. Use corporate language and maintain distance. "
        "Appropriate for traditional industries like finance or law."
    ),
    "creative": (
        "Unique and personality-driven. Take calculated risks to stand out. "
        "Appropriate for startups, creative industries, or innovative companies."
    ),
}


def tone_guidance(tone: str) -> str:
    return _TONE_GUIDANCE.get((tone or "").lower(), _TONE_GUIDANCE["professional"])


def build_resume_tailoring_prompt(
    resume_text: str,
    job_description: str,
    key_requirements: list[str],
) -> str:
    numbered = "\n".join(f"{index}. {item}" for index, item in enumerate(key_requirements, start=1))
    return f"""You are an expert resume writer and ATS optimization specialist with years of experience helping international students land their dream jobs.

TASK: Tailor the following resume for the specific job posting below. Create a compelling, ATS-optimized version that maximizes the candidate's chances.

REQUIREMENTS:
1. Maintain all factual information (dates, companies, titles, education, locations)
2. Rewrite bullet points and descriptions to highlight relevant experience
3. Incorporate keywords from the job description naturally throughout
4. Optimize for ATS (Applicant Tracking Systems) - use standard formatting and terminology
5. Keep professional tone and clear structure
6. Emphasize transferable skills that match job requirements
7. For international students: subtly highlight adaptability, cross-cultural communication, and diverse perspectives
8. Use action verbs and quantify achievements where possible
9. Ensure the resume flows naturally and reads authentically

ORIGINAL RESUME:
{resume_text}

JOB POSTING:
{job_description}

KEY REQUIREMENTS TO EMPHASIZE:
{numbered}

OUTPUT FORMAT:
Provide the tailored resume in clean, ATS-friendly plain text format.
Use standard section headers (SUMMARY, EXPERIENCE, EDUCATION, SKILLS, etc.).
Maintain proper formatting with clear sections.
Do not add any explanations or meta-commentary - only output the resume itself."""


def build_cover_letter_prompt(
    *,
    company: str,
    position: str,
    description: str,
    candidate_info: str,
    tone: str,
) -> str:
    return f"""You are an expert cover letter writer specializing in helping international students craft compelling job applications.

TASK: Write a compelling, personalized cover letter for the following job application.

JOB DETAILS:
Company: {company}
Position: {position}

Job Description:
{description}

CANDIDATE BACKGROUND:
{candidate_info}

TONE: {tone.upper()}
{tone_guidance(tone)}

REQUIREMENTS:
1. Opening (1 paragraph): Hook the reader with most relevant experience or achievement
2. Body (2 paragraphs):
   - Match key qualifications to job requirements with specific examples
   - Show understanding of company/role and explain why you're a great fit
3. International student considerations:
   - Briefly mention work authorization status naturally (if applicable)
   - Highlight unique perspectives and adaptability
4. Closing (1 paragraph): Strong call to action expressing enthusiasm
5. Length: 3-4 paragraphs, approximately 300-400 words
6. Avoid clichés like "I am writing to apply" or "Please find my resume attached"
7. Be specific, authentic, and memorable
8. Show genuine interest in the company and role

OUTPUT FORMAT:
Provide the cover letter in plain text format, ready to use.
Do not include [Date], [Your Name], [Your Address], or [Hiring Manager] placeholders.
Start directly with the opening paragraph.
Do not add any explanations or meta-commentary - only output the cover letter itself."""
