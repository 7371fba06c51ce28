import sys
import unittest
from dataclasses import replace
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import patch

import httpx
import openai

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from careerpilot.ai.completion_client import CompletionAuthError, CompletionClient  # noqa: E402
from careerpilot.ai.config import AIConfig  # noqa: E402
from careerpilot.core.config import settings  # noqa: E402
from careerpilot.services import cover_letter_service  # noqa: E402
from careerpilot.services.tailoring_service import (  # noqa: E402
    EmptyResumeError,
    extract_improvements,
    get_tailoring_history,
    score_resume_against_job,
    tailor_resume_for_job,
    tailored_file_name,
)
from careerpilot.services.usage_tracker import UsageLimitExceeded, UsageTracker  # noqa: E402
from careerpilot.storage import DocumentNotFoundError, DocumentStore  # noqa: E402

LIMITS = {
    "FREE": {"resume_tailoring": 2, "cover_letter_generation": 3},
    "PREMIUM": {"resume_tailoring": 50, "cover_letter_generation": 50},
}
TAILORED = (
    "SUMMARY\n"
    "Frontend developer\n"
    "Skills: JavaScript, React\n"
    "EXPERIENCE\n"
    "• Developed UI 05/2020, improved load time by 30%"
)
LETTER = "Dear Hiring Manager, I am excited to apply."
RESUME_WITH_SECTIONS = (
    "EXPERIENCE\n"
    "Software Engineer at Acme building payment APIs\n"
    "EDUCATION\n"
    "BSc Computer Science, MIT\n"
    "SKILLS\n"
    "Python, Docker, Jira"
)


class FakeCompletions:
    def __init__(self, outcomes):
        self.outcomes = list(outcomes)
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


def completion_response(content: str):
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=content), finish_reason="stop")],
        usage=SimpleNamespace(prompt_tokens=900, completion_tokens=600, total_tokens=1500),
    )


def make_client(outcomes):
    completions = FakeCompletions(outcomes)
    config = AIConfig(api_key="sk-test", model="gpt-4o-mini", max_tokens=3000, retries=1, timeout_s=5.0)
    sdk = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    return CompletionClient(sdk, config, sleep=lambda _: None), completions


class ServiceTestCase(unittest.TestCase):
    def setUp(self):
        patcher = patch("careerpilot.analytics.db.settings", replace(settings, analytics_enabled=False))
        patcher.start()
        self.addCleanup(patcher.stop)
        self.store = DocumentStore(":memory:")
        self.addCleanup(self.store.close)
        self.usage = UsageTracker(self.store, limits=LIMITS)
        self.resume = self.store.create_resume("alice", file_name="jane.txt", original_text="Skills: JavaScript, React")
        self.job = self.store.create_job(
            "alice",
            title="Frontend Developer",
            company="Acme Corp",
            description="Join our fast-paced startup team to make an impact.",
            requirements=["React", "TypeScript", "AWS"],
        )


class TailoringServiceTests(ServiceTestCase):
    def _tailor(self, client, resume_id=None, user_id="alice"):
        return tailor_resume_for_job(
            store=self.store,
            usage=self.usage,
            client=client,
            user_id=user_id,
            resume_id=resume_id or self.resume["id"],
            job_id=self.job["id"],
        )

    def test_tailoring_pipeline(self):
        client, completions = make_client([completion_response(TAILORED)])
        result = self._tailor(client)

        self.assertEqual(result.file_name, "jane_tailored_Acme_Corp.pdf")
        self.assertIn("TECHNICAL SKILLS: JavaScript, React, TypeScript, AWS", result.tailored_content)
        self.assertIn("- Developed UI 2020", result.tailored_content)
        self.assertEqual(result.baseline_score.keyword_match, 33)
        self.assertEqual(result.ats_score.keyword_match, 100)
        self.assertGreater(result.ats_score.overall_score, result.baseline_score.overall_score)
        self.assertEqual(result.tokens_used, 1500)
        self.assertEqual(result.model, "gpt-4o-mini")
        self.assertIn("Added 1 quantifiable metrics", result.improvements)
        self.assertIn("Enhanced with 2 strong action verbs", result.improvements)

        prompt = completions.calls[0]["messages"][0]["content"]
        self.assertIn("1. TypeScript\n2. React\n3. AWS", prompt)

        saved = self.store.get_resume("alice", result.resume_id)
        self.assertEqual(saved["kind"], "TAILORED")
        self.assertEqual(saved["base_resume_id"], self.resume["id"])
        self.assertEqual(saved["job_id"], self.job["id"])
        self.assertEqual(saved["metadata"]["ats_score"], result.ats_score.overall_score)
        self.assertEqual(saved["metadata"]["tailored_for"]["company"], "Acme Corp")
        self.assertEqual(self.usage.can_use("alice", "resume_tailoring").current_usage, 1)
        self.assertEqual([row["id"] for row in get_tailoring_history(self.store, "alice")], [result.resume_id])

    def test_quota_is_checked_before_generation(self):
        client, completions = make_client([completion_response(TAILORED), completion_response(TAILORED)])
        self._tailor(client)
        self._tailor(client)
        with self.assertRaises(UsageLimitExceeded):
            self._tailor(client)
        self.assertEqual(len(completions.calls), 2)

    def test_failed_generation_is_not_counted(self):
        request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
        error = openai.AuthenticationError("bad key", response=httpx.Response(401, request=request), body=None)
        client, _ = make_client([error])
        with self.assertRaises(CompletionAuthError):
            self._tailor(client)
        self.assertEqual(self.usage.can_use("alice", "resume_tailoring").current_usage, 0)
        self.assertEqual(self.store.list_resumes("alice", kind="TAILORED"), [])

    def test_other_users_documents_are_not_found(self):
        client, completions = make_client([])
        with self.assertRaises(DocumentNotFoundError):
            self._tailor(client, user_id="bob")
        self.assertEqual(completions.calls, [])

    def test_blank_resume_is_rejected(self):
        blank = self.store.create_resume("alice", file_name="blank.txt", original_text="   ")
        client, completions = make_client([])
        with self.assertRaises(EmptyResumeError):
            self._tailor(client, resume_id=blank["id"])
        self.assertEqual(completions.calls, [])

    def test_match_score_needs_no_completion(self):
        response = score_resume_against_job(
            store=self.store, user_id="alice", resume_id=self.resume["id"], job_id=self.job["id"]
        )
        self.assertEqual(response.score.matched_keywords, ["React"])
        self.assertEqual(response.score.missing_keywords, ["TypeScript", "AWS"])
        self.assertTrue(response.score.suggestions[0].startswith("Add more job-specific keywords. Missing: "))

    def test_file_name_and_improvements(self):
        self.assertEqual(tailored_file_name("my.resume.docx", " Big  Co "), "my_tailored_Big_Co.pdf")
        self.assertEqual(tailored_file_name("", "Acme"), "resume_tailored_Acme.pdf")

        improvements = extract_improvements("Developed React apps, improved load by 30%", "Built web apps")
        self.assertEqual(improvements[0], "Added 1 relevant keywords: React")
        self.assertEqual(improvements[-2:], [
            "Reformatted bullet points for ATS optimization",
            "Aligned experience descriptions with job requirements",
        ])


class CoverLetterServiceTests(ServiceTestCase):
    def _generate(self, client, **kwargs):
        return cover_letter_service.generate_cover_letter(
            store=self.store,
            usage=self.usage,
            client=client,
            user_id="alice",
            job_id=self.job["id"],
            **kwargs,
        )

    def test_generate_regenerate_and_edit(self):
        resume = self.store.create_resume("alice", file_name="cv.txt", original_text=RESUME_WITH_SECTIONS)
        client, completions = make_client([completion_response(LETTER), completion_response(LETTER)])

        result = self._generate(client, resume_id=resume["id"], candidate={"name": "Jane", "email": None})
        self.assertEqual(result.word_count, 8)
        self.assertEqual(result.cover_letter.tone, "professional")
        self.assertTrue(result.cover_letter.generated_by_ai)
        self.assertEqual(result.company_culture.size, "startup")
        self.assertEqual(result.company_culture.values, ["collaboration", "impact"])
        self.assertEqual(result.cover_letter.metadata["candidate"], {"name": "Jane"})

        prompt = completions.calls[0]["messages"][0]["content"]
        self.assertIn("Name: Jane", prompt)
        self.assertIn("Software Engineer at Acme building payment APIs", prompt)
        self.assertIn("Key Skills: python, docker, jira", prompt)
        self.assertNotIn("Email:", prompt)

        regenerated = cover_letter_service.regenerate_with_tone(
            store=self.store,
            usage=self.usage,
            client=client,
            user_id="alice",
            cover_letter_id=result.cover_letter.id,
            tone="creative",
        )
        self.assertEqual(regenerated.cover_letter.tone, "creative")
        self.assertNotEqual(regenerated.cover_letter.id, result.cover_letter.id)
        self.assertIn("Name: Jane", completions.calls[1]["messages"][0]["content"])
        self.assertIn("TONE: CREATIVE", completions.calls[1]["messages"][0]["content"])
        self.assertEqual(self.usage.can_use("alice", "cover_letter_generation").current_usage, 2)

        edited = cover_letter_service.update_cover_letter(self.store, "alice", result.cover_letter.id, "Short edited letter")
        self.assertFalse(edited.generated_by_ai)
        self.assertEqual(edited.metadata["word_count"], 3)
        self.assertIn("edited_at", edited.metadata)
        self.assertEqual(len(cover_letter_service.get_cover_letter_history(self.store, "alice")), 2)

        cover_letter_service.delete_cover_letter(self.store, "alice", result.cover_letter.id)
        with self.assertRaises(DocumentNotFoundError):
            cover_letter_service.get_cover_letter(self.store, "alice", result.cover_letter.id)

    def test_quota_blocks_generation(self):
        for _ in range(3):
            self.usage.increment("alice", "cover_letter_generation")
        client, completions = make_client([])
        with self.assertRaises(UsageLimitExceeded):
            self._generate(client)
        self.assertEqual(completions.calls, [])

    def test_company_culture(self):
        culture = cover_letter_service.analyze_company_culture("A Fortune 500 enterprise focused on learning")
        self.assertEqual(culture.size, "large")
        self.assertEqual(culture.values, ["growth"])
        self.assertEqual(cover_letter_service.analyze_company_culture("We build tools").size, "medium")

    def test_candidate_info_defaults(self):
        info = cover_letter_service.extract_candidate_info(None)
        self.assertEqual(info["experience"], [cover_letter_service.DEFAULT_EXPERIENCE])
        self.assertEqual(info["education"], [])
        self.assertEqual(info["skills"], [])

        text = cover_letter_service.build_candidate_info(info, visa_status="F-1 OPT")
        self.assertIn("Relevant Experience:", text)
        self.assertIn("Visa Status: F-1 OPT (authorized to work)", text)


if __name__ == "__main__":
    unittest.main()
