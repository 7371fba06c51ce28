import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from careerpilot.features.job_analyzer import (  # noqa: E402
    analyze_job,
    bucket_requirements,
    determine_experience_level,
    extract_qualifications,
    extract_requirement_lines,
    extract_responsibilities,
)

DESCRIPTION = (
    "Senior Frontend Engineer\n"
    "Requirements:\n"
    "- 5+ years of React experience required\n"
    "- Experience with TypeScript is a plus\n"
    "Responsibilities:\n"
    "- Build accessible user interfaces\n"
    "- Mentor other engineers on the team\n"
    "Qualifications:\n"
    "- Bachelor degree in Computer Science\n"
    "Benefits:\n"
    "- Remote work"
)


class JobAnalyzerTests(unittest.TestCase):
    def test_sections_are_split_on_markers(self):
        self.assertEqual(
            extract_requirement_lines(DESCRIPTION),
            ["- 5+ years of React experience required", "- Experience with TypeScript is a plus"],
        )
        self.assertEqual(
            extract_responsibilities(DESCRIPTION),
            ["- Build accessible user interfaces", "- Mentor other engineers on the team"],
        )
        self.assertEqual(extract_qualifications(DESCRIPTION), ["- Bachelor degree in Computer Science"])

    def test_missing_markers_yield_empty_sections(self):
        self.assertEqual(extract_requirement_lines("Build things with us."), [])
        self.assertEqual(extract_qualifications(""), [])

    def test_requirement_buckets(self):
        required, preferred = bucket_requirements(
            ["Python required", "Docker is nice to have", "SQL", "Must have Go", "Kafka a plus", ""]
        )
        self.assertEqual(required, ["Python required", "SQL", "Must have Go"])
        self.assertEqual(preferred, ["Docker is nice to have", "Kafka a plus"])

    def test_experience_level(self):
        self.assertEqual(determine_experience_level("Looking for 5+ years of Python"), "Senior")
        self.assertEqual(determine_experience_level("Junior developer role"), "Entry Level")
        self.assertEqual(determine_experience_level("3-5 years building APIs"), "Mid-Level")
        self.assertEqual(determine_experience_level("Build APIs"), "Mid-Level")

    def test_entry_level_phrases_win_over_senior(self):
        self.assertEqual(determine_experience_level("Junior role, senior mentors"), "Entry Level")

    def test_analyze_job_profile(self):
        profile = analyze_job("Senior Frontend Engineer", "Acme", DESCRIPTION)
        self.assertEqual(profile.job_title, "Senior Frontend Engineer")
        self.assertEqual(profile.company_name, "Acme")
        self.assertEqual(profile.experience_level, "Senior")
        self.assertEqual(profile.required_skills, ["- 5+ years of React experience required"])
        self.assertEqual(profile.preferred_skills, ["- Experience with TypeScript is a plus"])
        self.assertIn("React", profile.keywords)
        self.assertIn("TypeScript", profile.keywords)

    def test_short_structured_requirements_become_keywords(self):
        profile = analyze_job("Frontend Developer", "Acme", "Build web apps.", ["React", "TypeScript", "AWS"])
        for keyword in ("React", "TypeScript", "AWS"):
            self.assertIn(keyword, profile.keywords)
        self.assertEqual(profile.required_skills, ["React", "TypeScript", "AWS"])
        self.assertEqual(profile.preferred_skills, [])
        self.assertEqual(profile.experience_level, "Mid-Level")

    def test_keywords_are_unique_case_insensitively(self):
        profile = analyze_job("Dev", "Acme", "We use react daily.", ["React"])
        self.assertEqual([item.lower() for item in profile.keywords].count("react"), 1)


if __name__ == "__main__":
    unittest.main()
