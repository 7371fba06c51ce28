import sys
import tempfile
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from careerpilot.taxonomy import SignalTaxonomy, get_signal_taxonomy  # noqa: E402


class SignalTaxonomyTests(unittest.TestCase):
    def test_header_synonyms_resolve_to_canonical_names(self):
        lookup = get_signal_taxonomy().header_lookup()
        self.assertEqual(lookup["work history"], "PROFESSIONAL EXPERIENCE")
        self.assertEqual(lookup["key skills"], "TECHNICAL SKILLS")
        self.assertEqual(lookup["technical skills"], "TECHNICAL SKILLS")
        self.assertEqual(lookup["education"], "EDUCATION")

    def test_catalog_skills_flatten_in_group_order(self):
        skills = get_signal_taxonomy().catalog_skills()
        self.assertEqual(skills[0], "javascript")
        self.assertIn("github actions", skills)

    def test_missing_sections_are_rejected(self):
        with tempfile.TemporaryDirectory() as tmp_dir:
            path = Path(tmp_dir) / "terms.yaml"
            path.write_text("technical_skills: [python]\n", encoding="utf-8")
            with self.assertRaises(RuntimeError) as ctx:
                SignalTaxonomy(path)
        self.assertIn("soft_skills", str(ctx.exception))


if __name__ == "__main__":
    unittest.main()
