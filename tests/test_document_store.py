import sys
import unittest
from datetime import datetime, timezone
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from careerpilot.storage import DocumentNotFoundError, DocumentStore  # noqa: E402


class DocumentStoreTests(unittest.TestCase):
    def setUp(self):
        self.store = DocumentStore(":memory:")

    def tearDown(self):
        self.store.close()

    def test_resumes_are_scoped_to_owner(self):
        resume = self.store.create_resume("alice", file_name="cv.txt", original_text="Python", metadata={"word_count": 1})
        self.assertEqual(self.store.get_resume("alice", resume["id"])["metadata"], {"word_count": 1})
        self.assertEqual(resume["kind"], "BASE")

        with self.assertRaises(DocumentNotFoundError) as ctx:
            self.store.get_resume("bob", resume["id"])
        self.assertEqual(str(ctx.exception), "Resume not found")
        with self.assertRaises(DocumentNotFoundError):
            self.store.delete_resume("bob", resume["id"])
        self.assertEqual(self.store.list_resumes("bob"), [])

    def test_update_and_delete_resume(self):
        resume = self.store.create_resume("alice", file_name="cv.txt", original_text="Python")
        updated = self.store.update_resume("alice", resume["id"], original_text="Python, Go")
        self.assertEqual(updated["original_text"], "Python, Go")
        self.assertEqual(updated["file_name"], "cv.txt")

        self.store.delete_resume("alice", resume["id"])
        with self.assertRaises(DocumentNotFoundError):
            self.store.get_resume("alice", resume["id"])

    def test_list_filters_by_kind_newest_first(self):
        base = self.store.create_resume("alice", file_name="cv.txt", original_text="Python")
        first = self.store.create_resume(
            "alice", file_name="a.pdf", original_text="A", kind="TAILORED", base_resume_id=base["id"], job_id="j1"
        )
        second = self.store.create_resume(
            "alice", file_name="b.pdf", original_text="B", kind="TAILORED", base_resume_id=base["id"], job_id="j2"
        )
        tailored = self.store.list_resumes("alice", kind="TAILORED")
        self.assertEqual([row["id"] for row in tailored], [second["id"], first["id"]])
        self.assertEqual(len(self.store.list_resumes("alice")), 3)
        self.assertEqual(len(self.store.list_resumes("alice", limit=1)), 1)

    def test_jobs(self):
        job = self.store.create_job(
            "alice",
            title="Engineer",
            company="Acme",
            description="Build things",
            requirements=["React", "AWS"],
        )
        self.assertEqual(self.store.get_job("alice", job["id"])["requirements"], ["React", "AWS"])
        with self.assertRaises(DocumentNotFoundError):
            self.store.get_job("bob", job["id"])

    def test_cover_letters(self):
        letter = self.store.create_cover_letter(
            "alice",
            job_id="j1",
            resume_id=None,
            content="Dear team",
            job_title="Engineer",
            company="Acme",
            tone="professional",
            metadata={"word_count": 2},
        )
        self.assertTrue(letter["generated_by_ai"])

        updated = self.store.update_cover_letter(
            "alice", letter["id"], content="Hello there team", metadata={"word_count": 3}, generated_by_ai=False
        )
        self.assertFalse(updated["generated_by_ai"])
        self.assertEqual(updated["metadata"]["word_count"], 3)
        self.assertEqual(len(self.store.list_cover_letters("alice")), 1)

        with self.assertRaises(DocumentNotFoundError):
            self.store.get_cover_letter("bob", letter["id"])
        self.store.delete_cover_letter("alice", letter["id"])
        self.assertEqual(self.store.list_cover_letters("alice"), [])

    def test_plans_and_usage_counters(self):
        self.assertEqual(self.store.get_plan("alice"), "FREE")
        self.store.set_plan("alice", "PREMIUM")
        self.assertTrue(self.store.is_premium("alice"))
        self.store.set_plan("alice", "FREE")
        self.assertFalse(self.store.is_premium("alice"))

        self.assertIsNone(self.store.get_usage_counter("alice", "resume_tailoring"))
        reset = datetime(2026, 3, 1, 8, 30, tzinfo=timezone.utc)
        self.store.save_usage_counter("alice", "resume_tailoring", count=2, last_reset=reset, last_used=None)
        counter = self.store.get_usage_counter("alice", "resume_tailoring")
        self.assertEqual(counter, {"count": 2, "last_reset": reset, "last_used": None})


if __name__ == "__main__":
    unittest.main()
