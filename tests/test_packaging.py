import re
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
PACKAGE_ROOT = PROJECT_ROOT / "careerpilot"


def _requirement_names(block: str) -> set[str]:
    names = set()
    for requirement in re.findall(r'"([^"]+)"', block):
        names.add(re.split(r"[\[<>=!~ ]", requirement, maxsplit=1)[0].lower())
    return names


class PackagingTests(unittest.TestCase):
    def setUp(self):
        self.pyproject = (PROJECT_ROOT / "pyproject.toml").read_text(encoding="utf-8")

    def test_test_only_libraries_stay_out_of_runtime_dependencies(self):
        runtime = re.search(r"^dependencies = \[(.*?)^\]", self.pyproject, re.S | re.M)
        test_extra = re.search(r"^test = \[(.*?)^\]", self.pyproject, re.S | re.M)
        self.assertIsNotNone(runtime)
        self.assertIsNotNone(test_extra)
        self.assertNotIn("httpx", _requirement_names(runtime.group(1)))
        self.assertNotIn("pytest", _requirement_names(runtime.group(1)))
        self.assertIn("httpx", _requirement_names(test_extra.group(1)))

    def test_package_code_does_not_import_httpx(self):
        for path in PACKAGE_ROOT.rglob("*.py"):
            source = path.read_text(encoding="utf-8")
            self.assertIsNone(re.search(r"^\s*(import|from)\s+httpx\b", source, re.M), msg=str(path))


if __name__ == "__main__":
    unittest.main()
