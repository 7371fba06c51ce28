import unittest
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from careerpilot.core.scoring import get_scoring_config, get_scoring_value


class ScoringConfigTests(unittest.TestCase):
    def test_loader_and_value_lookup(self):
        config = get_scoring_config()
        self.assertIsInstance(config, dict)
        self.assertEqual(get_scoring_value("match.weights.keyword"), 0.4)
        self.assertEqual(get_scoring_value("ats.max_inserted_keywords"), 15)

    def test_weights_sum_to_one(self):
        weights = get_scoring_value("match.weights")
        self.assertAlmostEqual(sum(weights.values()), 1.0)

    def test_missing_path_returns_default(self):
        self.assertEqual(get_scoring_value("match.nope.value", 5), 5)
        self.assertIsNone(get_scoring_value(""))


if __name__ == "__main__":
    unittest.main()
