import sys
import unittest
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import patch

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from careerpilot.ai.pricing import DEFAULT_RATE, estimate_cost, rate_for_model  # noqa: E402
from careerpilot.ai.tokens import count_tokens, estimate_tokens, tokenizer_model  # noqa: E402


class PricingTests(unittest.TestCase):
    def test_rate_tiers_by_model_name(self):
        self.assertEqual(rate_for_model("gpt-4-turbo").name, "turbo")
        self.assertEqual(rate_for_model("gpt-4-1106-preview").name, "turbo")
        self.assertEqual(rate_for_model("gpt-4").name, "gpt-4")
        self.assertEqual(rate_for_model("gpt-4o-mini").name, "gpt-4")
        self.assertEqual(rate_for_model("gpt-3.5-turbo-0125").name, "economy")
        self.assertEqual(rate_for_model("some-other-model"), DEFAULT_RATE)

    def test_cost_per_thousand_tokens(self):
        self.assertEqual(estimate_cost(1000, 1000, "gpt-4-turbo"), 0.04)
        self.assertEqual(estimate_cost(1000, 1000, "gpt-4"), 0.09)
        self.assertEqual(estimate_cost(1000, 1000, "gpt-3.5-turbo"), 0.002)
        self.assertEqual(estimate_cost(1000, 1000, "unknown"), 0.04)

    def test_cost_is_rounded_to_four_places(self):
        self.assertEqual(estimate_cost(1, 1, "gpt-3.5-turbo"), 0.0)
        self.assertEqual(estimate_cost(123, 0, "gpt-4"), 0.0037)
        self.assertEqual(estimate_cost(1500, 500, "gpt-4-turbo"), 0.03)
        self.assertEqual(estimate_cost(0, 0, "gpt-4"), 0.0)


class TokenCountTests(unittest.TestCase):
    def test_tokenizer_model_mapping(self):
        self.assertEqual(tokenizer_model("gpt-4o-mini"), "gpt-4")
        self.assertEqual(tokenizer_model("gpt-3.5-turbo-16k"), "gpt-3.5-turbo")
        self.assertEqual(tokenizer_model("custom"), "gpt-4")

    def test_character_estimate(self):
        self.assertEqual(estimate_tokens(""), 0)
        self.assertEqual(estimate_tokens("abcde"), 2)

    def test_uses_tiktoken_encoding(self):
        encoding = SimpleNamespace(encode=lambda text: list(range(7)))
        with patch("careerpilot.ai.tokens.tiktoken.encoding_for_model", return_value=encoding) as lookup:
            self.assertEqual(count_tokens("hello world", "gpt-4o-mini"), 7)
        lookup.assert_called_once_with("gpt-4")

    def test_falls_back_to_estimate_when_tokenizer_fails(self):
        with patch("careerpilot.ai.tokens.tiktoken.encoding_for_model", side_effect=KeyError("no encoding")):
            self.assertEqual(count_tokens("a" * 10, "gpt-4"), 3)


if __name__ == "__main__":
    unittest.main()
